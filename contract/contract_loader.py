import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from contract.contract_entry import OpenApiContract
from core.exceptions import ContractLoadError

logger = logging.getLogger(__name__)


class ContractLoader:
    """Loads and validates OpenAPI contracts from YAML files or dictionaries."""

    @staticmethod
    def load_from_file(file_path: Union[str, Path]) -> OpenApiContract:
        file_path = Path(file_path)
        if not file_path.exists():
            raise ContractLoadError("Contract file not found", str(file_path))

        try:
            with file_path.open("r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ContractLoadError("Failed to parse YAML", str(file_path), e)
        except UnicodeDecodeError as e:
            raise ContractLoadError("Contract file is not valid UTF-8", str(file_path), e)
        except OSError as e:
            raise ContractLoadError("Contract file is not readable", str(file_path), e)

        contract = ContractLoader.load_from_dict(document, file_path)
        logger.info(f"Loaded {len(contract.paths)} paths from {file_path}")
        return contract

    @staticmethod
    def load_from_dict(data: Dict[str, Any], source: Optional[Union[str, Path]] = None) -> OpenApiContract:
        source_str = str(source) if source else "dictionary"

        if isinstance(data, OpenApiContract):
            return data
        if not isinstance(data, dict):
            raise ContractLoadError("Contract data must be a mapping", source_str)
        if "paths" not in data:
            raise ContractLoadError("Contract has no 'paths' section", source_str)

        try:
            return OpenApiContract.model_validate(data)
        except ValidationError as e:
            raise ContractLoadError(
                f"Contract validation failed with {e.error_count()} error(s)",
                source_str,
                str(e),
            )
