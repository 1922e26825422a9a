from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

# Path template that proxies every request; it names no concrete operation.
PROXY_CATCH_ALL_PATH = "/{proxy+}"


class HttpMethod(str, Enum):
    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"

    @classmethod
    def is_method(cls, name: Any) -> bool:
        return isinstance(name, str) and name.lower() in {method.value for method in cls}


@dataclass(frozen=True)
class DeclaredOperation:
    """A (path, method) pair from a contract with its expected response statuses."""
    path: str
    method: str
    statuses: Tuple[str, ...]


class OperationEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    responses: Dict[str, Any]

    @field_validator("responses", mode="before")
    @classmethod
    def stringify_status_codes(cls, v):
        # YAML reads an unquoted `200:` key as an int
        if not isinstance(v, dict):
            raise ValueError("responses must be a mapping of status code to response")
        return {str(status): response for status, response in v.items()}


class OpenApiContract(BaseModel):
    """The subset of an OpenAPI document needed to track coverage."""

    model_config = ConfigDict(extra="ignore")

    paths: Dict[str, Dict[str, OperationEntry]]

    @field_validator("paths", mode="before")
    @classmethod
    def keep_operations_only(cls, v):
        if not isinstance(v, dict):
            raise ValueError("paths must be a mapping of path to path item")

        paths = {}
        for path, path_item in v.items():
            if not isinstance(path, str):
                raise ValueError(f"Path keys must be strings, got {path!r}")
            if not isinstance(path_item, dict):
                raise ValueError(f"Path item for {path} must be a mapping")
            # parameters, summary, servers etc. live next to the operations
            paths[path] = {
                method.lower(): operation
                for method, operation in path_item.items()
                if HttpMethod.is_method(method)
            }
        return paths

    def declared_operations(self) -> List[DeclaredOperation]:
        return [
            DeclaredOperation(path=path, method=method, statuses=tuple(operation.responses))
            for path, operations in self.paths.items()
            for method, operation in operations.items()
        ]
