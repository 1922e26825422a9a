import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from contract.contract_entry import DeclaredOperation
from core.exceptions import CoverageError

logger = logging.getLogger(__name__)


class MatchResult(str, Enum):
    NO_PATH_MATCH = "no_path_match"
    OPERATION_UNDECLARED = "operation_undeclared"
    RECORDED = "recorded"


@dataclass(frozen=True)
class CoverageRecord:
    path: str
    method: str
    status: str
    count: int

    @property
    def sort_key(self):
        return (self.path, self.method, self.status)


class CoverageLedger:
    """
    Hit counters keyed by declared path, method and expected status.

    Counters are created at zero when an operation is declared and only ever
    incremented. Observed calls outside the declared surface are ignored: the
    ledger measures contract coverage, not traffic.
    """

    def __init__(self):
        self._coverage: Dict[str, Dict[str, Dict[str, int]]] = {}

    def declare(self, operation: DeclaredOperation) -> None:
        responses = self._coverage.setdefault(operation.path, {}).setdefault(operation.method, {})
        for status in operation.statuses:
            responses.setdefault(status, 0)

    def is_declared(self, path: str, method: str) -> bool:
        return method in self._coverage.get(path, {})

    def record_hit(self, path: str, method: str, status: str) -> bool:
        responses = self._coverage.get(path, {}).get(method)
        if responses is None or status not in responses:
            logger.debug(f"ignoring undeclared operation {method} {path} -> {status}")
            return False
        responses[status] += 1
        return True

    def count(self, path: str, method: str, status: str) -> int:
        return self._coverage[path][method][status]

    def snapshot(self) -> List[CoverageRecord]:
        records = [
            CoverageRecord(path=path, method=method, status=status, count=count)
            for path, methods in self._coverage.items()
            for method, responses in methods.items()
            for status, count in responses.items()
        ]
        return sorted(records, key=lambda record: record.sort_key)

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, Dict[str, int]]]]:
        return {
            path: {method: {"responses": dict(responses)} for method, responses in methods.items()}
            for path, methods in self._coverage.items()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoverageLedger":
        """Rebuild a ledger from the structure produced by ``to_dict``."""
        if not isinstance(data, dict):
            raise CoverageError("Coverage data must be a mapping of path to methods")

        ledger = cls()
        for path, methods in data.items():
            if not isinstance(methods, dict):
                raise CoverageError(f"Coverage entry for {path} must be a mapping of method to responses")
            for method, entry in methods.items():
                responses = entry.get("responses") if isinstance(entry, dict) else None
                if not isinstance(responses, dict):
                    raise CoverageError(f"Coverage entry for {method} {path} has no responses mapping")
                counters = ledger._coverage.setdefault(path, {}).setdefault(method, {})
                for status, count in responses.items():
                    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                        raise CoverageError(f"Invalid count {count!r} for {method} {path} -> {status}")
                    counters[str(status)] = count
        return ledger
