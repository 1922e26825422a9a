import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from contract.contract_entry import PROXY_CATCH_ALL_PATH, OpenApiContract
from contract.contract_loader import ContractLoader
from core.call_recorder import CallRecorder, ObservedCall
from core.coverage_ledger import CoverageLedger, CoverageRecord, MatchResult
from core.coverage_options import ApiOptions, CoverageOptions, ReportOptions
from report.coverage_section import render_markup, render_table
from router.route_registry import PathMatcher, PathTemplateEntry, compile_path_template

logger = logging.getLogger(__name__)

COVERAGE_JSON_FILE = "coverage.json"
COVERAGE_HTML_FILE = "coverage_output.html"


class CoverageModel:
    """
    Tracks which declared (path, method, status) triples of one or more
    OpenAPI contracts were hit by observed HTTP calls.
    """

    def __init__(self, options: Optional[Union[CoverageOptions, Dict[str, Any]]] = None):
        if isinstance(options, dict):
            options = CoverageOptions(**options)
        self.options = options or CoverageOptions()

        self.matcher = PathMatcher(debug=self.options.debug)
        self.ledger = CoverageLedger()
        self.recorder = CallRecorder(self.matcher, self.ledger, debug=self.options.debug)

    @property
    def output_path(self) -> Path:
        return Path(self.options.output_path)

    def register_contract(self, document: Union[OpenApiContract, Dict[str, Any]],
                          options: Optional[ApiOptions] = None) -> None:
        """
        Register a parsed contract. Paths are matched with ``options.path_prefix``
        prepended but reported as declared.

        :raises ContractLoadError: if the document is unusable; nothing is registered then
        """
        contract = ContractLoader.load_from_dict(document)
        path_prefix = (options or ApiOptions()).path_prefix

        # Compile everything before touching shared state
        entries = [
            PathTemplateEntry(pattern=compile_path_template(path_prefix + path), path=path)
            for path in contract.paths
            if path != PROXY_CATCH_ALL_PATH
        ]

        self.matcher.register_many(entries)
        operations = [op for op in contract.declared_operations() if op.path != PROXY_CATCH_ALL_PATH]
        for operation in operations:
            self.ledger.declare(operation)

        logger.info(f"Registered {len(entries)} paths and {len(operations)} operations"
                    + (f" with prefix {path_prefix}" if path_prefix else ""))

    def register_contract_from_file(self, contract_path: Union[str, Path],
                                    options: Optional[ApiOptions] = None) -> None:
        self.register_contract(ContractLoader.load_from_file(contract_path), options)

    def handle_response(self, call: ObservedCall) -> MatchResult:
        result = self.recorder.record(call)
        self.write_coverage_to_file()
        return result

    def handle_failed_response(self, error: BaseException) -> Optional[MatchResult]:
        result = self.recorder.record_failure(error)
        if result is not None:
            self.write_coverage_to_file()
        return result

    def build_records(self) -> List[CoverageRecord]:
        return self.ledger.snapshot()

    def coverage_table(self, options: Optional[ReportOptions] = None) -> str:
        return render_table(self.build_records(), options or ReportOptions())

    def print_coverage(self, options: Optional[ReportOptions] = None) -> None:
        print(self.coverage_table(options))

    def write_coverage_to_file(self) -> None:
        """Rewrite the report files in full; does nothing unless output_format is 'html'."""
        if self.options.output_format != "html":
            return

        os.makedirs(self.output_path, exist_ok=True)
        with open(self.output_path / COVERAGE_JSON_FILE, "w", encoding="utf-8") as f:
            json.dump(self.ledger.to_dict(), f, indent=2)
        with open(self.output_path / COVERAGE_HTML_FILE, "w", encoding="utf-8") as f:
            f.write(render_markup(self.build_records()))
