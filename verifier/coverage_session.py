import logging
import weakref
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urlsplit

import requests

from core.call_recorder import ObservedCall
from core.coverage_ledger import CoverageRecord
from core.coverage_model import CoverageModel
from core.coverage_options import ApiOptions, CoverageOptions, ReportOptions

logger = logging.getLogger(__name__)


class CoverageSession(requests.Session):
    """
    A requests session with an optional base URL and failure hooks.

    Relative URLs are appended to ``base_url``. Exceptions raised while
    sending are passed to every failure hook and then re-raised.
    """

    def __init__(self, base_url: Optional[str] = None):
        super().__init__()
        self.base_url = base_url
        self.failure_hooks: List[Callable[[requests.RequestException], Any]] = []

    def request(self, method, url, *args, **kwargs):
        if self.base_url and isinstance(url, str) and not urlsplit(url).scheme:
            url = f"{self.base_url}{url}"
        try:
            return super().request(method, url, *args, **kwargs)
        except requests.RequestException as error:
            for hook in self.failure_hooks:
                hook(error)
            raise


class OpenApiCoverage:
    """
    Observes the responses of a requests session and counts them against
    registered OpenAPI contracts.

    Example:
        coverage = OpenApiCoverage.use(CoverageSession("https://api.example.com"))
        coverage.with_specification_from_file("openapi.yaml")
        coverage.session.get("/v1/items")
        coverage.print_coverage(ReportOptions(show_zero_counts=True))
    """

    def __init__(self, session: requests.Session,
                 options: Optional[Union[CoverageOptions, Dict[str, Any]]] = None):
        self.session = session
        self.model = CoverageModel(options)
        # responses already counted by the response hook
        self._observed = weakref.WeakSet()
        self._register_hooks()

    @classmethod
    def use(cls, session: Optional[requests.Session] = None,
            options: Optional[Union[CoverageOptions, Dict[str, Any]]] = None) -> "OpenApiCoverage":
        return cls(session if session is not None else CoverageSession(), options)

    def with_specification_from_file(self, contract_path: Union[str, Path],
                                     options: Optional[ApiOptions] = None) -> "OpenApiCoverage":
        self.model.register_contract_from_file(contract_path, options)
        return self

    def with_specification(self, document: Dict[str, Any],
                           options: Optional[ApiOptions] = None) -> "OpenApiCoverage":
        self.model.register_contract(document, options)
        return self

    def records(self) -> List[CoverageRecord]:
        return self.model.build_records()

    def print_coverage(self, options: Optional[ReportOptions] = None) -> None:
        self.model.print_coverage(options)

    def _register_hooks(self) -> None:
        self.session.hooks["response"].append(self._on_response)
        if isinstance(self.session, CoverageSession):
            self.session.failure_hooks.append(self._on_failure)
        else:
            logger.debug("Plain requests session: failures without a response will not be observed")

    def _on_response(self, response: requests.Response, *args, **kwargs) -> requests.Response:
        self._observed.add(response)
        self._guard_write(lambda: self.model.handle_response(ObservedCall.from_response(response)))
        return response

    def _on_failure(self, error: requests.RequestException) -> None:
        response = getattr(error, "response", None)
        if response is not None and response in self._observed:
            return
        self._guard_write(lambda: self.model.handle_failed_response(error))

    @staticmethod
    def _guard_write(handler: Callable[[], Any]) -> None:
        # The ledger keeps counting when the report files cannot be written
        try:
            handler()
        except OSError:
            logger.exception("Failed to write coverage report files")
