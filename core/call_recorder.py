import json
import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlsplit

from core.coverage_ledger import CoverageLedger, MatchResult
from core.exceptions import NormalizationError
from router.route_registry import PathMatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObservedCall:
    """
    One observed HTTP exchange.

    ``url`` is the URL as given to the client; when ``base_url`` is set the two
    were concatenated at request time.
    """
    method: str
    url: Optional[str]
    status: int
    base_url: Optional[str] = None

    @classmethod
    def from_response(cls, response: Any, base_url: Optional[str] = None) -> "ObservedCall":
        """Build a call from a ``requests.Response`` (or anything shaped like one)."""
        request = getattr(response, "request", None)
        method = getattr(request, "method", None)
        if not method:
            raise NormalizationError("Response carries no request method", getattr(request, "url", None), base_url)
        return cls(
            method=method,
            url=getattr(request, "url", None) or getattr(response, "url", None),
            status=response.status_code,
            base_url=base_url,
        )


def normalize_path(url: Optional[str], base_url: Optional[str] = None) -> str:
    """
    Return the path component of ``base_url + url``.

    Query string, fragment, scheme and host are discarded. The combined URL
    must be absolute.
    """
    effective_url = f"{base_url}{url or ''}" if base_url else url
    if not effective_url:
        raise NormalizationError("Response without url", url, base_url)

    try:
        parts = urlsplit(effective_url)
    except ValueError as e:
        raise NormalizationError(f"Malformed URL: {e}", url, base_url) from e
    if not parts.scheme or not parts.netloc:
        raise NormalizationError("Cannot derive an absolute URL", url, base_url)
    return parts.path or "/"


class CallRecorder:
    """Turns observed calls into ledger hits."""

    def __init__(self, matcher: PathMatcher, ledger: CoverageLedger, debug: bool = False):
        self.matcher = matcher
        self.ledger = ledger
        self.debug_enabled = debug

    def _debug(self, msg: str, data: Optional[Any] = None) -> None:
        if not self.debug_enabled:
            return
        if isinstance(data, (dict, list)):
            data = json.dumps(data)
        logger.debug(f"{msg}, {data}" if data else msg)

    def record(self, call: ObservedCall) -> MatchResult:
        self._debug("handle response", {"method": call.method, "url": call.url, "base_url": call.base_url})

        try:
            normalized_path = normalize_path(call.url, call.base_url)
        except NormalizationError as e:
            logger.error(f"Unable to normalize observed call: {e}")
            raise

        normalized_method = call.method.lower()
        status = str(call.status)
        matched_path = self.matcher.match(normalized_path)

        self._debug("response matching", {
            "normalized_path": normalized_path,
            "matched_path": matched_path,
            "normalized_method": normalized_method,
            "status": status,
        })

        if matched_path is None:
            return MatchResult.NO_PATH_MATCH
        if not self.ledger.record_hit(matched_path, normalized_method, status):
            return MatchResult.OPERATION_UNDECLARED

        self._debug("matched coverage")
        return MatchResult.RECORDED

    def record_failure(self, error: BaseException) -> Optional[MatchResult]:
        """
        Record a failed call. Errors without a response (connection refused,
        timeouts) have nothing to count and only produce a warning.
        """
        response = getattr(error, "response", None)
        if response is None:
            logger.warning(f"not an HTTP response: {error!r}")
            return None
        return self.record(ObservedCall.from_response(response))
