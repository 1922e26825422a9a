import re
import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"{[^{}]+}")

# One path segment: no separator, no whitespace
SEGMENT_WILDCARD = r"[^/\s]+"


def compile_path_template(template: str) -> re.Pattern:
    """
    Compile an OpenAPI path template into a full-match pattern.

    Every ``{name}`` placeholder matches exactly one non-empty path segment;
    everything else is matched literally.
    """
    literal_parts = _PLACEHOLDER.split(template)
    return re.compile(SEGMENT_WILDCARD.join(re.escape(part) for part in literal_parts))


@dataclass(frozen=True)
class PathTemplateEntry:
    pattern: re.Pattern
    path: str

    def matches(self, url_path: str) -> bool:
        return self.pattern.fullmatch(url_path) is not None


class PathMatcher:
    """
    Resolves observed request paths to declared path templates.

    Entries are tried in registration order and the first match wins. No
    specificity ranking is applied: if ``/users/{id}`` is registered before
    ``/users/me``, a call to ``/users/me`` resolves to ``/users/{id}``.
    """

    def __init__(self, debug: bool = False):
        self._entries: List[PathTemplateEntry] = []
        self.debug_enabled = debug

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[PathTemplateEntry]:
        return list(self._entries)

    def register(self, template: str, declared_path: Optional[str] = None) -> PathTemplateEntry:
        """
        Append a matcher for ``template``; ``declared_path`` is what a match
        reports and defaults to the template itself.
        """
        entry = PathTemplateEntry(pattern=compile_path_template(template), path=declared_path or template)
        self._entries.append(entry)
        if self.debug_enabled:
            logger.debug(f"Registered path template {template} -> {entry.pattern.pattern}")
        return entry

    def register_many(self, entries: List[PathTemplateEntry]) -> None:
        self._entries.extend(entries)

    def match(self, url_path: str) -> Optional[str]:
        for entry in self._entries:
            if self.debug_enabled:
                logger.debug(f"matching {url_path} against {entry.pattern.pattern}")
            if entry.matches(url_path):
                if self.debug_enabled:
                    logger.debug(f"matched {entry.path}")
                return entry.path
        return None
