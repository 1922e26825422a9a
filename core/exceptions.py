from typing import Any, Optional


class CoverageError(Exception):
    """Base class for all coverage tracking errors."""
    pass


class ContractLoadError(CoverageError):
    """Raised when a contract is missing, unreadable or structurally unusable."""

    def __init__(self, message: str, file_path: Optional[str] = None, details: Optional[Any] = None):
        self.message = message
        self.file_path = file_path
        self.details = details
        full_message = f"{message}"
        if file_path:
            full_message += f" [File: {file_path}]"
        if details:
            full_message += f"\nDetails:\n{details}"
        super().__init__(full_message)


class NormalizationError(CoverageError):
    """Raised when no usable URL can be derived from an observed call."""

    def __init__(self, message: str, url: Optional[str] = None, base_url: Optional[str] = None):
        self.url = url
        self.base_url = base_url
        super().__init__(f"{message} (url={url!r}, base_url={base_url!r})")
