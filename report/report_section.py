from abc import ABC, abstractmethod
from typing import Any, Dict


class ReportSection(ABC):
    """
    Base class for report sections with one renderer per output format.
    """

    def __init__(self, title: str, description: str, data: Any):
        self.title = title
        self.description = description
        self.data = data

    @abstractmethod
    def to_terminal(self) -> str:
        """Render for a console, ANSI colors allowed."""
        raise NotImplementedError("Terminal renderer not implemented")

    @abstractmethod
    def to_json(self) -> Dict:
        raise NotImplementedError("JSON renderer not implemented")

    @abstractmethod
    def to_html(self) -> str:
        raise NotImplementedError("HTML renderer not implemented")

    @abstractmethod
    def to_markdown(self) -> str:
        raise NotImplementedError("Markdown renderer not implemented")
