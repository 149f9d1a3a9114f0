"""Base formatter interface for Sanctifier output rendering."""

from abc import ABC, abstractmethod
from typing import List

from ..models import AnalysisContext, AnalysisReport


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, reports: List[AnalysisReport], context: AnalysisContext) -> None:
        """Render reports to stdout."""

    @abstractmethod
    def format(self, reports: List[AnalysisReport], context: AnalysisContext) -> str:
        """Return formatted string representation of reports."""
