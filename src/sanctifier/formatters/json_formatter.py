"""JSON formatter for Sanctifier."""

import json
from typing import List

from ..models import AnalysisContext, AnalysisReport
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render reports as a single JSON document."""

    def render(self, reports: List[AnalysisReport], context: AnalysisContext) -> None:
        print(self.format(reports, context))

    def format(self, reports: List[AnalysisReport], context: AnalysisContext) -> str:
        data = {
            "target": context.target,
            "files_scanned": context.files_scanned,
            "ledger_limit": context.ledger_limit,
            "issue_count": sum(r.issue_count for r in reports),
            "files": [r.to_dict() for r in reports],
        }
        return json.dumps(data, indent=2)
