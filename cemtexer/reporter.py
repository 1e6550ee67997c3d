"""Write ABA validation reports."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional
import datetime as _dt

from .analyzer import render_report
from .exceptions import StructuralError
from .utils import (
    IssueSeverity,
    ValidationSummary,
    write_json,
    write_text,
)


@dataclass
class ReportPaths:
    """Location for generated artifacts."""

    txt_path: Path
    json_path: Optional[Path] = None


class Reporter:
    """Materialize validation results into the report artifact."""

    def render(self, summary: ValidationSummary, txt_path: Path, json_path: Optional[Path] = None) -> ReportPaths:
        txt_path = Path(txt_path).expanduser()
        try:
            write_text(txt_path, self.build_text(summary))
            if json_path is not None:
                json_path = Path(json_path).expanduser()
                write_json(json_path, self.build_json(summary))
        except OSError as exc:
            raise StructuralError(f"Unable to write report: {exc}") from exc
        return ReportPaths(txt_path=txt_path, json_path=json_path)

    def build_text(self, summary: ValidationSummary) -> str:
        issues = [issue for section in summary.sections for issue in section.issues]
        return render_report(issues) + "\n"

    def build_json(self, summary: ValidationSummary) -> Dict[str, object]:
        totals = summary.totalizers
        return {
            "file": summary.source.name,
            "source": str(summary.source),
            "generated_at": _dt.datetime.now().isoformat(timespec="seconds"),
            "validation": {
                "structure": summary.structure.status.value,
                "encoding": summary.encoding.status.value,
                "content": summary.content.status.value,
                "error_count": summary.error_count,
                "errors": self._collect_messages(summary, IssueSeverity.CRITICAL),
                "warnings": self._collect_messages(summary, IssueSeverity.WARNING),
                "total_records": summary.record_counters.total,
                "transactions": summary.record_counters.details,
                "newline": summary.newline,
                "invalid_codepoints": summary.offending_codepoints,
            },
            "totals": {
                "credit_sum": totals.credit_sum,
                "debit_sum": totals.debit_sum,
                "trailer_total": totals.trailer_total,
                "trailer_credit": totals.trailer_credit,
                "trailer_debit": totals.trailer_debit,
            },
        }

    def _collect_messages(self, summary: ValidationSummary, severity: IssueSeverity) -> List[str]:
        messages: List[str] = []
        for section in summary.sections:
            for issue in section.issues:
                if issue.severity is severity:
                    messages.append(issue.message)
        return messages


__all__ = ["Reporter", "ReportPaths"]
