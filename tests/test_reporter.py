import json
from pathlib import Path

from cemtexer.reporter import Reporter
from cemtexer.utils import (
    ErrorKind,
    IssueSeverity,
    RecordCounters,
    SectionReport,
    Totalizers,
    ValidationIssue,
    ValidationStatus,
    ValidationSummary,
)


def _summary(content_issues: list) -> ValidationSummary:
    empty = SectionReport(status=ValidationStatus.OK, issues=[])
    warning = ValidationIssue(severity=IssueSeverity.WARNING, message="UTF-8 BOM removed automatically")
    return ValidationSummary(
        source=Path("batch.aba"),
        structure=empty,
        encoding=SectionReport(status=ValidationStatus.WARN, issues=[warning]),
        content=SectionReport(
            status=ValidationStatus.ERROR if content_issues else ValidationStatus.OK,
            issues=content_issues,
        ),
        record_counters=RecordCounters(total=3, headers=1, details=1, trailers=1),
        totalizers=Totalizers(credit_sum=100, trailer_total=100, trailer_credit=100, trailer_debit=0),
        newline="LF",
    )


def test_clean_report_is_marker_only(tmp_path: Path) -> None:
    paths = Reporter().render(_summary([]), tmp_path / "report.txt")

    assert paths.txt_path.read_text(encoding="utf-8") == "No errors detected\n"
    assert paths.json_path is None


def test_report_lists_every_error_and_writes_json(tmp_path: Path) -> None:
    issues = [
        ValidationIssue(
            severity=IssueSeverity.CRITICAL,
            message="At line 2 in the transaction record between character position 2 - 8, bad BSB",
            line_number=2,
            code=ErrorKind.TRANSACTION_BSB,
        ),
        ValidationIssue(
            severity=IssueSeverity.CRITICAL,
            message="At line 3 in the trailer record between character position 75 - 80, bad count",
            line_number=3,
            code=ErrorKind.TRAILER_COUNT_MISMATCH,
        ),
    ]

    paths = Reporter().render(_summary(issues), tmp_path / "out" / "report.txt", tmp_path / "out" / "report.json")

    text = paths.txt_path.read_text(encoding="utf-8")
    assert text.splitlines() == [issue.message for issue in issues]

    payload = json.loads(paths.json_path.read_text(encoding="utf-8"))
    assert payload["file"] == "batch.aba"
    assert payload["validation"]["content"] == "ERROR"
    assert payload["validation"]["error_count"] == 2
    assert payload["validation"]["warnings"] == ["UTF-8 BOM removed automatically"]
    assert payload["totals"]["credit_sum"] == 100
