"""Whole-file validation: header, every transaction, trailer, reconciliation."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple
import logging

from .exceptions import StructuralError
from .records import BatchFile, HeaderRecord, TrailerRecord, TransactionRecord
from .reference import ReferenceData, load_reference_data
from .rules import RuleContext, check_record, is_digits
from .sanitizer import Sanitizer
from .utils import (
    NO_ERRORS_MARKER,
    ErrorKind,
    IssueSeverity,
    RecordCounters,
    SectionReport,
    Totalizers,
    ValidationIssue,
    ValidationSummary,
    compute_status,
)
from .validator import Validator

logger = logging.getLogger(__name__)

HEADER_LINE = 1


@dataclass
class TransactionOutcome:
    """Issues and amount of one transaction line."""

    line_number: int
    issues: list[ValidationIssue]
    amount: Optional[int]
    is_debit: bool


@dataclass
class AnalysisResult:
    """Outcome of the semantic validation stage."""

    section: SectionReport
    totalizers: Totalizers
    inferred_counters: RecordCounters

    @property
    def error_count(self) -> int:
        return self.section.error_count

    @property
    def report_text(self) -> str:
        return render_report(self.section.issues)


def render_report(issues: Iterable[ValidationIssue]) -> str:
    """Join every error message, one per line, or return the no-errors marker."""

    messages = [issue.message for issue in issues if issue.severity is IssueSeverity.CRITICAL]
    if not messages:
        return NO_ERRORS_MARKER
    return "\n".join(messages)


def _amount_value(raw: str) -> Optional[int]:
    stripped = raw.lstrip(" ")
    return int(stripped) if is_digits(stripped) else None


class Analyzer:
    """Validate header, transaction and trailer records of a split file.

    Transaction records are independent of one another and may be checked on
    ``workers`` threads; results are always reported in line order.
    """

    def __init__(self, reference: Optional[ReferenceData] = None, workers: int = 1) -> None:
        self.reference = reference if reference is not None else load_reference_data()
        self.workers = max(1, workers)

    def analyze(self, batch: BatchFile) -> AnalysisResult:
        logger.info("Analyzing %d transaction record(s)", batch.transaction_count)
        issues: List[ValidationIssue] = []
        context = RuleContext(reference=self.reference)

        header = HeaderRecord.deserialize(batch.header)
        issues.extend(check_record(header, HEADER_LINE, context))

        outcomes = self._check_transactions(batch.transactions, context)
        credit_sum = 0
        debit_sum = 0
        for outcome in outcomes:
            issues.extend(outcome.issues)
            if outcome.amount is None:
                continue
            if outcome.is_debit:
                debit_sum += outcome.amount
            else:
                credit_sum += outcome.amount

        trailer = TrailerRecord.deserialize(batch.trailer)
        trailer_context = RuleContext(reference=self.reference, transaction_count=batch.transaction_count)
        issues.extend(check_record(trailer, batch.trailer_line_number, trailer_context))

        totalizers = Totalizers(
            credit_sum=credit_sum,
            debit_sum=debit_sum,
            trailer_total=int(trailer.net_total) if is_digits(trailer.net_total) else None,
            trailer_credit=int(trailer.credit_total) if is_digits(trailer.credit_total) else None,
            trailer_debit=int(trailer.debit_total) if is_digits(trailer.debit_total) else None,
        )
        issues.extend(self._reconcile_sums(totalizers, batch.trailer_line_number))

        counters = RecordCounters(
            total=batch.line_count,
            headers=1,
            details=batch.transaction_count,
            trailers=1,
        )
        section = SectionReport(status=compute_status(issues), issues=issues)
        logger.info("Analysis finished with %d error(s)", section.error_count)
        return AnalysisResult(section=section, totalizers=totalizers, inferred_counters=counters)

    def _check_transactions(self, lines: Tuple[str, ...], context: RuleContext) -> list[TransactionOutcome]:
        numbered = list(enumerate(lines, start=HEADER_LINE + 1))

        def check(item: Tuple[int, str]) -> TransactionOutcome:
            line_number, line = item
            record = TransactionRecord.deserialize(line)
            found = check_record(record, line_number, context)
            if found:
                logger.debug("Line %d: %d issue(s)", line_number, len(found))
            return TransactionOutcome(
                line_number=line_number,
                issues=found,
                amount=_amount_value(record.amount),
                is_debit=record.is_debit,
            )

        if self.workers == 1 or len(numbered) < 2:
            return [check(item) for item in numbered]
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(check, numbered))

    def _reconcile_sums(self, totalizers: Totalizers, line_number: int) -> List[ValidationIssue]:
        warnings: List[ValidationIssue] = []
        checks = (
            ("credit", totalizers.trailer_credit, totalizers.credit_sum, ErrorKind.TOTALS_CREDIT_SUM),
            ("debit", totalizers.trailer_debit, totalizers.debit_sum, ErrorKind.TOTALS_DEBIT_SUM),
        )
        for label, stated, summed, kind in checks:
            if stated is None or stated == summed:
                continue
            logger.warning("Trailer %s total %d differs from transaction sum %d", label, stated, summed)
            warnings.append(
                ValidationIssue(
                    severity=IssueSeverity.WARNING,
                    message=f"Trailer {label} total {stated} does not match the sum of {label} transactions {summed}",
                    line_number=line_number,
                    record_type=TrailerRecord.KIND,
                    code=kind,
                )
            )
        return warnings


def check_file(
    path: Path,
    reference: Optional[ReferenceData] = None,
    workers: int = 1,
) -> Tuple[ValidationSummary, AnalysisResult]:
    """Read, split and validate an ABA file.

    Raises ``StructuralError`` before any field is checked when the file is
    unreadable or is not a sequence of at least three 120-character lines.
    """

    sanitize_result = Sanitizer().sanitize(Path(path))
    if sanitize_result.section.has_errors:
        first = next(
            issue.message for issue in sanitize_result.section.issues if issue.severity is IssueSeverity.CRITICAL
        )
        raise StructuralError(f"Cannot read ABA file {path}: {first}", sanitize_result.section.issues)

    validator = Validator()
    structure_result = validator.validate(sanitize_result.lines)
    batch = validator.split(sanitize_result.lines, structure_result)

    analysis = Analyzer(reference=reference, workers=workers).analyze(batch)
    summary = ValidationSummary(
        source=Path(path),
        structure=structure_result.section,
        encoding=sanitize_result.section,
        content=analysis.section,
        record_counters=structure_result.record_counters,
        totalizers=analysis.totalizers,
        newline=sanitize_result.newline,
        offending_codepoints=sanitize_result.offending_codepoints,
    )
    return summary, analysis


__all__ = ["AnalysisResult", "Analyzer", "TransactionOutcome", "check_file", "render_report"]
