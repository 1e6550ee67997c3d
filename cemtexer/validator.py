"""Structural validation for ABA 120-character records."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import logging

from .exceptions import StructuralError
from .records import BatchFile
from .utils import (
    MIN_LINES,
    RECORD_LENGTH,
    ErrorKind,
    IssueSeverity,
    RecordCounters,
    SectionReport,
    ValidationIssue,
    compute_status,
)

logger = logging.getLogger(__name__)


@dataclass
class StructureResult:
    """Outcome of the structural validation stage."""

    section: SectionReport
    record_counters: RecordCounters
    length_issues: list[int]


class Validator:
    """Check that a file can be split into header, transactions and trailer.

    Record-type markers are not inspected here; a wrong marker is a field
    error reported by the record checks, not a structural one.
    """

    def validate(self, lines: list[str]) -> StructureResult:
        logger.info("Validating ABA structure (%d lines)", len(lines))

        issues: List[ValidationIssue] = []
        length_issues: list[int] = []

        for index, line in enumerate(lines, start=1):
            if len(line) != RECORD_LENGTH:
                length_issues.append(index)
                issues.append(
                    ValidationIssue(
                        severity=IssueSeverity.CRITICAL,
                        message=(
                            f"At line {index} the record is {len(line)} characters long, "
                            f"every line must be exactly {RECORD_LENGTH} characters"
                        ),
                        line_number=index,
                        code=ErrorKind.STRUCTURE_LINE_LENGTH,
                    )
                )

        if len(lines) < MIN_LINES:
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.CRITICAL,
                    message=(
                        f"The file has {len(lines)} line(s), it needs at least a header, "
                        "one transaction and a trailer"
                    ),
                    code=ErrorKind.STRUCTURE_TOO_FEW_LINES,
                )
            )

        details = max(len(lines) - 2, 0)
        counters = RecordCounters(
            total=len(lines),
            headers=1 if lines else 0,
            details=details,
            trailers=1 if len(lines) > 1 else 0,
        )

        section = SectionReport(status=compute_status(issues), issues=issues)
        return StructureResult(section=section, record_counters=counters, length_issues=length_issues)

    def split(self, lines: list[str], result: Optional[StructureResult] = None) -> BatchFile:
        """Return the file aggregate, or raise ``StructuralError`` when the lines cannot form one."""

        if result is None:
            result = self.validate(lines)
        if result.section.has_errors:
            first = result.section.issues[0].message
            raise StructuralError(f"Structurally invalid ABA file: {first}", result.section.issues)
        return BatchFile(header=lines[0], transactions=tuple(lines[1:-1]), trailer=lines[-1])


__all__ = ["StructureResult", "Validator"]
