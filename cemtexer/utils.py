"""Shared types and helpers for cemtexer."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional
import json
import logging

RECORD_LENGTH = 120
MIN_LINES = 3
HEADER_CODE = "0"
DETAIL_CODE = "1"
TRAILER_CODE = "7"
NO_ERRORS_MARKER = "No errors detected"


class IssueSeverity(str, Enum):
    """Enumeration of validation severities."""

    WARNING = "warning"
    CRITICAL = "critical"


class ValidationStatus(str, Enum):
    """High-level status for validation sections."""

    OK = "OK"
    WARN = "WARN"
    ERROR = "ERROR"


class ErrorKind(str, Enum):
    """One failure family per field per record kind."""

    HEADER_RECORD_TYPE = "header.record_type"
    HEADER_BLANK_ONE = "header.blank_1"
    HEADER_REEL_SEQUENCE = "header.reel_sequence"
    HEADER_BANK_CODE = "header.bank_code"
    HEADER_BLANK_TWO = "header.blank_2"
    HEADER_ORIGINATOR_NAME = "header.originator_name"
    HEADER_ORIGINATOR_ID = "header.originator_id"
    HEADER_DESCRIPTION = "header.file_description"
    HEADER_SETTLEMENT_DATE = "header.settlement_date"
    HEADER_BLANK_THREE = "header.blank_3"

    TRANSACTION_RECORD_TYPE = "transaction.record_type"
    TRANSACTION_BSB = "transaction.bsb"
    TRANSACTION_ACCOUNT = "transaction.account_number"
    TRANSACTION_INDICATOR = "transaction.indicator"
    TRANSACTION_CODE = "transaction.transaction_code"
    TRANSACTION_AMOUNT = "transaction.amount"
    TRANSACTION_PAYEE_NAME = "transaction.payee_name"
    TRANSACTION_REFERENCE = "transaction.reference"
    TRANSACTION_TRACE_BSB = "transaction.trace_bsb"
    TRANSACTION_TRACE_ACCOUNT = "transaction.trace_account_number"
    TRANSACTION_REMITTER = "transaction.remitter_name"
    TRANSACTION_WITHHOLDING_TAX = "transaction.withholding_tax"

    TRAILER_RECORD_TYPE = "trailer.record_type"
    TRAILER_BSB_FILLER = "trailer.bsb_filler"
    TRAILER_BLANK_ONE = "trailer.blank_1"
    TRAILER_TOTAL_NON_NUMERIC = "trailer.total.non_numeric"
    TRAILER_CREDIT_DEBIT_MALFORMED = "trailer.total.malformed_credit_debit"
    TRAILER_TOTAL_MISMATCH = "trailer.total.mismatch"
    TRAILER_CREDIT_NON_NUMERIC = "trailer.credit.non_numeric"
    TRAILER_DEBIT_NON_NUMERIC = "trailer.debit.non_numeric"
    TRAILER_BLANK_TWO = "trailer.blank_2"
    TRAILER_COUNT_NON_NUMERIC = "trailer.record_count.non_numeric"
    TRAILER_COUNT_MISMATCH = "trailer.record_count.mismatch"
    TRAILER_BLANK_THREE = "trailer.blank_3"

    STRUCTURE_LINE_LENGTH = "structure.line_length"
    STRUCTURE_TOO_FEW_LINES = "structure.too_few_lines"
    TOTALS_CREDIT_SUM = "totals.credit_sum"
    TOTALS_DEBIT_SUM = "totals.debit_sum"


@dataclass(frozen=True)
class ValidationIssue:
    """Container for individual validation issues.

    ``start`` and ``end`` are 1-based inclusive character positions.
    """

    severity: IssueSeverity
    message: str
    line_number: Optional[int] = None
    record_type: Optional[str] = None
    code: Optional[ErrorKind] = None
    value: Optional[str] = None
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass
class SectionReport:
    """Summary for a validation section."""

    status: ValidationStatus
    issues: list[ValidationIssue]

    @property
    def has_errors(self) -> bool:
        return any(issue.severity is IssueSeverity.CRITICAL for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is IssueSeverity.CRITICAL)


@dataclass
class RecordCounters:
    """Track record counts for the processed payload."""

    total: int
    headers: int
    details: int
    trailers: int


@dataclass
class Totalizers:
    """Amounts (in cents) summed from transactions and read from the trailer."""

    credit_sum: int = 0
    debit_sum: int = 0
    trailer_total: Optional[int] = None
    trailer_credit: Optional[int] = None
    trailer_debit: Optional[int] = None


@dataclass
class ValidationSummary:
    """Aggregate validation outcome for reporting."""

    source: Path
    structure: SectionReport
    encoding: SectionReport
    content: SectionReport
    record_counters: RecordCounters
    totalizers: Totalizers
    newline: str
    offending_codepoints: list[int] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(section.error_count for section in self.sections)

    @property
    def sections(self) -> tuple[SectionReport, SectionReport, SectionReport]:
        return (self.structure, self.encoding, self.content)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logger when the CLI runs."""

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def write_text(path: Path, content: str) -> None:
    """Persist text content to disk ensuring parent directories exist."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_json(path: Path, payload: dict) -> None:
    """Persist JSON content to disk with UTF-8 encoding."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)


def detect_newline(data: bytes) -> str:
    """Detect newline type used in the byte buffer."""

    if b"\r\n" in data:
        return "CRLF"
    if b"\n" in data:
        return "LF"
    return "NONE"


def strip_bom(data: bytes) -> bytes:
    """Remove UTF-8 BOM when present."""

    bom = b"\xef\xbb\xbf"
    if data.startswith(bom):
        return data[len(bom) :]
    return data


def ensure_ascii(text: str) -> tuple[str, list[int]]:
    """Convert text to ASCII, tracking offending code points."""

    offending: list[int] = []
    result_chars: list[str] = []
    for char in text:
        if ord(char) > 127:
            offending.append(ord(char))
            result_chars.append("?")
        else:
            result_chars.append(char)
    return "".join(result_chars), offending


def compute_status(issues: list[ValidationIssue]) -> ValidationStatus:
    """Compute section status based on collected issues."""

    if any(issue.severity is IssueSeverity.CRITICAL for issue in issues):
        return ValidationStatus.ERROR
    if any(issue.severity is IssueSeverity.WARNING for issue in issues):
        return ValidationStatus.WARN
    return ValidationStatus.OK


__all__ = [
    "DETAIL_CODE",
    "ErrorKind",
    "HEADER_CODE",
    "IssueSeverity",
    "MIN_LINES",
    "NO_ERRORS_MARKER",
    "RECORD_LENGTH",
    "RecordCounters",
    "SectionReport",
    "TRAILER_CODE",
    "Totalizers",
    "ValidationIssue",
    "ValidationStatus",
    "ValidationSummary",
    "compute_status",
    "configure_logging",
    "detect_newline",
    "ensure_ascii",
    "strip_bom",
    "write_json",
    "write_text",
]
