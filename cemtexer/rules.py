"""Field rules for ABA records and the per-record checker.

Every rule is a callable ``rule(value, context) -> list[RuleFailure]``. Rules
never raise for bad input: a malformed value is reported, not thrown. The
record checker walks a record's layout, runs every rule (it never stops at
the first failure) and turns failures into ``ValidationIssue`` values that
cite the record kind, line number and character range.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional
import datetime as _dt
import re

from .fields import iter_positions
from .reference import ReferenceData
from .utils import ErrorKind, IssueSeverity, ValidationIssue

DIGITS = frozenset("0123456789")
BSB_PATTERN = re.compile(r"^[0-9]{3}-[0-9]{3}$")
# Two-digit years are read as 20YY.
CENTURY = 2000

INDICATORS = ("N", "W", "X", "Y", " ")
DEBIT_CODES = ("13",)
CREDIT_CODES = ("50", "51", "52", "53", "54", "55", "56", "57")
TRANSACTION_CODES = DEBIT_CODES + CREDIT_CODES

AMOUNT_WIDTH = 10


@dataclass(frozen=True)
class RuleContext:
    """What a rule may consult besides the raw value."""

    reference: ReferenceData
    transaction_count: Optional[int] = None


@dataclass(frozen=True)
class RuleFailure:
    """A rule's verdict on part of a field.

    ``offset``/``width`` narrow the cited range inside the field; ``width``
    of ``None`` means the whole field.
    """

    kind: ErrorKind
    detail: str
    offset: int = 0
    width: Optional[int] = None


Rule = Callable[[str, RuleContext], List[RuleFailure]]


def is_digits(value: str) -> bool:
    return bool(value) and all(char in DIGITS for char in value)


def is_printable_ascii(value: str) -> bool:
    """True when every character occupies one byte and no control code is present."""

    return all(" " <= char <= "~" for char in value)


def is_blank(value: str) -> bool:
    return value.strip(" ") == ""


def parse_ddmmyy(value: str) -> Optional[_dt.date]:
    """Return the calendar date for a DDMMYY string, or None when invalid."""

    if len(value) != 6 or not is_digits(value):
        return None
    day, month, year = int(value[0:2]), int(value[2:4]), int(value[4:6])
    try:
        return _dt.date(CENTURY + year, month, day)
    except ValueError:
        return None


def exact(literal: str, kind: ErrorKind) -> Rule:
    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if value == literal:
            return []
        return [RuleFailure(kind, f"it must be {literal} not '{value}'")]

    return rule


def blank(width: int, kind: ErrorKind) -> Rule:
    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if value == " " * width:
            return []
        return [RuleFailure(kind, f"all must be {width} blanks")]

    return rule


def right_justified_numeric(kind: ErrorKind, detail: str) -> Rule:
    """Digits, optionally preceded by blanks, with no trailing blank."""

    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if is_digits(value.lstrip(" ")):
            return []
        return [RuleFailure(kind, detail)]

    return rule


def numeric(kind: ErrorKind, detail: str) -> Rule:
    """Every character is a digit."""

    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if is_digits(value):
            return []
        return [RuleFailure(kind, detail)]

    return rule


def bank_code(kind: ErrorKind) -> Rule:
    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if context.reference.is_bank_code(value):
            return []
        return [RuleFailure(kind, f"it must contain a valid 3 character bank code, but you have '{value}'")]

    return rule


def bsb(kind: ErrorKind) -> Rule:
    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if BSB_PATTERN.match(value) and context.reference.is_bsb(value):
            return []
        return [RuleFailure(kind, f"it must contain a valid BSB number, but you have '{value}'")]

    return rule


def left_justified_text(kind: ErrorKind) -> Rule:
    """Non-blank text that does not start with a blank."""

    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if is_blank(value) or value.startswith(" "):
            return [RuleFailure(kind, "it must be left justified and must not be all blank")]
        return []

    return rule


def reference_text(kind: ErrorKind) -> Rule:
    """Optional text: blank, or left justified and not led by '0' or '-'."""

    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if is_blank(value):
            return []
        if value[0] in (" ", "0", "-"):
            return [
                RuleFailure(kind, "the lodgement reference must be left justified and must not start with 0 or -")
            ]
        return []

    return rule


def one_of(allowed: Iterable[str], kind: ErrorKind, label: str) -> Rule:
    allowed = tuple(allowed)
    shown = ", ".join("blank" if token.strip() == "" else token for token in allowed)

    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if value in allowed:
            return []
        return [RuleFailure(kind, f"the {label} must be one of {shown}, not '{value}'")]

    return rule


def ddmmyy(kind: ErrorKind) -> Rule:
    def rule(value: str, context: RuleContext) -> List[RuleFailure]:
        if parse_ddmmyy(value) is not None:
            return []
        return [RuleFailure(kind, f"the date must be a valid date in DDMMYY format, not '{value}'")]

    return rule


def total_triplet(value: str, context: RuleContext) -> List[RuleFailure]:
    """Check the 30-character net/credit/debit block of the trailer."""

    total = value[0:AMOUNT_WIDTH]
    credit = value[AMOUNT_WIDTH : 2 * AMOUNT_WIDTH]
    debit = value[2 * AMOUNT_WIDTH : 3 * AMOUNT_WIDTH]

    failures: List[RuleFailure] = []
    if not is_digits(total):
        failures.append(RuleFailure(ErrorKind.TRAILER_TOTAL_NON_NUMERIC, "all must be numerics", 0, AMOUNT_WIDTH))
    elif not (is_digits(credit) and is_digits(debit)):
        failures.append(
            RuleFailure(
                ErrorKind.TRAILER_CREDIT_DEBIT_MALFORMED,
                "the credit/debit fields failed validation, see next error(s)",
                0,
                AMOUNT_WIDTH,
            )
        )
    elif int(credit) - int(debit) != int(total):
        failures.append(
            RuleFailure(
                ErrorKind.TRAILER_TOTAL_MISMATCH,
                f"total {int(total)} is not equal to credit {int(credit)} - debit {int(debit)}",
                0,
                AMOUNT_WIDTH,
            )
        )

    if not is_digits(credit):
        failures.append(
            RuleFailure(ErrorKind.TRAILER_CREDIT_NON_NUMERIC, "all must be numerics", AMOUNT_WIDTH, AMOUNT_WIDTH)
        )
    if not is_digits(debit):
        failures.append(
            RuleFailure(ErrorKind.TRAILER_DEBIT_NON_NUMERIC, "all must be numerics", 2 * AMOUNT_WIDTH, AMOUNT_WIDTH)
        )
    return failures


def record_count(value: str, context: RuleContext) -> List[RuleFailure]:
    if not is_digits(value):
        return [RuleFailure(ErrorKind.TRAILER_COUNT_NON_NUMERIC, "all must be numerics")]
    expected = context.transaction_count
    if expected is not None and int(value) != expected:
        return [
            RuleFailure(
                ErrorKind.TRAILER_COUNT_MISMATCH,
                f"the record count {int(value)} is not equal to the transaction line count {expected}",
            )
        ]
    return []


def describe_location(kind: str, line_number: int, start: int, end: int) -> str:
    where = f"At line {line_number} in the {kind} record"
    if start == end:
        return f"{where} at character position {start}"
    return f"{where} between character position {start} - {end}"


def check_record(record, line_number: int, context: RuleContext) -> list[ValidationIssue]:
    """Run every field rule of ``record`` and collect all failures in layout order."""

    issues: list[ValidationIssue] = []
    for spec, field_start, field_end in iter_positions(record.LAYOUT):
        if spec.rule is None:
            continue
        value = getattr(record, spec.name)
        for failure in spec.rule(value, context):
            start = field_start + failure.offset
            width = failure.width if failure.width is not None else field_end - field_start + 1
            end = start + width - 1
            message = f"{describe_location(record.KIND, line_number, start, end)}, {failure.detail}"
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.CRITICAL,
                    message=message,
                    line_number=line_number,
                    record_type=record.KIND,
                    code=failure.kind,
                    value=value[failure.offset : failure.offset + width],
                    start=start,
                    end=end,
                )
            )
    return issues


__all__ = [
    "CENTURY",
    "CREDIT_CODES",
    "DEBIT_CODES",
    "INDICATORS",
    "RuleContext",
    "RuleFailure",
    "TRANSACTION_CODES",
    "bank_code",
    "blank",
    "bsb",
    "check_record",
    "ddmmyy",
    "exact",
    "is_blank",
    "is_digits",
    "is_printable_ascii",
    "left_justified_text",
    "numeric",
    "one_of",
    "parse_ddmmyy",
    "record_count",
    "reference_text",
    "right_justified_numeric",
    "total_triplet",
]
