"""Payment rows read from CSV, one per payee."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence
import csv
import logging
import re

from .exceptions import RowSourceError
from .reference import ReferenceData
from .rules import BSB_PATTERN, CREDIT_CODES, is_digits, is_printable_ascii

logger = logging.getLogger(__name__)

COLUMNS = (
    "bsb",
    "account_number",
    "payee_name",
    "amount",
    "reference",
    "withholding_tax",
    "transaction_code",
)
REQUIRED_COLUMNS = 4

DOLLARS_AND_CENTS = re.compile(r"^[0-9]{1,8}\.[0-9]{2}$")


@dataclass(frozen=True)
class PaymentRow:
    """One CSV row; optional cells are empty strings when absent."""

    row_number: int
    bsb: str
    account_number: str
    payee_name: str
    amount: str
    reference: str = ""
    withholding_tax: str = ""
    transaction_code: str = ""

    @property
    def amount_cents(self) -> str:
        return normalise_amount(self.amount)

    @property
    def withholding_tax_cents(self) -> str:
        return normalise_amount(self.withholding_tax)


def normalise_amount(value: str) -> str:
    """Turn ``"$123.45"`` into ``"12345"``.

    Values without a dot are taken to be in cents already and are returned
    as they are (less any leading ``$``).
    """

    value = value.strip()
    if value.startswith("$"):
        value = value[1:]
    if "." in value and DOLLARS_AND_CENTS.match(value):
        return value.replace(".", "")
    return value


def parse_payment_rows(lines: Iterable[str]) -> List[PaymentRow]:
    rows: List[PaymentRow] = []
    for row_number, cells in enumerate(csv.reader(lines), start=1):
        if not cells or all(not cell.strip() for cell in cells):
            continue
        if not REQUIRED_COLUMNS <= len(cells) <= len(COLUMNS):
            raise RowSourceError(
                f"CSV row {row_number} has {len(cells)} column(s), expected "
                f"{REQUIRED_COLUMNS} to {len(COLUMNS)}: " + ", ".join(COLUMNS)
            )
        values = dict(zip(COLUMNS, (cell.strip() for cell in cells)))
        rows.append(PaymentRow(row_number=row_number, **values))
    logger.info("Read %d payment row(s)", len(rows))
    return rows


def read_payment_rows(path: Path) -> List[PaymentRow]:
    """Read payment rows from a header-less CSV file."""

    path = Path(path).expanduser()
    logger.info("Reading payment rows from %s", path)
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return parse_payment_rows(handle)
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise RowSourceError(f"Unable to read payment rows from {path}: {exc}") from exc


def _check_amount(label: str, raw: str, cents: str, max_digits: int, messages: List[str]) -> None:
    if "." in raw and "." in cents:
        messages.append(f"{label} '{raw}' must be dollars and cents with exactly two decimals")
    elif not (is_digits(cents) and len(cents) <= max_digits):
        messages.append(f"{label} '{raw}' must be at most {max_digits} digits")


def validate_row(
    row: PaymentRow,
    reference: ReferenceData,
    allowed_codes: Sequence[str] = CREDIT_CODES,
) -> List[str]:
    """Return one message per broken rule for ``row``."""

    messages: List[str] = []
    if not (BSB_PATTERN.match(row.bsb) and reference.is_bsb(row.bsb)):
        messages.append(f"BSB '{row.bsb}' must be a known BSB in XXX-XXX format")
    if not (len(row.account_number) <= 9 and is_digits(row.account_number.lstrip(" "))):
        messages.append(f"account number '{row.account_number}' must be 1 to 9 digits")
    if not 1 <= len(row.payee_name) <= 32:
        messages.append("payee name must be between 1 and 32 characters")
    for label, text in (("payee name", row.payee_name), ("reference", row.reference)):
        if not is_printable_ascii(text):
            messages.append(f"{label} '{text}' must contain printable ASCII characters only")

    if not row.amount:
        messages.append("amount must not be empty")
    else:
        _check_amount("amount", row.amount, row.amount_cents, 10, messages)

    if len(row.reference) > 18:
        messages.append("reference must be at most 18 characters")
    if row.reference[:1] in ("0", "-"):
        messages.append(f"reference '{row.reference}' must not start with 0 or -")

    if row.withholding_tax:
        _check_amount("withholding tax", row.withholding_tax, row.withholding_tax_cents, 8, messages)

    if row.transaction_code and row.transaction_code not in allowed_codes:
        messages.append(
            f"transaction code '{row.transaction_code}' must be one of " + ", ".join(allowed_codes)
        )
    return messages


__all__ = [
    "COLUMNS",
    "PaymentRow",
    "normalise_amount",
    "parse_payment_rows",
    "read_payment_rows",
    "validate_row",
]
