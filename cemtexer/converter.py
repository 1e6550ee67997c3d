"""Build ABA records from originator settings and payment rows."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from .exceptions import RowSourceError, RowValidationError, StructuralError
from .fields import BLANK, pad_left_justified, pad_right_justified
from .payments import PaymentRow, read_payment_rows, validate_row
from .records import REEL_SEQUENCE, TRAILER_BSB_FILLER, HeaderRecord, TrailerRecord, TransactionRecord
from .reference import ReferenceData, load_reference_data
from .rules import AMOUNT_WIDTH, CREDIT_CODES
from .settings import OriginatorSettings, load_settings, validate_settings
from .utils import DETAIL_CODE, HEADER_CODE, TRAILER_CODE, write_text

logger = logging.getLogger(__name__)

DEFAULT_TRANSACTION_CODE = "53"
DEFAULT_INDICATOR = BLANK
NEWLINE = "\n"


class TrailerPolicy(str, Enum):
    """How trailer totals are derived from the generated transactions."""

    # Every generated transaction is a credit: total = credit = sum, debit = 0.
    CREDIT_ONLY = "credit_only"

    @property
    def allowed_codes(self) -> Tuple[str, ...]:
        return CREDIT_CODES

    def totals(self, amount_sum: int) -> Tuple[int, int, int]:
        """Return ``(total, credit, debit)`` in cents."""

        return amount_sum, amount_sum, 0


@dataclass(frozen=True)
class GeneratedBatch:
    """A complete generated file, ready to be written."""

    header: HeaderRecord
    transactions: Tuple[TransactionRecord, ...]
    trailer: TrailerRecord
    total_cents: int

    @property
    def count(self) -> int:
        return len(self.transactions)

    @property
    def lines(self) -> List[str]:
        return [self.header.serialize(), *(record.serialize() for record in self.transactions), self.trailer.serialize()]

    def to_text(self) -> str:
        return NEWLINE.join(self.lines) + NEWLINE


def build_header(settings: OriginatorSettings) -> HeaderRecord:
    return HeaderRecord(
        record_type=HEADER_CODE,
        blank_1=BLANK * 17,
        reel_sequence=REEL_SEQUENCE,
        bank_code=pad_left_justified(settings.bank_code, 3),
        blank_2=BLANK * 7,
        originator_name=pad_left_justified(settings.originator_name, 26),
        originator_id=pad_right_justified(settings.originator_id, 6),
        file_description=pad_left_justified(settings.file_description, 12),
        settlement_date=settings.settlement_date,
        blank_3=BLANK * 40,
    )


def build_transaction(row: PaymentRow, settings: OriginatorSettings) -> TransactionRecord:
    return TransactionRecord(
        record_type=DETAIL_CODE,
        bsb=row.bsb,
        account_number=pad_right_justified(row.account_number, 9, BLANK),
        indicator=DEFAULT_INDICATOR,
        transaction_code=row.transaction_code or DEFAULT_TRANSACTION_CODE,
        amount=pad_right_justified(row.amount_cents, AMOUNT_WIDTH),
        payee_name=pad_left_justified(row.payee_name, 32),
        reference=pad_left_justified(row.reference, 18),
        trace_bsb=settings.trace_bsb,
        trace_account_number=pad_right_justified(settings.trace_account_number, 9, BLANK),
        remitter_name=pad_left_justified(settings.trace_account_name, 16),
        withholding_tax=pad_right_justified(row.withholding_tax_cents, 8),
    )


def build_trailer(count: int, amount_sum: int, policy: TrailerPolicy = TrailerPolicy.CREDIT_ONLY) -> TrailerRecord:
    total, credit, debit = policy.totals(amount_sum)
    totals = "".join(pad_right_justified(str(value), AMOUNT_WIDTH) for value in (total, credit, debit))
    return TrailerRecord(
        record_type=TRAILER_CODE,
        bsb_filler=TRAILER_BSB_FILLER,
        blank_1=BLANK * 12,
        totals=totals,
        blank_2=BLANK * 24,
        record_count=pad_right_justified(str(count), 6),
        blank_3=BLANK * 40,
    )


class Converter:
    """Turn settings and payment rows into a batch, all rows or none."""

    def __init__(
        self,
        settings: OriginatorSettings,
        reference: Optional[ReferenceData] = None,
        policy: TrailerPolicy = TrailerPolicy.CREDIT_ONLY,
    ) -> None:
        self.reference = reference if reference is not None else load_reference_data()
        self.settings = validate_settings(settings, self.reference)
        self.policy = policy

    def generate(self, rows: Sequence[PaymentRow]) -> GeneratedBatch:
        if not rows:
            raise RowSourceError("No payment rows to convert; a file needs at least one transaction")
        failures: Dict[int, List[str]] = {}
        for row in rows:
            messages = validate_row(row, self.reference, self.policy.allowed_codes)
            if messages:
                for message in messages:
                    logger.error("Row %d: %s", row.row_number, message)
                failures[row.row_number] = messages
        if failures:
            raise RowValidationError(failures)

        header = build_header(self.settings)
        transactions = []
        amount_sum = 0
        for row in rows:
            record = build_transaction(row, self.settings)
            amount_sum += int(record.amount)
            transactions.append(record)
        trailer = build_trailer(len(transactions), amount_sum, self.policy)

        logger.info("Generated %d transaction(s) totalling %d cents", len(transactions), amount_sum)
        return GeneratedBatch(
            header=header,
            transactions=tuple(transactions),
            trailer=trailer,
            total_cents=amount_sum,
        )


def generate_file(
    settings_path: Path,
    csv_path: Path,
    output_path: Path,
    reference: Optional[ReferenceData] = None,
) -> GeneratedBatch:
    """Generate an ABA file; nothing is written unless every row is valid."""

    settings = load_settings(settings_path)
    converter = Converter(settings, reference=reference)
    rows = read_payment_rows(csv_path)
    batch = converter.generate(rows)

    output_path = Path(output_path).expanduser()
    try:
        write_text(output_path, batch.to_text())
    except OSError as exc:
        raise StructuralError(f"Unable to write ABA file {output_path}: {exc}") from exc
    logger.info("ABA file written to %s", output_path)
    return batch


__all__ = [
    "Converter",
    "DEFAULT_TRANSACTION_CODE",
    "GeneratedBatch",
    "TrailerPolicy",
    "build_header",
    "build_transaction",
    "build_trailer",
    "generate_file",
]
