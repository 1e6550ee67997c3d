"""Header, transaction and trailer records of an ABA (Cemtex) file.

Layouts (widths in characters, 120 per record):

- Header (0):      type 1, blank 17, reel sequence 2, bank code 3, blank 7,
                   originator name 26, originator id 6, description 12,
                   settlement date 6, blank 40.
- Transaction (1): type 1, BSB 7, account 9, indicator 1, transaction code 2,
                   amount 10, payee name 32, reference 18, trace BSB 7,
                   trace account 9, remitter name 16, withholding tax 8.
- Trailer (7):     type 1, BSB filler 7, blank 12, net/credit/debit 30,
                   blank 24, record count 6, blank 40.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import ClassVar, Tuple

from . import rules
from .fields import FieldSpec, extract_fields, layout_width
from .utils import DETAIL_CODE, HEADER_CODE, RECORD_LENGTH, TRAILER_CODE, ErrorKind

REEL_SEQUENCE = "01"
TRAILER_BSB_FILLER = "999-999"


class _FixedWidthRecord:
    """Mixin giving a dataclass record its line codec."""

    KIND: ClassVar[str]
    LAYOUT: ClassVar[Tuple[FieldSpec, ...]]

    @classmethod
    def deserialize(cls, line: str):
        """Slice a 120-character line into a record, field by field."""

        return cls(**extract_fields(line, cls.LAYOUT))

    def serialize(self) -> str:
        return "".join(getattr(self, spec.name) for spec in self.LAYOUT)

    def __str__(self) -> str:
        return self.serialize()


@dataclass(frozen=True)
class HeaderRecord(_FixedWidthRecord):
    """Descriptive record, always the first line."""

    record_type: str
    blank_1: str
    reel_sequence: str
    bank_code: str
    blank_2: str
    originator_name: str
    originator_id: str
    file_description: str
    settlement_date: str
    blank_3: str

    KIND: ClassVar[str] = "header"
    LAYOUT: ClassVar[Tuple[FieldSpec, ...]] = (
        FieldSpec("record_type", 1, rules.exact(HEADER_CODE, ErrorKind.HEADER_RECORD_TYPE)),
        FieldSpec("blank_1", 17, rules.blank(17, ErrorKind.HEADER_BLANK_ONE)),
        FieldSpec("reel_sequence", 2, rules.exact(REEL_SEQUENCE, ErrorKind.HEADER_REEL_SEQUENCE)),
        FieldSpec("bank_code", 3, rules.bank_code(ErrorKind.HEADER_BANK_CODE)),
        FieldSpec("blank_2", 7, rules.blank(7, ErrorKind.HEADER_BLANK_TWO)),
        FieldSpec("originator_name", 26, rules.left_justified_text(ErrorKind.HEADER_ORIGINATOR_NAME)),
        FieldSpec(
            "originator_id",
            6,
            rules.right_justified_numeric(ErrorKind.HEADER_ORIGINATOR_ID, "all must be numerics"),
        ),
        FieldSpec("file_description", 12, rules.left_justified_text(ErrorKind.HEADER_DESCRIPTION)),
        FieldSpec("settlement_date", 6, rules.ddmmyy(ErrorKind.HEADER_SETTLEMENT_DATE)),
        FieldSpec("blank_3", 40, rules.blank(40, ErrorKind.HEADER_BLANK_THREE)),
    )


@dataclass(frozen=True)
class TransactionRecord(_FixedWidthRecord):
    """Detail record, one per payment."""

    record_type: str
    bsb: str
    account_number: str
    indicator: str
    transaction_code: str
    amount: str
    payee_name: str
    reference: str
    trace_bsb: str
    trace_account_number: str
    remitter_name: str
    withholding_tax: str

    KIND: ClassVar[str] = "transaction"
    LAYOUT: ClassVar[Tuple[FieldSpec, ...]] = (
        FieldSpec("record_type", 1, rules.exact(DETAIL_CODE, ErrorKind.TRANSACTION_RECORD_TYPE)),
        FieldSpec("bsb", 7, rules.bsb(ErrorKind.TRANSACTION_BSB)),
        FieldSpec(
            "account_number",
            9,
            rules.right_justified_numeric(
                ErrorKind.TRANSACTION_ACCOUNT, "the account number must be numerics and right justified"
            ),
        ),
        FieldSpec("indicator", 1, rules.one_of(rules.INDICATORS, ErrorKind.TRANSACTION_INDICATOR, "indicator")),
        FieldSpec(
            "transaction_code",
            2,
            rules.one_of(rules.TRANSACTION_CODES, ErrorKind.TRANSACTION_CODE, "transaction code"),
        ),
        FieldSpec(
            "amount",
            10,
            rules.right_justified_numeric(ErrorKind.TRANSACTION_AMOUNT, "the amount must be numerics and right justified"),
        ),
        FieldSpec("payee_name", 32, rules.left_justified_text(ErrorKind.TRANSACTION_PAYEE_NAME)),
        FieldSpec("reference", 18, rules.reference_text(ErrorKind.TRANSACTION_REFERENCE)),
        FieldSpec("trace_bsb", 7, rules.bsb(ErrorKind.TRANSACTION_TRACE_BSB)),
        FieldSpec(
            "trace_account_number",
            9,
            rules.right_justified_numeric(
                ErrorKind.TRANSACTION_TRACE_ACCOUNT, "the account number must be numerics and right justified"
            ),
        ),
        FieldSpec("remitter_name", 16, rules.left_justified_text(ErrorKind.TRANSACTION_REMITTER)),
        FieldSpec(
            "withholding_tax",
            8,
            rules.numeric(ErrorKind.TRANSACTION_WITHHOLDING_TAX, "the amount must be zero filled numerics"),
        ),
    )

    @property
    def is_debit(self) -> bool:
        return self.transaction_code in rules.DEBIT_CODES


@dataclass(frozen=True)
class TrailerRecord(_FixedWidthRecord):
    """File total record, always the last line."""

    record_type: str
    bsb_filler: str
    blank_1: str
    totals: str
    blank_2: str
    record_count: str
    blank_3: str

    KIND: ClassVar[str] = "trailer"
    LAYOUT: ClassVar[Tuple[FieldSpec, ...]] = (
        FieldSpec("record_type", 1, rules.exact(TRAILER_CODE, ErrorKind.TRAILER_RECORD_TYPE)),
        FieldSpec("bsb_filler", 7, rules.exact(TRAILER_BSB_FILLER, ErrorKind.TRAILER_BSB_FILLER)),
        FieldSpec("blank_1", 12, rules.blank(12, ErrorKind.TRAILER_BLANK_ONE)),
        FieldSpec("totals", 30, rules.total_triplet),
        FieldSpec("blank_2", 24, rules.blank(24, ErrorKind.TRAILER_BLANK_TWO)),
        FieldSpec("record_count", 6, rules.record_count),
        FieldSpec("blank_3", 40, rules.blank(40, ErrorKind.TRAILER_BLANK_THREE)),
    )

    @property
    def net_total(self) -> str:
        return self.totals[0:10]

    @property
    def credit_total(self) -> str:
        return self.totals[10:20]

    @property
    def debit_total(self) -> str:
        return self.totals[20:30]


@dataclass(frozen=True)
class BatchFile:
    """Raw lines of a structurally sound file, split by position."""

    header: str
    transactions: Tuple[str, ...]
    trailer: str

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    @property
    def line_count(self) -> int:
        return len(self.transactions) + 2

    @property
    def trailer_line_number(self) -> int:
        return self.line_count


RECORD_TYPES = (HeaderRecord, TransactionRecord, TrailerRecord)

for _record_cls in RECORD_TYPES:
    assert layout_width(_record_cls.LAYOUT) == RECORD_LENGTH, _record_cls.__name__
    assert [spec.name for spec in _record_cls.LAYOUT] == [f.name for f in fields(_record_cls)], _record_cls.__name__


__all__ = [
    "BatchFile",
    "HeaderRecord",
    "RECORD_TYPES",
    "REEL_SEQUENCE",
    "TRAILER_BSB_FILLER",
    "TrailerRecord",
    "TransactionRecord",
]
