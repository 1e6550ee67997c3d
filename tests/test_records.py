import pytest

from cemtexer.fields import layout_width
from cemtexer.records import RECORD_TYPES, BatchFile, HeaderRecord, TrailerRecord, TransactionRecord

HEADER_LINE = (
    "0" + " " * 17 + "01" + "CBA" + " " * 7 + "MY BUSINESS PTY LTD".ljust(26)
    + "301500" + "PAYROLL".ljust(12) + "010125" + " " * 40
)
DETAIL_LINE = (
    "1123-456157108231 530000001234S R SMITH                       "
    "TEST BATCH        062-000 12223123MY ACCOUNT      00001200"
)
TRAILER_LINE = (
    "7999-999" + " " * 12 + "0000001234" + "0000001234" + "0000000000" + " " * 24 + "000001" + " " * 40
)


@pytest.mark.parametrize("record_cls", RECORD_TYPES)
def test_layouts_cover_120_characters(record_cls) -> None:
    assert layout_width(record_cls.LAYOUT) == 120


@pytest.mark.parametrize(
    "record_cls,line",
    [
        (HeaderRecord, HEADER_LINE),
        (TransactionRecord, DETAIL_LINE),
        (TrailerRecord, TRAILER_LINE),
    ],
)
def test_serialize_inverts_deserialize(record_cls, line: str) -> None:
    assert len(line) == 120
    record = record_cls.deserialize(line)

    assert record.serialize() == line
    assert record_cls.deserialize(record.serialize()) == record


def test_transaction_fields_are_sliced_by_position() -> None:
    record = TransactionRecord.deserialize(DETAIL_LINE)

    assert record.bsb == "123-456"
    assert record.account_number == "157108231"
    assert record.indicator == " "
    assert record.transaction_code == "53"
    assert record.amount == "0000001234"
    assert record.payee_name == "S R SMITH".ljust(32)
    assert record.reference == "TEST BATCH".ljust(18)
    assert record.trace_bsb == "062-000"
    assert record.trace_account_number == " 12223123"
    assert record.remitter_name == "MY ACCOUNT".ljust(16)
    assert record.withholding_tax == "00001200"
    assert not record.is_debit


def test_trailer_exposes_total_triplet() -> None:
    record = TrailerRecord.deserialize(TRAILER_LINE)

    assert record.net_total == "0000001234"
    assert record.credit_total == "0000001234"
    assert record.debit_total == "0000000000"
    assert record.record_count == "000001"


def test_records_are_immutable() -> None:
    record = HeaderRecord.deserialize(HEADER_LINE)

    with pytest.raises(AttributeError):
        record.bank_code = "NAB"  # type: ignore[misc]


def test_batch_file_counts_transactions() -> None:
    batch = BatchFile(header=HEADER_LINE, transactions=(DETAIL_LINE, DETAIL_LINE), trailer=TRAILER_LINE)

    assert batch.transaction_count == 2
    assert batch.line_count == 4
    assert batch.trailer_line_number == 4
