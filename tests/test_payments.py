from pathlib import Path

import pytest

from cemtexer.exceptions import RowSourceError
from cemtexer.payments import PaymentRow, normalise_amount, parse_payment_rows, read_payment_rows, validate_row
from cemtexer.reference import load_reference_data


def _row(**overrides: str) -> PaymentRow:
    fields = dict(bsb="083-004", account_number="987654", payee_name="JOHN SMITH", amount="123.45")
    fields.update(overrides)
    return PaymentRow(row_number=1, **fields)


def test_normalise_amount() -> None:
    assert normalise_amount("123.45") == "12345"
    assert normalise_amount("$67.00") == "6700"
    assert normalise_amount(" 1200 ") == "1200"
    assert normalise_amount("1.5") == "1.5"
    assert normalise_amount("123456789.00") == "123456789.00"


def test_parse_rows_fills_optional_columns() -> None:
    rows = parse_payment_rows(
        [
            "083-004,987654,JOHN SMITH,123.45\n",
            "\n",
            "062-000, 11223344 ,JANE DOE,67.00,WAGES,2.50,50\n",
        ]
    )

    assert [row.row_number for row in rows] == [1, 3]
    assert rows[0].reference == ""
    assert rows[0].withholding_tax == ""
    assert rows[1].account_number == "11223344"
    assert rows[1].withholding_tax_cents == "250"
    assert rows[1].transaction_code == "50"


@pytest.mark.parametrize(
    "line",
    [
        "083-004,987654,JOHN SMITH\n",
        "083-004,987654,JOHN SMITH,1.00,REF,0,53,EXTRA\n",
    ],
)
def test_wrong_column_count_is_fatal(line: str) -> None:
    with pytest.raises(RowSourceError):
        parse_payment_rows([line])


def test_read_payment_rows_from_file(tmp_path: Path) -> None:
    path = tmp_path / "payments.csv"
    path.write_text('083-004,987654,"SMITH, JOHN",123.45\r\n', encoding="utf-8")

    rows = read_payment_rows(path)

    assert rows[0].payee_name == "SMITH, JOHN"
    with pytest.raises(RowSourceError):
        read_payment_rows(tmp_path / "missing.csv")


def test_valid_row_has_no_messages() -> None:
    assert validate_row(_row(reference="INV 1", withholding_tax="10.00"), load_reference_data()) == []


def test_row_rules_report_every_failure() -> None:
    row = _row(
        bsb="123-456",
        account_number="12345678901",
        payee_name="",
        amount="12.345",
        reference="0ABC",
        withholding_tax="123456789",
        transaction_code="13",
    )

    messages = validate_row(row, load_reference_data())

    assert len(messages) == 7


def test_empty_amount_is_rejected() -> None:
    assert validate_row(_row(amount=""), load_reference_data()) == ["amount must not be empty"]


def test_text_cells_must_be_printable_ascii() -> None:
    messages = validate_row(_row(payee_name="ZOË SMITH", reference="INV\t1"), load_reference_data())

    assert messages == [
        "payee name 'ZOË SMITH' must contain printable ASCII characters only",
        "reference 'INV\t1' must contain printable ASCII characters only",
    ]
