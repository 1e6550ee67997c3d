from pathlib import Path

import pytest

from cemtexer.analyzer import Analyzer
from cemtexer.converter import (
    Converter,
    TrailerPolicy,
    build_header,
    build_trailer,
    build_transaction,
    generate_file,
)
from cemtexer.exceptions import ConfigurationError, RowSourceError, RowValidationError, SettingsValidationError
from cemtexer.payments import PaymentRow
from cemtexer.settings import OriginatorSettings
from cemtexer.validator import Validator

SETTINGS = OriginatorSettings(
    bank_code="CBA",
    originator_name="MY BUSINESS PTY LTD",
    originator_id="301500",
    file_description="PAYROLL",
    settlement_date="010125",
    trace_bsb="062-000",
    trace_account_number="12345678",
    trace_account_name="MY BUSINESS",
)

SETTINGS_YAML = """\
bank_code: CBA
originator_name: MY BUSINESS PTY LTD
originator_id: "301500"
file_description: PAYROLL
settlement_date: "010125"
trace_bsb: 062-000
trace_account_number: "12345678"
trace_account_name: MY BUSINESS
"""


def _row(row_number: int = 1, amount: str = "123.45", **overrides: str) -> PaymentRow:
    fields = dict(bsb="083-004", account_number="987654", payee_name="JOHN SMITH", amount=amount)
    fields.update(overrides)
    return PaymentRow(row_number=row_number, **fields)


def test_generation_accumulates_credit_total() -> None:
    batch = Converter(SETTINGS).generate([_row(1, "123.45"), _row(2, "67.00")])

    assert batch.total_cents == 19045
    assert batch.count == 2
    assert batch.trailer.totals == "0000019045" "0000019045" "0000000000"
    assert batch.trailer.record_count == "000002"


def test_generated_lines_are_120_characters_and_validate_clean() -> None:
    batch = Converter(SETTINGS).generate(
        [_row(1, "123.45", reference="INV 1", withholding_tax="2.50"), _row(2, "67.00")]
    )

    lines = batch.lines
    assert all(len(line) == 120 for line in lines)
    assert batch.to_text().endswith("\n")
    assert batch.to_text().count("\n") == 4

    result = Analyzer().analyze(Validator().split(lines))
    assert result.report_text == "No errors detected"


def test_transaction_uses_defaults_and_trace_fields() -> None:
    record = build_transaction(_row(1, "10.00"), SETTINGS)

    assert record.indicator == " "
    assert record.transaction_code == "53"
    assert record.account_number == "   987654"
    assert record.amount == "0000001000"
    assert record.reference == " " * 18
    assert record.withholding_tax == "00000000"
    assert record.trace_bsb == "062-000"
    assert record.trace_account_number == " 12345678"
    assert record.remitter_name == "MY BUSINESS     "


def test_transaction_keeps_explicit_credit_code() -> None:
    assert build_transaction(_row(1, transaction_code="50"), SETTINGS).transaction_code == "50"


def test_header_pads_settings() -> None:
    settings = OriginatorSettings(**{**SETTINGS.__dict__, "originator_id": "4231"})
    header = build_header(settings)

    assert header.originator_id == "004231"
    assert header.originator_name == "MY BUSINESS PTY LTD".ljust(26)
    assert header.file_description == "PAYROLL     "
    assert len(header.serialize()) == 120


def test_credit_only_trailer_reconciles() -> None:
    trailer = build_trailer(3, 5000, TrailerPolicy.CREDIT_ONLY)

    assert int(trailer.net_total) == int(trailer.credit_total) - int(trailer.debit_total)
    assert trailer.debit_total == "0000000000"
    assert trailer.record_count == "000003"


def test_one_bad_row_aborts_generation() -> None:
    rows = [_row(1), _row(2, bsb="123-456"), _row(3, reference="-REF"), _row(4)]

    with pytest.raises(RowValidationError) as excinfo:
        Converter(SETTINGS).generate(rows)

    assert sorted(excinfo.value.failures) == [2, 3]


def test_debit_code_is_rejected_under_credit_only_policy() -> None:
    with pytest.raises(RowValidationError) as excinfo:
        Converter(SETTINGS).generate([_row(1, transaction_code="13")])

    assert "transaction code" in excinfo.value.failures[1][0]


def test_empty_row_list_is_rejected() -> None:
    with pytest.raises(RowSourceError):
        Converter(SETTINGS).generate([])


def test_invalid_settings_fail_before_rows() -> None:
    settings = OriginatorSettings(**{**SETTINGS.__dict__, "bank_code": "XYZ"})

    with pytest.raises(SettingsValidationError):
        Converter(settings)


def test_generate_file_writes_nothing_on_row_failure(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    settings_path.write_text(SETTINGS_YAML, encoding="utf-8")
    csv_path = tmp_path / "payments.csv"
    csv_path.write_text("083-004,987654,JOHN SMITH,123.45\n999-999,1,JANE,1.00\n", encoding="utf-8")
    output = tmp_path / "out.aba"

    with pytest.raises(RowValidationError):
        generate_file(settings_path, csv_path, output)

    assert not output.exists()


def test_generate_file_writes_batch(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    settings_path.write_text(SETTINGS_YAML, encoding="utf-8")
    csv_path = tmp_path / "payments.csv"
    csv_path.write_text("083-004,987654,JOHN SMITH,123.45\n083-004,987655,JANE DOE,$67.00,WAGES\n", encoding="utf-8")
    output = tmp_path / "out" / "batch.aba"

    batch = generate_file(settings_path, csv_path, output)

    assert output.read_text(encoding="utf-8") == batch.to_text()
    assert batch.total_cents == 19045


def test_missing_setting_aborts_before_rows_are_read(tmp_path: Path) -> None:
    settings_path = tmp_path / "settings.yaml"
    settings_path.write_text(SETTINGS_YAML.replace("trace_bsb: 062-000\n", ""), encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        generate_file(settings_path, tmp_path / "does-not-exist.csv", tmp_path / "out.aba")

    assert excinfo.value.missing_keys == ["trace_bsb"]


def test_non_ascii_payee_aborts_generation() -> None:
    rows = [_row(1), _row(2, amount="10.00", payee_name="JOSÉ SMITH")]

    with pytest.raises(RowValidationError) as excinfo:
        Converter(SETTINGS).generate(rows)

    assert list(excinfo.value.failures) == [2]
    assert "printable ASCII" in excinfo.value.failures[2][0]


def test_non_ascii_remitter_is_a_settings_error() -> None:
    settings = OriginatorSettings(**{**SETTINGS.__dict__, "trace_account_name": "CAFÉ PTY"})

    with pytest.raises(SettingsValidationError) as excinfo:
        Converter(settings)

    assert excinfo.value.messages == ["trace_account_name must contain printable ASCII characters only"]
