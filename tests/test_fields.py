from cemtexer.fields import (
    FieldSpec,
    extract_fields,
    iter_positions,
    layout_width,
    pad_left_justified,
    pad_right_justified,
)

LAYOUT = (
    FieldSpec("kind", 1),
    FieldSpec("code", 3),
    FieldSpec("name", 6),
)


def test_iter_positions_are_one_based_and_inclusive() -> None:
    positions = [(spec.name, start, end) for spec, start, end in iter_positions(LAYOUT)]

    assert positions == [("kind", 1, 1), ("code", 2, 4), ("name", 5, 10)]
    assert layout_width(LAYOUT) == 10


def test_extract_fields_slices_in_layout_order() -> None:
    values = extract_fields("0CBAJOHN  ", LAYOUT)

    assert list(values) == ["kind", "code", "name"]
    assert values == {"kind": "0", "code": "CBA", "name": "JOHN  "}


def test_padding_fills_to_width() -> None:
    assert pad_left_justified("ABC", 6) == "ABC   "
    assert pad_right_justified("42", 6) == "000042"
    assert pad_right_justified("42", 6, " ") == "    42"
    assert pad_left_justified("", 3) == "   "


def test_padding_leaves_oversized_values_untouched() -> None:
    assert pad_left_justified("ABCDEFG", 3) == "ABCDEFG"
    assert pad_right_justified("1234567", 3) == "1234567"
    assert pad_right_justified("123", 3) == "123"
