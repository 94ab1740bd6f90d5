from datetime import date

import pytest

from app.core.exceptions import ValidationError
from app.models.shared.enums import FieldType
from app.utils.validators.field_coercion import coerce_field


class TestDateCoercion:

    def test_iso_date(self):
        assert coerce_field("dueDate", FieldType.DATE, "2025-08-01") == date(2025, 8, 1)

    def test_iso_datetime_keeps_the_date(self):
        assert coerce_field("dueDate", FieldType.DATE, "2025-08-01T07:30:00Z") == date(2025, 8, 1)

    def test_blank_nullable_becomes_none(self):
        assert coerce_field("dueDate", FieldType.DATE, "  ", nullable=True) is None

    def test_blank_required_fails_naming_field(self):
        with pytest.raises(ValidationError) as exc:
            coerce_field("startDate", FieldType.DATE, "", nullable=False)
        assert exc.value.field == "startDate"
        assert exc.value.status_code == 422

    def test_garbage_fails(self):
        with pytest.raises(ValidationError) as exc:
            coerce_field("dueDate", FieldType.DATE, "next tuesday")
        assert "dueDate" in exc.value.detail


class TestNumberCoercion:

    def test_numeric_string(self):
        assert coerce_field("totalWorking", FieldType.NUMBER, "20.5", nullable=False) == 20.5

    def test_decimal_comma(self):
        assert coerce_field("totalWorking", FieldType.NUMBER, "20,5", nullable=False) == 20.5

    def test_integer_field_accepts_whole_numbers(self):
        assert coerce_field("nearmiss", FieldType.NUMBER, "4", nullable=False, integer=True) == 4
        assert coerce_field("nearmiss", FieldType.NUMBER, 4.0, nullable=False, integer=True) == 4

    @pytest.mark.parametrize("value", ["2.9", 2.9, "1,5"])
    def test_integer_field_rejects_fractions(self, value):
        with pytest.raises(ValidationError) as exc:
            coerce_field("nearmiss", FieldType.NUMBER, value, nullable=False, integer=True)
        assert exc.value.field == "nearmiss"

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf", "NaN", float("inf"), float("nan")])
    @pytest.mark.parametrize("integer", [True, False])
    def test_rejects_non_finite_values(self, value, integer):
        with pytest.raises(ValidationError) as exc:
            coerce_field("fatality", FieldType.NUMBER, value, nullable=False, integer=integer)
        assert exc.value.field == "fatality"
        assert exc.value.status_code == 422

    def test_blank_non_nullable_is_zero(self):
        assert coerce_field("totalStandby", FieldType.NUMBER, "", nullable=False) == 0

    def test_none_nullable_stays_none(self):
        assert coerce_field("totalStandby", FieldType.NUMBER, None, nullable=True) is None

    @pytest.mark.parametrize("value", ["twenty", True, [1]])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValidationError) as exc:
            coerce_field("totalWorking", FieldType.NUMBER, value, nullable=False)
        assert exc.value.field == "totalWorking"


class TestEnumBoolStringCoercion:

    def test_enum_choice(self):
        assert coerce_field("status", FieldType.ENUM, "SELESAI", choices=("INVESTIGASI", "PROSES", "SELESAI")) == "SELESAI"

    def test_enum_outside_choices(self):
        with pytest.raises(ValidationError) as exc:
            coerce_field("statusTindakLanjut", FieldType.ENUM, "DONE", nullable=False, choices=("OPEN", "CLOSE"))
        assert exc.value.field == "statusTindakLanjut"

    @pytest.mark.parametrize("value,expected", [
        (True, True), ("true", True), ("False", False), (1, True), (0, False),
    ])
    def test_bool(self, value, expected):
        assert coerce_field("isComplete", FieldType.BOOL, value) is expected

    def test_bool_rejects_other_values(self):
        with pytest.raises(ValidationError):
            coerce_field("isComplete", FieldType.BOOL, "maybe")

    def test_string_is_stringified(self):
        assert coerce_field("notes", FieldType.STRING, 42) == "42"
        assert coerce_field("notes", FieldType.STRING, None) is None
