import math
from datetime import date, datetime
from typing import Any, Optional, Sequence

from app.core.exceptions import ValidationError
from app.models.shared.enums import FieldType
from app.utils.date_time_serializer import parse_iso_date

_TRUE_STRINGS = {"true", "1", "yes"}
_FALSE_STRINGS = {"false", "0", "no"}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def coerce_date(field: str, value: Any, nullable: bool) -> Optional[date]:
    if _is_blank(value):
        if nullable:
            return None
        raise ValidationError("a date is required", field=field)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"'{value}' is not a valid ISO date", field=field)
    raise ValidationError(f"expected a date string, got {type(value).__name__}", field=field)


def _finite_number(field: str, parsed: float, integer: bool):
    if not math.isfinite(parsed):
        raise ValidationError(f"'{parsed}' is not a finite number", field=field)
    if not integer:
        return float(parsed)
    if parsed != int(parsed):
        raise ValidationError(f"'{parsed}' is not a whole number", field=field)
    return int(parsed)


def coerce_number(field: str, value: Any, nullable: bool, integer: bool):
    # Partial input: a blank number becomes 0 (or None where the column allows it)
    if _is_blank(value):
        return None if nullable else 0
    if isinstance(value, bool):
        raise ValidationError("expected a number, got a boolean", field=field)
    if isinstance(value, int):
        return value if integer else float(value)
    if isinstance(value, float):
        return _finite_number(field, value, integer)
    if isinstance(value, str):
        try:
            parsed = float(value.strip().replace(",", "."))
        except ValueError:
            raise ValidationError(f"'{value}' is not a number", field=field)
        return _finite_number(field, parsed, integer)
    raise ValidationError(f"expected a number, got {type(value).__name__}", field=field)


def coerce_enum(field: str, value: Any, nullable: bool, choices: Sequence[str]) -> Optional[str]:
    if _is_blank(value):
        if nullable:
            return None
        raise ValidationError(f"must be one of: {', '.join(choices)}", field=field)
    text = getattr(value, "value", value)
    if not isinstance(text, str) or text not in choices:
        raise ValidationError(f"'{value}' must be one of: {', '.join(choices)}", field=field)
    return text


def coerce_bool(field: str, value: Any, nullable: bool) -> Optional[bool]:
    if value is None:
        if nullable:
            return None
        raise ValidationError("a boolean is required", field=field)
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValidationError(f"'{value}' is not a boolean", field=field)


def coerce_string(field: str, value: Any, nullable: bool) -> Optional[str]:
    if value is None:
        if nullable:
            return None
        raise ValidationError("a value is required", field=field)
    if isinstance(value, (dict, list)):
        raise ValidationError("expected text", field=field)
    return str(value)


def coerce_field(
    field: str,
    field_type: FieldType,
    value: Any,
    nullable: bool = True,
    choices: Sequence[str] = (),
    integer: bool = False,
):
    """Coerce a raw JSON value into the Python value written to the column"""
    if field_type == FieldType.DATE:
        return coerce_date(field, value, nullable)
    if field_type == FieldType.NUMBER:
        return coerce_number(field, value, nullable, integer)
    if field_type == FieldType.ENUM:
        return coerce_enum(field, value, nullable, choices)
    if field_type == FieldType.BOOL:
        return coerce_bool(field, value, nullable)
    return coerce_string(field, value, nullable)
