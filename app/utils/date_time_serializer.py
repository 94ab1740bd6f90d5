from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional


def serialize_dates(data: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Recursively convert date/datetime/enum values so the map can be stored as JSON"""
    if data is None:
        return None

    def convert_value(value: Any) -> Any:
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        elif isinstance(value, Enum):
            return value.value
        elif isinstance(value, dict):
            return serialize_dates(value)
        elif isinstance(value, (list, tuple)):
            return [convert_value(item) for item in value]
        return value

    serialized = {}
    for key, value in data.items():
        serialized[key] = convert_value(value)
    return serialized


def parse_iso_date(value: str) -> date:
    """Parse 'YYYY-MM-DD' or a full ISO datetime string into a date"""
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
