import json
import math
from datetime import datetime, timedelta


def format_datetime(datetime_obj):
    """Format datetime as an ISO 8601 string."""
    if not datetime_obj:
        return None
    return datetime_obj.isoformat()


def is_number(value):
    """True for finite ints and floats, but not for booleans."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def parse_json_object(raw):
    """
    Parse a JSON-encoded object, returning {} for empty, invalid or
    non-object input.
    """
    if not raw:
        return {}
    if isinstance(raw, dict):
        return raw
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return parsed if isinstance(parsed, dict) else {}


def average(values):
    values = list(values)
    return sum(values) / len(values) if values else 0


def percentage(part, whole):
    return (part / whole) * 100 if whole else 0


def round1(value):
    return round(value, 1) if value is not None else None


def days_between(earlier, later):
    """Whole days elapsed between two datetimes."""
    return int((later - earlier).total_seconds() // 86400)


def start_of_day(moment):
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def subtract_time_range(now, time_range):
    """
    Start of an analytics window such as '7d' or '1y'. Raises ValueError
    for anything else.
    """
    if not time_range or len(time_range) < 2:
        raise ValueError(f"Invalid time range: {time_range!r}")
    amount, unit = time_range[:-1], time_range[-1]
    if not amount.isdigit():
        raise ValueError(f"Invalid time range: {time_range!r}")
    amount = int(amount)
    if unit == "d":
        return now - timedelta(days=amount)
    if unit == "y":
        try:
            return now.replace(year=now.year - amount)
        except ValueError:
            # Feb 29
            return now.replace(year=now.year - amount, day=28)
    raise ValueError(f"Invalid time range: {time_range!r}")


def utcnow():
    return datetime.utcnow()
