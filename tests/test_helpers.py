from datetime import datetime

import pytest

from classes.validators import validate_email, validate_score, validate_status
from models.enums import ProgressStatus
from utils.errors import ValidationError
from utils.helpers import parse_json_object, subtract_time_range


@pytest.mark.parametrize("raw,expected", [
    ('{"minScore": 80}', {"minScore": 80}),
    ({"minScore": 80}, {"minScore": 80}),
    ("", {}),
    (None, {}),
    ("{broken", {}),
    ("[1, 2]", {}),
    ("42", {}),
])
def test_parse_json_object(raw, expected):
    assert parse_json_object(raw) == expected


def test_subtract_time_range():
    now = datetime(2024, 2, 29, 8, 30)

    assert subtract_time_range(now, "7d") == datetime(2024, 2, 22, 8, 30)
    assert subtract_time_range(now, "1y") == datetime(2023, 2, 28, 8, 30)


@pytest.mark.parametrize("time_range", ["", "d", "7w", "xd", None])
def test_subtract_time_range_rejects_unknown_ranges(time_range):
    with pytest.raises(ValueError):
        subtract_time_range(datetime(2026, 1, 1), time_range)


def test_validators():
    assert validate_email("Student@Example.COM") == "student@example.com"
    assert validate_status("COMPLETED") is ProgressStatus.COMPLETED
    assert validate_score(100) == 100.0

    for bad in (True, -1, 100.5, "90"):
        with pytest.raises(ValidationError):
            validate_score(bad)
    with pytest.raises(ValidationError):
        validate_status(["COMPLETED"])
