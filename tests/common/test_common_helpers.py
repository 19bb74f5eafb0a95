import pytest

from src.attend.attend.checkin.service import parse_point
from src.attend.attend.common.deadline import Deadline
from src.attend.attend.common.qr import event_qr_payload, parse_event_qr, parse_person_qr
from src.attend.attend.common.validators import optional_float, optional_str, require_non_empty
from src.attend.attend.core.exceptions import DeadlineExceeded, ValidationError


def test_require_non_empty_names_the_field():
    assert require_non_empty("  abc ", "session_id") == "abc"
    with pytest.raises(ValidationError, match="session_id is required"):
        require_non_empty("   ", "session_id")


def test_optional_str():
    assert optional_str(None) is None
    assert optional_str("  ") is None
    assert optional_str(12) == "12"


@pytest.mark.parametrize("value", [True, "abc", float("nan"), float("inf"), "1e400", 10**400, [1]])
def test_optional_float_rejects_non_numbers(value):
    with pytest.raises(ValidationError, match="must be a number"):
        optional_float(value, "lat")


def test_optional_float_range():
    assert optional_float("", "lat") is None
    assert optional_float("12.5", "lat", minimum=-90, maximum=90) == 12.5
    with pytest.raises(ValidationError, match="accuracy must be >= 0"):
        optional_float(-1, "accuracy", minimum=0)


def test_qr_prefixes_are_optional_and_case_insensitive():
    assert parse_event_qr("attend://event/tok-123") == "tok-123"
    assert parse_event_qr("ATTEND://EVENT/tok-123") == "tok-123"
    assert parse_event_qr("tok-123") == "tok-123"
    assert parse_event_qr("attend://event/") is None
    assert parse_person_qr(" attend://person/ADA001 ") == "ADA001"
    assert parse_person_qr(None) is None
    assert event_qr_payload("tok-123") == "attend://event/tok-123"


def test_deadline_check():
    now = [100.0]
    deadline = Deadline.after(5, clock=lambda: now[0])

    deadline.check("session lookup")
    assert deadline.remaining() == 5.0

    now[0] = 105.0
    with pytest.raises(DeadlineExceeded, match="session lookup"):
        deadline.check("session lookup")


def test_oversized_coordinate_is_a_validation_error():
    with pytest.raises(ValidationError, match="lat must be a number"):
        parse_point(10**400, 0, None)
