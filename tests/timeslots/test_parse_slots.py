from datetime import time

import pytest

from library_portal.core.exceptions import ValidationError
from library_portal.timeslots.service import parse_slots


def test_blank_rows_are_dropped():
    slots = parse_slots([{"start": "", "end": ""}, {"start": "08:00", "end": "10:00:00"}])
    assert [(s.start_time, s.end_time) for s in slots] == [(time(8), time(10))]


def test_none_means_no_slots():
    assert parse_slots(None) == []


@pytest.mark.parametrize(
    "raw",
    [
        [{"start": "08:00", "end": ""}],
        [{"start": "8am", "end": "10:00"}],
        [{"start": "10:00", "end": "10:00"}],
        ["08:00-10:00"],
        "08:00-10:00",
    ],
)
def test_invalid_slots_reject_submission(raw):
    with pytest.raises(ValidationError, match="Invalid time slot"):
        parse_slots(raw)
