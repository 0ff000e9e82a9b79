import pytest

from course_sniper.core.elements import PageElements
from course_sniper.core.models import (
    Closed,
    Course,
    Open,
    RegistrationStatus,
    RegistrationTime,
    Waitlist,
    classify_result,
    parse_availability,
)


@pytest.mark.parametrize(
    "availability,seats,expected",
    [
        ("Open", "12 of 30 seats available", Open(12, 30)),
        ("Open", "", Open(0, 0)),
        ("Wait List", "3 of 10 waitlist seats taken", Waitlist(7)),
        ("Wait List", "waitlist open", Waitlist(999)),
        ("Closed", "0 of 30", Closed()),
        ("", "", Closed()),
    ],
)
def test_parse_availability(availability, seats, expected):
    assert parse_availability(availability, seats) == expected


def test_availability_labels():
    assert str(Open(5, 40)) == "Open 5/40"
    assert str(Waitlist(2)) == "Waitlist 2"
    assert str(Closed()) == "Closed"


def test_classify_result_by_icon_path():
    e = PageElements()

    ok = f'<img src="{e.registration_success}" alt="Success">'
    bad = f'<img src="{e.registration_fail}" alt="Error">'

    assert classify_result(ok, e) is RegistrationStatus.SUCCESS
    assert classify_result(bad, e) is RegistrationStatus.FAIL
    assert classify_result('<img src="/cs/saprod/cache/PS_CS_STATUS_WARNING_ICN_1.gif">', e) is RegistrationStatus.UNKNOWN
    assert classify_result("", e) is RegistrationStatus.UNKNOWN


@pytest.mark.parametrize(
    "hour,pm,expected",
    [(12, False, 0), (12, True, 12), (1, True, 13), (9, False, 9), (11, True, 23)],
)
def test_hour_24(hour, pm, expected):
    assert RegistrationTime(hour, 0, pm).hour_24 == expected


def test_parse_registration_time():
    parsed = RegistrationTime.parse(" 9:05 pm ")

    assert parsed == RegistrationTime(9, 5, True)
    assert str(parsed) == "09:05 PM"


@pytest.mark.parametrize("raw", ["", "930 AM", "13:00 PM", "9:60 AM", "9:30", "noon"])
def test_parse_registration_time_rejects_garbage(raw):
    with pytest.raises(ValueError):
        RegistrationTime.parse(raw)


def test_course_table_row_collapses_schedule_whitespace():
    course = Course(
        checkbox_index=0,
        availability=Open(3, 25),
        description="CS 170 - Intro",
        schedule="MoWe\n 10:00AM -\n 11:15AM",
        credits="3.00",
    )

    assert str(course) == "CS 170 - Intro"
    assert course.table_row() == ["CS 170 - Intro", "3.00", "Open 3/25", "MoWe 10:00AM - 11:15AM", "None", "None"]


def test_superscript_digits_are_not_seat_counts():
    assert parse_availability("Open", "5² of 30 seats") == Open(0, 0)
    assert parse_availability("Wait List", "² 3 of 10") == Waitlist(7)
