import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError

from course_sniper.core.elements import PageElements
from course_sniper.core.errors import DriverFailure
from course_sniper.core.models import Closed, Open, RegistrationResult, RegistrationStatus, Waitlist
from course_sniper.core.scrape import (
    get_cart_courses,
    get_registration_results,
    get_shopping_carts,
    summarize,
)
from fakes import FakeElement, FakePage

E = PageElements()


def _row(description, availability, seats, delay=0.0):
    return FakeElement(children={
        E.description: FakeElement(text=description, delay=delay),
        E.availability: FakeElement(text=availability, delay=delay),
        E.seats: FakeElement(text=seats, delay=delay),
        E.instructor: FakeElement(text="Staff"),
    })


def test_courses_keep_listing_order_when_rows_resolve_out_of_order():
    rows = [
        _row("CS 170", "Open", "5 of 30", delay=0.03),
        _row("MATH 211", "Wait List", "2 of 10", delay=0.02),
        _row("ECON 101", "Closed", "", delay=0.0),
    ]
    page = FakePage(lists={E.course_row: rows})

    courses = asyncio.run(get_cart_courses(page, E))

    assert [c.description for c in courses] == ["CS 170", "MATH 211", "ECON 101"]
    assert [c.checkbox_index for c in courses] == [0, 1, 2]
    assert [c.availability for c in courses] == [Open(5, 30), Waitlist(8), Closed()]


def test_missing_row_fields_default_to_none():
    page = FakePage(lists={E.course_row: [_row("CS 170", "Open", "1 of 2")]})

    course = asyncio.run(get_cart_courses(page, E))[0]

    assert course.instructor == "Staff"
    assert (course.room, course.schedule, course.credits) == ("None", "None", "None")


def test_shopping_carts_normalise_whitespace():
    carts = [FakeElement(text="  Fall 2026\n Undergraduate "), FakeElement(text="Spring 2027")]
    page = FakePage(lists={E.semester_cart: carts})

    found = asyncio.run(get_shopping_carts(page, E))

    assert [str(c) for c in found] == ["Fall 2026 Undergraduate", "Spring 2027"]
    assert found[0].element is carts[0]


def test_registration_results_are_classified():
    def result(description, icon):
        return FakeElement(children={
            E.result_description: FakeElement(text=description),
            E.result_status: FakeElement(html=f'<img src="{icon}">'),
        })

    page = FakePage(lists={E.results_rows: [
        result("CS 170", E.registration_success),
        result("MATH 211", E.registration_fail),
        result("ECON 101", "/cs/other.gif"),
    ]})

    results = asyncio.run(get_registration_results(page, E))

    assert [r.status for r in results] == [
        RegistrationStatus.SUCCESS, RegistrationStatus.FAIL, RegistrationStatus.UNKNOWN,
    ]


def test_listing_failure_becomes_driver_failure():
    class BrokenPage(FakePage):
        async def query_selector_all(self, selector):
            raise PlaywrightError("Target closed")

    with pytest.raises(DriverFailure):
        asyncio.run(get_cart_courses(BrokenPage(), E))


def test_summarize():
    results = [
        RegistrationResult("a", RegistrationStatus.SUCCESS),
        RegistrationResult("b", RegistrationStatus.FAIL),
        RegistrationResult("c", RegistrationStatus.SUCCESS),
    ]

    assert summarize(results) == "1 fail, 2 success"
    assert summarize([]) is None
