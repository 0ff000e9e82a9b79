"""Domain objects parsed from the shopping-cart and results pages."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Union

from .elements import PageElements

WAITLIST_UNKNOWN_POSITION = 999


@dataclass(frozen=True)
class Open:
    available: int
    capacity: int

    def __str__(self) -> str:
        return f"Open {self.available}/{self.capacity}"


@dataclass(frozen=True)
class Waitlist:
    position: int

    def __str__(self) -> str:
        return f"Waitlist {self.position}"


@dataclass(frozen=True)
class Closed:
    def __str__(self) -> str:
        return "Closed"


CourseStatus = Union[Open, Waitlist, Closed]


def _numbers(text: str) -> List[int]:
    return [int(word) for word in text.split() if word.isdecimal()]


def parse_availability(availability_text: str, seats_text: str) -> CourseStatus:
    """Interpret the availability label and the "N of M" seats blurb of one row.

    For waitlisted sections the seats blurb counts waitlist seats, so the
    position is ``total - taken``.
    """
    nums = _numbers(seats_text or "")
    text = availability_text or ""
    if "Wait List" in text:
        if len(nums) == 2:
            return Waitlist(position=nums[1] - nums[0])
        return Waitlist(position=WAITLIST_UNKNOWN_POSITION)
    if "Closed" in text:
        return Closed()
    if "Open" in text:
        if len(nums) == 2:
            return Open(available=nums[0], capacity=nums[1])
        return Open(available=0, capacity=0)
    return Closed()


@dataclass
class Course:
    """One selectable row of the cart listing."""

    checkbox_index: int
    availability: CourseStatus
    description: str
    schedule: str = "None"
    room: str = "None"
    instructor: str = "None"
    credits: str = "None"

    def __str__(self) -> str:
        return self.description

    def table_row(self) -> List[str]:
        return [
            self.description,
            self.credits,
            str(self.availability),
            " ".join(self.schedule.split()),
            self.room,
            self.instructor,
        ]


COURSE_TABLE_HEADERS = ["Course", "Credits", "Availability", "Schedule", "Room", "Instructor"]


@dataclass
class ShoppingCart:
    element: Any
    text: str

    def __str__(self) -> str:
        return self.text


class RegistrationStatus(Enum):
    SUCCESS = "✅"
    FAIL = "❌"
    UNKNOWN = "❔"

    def __str__(self) -> str:
        return self.value


def classify_result(status_html: str, elements: PageElements) -> RegistrationStatus:
    """Map the status cell markup to a status by its icon path."""
    if elements.registration_success in status_html:
        return RegistrationStatus.SUCCESS
    if elements.registration_fail in status_html:
        return RegistrationStatus.FAIL
    return RegistrationStatus.UNKNOWN


@dataclass
class RegistrationResult:
    description: str
    status: RegistrationStatus

    def table_row(self) -> List[str]:
        return [" ".join(self.description.split()), str(self.status)]


RESULT_TABLE_HEADERS = ["Course", "Status"]


_TIME_RE = re.compile(r"^\s*(\d{1,2})\s*:\s*(\d{2})\s*([AaPp][Mm])\s*$")


@dataclass(frozen=True)
class RegistrationTime:
    """A 12-hour clock target picked by the operator.

    12 AM is midnight (hour 0) and 12 PM is noon (hour 12).
    """

    hour: int
    minute: int
    pm: bool

    def __post_init__(self) -> None:
        if not 1 <= self.hour <= 12:
            raise ValueError(f"hour must be in 1..12, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"minute must be in 0..59, got {self.minute}")

    @property
    def hour_24(self) -> int:
        base = self.hour % 12
        return base + 12 if self.pm else base

    @classmethod
    def parse(cls, raw: str) -> "RegistrationTime":
        """Parse ``H:MM AM`` / ``HH:MM pm``."""
        match = _TIME_RE.match(raw or "")
        if not match:
            raise ValueError(f"Expected a time like '9:30 AM', got {raw!r}")
        hour, minute, meridiem = match.groups()
        return cls(int(hour), int(minute), meridiem.lower() == "pm")

    def __str__(self) -> str:
        return f"{self.hour:02}:{self.minute:02} {'PM' if self.pm else 'AM'}"
