"""Scrape carts, cart courses and enrollment results from the current page."""

from __future__ import annotations

import asyncio
from typing import List, Optional

from playwright.async_api import ElementHandle, Error as PlaywrightError, Page

from .elements import PageElements
from .errors import DriverFailure
from .models import (
    Course,
    RegistrationResult,
    ShoppingCart,
    classify_result,
    parse_availability,
)


async def _query_all(page: Page, selector: str) -> List[ElementHandle]:
    try:
        return await page.query_selector_all(selector)
    except PlaywrightError as exc:
        raise DriverFailure(f"Failed to list {selector}: {exc}") from exc


async def _child_text(row: ElementHandle, selector: str, default: str = "None") -> str:
    child = await row.query_selector(selector)
    if child is None:
        return default
    text = await child.inner_text()
    return text if text is not None else default


async def _child_html(row: ElementHandle, selector: str) -> str:
    child = await row.query_selector(selector)
    if child is None:
        return ""
    return await child.inner_html() or ""


async def get_shopping_carts(page: Page, elements: PageElements) -> List[ShoppingCart]:
    carts = await _query_all(page, elements.semester_cart)
    try:
        texts = await asyncio.gather(*(cart.inner_text() for cart in carts))
    except PlaywrightError as exc:
        raise DriverFailure(f"Failed to read shopping carts: {exc}") from exc
    return [ShoppingCart(element=cart, text=" ".join((text or "").split())) for cart, text in zip(carts, texts)]


async def _read_course(row: ElementHandle, index: int, elements: PageElements) -> Course:
    seats, availability, description, schedule, instructor, room, credits = await asyncio.gather(
        _child_text(row, elements.seats, default=""),
        _child_text(row, elements.availability, default=""),
        _child_text(row, elements.description),
        _child_text(row, elements.schedule),
        _child_text(row, elements.instructor),
        _child_text(row, elements.room),
        _child_text(row, elements.credits),
    )
    return Course(
        checkbox_index=index,
        availability=parse_availability(availability, seats),
        description=description,
        schedule=schedule,
        room=room,
        instructor=instructor,
        credits=credits,
    )


async def get_cart_courses(page: Page, elements: PageElements) -> List[Course]:
    """Read every course row concurrently; the result keeps listing order.

    ``checkbox_index`` is the row position, which is also the position of the
    row's checkbox among the selection inputs.
    """
    rows = await _query_all(page, elements.course_row)
    try:
        return list(await asyncio.gather(
            *(_read_course(row, index, elements) for index, row in enumerate(rows))
        ))
    except PlaywrightError as exc:
        raise DriverFailure(f"Failed to read course rows: {exc}") from exc


async def _read_result(row: ElementHandle, elements: PageElements) -> RegistrationResult:
    status_html, description = await asyncio.gather(
        _child_html(row, elements.result_status),
        _child_text(row, elements.result_description),
    )
    return RegistrationResult(description=description, status=classify_result(status_html, elements))


async def get_registration_results(page: Page, elements: PageElements) -> List[RegistrationResult]:
    rows = await _query_all(page, elements.results_rows)
    try:
        return list(await asyncio.gather(*(_read_result(row, elements) for row in rows)))
    except PlaywrightError as exc:
        raise DriverFailure(f"Failed to read enrollment results: {exc}") from exc


def summarize(results: List[RegistrationResult]) -> Optional[str]:
    if not results:
        return None
    counts = {}
    for result in results:
        counts[result.status.name.lower()] = counts.get(result.status.name.lower(), 0) + 1
    return ", ".join(f"{count} {name}" for name, count in sorted(counts.items()))
