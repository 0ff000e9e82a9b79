"""
███████╗███╗   ██╗██╗██████╗ ███████╗██████╗
██╔════╝████╗  ██║██║██╔══██╗██╔════╝██╔══██╗
███████╗██╔██╗ ██║██║██████╔╝█████╗  ██████╔╝
╚════██║██║╚██╗██║██║██╔═══╝ ██╔══╝  ██╔══██╗
███████║██║ ╚████║██║██║     ███████╗██║  ██║
╚══════╝╚═╝  ╚═══╝╚═╝╚═╝     ╚══════╝╚═╝  ╚═╝
src/course_sniper/core/enroll.py
Enrollment transaction: UI clicks or a direct two-step form POST.

Both paths leave the cart in the same state and are followed by the same
results scrape. Nothing here is retried: each request may already have
registered the student.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

from playwright.async_api import ElementHandle, Error as PlaywrightError, Page

from .elements import PageElements
from .errors import DriverFailure, EnrollmentError, SniperError, StateTokenParseFailure
from .models import Course
from .poller import wait_for_element, wait_for_elements
from ..utils.logger import debug_detail, logger, timestamp

STATE_TOKEN_RE = re.compile(r"""name=['"]ICStateNum['"]\s*value=['"](\d+)""")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Snapshot of the PeopleSoft form as it would be submitted right now.
SERIALIZE_FORM_JS = """
(selector) => {
    const form = document.querySelector(selector) || document.forms[0];
    if (!form) return null;
    const fields = [];
    for (const [key, value] of new FormData(form).entries()) {
        if (typeof value === 'string') fields.push([key, value]);
    }
    return {action: form.action, fields: fields};
}
"""


class EnrollMethod(Enum):
    UI = "Legacy (click buttons)"
    DIRECT = "Fast (direct form POST)"


@dataclass
class TransactionResult:
    ok: bool
    detail: str
    error: Optional[SniperError] = None


class FormState:
    """Ordered form fields with ``URLSearchParams.set`` semantics."""

    def __init__(self, action: str, fields: Iterable[Sequence[str]]):
        self.action = action
        self._fields: List[Tuple[str, str]] = [(str(k), str(v)) for k, v in fields]

    def get(self, key: str) -> Optional[str]:
        for name, value in self._fields:
            if name == key:
                return value
        return None

    def set(self, key: str, value: Any) -> None:
        """Replace the first ``key`` in place, drop any duplicates, or append."""
        value = str(value)
        updated: List[Tuple[str, str]] = []
        replaced = False
        for name, current in self._fields:
            if name != key:
                updated.append((name, current))
            elif not replaced:
                updated.append((name, value))
                replaced = True
        if not replaced:
            updated.append((key, value))
        self._fields = updated

    def encode(self) -> str:
        return urlencode(self._fields)

    def __len__(self) -> int:
        return len(self._fields)


def extract_state_token(body: str) -> Optional[str]:
    match = STATE_TOKEN_RE.search(body or "")
    return match.group(1) if match else None


async def _click(element: ElementHandle, label: str) -> None:
    try:
        await element.click()
    except PlaywrightError as exc:
        raise DriverFailure(f"Clicking {label} failed: {exc}") from exc


def _selected_indexes(selected: Iterable[Course]) -> List[int]:
    return sorted({course.checkbox_index for course in selected})


async def select_courses(page: Page, elements: PageElements, selected: Iterable[Course], timeout: float) -> List[int]:
    """Tick the checkbox at each selected course's position.

    Positions are re-derived from the (possibly reloaded) page, so every index
    is range-checked before the first click.
    """
    wanted = _selected_indexes(selected)
    checkboxes = await wait_for_elements(page, elements.checkboxes, timeout)
    out_of_range = [index for index in wanted if index >= len(checkboxes)]
    if out_of_range:
        raise EnrollmentError(
            f"Selected rows {out_of_range} have no checkbox; the page lists {len(checkboxes)}"
        )
    for index in wanted:
        await _click(checkboxes[index], f"checkbox {index}")
    debug_detail(f"Checked positions {wanted}")
    return wanted


async def enroll_via_ui(page: Page, elements: PageElements, selected: Iterable[Course], timeout: float) -> None:
    await select_courses(page, elements, selected, timeout)

    enroll = await wait_for_element(page, elements.enroll_button, timeout)
    await _click(enroll, "Enroll")
    logger.info("Enroll clicked at %s", timestamp())

    confirm = await wait_for_element(page, elements.enroll_confirm_button, timeout)
    await _click(confirm, "Confirm")
    logger.info("Confirm clicked at %s", timestamp())


async def validate_via_ui(page: Page, elements: PageElements, selected: Iterable[Course], timeout: float) -> None:
    """Dry run offered by the portal: validates the selection without enrolling."""
    await select_courses(page, elements, selected, timeout)
    validate = await wait_for_element(page, elements.validate_button, timeout)
    await _click(validate, "Validate")
    logger.info("Validation clicked at %s", timestamp())


async def read_form(page: Page, elements: PageElements) -> FormState:
    try:
        snapshot: Optional[Dict[str, Any]] = await page.evaluate(SERIALIZE_FORM_JS, elements.form)
    except PlaywrightError as exc:
        raise DriverFailure(f"Could not serialize the cart form: {exc}") from exc
    if not snapshot or not snapshot.get("action"):
        raise EnrollmentError("Cart form not found on the current page")
    return FormState(snapshot["action"], snapshot.get("fields") or [])


async def _post_form(page: Page, form: FormState, label: str) -> str:
    try:
        response = await page.request.post(
            form.action,
            data=form.encode(),
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
        body = await response.text()
    except PlaywrightError as exc:
        raise DriverFailure(f"{label} request failed: {exc}") from exc
    if not response.ok:
        logger.warning("%s request returned HTTP %s", label, response.status)
    debug_detail(f"{label} response: HTTP {response.status}, {len(body)} bytes")
    return body


async def enroll_via_form(page: Page, elements: PageElements, selected: Iterable[Course]) -> None:
    """Replay Enroll then Confirm as raw form posts, threading ICStateNum."""
    form = await read_form(page, elements)
    for index in _selected_indexes(selected):
        form.set(elements.select_field(index), elements.select_value)
    form.set(elements.action_field, elements.enroll_action)
    form.set("ICXPos", 0)
    form.set("ICYPos", 0)

    logger.info("Direct form: sending enroll request at %s", timestamp())
    enroll_body = await _post_form(page, form, "Enroll")

    token = extract_state_token(enroll_body)
    if token is None:
        raise StateTokenParseFailure("Enroll response carried no ICStateNum; confirmation not sent")

    form.set(elements.state_field, token)
    form.set(elements.action_field, elements.confirm_action)
    await _post_form(page, form, "Confirm")
    logger.info("Direct form: confirm completed at %s", timestamp())


class EnrollmentTransaction:
    """Run one enrollment attempt with the operator's chosen method."""

    def __init__(self, page: Page, elements: PageElements, method: EnrollMethod, timeout: float):
        self.page = page
        self.elements = elements
        self.method = method
        self.timeout = timeout

    async def run(self, selected: Sequence[Course]) -> TransactionResult:
        try:
            if self.method is EnrollMethod.DIRECT:
                await enroll_via_form(self.page, self.elements, selected)
                # results only render after a fresh load
                try:
                    await self.page.reload()
                except PlaywrightError as exc:
                    raise DriverFailure(f"Reload after direct enrollment failed: {exc}") from exc
            else:
                await enroll_via_ui(self.page, self.elements, selected, self.timeout)
        except SniperError as exc:
            return TransactionResult(ok=False, detail=str(exc), error=exc)
        return TransactionResult(ok=True, detail=f"Submitted {len(selected)} course(s) via {self.method.name.lower()} path")
