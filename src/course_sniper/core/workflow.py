"""
███████╗███╗   ██╗██╗██████╗ ███████╗██████╗
██╔════╝████╗  ██║██║██╔══██╗██╔════╝██╔══██╗
███████╗██╔██╗ ██║██║██████╔╝█████╗  ██████╔╝
╚════██║██║╚██╗██║██║██╔═══╝ ██╔══╝  ██╔══██╗
███████║██║ ╚████║██║██║     ███████╗██║  ██║
╚══════╝╚═╝  ╚═══╝╚═╝╚═╝     ╚══════╝╚═╝  ╚═╝
src/course_sniper/core/workflow.py
Interactive registration flow: login, Duo, cart, course pick, strike.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from playwright.async_api import Page

from .elements import PageElements
from .enroll import EnrollMethod, EnrollmentTransaction, validate_via_ui
from .models import (
    COURSE_TABLE_HEADERS,
    RESULT_TABLE_HEADERS,
    Course,
    RegistrationResult,
    RegistrationTime,
)
from .poller import wait_for_element
from .scrape import get_cart_courses, get_registration_results, get_shopping_carts, summarize
from .stages import (
    AuthenticationStage,
    AuthOutcome,
    CartOutcome,
    CartStage,
    ChallengeOutcome,
    SecondFactorStage,
)
from .trigger import DeadlineTrigger
from ..utils.console import PortalConsole
from ..utils.logger import logger, spinner, step, timestamp

ACTIONS = ["Validate", "Enroll"]


class RegistrationWorkflow:
    """Drive one registration attempt against an already opened page."""

    def __init__(
        self,
        elements: PageElements,
        console: PortalConsole,
        *,
        timeout: float = 120.0,
        username: Optional[str] = None,
        password: Optional[str] = None,
        trigger: Optional[DeadlineTrigger] = None,
        poll_kwargs: Optional[Dict[str, Any]] = None,
    ):
        self.elements = elements
        self.console = console
        self.timeout = timeout
        self.username = username
        self.password = password
        self.trigger = trigger or DeadlineTrigger()
        self._poll_kwargs = poll_kwargs or {}

    async def _ask(self, fn, *args):
        # prompts block on stdin; keep the event loop serving the browser meanwhile
        return await asyncio.to_thread(fn, *args)

    async def run(self, page: Page) -> bool:
        """Return False when the portal refused us (bad credentials, Duo timeout)."""
        await page.goto(self.elements.page_url)
        await self.login(page)
        if not await self.authenticate(page):
            return False
        await self.open_cart(page)

        courses = await self.load_courses(page)
        if not courses:
            logger.warning("The shopping cart is empty; nothing to register.")
            return True
        selected = await self.pick_courses(courses)

        action = await self._ask(self.console.prompt_menu, "Select action:", ACTIONS)
        if ACTIONS[action] == "Enroll":
            method_index = await self._ask(
                self.console.prompt_menu, "Choose enrollment method:", [m.value for m in EnrollMethod]
            )
            method = list(EnrollMethod)[method_index]
            target = await self.pick_time()
            results = await self.enroll(page, selected, method, target)
            self.show_results(results, "enrollment")
        else:
            results = await self.validate(page, selected)
            self.show_results(results, "validation")
        return True

    async def login(self, page: Page) -> None:
        username = self.username or await self._ask(self.console.prompt, "Username:")
        password = self.password or await self._ask(self.console.prompt_password, "Password:")

        user_input = await wait_for_element(page, self.elements.username_input, self.timeout, **self._poll_kwargs)
        await user_input.click()
        await user_input.fill(username)
        pwd_input = await wait_for_element(page, self.elements.passwd_input, self.timeout, **self._poll_kwargs)
        await pwd_input.click()
        await pwd_input.fill(password)
        await pwd_input.press("Enter")

    async def authenticate(self, page: Page) -> bool:
        async with spinner("Logging in with credentials...") as status:
            outcome = await AuthenticationStage(self.elements, self.timeout, **self._poll_kwargs).run(page)
            if outcome is AuthOutcome.AUTH_FAIL:
                status.update("Invalid credentials.")
                status.fail()
                return False
            if outcome is AuthOutcome.AUTH_SUCCESS:
                status.succeed("Authenticated.")
                return True
            status.succeed("Duo authentication required.")

        async with spinner("Waiting for Duo confirmation...") as status:
            def _show_code(code: str) -> None:
                status.note(f"Duo verification code: {code}")
                status.note("Enter this code in Duo Mobile to approve the login.")

            stage = SecondFactorStage(self.elements, self.timeout, on_code=_show_code, **self._poll_kwargs)
            outcome = await stage.run(page)
            if outcome is ChallengeOutcome.TIMED_OUT:
                status.update("Duo authentication timed out.")
                status.fail()
                return False
            status.succeed("Authenticated.")
        return True

    async def open_cart(self, page: Page) -> None:
        async with spinner("Looking for shopping cart...") as status:
            outcome = await CartStage(self.elements, self.timeout, **self._poll_kwargs).run(page)
            if outcome is CartOutcome.IN_CART:
                status.succeed("Entered shopping cart.")
                return
            carts = await get_shopping_carts(page, self.elements)
            status.succeed(f"Found {len(carts)} shopping carts.")

        choice = await self._ask(self.console.prompt_menu, "Select a cart:", carts)
        await carts[choice].element.click()

    async def load_courses(self, page: Page) -> List[Course]:
        async with spinner("Fetching courses in cart...") as status:
            await wait_for_element(page, self.elements.course_row, self.timeout, **self._poll_kwargs)
            courses = await get_cart_courses(page, self.elements)
            status.succeed(f"Found {len(courses)} courses.")
        self.console.render_table(COURSE_TABLE_HEADERS, (course.table_row() for course in courses))
        return courses

    async def pick_courses(self, courses: List[Course]) -> List[Course]:
        picks = await self._ask(self.console.prompt_multi, "Select courses:", courses)
        return [courses[i] for i in picks]

    async def pick_time(self) -> RegistrationTime:
        while True:
            raw = await self._ask(self.console.prompt, "Registration time (e.g. 9:30 AM):")
            try:
                return RegistrationTime.parse(raw)
            except ValueError as exc:
                logger.warning(str(exc))

    async def enroll(
        self,
        page: Page,
        selected: List[Course],
        method: EnrollMethod,
        target: RegistrationTime,
    ) -> List[RegistrationResult]:
        async with spinner(f"Waiting for registration time: {target}...") as status:
            await self.trigger.wait_until(target)
            status.succeed(f"Reloaded for registration at {timestamp()}.")

        await page.reload()
        logger.info("Page finished loading at %s", timestamp())

        step(f"Enrolling {len(selected)} course(s) via {method.value}")
        result = await EnrollmentTransaction(page, self.elements, method, self.timeout).run(selected)
        if not result.ok:
            logger.error("Enrollment failed: %s", result.detail)
            raise result.error
        logger.info(result.detail)
        return await self.collect_results(page, "enrollment")

    async def validate(self, page: Page, selected: List[Course]) -> List[RegistrationResult]:
        async with spinner("Selecting courses...") as status:
            await validate_via_ui(page, self.elements, selected, self.timeout)
            status.succeed("Courses selected.")
        return await self.collect_results(page, "validation")

    async def collect_results(self, page: Page, kind: str) -> List[RegistrationResult]:
        async with spinner(f"Waiting for {kind} results...") as status:
            await wait_for_element(page, self.elements.results_rows, self.timeout, **self._poll_kwargs)
            results = await get_registration_results(page, self.elements)
            status.succeed(f"Found {len(results)} {kind} results.")
        return results

    def show_results(self, results: List[RegistrationResult], kind: str) -> None:
        self.console.render_table(RESULT_TABLE_HEADERS, (r.table_row() for r in results), title=f"{kind.title()} results")
        summary = summarize(results)
        if summary:
            logger.info("Summary: %s", summary)
