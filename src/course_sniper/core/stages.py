"""
███████╗███╗   ██╗██╗██████╗ ███████╗██████╗
██╔════╝████╗  ██║██║██╔══██╗██╔════╝██╔══██╗
███████╗██╔██╗ ██║██║██████╔╝█████╗  ██████╔╝
╚════██║██║╚██╗██║██║██╔═══╝ ██╔══╝  ██╔══██╗
███████║██║ ╚████║██║██║     ███████╗██║  ██║
╚══════╝╚═╝  ╚═══╝╚═╝╚═╝     ╚══════╝╚═╝  ╚═╝
src/course_sniper/core/stages.py
Stage machines resolving which page state the portal has reached.

Each stage declares ``PROBES``: an ordered list of ``(outcome, selector
field)`` pairs. Order is priority. An error fragment declared first beats a
stale cart fragment that happens to match in the same tick.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, ClassVar, List, Optional, Sequence, Tuple

from playwright.async_api import ElementHandle, Error as PlaywrightError, Page

from .elements import PageElements
from .poller import Probe, poll_until
from ..utils.logger import debug_detail, logger

DEFAULT_STAGE_TIMEOUT = 120.0


class AuthOutcome(Enum):
    AUTH_SUCCESS = "auth_success"
    AUTH_FAIL = "auth_fail"
    SECOND_FACTOR_REQUIRED = "second_factor_required"


class ChallengeOutcome(Enum):
    TRUSTED = "trusted"
    TIMED_OUT = "timed_out"
    CART = "cart"


class CartOutcome(Enum):
    MULTIPLE_CARTS = "multiple_carts"
    IN_CART = "in_cart"


class StageMachine:
    """Base class: build probes from ``PROBES`` and poll them under one deadline."""

    NAME: ClassVar[str] = "stage"
    PROBES: ClassVar[Sequence[Tuple[Enum, str]]] = ()

    def __init__(self, elements: PageElements, timeout: float = DEFAULT_STAGE_TIMEOUT, **poll_kwargs: Any):
        self.elements = elements
        self.timeout = timeout
        self._poll_kwargs = poll_kwargs

    def probes(self) -> List[Probe]:
        return [
            Probe(outcome=outcome, selector=getattr(self.elements, field), on_match=self._action_for(outcome))
            for outcome, field in self.PROBES
        ]

    def _action_for(self, outcome: Enum):
        return None

    async def before_tick(self, page: Page) -> None:
        return None

    async def run(self, page: Page) -> Enum:
        async def _hook() -> None:
            await self.before_tick(page)

        result = await poll_until(page, self.probes(), self.timeout, before_tick=_hook, **self._poll_kwargs)
        if result.probe.on_match is not None:
            await result.probe.on_match(result.element)
        debug_detail(f"{self.NAME} resolved to {result.outcome.name}")
        return result.outcome


class AuthenticationStage(StageMachine):
    NAME = "authentication"
    PROBES = (
        (AuthOutcome.AUTH_FAIL, "login_error"),
        (AuthOutcome.SECOND_FACTOR_REQUIRED, "duo_waiting"),
        (AuthOutcome.AUTH_SUCCESS, "semester_cart"),
        (AuthOutcome.AUTH_SUCCESS, "course_row"),
    )


def _announce_code(code: str) -> None:
    logger.info("Duo verification code: %s", code)
    logger.info("Enter this code in Duo Mobile to approve the login.")


class SecondFactorStage(StageMachine):
    """Waits on the Duo prompt, surfacing the verification code once."""

    NAME = "second factor"
    PROBES = (
        (ChallengeOutcome.TRUSTED, "duo_trust_browser"),
        (ChallengeOutcome.TIMED_OUT, "duo_time_out_try_again"),
        (ChallengeOutcome.CART, "semester_cart"),
        (ChallengeOutcome.CART, "course_row"),
    )

    def __init__(
        self,
        elements: PageElements,
        timeout: float = DEFAULT_STAGE_TIMEOUT,
        on_code: Optional[Callable[[str], None]] = None,
        **poll_kwargs: Any,
    ):
        super().__init__(elements, timeout, **poll_kwargs)
        self.on_code = on_code or _announce_code
        self.code_announced = False

    def _action_for(self, outcome: Enum):
        if outcome is ChallengeOutcome.TRUSTED:
            return self._trust_browser
        return None

    @staticmethod
    async def _trust_browser(element: ElementHandle) -> None:
        await element.click()

    async def before_tick(self, page: Page) -> None:
        if self.code_announced:
            return
        try:
            element = await page.query_selector(self.elements.duo_verification_code)
            if element is None:
                return
            code = (await element.inner_text() or "").strip()
        except PlaywrightError as exc:
            debug_detail(f"Verification code lookup failed: {exc}")
            return
        if code:
            self.code_announced = True
            self.on_code(code)


class CartStage(StageMachine):
    NAME = "cart resolution"
    PROBES = (
        (CartOutcome.MULTIPLE_CARTS, "semester_cart"),
        (CartOutcome.IN_CART, "course_row"),
    )
