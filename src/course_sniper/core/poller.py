"""
███████╗███╗   ██╗██╗██████╗ ███████╗██████╗
██╔════╝████╗  ██║██║██╔══██╗██╔════╝██╔══██╗
███████╗██╔██╗ ██║██║██████╔╝█████╗  ██████╔╝
╚════██║██║╚██╗██║██║██╔═══╝ ██╔══╝  ██╔══██╗
███████║██║ ╚████║██║██║     ███████╗██║  ██║
╚══════╝╚═╝  ╚═══╝╚═╝╚═╝     ╚══════╝╚═╝  ╚═╝
src/course_sniper/core/poller.py
Racing-selector polling against a single Playwright page.

Every tick checks each probe once, in declared order, against the shared
page. Probes never run concurrently: the first declared probe that is
present wins, regardless of how quickly the others would have answered.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from playwright.async_api import ElementHandle, Error as PlaywrightError, Page

from .errors import DeadlineExceeded, DriverFailure
from ..utils.logger import debug_detail

TICK_INTERVAL = 0.1

ElementAction = Callable[[ElementHandle], Awaitable[None]]
TickHook = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class Probe:
    """A presence check for one candidate page state."""

    outcome: Any
    selector: str
    on_match: Optional[ElementAction] = None


@dataclass(frozen=True)
class PollResult:
    probe: Probe
    element: ElementHandle

    @property
    def outcome(self) -> Any:
        return self.probe.outcome


async def poll_until(
    page: Page,
    probes: Sequence[Probe],
    timeout: float,
    *,
    interval: float = TICK_INTERVAL,
    before_tick: Optional[TickHook] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> PollResult:
    """Return the first probe (in declared order) whose selector is present.

    Raises ``DeadlineExceeded`` when nothing appeared within ``timeout``
    seconds, or ``DriverFailure`` when a probe kept failing with a driver
    error up to the deadline or the page was closed.
    """
    if not probes:
        raise ValueError("poll_until needs at least one probe")

    start = clock()
    deadline = start + timeout
    last_error: Optional[PlaywrightError] = None
    ticks = 0

    while True:
        now = clock()
        if now >= deadline:
            waited = now - start
            selectors = ", ".join(p.selector for p in probes)
            if last_error is not None:
                raise DriverFailure(
                    f"Driver error while waiting {waited:.1f}s for [{selectors}]: {last_error}"
                ) from last_error
            raise DeadlineExceeded(
                f"None of [{selectors}] appeared within {timeout:.1f}s",
                waited=waited,
            )

        ticks += 1
        if before_tick is not None:
            await before_tick()

        for probe in probes:
            try:
                element = await page.query_selector(probe.selector)
            except PlaywrightError as exc:
                # Navigations tear down the execution context mid-query; only
                # a closed page is beyond recovery.
                if page.is_closed():
                    raise DriverFailure(f"Page closed while probing {probe.selector}") from exc
                last_error = exc
                continue
            if element is not None:
                debug_detail(f"Probe {probe.selector!r} matched after {ticks} tick(s)")
                return PollResult(probe=probe, element=element)

        remaining = deadline - clock()
        await sleep(min(interval, max(remaining, 0.0)))


async def wait_for_element(page: Page, selector: str, timeout: float, **kwargs: Any) -> ElementHandle:
    """Wait for a single selector; the element is returned."""
    result = await poll_until(page, [Probe(outcome=selector, selector=selector)], timeout, **kwargs)
    return result.element


async def wait_for_elements(page: Page, selector: str, timeout: float, **kwargs: Any) -> List[ElementHandle]:
    """Wait until ``selector`` matches at least once, then return every match in DOM order."""
    await wait_for_element(page, selector, timeout, **kwargs)
    try:
        return await page.query_selector_all(selector)
    except PlaywrightError as exc:
        raise DriverFailure(f"Failed to list {selector}: {exc}") from exc
