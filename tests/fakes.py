"""In-memory stand-ins for the Playwright page, elements and clocks."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional


class FakeElement:
    def __init__(self, text: str = "", html: str = "", children: Optional[Dict[str, "FakeElement"]] = None,
                 delay: float = 0.0, name: str = ""):
        self.text = text
        self.html = html
        self.children = children or {}
        self.delay = delay
        self.name = name
        self.clicks = 0
        self.filled: List[str] = []
        self.pressed: List[str] = []
        self.on_click: Optional[Callable[[], None]] = None

    async def query_selector(self, selector: str):
        return self.children.get(selector)

    async def inner_text(self) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.text

    async def inner_html(self) -> str:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.html

    async def click(self) -> None:
        self.clicks += 1
        if self.on_click:
            self.on_click()

    async def fill(self, value: str) -> None:
        self.filled.append(value)

    async def press(self, key: str) -> None:
        self.pressed.append(key)


class FakeResponse:
    def __init__(self, body: str, status: int = 200):
        self._body = body
        self.status = status

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def text(self) -> str:
        return self._body


class FakeRequest:
    def __init__(self, bodies: List[str]):
        self._bodies = list(bodies)
        self.posts: List[Dict[str, object]] = []

    async def post(self, url: str, data: str = "", headers: Optional[Dict[str, str]] = None):
        self.posts.append({"url": url, "data": data, "headers": headers or {}})
        return FakeResponse(self._bodies.pop(0))


class FakePage:
    """Selector -> element(s) map with failure injection and call logging."""

    def __init__(self, elements: Optional[Dict[str, FakeElement]] = None,
                 lists: Optional[Dict[str, List[FakeElement]]] = None):
        self.elements: Dict[str, FakeElement] = dict(elements or {})
        self.lists: Dict[str, List[FakeElement]] = dict(lists or {})
        self.errors: Dict[str, Exception] = {}
        self.closed = False
        self.queries: List[str] = []
        self.list_queries: List[str] = []
        self.reloads = 0
        self.visited: List[str] = []
        self.form_snapshot: Optional[dict] = None
        self.evaluated: List[tuple] = []
        self.request = FakeRequest([])

    async def query_selector(self, selector: str):
        self.queries.append(selector)
        if selector in self.errors:
            raise self.errors[selector]
        if selector in self.elements:
            return self.elements[selector]
        items = self.lists.get(selector)
        return items[0] if items else None

    async def query_selector_all(self, selector: str):
        self.list_queries.append(selector)
        if selector in self.lists:
            return list(self.lists[selector])
        if selector in self.elements:
            return [self.elements[selector]]
        return []

    def is_closed(self) -> bool:
        return self.closed

    async def goto(self, url: str) -> None:
        self.visited.append(url)

    async def reload(self) -> None:
        self.reloads += 1

    async def evaluate(self, script: str, arg=None):
        self.evaluated.append((script, arg))
        return self.form_snapshot


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []
        self.hooks: List[Callable[[float], None]] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        for hook in self.hooks:
            hook(self.now)


class FakeWallClock:
    """Datetime clock: every read advances by ``tick``, sleeps jump ahead."""

    def __init__(self, start: datetime, tick: timedelta = timedelta(milliseconds=5)):
        self.now = start
        self.tick = tick
        self.sleeps: List[float] = []

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.tick
        return current

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += timedelta(seconds=seconds)


class FakeConsole:
    """Scripted answers for the PortalConsole prompts."""

    def __init__(self, menu_answers=(), multi_answers=(), text_answers=()):
        self.menu_answers = list(menu_answers)
        self.multi_answers = list(multi_answers)
        self.text_answers = list(text_answers)
        self.calls: List[tuple] = []
        self.tables: List[tuple] = []

    def prompt(self, prompt_text: str) -> str:
        self.calls.append(("prompt", prompt_text))
        return self.text_answers.pop(0)

    def prompt_password(self, prompt_text: str = "Password:") -> str:
        self.calls.append(("prompt_password", prompt_text))
        return self.text_answers.pop(0)

    def prompt_menu(self, title, options):
        self.calls.append(("prompt_menu", title, list(options)))
        return self.menu_answers.pop(0)

    def prompt_multi(self, title, options):
        self.calls.append(("prompt_multi", title, list(options)))
        return self.multi_answers.pop(0)

    def render_table(self, headers, rows, *, title=None):
        self.tables.append((list(headers), [list(r) for r in rows]))
