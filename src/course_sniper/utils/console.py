#!/usr/bin/env python3
"""
███████╗███╗   ██╗██╗██████╗ ███████╗██████╗
██╔════╝████╗  ██║██║██╔══██╗██╔════╝██╔══██╗
███████╗██╔██╗ ██║██║██████╔╝█████╗  ██████╔╝
╚════██║██║╚██╗██║██║██╔═══╝ ██╔══╝  ██╔══██╗
███████║██║ ╚████║██║██║     ███████╗██║  ██║
╚══════╝╚═╝  ╚═══╝╚═╝╚═╝     ╚══════╝╚═╝  ╚═╝
src/course_sniper/utils/console.py
Console prompts and table rendering for the Course Sniper CLI.
"""
from __future__ import annotations

import getpass
import os
import shutil
import sys
import textwrap
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

__all__ = ["PortalConsole", "ConsolePalette"]


@dataclass
class ConsolePalette:
    """Simple ANSI-aware palette used by PortalConsole."""

    reset: str = "\033[0m"
    bold: str = "\033[1m"
    dim: str = "\033[2m"
    cyan: str = "\033[36m"
    blue: str = "\033[34m"
    magenta: str = "\033[35m"
    green: str = "\033[32m"
    yellow: str = "\033[33m"
    red: str = "\033[31m"
    white: str = "\033[97m"

    @property
    def disabled(self) -> bool:
        return bool(os.getenv("NO_COLOR"))

    def apply(self, text: str, *styles: str) -> str:
        if self.disabled or not styles:
            return text
        return f"{''.join(styles)}{text}{self.reset}"


class PortalConsole:
    """Prompts, pickers and tables for the interactive registration flow."""

    _BANNER = [
        "███████╗███╗   ██╗██╗██████╗ ███████╗██████╗ ",
        "██╔════╝████╗  ██║██║██╔══██╗██╔════╝██╔══██╗",
        "███████╗██╔██╗ ██║██║██████╔╝█████╗  ██████╔╝",
        "╚════██║██║╚██╗██║██║██╔═══╝ ██╔══╝  ██╔══██╗",
        "███████║██║ ╚████║██║██║     ███████╗██║  ██║",
        "╚══════╝╚═╝  ╚═══╝╚═╝╚═╝     ╚══════╝╚═╝  ╚═╝",
    ]

    _GRADIENT_COLORS = [
        "\033[38;2;147;51;234m",
        "\033[38;2;168;85;247m",
        "\033[38;2;139;92;246m",
        "\033[38;2;99;102;241m",
        "\033[38;2;79;70;229m",
        "\033[38;2;55;48;163m",
    ]

    def __init__(self, rich_console: Optional[Console] = None) -> None:
        self.palette = ConsolePalette()
        self.width = max(68, min(self._detect_width(), 120))
        self.rich = rich_console or Console(no_color=self.palette.disabled)

    def _detect_width(self) -> int:
        return shutil.get_terminal_size((100, 20)).columns

    def _wrap(self, text: str, *, indent: int = 0) -> str:
        wrapper = textwrap.TextWrapper(
            width=self.width - indent,
            subsequent_indent=" " * indent,
            drop_whitespace=False,
        )
        return "\n".join(wrapper.fill(line) if line.strip() else "" for line in text.splitlines())

    def _rule(self, label: str = "", *, accent: str = "blue", char: str = "═") -> str:
        label_text = f" {label} " if label else ""
        pad_total = max(self.width - len(label_text), 0)
        left = pad_total // 2
        right = pad_total - left
        color = getattr(self.palette, accent, "")
        return self.palette.apply(f"{char * left}{label_text}{char * right}"[: self.width], color)

    def _center_text(self, text: str) -> str:
        stripped = text.rstrip()
        left = max(self.width - len(stripped), 0) // 2
        return " " * left + stripped

    # ------------------------------------------------------------------ output
    def banner(self, subtitle: Optional[str] = None, *, accent: str = "magenta") -> None:
        for i, line in enumerate(self._BANNER):
            centered = self._center_text(line)
            if self.palette.disabled:
                print(centered)
            else:
                color = self._GRADIENT_COLORS[i % len(self._GRADIENT_COLORS)]
                print(f"{color}{self.palette.bold}{centered}{self.palette.reset}")
        if subtitle:
            print(self._rule(subtitle, accent=accent))

    def headline(self, title: str, *, accent: str = "blue") -> None:
        print(self._rule(title, accent=accent))

    def text_block(self, text: str, *, indent: int = 2, tone: Optional[str] = None) -> None:
        payload = self._wrap(text, indent=indent)
        if tone:
            payload = self.palette.apply(payload, getattr(self.palette, tone, ""))
        print(payload)

    def render_table(self, headers: Sequence[str], rows: Iterable[Sequence[str]], *, title: Optional[str] = None) -> None:
        table = Table(*headers, title=title, box=box.ROUNDED, header_style="bold blue")
        for row in rows:
            table.add_row(*(str(cell) for cell in row))
        self.rich.print(table)

    # ------------------------------------------------------------------ input
    def prompt(self, prompt_text: str) -> str:
        """Read one line; EOFError propagates once stdin is closed."""
        prompt = self.palette.apply(f"{prompt_text.strip()} ", self.palette.green, self.palette.bold)
        return input(prompt)

    def prompt_password(self, prompt_text: str = "Password:") -> str:
        """Masked input, asked once (no confirmation)."""
        return getpass.getpass(f"{prompt_text.strip()} ")

    def _print_options(self, title: str, options: Sequence[object]) -> None:
        self.headline(title)
        for idx, label in enumerate(options, start=1):
            print(self.palette.apply(f" {idx}. {label}", self.palette.white))

    def prompt_menu(self, title: str, options: Sequence[object]) -> int:
        """Single choice; returns the 0-based index."""
        self._print_options(title, options)
        while True:
            raw = self.prompt("→ Select an option:").strip()
            if raw.isdecimal() and 1 <= int(raw) <= len(options):
                return int(raw) - 1
            print(self.palette.apply("Invalid choice, try again.", self.palette.yellow))

    def prompt_multi(self, title: str, options: Sequence[object]) -> List[int]:
        """Several choices as comma/space separated numbers; 0-based, in listing order."""
        self._print_options(title, options)
        while True:
            raw = self.prompt("→ Select one or more (e.g. 1,3):")
            picks = parse_multi_choice(raw, len(options))
            if picks:
                return picks
            print(self.palette.apply("Invalid selection, try again.", self.palette.yellow))


def parse_multi_choice(raw: str, count: int) -> List[int]:
    """Parse ``"1, 3 4"`` into sorted unique 0-based indexes; [] if anything is off."""
    tokens = [tok for tok in raw.replace(",", " ").split() if tok]
    if not tokens:
        return []
    picks = set()
    for tok in tokens:
        if not tok.isdecimal():
            return []
        value = int(tok)
        if not 1 <= value <= count:
            return []
        picks.add(value - 1)
    return sorted(picks)


def is_interactive() -> bool:
    return sys.stdin.isatty()
