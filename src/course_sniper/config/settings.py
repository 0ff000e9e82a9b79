"""Runtime configuration assembled from the environment (and `.env`)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..core.elements import DEFAULT_PORTAL_URL, PageElements
from ..utils.env_utils import env_flag, env_int, env_str, load_env


@dataclass
class SniperConfig:
    portal_url: str = DEFAULT_PORTAL_URL
    headed: bool = False
    channel: Optional[str] = None
    stage_timeout: int = 120
    username: Optional[str] = None
    password: Optional[str] = None
    debug: bool = False
    debug_dir: Path = field(default_factory=lambda: Path("."))

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "SniperConfig":
        load_env(env_file or os.getenv("ENV_FILE", ".env"))
        return cls(
            portal_url=env_str("PORTAL_URL", DEFAULT_PORTAL_URL),
            # HEADLESS=0 opens a visible window
            headed=not env_flag("HEADLESS", default=True),
            channel=env_str("BROWSER_CHANNEL"),
            stage_timeout=env_int("STAGE_TIMEOUT", 120) or 120,
            username=env_str("SNIPER_USERNAME"),
            password=os.getenv("SNIPER_PASSWORD") or None,
            debug=(os.getenv("LOG_PROFILE") or "").lower() == "debug",
            debug_dir=Path(env_str("DEBUG_DIR", ".")),
        )

    def page_elements(self) -> PageElements:
        return PageElements(page_url=self.portal_url)
