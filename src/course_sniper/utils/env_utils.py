import os
from typing import Optional

TRUTHY = ("1", "true", "True", "yes", "on")


def load_env(path: str = ".env") -> None:
    """Minimal .env loader to populate env defaults (no overrides)."""
    if not os.path.exists(path):
        return
    with open(path, "r", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            k, v = line.split('=', 1)
            k = k.strip(); v = v.strip().strip('"').strip("'")
            if k and (k not in os.environ):
                os.environ[k] = v


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw in TRUTHY


def env_int(name: str, default: int) -> int:
    """Read a non-negative int from the environment, falling back on junk."""
    try:
        val = int(os.getenv(name, str(default)))
        return max(val, 0)
    except ValueError:
        return default


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()
