import os
from pathlib import Path

import pytest

from course_sniper.config.settings import SniperConfig
from course_sniper.core.elements import DEFAULT_PORTAL_URL
from course_sniper.core.main import apply_args, build_parser
from course_sniper.utils.console import PortalConsole, parse_multi_choice
from course_sniper.utils.env_utils import env_flag, env_int, load_env


@pytest.fixture
def clean_env(monkeypatch):
    env = {}
    monkeypatch.setattr(os, "environ", env)
    return env


@pytest.mark.parametrize(
    "raw,count,expected",
    [
        ("1", 3, [0]),
        ("3, 1", 3, [0, 2]),
        ("2 2,2", 3, [1]),
        ("1 4", 3, []),
        ("0", 3, []),
        ("a,1", 3, []),
        ("", 3, []),
    ],
)
def test_parse_multi_choice(raw, count, expected):
    assert parse_multi_choice(raw, count) == expected


def test_prompt_menu_retries_until_valid(monkeypatch, capsys):
    answers = iter(["9", "x", "2"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    choice = PortalConsole().prompt_menu("Select a cart:", ["Fall", "Spring"])

    assert choice == 1
    assert capsys.readouterr().out.count("Invalid choice") == 2


def test_prompt_multi_returns_zero_based_indexes(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt="": "2,1")

    assert PortalConsole().prompt_multi("Select courses:", ["a", "b", "c"]) == [0, 1]


def test_defaults_without_environment(clean_env, tmp_path):
    config = SniperConfig.from_env(str(tmp_path / "missing.env"))

    assert config.portal_url == DEFAULT_PORTAL_URL
    assert config.headed is False
    assert config.stage_timeout == 120
    assert config.username is None
    assert config.debug is False


def test_env_file_is_loaded_without_overriding(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# sniper\n"
        "HEADLESS=0\n"
        "PORTAL_URL='https://portal.example.edu/cart'\n"
        "STAGE_TIMEOUT=45\n"
        "SNIPER_USERNAME=from-file\n"
        "LOG_PROFILE=debug\n"
        "DEBUG_DIR=shots\n",
        encoding="utf-8",
    )
    clean_env["SNIPER_USERNAME"] = "from-shell"

    config = SniperConfig.from_env(str(env_file))

    assert config.headed is True
    assert config.portal_url == "https://portal.example.edu/cart"
    assert config.stage_timeout == 45
    assert config.username == "from-shell"
    assert config.debug is True
    assert config.debug_dir == Path("shots")
    assert config.page_elements().page_url == config.portal_url


def test_env_helpers_fall_back_on_junk(clean_env):
    clean_env.update({"STAGE_TIMEOUT": "soon", "HEADLESS": "nah"})

    assert env_int("STAGE_TIMEOUT", 120) == 120
    assert env_flag("HEADLESS", default=True) is False
    assert env_flag("MISSING", default=True) is True


def test_load_env_ignores_missing_file(clean_env, tmp_path):
    load_env(str(tmp_path / "nope"))

    assert clean_env == {}


def test_cli_flags_override_environment():
    config = SniperConfig()
    args = build_parser().parse_args(["--attach", "-d", "--timeout", "30", "--channel", "msedge"])

    apply_args(config, args)

    assert config.headed is True
    assert config.debug is True
    assert config.stage_timeout == 30
    assert config.channel == "msedge"
    assert config.portal_url == DEFAULT_PORTAL_URL


def test_headed_alias():
    assert build_parser().parse_args(["--headed"]).headed is True


@pytest.mark.parametrize("ask", [
    lambda c: c.prompt_menu("Select action:", ["Validate", "Enroll"]),
    lambda c: c.prompt_multi("Select courses:", ["a", "b"]),
    lambda c: c.prompt("Registration time (e.g. 9:30 AM):"),
])
def test_closed_stdin_ends_prompting(monkeypatch, ask):
    calls = []

    def closed(prompt=""):
        calls.append(prompt)
        raise EOFError

    monkeypatch.setattr("builtins.input", closed)

    with pytest.raises(EOFError):
        ask(PortalConsole())

    assert len(calls) == 1


def test_prompt_menu_rejects_non_ascii_digits(monkeypatch):
    answers = iter(["²", "1"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    assert PortalConsole().prompt_menu("Select a cart:", ["Fall"]) == 0
    assert parse_multi_choice("²", 3) == []


def test_prompt_menu_has_no_exit_option(monkeypatch):
    answers = iter(["0", "2"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    assert PortalConsole().prompt_menu("Select action:", ["Validate", "Enroll"]) == 1
