"""
███████╗███╗   ██╗██╗██████╗ ███████╗██████╗
██╔════╝████╗  ██║██║██╔══██╗██╔════╝██╔══██╗
███████╗██╔██╗ ██║██║██████╔╝█████╗  ██████╔╝
╚════██║██║╚██╗██║██║██╔═══╝ ██╔══╝  ██╔══██╗
███████║██║ ╚████║██║██║     ███████╗██║  ██║
╚══════╝╚═╝  ╚═══╝╚═╝╚═╝     ╚══════╝╚═╝  ╚═╝
src/course_sniper/core/main.py
Command-line entry point for Course Sniper.
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError

from ..config.settings import SniperConfig
from ..utils.console import PortalConsole, is_interactive
from ..utils.logger import logger, progress, set_log_profile, step, success
from .browser import BrowserConfig, BrowserSession
from .errors import SniperError
from .workflow import RegistrationWorkflow


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="course-sniper",
        description="Precision course registration for the PeopleSoft shopping cart",
    )
    parser.add_argument("-a", "--attach", "--headed", dest="headed", action="store_true",
                        help="Show the browser window (sets HEADLESS=0)")
    parser.add_argument("-d", "--debug", action="store_true",
                        help="Verbose logging and a full-page screenshot on error")
    parser.add_argument("--portal", help="Shopping cart URL (default: PORTAL_URL or the Emory cart)")
    parser.add_argument("--channel", help="Chromium channel: chrome|chrome-beta|msedge")
    parser.add_argument("--timeout", type=int, help="Seconds to wait for each page state (default 120)")
    return parser


def apply_args(config: SniperConfig, args: argparse.Namespace) -> SniperConfig:
    if args.headed:
        config.headed = True
    if args.debug:
        config.debug = True
    if args.portal:
        config.portal_url = args.portal
    if args.channel:
        config.channel = args.channel
    if args.timeout:
        config.stage_timeout = args.timeout
    return config


async def run(config: SniperConfig, console: PortalConsole) -> int:
    progress("Enabling browser...")
    browser_config = BrowserConfig(
        headed=config.headed,
        channel=config.channel,
        timeout_ms=config.stage_timeout * 1000,
    )
    async with BrowserSession(browser_config) as session:
        success("Browser enabled.")
        workflow = RegistrationWorkflow(
            config.page_elements(),
            console,
            timeout=config.stage_timeout,
            username=config.username,
            password=config.password,
        )
        try:
            completed = await workflow.run(session.page)
        except (SniperError, PlaywrightError) as exc:
            logger.error("Registration aborted: %s", exc)
            if config.debug:
                shot = await session.save_debug_screenshot(config.debug_dir)
                if shot:
                    logger.info("Saved debug screenshot to %s", shot)
            return 1
        except EOFError:
            logger.error("Input closed before the workflow finished; aborting.")
            return 1
        return 0 if completed else 1


def main(argv: Optional[List[str]] = None) -> int:
    config = SniperConfig.from_env()
    args = build_parser().parse_args(argv)
    config = apply_args(config, args)
    # .env may set LOG_PROFILE after the logger was configured
    set_log_profile("debug" if config.debug else (os.getenv("LOG_PROFILE") or "user"))

    console = PortalConsole()
    console.banner("Course Sniper")
    console.text_block("Welcome to course-sniper, the precision registration tool.", indent=4, tone="dim")
    if not is_interactive():
        logger.warning("stdin is not a terminal; prompts will read piped input.")

    step("Starting registration session")
    try:
        code = asyncio.run(run(config, console))
    except KeyboardInterrupt:
        logger.warning("Interrupted.")
        return 130
    if code == 0:
        success("Workflow completed")
    return code


if __name__ == "__main__":
    sys.exit(main())
