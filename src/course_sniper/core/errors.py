"""Error taxonomy shared by the poller, the stage machines and the enrollment paths."""

from __future__ import annotations

from typing import Optional


class SniperError(RuntimeError):
    """Base class for failures that end the registration workflow."""


class DriverFailure(SniperError):
    """The browser driver itself failed (session lost, script error, transport error)."""


class DeadlineExceeded(SniperError):
    """Nothing the caller was waiting for appeared before the deadline."""

    def __init__(self, message: str, *, waited: Optional[float] = None):
        super().__init__(message)
        self.waited = waited


class StateTokenParseFailure(SniperError):
    """The enroll response carried no ICStateNum; confirming would corrupt the session."""


class EnrollmentError(SniperError):
    """The enrollment request could not be built from the current page."""
