"""Precision course registration for the PeopleSoft shopping cart."""

from .core.elements import PageElements
from .core.enroll import EnrollMethod, EnrollmentTransaction, TransactionResult
from .core.errors import DeadlineExceeded, DriverFailure, EnrollmentError, SniperError, StateTokenParseFailure
from .core.models import Course, RegistrationResult, RegistrationStatus, RegistrationTime
from .core.poller import PollResult, Probe, poll_until
from .core.stages import AuthenticationStage, CartStage, SecondFactorStage
from .core.trigger import DeadlineTrigger

__version__ = "0.1.0"

__all__ = [
    "AuthenticationStage",
    "CartStage",
    "Course",
    "DeadlineExceeded",
    "DeadlineTrigger",
    "DriverFailure",
    "EnrollMethod",
    "EnrollmentError",
    "EnrollmentTransaction",
    "PageElements",
    "PollResult",
    "Probe",
    "RegistrationResult",
    "RegistrationStatus",
    "RegistrationTime",
    "SecondFactorStage",
    "SniperError",
    "StateTokenParseFailure",
    "TransactionResult",
    "poll_until",
]
