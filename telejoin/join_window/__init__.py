"""Join-window evaluation for telehealth appointments."""

from .evaluator import evaluate_join_window, is_within_join_window, minutes_until
from .opener import BrowserOpener, JoinTargetOpener, open_join_target
from .platforms import MeetingPlatform, detect_platform
from .records import appointment_from_record, parse_timestamp
from .types import Appointment, AppointmentMode, JoinDecision, JoinState, JoinTarget

__all__ = [
    "Appointment",
    "AppointmentMode",
    "BrowserOpener",
    "JoinDecision",
    "JoinState",
    "JoinTarget",
    "JoinTargetOpener",
    "MeetingPlatform",
    "appointment_from_record",
    "detect_platform",
    "evaluate_join_window",
    "is_within_join_window",
    "minutes_until",
    "open_join_target",
    "parse_timestamp",
]
