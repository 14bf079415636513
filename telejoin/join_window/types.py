"""Shared types for the join-window evaluator."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .platforms import MeetingPlatform


class AppointmentMode(Enum):
    """How the consultation takes place."""
    VIDEO = "video"
    PHONE = "phone"
    IN_PERSON = "in_person"

    @classmethod
    def parse(cls, value) -> Optional["AppointmentMode"]:
        """Map a stored mode string to a member, or None when unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower().replace("-", "_").replace(" ", "_")
        for mode in cls:
            if mode.value == normalized:
                return mode
        return None


class JoinState(Enum):
    """What the join affordance should show."""
    NOT_APPLICABLE = "not_applicable"            # Render nothing
    PHONE_INFORMATIONAL = "phone_informational"  # "Doctor will call you"
    VIDEO_PENDING = "video_pending"              # Disabled, "available N min before"
    VIDEO_ACTIONABLE = "video_actionable"        # Enabled join button


@dataclass(frozen=True)
class JoinTarget:
    """The doctor's meeting room: a join URI and an optional passcode."""
    uri: str
    passcode: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        return isinstance(self.uri, str) and bool(self.uri.strip())


@dataclass(frozen=True)
class Appointment:
    """Read-only view of an appointment as handed over by the booking store."""
    mode: Optional[AppointmentMode]
    start_at: datetime                        # Timezone-aware instant
    join_target: Optional[JoinTarget] = None  # Only meaningful for video
    id: Optional[str] = None
    doctor_name: Optional[str] = None


@dataclass(frozen=True)
class JoinDecision:
    """Result of evaluating an appointment against the current instant."""
    state: JoinState
    early_join_minutes: float
    minutes_until_start: Optional[float] = None
    join_uri: Optional[str] = None
    passcode: Optional[str] = None
    platform: Optional[MeetingPlatform] = None

    @property
    def actionable(self) -> bool:
        return self.state is JoinState.VIDEO_ACTIONABLE

    @property
    def visible(self) -> bool:
        """Whether anything should be rendered at all."""
        return self.state is not JoinState.NOT_APPLICABLE

    @property
    def label(self) -> Optional[str]:
        """Button or badge text for the current state."""
        if self.state is JoinState.PHONE_INFORMATIONAL:
            return "Doctor will call you"
        if self.state is JoinState.VIDEO_ACTIONABLE:
            platform = self.platform or MeetingPlatform.OTHER
            return f"Join {platform.display_name} Meeting"
        if self.state is JoinState.VIDEO_PENDING:
            return f"Link Available {_format_minutes(self.early_join_minutes)} Min Before"
        return None

    @property
    def hint(self) -> Optional[str]:
        """Secondary line shown under the affordance (passcode, if any)."""
        if self.passcode and self.state in (JoinState.VIDEO_PENDING, JoinState.VIDEO_ACTIONABLE):
            return f"Password: {self.passcode}"
        return None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "actionable": self.actionable,
            "label": self.label,
            "minutes_until_start": self.minutes_until_start,
            "join_uri": self.join_uri,
            "passcode": self.passcode,
            "platform": self.platform.value if self.platform else None,
        }


def _format_minutes(minutes: float) -> str:
    return str(int(minutes)) if float(minutes).is_integer() else f"{minutes:g}"
