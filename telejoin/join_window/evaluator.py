"""Join-window evaluation for telehealth appointments.

Everything here is a pure function of the appointment and the instant the
caller passes in as ``now``. Nothing reads the clock, so decisions can be
recomputed on every render or tick.
"""

from datetime import datetime
from typing import Optional

from .. import config
from .platforms import detect_platform
from .types import Appointment, AppointmentMode, JoinDecision, JoinState


def minutes_until(start_at: datetime, now: datetime) -> float:
    """Minutes from ``now`` until ``start_at``; negative once it has passed.

    Both values must already be comparable instants. No timezone conversion
    is performed.
    """
    return (start_at - now).total_seconds() / 60


def is_within_join_window(
    start_at: datetime,
    now: datetime,
    early_join_minutes: float = 15,
    late_join_minutes: float = 60,
) -> bool:
    """True when ``-late_join_minutes <= minutes_until(start_at, now) <= early_join_minutes``.

    Both bounds are inclusive.
    """
    # Compare on the timedelta to keep the boundary exact
    delta_seconds = (start_at - now).total_seconds()
    return -late_join_minutes * 60 <= delta_seconds <= early_join_minutes * 60


def evaluate_join_window(
    appointment: Appointment,
    now: datetime,
    early_join_minutes: Optional[float] = None,
    late_join_minutes: Optional[float] = None,
) -> JoinDecision:
    """Decide what the join affordance for ``appointment`` should show at ``now``.

    Rules
    -----
    1) phone                          => PHONE_INFORMATIONAL
    2) not video, or no join target   => NOT_APPLICABLE
    3) inside the join window         => VIDEO_ACTIONABLE
    4) otherwise                      => VIDEO_PENDING

    The passcode is carried on both video states so it can be displayed
    before the window opens.
    """
    early = config.EARLY_JOIN_MINUTES if early_join_minutes is None else early_join_minutes
    late = config.LATE_JOIN_MINUTES if late_join_minutes is None else late_join_minutes

    if appointment.mode is AppointmentMode.PHONE:
        return JoinDecision(state=JoinState.PHONE_INFORMATIONAL, early_join_minutes=early)

    target = appointment.join_target
    if appointment.mode is not AppointmentMode.VIDEO or target is None or not target.is_usable:
        return JoinDecision(state=JoinState.NOT_APPLICABLE, early_join_minutes=early)

    if is_within_join_window(appointment.start_at, now, early, late):
        state = JoinState.VIDEO_ACTIONABLE
    else:
        state = JoinState.VIDEO_PENDING

    return JoinDecision(
        state=state,
        early_join_minutes=early,
        minutes_until_start=minutes_until(appointment.start_at, now),
        join_uri=target.uri.strip(),
        passcode=target.passcode or None,
        platform=detect_platform(target.uri),
    )
