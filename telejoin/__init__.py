"""
telejoin - Join-window evaluation and realtime presence supervision for
telehealth appointment booking clients.

- Join-window evaluator: decides when an appointment's join button is enabled
- Presence supervisor: polls realtime channels and forces a resubscription
  when the link stays degraded
"""

from .version import __version__

from .join_window import (
    Appointment,
    AppointmentMode,
    JoinDecision,
    JoinState,
    JoinTarget,
    evaluate_join_window,
    open_join_target,
)
from .presence import (
    ChannelState,
    EscalationEvent,
    PresenceSupervisor,
    PresenceVerdict,
    SupervisorState,
)

__all__ = [
    "__version__",
    "Appointment",
    "AppointmentMode",
    "ChannelState",
    "EscalationEvent",
    "JoinDecision",
    "JoinState",
    "JoinTarget",
    "PresenceSupervisor",
    "PresenceVerdict",
    "SupervisorState",
    "evaluate_join_window",
    "open_join_target",
]
