"""Realtime presence supervision."""

from .registry import InMemoryChannelRegistry, StaticChannel
from .supervisor import PresenceSupervisor
from .types import (
    ChannelHandle,
    ChannelRegistry,
    ChannelState,
    EscalationEvent,
    PresenceVerdict,
    SupervisorState,
)

__all__ = [
    "ChannelHandle",
    "ChannelRegistry",
    "ChannelState",
    "EscalationEvent",
    "InMemoryChannelRegistry",
    "PresenceSupervisor",
    "PresenceVerdict",
    "StaticChannel",
    "SupervisorState",
]
