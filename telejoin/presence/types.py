"""Shared types for the presence supervisor."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Protocol, Sequence


class ChannelState(Enum):
    """Realtime subscription channel state."""
    JOINING = "joining"    # Connecting; counts as healthy
    JOINED = "joined"
    CLOSED = "closed"
    ERRORED = "errored"

    @classmethod
    def parse(cls, value) -> Optional["ChannelState"]:
        """Map a collaborator-reported state to a member, or None when unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None

    @property
    def is_healthy(self) -> bool:
        return self in (ChannelState.JOINED, ChannelState.JOINING)


class SupervisorState(Enum):
    """Logical state of the presence supervisor after a sample."""
    HEALTHY = "healthy"
    NO_CHANNELS = "no_channels"
    DEGRADED = "degraded"
    ESCALATING = "escalating"


class ChannelHandle(Protocol):
    """A realtime subscription handle owned by the registry."""

    @property
    def state(self) -> Any:
        ...


class ChannelRegistry(Protocol):
    """Realtime client collaborator holding the live subscriptions."""

    def list_channels(self) -> Sequence[ChannelHandle]:
        ...

    def remove(self, channel: ChannelHandle) -> None:
        """Tear a channel down. Safe to call on an already closed channel."""
        ...


def channel_is_healthy(channel: ChannelHandle) -> bool:
    """Unknown states count as degraded."""
    state = ChannelState.parse(channel.state)
    return state is not None and state.is_healthy


def channel_name(channel: ChannelHandle) -> str:
    """Best-effort name for log lines."""
    return str(getattr(channel, "topic", None) or getattr(channel, "name", None) or channel)


@dataclass(frozen=True)
class PresenceVerdict:
    """Connectivity verdict derived from one sample."""
    connected: bool
    consecutive_bad_samples: int
    state: SupervisorState = SupervisorState.HEALTHY
    channel_count: int = 0
    escalated: bool = False

    @property
    def label(self) -> str:
        """Badge text: "Live" or "Reconnecting..."."""
        return "Live" if self.connected else "Reconnecting..."


@dataclass(frozen=True)
class EscalationEvent:
    """Emitted after all channels were torn down; the owner must resubscribe."""
    removed: List[ChannelHandle]
    bad_samples: int
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
