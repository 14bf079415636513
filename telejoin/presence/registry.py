"""In-memory channel registry.

Stands in for a realtime client when no live backend is wired up, e.g. in
the ``telejoin presence-simulate`` command.
"""

import logging
from dataclasses import dataclass
from typing import List

from .types import ChannelState

logger = logging.getLogger("telejoin")


@dataclass(eq=False)
class StaticChannel:
    """A channel whose state is set by its owner."""
    topic: str
    state: ChannelState = ChannelState.JOINING

    def __repr__(self) -> str:
        return f"StaticChannel({self.topic!r}, {self.state.value})"


class InMemoryChannelRegistry:
    """Ordered set of channels with idempotent removal."""

    def __init__(self, channels=None):
        self._channels: List[StaticChannel] = list(channels or [])

    def subscribe(self, topic: str, state: ChannelState = ChannelState.JOINING) -> StaticChannel:
        channel = StaticChannel(topic=topic, state=state)
        self._channels.append(channel)
        logger.debug(f"Subscribed channel {topic}")
        return channel

    def list_channels(self) -> List[StaticChannel]:
        return list(self._channels)

    def remove(self, channel: StaticChannel) -> None:
        if channel in self._channels:
            self._channels.remove(channel)
        channel.state = ChannelState.CLOSED
        logger.debug(f"Removed channel {channel.topic}")

    def __len__(self) -> int:
        return len(self._channels)
