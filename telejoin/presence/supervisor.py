"""Presence supervisor for realtime subscription channels.

Polls the channel registry on a fixed period and derives whether the
realtime link is live. After more than ``escalation_threshold`` consecutive
degraded samples every channel is torn down and an EscalationEvent is sent
to the escalation listeners, which own resubscribing.

Channel state changes are sampled rather than subscribed to: the registry
gives no guarantee that transitions are observable as events.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from .. import config
from .types import (
    ChannelRegistry,
    EscalationEvent,
    PresenceVerdict,
    SupervisorState,
    channel_is_healthy,
    channel_name,
)

logger = logging.getLogger("telejoin")

EscalationListener = Callable[[EscalationEvent], None]
VerdictListener = Callable[[PresenceVerdict], None]


class PresenceSupervisor:
    """Samples channel health and forces a resubscription when it stays bad.

    The only mutable state is the consecutive bad-sample counter and the
    polling task. Each sample recomputes the verdict from the registry, so a
    failed tick is corrected by the next one.
    """

    def __init__(
        self,
        registry: ChannelRegistry,
        poll_interval: Optional[float] = None,
        escalation_threshold: Optional[int] = None,
    ):
        self.registry = registry
        self.poll_interval = (
            config.PRESENCE_POLL_INTERVAL if poll_interval is None else poll_interval
        )
        self.escalation_threshold = (
            config.ESCALATION_THRESHOLD if escalation_threshold is None else escalation_threshold
        )
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.escalation_threshold < 0:
            raise ValueError("escalation_threshold must not be negative")

        self._bad_samples = 0
        self._verdict = PresenceVerdict(connected=True, consecutive_bad_samples=0)
        self._task: Optional[asyncio.Task] = None
        self._escalation_listeners: List[EscalationListener] = []
        self._verdict_listeners: List[VerdictListener] = []
        self._escalation_count = 0

    @property
    def verdict(self) -> PresenceVerdict:
        return self._verdict

    @property
    def is_connected(self) -> bool:
        return self._verdict.connected

    @property
    def consecutive_bad_samples(self) -> int:
        return self._bad_samples

    @property
    def escalation_count(self) -> int:
        """Number of escalations performed since construction."""
        return self._escalation_count

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def add_escalation_listener(self, listener: EscalationListener) -> None:
        """Register a callback invoked after channels were torn down."""
        if listener not in self._escalation_listeners:
            self._escalation_listeners.append(listener)

    def remove_escalation_listener(self, listener: EscalationListener) -> None:
        if listener in self._escalation_listeners:
            self._escalation_listeners.remove(listener)

    def add_verdict_listener(self, listener: VerdictListener) -> None:
        """Register a callback invoked with every verdict."""
        if listener not in self._verdict_listeners:
            self._verdict_listeners.append(listener)

    def remove_verdict_listener(self, listener: VerdictListener) -> None:
        if listener in self._verdict_listeners:
            self._verdict_listeners.remove(listener)

    def sample(self) -> PresenceVerdict:
        """Run one sampling tick and return the resulting verdict.

        Registry errors, including failures while removing channels during
        escalation, propagate to the caller.
        """
        channels = list(self.registry.list_channels())
        event = None

        if not channels:
            if self._bad_samples:
                logger.info("Presence: no channels registered, resetting bad-sample count")
            self._bad_samples = 0
            verdict = PresenceVerdict(
                connected=True,
                consecutive_bad_samples=0,
                state=SupervisorState.NO_CHANNELS,
            )
        elif all(channel_is_healthy(c) for c in channels):
            if self._bad_samples:
                logger.info(
                    f"Presence: realtime link recovered after {self._bad_samples} bad sample(s)"
                )
            self._bad_samples = 0
            verdict = PresenceVerdict(
                connected=True,
                consecutive_bad_samples=0,
                state=SupervisorState.HEALTHY,
                channel_count=len(channels),
            )
        else:
            self._bad_samples += 1
            if self._bad_samples == 1:
                unhealthy = [channel_name(c) for c in channels if not channel_is_healthy(c)]
                logger.warning(f"Presence: degraded channel(s): {', '.join(unhealthy)}")
            else:
                logger.debug(f"Presence: still degraded ({self._bad_samples} sample(s))")

            if self._bad_samples > self.escalation_threshold:
                verdict = PresenceVerdict(
                    connected=False,
                    consecutive_bad_samples=0,
                    state=SupervisorState.ESCALATING,
                    channel_count=len(channels),
                    escalated=True,
                )
                # Stored first so a failed removal leaves no stale count behind
                self._verdict = verdict
                event = self._escalate(channels)
            else:
                verdict = PresenceVerdict(
                    connected=False,
                    consecutive_bad_samples=self._bad_samples,
                    state=SupervisorState.DEGRADED,
                    channel_count=len(channels),
                )

        self._verdict = verdict

        if event is not None:
            for listener in list(self._escalation_listeners):
                listener(event)
        for listener in list(self._verdict_listeners):
            listener(verdict)

        return verdict

    def _escalate(self, channels) -> EscalationEvent:
        """Tear down every channel. The counter is reset even if removal fails."""
        bad_samples = self._bad_samples
        logger.warning(
            f"Presence: {bad_samples} consecutive bad samples, "
            f"removing {len(channels)} channel(s) to force resubscription"
        )

        removed = []
        try:
            for channel in channels:
                self.registry.remove(channel)
                removed.append(channel)
        finally:
            self._bad_samples = 0

        self._escalation_count += 1
        return EscalationEvent(removed=removed, bad_samples=bad_samples)

    async def run(self) -> None:
        """Sample immediately, then every ``poll_interval`` seconds until cancelled.

        A failing tick ends the loop and propagates.
        """
        logger.info(f"Presence: supervising realtime channels every {self.poll_interval}s")
        try:
            while True:
                self.sample()
                await asyncio.sleep(self.poll_interval)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Presence: sampling failed, supervisor stopped: {e}")
            raise
        finally:
            logger.info("Presence: supervisor stopped")

    def start(self) -> None:
        """Start the polling loop on the running event loop.

        Idempotent while the loop is running. A loop that died from a failed
        tick is restarted; its failure is logged here instead of by ``stop()``.
        """
        if self.is_running:
            return
        previous = self._task
        if previous is not None and not previous.cancelled() and previous.exception():
            logger.warning(
                f"Presence: restarting supervisor after failure: {previous.exception()}"
            )
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Cancel the polling loop and wait for it to finish.

        Idempotent. If the loop had already died because a tick failed, that
        failure is raised here once.
        """
        task = self._task
        if task is None:
            return
        self._task = None

        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "PresenceSupervisor":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def get_status_text(self) -> str:
        """Formatted status text for display."""
        verdict = self._verdict
        lines = ["Realtime presence:"]
        lines.append(f"  Status: {verdict.label}")
        lines.append(f"  State: {verdict.state.value}")
        lines.append(f"  Channels: {verdict.channel_count}")
        if not verdict.connected:
            lines.append(
                f"  Bad samples: {verdict.consecutive_bad_samples}"
                f"/{self.escalation_threshold}"
            )
        if self._escalation_count:
            lines.append(f"  Escalations: {self._escalation_count}")
        if self.is_running:
            lines.append(f"  Polling: every {self.poll_interval}s")
        else:
            lines.append("  Polling: stopped")
        return "\n".join(lines)
