"""Poll-side freshness policy deciding whether a device is displayed as live."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from app.schemas import LatestSnapshot

logger = logging.getLogger(__name__)

STALENESS_WINDOW = 10.0


class LinkState(str, Enum):
    offline = "Offline"
    live = "Live"


@dataclass(frozen=True)
class ConnectionStatus:
    connected: bool = False
    using_live_source: bool = False
    last_observed_at: Optional[float] = None

    @property
    def state(self) -> LinkState:
        if self.connected and self.using_live_source:
            return LinkState.live
        return LinkState.offline


class ConnectionMonitor:
    """Tracks the Offline/Live state machine from poll outcomes.

    ``clock`` returns local wall-clock seconds. Readings carry the producer's own
    timestamp, which is never consulted here: staleness is measured only against
    the local time at which a poll returned data.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        staleness_window: float = STALENESS_WINDOW,
    ) -> None:
        self._clock = clock
        self.staleness_window = staleness_window
        self._status = ConnectionStatus()

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    def observe(self, snapshot: Optional[LatestSnapshot]) -> ConnectionStatus:
        """Record a completed poll; ``None`` or a body without telemetry means offline."""
        if snapshot is None or not snapshot.has_telemetry:
            return self._go_offline("no data")
        self._transition(
            ConnectionStatus(
                connected=True,
                using_live_source=True,
                last_observed_at=self._clock(),
            ),
            reason="data received",
        )
        return self._status

    def poll_failed(self, reason: str) -> ConnectionStatus:
        return self._go_offline(reason)

    def check(self) -> ConnectionStatus:
        """Re-evaluate staleness without a new poll."""
        if self._status.state is LinkState.live:
            elapsed = self.seconds_since_last_observation()
            if elapsed is None or elapsed >= self.staleness_window:
                return self._go_offline("stale", elapsed_s=elapsed)
        return self._status

    def seconds_since_last_observation(self) -> Optional[float]:
        if self._status.last_observed_at is None:
            return None
        return self._clock() - self._status.last_observed_at

    def _go_offline(self, reason: str, elapsed_s: Optional[float] = None) -> ConnectionStatus:
        self._transition(
            replace(self._status, connected=False, using_live_source=False),
            reason=reason,
            elapsed_s=elapsed_s,
        )
        return self._status

    def _transition(
        self,
        new_status: ConnectionStatus,
        reason: str,
        elapsed_s: Optional[float] = None,
    ) -> None:
        previous = self._status.state
        self._status = new_status
        if new_status.state is not previous:
            logger.info(
                "Connection state changed from %s",
                previous.value,
                extra={"state": new_status.state.value, "reason": reason, "elapsed_s": elapsed_s},
            )
