"""Repeating poll loop feeding the connection monitor and dashboard view."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from app.schemas import LatestSnapshot
from cli.client import ApiClient
from services.connection import ConnectionMonitor
from services.dashboard import DashboardView, build_view

logger = logging.getLogger(__name__)


class DashboardPoller:
    """Polls ``GET /latest`` for one device and turns each tick into a view.

    Failed polls never propagate: they are logged and the monitor goes offline.
    """

    def __init__(
        self,
        client: ApiClient,
        device_id: str,
        monitor: Optional[ConnectionMonitor] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.device_id = device_id
        self.monitor = monitor or ConnectionMonitor()
        self._sleep = sleep

    def poll(self) -> Optional[LatestSnapshot]:
        try:
            payload = self.client.get_latest(self.device_id)
            snapshot = LatestSnapshot.model_validate(payload)
        except httpx.HTTPStatusError as exc:
            self._record_failure("http error", status_code=exc.response.status_code)
            return None
        except httpx.HTTPError as exc:
            self._record_failure(type(exc).__name__)
            return None
        except (ValidationError, ValueError):
            self._record_failure("invalid payload")
            return None

        self.monitor.observe(snapshot)
        return snapshot if snapshot.has_telemetry else None

    def tick(self) -> DashboardView:
        snapshot = self.poll()
        status = self.monitor.check()
        return build_view(status, snapshot)

    def run(
        self,
        interval: float,
        on_tick: Callable[[DashboardView], None],
        count: Optional[int] = None,
    ) -> None:
        """Tick every ``interval`` seconds, forever or for ``count`` ticks."""
        ticks = 0
        while count is None or ticks < count:
            on_tick(self.tick())
            ticks += 1
            if count is not None and ticks >= count:
                break
            self._sleep(interval)

    def _record_failure(self, reason: str, status_code: Optional[int] = None) -> None:
        logger.warning(
            "Failed to fetch latest reading",
            extra={"device_id": self.device_id, "reason": reason, "status_code": status_code},
        )
        self.monitor.poll_failed(reason)
