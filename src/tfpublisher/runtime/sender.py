"""Periodic republishing of the live transform."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import asdict
from typing import Protocol, runtime_checkable

from ..core.logging import get_logger
from ..core.state import TransformState
from ..core.types import Transform
from .server import ReconfigureServer

logger = get_logger(__name__)


@runtime_checkable
class Broadcaster(Protocol):
    """Transport that hands a transform to listeners."""

    def send(self, transform: Transform) -> None: ...


class LoggingBroadcaster:
    """Emit each transform as a structured debug record."""

    def __init__(self, name: str = "tfpublisher.broadcast"):
        self._logger = get_logger(name)

    def send(self, transform: Transform) -> None:
        if not self._logger.isEnabledFor(logging.DEBUG):
            return
        self._logger.debug(
            f"Sending transform from {transform.frame_id} to {transform.child_frame_id}",
            {"transform": asdict(transform)},
        )


class RecordingBroadcaster:
    """Keep every sent transform in memory."""

    def __init__(self):
        self.sent: list[Transform] = []

    def send(self, transform: Transform) -> None:
        self.sent.append(transform)


class TransformSender:
    """Cooperative loop alternating between pending edits and timed publishes.

    Each publish is stamped one period in the future so that listeners do not
    time out between two slow publishes.
    """

    def __init__(
        self,
        state: TransformState,
        server: ReconfigureServer,
        broadcaster: Broadcaster,
        period_s: float,
    ):
        if period_s <= 0:
            raise ValueError(f"Period must be positive, got {period_s}")
        self.state = state
        self.server = server
        self.broadcaster = broadcaster
        self.period_s = period_s
        self._stop = threading.Event()

    def send(self, publish_time: float) -> Transform:
        transform = self.state.current(publish_time)
        self.broadcaster.send(transform)
        return transform

    def spin_once(self) -> Transform:
        """Serve pending edits, then publish once."""
        self.server.process_pending()
        return self.send(self.state.now() + self.period_s)

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def run(self, count: int | None = None) -> int:
        """Publish until stopped, or ``count`` times.

        Returns:
            Number of transforms published
        """
        sent = 0
        while not self._stop.is_set() and (count is None or sent < count):
            started = time.monotonic()
            self.spin_once()
            sent += 1
            if count is not None and sent >= count:
                break
            remaining = self.period_s - (time.monotonic() - started)
            if remaining > 0:
                self._stop.wait(remaining)
        return sent


__all__ = [
    "Broadcaster",
    "LoggingBroadcaster",
    "RecordingBroadcaster",
    "TransformSender",
]
