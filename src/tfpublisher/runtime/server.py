"""Reconfiguration channel between operators and the engine.

Edits may be submitted from any thread. They are queued in arrival order and
applied one at a time by whichever loop calls ``process_pending``.
"""

from __future__ import annotations

import queue
from dataclasses import asdict

from ..core.logging import get_logger
from ..core.reconfigure import ReconfigurationEngine
from ..core.types import ConfigSnapshot, EditRequest, EditResult, RPYLimits

logger = get_logger(__name__)


class ReconfigureServer:
    """Holds the channel's view of the configuration and feeds edits to the engine."""

    def __init__(self, engine: ReconfigurationEngine):
        self.engine = engine
        self._pending: queue.Queue[EditRequest] = queue.Queue()

        # The channel sends every field on its first run
        result = engine.initialize()
        self._config = result.snapshot
        self._limits = engine.rpy_limits
        logger.info("Reconfigure: initial configuration", {"config": _as_data(self._config)})

    @property
    def config(self) -> ConfigSnapshot:
        return self._config

    @property
    def limits(self) -> RPYLimits:
        return self._limits

    def submit(self, edit: EditRequest) -> None:
        """Queue an edit for the next ``process_pending`` call."""
        self._pending.put(edit)

    def pending(self) -> int:
        return self._pending.qsize()

    def update(self, edit: EditRequest) -> EditResult:
        """Apply an edit immediately and log its diagnostics."""
        logger.debug(f"Reconfigure: {edit.kind.value}", {"edit": asdict(edit)})
        result = self.engine.apply(edit, self._config)
        self._config = result.snapshot
        if result.limits is not None:
            self._limits = result.limits
            logger.info(
                "Reconfigure: RPY limits updated",
                {"min": result.limits.minimum, "max": result.limits.maximum},
            )
        for diagnostic in result.diagnostics:
            logger.log(diagnostic.level, diagnostic.message)
        return result

    def process_pending(self) -> list[EditResult]:
        """Apply all queued edits in arrival order."""
        results = []
        while True:
            try:
                edit = self._pending.get_nowait()
            except queue.Empty:
                break
            results.append(self.update(edit))
        return results


def _as_data(config: ConfigSnapshot) -> dict:
    data = asdict(config)
    data["angle_units"] = config.angle_units.name.lower()
    return data


__all__ = ["ReconfigureServer"]
