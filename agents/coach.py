"""
Coach Agent: the only consumer of bus.snapshots.

Pulls one Snapshot at a time, runs CoachEngine.process_tick to completion,
then publishes the InsightReport. Ticks are strictly sequential, so the
engine's MatchState is never touched concurrently.
"""

from __future__ import annotations
import asyncio
import logging

from bus.event_bus import EventBus
from coaching.engine import CoachEngine
from models.events import InsightReport
from models.snapshot import Snapshot

log = logging.getLogger(__name__)


class CoachAgent:
    def __init__(self, bus: EventBus, engine: CoachEngine) -> None:
        self._bus = bus
        self._engine = engine
        self._ticks = 0

    @property
    def ticks(self) -> int:
        return self._ticks

    async def run(self) -> None:
        log.info("Coach agent running")
        while True:
            try:
                snapshot: Snapshot = await self._bus.snapshots.get()
                self.handle(snapshot)
            except asyncio.CancelledError:
                break
            except Exception as exc:
                log.exception("Coach unexpected error: %s", exc)

    def handle(self, snapshot: Snapshot) -> InsightReport:
        report = self._engine.process_tick(snapshot)
        self._ticks += 1
        self._bus.publish_report(report)
        return report
