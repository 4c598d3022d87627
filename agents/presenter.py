"""
Console Presenter: prints each InsightReport.

GSI posts several times a second and most consecutive reports are identical,
so a report equal to the previous one is skipped.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Callable

from bus.event_bus import EventBus
from models.events import InsightReport
from ui.console import render_report

log = logging.getLogger(__name__)


class ConsolePresenter:
    def __init__(self, bus: EventBus, write: Callable[[str], None] = print) -> None:
        self._bus = bus
        self._write = write
        self._last: InsightReport | None = None

    async def run(self) -> None:
        log.info("Console presenter running")
        while True:
            try:
                report: InsightReport = await self._bus.reports.get()
                self.show(report)
            except asyncio.CancelledError:
                break
            except Exception as exc:
                log.exception("Presenter unexpected error: %s", exc)

    def show(self, report: InsightReport) -> bool:
        """Render and write the report. Returns False if it was a repeat."""
        if report == self._last:
            return False
        self._last = report
        self._write(render_report(report))
        return True
