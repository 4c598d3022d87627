"""
Typed multi-channel event bus.

All inter-agent communication goes through this module.
Uses asyncio.Queue: zero network hops, minimal latency.

Queue sizing:
  snapshots: 20 by default. GSI posts several times per second, a coach that
             falls further behind than that is reading stale state anyway
  reports:   10. The console only ever needs the latest few
"""

from __future__ import annotations
import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from models.events import InsightReport
    from models.snapshot import Snapshot

log = logging.getLogger(__name__)


class EventBus:
    __slots__ = (
        "snapshots",
        "reports",
    )

    def __init__(self, snapshot_queue_size: int = 20, report_queue_size: int = 10) -> None:
        self.snapshots: asyncio.Queue[Snapshot] = asyncio.Queue(maxsize=snapshot_queue_size)
        self.reports: asyncio.Queue[InsightReport] = asyncio.Queue(maxsize=report_queue_size)

    def publish_snapshot(self, snapshot: "Snapshot") -> bool:
        """Non-blocking publish. Drops and logs if queue is full (stale data)."""
        try:
            self.snapshots.put_nowait(snapshot)
        except asyncio.QueueFull:
            log.warning("snapshots queue full, dropping snapshot at clock=%d", snapshot.clock)
            return False
        return True

    def publish_report(self, report: "InsightReport") -> bool:
        try:
            self.reports.put_nowait(report)
        except asyncio.QueueFull:
            log.warning("reports queue full, dropping report at clock=%d", report.clock)
            return False
        return True
