"""
Dota Coach: Main Entrypoint

Boots the asyncio event loop, wires the GSI listener, the coach engine and the
console together, and runs until SIGINT/SIGTERM is received.

Startup sequence:
  1. Load settings from environment
  2. Load the static coaching table
  3. Build the bus, engine and agents
  4. Bind the GSI listener
  5. Start Coach and Presenter as asyncio tasks
  6. Wait for shutdown signal

Shutdown sequence:
  1. Signal via shutdown_event
  2. Cancel running tasks
  3. Release the listener socket
"""

from __future__ import annotations
import asyncio
import logging
import signal

from dotenv import load_dotenv

# Load .env before importing settings (settings reads env vars at import time)
load_dotenv()

from agents.coach import CoachAgent
from agents.presenter import ConsolePresenter
from bus.event_bus import EventBus
from coaching.advice import AdviceTable
from coaching.engine import CoachEngine
from config.settings import settings
from gsi.listener import GSIListener
from utils.logger import setup_logging

log = logging.getLogger(__name__)


async def run() -> None:
    setup_logging(settings.log_level)
    log.info("Dota Coach starting (gsi=%s:%d)", settings.gsi_host, settings.gsi_port)

    advice = AdviceTable.from_yaml(settings.coaching_table_path)

    # -----------------------------------------------------------------------
    # Infrastructure
    # -----------------------------------------------------------------------
    bus = EventBus(snapshot_queue_size=settings.snapshot_queue_size)

    engine = CoachEngine(
        advice,
        decay_limit=settings.enemy_decay_limit,
        timer_lead_s=settings.timer_lead_s,
        fight_proximity=settings.fight_proximity,
        fight_min_cluster=settings.fight_min_cluster,
        fight_min_dwell_s=settings.fight_min_dwell_s,
        fight_cooldown_s=settings.fight_cooldown_s,
        fight_damage_pct=settings.fight_damage_pct,
        danger_radius=settings.danger_radius,
    )

    # -----------------------------------------------------------------------
    # Agents
    # -----------------------------------------------------------------------
    coach = CoachAgent(bus=bus, engine=engine)
    presenter = ConsolePresenter(bus=bus)
    listener = GSIListener(
        bus=bus,
        host=settings.gsi_host,
        port=settings.gsi_port,
        auth_token=settings.gsi_auth_token,
    )

    await listener.startup()

    # -----------------------------------------------------------------------
    # Launch agent tasks
    # -----------------------------------------------------------------------
    shutdown_event = asyncio.Event()

    def _handle_signal(sig: signal.Signals) -> None:
        log.info("Received %s, initiating graceful shutdown", sig.name)
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _handle_signal, sig)

    tasks = [
        asyncio.create_task(coach.run(), name="coach"),
        asyncio.create_task(presenter.run(), name="presenter"),
    ]
    log.info("Dota Coach is live. Waiting for GSI data...")

    await shutdown_event.wait()

    # -----------------------------------------------------------------------
    # Graceful shutdown
    # -----------------------------------------------------------------------
    log.info("Shutting down...")
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    await listener.shutdown()
    log.info("Dota Coach stopped cleanly (%d snapshots received, %d ticks).",
             listener.received, coach.ticks)


def main() -> None:
    try:
        import uvloop  # type: ignore
        uvloop.run(run())
    except ImportError:
        asyncio.run(run())


if __name__ == "__main__":
    main()
