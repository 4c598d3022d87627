"""
Enemy Tracker: last-known and predicted enemy hero positions.

Runs once per tick against the minimap entity list:
  1. Every visible enemy hero is confirmed at its observed cell.
  2. Every known enemy not visible this tick goes Hidden and gets a
     straight-line prediction from its last two confirmed points.
  3. Confidence decays by one step per hidden tick on which the match clock
     advanced; past the decay limit the prediction becomes "unknown area".

Records are never deleted: heroes are assumed alive until the match ends.
"""

from __future__ import annotations
import logging
from typing import Mapping

from models.events import EnemyView
from models.snapshot import Snapshot, format_hero_name
from models.state import EnemyRecord, Visibility
from utils.geometry import MapBounds, extrapolate, heading

log = logging.getLogger(__name__)

DEFAULT_DECAY_LIMIT = 20
MAX_HERO_LEVEL = 30


class EnemyTracker:
    def __init__(
        self,
        records: dict[str, EnemyRecord],
        bounds: MapBounds | None = None,
        decay_limit: int = DEFAULT_DECAY_LIMIT,
    ) -> None:
        self._records = records
        self._bounds = bounds or MapBounds()
        self._decay_limit = max(1, decay_limit)
        self._last_clock: int | None = None

    def update(self, snapshot: Snapshot) -> Mapping[str, EnemyView]:
        clock = snapshot.clock
        clock_advanced = self._last_clock is None or clock > self._last_clock
        self._last_clock = clock

        seen: set[str] = set()
        for entity in snapshot.enemy_heroes():
            hero_id = entity.hero_id
            if not hero_id or hero_id in seen:
                continue
            seen.add(hero_id)
            pos = self._bounds.clamp(entity.position)
            record = self._records.get(hero_id)
            if record is None:
                self._records[hero_id] = EnemyRecord(
                    hero_id=hero_id,
                    display_name=format_hero_name(hero_id),
                    last_position=pos,
                    last_seen_clock=clock,
                    first_seen_clock=clock,
                    predicted_position=pos,
                )
                log.info("EnemyTracker: first sighting of %s at (%.0f, %.0f) clock=%d",
                         hero_id, pos.x, pos.y, clock)
            else:
                record.confirm(pos, clock)

        for hero_id, record in self._records.items():
            if hero_id not in seen:
                self._hide(record, clock, clock_advanced)

        return {hero_id: self._view(record, clock) for hero_id, record in self._records.items()}

    def _hide(self, record: EnemyRecord, clock: int, clock_advanced: bool) -> None:
        if record.visibility is Visibility.VISIBLE:
            log.debug("EnemyTracker: %s left vision at clock=%d", record.hero_id, clock)
        record.visibility = Visibility.HIDDEN
        if clock_advanced:
            record.decay = min(record.decay + 1, self._decay_limit + 1)

        if record.decay > self._decay_limit:
            record.predicted_position = None
            return

        if record.previous_position is not None and record.previous_seen_clock is not None:
            record.predicted_position = extrapolate(
                record.previous_position,
                record.previous_seen_clock,
                record.last_position,
                record.last_seen_clock,
                clock,
                self._bounds,
            )
        else:
            record.predicted_position = record.last_position

    def _view(self, record: EnemyRecord, clock: int) -> EnemyView:
        confidence = max(0.0, 1.0 - record.decay / self._decay_limit)
        return EnemyView(
            hero_id=record.hero_id,
            name=record.display_name,
            visibility=record.visibility,
            last_position=record.last_position,
            last_seen_clock=record.last_seen_clock,
            predicted_position=record.predicted_position,
            decay=record.decay,
            confidence=round(confidence, 3),
            times_spotted=record.times_spotted,
            estimated_level=estimate_hero_level(clock),
            heading=_heading(record),
        )


def estimate_hero_level(clock: int) -> int:
    """
    Rough enemy hero level from match time alone: GSI never reports enemy
    levels. One level per two minutes early, slower after minute 10 and again
    after minute 20.
    """
    minutes = max(0, clock) // 60
    if minutes < 10:
        level = minutes // 2 + 1
    elif minutes < 20:
        level = minutes // 3 + 5
    else:
        level = minutes // 5 + 10
    return min(level, MAX_HERO_LEVEL)


def _heading(record: EnemyRecord) -> str | None:
    if record.previous_position is None:
        return None
    return heading(record.previous_position, record.last_position)
