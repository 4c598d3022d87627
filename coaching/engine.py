"""
Coach Engine: the single tick entrypoint.

process_tick(snapshot) runs the whole pipeline synchronously:
  1. Start a fresh MatchState if the snapshot carries a new match id
  2. EnemyTracker.update
  3. EventTimerRegistry.update
  4. TeamFightDetector.update
  5. InsightSynthesizer.synthesize

The engine is the sole owner of MatchState; trackers only hold references to
the parts they write, and are rebuilt together with it at match start.
"""

from __future__ import annotations
import logging

from coaching.advice import AdviceTable
from coaching.synthesizer import DEFAULT_DANGER_RADIUS, InsightSynthesizer
from models.events import InsightReport
from models.snapshot import Snapshot, format_clock, format_hero_name
from models.state import MatchState
from tracking.enemy_tracker import DEFAULT_DECAY_LIMIT, EnemyTracker
from tracking.fight_detector import (
    DEFAULT_COOLDOWN_S,
    DEFAULT_DAMAGE_PCT,
    DEFAULT_MIN_CLUSTER,
    DEFAULT_MIN_DWELL_S,
    DEFAULT_PROXIMITY,
    TeamFightDetector,
)
from tracking.timers import DEFAULT_LEAD_S, EventTimerRegistry
from utils.geometry import MapBounds

log = logging.getLogger(__name__)


class CoachEngine:
    def __init__(
        self,
        advice: AdviceTable,
        bounds: MapBounds | None = None,
        decay_limit: int = DEFAULT_DECAY_LIMIT,
        timer_lead_s: int = DEFAULT_LEAD_S,
        fight_proximity: float = DEFAULT_PROXIMITY,
        fight_min_cluster: int = DEFAULT_MIN_CLUSTER,
        fight_min_dwell_s: int = DEFAULT_MIN_DWELL_S,
        fight_cooldown_s: int = DEFAULT_COOLDOWN_S,
        fight_damage_pct: float = DEFAULT_DAMAGE_PCT,
        danger_radius: float = DEFAULT_DANGER_RADIUS,
    ) -> None:
        self._bounds = bounds or MapBounds()
        self._decay_limit = decay_limit
        self._timer_lead_s = timer_lead_s
        self._fight_kwargs = dict(
            proximity=fight_proximity,
            min_cluster=fight_min_cluster,
            min_dwell_s=fight_min_dwell_s,
            cooldown_s=fight_cooldown_s,
            damage_pct=fight_damage_pct,
        )
        self._synthesizer = InsightSynthesizer(advice, danger_radius=danger_radius)
        self._match: MatchState | None = None
        self._enemies: EnemyTracker | None = None
        self._timers: EventTimerRegistry | None = None
        self._fights: TeamFightDetector | None = None

    @property
    def match(self) -> MatchState | None:
        return self._match

    def start_match(self, match_id: str | None) -> MatchState:
        match = MatchState(match_id=match_id)
        self._match = match
        self._enemies = EnemyTracker(match.enemies, self._bounds, self._decay_limit)
        self._timers = EventTimerRegistry(match.timers, lead_s=self._timer_lead_s)
        self._fights = TeamFightDetector(match.fight, match.combat, **self._fight_kwargs)
        log.info("Match started (match_id=%s)", match_id or "unknown")
        return match

    def process_tick(self, snapshot: Snapshot) -> InsightReport:
        match = self._match
        if match is None or (snapshot.match_id is not None and snapshot.match_id != match.match_id):
            match = self.start_match(snapshot.match_id)

        enemy_view = self._enemies.update(snapshot)
        timer_view = self._timers.update(snapshot)
        fight_view = self._fights.update(snapshot)
        match.ticks += 1

        if fight_view.concluded is not None:
            done = fight_view.concluded
            log.info(
                "Fight concluded at %s: duration=%ds participants=%s",
                format_clock(done.end_clock), done.duration,
                [format_hero_name(h) for h in sorted(done.participants)],
            )

        report = self._synthesizer.synthesize(snapshot, enemy_view, timer_view, fight_view)
        log.debug(
            "Tick %d clock=%d phase=%s enemies=%d timers=%d alerts=%d",
            match.ticks, snapshot.clock, snapshot.phase.name,
            len(enemy_view), len(timer_view), len(report.alerts),
        )
        return report
