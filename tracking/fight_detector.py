"""
Team Fight Detector: a debounced state machine over combat signals.

States:
  IDLE       nothing happening
  BUILDING   heroes clustered and someone took damage; not yet a fight
  ACTIVE     sustained clustering/damage for at least min_dwell seconds
  COOLDOWN   signal paused; participants retained until the timeout

Transitions (one per tick):
  IDLE     → BUILDING  clustered AND damage
  BUILDING → ACTIVE    signal present and clock - start >= min_dwell
  BUILDING → IDLE      signal absent once the clock moved past last activity
  ACTIVE   → COOLDOWN  signal absent
  COOLDOWN → ACTIVE    signal resumes (same fight session)
  COOLDOWN → IDLE      clock - last activity >= cooldown_timeout; emits FightConcluded

Signals:
  clustered  at least min_cluster heroes, with both sides represented, each
              within `proximity` of a hero of the other side
  damage     local hero lost >= damage_pct of max HP, died, or the total kill
              score rose since the previous tick
"""

from __future__ import annotations
import logging

from models.events import FightConcluded, FightView
from models.snapshot import Position, Snapshot
from models.state import CombatMemory, FightPhase, FightState

log = logging.getLogger(__name__)

DEFAULT_PROXIMITY = 1200.0
DEFAULT_MIN_CLUSTER = 3
DEFAULT_MIN_DWELL_S = 3
DEFAULT_COOLDOWN_S = 10
DEFAULT_DAMAGE_PCT = 0.05


class TeamFightDetector:
    def __init__(
        self,
        state: FightState,
        memory: CombatMemory,
        proximity: float = DEFAULT_PROXIMITY,
        min_cluster: int = DEFAULT_MIN_CLUSTER,
        min_dwell_s: int = DEFAULT_MIN_DWELL_S,
        cooldown_s: int = DEFAULT_COOLDOWN_S,
        damage_pct: float = DEFAULT_DAMAGE_PCT,
    ) -> None:
        self._state = state
        self._memory = memory
        self._proximity = proximity
        self._min_cluster = max(2, min_cluster)
        self._min_dwell_s = min_dwell_s
        self._cooldown_s = cooldown_s
        self._damage_pct = damage_pct

    @property
    def state(self) -> FightState:
        return self._state

    def update(self, snapshot: Snapshot) -> FightView:
        cluster = self.clustered_heroes(snapshot)
        damage = self._damage_signal(snapshot)
        return self.step(snapshot.clock, cluster, damage)

    def step(self, clock: int, cluster: set[str], damage: bool) -> FightView:
        """Advance the state machine by one tick given precomputed signals."""
        state = self._state
        signal = bool(cluster) or damage
        entered_cooldown = False
        concluded: FightConcluded | None = None

        if state.phase is FightPhase.IDLE:
            if cluster and damage:
                state.begin(clock, cluster)
                log.debug("Fight building at clock=%d participants=%s", clock, sorted(cluster))

        elif state.phase is FightPhase.BUILDING:
            if signal:
                state.touch(clock, cluster)
                if clock - state.start_clock >= self._min_dwell_s:
                    state.phase = FightPhase.ACTIVE
                    log.info("Team fight ACTIVE at clock=%d (%d heroes)", clock, len(state.participants))
            elif clock > state.last_activity_clock:
                log.debug("Skirmish at clock=%d fizzled before becoming a fight", clock)
                state.reset()

        elif state.phase is FightPhase.ACTIVE:
            if signal:
                state.touch(clock, cluster)
            else:
                state.phase = FightPhase.COOLDOWN
                entered_cooldown = True

        elif state.phase is FightPhase.COOLDOWN:
            if signal:
                state.touch(clock, cluster)
                state.phase = FightPhase.ACTIVE
                log.debug("Fight resumed at clock=%d", clock)
            elif clock - state.last_activity_clock >= self._cooldown_s:
                concluded = FightConcluded(
                    start_clock=state.start_clock,
                    end_clock=state.last_activity_clock,
                    participants=frozenset(state.participants),
                )
                state.reset()

        return FightView(
            phase=state.phase,
            participants=frozenset(state.participants),
            start_clock=state.start_clock,
            last_activity_clock=state.last_activity_clock,
            entered_cooldown=entered_cooldown,
            concluded=concluded,
        )

    def clustered_heroes(self, snapshot: Snapshot) -> set[str]:
        allies: dict[str, Position] = {}
        if snapshot.hero and snapshot.hero.position is not None and snapshot.hero.alive:
            allies[snapshot.hero.hero_id or "local_hero"] = snapshot.hero.position
        for entity in snapshot.allied_heroes():
            if entity.hero_id:
                allies.setdefault(entity.hero_id, entity.position)
        enemies = {
            e.hero_id: e.position for e in snapshot.enemy_heroes() if e.hero_id
        }
        return cluster_across(allies, enemies, self._proximity, self._min_cluster)

    def _damage_signal(self, snapshot: Snapshot) -> bool:
        memory = self._memory
        damaged = False
        hero = snapshot.hero
        if hero is not None:
            if memory.alive and not hero.alive:
                damaged = True
            elif memory.health is not None and hero.alive:
                threshold = max(1, int(hero.max_health * self._damage_pct))
                if memory.health - hero.health >= threshold:
                    damaged = True
            memory.health = hero.health
            memory.alive = hero.alive
        if memory.total_kills is not None and snapshot.total_kills > memory.total_kills:
            damaged = True
        memory.total_kills = snapshot.total_kills
        return damaged


def cluster_across(
    allies: dict[str, Position],
    enemies: dict[str, Position],
    proximity: float,
    min_cluster: int,
) -> set[str]:
    """
    Heroes within `proximity` of at least one hero of the other side.
    Empty unless both sides are present and the group has min_cluster members.
    """
    engaged: set[str] = set()
    for ally_id, ally_pos in allies.items():
        for enemy_id, enemy_pos in enemies.items():
            if ally_pos.distance_to(enemy_pos) <= proximity:
                engaged.add(ally_id)
                engaged.add(enemy_id)
    has_ally = any(hero in allies for hero in engaged)
    has_enemy = any(hero in enemies for hero in engaged)
    if not (has_ally and has_enemy) or len(engaged) < min_cluster:
        return set()
    return engaged
