"""
Mutable match-state objects.
Owned by the CoachEngine through a single MatchState aggregate; each tracker
is handed the part it writes. Nothing outside the tick call path touches them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto

from models.snapshot import Position


class Visibility(Enum):
    VISIBLE = auto()
    HIDDEN = auto()


class TimerKind(Enum):
    BOUNTY_RUNE = auto()
    POWER_RUNE = auto()
    WATER_RUNE = auto()
    WISDOM_RUNE = auto()
    LOTUS_POOL = auto()
    CAMP_STACK = auto()
    DAY_NIGHT = auto()


class FightPhase(Enum):
    IDLE = auto()
    BUILDING = auto()
    ACTIVE = auto()
    COOLDOWN = auto()


@dataclass(slots=True)
class EnemyRecord:
    """
    One per enemy hero seen this match. Created on first sighting, never deleted.
    History is bounded to the last two confirmed points.
    """
    hero_id: str
    display_name: str
    last_position: Position
    last_seen_clock: int
    first_seen_clock: int
    previous_position: Position | None = None
    previous_seen_clock: int | None = None
    visibility: Visibility = Visibility.VISIBLE
    predicted_position: Position | None = None   # None = unknown area
    decay: int = 0                                # 0 = just confirmed
    times_spotted: int = 1

    def confirm(self, position: Position, clock: int) -> None:
        if clock > self.last_seen_clock:
            self.previous_position = self.last_position
            self.previous_seen_clock = self.last_seen_clock
        self.last_position = position
        self.last_seen_clock = clock
        self.predicted_position = position
        self.decay = 0
        if self.visibility is Visibility.HIDDEN:
            self.times_spotted += 1
        self.visibility = Visibility.VISIBLE


@dataclass(slots=True)
class TimerEntry:
    """One per timer kind. next_due is the next occurrence not yet fired."""
    kind: TimerKind
    interval: int
    next_due: int
    last_fired: int | None = None
    exhausted: bool = False


@dataclass(slots=True)
class FightState:
    """Singleton per match. Overlapping fights collapse into this one session."""
    phase: FightPhase = FightPhase.IDLE
    participants: set[str] = field(default_factory=set)
    start_clock: int | None = None
    last_activity_clock: int | None = None

    def begin(self, clock: int, participants: set[str]) -> None:
        self.phase = FightPhase.BUILDING
        self.participants = set(participants)
        self.start_clock = clock
        self.last_activity_clock = clock

    def touch(self, clock: int, participants: set[str]) -> None:
        self.participants.update(participants)
        self.last_activity_clock = clock

    def reset(self) -> None:
        self.phase = FightPhase.IDLE
        self.participants = set()
        self.start_clock = None
        self.last_activity_clock = None


@dataclass(slots=True)
class CombatMemory:
    """Previous-tick values the fight detector diffs against."""
    health: int | None = None
    alive: bool | None = None
    total_kills: int | None = None


@dataclass(slots=True)
class MatchState:
    """
    Aggregate of everything the engine knows about one match.
    Constructed at match start, discarded when a new match id appears.
    """
    match_id: str | None
    enemies: dict[str, EnemyRecord] = field(default_factory=dict)
    timers: dict[TimerKind, TimerEntry] = field(default_factory=dict)
    fight: FightState = field(default_factory=FightState)
    combat: CombatMemory = field(default_factory=CombatMemory)
    ticks: int = 0
