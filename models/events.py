"""
Immutable values that leave the trackers and the engine.
Views are copies of mutable match state taken at the end of a tick, so the
synthesizer and the presenter never see state change under them.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto

from models.snapshot import GamePhase, Position, Team
from models.state import FightPhase, TimerKind, Visibility


class TimerStatus(Enum):
    DUE = auto()
    UPCOMING = auto()


class Severity(Enum):
    INFO = auto()
    WARNING = auto()
    CRITICAL = auto()


class AdviceCategory(Enum):
    ENEMY = auto()
    FIGHT = auto()
    ECONOMY = auto()
    FARMING = auto()
    MAP_CONTROL = auto()
    READINESS = auto()
    SURVIVAL = auto()


@dataclass(frozen=True, slots=True)
class EnemyView:
    hero_id: str
    name: str
    visibility: Visibility
    last_position: Position
    last_seen_clock: int
    predicted_position: Position | None   # None = unknown area
    decay: int
    confidence: float                      # 1.0 = confirmed this tick
    times_spotted: int
    estimated_level: int = 1               # Guess from the match clock; GSI hides enemy levels
    heading: str | None = None             # Compass direction between the last two sightings

    @property
    def unknown_area(self) -> bool:
        return self.visibility is Visibility.HIDDEN and self.predicted_position is None


@dataclass(frozen=True, slots=True)
class TimerView:
    kind: TimerKind
    label: str
    status: TimerStatus
    due_clock: int          # Occurrence that fired (DUE) or is coming (UPCOMING)
    seconds_until: int      # 0 for DUE
    message: str


@dataclass(frozen=True, slots=True)
class FightConcluded:
    """Emitted exactly once per completed fight, on the Cooldown → Idle edge."""
    start_clock: int
    end_clock: int
    participants: frozenset[str]

    @property
    def duration(self) -> int:
        return self.end_clock - self.start_clock


@dataclass(frozen=True, slots=True)
class FightView:
    phase: FightPhase
    participants: frozenset[str]
    start_clock: int | None
    last_activity_clock: int | None
    entered_cooldown: bool = False          # ACTIVE → COOLDOWN on this tick
    concluded: FightConcluded | None = None


@dataclass(frozen=True, slots=True)
class ItemSuggestion:
    name: str
    cost: int


@dataclass(frozen=True, slots=True)
class Alert:
    category: AdviceCategory
    severity: Severity
    message: str


@dataclass(frozen=True, slots=True)
class EnemySummary:
    hero_id: str
    name: str
    visibility: Visibility
    position: Position | None    # Last confirmed if visible, predicted if hidden
    region: str                  # "unknown area" when the prediction has decayed
    seconds_unseen: int
    confidence: float
    estimated_level: int = 1
    heading: str | None = None


@dataclass(frozen=True, slots=True)
class BuildingStatus:
    name: str                    # Display name, e.g. "tower1 top"
    team: Team
    health_percent: int


@dataclass(frozen=True, slots=True)
class InsightReport:
    """
    Everything the presentation layer shows for one tick.
    Value equality: identical inputs to the synthesizer give equal reports.
    """
    clock: int
    phase: GamePhase
    tips: tuple[str, ...] = ()
    items: tuple[ItemSuggestion, ...] = ()
    timers: tuple[TimerView, ...] = ()
    enemies: tuple[EnemySummary, ...] = ()
    buildings: tuple[BuildingStatus, ...] = ()   # Damaged, still standing
    alerts: tuple[Alert, ...] = ()
    notes: tuple[Alert, ...] = ()
