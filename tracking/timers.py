"""
Event Timer Registry: recurring in-game timers against the match clock.

Each TimerKind has a fixed schedule: first occurrence, interval, optional last
occurrence. Entries are created on the first tick the registry sees, with
next_due set to the first occurrence at or after that clock, so starting the
coach mid-match never fires stale reminders.

Firing rule (per tick, per entry):
  clock >= next_due  → fire once, advance next_due to the first occurrence
                       strictly after clock (missed windows collapse into one)
  0 < next_due - clock <= lead  → report as upcoming

Pure given the clock sequence: the same clocks always give the same fires.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from models.events import TimerStatus, TimerView
from models.snapshot import IN_GAME_PHASES, GamePhase, Snapshot
from models.state import TimerEntry, TimerKind

log = logging.getLogger(__name__)

DEFAULT_LEAD_S = 15

_EARLY = frozenset({GamePhase.PREGAME, GamePhase.LANING, GamePhase.MID})
_ALL = IN_GAME_PHASES


@dataclass(frozen=True, slots=True)
class TimerSpec:
    kind: TimerKind
    label: str
    first_due: int
    interval: int
    due_message: str
    upcoming_message: str
    lead_s: int | None = None         # None = registry default
    last_due: int | None = None       # No occurrences after this clock
    phases: frozenset[GamePhase] = _ALL

    def first_occurrence_at_or_after(self, clock: int) -> int:
        if clock <= self.first_due:
            return self.first_due
        cycles = -(-(clock - self.first_due) // self.interval)  # ceil
        return self.first_due + cycles * self.interval

    def first_occurrence_after(self, clock: int) -> int:
        return self.first_occurrence_at_or_after(clock + 1)


DEFAULT_TIMERS: tuple[TimerSpec, ...] = (
    TimerSpec(
        kind=TimerKind.BOUNTY_RUNE,
        label="Bounty runes",
        first_due=0,
        interval=180,
        due_message="Bounty runes are up. Grab them or contest.",
        upcoming_message="Bounty runes spawn in {s}s.",
    ),
    TimerSpec(
        kind=TimerKind.WATER_RUNE,
        label="Water runes",
        first_due=120,
        interval=120,
        last_due=240,
        due_message="Water runes spawned in the river.",
        upcoming_message="Water runes spawning in {s}s.",
        phases=frozenset({GamePhase.LANING}),
    ),
    TimerSpec(
        kind=TimerKind.POWER_RUNE,
        label="Power rune",
        first_due=360,
        interval=120,
        due_message="Power rune is up. Mid should check the river.",
        upcoming_message="Power rune spawns in {s}s.",
    ),
    TimerSpec(
        kind=TimerKind.WISDOM_RUNE,
        label="Wisdom runes",
        first_due=420,
        interval=420,
        due_message="Wisdom runes are up at the jungle shrines.",
        upcoming_message="Wisdom runes spawn in {s}s.",
    ),
    TimerSpec(
        kind=TimerKind.LOTUS_POOL,
        label="Lotus pools",
        first_due=180,
        interval=180,
        due_message="A healing lotus grew in the pools.",
        upcoming_message="Healing lotus in {s}s.",
        phases=_EARLY,
    ),
    TimerSpec(
        kind=TimerKind.CAMP_STACK,
        label="Camp stack",
        first_due=53,
        interval=60,
        lead_s=8,
        due_message="Pull the camp now to stack it.",
        upcoming_message="Stack camps now! Pull at X:53 ({s}s).",
        phases=_EARLY,
    ),
    TimerSpec(
        kind=TimerKind.DAY_NIGHT,
        label="Day/night",
        first_due=300,
        interval=300,
        due_message="Day/night cycle changed. Vision ranges shift.",
        upcoming_message="Day/night changes in {s}s.",
    ),
)


class EventTimerRegistry:
    def __init__(
        self,
        entries: dict[TimerKind, TimerEntry],
        specs: tuple[TimerSpec, ...] = DEFAULT_TIMERS,
        lead_s: int = DEFAULT_LEAD_S,
    ) -> None:
        self._entries = entries
        self._specs = {spec.kind: spec for spec in specs}
        self._lead_s = lead_s

    def update(self, snapshot: Snapshot) -> list[TimerView]:
        if snapshot.phase not in IN_GAME_PHASES:
            return []
        return self.advance(snapshot.clock, snapshot.phase)

    def advance(self, clock: int, phase: GamePhase | None = None) -> list[TimerView]:
        """
        Advance every timer to `clock`. Returns due views first, then upcoming,
        each in schedule order. `phase=None` reports every kind.
        """
        due: list[TimerView] = []
        upcoming: list[TimerView] = []
        for kind, spec in self._specs.items():
            entry = self._entries.get(kind)
            if entry is None:
                entry = TimerEntry(
                    kind=kind,
                    interval=spec.interval,
                    next_due=spec.first_occurrence_at_or_after(clock),
                )
                entry.exhausted = spec.last_due is not None and entry.next_due > spec.last_due
                self._entries[kind] = entry
            reportable = phase is None or phase in spec.phases
            fired = self._fire_if_due(spec, entry, clock)
            if fired is not None and reportable:
                due.append(TimerView(
                    kind=kind,
                    label=spec.label,
                    status=TimerStatus.DUE,
                    due_clock=fired,
                    seconds_until=0,
                    message=spec.due_message,
                ))
                continue
            if entry.exhausted or not reportable:
                continue
            remaining = entry.next_due - clock
            lead = spec.lead_s if spec.lead_s is not None else self._lead_s
            if 0 < remaining <= lead:
                upcoming.append(TimerView(
                    kind=kind,
                    label=spec.label,
                    status=TimerStatus.UPCOMING,
                    due_clock=entry.next_due,
                    seconds_until=remaining,
                    message=spec.upcoming_message.format(s=remaining),
                ))
        return due + upcoming

    def _fire_if_due(self, spec: TimerSpec, entry: TimerEntry, clock: int) -> int | None:
        if entry.exhausted or clock < entry.next_due:
            return None
        missed = entry.next_due
        entry.next_due = spec.first_occurrence_after(clock)
        latest = entry.next_due - spec.interval
        if spec.last_due is not None:
            latest = min(latest, spec.last_due)
        fired = max(missed, latest)
        entry.last_fired = clock
        if spec.last_due is not None and entry.next_due > spec.last_due:
            entry.exhausted = True
        log.debug("Timer %s fired at clock=%d (due %d), next=%d",
                  spec.kind.name, clock, fired, entry.next_due)
        return fired
