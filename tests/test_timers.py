from __future__ import annotations

from builders import build_snapshot

from models.events import TimerStatus
from models.snapshot import GamePhase
from models.state import TimerKind
from tracking.timers import EventTimerRegistry, TimerSpec


def _build_spec(first_due: int = 10, interval: int = 10, **kwargs) -> TimerSpec:
    return TimerSpec(
        kind=TimerKind.BOUNTY_RUNE,
        label="Test timer",
        first_due=first_due,
        interval=interval,
        due_message="due",
        upcoming_message="in {s}s",
        **kwargs,
    )


def _due(views) -> list:
    return [v for v in views if v.status is TimerStatus.DUE]


def test_interval_timer_fires_once_per_occurrence() -> None:
    registry = EventTimerRegistry({}, specs=(_build_spec(),), lead_s=0)

    fired = []
    for clock in (0, 5, 10, 15, 20):
        fired.extend(_due(registry.advance(clock)))

    assert len(fired) == 2
    assert [v.due_clock for v in fired] == [10, 20]


def test_missed_windows_collapse_into_one_fire() -> None:
    entries = {}
    registry = EventTimerRegistry(entries, specs=(_build_spec(),), lead_s=0)
    registry.advance(0)

    fired = _due(registry.advance(45))

    assert len(fired) == 1
    assert fired[0].due_clock == 40
    assert entries[TimerKind.BOUNTY_RUNE].next_due == 50
    assert entries[TimerKind.BOUNTY_RUNE].last_fired == 45
    assert _due(registry.advance(47)) == []
    assert len(_due(registry.advance(50))) == 1


def test_same_clock_twice_does_not_refire() -> None:
    registry = EventTimerRegistry({}, specs=(_build_spec(),), lead_s=0)
    registry.advance(0)

    assert len(_due(registry.advance(10))) == 1
    assert _due(registry.advance(10)) == []


def test_upcoming_reported_inside_lead_window() -> None:
    registry = EventTimerRegistry({}, specs=(_build_spec(first_due=30, interval=30),), lead_s=5)

    assert registry.advance(20) == []
    views = registry.advance(26)

    assert len(views) == 1
    assert views[0].status is TimerStatus.UPCOMING
    assert views[0].seconds_until == 4
    assert views[0].due_clock == 30
    assert views[0].message == "in 4s"


def test_last_due_exhausts_timer() -> None:
    registry = EventTimerRegistry({}, specs=(_build_spec(first_due=10, interval=10, last_due=20),), lead_s=0)

    fired = []
    for clock in range(0, 60, 5):
        fired.extend(_due(registry.advance(clock)))

    assert [v.due_clock for v in fired] == [10, 20]


def test_water_runes_only_during_laning() -> None:
    registry = EventTimerRegistry({})

    water = []
    for clock in (0, 120, 240, 360, 480):
        views = registry.advance(clock, GamePhase.LANING)
        water.extend(v for v in _due(views) if v.kind is TimerKind.WATER_RUNE)

    assert [v.due_clock for v in water] == [120, 240]


def test_default_bounty_rune_upcoming_message() -> None:
    registry = EventTimerRegistry({})
    registry.advance(0, GamePhase.LANING)

    views = registry.advance(170, GamePhase.LANING)

    bounty = [v for v in views if v.kind is TimerKind.BOUNTY_RUNE]
    assert len(bounty) == 1
    assert bounty[0].status is TimerStatus.UPCOMING
    assert bounty[0].message == "Bounty runes spawn in 10s."


def test_due_views_come_before_upcoming() -> None:
    registry = EventTimerRegistry({})
    registry.advance(0, GamePhase.LANING)

    views = registry.advance(170, GamePhase.LANING)

    statuses = [v.status for v in views]
    assert TimerStatus.DUE in statuses and TimerStatus.UPCOMING in statuses
    assert statuses == sorted(statuses, key=lambda s: s is TimerStatus.UPCOMING)


def test_joining_mid_match_fires_nothing_stale() -> None:
    registry = EventTimerRegistry({})

    views = registry.advance(1000, GamePhase.MID)

    assert _due(views) == []


def test_update_ignores_draft_and_post_game() -> None:
    registry = EventTimerRegistry({})

    assert registry.update(build_snapshot(clock=0, phase=GamePhase.DRAFT)) == []
    assert registry.update(build_snapshot(clock=3000, phase=GamePhase.POST_GAME)) == []


def test_timer_hidden_outside_its_phases_still_advances() -> None:
    entries = {}
    registry = EventTimerRegistry(entries)
    registry.advance(0, GamePhase.LANING)

    views = registry.advance(1600, GamePhase.LATE)

    assert all(v.kind is not TimerKind.CAMP_STACK for v in views)
    assert entries[TimerKind.CAMP_STACK].next_due > 1600
