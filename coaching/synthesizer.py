"""
Insight Synthesizer: turns one tick's tracker outputs into an InsightReport.

Pure: the report depends only on (snapshot, enemy_view, timer_view,
fight_view) and the read-only AdviceTable injected at construction. No
wall-clock reads, no randomness, no state kept between calls. Missing
sections produce empty tuples, never errors.
"""

from __future__ import annotations
from typing import Mapping, Sequence

from coaching.advice import AdviceTable
from models.events import (
    AdviceCategory,
    Alert,
    BuildingStatus,
    EnemySummary,
    EnemyView,
    FightView,
    InsightReport,
    Severity,
    TimerView,
)
from models.snapshot import GamePhase, Snapshot, Team, format_hero_name
from models.state import FightPhase, Visibility
from utils.geometry import describe_region

DEFAULT_DANGER_RADIUS = 2000.0

# Confidence below which a hidden enemy's prediction is not worth an alert
_PREDICTION_ALERT_CONFIDENCE = 0.5
_LOW_HP_PERCENT = 25
_EXPECTED_CS_PER_MIN = 10


class InsightSynthesizer:
    def __init__(
        self,
        advice: AdviceTable,
        danger_radius: float = DEFAULT_DANGER_RADIUS,
        item_limit: int = 3,
    ) -> None:
        self._advice = advice
        self._danger_radius = danger_radius
        self._item_limit = item_limit

    def synthesize(
        self,
        snapshot: Snapshot,
        enemy_view: Mapping[str, EnemyView] | None,
        timer_view: Sequence[TimerView] | None,
        fight_view: FightView | None,
    ) -> InsightReport:
        enemies = enemy_view or {}
        phase = snapshot.phase
        gold = max(0, snapshot.player.gold) if snapshot.player else 0

        items = ()
        if snapshot.player is not None:
            items = self._advice.items_for(phase, gold, limit=self._item_limit)

        alerts: list[Alert] = []
        alerts.extend(_fight_alerts(fight_view, snapshot.clock))
        alerts.extend(self._enemy_alerts(snapshot, enemies))
        alerts.extend(_survival_alerts(snapshot))

        notes: list[Alert] = []
        notes.extend(_farming_notes(snapshot))
        notes.extend(self._benchmark_notes(snapshot))
        notes.extend(_buyback_notes(snapshot))
        notes.extend(_readiness_notes(snapshot))
        notes.extend(_map_control_notes(snapshot))

        return InsightReport(
            clock=snapshot.clock,
            phase=phase,
            tips=self._advice.tips_for(phase),
            items=items,
            timers=tuple(timer_view or ()),
            enemies=_enemy_summaries(enemies, snapshot.clock),
            buildings=_building_statuses(snapshot),
            alerts=tuple(alerts),
            notes=tuple(notes),
        )

    def _enemy_alerts(self, snapshot: Snapshot, enemies: Mapping[str, EnemyView]) -> list[Alert]:
        hero = snapshot.hero
        if hero is None or hero.position is None or not hero.alive:
            return []
        alerts: list[Alert] = []
        for view in sorted(enemies.values(), key=lambda v: v.hero_id):
            if view.visibility is Visibility.VISIBLE:
                distance = hero.position.distance_to(view.last_position)
                if distance > self._danger_radius:
                    continue
                if distance < self._danger_radius / 2:
                    alerts.append(Alert(
                        AdviceCategory.ENEMY, Severity.CRITICAL,
                        f"{view.name} is VERY CLOSE ({distance:.0f} units)!",
                    ))
                else:
                    alerts.append(Alert(
                        AdviceCategory.ENEMY, Severity.WARNING,
                        f"{view.name} is nearby ({distance:.0f} units).",
                    ))
            elif view.predicted_position is not None and view.confidence >= _PREDICTION_ALERT_CONFIDENCE:
                distance = hero.position.distance_to(view.predicted_position)
                if distance <= self._danger_radius:
                    unseen = max(0, snapshot.clock - view.last_seen_clock)
                    alerts.append(Alert(
                        AdviceCategory.ENEMY, Severity.INFO,
                        f"{view.name} unseen for {unseen}s, possibly near you "
                        f"({describe_region(view.predicted_position)}).",
                    ))
        return alerts

    def _benchmark_notes(self, snapshot: Snapshot) -> list[Alert]:
        if snapshot.player is None or snapshot.phase not in (GamePhase.MID, GamePhase.LATE):
            return []
        minutes = snapshot.clock // 60
        current, upcoming = self._advice.benchmark_at(minutes)
        if current is None:
            return []
        net_worth = max(0, snapshot.player.net_worth)
        diff = net_worth - current.net_worth
        if diff >= 1000:
            notes = [Alert(AdviceCategory.ECONOMY, Severity.INFO,
                           f"Ahead of item timings by {diff} gold.")]
        elif diff >= -1000:
            notes = [Alert(AdviceCategory.ECONOMY, Severity.INFO,
                           "On track with item timings.")]
        else:
            notes = [Alert(AdviceCategory.ECONOMY, Severity.WARNING,
                           f"Behind on item timings by {-diff} gold "
                           f"({current.minute} min target: {current.items}).")]
        if upcoming is not None:
            minutes_left = max(1, upcoming.minute - minutes)
            needed = max(0, upcoming.net_worth - net_worth)
            notes.append(Alert(
                AdviceCategory.ECONOMY, Severity.INFO,
                f"Next goal ({upcoming.minute} min): {upcoming.items}. "
                f"Need {needed} gold in {minutes_left} min ({needed // minutes_left} GPM).",
            ))
        return notes


def _fight_alerts(fight: FightView | None, clock: int) -> list[Alert]:
    if fight is None:
        return []
    alerts: list[Alert] = []
    if fight.concluded is not None:
        done = fight.concluded
        alerts.append(Alert(
            AdviceCategory.FIGHT, Severity.INFO,
            f"Fight over after {done.duration}s. Involved: {_names(done.participants)}.",
        ))
    if fight.phase is FightPhase.ACTIVE and fight.start_clock is not None:
        alerts.append(Alert(
            AdviceCategory.FIGHT, Severity.CRITICAL,
            f"TEAM FIGHT IN PROGRESS ({clock - fight.start_clock}s): {_names(fight.participants)}.",
        ))
    elif fight.entered_cooldown and fight.start_clock is not None:
        active_for = (fight.last_activity_clock or clock) - fight.start_clock
        alerts.append(Alert(
            AdviceCategory.FIGHT, Severity.WARNING,
            f"Fight paused after {active_for}s with {len(fight.participants)} heroes involved. "
            "Reset or re-engage together.",
        ))
    return alerts


def _survival_alerts(snapshot: Snapshot) -> list[Alert]:
    hero = snapshot.hero
    if hero is None or not hero.alive or hero.max_health <= 0:
        return []
    if hero.health_percent < _LOW_HP_PERCENT:
        return [Alert(AdviceCategory.SURVIVAL, Severity.WARNING,
                      f"Low HP ({hero.health_percent}%). Back off or heal.")]
    return []


def _farming_notes(snapshot: Snapshot) -> list[Alert]:
    if snapshot.phase is not GamePhase.LANING or snapshot.player is None:
        return []
    minutes = snapshot.clock // 60
    if minutes <= 0:
        return []
    last_hits = max(0, snapshot.player.last_hits)
    expected = minutes * _EXPECTED_CS_PER_MIN
    if last_hits < expected // 2:
        return [Alert(AdviceCategory.FARMING, Severity.WARNING,
                      f"Your last hits are low ({last_hits}). Focus more on last hitting.")]
    if last_hits >= expected:
        return [Alert(AdviceCategory.FARMING, Severity.INFO,
                      f"Good job on last hitting! You have {last_hits} CS.")]
    return []


def _buyback_notes(snapshot: Snapshot) -> list[Alert]:
    hero, player = snapshot.hero, snapshot.player
    if snapshot.phase is not GamePhase.LATE or hero is None or player is None or hero.buyback_cost <= 0:
        return []
    if hero.buyback_cooldown > 0:
        return [Alert(AdviceCategory.ECONOMY, Severity.WARNING,
                      f"Buyback on cooldown for {hero.buyback_cooldown}s. Play safe.")]
    gold = max(0, player.gold)
    if gold < hero.buyback_cost:
        return [Alert(AdviceCategory.ECONOMY, Severity.WARNING,
                      f"You don't have buyback gold! Need {hero.buyback_cost - gold} more gold.")]
    return [Alert(AdviceCategory.ECONOMY, Severity.INFO,
                  f"You have buyback available ({hero.buyback_cost} gold).")]


def readiness_score(snapshot: Snapshot) -> int | None:
    """
    Team-fight readiness from HP, mana and ability state.
    Unlearned abilities never count as ready. None when the hero is unknown.
    """
    hero = snapshot.hero
    if hero is None or not hero.alive:
        return None
    score = 0
    hp = hero.health_percent
    score += 2 if hp > 80 else 1 if hp > 50 else -1
    if hero.max_mana > 0:
        mana = hero.mana_percent
        score += 2 if mana > 70 else 1 if mana > 40 else -1
    if any(a.ultimate and a.is_ready for a in hero.abilities):
        score += 2
    learned = [a for a in hero.abilities if not a.passive and a.level > 0]
    if learned and all(a.is_ready for a in learned):
        score += 1
    return score


def _readiness_notes(snapshot: Snapshot) -> list[Alert]:
    if snapshot.phase not in (GamePhase.MID, GamePhase.LATE):
        return []
    score = readiness_score(snapshot)
    if score is None:
        return []
    if score >= 4:
        return [Alert(AdviceCategory.READINESS, Severity.INFO,
                      "Team fight readiness: excellent. All systems ready.")]
    if score >= 2:
        return [Alert(AdviceCategory.READINESS, Severity.INFO,
                      "Team fight readiness: good. Most resources available.")]
    if score >= 0:
        return [Alert(AdviceCategory.READINESS, Severity.WARNING,
                      "Team fight readiness: caution advised. Limited resources.")]
    return [Alert(AdviceCategory.READINESS, Severity.CRITICAL,
                  "Not ready for a team fight. Consider retreating.")]


def _map_control_notes(snapshot: Snapshot) -> list[Alert]:
    local = snapshot.local_team
    if snapshot.phase not in (GamePhase.MID, GamePhase.LATE) or not snapshot.buildings:
        return []
    if local not in (Team.RADIANT, Team.DIRE):
        return []
    ours = sum(1 for b in snapshot.buildings if b.is_tower and b.health > 0 and b.team is local)
    theirs = sum(1 for b in snapshot.buildings if b.is_tower and b.health > 0 and b.team is local.opponent)
    diff = ours - theirs
    if diff >= 3:
        text, severity = "Strong map control advantage. Consider aggressive warding.", Severity.INFO
    elif diff >= 1:
        text, severity = "Slight map control advantage. Maintain pressure.", Severity.INFO
    elif diff == 0:
        text, severity = "Even map control. Focus on objectives.", Severity.INFO
    elif diff >= -2:
        text, severity = "Losing map control. Defend remaining towers.", Severity.WARNING
    else:
        text, severity = "Significant map control disadvantage. Play defensively.", Severity.WARNING
    return [Alert(AdviceCategory.MAP_CONTROL, severity,
                  f"Towers {ours} vs {theirs}. {text}")]


def _enemy_summaries(enemies: Mapping[str, EnemyView], clock: int) -> tuple[EnemySummary, ...]:
    summaries = []
    for view in sorted(enemies.values(), key=lambda v: (-v.last_seen_clock, v.hero_id)):
        if view.visibility is Visibility.VISIBLE:
            position = view.last_position
        else:
            position = view.predicted_position
        summaries.append(EnemySummary(
            hero_id=view.hero_id,
            name=view.name,
            visibility=view.visibility,
            position=position,
            region=describe_region(position) if position is not None else "unknown area",
            seconds_unseen=max(0, clock - view.last_seen_clock),
            confidence=view.confidence,
            estimated_level=view.estimated_level,
            heading=view.heading,
        ))
    return tuple(summaries)


def _building_statuses(snapshot: Snapshot) -> tuple[BuildingStatus, ...]:
    """Damaged buildings, local team first, weakest first within a team."""
    local = snapshot.local_team
    damaged = [b for b in snapshot.buildings if b.damaged]
    damaged.sort(key=lambda b: (b.team is not local, b.team.value, b.health_percent, b.name))
    return tuple(BuildingStatus(b.display_name, b.team, b.health_percent) for b in damaged)


def _names(hero_ids: frozenset[str]) -> str:
    return ", ".join(format_hero_name(h) for h in sorted(hero_ids)) or "unknown heroes"

