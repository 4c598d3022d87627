from __future__ import annotations

from builders import build_hero, build_hero_icon, build_player, build_snapshot

from coaching.advice import AdviceTable
from coaching.engine import CoachEngine
from models.events import AdviceCategory, ItemSuggestion, Severity
from models.snapshot import GamePhase, Team
from models.state import FightPhase, Visibility

AXE = "npc_dota_hero_axe"


def _build_engine() -> CoachEngine:
    return CoachEngine(AdviceTable.from_yaml())


def test_mid_game_tick_with_no_enemies() -> None:
    engine = _build_engine()
    advice = AdviceTable.from_yaml()

    report = engine.process_tick(build_snapshot(clock=600, player=build_player(gold=1500)))

    assert report.phase is GamePhase.MID
    assert report.tips == advice.tips_for(GamePhase.MID)
    assert report.items == (
        ItemSuggestion("Ghost Scepter", 1500),
        ItemSuggestion("Smoke of Deceit", 50),
    )
    assert report.enemies == ()
    assert not any(a.category is AdviceCategory.ENEMY for a in report.alerts)


def test_enemy_state_survives_ticks_of_the_same_match() -> None:
    engine = _build_engine()
    engine.process_tick(build_snapshot(clock=100, minimap=[build_hero_icon(AXE, 0, 0)]))
    engine.process_tick(build_snapshot(clock=110, minimap=[build_hero_icon(AXE, 100, 0)]))

    report = engine.process_tick(build_snapshot(clock=120))

    assert len(report.enemies) == 1
    assert report.enemies[0].visibility is Visibility.HIDDEN
    assert report.enemies[0].seconds_unseen == 10
    assert engine.match.ticks == 3


def test_new_match_id_resets_state() -> None:
    engine = _build_engine()
    engine.process_tick(build_snapshot(clock=100, match_id="A", minimap=[build_hero_icon(AXE, 0, 0)]))
    first_match = engine.match

    report = engine.process_tick(build_snapshot(clock=-60, match_id="B"))

    assert engine.match is not first_match
    assert engine.match.match_id == "B"
    assert engine.match.ticks == 1
    assert report.enemies == ()
    assert engine.match.enemies == {}


def test_missing_match_id_keeps_current_match() -> None:
    engine = _build_engine()
    engine.process_tick(build_snapshot(clock=100, match_id="A", minimap=[build_hero_icon(AXE, 0, 0)]))

    report = engine.process_tick(build_snapshot(clock=101, match_id=None))

    assert engine.match.match_id == "A"
    assert [e.hero_id for e in report.enemies] == [AXE]


def test_draft_tick_has_no_timers() -> None:
    engine = _build_engine()

    report = engine.process_tick(build_snapshot(clock=0, phase=GamePhase.DRAFT))

    assert report.phase is GamePhase.DRAFT
    assert report.timers == ()
    assert report.tips


def test_fight_is_reported_through_the_engine() -> None:
    engine = _build_engine()
    icons = [
        build_hero_icon("npc_dota_hero_crystal_maiden", 100, 0, team=Team.RADIANT),
        build_hero_icon(AXE, 500, 0),
    ]
    for clock, health in ((300, 1000), (301, 900), (302, 800)):
        engine.process_tick(build_snapshot(clock=clock, hero=build_hero(health=health), minimap=icons))

    active = engine.process_tick(build_snapshot(clock=304, hero=build_hero(health=700), minimap=icons))
    engine.process_tick(build_snapshot(clock=305, hero=build_hero(health=700)))
    over = engine.process_tick(build_snapshot(clock=315, hero=build_hero(health=700)))

    assert any(a.severity is Severity.CRITICAL and "TEAM FIGHT" in a.message for a in active.alerts)
    assert engine.match.fight.phase is FightPhase.IDLE
    fight_alerts = [a for a in over.alerts if a.category is AdviceCategory.FIGHT]
    assert fight_alerts[0].message == "Fight over after 3s. Involved: Axe, Crystal Maiden, Sven."
