from __future__ import annotations

import json

from builders import build_payload

from gsi.parser import auth_token, parse_snapshot, unit_kind
from models.snapshot import AbilityStatus, GamePhase, Position, Team, UnitKind


def _full_payload() -> dict:
    return build_payload(
        clock=605,
        token="secret",
        abilities={
            "ability0": {"name": "sven_storm_bolt", "level": 2, "can_cast": True,
                         "passive": False, "cooldown": 0, "ultimate": False},
            "ability3": {"name": "sven_gods_strength", "level": 0, "can_cast": False,
                         "passive": False, "cooldown": 0, "ultimate": True},
        },
        items={
            "slot0": {"name": "item_power_treads", "can_cast": True},
            "slot1": {"name": "empty"},
            "stash0": {"name": "empty"},
            "teleport0": {"name": "item_tpscroll", "charges": 1, "cooldown": 12},
        },
        buildings={
            "radiant": {"dota_goodguys_tower1_top": {"health": 1800, "max_health": 1800}},
            "dire": {"dota_badguys_tower1_mid": {"health": 0, "max_health": 1800}},
        },
        minimap={
            "o1": {"xpos": 500, "ypos": 600, "image": "minimap_enemyicon", "team": 3,
                   "unitname": "npc_dota_hero_axe", "name": "npc_dota_hero_axe", "visionrange": 0},
            "o2": {"xpos": 0, "ypos": 0, "image": "minimap_ward_obs", "team": 2,
                   "unitname": "npc_dota_observer_wards"},
            "o3": {"image": "minimap_creep", "team": 2},
        },
    )


def test_parse_snapshot_maps_every_section() -> None:
    snapshot = parse_snapshot(_full_payload())

    assert snapshot.match_id == "7000000001"
    assert snapshot.clock == 605
    assert snapshot.phase is GamePhase.MID
    assert snapshot.daytime is True
    assert snapshot.total_kills == 8

    assert snapshot.player is not None
    assert snapshot.player.team is Team.RADIANT
    assert snapshot.player.gold == 1500
    assert snapshot.player.last_hits == 40

    hero = snapshot.hero
    assert hero is not None
    assert hero.hero_id == "npc_dota_hero_sven"
    assert hero.position == Position(-1000.0, -200.0)
    assert [a.name for a in hero.abilities] == ["sven_storm_bolt", "sven_gods_strength"]
    assert hero.abilities[1].status is AbilityStatus.UNLEARNED
    assert [i.name for i in hero.items] == ["item_power_treads", "item_tpscroll"]
    assert hero.items[1].charges == 1

    assert len(snapshot.buildings) == 2
    assert {b.team for b in snapshot.buildings} == {Team.RADIANT, Team.DIRE}

    # o3 has no coordinates and is skipped
    assert [e.kind for e in snapshot.minimap] == [UnitKind.HERO, UnitKind.WARD]
    assert [e.hero_id for e in snapshot.enemy_heroes()] == ["npc_dota_hero_axe"]


def test_parse_snapshot_absent_sections_are_not_observed() -> None:
    snapshot = parse_snapshot({"map": {"clock_time": 30, "game_state": "DOTA_GAMERULES_STATE_GAME_IN_PROGRESS"}})

    assert snapshot.player is None
    assert snapshot.hero is None
    assert snapshot.buildings == ()
    assert snapshot.minimap == ()
    assert snapshot.match_id is None
    assert snapshot.phase is GamePhase.LANING


def test_parse_snapshot_tolerates_garbage_sections() -> None:
    snapshot = parse_snapshot({"map": "nonsense", "hero": [1, 2, 3], "minimap": None})

    assert snapshot.clock == 0
    assert snapshot.hero is None
    assert snapshot.minimap == ()


def test_parse_snapshot_clamps_out_of_range_values() -> None:
    payload = build_payload()
    payload["player"]["gold"] = -250
    payload["player"]["net_worth"] = "not a number"
    payload["hero"]["health"] = 1500
    payload["hero"]["max_health"] = 1200
    payload["hero"]["mana"] = -10

    snapshot = parse_snapshot(payload)

    assert snapshot.player.gold == 0
    assert snapshot.player.net_worth == 0
    assert snapshot.hero.health == 1200
    assert snapshot.hero.mana == 0


def test_parse_snapshot_clock_falls_back_to_game_time() -> None:
    snapshot = parse_snapshot({"map": {"game_time": 1600}})

    assert snapshot.clock == 1600
    assert snapshot.phase is GamePhase.LATE


def test_parse_snapshot_draft_and_pregame_states() -> None:
    draft = parse_snapshot({"map": {"clock_time": 0, "game_state": "DOTA_GAMERULES_STATE_HERO_SELECTION"}})
    pregame = parse_snapshot({"map": {"clock_time": -75, "game_state": "DOTA_GAMERULES_STATE_PRE_GAME"}})
    post = parse_snapshot({"map": {"clock_time": 2400, "game_state": "DOTA_GAMERULES_STATE_POST_GAME"}})

    assert draft.phase is GamePhase.DRAFT
    assert pregame.phase is GamePhase.PREGAME
    assert pregame.clock == -75
    assert post.phase is GamePhase.POST_GAME


def test_parse_snapshot_status_effects_from_hero_flags() -> None:
    payload = build_payload()
    payload["hero"].update({"stunned": True, "smoked": True, "silenced": False})

    hero = parse_snapshot(payload).hero

    assert hero.status_effects == frozenset({"stunned", "smoked"})


def test_unknown_team_id_maps_to_unknown() -> None:
    snapshot = parse_snapshot({"minimap": {"o1": {"xpos": 1, "ypos": 2, "team": 9, "image": "x"}}})

    assert snapshot.minimap[0].team is Team.UNKNOWN


def test_unit_kind_from_names() -> None:
    assert unit_kind("npc_dota_hero_lion", None, "") is UnitKind.HERO
    assert unit_kind(None, None, "minimap_enemyicon") is UnitKind.HERO
    assert unit_kind("npc_dota_sentry_wards", None, "") is UnitKind.WARD
    assert unit_kind("npc_dota_courier", None, "") is UnitKind.COURIER
    assert unit_kind("npc_dota_creep_badguys_melee", None, "") is UnitKind.CREEP
    assert unit_kind(None, "dota_goodguys_tower2_mid", "") is UnitKind.BUILDING
    assert unit_kind("npc_dota_roshan", None, "") is UnitKind.OTHER


def test_auth_token() -> None:
    assert auth_token(build_payload(token="secret")) == "secret"
    assert auth_token(build_payload()) is None


def test_parse_snapshot_non_finite_numbers_fall_back_to_defaults() -> None:
    raw = json.loads(
        '{"map": {"clock_time": Infinity, "radiant_score": NaN},'
        ' "player": {"gold": 1e400, "kills": -1e400},'
        ' "minimap": {"o1": {"xpos": 1e400, "ypos": 5, "team": Infinity, "image": "x"}}}'
    )

    snapshot = parse_snapshot(raw)

    assert snapshot.clock == 0
    assert snapshot.radiant_score == 0
    assert snapshot.player.gold == 0
    assert snapshot.player.kills == 0
    assert snapshot.minimap[0].position == Position(0.0, 5.0)
    assert snapshot.minimap[0].team is Team.UNKNOWN


def test_abilities_and_items_keep_numeric_slot_order() -> None:
    payload = build_payload(
        abilities={
            f"ability{index}": {"name": f"spell_{index}", "level": 1}
            for index in (10, 2, 0, 1)
        },
        items={
            "slot10": {"name": "item_blink"},
            "slot2": {"name": "item_magic_wand"},
            "slot0": {"name": "item_power_treads"},
        },
    )

    hero = parse_snapshot(payload).hero

    assert [ability.name for ability in hero.abilities] == ["spell_0", "spell_1", "spell_2", "spell_10"]
    assert [item.slot for item in hero.items] == ["slot0", "slot2", "slot10"]
