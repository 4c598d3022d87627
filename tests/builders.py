"""Shared builders for snapshots and raw GSI payloads used across the tests."""

from __future__ import annotations
from typing import Any, Iterable

from models.snapshot import (
    Ability,
    Building,
    GamePhase,
    HeroStats,
    MinimapEntity,
    PlayerStats,
    Position,
    Snapshot,
    Team,
    UnitKind,
    phase_for,
)

IN_PROGRESS = "DOTA_GAMERULES_STATE_GAME_IN_PROGRESS"


def build_player(
    gold: int = 0,
    net_worth: int = 0,
    last_hits: int = 0,
    team: Team = Team.RADIANT,
) -> PlayerStats:
    return PlayerStats(
        name="tester",
        team=team,
        gold=gold,
        gold_reliable=0,
        gold_unreliable=gold,
        net_worth=net_worth,
        last_hits=last_hits,
        denies=0,
        kills=0,
        deaths=0,
        assists=0,
    )


def build_hero(
    x: float = 0.0,
    y: float = 0.0,
    health: int = 1000,
    max_health: int = 1000,
    mana: int = 500,
    max_mana: int = 500,
    alive: bool = True,
    abilities: Iterable[Ability] = (),
    hero_id: str = "npc_dota_hero_sven",
    buyback_cost: int = 0,
    buyback_cooldown: int = 0,
) -> HeroStats:
    return HeroStats(
        hero_id=hero_id,
        level=10,
        alive=alive,
        respawn_seconds=0,
        buyback_cost=buyback_cost,
        buyback_cooldown=buyback_cooldown,
        health=health,
        max_health=max_health,
        mana=mana,
        max_mana=max_mana,
        position=Position(x, y),
        abilities=tuple(abilities),
    )


def build_ability(
    name: str = "sven_storm_bolt",
    level: int = 1,
    cooldown: int = 0,
    can_cast: bool = True,
    passive: bool = False,
    ultimate: bool = False,
) -> Ability:
    return Ability(name, level, cooldown, can_cast, passive, ultimate)


def build_hero_icon(
    hero_id: str,
    x: float,
    y: float,
    team: Team = Team.DIRE,
    visible: bool = True,
) -> MinimapEntity:
    image = "minimap_enemyicon" if team is Team.DIRE else "minimap_herocircle"
    return MinimapEntity(
        key=f"o_{hero_id}",
        name=hero_id,
        unit_name=hero_id,
        image=image,
        team=team,
        kind=UnitKind.HERO,
        position=Position(x, y),
        visible=visible,
    )


def build_tower(name: str, team: Team, health: int = 1800) -> Building:
    return Building(name=name, team=team, health=health, max_health=1800)


def build_snapshot(
    clock: int,
    match_id: str | None = "7000000001",
    phase: GamePhase | None = None,
    player: PlayerStats | None = None,
    hero: HeroStats | None = None,
    minimap: Iterable[MinimapEntity] = (),
    buildings: Iterable[Building] = (),
    radiant_score: int = 0,
    dire_score: int = 0,
) -> Snapshot:
    return Snapshot(
        match_id=match_id,
        clock=clock,
        phase=phase or phase_for(IN_PROGRESS, clock),
        game_state=IN_PROGRESS,
        player=player if player is not None else build_player(),
        hero=hero,
        buildings=tuple(buildings),
        minimap=tuple(minimap),
        radiant_score=radiant_score,
        dire_score=dire_score,
    )


def build_payload(clock: int = 605, token: str | None = None, **sections: Any) -> dict[str, Any]:
    """A GSI POST body shaped like the one the game client sends."""
    payload: dict[str, Any] = {
        "provider": {"name": "Dota 2", "appid": 570, "version": 47},
        "map": {
            "name": "start",
            "matchid": "7000000001",
            "game_time": clock + 90,
            "clock_time": clock,
            "daytime": True,
            "game_state": IN_PROGRESS,
            "paused": False,
            "radiant_score": 3,
            "dire_score": 5,
        },
        "player": {
            "name": "tester",
            "team_name": "radiant",
            "gold": 1500,
            "gold_reliable": 500,
            "gold_unreliable": 1000,
            "net_worth": 5200,
            "last_hits": 40,
            "denies": 6,
            "kills": 2,
            "deaths": 1,
            "assists": 4,
            "gpm": 410,
            "xpm": 480,
        },
        "hero": {
            "name": "npc_dota_hero_sven",
            "level": 9,
            "alive": True,
            "health": 1100,
            "max_health": 1200,
            "mana": 300,
            "max_mana": 400,
            "xpos": -1000,
            "ypos": -200,
            "buyback_cost": 600,
            "buyback_cooldown": 0,
            "stunned": False,
            "silenced": False,
        },
    }
    if token is not None:
        payload["auth"] = {"token": token}
    payload.update(sections)
    return payload
