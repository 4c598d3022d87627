"""
Normalizes a Dota 2 GSI JSON payload into a canonical Snapshot.

The game client omits whole sections depending on the GSI config and on what
the player can see (spectating, draft, dead hero...). This module is the
translation layer: absent sections become None or empty tuples, numbers that
come in out of range are clamped, and the engine never sees raw dicts.

Payload sections used:
  map, player, hero, abilities, items, buildings, minimap
"""

from __future__ import annotations
from typing import Any

from models.snapshot import (
    Ability,
    Building,
    HeroStats,
    Item,
    MinimapEntity,
    PlayerStats,
    Position,
    Snapshot,
    Team,
    UnitKind,
    phase_for,
)

# Boolean hero flags GSI reports as status effects
_STATUS_FLAGS = (
    "silenced",
    "stunned",
    "disarmed",
    "magicimmune",
    "hexed",
    "muted",
    "break",
    "smoked",
    "has_debuff",
)

_TEAM_NAMES = {
    "radiant": Team.RADIANT,
    "dire": Team.DIRE,
}


# ---------------------------------------------------------------------------
# Scalar coercion
# ---------------------------------------------------------------------------

def _int(value: Any, default: int = 0, minimum: int | None = None) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError, OverflowError):
        result = default
    if minimum is not None and result < minimum:
        return minimum
    return result


def _bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


def _str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def _slot_order(key: str) -> tuple[str, int]:
    """Numeric slot order, so ability2 sorts before ability10."""
    prefix = key.rstrip("0123456789")
    suffix = key[len(prefix):]
    return prefix, int(suffix) if suffix else -1


def _section(raw: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = raw.get(key)
    return value if isinstance(value, dict) else None


def _team_from_name(name: Any) -> Team:
    return _TEAM_NAMES.get(str(name or "").lower(), Team.UNKNOWN)


def _team_from_id(value: Any) -> Team:
    try:
        return Team(_int(value))
    except ValueError:
        return Team.UNKNOWN


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def parse_player(raw: dict[str, Any] | None) -> PlayerStats | None:
    if not raw:
        return None
    return PlayerStats(
        name=_str(raw.get("name")),
        team=_team_from_name(raw.get("team_name")),
        gold=_int(raw.get("gold"), minimum=0),
        gold_reliable=_int(raw.get("gold_reliable"), minimum=0),
        gold_unreliable=_int(raw.get("gold_unreliable"), minimum=0),
        net_worth=_int(raw.get("net_worth"), minimum=0),
        last_hits=_int(raw.get("last_hits"), minimum=0),
        denies=_int(raw.get("denies"), minimum=0),
        kills=_int(raw.get("kills"), minimum=0),
        deaths=_int(raw.get("deaths"), minimum=0),
        assists=_int(raw.get("assists"), minimum=0),
        kill_streak=_int(raw.get("kill_streak"), minimum=0),
        gpm=_int(raw.get("gpm"), minimum=0),
        xpm=_int(raw.get("xpm"), minimum=0),
    )


def parse_abilities(raw: dict[str, Any] | None) -> tuple[Ability, ...]:
    if not raw:
        return ()
    abilities = []
    for key in sorted(raw, key=_slot_order):
        data = raw[key]
        if not isinstance(data, dict) or not data.get("name"):
            continue
        abilities.append(Ability(
            name=str(data["name"]),
            level=_int(data.get("level"), minimum=0),
            cooldown=_int(data.get("cooldown"), minimum=0),
            can_cast=_bool(data.get("can_cast")),
            passive=_bool(data.get("passive")),
            ultimate=_bool(data.get("ultimate")),
        ))
    return tuple(abilities)


def parse_items(raw: dict[str, Any] | None) -> tuple[Item, ...]:
    if not raw:
        return ()
    items = []
    for slot in sorted(raw, key=_slot_order):
        data = raw[slot]
        if not isinstance(data, dict):
            continue
        name = data.get("name")
        if not name or name == "empty":
            continue
        items.append(Item(
            name=str(name),
            slot=slot,
            cooldown=_int(data.get("cooldown"), minimum=0),
            charges=_int(data.get("charges", data.get("item_charges")), minimum=0),
            can_cast=_bool(data.get("can_cast")),
            passive=_bool(data.get("passive")),
        ))
    return tuple(items)


def parse_hero(
    raw: dict[str, Any] | None,
    abilities: tuple[Ability, ...] = (),
    items: tuple[Item, ...] = (),
) -> HeroStats | None:
    if not raw:
        return None
    max_health = _int(raw.get("max_health"), minimum=0)
    max_mana = _int(raw.get("max_mana"), minimum=0)
    health = _int(raw.get("health"), minimum=0)
    mana = _int(raw.get("mana"), minimum=0)
    if max_health:
        health = min(health, max_health)
    if max_mana:
        mana = min(mana, max_mana)

    position = None
    if raw.get("xpos") is not None and raw.get("ypos") is not None:
        position = Position(float(_int(raw["xpos"])), float(_int(raw["ypos"])))

    return HeroStats(
        hero_id=_str(raw.get("name")),
        level=_int(raw.get("level"), minimum=0),
        alive=_bool(raw.get("alive"), default=True),
        respawn_seconds=_int(raw.get("respawn_seconds"), minimum=0),
        buyback_cost=_int(raw.get("buyback_cost"), minimum=0),
        buyback_cooldown=_int(raw.get("buyback_cooldown"), minimum=0),
        health=health,
        max_health=max_health,
        mana=mana,
        max_mana=max_mana,
        position=position,
        status_effects=frozenset(flag for flag in _STATUS_FLAGS if _bool(raw.get(flag))),
        abilities=abilities,
        items=items,
    )


def parse_buildings(raw: dict[str, Any] | None) -> tuple[Building, ...]:
    """buildings: {"radiant": {"dota_goodguys_tower1_top": {"health", "max_health"}}, "dire": {...}}"""
    if not raw:
        return ()
    buildings = []
    for team_name in sorted(raw):
        team_buildings = raw[team_name]
        if not isinstance(team_buildings, dict):
            continue
        team = _team_from_name(team_name)
        for name in sorted(team_buildings):
            data = team_buildings[name]
            if not isinstance(data, dict):
                continue
            max_health = _int(data.get("max_health"), minimum=0)
            health = _int(data.get("health"), minimum=0)
            buildings.append(Building(
                name=name,
                team=team,
                health=min(health, max_health) if max_health else health,
                max_health=max_health,
            ))
    return tuple(buildings)


def unit_kind(unit_name: str | None, name: str | None, image: str) -> UnitKind:
    label = f"{unit_name or ''} {name or ''}".lower()
    if "npc_dota_hero_" in label or image in ("minimap_enemyicon", "minimap_herocircle"):
        return UnitKind.HERO
    if "ward" in label:
        return UnitKind.WARD
    if "courier" in label:
        return UnitKind.COURIER
    if any(tag in label for tag in ("tower", "barracks", "fort", "building", "filler")):
        return UnitKind.BUILDING
    if "creep" in label or "neutral" in label:
        return UnitKind.CREEP
    return UnitKind.OTHER


def parse_minimap(raw: dict[str, Any] | None) -> tuple[MinimapEntity, ...]:
    if not raw:
        return ()
    entities = []
    for key in sorted(raw):
        data = raw[key]
        if not isinstance(data, dict):
            continue
        if data.get("xpos") is None or data.get("ypos") is None:
            continue
        name = _str(data.get("name"))
        unit_name = _str(data.get("unitname"))
        image = str(data.get("image") or "")
        entities.append(MinimapEntity(
            key=key,
            name=name,
            unit_name=unit_name,
            image=image,
            team=_team_from_id(data.get("team")),
            kind=unit_kind(unit_name, name, image),
            position=Position(float(_int(data["xpos"])), float(_int(data["ypos"]))),
            visible=_bool(data.get("visible"), default=True),
        ))
    return tuple(entities)


# ---------------------------------------------------------------------------
# GSI payload → Snapshot
# ---------------------------------------------------------------------------

def parse_snapshot(raw: dict[str, Any]) -> Snapshot:
    """
    Build a Snapshot from one GSI POST body. Never raises on missing or
    mistyped fields: they map to "not observed" values.
    """
    map_data = _section(raw, "map") or {}
    clock_raw = map_data.get("clock_time", map_data.get("game_time"))
    clock = _int(clock_raw)
    game_state = _str(map_data.get("game_state"))

    abilities = parse_abilities(_section(raw, "abilities"))
    items = parse_items(_section(raw, "items"))

    return Snapshot(
        match_id=_str(map_data.get("matchid")),
        clock=clock,
        phase=phase_for(game_state, clock),
        game_state=game_state,
        daytime=_bool(map_data["daytime"]) if "daytime" in map_data else None,
        paused=_bool(map_data.get("paused")),
        radiant_score=_int(map_data.get("radiant_score"), minimum=0),
        dire_score=_int(map_data.get("dire_score"), minimum=0),
        player=parse_player(_section(raw, "player")),
        hero=parse_hero(_section(raw, "hero"), abilities, items),
        buildings=parse_buildings(_section(raw, "buildings")),
        minimap=parse_minimap(_section(raw, "minimap")),
    )


def auth_token(raw: dict[str, Any]) -> str | None:
    auth = _section(raw, "auth")
    return _str(auth.get("token")) if auth else None
