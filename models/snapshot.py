"""
Typed, immutable representation of one Dota 2 GSI payload.

A Snapshot is created fresh for every tick by gsi/parser.py and never mutated.
Sections the game client did not send are None (player/hero) or empty tuples
(abilities, items, buildings, minimap): "not observed", never an error.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum, auto


class GamePhase(Enum):
    DRAFT = auto()
    PREGAME = auto()
    LANING = auto()
    MID = auto()
    LATE = auto()
    POST_GAME = auto()


# Phases in which the match clock is running
IN_GAME_PHASES = frozenset({
    GamePhase.PREGAME,
    GamePhase.LANING,
    GamePhase.MID,
    GamePhase.LATE,
})


class Team(Enum):
    """GSI encodes teams as integers on minimap objects."""
    UNKNOWN = 0
    RADIANT = 2
    DIRE = 3
    NEUTRAL = 4

    @property
    def opponent(self) -> "Team":
        if self is Team.RADIANT:
            return Team.DIRE
        if self is Team.DIRE:
            return Team.RADIANT
        return Team.UNKNOWN


class UnitKind(Enum):
    HERO = auto()
    CREEP = auto()
    WARD = auto()
    BUILDING = auto()
    COURIER = auto()
    OTHER = auto()


class AbilityStatus(Enum):
    """
    Explicit ability state. Readiness is never inferred from cooldown alone:
    an unlearned ability has cooldown 0 but is not castable.
    """
    UNLEARNED = auto()
    LEVELED = auto()
    ON_COOLDOWN = auto()


@dataclass(frozen=True, slots=True)
class Position:
    x: float
    y: float

    def distance_to(self, other: "Position") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True, slots=True)
class Ability:
    name: str
    level: int
    cooldown: int          # Seconds remaining; 0 when off cooldown
    can_cast: bool
    passive: bool
    ultimate: bool

    @property
    def status(self) -> AbilityStatus:
        if self.level <= 0:
            return AbilityStatus.UNLEARNED
        if self.cooldown > 0:
            return AbilityStatus.ON_COOLDOWN
        return AbilityStatus.LEVELED

    @property
    def is_ready(self) -> bool:
        return self.status is AbilityStatus.LEVELED and self.can_cast


@dataclass(frozen=True, slots=True)
class Item:
    name: str
    slot: str              # "slot0".."slot8", "stash0", "teleport0", "neutral0"
    cooldown: int = 0
    charges: int = 0
    can_cast: bool = False
    passive: bool = False


@dataclass(frozen=True, slots=True)
class Building:
    name: str              # e.g. "dota_goodguys_tower1_top"
    team: Team
    health: int
    max_health: int

    @property
    def is_tower(self) -> bool:
        return "tower" in self.name

    @property
    def health_percent(self) -> int:
        if self.max_health <= 0:
            return 0
        return int(self.health * 100 / self.max_health)

    @property
    def display_name(self) -> str:
        """dota_goodguys_tower1_top → tower1 top"""
        name = self.name.replace("dota_goodguys_", "").replace("dota_badguys_", "")
        return name.replace("_", " ")

    @property
    def damaged(self) -> bool:
        """Still standing but below full health."""
        return 0 < self.health < self.max_health


@dataclass(frozen=True, slots=True)
class MinimapEntity:
    key: str               # GSI object key, e.g. "o12"
    name: str | None       # Hero identity for hero icons, e.g. "npc_dota_hero_axe"
    unit_name: str | None
    image: str             # e.g. "minimap_enemyicon"
    team: Team
    kind: UnitKind
    position: Position
    visible: bool = True

    @property
    def hero_id(self) -> str | None:
        """Stable identity for hero entities; None for everything else."""
        if self.kind is not UnitKind.HERO:
            return None
        for candidate in (self.unit_name, self.name):
            if candidate and candidate.startswith("npc_dota_hero_"):
                return candidate
        return self.name or self.unit_name


@dataclass(frozen=True, slots=True)
class PlayerStats:
    name: str | None
    team: Team
    gold: int
    gold_reliable: int
    gold_unreliable: int
    net_worth: int
    last_hits: int
    denies: int
    kills: int
    deaths: int
    assists: int
    kill_streak: int = 0
    gpm: int = 0
    xpm: int = 0


@dataclass(frozen=True, slots=True)
class HeroStats:
    hero_id: str | None
    level: int
    alive: bool
    respawn_seconds: int
    buyback_cost: int
    buyback_cooldown: int
    health: int
    max_health: int
    mana: int
    max_mana: int
    position: Position | None
    status_effects: frozenset[str] = frozenset()
    abilities: tuple[Ability, ...] = ()
    items: tuple[Item, ...] = ()

    @property
    def health_percent(self) -> int:
        if self.max_health <= 0:
            return 0
        return int(self.health * 100 / self.max_health)

    @property
    def mana_percent(self) -> int:
        if self.max_mana <= 0:
            return 0
        return int(self.mana * 100 / self.max_mana)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """One GSI payload. Owned by a single tick, discarded after synthesis."""
    match_id: str | None
    clock: int             # Signed seconds; negative before the horn
    phase: GamePhase
    game_state: str | None = None
    daytime: bool | None = None
    paused: bool = False
    radiant_score: int = 0
    dire_score: int = 0
    player: PlayerStats | None = None
    hero: HeroStats | None = None
    buildings: tuple[Building, ...] = ()
    minimap: tuple[MinimapEntity, ...] = ()

    @property
    def local_team(self) -> Team:
        return self.player.team if self.player else Team.UNKNOWN

    @property
    def total_kills(self) -> int:
        return self.radiant_score + self.dire_score

    def enemy_heroes(self) -> list[MinimapEntity]:
        """Visible enemy hero entities on the minimap this tick."""
        local = self.local_team
        enemies: list[MinimapEntity] = []
        for entity in self.minimap:
            if entity.kind is not UnitKind.HERO or not entity.visible:
                continue
            if local in (Team.RADIANT, Team.DIRE):
                if entity.team is local.opponent:
                    enemies.append(entity)
            elif entity.image == "minimap_enemyicon":
                enemies.append(entity)
        return enemies

    def allied_heroes(self) -> list[MinimapEntity]:
        """Visible allied hero entities (may include the local hero's own icon)."""
        local = self.local_team
        if local not in (Team.RADIANT, Team.DIRE):
            return []
        return [
            e for e in self.minimap
            if e.kind is UnitKind.HERO and e.visible and e.team is local
        ]


def phase_for(game_state: str | None, clock: int) -> GamePhase:
    """
    Derive the coaching phase from the GSI game_state string and match clock.

    DOTA_GAMERULES_STATE_* values:
      HERO_SELECTION / STRATEGY_TIME / INIT / WAIT_FOR_* / CUSTOM_GAME_SETUP → DRAFT
      PRE_GAME                                                         → PREGAME
      POST_GAME / LAST                                                 → POST_GAME
    Everything else (GAME_IN_PROGRESS, DISCONNECT, missing) uses the clock.
    """
    state = (game_state or "").upper()
    if any(tag in state for tag in ("HERO_SELECTION", "STRATEGY_TIME", "INIT", "WAIT_FOR", "CUSTOM_GAME_SETUP")):
        return GamePhase.DRAFT
    if "PRE_GAME" in state:
        return GamePhase.PREGAME
    if "POST_GAME" in state or state.endswith("_LAST"):
        return GamePhase.POST_GAME
    if clock < 0:
        return GamePhase.PREGAME
    if clock < 600:
        return GamePhase.LANING
    if clock < 1500:
        return GamePhase.MID
    return GamePhase.LATE


def format_hero_name(hero_id: str) -> str:
    """npc_dota_hero_bounty_hunter → Bounty Hunter"""
    name = hero_id.replace("npc_dota_hero_", "")
    return " ".join(word.capitalize() for word in name.split("_") if word)


def format_clock(seconds: int) -> str:
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    return f"{sign}{seconds // 60}:{seconds % 60:02d}"
