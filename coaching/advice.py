"""
Static coaching content: phase tips, item recommendations, net-worth benchmarks.

Loaded once at startup and never mutated. Without an explicit path the
config/coaching.yaml next to this source tree is used, whatever the cwd.

Usage:
    table = AdviceTable.from_yaml()
    table = AdviceTable.from_yaml("/etc/dota-coach/coaching.yaml")
    table.tips_for(GamePhase.MID)
    table.items_for(GamePhase.MID, gold=1500)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from models.events import ItemSuggestion
from models.snapshot import GamePhase

log = logging.getLogger(__name__)

DEFAULT_TABLE_PATH = Path(__file__).resolve().parent.parent / "config" / "coaching.yaml"


@dataclass(frozen=True, slots=True)
class ItemBenchmark:
    minute: int
    net_worth: int
    items: str


@dataclass(frozen=True, slots=True)
class AdviceTable:
    phase_tips: dict[GamePhase, tuple[str, ...]]
    phase_items: dict[GamePhase, tuple[ItemSuggestion, ...]]
    benchmarks: tuple[ItemBenchmark, ...] = ()

    @classmethod
    def from_yaml(cls, path: str | Path | None = None) -> "AdviceTable":
        path = path or DEFAULT_TABLE_PATH
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        table = cls.from_dict(raw)
        log.info(
            "Loaded coaching table from %s (%d phases with tips, %d benchmarks)",
            path, len(table.phase_tips), len(table.benchmarks),
        )
        return table

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "AdviceTable":
        tips: dict[GamePhase, tuple[str, ...]] = {}
        for key, lines in (raw.get("phase_tips") or {}).items():
            phase = _phase_from_key(key)
            if phase is not None:
                tips[phase] = tuple(str(line) for line in lines or ())

        items: dict[GamePhase, tuple[ItemSuggestion, ...]] = {}
        for key, entries in (raw.get("items") or {}).items():
            phase = _phase_from_key(key)
            if phase is not None:
                items[phase] = tuple(
                    ItemSuggestion(name=str(e["name"]), cost=max(0, int(e["cost"])))
                    for e in entries or ()
                )

        benchmarks = tuple(sorted(
            (
                ItemBenchmark(minute=int(b["minute"]), net_worth=int(b["net_worth"]), items=str(b["items"]))
                for b in raw.get("item_benchmarks") or ()
            ),
            key=lambda b: b.minute,
        ))
        return cls(phase_tips=tips, phase_items=items, benchmarks=benchmarks)

    def tips_for(self, phase: GamePhase) -> tuple[str, ...]:
        return self.phase_tips.get(phase, ())

    def items_for(self, phase: GamePhase, gold: int, limit: int = 3) -> tuple[ItemSuggestion, ...]:
        """First `limit` items of the phase list that the player can afford now."""
        gold = max(0, gold)
        affordable = [item for item in self.phase_items.get(phase, ()) if item.cost <= gold]
        return tuple(affordable[:limit])

    def benchmark_at(self, minute: int) -> tuple[ItemBenchmark | None, ItemBenchmark | None]:
        """(latest benchmark at or before minute, next benchmark after it)."""
        current = None
        upcoming = None
        for bench in self.benchmarks:
            if bench.minute <= minute:
                current = bench
            elif upcoming is None:
                upcoming = bench
        return current, upcoming


def _phase_from_key(key: str) -> GamePhase | None:
    try:
        return GamePhase[str(key).upper()]
    except KeyError:
        log.warning("Coaching table: unknown phase key %r ignored", key)
        return None
