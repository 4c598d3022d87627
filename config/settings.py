"""
Environment-based configuration.
Every knob comes from an environment variable (or .env); all have defaults,
so the coach runs with no configuration at all.

Usage:
    from config.settings import settings
    print(settings.gsi_port)
"""

from __future__ import annotations
import os
from dataclasses import dataclass


def _optional(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _int(key: str, default: str) -> int:
    raw = _optional(key, default)
    try:
        return int(raw)
    except ValueError:
        raise EnvironmentError(f"Environment variable '{key}' must be an integer, got {raw!r}.") from None


def _float(key: str, default: str) -> float:
    raw = _optional(key, default)
    try:
        return float(raw)
    except ValueError:
        raise EnvironmentError(f"Environment variable '{key}' must be a number, got {raw!r}.") from None


@dataclass(frozen=True)
class Settings:
    # --- GSI listener ---
    gsi_host: str
    gsi_port: int
    gsi_auth_token: str                   # Must match auth.token in the GSI cfg; empty = no check

    # --- Runtime ---
    log_level: str
    coaching_table_path: str              # YAML with tips, items and benchmarks; empty = bundled table
    snapshot_queue_size: int

    # --- Enemy tracking ---
    enemy_decay_limit: int                # Hidden ticks until a prediction is dropped
    danger_radius: float                  # Map units around the hero that trigger enemy alerts

    # --- Team fights ---
    fight_proximity: float
    fight_min_cluster: int
    fight_min_dwell_s: int
    fight_cooldown_s: int
    fight_damage_pct: float               # HP fraction lost in one tick that counts as damage

    # --- Timers ---
    timer_lead_s: int                     # Seconds before an event to start warning


def load_settings() -> Settings:
    return Settings(
        gsi_host=_optional("GSI_HOST", "127.0.0.1"),
        gsi_port=_int("GSI_PORT", "3000"),
        gsi_auth_token=_optional("GSI_AUTH_TOKEN"),
        log_level=_optional("LOG_LEVEL", "INFO"),
        coaching_table_path=_optional("COACHING_TABLE_PATH"),
        snapshot_queue_size=_int("SNAPSHOT_QUEUE_SIZE", "20"),
        enemy_decay_limit=_int("ENEMY_DECAY_LIMIT", "20"),
        danger_radius=_float("DANGER_RADIUS", "2000"),
        fight_proximity=_float("FIGHT_PROXIMITY", "1200"),
        fight_min_cluster=_int("FIGHT_MIN_CLUSTER", "3"),
        fight_min_dwell_s=_int("FIGHT_MIN_DWELL_S", "3"),
        fight_cooldown_s=_int("FIGHT_COOLDOWN_S", "10"),
        fight_damage_pct=_float("FIGHT_DAMAGE_PCT", "0.05"),
        timer_lead_s=_int("TIMER_LEAD_S", "15"),
    )


# Module-level singleton, loaded once at startup
settings = load_settings()
