"""
Emoji Rogue Combat Engine: Configuration
Timing and tuning knobs. Every delay is in virtual milliseconds.
"""

from __future__ import annotations
import os
from dataclasses import dataclass, fields, replace
from typing import Optional
from dotenv import load_dotenv

from .errors import ConfigError


TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class EngineConfig:
    # Presentation delays
    effect_travel_ms: int = 300       # Card or skill payload lands after this
    combo_interval_ms: int = 200      # Gap between cards of a batch play
    enemy_action_ms: int = 600        # Wait before each enemy acts
    victory_delay_ms: int = 800       # Last kill to REWARD
    auto_pass_ms: int = 1500          # Grace period before a forced end turn
    floating_text_ms: int = 1200
    vfx_ms: int = 500
    shake_ms: int = 500

    # Rules
    reward_heal: int = 10
    reward_card_count: int = 3
    enrage_after_turn: int = 10       # Enrage when turn_count exceeds this
    max_enemies: int = 4
    buff_block: int = 10

    strict_invariants: bool = False   # Raise instead of clamping

    @classmethod
    def instant(cls, **overrides) -> EngineConfig:
        """Every delay collapsed to zero. Ordering is unchanged."""
        zeroed = {f.name: 0 for f in fields(cls) if f.name.endswith("_ms")}
        zeroed.update(overrides)
        return cls(**zeroed)

    @classmethod
    def from_env(cls, prefix: str = "ROGUE_", env: Optional[dict] = None) -> EngineConfig:
        """
        Build a config from ROGUE_<FIELD> environment variables.
        A .env file in the working directory is loaded first.
        """
        if env is None:
            load_dotenv()
            env = dict(os.environ)

        config = cls()
        overrides = {}
        for f in fields(cls):
            raw = env.get(f"{prefix}{f.name.upper()}")
            if raw is None:
                continue
            current = getattr(config, f.name)
            if isinstance(current, bool):
                overrides[f.name] = _parse_bool(f.name, raw)
            else:
                try:
                    overrides[f.name] = int(raw)
                except ValueError:
                    raise ConfigError(f"{prefix}{f.name.upper()} must be an integer, got {raw!r}")
                if overrides[f.name] < 0:
                    raise ConfigError(f"{prefix}{f.name.upper()} must not be negative")
        return replace(config, **overrides)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")
