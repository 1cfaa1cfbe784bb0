"""Tests for EngineConfig"""
import sys
sys.path.insert(0, '..')

import pytest

from rogue_engine.config import EngineConfig
from rogue_engine.errors import ConfigError


def test_defaults():
    config = EngineConfig()
    assert config.effect_travel_ms == 300
    assert config.victory_delay_ms == 800
    assert config.auto_pass_ms == 1500
    assert config.reward_heal == 10
    assert config.strict_invariants is False


def test_instant_zeroes_only_delays():
    config = EngineConfig.instant(strict_invariants=True)
    assert config.effect_travel_ms == 0
    assert config.enemy_action_ms == 0
    assert config.floating_text_ms == 0
    assert config.reward_heal == 10
    assert config.strict_invariants is True


def test_from_env_overrides():
    config = EngineConfig.from_env(env={
        "ROGUE_EFFECT_TRAVEL_MS": "100",
        "ROGUE_STRICT_INVARIANTS": "yes",
        "UNRELATED": "x",
    })
    assert config.effect_travel_ms == 100
    assert config.strict_invariants is True
    assert config.combo_interval_ms == 200


def test_from_env_rejects_garbage():
    with pytest.raises(ConfigError):
        EngineConfig.from_env(env={"ROGUE_MAX_ENEMIES": "four"})
    with pytest.raises(ConfigError):
        EngineConfig.from_env(env={"ROGUE_STRICT_INVARIANTS": "maybe"})
    with pytest.raises(ConfigError):
        EngineConfig.from_env(env={"ROGUE_AUTO_PASS_MS": "-5"})
