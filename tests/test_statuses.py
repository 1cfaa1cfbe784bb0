"""Tests for the status ledger"""
import sys
sys.path.insert(0, '..')

from rogue_engine.models import Enemy, StatusType
from rogue_engine.statuses import (
    apply_status, get_status, has_status, remove_status, status_value,
    tick_statuses,
)


def make_enemy() -> Enemy:
    return Enemy(id="e1", name="Dummy", max_hp=30, current_hp=30)


def test_reapplying_stacks_by_addition():
    enemy = make_enemy()
    apply_status(enemy, StatusType.VULNERABLE, 2)
    apply_status(enemy, StatusType.VULNERABLE, 1)
    assert status_value(enemy, StatusType.VULNERABLE) == 3
    assert len(enemy.statuses) == 1


def test_tick_decays_and_prunes():
    enemy = make_enemy()
    apply_status(enemy, StatusType.VULNERABLE, 2)
    apply_status(enemy, StatusType.WEAK, 1)
    apply_status(enemy, StatusType.BURN, 3)
    tick_statuses(enemy)
    assert status_value(enemy, StatusType.VULNERABLE) == 1
    assert not has_status(enemy, StatusType.WEAK)
    assert status_value(enemy, StatusType.BURN) == 2


def test_strength_and_double_do_not_decay():
    enemy = make_enemy()
    apply_status(enemy, StatusType.STRENGTH, 3)
    apply_status(enemy, StatusType.DOUBLE_NEXT_ATTACK, 1)
    for _ in range(4):
        tick_statuses(enemy)
    assert status_value(enemy, StatusType.STRENGTH) == 3
    assert status_value(enemy, StatusType.DOUBLE_NEXT_ATTACK) == 1


def test_strength_at_zero_is_kept():
    enemy = make_enemy()
    apply_status(enemy, StatusType.STRENGTH, 2)
    apply_status(enemy, StatusType.STRENGTH, -2)
    tick_statuses(enemy)
    strength = get_status(enemy, StatusType.STRENGTH)
    assert strength is not None
    assert strength.value == 0


def test_remove_status():
    enemy = make_enemy()
    apply_status(enemy, StatusType.FREEZE, 1)
    assert remove_status(enemy, StatusType.FREEZE)
    assert not remove_status(enemy, StatusType.FREEZE)
    assert enemy.statuses == []
