"""
Damage calculator. Pure: reads combatants and the hand, mutates nothing.

Every multiplicative step truncates to an integer before the next one.
"""

from __future__ import annotations
import math
from typing import Iterable

from .models import (
    CardInstance, Combatant, HandPassiveType, Player, StatusType,
    PASSIVE_DAMAGE_BOOST,
)
from .statuses import has_status, status_value


WEAK_MULTIPLIER = 0.75
VULNERABLE_MULTIPLIER = 1.5
DOUBLE_MULTIPLIER = 2
PASSIVE_BOOST = 1


def hand_damage_bonus(hand: Iterable[CardInstance]) -> int:
    """Sum of DAMAGE_BOOST hand passives on cards still held."""
    bonus = 0
    for card in hand:
        passive = card.definition.hand_passive
        if passive and passive.passive_type == HandPassiveType.DAMAGE_BOOST:
            bonus += passive.value
    return bonus


def compute_damage(base: int, source: Combatant, target: Combatant,
                   hand: Iterable[CardInstance] = ()) -> int:
    """
    Final integer damage for one damage effect.

    Player source: base + Strength, passive boost, hand boosts, then
    DoubleNextAttack x2, Weak x0.75, target Vulnerable x1.5.
    Enemy source: base + Strength, Weak, target Vulnerable.
    """
    dmg = base + status_value(source, StatusType.STRENGTH)

    if isinstance(source, Player):
        if source.has_passive(PASSIVE_DAMAGE_BOOST):
            dmg += PASSIVE_BOOST
        dmg += hand_damage_bonus(hand)
        if has_status(source, StatusType.DOUBLE_NEXT_ATTACK):
            dmg *= DOUBLE_MULTIPLIER

    if has_status(source, StatusType.WEAK):
        dmg = math.floor(dmg * WEAK_MULTIPLIER)
    if has_status(target, StatusType.VULNERABLE):
        dmg = math.floor(dmg * VULNERABLE_MULTIPLIER)

    return max(0, dmg)
