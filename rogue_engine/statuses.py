"""
Status ledger helpers. A combatant's statuses are a plain list of Status
entries, at most one per type.
"""

from __future__ import annotations
from typing import Optional

from .models import Combatant, Status, StatusType


# Statuses that do not lose a stack at player-turn start
NON_DECAYING = frozenset({StatusType.STRENGTH, StatusType.DOUBLE_NEXT_ATTACK})

# Statuses whose entry survives at value <= 0
KEPT_AT_ZERO = frozenset({StatusType.STRENGTH})


def get_status(combatant: Combatant, status_type: StatusType) -> Optional[Status]:
    for status in combatant.statuses:
        if status.status_type == status_type:
            return status
    return None


def status_value(combatant: Combatant, status_type: StatusType) -> int:
    status = get_status(combatant, status_type)
    return status.value if status else 0


def has_status(combatant: Combatant, status_type: StatusType) -> bool:
    return get_status(combatant, status_type) is not None


def apply_status(combatant: Combatant, status_type: StatusType, value: int) -> Status:
    """Reapplying an existing type adds to its value."""
    status = get_status(combatant, status_type)
    if status:
        status.value += value
    else:
        status = Status(status_type, value)
        combatant.statuses.append(status)
    return status


def remove_status(combatant: Combatant, status_type: StatusType) -> bool:
    before = len(combatant.statuses)
    combatant.statuses = [s for s in combatant.statuses if s.status_type != status_type]
    return len(combatant.statuses) != before


def tick_statuses(combatant: Combatant) -> None:
    """Start-of-player-turn decay: -1 on every decaying type, floor 0, then prune."""
    for status in combatant.statuses:
        if status.status_type not in NON_DECAYING:
            status.value = max(0, status.value - 1)
    prune_statuses(combatant)


def prune_statuses(combatant: Combatant) -> None:
    combatant.statuses = [
        s for s in combatant.statuses
        if s.value > 0 or s.status_type in KEPT_AT_ZERO
    ]
