"""
Emoji Rogue: Presentation Snapshot
Read-only, JSON-serialisable view of the combat state for a renderer.

CONTRACT: nothing here mutates the engine except pruning expired feedback.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional

from .models import CardInstance, Combatant, Enemy, Player, Skill

if TYPE_CHECKING:
    from .engine import CombatEngine


def to_snapshot(engine: CombatEngine) -> dict:
    state = engine.state
    piles = state.piles
    return {
        "run_id": state.run_id,
        "phase": state.phase.value,
        "level": state.level,
        "turn_count": state.turn_count,
        "max_level": state.max_level_reached,
        "clock_ms": engine.scheduler.now,
        "victory_pending": engine.victory_pending,
        "active_enemy_id": state.active_enemy_id,
        "player": _player_dict(state.player) if state.player else None,
        "piles": {
            "draw_count": len(piles.draw_pile),
            "hand_count": len(piles.hand),
            "discard_count": len(piles.discard_pile),
            "draw_pile": [_card_dict(c) for c in piles.draw_pile],
            "hand": [_card_dict(c) for c in piles.hand],
            "discard_pile": [_card_dict(c) for c in piles.discard_pile],
        },
        "enemies": [_enemy_dict(e) for e in state.enemies],
        "rewards": _rewards_dict(state),
        "feedback": [e.to_dict() for e in engine.feed.active()],
    }


def _combatant_dict(c: Combatant) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "emoji": c.emoji,
        "hp": c.current_hp,
        "max_hp": c.max_hp,
        "block": c.block,
        "statuses": {s.status_type.value: s.value for s in c.statuses},
    }


def _player_dict(player: Player) -> dict:
    data = _combatant_dict(player)
    data.update({
        "character_id": player.character_id,
        "energy": player.current_energy,
        "max_energy": player.max_energy,
        "skills": [_skill_dict(s) for s in player.skills],
    })
    return data


def _enemy_dict(enemy: Enemy) -> dict:
    data = _combatant_dict(enemy)
    data.update({
        "description": enemy.description,
        "intent_description": enemy.intent_description,
        "intent": enemy.intent.value,
        "intent_value": enemy.intent_value,
        "is_boss": enemy.is_boss,
        "is_minion": enemy.is_minion,
        "alive": enemy.is_alive,
    })
    return data


def _card_dict(card: CardInstance) -> dict:
    d = card.definition
    return {
        "id": card.instance_id,
        "template_id": d.id,
        "name": d.name,
        "emoji": d.emoji,
        "cost": d.cost,
        "type": d.card_type.value,
        "theme": d.theme.value if d.theme else None,
        "group_tag": d.group_tag,
        "description": d.description,
    }


def _skill_dict(skill: Skill) -> dict:
    return {
        "id": skill.id,
        "name": skill.name,
        "type": skill.skill_type.value,
        "cost": skill.cost,
        "cooldown": skill.cooldown,
        "current_cooldown": skill.current_cooldown,
    }


def _rewards_dict(state) -> Optional[dict]:
    if state.rewards is None:
        return None
    return {
        "cards": [_card_dict(c) for c in state.rewards.cards],
        "skill": _skill_dict(state.rewards.skill) if state.rewards.skill else None,
    }
