"""
Emoji Rogue: Card, Skill and Character Definitions
Everything here is declarative. The resolver gives the effects meaning.
"""

from __future__ import annotations
import random
import uuid
from dataclasses import replace
from typing import Optional

from .models import (
    CardDefinition, CardInstance, CardTheme, CardType, Character, Effect,
    EffectType, HandPassive, HandPassiveType, Skill, SkillType, StatusType,
    TargetType, PASSIVE_DAMAGE_BOOST,
)


def _dmg(value: int, target: TargetType = TargetType.SINGLE_ENEMY) -> Effect:
    return Effect(EffectType.DAMAGE, value, target)


def _status(status_type: StatusType, value: int, target: TargetType) -> Effect:
    return Effect(EffectType.APPLY_STATUS, value, target, status_type)


STARTER_CARDS: list[CardDefinition] = [

    # ── PHYSICAL ──────────────────────────────────────────────────────────
    CardDefinition(
        id="strike",
        name="Strike",
        emoji="🗡️",
        card_type=CardType.ATTACK,
        cost=1,
        effects=(_dmg(6),),
        theme=CardTheme.PHYSICAL,
        description="Deal 6 damage.",
    ),
    CardDefinition(
        id="shuriken",
        name="Shuriken",
        emoji="💠",
        card_type=CardType.ATTACK,
        cost=0,
        effects=(_dmg(3, TargetType.RANDOM_ENEMY),),
        theme=CardTheme.PHYSICAL,
        group_tag="shuriken",
        description="Deal 3 damage to a random enemy. Throw several at once.",
    ),
    CardDefinition(
        id="block",
        name="Block",
        emoji="🛡️",
        card_type=CardType.SKILL,
        cost=1,
        effects=(Effect(EffectType.BLOCK, 5, TargetType.SELF),),
        description="Gain 5 block.",
    ),
    CardDefinition(
        id="uppercut",
        name="Uppercut",
        emoji="👊",
        card_type=CardType.ATTACK,
        cost=2,
        effects=(_dmg(8), _status(StatusType.VULNERABLE, 2, TargetType.SINGLE_ENEMY)),
        theme=CardTheme.PHYSICAL,
        description="Deal 8 damage. Apply 2 Vulnerable.",
    ),
    CardDefinition(
        id="roundhouse-kick",
        name="Roundhouse Kick",
        emoji="🦵",
        card_type=CardType.ATTACK,
        cost=2,
        effects=(_dmg(7, TargetType.ALL_ENEMIES),),
        theme=CardTheme.PHYSICAL,
        description="Deal 7 damage to every enemy.",
    ),
    CardDefinition(
        id="flex",
        name="Flex",
        emoji="💪",
        card_type=CardType.POWER,
        cost=0,
        effects=(_status(StatusType.DOUBLE_NEXT_ATTACK, 1, TargetType.SELF),),
        description="Your next Attack deals double damage.",
    ),

    # ── FIRE / ICE ────────────────────────────────────────────────────────
    CardDefinition(
        id="fireball",
        name="Fireball",
        emoji="🔥",
        card_type=CardType.ATTACK,
        cost=2,
        effects=(_dmg(10), _status(StatusType.BURN, 2, TargetType.SINGLE_ENEMY)),
        theme=CardTheme.FIRE,
        description="Deal 10 damage. Apply 2 Burn.",
    ),
    CardDefinition(
        id="bomb-toss",
        name="Bomb Toss",
        emoji="💣",
        card_type=CardType.ATTACK,
        cost=1,
        effects=(_dmg(9, TargetType.RANDOM_ENEMY),),
        theme=CardTheme.FIRE,
        description="Deal 9 damage to a random enemy.",
    ),
    CardDefinition(
        id="frost-nova",
        name="Frost Nova",
        emoji="❄️",
        card_type=CardType.ATTACK,
        cost=2,
        effects=(_dmg(4, TargetType.ALL_ENEMIES), _status(StatusType.WEAK, 1, TargetType.ALL_ENEMIES)),
        theme=CardTheme.ICE,
        description="Deal 4 damage to every enemy. Apply 1 Weak to each.",
    ),
    CardDefinition(
        id="blizzard",
        name="Blizzard",
        emoji="🌨️",
        card_type=CardType.ATTACK,
        cost=3,
        effects=(_dmg(6, TargetType.ALL_ENEMIES), _status(StatusType.FREEZE, 1, TargetType.ALL_ENEMIES)),
        theme=CardTheme.ICE,
        description="Deal 6 damage to every enemy and Freeze them.",
    ),
    CardDefinition(
        id="magic-shield",
        name="Magic Shield",
        emoji="🔮",
        card_type=CardType.SKILL,
        cost=1,
        effects=(Effect(EffectType.BLOCK, 8, TargetType.SELF),),
        hand_passive=HandPassive(HandPassiveType.BLOCK_ON_TURN_END, 2),
        description="Gain 8 block. While held: gain 2 block at end of turn.",
    ),
    CardDefinition(
        id="meditate",
        name="Meditate",
        emoji="🧘",
        card_type=CardType.SKILL,
        cost=1,
        effects=(Effect(EffectType.ADD_ENERGY, 2, TargetType.SELF), Effect(EffectType.DRAW, 1, TargetType.SELF)),
        description="Gain 2 energy. Draw 1 card.",
    ),

    # ── DARK / HOLY ───────────────────────────────────────────────────────
    CardDefinition(
        id="claw",
        name="Claw",
        emoji="🦇",
        card_type=CardType.ATTACK,
        cost=1,
        effects=(_dmg(4),),
        theme=CardTheme.DARK,
        group_tag="claw",
        description="Deal 4 damage. Rake with several claws at once.",
    ),
    CardDefinition(
        id="drain-life",
        name="Drain Life",
        emoji="🩸",
        card_type=CardType.ATTACK,
        cost=2,
        effects=(_dmg(7), Effect(EffectType.HEAL, 4, TargetType.SELF)),
        theme=CardTheme.DARK,
        description="Deal 7 damage. Heal 4.",
    ),
    CardDefinition(
        id="dark-pact",
        name="Dark Pact",
        emoji="📜",
        card_type=CardType.POWER,
        cost=1,
        effects=(_status(StatusType.STRENGTH, 2, TargetType.SELF),),
        theme=CardTheme.DARK,
        hand_passive=HandPassive(HandPassiveType.DAMAGE_BOOST, 1),
        description="Gain 2 Strength. While held: +1 damage on all your attacks.",
    ),
    CardDefinition(
        id="mist-form",
        name="Mist Form",
        emoji="🌫️",
        card_type=CardType.SKILL,
        cost=1,
        effects=(Effect(EffectType.BLOCK, 6, TargetType.SELF),),
        theme=CardTheme.DARK,
        hand_passive=HandPassive(HandPassiveType.HEAL_ON_TURN_END, 2),
        description="Gain 6 block. While held: heal 2 at end of turn.",
    ),
    CardDefinition(
        id="holy-heal",
        name="Holy Heal",
        emoji="✨",
        card_type=CardType.SKILL,
        cost=1,
        effects=(Effect(EffectType.HEAL, 8, TargetType.SELF),),
        theme=CardTheme.HOLY,
        description="Heal 8.",
    ),
]

# Quick lookup by id
CARD_REGISTRY: dict[str, CardDefinition] = {c.id: c for c in STARTER_CARDS}


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

SKILL_TEMPLATES: list[Skill] = [
    Skill(
        id="smoke-bomb",
        template_id="smoke-bomb",
        name="Smoke Bomb",
        emoji="💨",
        skill_type=SkillType.ACTIVE,
        cost=1,
        cooldown=3,
        effects=(Effect(EffectType.BLOCK, 8, TargetType.SELF),),
        description="Gain 8 block.",
    ),
    Skill(
        id="mage-passive",
        template_id="mage-passive",
        name="Arcane Focus",
        emoji="🪄",
        skill_type=SkillType.PASSIVE,
        passive_effect=PASSIVE_DAMAGE_BOOST,
        description="All your damage effects deal +1.",
    ),
    Skill(
        id="blood-rite",
        template_id="blood-rite",
        name="Blood Rite",
        emoji="🍷",
        skill_type=SkillType.ACTIVE,
        cost=0,
        cooldown=4,
        effects=(Effect(EffectType.HEAL, 6, TargetType.SELF),),
        theme=CardTheme.DARK,
        description="Heal 6.",
    ),
    Skill(
        id="divine-smite",
        template_id="divine-smite",
        name="Divine Smite",
        emoji="⚡",
        skill_type=SkillType.ACTIVE,
        cost=1,
        cooldown=3,
        effects=(_dmg(12),),
        description="Deal 12 damage.",
    ),
    Skill(
        id="holy-light",
        template_id="holy-light",
        name="Holy Light",
        emoji="🌟",
        skill_type=SkillType.ACTIVE,
        cost=1,
        cooldown=4,
        effects=(Effect(EffectType.HEAL, 12, TargetType.SELF),),
        description="Heal 12.",
    ),
    Skill(
        id="battle-trance",
        template_id="battle-trance",
        name="Battle Trance",
        emoji="🌀",
        skill_type=SkillType.ACTIVE,
        cost=0,
        cooldown=3,
        effects=(Effect(EffectType.DRAW, 2, TargetType.SELF),),
        description="Draw 2 cards.",
    ),
]

SKILL_REGISTRY: dict[str, Skill] = {s.template_id: s for s in SKILL_TEMPLATES}


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------

CHARACTERS: list[Character] = [
    Character(
        id="warrior",
        name="Warrior",
        emoji="⚔️",
        description="Hits hard and cheap. Opens every fight with a Flex.",
        max_hp=80,
        max_energy=3,
        unlock_level=1,
        base_draw_count=5,
        starting_deck=(
            ("strike",) * 5 + ("shuriken",) * 4 + ("block",) * 4
            + ("uppercut", "roundhouse-kick", "flex", "bomb-toss")
        ),
        skills=("smoke-bomb",),
        fixed_starting_hand=("flex",),
    ),
    Character(
        id="mage",
        name="Mage",
        emoji="🧙",
        description="Fragile, but every spell hits a little harder.",
        max_hp=50,
        max_energy=3,
        unlock_level=2,
        base_draw_count=4,
        starting_deck=(
            ("fireball",) * 10 + ("frost-nova",) * 6
            + ("magic-shield",) * 8 + ("meditate",) * 6
        ),
        skills=("mage-passive",),
    ),
    Character(
        id="vampire",
        name="Vampire",
        emoji="🧛",
        description="Claws in combos and drinks to stay alive.",
        max_hp=65,
        max_energy=3,
        unlock_level=5,
        base_draw_count=5,
        starting_deck=(
            ("claw",) * 8 + ("drain-life",) * 4 + ("dark-pact",) * 2 + ("mist-form",) * 4
        ),
        skills=("blood-rite",),
    ),
]

CHARACTER_REGISTRY: dict[str, Character] = {c.id: c for c in CHARACTERS}


# ---------------------------------------------------------------------------
# Reward pools
# ---------------------------------------------------------------------------

CARD_REWARD_POOL: list[str] = [c.id for c in STARTER_CARDS]
SKILL_REWARD_POOL: list[str] = ["divine-smite", "holy-light", "battle-trance"]


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def new_instance_id() -> str:
    return uuid.uuid4().hex[:12]


def make_card(template_id: str) -> CardInstance:
    return CardInstance(instance_id=new_instance_id(), definition=CARD_REGISTRY[template_id])


def make_skill(template_id: str) -> Skill:
    template = SKILL_REGISTRY[template_id]
    return replace(template, id=f"{template_id}-{new_instance_id()[:6]}", current_cooldown=0)


def build_deck(character: Character) -> list[CardInstance]:
    return [make_card(t) for t in character.starting_deck]


def is_unlocked(character: Character, max_level_reached: int) -> bool:
    return character.unlock_level <= max(1, max_level_reached)


def roll_card_rewards(rng: random.Random, count: int = 3) -> list[CardInstance]:
    return [make_card(rng.choice(CARD_REWARD_POOL)) for _ in range(count)]


def roll_skill_reward(rng: random.Random) -> Optional[Skill]:
    if not SKILL_REWARD_POOL:
        return None
    return make_skill(rng.choice(SKILL_REWARD_POOL))
