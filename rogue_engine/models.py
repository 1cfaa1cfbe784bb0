"""
Emoji Rogue Combat Engine: Data Models
All combat state is represented here. Pure data, almost no logic.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union
import uuid


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class CardType(Enum):
    ATTACK = "attack"
    SKILL = "skill"
    POWER = "power"


class CardTheme(Enum):
    PHYSICAL = "physical"
    FIRE = "fire"
    ICE = "ice"
    POISON = "poison"
    HOLY = "holy"
    DARK = "dark"


class GamePhase(Enum):
    START_SCREEN = "start_screen"
    CHARACTER_SELECT = "character_select"
    LOADING = "loading"
    PLAYER_TURN = "player_turn"
    ENEMY_TURN = "enemy_turn"
    REWARD = "reward"
    GAME_OVER = "game_over"


class IntentType(Enum):
    ATTACK = "attack"
    DEFEND = "defend"
    BUFF = "buff"
    SUMMON = "summon"
    SPECIAL = "special"


class EffectType(Enum):
    DAMAGE = "damage"
    BLOCK = "block"
    HEAL = "heal"
    DRAW = "draw"
    APPLY_STATUS = "apply_status"
    ADD_ENERGY = "add_energy"


class TargetType(Enum):
    SINGLE_ENEMY = "single_enemy"
    ALL_ENEMIES = "all_enemies"
    SELF = "self"
    RANDOM_ENEMY = "random_enemy"


class StatusType(Enum):
    VULNERABLE = "vulnerable"     # Takes 50% more damage
    WEAK = "weak"                 # Deals 25% less damage
    STRENGTH = "strength"         # Flat bonus on every damage effect
    DOUBLE_NEXT_ATTACK = "double_next_attack"
    BURN = "burn"                 # Loses HP at the start of own turn
    FREEZE = "freeze"             # Enemy skips its action


class SkillType(Enum):
    ACTIVE = "active"
    PASSIVE = "passive"


class HandPassiveType(Enum):
    DAMAGE_BOOST = "damage_boost"
    HEAL_ON_TURN_END = "heal_on_turn_end"
    BLOCK_ON_TURN_END = "block_on_turn_end"


# Passive skill tag read by the damage calculator
PASSIVE_DAMAGE_BOOST = "DAMAGE_BOOST_1"


# ---------------------------------------------------------------------------
# Effects and statuses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Effect:
    effect_type: EffectType
    value: int
    target: TargetType
    status_type: Optional[StatusType] = None   # Only for APPLY_STATUS


@dataclass
class Status:
    status_type: StatusType
    value: int


@dataclass(frozen=True)
class HandPassive:
    passive_type: HandPassiveType
    value: int


# ---------------------------------------------------------------------------
# Card Definition (the template, shared across all copies)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CardDefinition:
    id: str
    name: str
    card_type: CardType
    cost: int
    effects: tuple[Effect, ...]
    description: str = ""
    emoji: str = ""
    theme: Optional[CardTheme] = None
    group_tag: Optional[str] = None          # Cards sharing a tag can be played as a combo
    hand_passive: Optional[HandPassive] = None


# ---------------------------------------------------------------------------
# Card Instance (a run-unique copy of a template)
# ---------------------------------------------------------------------------

@dataclass
class CardInstance:
    instance_id: str
    definition: CardDefinition

    @property
    def template_id(self) -> str:
        return self.definition.id

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def cost(self) -> int:
        return self.definition.cost

    @property
    def card_type(self) -> CardType:
        return self.definition.card_type

    @property
    def effects(self) -> tuple[Effect, ...]:
        return self.definition.effects

    @property
    def theme(self) -> Optional[CardTheme]:
        return self.definition.theme

    @property
    def needs_target(self) -> bool:
        return any(e.target == TargetType.SINGLE_ENEMY for e in self.effects)


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

@dataclass
class Skill:
    id: str
    template_id: str
    name: str
    skill_type: SkillType
    description: str = ""
    emoji: str = ""
    cost: int = 0
    cooldown: int = 0
    current_cooldown: int = 0
    effects: tuple[Effect, ...] = ()
    passive_effect: Optional[str] = None     # Tag such as PASSIVE_DAMAGE_BOOST
    theme: Optional[CardTheme] = CardTheme.HOLY

    @property
    def is_active(self) -> bool:
        return self.skill_type == SkillType.ACTIVE

    @property
    def is_ready(self) -> bool:
        return self.is_active and self.current_cooldown == 0

    @property
    def needs_target(self) -> bool:
        return any(e.target == TargetType.SINGLE_ENEMY for e in self.effects)


# Anything the resolver can consume: it exposes cost, effects, theme, needs_target
Playable = Union[CardInstance, Skill]


# ---------------------------------------------------------------------------
# Combatants
# ---------------------------------------------------------------------------

@dataclass
class Combatant:
    id: str
    name: str
    max_hp: int
    current_hp: int
    block: int = 0
    statuses: list[Status] = field(default_factory=list)
    emoji: str = ""

    @property
    def is_alive(self) -> bool:
        return self.current_hp > 0


@dataclass
class Player(Combatant):
    max_energy: int = 3
    current_energy: int = 3
    skills: list[Skill] = field(default_factory=list)
    base_draw_count: int = 8
    fixed_starting_hand: list[str] = field(default_factory=list)
    character_id: str = ""

    def has_passive(self, tag: str) -> bool:
        return any(
            s.skill_type == SkillType.PASSIVE and s.passive_effect == tag
            for s in self.skills
        )

    def get_skill(self, skill_id: str) -> Optional[Skill]:
        for skill in self.skills:
            if skill.id == skill_id:
                return skill
        return None


@dataclass
class Enemy(Combatant):
    description: str = ""
    intent_description: str = ""
    intent: IntentType = IntentType.ATTACK
    intent_value: int = 0
    is_boss: bool = False
    is_minion: bool = False


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Character:
    id: str
    name: str
    description: str
    emoji: str
    starting_deck: tuple[str, ...]         # Card template ids, duplicates allowed
    skills: tuple[str, ...] = ()           # Skill template ids
    max_hp: int = 100
    max_energy: int = 3
    unlock_level: int = 1
    base_draw_count: int = 8
    fixed_starting_hand: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Piles and rewards
# ---------------------------------------------------------------------------

@dataclass
class DeckPiles:
    """The three containers that partition a level's deck."""
    draw_pile: list[CardInstance] = field(default_factory=list)
    hand: list[CardInstance] = field(default_factory=list)
    discard_pile: list[CardInstance] = field(default_factory=list)

    def total(self) -> int:
        return len(self.draw_pile) + len(self.hand) + len(self.discard_pile)

    def find_in_hand(self, instance_id: str) -> Optional[CardInstance]:
        for card in self.hand:
            if card.instance_id == instance_id:
                return card
        return None


@dataclass
class RewardOffer:
    cards: list[CardInstance] = field(default_factory=list)
    skill: Optional[Skill] = None


# ---------------------------------------------------------------------------
# Full Game State
# ---------------------------------------------------------------------------

@dataclass
class GameState:
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    phase: GamePhase = GamePhase.START_SCREEN
    level: int = 1
    turn_count: int = 1
    player: Optional[Player] = None
    deck: list[CardInstance] = field(default_factory=list)   # The run deck
    piles: DeckPiles = field(default_factory=DeckPiles)
    enemies: list[Enemy] = field(default_factory=list)
    rewards: Optional[RewardOffer] = None
    active_enemy_id: Optional[str] = None
    max_level_reached: int = 1

    def get_enemy(self, enemy_id: Optional[str]) -> Optional[Enemy]:
        for enemy in self.enemies:
            if enemy.id == enemy_id:
                return enemy
        return None

    def living_enemies(self) -> list[Enemy]:
        return [e for e in self.enemies if e.current_hp > 0]
