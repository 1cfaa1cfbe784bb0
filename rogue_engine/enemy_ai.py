"""
Emoji Rogue Combat Engine: Enemy AI
Level spawning, intent execution and intent re-rolls.

Execution is deterministic given the intent. Randomness only enters when a
new intent is picked and when a minion template is chosen.
"""

from __future__ import annotations
import logging
import math
import random

from .cards import new_instance_id
from .config import EngineConfig
from .feedback import BLOCK_COLOR, DAMAGE_COLOR, INFO_COLOR
from .models import Enemy, GameState, GamePhase, IntentType, StatusType
from .profile_agent import EnemyProfile
from .resolver import EffectResolver
from .statuses import has_status, status_value

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BOSS_BASE_HP = 120
NORMAL_BASE_HP = 40
HP_GROWTH = 1.15            # Per level after the first
MINION_HP_RATIO = 0.3
BOSS_MINIONS = 2
MINION_FROM_LEVEL = 3       # Non-boss levels spawn one minion from here on
SPECIAL_MULTIPLIER = 1.5
BUFF_THRESHOLD = 0.7        # Non-boss: roll above this means Buff

# Boss bands as (upper bound, intent), rolled against random() in [0, 1)
BOSS_BANDS_FEW_MINIONS = [
    (0.25, IntentType.SUMMON),
    (0.65, IntentType.ATTACK),
    (0.80, IntentType.BUFF),
    (1.00, IntentType.SPECIAL),
]
BOSS_BANDS_FULL = [
    (0.55, IntentType.ATTACK),
    (0.75, IntentType.BUFF),
    (1.00, IntentType.SPECIAL),
]
FEW_MINIONS = 2

MINION_PRESETS = [
    ("Imp", "😈", "A giggling little helper."),
    ("Bat", "🦇", "Flaps. Bites. Flaps again."),
    ("Rat", "🐀", "Came for the cheese, stayed for the fight."),
    ("Spider", "🕷️", "Eight legs, zero manners."),
]


# ---------------------------------------------------------------------------
# Scaling
# ---------------------------------------------------------------------------

def leader_max_hp(level: int, is_boss: bool) -> int:
    base = BOSS_BASE_HP if is_boss else NORMAL_BASE_HP
    return math.floor(base * HP_GROWTH ** (max(1, level) - 1))


def minion_max_hp(leader: Enemy) -> int:
    return max(1, math.floor(leader.max_hp * MINION_HP_RATIO))


def opening_attack_value(level: int) -> int:
    return 6 + level


def attack_value(level: int) -> int:
    return 5 + math.floor(level * 1.2)


def minion_count(level: int, is_boss: bool) -> int:
    if is_boss:
        return BOSS_MINIONS
    return 1 if level >= MINION_FROM_LEVEL else 0


# ---------------------------------------------------------------------------
# Spawning
# ---------------------------------------------------------------------------

def spawn_level_enemies(profile: EnemyProfile, level: int, rng: random.Random) -> list[Enemy]:
    hp = leader_max_hp(level, profile.is_boss)
    leader = Enemy(
        id=f"enemy-{new_instance_id()}",
        name=profile.name,
        emoji=profile.emoji,
        description=profile.description,
        intent_description=profile.intent_description,
        max_hp=hp,
        current_hp=hp,
        intent=IntentType.ATTACK,
        intent_value=opening_attack_value(level),
        is_boss=profile.is_boss,
    )
    enemies = [leader]
    for _ in range(minion_count(level, profile.is_boss)):
        enemies.append(make_minion(leader, level, rng))
    return enemies


def make_minion(leader: Enemy, level: int, rng: random.Random) -> Enemy:
    name, emoji, description = rng.choice(MINION_PRESETS)
    hp = minion_max_hp(leader)
    return Enemy(
        id=f"minion-{new_instance_id()}",
        name=name,
        emoji=emoji,
        description=description,
        max_hp=hp,
        current_hp=hp,
        intent=IntentType.ATTACK,
        intent_value=max(1, opening_attack_value(level) // 2),
        is_minion=True,
    )


# ---------------------------------------------------------------------------
# Intent selection
# ---------------------------------------------------------------------------

def living_minions(state: GameState) -> int:
    return sum(1 for e in state.enemies if e.is_minion and e.is_alive)


def roll_intent(enemy: Enemy, state: GameState, rng: random.Random) -> tuple[IntentType, int]:
    roll = rng.random()
    value = attack_value(state.level)
    if enemy.is_minion:
        value = max(1, value // 2)

    if enemy.is_boss:
        bands = BOSS_BANDS_FEW_MINIONS if living_minions(state) < FEW_MINIONS else BOSS_BANDS_FULL
        for upper, intent in bands:
            if roll < upper:
                return intent, value
        return bands[-1][1], value

    if roll > BUFF_THRESHOLD:
        return IntentType.BUFF, value
    return IntentType.ATTACK, value


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

def take_turn(enemy: Enemy, state: GameState, resolver: EffectResolver,
              rng: random.Random, config: EngineConfig) -> None:
    """One enemy's action: reset block, burn, act on intent (unless frozen), re-roll."""
    if not enemy.is_alive:
        return

    enemy.block = 0
    burn = status_value(enemy, StatusType.BURN)
    if burn > 0:
        lost = resolver.lose_hp(enemy, burn)
        resolver.feed.text(enemy.id, f"🔥-{lost}", DAMAGE_COLOR)
        if not enemy.is_alive:
            logger.info("%s burned to death", enemy.name)
            return

    if has_status(enemy, StatusType.FREEZE):
        resolver.feed.text(enemy.id, "Frozen", INFO_COLOR)
        logger.debug("%s is frozen and skips its action", enemy.name)
    else:
        perform_intent(enemy, state, resolver, rng, config)

    if state.phase == GamePhase.GAME_OVER:
        return
    enemy.intent, enemy.intent_value = roll_intent(enemy, state, rng)


def perform_intent(enemy: Enemy, state: GameState, resolver: EffectResolver,
                   rng: random.Random, config: EngineConfig) -> None:
    intent = enemy.intent
    logger.debug("%s performs %s (%d)", enemy.name, intent.value, enemy.intent_value)

    if intent == IntentType.ATTACK:
        resolver.enemy_attack(enemy, enemy.intent_value)

    elif intent == IntentType.SPECIAL:
        resolver.enemy_attack(enemy, math.floor(enemy.intent_value * SPECIAL_MULTIPLIER))

    elif intent == IntentType.BUFF:
        enemy.block += config.buff_block
        resolver.feed.text(enemy.id, f"+{config.buff_block} Block", BLOCK_COLOR)

    elif intent == IntentType.DEFEND:
        enemy.block += enemy.intent_value
        resolver.feed.text(enemy.id, f"+{enemy.intent_value} Block", BLOCK_COLOR)

    elif intent == IntentType.SUMMON:
        if len(state.living_enemies()) >= config.max_enemies:
            logger.debug("%s tried to summon but the field is full", enemy.name)
            return
        minion = make_minion(enemy, state.level, rng)
        state.enemies.append(minion)
        resolver.feed.text(minion.id, "Summoned!", INFO_COLOR)
        logger.info("%s summoned %s", enemy.name, minion.name)
