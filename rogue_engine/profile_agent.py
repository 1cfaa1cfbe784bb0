"""
Emoji Rogue: Enemy Profile Agent
Produces the flavour of each level's leader enemy: name, emoji, description.

CONTRACT: the profile agent is a costume designer, NOT a game designer.
- It never decides HP, damage or intents; the engine computes those
- The boss flag always follows the level cadence, whatever the model says
- A failing or hanging generator never blocks a level: the engine falls
  back to DEFAULT_PROFILE
"""

from __future__ import annotations
import json
import logging
import os
import random
import re
from dataclasses import dataclass, replace
from typing import Optional, Protocol
from openai import OpenAI
from dotenv import load_dotenv

from .errors import ProfileGenerationError

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

BOSS_EVERY = 5


def is_boss_level(level: int) -> bool:
    return level > 0 and level % BOSS_EVERY == 0


# ---------------------------------------------------------------------------
# Structured profile
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnemyProfile:
    name: str
    description: str
    emoji: str
    is_boss: bool
    intent_description: str = ""


DEFAULT_PROFILE = EnemyProfile(
    name="Wandering Slime",
    description="It oozed out of the dark while nobody was looking.",
    emoji="🟢",
    is_boss=False,
    intent_description="Wobbles forward to attack.",
)

PRESET_ENEMIES: list[EnemyProfile] = [
    EnemyProfile("Angry Goblin", "Small, loud and holding a rusty knife.", "👺", False, "Stabs wildly."),
    EnemyProfile("Grumpy Ghost", "Haunts anyone who wakes it.", "👻", False, "Chills your bones."),
    EnemyProfile("Feral Wolf", "Hungry and not in the mood to talk.", "🐺", False, "Lunges for the throat."),
    EnemyProfile("Cursed Doll", "Its smile has not changed in a century.", "🪆", False, "Needles at the ready."),
    EnemyProfile("Swamp Toad", "Bigger than it has any right to be.", "🐸", False, "Tongue whip."),
    EnemyProfile("Rogue Robot", "Runs on grudges and spare batteries.", "🤖", False, "Charges its laser."),
    EnemyProfile("Skeleton Archer", "Never misses. Rarely hits.", "💀", False, "Nocks an arrow."),
    EnemyProfile("Dragon Tyrant", "The mountain it sleeps on is made of gold and bones.", "🐉", True, "Breathes fire."),
    EnemyProfile("Kraken Queen", "Every tentacle has its own opinion.", "🦑", True, "Grasps and crushes."),
    EnemyProfile("Lich Emperor", "Died once. Did not care for it.", "🧟", True, "Raises the dead."),
    EnemyProfile("Ogre Warlord", "Commands by volume alone.", "👹", True, "Smashes with a club."),
]


class ProfileGenerator(Protocol):
    def generate(self, level: int) -> EnemyProfile: ...


# ---------------------------------------------------------------------------
# Preset generator: deterministic stand-in, no network
# ---------------------------------------------------------------------------

class PresetProfileGenerator:
    def __init__(self, rng: Optional[random.Random] = None,
                 presets: Optional[list[EnemyProfile]] = None):
        self.rng = rng or random.Random()
        self.presets = presets if presets is not None else PRESET_ENEMIES

    def generate(self, level: int) -> EnemyProfile:
        boss = is_boss_level(level)
        candidates = [p for p in self.presets if p.is_boss == boss] or list(self.presets)
        if not candidates:
            return replace(DEFAULT_PROFILE, is_boss=boss)
        return replace(self.rng.choice(candidates), is_boss=boss)


# ---------------------------------------------------------------------------
# OpenAI generator
# ---------------------------------------------------------------------------

PROFILE_SYSTEM_PROMPT = """You design enemies for a cute, emoji-themed roguelike deck-builder.

Given a level number and whether the enemy is a boss, invent ONE enemy.
Bosses are grand and menacing; regular enemies are small, funny and a little pathetic.
Enemies get more threatening as the level number rises.

Return a JSON object with exactly these fields:

{
  "name": "string, 2-4 words",
  "description": "string, one playful sentence",
  "emoji": "string, exactly one emoji",
  "intentDescription": "string, a few words describing how it attacks"
}

Return only valid JSON. No preamble, no markdown fences.
"""


class OpenAIProfileGenerator:
    def __init__(self, api_key: Optional[str] = None, model: str = "gpt-4o-mini",
                 timeout: float = 10.0, client=None):
        self.model = model
        self.client = client or OpenAI(
            api_key=api_key or os.environ.get("OPENAI_API_KEY"),
            timeout=timeout,
        )

    def generate(self, level: int) -> EnemyProfile:
        boss = is_boss_level(level)
        user_message = json.dumps({"level": level, "isBoss": boss})

        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=256,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": PROFILE_SYSTEM_PROMPT},
                {"role": "user", "content": user_message},
            ],
        )
        raw_text = (response.choices[0].message.content or "").strip()
        parsed = parse_profile_json(raw_text)

        try:
            return EnemyProfile(
                name=str(parsed["name"]),
                description=str(parsed.get("description", "")),
                emoji=str(parsed.get("emoji", DEFAULT_PROFILE.emoji)),
                is_boss=boss,
                intent_description=str(parsed.get("intentDescription", "")),
            )
        except KeyError as e:
            raise ProfileGenerationError(f"profile is missing {e}: {raw_text}")


def parse_profile_json(raw_text: str) -> dict:
    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError:
        # Fallback: model wrapped the object in prose or backticks
        match = re.search(r'\{.*\}', raw_text, re.DOTALL)
        if not match:
            raise ProfileGenerationError(f"profile agent returned unparseable response:\n{raw_text}")
        try:
            parsed = json.loads(match.group())
        except json.JSONDecodeError:
            raise ProfileGenerationError(f"profile agent returned unparseable response:\n{raw_text}")
    if not isinstance(parsed, dict):
        raise ProfileGenerationError(f"profile agent returned {type(parsed).__name__}, expected an object")
    return parsed


# ---------------------------------------------------------------------------
# Engine entry point
# ---------------------------------------------------------------------------

def fetch_profile(generator: Optional[ProfileGenerator], level: int) -> EnemyProfile:
    """Ask the generator for a profile; any failure yields DEFAULT_PROFILE."""
    boss = is_boss_level(level)
    if generator is None:
        return replace(DEFAULT_PROFILE, is_boss=boss)
    try:
        profile = generator.generate(level)
    except Exception as e:
        logger.warning("Enemy profile generation failed for level %d, using default: %s", level, e)
        return replace(DEFAULT_PROFILE, is_boss=boss)
    if profile.is_boss != boss:
        profile = replace(profile, is_boss=boss)
    return profile
