"""Tests for the enemy profile generators. No network: the OpenAI client is faked."""
import random
import sys
sys.path.insert(0, '..')
from types import SimpleNamespace

import pytest

from rogue_engine.errors import ProfileGenerationError
from rogue_engine.profile_agent import (
    DEFAULT_PROFILE, EnemyProfile, OpenAIProfileGenerator,
    PresetProfileGenerator, fetch_profile, is_boss_level, parse_profile_json,
)


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(content):
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(content)))


def test_boss_cadence():
    assert [lvl for lvl in range(1, 16) if is_boss_level(lvl)] == [5, 10, 15]


def test_preset_generator_follows_cadence():
    generator = PresetProfileGenerator(random.Random(2))
    assert not generator.generate(4).is_boss
    assert generator.generate(10).is_boss


def test_openai_generator_builds_profile():
    client = fake_client('{"name": "Moss Golem", "description": "Slow.", "emoji": "🗿", '
                         '"intentDescription": "Slams"}')
    generator = OpenAIProfileGenerator(client=client, model="test-model")
    profile = generator.generate(5)
    assert profile == EnemyProfile("Moss Golem", "Slow.", "🗿", True, "Slams")

    call = client.chat.completions.calls[0]
    assert call["model"] == "test-model"
    assert call["response_format"] == {"type": "json_object"}
    assert '"isBoss": true' in call["messages"][1]["content"]


def test_json_wrapped_in_prose_is_recovered():
    parsed = parse_profile_json('Sure!\n```json\n{"name": "Bog Witch"}\n```')
    assert parsed == {"name": "Bog Witch"}


def test_unparseable_output_raises():
    with pytest.raises(ProfileGenerationError):
        parse_profile_json("no json here")
    with pytest.raises(ProfileGenerationError):
        OpenAIProfileGenerator(client=fake_client('{"emoji": "x"}')).generate(1)


def test_fetch_profile_falls_back_on_any_failure():
    generator = OpenAIProfileGenerator(client=fake_client("garbage"))
    profile = fetch_profile(generator, 5)
    assert profile.name == DEFAULT_PROFILE.name
    assert profile.is_boss
    assert fetch_profile(None, 2) == DEFAULT_PROFILE


def test_fetch_profile_forces_boss_flag():
    class Liar:
        def generate(self, level):
            return EnemyProfile("Tiny Mouse", "Squeak.", "🐭", True)

    assert not fetch_profile(Liar(), 3).is_boss
