"""Tests for EffectResolver"""
import random
import sys
sys.path.insert(0, '..')

from rogue_engine.cards import make_card
from rogue_engine.feedback import FeedbackFeed
from rogue_engine.models import (
    DeckPiles, Effect, EffectType, Enemy, GameState, GamePhase, Player,
    StatusType, TargetType,
)
from rogue_engine.resolver import EffectResolver
from rogue_engine.statuses import apply_status, has_status, status_value


def make_state(*enemy_hps) -> GameState:
    state = GameState(phase=GamePhase.PLAYER_TURN)
    state.player = Player(id="player", name="Tester", max_hp=50, current_hp=40,
                          max_energy=3, current_energy=3)
    state.enemies = [
        Enemy(id=f"e{i}", name=f"Enemy {i}", max_hp=max(hp, 1), current_hp=hp)
        for i, hp in enumerate(enemy_hps or (30,))
    ]
    return state


def make_resolver(state: GameState, seed: int = 0) -> EffectResolver:
    return EffectResolver(state, random.Random(seed), FeedbackFeed(lambda: 0))


def damage(value: int, target: TargetType = TargetType.SINGLE_ENEMY) -> Effect:
    return Effect(EffectType.DAMAGE, value, target)


def test_block_absorbs_whole_hit():
    state = make_state(30)
    state.enemies[0].block = 15
    make_resolver(state).resolve(damage(10), "e0")
    assert state.enemies[0].block == 5
    assert state.enemies[0].current_hp == 30


def test_excess_over_block_lands_on_hp():
    state = make_state(30)
    state.enemies[0].block = 4
    make_resolver(state).resolve(damage(10), "e0")
    assert state.enemies[0].block == 0
    assert state.enemies[0].current_hp == 24


def test_hp_floors_at_zero():
    state = make_state(5)
    make_resolver(state).resolve(damage(50), "e0")
    assert state.enemies[0].current_hp == 0


def test_single_target_missing_or_dead_is_noop():
    state = make_state(0, 20)
    resolver = make_resolver(state)
    resolver.resolve(damage(6), "e0")
    resolver.resolve(damage(6), "ghost")
    resolver.resolve(damage(6), None)
    assert [e.current_hp for e in state.enemies] == [0, 20]


def test_all_enemies_hits_only_living():
    state = make_state(10, 0, 20)
    make_resolver(state).resolve(damage(7, TargetType.ALL_ENEMIES))
    assert [e.current_hp for e in state.enemies] == [3, 0, 13]


def test_random_enemy_picks_a_living_one():
    for seed in range(10):
        state = make_state(0, 20, 0)
        make_resolver(state, seed).resolve(damage(5, TargetType.RANDOM_ENEMY))
        assert [e.current_hp for e in state.enemies] == [0, 15, 0]


def test_self_effects_go_to_player():
    state = make_state(20)
    resolver = make_resolver(state)
    resolver.resolve(Effect(EffectType.BLOCK, 5, TargetType.SELF))
    resolver.resolve(Effect(EffectType.HEAL, 50, TargetType.SELF))
    resolver.resolve(Effect(EffectType.ADD_ENERGY, 2, TargetType.SELF))
    resolver.resolve(Effect(EffectType.APPLY_STATUS, 1, TargetType.SELF, StatusType.DOUBLE_NEXT_ATTACK))
    player = state.player
    assert player.block == 5
    assert player.current_hp == 50
    assert player.current_energy == 5
    assert has_status(player, StatusType.DOUBLE_NEXT_ATTACK)


def test_status_applies_to_every_target():
    state = make_state(10, 10)
    resolver = make_resolver(state)
    effect = Effect(EffectType.APPLY_STATUS, 2, TargetType.ALL_ENEMIES, StatusType.VULNERABLE)
    resolver.resolve(effect)
    resolver.resolve(effect)
    assert all(status_value(e, StatusType.VULNERABLE) == 4 for e in state.enemies)


def test_draw_effect_uses_deck_manager():
    state = make_state(10)
    state.piles = DeckPiles(draw_pile=[make_card("strike") for _ in range(3)])
    make_resolver(state).resolve(Effect(EffectType.DRAW, 2, TargetType.SELF))
    assert len(state.piles.hand) == 2
    assert len(state.piles.draw_pile) == 1


def test_attack_card_consumes_double_after_all_effects():
    state = make_state(100)
    apply_status(state.player, StatusType.DOUBLE_NEXT_ATTACK, 1)
    resolver = make_resolver(state)
    uppercut = make_card("uppercut")     # 8 damage then 2 Vulnerable
    resolver.resolve_playable(uppercut, "e0")
    assert state.enemies[0].current_hp == 84
    assert not has_status(state.player, StatusType.DOUBLE_NEXT_ATTACK)

    resolver.resolve_playable(make_card("strike"), "e0")
    # 6 * 1.5 = 9 against the fresh Vulnerable
    assert state.enemies[0].current_hp == 75


def test_non_attack_card_keeps_double():
    state = make_state(100)
    apply_status(state.player, StatusType.DOUBLE_NEXT_ATTACK, 1)
    make_resolver(state).resolve_playable(make_card("block"))
    assert has_status(state.player, StatusType.DOUBLE_NEXT_ATTACK)


def test_hp_callbacks_fire():
    state = make_state(10)
    calls = []
    resolver = EffectResolver(state, random.Random(0), FeedbackFeed(lambda: 0),
                              on_enemy_hp_changed=lambda: calls.append("enemy"),
                              on_player_hp_changed=lambda: calls.append("player"))
    resolver.resolve(damage(3), "e0")
    resolver.enemy_attack(state.enemies[0], 4)
    assert calls == ["enemy", "player"]
    assert state.player.current_hp == 36
