"""
Damage calculator tests.
Every case is hand-computed; floors apply after each multiplicative step.
"""
import sys
sys.path.insert(0, '..')

from rogue_engine.cards import make_card, make_skill
from rogue_engine.damage import compute_damage, hand_damage_bonus
from rogue_engine.models import Enemy, Player, StatusType
from rogue_engine.statuses import apply_status


def make_player(**kwargs) -> Player:
    return Player(id="player", name="Tester", max_hp=50, current_hp=50, **kwargs)


def make_enemy(**kwargs) -> Enemy:
    return Enemy(id="e1", name="Dummy", max_hp=40, current_hp=40, **kwargs)


def test_plain_damage():
    assert compute_damage(6, make_player(), make_enemy()) == 6


def test_full_player_composition_order():
    player = make_player(skills=[make_skill("mage-passive")])
    apply_status(player, StatusType.STRENGTH, 2)
    apply_status(player, StatusType.DOUBLE_NEXT_ATTACK, 1)
    apply_status(player, StatusType.WEAK, 1)
    enemy = make_enemy()
    apply_status(enemy, StatusType.VULNERABLE, 1)
    hand = [make_card("dark-pact")]
    # (6 + 2 + 1 + 1) * 2 = 20 -> weak 15 -> vulnerable 22
    assert compute_damage(6, player, enemy, hand) == 22


def test_weak_and_vulnerable_floor_each_step():
    player = make_player()
    apply_status(player, StatusType.WEAK, 1)
    enemy = make_enemy()
    apply_status(enemy, StatusType.VULNERABLE, 1)
    # 7 * 0.75 = 5.25 -> 5; 5 * 1.5 = 7.5 -> 7
    assert compute_damage(7, player, enemy) == 7


def test_hand_bonus_counts_each_held_card():
    hand = [make_card("dark-pact"), make_card("dark-pact"), make_card("strike")]
    assert hand_damage_bonus(hand) == 2
    assert compute_damage(4, make_player(), make_enemy(), hand) == 6


def test_enemy_path_ignores_hand_and_double():
    enemy = make_enemy()
    apply_status(enemy, StatusType.STRENGTH, 1)
    apply_status(enemy, StatusType.DOUBLE_NEXT_ATTACK, 1)
    player = make_player()
    assert compute_damage(5, enemy, player, [make_card("dark-pact")]) == 6

    apply_status(enemy, StatusType.WEAK, 1)
    apply_status(player, StatusType.VULNERABLE, 1)
    # 6 * 0.75 = 4.5 -> 4; 4 * 1.5 = 6
    assert compute_damage(5, enemy, player) == 6


def test_strength_is_monotonic():
    enemy = make_enemy()
    previous = -1
    for k in range(0, 8):
        player = make_player()
        apply_status(player, StatusType.STRENGTH, k)
        apply_status(player, StatusType.WEAK, 1)
        dmg = compute_damage(5, player, enemy)
        assert dmg >= previous
        previous = dmg


def test_vulnerable_never_lowers_damage():
    player = make_player()
    for base in range(0, 15):
        plain = compute_damage(base, player, make_enemy())
        vulnerable = make_enemy()
        apply_status(vulnerable, StatusType.VULNERABLE, 1)
        assert compute_damage(base, player, vulnerable) >= plain


def test_negative_strength_never_goes_below_zero():
    player = make_player()
    apply_status(player, StatusType.STRENGTH, -10)
    assert compute_damage(3, player, make_enemy()) == 0
