"""
Emoji Rogue Combat Engine: Effect Resolution
Turns declarative effects into state changes on combatants and piles.

Owns the block absorption rule and the one-shot DoubleNextAttack consumption.
Presentation cues go to the feedback feed; HP changes are reported back to
the turn engine through callbacks so it can run victory and defeat checks.
"""

from __future__ import annotations
import logging
import random
from typing import Callable, Optional

from .damage import compute_damage
from .deck import draw
from .feedback import (
    FeedbackFeed, FeedbackKind, BLOCK_COLOR, DAMAGE_COLOR, ENERGY_COLOR,
    HEAL_COLOR, STATUS_COLOR,
)
from .models import (
    CardInstance, CardTheme, CardType, Combatant, Effect, EffectType, Enemy,
    GameState, Playable, StatusType, TargetType,
)
from .statuses import apply_status, has_status, remove_status

logger = logging.getLogger(__name__)


class EffectResolver:
    def __init__(self, state: GameState, rng: random.Random, feed: FeedbackFeed,
                 on_enemy_hp_changed: Optional[Callable[[], None]] = None,
                 on_player_hp_changed: Optional[Callable[[], None]] = None):
        self.state = state
        self.rng = rng
        self.feed = feed
        self.on_enemy_hp_changed = on_enemy_hp_changed or (lambda: None)
        self.on_player_hp_changed = on_player_hp_changed or (lambda: None)

    # -----------------------------------------------------------------------
    # Plays
    # -----------------------------------------------------------------------

    def resolve_playable(self, playable: Playable, target_id: Optional[str] = None,
                         origin: Optional[tuple[float, float]] = None) -> None:
        """Resolve every effect of a card or skill in declaration order."""
        logger.debug("Resolving %s -> %s", playable.name, target_id)
        for effect in playable.effects:
            self.resolve(effect, target_id, playable.theme, origin)

        player = self.state.player
        if (isinstance(playable, CardInstance) and playable.card_type == CardType.ATTACK
                and has_status(player, StatusType.DOUBLE_NEXT_ATTACK)):
            remove_status(player, StatusType.DOUBLE_NEXT_ATTACK)
            logger.debug("DoubleNextAttack consumed by %s", playable.name)

    def resolve(self, effect: Effect, target_id: Optional[str] = None,
                theme: Optional[CardTheme] = None,
                origin: Optional[tuple[float, float]] = None) -> None:
        player = self.state.player
        if player is None:
            return

        if effect.effect_type == EffectType.DAMAGE:
            for target in self.resolve_targets(effect.target, target_id):
                self.feed.emit(FeedbackKind.VFX, target.id, theme=theme, origin=origin)
                amount = compute_damage(effect.value, player, target, self.state.piles.hand)
                self.deal_damage(target, amount)

        elif effect.effect_type == EffectType.BLOCK:
            player.block += effect.value
            self.feed.text(player.id, f"+{effect.value} Block", BLOCK_COLOR)

        elif effect.effect_type == EffectType.HEAL:
            healed = self.heal(player, effect.value)
            self.feed.text(player.id, f"+{healed}", HEAL_COLOR)

        elif effect.effect_type == EffectType.ADD_ENERGY:
            player.current_energy += effect.value
            self.feed.text(player.id, f"+{effect.value} Energy", ENERGY_COLOR)

        elif effect.effect_type == EffectType.DRAW:
            draw(self.state.piles, effect.value, self.rng)

        elif effect.effect_type == EffectType.APPLY_STATUS:
            if effect.status_type is None:
                logger.warning("APPLY_STATUS effect without a status type ignored")
                return
            for target in self.resolve_targets(effect.target, target_id):
                apply_status(target, effect.status_type, effect.value)
                self.feed.text(target.id, effect.status_type.value.replace("_", " ").title(), STATUS_COLOR)

    def resolve_targets(self, target: TargetType, target_id: Optional[str] = None) -> list[Combatant]:
        if target == TargetType.SELF:
            return [self.state.player]
        living = self.state.living_enemies()
        if target == TargetType.ALL_ENEMIES:
            return living
        if target == TargetType.RANDOM_ENEMY:
            return [self.rng.choice(living)] if living else []
        enemy = self.state.get_enemy(target_id)
        if enemy is None or not enemy.is_alive:
            return []
        return [enemy]

    # -----------------------------------------------------------------------
    # HP and block
    # -----------------------------------------------------------------------

    def deal_damage(self, target: Combatant, amount: int) -> int:
        """
        Block absorbs first. If block covers the hit, block shrinks and HP is
        untouched; otherwise block drops to 0 and the excess lands on HP.
        Returns the HP actually lost.
        """
        if target.block >= amount:
            target.block -= amount
            landed = 0
        else:
            landed = amount - target.block
            target.block = 0

        if landed > 0:
            landed = self.lose_hp(target, landed)
            self.feed.text(target.id, f"-{landed}", DAMAGE_COLOR)
            self.feed.emit(FeedbackKind.SHAKE, target.id)
        else:
            self.feed.text(target.id, "Blocked", BLOCK_COLOR)

        if isinstance(target, Enemy):
            self.feed.emit(FeedbackKind.FLASH, target.id)
        logger.debug("%s took %d (block now %d, hp %d)", target.name, landed, target.block, target.current_hp)
        return landed

    def lose_hp(self, target: Combatant, amount: int) -> int:
        """Direct HP loss, ignoring block. HP floors at 0."""
        before = target.current_hp
        target.current_hp = max(0, target.current_hp - amount)
        lost = before - target.current_hp
        if lost:
            self._hp_changed(target)
        return lost

    def heal(self, target: Combatant, amount: int) -> int:
        before = target.current_hp
        target.current_hp = min(target.max_hp, target.current_hp + amount)
        return target.current_hp - before

    def enemy_attack(self, enemy: Enemy, base: int) -> int:
        player = self.state.player
        amount = compute_damage(base, enemy, player)
        return self.deal_damage(player, amount)

    def _hp_changed(self, target: Combatant) -> None:
        if isinstance(target, Enemy):
            self.on_enemy_hp_changed()
        else:
            self.on_player_hp_changed()
