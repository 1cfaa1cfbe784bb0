"""
Emoji Rogue Combat Engine: Turn State Machine

START_SCREEN -> CHARACTER_SELECT -> LOADING -> PLAYER_TURN <-> ENEMY_TURN
                                                  |               |
                                     REWARD -> LOADING       GAME_OVER

Logical transitions (energy, hand/discard movement) happen the moment an
action is accepted. Effect payloads, enemy actions and the victory reveal
are deferred on the virtual-clock scheduler. Invalid input returns False
and never raises.
"""

from __future__ import annotations
import logging
import random
from collections import deque
from typing import Optional

from . import commands as cmd
from .cards import (
    CHARACTER_REGISTRY, build_deck, is_unlocked, make_skill,
    roll_card_rewards, roll_skill_reward,
)
from .config import EngineConfig
from .deck import (
    discard, draw_to_limit, duplicate_instances, remove_duplicates,
    setup_level_piles,
)
from .enemy_ai import spawn_level_enemies, take_turn
from .errors import InvariantViolation
from .feedback import FeedbackFeed, INFO_COLOR, DAMAGE_COLOR
from .models import (
    GamePhase, GameState, HandPassiveType, Player, Playable, RewardOffer,
    SkillType, StatusType,
)
from .profile_agent import PresetProfileGenerator, ProfileGenerator, fetch_profile
from .progress import ProgressStore
from .resolver import EffectResolver
from .scheduler import Scheduler, TimerHandle
from .snapshot import to_snapshot
from .statuses import apply_status, status_value, tick_statuses

logger = logging.getLogger(__name__)

PLAYER_ID = "player"

NOT_ENOUGH_ENERGY = "Not enough energy"
ON_COOLDOWN = "On cooldown"


class CombatEngine:
    def __init__(self, config: Optional[EngineConfig] = None,
                 rng: Optional[random.Random] = None,
                 profile_generator: Optional[ProfileGenerator] = None,
                 progress: Optional[ProgressStore] = None,
                 auto_pass: bool = True):
        self.config = config or EngineConfig()
        self.rng = rng or random.Random()
        self.scheduler = Scheduler()
        self.feed = FeedbackFeed(lambda: self.scheduler.now, self.config)
        self.profile_generator = profile_generator or PresetProfileGenerator(self.rng)
        self.progress = progress
        self.auto_pass = auto_pass
        self.commands: deque = deque()
        self.victory_pending = False
        self._auto_pass_handle: Optional[TimerHandle] = None
        self._new_run(GamePhase.START_SCREEN)

    def _new_run(self, phase: GamePhase) -> None:
        self.scheduler.cancel_all()
        self.commands.clear()
        self.feed.clear()
        self.victory_pending = False
        self._auto_pass_handle = None
        self.state = GameState(phase=phase)
        self.state.max_level_reached = self.progress.max_level() if self.progress else 1
        self.resolver = EffectResolver(
            self.state, self.rng, self.feed,
            on_enemy_hp_changed=self._check_victory,
            on_player_hp_changed=self._check_defeat,
        )

    @property
    def player(self) -> Optional[Player]:
        return self.state.player

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    # -----------------------------------------------------------------------
    # Command queue
    # -----------------------------------------------------------------------

    def submit(self, command: cmd.Command) -> None:
        self.commands.append(command)

    def process_commands(self) -> list[bool]:
        """Drain the queue synchronously, in submission order."""
        results = []
        while self.commands:
            results.append(self._dispatch(self.commands.popleft()))
        return results

    def advance(self, ms: int) -> list[bool]:
        results = self.process_commands()
        self.scheduler.advance(ms)
        self.feed.active()
        return results

    def flush(self) -> list[bool]:
        """Drain input, then run every deferred job to completion."""
        results = self.process_commands()
        self.scheduler.run_until_idle()
        return results

    def _dispatch(self, command: cmd.Command) -> bool:
        if isinstance(command, cmd.PlayCard):
            return self.play_card(command.card_id, command.target_id, command.origin)
        if isinstance(command, cmd.PlayCardBatch):
            return self.play_card_batch(list(command.card_ids), command.target_id, command.origin)
        if isinstance(command, cmd.UseSkill):
            return self.use_skill(command.skill_id, command.target_id, command.origin)
        if isinstance(command, cmd.EndTurn):
            return self.end_turn()
        if isinstance(command, cmd.ChooseRewardCard):
            return self.choose_reward_card(command.index)
        if isinstance(command, cmd.ChooseRewardSkill):
            return self.choose_reward_skill()
        if isinstance(command, cmd.SkipReward):
            return self.skip_reward()
        if isinstance(command, cmd.SelectCharacter):
            return self.select_character(command.character_id)
        if isinstance(command, cmd.Restart):
            return self.restart()
        logger.warning("Unknown command %r dropped", command)
        return False

    # -----------------------------------------------------------------------
    # Menus
    # -----------------------------------------------------------------------

    def open_character_select(self) -> bool:
        if self.state.phase != GamePhase.START_SCREEN:
            return False
        self.state.phase = GamePhase.CHARACTER_SELECT
        return True

    def exit_to_start(self) -> bool:
        self._new_run(GamePhase.START_SCREEN)
        return True

    def restart(self) -> bool:
        """Throw away the run and go back to character select."""
        self._new_run(GamePhase.CHARACTER_SELECT)
        logger.info("Run restarted")
        return True

    def select_character(self, character_id: str) -> bool:
        if self.state.phase != GamePhase.CHARACTER_SELECT:
            return False
        character = CHARACTER_REGISTRY.get(character_id)
        if character is None:
            logger.debug("Unknown character %s", character_id)
            return False
        if not is_unlocked(character, self.state.max_level_reached):
            logger.debug("%s is locked until level %d", character.name, character.unlock_level)
            return False

        self.state.player = Player(
            id=PLAYER_ID,
            name=character.name,
            emoji=character.emoji,
            max_hp=character.max_hp,
            current_hp=character.max_hp,
            max_energy=character.max_energy,
            current_energy=character.max_energy,
            skills=[make_skill(s) for s in character.skills],
            base_draw_count=character.base_draw_count,
            fixed_starting_hand=list(character.fixed_starting_hand),
            character_id=character.id,
        )
        self.state.deck = build_deck(character)
        logger.info("Selected %s (%d cards)", character.name, len(self.state.deck))
        self.start_level(1)
        return True

    # -----------------------------------------------------------------------
    # Level flow
    # -----------------------------------------------------------------------

    def start_level(self, level: int) -> None:
        state = self.state
        self._cancel_auto_pass()
        self.victory_pending = False
        state.phase = GamePhase.LOADING
        state.level = level
        state.rewards = None
        state.active_enemy_id = None

        if level > state.max_level_reached:
            state.max_level_reached = level
            if self.progress:
                self.progress.record(level)

        profile = fetch_profile(self.profile_generator, level)
        state.enemies = spawn_level_enemies(profile, level, self.rng)
        state.piles = setup_level_piles(
            state.deck, state.player.base_draw_count,
            state.player.fixed_starting_hand, self.rng,
        )
        state.turn_count = 1
        logger.info("Level %d: %s (%s) with %d enemies",
                    level, profile.name, "boss" if profile.is_boss else "normal", len(state.enemies))
        self._begin_player_turn()

    def _begin_player_turn(self) -> None:
        state = self.state
        player = state.player
        state.phase = GamePhase.PLAYER_TURN
        state.active_enemy_id = None

        player.block = 0
        player.current_energy = player.max_energy

        burn = status_value(player, StatusType.BURN)
        if burn > 0:
            lost = self.resolver.lose_hp(player, burn)
            self.feed.text(player.id, f"🔥-{lost}", DAMAGE_COLOR)
            if state.phase == GamePhase.GAME_OVER:
                return

        for combatant in [player] + state.enemies:
            tick_statuses(combatant)
        for skill in player.skills:
            if skill.skill_type == SkillType.ACTIVE:
                skill.current_cooldown = max(0, skill.current_cooldown - 1)

        draw_to_limit(state.piles, player.base_draw_count, self.rng)
        logger.debug("Turn %d: hand %d, energy %d", state.turn_count, len(state.piles.hand), player.current_energy)
        self._after_change()

    # -----------------------------------------------------------------------
    # Player actions
    # -----------------------------------------------------------------------

    def _accepting_input(self) -> bool:
        return (self.state.phase == GamePhase.PLAYER_TURN
                and not self.victory_pending
                and self.state.player is not None)

    def _reject(self, reason: str, message: Optional[str] = None) -> bool:
        logger.debug("Action rejected: %s", reason)
        if message and self.state.player:
            self.feed.text(self.state.player.id, message, INFO_COLOR)
        return False

    def _target_ok(self, playable: Playable, target_id: Optional[str]) -> bool:
        if not playable.needs_target:
            return True
        enemy = self.state.get_enemy(target_id)
        return enemy is not None and enemy.is_alive

    def play_card(self, card_id: str, target_id: Optional[str] = None,
                  origin: tuple[float, float] = (0.0, 0.0)) -> bool:
        if not self._accepting_input():
            return self._reject("not the player's turn")
        state = self.state
        card = state.piles.find_in_hand(card_id)
        if card is None:
            return self._reject(f"card {card_id} not in hand")
        if card.cost > state.player.current_energy:
            return self._reject("energy", NOT_ENOUGH_ENERGY)
        if not self._target_ok(card, target_id):
            return self._reject(f"no live target {target_id}")

        state.player.current_energy -= card.cost
        discard(state.piles, [card.instance_id])
        self._schedule_resolution(card, target_id, origin, self.config.effect_travel_ms)
        logger.debug("Played %s (energy left %d)", card.name, state.player.current_energy)
        self._after_change()
        return True

    def play_card_batch(self, card_ids: list[str], target_id: Optional[str] = None,
                        origin: tuple[float, float] = (0.0, 0.0)) -> bool:
        """Play several same-group cards as one combo against one target."""
        if not self._accepting_input():
            return self._reject("not the player's turn")
        state = self.state
        if not card_ids or len(set(card_ids)) != len(card_ids):
            return self._reject("empty or repeated batch")
        cards = [state.piles.find_in_hand(c) for c in card_ids]
        if any(c is None for c in cards):
            return self._reject("batch card not in hand")
        tags = {c.definition.group_tag for c in cards}
        if len(tags) != 1 or None in tags:
            return self._reject("batch cards do not share a group tag")
        total = sum(c.cost for c in cards)
        if total > state.player.current_energy:
            return self._reject("energy", NOT_ENOUGH_ENERGY)
        if not all(self._target_ok(c, target_id) for c in cards):
            return self._reject(f"no live target {target_id}")

        state.player.current_energy -= total
        discard(state.piles, card_ids)
        for i, card in enumerate(cards):
            delay = self.config.effect_travel_ms + i * self.config.combo_interval_ms
            self._schedule_resolution(card, target_id, origin, delay)
        logger.debug("Combo of %d %s cards", len(cards), tags.pop())
        self._after_change()
        return True

    def use_skill(self, skill_id: str, target_id: Optional[str] = None,
                  origin: tuple[float, float] = (0.0, 0.0)) -> bool:
        if not self._accepting_input():
            return self._reject("not the player's turn")
        player = self.state.player
        skill = player.get_skill(skill_id)
        if skill is None or not skill.is_active:
            return self._reject(f"no active skill {skill_id}")
        if skill.current_cooldown > 0:
            return self._reject("cooldown", ON_COOLDOWN)
        if skill.cost > player.current_energy:
            return self._reject("energy", NOT_ENOUGH_ENERGY)
        if not self._target_ok(skill, target_id):
            return self._reject(f"no live target {target_id}")

        player.current_energy -= skill.cost
        skill.current_cooldown = skill.cooldown
        self._schedule_resolution(skill, target_id, origin, self.config.effect_travel_ms)
        self._after_change()
        return True

    def end_turn(self) -> bool:
        if not self._accepting_input():
            return self._reject("not the player's turn")
        state = self.state
        player = state.player
        self._cancel_auto_pass()

        heal = block = 0
        for card in state.piles.hand:
            passive = card.definition.hand_passive
            if passive is None:
                continue
            if passive.passive_type == HandPassiveType.HEAL_ON_TURN_END:
                heal += passive.value
            elif passive.passive_type == HandPassiveType.BLOCK_ON_TURN_END:
                block += passive.value
        if heal:
            self.resolver.heal(player, heal)
        if block:
            player.block += block

        state.phase = GamePhase.ENEMY_TURN
        logger.info("Turn %d: enemy turn", state.turn_count)

        if state.turn_count > self.config.enrage_after_turn:
            for enemy in state.living_enemies():
                apply_status(enemy, StatusType.STRENGTH, 1)
                self.feed.text(enemy.id, "ENRAGED", DAMAGE_COLOR)
            logger.info("Enemies enraged on turn %d", state.turn_count)

        order = [e.id for e in state.enemies]
        self._queue_enemy(order, 0)
        return True

    # -----------------------------------------------------------------------
    # Deferred resolution
    # -----------------------------------------------------------------------

    def _schedule_resolution(self, playable: Playable, target_id: Optional[str],
                             origin: tuple[float, float], delay: int) -> None:
        self.scheduler.call_later(
            delay, self._resolve_job, playable, target_id, origin,
            label=f"resolve {playable.name}",
        )

    def _resolve_job(self, playable: Playable, target_id: Optional[str],
                     origin: tuple[float, float]) -> None:
        if self.state.phase not in (GamePhase.PLAYER_TURN, GamePhase.ENEMY_TURN):
            logger.debug("Dropped %s resolution in %s", playable.name, self.state.phase.value)
            return
        self.resolver.resolve_playable(playable, target_id, origin)
        if self.state.phase != GamePhase.GAME_OVER:
            self._after_change()

    # -----------------------------------------------------------------------
    # Enemy turn
    # -----------------------------------------------------------------------

    def _queue_enemy(self, order: list[str], index: int) -> None:
        while index < len(order):
            enemy = self.state.get_enemy(order[index])
            if enemy is not None and enemy.is_alive:
                self.scheduler.call_later(
                    self.config.enemy_action_ms, self._enemy_act, order, index,
                    label=f"enemy {enemy.name}",
                )
                return
            index += 1
        self._finish_enemy_turn()

    def _enemy_act(self, order: list[str], index: int) -> None:
        state = self.state
        if state.phase != GamePhase.ENEMY_TURN or self.victory_pending:
            return
        enemy = state.get_enemy(order[index])
        if enemy is not None and enemy.is_alive:
            state.active_enemy_id = enemy.id
            take_turn(enemy, state, self.resolver, self.rng, self.config)
            if state.phase != GamePhase.ENEMY_TURN or self.victory_pending:
                return
            self._verify()
        self._queue_enemy(order, index + 1)

    def _finish_enemy_turn(self) -> None:
        self.state.turn_count += 1
        self._begin_player_turn()

    # -----------------------------------------------------------------------
    # Victory and defeat
    # -----------------------------------------------------------------------

    def _check_victory(self) -> None:
        state = self.state
        if self.victory_pending or state.phase in (GamePhase.REWARD, GamePhase.LOADING, GamePhase.GAME_OVER):
            return
        if state.enemies and all(e.current_hp <= 0 for e in state.enemies):
            self.victory_pending = True
            self._cancel_auto_pass()
            logger.info("All enemies down on level %d", state.level)
            self.scheduler.call_later(self.config.victory_delay_ms, self._declare_victory, label="victory")

    def _declare_victory(self) -> None:
        state = self.state
        self.victory_pending = False
        if state.phase in (GamePhase.REWARD, GamePhase.GAME_OVER):
            return
        boss_defeated = any(e.is_boss and e.current_hp <= 0 for e in state.enemies)
        state.rewards = RewardOffer(
            cards=roll_card_rewards(self.rng, self.config.reward_card_count),
            skill=roll_skill_reward(self.rng) if boss_defeated else None,
        )
        state.phase = GamePhase.REWARD
        state.active_enemy_id = None
        logger.info("Level %d cleared%s", state.level, " (boss)" if boss_defeated else "")

    def _check_defeat(self) -> None:
        state = self.state
        if state.player.current_hp > 0 or state.phase == GamePhase.GAME_OVER:
            return
        state.phase = GamePhase.GAME_OVER
        state.active_enemy_id = None
        self.victory_pending = False
        self._auto_pass_handle = None
        self.scheduler.cancel_all()
        self.commands.clear()
        logger.info("Game over on level %d, turn %d", state.level, state.turn_count)

    # -----------------------------------------------------------------------
    # Rewards
    # -----------------------------------------------------------------------

    def choose_reward_card(self, index: int) -> bool:
        rewards = self.state.rewards
        if self.state.phase != GamePhase.REWARD or rewards is None:
            return False
        if not 0 <= index < len(rewards.cards):
            return False
        self.state.deck.append(rewards.cards[index])
        self._next_level()
        return True

    def choose_reward_skill(self) -> bool:
        rewards = self.state.rewards
        if self.state.phase != GamePhase.REWARD or rewards is None or rewards.skill is None:
            return False
        self.state.player.skills.append(rewards.skill)
        self._next_level()
        return True

    def skip_reward(self) -> bool:
        if self.state.phase != GamePhase.REWARD:
            return False
        self._next_level()
        return True

    def _next_level(self) -> None:
        player = self.state.player
        self.resolver.heal(player, self.config.reward_heal)
        self.start_level(self.state.level + 1)

    # -----------------------------------------------------------------------
    # Auto-pass
    # -----------------------------------------------------------------------

    def has_playable_action(self) -> bool:
        player = self.state.player
        if player is None:
            return False
        energy = player.current_energy
        if any(card.cost <= energy for card in self.state.piles.hand):
            return True
        return any(s.is_ready and s.cost <= energy for s in player.skills)

    def _should_auto_pass(self) -> bool:
        return (self.auto_pass
                and self._accepting_input()
                and bool(self.state.living_enemies())
                and not self.has_playable_action())

    def _check_auto_pass(self) -> None:
        if self._auto_pass_handle is None and self._should_auto_pass():
            self._auto_pass_handle = self.scheduler.call_later(
                self.config.auto_pass_ms, self._auto_pass_fired, label="auto-pass",
            )

    def _auto_pass_fired(self) -> None:
        self._auto_pass_handle = None
        if self._should_auto_pass():
            logger.info("No playable action left, ending turn")
            self.end_turn()

    def _cancel_auto_pass(self) -> None:
        if self._auto_pass_handle is not None:
            self.scheduler.cancel(self._auto_pass_handle)
            self._auto_pass_handle = None

    # -----------------------------------------------------------------------
    # Integrity
    # -----------------------------------------------------------------------

    def _after_change(self) -> None:
        self._verify()
        self._check_auto_pass()

    def _verify(self) -> None:
        state = self.state
        problems = []

        dupes = duplicate_instances(state.piles)
        if dupes:
            problems.append(f"card instances in two piles: {sorted(set(dupes))}")
        in_piles = {c.instance_id for c in state.piles.draw_pile + state.piles.hand + state.piles.discard_pile}
        lost = [c for c in state.deck if c.instance_id not in in_piles]
        if lost:
            problems.append(f"cards missing from every pile: {[c.instance_id for c in lost]}")

        combatants = ([state.player] if state.player else []) + state.enemies
        for c in combatants:
            if not 0 <= c.current_hp <= c.max_hp:
                problems.append(f"{c.name} hp {c.current_hp} outside [0, {c.max_hp}]")
            if c.block < 0:
                problems.append(f"{c.name} block {c.block} < 0")

        if not problems:
            return
        if self.config.strict_invariants:
            raise InvariantViolation("; ".join(problems))

        logger.error("Invariant breach, clamping: %s", "; ".join(problems))
        remove_duplicates(state.piles)
        state.piles.discard_pile.extend(lost)
        for c in combatants:
            c.current_hp = min(max(c.current_hp, 0), c.max_hp)
            c.block = max(c.block, 0)

    # -----------------------------------------------------------------------
    # Presentation
    # -----------------------------------------------------------------------

    def snapshot(self) -> dict:
        return to_snapshot(self)
