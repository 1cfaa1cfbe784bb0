"""
Emoji Rogue: Run Simulator
Plays a complete run with an AI-controlled player so the engine can be
exercised end to end without a renderer.

Usage:
    python simulate_run.py                          # warrior, preset enemies
    python simulate_run.py --character mage --levels 8
    python simulate_run.py --llm                    # enemy profiles from OPENAI_API_KEY
    python simulate_run.py --seed 7 --json-out run.json
"""

from __future__ import annotations
import sys
import os
import json
import random
import logging
import argparse
from typing import Optional

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from rogue_engine.commands import (
    ChooseRewardCard, ChooseRewardSkill, EndTurn, PlayCard, PlayCardBatch,
    SelectCharacter, SkipReward, UseSkill,
)
from rogue_engine.cards import CHARACTERS
from rogue_engine.config import EngineConfig
from rogue_engine.engine import CombatEngine
from rogue_engine.models import (
    CardInstance, CardType, EffectType, Enemy, GamePhase, IntentType,
)
from rogue_engine.profile_agent import OpenAIProfileGenerator, PresetProfileGenerator
from rogue_engine.progress import ProgressStore

logger = logging.getLogger("simulate_run")

MAX_TURNS_PER_LEVEL = 60
MAX_DECK_SIZE = 25


# ---------------------------------------------------------------------------
# Auto player: greedy, one action at a time
# ---------------------------------------------------------------------------

class AutoPlayer:
    """
    Picks the next action from the current state.
    Strategy: block when the enemy telegraphs more damage than we can absorb,
    otherwise hit the weakest enemy with the hardest card we can afford.
    It is deliberately simple; it exists to drive the engine, not to win.
    """

    def __init__(self, strategy: str = "aggressive"):
        self.strategy = strategy  # 'aggressive' | 'defensive'

    def next_action(self, engine: CombatEngine):
        state = engine.state
        player = state.player
        hand = state.piles.hand
        energy = player.current_energy
        target = self._weakest(state.living_enemies())
        if target is None:
            return None
        target_id = target.id

        for skill in player.skills:
            if not skill.is_ready or skill.cost > energy:
                continue
            heals = any(e.effect_type == EffectType.HEAL for e in skill.effects)
            if heals and player.current_hp > player.max_hp * 0.6:
                continue
            return UseSkill(skill.id, target_id)

        combo = self._best_combo(hand, energy)
        if combo:
            return PlayCardBatch(tuple(c.instance_id for c in combo), target_id)

        affordable = [c for c in hand if c.cost <= energy]
        if not affordable:
            return None

        incoming = sum(
            e.intent_value for e in state.living_enemies()
            if e.intent in (IntentType.ATTACK, IntentType.SPECIAL)
        )
        blocks = [c for c in affordable if self._block_value(c) > 0]
        if blocks and (self.strategy == "defensive" or incoming > player.block + player.current_hp // 3):
            if incoming > player.block:
                blocks.sort(key=self._block_value, reverse=True)
                return PlayCard(blocks[0].instance_id, target_id)

        # Powers first, then the biggest hitter
        affordable.sort(key=lambda c: (c.card_type != CardType.POWER, -self._damage_value(c)))
        return PlayCard(affordable[0].instance_id, target_id)

    def choose_reward(self, engine: CombatEngine):
        rewards = engine.state.rewards
        if rewards.skill is not None:
            return ChooseRewardSkill()
        if len(engine.state.deck) >= MAX_DECK_SIZE or not rewards.cards:
            return SkipReward()
        best = max(range(len(rewards.cards)), key=lambda i: self._damage_value(rewards.cards[i]))
        return ChooseRewardCard(best)

    @staticmethod
    def _weakest(enemies: list[Enemy]) -> Optional[Enemy]:
        return min(enemies, key=lambda e: e.current_hp + e.block) if enemies else None

    @staticmethod
    def _damage_value(card: CardInstance) -> int:
        return sum(e.value for e in card.effects if e.effect_type == EffectType.DAMAGE)

    @staticmethod
    def _block_value(card: CardInstance) -> int:
        return sum(e.value for e in card.effects if e.effect_type == EffectType.BLOCK)

    @staticmethod
    def _best_combo(hand: list[CardInstance], energy: int) -> list[CardInstance]:
        groups: dict[str, list[CardInstance]] = {}
        for card in hand:
            if card.definition.group_tag:
                groups.setdefault(card.definition.group_tag, []).append(card)
        best: list[CardInstance] = []
        for cards in groups.values():
            picked, spent = [], 0
            for card in sorted(cards, key=lambda c: c.cost):
                if spent + card.cost <= energy:
                    picked.append(card)
                    spent += card.cost
            if len(picked) >= 2 and len(picked) > len(best):
                best = picked
        return best


# ---------------------------------------------------------------------------
# Run simulator
# ---------------------------------------------------------------------------

def simulate_run(
    character_id: str = "warrior",
    max_levels: int = 5,
    seed: Optional[int] = None,
    use_llm: bool = False,
    progress_file: Optional[str] = None,
    strategy: str = "aggressive",
) -> dict:
    """
    Play until the player dies or max_levels are cleared.
    Returns a dict summary of every level.
    """
    rng = random.Random(seed)
    generator = OpenAIProfileGenerator() if use_llm else PresetProfileGenerator(rng)
    progress = ProgressStore(progress_file) if progress_file else None
    engine = CombatEngine(EngineConfig(), rng=rng, profile_generator=generator,
                          progress=progress, auto_pass=False)
    ai = AutoPlayer(strategy)

    print(f"\n{'=' * 60}")
    print(f"  🎲 EMOJI ROGUE: {character_id.upper()} (seed {seed})")
    print(f"{'=' * 60}")

    engine.open_character_select()
    engine.submit(SelectCharacter(character_id))
    if engine.flush() != [True] or engine.phase != GamePhase.PLAYER_TURN:
        raise SystemExit(f"Could not start a run as {character_id!r} (locked or unknown)")

    results = {"run_id": engine.state.run_id, "character": character_id, "seed": seed, "levels": []}
    cleared = 0

    while cleared < max_levels and engine.phase != GamePhase.GAME_OVER:
        level = engine.state.level
        enemies = ", ".join(f"{e.emoji} {e.name} ({e.max_hp})" for e in engine.state.enemies)
        print(f"\n{'─' * 60}")
        print(f"  LEVEL {level}: {enemies}")
        print(f"{'─' * 60}")

        while engine.phase in (GamePhase.PLAYER_TURN, GamePhase.ENEMY_TURN):
            if engine.state.turn_count > MAX_TURNS_PER_LEVEL:
                print("  ⚠️  Turn limit hit, abandoning run")
                results["abandoned"] = True
                return _finish(engine, results)
            action = ai.next_action(engine)
            engine.submit(action if action is not None else EndTurn())
            accepted = engine.flush()
            if action is not None and not all(accepted):
                logger.debug("Action %r rejected, ending turn", action)
                engine.submit(EndTurn())
                engine.flush()

        player = engine.state.player
        summary = {
            "level": level,
            "turns": engine.state.turn_count,
            "hp": player.current_hp,
            "max_hp": player.max_hp,
            "won": engine.phase == GamePhase.REWARD,
        }
        results["levels"].append(summary)
        print(f"  ❤️  HP {player.current_hp}/{player.max_hp} after {engine.state.turn_count} turns")

        if engine.phase == GamePhase.REWARD:
            cleared += 1
            rewards = engine.state.rewards
            print(f"  🎁 Rewards: {', '.join(c.name for c in rewards.cards)}"
                  + (f" + skill {rewards.skill.name}" if rewards.skill else ""))
            if cleared < max_levels:
                engine.submit(ai.choose_reward(engine))
                engine.flush()

    return _finish(engine, results)


def _finish(engine: CombatEngine, results: dict) -> dict:
    results["final_phase"] = engine.phase.value
    results["max_level_reached"] = engine.state.max_level_reached
    print(f"\n{'=' * 60}")
    if engine.phase == GamePhase.GAME_OVER:
        print(f"  💀 GAME OVER on level {engine.state.level}")
    else:
        print(f"  🏆 Survived {len([l for l in results['levels'] if l['won']])} levels")
    print(f"{'=' * 60}\n")
    return results


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Emoji Rogue Run Simulator")
    parser.add_argument("--character", default="warrior",
                        choices=[c.id for c in CHARACTERS])
    parser.add_argument("--levels", type=int, default=5,
                        help="Levels to clear before stopping (default: 5)")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--strategy", default="aggressive",
                        choices=["aggressive", "defensive"])
    parser.add_argument("--llm", action="store_true",
                        help="Generate enemy profiles with OpenAI")
    parser.add_argument("--progress-file", default=None,
                        help="JSON file holding the best level reached")
    parser.add_argument("--json-out", default=None,
                        help="Write the run summary to this file")
    parser.add_argument("--verbose", "-v", action="store_true")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.llm and not os.environ.get("OPENAI_API_KEY"):
        print("⚠️  No OPENAI_API_KEY found. Using preset enemies.")
        args.llm = False

    results = simulate_run(
        character_id=args.character,
        max_levels=args.levels,
        seed=args.seed,
        use_llm=args.llm,
        progress_file=args.progress_file,
        strategy=args.strategy,
    )

    if args.json_out:
        with open(args.json_out, "w") as f:
            json.dump(results, f, indent=2, default=str)
        print(f"📁 Run summary saved to: {args.json_out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
