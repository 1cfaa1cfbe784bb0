"""
Deck manager: draw pile, hand and discard pile.
The top of the draw pile is the end of the list.
"""

from __future__ import annotations
import logging
import random
from typing import Iterable, Optional

from .models import CardInstance, DeckPiles

logger = logging.getLogger(__name__)


def reshuffle_discard(piles: DeckPiles, rng: random.Random) -> None:
    """Move the whole discard pile into the draw pile in a random order."""
    piles.draw_pile.extend(piles.discard_pile)
    piles.discard_pile.clear()
    rng.shuffle(piles.draw_pile)
    logger.debug("Reshuffled discard into draw pile (%d cards)", len(piles.draw_pile))


def draw(piles: DeckPiles, n: int, rng: random.Random) -> list[CardInstance]:
    """
    Move up to n cards from the draw pile to the hand.
    An exhausted draw pile is refilled from the discard pile; when both are
    empty fewer cards are drawn.
    """
    drawn = []
    for _ in range(max(0, n)):
        if not piles.draw_pile:
            if not piles.discard_pile:
                break
            reshuffle_discard(piles, rng)
        card = piles.draw_pile.pop()
        piles.hand.append(card)
        drawn.append(card)
    return drawn


def draw_to_limit(piles: DeckPiles, limit: int, rng: random.Random) -> list[CardInstance]:
    return draw(piles, max(0, limit - len(piles.hand)), rng)


def discard(piles: DeckPiles, card_ids: Iterable[str]) -> list[CardInstance]:
    """Move the given instances from hand to the end of the discard pile. Unknown ids are ignored."""
    moved = []
    for card_id in card_ids:
        card = piles.find_in_hand(card_id)
        if card is None:
            continue
        piles.hand.remove(card)
        piles.discard_pile.append(card)
        moved.append(card)
    return moved


def setup_level_piles(deck: list[CardInstance], base_draw_count: int,
                      fixed_starting_hand: Iterable[str],
                      rng: random.Random) -> DeckPiles:
    """
    Fresh piles for a level: shuffle the whole deck, pull each fixed-hand
    template out by first match, then fill the hand to base_draw_count.
    """
    piles = DeckPiles(draw_pile=list(deck))
    rng.shuffle(piles.draw_pile)

    for template_id in fixed_starting_hand:
        card = _first_with_template(piles.draw_pile, template_id)
        if card is None:
            logger.debug("Fixed hand card %s not in deck, skipped", template_id)
            continue
        piles.draw_pile.remove(card)
        piles.hand.append(card)

    while len(piles.hand) < base_draw_count and piles.draw_pile:
        piles.hand.append(piles.draw_pile.pop())
    return piles


def _first_with_template(cards: list[CardInstance], template_id: str) -> Optional[CardInstance]:
    for card in cards:
        if card.template_id == template_id:
            return card
    return None


def duplicate_instances(piles: DeckPiles) -> list[str]:
    """Instance ids found in more than one place across the three piles."""
    seen = set()
    dupes = []
    for card in piles.draw_pile + piles.hand + piles.discard_pile:
        if card.instance_id in seen:
            dupes.append(card.instance_id)
        seen.add(card.instance_id)
    return dupes


def remove_duplicates(piles: DeckPiles) -> int:
    """Keep the first occurrence of each instance (hand, then draw, then discard)."""
    seen = set()
    removed = 0
    for pile in (piles.hand, piles.draw_pile, piles.discard_pile):
        kept = []
        for card in pile:
            if card.instance_id in seen:
                removed += 1
                continue
            seen.add(card.instance_id)
            kept.append(card)
        pile[:] = kept
    return removed
