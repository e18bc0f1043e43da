"""
Policy deck shuffling, drawing and conservation checks.
"""

import logging
import random
from typing import List, Optional, Sequence, TypeVar

from .constants import FASCIST_CARDS, LIBERAL_CARDS, PEEK_COUNT, POLICIES_PER_SESSION, TOTAL_CARDS
from .errors import EXHAUSTED, raise_error
from .models import GameState, Policy

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_deck() -> List[Policy]:
    """Create the unshuffled policy deck."""
    return [Policy.LIBERAL] * LIBERAL_CARDS + [Policy.FASCIST] * FASCIST_CARDS


def shuffle_cards(cards: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Return a uniformly shuffled copy of ``cards``.

    Args:
        cards: Items to shuffle (policies or roles)
        rng: Random source; the module-level generator when omitted

    Returns:
        Shuffled copy, the input is left untouched
    """
    shuffled = list(cards)
    (rng or random).shuffle(shuffled)
    return shuffled


def create_policy_deck(rng: Optional[random.Random] = None) -> List[Policy]:
    """Build and shuffle a fresh 17 card deck."""
    return shuffle_cards(create_deck(), rng)


def reshuffle_if_needed(game: GameState, rng: Optional[random.Random] = None, needed: int = POLICIES_PER_SESSION) -> bool:
    """
    Fold the discard pile back into the deck when fewer than ``needed`` cards remain.

    Returns:
        True if a reshuffle happened
    """
    if len(game.policy_deck) >= needed:
        return False

    available = len(game.policy_deck) + len(game.discard_pile)
    if available < needed:
        raise_error(
            EXHAUSTED,
            f"Only {available} policies left in deck and discard; conservation is broken"
        )

    game.policy_deck = shuffle_cards(game.policy_deck + game.discard_pile, rng)
    game.discard_pile = []
    logger.info(f"Reshuffled discard pile into deck ({len(game.policy_deck)} cards)")
    return True


def draw_policies(game: GameState, count: int, rng: Optional[random.Random] = None) -> List[Policy]:
    """Remove and return the top ``count`` policies."""
    reshuffle_if_needed(game, rng)
    drawn = game.policy_deck[:count]
    game.policy_deck = game.policy_deck[count:]
    return drawn


def peek_policies(game: GameState, rng: Optional[random.Random] = None) -> List[Policy]:
    """Return the top three policies without removing them."""
    reshuffle_if_needed(game, rng)
    return list(game.policy_deck[:PEEK_COUNT])


def deck_total(game: GameState) -> int:
    """Cards accounted for anywhere in the game."""
    return (
        len(game.policy_deck)
        + len(game.discard_pile)
        + len(game.drawn_policies)
        + game.liberal_policies
        + game.fascist_policies
    )


def validate_deck_integrity(game: GameState) -> bool:
    """
    Validate that every policy card is accounted for exactly once.

    Args:
        game: Game state to validate

    Returns:
        True if 6 liberal and 11 fascist cards are spread over deck,
        discard pile, the current session and the board
    """
    in_play = game.policy_deck + game.discard_pile + game.drawn_policies
    liberals = in_play.count(Policy.LIBERAL) + game.liberal_policies
    fascists = in_play.count(Policy.FASCIST) + game.fascist_policies
    return (
        liberals == LIBERAL_CARDS
        and fascists == FASCIST_CARDS
        and deck_total(game) == TOTAL_CARDS
    )
