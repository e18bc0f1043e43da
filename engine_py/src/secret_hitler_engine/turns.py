"""
Presidential rotation and chancellor eligibility.
"""

import logging
import random
from typing import List, Optional

from .constants import (
    EVENT_PHASE_CHANGE, EVENT_YOUR_TURN, TERM_LIMIT_LIVING_THRESHOLD, TURN_NOMINATE,
)
from .errors import illegal_state
from .messages import ActionContext, player_ref, player_refs
from .models import Phase, Player, RoomState

logger = logging.getLogger(__name__)


def build_president_order(players: List[Player], rng: Optional[random.Random] = None) -> List[str]:
    """
    Fix the rotation for the whole game.

    The cycle keeps seating order but starts at a uniformly chosen player,
    who becomes the first president.
    """
    if not players:
        illegal_state("Cannot build a rotation without players")
    start = (rng or random).randrange(len(players))
    ids = [p.id for p in players]
    return ids[start:] + ids[:start]


def next_president_id(room: RoomState, after_id: Optional[str]) -> str:
    """
    First living seated player after ``after_id`` in the fixed rotation.

    Dead players are skipped but never removed, so the order of the living
    never changes as the table shrinks.
    """
    order = room.game.president_order
    start = order.index(after_id) if after_id in order else -1
    for step in range(1, len(order) + 1):
        candidate = room.get_player(order[(start + step) % len(order)])
        if candidate is not None and candidate.is_living:
            return candidate.id
    illegal_state("No living player can take the presidency")


def eligible_chancellors(room: RoomState) -> List[str]:
    """
    Players the current president may nominate.

    The last chancellor is always term-limited. The last president is only
    term-limited while more than five players are alive.
    """
    game = room.game
    living = room.living_players()
    limit_last_president = len(living) > TERM_LIMIT_LIVING_THRESHOLD

    eligible = []
    for player in living:
        if player.id == game.president_id:
            continue
        if player.id == game.last_chancellor_id:
            continue
        if limit_last_president and player.id == game.last_president_id:
            continue
        eligible.append(player.id)
    return eligible


def advance_presidency(room: RoomState) -> str:
    """
    Hand the presidency to the next player and return their id.

    A pending special-election return point wins over normal rotation
    exactly once. If that player died in the meantime, rotation continues
    from their seat.
    """
    game = room.game
    return_id = game.special_election_return_id
    if return_id is not None:
        game.special_election_return_id = None
        returning = room.get_player(return_id)
        if returning is not None and returning.is_living:
            game.president_id = return_id
        else:
            game.president_id = next_president_id(room, return_id)
        logger.info(f"Room {room.code}: presidency returns to rotation at {game.president_id}")
    else:
        game.president_id = next_president_id(room, game.president_id)
    return game.president_id


def open_nomination(ctx: ActionContext):
    """Enter nomination under the current president and prompt them."""
    room, game = ctx.room, ctx.game
    room.phase = Phase.NOMINATION
    game.chancellor_id = None
    president = room.get_player(game.president_id)
    eligible = eligible_chancellors(room)

    ctx.outbox.host(
        EVENT_PHASE_CHANGE,
        phase=Phase.NOMINATION.value,
        president=player_ref(president),
        eligible_chancellors=eligible,
        election_tracker=game.election_tracker,
        deck_count=len(game.policy_deck),
    )
    ctx.outbox.player(
        president.id,
        EVENT_YOUR_TURN,
        action=TURN_NOMINATE,
        eligible_players=player_refs(room, eligible),
    )
    ctx.log(f"{president.name} is president")


def advance_round(ctx: ActionContext):
    """Close the current government and start the next nomination."""
    game = ctx.game
    game.chancellor_id = None
    game.pending_power = None
    game.clear_session()
    advance_presidency(ctx.room)
    open_nomination(ctx)
