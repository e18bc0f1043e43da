"""
Win conditions.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import (
    EVENT_GAME_OVER, FASCIST_POLICIES_TO_WIN, HITLER_ZONE, LIBERAL_POLICIES_TO_WIN,
)
from .messages import ActionContext
from .models import GameState, Phase, Player, Role, Team
from .roles import role_reveal

logger = logging.getLogger(__name__)

REASON_LIBERAL_POLICIES = "Five Liberal Policies enacted!"
REASON_FASCIST_POLICIES = "Six Fascist Policies enacted!"
REASON_HITLER_ELECTED = "Hitler was elected Chancellor!"
REASON_HITLER_ASSASSINATED = "Hitler has been assassinated!"


@dataclass(frozen=True)
class Outcome:
    winner: Team
    reason: str


def check_win_condition(liberal_policies: int, fascist_policies: int) -> Optional[Outcome]:
    """Board-only win check, run after every enactment."""
    if liberal_policies >= LIBERAL_POLICIES_TO_WIN:
        return Outcome(Team.LIBERAL, REASON_LIBERAL_POLICIES)
    if fascist_policies >= FASCIST_POLICIES_TO_WIN:
        return Outcome(Team.FASCIST, REASON_FASCIST_POLICIES)
    return None


def hitler_elected(game: GameState, chancellor: Player) -> Optional[Outcome]:
    if game.fascist_policies >= HITLER_ZONE and chancellor.role == Role.HITLER:
        return Outcome(Team.FASCIST, REASON_HITLER_ELECTED)
    return None


def hitler_executed(target: Player) -> Optional[Outcome]:
    if target.role == Role.HITLER:
        return Outcome(Team.LIBERAL, REASON_HITLER_ASSASSINATED)
    return None


def declare_winner(ctx: ActionContext, outcome: Outcome, **extra):
    """Move the room to its terminal phase and reveal every role."""
    room, game = ctx.room, ctx.game
    room.phase = Phase.GAME_OVER
    game.winner = outcome.winner
    game.game_over_reason = outcome.reason
    game.pending_power = None
    game.clear_session()

    ctx.outbox.room(
        EVENT_GAME_OVER,
        winner=outcome.winner.value,
        reason=outcome.reason,
        liberal_policies=game.liberal_policies,
        fascist_policies=game.fascist_policies,
        players=role_reveal(room.players),
        **extra
    )
    ctx.log(f"Game over: {outcome.reason}")
    logger.info(f"Room {room.code}: {outcome.winner.value} win ({outcome.reason})")
