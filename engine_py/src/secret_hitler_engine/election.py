"""
Nomination, voting and election resolution.
"""

import logging
from typing import Dict, Tuple

from .constants import (
    EVENT_PHASE_CHANGE, EVENT_VOTE_CAST, EVENT_VOTE_RESULTS, EVENT_YOUR_TURN,
    FAILED_ELECTIONS_FOR_CHAOS, TURN_VOTE,
)
from .errors import invalid_choice, not_found
from .legislative import begin_session, chaos_enactment
from .messages import ActionContext, player_ref
from .models import Phase, Vote
from .turns import advance_round, eligible_chancellors
from .validate import require_phase, require_president, require_voter
from .victory import declare_winner, hitler_elected

logger = logging.getLogger(__name__)


def nominate_chancellor(ctx: ActionContext, actor_id, chancellor_id):
    require_phase(ctx, Phase.NOMINATION)
    president = require_president(ctx, actor_id)
    room, game = ctx.room, ctx.game

    nominee = room.get_player(chancellor_id)
    if nominee is None:
        not_found("Invalid target")
    if nominee.id not in eligible_chancellors(room):
        invalid_choice(f"{nominee.name} is not eligible to be chancellor")

    game.chancellor_id = nominee.id
    game.votes = {}
    room.phase = Phase.VOTING
    ctx.log(f"{president.name} nominated {nominee.name} for chancellor")

    ctx.outbox.host(
        EVENT_PHASE_CHANGE,
        phase=Phase.VOTING.value,
        president=player_ref(president),
        chancellor=player_ref(nominee),
    )
    for voter in room.living_players():
        ctx.outbox.player(
            voter.id,
            EVENT_YOUR_TURN,
            action=TURN_VOTE,
            president=player_ref(president),
            chancellor=player_ref(nominee),
        )


def parse_vote(value) -> Vote:
    if isinstance(value, Vote):
        return value
    try:
        return Vote(str(value).lower())
    except ValueError:
        invalid_choice(f"Invalid vote: {value!r}")


def cast_vote(ctx: ActionContext, actor_id, vote):
    """Record or replace one ballot; the last missing ballot resolves the election."""
    require_phase(ctx, Phase.VOTING)
    voter = require_voter(ctx, actor_id)
    ballot = parse_vote(vote)
    room, game = ctx.room, ctx.game

    game.votes[voter.id] = ballot
    living = room.living_players()
    ctx.outbox.host(
        EVENT_VOTE_CAST,
        player_id=voter.id,
        total_votes=len(game.votes),
        total_players=len(living),
    )

    if all(player.id in game.votes for player in living):
        resolve_election(ctx)


def tally_votes(votes: Dict[str, Vote]) -> Tuple[int, int, bool]:
    """(ja, nein, passed); a tie fails."""
    ja = sum(1 for vote in votes.values() if vote == Vote.JA)
    nein = len(votes) - ja
    return ja, nein, ja > nein


def resolve_election(ctx: ActionContext):
    room, game = ctx.room, ctx.game
    ja, nein, passed = tally_votes(game.votes)
    president = room.get_player(game.president_id)
    chancellor = room.get_player(game.chancellor_id)

    results = {
        "votes": [
            {"id": p.id, "name": p.name, "vote": game.votes[p.id].value}
            for p in room.living_players()
            if p.id in game.votes
        ],
        "ja_votes": ja,
        "nein_votes": nein,
        "passed": passed,
    }
    ctx.outbox.host(EVENT_VOTE_RESULTS, **results)
    for player in room.active_players():
        ctx.outbox.player(player.id, EVENT_VOTE_RESULTS, **results)
    ctx.log(f"Election {'passed' if passed else 'failed'} ({ja} ja, {nein} nein)")

    if passed:
        outcome = hitler_elected(game, chancellor)
        if outcome is not None:
            declare_winner(ctx, outcome, chancellor=player_ref(chancellor))
            return
        game.election_tracker = 0
        game.last_president_id = president.id
        game.last_chancellor_id = chancellor.id
        begin_session(ctx)
        return

    game.election_tracker += 1
    logger.info(f"Room {room.code}: election failed, tracker at {game.election_tracker}")
    if game.election_tracker >= FAILED_ELECTIONS_FOR_CHAOS:
        chaos_enactment(ctx)
        if room.phase == Phase.GAME_OVER:
            return
    advance_round(ctx)
