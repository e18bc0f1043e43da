"""
Executive powers granted by the fascist track.
"""

import logging
from typing import List, Optional

from .constants import (
    EVENT_EXECUTION_COMPLETE, EVENT_INVESTIGATION_COMPLETE, EVENT_PHASE_CHANGE,
    EVENT_POLICY_PEEK_COMPLETE, EVENT_SPECIAL_ELECTION, EVENT_YOU_WERE_EXECUTED,
    EVENT_YOUR_TURN, POWER_TRACK_LARGE, POWER_TRACK_MEDIUM, POWER_TRACK_SMALL,
)
from .errors import illegal_state, invalid_choice
from .messages import ActionContext, player_ref, player_refs
from .models import Phase, Player, Power, RoomState
from .shuffle import peek_policies
from .turns import advance_round, next_president_id, open_nomination
from .validate import require_phase, require_president, require_target
from .victory import declare_winner, hitler_executed

logger = logging.getLogger(__name__)

TARGETED_POWERS = (Power.INVESTIGATE, Power.SPECIAL_ELECTION, Power.EXECUTION)


def power_track_for(player_count: int) -> List[Power]:
    """Fascist track for a table size, slot ``i`` fires on the ``i+1``-th policy."""
    if player_count <= 6:
        return list(POWER_TRACK_SMALL)
    if player_count <= 8:
        return list(POWER_TRACK_MEDIUM)
    return list(POWER_TRACK_LARGE)


def power_for_policy_count(power_track: List[Power], fascist_policies: int) -> Power:
    if 1 <= fascist_policies <= len(power_track):
        return power_track[fascist_policies - 1]
    return Power.NONE


def eligible_targets(room: RoomState, power: Power) -> List[str]:
    """
    Players the president may aim ``power`` at.

    Always living, seated and not the president. Investigation additionally
    excludes anyone already investigated this game.
    """
    game = room.game
    targets = []
    for player in room.living_players():
        if player.id == game.president_id:
            continue
        if power == Power.INVESTIGATE and player.id in game.investigated_players:
            continue
        targets.append(player.id)
    return targets


def parse_power(value) -> Power:
    try:
        return Power(value)
    except ValueError:
        invalid_choice(f"Unknown executive power: {value!r}")


def begin_executive(ctx: ActionContext, power: Power):
    """Hold the round in the executive phase until the president acts."""
    room, game = ctx.room, ctx.game
    room.phase = Phase.EXECUTIVE
    game.pending_power = power
    president = room.get_player(game.president_id)

    prompt = {"action": power.value}
    if power in TARGETED_POWERS:
        targets = eligible_targets(room, power)
        if not targets:
            illegal_state(f"No eligible targets for {power.value}")
        prompt["eligible_players"] = player_refs(room, targets)

    ctx.outbox.host(EVENT_PHASE_CHANGE, phase=Phase.EXECUTIVE.value, power=power.value, president=player_ref(president))
    ctx.outbox.player(president.id, EVENT_YOUR_TURN, **prompt)
    ctx.log(f"President {president.name} gains {power.value}")


def resolve_power(ctx: ActionContext, actor_id: Optional[str], power, target_id: Optional[str] = None):
    """
    Carry out the pending power on behalf of the president.

    Raises:
        GameError: wrong phase, not the president, a power other than the
            pending one, or an unknown or ineligible target
    """
    require_phase(ctx, Phase.EXECUTIVE)
    president = require_president(ctx, actor_id)
    game = ctx.game
    requested = parse_power(power)
    if requested != game.pending_power:
        invalid_choice(f"Pending power is {game.pending_power.value}, not {requested.value}")

    if requested == Power.POLICY_PEEK:
        apply_policy_peek(ctx, president)
        return

    target = require_target(ctx, target_id, eligible_targets(ctx.room, requested))
    if requested == Power.INVESTIGATE:
        apply_investigate(ctx, president, target)
    elif requested == Power.SPECIAL_ELECTION:
        apply_special_election(ctx, president, target)
    else:
        apply_execution(ctx, president, target)


def apply_investigate(ctx: ActionContext, president: Player, target: Player):
    game = ctx.game
    game.investigated_players.append(target.id)
    ctx.result.update(target=player_ref(target), team=target.team.value)

    ctx.outbox.host(EVENT_INVESTIGATION_COMPLETE, president=player_ref(president), target=player_ref(target))
    ctx.log(f"{president.name} investigated {target.name}")
    advance_round(ctx)


def apply_special_election(ctx: ActionContext, president: Player, target: Player):
    room, game = ctx.room, ctx.game
    game.special_election_return_id = next_president_id(room, president.id)
    game.president_id = target.id
    game.pending_power = None
    game.clear_session()

    ctx.outbox.host(EVENT_SPECIAL_ELECTION, president=player_ref(president), new_president=player_ref(target))
    ctx.log(f"{president.name} called a special election: {target.name} is next president")
    open_nomination(ctx)


def apply_policy_peek(ctx: ActionContext, president: Player):
    game = ctx.game
    policies = peek_policies(game, ctx.rng)
    ctx.result.update(policies=[policy.value for policy in policies])

    ctx.outbox.host(EVENT_POLICY_PEEK_COMPLETE, president=player_ref(president))
    ctx.log(f"{president.name} peeked at the policy deck")
    advance_round(ctx)


def apply_execution(ctx: ActionContext, president: Player, target: Player):
    game = ctx.game
    target.alive = False
    game.executed_players.append(target.id)
    ctx.log(f"{president.name} executed {target.name}")

    outcome = hitler_executed(target)
    if outcome is not None:
        declare_winner(ctx, outcome, executed_player=player_ref(target))
        return

    ctx.outbox.host(EVENT_EXECUTION_COMPLETE, president=player_ref(president), executed_player=player_ref(target))
    ctx.outbox.player(target.id, EVENT_YOU_WERE_EXECUTED)
    logger.info(f"Room {ctx.room.code}: {target.name} executed")
    advance_round(ctx)
