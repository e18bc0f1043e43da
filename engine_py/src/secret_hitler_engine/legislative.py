"""
Legislative session, veto and policy enactment.
"""

import logging

from .constants import (
    EVENT_CHAOS, EVENT_PHASE_CHANGE, EVENT_POLICY_ENACTED, EVENT_VETO_APPROVED,
    EVENT_VETO_REJECTED, EVENT_VETO_REQUESTED, EVENT_YOUR_TURN,
    FAILED_ELECTIONS_FOR_CHAOS, POLICIES_PER_SESSION, TURN_DISCARD, TURN_ENACT,
    TURN_VETO_DECISION, VETO_UNLOCK,
)
from .effects import begin_executive, power_for_policy_count
from .errors import illegal_state
from .messages import ActionContext, player_ref
from .models import Phase, Policy, Power
from .shuffle import draw_policies
from .turns import advance_round
from .validate import require_bool, require_chancellor, require_index, require_phase, require_president
from .victory import check_win_condition, declare_winner

logger = logging.getLogger(__name__)


def begin_session(ctx: ActionContext):
    """Draw three policies and hand them to the president."""
    room, game = ctx.room, ctx.game
    game.clear_session()
    game.drawn_policies = draw_policies(game, POLICIES_PER_SESSION, ctx.rng)
    room.phase = Phase.LEGISLATIVE_PRESIDENT
    president = room.get_player(game.president_id)

    ctx.outbox.host(EVENT_PHASE_CHANGE, phase=room.phase.value, president=player_ref(president))
    ctx.outbox.player(
        president.id,
        EVENT_YOUR_TURN,
        action=TURN_DISCARD,
        policies=[policy.value for policy in game.drawn_policies],
    )


def president_discard(ctx: ActionContext, actor_id, discard_index):
    require_phase(ctx, Phase.LEGISLATIVE_PRESIDENT)
    president = require_president(ctx, actor_id)
    game = ctx.game
    index = require_index(discard_index, len(game.drawn_policies), "discard index")

    game.discard_pile.append(game.drawn_policies.pop(index))
    ctx.room.phase = Phase.LEGISLATIVE_CHANCELLOR
    ctx.log(f"President {president.name} passed two policies to the chancellor")
    _prompt_chancellor(ctx)


def _prompt_chancellor(ctx: ActionContext):
    room, game = ctx.room, ctx.game
    chancellor = room.get_player(game.chancellor_id)
    ctx.outbox.host(EVENT_PHASE_CHANGE, phase=room.phase.value, chancellor=player_ref(chancellor))
    ctx.outbox.player(
        chancellor.id,
        EVENT_YOUR_TURN,
        action=TURN_ENACT,
        policies=[policy.value for policy in game.drawn_policies],
        veto_enabled=game.veto_enabled and not game.veto_rejected,
    )


def chancellor_enact(ctx: ActionContext, actor_id, enact_index):
    require_phase(ctx, Phase.LEGISLATIVE_CHANCELLOR)
    require_chancellor(ctx, actor_id)
    game = ctx.game
    index = require_index(enact_index, len(game.drawn_policies), "enact index")

    enacted = game.drawn_policies.pop(index)
    game.discard_pile.extend(game.drawn_policies)
    game.clear_session()
    enact_policy(ctx, enacted)


def request_veto(ctx: ActionContext, actor_id):
    """Chancellor proposes discarding both policies. Once per session."""
    require_phase(ctx, Phase.LEGISLATIVE_CHANCELLOR)
    chancellor = require_chancellor(ctx, actor_id)
    game = ctx.game
    if not game.veto_enabled:
        illegal_state("Veto not enabled")
    if game.veto_rejected:
        illegal_state("Veto was already rejected this session")

    game.veto_requested = True
    ctx.room.phase = Phase.VETO_DECISION
    ctx.outbox.host(EVENT_VETO_REQUESTED, chancellor=player_ref(chancellor))
    ctx.outbox.player(game.president_id, EVENT_YOUR_TURN, action=TURN_VETO_DECISION)
    ctx.log(f"Chancellor {chancellor.name} requested a veto")


def veto_decision(ctx: ActionContext, actor_id, approve):
    require_phase(ctx, Phase.VETO_DECISION)
    president = require_president(ctx, actor_id)
    approve = require_bool(approve, "veto decision")
    game = ctx.game
    game.veto_requested = False

    if not approve:
        game.veto_rejected = True
        ctx.room.phase = Phase.LEGISLATIVE_CHANCELLOR
        ctx.outbox.host(EVENT_VETO_REJECTED, president=player_ref(president))
        ctx.log(f"President {president.name} rejected the veto")
        _prompt_chancellor(ctx)
        return

    game.discard_pile.extend(game.drawn_policies)
    game.clear_session()
    game.election_tracker += 1
    ctx.outbox.host(EVENT_VETO_APPROVED, election_tracker=game.election_tracker)
    ctx.log(f"Agenda vetoed, election tracker at {game.election_tracker}")

    if game.election_tracker >= FAILED_ELECTIONS_FOR_CHAOS:
        chaos_enactment(ctx)
        if ctx.room.phase == Phase.GAME_OVER:
            return
    advance_round(ctx)


def enact_policy(ctx: ActionContext, policy: Policy, chaos: bool = False):
    """
    Put ``policy`` on the board and decide what happens next.

    A win ends the game. A chaos enactment stops there and leaves round
    advancement to the caller; otherwise a fascist slot with a power opens
    the executive phase and anything else advances the round.
    """
    game = ctx.game
    if policy == Policy.LIBERAL:
        game.liberal_policies += 1
    else:
        game.fascist_policies += 1
        if game.fascist_policies >= VETO_UNLOCK:
            game.veto_enabled = True

    ctx.outbox.host(
        EVENT_CHAOS if chaos else EVENT_POLICY_ENACTED,
        policy=policy.value,
        liberal_policies=game.liberal_policies,
        fascist_policies=game.fascist_policies,
        veto_enabled=game.veto_enabled,
    )
    ctx.log(f"{'Chaos: ' if chaos else ''}{policy.value} policy enacted")

    outcome = check_win_condition(game.liberal_policies, game.fascist_policies)
    if outcome is not None:
        declare_winner(ctx, outcome)
        return
    if chaos:
        return

    if policy == Policy.FASCIST:
        power = power_for_policy_count(game.power_track, game.fascist_policies)
        if power != Power.NONE:
            begin_executive(ctx, power)
            return
    advance_round(ctx)


def chaos_enactment(ctx: ActionContext):
    """Third failed government in a row: the top policy is enacted blind."""
    game = ctx.game
    policy = draw_policies(game, 1, ctx.rng)[0]
    game.election_tracker = 0
    game.last_president_id = None
    game.last_chancellor_id = None
    logger.info(f"Room {ctx.room.code}: chaos enacts {policy.value}")
    enact_policy(ctx, policy, chaos=True)
