"""
Action orchestrator.

Every entry point here takes a room, applies one action to a private copy
and returns an ActionResult. A rejected action returns the room it was
given, untouched, and no messages.
"""

import copy
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from . import effects, election, legislative
from .constants import (
    ACTION_CHANCELLOR_ENACT, ACTION_CHANCELLOR_VETO, ACTION_EXECUTIVE,
    ACTION_NIGHT_COMPLETE, ACTION_NOMINATE, ACTION_PLAY_AGAIN,
    ACTION_PRESIDENT_DISCARD, ACTION_START_GAME, ACTION_VETO_DECISION,
    ACTION_VOTE, EVENT_GAME_STARTED, EVENT_PHASE_CHANGE,
    EVENT_PLAYER_DISCONNECTED, EVENT_PLAYER_JOINED, EVENT_PLAYER_RECONNECTED,
    EVENT_RETURN_TO_LOBBY,
)
from .errors import (
    GameError, INVALID_CHOICE, NAME_TAKEN, ROOM_FULL, illegal_state,
    invalid_choice, not_found, raise_error,
)
from .messages import ActionContext, Message
from .models import GameState, Phase, Player, RoomState
from .roles import assign_roles, known_info_for
from .rules import RuleConfig, default_rules
from .serialization import serialize_player_for_list
from .shuffle import create_policy_deck
from .turns import build_president_order, open_nomination
from .validate import require_host

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of one action: the room to store and the messages to deliver."""
    success: bool
    state: Optional[RoomState] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    # Actor-only payload
    data: Dict[str, Any] = field(default_factory=dict)
    messages: List[Message] = field(default_factory=list)

    @classmethod
    def ok(cls, state: RoomState, messages: List[Message] = None, data: Dict[str, Any] = None) -> "ActionResult":
        return cls(success=True, state=state, messages=messages or [], data=data or {})

    @classmethod
    def fail(cls, state: Optional[RoomState], code: str, message: str) -> "ActionResult":
        return cls(success=False, state=state, error_code=code, error_message=message)


def _run(state: RoomState, handler: Callable, *args, rng: Optional[random.Random] = None,
         rules: RuleConfig = default_rules) -> ActionResult:
    """Apply ``handler`` to a copy of ``state``; GameError rolls everything back."""
    new_state = copy.deepcopy(state)
    ctx = ActionContext(room=new_state, rng=rng or random.Random())
    try:
        handler(ctx, *args)
    except GameError as e:
        logger.info(f"Room {state.code}: action rejected ({e.code}: {e.message})")
        return ActionResult.fail(state, e.code, e.message)

    del new_state.game_log[:-rules.game_log_limit]
    new_state.increment_version()
    return ActionResult.ok(new_state, ctx.outbox.messages, ctx.result)


# Lobby

def create_room(code: str, host_id: str, created_at: float = 0.0) -> RoomState:
    """Create an empty lobby owned by ``host_id`` (the host never plays)."""
    return RoomState(code=code, host_id=host_id, created_at=created_at)


def join_room(state: RoomState, player_id: str, name: str, is_spectator: bool = False,
              rules: RuleConfig = default_rules) -> ActionResult:
    """
    Add a player or spectator, or reconnect a disconnected player by name.

    Joining a room whose game is running seats nobody: unless the name
    matches a disconnected player, the newcomer becomes a spectator, or is
    turned away when the room allows no spectators.

    Returns:
        ActionResult whose data holds the bound ``player_id`` (an existing id
        on reconnection), ``is_spectator`` and ``reconnected``
    """
    def handler(ctx: ActionContext):
        _join(ctx, player_id, name, is_spectator, rules)

    return _run(state, handler, rules=rules)


def _join(ctx: ActionContext, player_id: str, name: str, is_spectator: bool, rules: RuleConfig):
    room = ctx.room
    name = (name or "").strip()
    if not name or len(name) > rules.max_name_length:
        invalid_choice(f"Name must be 1-{rules.max_name_length} characters")
    if is_spectator and not rules.allow_spectators:
        invalid_choice("Spectators are not allowed in this room")

    existing = room.find_player_by_name(name)
    if existing is not None and not existing.connected:
        _reconnect(ctx, existing)
        return
    if existing is not None:
        raise_error(NAME_TAKEN, f"Name '{name}' is already taken")

    if room.phase != Phase.LOBBY:
        if not rules.allow_spectators:
            illegal_state("Game already in progress")
        is_spectator = True
    elif not is_spectator and len(room.active_players()) >= rules.max_players:
        raise_error(ROOM_FULL, "Room is full")

    player = Player(id=player_id, name=name, is_spectator=is_spectator)
    room.players.append(player)
    ctx.result.update(player_id=player.id, is_spectator=player.is_spectator, reconnected=False)
    ctx.outbox.host(
        EVENT_PLAYER_JOINED,
        player={"id": player.id, "name": player.name, "is_spectator": player.is_spectator},
        players=[serialize_player_for_list(p) for p in room.players],
    )
    ctx.log(f"{name} joined{' as spectator' if is_spectator else ''}")


def _reconnect(ctx: ActionContext, player: Player):
    player.connected = True
    ctx.result.update(
        player_id=player.id,
        is_spectator=player.is_spectator,
        reconnected=True,
        role=player.role.value if player.role else None,
        team=player.team.value if player.team else None,
    )
    ctx.outbox.host(EVENT_PLAYER_RECONNECTED, player={"id": player.id, "name": player.name})
    ctx.log(f"{player.name} reconnected")


def reconnect_player(state: RoomState, player_id: str, rules: RuleConfig = default_rules) -> ActionResult:
    """Mark a known player as connected again."""
    def handler(ctx: ActionContext):
        player = ctx.room.get_player(player_id)
        if player is None:
            not_found("Player not found")
        if player.connected:
            illegal_state(f"{player.name} is already connected")
        _reconnect(ctx, player)

    return _run(state, handler, rules=rules)


def disconnect_player(state: RoomState, player_id: str, rules: RuleConfig = default_rules) -> ActionResult:
    """
    Mark a player as disconnected. They keep their seat and role; the game
    waits for them.
    """
    def handler(ctx: ActionContext):
        player = ctx.room.get_player(player_id)
        if player is None:
            not_found("Player not found")
        player.connected = False
        ctx.outbox.host(EVENT_PLAYER_DISCONNECTED, player={"id": player.id, "name": player.name})
        ctx.log(f"{player.name} disconnected")

    return _run(state, handler, rules=rules)


# Game lifecycle

def _start_game(ctx: ActionContext, actor_id: Optional[str], rules: RuleConfig):
    room = ctx.room
    require_host(ctx, actor_id)
    if room.phase != Phase.LOBBY:
        illegal_state("Game already in progress")

    active = room.active_players()
    if not rules.validate_player_count(len(active)):
        illegal_state(f"Need {rules.min_players}-{rules.max_players} players to start")
    assign_roles(active, ctx.rng)
    order = build_president_order(active, ctx.rng)
    room.game = GameState(
        president_id=order[0],
        president_order=order,
        power_track=effects.power_track_for(len(active)),
        policy_deck=create_policy_deck(ctx.rng),
    )
    room.phase = Phase.NIGHT

    for player in active:
        ctx.outbox.player(
            player.id,
            EVENT_GAME_STARTED,
            role=player.role.value,
            team=player.team.value,
            known_info=known_info_for(player, active),
            player_count=len(active),
            is_spectator=False,
        )
    for spectator in room.spectators():
        ctx.outbox.player(spectator.id, EVENT_GAME_STARTED, is_spectator=True, player_count=len(active))
    ctx.outbox.host(EVENT_PHASE_CHANGE, phase=Phase.NIGHT.value, player_count=len(active))
    ctx.log(f"Game started with {len(active)} players")
    logger.info(f"Room {room.code}: game started with {len(active)} players")


def _night_complete(ctx: ActionContext, actor_id: Optional[str]):
    require_host(ctx, actor_id)
    ctx.game
    if ctx.room.phase != Phase.NIGHT:
        illegal_state("Night phase is not running")
    open_nomination(ctx)


def _play_again(ctx: ActionContext, actor_id: Optional[str]):
    room = ctx.room
    require_host(ctx, actor_id)
    if room.phase != Phase.GAME_OVER:
        illegal_state("Game is not over")

    room.game = None
    room.phase = Phase.LOBBY
    for player in room.players:
        player.team = None
        player.role = None
        player.alive = True

    roster = [serialize_player_for_list(p) for p in room.players]
    ctx.outbox.room(EVENT_RETURN_TO_LOBBY)
    ctx.outbox.host(EVENT_PHASE_CHANGE, phase=Phase.LOBBY.value, players=roster)
    ctx.log("Returned to lobby")


def start_game(state: RoomState, actor_id: Optional[str], rng: Optional[random.Random] = None,
               rules: RuleConfig = default_rules) -> ActionResult:
    """
    Deal roles, fix the presidential rotation, shuffle the deck and enter
    the night phase.

    Args:
        state: Room in the lobby phase
        actor_id: Must be the host
        rng: Random source for roles, rotation and deck
        rules: Player count limits

    Returns:
        ActionResult with one private ``game-started`` reveal per player
    """
    return _run(state, _start_game, actor_id, rules, rng=rng, rules=rules)


def night_complete(state: RoomState, actor_id: Optional[str], rules: RuleConfig = default_rules) -> ActionResult:
    return _run(state, _night_complete, actor_id, rules=rules)


def play_again(state: RoomState, actor_id: Optional[str], rules: RuleConfig = default_rules) -> ActionResult:
    """Return a finished room to its lobby, keeping the roster and host."""
    return _run(state, _play_again, actor_id, rules=rules)


# Gameplay

def nominate_chancellor(state: RoomState, actor_id: Optional[str], chancellor_id: Optional[str],
                        rng: Optional[random.Random] = None, rules: RuleConfig = default_rules) -> ActionResult:
    return _run(state, election.nominate_chancellor, actor_id, chancellor_id, rng=rng, rules=rules)


def cast_vote(state: RoomState, actor_id: Optional[str], vote: Any,
              rng: Optional[random.Random] = None, rules: RuleConfig = default_rules) -> ActionResult:
    return _run(state, election.cast_vote, actor_id, vote, rng=rng, rules=rules)


def president_discard(state: RoomState, actor_id: Optional[str], discard_index: Any,
                      rng: Optional[random.Random] = None, rules: RuleConfig = default_rules) -> ActionResult:
    return _run(state, legislative.president_discard, actor_id, discard_index, rng=rng, rules=rules)


def chancellor_enact(state: RoomState, actor_id: Optional[str], enact_index: Any,
                     rng: Optional[random.Random] = None, rules: RuleConfig = default_rules) -> ActionResult:
    return _run(state, legislative.chancellor_enact, actor_id, enact_index, rng=rng, rules=rules)


def chancellor_veto(state: RoomState, actor_id: Optional[str],
                    rng: Optional[random.Random] = None, rules: RuleConfig = default_rules) -> ActionResult:
    return _run(state, legislative.request_veto, actor_id, rng=rng, rules=rules)


def veto_decision(state: RoomState, actor_id: Optional[str], approve: Any,
                  rng: Optional[random.Random] = None, rules: RuleConfig = default_rules) -> ActionResult:
    return _run(state, legislative.veto_decision, actor_id, approve, rng=rng, rules=rules)


def executive_action(state: RoomState, actor_id: Optional[str], power: Any, target_id: Optional[str] = None,
                     rng: Optional[random.Random] = None, rules: RuleConfig = default_rules) -> ActionResult:
    return _run(state, effects.resolve_power, actor_id, power, target_id, rng=rng, rules=rules)


ACTION_HANDLERS: Dict[str, Callable[..., ActionResult]] = {
    ACTION_START_GAME: lambda s, a, p, r, c: start_game(s, a, rng=r, rules=c),
    ACTION_NIGHT_COMPLETE: lambda s, a, p, r, c: night_complete(s, a, rules=c),
    ACTION_NOMINATE: lambda s, a, p, r, c: nominate_chancellor(s, a, p.get("chancellor_id"), rng=r, rules=c),
    ACTION_VOTE: lambda s, a, p, r, c: cast_vote(s, a, p.get("vote"), rng=r, rules=c),
    ACTION_PRESIDENT_DISCARD: lambda s, a, p, r, c: president_discard(s, a, p.get("discard_index"), rng=r, rules=c),
    ACTION_CHANCELLOR_ENACT: lambda s, a, p, r, c: chancellor_enact(s, a, p.get("enact_index"), rng=r, rules=c),
    ACTION_CHANCELLOR_VETO: lambda s, a, p, r, c: chancellor_veto(s, a, rng=r, rules=c),
    ACTION_VETO_DECISION: lambda s, a, p, r, c: veto_decision(s, a, p.get("approve"), rng=r, rules=c),
    ACTION_EXECUTIVE: lambda s, a, p, r, c: executive_action(s, a, p.get("power"), p.get("target_id"), rng=r, rules=c),
    ACTION_PLAY_AGAIN: lambda s, a, p, r, c: play_again(s, a, rules=c),
}


def apply_action(state: RoomState, actor_id: Optional[str], action: str, payload: Optional[Dict[str, Any]] = None,
                 rng: Optional[random.Random] = None, rules: RuleConfig = default_rules) -> ActionResult:
    """
    Apply one named action.

    Args:
        state: Current room state
        actor_id: Who is acting (host id or player id)
        action: One of the ACTION_* names
        payload: Action arguments (chancellor_id, vote, discard_index,
            enact_index, approve, power, target_id)
        rng: Random source for shuffles and draws
        rules: Room configuration

    Returns:
        ActionResult; on failure ``state`` is the input room
    """
    handler = ACTION_HANDLERS.get(action)
    if handler is None:
        return ActionResult.fail(state, INVALID_CHOICE, f"Unknown action: {action}")
    return handler(state, actor_id, payload or {}, rng, rules)
