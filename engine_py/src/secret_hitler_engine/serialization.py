"""
State serialization and sanitization utilities.
"""

from typing import Any, Dict, Optional

from .models import Phase, Player, RoomState
from .roles import known_info_for
from .turns import eligible_chancellors

RECENT_LOG_LINES = 20


def sanitize_state(state: RoomState, viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Sanitize room state for transmission to one viewer.

    Args:
        state: Room state to sanitize
        viewer_id: Player (or host) the snapshot is for

    Returns:
        Dictionary safe for JSON transmission. Roles are only included for
        the viewer themself until the game is over; drawn policies only for
        the officeholder currently holding them.
    """
    game_over = state.phase == Phase.GAME_OVER
    viewer = state.get_player(viewer_id)

    sanitized = {
        "code": state.code,
        "version": state.version,
        "phase": state.phase.value,
        "is_host": state.is_host(viewer_id),
        "players": [],
        "game": None,
        "you": None,
        "game_log": state.game_log[-RECENT_LOG_LINES:],
    }

    for player in state.players:
        sanitized_player = serialize_player_for_list(player)
        sanitized_player["alive"] = player.alive
        if game_over or player.id == viewer_id:
            sanitized_player["role"] = player.role.value if player.role else None
            sanitized_player["team"] = player.team.value if player.team else None
        sanitized["players"].append(sanitized_player)

    if viewer is not None:
        sanitized["you"] = {
            "id": viewer.id,
            "name": viewer.name,
            "is_spectator": viewer.is_spectator,
            "role": viewer.role.value if viewer.role else None,
            "team": viewer.team.value if viewer.team else None,
            "known_info": known_info_for(viewer, state.active_players()) if viewer.role else {},
        }

    if state.game is not None:
        sanitized["game"] = _serialize_game(state, viewer_id)

    return sanitized


def _serialize_game(state: RoomState, viewer_id: Optional[str]) -> Dict[str, Any]:
    game = state.game
    summary = {
        "liberal_policies": game.liberal_policies,
        "fascist_policies": game.fascist_policies,
        "election_tracker": game.election_tracker,
        "president_id": game.president_id,
        "chancellor_id": game.chancellor_id,
        "last_president_id": game.last_president_id,
        "last_chancellor_id": game.last_chancellor_id,
        "deck_count": len(game.policy_deck),
        "discard_count": len(game.discard_pile),
        "veto_enabled": game.veto_enabled,
        "veto_requested": game.veto_requested,
        "power_track": [power.value for power in game.power_track],
        "pending_power": game.pending_power.value if game.pending_power else None,
        "investigated_players": list(game.investigated_players),
        "executed_players": list(game.executed_players),
        "winner": game.winner.value if game.winner else None,
        "game_over_reason": game.game_over_reason,
    }

    # Ballots stay secret until everyone has voted
    if state.phase == Phase.VOTING:
        summary["voted"] = list(game.votes.keys())
    else:
        summary["votes"] = {pid: vote.value for pid, vote in game.votes.items()}

    if state.phase == Phase.NOMINATION:
        summary["eligible_chancellors"] = eligible_chancellors(state)

    holder = _policy_holder(state)
    if holder is not None and holder == viewer_id:
        summary["drawn_policies"] = [policy.value for policy in game.drawn_policies]
    else:
        summary["drawn_count"] = len(game.drawn_policies)

    return summary


def _policy_holder(state: RoomState) -> Optional[str]:
    if state.phase == Phase.LEGISLATIVE_PRESIDENT:
        return state.game.president_id
    if state.phase in (Phase.LEGISLATIVE_CHANCELLOR, Phase.VETO_DECISION):
        return state.game.chancellor_id
    return None


def serialize_player_for_list(player: Player) -> Dict[str, Any]:
    """Serialize player for lobby player list."""
    return {
        "id": player.id,
        "name": player.name,
        "is_spectator": player.is_spectator,
        "connected": player.connected,
    }


def get_public_room_info(state: RoomState) -> Dict[str, Any]:
    """Get public information about a room for listings."""
    return {
        "code": state.code,
        "phase": state.phase.value,
        "player_count": len(state.active_players()),
        "spectator_count": len(state.spectators()),
        "players": [
            serialize_player_for_list(player)
            for player in state.players
        ]
    }
