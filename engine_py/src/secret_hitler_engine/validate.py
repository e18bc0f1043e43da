"""
Authority and payload validation shared by every gameplay action.

Checks run in a fixed order: active game, phase, office, payload. Each
helper raises GameError; nothing here mutates state.
"""

from typing import Any, Iterable, Optional

from .errors import illegal_state, invalid_choice, not_found, unauthorized
from .messages import ActionContext
from .models import Phase, Player


def require_phase(ctx: ActionContext, *phases: Phase):
    """Reject actions outside ``phases``; the game must exist first."""
    ctx.game  # raises UNAUTHORIZED without an active game
    current = ctx.room.phase
    if current == Phase.GAME_OVER:
        illegal_state("Game is over")
    if current not in phases:
        expected = ", ".join(phase.value for phase in phases)
        illegal_state(f"Action not allowed during {current.value} (expected {expected})")


def require_host(ctx: ActionContext, actor_id: Optional[str]):
    if not ctx.room.is_host(actor_id):
        unauthorized("Only the host can do that")


def require_president(ctx: ActionContext, actor_id: Optional[str]) -> Player:
    game = ctx.game
    if actor_id is None or actor_id != game.president_id:
        unauthorized("Not the president")
    return ctx.room.get_player(actor_id)


def require_chancellor(ctx: ActionContext, actor_id: Optional[str]) -> Player:
    game = ctx.game
    if game.chancellor_id is None:
        illegal_state("No chancellor in office")
    if actor_id != game.chancellor_id:
        unauthorized("Not the chancellor")
    return ctx.room.get_player(actor_id)


def require_voter(ctx: ActionContext, actor_id: Optional[str]) -> Player:
    player = ctx.room.get_player(actor_id)
    if player is None or not player.is_living:
        unauthorized("Cannot vote")
    return player


def require_index(value: Any, size: int, label: str = "index") -> int:
    """An int in ``range(size)``; bools are not indexes."""
    if isinstance(value, bool) or not isinstance(value, int):
        invalid_choice(f"Invalid {label}: {value!r}")
    if not 0 <= value < size:
        invalid_choice(f"{label.capitalize()} {value} out of range (0-{size - 1})")
    return value


def require_bool(value: Any, label: str) -> bool:
    if not isinstance(value, bool):
        invalid_choice(f"Invalid {label}: {value!r}")
    return value


def require_target(ctx: ActionContext, target_id: Optional[str], eligible: Iterable[str]) -> Player:
    """Target must exist in the room and sit in the currently legal set."""
    target = ctx.room.get_player(target_id)
    if target is None:
        not_found("Invalid target")
    if target.id not in set(eligible):
        invalid_choice(f"{target.name} is not an eligible target")
    return target
