"""
Secret role assignment and the night-phase knowledge reveal.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from .constants import HITLER_KNOWS_FASCISTS_MAX, MAX_PLAYERS, MIN_PLAYERS, ROLE_DISTRIBUTION
from .errors import illegal_state
from .models import Player, Role, Team
from .shuffle import shuffle_cards

logger = logging.getLogger(__name__)


def build_role_pool(player_count: int) -> List[Role]:
    """Unshuffled roles for a table of ``player_count``."""
    if player_count not in ROLE_DISTRIBUTION:
        illegal_state(f"Need {MIN_PLAYERS}-{MAX_PLAYERS} players to start")
    liberals, fascists = ROLE_DISTRIBUTION[player_count]
    return [Role.LIBERAL] * liberals + [Role.FASCIST] * fascists + [Role.HITLER]


def assign_roles(players: List[Player], rng: Optional[random.Random] = None) -> List[Player]:
    """
    Deal one secret role to each seated player.

    The pool is shuffled with the same primitive as the policy deck and
    handed out by roster index. Mutates and returns ``players``.
    """
    roles = shuffle_cards(build_role_pool(len(players)), rng)
    for player, role in zip(players, roles):
        player.role = role
        player.team = role.team
        player.alive = True
    logger.debug(f"Assigned roles: {[(p.name, p.role.value) for p in players]}")
    return players


def known_info_for(player: Player, active_players: List[Player]) -> Dict[str, Any]:
    """
    What ``player`` is allowed to learn at night.

    Fascists see every other fascist-team member, hitler flagged. Hitler sees
    the ordinary fascists only in small games. Everyone else learns nothing.
    """
    if player.role == Role.FASCIST:
        return {
            "fascists": [
                {"id": p.id, "name": p.name, "is_hitler": p.role == Role.HITLER}
                for p in active_players
                if p.team == Team.FASCIST and p.id != player.id
            ]
        }
    if player.role == Role.HITLER and len(active_players) <= HITLER_KNOWS_FASCISTS_MAX:
        return {
            "fascists": [
                {"id": p.id, "name": p.name}
                for p in active_players
                if p.role == Role.FASCIST
            ]
        }
    return {}


def role_reveal(players: List[Player]) -> List[Dict[str, Any]]:
    """Public end-of-game reveal."""
    return [
        {
            "id": p.id,
            "name": p.name,
            "role": p.role.value if p.role else None,
            "team": p.team.value if p.team else None,
            "alive": p.alive,
        }
        for p in players
        if not p.is_spectator
    ]
