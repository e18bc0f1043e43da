"""
Outbound messages produced while an action is applied.

Every message names exactly who may see it. The transport delivers a HOST
message to the host display only, a ROOM message to every connection in the
room, and a PLAYER message to that single player.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import unauthorized
from .models import GameState, Player, RoomState


def player_ref(player: Optional[Player]) -> Optional[Dict[str, str]]:
    """Minimal public reference to a player."""
    if player is None:
        return None
    return {"id": player.id, "name": player.name}


def player_refs(room: RoomState, player_ids: List[str]) -> List[Dict[str, str]]:
    return [player_ref(room.get_player(pid)) for pid in player_ids if room.get_player(pid)]


class Recipient(str, Enum):
    HOST = "host"
    ROOM = "room"
    PLAYER = "player"


@dataclass
class Message:
    event: str
    recipient: Recipient
    data: Dict[str, Any] = field(default_factory=dict)
    player_id: Optional[str] = None


class Outbox:
    """Collects messages in the order their effects were computed."""

    def __init__(self):
        self.messages: List[Message] = []

    def host(self, event: str, **data) -> Message:
        return self._add(Message(event, Recipient.HOST, data))

    def room(self, event: str, **data) -> Message:
        return self._add(Message(event, Recipient.ROOM, data))

    def player(self, player_id: str, event: str, **data) -> Message:
        return self._add(Message(event, Recipient.PLAYER, data, player_id))

    def _add(self, message: Message) -> Message:
        self.messages.append(message)
        return message


@dataclass
class ActionContext:
    """Everything a rule function may touch while one action is applied."""
    room: RoomState
    rng: random.Random
    outbox: Outbox = field(default_factory=Outbox)
    # Actor-only payload (investigation result, policy peek)
    result: Dict[str, Any] = field(default_factory=dict)

    @property
    def game(self) -> GameState:
        if self.room.game is None:
            unauthorized("Room has no active game")
        return self.room.game

    def log(self, line: str):
        self.room.add_log(line)
