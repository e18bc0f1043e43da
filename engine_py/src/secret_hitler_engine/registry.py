"""
In-memory room store.

Each room has its own lock held for the whole validate-apply-store cycle,
so actions on one room are applied strictly one at a time while different
rooms never contend. Each room also gets its own random source, seeded from
the registry's when the room is created.
"""

import logging
import random
import threading
import time
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from . import engine
from .constants import EVENT_HOST_DISCONNECTED
from .engine import ActionResult
from .errors import NOT_FOUND
from .messages import Message, Recipient
from .models import RoomState
from .rules import RuleConfig, default_rules

logger = logging.getLogger(__name__)


class RoomRegistry:
    def __init__(self, rules: Optional[RuleConfig] = None, rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.rules = rules or default_rules
        self.rng = rng or random.Random()
        self.clock = clock or time.time
        self.rooms: Dict[str, RoomState] = {}
        self.room_rngs: Dict[str, random.Random] = {}
        self.room_locks = defaultdict(threading.Lock)
        self._registry_lock = threading.Lock()

    @staticmethod
    def normalize_code(code: str) -> str:
        return (code or "").strip().upper()

    def generate_room_code(self) -> str:
        """Random code not used by any open room. Caller holds the registry lock."""
        alphabet = self.rules.room_code_alphabet
        while True:
            code = "".join(self.rng.choice(alphabet) for _ in range(self.rules.room_code_length))
            if code not in self.rooms:
                return code

    def create_room(self, host_id: str) -> RoomState:
        with self._registry_lock:
            code = self.generate_room_code()
            room = engine.create_room(code, host_id, created_at=self.clock())
            self.rooms[code] = room
            self.room_rngs[code] = random.Random(self.rng.getrandbits(64))
        logger.info(f"Room {code} created")
        return room

    def get_room(self, code: str) -> Optional[RoomState]:
        return self.rooms.get(self.normalize_code(code))

    def close_room(self, code: str) -> List[Message]:
        """
        Delete a room (the host left). Returns the notice for everyone still
        connected to it; empty if the room did not exist.
        """
        code = self.normalize_code(code)
        with self.room_locks[code]:
            room = self.rooms.pop(code, None)
            self.room_rngs.pop(code, None)
        self.room_locks.pop(code, None)
        if room is None:
            return []
        logger.info(f"Room {code} closed")
        return [Message(EVENT_HOST_DISCONNECTED, Recipient.ROOM)]

    def active_room_count(self) -> int:
        return len(self.rooms)

    def _locked(self, code: str, apply: Callable[[RoomState], ActionResult]) -> ActionResult:
        code = self.normalize_code(code)
        with self.room_locks[code]:
            room = self.rooms.get(code)
            if room is None:
                return ActionResult.fail(None, NOT_FOUND, "Room not found")
            result = apply(room)
            if result.success:
                self.rooms[code] = result.state
            return result

    def join(self, code: str, player_id: str, name: str, is_spectator: bool = False) -> ActionResult:
        return self._locked(code, lambda room: engine.join_room(room, player_id, name, is_spectator, self.rules))

    def disconnect(self, code: str, player_id: str) -> ActionResult:
        return self._locked(code, lambda room: engine.disconnect_player(room, player_id, self.rules))

    def apply(self, code: str, actor_id: Optional[str], action: str,
              payload: Optional[Dict[str, Any]] = None) -> ActionResult:
        """Apply one gameplay action to the stored room and store the result."""
        return self._locked(
            code,
            lambda room: engine.apply_action(room, actor_id, action, payload, self.room_rngs.get(room.code), self.rules),
        )
