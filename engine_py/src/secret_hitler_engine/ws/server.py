"""
WebSocket transport for rooms.

One connection speaks for exactly one identity: the host display that
created the room or one player/spectator that joined it. Engine messages
are routed by recipient; nothing addressed to a player is ever broadcast.
"""

import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

import orjson
from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from ..messages import Message, Recipient
from ..registry import RoomRegistry
from ..serialization import sanitize_state
from .events import (
    ENGINE_ACTIONS, CreateRoomEvent, ErrorCode, EventType, JoinEvent,
    action_payload, create_action_result_event, create_error_event,
    create_game_event, create_join_success_event, create_pong_event,
    create_room_created_event, create_state_full_event, parse_inbound_event,
)

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Who a single websocket connection speaks for."""
    identity: Optional[str] = None
    room_code: Optional[str] = None


class ConnectionManager:
    """Maps identities to live sockets and rooms to identities."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        self.room_connections: Dict[str, Set[str]] = defaultdict(set)

    def bind(self, websocket: WebSocket, room_code: str, identity: str):
        # A reconnecting player replaces whatever socket held the identity before
        self.active_connections[identity] = websocket
        self.room_connections[room_code].add(identity)
        logger.info(f"{identity} bound to room {room_code}")

    def unbind(self, websocket: WebSocket, room_code: str, identity: str) -> bool:
        """Forget ``identity`` if ``websocket`` still owns it."""
        if self.active_connections.get(identity) is not websocket:
            return False
        del self.active_connections[identity]
        members = self.room_connections.get(room_code)
        if members is not None:
            members.discard(identity)
            if not members:
                del self.room_connections[room_code]
        return True

    def drop_room(self, room_code: str):
        for identity in self.room_connections.pop(room_code, set()):
            self.active_connections.pop(identity, None)

    async def send(self, identity: str, event: BaseModel):
        websocket = self.active_connections.get(identity)
        if websocket is None:
            return
        try:
            await websocket.send_text(event.model_dump_json())
        except Exception as e:
            logger.error(f"Error sending to {identity}: {e}")

    async def deliver(self, room_code: str, host_id: str, messages: List[Message]):
        """Send engine messages in the order they were produced."""
        for message in messages:
            event = create_game_event(message.event, message.data)
            if message.recipient == Recipient.HOST:
                await self.send(host_id, event)
            elif message.recipient == Recipient.PLAYER:
                await self.send(message.player_id, event)
            else:
                for identity in list(self.room_connections.get(room_code, ())):
                    await self.send(identity, event)


class GameServer:
    def __init__(self, registry: Optional[RoomRegistry] = None):
        self.registry = registry or RoomRegistry()
        self.manager = ConnectionManager()

    async def handle_websocket(self, websocket: WebSocket):
        """Main connection loop."""
        await websocket.accept()
        session = Session()
        try:
            while True:
                raw_data = await websocket.receive_text()
                try:
                    event = parse_inbound_event(orjson.loads(raw_data))
                except ValueError as e:
                    await self._reply(websocket, create_error_event(ErrorCode.INVALID_EVENT, str(e)))
                    continue

                try:
                    await self.handle_event(websocket, session, event)
                except Exception:
                    logger.exception(f"Error handling {event.type.value}")
                    await self._reply(websocket, create_error_event(ErrorCode.INTERNAL, "Internal server error"))
        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected ({session.identity or 'anonymous'})")
        finally:
            await self.handle_disconnect(websocket, session)

    async def _reply(self, websocket: WebSocket, event: BaseModel):
        await websocket.send_text(event.model_dump_json())

    async def handle_event(self, websocket: WebSocket, session: Session, event):
        if event.type == EventType.PING:
            await self._reply(websocket, create_pong_event())
        elif isinstance(event, CreateRoomEvent):
            await self.handle_create_room(websocket, session)
        elif isinstance(event, JoinEvent):
            await self.handle_join(websocket, session, event)
        elif event.type == EventType.REQUEST_STATE:
            await self.handle_request_state(websocket, session)
        elif event.type in ENGINE_ACTIONS:
            await self.handle_action(websocket, session, event)
        else:
            raise ValueError(f"Unhandled event type: {event.type}")

    async def handle_create_room(self, websocket: WebSocket, session: Session):
        if session.identity is not None:
            await self._reply(websocket, create_error_event(ErrorCode.ILLEGAL_STATE, "Already in a room"))
            return

        host_id = str(uuid.uuid4())
        room = self.registry.create_room(host_id)
        session.identity, session.room_code = host_id, room.code
        self.manager.bind(websocket, room.code, host_id)

        await self._reply(websocket, create_room_created_event(room.code, host_id))
        await self._reply(websocket, create_state_full_event(sanitize_state(room, host_id)))

    async def handle_join(self, websocket: WebSocket, session: Session, event: JoinEvent):
        if session.identity is not None:
            await self._reply(websocket, create_error_event(ErrorCode.ILLEGAL_STATE, "Already in a room"))
            return

        result = self.registry.join(event.room_code, str(uuid.uuid4()), event.name, event.is_spectator)
        if not result.success:
            await self._reply(websocket, create_error_event(ErrorCode(result.error_code), result.error_message))
            return

        room = result.state
        player_id = result.data["player_id"]
        session.identity, session.room_code = player_id, room.code
        self.manager.bind(websocket, room.code, player_id)

        await self._reply(websocket, create_join_success_event(room.code, result.data))
        await self._reply(websocket, create_state_full_event(sanitize_state(room, player_id)))
        await self.manager.deliver(room.code, room.host_id, result.messages)

    async def handle_request_state(self, websocket: WebSocket, session: Session):
        room = self.registry.get_room(session.room_code) if session.room_code else None
        if room is None:
            await self._reply(websocket, create_error_event(ErrorCode.NOT_FOUND, "Not in a room"))
            return
        await self._reply(websocket, create_state_full_event(sanitize_state(room, session.identity)))

    async def handle_action(self, websocket: WebSocket, session: Session, event):
        if session.identity is None:
            await self._reply(websocket, create_error_event(ErrorCode.UNAUTHORIZED, "Not in a room"))
            return

        result = self.registry.apply(
            session.room_code, session.identity, ENGINE_ACTIONS[event.type], action_payload(event)
        )
        if not result.success:
            await self._reply(websocket, create_error_event(ErrorCode(result.error_code), result.error_message))
            return

        await self._reply(websocket, create_action_result_event(event.type.value, result.data))
        await self.manager.deliver(result.state.code, result.state.host_id, result.messages)

    async def handle_disconnect(self, websocket: WebSocket, session: Session):
        """Host leaving closes the room; a player leaving keeps their seat."""
        if session.identity is None:
            return
        if not self.manager.unbind(websocket, session.room_code, session.identity):
            return

        room = self.registry.get_room(session.room_code)
        if room is None:
            return

        if room.is_host(session.identity):
            notices = self.registry.close_room(room.code)
            await self.manager.deliver(room.code, room.host_id, notices)
            self.manager.drop_room(room.code)
            return

        result = self.registry.disconnect(room.code, session.identity)
        if result.success:
            await self.manager.deliver(room.code, room.host_id, result.messages)
