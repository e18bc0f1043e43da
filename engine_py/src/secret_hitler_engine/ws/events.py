"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..constants import (
    ACTION_CHANCELLOR_ENACT, ACTION_CHANCELLOR_VETO, ACTION_EXECUTIVE,
    ACTION_NIGHT_COMPLETE, ACTION_NOMINATE, ACTION_PLAY_AGAIN,
    ACTION_PRESIDENT_DISCARD, ACTION_START_GAME, ACTION_VETO_DECISION,
    ACTION_VOTE,
)


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_ROOM = "create_room"
    JOIN = "join"
    START_GAME = "start_game"
    NIGHT_COMPLETE = "night_complete"
    NOMINATE_CHANCELLOR = "nominate_chancellor"
    CAST_VOTE = "cast_vote"
    PRESIDENT_DISCARD = "president_discard"
    CHANCELLOR_ENACT = "chancellor_enact"
    CHANCELLOR_VETO = "chancellor_veto"
    VETO_DECISION = "veto_decision"
    EXECUTIVE_ACTION = "executive_action"
    PLAY_AGAIN = "play_again"
    REQUEST_STATE = "request_state"
    PING = "ping"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    ROOM_CREATED = "room_created"
    JOIN_SUCCESS = "join_success"
    ACTION_RESULT = "action_result"
    EVENT = "event"
    STATE_FULL = "state_full"
    ERROR = "error"
    PONG = "pong"


class ErrorCode(str, Enum):
    """Error codes for client events."""
    INVALID_EVENT = "INVALID_EVENT"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CHOICE = "INVALID_CHOICE"
    ILLEGAL_STATE = "ILLEGAL_STATE"
    EXHAUSTED = "EXHAUSTED"
    ROOM_FULL = "ROOM_FULL"
    NAME_TAKEN = "NAME_TAKEN"
    INTERNAL = "INTERNAL"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class CreateRoomEvent(BaseEvent):
    """Open a new room; the sender becomes its host display."""
    type: EventType = EventType.CREATE_ROOM


class JoinEvent(BaseEvent):
    """Join room event."""
    type: EventType = EventType.JOIN
    room_code: str = Field(..., min_length=1, max_length=8)
    name: str = Field(..., min_length=1, max_length=30)
    is_spectator: bool = False


class StartGameEvent(BaseEvent):
    type: EventType = EventType.START_GAME


class NightCompleteEvent(BaseEvent):
    type: EventType = EventType.NIGHT_COMPLETE


class NominateChancellorEvent(BaseEvent):
    type: EventType = EventType.NOMINATE_CHANCELLOR
    chancellor_id: str = Field(..., min_length=1)


class CastVoteEvent(BaseEvent):
    type: EventType = EventType.CAST_VOTE
    vote: Literal["ja", "nein"]


class PresidentDiscardEvent(BaseEvent):
    """President drops one of the three drawn policies."""
    type: EventType = EventType.PRESIDENT_DISCARD
    discard_index: int = Field(..., ge=0, le=2)


class ChancellorEnactEvent(BaseEvent):
    """Chancellor enacts one of the two remaining policies."""
    type: EventType = EventType.CHANCELLOR_ENACT
    enact_index: int = Field(..., ge=0, le=1)


class ChancellorVetoEvent(BaseEvent):
    type: EventType = EventType.CHANCELLOR_VETO


class VetoDecisionEvent(BaseEvent):
    type: EventType = EventType.VETO_DECISION
    approve: bool


class ExecutiveActionEvent(BaseEvent):
    """Use the pending executive power; policy-peek takes no target."""
    type: EventType = EventType.EXECUTIVE_ACTION
    power: Literal["investigate", "special-election", "policy-peek", "execution"]
    target_id: Optional[str] = None


class PlayAgainEvent(BaseEvent):
    type: EventType = EventType.PLAY_AGAIN


class RequestStateEvent(BaseEvent):
    """Request full state event."""
    type: EventType = EventType.REQUEST_STATE


class PingEvent(BaseEvent):
    type: EventType = EventType.PING


# Union type for all inbound events
InboundEvent = Union[
    CreateRoomEvent,
    JoinEvent,
    StartGameEvent,
    NightCompleteEvent,
    NominateChancellorEvent,
    CastVoteEvent,
    PresidentDiscardEvent,
    ChancellorEnactEvent,
    ChancellorVetoEvent,
    VetoDecisionEvent,
    ExecutiveActionEvent,
    PlayAgainEvent,
    RequestStateEvent,
    PingEvent,
]

EVENT_MODELS = {
    EventType.CREATE_ROOM: CreateRoomEvent,
    EventType.JOIN: JoinEvent,
    EventType.START_GAME: StartGameEvent,
    EventType.NIGHT_COMPLETE: NightCompleteEvent,
    EventType.NOMINATE_CHANCELLOR: NominateChancellorEvent,
    EventType.CAST_VOTE: CastVoteEvent,
    EventType.PRESIDENT_DISCARD: PresidentDiscardEvent,
    EventType.CHANCELLOR_ENACT: ChancellorEnactEvent,
    EventType.CHANCELLOR_VETO: ChancellorVetoEvent,
    EventType.VETO_DECISION: VetoDecisionEvent,
    EventType.EXECUTIVE_ACTION: ExecutiveActionEvent,
    EventType.PLAY_AGAIN: PlayAgainEvent,
    EventType.REQUEST_STATE: RequestStateEvent,
    EventType.PING: PingEvent,
}

# Inbound events that map one-to-one onto engine actions
ENGINE_ACTIONS = {
    EventType.START_GAME: ACTION_START_GAME,
    EventType.NIGHT_COMPLETE: ACTION_NIGHT_COMPLETE,
    EventType.NOMINATE_CHANCELLOR: ACTION_NOMINATE,
    EventType.CAST_VOTE: ACTION_VOTE,
    EventType.PRESIDENT_DISCARD: ACTION_PRESIDENT_DISCARD,
    EventType.CHANCELLOR_ENACT: ACTION_CHANCELLOR_ENACT,
    EventType.CHANCELLOR_VETO: ACTION_CHANCELLOR_VETO,
    EventType.VETO_DECISION: ACTION_VETO_DECISION,
    EventType.EXECUTIVE_ACTION: ACTION_EXECUTIVE,
    EventType.PLAY_AGAIN: ACTION_PLAY_AGAIN,
}


# Outbound event models
class RoomCreatedEvent(BaseModel):
    type: OutboundEventType = OutboundEventType.ROOM_CREATED
    room_code: str
    host_id: str
    timestamp: float


class JoinSuccessEvent(BaseModel):
    """Join success confirmation event."""
    type: OutboundEventType = OutboundEventType.JOIN_SUCCESS
    player_id: str
    room_code: str
    is_spectator: bool = False
    reconnected: bool = False
    role: Optional[str] = None
    team: Optional[str] = None
    timestamp: float


class ActionResultEvent(BaseModel):
    """Acknowledges an accepted action; ``data`` is for the actor only."""
    type: OutboundEventType = OutboundEventType.ACTION_RESULT
    action: str
    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: float


class GameEvent(BaseModel):
    """One engine message (phase-change, your-turn, vote-results, ...)."""
    type: OutboundEventType = OutboundEventType.EVENT
    event: str
    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: float


class StateFullEvent(BaseModel):
    """Full state event."""
    type: OutboundEventType = OutboundEventType.STATE_FULL
    state: Dict[str, Any]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: ErrorCode
    message: str
    timestamp: float


class PongEvent(BaseModel):
    type: OutboundEventType = OutboundEventType.PONG
    timestamp: float


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")
    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    event_class = EVENT_MODELS.get(event_type)
    if not event_class:
        raise ValueError(f"No handler for event type: {event_type}")

    try:
        return event_class(**data)
    except Exception as e:
        raise ValueError(f"Invalid event data: {str(e)}")


def action_payload(event: BaseEvent) -> Dict[str, Any]:
    """Engine payload for an inbound gameplay event."""
    return event.model_dump(exclude={"type"})


def create_error_event(code: ErrorCode, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=code, message=message, timestamp=time.time())


def create_room_created_event(room_code: str, host_id: str) -> RoomCreatedEvent:
    return RoomCreatedEvent(room_code=room_code, host_id=host_id, timestamp=time.time())


def create_join_success_event(room_code: str, data: Dict[str, Any]) -> JoinSuccessEvent:
    """Create a join success event from the engine's join result data."""
    return JoinSuccessEvent(
        room_code=room_code,
        player_id=data["player_id"],
        is_spectator=data.get("is_spectator", False),
        reconnected=data.get("reconnected", False),
        role=data.get("role"),
        team=data.get("team"),
        timestamp=time.time(),
    )


def create_action_result_event(action: str, data: Dict[str, Any]) -> ActionResultEvent:
    return ActionResultEvent(action=action, data=data, timestamp=time.time())


def create_game_event(event: str, data: Dict[str, Any]) -> GameEvent:
    return GameEvent(event=event, data=data, timestamp=time.time())


def create_state_full_event(state: Dict[str, Any]) -> StateFullEvent:
    """Create a full state event."""
    return StateFullEvent(state=state, timestamp=time.time())


def create_pong_event() -> PongEvent:
    return PongEvent(timestamp=time.time())
