"""Game constants"""

from typing import Dict, List, Tuple

from .models import Power

# Roster limits
MIN_PLAYERS = 5
MAX_PLAYERS = 10

# (liberals, fascists); every game also has exactly one hitler
ROLE_DISTRIBUTION: Dict[int, Tuple[int, int]] = {
    5: (3, 1),
    6: (4, 1),
    7: (4, 2),
    8: (5, 2),
    9: (5, 3),
    10: (6, 3),
}

# Policy deck composition
LIBERAL_CARDS = 6
FASCIST_CARDS = 11
TOTAL_CARDS = LIBERAL_CARDS + FASCIST_CARDS

POLICIES_PER_SESSION = 3
PEEK_COUNT = 3

# Board thresholds
LIBERAL_POLICIES_TO_WIN = 5
FASCIST_POLICIES_TO_WIN = 6
HITLER_ZONE = 3
VETO_UNLOCK = 5
FAILED_ELECTIONS_FOR_CHAOS = 3

# The previous president is only term-limited while more players than this are alive
TERM_LIMIT_LIVING_THRESHOLD = 5

# Hitler learns the fascists only at this size or smaller
HITLER_KNOWS_FASCISTS_MAX = 6

POWER_TRACK_SMALL: List[Power] = [
    Power.NONE, Power.NONE, Power.POLICY_PEEK, Power.EXECUTION, Power.EXECUTION,
]
POWER_TRACK_MEDIUM: List[Power] = [
    Power.NONE, Power.INVESTIGATE, Power.SPECIAL_ELECTION, Power.EXECUTION, Power.EXECUTION,
]
POWER_TRACK_LARGE: List[Power] = [
    Power.INVESTIGATE, Power.INVESTIGATE, Power.SPECIAL_ELECTION, Power.EXECUTION, Power.EXECUTION,
]

ROOM_CODE_CHARS = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 4

# Inbound actions understood by the engine
ACTION_START_GAME = "start-game"
ACTION_NIGHT_COMPLETE = "night-complete"
ACTION_NOMINATE = "nominate-chancellor"
ACTION_VOTE = "cast-vote"
ACTION_PRESIDENT_DISCARD = "president-discard"
ACTION_CHANCELLOR_ENACT = "chancellor-enact"
ACTION_CHANCELLOR_VETO = "chancellor-veto"
ACTION_VETO_DECISION = "veto-decision"
ACTION_EXECUTIVE = "executive-action"
ACTION_PLAY_AGAIN = "play-again"

# Prompts carried by "your-turn"
TURN_NOMINATE = "nominate-chancellor"
TURN_VOTE = "vote"
TURN_DISCARD = "discard-policy"
TURN_ENACT = "enact-policy"
TURN_VETO_DECISION = "veto-decision"

# Outbound event names
EVENT_PLAYER_JOINED = "player-joined"
EVENT_PLAYER_DISCONNECTED = "player-disconnected"
EVENT_PLAYER_RECONNECTED = "player-reconnected"
EVENT_GAME_STARTED = "game-started"
EVENT_PHASE_CHANGE = "phase-change"
EVENT_YOUR_TURN = "your-turn"
EVENT_VOTE_CAST = "vote-cast"
EVENT_VOTE_RESULTS = "vote-results"
EVENT_CHAOS = "chaos"
EVENT_POLICY_ENACTED = "policy-enacted"
EVENT_VETO_REQUESTED = "veto-requested"
EVENT_VETO_APPROVED = "veto-approved"
EVENT_VETO_REJECTED = "veto-rejected"
EVENT_INVESTIGATION_COMPLETE = "investigation-complete"
EVENT_SPECIAL_ELECTION = "special-election"
EVENT_POLICY_PEEK_COMPLETE = "policy-peek-complete"
EVENT_EXECUTION_COMPLETE = "execution-complete"
EVENT_YOU_WERE_EXECUTED = "you-were-executed"
EVENT_GAME_OVER = "game-over"
EVENT_RETURN_TO_LOBBY = "return-to-lobby"
EVENT_HOST_DISCONNECTED = "host-disconnected"
