"""Game models and data structures"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Team(str, Enum):
    LIBERAL = "liberal"
    FASCIST = "fascist"


class Role(str, Enum):
    LIBERAL = "liberal"
    FASCIST = "fascist"
    HITLER = "hitler"

    @property
    def team(self) -> Team:
        return Team.LIBERAL if self is Role.LIBERAL else Team.FASCIST


class Policy(str, Enum):
    LIBERAL = "liberal"
    FASCIST = "fascist"


class Vote(str, Enum):
    JA = "ja"
    NEIN = "nein"


class Power(str, Enum):
    """Executive power attached to a fascist track slot."""
    NONE = "none"
    INVESTIGATE = "investigate"
    SPECIAL_ELECTION = "special-election"
    POLICY_PEEK = "policy-peek"
    EXECUTION = "execution"


class Phase(str, Enum):
    LOBBY = "lobby"
    NIGHT = "night"
    NOMINATION = "nomination"
    VOTING = "voting"
    LEGISLATIVE_PRESIDENT = "legislative-president"
    LEGISLATIVE_CHANCELLOR = "legislative-chancellor"
    VETO_DECISION = "veto-decision"
    EXECUTIVE = "executive"
    GAME_OVER = "game-over"


@dataclass
class Player:
    id: str
    name: str
    is_spectator: bool = False
    alive: bool = True
    team: Optional[Team] = None
    role: Optional[Role] = None
    connected: bool = True

    @property
    def is_living(self) -> bool:
        """Alive and seated at the table (spectators never count)."""
        return self.alive and not self.is_spectator


@dataclass
class GameState:
    president_id: str
    president_order: List[str]
    power_track: List[Power]
    policy_deck: List[Policy] = field(default_factory=list)
    discard_pile: List[Policy] = field(default_factory=list)
    liberal_policies: int = 0
    fascist_policies: int = 0
    election_tracker: int = 0
    chancellor_id: Optional[str] = None
    last_president_id: Optional[str] = None
    last_chancellor_id: Optional[str] = None
    votes: Dict[str, Vote] = field(default_factory=dict)
    drawn_policies: List[Policy] = field(default_factory=list)
    veto_enabled: bool = False
    veto_requested: bool = False
    veto_rejected: bool = False
    pending_power: Optional[Power] = None
    investigated_players: List[str] = field(default_factory=list)
    executed_players: List[str] = field(default_factory=list)
    special_election_return_id: Optional[str] = None
    winner: Optional[Team] = None
    game_over_reason: Optional[str] = None

    def clear_session(self):
        """Forget everything tied to the current legislative session."""
        self.drawn_policies = []
        self.veto_requested = False
        self.veto_rejected = False


@dataclass
class RoomState:
    code: str
    host_id: str
    players: List[Player] = field(default_factory=list)
    phase: Phase = Phase.LOBBY
    game: Optional[GameState] = None
    version: int = 0
    created_at: float = 0.0
    game_log: List[str] = field(default_factory=list)

    def get_player(self, player_id: Optional[str]) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def find_player_by_name(self, name: str) -> Optional[Player]:
        wanted = name.strip().lower()
        for player in self.players:
            if player.name.strip().lower() == wanted:
                return player
        return None

    def active_players(self) -> List[Player]:
        """Non-spectators, in join order."""
        return [p for p in self.players if not p.is_spectator]

    def living_players(self) -> List[Player]:
        return [p for p in self.players if p.is_living]

    def spectators(self) -> List[Player]:
        return [p for p in self.players if p.is_spectator]

    def is_host(self, actor_id: Optional[str]) -> bool:
        return actor_id is not None and actor_id == self.host_id

    def add_log(self, line: str, limit: Optional[int] = None):
        self.game_log.append(line)
        if limit is not None and len(self.game_log) > limit:
            del self.game_log[: len(self.game_log) - limit]

    def increment_version(self):
        self.version += 1
