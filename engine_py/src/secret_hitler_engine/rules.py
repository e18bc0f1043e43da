"""
Room and lobby configuration.

The game rules themselves are fixed; this only covers what a host process
may tune about rooms.
"""

from pydantic import BaseModel, Field, field_validator

from .constants import MAX_PLAYERS, MIN_PLAYERS, ROOM_CODE_CHARS, ROOM_CODE_LENGTH


class RuleConfig(BaseModel):
    """Configuration for rooms and lobby behaviour."""

    min_players: int = Field(
        default=MIN_PLAYERS,
        ge=MIN_PLAYERS,
        le=MAX_PLAYERS,
        description="Minimum number of seated players required to start"
    )
    max_players: int = Field(
        default=MAX_PLAYERS,
        ge=MIN_PLAYERS,
        le=MAX_PLAYERS,
        description="Maximum number of seated (non-spectator) players"
    )
    room_code_length: int = Field(
        default=ROOM_CODE_LENGTH,
        ge=3,
        le=8,
        description="Length of generated room codes"
    )
    room_code_alphabet: str = Field(
        default=ROOM_CODE_CHARS,
        min_length=10,
        description="Characters room codes are drawn from"
    )
    max_name_length: int = Field(
        default=30,
        ge=1,
        le=50,
        description="Longest accepted display name"
    )
    allow_spectators: bool = Field(
        default=True,
        description="Whether players may join as spectators"
    )
    game_log_limit: int = Field(
        default=200,
        ge=10,
        le=5000,
        description="Number of public log lines kept per room"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't fall below minimum."""
        min_players = info.data.get('min_players', MIN_PLAYERS)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
