"""
Tests for role assignment, the night reveal and game start.
"""

import random

import pytest

from secret_hitler_engine.constants import EVENT_GAME_STARTED, EVENT_PHASE_CHANGE, ROLE_DISTRIBUTION
from secret_hitler_engine.engine import create_room, night_complete, start_game
from secret_hitler_engine.errors import ILLEGAL_STATE, UNAUTHORIZED, GameError
from secret_hitler_engine.messages import Recipient
from secret_hitler_engine.models import Phase, Player, Role, Team
from secret_hitler_engine.roles import assign_roles, build_role_pool, known_info_for
from secret_hitler_engine.rules import default_rules

HOST = "host"


def make_players(count):
    return [Player(id=f"p{i}", name=f"Player {i}") for i in range(1, count + 1)]


@pytest.mark.parametrize("count", sorted(ROLE_DISTRIBUTION))
def test_role_distribution(count):
    """Every supported size gets the table's split and exactly one hitler."""
    players = assign_roles(make_players(count), random.Random(count))
    roles = [p.role for p in players]
    liberals, fascists = ROLE_DISTRIBUTION[count]

    assert roles.count(Role.LIBERAL) == liberals
    assert roles.count(Role.FASCIST) == fascists
    assert roles.count(Role.HITLER) == 1
    for player in players:
        assert player.team == (Team.LIBERAL if player.role == Role.LIBERAL else Team.FASCIST)
        assert player.alive


@pytest.mark.parametrize("count", [0, 4, 11])
def test_role_pool_rejects_unsupported_sizes(count):
    with pytest.raises(GameError) as exc_info:
        build_role_pool(count)
    assert exc_info.value.code == ILLEGAL_STATE
    assert "Need 5-10 players" in exc_info.value.message


def test_fascist_sees_team_with_hitler_flagged(fixed_rng):
    players = assign_roles(make_players(7), fixed_rng)
    fascist = next(p for p in players if p.role == Role.FASCIST)
    info = known_info_for(fascist, players)

    seen = {entry["id"]: entry["is_hitler"] for entry in info["fascists"]}
    assert fascist.id not in seen
    assert len(seen) == 2
    assert sum(seen.values()) == 1


def test_hitler_knows_fascists_in_small_games(fixed_rng):
    players = assign_roles(make_players(6), fixed_rng)
    hitler = next(p for p in players if p.role == Role.HITLER)
    info = known_info_for(hitler, players)
    assert [entry["id"] for entry in info["fascists"]] == [
        p.id for p in players if p.role == Role.FASCIST
    ]


def test_hitler_blind_in_large_games(fixed_rng):
    players = assign_roles(make_players(7), fixed_rng)
    hitler = next(p for p in players if p.role == Role.HITLER)
    assert known_info_for(hitler, players) == {}


def test_liberal_learns_nothing(fixed_rng):
    players = assign_roles(make_players(5), fixed_rng)
    liberal = next(p for p in players if p.role == Role.LIBERAL)
    assert known_info_for(liberal, players) == {}


def test_start_game_reveals_privately(make_lobby, fixed_rng):
    """Each player gets exactly one private reveal; spectators are told they watch."""
    state = make_lobby(5, spectators=1)
    result = start_game(state, HOST, rng=fixed_rng)
    assert result.success
    assert result.state.phase == Phase.NIGHT

    reveals = [m for m in result.messages if m.event == EVENT_GAME_STARTED]
    assert all(m.recipient == Recipient.PLAYER for m in reveals)
    by_player = {m.player_id: m.data for m in reveals}
    assert set(by_player) == {"p1", "p2", "p3", "p4", "p5", "s1"}

    assert by_player["p1"]["role"] == "hitler"
    assert by_player["p2"]["role"] == "fascist"
    assert by_player["p2"]["known_info"]["fascists"] == [
        {"id": "p1", "name": "Player 1", "is_hitler": True}
    ]
    assert by_player["p3"]["known_info"] == {}
    assert by_player["s1"] == {"is_spectator": True, "player_count": 5}

    host_messages = [m for m in result.messages if m.recipient == Recipient.HOST]
    assert [m.event for m in host_messages] == [EVENT_PHASE_CHANGE]
    assert "role" not in host_messages[0].data


def test_start_game_sets_up_board(make_lobby, fixed_rng):
    state = start_game(make_lobby(5), HOST, rng=fixed_rng).state
    game = state.game
    assert game.president_id == "p1"
    assert game.president_order == ["p1", "p2", "p3", "p4", "p5"]
    assert len(game.policy_deck) == 17
    assert game.liberal_policies == game.fascist_policies == game.election_tracker == 0


@pytest.mark.parametrize("count", [4, 11])
def test_start_game_needs_five_to_ten(make_lobby, count):
    if count <= 10:
        state = make_lobby(count)
    else:
        # Lobby joins cap at ten, so build the roster directly
        state = create_room("TEST", HOST)
        state.players = make_players(count)
    result = start_game(state, HOST, rules=default_rules)
    assert not result.success
    assert result.error_code == ILLEGAL_STATE
    assert result.error_message == "Need 5-10 players to start"
    assert result.state is state
    assert state.phase == Phase.LOBBY
    assert state.game is None
    assert result.messages == []


def test_start_game_host_only(make_lobby):
    result = start_game(make_lobby(5), "p1")
    assert result.error_code == UNAUTHORIZED


def test_start_game_only_from_lobby(make_game):
    result = start_game(make_game(5), HOST)
    assert result.error_code == ILLEGAL_STATE


def test_spectators_do_not_count_toward_start(make_lobby):
    state = make_lobby(4, spectators=3)
    result = start_game(state, HOST)
    assert result.error_code == ILLEGAL_STATE


def test_night_complete_opens_nomination(make_lobby, fixed_rng):
    state = start_game(make_lobby(5), HOST, rng=fixed_rng).state
    assert night_complete(state, "p1").error_code == UNAUTHORIZED

    result = night_complete(state, HOST)
    assert result.success
    assert result.state.phase == Phase.NOMINATION
    prompt = [m for m in result.messages if m.recipient == Recipient.PLAYER]
    assert len(prompt) == 1
    assert prompt[0].player_id == "p1"
    assert prompt[0].data["action"] == "nominate-chancellor"

    again = night_complete(result.state, HOST)
    assert again.error_code == ILLEGAL_STATE
