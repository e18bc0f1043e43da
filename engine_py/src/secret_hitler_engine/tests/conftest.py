"""
Shared fixtures for the Secret Hitler engine tests.
"""

import random

import pytest

from secret_hitler_engine.engine import (
    cast_vote, create_room, join_room, night_complete, nominate_chancellor, start_game,
)

HOST = "host"


class FixedRandom(random.Random):
    """
    Deterministic random source.

    Shuffles reverse their input and every range or choice takes its first
    option. With five players this deals p1 hitler, p2 fascist and p3-p5
    liberal, makes p1 the first president and stacks the deck with the
    eleven fascist policies on top.
    """

    def shuffle(self, x):
        x.reverse()

    def randrange(self, start, stop=None, step=1):
        return 0 if stop is None else start

    def choice(self, seq):
        return seq[0]


def expect_ok(result):
    assert result.success, f"{result.error_code}: {result.error_message}"
    return result.state


@pytest.fixture
def fixed_rng():
    return FixedRandom()


@pytest.fixture
def ok():
    return expect_ok


@pytest.fixture
def make_lobby():
    """Lobby with players p1..pN (named "Player N") and optional spectators s1..sM."""
    def build(player_count=5, spectators=0):
        state = create_room("TEST", HOST)
        for i in range(1, player_count + 1):
            state = expect_ok(join_room(state, f"p{i}", f"Player {i}"))
        for i in range(1, spectators + 1):
            state = expect_ok(join_room(state, f"s{i}", f"Spectator {i}", is_spectator=True))
        return state
    return build


@pytest.fixture
def make_game(make_lobby, fixed_rng):
    """Started game with the night over and the first nomination open."""
    def build(player_count=5, spectators=0, rng=None):
        state = make_lobby(player_count, spectators)
        state = expect_ok(start_game(state, HOST, rng=rng or fixed_rng))
        return expect_ok(night_complete(state, HOST))
    return build


@pytest.fixture
def vote_all(fixed_rng):
    """Every living player votes the same way; returns the final result."""
    def run(state, vote="ja", rng=None):
        result = None
        for player in state.living_players():
            result = cast_vote(state, player.id, vote, rng=rng or fixed_rng)
            state = expect_ok(result)
        return result
    return run


@pytest.fixture
def elect(vote_all, fixed_rng):
    """Current president nominates ``chancellor_id`` and the table votes ja."""
    def run(state, chancellor_id, rng=None):
        state = expect_ok(nominate_chancellor(state, state.game.president_id, chancellor_id, rng=rng or fixed_rng))
        return expect_ok(vote_all(state, "ja", rng=rng))
    return run
