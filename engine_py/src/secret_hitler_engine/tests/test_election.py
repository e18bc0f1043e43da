"""
Tests for nomination, voting and election resolution.
"""

import pytest

from secret_hitler_engine.constants import (
    EVENT_CHAOS, EVENT_GAME_OVER, EVENT_VOTE_CAST, EVENT_VOTE_RESULTS, EVENT_YOUR_TURN,
)
from secret_hitler_engine.election import tally_votes
from secret_hitler_engine.engine import cast_vote, nominate_chancellor
from secret_hitler_engine.errors import ILLEGAL_STATE, INVALID_CHOICE, NOT_FOUND, UNAUTHORIZED
from secret_hitler_engine.messages import Recipient
from secret_hitler_engine.models import Phase, Policy, Team, Vote


def test_nomination_by_non_president_rejected(make_game):
    state = make_game(5)
    result = nominate_chancellor(state, "p2", "p3")
    assert result.error_code == UNAUTHORIZED
    assert result.state is state
    assert state.game.chancellor_id is None
    assert state.phase == Phase.NOMINATION


def test_nomination_of_ineligible_player_rejected(make_game):
    state = make_game(5)
    state.game.last_chancellor_id = "p3"
    result = nominate_chancellor(state, "p1", "p3")
    assert result.error_code == INVALID_CHOICE
    assert result.state.game.chancellor_id is None


def test_president_cannot_nominate_self(make_game):
    assert nominate_chancellor(make_game(5), "p1", "p1").error_code == INVALID_CHOICE


def test_nomination_of_unknown_player(make_game):
    assert nominate_chancellor(make_game(5), "p1", "nobody").error_code == NOT_FOUND


def test_nomination_outside_nomination_phase(make_game):
    state = nominate_chancellor(make_game(5), "p1", "p2").state
    assert nominate_chancellor(state, "p1", "p3").error_code == ILLEGAL_STATE


def test_nomination_opens_voting(make_game):
    state = make_game(5, spectators=1)
    result = nominate_chancellor(state, "p1", "p2")
    assert result.success
    assert result.state.phase == Phase.VOTING
    assert result.state.game.chancellor_id == "p2"

    prompts = [m for m in result.messages if m.event == EVENT_YOUR_TURN]
    assert sorted(m.player_id for m in prompts) == ["p1", "p2", "p3", "p4", "p5"]
    assert all(m.data["action"] == "vote" for m in prompts)


def test_vote_validation(make_game):
    state = nominate_chancellor(make_game(5, spectators=1), "p1", "p2").state
    assert cast_vote(state, "s1", "ja").error_code == UNAUTHORIZED
    assert cast_vote(state, "host", "ja").error_code == UNAUTHORIZED
    assert cast_vote(state, "p3", "maybe").error_code == INVALID_CHOICE

    state.get_player("p5").alive = False
    assert cast_vote(state, "p5", "ja").error_code == UNAUTHORIZED


def test_vote_before_nomination_rejected(make_game):
    assert cast_vote(make_game(5), "p1", "ja").error_code == ILLEGAL_STATE


def test_later_vote_overwrites(make_game, ok):
    state = nominate_chancellor(make_game(5), "p1", "p2").state
    state = ok(cast_vote(state, "p3", "ja"))
    result = cast_vote(state, "p3", "nein")
    assert result.state.game.votes == {"p3": Vote.NEIN}

    counts = [m for m in result.messages if m.event == EVENT_VOTE_CAST]
    assert counts[0].recipient == Recipient.HOST
    assert counts[0].data["total_votes"] == 1
    assert counts[0].data["total_players"] == 5


@pytest.mark.parametrize("ja,nein,passed", [(3, 2, True), (2, 2, False), (0, 5, False), (5, 0, True)])
def test_tally(ja, nein, passed):
    votes = {f"y{i}": Vote.JA for i in range(ja)}
    votes.update({f"n{i}": Vote.NEIN for i in range(nein)})
    assert tally_votes(votes) == (ja, nein, passed)


def test_passed_election_begins_session(make_game, ok):
    state = nominate_chancellor(make_game(5, spectators=1), "p1", "p2").state
    for pid, vote in [("p1", "ja"), ("p2", "ja"), ("p3", "ja"), ("p4", "nein")]:
        state = ok(cast_vote(state, pid, vote))
    result = cast_vote(state, "p5", "nein")
    state = result.state

    assert state.phase == Phase.LEGISLATIVE_PRESIDENT
    assert state.game.last_president_id == "p1"
    assert state.game.last_chancellor_id == "p2"
    assert state.game.election_tracker == 0
    assert state.game.drawn_policies == [Policy.FASCIST] * 3

    results = [m for m in result.messages if m.event == EVENT_VOTE_RESULTS]
    recipients = {(m.recipient, m.player_id) for m in results}
    assert (Recipient.HOST, None) in recipients
    assert {pid for _, pid in recipients if pid} == {"p1", "p2", "p3", "p4", "p5"}
    assert results[0].data["ja_votes"] == 3
    assert results[0].data["passed"] is True


def test_failed_election_moves_presidency(make_game, vote_all):
    state = nominate_chancellor(make_game(5), "p1", "p2").state
    result = vote_all(state, "nein")
    state = result.state

    assert state.phase == Phase.NOMINATION
    assert state.game.election_tracker == 1
    assert state.game.president_id == "p2"
    assert state.game.chancellor_id is None
    assert state.game.last_president_id is None


def test_tie_fails(make_game, ok):
    state = make_game(6)
    state = nominate_chancellor(state, "p1", "p2").state
    for i, vote in enumerate(["ja", "ja", "ja", "nein", "nein", "nein"], start=1):
        state = ok(cast_vote(state, f"p{i}", vote))
    assert state.phase == Phase.NOMINATION
    assert state.game.election_tracker == 1


def test_three_failed_elections_trigger_chaos(make_game, vote_all, ok):
    """Third failure enacts the top policy, resets the tracker and the term limits."""
    state = make_game(5)
    state.game.last_president_id = "p5"
    state.game.last_chancellor_id = "p4"

    result = None
    for president, nominee in [("p1", "p2"), ("p2", "p3"), ("p3", "p1")]:
        assert state.game.president_id == president
        state = ok(nominate_chancellor(state, president, nominee))
        result = vote_all(state, "nein")
        state = result.state

    game = state.game
    assert game.fascist_policies == 1
    assert game.liberal_policies == 0
    assert game.election_tracker == 0
    assert game.last_president_id is None
    assert game.last_chancellor_id is None
    assert len(game.policy_deck) == 16
    assert state.phase == Phase.NOMINATION
    assert game.president_id == "p4"

    chaos = [m for m in result.messages if m.event == EVENT_CHAOS]
    assert len(chaos) == 1
    assert chaos[0].data["policy"] == "fascist"


def test_hitler_elected_after_three_fascist_policies(make_game, vote_all):
    state = make_game(5)
    state.game.fascist_policies = 3
    state.game.president_id = "p3"
    state = nominate_chancellor(state, "p3", "p1").state
    result = vote_all(state, "ja")

    assert result.state.phase == Phase.GAME_OVER
    assert result.state.game.winner == Team.FASCIST
    assert result.state.game.game_over_reason == "Hitler was elected Chancellor!"
    assert result.state.game.drawn_policies == []

    game_over = [m for m in result.messages if m.event == EVENT_GAME_OVER]
    assert len(game_over) == 1
    assert game_over[0].recipient == Recipient.ROOM
    roles = {p["id"]: p["role"] for p in game_over[0].data["players"]}
    assert roles["p1"] == "hitler"


def test_hitler_elected_early_is_harmless(make_game, vote_all):
    state = make_game(5)
    state.game.fascist_policies = 2
    state.game.president_id = "p3"
    state = nominate_chancellor(state, "p3", "p1").state
    result = vote_all(state, "ja")
    assert result.state.phase == Phase.LEGISLATIVE_PRESIDENT
