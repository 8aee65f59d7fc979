"""
HotTakes API: Voting Engine Unit Tests
=======================================

What:  set_liking transitions, invariants and the response-message policy.
How:   Pure functions over VoteState values; no database, no fixtures.
"""

import itertools

import pytest

from hottakes.services.voting import (
    VoteAction,
    VoteOutcome,
    VoteState,
    VoteTransition,
    describe_transition,
    set_liking,
    vote_message,
)

USER = "aaaaaaaaaaaaaaaaaaaaaaaa"
OTHERS = ["b" * 24, "c" * 24, "d" * 24]


def state_of(liked=(), disliked=()):
    return VoteState(
        likes=len(liked),
        dislikes=len(disliked),
        users_liked=tuple(liked),
        users_disliked=tuple(disliked),
    )


def assert_invariants(state: VoteState):
    assert state.likes == len(state.users_liked)
    assert state.dislikes == len(state.users_disliked)
    assert len(set(state.users_liked)) == len(state.users_liked)
    assert len(set(state.users_disliked)) == len(state.users_disliked)
    assert not set(state.users_liked) & set(state.users_disliked)


STARTING_STATES = [
    state_of(),
    state_of(liked=[USER]),
    state_of(disliked=[USER]),
    state_of(liked=OTHERS, disliked=[USER]),
    state_of(liked=[OTHERS[0], USER, OTHERS[1]], disliked=[OTHERS[2]]),
]


class TestScenarios:
    """The four walkthroughs every client relies on."""

    def test_new_like_on_three_likes(self):
        state = state_of(liked=OTHERS)
        new_state, transition = set_liking(state, VoteAction.LIKE, USER)

        assert new_state.likes == 4
        assert new_state.users_liked == (*OTHERS, USER)
        assert transition == VoteTransition(VoteAction.RESET, VoteAction.LIKE)
        assert describe_transition(transition) is VoteOutcome.RECORDED

    def test_repeated_like_is_already_voted(self):
        state = state_of(liked=[USER, OTHERS[0]])
        new_state, transition = set_liking(state, VoteAction.LIKE, USER)

        assert new_state == state
        assert describe_transition(transition) is VoteOutcome.ALREADY_VOTED

    def test_dislike_then_like_moves_between_sets(self):
        state = state_of(liked=[OTHERS[0]], disliked=[USER])
        new_state, transition = set_liking(state, VoteAction.LIKE, USER)

        assert new_state.users_disliked == ()
        assert new_state.users_liked == (OTHERS[0], USER)
        assert (new_state.likes, new_state.dislikes) == (2, 0)
        assert transition.previous_action == VoteAction.DISLIKE
        assert describe_transition(transition) is VoteOutcome.RECORDED

    def test_reset_without_vote_is_nothing_to_undo(self):
        state = state_of(liked=OTHERS)
        new_state, transition = set_liking(state, VoteAction.RESET, USER)

        assert new_state == state
        assert describe_transition(transition) is VoteOutcome.NOTHING_TO_UNDO

    def test_reset_after_dislike_is_undone(self):
        state = state_of(disliked=[USER])
        new_state, transition = set_liking(state, VoteAction.RESET, USER)

        assert new_state == state_of()
        assert describe_transition(transition) is VoteOutcome.UNDONE


class TestProperties:
    @pytest.mark.parametrize("state", STARTING_STATES)
    def test_reset_removes_user_completely(self, state):
        new_state, _ = set_liking(state, VoteAction.RESET, USER)
        assert USER not in new_state.users_liked
        assert USER not in new_state.users_disliked

    @pytest.mark.parametrize(
        "state,action", list(itertools.product(STARTING_STATES, list(VoteAction)))
    )
    def test_invariants_hold_after_any_action(self, state, action):
        new_state, transition = set_liking(state, action, USER)
        assert_invariants(new_state)
        assert transition.new_action == action
        assert new_state.action_of(USER) == action

    @pytest.mark.parametrize("state", STARTING_STATES)
    @pytest.mark.parametrize("action", [VoteAction.LIKE, VoteAction.DISLIKE])
    def test_repeated_action_is_idempotent(self, state, action):
        once, _ = set_liking(state, action, USER)
        twice, transition = set_liking(once, action, USER)
        assert twice == once
        assert describe_transition(transition) is VoteOutcome.ALREADY_VOTED

    def test_other_voters_are_untouched(self):
        state = state_of(liked=[OTHERS[0], USER], disliked=[OTHERS[1]])
        new_state, _ = set_liking(state, VoteAction.DISLIKE, USER)
        assert new_state.users_liked == (OTHERS[0],)
        assert new_state.users_disliked == (OTHERS[1], USER)

    def test_input_state_is_not_modified(self):
        state = state_of(liked=[USER])
        set_liking(state, VoteAction.DISLIKE, USER)
        assert state == state_of(liked=[USER])

    def test_accepts_plain_integers(self):
        new_state, transition = set_liking(state_of(), -1, USER)
        assert transition.new_action is VoteAction.DISLIKE
        assert new_state.users_disliked == (USER,)

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError):
            set_liking(state_of(), 2, USER)


class TestMessages:
    def test_recorded_like(self):
        transition = VoteTransition(VoteAction.RESET, VoteAction.LIKE)
        assert vote_message(transition) == "Your like has been recorded."

    def test_already_disliked(self):
        transition = VoteTransition(VoteAction.DISLIKE, VoteAction.DISLIKE)
        assert "already voted" in vote_message(transition)

    def test_undone_names_previous_vote(self):
        transition = VoteTransition(VoteAction.DISLIKE, VoteAction.RESET)
        assert vote_message(transition) == "Your dislike has been removed."

    def test_nothing_to_undo(self):
        transition = VoteTransition(VoteAction.RESET, VoteAction.RESET)
        assert vote_message(transition) == "There is no vote to undo on this sauce."
