"""
HotTakes API: Voting Engine
============================

What:  Pure state transition over one sauce's vote state.
How:   set_liking(state, action, user_id) returns a new VoteState and a
       VoteTransition describing what changed. No I/O and no ORM access:
       the pipeline loads the state, calls the engine, writes the result
       back.
Who:   Called by SauceService.vote().

State Machine (per voter u):

    held \\ requested   LIKE        DISLIKE      RESET
    ─────────────────────────────────────────────────────
    none               liked       disliked     none
    liked              liked       disliked     none
    disliked           liked       disliked     none

    Every transition runs in two phases:
        1. Reset: remove u from the disliked set (previous = -1), else from
           the liked set (previous = +1), else previous = 0
        2. Apply: LIKE adds u to the liked set, DISLIKE adds u to the
           disliked set, RESET adds nothing

Invariants (hold for every returned state when they hold for the input):
    - likes == len(users_liked), dislikes == len(users_disliked)
    - u appears in at most one of users_liked, users_disliked
    - no duplicate entries
    - repeating the same non-zero action returns a state equal to its
      input, including the order of both sets
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Tuple

logger = logging.getLogger(__name__)


class VoteAction(IntEnum):
    """Requested vote operation, as sent by clients in the `like` field."""

    DISLIKE = -1
    RESET = 0
    LIKE = 1


@dataclass(frozen=True)
class VoteState:
    """(likes, dislikes, users_liked, users_disliked) for one sauce."""

    likes: int = 0
    dislikes: int = 0
    users_liked: Tuple[str, ...] = field(default_factory=tuple)
    users_disliked: Tuple[str, ...] = field(default_factory=tuple)

    def action_of(self, user_id: str) -> VoteAction:
        """The vote currently held by user_id (RESET when none)."""
        if user_id in self.users_disliked:
            return VoteAction.DISLIKE
        if user_id in self.users_liked:
            return VoteAction.LIKE
        return VoteAction.RESET


@dataclass(frozen=True)
class VoteTransition:
    previous_action: VoteAction
    new_action: VoteAction


class VoteOutcome(str, Enum):
    """What a transition meant to the voter, used for the response message."""

    ALREADY_VOTED = "already_voted"
    RECORDED = "recorded"
    NOTHING_TO_UNDO = "nothing_to_undo"
    UNDONE = "undone"


def _without(users: Tuple[str, ...], user_id: str) -> Tuple[str, ...]:
    return tuple(u for u in users if u != user_id)


def set_liking(
    state: VoteState, action: VoteAction, user_id: str
) -> Tuple[VoteState, VoteTransition]:
    """
    Apply a like, dislike or reset by user_id to state.

    Args:
        state:   Current vote state of the sauce
        action:  LIKE (+1), DISLIKE (-1) or RESET (0)
        user_id: Authenticated voter

    Returns:
        (new_state, VoteTransition(previous_action, new_action))
    """
    action = VoteAction(action)
    previous = state.action_of(user_id)
    transition = VoteTransition(previous_action=previous, new_action=action)

    # Same non-zero vote again: reset + re-apply would only move the voter
    # to the end of the list, so the input state is returned as is.
    if previous == action and action != VoteAction.RESET:
        logger.debug("Vote by %s unchanged (%s)", user_id, action.name)
        return state, transition

    # ── Reset phase ───────────────────────────────────────────────────────
    users_liked = state.users_liked
    users_disliked = state.users_disliked
    if previous == VoteAction.DISLIKE:
        users_disliked = _without(users_disliked, user_id)
    elif previous == VoteAction.LIKE:
        users_liked = _without(users_liked, user_id)

    # ── Apply phase ───────────────────────────────────────────────────────
    if action == VoteAction.LIKE:
        users_liked = users_liked + (user_id,)
    elif action == VoteAction.DISLIKE:
        users_disliked = users_disliked + (user_id,)

    new_state = VoteState(
        likes=len(users_liked),
        dislikes=len(users_disliked),
        users_liked=users_liked,
        users_disliked=users_disliked,
    )
    logger.debug(
        "Vote by %s: %s -> %s (likes=%d, dislikes=%d)",
        user_id,
        previous.name,
        action.name,
        new_state.likes,
        new_state.dislikes,
    )
    return new_state, transition


def describe_transition(transition: VoteTransition) -> VoteOutcome:
    """Classifies a transition for the response message. Pure, no state access."""
    if transition.new_action != VoteAction.RESET:
        if transition.previous_action == transition.new_action:
            return VoteOutcome.ALREADY_VOTED
        return VoteOutcome.RECORDED
    if transition.previous_action == VoteAction.RESET:
        return VoteOutcome.NOTHING_TO_UNDO
    return VoteOutcome.UNDONE


_VOTE_WORDS = {VoteAction.LIKE: "like", VoteAction.DISLIKE: "dislike"}


def vote_message(transition: VoteTransition) -> str:
    outcome = describe_transition(transition)
    if outcome is VoteOutcome.ALREADY_VOTED:
        return f"You have already voted this way: your {_VOTE_WORDS[transition.new_action]} is unchanged."
    if outcome is VoteOutcome.RECORDED:
        return f"Your {_VOTE_WORDS[transition.new_action]} has been recorded."
    if outcome is VoteOutcome.NOTHING_TO_UNDO:
        return "There is no vote to undo on this sauce."
    return f"Your {_VOTE_WORDS[transition.previous_action]} has been removed."
