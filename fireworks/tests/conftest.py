"""
Pytest fixtures for Fireworks tests.
"""

import pytest

from ..engine_core.action import ActionDraw
from ..engine_core.metadata import GameMetadata, ReducerFlags
from ..engine_core.reducer import game_state_reducer
from ..engine_core.setup import initial_game_state
from ..engine_core.state import GameState


# The opening deal used by most tests (order -> (suit index, rank)).
# Alice holds the five 1s; Bob holds red 2-5 and yellow 5.
ALICE_CARDS = [(0, 1), (1, 1), (2, 1), (3, 1), (4, 1)]
BOB_CARDS = [(0, 2), (0, 3), (0, 4), (0, 5), (1, 5)]


def reduce_all(state, actions, metadata, flags=None):
    """Apply actions one after another and return the final state."""
    flags = flags or ReducerFlags()
    for action in actions:
        state = game_state_reducer(state, action, flags, metadata)
    return state


def deal_actions(hands):
    """Draw actions dealing each hand in turn, orders counting up from 0."""
    actions = []
    order = 0
    for player_index, cards in enumerate(hands):
        for suit_index, rank in cards:
            actions.append(ActionDraw(
                player_index=player_index,
                order=order,
                suit_index=suit_index,
                rank=rank,
            ))
            order += 1
    return actions


@pytest.fixture
def metadata() -> GameMetadata:
    """Two-player game of the default variant."""
    return GameMetadata.create(["Alice", "Bob"])


@pytest.fixture
def flags() -> ReducerFlags:
    """A spectator replaying the game."""
    return ReducerFlags()


@pytest.fixture
def empty_state(metadata: GameMetadata) -> GameState:
    """State before any card has been dealt."""
    return initial_game_state(metadata)


@pytest.fixture
def dealt_state(empty_state: GameState, metadata: GameMetadata) -> GameState:
    """State right after the opening deal; Alice to play."""
    return reduce_all(empty_state, deal_actions([ALICE_CARDS, BOB_CARDS]), metadata)


@pytest.fixture
def hole_metadata() -> GameMetadata:
    return GameMetadata.create(
        ["Alice", "Bob"],
        variant_name="Throw It in a Hole (5 Suits)",
        our_player_index=0,
    )


@pytest.fixture
def hole_state(hole_metadata: GameMetadata) -> GameState:
    """Dealt "Throw It in a Hole" game seen by a seated player."""
    state = initial_game_state(hole_metadata)
    return reduce_all(
        state,
        deal_actions([ALICE_CARDS, BOB_CARDS]),
        hole_metadata,
        ReducerFlags(playing=True),
    )
