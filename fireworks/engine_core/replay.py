"""
Replay - Folds an action log into a table of states.

Used for spectating, scrubbing through finished games and "what-if"
branches. The canonical timeline is never modified: hypothetical branches
start from a state in the table and produce their own states.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Iterable, Sequence

from .metadata import ReducerFlags
from .reducer import game_state_reducer
from .setup import initial_game_state

if TYPE_CHECKING:
    from .action import GameAction
    from .metadata import GameMetadata
    from .state import CardNote, GameState
    from ..rules.text import Narrator


logger = logging.getLogger(__name__)


def replay_actions(
    actions: Iterable[GameAction],
    metadata: GameMetadata,
    flags: ReducerFlags | None = None,
    our_notes: Sequence[CardNote | None] | None = None,
    narrator: Narrator | None = None,
    initial_state: GameState | None = None,
) -> list[GameState]:
    """
    Apply every action in order.

    Returns:
        The state table: entry 0 is the starting state and entry i + 1 is the
        state after action i
    """
    flags = flags or ReducerFlags()
    state = initial_state if initial_state is not None else initial_game_state(metadata)
    states = [state]
    for action in actions:
        state = game_state_reducer(state, action, flags, metadata, our_notes, narrator)
        states.append(state)

    logger.info("Replayed %d actions", len(states) - 1)
    return states


def final_state(
    actions: Iterable[GameAction],
    metadata: GameMetadata,
    flags: ReducerFlags | None = None,
) -> GameState:
    return replay_actions(actions, metadata, flags)[-1]


def states_by_segment(states: Sequence[GameState]) -> dict[int, GameState]:
    """The last state of every segment, for scrubbing a replay."""
    by_segment: dict[int, GameState] = {}
    for state in states:
        if state.turn.segment is not None:
            by_segment[state.turn.segment] = state
    return by_segment


def apply_hypothetical(
    state: GameState,
    actions: Iterable[GameAction],
    metadata: GameMetadata,
    flags: ReducerFlags | None = None,
    narrator: Narrator | None = None,
) -> list[GameState]:
    """
    Branch off a state with actions that did not happen.

    Log lines in the branch are marked as hypothetical.
    """
    flags = replace(flags or ReducerFlags(), hypothetical=True)
    return replay_actions(actions, metadata, flags, narrator=narrator, initial_state=state)[1:]
