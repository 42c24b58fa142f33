"""Turn order rules."""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.state import TurnState


MAX_STRIKES = 3


def should_end_turn(turn: TurnState) -> bool:
    """A turn is one play, discard or clue."""
    actions_taken = turn.cards_played_or_discarded_this_turn + turn.clues_given_this_turn
    return actions_taken == 1


def next_player_index(current_player_index: int, num_players: int) -> int:
    return (current_player_index + 1) % num_players


def is_strikeout(num_strikes: int) -> bool:
    return num_strikes >= MAX_STRIKES


def player_to_act(turn: TurnState, num_players: int) -> int | None:
    """
    The player whose move comes next.

    Between a play or discard and the replacement draw the turn has not
    advanced yet, but the next player is already the one to act.
    """
    if turn.current_player_index is None:
        return None
    if turn.cards_played_or_discarded_this_turn > 0:
        return next_player_index(turn.current_player_index, num_players)
    return turn.current_player_index
