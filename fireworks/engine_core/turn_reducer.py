"""
Turn Sub-Reducer - Advances the turn state machine.

PRE_DEAL -> IN_PROGRESS -> FINAL_ROUND -> ENDED

A turn ends after one play, discard or clue. The final round starts when
the deck runs out and gives every player one more turn.
"""

from __future__ import annotations
from dataclasses import replace
from typing import TYPE_CHECKING

from .action import (
    ActionClue,
    ActionDiscard,
    ActionDraw,
    ActionGameOver,
    ActionPlay,
    ActionStrike,
)
from .state import EndCondition, TurnPhase, TurnState
from ..rules import deck as deck_rules
from ..rules import turn as turn_rules

if TYPE_CHECKING:
    from .action import GameAction
    from .metadata import GameMetadata
    from .state import GameState


def turn_reducer(
    turn: TurnState,
    action: GameAction,
    state: GameState,
    metadata: GameMetadata,
) -> TurnState:
    """Return the turn state after an action; state is the draft."""
    if isinstance(action, ActionGameOver):
        return replace(
            turn,
            phase=TurnPhase.ENDED,
            end_condition=action.end_condition,
            current_player_index=None,
            segment=None if turn.segment is None else turn.segment + 1,
        )

    if turn.game_over:
        return turn

    if isinstance(action, ActionDraw):
        if turn.segment is None:
            if deck_rules.is_initial_deal_finished(state.cards_remaining_in_the_deck, metadata):
                return replace(turn, segment=0, phase=TurnPhase.IN_PROGRESS)
            return turn
        # The replacement card is drawn after a play or discard, which ends the turn
        if turn.cards_played_or_discarded_this_turn > 0:
            return _end_turn_if_done(turn, state, metadata)
        return turn

    if isinstance(action, ActionStrike):
        return _check_end(turn, state, metadata)

    if isinstance(action, (ActionPlay, ActionDiscard)):
        turn = replace(
            turn,
            cards_played_or_discarded_this_turn=turn.cards_played_or_discarded_this_turn + 1,
        )
        if isinstance(action, ActionDiscard) and not action.failed:
            turn = replace(turn, cards_discarded_this_turn=turn.cards_discarded_this_turn + 1)
        # With an empty deck no draw follows, so the turn ends now
        if state.cards_remaining_in_the_deck == 0:
            return _end_turn_if_done(turn, state, metadata)
        return turn

    if isinstance(action, ActionClue):
        turn = replace(turn, clues_given_this_turn=turn.clues_given_this_turn + 1)
        return _end_turn_if_done(turn, state, metadata)

    return turn


def _end_turn_if_done(turn: TurnState, state: GameState, metadata: GameMetadata) -> TurnState:
    if not turn_rules.should_end_turn(turn):
        return turn
    turn = _next_turn(turn, state, metadata)
    return _check_end(turn, state, metadata)


def _next_turn(turn: TurnState, state: GameState, metadata: GameMetadata) -> TurnState:
    num_players = metadata.options.num_players
    turn_num = turn.turn_num + 1
    current_player_index = turn.current_player_index
    if current_player_index is not None:
        current_player_index = turn_rules.next_player_index(current_player_index, num_players)

    end_turn_num = turn.end_turn_num
    phase = turn.phase
    if state.cards_remaining_in_the_deck == 0 and end_turn_num is None:
        end_turn_num = turn_num + num_players
        phase = TurnPhase.FINAL_ROUND

    return replace(
        turn,
        turn_num=turn_num,
        segment=None if turn.segment is None else turn.segment + 1,
        current_player_index=current_player_index,
        end_turn_num=end_turn_num,
        phase=phase,
        cards_played_or_discarded_this_turn=0,
        cards_discarded_this_turn=0,
        clues_given_this_turn=0,
    )


def _check_end(turn: TurnState, state: GameState, metadata: GameMetadata) -> TurnState:
    """End the game on strikeout, a perfect board, or a finished final round."""
    max_stack_size = metadata.variant.max_stack_size
    end_condition = None
    if turn_rules.is_strikeout(len(state.strikes)):
        end_condition = EndCondition.STRIKEOUT
    elif state.play_stacks and all(
        len(stack) == max_stack_size for stack in state.play_stacks
    ):
        end_condition = EndCondition.NORMAL
    elif turn.end_turn_num is not None and turn.turn_num >= turn.end_turn_num:
        end_condition = EndCondition.NORMAL

    if end_condition is None:
        return turn
    return replace(
        turn,
        phase=TurnPhase.ENDED,
        end_condition=end_condition,
        current_player_index=None,
    )
