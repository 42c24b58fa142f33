"""
Reducer - Applies actions to game state.

The reducer is the single point of state change.
All state changes must go through game_state_reducer().

Design principles:
- Pure function: (state, action, flags, metadata) -> new_state
- Works on a draft; the state it was given is never touched
- Raises on corrupt input instead of guessing (see fireworks.errors)
- Derived data is recomputed by sub-reducers in a fixed order
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Sequence

from .action import (
    ActionClue,
    ActionDiscard,
    ActionDraw,
    ActionGameOver,
    ActionPlay,
    ActionPlayerTimes,
    ActionResult,
    ActionStrike,
    ActionType,
    NO_EFFECT_ACTIONS,
)
from .cards_reducer import cards_reducer
from .dda_reducer import dda_reducer
from .known_trash_reducer import known_trash_reducer
from .metadata import ReducerFlags
from .state import ClueRecord, EndCondition, LogEntry, StrikeRecord
from .stats_reducer import stats_reducer
from .turn_reducer import turn_reducer
from ..errors import InvalidInputError, ReducerError, StateConsistencyError
from ..rules import card as card_rules
from ..rules import clue_tokens as clue_tokens_rules
from ..rules import deck as deck_rules
from ..rules import hand as hand_rules
from ..rules import play_stacks as play_stacks_rules
from ..rules import text as text_rules
from ..rules import turn as turn_rules
from ..variants import has_reversed_suits

if TYPE_CHECKING:
    from .action import GameAction
    from .metadata import GameMetadata
    from .state import CardNote, GameState
    from ..rules.text import Narrator
    from ..variants import Variant


logger = logging.getLogger(__name__)


@dataclass
class DerivationContext:
    """Everything one action application needs, shared by the handlers and stages."""
    original: GameState
    state: GameState  # The draft being built
    action: GameAction
    flags: ReducerFlags
    metadata: GameMetadata
    variant: Variant
    narrator: Narrator
    our_notes: Sequence[CardNote | None] | None = None

    def log(self, text: str) -> None:
        self.state.log.append(LogEntry(turn=self.state.turn.turn_num + 1, text=text))


def game_state_reducer(
    state: GameState,
    action: GameAction,
    flags: ReducerFlags,
    metadata: GameMetadata,
    our_notes: Sequence[CardNote | None] | None = None,
    narrator: Narrator | None = None,
) -> GameState:
    """
    Apply one action and return the new state.

    Args:
        state: State before the action (not modified)
        action: The action to apply
        flags: How the viewer relates to the game
        metadata: Players, options and viewer seat
        our_notes: The viewer's card notes, indexed by card order
        narrator: Produces log text (defaults to English narration)

    Raises:
        StateConsistencyError: The action arrived before one it depends on
        InvalidInputError: A required field is missing or out of range
    """
    ctx = DerivationContext(
        original=state,
        state=state.draft(),
        action=action,
        flags=flags,
        metadata=metadata,
        variant=metadata.variant,
        narrator=narrator or text_rules.DEFAULT_NARRATOR,
        our_notes=our_notes,
    )

    try:
        handler = ACTION_HANDLERS[action.action_type]
        handler(ctx)

        if action.action_type in NO_EFFECT_ACTIONS:
            return ctx.state

        for _, stage in DERIVATION_STAGES:
            stage(ctx)
    except ReducerError as e:
        logger.warning("Rejected %s action: %s", action.action_type.value, e)
        raise

    logger.debug(
        "Applied %s action (turn %d, segment %s)",
        action.action_type.value,
        ctx.state.turn.turn_num,
        ctx.state.turn.segment,
    )
    return ctx.state


# =============================================================================
# Action handlers
# =============================================================================

def _handle_clue(ctx: DerivationContext) -> None:
    action: ActionClue = ctx.action
    state = ctx.state
    _check_player(action.giver, ctx)
    _check_player(action.target, ctx)

    state.clue_tokens -= clue_tokens_rules.get_adjusted(1, ctx.variant)

    if state.turn.segment is None:
        raise StateConsistencyError(
            "A clue happened before all of the initial cards were dealt",
            details={"giver": action.giver, "target": action.target},
        )

    target_hand = state.hands[action.target]
    not_touched = () if action.ignore_negative else tuple(
        order for order in target_hand if order not in action.touched
    )
    state.clues.append(ClueRecord(
        type=action.clue.type,
        value=action.clue.value,
        giver=action.giver,
        target=action.target,
        segment=state.turn.segment,
        touched=tuple(action.touched),
        not_touched=not_touched,
    ))

    ctx.log(ctx.narrator.clue(action, target_hand, ctx.flags.hypothetical, ctx.metadata))

    if ctx.metadata.options.card_cycle:
        hand_rules.cycle_chop_to_front(state.hands[action.giver], state.deck)


def _handle_discard(ctx: DerivationContext) -> None:
    action: ActionDiscard = ctx.action
    state = ctx.state
    slot = _remove_from_hand(action.player_index, action.order, ctx)

    if _redirect_to_hole(ctx):
        _check_suit(action.suit_index, "discarded", ctx, allow_hidden=True)
    else:
        _check_suit(action.suit_index, "discarded", ctx)
        state.discard_stacks[action.suit_index].append(action.order)
        state.clue_tokens = clue_tokens_rules.gain(action, state.clue_tokens, ctx.variant)

    touched = card_rules.is_clued(state.deck[action.order])
    ctx.log(ctx.narrator.discard(action, slot, touched, ctx.flags, ctx.metadata))


def _handle_play(ctx: DerivationContext) -> None:
    action: ActionPlay = ctx.action
    state = ctx.state
    slot = _remove_from_hand(action.player_index, action.order, ctx)

    if _redirect_to_hole(ctx):
        # Cards in the hole may still be hidden from us
        _check_suit(action.suit_index, "played", ctx, allow_hidden=True)
    else:
        _check_suit(action.suit_index, "played", ctx)
        play_stack = state.play_stacks[action.suit_index]
        play_stack.append(action.order)
        state.clue_tokens = clue_tokens_rules.gain(
            action,
            state.clue_tokens,
            ctx.variant,
            play_stack_complete=len(play_stack) == ctx.variant.max_stack_size,
        )

    # Attempted plays into the hole score too
    state.score += 1

    touched = card_rules.is_clued(state.deck[action.order])
    ctx.log(ctx.narrator.play(action, slot, touched, ctx.flags, ctx.metadata))


def _handle_draw(ctx: DerivationContext) -> None:
    action: ActionDraw = ctx.action
    state = ctx.state
    _check_player(action.player_index, ctx)
    _check_order(action.order, ctx)

    state.cards_remaining_in_the_deck -= 1
    state.hands[action.player_index].append(action.order)

    if deck_rules.is_initial_deal_finished(state.cards_remaining_in_the_deck, ctx.metadata):
        ctx.log(ctx.narrator.goes_first(state.turn.current_player_index, ctx.metadata))


def _handle_game_over(ctx: DerivationContext) -> None:
    action: ActionGameOver = ctx.action
    state = ctx.state
    if action.end_condition != EndCondition.NORMAL:
        state.score = 0

    ctx.log(ctx.narrator.game_over(
        action.end_condition,
        action.player_index,
        state.score,
        ctx.metadata,
        action.votes,
    ))


def _handle_player_times(ctx: DerivationContext) -> None:
    action: ActionPlayerTimes = ctx.action
    for text in ctx.narrator.player_times(action.player_times, action.duration, ctx.metadata):
        ctx.log(text)


def _handle_strike(ctx: DerivationContext) -> None:
    action: ActionStrike = ctx.action
    ctx.state.strikes.append(StrikeRecord(order=action.order, segment=ctx.state.turn.segment))


def _handle_card_identity(ctx: DerivationContext) -> None:
    # Revealing is done by the cards stage
    _check_order(ctx.action.order, ctx)


def _no_effect(ctx: DerivationContext) -> None:
    pass


ACTION_HANDLERS: dict[ActionType, Callable[[DerivationContext], None]] = {
    ActionType.CLUE: _handle_clue,
    ActionType.DISCARD: _handle_discard,
    ActionType.PLAY: _handle_play,
    ActionType.DRAW: _handle_draw,
    ActionType.STRIKE: _handle_strike,
    ActionType.GAME_OVER: _handle_game_over,
    ActionType.PLAYER_TIMES: _handle_player_times,
    ActionType.CARD_IDENTITY: _handle_card_identity,
    ActionType.TURN: _no_effect,
    ActionType.SET_EFF_MOD: _no_effect,
    ActionType.EDIT_NOTE: _no_effect,
    ActionType.NOTE_LIST: _no_effect,
    ActionType.NOTE_LIST_PLAYER: _no_effect,
    ActionType.RECEIVE_NOTE: _no_effect,
}


def _check_player(player_index: int, ctx: DerivationContext) -> None:
    if not 0 <= player_index < ctx.metadata.options.num_players:
        raise InvalidInputError(
            f"Player index {player_index} is not a seat in this game",
            details={"action": ctx.action.action_type.value},
        )


def _check_order(order: int, ctx: DerivationContext) -> None:
    if not 0 <= order < len(ctx.state.deck):
        raise InvalidInputError(
            f"Card order {order} is not in the deck",
            details={"action": ctx.action.action_type.value, "deck_size": len(ctx.state.deck)},
        )


def _check_suit(suit_index: int, verb: str, ctx: DerivationContext, allow_hidden: bool = False) -> None:
    if allow_hidden and suit_index == -1:
        return
    if not isinstance(suit_index, int) or not 0 <= suit_index < ctx.variant.num_suits:
        raise InvalidInputError(
            f"The suit index for the {verb} card was: {suit_index}",
            details={"order": ctx.action.order},
        )


def _remove_from_hand(player_index: int, order: int, ctx: DerivationContext) -> int | None:
    """Take a card out of a hand and return its slot, or None if it was not there."""
    _check_player(player_index, ctx)
    _check_order(order, ctx)

    hand = ctx.state.hands[player_index]
    # Playing from the deck leaves the hand alone
    slot = hand_rules.card_slot(order, hand)
    if slot is not None:
        hand.remove(order)
    return slot


def _redirect_to_hole(ctx: DerivationContext) -> bool:
    """
    In "Throw It in a Hole" variants, plays and misplays seen by a player go
    into the hole instead of onto the stacks.
    """
    flags = ctx.flags
    if not ctx.variant.throw_it_in_a_hole or not flags.sees_as_player or flags.finished:
        return False

    action = ctx.action
    if isinstance(action, ActionPlay) or (isinstance(action, ActionDiscard) and action.failed):
        ctx.state.hole.append(action.order)
        ctx.state.num_attempted_cards_played += 1
        return True
    return False


# =============================================================================
# Derivation stages
# =============================================================================

def _derive_cards(ctx: DerivationContext) -> None:
    ctx.state.deck = cards_reducer(ctx.original.deck, ctx.action, ctx.state, ctx.metadata)


def _derive_stack_directions(ctx: DerivationContext) -> None:
    action = ctx.action
    variant = ctx.variant
    if not isinstance(action, ActionPlay) or action.suit_index < 0:
        return
    if not (has_reversed_suits(variant) or variant.sudoku):
        return

    # Needs the played card's identity, so runs after the cards stage
    state = ctx.state
    state.play_stack_directions[action.suit_index] = play_stacks_rules.direction(
        action.suit_index,
        state.play_stacks[action.suit_index],
        state.deck,
        variant,
    )


def _derive_stack_starts(ctx: DerivationContext) -> None:
    action = ctx.action
    if not isinstance(action, ActionPlay) or not ctx.variant.sudoku or action.suit_index < 0:
        return

    state = ctx.state
    state.play_stack_starts[action.suit_index] = play_stacks_rules.stack_start_rank(
        state.play_stacks[action.suit_index],
        state.deck,
        ctx.variant,
    )


def _derive_card_status(ctx: DerivationContext) -> None:
    action = ctx.action
    if not isinstance(action, (ActionPlay, ActionDiscard)):
        return
    if action.suit_index < 0 or action.rank < 0:
        return

    state = ctx.state
    for rank in ctx.variant.ranks:
        state.card_status[action.suit_index][rank] = card_rules.status(
            action.suit_index,
            rank,
            state.deck,
            state.play_stacks,
            state.play_stack_directions,
            state.play_stack_starts,
            ctx.variant,
        )


def _derive_turn(ctx: DerivationContext) -> None:
    ctx.state.turn = turn_reducer(ctx.original.turn, ctx.action, ctx.state, ctx.metadata)


def _derive_stats(ctx: DerivationContext) -> None:
    ctx.state.stats = stats_reducer(
        ctx.original.stats,
        ctx.action,
        ctx.original,
        ctx.state,
        ctx.flags,
        ctx.metadata,
        ctx.our_notes,
    )


def _derive_double_discard(ctx: DerivationContext) -> None:
    state = ctx.state
    ctx.state.deck = dda_reducer(
        state.deck,
        state.stats.double_discard,
        turn_rules.player_to_act(state.turn, ctx.metadata.options.num_players),
    )


def _derive_known_trash(ctx: DerivationContext) -> None:
    state = ctx.state
    state.deck = known_trash_reducer(
        state.deck,
        state.play_stacks,
        state.play_stack_directions,
        state.play_stack_starts,
        ctx.variant,
    )


# Order matters: each stage reads what the stages before it produced
DERIVATION_STAGES: tuple[tuple[str, Callable[[DerivationContext], None]], ...] = (
    ("cards", _derive_cards),
    ("stack_directions", _derive_stack_directions),
    ("stack_starts", _derive_stack_starts),
    ("card_status", _derive_card_status),
    ("turn", _derive_turn),
    ("stats", _derive_stats),
    ("double_discard", _derive_double_discard),
    ("known_trash", _derive_known_trash),
)


# =============================================================================
# Result-returning wrapper
# =============================================================================

@dataclass
class Reducer:
    """
    Reducer applies actions to game state and reports the outcome as an
    ActionResult instead of raising.

    Stateless - all state is in GameState.
    """
    metadata: GameMetadata
    flags: ReducerFlags = field(default_factory=ReducerFlags)
    narrator: Narrator = field(default_factory=text_rules.TextNarrator)

    def apply(
        self,
        state: GameState,
        action: GameAction,
        our_notes: Sequence[CardNote | None] | None = None,
    ) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        try:
            new_state = game_state_reducer(
                state,
                action,
                self.flags,
                self.metadata,
                our_notes=our_notes,
                narrator=self.narrator,
            )
        except ReducerError as e:
            return ActionResult.failure(e.message, error_code=e.error_code, details=e.details)

        new_entries = [entry.text for entry in new_state.log[len(state.log):]]
        return ActionResult.success_with_state(new_state, log_entries=new_entries)


def apply_action(
    state: GameState,
    action: GameAction,
    metadata: GameMetadata,
    flags: ReducerFlags | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(metadata=metadata, flags=flags or ReducerFlags())
    return reducer.apply(state, action)
