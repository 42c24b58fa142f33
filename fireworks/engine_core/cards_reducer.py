"""
Card Identity Sub-Reducer - Tracks what is known about every physical card.

Runs first in the derivation pipeline. It is given the deck as it was before
the action and the draft state after the top-level mutation (so hands, stacks
and the hole already reflect the action).
"""

from __future__ import annotations
from collections import Counter
from dataclasses import replace
from typing import TYPE_CHECKING, Sequence

from .action import (
    ActionCardIdentity,
    ActionClue,
    ActionDiscard,
    ActionDraw,
    ActionPlay,
)
from .state import CardLocation, CardState
from ..rules import card as card_rules
from ..rules import deck as deck_rules
from ..variants.variant import ClueType, UNKNOWN_CARD_RANK

if TYPE_CHECKING:
    from .action import GameAction
    from .metadata import GameMetadata
    from .state import GameState, Identity
    from ..variants import Variant


def cards_reducer(
    deck: Sequence[CardState],
    action: GameAction,
    state: GameState,
    metadata: GameMetadata,
) -> list[CardState]:
    """
    Return the new deck after an action.

    Args:
        deck: The deck before the action
        action: The action being applied
        state: Draft state with the action's top-level effects applied
        metadata: Game metadata

    Returns:
        A new list of cards; cards the action did not touch are the same objects
    """
    variant = metadata.variant
    new_deck = list(deck)

    if isinstance(action, ActionDraw):
        _draw(new_deck, action, state, variant)
    elif isinstance(action, ActionClue):
        _clue(new_deck, action, state, variant)
    elif isinstance(action, ActionPlay):
        _leave_hand(new_deck, action.order, action.suit_index, action.rank, state, failed=False, played=True)
    elif isinstance(action, ActionDiscard):
        _leave_hand(new_deck, action.order, action.suit_index, action.rank, state, failed=action.failed, played=False)
    elif isinstance(action, ActionCardIdentity):
        card = new_deck[action.order]
        new_deck[action.order] = replace(
            card,
            suit_index=_known(action.suit_index, card.suit_index),
            rank=_known(action.rank, card.rank),
        )

    _update_empathy(new_deck, variant)
    return new_deck


def _known(value: int, previous: int | None) -> int | None:
    """Map the wire's -1 (hidden) to None, keeping anything already known."""
    if value == UNKNOWN_CARD_RANK or value is None:
        return previous
    return value


def _draw(deck: list[CardState], action: ActionDraw, state: GameState, variant: Variant) -> None:
    card = deck[action.order]
    possible = card_rules.all_identities(variant)
    deck[action.order] = replace(
        card,
        location=CardLocation.HAND,
        holder=action.player_index,
        suit_index=_known(action.suit_index, card.suit_index),
        rank=_known(action.rank, card.rank),
        possible_cards_from_clues=possible,
        possible_cards=possible,
        segment_drawn=state.turn.segment,
        dealt_to_starting_hand=state.turn.segment is None,
    )


def _clue(deck: list[CardState], action: ActionClue, state: GameState, variant: Variant) -> None:
    clue_type = action.clue.type
    clue_value = action.clue.value

    for order in state.hands[action.target]:
        card = deck[order]
        positive = order in action.touched
        if not positive and action.ignore_negative:
            continue

        remaining = tuple(
            (suit_index, rank)
            for suit_index, rank in card.possible_cards_from_clues
            if card_rules.touches_card(
                clue_type, clue_value, variant.suit(suit_index), rank, variant,
            ) == positive
        )
        # A clue that contradicts everything is ignored rather than emptying the card
        if not remaining:
            remaining = card.possible_cards_from_clues

        changes = {"possible_cards_from_clues": remaining}
        if positive:
            changes["num_positive_clues"] = card.num_positive_clues + 1
            if card.segment_first_clued is None:
                changes["segment_first_clued"] = state.turn.segment
            if clue_type == ClueType.COLOR:
                changes["positive_color_clues"] = _add_clue(card.positive_color_clues, clue_value)
            else:
                changes["positive_rank_clues"] = _add_clue(card.positive_rank_clues, clue_value)
        elif clue_type == ClueType.COLOR:
            changes["negative_color_clues"] = _add_clue(card.negative_color_clues, clue_value)
        else:
            changes["negative_rank_clues"] = _add_clue(card.negative_rank_clues, clue_value)

        deck[order] = replace(card, **changes)


def _add_clue(clues: tuple[int, ...], value: int) -> tuple[int, ...]:
    if value in clues:
        return clues
    return clues + (value,)


def _leave_hand(
    deck: list[CardState],
    order: int,
    suit_index: int,
    rank: int,
    state: GameState,
    failed: bool,
    played: bool,
) -> None:
    card = deck[order]
    segment = state.turn.segment

    if order in state.hole:
        location = CardLocation.HOLE
    elif played:
        location = CardLocation.PLAY_STACK
    else:
        location = CardLocation.DISCARD

    changes = {
        "location": location,
        "holder": None,
        "suit_index": _known(suit_index, card.suit_index),
        "rank": _known(rank, card.rank),
        "is_misplayed": failed,
    }
    if played or failed:
        changes["segment_played"] = segment
    if not played:
        changes["segment_discarded"] = segment
    deck[order] = replace(card, **changes)


def _update_empathy(deck: list[CardState], variant: Variant) -> None:
    """
    Remove from each hand card the identities its holder can see are used up.

    A holder sees every card with a known identity except the ones in their
    own hand.
    """
    visible: Counter[Identity] = Counter()
    visible_in_hand: dict[int, Counter[Identity]] = {}
    for card in deck:
        if card.identity is None or card.location == CardLocation.DECK:
            continue
        visible[card.identity] += 1
        if card.location == CardLocation.HAND:
            visible_in_hand.setdefault(card.holder, Counter())[card.identity] += 1

    for order, card in enumerate(deck):
        if card.location != CardLocation.HAND:
            continue

        own = visible_in_hand.get(card.holder, Counter())
        possible = tuple(
            identity
            for identity in card.possible_cards_from_clues
            if visible[identity] - own[identity]
            < deck_rules.num_copies_of_card(variant.suit(identity[0]), identity[1], variant)
        )
        if not possible:
            possible = card.possible_cards_from_clues
        if possible != card.possible_cards:
            deck[order] = replace(card, possible_cards=possible)
