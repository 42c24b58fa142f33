"""Double-Discard-Alert Sub-Reducer - Flags cards that must not be discarded."""

from __future__ import annotations
from dataclasses import replace
from typing import TYPE_CHECKING, Sequence

from .state import CardLocation

if TYPE_CHECKING:
    from .state import CardState


def dda_reducer(
    deck: Sequence[CardState],
    double_discard: int | None,
    current_player_index: int | None,
) -> list[CardState]:
    """
    Mark every card in the acting player's hand that could be the last copy
    of the double-discard card, and clear the mark everywhere else.

    Running it twice with the same inputs changes nothing the second time.
    """
    identity = None
    if double_discard is not None and 0 <= double_discard < len(deck):
        identity = deck[double_discard].identity

    new_deck = list(deck)
    for order, card in enumerate(deck):
        in_dda = (
            identity is not None
            and current_player_index is not None
            and card.location == CardLocation.HAND
            and card.holder == current_player_index
            and identity in card.possible_cards
        )
        if card.in_double_discard != in_dda:
            new_deck[order] = replace(card, in_double_discard=in_dda)
    return new_deck
