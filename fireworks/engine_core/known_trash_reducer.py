"""Known-Trash Sub-Reducer - Flags hand cards their holder can prove are worthless."""

from __future__ import annotations
from dataclasses import replace
from typing import TYPE_CHECKING, Sequence

from .state import CardLocation
from ..rules import card as card_rules

if TYPE_CHECKING:
    from .state import CardState, StackDirection
    from ..variants import Variant


def known_trash_reducer(
    deck: Sequence[CardState],
    play_stacks: Sequence[Sequence[int]],
    play_stack_directions: Sequence[StackDirection | None],
    play_stack_starts: Sequence[int | None],
    variant: Variant,
) -> list[CardState]:
    """Recompute the known-trash flag of every card from scratch."""
    trash = card_rules.trash_identities(
        deck, play_stacks, play_stack_directions, play_stack_starts, variant,
    )

    new_deck = list(deck)
    for order, card in enumerate(deck):
        known_trash = (
            card.location == CardLocation.HAND
            and card_rules.is_known_trash(card, trash)
        )
        if card.is_known_trash != known_trash:
            new_deck[order] = replace(card, is_known_trash=known_trash)
    return new_deck
