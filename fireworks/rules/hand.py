"""
Hand rules.

Hands are stored oldest card first: index 0 is the right-most card (slot N)
and the last element is the newest, left-most card (slot 1).
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence

from . import card as card_rules

if TYPE_CHECKING:
    from ..engine_core.state import CardState


def chop_index(hand: Sequence[int], deck: Sequence[CardState]) -> int:
    """
    Index of the chop: the oldest unclued card.

    When every card is clued the newest card counts as chop.
    """
    for i, order in enumerate(hand):
        if not card_rules.is_clued(deck[order]):
            return i
    return len(hand) - 1


def card_slot(order: int, hand: Sequence[int]) -> int | None:
    """1-based slot number counted from the newest card, or None if absent."""
    if order not in hand:
        return None
    return len(hand) - list(hand).index(order)


def is_locked(hand: Sequence[int], deck: Sequence[CardState]) -> bool:
    """A hand is locked when every card in it has been clued."""
    return all(card_rules.is_clued(deck[order]) for order in hand)


def cycle_chop_to_front(hand: list[int], deck: Sequence[CardState]) -> None:
    """Move the chop card to the front of the hand, in place."""
    if not hand:
        return

    index = chop_index(hand, deck)
    if index == len(hand) - 1:
        return

    order = hand.pop(index)
    hand.append(order)
