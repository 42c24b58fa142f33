"""Deck composition and dealing."""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..variants.variant import START_CARD_RANK

if TYPE_CHECKING:
    from ..engine_core.metadata import GameMetadata, GameOptions
    from ..variants import Suit, Variant


# Hand size by number of players
HAND_SIZES = {
    2: 5,
    3: 5,
    4: 4,
    5: 4,
    6: 3,
}


def num_copies_of_card(suit: Suit, rank: int, variant: Variant) -> int:
    """How many physical copies of a card identity exist."""
    if suit.one_of_each:
        return 1

    if variant.sudoku:
        return 2

    if variant.critical_rank == rank:
        return 1

    if variant.up_or_down:
        # 1s, 5s and START cards are the three stack starters
        if rank in (1, 5, START_CARD_RANK):
            return 1
        return 2

    # Reversed suits are built from 5 down, so the copy counts swap
    if rank == 1:
        return 1 if suit.reversed else 3
    if rank == 5:
        return 3 if suit.reversed else 1
    return 2


def total_cards_in_suit(suit: Suit, variant: Variant) -> int:
    return sum(num_copies_of_card(suit, rank, variant) for rank in variant.ranks)


def total_cards(variant: Variant) -> int:
    return sum(total_cards_in_suit(suit, variant) for suit in variant.suits)


def cards_per_hand(options: GameOptions) -> int:
    hand_size = HAND_SIZES[options.num_players]
    if options.one_extra_card:
        hand_size += 1
    if options.one_less_card:
        hand_size -= 1
    return hand_size


def starting_deck_size(metadata: GameMetadata) -> int:
    """Cards left in the deck once every hand has been dealt."""
    options = metadata.options
    return total_cards(metadata.variant) - options.num_players * cards_per_hand(options)


def is_initial_deal_finished(cards_remaining_in_the_deck: int, metadata: GameMetadata) -> bool:
    return cards_remaining_in_the_deck == starting_deck_size(metadata)
