"""
Card rules: clue touching, copies, playability and status.

The status and trash checks take the stacks plus their direction/start
metadata so that order-flexible variants are handled in one place.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterable, Sequence

from ..engine_core.state import CardLocation, CardStatus, Identity, StackDirection
from ..variants.variant import ClueType, START_CARD_RANK
from . import deck as deck_rules
from . import play_stacks as play_stacks_rules

if TYPE_CHECKING:
    from ..engine_core.state import CardState
    from ..variants import Suit, Variant


def is_clued(card: CardState) -> bool:
    return card.num_positive_clues > 0


def is_fully_known(card: CardState) -> bool:
    """The holder can deduce exactly one identity for the card."""
    return len(card.possible_cards) == 1


def all_identities(variant: Variant) -> tuple[Identity, ...]:
    return tuple(
        (suit_index, rank)
        for suit_index in range(variant.num_suits)
        for rank in variant.ranks
    )


def touches_card(
    clue_type: ClueType,
    clue_value: int,
    suit: Suit,
    rank: int,
    variant: Variant,
) -> bool:
    """Whether a clue touches a card of the given identity."""
    special = variant.special_rank is not None and rank == variant.special_rank

    if clue_type == ClueType.COLOR:
        if variant.color_clues_touch_nothing:
            return False
        if suit.all_clue_colors:
            return True
        if suit.no_clue_colors:
            return False
        if special and variant.special_rank_all_clue_colors:
            return True
        if special and variant.special_rank_no_clue_colors:
            return False
        if not 0 <= clue_value < len(variant.clue_colors):
            return False
        return variant.clue_colors[clue_value] in suit.clue_colors

    if variant.rank_clues_touch_nothing:
        return False
    if rank == START_CARD_RANK:
        return False
    if suit.all_clue_ranks:
        return True
    if suit.no_clue_ranks:
        return False
    if special and variant.special_rank_all_clue_ranks:
        return True
    if special and variant.special_rank_no_clue_ranks:
        return False
    return clue_value == rank


def num_discarded_copies(deck: Iterable[CardState], suit_index: int, rank: int) -> int:
    return sum(
        1
        for card in deck
        if card.location == CardLocation.DISCARD
        and card.suit_index == suit_index
        and card.rank == rank
    )


def copies_left(deck: Sequence[CardState], suit_index: int, rank: int, variant: Variant) -> int:
    total = deck_rules.num_copies_of_card(variant.suit(suit_index), rank, variant)
    return total - num_discarded_copies(deck, suit_index, rank)


def needs_to_be_played(
    suit_index: int,
    rank: int,
    deck: Sequence[CardState],
    play_stacks: Sequence[Sequence[int]],
    play_stack_directions: Sequence[StackDirection | None],
    play_stack_starts: Sequence[int | None],
    variant: Variant,
) -> bool:
    """
    A card needs to be played if some way of finishing its stack still
    includes its rank and every rank before it still has a copy left.
    """
    sequences = play_stacks_rules.remaining_sequences(
        suit_index,
        play_stacks[suit_index],
        play_stack_directions[suit_index],
        play_stack_starts[suit_index],
        variant,
    )
    for sequence in sequences:
        if rank not in sequence:
            continue
        before = sequence[:sequence.index(rank)]
        if all(copies_left(deck, suit_index, r, variant) > 0 for r in before):
            return True
    return False


def is_critical(suit_index: int, rank: int, deck: Sequence[CardState], variant: Variant) -> bool:
    """Only one copy of this card identity is left."""
    return copies_left(deck, suit_index, rank, variant) == 1


def status(
    suit_index: int,
    rank: int,
    deck: Sequence[CardState],
    play_stacks: Sequence[Sequence[int]],
    play_stack_directions: Sequence[StackDirection | None],
    play_stack_starts: Sequence[int | None],
    variant: Variant,
) -> CardStatus:
    if not needs_to_be_played(
        suit_index,
        rank,
        deck,
        play_stacks,
        play_stack_directions,
        play_stack_starts,
        variant,
    ):
        return CardStatus.TRASH
    if is_critical(suit_index, rank, deck, variant):
        return CardStatus.CRITICAL
    return CardStatus.NEEDS_TO_BE_PLAYED


def trash_identities(
    deck: Sequence[CardState],
    play_stacks: Sequence[Sequence[int]],
    play_stack_directions: Sequence[StackDirection | None],
    play_stack_starts: Sequence[int | None],
    variant: Variant,
) -> frozenset[Identity]:
    """Every card identity that no longer needs to be played."""
    return frozenset(
        (suit_index, rank)
        for suit_index, rank in all_identities(variant)
        if not needs_to_be_played(
            suit_index,
            rank,
            deck,
            play_stacks,
            play_stack_directions,
            play_stack_starts,
            variant,
        )
    )


def is_known_trash(card: CardState, trash: frozenset[Identity]) -> bool:
    """The holder can prove the card is worthless: every possibility is trash."""
    if not card.possible_cards:
        return False
    return all(identity in trash for identity in card.possible_cards)
