"""
Play stack rules: direction, starting rank, and which ranks a stack still accepts.

Most stacks go 1 to 5. Reversed suits go 5 to 1. In "Up or Down" variants a
stack goes whichever way its first card (1, 5 or START) decides. In "Sudoku"
variants a stack starts at any rank and wraps from 5 back to 1.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence

from ..engine_core.state import StackDirection
from ..variants.variant import DEFAULT_RANKS, START_CARD_RANK

if TYPE_CHECKING:
    from ..engine_core.state import CardState
    from ..variants import Variant


UP_SEQUENCE = DEFAULT_RANKS
DOWN_SEQUENCE = tuple(reversed(DEFAULT_RANKS))


def direction(
    suit_index: int,
    play_stack: Sequence[int],
    deck: Sequence[CardState],
    variant: Variant,
) -> StackDirection:
    """Resolve the direction of a stack from the cards played on it."""
    if len(play_stack) == variant.max_stack_size:
        return StackDirection.FINISHED

    if variant.sudoku:
        return StackDirection.UP

    suit = variant.suit(suit_index)
    if not variant.up_or_down:
        return StackDirection.DOWN if suit.reversed else StackDirection.UP

    ranks = [deck[order].rank for order in play_stack]
    if not ranks:
        return StackDirection.UNDECIDED

    if ranks[0] == 1:
        return StackDirection.UP
    if ranks[0] == 5:
        return StackDirection.DOWN

    # A START card leaves the direction open until the next card
    if len(ranks) >= 2:
        if ranks[1] == 2:
            return StackDirection.UP
        if ranks[1] == 4:
            return StackDirection.DOWN

    return StackDirection.UNDECIDED


def stack_start_rank(
    play_stack: Sequence[int],
    deck: Sequence[CardState],
    variant: Variant,
) -> int | None:
    """Rank of the bottom card of a sudoku stack, or None if not yet known."""
    if not play_stack:
        return None
    return deck[play_stack[0]].rank


def default_direction(suit_index: int, variant: Variant) -> StackDirection:
    """Direction of a stack that nothing has been played on yet."""
    if variant.up_or_down:
        return StackDirection.UNDECIDED
    if variant.suit(suit_index).reversed:
        return StackDirection.DOWN
    return StackDirection.UP


def _rotation(start: int) -> tuple[int, ...]:
    i = UP_SEQUENCE.index(start)
    return UP_SEQUENCE[i:] + UP_SEQUENCE[:i]


def remaining_sequences(
    suit_index: int,
    play_stack: Sequence[int],
    stack_direction: StackDirection | None,
    stack_start: int | None,
    variant: Variant,
) -> list[tuple[int, ...]]:
    """
    Every order in which the stack could still be completed.

    Each entry lists the ranks still to be played, next rank first.
    A finished stack yields a single empty sequence.
    """
    if stack_direction is None:
        stack_direction = default_direction(suit_index, variant)
    played = len(play_stack)

    if stack_direction == StackDirection.FINISHED:
        return [()]

    if variant.sudoku:
        if stack_start in UP_SEQUENCE:
            return [_rotation(stack_start)[played:]]
        return [_rotation(start)[played:] for start in UP_SEQUENCE]

    if stack_direction == StackDirection.UP:
        return [UP_SEQUENCE[played:]]
    if stack_direction == StackDirection.DOWN:
        return [DOWN_SEQUENCE[played:]]

    # Undecided: only possible in "Up or Down"
    if played == 0:
        return [
            UP_SEQUENCE,
            DOWN_SEQUENCE,
            (START_CARD_RANK,) + UP_SEQUENCE[1:],
            (START_CARD_RANK,) + DOWN_SEQUENCE[1:],
        ]
    return [UP_SEQUENCE[1:], DOWN_SEQUENCE[1:]]
