"""
Variant - Static rule facts for a single game variant.

A variant is read-only data: the suits in play, which clues can be given,
and the feature flags that change how the reducers behave. Nothing in the
engine mutates a Variant.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


# Ranks
START_CARD_RANK = 7  # "Up or Down" variants
UNKNOWN_CARD_RANK = -1
DEFAULT_RANKS = (1, 2, 3, 4, 5)


class ClueType(Enum):
    """The two kinds of clue a player can give."""
    COLOR = 0
    RANK = 1


@dataclass(frozen=True)
class Suit:
    """
    A suit definition.

    clue_colors lists the clue colors that touch this suit. Special suits
    override that through the all/no flags.
    """
    name: str
    abbreviation: str
    clue_colors: tuple[str, ...] = ()

    all_clue_colors: bool = False  # Rainbow
    no_clue_colors: bool = False  # White
    all_clue_ranks: bool = False  # Pink
    no_clue_ranks: bool = False  # Brown

    one_of_each: bool = False  # Black, Dark suits
    reversed: bool = False

    @property
    def display_name(self) -> str:
        return self.name.replace(" Reversed", "")


@dataclass(frozen=True)
class Variant:
    """
    Complete rule facts for a variant.

    Queried by the reducers on every action.
    """
    name: str
    suits: tuple[Suit, ...]
    clue_colors: tuple[str, ...]
    clue_ranks: tuple[int, ...] = DEFAULT_RANKS
    ranks: tuple[int, ...] = DEFAULT_RANKS

    # Special ranks (e.g. "Rainbow-Ones")
    special_rank: int | None = None
    special_rank_all_clue_colors: bool = False
    special_rank_all_clue_ranks: bool = False
    special_rank_no_clue_colors: bool = False
    special_rank_no_clue_ranks: bool = False

    critical_rank: int | None = None
    clue_starved: bool = False
    color_clues_touch_nothing: bool = False
    rank_clues_touch_nothing: bool = False
    cow_and_pig: bool = False
    duck: bool = False
    up_or_down: bool = False
    throw_it_in_a_hole: bool = False
    sudoku: bool = False

    @property
    def num_suits(self) -> int:
        return len(self.suits)

    @property
    def max_stack_size(self) -> int:
        return len(DEFAULT_RANKS)

    def suit(self, suit_index: int) -> Suit:
        return self.suits[suit_index]


def has_reversed_suits(variant: Variant) -> bool:
    """Stacks in this variant may be played downward."""
    return variant.up_or_down or any(suit.reversed for suit in variant.suits)
