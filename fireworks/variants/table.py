"""
Variant Table - Hand-authored definitions of the supported variants.

The table is the read-only rule source the reducers query by name.
Suits are defined once and combined into variants below.
"""

from __future__ import annotations

from ..errors import UnknownVariantError
from .variant import DEFAULT_RANKS, START_CARD_RANK, Suit, Variant


RED = Suit(name="Red", abbreviation="R", clue_colors=("Red",))
YELLOW = Suit(name="Yellow", abbreviation="Y", clue_colors=("Yellow",))
GREEN = Suit(name="Green", abbreviation="G", clue_colors=("Green",))
BLUE = Suit(name="Blue", abbreviation="B", clue_colors=("Blue",))
PURPLE = Suit(name="Purple", abbreviation="P", clue_colors=("Purple",))
TEAL = Suit(name="Teal", abbreviation="T", clue_colors=("Teal",))

BLACK = Suit(name="Black", abbreviation="K", clue_colors=("Black",), one_of_each=True)
RAINBOW = Suit(name="Rainbow", abbreviation="M", all_clue_colors=True)
PINK = Suit(name="Pink", abbreviation="I", clue_colors=("Pink",), all_clue_ranks=True)
WHITE = Suit(name="White", abbreviation="W", no_clue_colors=True)
BROWN = Suit(name="Brown", abbreviation="N", clue_colors=("Brown",), no_clue_ranks=True)
PURPLE_REVERSED = Suit(
    name="Purple Reversed",
    abbreviation="P",
    clue_colors=("Purple",),
    reversed=True,
)

STANDARD_SUITS = (RED, YELLOW, GREEN, BLUE, PURPLE, TEAL)


def _standard(num_suits: int) -> tuple[Suit, ...]:
    return STANDARD_SUITS[:num_suits]


def _colors_of(suits: tuple[Suit, ...]) -> tuple[str, ...]:
    """Collect the clue colors used by a suit list, in suit order."""
    colors: list[str] = []
    for suit in suits:
        for color in suit.clue_colors:
            if color not in colors:
                colors.append(color)
    return tuple(colors)


def _with_special_suit(special: Suit) -> tuple[Suit, ...]:
    return _standard(4) + (special,)


def _define_variants() -> list[Variant]:
    """Build every variant in the table."""
    variants = []

    # Plain suit counts
    for num_suits, name in [
        (5, "No Variant"),
        (3, "3 Suits"),
        (4, "4 Suits"),
        (6, "6 Suits"),
    ]:
        suits = _standard(num_suits)
        variants.append(Variant(name=name, suits=suits, clue_colors=_colors_of(suits)))

    # Special suits
    for special in [BLACK, RAINBOW, PINK, WHITE, BROWN]:
        suits = _with_special_suit(special)
        variants.append(Variant(
            name=f"{special.name} (5 Suits)",
            suits=suits,
            clue_colors=_colors_of(suits),
        ))

    suits = _standard(4) + (PURPLE_REVERSED,)
    variants.append(Variant(
        name="Reversed (5 Suits)",
        suits=suits,
        clue_colors=_colors_of(suits),
    ))

    # Special ranks
    suits = _standard(5)
    variants.append(Variant(
        name="Rainbow-Ones (5 Suits)",
        suits=suits,
        clue_colors=_colors_of(suits),
        special_rank=1,
        special_rank_all_clue_colors=True,
    ))
    variants.append(Variant(
        name="Pink-Ones (5 Suits)",
        suits=suits,
        clue_colors=_colors_of(suits),
        special_rank=1,
        special_rank_all_clue_ranks=True,
    ))

    # Rule variants
    variants.append(Variant(
        name="Up or Down (5 Suits)",
        suits=suits,
        clue_colors=_colors_of(suits),
        ranks=DEFAULT_RANKS + (START_CARD_RANK,),
        up_or_down=True,
    ))
    variants.append(Variant(
        name="Throw It in a Hole (5 Suits)",
        suits=suits,
        clue_colors=_colors_of(suits),
        throw_it_in_a_hole=True,
    ))
    variants.append(Variant(
        name="Sudoku (5 Suits)",
        suits=suits,
        clue_colors=_colors_of(suits),
        sudoku=True,
    ))
    variants.append(Variant(
        name="Critical Fours (5 Suits)",
        suits=suits,
        clue_colors=_colors_of(suits),
        critical_rank=4,
    ))
    variants.append(Variant(
        name="Cow & Pig (5 Suits)",
        suits=suits,
        clue_colors=_colors_of(suits),
        cow_and_pig=True,
    ))
    variants.append(Variant(
        name="Duck (5 Suits)",
        suits=suits,
        clue_colors=_colors_of(suits),
        duck=True,
    ))

    six = _standard(6)
    variants.append(Variant(
        name="Clue Starved (6 Suits)",
        suits=six,
        clue_colors=_colors_of(six),
        clue_starved=True,
    ))

    return variants


VARIANTS: dict[str, Variant] = {variant.name: variant for variant in _define_variants()}


def get_variant(name: str) -> Variant:
    """Look up a variant by name."""
    try:
        return VARIANTS[name]
    except KeyError:
        raise UnknownVariantError(
            f"Unknown variant: {name}",
            details={"variant_name": name},
        ) from None


def variant_names() -> list[str]:
    return list(VARIANTS)
