"""Variant rule table - read-only rule facts queried by the reducers."""

from .variant import (
    ClueType,
    Suit,
    Variant,
    has_reversed_suits,
    DEFAULT_RANKS,
    START_CARD_RANK,
    UNKNOWN_CARD_RANK,
)
from .table import VARIANTS, get_variant, variant_names

__all__ = [
    "ClueType",
    "Suit",
    "Variant",
    "has_reversed_suits",
    "DEFAULT_RANKS",
    "START_CARD_RANK",
    "UNKNOWN_CARD_RANK",
    "VARIANTS",
    "get_variant",
    "variant_names",
]
