"""
Clue token economy.

Clue tokens are stored in "adjusted" units: in clue-starved variants every
real clue is worth two units, so a discard (half a clue) is one unit.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.action import ActionDiscard, ActionPlay

if TYPE_CHECKING:
    from ..variants import Variant


MAX_CLUE_NUM = 8


def get_adjusted(clue_tokens: int, variant: Variant) -> int:
    """Convert real clues to stored units."""
    return clue_tokens * 2 if variant.clue_starved else clue_tokens


def get_unadjusted(clue_tokens_adjusted: int, variant: Variant) -> float:
    """Convert stored units back to real clues."""
    return clue_tokens_adjusted / 2 if variant.clue_starved else clue_tokens_adjusted


def max_clue_tokens(variant: Variant) -> int:
    return get_adjusted(MAX_CLUE_NUM, variant)


def at_max(clue_tokens: int, variant: Variant) -> bool:
    return clue_tokens >= max_clue_tokens(variant)


def gain(
    action: ActionPlay | ActionDiscard,
    clue_tokens: int,
    variant: Variant,
    play_stack_complete: bool = False,
) -> int:
    """Return the clue tokens after a play or discard."""
    if _should_generate_clue(action, clue_tokens, variant, play_stack_complete):
        return clue_tokens + 1
    return clue_tokens


def _should_generate_clue(
    action: ActionPlay | ActionDiscard,
    clue_tokens: int,
    variant: Variant,
    play_stack_complete: bool,
) -> bool:
    if at_max(clue_tokens, variant):
        return False

    # Plays only give a clue back when they finish a stack; misplays never do
    if isinstance(action, ActionPlay):
        return play_stack_complete
    return not action.failed


def discard_value(variant: Variant) -> float:
    """Real clues regained by one discard."""
    return 0.5 if variant.clue_starved else 1


def suit_value(variant: Variant) -> float:
    """Real clues regained by finishing a stack."""
    return 0.5 if variant.clue_starved else 1
