"""
Game Setup - Creates the pre-deal state of a game.

This module handles:
- One unknown card per physical card in the variant's deck
- Empty hands, play stacks and discard stacks
- A full set of clue tokens
- Starting statistics (max score, starting pace)

No cards are dealt here; the initial deal arrives as draw actions.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .state import CardState, GameState, StatsState, TurnState
from ..rules import card as card_rules
from ..rules import clue_tokens as clue_tokens_rules
from ..rules import deck as deck_rules
from ..rules import play_stacks as play_stacks_rules
from ..rules import stats as stats_rules

if TYPE_CHECKING:
    from .metadata import GameMetadata
    from .state import CardStatus, StackDirection
    from ..variants import Variant


def initial_card_status(
    deck: list[CardState],
    play_stacks: list[list[int]],
    play_stack_directions: list[StackDirection | None],
    play_stack_starts: list[int | None],
    variant: Variant,
) -> list[dict[int, CardStatus]]:
    return [
        {
            rank: card_rules.status(
                suit_index,
                rank,
                deck,
                play_stacks,
                play_stack_directions,
                play_stack_starts,
                variant,
            )
            for rank in variant.ranks
        }
        for suit_index in range(variant.num_suits)
    ]


def initial_turn_state(metadata: GameMetadata) -> TurnState:
    return TurnState(current_player_index=metadata.options.starting_player)


def initial_stats_state(
    deck: list[CardState],
    play_stacks: list[list[int]],
    play_stack_directions: list[StackDirection | None],
    play_stack_starts: list[int | None],
    metadata: GameMetadata,
) -> StatsState:
    """Statistics before any card has been dealt."""
    variant = metadata.variant
    num_players = metadata.options.num_players
    deck_size = deck_rules.starting_deck_size(metadata)

    max_score_per_stack = stats_rules.max_score_per_stack(
        deck, play_stacks, play_stack_directions, play_stack_starts, variant,
    )
    max_score = sum(max_score_per_stack)
    pace = stats_rules.pace(0, deck_size, max_score, num_players, game_over=False)
    clues_not_rounded = stats_rules.clues_still_usable_not_rounded(
        [0] * variant.num_suits,
        max_score_per_stack,
        deck_size,
        num_players,
        clue_tokens_rules.MAX_CLUE_NUM,
        variant,
        game_over=False,
    )

    return StatsState(
        max_score=max_score,
        max_score_per_stack=max_score_per_stack,
        pace=pace,
        pace_risk=stats_rules.pace_risk(pace, num_players),
        clues_still_usable=int(clues_not_rounded),
        clues_still_usable_not_rounded=clues_not_rounded,
    )


def initial_game_state(metadata: GameMetadata) -> GameState:
    """
    Create the state of a game before the initial deal.

    Args:
        metadata: Players, options and viewer seat

    Returns:
        GameState with every card in the deck and a full set of clue tokens
    """
    variant = metadata.variant
    num_suits = variant.num_suits
    total_cards = deck_rules.total_cards(variant)

    deck = [CardState(order=order) for order in range(total_cards)]
    play_stacks: list[list[int]] = [[] for _ in range(num_suits)]
    play_stack_directions: list[StackDirection | None] = [
        play_stacks_rules.default_direction(suit_index, variant)
        for suit_index in range(num_suits)
    ]
    play_stack_starts: list[int | None] = [None] * num_suits

    return GameState(
        deck=deck,
        hands=[[] for _ in range(metadata.options.num_players)],
        play_stacks=play_stacks,
        discard_stacks=[[] for _ in range(num_suits)],
        play_stack_directions=play_stack_directions,
        play_stack_starts=play_stack_starts,
        card_status=initial_card_status(
            deck, play_stacks, play_stack_directions, play_stack_starts, variant,
        ),
        clue_tokens=clue_tokens_rules.get_adjusted(clue_tokens_rules.MAX_CLUE_NUM, variant),
        turn=initial_turn_state(metadata),
        stats=initial_stats_state(
            deck, play_stacks, play_stack_directions, play_stack_starts, metadata,
        ),
        cards_remaining_in_the_deck=total_cards,
    )
