"""
Statistics Sub-Reducer - Derived numbers shown to players.

Reads both the state before the action (for what cards looked like when
they were played) and the draft after the card and turn stages.
"""

from __future__ import annotations
import math
from dataclasses import replace
from typing import TYPE_CHECKING, Sequence

from .action import ActionClue, ActionDiscard, ActionPlay, ActionStrike
from .state import TurnPhase
from ..rules import card as card_rules
from ..rules import clue_tokens as clue_tokens_rules
from ..rules import stats as stats_rules
from ..rules import turn as turn_rules

if TYPE_CHECKING:
    from .action import GameAction
    from .metadata import GameMetadata, ReducerFlags
    from .state import CardNote, GameState, StatsState
    from ..variants import Variant


def stats_reducer(
    stats: StatsState,
    action: GameAction,
    original_state: GameState,
    current_state: GameState,
    flags: ReducerFlags,
    metadata: GameMetadata,
    our_notes: Sequence[CardNote | None] | None = None,
) -> StatsState:
    """
    Return the statistics after an action.

    Args:
        stats: Statistics before the action
        action: The action being applied
        original_state: State before the action
        current_state: Draft with cards, stacks and turn already updated
        flags: How the viewer relates to the game
        metadata: Game metadata
        our_notes: The viewer's card notes, indexed by card order
    """
    variant = metadata.variant
    num_players = metadata.options.num_players
    hole_hidden = variant.throw_it_in_a_hole and flags.sees_as_player and not flags.finished

    potential_clues_lost = _potential_clues_lost(
        stats.potential_clues_lost, action, original_state, current_state, variant, hole_hidden,
    )

    # Double discard
    double_discard = stats.double_discard
    if isinstance(action, ActionDiscard):
        double_discard = stats_rules.double_discard(
            action.order,
            current_state,
            turn_rules.player_to_act(current_state.turn, num_players),
            variant,
        )
    elif isinstance(action, (ActionPlay, ActionClue)):
        double_discard = None

    # Max score
    max_score_per_stack = stats.max_score_per_stack
    if isinstance(action, (ActionPlay, ActionDiscard)):
        max_score_per_stack = stats_rules.max_score_per_stack(
            current_state.deck,
            current_state.play_stacks,
            current_state.play_stack_directions,
            current_state.play_stack_starts,
            variant,
        )
    max_score = sum(max_score_per_stack)

    # Pace
    game_over = current_state.turn.game_over
    deck_size = current_state.cards_remaining_in_the_deck
    score = current_state.num_attempted_cards_played if hole_hidden else current_state.score
    pace = stats_rules.pace(score, deck_size, max_score, num_players, game_over)

    # Efficiency
    trash = card_rules.trash_identities(
        current_state.deck,
        current_state.play_stacks,
        current_state.play_stack_directions,
        current_state.play_stack_starts,
        variant,
    )
    cards_gotten = stats_rules.cards_gotten(current_state.deck, trash)

    # Future efficiency
    clues_not_rounded = stats_rules.clues_still_usable_not_rounded(
        [len(stack) for stack in current_state.play_stacks],
        max_score_per_stack,
        deck_size,
        num_players,
        clue_tokens_rules.get_unadjusted(current_state.clue_tokens, variant),
        variant,
        game_over,
    )
    cards_gotten_by_notes = None
    if our_notes is not None:
        cards_gotten_by_notes = stats_rules.cards_gotten_by_notes(
            current_state.deck, trash, our_notes,
        )

    num_subsequent_blind_plays, num_subsequent_misplays = _sound_effect_counters(
        stats, action, original_state,
    )

    return replace(
        stats,
        max_score=max_score,
        max_score_per_stack=max_score_per_stack,
        pace=pace,
        pace_risk=stats_rules.pace_risk(pace, num_players),
        final_round_effectively_started=(
            deck_size == 0
            or current_state.turn.phase == TurnPhase.FINAL_ROUND
            or (pace is not None and pace <= 0)
        ),
        cards_gotten=cards_gotten,
        potential_clues_lost=potential_clues_lost,
        clues_still_usable=None if clues_not_rounded is None else math.floor(clues_not_rounded),
        clues_still_usable_not_rounded=clues_not_rounded,
        cards_gotten_by_notes=cards_gotten_by_notes,
        double_discard=double_discard,
        num_subsequent_blind_plays=num_subsequent_blind_plays,
        num_subsequent_misplays=num_subsequent_misplays,
        num_attempted_cards_played=current_state.num_attempted_cards_played,
    )


def _potential_clues_lost(
    potential_clues_lost: float,
    action: GameAction,
    original_state: GameState,
    current_state: GameState,
    variant: Variant,
    hole_hidden: bool,
) -> float:
    if isinstance(action, ActionClue):
        return potential_clues_lost + 1

    # Players in a hole game must not learn about strikes from the stats
    if isinstance(action, ActionStrike) and not hole_hidden:
        return potential_clues_lost + clue_tokens_rules.discard_value(variant)

    if isinstance(action, ActionPlay) and action.suit_index >= 0:
        play_stack = current_state.play_stacks[action.suit_index]
        completed = action.order in play_stack and len(play_stack) == variant.max_stack_size
        # The bonus clue for finishing a stack is wasted when tokens are already full
        if completed and clue_tokens_rules.at_max(original_state.clue_tokens, variant):
            return potential_clues_lost + clue_tokens_rules.suit_value(variant)

    return potential_clues_lost


def _sound_effect_counters(
    stats: StatsState,
    action: GameAction,
    original_state: GameState,
) -> tuple[int, int]:
    """Consecutive blind plays and misplays, judged on the card before the action."""
    blind_plays = stats.num_subsequent_blind_plays
    misplays = stats.num_subsequent_misplays

    if isinstance(action, (ActionPlay, ActionDiscard)):
        failed = isinstance(action, ActionDiscard) and action.failed
        card = original_state.deck[action.order]
        attempted_play = isinstance(action, ActionPlay) or failed
        if attempted_play and not card_rules.is_clued(card):
            blind_plays += 1
        else:
            blind_plays = 0
        misplays = misplays + 1 if failed else 0
    elif isinstance(action, ActionClue):
        blind_plays = 0
        misplays = 0

    return blind_plays, misplays
