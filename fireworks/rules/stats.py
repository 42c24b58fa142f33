"""
Statistics formulas: max score, pace, efficiency and double discards.

These are pure functions of a state snapshot; the stats reducer decides
when each one is recomputed.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence

from ..engine_core.state import CardLocation, PaceRisk
from . import card as card_rules
from . import clue_tokens as clue_tokens_rules
from . import hand as hand_rules
from . import play_stacks as play_stacks_rules

if TYPE_CHECKING:
    from ..engine_core.state import CardNote, CardState, GameState, Identity, StackDirection
    from ..variants import Variant


def max_score_per_stack(
    deck: Sequence[CardState],
    play_stacks: Sequence[Sequence[int]],
    play_stack_directions: Sequence[StackDirection | None],
    play_stack_starts: Sequence[int | None],
    variant: Variant,
) -> tuple[int, ...]:
    """
    Highest stack size still reachable for each suit.

    A stack stops growing at the first rank whose copies have all been
    discarded.
    """
    scores = []
    for suit_index, play_stack in enumerate(play_stacks):
        sequences = play_stacks_rules.remaining_sequences(
            suit_index,
            play_stack,
            play_stack_directions[suit_index],
            play_stack_starts[suit_index],
            variant,
        )
        best = 0
        for sequence in sequences:
            reachable = 0
            for rank in sequence:
                if card_rules.copies_left(deck, suit_index, rank, variant) <= 0:
                    break
                reachable += 1
            best = max(best, reachable)
        scores.append(len(play_stack) + best)
    return tuple(scores)


def pace(
    score: int,
    deck_size: int,
    max_score: int,
    num_players: int,
    game_over: bool,
) -> int | None:
    """
    Discards the team can still afford before the max score becomes unreachable.

    None once the game is over or the deck has run out.
    """
    if game_over or deck_size <= 0:
        return None
    return score + deck_size + num_players - max_score


def pace_risk(current_pace: int | None, num_players: int) -> PaceRisk:
    if current_pace is None:
        return PaceRisk.NULL
    if current_pace <= 0:
        return PaceRisk.ZERO
    if current_pace <= num_players // 2:
        return PaceRisk.HIGH
    if current_pace < num_players:
        return PaceRisk.MEDIUM
    return PaceRisk.LOW


def cards_gotten(deck: Sequence[CardState], trash: frozenset[Identity]) -> int:
    """
    Cards the team has already "gotten": played cards, cards attempted into
    the hole, and clued cards in hands that are not known trash.
    """
    gotten = 0
    for card in deck:
        if card.location in (CardLocation.PLAY_STACK, CardLocation.HOLE):
            gotten += 1
        elif (
            card.location == CardLocation.HAND
            and card_rules.is_clued(card)
            and not card_rules.is_known_trash(card, trash)
        ):
            gotten += 1
    return gotten


def clues_still_usable_not_rounded(
    score_per_stack: Sequence[int],
    max_score_per_stack: Sequence[int],
    deck_size: int,
    num_players: int,
    current_clues: float,
    variant: Variant,
    game_over: bool,
) -> float | None:
    """
    Clues the team can still give before the game ends: the tokens in hand,
    one per discard that pace still allows, and one per stack that can still
    be finished.
    """
    if game_over:
        return None

    missing_score = max(0, sum(max_score_per_stack) - sum(score_per_stack))
    plays_during_final_round = min(missing_score, num_players)
    plays_before_final_round = missing_score - plays_during_final_round
    discards_before_final_round = max(0, deck_size - plays_before_final_round)

    clues_from_discards = discards_before_final_round * clue_tokens_rules.discard_value(variant)
    clues_from_suits = sum(
        clue_tokens_rules.suit_value(variant)
        for played, maximum in zip(score_per_stack, max_score_per_stack)
        if played < maximum == variant.max_stack_size
    )
    return current_clues + clues_from_discards + clues_from_suits


def double_discard(
    order: int,
    state: GameState,
    player_index: int | None,
    variant: Variant,
) -> int | None:
    """
    The just-discarded card, if discarding the other copy would lose points.

    Returns the order of the discarded card, or None when the player about to
    act (player_index) is not in a double-discard situation.
    """
    if player_index is None:
        return None

    # A locked hand cannot discard
    if hand_rules.is_locked(state.hands[player_index], state.deck):
        return None

    discarded = state.deck[order]
    if discarded.identity is None:
        return None
    suit_index, rank = discarded.identity

    if not card_rules.needs_to_be_played(
        suit_index,
        rank,
        state.deck,
        state.play_stacks,
        state.play_stack_directions,
        state.play_stack_starts,
        variant,
    ):
        return None

    # Someone already knows they hold the other copy
    for card in state.deck:
        if (
            card.order != order
            and card.location == CardLocation.HAND
            and card.identity == discarded.identity
            and card_rules.is_fully_known(card)
        ):
            return None

    if card_rules.copies_left(state.deck, suit_index, rank, variant) == 1:
        return order
    return None


def cards_gotten_by_notes(
    deck: Sequence[CardState],
    trash: frozenset[Identity],
    notes: Sequence[CardNote | None],
) -> int:
    """
    Adjustment to cards_gotten when the viewer's notes are trusted.

    A note marking a card as clued or finessed counts it as gotten; a note
    marking it known trash or unclued does not. Cards without a meaningful
    note keep their clue-based value.
    """
    adjustment = 0
    for card in deck:
        if card.location != CardLocation.HAND or card.order >= len(notes):
            continue
        note = notes[card.order]
        if note is None or not (note.clued or note.finessed or note.known_trash or note.unclued):
            continue

        gotten_by_clue = card_rules.is_clued(card) and not card_rules.is_known_trash(card, trash)
        gotten_by_note = (note.clued or note.finessed) and not (note.known_trash or note.unclued)
        adjustment += int(gotten_by_note) - int(gotten_by_clue)
    return adjustment
