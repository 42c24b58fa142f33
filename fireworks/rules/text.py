"""
Narration - Human-readable log lines for game actions.

The reducer only talks to the Narrator protocol; TextNarrator is the default
English implementation.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING, Protocol, Sequence

from ..engine_core.state import EndCondition
from ..variants.variant import ClueType, START_CARD_RANK
from . import hand as hand_rules

if TYPE_CHECKING:
    from ..engine_core.action import ActionClue, ActionDiscard, ActionPlay
    from ..engine_core.metadata import GameMetadata, ReducerFlags
    from ..variants import Variant


HYPO_PREFIX = "[Hypo] "
WORDS = ("zero", "one", "two", "three", "four", "five", "six")


class Narrator(Protocol):
    """Produces the text of log entries."""

    def goes_first(self, player_index: int | None, metadata: GameMetadata) -> str: ...

    def clue(
        self,
        action: ActionClue,
        target_hand: Sequence[int],
        hypothetical: bool,
        metadata: GameMetadata,
    ) -> str: ...

    def play(
        self,
        action: ActionPlay,
        slot: int | None,
        touched: bool,
        flags: ReducerFlags,
        metadata: GameMetadata,
    ) -> str: ...

    def discard(
        self,
        action: ActionDiscard,
        slot: int | None,
        touched: bool,
        flags: ReducerFlags,
        metadata: GameMetadata,
    ) -> str: ...

    def game_over(
        self,
        end_condition: EndCondition,
        player_index: int,
        score: int,
        metadata: GameMetadata,
        votes: Sequence[int] | None,
    ) -> str: ...

    def player_times(
        self,
        player_times: Sequence[int],
        duration: int,
        metadata: GameMetadata,
    ) -> list[str]: ...


def card_name(suit_index: int, rank: int, variant: Variant) -> str:
    suit = variant.suit(suit_index)
    rank_name = "S" if rank == START_CARD_RANK else str(rank)
    return f"{suit.display_name.lower()} {rank_name}"


def clue_name(clue_type: ClueType, value: int, variant: Variant) -> str:
    if clue_type == ClueType.COLOR:
        if 0 <= value < len(variant.clue_colors):
            return variant.clue_colors[value].lower()
        return "unknown"
    if 0 <= value < len(WORDS):
        return WORDS[value]
    return str(value)


def milliseconds_to_clock_string(milliseconds: int) -> str:
    """Format a duration as m:ss, rounding up to the next second."""
    # Untimed games count time in negative values
    seconds = math.ceil(abs(milliseconds) / 1000)
    return f"{seconds // 60}:{seconds % 60:02d}"


def _join_names(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


class TextNarrator:
    """Default English narration."""

    def goes_first(self, player_index: int | None, metadata: GameMetadata) -> str:
        return f"{metadata.player_name(player_index)} goes first"

    def clue(
        self,
        action: ActionClue,
        target_hand: Sequence[int],
        hypothetical: bool,
        metadata: GameMetadata,
    ) -> str:
        variant = metadata.variant
        giver = metadata.player_name(action.giver)
        target = metadata.player_name(action.target)
        prefix = HYPO_PREFIX if hypothetical else ""

        # Animal variants hide what the clue was, only which slots it touched
        if variant.cow_and_pig or variant.duck:
            if variant.cow_and_pig:
                verb = "moos" if action.clue.type == ClueType.COLOR else "oinks"
            else:
                verb = "quacks"
            possessive = "'" if target.endswith("s") else "'s"
            slots = sorted(
                slot
                for slot in (hand_rules.card_slot(order, target_hand) for order in action.touched)
                if slot is not None
            )
            slot_word = "slot" if len(slots) == 1 else "slots"
            slots_text = "/".join(str(slot) for slot in slots)
            return f"{prefix}{giver} {verb} at {target}{possessive} {slot_word} {slots_text}"

        count = len(action.touched)
        word = WORDS[count] if count < len(WORDS) else str(count)
        name = clue_name(action.clue.type, action.clue.value, variant)
        if count != 1:
            name += "s"
        return f"{prefix}{giver} tells {target} about {word} {name}"

    def play(
        self,
        action: ActionPlay,
        slot: int | None,
        touched: bool,
        flags: ReducerFlags,
        metadata: GameMetadata,
    ) -> str:
        variant = metadata.variant
        player_name = metadata.player_name(action.player_index)

        if (
            action.suit_index == -1
            or action.rank == -1
            or (variant.throw_it_in_a_hole and flags.sees_as_player)
        ):
            name = "a card"
        else:
            name = card_name(action.suit_index, action.rank, variant)

        location = "the deck" if slot is None else f"slot #{slot}"
        suffix = "" if touched else " (blind)"
        prefix = HYPO_PREFIX if flags.hypothetical else ""
        return f"{prefix}{player_name} plays {name} from {location}{suffix}"

    def discard(
        self,
        action: ActionDiscard,
        slot: int | None,
        touched: bool,
        flags: ReducerFlags,
        metadata: GameMetadata,
    ) -> str:
        variant = metadata.variant
        player_name = metadata.player_name(action.player_index)

        verb = "discards"
        if action.failed:
            verb = "fails to play"
            if variant.throw_it_in_a_hole and flags.sees_as_player:
                verb = "plays"

        if action.suit_index == -1 or action.rank == -1:
            name = "a card"
        else:
            name = card_name(action.suit_index, action.rank, variant)

        location = "the deck" if slot is None else f"slot #{slot}"

        suffix = ""
        if action.failed and touched and not variant.throw_it_in_a_hole:
            suffix = " (clued)"
        if action.failed and slot is not None and not touched:
            suffix = " (blind)"

        prefix = HYPO_PREFIX if flags.hypothetical else ""
        return f"{prefix}{player_name} {verb} {name} from {location}{suffix}"

    def game_over(
        self,
        end_condition: EndCondition,
        player_index: int,
        score: int,
        metadata: GameMetadata,
        votes: Sequence[int] | None,
    ) -> str:
        player_name = metadata.player_name(player_index)

        if end_condition in (EndCondition.IN_PROGRESS, EndCondition.NORMAL):
            return f"Players score {score} points."
        if end_condition == EndCondition.TIMEOUT:
            return f"{player_name} ran out of time!"
        if end_condition == EndCondition.TERMINATED_BY_PLAYER:
            return f"{player_name} terminated the game!"
        if end_condition == EndCondition.TERMINATED_BY_VOTE:
            if votes is None:
                voters = "The players"
            else:
                voters = _join_names(sorted(metadata.player_name(i) for i in votes))
            return f"{voters} voted to terminate the game!"
        if end_condition == EndCondition.IDLE_TIMEOUT:
            return "Players were idle for too long."
        if end_condition == EndCondition.CHARACTER_SOFTLOCK:
            return f"{player_name} was left with 0 clues!"
        if end_condition == EndCondition.ALL_OR_NOTHING_SOFTLOCK:
            return f"{player_name} was left with 0 clues and 0 cards!"
        return "Players lose!"

    def player_times(
        self,
        player_times: Sequence[int],
        duration: int,
        metadata: GameMetadata,
    ) -> list[str]:
        lines = []
        for player_index, milliseconds in enumerate(player_times):
            player_name = metadata.player_name(player_index)
            clock = milliseconds_to_clock_string(milliseconds)
            if metadata.options.timed:
                lines.append(f"{player_name} had {clock} left")
            else:
                lines.append(f"{player_name} took: {clock}")
        lines.append(f"The total game duration was: {milliseconds_to_clock_string(duration)}")
        return lines


DEFAULT_NARRATOR = TextNarrator()
