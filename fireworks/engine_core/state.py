"""
Game State - The complete derived state of one game at a point in its history.

Design principles:
- Immutable-friendly: the reducer never mutates a state it was given
- Cards, turn and stats are frozen values, replaced rather than edited
- Containers are copied into a fresh draft before each action is applied
- Serializable: every field is plain data so snapshots can be exported
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from ..variants.variant import ClueType


class CardLocation(Enum):
    """Where a physical card currently is."""
    DECK = "deck"
    HAND = "hand"
    PLAY_STACK = "play_stack"
    DISCARD = "discard"
    HOLE = "hole"


class StackDirection(Enum):
    """Direction a play stack is being built in."""
    UNDECIDED = "undecided"
    UP = "up"
    DOWN = "down"
    FINISHED = "finished"


class CardStatus(Enum):
    """Playability of a card identity given the current stacks."""
    NEEDS_TO_BE_PLAYED = "needs_to_be_played"
    CRITICAL = "critical"
    TRASH = "trash"


class PaceRisk(Enum):
    """How close the team is to running out of pace."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ZERO = "zero"
    NULL = "null"  # Pace is not meaningful


class TurnPhase(Enum):
    """High-level turn phases."""
    PRE_DEAL = "pre_deal"
    IN_PROGRESS = "in_progress"
    FINAL_ROUND = "final_round"
    ENDED = "ended"


class EndCondition(Enum):
    """How a game ended. Values match the server's wire numbering."""
    IN_PROGRESS = 0
    NORMAL = 1
    STRIKEOUT = 2
    TIMEOUT = 3
    TERMINATED_BY_PLAYER = 4
    SPEEDRUN_FAIL = 5
    IDLE_TIMEOUT = 6
    CHARACTER_SOFTLOCK = 7
    ALL_OR_NOTHING_FAIL = 8
    ALL_OR_NOTHING_SOFTLOCK = 9
    TERMINATED_BY_VOTE = 10


# A card identity: (suit index, rank)
Identity = tuple[int, int]


@dataclass(frozen=True)
class CardState:
    """
    Everything known about one physical card.

    The order (draw order) is the card's identity for its whole life.
    suit_index / rank are None when the viewer cannot see the card.
    possible_cards is what the card's holder can deduce about it.
    """
    order: int
    location: CardLocation = CardLocation.DECK
    holder: int | None = None  # Player index while in a hand

    suit_index: int | None = None
    rank: int | None = None

    possible_cards_from_clues: tuple[Identity, ...] = ()
    possible_cards: tuple[Identity, ...] = ()

    positive_color_clues: tuple[int, ...] = ()
    positive_rank_clues: tuple[int, ...] = ()
    negative_color_clues: tuple[int, ...] = ()
    negative_rank_clues: tuple[int, ...] = ()
    num_positive_clues: int = 0

    segment_drawn: int | None = None
    segment_first_clued: int | None = None
    segment_played: int | None = None
    segment_discarded: int | None = None

    is_misplayed: bool = False
    dealt_to_starting_hand: bool = False

    # Derived annotations, recomputed on every action
    in_double_discard: bool = False
    is_known_trash: bool = False

    @property
    def identity(self) -> Identity | None:
        if self.suit_index is None or self.rank is None:
            return None
        return (self.suit_index, self.rank)


@dataclass(frozen=True)
class ClueRecord:
    """A clue that was given."""
    type: ClueType
    value: int
    giver: int
    target: int
    segment: int
    touched: tuple[int, ...]
    not_touched: tuple[int, ...]


@dataclass(frozen=True)
class StrikeRecord:
    """A mistake made by the team."""
    order: int
    segment: int | None


@dataclass(frozen=True)
class LogEntry:
    """One line of the narration log."""
    turn: int
    text: str


@dataclass(frozen=True)
class CardNote:
    """
    The viewer's note on a card.

    Only the parsed flags matter to the engine; the raw text is kept for
    display.
    """
    possibilities: tuple[Identity, ...] = ()
    known_trash: bool = False
    need_fix: bool = False
    chop_moved: bool = False
    finessed: bool = False
    blank: bool = False
    unclued: bool = False
    clued: bool = False
    text: str = ""


@dataclass(frozen=True)
class TurnState:
    """Whose turn it is and where the game is in its timeline."""
    turn_num: int = 0
    current_player_index: int | None = 0
    segment: int | None = None  # None until the initial deal is finished
    end_turn_num: int | None = None
    phase: TurnPhase = TurnPhase.PRE_DEAL
    end_condition: EndCondition = EndCondition.IN_PROGRESS

    cards_played_or_discarded_this_turn: int = 0
    cards_discarded_this_turn: int = 0
    clues_given_this_turn: int = 0

    @property
    def game_over(self) -> bool:
        return self.phase == TurnPhase.ENDED


@dataclass(frozen=True)
class StatsState:
    """
    Derived statistics, recomputed on every action.

    Efficiency is not stored: it is cards_gotten / potential_clues_lost.
    Future efficiency is (max_score - cards_gotten) / clues_still_usable.
    """
    # Max score
    max_score: int = 0
    max_score_per_stack: tuple[int, ...] = ()

    # Pace
    pace: int | None = None
    pace_risk: PaceRisk = PaceRisk.NULL
    final_round_effectively_started: bool = False

    # Efficiency
    cards_gotten: int = 0
    potential_clues_lost: float = 0

    # Future efficiency
    clues_still_usable: int | None = None
    clues_still_usable_not_rounded: float | None = None
    cards_gotten_by_notes: int | None = None

    # Order of the double-discard candidate, or None when not in DDA
    double_discard: int | None = None

    # Sound effects
    num_subsequent_blind_plays: int = 0
    num_subsequent_misplays: int = 0

    # "Throw It in a Hole" variants
    num_attempted_cards_played: int = 0


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    Produced only by the reducer. Consumers must treat it as read-only.
    """
    deck: list[CardState] = field(default_factory=list)
    hands: list[list[int]] = field(default_factory=list)
    play_stacks: list[list[int]] = field(default_factory=list)
    discard_stacks: list[list[int]] = field(default_factory=list)
    play_stack_directions: list[StackDirection | None] = field(default_factory=list)
    play_stack_starts: list[int | None] = field(default_factory=list)
    card_status: list[dict[int, CardStatus]] = field(default_factory=list)

    clue_tokens: int = 0
    score: int = 0
    strikes: list[StrikeRecord] = field(default_factory=list)
    clues: list[ClueRecord] = field(default_factory=list)
    hole: list[int] = field(default_factory=list)

    turn: TurnState = field(default_factory=TurnState)
    stats: StatsState = field(default_factory=StatsState)
    log: list[LogEntry] = field(default_factory=list)

    cards_remaining_in_the_deck: int = 0
    num_attempted_cards_played: int = 0

    @property
    def num_players(self) -> int:
        return len(self.hands)

    def draft(self) -> GameState:
        """
        Return a working copy the reducer may mutate.

        Every container is copied; the values inside (cards, records, turn,
        stats) are frozen, so nothing mutable is shared with this state.
        """
        return GameState(
            deck=list(self.deck),
            hands=[list(hand) for hand in self.hands],
            play_stacks=[list(stack) for stack in self.play_stacks],
            discard_stacks=[list(stack) for stack in self.discard_stacks],
            play_stack_directions=list(self.play_stack_directions),
            play_stack_starts=list(self.play_stack_starts),
            card_status=[dict(ranks) for ranks in self.card_status],
            clue_tokens=self.clue_tokens,
            score=self.score,
            strikes=list(self.strikes),
            clues=list(self.clues),
            hole=list(self.hole),
            turn=self.turn,
            stats=self.stats,
            log=list(self.log),
            cards_remaining_in_the_deck=self.cards_remaining_in_the_deck,
            num_attempted_cards_played=self.num_attempted_cards_played,
        )
