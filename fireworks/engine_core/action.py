"""
Action System - Game actions and reducer results.

Actions are the engine's only input. Each kind of action is its own frozen
dataclass tagged with an ActionType; GameAction is the closed union of them.

Actions are:
- Read from the server's action log (see api.schemas)
- Applied strictly in order by the reducer
- Never mutated
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

from ..variants.variant import ClueType
from .state import EndCondition


class ActionType(Enum):
    """Types of actions in the action log."""
    # Game actions
    CLUE = "clue"
    DISCARD = "discard"
    PLAY = "play"
    DRAW = "draw"
    STRIKE = "strike"
    GAME_OVER = "gameOver"
    PLAYER_TIMES = "playerTimes"

    # Reveals identity of a card (server)
    CARD_IDENTITY = "cardIdentity"
    TURN = "turn"

    # Handled outside the core
    SET_EFF_MOD = "setEffMod"
    EDIT_NOTE = "editNote"
    NOTE_LIST = "noteList"
    NOTE_LIST_PLAYER = "noteListPlayer"
    RECEIVE_NOTE = "receiveNote"


@dataclass(frozen=True)
class Clue:
    """A clue as sent over the wire: color index or rank value."""
    type: ClueType
    value: int


@dataclass(frozen=True)
class ActionClue:
    action_type: ClassVar[ActionType] = ActionType.CLUE
    clue: Clue
    giver: int
    target: int
    touched: tuple[int, ...]
    turn: int = 0
    ignore_negative: bool = False


@dataclass(frozen=True)
class ActionDiscard:
    """A discard, or a misplay when failed is set."""
    action_type: ClassVar[ActionType] = ActionType.DISCARD
    player_index: int
    order: int
    suit_index: int
    rank: int
    failed: bool = False


@dataclass(frozen=True)
class ActionPlay:
    action_type: ClassVar[ActionType] = ActionType.PLAY
    player_index: int
    order: int
    suit_index: int
    rank: int


@dataclass(frozen=True)
class ActionDraw:
    """Suit and rank are -1 when the drawn card is hidden from the viewer."""
    action_type: ClassVar[ActionType] = ActionType.DRAW
    player_index: int
    order: int
    suit_index: int = -1
    rank: int = -1


@dataclass(frozen=True)
class ActionStrike:
    action_type: ClassVar[ActionType] = ActionType.STRIKE
    num: int
    turn: int
    order: int


@dataclass(frozen=True)
class ActionGameOver:
    action_type: ClassVar[ActionType] = ActionType.GAME_OVER
    end_condition: EndCondition
    player_index: int
    votes: tuple[int, ...] | None = None


@dataclass(frozen=True)
class ActionPlayerTimes:
    """Milliseconds per player (negative in untimed games) and total duration."""
    action_type: ClassVar[ActionType] = ActionType.PLAYER_TIMES
    player_times: tuple[int, ...]
    duration: int


@dataclass(frozen=True)
class ActionCardIdentity:
    action_type: ClassVar[ActionType] = ActionType.CARD_IDENTITY
    player_index: int
    order: int
    suit_index: int
    rank: int


@dataclass(frozen=True)
class ActionTurn:
    action_type: ClassVar[ActionType] = ActionType.TURN
    num: int
    current_player_index: int


@dataclass(frozen=True)
class ActionSetEffMod:
    action_type: ClassVar[ActionType] = ActionType.SET_EFF_MOD
    mod: int


@dataclass(frozen=True)
class ActionEditNote:
    action_type: ClassVar[ActionType] = ActionType.EDIT_NOTE
    order: int
    text: str


@dataclass(frozen=True)
class ActionNoteList:
    action_type: ClassVar[ActionType] = ActionType.NOTE_LIST
    notes: tuple[str, ...] = ()


@dataclass(frozen=True)
class ActionNoteListPlayer:
    action_type: ClassVar[ActionType] = ActionType.NOTE_LIST_PLAYER
    texts: tuple[str, ...] = ()


@dataclass(frozen=True)
class ActionReceiveNote:
    action_type: ClassVar[ActionType] = ActionType.RECEIVE_NOTE
    order: int
    notes: tuple[str, ...] = ()


GameAction = Union[
    ActionClue,
    ActionDiscard,
    ActionPlay,
    ActionDraw,
    ActionStrike,
    ActionGameOver,
    ActionPlayerTimes,
    ActionCardIdentity,
    ActionTurn,
    ActionSetEffMod,
    ActionEditNote,
    ActionNoteList,
    ActionNoteListPlayer,
    ActionReceiveNote,
]

ACTION_CLASSES: dict[ActionType, type] = {
    cls.action_type: cls
    for cls in (
        ActionClue,
        ActionDiscard,
        ActionPlay,
        ActionDraw,
        ActionStrike,
        ActionGameOver,
        ActionPlayerTimes,
        ActionCardIdentity,
        ActionTurn,
        ActionSetEffMod,
        ActionEditNote,
        ActionNoteList,
        ActionNoteListPlayer,
        ActionReceiveNote,
    )
}

# Actions that cannot change any computed state
NO_EFFECT_ACTIONS = frozenset({ActionType.NOTE_LIST, ActionType.RECEIVE_NOTE})


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if failed)
    - Log lines the action added (for UI updates)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None
    error_details: dict[str, Any] = field(default_factory=dict)

    log_entries: list[str] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code, error_details=details or {})

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        log_entries: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            log_entries=log_entries or [],
        )
