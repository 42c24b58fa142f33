"""
Pydantic Schemas for the Action Log and state snapshots.

These models define the exact contract between the game server's action log
and the engine. Records use the server's camelCase field names and are
converted into the engine's frozen action dataclasses.

Error Codes:
- INVALID_INPUT: An action record is malformed or has an unknown type
- STATE_CONSISTENCY: An action arrived before one it depends on
- UNKNOWN_VARIANT: The variant name is not in the variant table
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from ..engine_core.action import (
    ActionCardIdentity,
    ActionClue,
    ActionDiscard,
    ActionDraw,
    ActionEditNote,
    ActionGameOver,
    ActionNoteList,
    ActionNoteListPlayer,
    ActionPlay,
    ActionPlayerTimes,
    ActionReceiveNote,
    ActionSetEffMod,
    ActionStrike,
    ActionTurn,
    Clue,
    GameAction,
)
from ..engine_core.state import EndCondition, GameState
from ..errors import InvalidInputError
from ..variants import ClueType


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_INPUT = "INVALID_INPUT"
    STATE_CONSISTENCY = "STATE_CONSISTENCY"
    UNKNOWN_VARIANT = "UNKNOWN_VARIANT"
    REDUCER_ERROR = "REDUCER_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class ActionRecordBase(BaseModel):
    """Common configuration for action records."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }


class ClueInfo(ActionRecordBase):
    """The clue inside a clue record: 0 = color, 1 = rank."""
    type: int = Field(..., ge=0, le=1)
    value: int


# =============================================================================
# Action Records
# =============================================================================

class ClueRecordModel(ActionRecordBase):
    type: Literal["clue"] = "clue"
    clue: ClueInfo
    giver: int
    target: int
    touched: list[int] = Field(default_factory=list, alias="list")
    turn: int = 0
    ignore_negative: bool = False

    def to_action(self) -> ActionClue:
        return ActionClue(
            clue=Clue(type=ClueType(self.clue.type), value=self.clue.value),
            giver=self.giver,
            target=self.target,
            touched=tuple(self.touched),
            turn=self.turn,
            ignore_negative=self.ignore_negative,
        )


class DiscardRecordModel(ActionRecordBase):
    type: Literal["discard"] = "discard"
    player_index: int
    order: int
    suit_index: int
    rank: int
    failed: bool = False

    def to_action(self) -> ActionDiscard:
        return ActionDiscard(
            player_index=self.player_index,
            order=self.order,
            suit_index=self.suit_index,
            rank=self.rank,
            failed=self.failed,
        )


class PlayRecordModel(ActionRecordBase):
    type: Literal["play"] = "play"
    player_index: int
    order: int
    suit_index: int
    rank: int

    def to_action(self) -> ActionPlay:
        return ActionPlay(
            player_index=self.player_index,
            order=self.order,
            suit_index=self.suit_index,
            rank=self.rank,
        )


class DrawRecordModel(ActionRecordBase):
    """suitIndex and rank are -1 for cards hidden from the viewer."""
    type: Literal["draw"] = "draw"
    player_index: int
    order: int
    suit_index: int = -1
    rank: int = -1

    def to_action(self) -> ActionDraw:
        return ActionDraw(
            player_index=self.player_index,
            order=self.order,
            suit_index=self.suit_index,
            rank=self.rank,
        )


class StrikeRecordModel(ActionRecordBase):
    type: Literal["strike"] = "strike"
    num: int
    turn: int
    order: int

    def to_action(self) -> ActionStrike:
        return ActionStrike(num=self.num, turn=self.turn, order=self.order)


class GameOverRecordModel(ActionRecordBase):
    type: Literal["gameOver"] = "gameOver"
    end_condition: int = Field(..., ge=0, le=10, description="EndCondition wire value")
    player_index: int
    votes: Optional[list[int]] = None

    def to_action(self) -> ActionGameOver:
        return ActionGameOver(
            end_condition=EndCondition(self.end_condition),
            player_index=self.player_index,
            votes=None if self.votes is None else tuple(self.votes),
        )


class PlayerTimesRecordModel(ActionRecordBase):
    type: Literal["playerTimes"] = "playerTimes"
    player_times: list[int]
    duration: int

    def to_action(self) -> ActionPlayerTimes:
        return ActionPlayerTimes(player_times=tuple(self.player_times), duration=self.duration)


class CardIdentityRecordModel(ActionRecordBase):
    type: Literal["cardIdentity"] = "cardIdentity"
    player_index: int
    order: int
    suit_index: int
    rank: int

    def to_action(self) -> ActionCardIdentity:
        return ActionCardIdentity(
            player_index=self.player_index,
            order=self.order,
            suit_index=self.suit_index,
            rank=self.rank,
        )


class TurnRecordModel(ActionRecordBase):
    type: Literal["turn"] = "turn"
    num: int
    current_player_index: int

    def to_action(self) -> ActionTurn:
        return ActionTurn(num=self.num, current_player_index=self.current_player_index)


class SetEffModRecordModel(ActionRecordBase):
    type: Literal["setEffMod"] = "setEffMod"
    mod: int

    def to_action(self) -> ActionSetEffMod:
        return ActionSetEffMod(mod=self.mod)


class EditNoteRecordModel(ActionRecordBase):
    type: Literal["editNote"] = "editNote"
    order: int
    text: str

    def to_action(self) -> ActionEditNote:
        return ActionEditNote(order=self.order, text=self.text)


class NoteListRecordModel(ActionRecordBase):
    type: Literal["noteList"] = "noteList"
    notes: list[str] = Field(default_factory=list)

    def to_action(self) -> ActionNoteList:
        return ActionNoteList(notes=tuple(self.notes))


class NoteListPlayerRecordModel(ActionRecordBase):
    type: Literal["noteListPlayer"] = "noteListPlayer"
    texts: list[str] = Field(default_factory=list)

    def to_action(self) -> ActionNoteListPlayer:
        return ActionNoteListPlayer(texts=tuple(self.texts))


class ReceiveNoteRecordModel(ActionRecordBase):
    type: Literal["receiveNote"] = "receiveNote"
    order: int
    notes: list[str] = Field(default_factory=list)

    def to_action(self) -> ActionReceiveNote:
        return ActionReceiveNote(order=self.order, notes=tuple(self.notes))


ActionRecord = Annotated[
    Union[
        ClueRecordModel,
        DiscardRecordModel,
        PlayRecordModel,
        DrawRecordModel,
        StrikeRecordModel,
        GameOverRecordModel,
        PlayerTimesRecordModel,
        CardIdentityRecordModel,
        TurnRecordModel,
        SetEffModRecordModel,
        EditNoteRecordModel,
        NoteListRecordModel,
        NoteListPlayerRecordModel,
        ReceiveNoteRecordModel,
    ],
    Field(discriminator="type"),
]

_action_adapter = TypeAdapter(ActionRecord)
_action_log_adapter = TypeAdapter(list[ActionRecord])


class ErrorResponse(BaseModel):
    """Error report printed by the CLI."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")


# =============================================================================
# Parsing
# =============================================================================

def _invalid(e: ValidationError) -> InvalidInputError:
    return InvalidInputError(
        "Malformed action record",
        details={"errors": e.errors(include_url=False, include_context=False)},
    )


def parse_action(data: Union[dict[str, Any], str, bytes]) -> GameAction:
    """
    Parse one action record (a dict or a JSON document) into an action.

    Raises:
        InvalidInputError: The record does not match any action type
    """
    try:
        if isinstance(data, (str, bytes)):
            record = _action_adapter.validate_json(data)
        else:
            record = _action_adapter.validate_python(data)
    except ValidationError as e:
        raise _invalid(e) from e
    return record.to_action()


def parse_action_log(data: Union[list[dict[str, Any]], str, bytes]) -> list[GameAction]:
    """Parse a whole action log (a list of records or a JSON array)."""
    try:
        if isinstance(data, (str, bytes)):
            records = _action_log_adapter.validate_json(data)
        else:
            records = _action_log_adapter.validate_python(data)
    except ValidationError as e:
        raise _invalid(e) from e
    return [record.to_action() for record in records]


# =============================================================================
# Snapshots
# =============================================================================

_state_adapter = TypeAdapter(GameState)


def snapshot(state: GameState) -> dict[str, Any]:
    """GameState as plain JSON-compatible data."""
    return _state_adapter.dump_python(state, mode="json")


def snapshot_json(state: GameState, indent: Optional[int] = None) -> bytes:
    """
    Serialize a GameState to JSON.

    Equal states always produce identical bytes.
    """
    return _state_adapter.dump_json(state, indent=indent)
