"""
Engine Core - Deterministic game state derivation.

The engine is the runtime that:
1. Creates the pre-deal GameState for a game's metadata
2. Applies actions from the action log via the reducer
3. Derives card knowledge, turn, statistics and annotations per action
4. Replays whole logs and hypothetical branches
"""

from .state import (
    CardLocation,
    CardNote,
    CardState,
    CardStatus,
    ClueRecord,
    EndCondition,
    GameState,
    LogEntry,
    PaceRisk,
    StackDirection,
    StatsState,
    StrikeRecord,
    TurnPhase,
    TurnState,
)
from .action import ActionResult, ActionType, Clue, GameAction
from .metadata import GameMetadata, GameOptions, ReducerFlags
from .setup import initial_game_state
from .reducer import DERIVATION_STAGES, Reducer, apply_action, game_state_reducer
from .replay import apply_hypothetical, final_state, replay_actions, states_by_segment

__all__ = [
    "CardLocation",
    "CardNote",
    "CardState",
    "CardStatus",
    "ClueRecord",
    "EndCondition",
    "GameState",
    "LogEntry",
    "PaceRisk",
    "StackDirection",
    "StatsState",
    "StrikeRecord",
    "TurnPhase",
    "TurnState",
    "ActionResult",
    "ActionType",
    "Clue",
    "GameAction",
    "GameMetadata",
    "GameOptions",
    "ReducerFlags",
    "initial_game_state",
    "DERIVATION_STAGES",
    "Reducer",
    "apply_action",
    "game_state_reducer",
    "apply_hypothetical",
    "final_state",
    "replay_actions",
    "states_by_segment",
]
