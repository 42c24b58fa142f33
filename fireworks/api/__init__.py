"""
API Module - Boundary between the engine and the outside world.

The engine itself only sees typed action dataclasses and GameState values.
This module:
1. Parses the server's camelCase action log into actions
2. Exports GameState snapshots as deterministic JSON
"""

from .schemas import (
    ActionRecord,
    ErrorCode,
    ErrorResponse,
    parse_action,
    parse_action_log,
    snapshot,
    snapshot_json,
)

__all__ = [
    "ActionRecord",
    "ErrorCode",
    "ErrorResponse",
    "parse_action",
    "parse_action_log",
    "snapshot",
    "snapshot_json",
]
