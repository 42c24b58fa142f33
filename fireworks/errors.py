"""Exceptions raised by the engine."""


class FireworksError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ReducerError(FireworksError):
    """Raised when an action cannot be applied to the game state."""

    error_code = "REDUCER_ERROR"


class StateConsistencyError(ReducerError):
    """
    Raised when an action arrives before an action it structurally depends on.

    For example, a clue before the initial deal has finished.
    """

    error_code = "STATE_CONSISTENCY"


class InvalidInputError(ReducerError):
    """Raised when a required action field is missing or out of range."""

    error_code = "INVALID_INPUT"


class UnknownVariantError(FireworksError, KeyError):
    """Raised when a variant name is not in the variant table."""

    def __str__(self):
        return FireworksError.__str__(self)
