"""Errors reported by the game engine for rejected commands."""

from __future__ import annotations


class GameError(Exception):
    """Base class for recoverable rule violations.

    ``code`` is a stable identifier sent to clients alongside the message.
    """

    code = "game_error"
    default_message = "Invalid game command"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidMove(GameError):
    code = "invalid_move"
    default_message = "Coordinates out of bounds"


class CellOccupied(GameError):
    code = "cell_occupied"
    default_message = "Cell is already occupied"


class GameAlreadyOver(GameError):
    code = "game_over"
    default_message = "Game is already over"


class NoMovesToUndo(GameError):
    code = "no_moves_to_undo"
    default_message = "No moves to undo"
