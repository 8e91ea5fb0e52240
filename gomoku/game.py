"""Game logic: board state, move validation, win/draw detection, and undo history."""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from gomoku.errors import CellOccupied, GameAlreadyOver, GameError, InvalidMove, NoMovesToUndo

logger = logging.getLogger(__name__)

BOARD_SIZE = 15
WIN_LENGTH = 5
HISTORY_LIMIT = 50

# Four directions: horizontal, vertical, diagonal ↘, diagonal ↗
DIRECTIONS = [
    (0, 1),
    (1, 0),
    (1, 1),
    (1, -1),
]


class Player(str, Enum):
    BLACK = "black"
    WHITE = "white"

    @property
    def opponent(self) -> Player:
        return Player.WHITE if self is Player.BLACK else Player.BLACK


# None marks an empty cell
Cell = Player | None


@dataclass(frozen=True)
class InProgress:
    current_player: Player
    is_terminal = False


@dataclass(frozen=True)
class Won:
    winner: Player
    is_terminal = True


@dataclass(frozen=True)
class Drawn:
    is_terminal = True


GameStatus = InProgress | Won | Drawn


@dataclass(frozen=True)
class MoveRecord:
    player: Player
    row: int
    col: int
    ended_game: bool
    index: int
    played_at: float = field(default_factory=time.time, compare=False)


class MoveHistory:
    """Undo stack holding at most ``limit`` records.

    Pushing onto a full stack drops the oldest record. The stone it placed
    stays on the board but can no longer be taken back.
    """

    def __init__(self, limit: int = HISTORY_LIMIT):
        self._records: deque[MoveRecord] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._records.maxlen  # type: ignore[return-value]

    def push(self, record: MoveRecord) -> None:
        if len(self._records) == self.limit:
            logger.debug("History full, evicting move #%d", self._records[0].index)
        self._records.append(record)

    def pop(self) -> MoveRecord:
        if not self._records:
            raise NoMovesToUndo()
        return self._records.pop()

    def peek(self) -> MoveRecord | None:
        return self._records[-1] if self._records else None

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MoveRecord]:
        return iter(self._records)


def _in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def _is_coordinate(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class GameEngine:
    def __init__(self):
        self.board: list[list[Cell]] = []
        self.current_player: Player = Player.BLACK
        self.status: GameStatus = InProgress(Player.BLACK)
        self.history = MoveHistory()
        self.move_count: int = 0
        self.reset()

    def reset(self) -> None:
        self.board = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        self.current_player = Player.BLACK
        self.status = InProgress(Player.BLACK)
        self.history.clear()
        self.move_count = 0
        logger.debug("Board reset")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def validate_move(self, row: int, col: int) -> GameError | None:
        """Return the error ``apply_move`` would raise, or None if the move is legal."""
        if self.status.is_terminal:
            return GameAlreadyOver()
        if not (_is_coordinate(row) and _is_coordinate(col)) or not _in_bounds(row, col):
            return InvalidMove()
        if self.board[row][col] is not None:
            return CellOccupied()
        return None

    def apply_move(self, row: int, col: int) -> GameStatus:
        """Place the current player's stone and return the resulting status.

        A rejected move raises a GameError and leaves the game untouched.
        """
        error = self.validate_move(row, col)
        if error is not None:
            raise error

        player = self.current_player
        self.board[row][col] = player

        if self.check_win(row, col):
            self.status = Won(player)
        elif self.is_draw():
            self.status = Drawn()
        else:
            self.current_player = player.opponent
            self.status = InProgress(self.current_player)

        self.history.push(
            MoveRecord(
                player=player,
                row=row,
                col=col,
                ended_game=self.status.is_terminal,
                index=self.move_count,
            )
        )
        self.move_count += 1

        logger.debug("Move #%d: %s at (%d, %d)", self.move_count, player.value, row, col)
        if self.status.is_terminal:
            logger.info("Game over after %d moves: %s", self.move_count, self.status)
        return self.status

    def undo_move(self) -> MoveRecord:
        """Take back the most recent move and hand the turn back to its player."""
        record = self.history.pop()
        self.board[record.row][record.col] = None
        self.current_player = record.player
        self.status = InProgress(record.player)
        self.move_count -= 1
        logger.debug("Undid move #%d at (%d, %d)", record.index + 1, record.row, record.col)
        return record

    def undo(self) -> bool:
        """Like ``undo_move`` but returns False instead of raising when history is empty."""
        try:
            self.undo_move()
        except NoMovesToUndo:
            return False
        return True

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def check_win(self, row: int, col: int) -> bool:
        """Check if the last move at (row, col) creates five (or more) in a row."""
        color = self.board[row][col]
        if color is None:
            return False

        for dr, dc in DIRECTIONS:
            count = 1

            # Extend in positive direction
            r, c = row + dr, col + dc
            while _in_bounds(r, c) and self.board[r][c] == color:
                count += 1
                r, c = r + dr, c + dc

            # Extend in negative direction
            r, c = row - dr, col - dc
            while _in_bounds(r, c) and self.board[r][c] == color:
                count += 1
                r, c = r - dr, c - dc

            if count >= WIN_LENGTH:
                return True

        return False

    def is_draw(self) -> bool:
        return all(cell is not None for line in self.board for cell in line)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def cell_at(self, row: int, col: int) -> Cell:
        if not (_is_coordinate(row) and _is_coordinate(col)) or not _in_bounds(row, col):
            raise InvalidMove()
        return self.board[row][col]

    def current_status(self) -> GameStatus:
        return self.status

    def undo_available(self) -> bool:
        return len(self.history) > 0

    def history_depth(self) -> int:
        return len(self.history)

    def last_move(self) -> MoveRecord | None:
        return self.history.peek()

    def snapshot(self) -> list[list[Cell]]:
        return [line[:] for line in self.board]
