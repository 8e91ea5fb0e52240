"""Pydantic models for WebSocket message protocol."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ValidationError

from gomoku.game import Drawn, GameEngine, InProgress, Player, Won


# ---------------------------------------------------------------------------
# Client → Server
# ---------------------------------------------------------------------------

class NewSessionMsg(BaseModel):
    type: Literal["new_session"] = "new_session"


class AttachMsg(BaseModel):
    type: Literal["attach"] = "attach"
    session_id: str


class PlaceStoneMsg(BaseModel):
    type: Literal["place_stone"] = "place_stone"
    row: int
    col: int


class UndoMsg(BaseModel):
    type: Literal["undo"] = "undo"


class ResetMsg(BaseModel):
    type: Literal["reset"] = "reset"


class SyncMsg(BaseModel):
    type: Literal["sync"] = "sync"


ClientMessage = NewSessionMsg | AttachMsg | PlaceStoneMsg | UndoMsg | ResetMsg | SyncMsg


# ---------------------------------------------------------------------------
# Server → Client
# ---------------------------------------------------------------------------

class SessionCreatedMsg(BaseModel):
    type: Literal["session_created"] = "session_created"
    session_id: str


class LastMove(BaseModel):
    row: int
    col: int
    player: Player
    played_at: float


class StateMsg(BaseModel):
    type: Literal["state"] = "state"
    board: list[list[Player | None]]
    status: Literal["in_progress", "won", "drawn"]
    current_player: Player | None
    winner: Player | None
    move_count: int
    history_depth: int
    undo_available: bool
    last_move: LastMove | None

    @classmethod
    def from_engine(cls, engine: GameEngine) -> StateMsg:
        """Snapshot everything a client needs to redraw the board."""
        status = engine.current_status()
        current_player = None
        winner = None
        if isinstance(status, InProgress):
            label = "in_progress"
            current_player = status.current_player
        elif isinstance(status, Won):
            label = "won"
            winner = status.winner
        elif isinstance(status, Drawn):
            label = "drawn"
        else:
            raise TypeError(f"Unexpected game status: {status!r}")

        record = engine.last_move()
        last_move = None
        if record is not None:
            last_move = LastMove(
                row=record.row, col=record.col, player=record.player, played_at=record.played_at
            )

        return cls(
            board=engine.snapshot(),
            status=label,
            current_player=current_player,
            winner=winner,
            move_count=engine.move_count,
            history_depth=engine.history_depth(),
            undo_available=engine.undo_available(),
            last_move=last_move,
        )


class ErrorMsg(BaseModel):
    type: Literal["error"] = "error"
    code: str
    message: str


def parse_client_message(data: dict) -> ClientMessage | None:
    """Parse a raw dict into a typed client message, or None if invalid."""
    if not isinstance(data, dict):
        return None
    msg_type = data.get("type")
    if not isinstance(msg_type, str):
        return None
    mapping: dict[str, type[BaseModel]] = {
        "new_session": NewSessionMsg,
        "attach": AttachMsg,
        "place_stone": PlaceStoneMsg,
        "undo": UndoMsg,
        "reset": ResetMsg,
        "sync": SyncMsg,
    }
    model = mapping.get(msg_type)
    if model is None:
        return None
    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except ValidationError:
        return None
