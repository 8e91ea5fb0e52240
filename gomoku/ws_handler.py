"""WebSocket endpoint and message routing."""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from gomoku.models import (
    AttachMsg,
    ErrorMsg,
    NewSessionMsg,
    PlaceStoneMsg,
    ResetMsg,
    SyncMsg,
    UndoMsg,
    parse_client_message,
)
from gomoku.session import SessionManager

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    sessions: SessionManager = ws.app.state.sessions
    await ws.accept()
    try:
        while True:
            try:
                data = await ws.receive_json()
            except (ValueError, KeyError):
                # Not JSON, or a binary frame
                await ws.send_json(
                    ErrorMsg(code="bad_message", message="Message is not valid JSON").model_dump()
                )
                continue

            msg = parse_client_message(data)
            if msg is None:
                await ws.send_json(
                    ErrorMsg(code="bad_message", message="Unknown or invalid message").model_dump()
                )
                continue

            if isinstance(msg, NewSessionMsg):
                await sessions.create_session(ws)

            elif isinstance(msg, AttachMsg):
                await sessions.attach(ws, msg.session_id)

            elif isinstance(msg, PlaceStoneMsg):
                await sessions.place_stone(ws, msg.row, msg.col)

            elif isinstance(msg, UndoMsg):
                await sessions.undo(ws)

            elif isinstance(msg, ResetMsg):
                await sessions.reset(ws)

            elif isinstance(msg, SyncMsg):
                await sessions.sync(ws)
    except WebSocketDisconnect:
        pass
    finally:
        await sessions.handle_disconnect(ws)
