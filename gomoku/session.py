"""Session management: one engine per hot-seat game, shared by the tabs viewing it."""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field

from fastapi import WebSocket

from gomoku.errors import GameError
from gomoku.game import GameEngine
from gomoku.models import ErrorMsg, SessionCreatedMsg, StateMsg

logger = logging.getLogger(__name__)


@dataclass
class Session:
    session_id: str
    engine: GameEngine = field(default_factory=GameEngine)
    clients: list[WebSocket] = field(default_factory=list)
    # The engine assumes a single writer; every command runs under this lock.
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def state(self) -> dict:
        return StateMsg.from_engine(self.engine).model_dump(mode="json")

    async def broadcast(self, msg_dict: dict) -> list[WebSocket]:
        """Send to every client; return the sockets the message could not reach."""
        failed = []
        for ws in list(self.clients):
            if not await self.send_to(ws, msg_dict):
                failed.append(ws)
        return failed

    async def send_to(self, ws: WebSocket, msg_dict: dict) -> bool:
        try:
            await ws.send_json(msg_dict)
        except Exception:
            logger.warning("Send to a client of session %s failed", self.session_id, exc_info=True)
            return False
        return True


class SessionManager:
    def __init__(self):
        self.sessions: dict[str, Session] = {}
        self._ws_to_session: dict[WebSocket, str] = {}

    def _generate_session_id(self) -> str:
        while True:
            session_id = secrets.token_hex(3)  # 6-char hex
            if session_id not in self.sessions:
                return session_id

    async def create_session(self, ws: WebSocket) -> Session:
        if ws in self._ws_to_session:
            await self.handle_disconnect(ws)

        session = Session(session_id=self._generate_session_id())
        session.clients.append(ws)
        self.sessions[session.session_id] = session
        self._ws_to_session[ws] = session.session_id
        logger.info("Created session %s", session.session_id)

        await self._send(session, ws, SessionCreatedMsg(session_id=session.session_id).model_dump())
        await self._send(session, ws, session.state())
        return session

    async def attach(self, ws: WebSocket, session_id: str) -> Session | None:
        session = self.sessions.get(session_id)
        if session is None:
            await ws.send_json(ErrorMsg(code="session_not_found", message="Session not found").model_dump())
            return None

        current = self._ws_to_session.get(ws)
        if current == session_id:
            await self._send(session, ws, session.state())
            return session
        if current is not None:
            await self.handle_disconnect(ws)

        session.clients.append(ws)
        self._ws_to_session[ws] = session_id
        logger.info("Client attached to session %s (%d open)", session_id, len(session.clients))

        await self._send(session, ws, SessionCreatedMsg(session_id=session_id).model_dump())
        await self._send(session, ws, session.state())
        return session

    async def place_stone(self, ws: WebSocket, row: int, col: int):
        await self._run(ws, lambda engine: engine.apply_move(row, col))

    async def undo(self, ws: WebSocket):
        await self._run(ws, lambda engine: engine.undo_move())

    async def reset(self, ws: WebSocket):
        await self._run(ws, lambda engine: engine.reset())

    async def sync(self, ws: WebSocket):
        session = self.get_session_for_ws(ws)
        if session is None:
            await ws.send_json(ErrorMsg(code="no_session", message="Not in a session").model_dump())
            return
        await self._send(session, ws, session.state())

    async def _run(self, ws: WebSocket, command: Callable[[GameEngine], object]):
        """Apply a command to the caller's engine and push the new state to every tab."""
        session = self.get_session_for_ws(ws)
        if session is None:
            await ws.send_json(ErrorMsg(code="no_session", message="Not in a session").model_dump())
            return

        async with session.lock:
            try:
                command(session.engine)
            except GameError as exc:
                logger.debug("Session %s rejected command: %s", session.session_id, exc.code)
                await self._send(session, ws, ErrorMsg(code=exc.code, message=exc.message).model_dump())
                return
            await self._broadcast(session, session.state())

    async def _send(self, session: Session, ws: WebSocket, msg_dict: dict):
        if not await session.send_to(ws, msg_dict):
            await self.handle_disconnect(ws)

    async def _broadcast(self, session: Session, msg_dict: dict):
        for ws in await session.broadcast(msg_dict):
            await self.handle_disconnect(ws)

    async def handle_disconnect(self, ws: WebSocket):
        session_id = self._ws_to_session.pop(ws, None)
        if session_id is None:
            return

        session = self.sessions.get(session_id)
        if session is None:
            return

        if ws in session.clients:
            session.clients.remove(ws)
        if not session.clients:
            self.sessions.pop(session_id, None)
            logger.info("Closed session %s", session_id)

    def get_session_for_ws(self, ws: WebSocket) -> Session | None:
        session_id = self._ws_to_session.get(ws)
        if session_id is None:
            return None
        return self.sessions.get(session_id)
