from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

import websockets

from holdem.errors import EngineError
from holdem.models import ActionType, TableConfig, TableSnapshot
from .session import TableSession

LOGGER = logging.getLogger("holdem_host")

# HostServer glues a TableSession to a presentation client over WebSockets.
# Every network concern lives here; the engine and session stay transport-free.


class HostServer:
    def __init__(self, config: TableConfig, session: Optional[TableSession] = None) -> None:
        self.config = config
        self.session = session or TableSession(config)
        self.connections: Set[Any] = set()
        self.session.subscribe(self._on_session_update)

    @property
    def viewer_id(self) -> Optional[str]:
        return self.session.human_id

    async def start(self, host: str = "127.0.0.1", port: int = 8765) -> None:
        async with websockets.serve(self._handle_connection, host, port):
            LOGGER.info("Table host listening on %s:%s", host, port)
            await asyncio.Future()

    async def _handle_connection(self, websocket: Any) -> None:
        # First message must be "hello" so we know the client speaks our protocol.
        hello = await self._read_message(websocket)
        if hello is None or hello.get("type") != "hello":
            await self._send_error(websocket, code="BAD_HELLO", msg="Expected hello")
            await websocket.close()
            return

        self.connections.add(websocket)
        LOGGER.info("Client connected (%s open)", len(self.connections))
        await self._send_json(
            websocket,
            "welcome",
            {
                "player_id": self.viewer_id,
                "config": {
                    "seats": self.config.seats,
                    "starting_stack": self.config.starting_stack,
                    "sb": self.config.sb,
                    "bb": self.config.bb,
                },
            },
        )
        await self._send_snapshot(websocket, self.session.engine.snapshot())

        try:
            async for raw in websocket:
                await self._handle_message(websocket, self._decode(raw))
        except websockets.ConnectionClosed:
            pass
        finally:
            self.connections.discard(websocket)
            LOGGER.info("Client disconnected (%s open)", len(self.connections))

    async def _handle_message(self, websocket: Any, message: Dict[str, object]) -> None:
        msg_type = message.get("type")
        try:
            if msg_type == "start_hand":
                await self.session.start_hand()
            elif msg_type == "action":
                await self._handle_action(websocket, message)
            elif msg_type == "snapshot":
                await self._send_snapshot(websocket, self.session.engine.snapshot())
            else:
                await self._send_error(websocket, code="UNKNOWN_TYPE", msg="Unsupported message type")
        except EngineError as exc:
            LOGGER.warning("Rejected %s message code=%s reason=%s", msg_type, exc.code, exc.msg)
            await self._send_error(websocket, code=exc.code, msg=exc.msg)

    async def _handle_action(self, websocket: Any, message: Dict[str, object]) -> None:
        if self.viewer_id is None:
            await self._send_error(websocket, code="NO_HUMAN_SEAT", msg="This table has no human seat")
            return
        try:
            action = ActionType(message.get("action"))
        except ValueError:
            await self._send_error(websocket, code="UNKNOWN_ACTION", msg="Unknown action")
            return
        amount = message.get("amount")
        if action == ActionType.RAISE and not isinstance(amount, int):
            await self._send_error(websocket, code="BAD_SCHEMA", msg="amount required for raise")
            return
        await self.session.submit_action(self.viewer_id, action, amount if isinstance(amount, int) else None)

    async def _on_session_update(self, kind: str, payload: object) -> None:
        if kind == "snapshot":
            assert isinstance(payload, TableSnapshot)
            await self._broadcast("snapshot", payload.for_viewer(self.viewer_id).to_payload())
        elif isinstance(payload, dict):
            await self._broadcast(kind, payload)

    async def _broadcast(self, msg_type: str, payload: Dict[str, object]) -> None:
        targets = list(self.connections)
        if not targets:
            return
        message = self._envelope(msg_type, payload)
        await asyncio.gather(*(socket.send(message) for socket in targets), return_exceptions=True)

    async def _send_snapshot(self, websocket: Any, snapshot: TableSnapshot) -> None:
        await self._send_json(websocket, "snapshot", snapshot.for_viewer(self.viewer_id).to_payload())

    async def _send_json(self, websocket: Any, msg_type: str, payload: Dict[str, object]) -> None:
        try:
            await websocket.send(self._envelope(msg_type, payload))
        except websockets.ConnectionClosed:
            pass

    async def _send_error(self, websocket: Any, code: str, msg: str) -> None:
        await self._send_json(websocket, "error", {"code": code, "msg": msg})

    def _envelope(self, msg_type: str, payload: Dict[str, object]) -> str:
        body = {"type": msg_type, "v": 1, "ts": datetime.now(timezone.utc).isoformat()}
        body.update(payload)
        return json.dumps(body)

    async def _read_message(self, websocket: Any) -> Optional[Dict[str, object]]:
        try:
            raw = await asyncio.wait_for(websocket.recv(), timeout=5)
            return self._decode(raw)
        except (asyncio.TimeoutError, websockets.ConnectionClosed):
            return None

    def _decode(self, raw: str) -> Dict[str, object]:
        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            return {}
        return message if isinstance(message, dict) else {}
