"""Connection manager for the browser push channel."""
import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Set

from fastapi import WebSocket

from studio.core.config import get_settings

logger = logging.getLogger(__name__)

EVENT_CHAT_MESSAGE = "chat_message"
EVENT_RECHARGE_SUBMITTED = "recharge_submitted"
EVENT_RECHARGE_RESOLVED = "recharge_resolved"
EVENT_BALANCE_CHANGED = "balance_changed"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ConnectionManager:
    """One socket per account; admins are additionally tracked for broadcasts.

    Pushes are best effort. Clients keep polling the HTTP endpoints, so a
    dropped socket only delays an update.
    """

    def __init__(self, timeout: int = 300, check_interval: int = 30) -> None:
        self.connections: Dict[str, WebSocket] = {}
        self.admin_ids: Set[str] = set()
        self.heartbeat_tasks: Dict[str, asyncio.Task] = {}
        self.last_heartbeat: Dict[str, datetime] = {}
        self.timeout = timedelta(seconds=timeout)
        self.check_interval = check_interval

    async def connect(self, account_id: str, websocket: WebSocket, *, is_admin: bool = False) -> None:
        await websocket.accept()
        previous = self.connections.get(account_id)
        if previous is not None and previous is not websocket:
            await self._close_quietly(previous)
        self.connections[account_id] = websocket
        if is_admin:
            self.admin_ids.add(account_id)
        self.last_heartbeat[account_id] = _now()
        self._start_heartbeat_monitor(account_id)
        logger.info("Account %s connected to push channel", account_id)

    async def disconnect(self, account_id: str, websocket: WebSocket | None = None) -> None:
        current = self.connections.get(account_id)
        if websocket is not None and current is not websocket:
            # a newer socket replaced this one
            return
        self.connections.pop(account_id, None)
        self.admin_ids.discard(account_id)
        self.last_heartbeat.pop(account_id, None)
        task = self.heartbeat_tasks.pop(account_id, None)
        if task and task is not asyncio.current_task():
            task.cancel()
        logger.info("Account %s left push channel", account_id)

    async def send(self, account_id: str, message: dict[str, Any]) -> bool:
        websocket = self.connections.get(account_id)
        if websocket is None:
            return False
        try:
            await websocket.send_text(json.dumps(message, default=str))
            return True
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Push to %s failed: %s", account_id, exc)
            await self.disconnect(account_id)
            return False

    async def notify_account(self, account_id: str, event: str, data: dict[str, Any] | None = None) -> bool:
        return await self.send(account_id, {"type": event, "data": data or {}})

    async def notify_admins(self, event: str, data: dict[str, Any] | None = None) -> int:
        delivered = 0
        for admin_id in list(self.admin_ids):
            if await self.notify_account(admin_id, event, data):
                delivered += 1
        return delivered

    def is_online(self, account_id: str) -> bool:
        return account_id in self.connections

    def update_heartbeat(self, account_id: str) -> None:
        self.last_heartbeat[account_id] = _now()

    def _start_heartbeat_monitor(self, account_id: str) -> None:
        task = self.heartbeat_tasks.get(account_id)
        if task:
            task.cancel()
        self.heartbeat_tasks[account_id] = asyncio.create_task(self._heartbeat_monitor(account_id))

    async def _heartbeat_monitor(self, account_id: str) -> None:
        try:
            while True:
                await asyncio.sleep(self.check_interval)
                last = self.last_heartbeat.get(account_id)
                if last and _now() - last > self.timeout:
                    logger.warning("Push channel for %s timed out", account_id)
                    websocket = self.connections.get(account_id)
                    await self.disconnect(account_id)
                    if websocket is not None:
                        await self._close_quietly(websocket)
                    break
        except asyncio.CancelledError:
            logger.debug("Heartbeat monitor for %s cancelled", account_id)

    @staticmethod
    async def _close_quietly(websocket: WebSocket) -> None:
        try:
            await websocket.close(code=1000)
        except Exception as exc:  # pylint: disable=broad-except
            logger.debug("Closing stale socket failed: %s", exc)


def _build_manager() -> ConnectionManager:
    settings = get_settings()
    return ConnectionManager(timeout=settings.ws_timeout, check_interval=settings.ws_heartbeat_interval)


manager = _build_manager()
