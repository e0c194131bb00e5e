"""WebSocket endpoint for the browser push channel."""
import json
import logging

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect

from studio.core.security import decode_access_token
from studio.infrastructure.database.session import get_session_factory
from studio.interfaces.ws.manager import manager
from studio.modules.accounts.service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter()

MESSAGE_HEARTBEAT = "heartbeat"
MESSAGE_HEARTBEAT_ACK = "heartbeat_ack"


def _parse_json(raw: str) -> dict:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.debug("Invalid JSON on push channel: %s", exc)
        return {}
    return data if isinstance(data, dict) else {}


@router.websocket("/ws")
async def push_socket(websocket: WebSocket, token: str = Query(...)):
    try:
        token_data = decode_access_token(token)
    except HTTPException:
        await websocket.close(code=1008, reason="Invalid token")
        return

    async with get_session_factory()() as session:
        account = await AccountService.with_session(session).get_by_id(token_data.account_id)
    if account is None or not account.is_active:
        await websocket.close(code=1008, reason="Account not found or disabled")
        return

    await manager.connect(account.id, websocket, is_admin=account.is_admin())
    try:
        while True:
            data = _parse_json(await websocket.receive_text())
            if data.get("type") == MESSAGE_HEARTBEAT:
                manager.update_heartbeat(account.id)
                await websocket.send_text(json.dumps({"type": MESSAGE_HEARTBEAT_ACK}))
    except WebSocketDisconnect:
        logger.info("Account %s disconnected from push channel", account.id)
    finally:
        await manager.disconnect(account.id, websocket)
