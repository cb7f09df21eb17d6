"""WebSocket endpoint — one long-lived connection per browser session.

Clients connect to /ws (or the host root, where the SPA opens its
socket). The handler:
1. Optionally verifies a JWT from the ?token= query param
2. Hands the connection to the relay
3. Feeds every inbound frame to relay.handle_text, in order
4. Unregisters the connection on disconnect

Without a token the client's auth frame is trusted as-is. With
GLOBALSOFT_WS_REQUIRE_TOKEN=true a valid token is mandatory and pins
the identity the connection may claim.
"""

import structlog
from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect
from sqlalchemy.exc import SQLAlchemyError

from globalsoft.auth.dependencies import identity_from_token
from globalsoft.auth.jwt import TokenError
from globalsoft.config import settings
from globalsoft.realtime.relay import Connection, RealtimeRelay

logger = structlog.get_logger()
router = APIRouter()


def get_relay(request: Request) -> RealtimeRelay:
    """FastAPI dependency — the relay bound to this app instance."""
    return request.app.state.relay


async def _refuse(websocket: WebSocket, reason: str) -> None:
    # Closing before accept is an HTTP 403 on the handshake under a real
    # server; accept first so the client sees close code 4001.
    await websocket.accept()
    await websocket.close(code=4001, reason=reason)
    logger.info("ws.refused", reason=reason)


async def marketplace_websocket(websocket: WebSocket):
    # ── Authentication ──────────────────────────────────────
    token = websocket.query_params.get("token")

    if not token and settings.ws_require_token:
        await _refuse(websocket, "Authentication required")
        return

    verified_user_id = None
    if token:
        try:
            verified_user_id = identity_from_token(token).user_id
        except TokenError:
            await _refuse(websocket, "Invalid or expired token")
            return

    # ── Connection accepted ─────────────────────────────────
    await websocket.accept()

    relay: RealtimeRelay = websocket.app.state.relay
    connection = Connection(websocket, verified_user_id=verified_user_id)
    relay.connect(connection)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""

            try:
                await relay.handle_text(connection, raw)
            except SQLAlchemyError as e:
                # Failed insert: this frame is lost, the connection lives on.
                logger.error(
                    "ws.frame_failed", connection=connection.id, error=str(e)
                )
    except WebSocketDisconnect:
        pass
    finally:
        relay.disconnect(connection)


router.add_api_websocket_route("/ws", marketplace_websocket)
router.add_api_websocket_route("/", marketplace_websocket)
