"""Realtime relay — per-connection frame handling and event fan-out.

Each connection runs through three states:

    UNAUTHENTICATED → (auth frame) → AUTHENTICATED → (disconnect) → CLOSED

Frames on one connection are handled in arrival order. Across connections
handlers interleave only at await points (the message insert and the
outbound sends), all on one event loop, so the registry and the
connection set need no locking.

Direct chat delivery is best effort: the message is always persisted
first; if the receiver has no open registered connection the delivery is
skipped and they see it next time they load their inbox.
"""

import json
import uuid
from typing import Any, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.websockets import WebSocket, WebSocketState

from globalsoft.db.models import Message
from globalsoft.realtime.frames import (
    AuthFrame,
    ChatFrame,
    FrameError,
    chat_event,
    new_product_event,
    parse_frame,
)
from globalsoft.realtime.registry import ConnectionRegistry
from globalsoft.services.message_service import MessageService

logger = structlog.get_logger()


class Connection:
    """One live client channel.

    user_id is unset until an auth frame arrives. verified_user_id is set
    when the client presented a valid JWT at connect time; it pins the
    identity the connection may claim.
    """

    def __init__(
        self,
        websocket: Optional[WebSocket] = None,
        verified_user_id: Optional[int] = None,
    ):
        self.websocket = websocket
        self.id = uuid.uuid4().hex[:12]
        self.user_id: Optional[int] = None
        self.verified_user_id = verified_user_id
        # Every identity this connection has registered under.
        self.registered_ids: set[int] = set()

    @property
    def is_open(self) -> bool:
        ws = self.websocket
        return (
            ws is not None
            and ws.client_state == WebSocketState.CONNECTED
            and ws.application_state == WebSocketState.CONNECTED
        )

    async def send_json(self, payload: dict[str, Any]) -> None:
        await self.websocket.send_text(json.dumps(payload, default=str))

    def __repr__(self) -> str:
        return f"<Connection {self.id} user={self.user_id}>"


class RealtimeRelay:
    """Owns the connection registry and every open connection."""

    def __init__(
        self,
        registry: Optional[ConnectionRegistry] = None,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        if session_factory is None:
            from globalsoft.db.engine import async_session_factory

            session_factory = async_session_factory
        self.registry = registry if registry is not None else ConnectionRegistry()
        self.session_factory = session_factory
        self._connections: set[Connection] = set()

    @property
    def connections(self) -> frozenset[Connection]:
        return frozenset(self._connections)

    # ─── Connection lifecycle ───────────────────────────

    def connect(self, connection: Connection) -> None:
        self._connections.add(connection)
        if connection.verified_user_id is not None:
            connection.user_id = connection.verified_user_id
            self.registry.register(connection.user_id, connection)
            connection.registered_ids.add(connection.user_id)
        logger.info(
            "relay.connected",
            connection=connection.id,
            user_id=connection.user_id,
            open_connections=len(self._connections),
        )

    def disconnect(self, connection: Connection) -> None:
        """Forget a closed connection.

        Every identity the connection registered under is released, but
        only where the entry still points at this connection; a newer
        connection for the same user stays reachable.
        """
        self._connections.discard(connection)
        removed = [
            user_id
            for user_id in sorted(connection.registered_ids)
            if self.registry.unregister(user_id, connection)
        ]
        connection.registered_ids.clear()
        logger.info(
            "relay.disconnected",
            connection=connection.id,
            user_id=connection.user_id,
            unregistered=removed,
        )

    # ─── Inbound frames ─────────────────────────────────

    async def handle_text(self, connection: Connection, raw: str | bytes) -> None:
        """Parse and dispatch one inbound frame.

        Malformed or unknown frames are logged and dropped; the connection
        stays open. Persistence errors from a chat frame propagate.
        """
        try:
            frame = parse_frame(raw)
        except FrameError as e:
            logger.warning(
                "relay.frame_rejected", connection=connection.id, reason=str(e)
            )
            return

        if isinstance(frame, AuthFrame):
            self.handle_auth(connection, frame)
        else:
            await self.handle_chat(connection, frame)

    def handle_auth(self, connection: Connection, frame: AuthFrame) -> bool:
        """Register the asserted identity for this connection.

        A falsy userId is ignored. Re-authenticating overwrites, even under
        a different identity, unless the connection is pinned to a verified
        token identity.
        """
        if not frame.userId:
            return False

        if (
            connection.verified_user_id is not None
            and frame.userId != connection.verified_user_id
        ):
            logger.warning(
                "relay.auth_mismatch",
                connection=connection.id,
                claimed=frame.userId,
                verified=connection.verified_user_id,
            )
            return False

        connection.user_id = frame.userId
        self.registry.register(frame.userId, connection)
        connection.registered_ids.add(frame.userId)
        logger.debug("relay.authenticated", connection=connection.id, user_id=frame.userId)
        return True

    async def handle_chat(
        self, connection: Connection, frame: ChatFrame
    ) -> Optional[Message]:
        """Persist a chat message, then deliver it live if the receiver is online."""
        sender_id = connection.user_id
        if sender_id is None or not frame.receiverId:
            logger.debug("relay.chat_dropped", connection=connection.id)
            return None

        async with self.session_factory() as session:
            message = await MessageService(session).send(
                sender_id=sender_id,
                receiver_id=frame.receiverId,
                content=frame.content,
            )

        receiver = self.registry.lookup(frame.receiverId)
        delivered = False
        if receiver is not None and receiver.is_open:
            delivered = await self._send(
                receiver,
                chat_event(sender_id, message.content, message.created_at),
            )

        logger.info(
            "relay.chat",
            message_id=message.id,
            sender_id=sender_id,
            receiver_id=frame.receiverId,
            delivered=delivered,
        )
        return message

    # ─── Outbound ───────────────────────────────────────

    async def broadcast_new_product(self, product: dict[str, Any]) -> int:
        """Send a new_product event to every open connection.

        Unfiltered: authenticated or not. Iterates a snapshot so connects
        and disconnects during the sends are safe. Returns how many
        connections the event was sent to.
        """
        payload = new_product_event(product)
        sent = 0
        for connection in list(self._connections):
            if not connection.is_open:
                continue
            if await self._send(connection, payload):
                sent += 1

        logger.info(
            "relay.broadcast",
            event_type=payload["type"],
            product_id=product.get("id"),
            sent=sent,
        )
        return sent

    async def _send(self, connection: Connection, payload: dict[str, Any]) -> bool:
        # A dead socket must not break delivery to anyone else.
        try:
            await connection.send_json(payload)
        except Exception as e:
            logger.warning(
                "relay.send_failed",
                connection=connection.id,
                event_type=payload.get("type"),
                error=str(e),
            )
            return False
        return True
