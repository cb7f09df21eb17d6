"""Message service — chat persistence and history.

Messages are written by the realtime relay (one insert per chat frame)
and read back through the HTTP API. They are never updated or deleted.
"""

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from globalsoft.db.models import Message


class MessageService:
    """Chat message storage."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def send(self, sender_id: int, receiver_id: int, content: str) -> Message:
        """Insert one message and commit. Errors propagate to the caller."""
        message = Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
        )
        self.db.add(message)
        await self.db.commit()
        return message

    async def inbox(self, user_id: int, limit: int = 100) -> list[Message]:
        """Messages sent to or by a user, newest first."""
        result = await self.db.execute(
            select(Message)
            .where(or_(Message.receiver_id == user_id, Message.sender_id == user_id))
            .options(selectinload(Message.sender))
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def conversation(
        self, user_id: int, other_id: int, limit: int = 200
    ) -> list[Message]:
        """Both directions between two users, oldest first."""
        result = await self.db.execute(
            select(Message)
            .where(
                or_(
                    and_(Message.sender_id == user_id, Message.receiver_id == other_id),
                    and_(Message.sender_id == other_id, Message.receiver_id == user_id),
                )
            )
            .options(selectinload(Message.sender))
            .order_by(Message.created_at, Message.id)
            .limit(limit)
        )
        return list(result.scalars().all())
