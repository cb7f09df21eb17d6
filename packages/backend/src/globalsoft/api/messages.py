"""Chat history routes.

Messages are written over the realtime channel; these routes are how a
client catches up on anything sent while it was offline.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from globalsoft.auth.dependencies import CurrentIdentity, get_current_user
from globalsoft.db.engine import get_db
from globalsoft.schemas.message import MessageRead
from globalsoft.services.message_service import MessageService

router = APIRouter(prefix="/messages")


def _svc(db: AsyncSession = Depends(get_db)) -> MessageService:
    return MessageService(db)


@router.get("", response_model=list[MessageRead])
async def inbox(
    limit: int = Query(100, ge=1, le=500),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: MessageService = Depends(_svc),
):
    """Everything the current user sent or received, newest first."""
    return await svc.inbox(identity.user_id, limit=limit)


@router.get("/{other_user_id}", response_model=list[MessageRead])
async def conversation(
    other_user_id: int,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: MessageService = Depends(_svc),
):
    """The thread between the current user and one other user, oldest first."""
    return await svc.conversation(identity.user_id, other_user_id)
