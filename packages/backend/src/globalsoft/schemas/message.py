"""Pydantic schemas for chat history."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class MessageRead(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    sender_name: Optional[str] = None
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}
