"""
Conversation turn models.
"""

from typing import Literal, Optional
from pydantic import BaseModel

Role = Literal["user", "assistant"]


class MessageMeta(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class Message(BaseModel):
    role: Role
    content: str = ""
    commentary: Optional[str] = None
    meta: Optional[MessageMeta] = None
