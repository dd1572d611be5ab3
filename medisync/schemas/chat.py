"""
Chat Schemas
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict


class ChatRequest(BaseModel):
    """Chat message request"""
    message: str


class ChatResponse(BaseModel):
    """Chat message response"""
    response: str


class ChatMessage(BaseModel):
    """Stored chat message"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    role: str
    content: str
    created_at: datetime
    updated_at: datetime


class ChatHistoryResponse(BaseModel):
    messages: List[ChatMessage]
