from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatReply(BaseModel):
    response: str
    timestamp: datetime


class ChatHistoryItem(BaseModel):
    id: str
    message: str
    response: str
    created_at: Optional[datetime] = None


class ChatHistoryResponse(BaseModel):
    chats: List[ChatHistoryItem]
