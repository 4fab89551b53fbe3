from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase
from app.modules.ai_chat.schemas import ChatRequest, ChatReply, ChatHistoryResponse
from app.modules.ai_chat.service import AIChatService
from app.modules.ai_chat.gemini_client import GeminiClient
from app.config.settings import settings
from app.core.dependencies import require_permission
from supabase import Client
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai-chat", tags=["ai-chat"])

_gemini_client: Optional[GeminiClient] = None


def get_gemini_client() -> Optional[GeminiClient]:
    """Shared Gemini client, or None when no API key is configured"""
    global _gemini_client
    if _gemini_client is None and settings.gemini_api_key:
        try:
            _gemini_client = GeminiClient()
        except Exception as e:
            logger.error(f"Gemini client initialization failed: {e}")
    return _gemini_client


def get_ai_chat_service(
    supabase: Client = Depends(get_service_supabase),
    client: Optional[GeminiClient] = Depends(get_gemini_client)
) -> AIChatService:
    return AIChatService(supabase, client)


@router.post("", response_model=ChatReply)
async def ask(
    body: ChatRequest,
    user_data: Dict = Depends(require_permission("ai_chat:use")),
    service: AIChatService = Depends(get_ai_chat_service)
):
    """Ask the career assistant a question"""
    return await service.ask(user_data["id"], body.message)


@router.get("", response_model=ChatHistoryResponse)
async def history(
    user_data: Dict = Depends(require_permission("ai_chat:use")),
    service: AIChatService = Depends(get_ai_chat_service)
):
    """Recent chats of the caller that have not expired"""
    return ChatHistoryResponse(chats=service.history(user_data["id"]))
