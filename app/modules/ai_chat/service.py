import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import HTTPException
from starlette.concurrency import run_in_threadpool
from supabase import Client

from app.config.settings import settings
from app.modules.ai_chat.gemini_client import (
    GeminiClient, AIServiceError, AIServiceTimeout, AIServiceQuotaExceeded, AIServiceBlocked
)
from app.modules.ai_chat.schemas import ChatReply, ChatHistoryItem

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful AI assistant for a Career Guidance Program. Your role is to:

1. Provide career advice and guidance to students
2. Help with educational planning and course selection
3. Offer insights about different career paths and industries
4. Assist with resume writing and interview preparation
5. Share information about job market trends and opportunities
6. Support students in developing professional skills

Please provide helpful, accurate, and encouraging responses. Keep your answers concise but informative. If you're unsure about something, it's okay to say so and suggest they consult with a career counselor or do additional research.

Student's question: {question}"""

GENERIC_ERROR = "Sorry, I encountered an error. Please try again."


def build_prompt(question: str) -> str:
    return SYSTEM_PROMPT.format(question=question.strip())


def classify_ai_error(error: Exception) -> HTTPException:
    """Translate an assistant failure into the HTTP error shown to the student"""
    text = str(error)
    if isinstance(error, AIServiceTimeout) or "timeout" in text.lower():
        return HTTPException(status_code=408, detail="The AI service is taking too long to respond. Please try again.")
    if isinstance(error, AIServiceQuotaExceeded) or "quota" in text.lower() or "limit" in text.lower():
        return HTTPException(status_code=429, detail="The AI service is currently at capacity. Please try again later.")
    if isinstance(error, AIServiceBlocked) or "BLOCKED" in text:
        return HTTPException(status_code=400, detail="Your message was blocked by safety filters. Please rephrase your question.")
    return HTTPException(status_code=500, detail=GENERIC_ERROR)


class AIChatService:
    def __init__(self, supabase: Client, client: Optional[GeminiClient] = None):
        self.supabase = supabase
        self.client = client

    async def ask(self, user_id: str, message: Optional[str]) -> ChatReply:
        """Answer a career question and keep the exchange for the retention window"""
        if not message or not message.strip():
            raise HTTPException(status_code=400, detail="Message is required")
        if self.client is None:
            raise HTTPException(status_code=500, detail="AI service not configured. Please contact administrator.")

        timeout = settings.ai_chat_timeout_sec
        try:
            answer = await asyncio.wait_for(
                run_in_threadpool(self.client.generate, build_prompt(message), timeout),
                timeout=timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"AI chat timed out after {timeout}s")
            raise classify_ai_error(AIServiceTimeout("Request timeout")) from e
        except AIServiceError as e:
            logger.error(f"AI chat error: {e}")
            raise classify_ai_error(e) from e

        now = datetime.now(timezone.utc)
        try:
            self.supabase.table("ai_chats").insert({
                "user_id": user_id,
                "message": message.strip(),
                "response": answer,
                "expires_at": (now + timedelta(days=settings.ai_chat_retention_days)).isoformat()
            }).execute()
        except Exception as e:
            # The student still gets the answer
            logger.error(f"Error saving chat for {user_id}: {e}")

        return ChatReply(response=answer, timestamp=now)

    def history(self, user_id: str) -> List[ChatHistoryItem]:
        """Non-expired chats of a user, newest first"""
        try:
            result = self.supabase.table("ai_chats")\
                .select("id, message, response, created_at")\
                .eq("user_id", user_id)\
                .gt("expires_at", datetime.now(timezone.utc).isoformat())\
                .order("created_at", desc=True)\
                .limit(settings.ai_chat_history_limit)\
                .execute()
            return [ChatHistoryItem(**chat) for chat in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching chat history: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch chat history")
