"""
Chat API Routes
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from medisync.api.dependencies import get_db, get_current_owner, get_gemini_service
from medisync.config import settings
from medisync.models.chat_message import ChatMessage
from medisync.models.medical_report import MedicalReport
from medisync.models.organ_metric import OrganMetric
from medisync.schemas.chat import ChatRequest, ChatResponse, ChatHistoryResponse
from medisync.services.gemini_service import GeminiService

logger = logging.getLogger(__name__)

router = APIRouter()


def _append_message(db: Session, owner: str, role: str, content: str) -> ChatMessage:
    message = ChatMessage(user_id=owner, role=role, content=content)
    db.add(message)
    db.commit()
    return message


@router.post("/chat", response_model=ChatResponse)
async def send_message(
    data: ChatRequest,
    owner: str = Depends(get_current_owner),
    db: Session = Depends(get_db),
    gemini: GeminiService = Depends(get_gemini_service)
):
    """
    Send a message to the medical assistant

    Both the user message and the reply (or fallback text) are logged.
    """
    # Store user message before anything can fail downstream
    _append_message(db, owner, "user", data.message)

    # Recent metrics and reports for context
    metrics = db.query(OrganMetric).filter(
        OrganMetric.user_id == owner
    ).order_by(OrganMetric.created_at.desc(), OrganMetric.id.desc()).limit(settings.CHAT_CONTEXT_METRICS).all()

    reports = db.query(MedicalReport).filter(
        MedicalReport.user_id == owner
    ).order_by(MedicalReport.created_at.desc(), MedicalReport.id.desc()).limit(settings.CHAT_CONTEXT_REPORTS).all()

    outcome = await gemini.chat_reply(
        data.message,
        metrics=[metric.to_dict() for metric in metrics],
        reports=[report.to_dict() for report in reports]
    )
    if not outcome.is_completed:
        logger.warning(f"Chat reply for {owner} degraded to fallback: {outcome.cause}")

    _append_message(db, owner, "assistant", outcome.text)

    return ChatResponse(response=outcome.text)


@router.get("/chat/history", response_model=ChatHistoryResponse)
async def get_chat_history(
    owner: str = Depends(get_current_owner),
    db: Session = Depends(get_db)
):
    """
    Get the owner's transcript, oldest first
    """
    messages = db.query(ChatMessage).filter(
        ChatMessage.user_id == owner
    ).order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc()).limit(settings.CHAT_HISTORY_LIMIT).all()

    return {"messages": [msg.to_dict() for msg in messages]}
