"""Chat assistant router"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...auth import get_optional_user
from ...database import get_db
from ...models import User
from ...services.chat_service import ChatGatewayError
from .service import ChatAssistantService

router = APIRouter(prefix="/chat", tags=["Chat"])


class ChatRequest(BaseModel):
    messages: Optional[list[dict[str, Any]]] = None


class ChatReply(BaseModel):
    role: str = "assistant"
    content: str


@router.post("", response_model=ChatReply)
async def chat(
    data: ChatRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """One assistant turn; booking requires a logged-in caller"""
    if not data.messages:
        raise HTTPException(status_code=400, detail="Messages array is required")
    try:
        content = await ChatAssistantService(db, current_user).reply(data.messages)
    except ChatGatewayError:
        raise HTTPException(status_code=502, detail="Error al procesar la solicitud del chat")
    return ChatReply(content=content)
