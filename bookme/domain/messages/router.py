"""Message router"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...services.storage_service import MAX_ATTACHMENT_SIZE, generate_presigned_url, upload_file
from .schemas import MessageCreate, MessageEnvelope, MessageListResponse, MessageResponse
from .service import MessageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/messages", tags=["Messages"])


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    return MessageService(db)


@router.get("", response_model=MessageListResponse)
async def list_messages(
    type: str = Query("received"),
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    messages, unread = service.list_messages(current_user, type)
    return MessageListResponse(messages=[MessageResponse.from_model(m) for m in messages], unreadCount=unread)


@router.post("", response_model=MessageEnvelope, status_code=201)
async def send_message(
    request: Request,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """
    Send a direct message.

    Accepts a JSON body, or multipart form data with an optional `attachment`
    file that is stored privately.
    """
    content_type = request.headers.get("content-type", "")
    attachment = None

    try:
        if content_type.startswith("multipart/form-data"):
            form = await request.form()
            data = MessageCreate(
                recipientId=form.get("recipientId") or None,
                subject=form.get("subject"),
                content=form.get("content"),
            )
            upload = form.get("attachment")
            if upload is not None and hasattr(upload, "read"):
                attachment = upload
        else:
            data = MessageCreate(**(await request.json()))
    except (ValidationError, ValueError, TypeError):
        raise HTTPException(status_code=400, detail="Datos del mensaje inválidos")

    if attachment is None:
        return MessageEnvelope(message=MessageResponse.from_model(service.send_message(current_user, data)))

    service.validate_new_message(data)
    content = await attachment.read()
    if len(content) > MAX_ATTACHMENT_SIZE:
        raise HTTPException(status_code=400, detail="El archivo adjunto es demasiado grande")
    key = upload_file(content, attachment.filename, attachment.content_type, is_public=False)

    message = service.send_message(
        current_user,
        data,
        attachment_path=key,
        attachment_name=attachment.filename,
        attachment_type=attachment.content_type,
    )
    return MessageEnvelope(message=MessageResponse.from_model(message))


@router.patch("/{message_id}/read", response_model=MessageEnvelope)
async def mark_message_read(
    message_id: int,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return MessageEnvelope(message=MessageResponse.from_model(service.mark_read(message_id, current_user)))


@router.get("/{message_id}/attachment")
async def get_attachment(
    message_id: int,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Redirect to a short-lived signed URL for the private attachment"""
    message = service.get_for_participant(message_id, current_user)
    if not message.attachment_path:
        raise HTTPException(status_code=404, detail="El mensaje no tiene archivo adjunto")
    try:
        url = generate_presigned_url(message.attachment_path)
    except Exception as e:
        logger.error(f"❌ Could not sign attachment for message {message_id}: {e}")
        raise HTTPException(status_code=502, detail="No se pudo obtener el archivo adjunto")
    return RedirectResponse(url=url, status_code=307)
