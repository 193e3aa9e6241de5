"""SMS router - admin-triggered appointment texts"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from ...services.twilio_service import is_twilio_configured, send_sms
from .schemas import SmsAppointmentsRequest, SmsBatchResult, SmsSendRequest, SmsSendResult
from .service import SmsReminderService

router = APIRouter(prefix="/sms", tags=["SMS"])


def require_twilio() -> None:
    if not is_twilio_configured():
        raise HTTPException(status_code=503, detail="Twilio no está configurado")


@router.post("/appointments", response_model=SmsBatchResult)
async def send_appointment_sms(
    data: SmsAppointmentsRequest,
    _admin: User = Depends(require_admin),
    _configured: None = Depends(require_twilio),
    db: Session = Depends(get_db),
):
    return await SmsReminderService(db).send_batch(data.type)


@router.post("/send", response_model=SmsSendResult)
async def send_single_sms(
    data: SmsSendRequest,
    _admin: User = Depends(require_admin),
    _configured: None = Depends(require_twilio),
):
    if not data.to or not data.message:
        raise HTTPException(status_code=400, detail="Número de teléfono y mensaje son requeridos")

    outcome = await send_sms(data.to, data.message)
    if not outcome.ok:
        raise HTTPException(status_code=502, detail=outcome.error or "Error al enviar SMS")
    return SmsSendResult(success=True, message="SMS enviado exitosamente", sid=(outcome.detail or {}).get("sid"))
