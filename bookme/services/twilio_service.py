"""
Twilio SMS Service
Sends appointment SMS through the Twilio REST API using the shop's account
"""

import logging

import httpx

from ..config import TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER
from ..shared.results import SideEffectResult
from ..shared.validators import to_e164

logger = logging.getLogger(__name__)

TWILIO_API_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"
PLACEHOLDER_SID = "placeholder-twilio-account-sid"


def is_twilio_configured() -> bool:
    return bool(TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN and TWILIO_ACCOUNT_SID != PLACEHOLDER_SID)


async def send_sms(to_phone: str, message_body: str) -> SideEffectResult:
    """
    Send SMS via Twilio

    Args:
        to_phone: Recipient phone number, normalized to E.164 before sending
        message_body: SMS message content

    Returns:
        SideEffectResult carrying the message sid on success
    """
    if not is_twilio_configured():
        logger.warning("Twilio not configured, skipping SMS")
        return SideEffectResult.failure("sms", "Twilio no está configurado")

    if not TWILIO_PHONE_NUMBER:
        logger.error("TWILIO_PHONE_NUMBER not configured")
        return SideEffectResult.failure("sms", "Número de Twilio no configurado")

    to = to_e164(to_phone)
    if not to:
        logger.warning(f"Phone number not valid for SMS: {to_phone}")
        return SideEffectResult.failure("sms", "Formato de número de teléfono inválido")

    try:
        logger.info(f"🚀 Sending SMS to Twilio API for {to}")
        async with httpx.AsyncClient() as client:
            response = await client.post(
                TWILIO_API_URL.format(sid=TWILIO_ACCOUNT_SID),
                auth=(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN),
                data={"To": to, "From": TWILIO_PHONE_NUMBER, "Body": message_body},
                timeout=10.0,
            )

        logger.info(f"📡 Twilio API response status: {response.status_code}")
        if response.status_code in [200, 201]:
            result = response.json()
            logger.info(f"✅ SMS sent successfully: {result.get('sid')}")
            return SideEffectResult.success("sms", sid=result.get("sid"), status=result.get("status"))

        try:
            error = response.json().get("message") or response.text
        except ValueError:
            error = response.text
        logger.error(f"❌ Twilio rejected SMS to {to}: {error}")
        return SideEffectResult.failure("sms", error or "Error al enviar SMS")

    except httpx.HTTPError as e:
        logger.error(f"❌ Error sending SMS: {e}")
        return SideEffectResult.failure("sms", str(e) or "Error al enviar SMS")
