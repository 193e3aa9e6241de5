"""
Email Service using Resend
Compiles MJML templates to HTML and sends appointment and invoice emails
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .email_templates import appointment_reminder_template, invoice_template, thank_you_template

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY

# Subjects per reminder window: (to client, to barber)
REMINDER_SUBJECTS = {
    "24h": ("⏰ Recordatorio: Tu cita es mañana", "⏰ Recordatorio: Cita programada mañana"),
    "12h": ("⏰ Tu cita es en 12 horas", "⏰ Cita en 12 horas"),
    "2h": ("⏰ ¡Tu cita es en 2 horas!", "⏰ Cita en 2 horas"),
    "30m": ("🚨 ¡URGENTE! Tu cita es en 30 minutos", "🚨 Cita en 30 minutos"),
}
THANK_YOU_SUBJECT = "💈 ¡Gracias por tu visita!"


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict-like with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise Exception("Email service not configured")

    recipients = [to] if isinstance(to, str) else to
    html_content = compile_mjml_to_html(mjml_content)

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise Exception(f"Failed to send email: {str(e)}") from e


async def send_reminder_email(
    window: str,
    to: str,
    recipient_name: str,
    other_name: str,
    service_name: str,
    date: str,
    time: str,
    recipient_is_barber: bool = False,
) -> dict:
    """Send the reminder for one lookahead window to a client or barber"""
    client_subject, barber_subject = REMINDER_SUBJECTS[window]
    return await send_email(
        to=to,
        subject=barber_subject if recipient_is_barber else client_subject,
        mjml_content=appointment_reminder_template(
            window, recipient_name, other_name, service_name, date, time, recipient_is_barber
        ),
    )


async def send_thank_you_email(to: str, client_name: str, barber_name: str, service_name: str) -> dict:
    return await send_email(
        to=to,
        subject=THANK_YOU_SUBJECT,
        mjml_content=thank_you_template(client_name, barber_name, service_name),
    )


async def send_invoice_email(invoice) -> dict:
    return await send_email(
        to=invoice.recipient_email,
        subject=f"Factura {invoice.invoice_number} - {invoice.issuer_name}",
        mjml_content=invoice_template(invoice),
    )
