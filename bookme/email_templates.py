"""
MJML Email Templates
Appointment reminders, thank-you notes and invoices
"""

from typing import Optional

from .config import APP_URL

# Dark barbershop theme
THEME = {
    "primary": "#00f0ff",
    "background": "#0a0a0a",
    "card_bg": "#1a1a1a",
    "text_primary": "#ffffff",
    "text_secondary": "#cccccc",
    "text_muted": "#888888",
    "border": "#333333",
    "gold": "#ffd700",
    "danger": "#ef4444",
}


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    header_color: str = THEME["primary"],
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="{THEME['card_bg']}" padding="0 0 32px 0">
          <mj-column>
            <mj-button href="{cta_url}" background-color="{THEME['primary']}" color="#000000"
              font-weight="600" border-radius="8px" padding="12px 32px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{header_color}" padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="24px" font-weight="700" color="#000000">
              {title}
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="{THEME['card_bg']}" padding="32px 32px 16px 32px">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <mj-section padding="24px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}">
              BookMe - Barbería
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _appointment_details(service_name: str, other_name: str, date: str, time: str, other_label: str) -> str:
    return f"""
    <mj-text color="{THEME['text_primary']}">
      <strong>Servicio:</strong> {service_name}<br />
      <strong>{other_label}:</strong> {other_name}<br />
      <strong>Fecha:</strong> {date}<br />
      <strong>Hora:</strong> {time}
    </mj-text>
    """


# Per-window wording: (title, lead sentence, closing sentence)
REMINDER_COPY = {
    "24h": (
        "✂️ Recordatorio de Cita",
        "Te recordamos que tienes una cita programada para mañana.",
        "Si necesitas cancelar, recuerda hacerlo con al menos 24 horas de anticipación.",
    ),
    "12h": (
        "📅 Recordatorio de Cita Próxima",
        "Tu cita es en 12 horas.",
        "¡Te esperamos!",
    ),
    "2h": (
        "⏰ ¡Tu Cita es Pronto!",
        "Tu cita es en 2 horas. ¡Prepárate!",
        "Por favor llega unos minutos antes.",
    ),
    "30m": (
        "🚨 ¡URGENTE - Tu Cita es en 30 Minutos!",
        "¡Tu cita comienza en 30 minutos!",
        "Si vas a llegar tarde, avísanos lo antes posible.",
    ),
}


def appointment_reminder_template(
    window: str,
    recipient_name: str,
    other_name: str,
    service_name: str,
    date: str,
    time: str,
    recipient_is_barber: bool = False,
) -> str:
    """Reminder for one lookahead window, addressed to the client or the barber"""
    title, lead, closing = REMINDER_COPY[window]
    other_label = "Cliente" if recipient_is_barber else "Barbero"
    content = f"""
    <mj-text font-size="18px" color="{THEME['primary']}">Hola {recipient_name},</mj-text>
    <mj-text>{lead}</mj-text>
    {_appointment_details(service_name, other_name, date, time, other_label)}
    <mj-text font-size="14px" color="{THEME['text_muted']}">{closing}</mj-text>
    """
    header_color = THEME["danger"] if window == "30m" else THEME["primary"]
    return get_base_template(
        title=title,
        preview_text=f"{service_name} - {date} {time}",
        content_sections=content,
        header_color=header_color,
        cta_url=f"{APP_URL}/dashboard",
        cta_label="Ver mi cita",
    )


def thank_you_template(client_name: str, barber_name: str, service_name: str) -> str:
    content = f"""
    <mj-text font-size="18px" color="{THEME['primary']}">Hola {client_name},</mj-text>
    <mj-text>
      Gracias por visitarnos hoy. Esperamos que hayas disfrutado tu {service_name} con {barber_name}.
    </mj-text>
    <mj-text align="center" font-size="18px" color="{THEME['gold']}">⭐⭐⭐⭐⭐</mj-text>
    <mj-text align="center">¿Nos dejas una reseña? Tu opinión nos ayuda a mejorar.</mj-text>
    """
    return get_base_template(
        title="💈 ¡Gracias por tu Visita!",
        preview_text="Gracias por tu visita",
        content_sections=content,
        cta_url=f"{APP_URL}/dashboard",
        cta_label="Dejar reseña",
    )


def invoice_template(invoice) -> str:
    """Invoice summary; `invoice` is an Invoice row"""
    issuer_lines = "".join(
        f"{line}<br />"
        for line in (
            invoice.issuer_address,
            f"Tel: {invoice.issuer_phone}" if invoice.issuer_phone else "",
            f"Email: {invoice.issuer_email}" if invoice.issuer_email else "",
        )
        if line
    )
    rows = "".join(
        f"""
        <tr>
          <td style="padding: 6px 0;">{item.get('description', '')}</td>
          <td style="padding: 6px 0; text-align: center;">{item.get('quantity', 1)}</td>
          <td style="padding: 6px 0; text-align: right;">${float(item.get('total', 0)):.2f}</td>
        </tr>
        """
        for item in (invoice.items or [])
    )
    status = "PAGADA" if invoice.is_paid else "PENDIENTE"
    content = f"""
    <mj-text color="{THEME['text_primary']}">
      <strong>De:</strong> {invoice.issuer_name}<br />{issuer_lines}
    </mj-text>
    <mj-text color="{THEME['text_primary']}">
      <strong>Para:</strong> {invoice.recipient_name}<br />{invoice.recipient_email}
    </mj-text>
    <mj-table color="{THEME['text_secondary']}">
      <tr style="border-bottom: 1px solid {THEME['border']};">
        <th style="text-align: left;">Descripción</th>
        <th>Cant.</th>
        <th style="text-align: right;">Total</th>
      </tr>
      {rows}
    </mj-table>
    <mj-text align="right" font-size="20px" color="{THEME['primary']}">
      Total: ${invoice.amount:.2f}
    </mj-text>
    <mj-text align="right" font-size="14px">Estado: {status}</mj-text>
    """
    return get_base_template(
        title="Factura",
        preview_text=f"Factura {invoice.invoice_number}",
        content_sections=content,
    )
