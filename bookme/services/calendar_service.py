"""
Calendar export for appointments
iCalendar (.ics) downloads and Google Calendar "add event" links
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode

from ..models import Appointment

PRODID = "-//BookMe//Barberia App//ES"
DEFAULT_LOCATION = "BookMe Barbería"
DEFAULT_DURATION_MINUTES = 60
GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"


def escape_ics_text(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
        .replace("\r", "")
    )


def format_utc(moment: datetime) -> str:
    """YYYYMMDDTHHMMSSZ; naive datetimes are taken as server-local time"""
    return moment.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _appointment_window(appointment: Appointment) -> tuple[datetime, datetime]:
    duration = appointment.service.duration if appointment.service else DEFAULT_DURATION_MINUTES
    start = appointment.starts_at
    return start, start + timedelta(minutes=duration or DEFAULT_DURATION_MINUTES)


def _names(appointment: Appointment) -> tuple[str, str, str]:
    service_name = appointment.service.name if appointment.service else "Servicio"
    barber_user = appointment.barber.user if appointment.barber else None
    barber_name = barber_user.name if barber_user and barber_user.name else "Barbero"
    client_name = appointment.client.name if appointment.client and appointment.client.name else "Cliente"
    return service_name, barber_name, client_name


def build_ics(
    title: str,
    start: datetime,
    end: datetime,
    description: Optional[str] = None,
    location: Optional[str] = None,
    organizer_email: Optional[str] = None,
    attendee_email: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """Single-event VCALENDAR with a display alarm 30 minutes before the start"""
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        "BEGIN:VEVENT",
        f"UID:{uuid.uuid4().hex}@bookme.app",
        f"DTSTAMP:{format_utc(now or datetime.now())}",
        f"DTSTART:{format_utc(start)}",
        f"DTEND:{format_utc(end)}",
        f"SUMMARY:{escape_ics_text(title)}",
    ]
    if description:
        lines.append(f"DESCRIPTION:{escape_ics_text(description)}")
    if location:
        lines.append(f"LOCATION:{escape_ics_text(location)}")
    if organizer_email:
        lines.append(f"ORGANIZER:mailto:{organizer_email}")
    if attendee_email:
        lines.append(f"ATTENDEE:mailto:{attendee_email}")
    lines += [
        "BEGIN:VALARM",
        "TRIGGER:-PT30M",
        "DESCRIPTION:Recordatorio de cita en BookMe",
        "ACTION:DISPLAY",
        "END:VALARM",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines)


def appointment_ics(appointment: Appointment, location: Optional[str] = None) -> str:
    start, end = _appointment_window(appointment)
    service_name, barber_name, client_name = _names(appointment)
    description = (
        f"Cita con {barber_name} para {service_name}.\n\n"
        f"Cliente: {client_name}\n\n"
        f"Reserva ID: {appointment.id}"
    )
    barber_user = appointment.barber.user if appointment.barber else None
    return build_ics(
        title=f"{service_name} - BookMe",
        start=start,
        end=end,
        description=description,
        location=location or DEFAULT_LOCATION,
        organizer_email=barber_user.email if barber_user else None,
        attendee_email=appointment.client.email if appointment.client else None,
    )


def google_calendar_url(appointment: Appointment, location: Optional[str] = None) -> str:
    start, end = _appointment_window(appointment)
    service_name, barber_name, client_name = _names(appointment)
    duration = int((end - start).total_seconds() // 60)
    details = "\n".join(
        [
            f"Servicio: {service_name}",
            f"Barbero: {barber_name}",
            f"Duración: {duration} minutos",
            f"Cliente: {client_name}",
            "",
            "Reservado a través de BookMe",
        ]
    )
    params = {
        "action": "TEMPLATE",
        "text": f"Cita en BookMe - {service_name}",
        "dates": f"{format_utc(start)}/{format_utc(end)}",
        "details": details,
        "location": location or DEFAULT_LOCATION,
    }
    barber_user = appointment.barber.user if appointment.barber else None
    attendees = [
        email
        for email in (barber_user.email if barber_user else None, appointment.client.email if appointment.client else None)
        if email
    ]
    if attendees:
        params["add"] = ",".join(attendees)
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"
