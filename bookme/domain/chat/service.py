"""
Booking assistant
Runs one chat turn against the LLM, executing at most one tool call with
real shop data before asking the model for the final answer.
"""

import json
import logging
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import AppointmentStatus, Barber, Service, User
from ...services.chat_service import create_chat_completion
from ...shared.validators import parse_iso_date
from ..appointments.schemas import AppointmentCreate
from ..appointments.service import AppointmentService
from ..availability.service import AvailabilityService

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "No pude procesar tu solicitud."

SYSTEM_PROMPT = """Eres el asistente virtual de una barbería moderna. Respondes siempre en español, \
de forma amable, profesional y concisa.

Puedes:
1. Informar sobre servicios, precios y duración (usa "getServices").
2. Presentar a los barberos y sus especialidades (usa "getBarbers").
3. Consultar horarios libres de un barbero en una fecha (usa "checkAvailability").
4. Crear reservas para el usuario autenticado (usa "createAppointment").

Para reservar:
- Pregunta el servicio, la fecha, la hora y el barbero si faltan.
- Consulta la disponibilidad antes de proponer un horario.
- Usa "createAppointment" cuando tengas todos los datos y confirma los detalles al terminar.

Política de cancelación: las citas se cancelan con al menos 24 horas de anticipación."""

TOOLS = [
    {
        "type": "function",
        "function": {
            "name": "getServices",
            "description": "Obtiene los servicios activos de la barbería con precio y duración",
            "parameters": {"type": "object", "properties": {}, "required": []},
        },
    },
    {
        "type": "function",
        "function": {
            "name": "getBarbers",
            "description": "Obtiene los barberos activos con sus especialidades",
            "parameters": {"type": "object", "properties": {}, "required": []},
        },
    },
    {
        "type": "function",
        "function": {
            "name": "checkAvailability",
            "description": "Consulta los horarios libres de un barbero en una fecha",
            "parameters": {
                "type": "object",
                "properties": {
                    "barberId": {"type": "string", "description": "ID del barbero"},
                    "date": {"type": "string", "description": "Fecha en formato YYYY-MM-DD"},
                },
                "required": ["barberId", "date"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "createAppointment",
            "description": "Crea una cita confirmada para el usuario autenticado",
            "parameters": {
                "type": "object",
                "properties": {
                    "serviceId": {"type": "string", "description": "ID del servicio"},
                    "barberId": {"type": "string", "description": "ID del barbero"},
                    "date": {"type": "string", "description": "Fecha en formato YYYY-MM-DD"},
                    "time": {"type": "string", "description": "Hora en formato HH:MM (ej: 14:00)"},
                },
                "required": ["serviceId", "barberId", "date", "time"],
            },
        },
    },
]


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ChatAssistantService:
    def __init__(self, db: Session, user: Optional[User] = None):
        self.db = db
        self.user = user

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def get_services(self) -> dict:
        services = self.db.query(Service).filter(Service.is_active.is_(True)).order_by(Service.name).all()
        return {
            "services": [
                {"id": s.id, "name": s.name, "description": s.description, "price": s.price, "duration": s.duration}
                for s in services
            ]
        }

    def get_barbers(self) -> dict:
        barbers = self.db.query(Barber).filter(Barber.is_active.is_(True)).all()
        return {
            "barbers": [
                {
                    "id": b.id,
                    "name": b.user.name if b.user else None,
                    "specialties": b.specialties or [],
                    "bio": b.bio,
                }
                for b in barbers
            ]
        }

    def check_availability(self, args: dict) -> dict:
        barber_id = _as_int(args.get("barberId"))
        day = parse_iso_date(args.get("date"))
        if barber_id is None or day is None:
            return {"error": "Barbero y fecha (YYYY-MM-DD) son requeridos"}
        slots = AvailabilityService(self.db).get_available_slots(barber_id, day)
        return {"barberId": barber_id, "date": day.isoformat(), "availableSlots": slots}

    def create_appointment(self, args: dict) -> dict:
        if self.user is None:
            return {"error": "Debes iniciar sesión para hacer una reserva", "requiresAuth": True}

        data = AppointmentCreate(
            serviceId=_as_int(args.get("serviceId")),
            barberId=_as_int(args.get("barberId")),
            date=args.get("date"),
            time=args.get("time"),
        )
        try:
            appointment = AppointmentService(self.db).create_appointment(
                self.user, data, status=AppointmentStatus.CONFIRMED
            )
        except HTTPException as e:
            return {"error": e.detail}

        service_name = appointment.service.name
        barber_name = appointment.barber.user.name if appointment.barber.user else ""
        day = appointment.date.isoformat()
        return {
            "success": True,
            "appointment": {
                "id": appointment.id,
                "service": service_name,
                "barber": barber_name,
                "date": day,
                "time": appointment.time,
                "status": "CONFIRMADA",
            },
            "message": (
                f"¡Reserva confirmada! Tu cita de {service_name} con {barber_name} "
                f"está agendada para el {day} a las {appointment.time}."
            ),
        }

    def run_tool(self, name: str, args: dict) -> dict:
        logger.info(f"🛠️ Assistant tool call: {name}")
        if name == "getServices":
            return self.get_services()
        if name == "getBarbers":
            return self.get_barbers()
        if name == "checkAvailability":
            return self.check_availability(args)
        if name == "createAppointment":
            return self.create_appointment(args)
        return {"error": "Función no reconocida"}

    # ------------------------------------------------------------------
    # Conversation
    # ------------------------------------------------------------------

    async def reply(self, messages: list[dict]) -> str:
        """
        Answer the conversation.

        Raises:
            ChatGatewayError: When either completion request fails
        """
        full_messages = [{"role": "system", "content": SYSTEM_PROMPT}, *messages]
        assistant_message = await create_chat_completion(full_messages, tools=TOOLS)

        tool_calls = assistant_message.get("tool_calls") or []
        if not tool_calls:
            return assistant_message.get("content") or FALLBACK_REPLY

        tool_call = tool_calls[0]
        name = tool_call["function"]["name"]
        try:
            args = json.loads(tool_call["function"].get("arguments") or "{}")
        except json.JSONDecodeError:
            args = {}
        if not isinstance(args, dict):
            args = {}

        result = self.run_tool(name, args)
        final_message = await create_chat_completion(
            [
                *full_messages,
                assistant_message,
                {"role": "tool", "tool_call_id": tool_call.get("id"), "name": name, "content": json.dumps(result)},
            ],
            max_tokens=1000,
        )
        return final_message.get("content") or FALLBACK_REPLY
