"""Tests for the booking assistant and its tool calls."""

import asyncio
import json

import pytest

from bookme.domain.chat import service as chat_service
from bookme.domain.chat.service import FALLBACK_REPLY, ChatAssistantService
from bookme.models import Appointment, AppointmentStatus
from bookme.services.chat_service import ChatGatewayError
from tests.conftest import auth_headers, make_availability, make_barber, make_service, make_user


class ScriptedModel:
    """Returns queued assistant messages and records every request"""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.requests = []

    async def __call__(self, messages, tools=None, max_tokens=1500, temperature=0.7):
        self.requests.append({"messages": messages, "tools": tools, "max_tokens": max_tokens})
        return self.replies.pop(0)


def tool_call(name: str, arguments: dict) -> dict:
    return {
        "role": "assistant",
        "content": None,
        "tool_calls": [
            {"id": "call_1", "type": "function", "function": {"name": name, "arguments": json.dumps(arguments)}}
        ],
    }


def install(monkeypatch, *replies) -> ScriptedModel:
    model = ScriptedModel(*replies)
    monkeypatch.setattr(chat_service, "create_chat_completion", model)
    return model


class TestTools:
    def test_services_lists_only_active(self, db):
        make_service(db, name="Corte")
        make_service(db, name="Tinte", is_active=False)

        result = ChatAssistantService(db).get_services()

        assert [s["name"] for s in result["services"]] == ["Corte"]

    def test_check_availability(self, db):
        barber = make_barber(db)
        make_availability(db, barber, "MONDAY", "09:00", "10:00")

        result = ChatAssistantService(db).run_tool(
            "checkAvailability", {"barberId": str(barber.id), "date": "2030-06-10"}
        )

        assert result["availableSlots"] == ["09:00", "09:30"]

    def test_check_availability_needs_arguments(self, db):
        result = ChatAssistantService(db).check_availability({"barberId": "abc"})

        assert "error" in result

    def test_booking_requires_login(self, db):
        result = ChatAssistantService(db, None).create_appointment({})

        assert result["requiresAuth"] is True

    def test_booking_creates_confirmed_appointment(self, db):
        barber = make_barber(db, name="Pedro")
        service = make_service(db, name="Corte")
        user = make_user(db)

        result = ChatAssistantService(db, user).create_appointment(
            {"serviceId": str(service.id), "barberId": str(barber.id), "date": "2030-06-10", "time": "10:00"}
        )

        assert result["success"] is True
        assert result["appointment"]["status"] == "CONFIRMADA"
        assert db.query(Appointment).one().status == AppointmentStatus.CONFIRMED

    def test_booking_conflict_is_returned_as_error(self, db):
        barber = make_barber(db)
        service = make_service(db)
        user = make_user(db)
        args = {"serviceId": service.id, "barberId": barber.id, "date": "2030-06-10", "time": "10:00"}
        assistant = ChatAssistantService(db, user)
        assistant.create_appointment(args)

        result = assistant.create_appointment(args)

        assert result == {"error": "Este horario ya está reservado"}

    def test_unknown_tool(self, db):
        assert ChatAssistantService(db).run_tool("deleteEverything", {}) == {"error": "Función no reconocida"}


class TestConversation:
    def test_plain_answer(self, client, db, monkeypatch):
        model = install(monkeypatch, {"role": "assistant", "content": "¡Hola! ¿En qué te ayudo?"})

        response = client.post("/chat", json={"messages": [{"role": "user", "content": "Hola"}]})

        assert response.status_code == 200
        assert response.json() == {"role": "assistant", "content": "¡Hola! ¿En qué te ayudo?"}
        assert model.requests[0]["messages"][0]["role"] == "system"
        assert model.requests[0]["tools"] is not None

    def test_tool_round_trip(self, client, db, monkeypatch):
        make_service(db, name="Corte", price=25.0)
        model = install(
            monkeypatch,
            tool_call("getServices", {}),
            {"role": "assistant", "content": "El corte cuesta $25."},
        )

        response = client.post("/chat", json={"messages": [{"role": "user", "content": "¿Precios?"}]})

        assert response.json()["content"] == "El corte cuesta $25."
        tool_message = model.requests[1]["messages"][-1]
        assert tool_message["role"] == "tool"
        assert tool_message["tool_call_id"] == "call_1"
        assert json.loads(tool_message["content"])["services"][0]["name"] == "Corte"
        assert model.requests[1]["max_tokens"] == 1000

    def test_authenticated_booking_through_chat(self, client, db, monkeypatch):
        barber = make_barber(db)
        service = make_service(db)
        user = make_user(db)
        install(
            monkeypatch,
            tool_call(
                "createAppointment",
                {"serviceId": str(service.id), "barberId": str(barber.id), "date": "2030-06-10", "time": "11:00"},
            ),
            {"role": "assistant", "content": "Listo, reservado."},
        )

        response = client.post(
            "/chat", json={"messages": [{"role": "user", "content": "Reserva"}]}, headers=auth_headers(user)
        )

        assert response.json()["content"] == "Listo, reservado."
        assert db.query(Appointment).one().client_id == user.id

    def test_empty_content_falls_back(self, client, db, monkeypatch):
        install(monkeypatch, {"role": "assistant", "content": ""})

        response = client.post("/chat", json={"messages": [{"role": "user", "content": "?"}]})

        assert response.json()["content"] == FALLBACK_REPLY

    def test_messages_required(self, client):
        response = client.post("/chat", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Messages array is required"

    def test_gateway_failure_is_bad_gateway(self, client, db, monkeypatch):
        async def failing(messages, tools=None, max_tokens=1500, temperature=0.7):
            raise ChatGatewayError("LLM API error: 500")

        monkeypatch.setattr(chat_service, "create_chat_completion", failing)

        response = client.post("/chat", json={"messages": [{"role": "user", "content": "Hola"}]})

        assert response.status_code == 502


@pytest.mark.parametrize("arguments", ["{not json", "", "[]", '"2030-06-10"'])
def test_malformed_tool_arguments_are_treated_as_empty(db, monkeypatch, arguments):
    model = install(
        monkeypatch,
        {
            "role": "assistant",
            "tool_calls": [{"id": "c", "function": {"name": "checkAvailability", "arguments": arguments}}],
        },
        {"role": "assistant", "content": "¿Para qué barbero y fecha?"},
    )

    reply = asyncio.run(ChatAssistantService(db).reply([{"role": "user", "content": "¿Horarios?"}]))

    assert reply == "¿Para qué barbero y fecha?"
    assert "error" in json.loads(model.requests[1]["messages"][-1]["content"])
