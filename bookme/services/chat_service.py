"""
Chat completion gateway
Thin async client for the OpenAI-compatible completions endpoint behind the assistant
"""

import logging
from typing import Optional

import httpx

from ..config import ABACUSAI_API_KEY, CHAT_API_URL, CHAT_MODEL

logger = logging.getLogger(__name__)

CHAT_TIMEOUT_SECONDS = 30.0


class ChatGatewayError(Exception):
    """The completion endpoint failed or answered with something unusable"""


async def create_chat_completion(
    messages: list[dict],
    tools: Optional[list[dict]] = None,
    max_tokens: int = 1500,
    temperature: float = 0.7,
) -> dict:
    """
    Request one non-streaming completion and return the assistant message.

    Raises:
        ChatGatewayError: On transport errors, non-2xx answers or a body without choices
    """
    payload = {
        "model": CHAT_MODEL,
        "messages": messages,
        "stream": False,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    if tools:
        payload["tools"] = tools
        payload["tool_choice"] = "auto"

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                CHAT_API_URL,
                headers={"Authorization": f"Bearer {ABACUSAI_API_KEY}", "Content-Type": "application/json"},
                json=payload,
                timeout=CHAT_TIMEOUT_SECONDS,
            )
    except httpx.HTTPError as e:
        logger.error(f"❌ Chat gateway request failed: {e}")
        raise ChatGatewayError(str(e)) from e

    if response.status_code >= 400:
        logger.error(f"❌ Chat gateway error {response.status_code}: {response.text[:500]}")
        raise ChatGatewayError(f"LLM API error: {response.status_code}")

    try:
        return response.json()["choices"][0]["message"]
    except (ValueError, KeyError, IndexError) as e:
        logger.error(f"❌ Unexpected chat gateway response: {e}")
        raise ChatGatewayError("Respuesta inválida del modelo") from e
