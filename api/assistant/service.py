"""
Museum assistant: forwards the conversation to the chat-completions API.
"""

from __future__ import annotations

import logging

from core import deepseek
from core.config import env_float, env_int, env_str
from core.errors import UnavailableError

from . import prompts, schemas

logger = logging.getLogger(__name__)


def api_key() -> str:
    return env_str("DEEPSEEK_API_KEY", "")


def base_url() -> str:
    return env_str("DEEPSEEK_BASE_URL", "https://api.deepseek.com")


def chat_model() -> str:
    return env_str("DEEPSEEK_MODEL", "deepseek-chat")


async def chat(request: schemas.ChatRequest) -> schemas.ChatResponse:
    key = api_key()
    if not key:
        return schemas.ChatResponse(response=prompts.offline_reply(request.message))

    messages = [{"role": "system", "content": prompts.system_prompt()}]
    messages.extend({"role": m.role, "content": m.content} for m in request.conversation_history)
    messages.append({"role": "user", "content": request.message})

    try:
        answer = await deepseek.chat_messages(
            base_url=base_url(),
            api_key=key,
            model=chat_model(),
            messages=messages,
            timeout_s=env_float("DEEPSEEK_TIMEOUT_S", 60.0),
            temperature=0.7,
            max_tokens=env_int("DEEPSEEK_MAX_TOKENS", 2000),
        )
    except deepseek.ChatCompletionError as exc:
        logger.warning("assistant_upstream_failed error=%s", exc)
        raise UnavailableError("Assistant is temporarily unavailable.") from exc
    return schemas.ChatResponse(response=answer)
