"""
OpenAI-compatible chat-completions client (DeepSeek by default).

Used endpoint:
- POST /chat/completions -> {"choices": [{"message": {"role": "assistant", "content": "..."}}]}
"""

from __future__ import annotations

from typing import Any

import httpx


# Upstream failures are explicit and separable from other runtime errors.
class ChatCompletionError(RuntimeError):
    pass


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise ChatCompletionError("Chat API base URL is empty.")
    return base_url.rstrip("/")


async def chat_messages(
    *,
    base_url: str,
    api_key: str,
    model: str,
    messages: list[dict[str, str]],
    timeout_s: float = 60.0,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> str:
    """
    Generate one assistant message from a message list.
    """
    base_url = _normalize_base_url(base_url)
    model = (model or "").strip()
    if not model:
        raise ChatCompletionError("Chat model name is empty.")
    if not messages:
        raise ChatCompletionError("Messages list is empty.")

    payload: dict[str, Any] = {"model": model, "messages": messages, "stream": False}
    if temperature is not None:
        payload["temperature"] = float(temperature)
    if max_tokens is not None:
        payload["max_tokens"] = int(max_tokens)

    headers = {"Authorization": f"Bearer {api_key}"}
    try:
        async with httpx.AsyncClient(base_url=base_url, timeout=timeout_s, headers=headers) as client:
            resp = await client.post("/chat/completions", json=payload)
    except httpx.HTTPError as exc:
        raise ChatCompletionError(f"Chat request failed: {exc}") from exc

    if resp.status_code != 200:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:500]
        raise ChatCompletionError(f"Chat request failed: {resp.status_code} {body}")

    try:
        data: dict[str, Any] = resp.json()
    except ValueError as exc:
        raise ChatCompletionError("Chat API returned invalid JSON.") from exc

    choices = data.get("choices")
    if isinstance(choices, list) and choices:
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str) and content.strip():
                return content.strip()

    raise ChatCompletionError("Chat API returned an empty response.")
