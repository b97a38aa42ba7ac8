from __future__ import annotations  # HTTP gateway to the generative-AI routes

import base64
import binascii
import json
import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Protocol, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import LlmRoute

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 120  # Prompt preview length in request logs
ERROR_HINT_CHARS = 200  # Validation error length echoed back to the model

T = TypeVar("T", bound=BaseModel)
Messages = List[Dict[str, str]]


class HttpClient(Protocol):  # What the gateway needs from an injected client
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):
    @property
    def status_code(self) -> int: ...

    @property
    def content(self) -> bytes: ...

    def json(self) -> Any: ...


class LlmGatewayError(RuntimeError):  # Transport, status or output failure on a route
    pass


class LlmQuotaError(LlmGatewayError):  # HTTP 429 from the upstream service
    pass


def call(
    task: str,
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    system: Optional[str] = None,
    options: Optional[Dict[str, Any]] = None,
) -> T:
    """Send one user task (plus an optional system prompt) and return ``schema``."""

    messages: Messages = [{"role": "system", "content": system}] if system else []
    messages.append({"role": "user", "content": task})
    return chat(messages, schema, cfg=cfg, client=client, options=options)


def chat(
    messages: Sequence[Dict[str, str]],
    schema: Type[T],
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
    options: Optional[Dict[str, Any]] = None,
) -> T:
    """Run a chat completion, re-asking up to ``max_retries`` times when the reply fails validation.

    JSON routes get the schema as a leading system message. Plain-text routes
    rely on the schema's ``from_raw_content`` adapter instead.
    """

    return _complete(messages, schema, cfg, client, options)


def speech(text: str, *, cfg: LlmRoute, client: Optional[HttpClient] = None) -> bytes:
    """Synthesize ``text`` on an audio route and return the raw audio bytes."""

    body: Dict[str, Any] = {"model": cfg.model, "input": text}
    if cfg.voice:
        body["voice"] = cfg.voice
    if cfg.response_format:
        body["response_format"] = cfg.response_format
    logger.info("Speech request route=%s model=%s chars=%d", cfg.name, cfg.model, len(text))
    with _exchange(cfg, body, client) as response:
        audio = _audio_from(response)
    if not audio:
        raise LlmGatewayError("No audio data received")
    return audio


def _complete(
    messages: Sequence[Dict[str, str]],
    schema: Type[T],
    cfg: LlmRoute,
    client: Optional[HttpClient],
    options: Optional[Dict[str, Any]],
) -> T:
    prompt = _with_schema(schema, cfg) + [_clean_message(item) for item in messages]
    attempts = cfg.max_retries + 1
    logger.info(
        "LLM request route=%s model=%s attempts=%d preview=%s",
        cfg.name,
        cfg.model,
        attempts,
        _preview(prompt),
    )
    failure: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        turn = prompt if failure is None else prompt + [_retry_message(failure, cfg.enforce_json)]
        with _exchange(cfg, _chat_body(cfg, turn, options), client) as response:
            content = _content_from(response)
        try:
            result = _parse(schema, content)
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning("LLM output rejected route=%s attempt=%d/%d: %s", cfg.name, attempt, attempts, exc)
            failure = exc
            continue
        logger.info("LLM request done route=%s attempt=%d", cfg.name, attempt)
        return result
    raise LlmGatewayError(f"LLM output failed validation after {attempts} attempt(s)") from failure


def _with_schema(schema: Type[BaseModel], cfg: LlmRoute) -> Messages:
    if not cfg.enforce_json:
        return []
    schema_json = json.dumps(schema.model_json_schema(), indent=2)
    return [{"role": "system", "content": f"Reply with a single JSON object matching this schema:\n{schema_json}"}]


def _clean_message(item: Dict[str, str]) -> Dict[str, str]:
    role = str(item.get("role", "")).strip()
    if not role:
        raise ValueError("Chat message missing role")
    return {"role": role, "content": str(item.get("content", ""))}


def _chat_body(cfg: LlmRoute, messages: Messages, options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    body: Dict[str, Any] = {"model": cfg.model, "messages": messages}
    if cfg.temperature is not None:
        body["temperature"] = cfg.temperature
    if cfg.response_format:
        body["response_format"] = {"type": cfg.response_format}
    body.update(options or {})
    return body


def _headers(cfg: LlmRoute) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    api_key = os.getenv(cfg.api_key_env) if cfg.api_key_env else None
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)
    return headers


@contextmanager
def _exchange(cfg: LlmRoute, body: Dict[str, Any], client: Optional[HttpClient]) -> Iterator[HttpResponse]:
    """POST ``body`` to the route and yield a successful response; the client is closed afterwards."""

    url = f"{cfg.base_url}{cfg.endpoint}"
    owned = client is None
    http = httpx.Client(timeout=cfg.timeout_s) if owned else client
    try:
        try:
            if owned:
                response = http.post(url, json=body, headers=_headers(cfg))
            else:
                response = http.post(url, json=body, headers=_headers(cfg), timeout=cfg.timeout_s)
        except (httpx.HTTPError, OSError) as exc:
            logger.error("LLM transport failure route=%s: %s", cfg.name, exc)
            raise LlmGatewayError("LLM transport failed") from exc
        if response.status_code == 429:
            logger.error("LLM quota exceeded route=%s", cfg.name)
            raise LlmQuotaError(f"LLM route {cfg.name} is rate limited (429)")
        if response.status_code >= 400:
            logger.error("LLM error status route=%s status=%s", cfg.name, response.status_code)
            raise LlmGatewayError(f"LLM returned status {response.status_code}")
        yield response
    finally:
        close = getattr(http, "close", None)
        if callable(close):
            close()


def _content_from(response: HttpResponse) -> str:  # First choice's message text
    try:
        data = response.json()
    except ValueError as exc:
        raise LlmGatewayError("LLM payload was not JSON") from exc
    if isinstance(data, dict):
        choices = data.get("choices") or []
        first = choices[0] if isinstance(choices, list) and choices else {}
        message = first.get("message") if isinstance(first, dict) else None
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]
        if isinstance(data.get("content"), str):
            return data["content"]
    raise LlmGatewayError("LLM response missing content")


def _audio_from(response: HttpResponse) -> bytes:
    """Raw audio bodies pass through; JSON envelopes carry base64 in ``audio`` or ``data``."""

    raw = response.content
    if raw[:1] not in (b"{", b"["):
        return raw
    try:
        data = response.json()
    except ValueError:
        return raw
    encoded = data.get("audio") or data.get("data") if isinstance(data, dict) else None
    if not isinstance(encoded, str):
        raise LlmGatewayError("Speech response missing audio data")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise LlmGatewayError("Speech response audio was not base64") from exc


def _parse(schema: Type[T], content: str) -> T:
    text = _unfence(content)
    try:
        return schema.model_validate_json(text)
    except (json.JSONDecodeError, ValidationError):
        adapter = getattr(schema, "from_raw_content", None)
        if not callable(adapter):
            raise
        try:
            return adapter(text)  # type: ignore[return-value]
        except ValueError:
            pass
        raise


def _unfence(content: str) -> str:  # Drop a surrounding ```json fence
    text = content.strip()
    if not text.startswith("```"):
        return text
    lines = text.splitlines()[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _preview(messages: Messages) -> str:
    for message in reversed(messages):
        text = message["content"].strip()
        if text:
            line = text.splitlines()[0]
            return line if len(line) <= PREVIEW_CHARS else line[: PREVIEW_CHARS - 3] + "..."
    return ""


def _retry_message(error: Exception, enforce_json: bool) -> Dict[str, str]:
    reason = str(error).splitlines()[0].strip() if str(error) else ""
    if len(reason) > ERROR_HINT_CHARS:
        reason = reason[: ERROR_HINT_CHARS - 3] + "..."
    text = "The previous reply failed validation."
    if reason:
        text += f" Reason: {reason}."
    text += (
        " Return a single JSON object that matches the schema."
        if enforce_json
        else " Follow the requested format precisely."
    )
    return {"role": "system", "content": text}
