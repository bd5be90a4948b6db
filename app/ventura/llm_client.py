from __future__ import annotations

import json
import os
from typing import Any

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI

from .constants import MAX_ERROR_CHARS


DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_TIMEOUT_SECONDS = 120.0
API_KEY_ENV = "GEMINI_API_KEY"

JSON_OBJECT_FORMAT = {"type": "json_object"}


class MissingAPIKeyError(RuntimeError):
    """Raised before any network call when the API key is not configured."""


def truncate(text: str, max_chars: int = MAX_ERROR_CHARS) -> str:
    value = (text or "").strip()
    if len(value) <= max_chars:
        return value
    return value[: max_chars - 3] + "..."


def get_api_key() -> str:
    api_key = os.getenv(API_KEY_ENV, "").strip()
    if not api_key:
        raise MissingAPIKeyError(
            "Gemini API Key is missing. Please check your environment configuration "
            f'(example: export {API_KEY_ENV}="YOUR_KEY_HERE").'
        )
    return api_key


def base_url() -> str:
    return os.getenv("VENTURA_LLM_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL


def model_name() -> str:
    return os.getenv("VENTURA_LLM_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL


def build_client() -> OpenAI:
    api_key = get_api_key()
    timeout = float(os.getenv("VENTURA_LLM_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)))
    return OpenAI(base_url=base_url(), api_key=api_key, timeout=timeout)


def json_schema_format(name: str, schema: dict) -> dict:
    return {"type": "json_schema", "json_schema": {"name": name, "schema": schema}}


def extract_content(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts: list[str] = []
        for item in value:
            if isinstance(item, dict):
                text = item.get("text")
                if text:
                    parts.append(str(text))
        return "\n".join(parts).strip()
    return str(value or "").strip()


def request_content(
    client: OpenAI,
    messages: list[dict],
    *,
    label: str,
    response_format: dict | None = None,
    temperature: float | None = None,
) -> str:
    """Send one chat completion and return the assistant text.

    Every provider failure is re-raised as ``RuntimeError`` carrying ``label``
    so callers can decide whether to surface or swallow it.
    """
    kwargs: dict[str, Any] = {"model": model_name(), "messages": messages}
    if response_format is not None:
        kwargs["response_format"] = response_format
    if temperature is not None:
        kwargs["temperature"] = temperature

    try:
        response = client.chat.completions.create(**kwargs)
    except APIStatusError as exc:
        status_code = getattr(exc, "status_code", None)
        detail = truncate(getattr(exc, "message", None) or str(exc))
        if status_code is not None:
            raise RuntimeError(f"{label} request failed ({status_code}): {detail}") from exc
        raise RuntimeError(f"{label} request failed: {detail}") from exc
    except APITimeoutError as exc:
        raise RuntimeError(f"{label} request timed out.") from exc
    except APIConnectionError as exc:
        raise RuntimeError(f"Failed to connect to LLM provider: {exc}") from exc

    choice = response.choices[0] if response.choices else None
    if choice is None:
        raise RuntimeError(f"{label} response did not contain choices.")
    return extract_content(choice.message.content)


def parse_json_with_repair(raw_content: str, *, label: str) -> Any:
    """Decode model output, falling back to the outermost object or array."""
    text = (raw_content or "").strip()
    if not text:
        raise RuntimeError(f"{label} output is empty.")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    for opener, closer in (("{", "}"), ("[", "]")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start == -1 or end <= start:
            continue
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            continue
    raise RuntimeError(f"{label} output is not valid JSON.")


def unwrap_list(payload: Any, key: str) -> list:
    """Accept either a bare JSON array or an object wrapping it under ``key``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        value = payload.get(key)
        if isinstance(value, list):
            return value
        lists = [item for item in payload.values() if isinstance(item, list)]
        if len(lists) == 1:
            return lists[0]
    raise RuntimeError(f'Expected a JSON array or an object with a "{key}" array.')
