from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from openai import OpenAI

from .constants import MIN_MESSAGES_FOR_PROGRESS_CHECK, PROGRESS_CHECK_WINDOW
from .llm_client import (
    JSON_OBJECT_FORMAT,
    build_client,
    parse_json_with_repair,
    request_content,
    truncate,
)
from .models import AnalysisResult, ChatMessage, NegotiationProgress, TermSheet
from .prompts.negotiation import (
    CONTEXT_TEMPLATE,
    OPENING_USER_PROMPT,
    PROGRESS_SYSTEM_PROMPT,
    PROGRESS_USER_PROMPT_TEMPLATE,
    SYSTEM_PROMPT,
    TERM_SHEET_SYSTEM_PROMPT,
    TERM_SHEET_USER_PROMPT_TEMPLATE,
)


logger = logging.getLogger("uvicorn.error")
CANCEL_PREFIX = "🚫 "


def build_initial_context(analysis: AnalysisResult) -> str:
    return (
        f"Startup: {analysis.company_name}\n"
        f"Screening score: {analysis.score:g}/100\n"
        f"Summary: {analysis.summary}\n"
        f"Strengths: {', '.join(analysis.pros)}\n"
        f"Risks: {', '.join(analysis.cons)}"
    )


def _speaker(message: ChatMessage) -> str:
    return "Founder" if message.role == "user" else "VC"


def format_conversation(messages: Iterable[ChatMessage]) -> str:
    return "\n\n".join(f"{_speaker(message)}: {message.text}" for message in messages)


class NegotiationSession:
    """Chat with the Ventura negotiator.

    The session owns its history; pass ``history`` to resume a conversation a
    stateless caller kept on its side.
    """

    def __init__(
        self,
        initial_context: str = "",
        history: Optional[Sequence[ChatMessage]] = None,
        client: Optional[OpenAI] = None,
    ) -> None:
        self._client = client or build_client()
        self._system_prompt = SYSTEM_PROMPT
        if initial_context.strip():
            self._system_prompt += "\n\n" + CONTEXT_TEMPLATE.replace(
                "{initial_context}", initial_context.strip()
            )
        self.history: list[ChatMessage] = list(history or [])

    def _chat_messages(self, extra_user_prompt: Optional[str] = None) -> list[dict]:
        messages = [{"role": "system", "content": self._system_prompt}]
        if extra_user_prompt:
            messages.append({"role": "user", "content": extra_user_prompt})
        for message in self.history:
            role = "user" if message.role == "user" else "assistant"
            messages.append({"role": role, "content": message.text})
        return messages

    def _complete(self, extra_user_prompt: Optional[str] = None) -> str:
        reply = request_content(
            self._client,
            self._chat_messages(extra_user_prompt),
            label="Negotiation",
            temperature=0.7,
        ).strip()
        if not reply:
            raise RuntimeError("Negotiation response content is empty.")
        self.history.append(ChatMessage(role="model", text=reply))
        return reply

    def opening_message(self) -> str:
        return self._complete(OPENING_USER_PROMPT)

    def send_message(self, text: str) -> str:
        text = (text or "").strip()
        if not text:
            raise ValueError("Message text is empty.")
        self.history.append(ChatMessage(role="user", text=text))
        try:
            return self._complete()
        except Exception:
            self.history.pop()
            raise


def create_negotiation_session(
    initial_context: str,
    history: Optional[Sequence[ChatMessage]] = None,
) -> NegotiationSession:
    return NegotiationSession(initial_context=initial_context, history=history)


def check_negotiation_progress(
    messages: Sequence[ChatMessage],
    analysis: AnalysisResult,
) -> NegotiationProgress:
    """Decide whether the VC should warn the founder or walk away."""
    if len(messages) < MIN_MESSAGES_FOR_PROGRESS_CHECK:
        return NegotiationProgress()

    client = build_client()
    recent_messages = list(messages)[-PROGRESS_CHECK_WINDOW:]
    prompt = (
        PROGRESS_USER_PROMPT_TEMPLATE.replace("{company_name}", analysis.company_name)
        .replace("{score}", f"{analysis.score:g}")
        .replace("{conversation_text}", format_conversation(recent_messages))
    )

    try:
        raw_content = request_content(
            client,
            [
                {"role": "system", "content": PROGRESS_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            label="Negotiation progress",
            response_format=JSON_OBJECT_FORMAT,
        )
        payload = parse_json_with_repair(raw_content, label="Negotiation progress")
        if not isinstance(payload, dict):
            raise RuntimeError("Negotiation progress JSON root must be an object.")
        progress = NegotiationProgress.model_validate(payload)
    except Exception as exc:
        logger.warning("negotiation_progress_failed error=%s", truncate(str(exc)))
        return NegotiationProgress()

    if progress.should_cancel and progress.reason:
        progress = progress.model_copy(update={"reason": CANCEL_PREFIX + progress.reason})

    logger.info(
        "negotiation_progress_checked company=%s should_cancel=%s show_warning=%s",
        analysis.company_name,
        progress.should_cancel,
        progress.show_warning,
    )
    return progress


def _fill_blank_strings(payload: dict) -> dict:
    # Models sometimes send "" or null for unsettled terms; let the record defaults apply.
    cleaned: dict = {}
    for key, value in payload.items():
        if isinstance(value, dict):
            cleaned[key] = _fill_blank_strings(value)
        elif value is None or (isinstance(value, str) and not value.strip()):
            continue
        else:
            cleaned[key] = value
    return cleaned


def generate_term_sheet(
    messages: Sequence[ChatMessage],
    analysis: AnalysisResult,
) -> TermSheet:
    """Extract the agreed terms from a negotiation transcript."""
    client = build_client()
    if not messages:
        return TermSheet()

    prompt = TERM_SHEET_USER_PROMPT_TEMPLATE.replace("{company_name}", analysis.company_name).replace(
        "{conversation_text}", format_conversation(messages)
    )

    try:
        raw_content = request_content(
            client,
            [
                {"role": "system", "content": TERM_SHEET_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            label="Term sheet",
            response_format=JSON_OBJECT_FORMAT,
        )
        payload = parse_json_with_repair(raw_content, label="Term sheet")
        if not isinstance(payload, dict):
            raise RuntimeError("Term sheet JSON root must be an object.")
        term_sheet = TermSheet.model_validate(_fill_blank_strings(payload))
    except Exception as exc:
        logger.warning("term_sheet_failed error=%s", truncate(str(exc)))
        return TermSheet()

    logger.info(
        "term_sheet_generated company=%s deal_completed=%s",
        analysis.company_name,
        term_sheet.deal_completed,
    )
    return term_sheet
