from __future__ import annotations

import logging
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError

from .constants import PITCH_CONTEXT_CHARS
from .llm_client import (
    JSON_OBJECT_FORMAT,
    build_client,
    parse_json_with_repair,
    request_content,
    truncate,
    unwrap_list,
)
from .models import AnalysisResult, BoardScenario, CommitteeMessage, DueDiligenceClaim
from .prompts.simulations import (
    BOARD_PROMPT_TEMPLATE,
    COMMITTEE_PROMPT_TEMPLATE,
    DUE_DILIGENCE_PROMPT_TEMPLATE,
    JSON_SYSTEM_PROMPT,
)


logger = logging.getLogger("uvicorn.error")
RecordT = TypeVar("RecordT", bound=BaseModel)


def fallback_board_scenario() -> BoardScenario:
    return BoardScenario(
        id="error",
        title="Simulation Error",
        description="Could not generate scenario.",
        time_jump="Now",
        choices=[],
    )


def _request_json(client, prompt: str, *, label: str):
    raw_content = request_content(
        client,
        [
            {"role": "system", "content": JSON_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        label=label,
        response_format=JSON_OBJECT_FORMAT,
    )
    return parse_json_with_repair(raw_content, label=label)


def _validate_items(items: list, model: Type[RecordT], *, label: str) -> list[RecordT]:
    records: list[RecordT] = []
    for index, item in enumerate(items):
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            logger.info("%s_item_skipped index=%s error=%s", label, index, truncate(str(exc), 300))
    return records


def perform_due_diligence(pitch_text: str, analysis: AnalysisResult) -> list[DueDiligenceClaim]:
    """Pull verifiable founder claims out of the pitch and pair each with a probing question."""
    client = build_client()
    prompt = (
        DUE_DILIGENCE_PROMPT_TEMPLATE.replace("{company_name}", analysis.company_name)
        .replace("{summary}", analysis.summary)
        .replace("{pitch_context}", (pitch_text or "")[:PITCH_CONTEXT_CHARS])
    )

    try:
        payload = _request_json(client, prompt, label="Due diligence")
        claims = _validate_items(unwrap_list(payload, "claims"), DueDiligenceClaim, label="due_diligence")
    except Exception as exc:
        logger.warning("due_diligence_failed error=%s", truncate(str(exc)))
        return []

    logger.info("due_diligence_done company=%s claims=%s", analysis.company_name, len(claims))
    return claims


def start_committee_debate(analysis: AnalysisResult) -> list[CommitteeMessage]:
    """One in-character comment each from the tech, risk and vision partners."""
    client = build_client()
    prompt = (
        COMMITTEE_PROMPT_TEMPLATE.replace("{company_name}", analysis.company_name)
        .replace("{score}", f"{analysis.score:g}")
        .replace("{pros}", ", ".join(analysis.pros))
        .replace("{cons}", ", ".join(analysis.cons))
    )

    try:
        payload = _request_json(client, prompt, label="Committee debate")
        messages = _validate_items(unwrap_list(payload, "messages"), CommitteeMessage, label="committee")
    except Exception as exc:
        logger.warning("committee_debate_failed error=%s", truncate(str(exc)))
        return []

    logger.info("committee_debate_done company=%s messages=%s", analysis.company_name, len(messages))
    return messages


def start_board_simulation(analysis: AnalysisResult) -> BoardScenario:
    client = build_client()
    prompt = BOARD_PROMPT_TEMPLATE.replace("{company_name}", analysis.company_name).replace(
        "{cons}", ", ".join(analysis.cons)
    )

    try:
        payload = _request_json(client, prompt, label="Board simulation")
        if not isinstance(payload, dict):
            raise RuntimeError("Board simulation JSON root must be an object.")
        scenario = BoardScenario.model_validate(payload)
    except Exception as exc:
        logger.warning("board_simulation_failed error=%s", truncate(str(exc)))
        return fallback_board_scenario()

    logger.info(
        "board_simulation_done company=%s scenario=%s choices=%s",
        analysis.company_name,
        scenario.id,
        len(scenario.choices),
    )
    return scenario
