from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from .llm_client import (
    build_client,
    json_schema_format,
    parse_json_with_repair,
    request_content,
    truncate,
)
from .media import (
    PDF_MIME,
    MaterialError,
    PitchMaterial,
    extract_report_text,
    inline_file_part,
    resolve_video_mime,
)
from .models import AnalysisResult
from .prompts.analysis import (
    ANALYSIS_SCHEMA,
    ANALYSIS_SCHEMA_NAME,
    ANALYST_INSTRUCTIONS,
    REPORT_EXTRACT_TEMPLATE,
    REPORT_TEXT_TEMPLATE,
    SYSTEM_PROMPT,
)


logger = logging.getLogger("uvicorn.error")


def _report_parts(report_file: PitchMaterial) -> list[dict]:
    parts: list[dict] = []
    try:
        report_extract = extract_report_text(report_file)
        if report_file.extension == ".pdf":
            pdf = PitchMaterial(report_file.filename, PDF_MIME, report_file.data)
            parts.append(inline_file_part(pdf))
    except MaterialError:
        raise
    except Exception as exc:
        logger.warning("analysis_report_unreadable filename=%s error=%s", report_file.filename, exc)
        raise MaterialError("Failed to process report file.") from exc

    if report_extract:
        parts.append(
            {
                "type": "text",
                "text": REPORT_EXTRACT_TEMPLATE.replace("{filename}", report_file.filename).replace(
                    "{report_extract}", report_extract
                ),
            }
        )
    return parts


def _video_part(video_file: PitchMaterial) -> dict:
    try:
        mime_type = resolve_video_mime(video_file.filename, video_file.content_type)
        video = PitchMaterial(video_file.filename, mime_type, video_file.data)
        return inline_file_part(video)
    except MaterialError:
        raise
    except Exception as exc:
        logger.warning("analysis_video_unreadable filename=%s error=%s", video_file.filename, exc)
        raise MaterialError(
            "Failed to process video file. It might be too large for this demo."
        ) from exc


def build_analysis_parts(
    video_file: Optional[PitchMaterial],
    report_text: str,
    report_file: Optional[PitchMaterial],
) -> list[dict]:
    """Assemble the multi-part user content in the order the analyst reads it."""
    parts: list[dict] = [{"type": "text", "text": ANALYST_INSTRUCTIONS}]

    report_text = (report_text or "").strip()
    if report_text:
        parts.append({"type": "text", "text": REPORT_TEXT_TEMPLATE.replace("{report_text}", report_text)})

    if report_file is not None:
        parts.extend(_report_parts(report_file))

    if video_file is not None:
        parts.append(_video_part(video_file))

    return parts


def parse_analysis(raw_content: str) -> AnalysisResult:
    payload = parse_json_with_repair(raw_content, label="Analysis")
    if not isinstance(payload, dict):
        raise RuntimeError("Analysis JSON root must be an object.")
    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as exc:
        raise RuntimeError(f"Analysis payload does not match the schema: {exc}") from exc


def analyze_startup_pitch(
    video_file: Optional[PitchMaterial],
    report_text: str,
    report_file: Optional[PitchMaterial],
) -> AnalysisResult:
    """Score a pitch from any combination of video, report file and text summary.

    Raises ``MissingAPIKeyError`` before touching the materials when the key is
    absent, ``MaterialError`` when an upload cannot be encoded, and
    ``RuntimeError`` when the service call fails or returns unusable JSON.
    """
    client = build_client()

    if video_file is None and report_file is None and not (report_text or "").strip():
        raise ValueError("Provide a pitch video, a report file, or a text summary.")

    parts = build_analysis_parts(video_file, report_text, report_file)
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": parts},
    ]

    try:
        raw_content = request_content(
            client,
            messages,
            label="Analysis",
            response_format=json_schema_format(ANALYSIS_SCHEMA_NAME, ANALYSIS_SCHEMA),
        )
        if not raw_content:
            raise RuntimeError("No response text generated")
        result = parse_analysis(raw_content)
    except Exception as exc:
        logger.warning("analysis_failed error=%s", truncate(str(exc)))
        raise

    logger.info(
        "analysis_done company=%s score=%s parts=%s",
        result.company_name,
        result.score,
        len(parts),
    )
    return result
