import asyncio
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response, StreamingResponse
from fastapi.staticfiles import StaticFiles

from .analysis import analyze_startup_pitch
from .constants import (
    BOARD_SIMULATION_DELAY_SECONDS,
    CHUNK_SIZE,
    COMMITTEE_MESSAGE_INTERVAL_SECONDS,
    MAX_REQUEST_BYTES,
    MAX_UPLOAD_BYTES,
)
from .llm_client import API_KEY_ENV, MissingAPIKeyError, model_name
from .media import MaterialError, PitchMaterial, detect_extension, validate_report_extension
from .models import (
    AnalysisRequest,
    AnalysisResult,
    BoardResponse,
    CommitteeResponse,
    DueDiligenceClaim,
    DueDiligenceRequest,
    HealthResponse,
    NegotiationMessageRequest,
    NegotiationOpenRequest,
    NegotiationProgress,
    NegotiationReply,
    NegotiationTranscriptRequest,
    TermSheetResponse,
)
from .negotiation import (
    build_initial_context,
    check_negotiation_progress,
    create_negotiation_session,
    generate_term_sheet,
)
from .panels import BoardSimulatorPanel, CommitteeRoomPanel, DealSuccessPanel
from .simulations import perform_due_diligence, start_board_simulation, start_committee_debate


logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="Ventura Pitch Simulator")

frontend_origins = os.getenv(
    "FRONTEND_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in frontend_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def enforce_upload_size(request, call_next):
    if request.method == "POST" and request.url.path.startswith("/api/"):
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                if int(content_length) > MAX_REQUEST_BYTES:
                    return JSONResponse(
                        status_code=413,
                        content={"detail": f"Request too large. Max size is {MAX_REQUEST_BYTES} bytes."},
                    )
            except ValueError:
                pass
    return await call_next(request)


def _noop() -> None:
    return None


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, MissingAPIKeyError):
        return HTTPException(status_code=500, detail=str(exc))
    if isinstance(exc, (MaterialError, ValueError)):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))


async def read_upload(
    upload: UploadFile,
    *,
    field_name: str,
    max_size_bytes: int = MAX_UPLOAD_BYTES,
) -> PitchMaterial:
    chunks: List[bytes] = []
    total_bytes = 0
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        total_bytes += len(chunk)
        if total_bytes > max_size_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"{field_name} is too large. Max size is {max_size_bytes} bytes.",
            )
        chunks.append(chunk)

    await upload.close()
    if total_bytes == 0:
        raise HTTPException(status_code=400, detail=f"{field_name} file is empty.")
    return PitchMaterial(
        filename=upload.filename or field_name,
        content_type=upload.content_type or "application/octet-stream",
        data=b"".join(chunks),
    )


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        model=model_name(),
        api_key_configured=bool(os.getenv(API_KEY_ENV, "").strip()),
    )


@app.post("/api/analysis", response_model=AnalysisResult)
async def analyze_pitch(
    video: Optional[UploadFile] = File(None),
    report: Optional[UploadFile] = File(None),
    report_text: str = Form(""),
) -> AnalysisResult:
    if video is None and report is None and not report_text.strip():
        raise HTTPException(status_code=400, detail="Provide a pitch video, a report file, or a text summary.")

    video_material = None
    report_material = None
    if video is not None:
        video_material = await read_upload(video, field_name="video")
    if report is not None:
        try:
            validate_report_extension(detect_extension(report.filename or ""))
        except MaterialError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        report_material = await read_upload(report, field_name="report")

    try:
        return await run_in_threadpool(
            analyze_startup_pitch,
            video_material,
            report_text,
            report_material,
        )
    except Exception as exc:
        raise _http_error(exc) from exc


@app.post("/api/negotiation/open", response_model=NegotiationReply)
def open_negotiation(body: NegotiationOpenRequest) -> NegotiationReply:
    try:
        session = create_negotiation_session(build_initial_context(body.analysis))
        reply = session.opening_message()
    except Exception as exc:
        raise _http_error(exc) from exc
    return NegotiationReply(reply=reply, history=session.history)


@app.post("/api/negotiation/message", response_model=NegotiationReply)
def send_negotiation_message(body: NegotiationMessageRequest) -> NegotiationReply:
    try:
        session = create_negotiation_session(build_initial_context(body.analysis), history=body.history)
        reply = session.send_message(body.message)
    except Exception as exc:
        raise _http_error(exc) from exc
    return NegotiationReply(reply=reply, history=session.history)


@app.post("/api/negotiation/progress", response_model=NegotiationProgress)
def negotiation_progress(body: NegotiationTranscriptRequest) -> NegotiationProgress:
    try:
        return check_negotiation_progress(body.messages, body.analysis)
    except MissingAPIKeyError as exc:
        raise _http_error(exc) from exc


@app.post("/api/negotiation/term-sheet", response_model=TermSheetResponse)
def negotiation_term_sheet(body: NegotiationTranscriptRequest) -> TermSheetResponse:
    try:
        term_sheet = generate_term_sheet(body.messages, body.analysis)
    except MissingAPIKeyError as exc:
        raise _http_error(exc) from exc
    panel = DealSuccessPanel(term_sheet, body.analysis.company_name, _noop, _noop, _noop)
    return TermSheetResponse(term_sheet=term_sheet, panel=panel.render())


@app.post("/api/due-diligence", response_model=List[DueDiligenceClaim])
def due_diligence(body: DueDiligenceRequest) -> List[DueDiligenceClaim]:
    try:
        return perform_due_diligence(body.pitch_text, body.analysis)
    except MissingAPIKeyError as exc:
        raise _http_error(exc) from exc


@app.post("/api/committee", response_model=CommitteeResponse)
def committee_debate(body: AnalysisRequest) -> CommitteeResponse:
    try:
        messages = start_committee_debate(body.analysis)
    except MissingAPIKeyError as exc:
        raise _http_error(exc) from exc
    panel = CommitteeRoomPanel(messages, _noop, _noop)
    panel.reveal_all()
    return CommitteeResponse(messages=messages, panel=panel.render())


@app.post("/api/committee/stream")
async def committee_debate_stream(body: AnalysisRequest) -> StreamingResponse:
    """Stream the committee debate as NDJSON, one message per interval.

    Each line is ``{"status":"message","message":{...}}``; the last line is
    ``{"status":"voting","panel":{...}}`` once the partners have spoken.
    """
    try:
        messages = await run_in_threadpool(start_committee_debate, body.analysis)
    except MissingAPIKeyError as exc:
        raise _http_error(exc) from exc

    panel = CommitteeRoomPanel(messages, _noop, _noop)

    async def _stream_debate():
        while True:
            await asyncio.sleep(COMMITTEE_MESSAGE_INTERVAL_SECONDS)
            message = panel.reveal_next()
            if message is None:
                break
            yield json.dumps({"status": "message", "message": panel.render_message(message)}) + "\n"
        yield json.dumps({"status": "voting", "panel": panel.render()}) + "\n"
        logger.info(
            "committee_stream_done company=%s messages=%s",
            body.analysis.company_name,
            len(panel.revealed),
        )

    return StreamingResponse(_stream_debate(), media_type="application/x-ndjson")


@app.post("/api/board", response_model=BoardResponse)
async def board_simulation(body: AnalysisRequest) -> BoardResponse:
    # Paces the "18 months later" jump before the scenario call.
    await asyncio.sleep(BOARD_SIMULATION_DELAY_SECONDS)
    try:
        scenario = await run_in_threadpool(start_board_simulation, body.analysis)
    except MissingAPIKeyError as exc:
        raise _http_error(exc) from exc
    panel = BoardSimulatorPanel(scenario, _noop)
    return BoardResponse(scenario=scenario, panel=panel.render())


frontend_dir = Path(__file__).resolve().parents[1] / "frontend"
if frontend_dir.exists():
    app.mount("/", StaticFiles(directory=str(frontend_dir), html=True), name="frontend")


@app.middleware("http")
async def no_cache_static(request: Request, call_next):
    response: Response = await call_next(request)
    path = request.url.path
    if path.endswith((".js", ".css", ".html")) or path == "/":
        response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
    return response
