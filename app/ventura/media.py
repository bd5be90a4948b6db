import base64
import io
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List

from pypdf import PdfReader
from pptx import Presentation


PDF_MIME = "application/pdf"
SUPPORTED_REPORT_EXTENSIONS = {".pdf", ".pptx", ".ppt"}
SUPPORTED_VIDEO_EXTENSIONS = {".mp4", ".mov", ".webm", ".mpeg", ".mpg", ".avi", ".3gp"}
MAX_REPORT_TEXT_CHARS = 20000


class MaterialError(ValueError):
    """An uploaded pitch material could not be read or encoded."""


@dataclass(frozen=True)
class PitchMaterial:
    filename: str
    content_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return detect_extension(self.filename)


def detect_extension(filename: str) -> str:
    return Path(filename or "").suffix.lower()


def sanitize_filename(filename: str, fallback: str = "upload") -> str:
    candidate = Path(filename or "").name
    if candidate in {"", ".", ".."}:
        candidate = fallback

    sanitized = re.sub(r"[^A-Za-z0-9._-]", "_", candidate)
    if sanitized in {"", ".", ".."}:
        sanitized = fallback

    stem = Path(sanitized).stem[:120] or fallback
    ext = Path(sanitized).suffix[:20]
    return f"{stem}{ext}"


def validate_report_extension(extension: str) -> None:
    if extension not in SUPPORTED_REPORT_EXTENSIONS:
        raise MaterialError("Unsupported report format. Please upload PDF or PPTX.")
    if extension == ".ppt":
        raise MaterialError("Legacy .ppt is not supported yet. Please upload PDF or PPTX.")


def resolve_video_mime(filename: str, content_type: str | None) -> str:
    if content_type and content_type.startswith("video/"):
        return content_type
    guessed, _ = mimetypes.guess_type(filename or "")
    if guessed and guessed.startswith("video/"):
        return guessed
    extension = detect_extension(filename)
    if extension == ".webm":
        return "video/webm"
    if extension in SUPPORTED_VIDEO_EXTENSIONS:
        return "video/mp4"
    raise MaterialError("Unsupported video format. Please upload MP4, MOV or WEBM.")


def encode_base64(data: bytes) -> str:
    if not data:
        raise MaterialError("File is empty.")
    return base64.b64encode(data).decode("ascii")


def to_data_url(material: PitchMaterial) -> str:
    return f"data:{material.content_type};base64,{encode_base64(material.data)}"


def inline_file_part(material: PitchMaterial) -> dict:
    """Chat-completions content part carrying the file as inline base64."""
    return {
        "type": "file",
        "file": {
            "filename": sanitize_filename(material.filename),
            "file_data": to_data_url(material),
        },
    }


def extract_report_text(material: PitchMaterial) -> str:
    extension = material.extension
    validate_report_extension(extension)
    if extension == ".pdf":
        pages = _extract_pdf(material.data)
        label = "PAGE"
    else:
        pages = _extract_pptx(material.data)
        label = "SLIDE"

    merged = "\n\n".join(f"{label} {index}: {text}" for index, text in enumerate(pages, start=1))
    return merged.strip()[:MAX_REPORT_TEXT_CHARS]


def _extract_pdf(data: bytes) -> List[str]:
    reader = PdfReader(io.BytesIO(data))
    return [(page.extract_text() or "").strip() for page in reader.pages]


def _extract_pptx(data: bytes) -> List[str]:
    presentation = Presentation(io.BytesIO(data))
    slides: List[str] = []
    for slide in presentation.slides:
        text_chunks: List[str] = []
        for shape in slide.shapes:
            text = getattr(shape, "text", "")
            if text:
                text_chunks.append(text.strip())
        slides.append("\n".join(chunk for chunk in text_chunks if chunk).strip())
    return slides
