"""
Text extraction for resumes and answer transcripts.
"""
import io
from pathlib import Path
from typing import Union

import pdfplumber

from ..utils.logger import setup_logger
from ..utils.text_utils import normalize_whitespace

logger = setup_logger("document_extractor")

TEXT_SUFFIXES = {".txt", ".md", ".text"}


class UnsupportedDocumentError(ValueError):
    """File type the extractor cannot read."""


def _extract_pdf(source) -> str:
    text = ""
    with pdfplumber.open(source) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                text += page_text + "\n"
    return text.strip()


def extract_text_from_pdf(pdf_path: Path) -> str:
    """
    Extract text from a PDF file.

    Args:
        pdf_path: Path to PDF file

    Returns:
        Extracted text as string

    Raises:
        FileNotFoundError: If PDF file doesn't exist
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF file not found: {pdf_path}")
    return _extract_pdf(pdf_path)


def extract_text_from_bytes(data: bytes, filename: str) -> str:
    """
    Extract text from uploaded file content.

    Args:
        data: Raw file bytes
        filename: Original file name, used to pick the reader

    Returns:
        Extracted text

    Raises:
        UnsupportedDocumentError: If the file type is not PDF or plain text
    """
    suffix = Path(filename or "").suffix.lower()
    if suffix == ".pdf":
        return _extract_pdf(io.BytesIO(data))
    if suffix in TEXT_SUFFIXES:
        return data.decode("utf-8", errors="replace").strip()
    raise UnsupportedDocumentError(f"Unsupported document type: {suffix or filename}")


def extract_text(path: Union[str, Path]) -> str:
    """Extract text from a PDF or plain-text file on disk."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return extract_text_from_pdf(path)
    if suffix in TEXT_SUFFIXES:
        return path.read_text(encoding="utf-8", errors="replace").strip()
    raise UnsupportedDocumentError(f"Unsupported document type: {suffix}")


def transcript_text(transcript) -> str:
    """
    Plain text of a candidate answer transcript.

    Accepts a string or a list of transcript segments (strings or dicts with
    a "text" key) and returns normalized text. None, null segments and any
    other value become "".
    """
    if isinstance(transcript, str):
        return normalize_whitespace(transcript)
    if not isinstance(transcript, (list, tuple)):
        return ""
    parts = []
    for segment in transcript:
        if isinstance(segment, dict):
            segment = segment.get("text")
        if segment is None or isinstance(segment, (dict, list, tuple)):
            continue
        parts.append(str(segment))
    return normalize_whitespace(" ".join(parts))
