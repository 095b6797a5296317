"""
Document parsing utilities for resumes and transcripts.
"""
from .extractor import (
    UnsupportedDocumentError,
    extract_text,
    extract_text_from_pdf,
    extract_text_from_bytes,
    transcript_text
)

__all__ = [
    'UnsupportedDocumentError',
    'extract_text',
    'extract_text_from_pdf',
    'extract_text_from_bytes',
    'transcript_text'
]
