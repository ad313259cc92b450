"""Turn an uploaded, base64-encoded document into plain text."""

import base64
import binascii
import io
import logging

from PyPDF2 import PdfReader

from app.core.errors import ExtractionError

logger = logging.getLogger("planpro.document")

# Shorter extractions usually mean a blank or scanned-image PDF.
MIN_TEXT_LENGTH = 100

_TEXT_EXTENSIONS = {"txt", "text", "md"}


def decode_document(data_b64: str) -> bytes:
    """Decode base64 document data, tolerating a ``data:...;base64,`` prefix."""
    payload = (data_b64 or "").strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    # MIME-wrapped base64 carries line breaks
    payload = "".join(payload.split())
    if not payload:
        raise ExtractionError("No document data provided")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ExtractionError("Document data is not valid base64") from e


def _extension(file_name: str) -> str:
    name = (file_name or "").lower()
    return name.rsplit(".", 1)[-1] if "." in name else ""


def extract_pdf_text(content: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(content))
        pages = []
        for i, page in enumerate(reader.pages):
            page_text = page.extract_text() or ""
            if not page_text.strip():
                logger.debug("Page %d has no extractable text", i)
            pages.append(page_text)
    except Exception as e:
        raise ExtractionError(f"Failed to read PDF: {e}") from e
    return "\n".join(pages).strip()


def extract_text(content: bytes, file_name: str) -> str:
    """Extract plain text from a document buffer.

    PDFs are read with PyPDF2; ``.txt``/``.md`` uploads are decoded as UTF-8.
    Raises ExtractionError when the buffer is not a readable document.
    """
    ext = _extension(file_name)
    if ext in _TEXT_EXTENSIONS:
        try:
            return content.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            raise ExtractionError("Text file is not valid UTF-8") from e

    if b"%PDF" not in content[:1024]:
        raise ExtractionError(f"{file_name or 'Upload'} is not a PDF document")
    return extract_pdf_text(content)
