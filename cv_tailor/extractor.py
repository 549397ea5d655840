"""
Plain-text extraction for uploaded CVs.
PDFs are decoded page by page with pypdf; text files are read as UTF-8.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional

from pypdf import PdfReader

from .errors import ExtractionError, UnsupportedFileType


logger = logging.getLogger(__name__)

PDF_TYPES = {"application/pdf", "application/x-pdf"}
TEXT_TYPES = {"text/plain"}

PREVIEW_LIMIT = 500


@dataclass
class UploadedDocument:
    """A CV file together with the text derived from it."""
    filename: str
    content_type: str
    text: str

    @property
    def preview(self) -> str:
        return preview_text(self.text)


def detect_kind(filename: str, content_type: Optional[str]) -> str:
    """Return 'pdf' or 'text', or raise UnsupportedFileType."""
    name = (filename or "").lower()
    ctype = (content_type or "").split(";")[0].strip().lower()

    if ctype in PDF_TYPES or name.endswith(".pdf"):
        return "pdf"
    if ctype in TEXT_TYPES or name.endswith(".txt"):
        return "text"

    raise UnsupportedFileType()


def extract_pdf_text(data: bytes) -> str:
    """Concatenate the text of every page, in page order."""
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            raise ExtractionError()

        full_text = ""
        for page in reader.pages:
            full_text += (page.extract_text() or "") + "\n"
        return full_text
    except ExtractionError:
        logger.warning("Refusing encrypted PDF")
        raise
    except Exception as e:
        logger.warning("PDF extraction error: %s", e)
        raise ExtractionError() from e


def extract_plain_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning("Text file is not valid UTF-8: %s", e)
        raise ExtractionError("Could not read the text file. Please save it as UTF-8.") from e


def extract_text(filename: str, content_type: Optional[str], data: bytes) -> UploadedDocument:
    """
    Extract plain text from an uploaded CV.

    Raises:
        UnsupportedFileType: the file is neither PDF nor TXT (checked first).
        ExtractionError: the file could not be decoded; no partial text.
    """
    kind = detect_kind(filename, content_type)

    if kind == "pdf":
        text = extract_pdf_text(data)
    else:
        text = extract_plain_text(data)

    logger.info("Extracted %d characters from %s", len(text), filename)
    return UploadedDocument(
        filename=filename,
        content_type=content_type or "",
        text=text,
    )


def preview_text(text: str, limit: int = PREVIEW_LIMIT) -> str:
    """First `limit` characters of the text, followed by an ellipsis."""
    return text[:limit] + "..."
