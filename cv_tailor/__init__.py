"""
ATS CV Tailor

Upload a CV (PDF or plain text) and a job description, get back a tailored
CV with an ATS compatibility score, rendered as a styled HTML resume.
"""

from .client import AtsScore, ServiceClient, fallback_score
from .document import DOWNLOAD_FILENAME, render_document
from .errors import CVTailorError, ExtractionError, TailoringError, UnsupportedFileType
from .extractor import UploadedDocument, extract_text
from .formatter import ResumeFormatter, format_cv_content
from .state import AppState, reduce
from .workflow import TailorWorkflow

__version__ = "1.0.0"
__all__ = [
    "extract_text",
    "format_cv_content",
    "render_document",
    "reduce",
    "fallback_score",
    "AppState",
    "AtsScore",
    "ServiceClient",
    "TailorWorkflow",
    "ResumeFormatter",
    "UploadedDocument",
    "CVTailorError",
    "ExtractionError",
    "TailoringError",
    "UnsupportedFileType",
    "DOWNLOAD_FILENAME",
]
