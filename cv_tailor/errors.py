"""
Exceptions raised by the CV tailor. Each carries a user-facing message.
"""


class CVTailorError(Exception):
    """Base class for user-facing failures."""

    message = "Something went wrong"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class UnsupportedFileType(CVTailorError):
    """The uploaded file is neither a PDF nor plain text."""

    message = "Please upload a PDF or TXT file"


class ExtractionError(CVTailorError):
    """Text could not be extracted from the uploaded file."""

    message = "Could not extract text from PDF. Please try uploading a text file instead."


class TailoringError(CVTailorError):
    """The remote tailoring service failed."""

    message = "Failed to tailor CV"
