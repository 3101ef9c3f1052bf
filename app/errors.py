"""
Error taxonomy shared by the extraction, generation and export stages.
"""


class ResumeError(Exception):
    """Base class for every error raised by Resume Architect."""


class FileReadError(ResumeError):
    """The uploaded file is missing or cannot be read."""


class ParseError(ResumeError):
    """The uploaded document could not be decoded to text."""


class NetworkError(ResumeError):
    """The generation API answered with a non-2xx status or was unreachable."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ValidationError(ResumeError):
    """The generation API answered with content we cannot use."""


class MissingCredentialError(ResumeError):
    """No API key is stored and the user declined to provide one."""


class AnalysisError(ResumeError):
    """ATS analysis could not be completed."""


class ExportError(ResumeError):
    """A document could not be produced in the requested format."""
