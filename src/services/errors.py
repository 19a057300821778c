"""Error taxonomy for the video creation pipeline.

ExtractionError, EmptyPlanError, RenderError and ConfigurationError fail a
request. ProviderError, DownloadError and AIServiceError are always caught
inside the pipeline and downgraded to empty results or fallback text.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(PipelineError):
    """Required configuration is missing or unusable."""


class ExtractionError(PipelineError):
    """Neither the AI backend nor the token filter produced any keywords."""


class EmptyPlanError(PipelineError):
    """No usable media survived from any source."""


class RenderError(PipelineError):
    """The external renderer could not be run or exited non-zero."""

    def __init__(
        self,
        message: str,
        stdout: str = "",
        stderr: str = "",
        returncode: Optional[int] = None,
    ):
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


class ProviderError(PipelineError):
    """A content provider search failed (bad status, malformed payload)."""


class DownloadError(PipelineError):
    """A single content item could not be materialized locally."""


class AIServiceError(PipelineError):
    """The AI backend is unconfigured, unreachable or returned nothing."""
