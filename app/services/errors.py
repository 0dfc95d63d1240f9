from __future__ import annotations

from typing import Optional


class VideoGenerationError(Exception):
    """Base class for failures surfaced to callers of the video service."""


class ProviderNotConfigured(VideoGenerationError):
    """Raised when an operation needs the provider but no API key is set."""


class SubmissionError(VideoGenerationError):
    """The provider refused every submission shape, or failed systemically."""

    def __init__(self, status_code: Optional[int], detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        prefix = f"provider error {status_code}" if status_code is not None else "provider error"
        super().__init__(f"{prefix}: {detail}")


class JobFailedError(VideoGenerationError):
    """The provider accepted the job and later reported it as failed."""

    def __init__(self, job_id: str, detail: str) -> None:
        self.job_id = job_id
        self.detail = detail
        super().__init__(f"video job {job_id} failed: {detail}")


class GenerationTimeout(VideoGenerationError):
    """The job was still pending when the poll deadline passed.

    This is inconclusive rather than a failure: the provider may still finish
    the video later, so callers are free to substitute a stand-in asset.
    """

    def __init__(self, job_id: str, deadline_seconds: float) -> None:
        self.job_id = job_id
        self.deadline_seconds = deadline_seconds
        super().__init__(f"timed out after {deadline_seconds:g}s waiting for video {job_id}")
