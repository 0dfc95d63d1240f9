from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, field_validator


class GenerationRequest(BaseModel):
    script: str
    avatar_id: str
    voice_id: str

    @field_validator("script", "avatar_id", "voice_id")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("value must not be empty")
        return value.strip()


class ResultSource(str, Enum):
    PROVIDER_IMMEDIATE = "provider-immediate"
    PROVIDER_POLLED = "provider-polled"
    FALLBACK = "fallback"


# Submission outcomes


@dataclass(frozen=True)
class ImmediateAsset:
    url: str


@dataclass(frozen=True)
class PendingJob:
    job_id: str


@dataclass(frozen=True)
class SubmissionFailed:
    status_code: Optional[int]
    detail: str


SubmissionOutcome = Union[ImmediateAsset, PendingJob, SubmissionFailed]


# Poll outcomes


@dataclass(frozen=True)
class Completed:
    asset_url: str


@dataclass(frozen=True)
class Failed:
    detail: str


@dataclass(frozen=True)
class StillPending:
    status: Optional[str] = None


@dataclass(frozen=True)
class NoStatusAvailable:
    pass


@dataclass(frozen=True)
class TimedOut:
    attempts: int = 0


PollOutcome = Union[Completed, Failed, StillPending, NoStatusAvailable, TimedOut]

TERMINAL_POLL_OUTCOMES = (Completed, Failed, TimedOut)


@dataclass
class PollState:
    job_id: str
    deadline: float
    current_delay: float
    attempts: int = 0


@dataclass(frozen=True)
class GenerationResult:
    video_url: str
    source: ResultSource
    job_id: Optional[str] = None
