from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx

from app.clients.heygen import build_provider_client
from app.config import Settings
from app.models.domain import (
    Completed,
    Failed,
    GenerationRequest,
    GenerationResult,
    ImmediateAsset,
    NoStatusAvailable,
    ResultSource,
    StillPending,
    SubmissionFailed,
    TimedOut,
)
from app.services.candidates import (
    EndpointCandidate,
    StatusCandidate,
    default_status_candidates,
    default_submission_candidates,
)
from app.services.errors import (
    GenerationTimeout,
    JobFailedError,
    ProviderNotConfigured,
    SubmissionError,
)
from app.services.normalizer import StatusClass, classify_status
from app.services.poller import Backoff, Clock, StatusPoller
from app.services.submitter import JobSubmitter


class VideoService:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Clock] = None,
        submission_candidates: Optional[Sequence[EndpointCandidate]] = None,
        status_candidates: Optional[Sequence[StatusCandidate]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.clock = clock or Clock()
        self.log = logger or logging.getLogger(__name__)
        self.submission_candidates = list(
            submission_candidates
            or default_submission_candidates(
                width=settings.video_width,
                height=settings.video_height,
                avatar_style=settings.avatar_style,
            )
        )
        self.status_candidates = list(status_candidates or default_status_candidates())
        self.backoff = Backoff(
            initial=settings.poll_initial_delay_seconds,
            factor=settings.poll_backoff_factor,
            maximum=settings.poll_max_delay_seconds,
        )

    def enabled(self) -> bool:
        return bool(self.settings.provider_api_key.strip())

    def fallback_result(self, job_id: Optional[str] = None) -> GenerationResult:
        return GenerationResult(
            video_url=self.settings.fallback_video_url,
            source=ResultSource.FALLBACK,
            job_id=job_id,
        )

    def _poller(self, client: httpx.AsyncClient) -> StatusPoller:
        return StatusPoller(
            client=client,
            candidates=self.status_candidates,
            deadline_seconds=self.settings.poll_deadline_seconds,
            backoff=self.backoff,
            clock=self.clock,
            logger=self.log,
        )

    async def generate(self, script: str, avatar_id: str, voice_id: str) -> GenerationResult:
        request = GenerationRequest(script=script, avatar_id=avatar_id, voice_id=voice_id)
        if not self.enabled():
            self.log.info("provider api key not configured, using stand-in video")
            return self.fallback_result()

        async with build_provider_client(self.settings, transport=self.transport) as client:
            submitter = JobSubmitter(client, self.submission_candidates, logger=self.log)
            submission = await submitter.submit(request)

            if isinstance(submission, ImmediateAsset):
                return GenerationResult(video_url=submission.url, source=ResultSource.PROVIDER_IMMEDIATE)
            if isinstance(submission, SubmissionFailed):
                raise SubmissionError(submission.status_code, submission.detail)

            outcome = await self._poller(client).wait_for_result(submission.job_id)

        if isinstance(outcome, Completed):
            self.log.info(
                "video generation completed",
                extra={"job_id": submission.job_id, "video_url": outcome.asset_url},
            )
            return GenerationResult(
                video_url=outcome.asset_url,
                source=ResultSource.PROVIDER_POLLED,
                job_id=submission.job_id,
            )
        if isinstance(outcome, Failed):
            self.log.error("video generation failed", extra={"job_id": submission.job_id, "detail": outcome.detail})
            raise JobFailedError(submission.job_id, outcome.detail)
        raise GenerationTimeout(submission.job_id, self.settings.poll_deadline_seconds)

    async def check_status(self, job_id: str) -> dict[str, Any]:
        if not self.enabled():
            raise ProviderNotConfigured("provider api key is not configured")
        async with build_provider_client(self.settings, transport=self.transport) as client:
            poller = self._poller(client)
            outcome = await poller.poll(poller.start(job_id))

        report: dict[str, Any] = {"job_id": job_id, "status": "processing", "video_url": None, "error": None}
        if isinstance(outcome, Completed):
            report.update(status="completed", video_url=outcome.asset_url)
        elif isinstance(outcome, Failed):
            report.update(status="failed", error=outcome.detail)
        elif isinstance(outcome, StillPending) and classify_status(outcome.status) is StatusClass.PENDING:
            report["status"] = outcome.status.lower()
        elif isinstance(outcome, (NoStatusAvailable, TimedOut)):
            report["status"] = "unknown"
        return report
