from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, status

from app.config import Settings, get_settings
from app.models.api import VideoGenerationRequest, VideoGenerationResponse, VideoStatusResponse
from app.models.domain import ResultSource
from app.services.errors import (
    GenerationTimeout,
    JobFailedError,
    ProviderNotConfigured,
    SubmissionError,
)
from app.services.video_service import VideoService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

log = logging.getLogger(__name__)

app = FastAPI()

_service: VideoService | None = None


def get_video_service(settings: Settings = Depends(get_settings)) -> VideoService:
    global _service
    if _service is None:
        _service = VideoService(settings=settings)
    return _service


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/videos", response_model=VideoGenerationResponse)
async def generate_video(
    payload: VideoGenerationRequest,
    service: VideoService = Depends(get_video_service),
) -> VideoGenerationResponse:
    try:
        result = await service.generate(payload.script, payload.avatar_id, payload.voice_id)
    except SubmissionError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except JobFailedError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except GenerationTimeout as exc:
        if not service.settings.fallback_on_timeout:
            raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc)) from exc
        log.warning("serving stand-in video after timeout", extra={"job_id": exc.job_id})
        fallback = service.fallback_result(job_id=exc.job_id)
        return VideoGenerationResponse(
            video_url=fallback.video_url,
            source=fallback.source.value,
            job_id=fallback.job_id,
            note=f"{exc}; stand-in video returned",
        )

    note = None
    if result.source is ResultSource.FALLBACK:
        note = "provider not configured; stand-in video returned"
    return VideoGenerationResponse(
        video_url=result.video_url,
        source=result.source.value,
        job_id=result.job_id,
        note=note,
    )


@app.get("/videos/{job_id}/status", response_model=VideoStatusResponse)
async def check_video_status(
    job_id: str,
    service: VideoService = Depends(get_video_service),
) -> VideoStatusResponse:
    try:
        report = await service.check_status(job_id)
    except ProviderNotConfigured as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return VideoStatusResponse(**report)
