from __future__ import annotations

import logging
from typing import Optional, Sequence

import httpx

from app.clients.heygen import read_response
from app.models.domain import (
    GenerationRequest,
    ImmediateAsset,
    PendingJob,
    SubmissionFailed,
    SubmissionOutcome,
)
from app.services.candidates import EndpointCandidate
from app.services.normalizer import FieldKind, extract, extract_error_detail

# Status codes meaning "this endpoint/payload shape is not the right one".
SHAPE_MISMATCH_STATUSES = frozenset({400, 404})


class JobSubmitter:
    """Submits a generation job by probing candidate shapes in order.

    The first 2xx response carrying either a finished asset URL or a job id
    ends the probe. 400/404 responses and 2xx responses without a usable
    value move on to the next candidate; any other failure stops immediately
    because trying other shapes cannot fix auth, quota or outage problems.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        candidates: Sequence[EndpointCandidate],
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not candidates:
            raise ValueError("at least one submission candidate is required")
        self.client = client
        self.candidates = list(candidates)
        self.log = logger or logging.getLogger(__name__)

    async def submit(self, request: GenerationRequest) -> SubmissionOutcome:
        last_status: Optional[int] = None
        last_detail = "no submission candidate accepted the request"

        for index, candidate in enumerate(self.candidates):
            payload = candidate.build(request)
            try:
                response = await self.client.post(candidate.path, json=payload)
            except httpx.HTTPError as exc:
                self.log.error(
                    "provider submission request failed",
                    extra={"candidate": candidate.describe(), "index": index, "error": str(exc)},
                )
                return SubmissionFailed(status_code=None, detail=str(exc) or exc.__class__.__name__)

            result = read_response(response)
            if result.ok:
                asset_url = extract(result.body, FieldKind.IMMEDIATE_URL)
                if asset_url:
                    self.log.info(
                        "provider returned video immediately",
                        extra={"candidate": candidate.describe(), "index": index},
                    )
                    return ImmediateAsset(url=asset_url)
                job_id = extract(result.body, FieldKind.JOB_ID)
                if job_id:
                    self.log.info(
                        "provider accepted video job",
                        extra={"candidate": candidate.describe(), "index": index, "job_id": job_id},
                    )
                    return PendingJob(job_id=job_id)
                last_status = result.status_code
                last_detail = "provider response missing video url and id"
                self.log.warning(
                    "provider response missing video url and id, trying next candidate",
                    extra={"candidate": candidate.describe(), "index": index, "body": result.text[:500]},
                )
                continue

            last_status = result.status_code
            last_detail = extract_error_detail(result.body, result.text)
            if result.status_code in SHAPE_MISMATCH_STATUSES:
                self.log.info(
                    "provider rejected submission shape",
                    extra={"candidate": candidate.describe(), "index": index, "status": result.status_code},
                )
                continue

            self.log.error(
                "provider submission failed",
                extra={
                    "candidate": candidate.describe(),
                    "index": index,
                    "status": result.status_code,
                    "body": result.text[:500],
                },
            )
            return SubmissionFailed(status_code=result.status_code, detail=last_detail)

        self.log.error(
            "all submission candidates exhausted",
            extra={"attempts": len(self.candidates), "status": last_status, "detail": last_detail},
        )
        return SubmissionFailed(status_code=last_status, detail=last_detail)
