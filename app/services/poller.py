from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from app.clients.heygen import read_response
from app.models.domain import (
    TERMINAL_POLL_OUTCOMES,
    Completed,
    Failed,
    NoStatusAvailable,
    PollOutcome,
    PollState,
    StillPending,
    TimedOut,
)
from app.services.candidates import StatusCandidate
from app.services.normalizer import FieldKind, StatusClass, classify_status, extract


class Clock:
    """Monotonic time source used by the poll loop; swapped out in tests."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


@dataclass(frozen=True)
class Backoff:
    initial: float = 1.2
    factor: float = 1.3
    maximum: float = 4.0

    def __post_init__(self) -> None:
        if self.initial <= 0:
            raise ValueError("initial delay must be positive")
        if self.factor < 1:
            raise ValueError("backoff factor must be >= 1")
        if self.maximum <= 0:
            raise ValueError("maximum delay must be positive")

    def first(self) -> float:
        return min(self.initial, self.maximum)

    def next(self, delay: float) -> float:
        return min(delay * self.factor, self.maximum)

    def delay(self, attempt: int) -> float:
        return min(self.initial * self.factor ** max(attempt, 0), self.maximum)


class StatusPoller:
    def __init__(
        self,
        client: httpx.AsyncClient,
        candidates: Sequence[StatusCandidate],
        deadline_seconds: float,
        backoff: Optional[Backoff] = None,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not candidates:
            raise ValueError("at least one status candidate is required")
        self.client = client
        self.candidates = list(candidates)
        self.deadline_seconds = deadline_seconds
        self.backoff = backoff or Backoff()
        self.clock = clock or Clock()
        self.log = logger or logging.getLogger(__name__)

    def start(self, job_id: str) -> PollState:
        return PollState(
            job_id=job_id,
            deadline=self.clock.now() + self.deadline_seconds,
            current_delay=self.backoff.first(),
        )

    async def poll(self, state: PollState) -> PollOutcome:
        """Run one tick: probe status candidates in order until one parses."""
        for candidate in self.candidates:
            if self.clock.now() >= state.deadline:
                return TimedOut(attempts=state.attempts)
            path = candidate.render(state.job_id)
            try:
                response = await self.client.get(path)
            except httpx.HTTPError as exc:
                self.log.debug(
                    "status probe failed",
                    extra={"job_id": state.job_id, "path": path, "error": str(exc)},
                )
                continue
            result = read_response(response)
            if not result.ok or not result.parsed:
                self.log.debug(
                    "status probe unusable",
                    extra={"job_id": state.job_id, "path": path, "status": result.status_code},
                )
                continue
            return self.interpret(result.body)
        return NoStatusAvailable()

    def interpret(self, body: object) -> PollOutcome:
        asset_url = extract(body, FieldKind.IMMEDIATE_URL)
        if asset_url:
            return Completed(asset_url=asset_url)
        status = extract(body, FieldKind.STATUS)
        status_class = classify_status(status)
        if status_class is StatusClass.SUCCESS:
            terminal_url = extract(body, FieldKind.TERMINAL_URL)
            if terminal_url:
                return Completed(asset_url=terminal_url)
            # Reported done but without an asset; keep waiting for the URL.
            return StillPending(status=status)
        if status_class is StatusClass.FAILURE:
            return Failed(detail=extract(body, FieldKind.FAILURE_DETAIL) or status)
        return StillPending(status=status)

    async def wait_for_result(self, job_id: str) -> PollOutcome:
        state = self.start(job_id)
        self.log.info(
            "polling video status",
            extra={"job_id": job_id, "deadline_seconds": self.deadline_seconds},
        )
        try:
            while True:
                outcome = await self.poll(state)
                state.attempts += 1
                self.log.debug(
                    "status tick",
                    extra={"job_id": job_id, "attempt": state.attempts, "outcome": type(outcome).__name__},
                )
                if isinstance(outcome, TERMINAL_POLL_OUTCOMES):
                    break
                remaining = state.deadline - self.clock.now()
                if remaining <= 0:
                    outcome = TimedOut(attempts=state.attempts)
                    break
                await self.clock.sleep(min(state.current_delay, remaining))
                state.current_delay = self.backoff.next(state.current_delay)
        except asyncio.CancelledError:
            self.log.info("status polling cancelled", extra={"job_id": job_id, "attempts": state.attempts})
            raise

        if isinstance(outcome, TimedOut):
            self.log.warning(
                "status polling timed out",
                extra={"job_id": job_id, "attempts": state.attempts, "deadline_seconds": self.deadline_seconds},
            )
        return outcome
