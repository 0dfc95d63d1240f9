"""Ordered request shapes tried against the provider.

The provider's accepted payload and status endpoints are not reliably
documented, so both are expressed as flat, ordered lists of value objects.
Order is the only priority signal: earlier entries are the shapes most likely
to be accepted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import quote

from app.models.domain import GenerationRequest

PayloadBuilder = Callable[[GenerationRequest], dict[str, Any]]

_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9_-]{6,}")


def looks_like_identifier(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(_IDENTIFIER_PATTERN.search(value))


@dataclass(frozen=True)
class EndpointCandidate:
    path: str
    payload_builder: PayloadBuilder
    name: str = ""

    def build(self, request: GenerationRequest) -> dict[str, Any]:
        return self.payload_builder(request)

    def describe(self) -> str:
        return f"{self.path} [{self.name}]" if self.name else self.path


@dataclass(frozen=True)
class StatusCandidate:
    path_template: str

    def render(self, job_id: str) -> str:
        return self.path_template.format(job_id=quote(job_id, safe=""))


def _drop_missing(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def _avatar(request: GenerationRequest) -> Optional[str]:
    return request.avatar_id if looks_like_identifier(request.avatar_id) else None


def _voice(request: GenerationRequest) -> Optional[str]:
    return request.voice_id if looks_like_identifier(request.voice_id) else None


def documented_payload(
    width: int = 1280,
    height: int = 720,
    avatar_style: str = "normal",
) -> PayloadBuilder:
    """Builder for the provider's documented v2 ``video_inputs`` shape."""

    def build(request: GenerationRequest) -> dict[str, Any]:
        character = _drop_missing(
            {"type": "avatar", "avatar_id": _avatar(request), "avatar_style": avatar_style}
        )
        voice = _drop_missing({"type": "text", "input_text": request.script, "voice_id": _voice(request)})
        return {
            "video_inputs": [{"character": character, "voice": voice}],
            "dimension": {"width": width, "height": height},
        }

    return build


def _flat_video_inputs(request: GenerationRequest) -> list[dict[str, Any]]:
    # Alias fields are duplicated because the accepted key names vary.
    avatar = _avatar(request)
    voice = _voice(request)
    return [
        _drop_missing(
            {
                "type": "avatar",
                "avatar": avatar,
                "avatar_id": avatar,
                "voice": voice,
                "voice_id": voice,
                "input_text": request.script,
                "script": request.script,
            }
        )
    ]


def video_inputs_body(request: GenerationRequest) -> dict[str, Any]:
    return {"video_inputs": _flat_video_inputs(request)}


def wrapped_video_inputs_body(request: GenerationRequest) -> dict[str, Any]:
    return {"data": {"video_inputs": _flat_video_inputs(request)}}


def inputs_body(request: GenerationRequest) -> dict[str, Any]:
    return {"inputs": _flat_video_inputs(request)}


def script_body(request: GenerationRequest) -> dict[str, Any]:
    return _drop_missing({"script": request.script, "avatar": _avatar(request), "voice": _voice(request)})


def input_text_body(request: GenerationRequest) -> dict[str, Any]:
    return _drop_missing(
        {"input_text": request.script, "avatar_id": _avatar(request), "voice_id": _voice(request)}
    )


SUBMISSION_PATHS = (
    "/v2/video.create",
    "/v2/video/generate",
    "/v1/video.create",
    "/v1/video/generate",
    "/v1/video/create",
    "/v1/videos",
)

SUBMISSION_BODIES: tuple[tuple[str, PayloadBuilder], ...] = (
    ("video_inputs", video_inputs_body),
    ("data.video_inputs", wrapped_video_inputs_body),
    ("inputs", inputs_body),
    ("script", script_body),
    ("input_text", input_text_body),
)

STATUS_PATHS = (
    "/v1/video_status.get?video_id={job_id}",
    "/v1/video.status?video_id={job_id}",
    "/v1/video/status?video_id={job_id}",
    "/v1/video.status/{job_id}",
    "/v1/video/status/{job_id}",
    "/v2/video/status/{job_id}",
    "/v2/videos/{job_id}",
)


def default_submission_candidates(
    width: int = 1280,
    height: int = 720,
    avatar_style: str = "normal",
) -> list[EndpointCandidate]:
    candidates = [
        EndpointCandidate(
            path="/v2/video/generate",
            payload_builder=documented_payload(width, height, avatar_style),
            name="documented",
        )
    ]
    candidates.extend(
        EndpointCandidate(path=path, payload_builder=builder, name=label)
        for path in SUBMISSION_PATHS
        for label, builder in SUBMISSION_BODIES
    )
    return candidates


def default_status_candidates() -> list[StatusCandidate]:
    return [StatusCandidate(path_template=template) for template in STATUS_PATHS]
