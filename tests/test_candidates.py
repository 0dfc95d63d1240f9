import pytest

from app.models.domain import GenerationRequest
from app.services.candidates import (
    SUBMISSION_BODIES,
    SUBMISSION_PATHS,
    StatusCandidate,
    default_status_candidates,
    default_submission_candidates,
    documented_payload,
    input_text_body,
    looks_like_identifier,
    script_body,
    video_inputs_body,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Daisy-inskirt-20220818", True),
        ("2d5b0e6cf36f460aa7fc47e3eee4ba54", True),
        ("abc_12", True),
        ("abc", False),
        ("bad id", False),
        ("", False),
        (None, False),
    ],
)
def test_looks_like_identifier(value, expected):
    assert looks_like_identifier(value) is expected


def test_builders_omit_ids_that_fail_shape_check():
    request = GenerationRequest(script="Hello there", avatar_id="av", voice_id="voice_abcdef")
    assert script_body(request) == {"script": "Hello there", "voice": "voice_abcdef"}
    assert input_text_body(request) == {"input_text": "Hello there", "voice_id": "voice_abcdef"}
    inputs = video_inputs_body(request)["video_inputs"][0]
    assert "avatar" not in inputs and "avatar_id" not in inputs
    assert inputs["voice"] == inputs["voice_id"] == "voice_abcdef"
    assert inputs["script"] == inputs["input_text"] == "Hello there"


def test_documented_payload_shape():
    request = GenerationRequest(script="Hi", avatar_id="avatar_123456", voice_id="voice_123456")
    payload = documented_payload(width=1920, height=1080)(request)
    assert payload == {
        "video_inputs": [
            {
                "character": {"type": "avatar", "avatar_id": "avatar_123456", "avatar_style": "normal"},
                "voice": {"type": "text", "input_text": "Hi", "voice_id": "voice_123456"},
            }
        ],
        "dimension": {"width": 1920, "height": 1080},
    }


def test_default_submission_order_is_single_flat_list():
    candidates = default_submission_candidates()
    assert len(candidates) == 1 + len(SUBMISSION_PATHS) * len(SUBMISSION_BODIES)
    assert candidates[0].path == "/v2/video/generate"
    assert candidates[0].name == "documented"
    # path-major: every body shape for a path before moving to the next path
    first_path_block = candidates[1 : 1 + len(SUBMISSION_BODIES)]
    assert {candidate.path for candidate in first_path_block} == {SUBMISSION_PATHS[0]}
    assert [candidate.name for candidate in first_path_block] == [label for label, _ in SUBMISSION_BODIES]
    assert candidates[-1].path == SUBMISSION_PATHS[-1]


def test_status_candidate_renders_encoded_id():
    candidate = StatusCandidate("/v1/video.status?video_id={job_id}")
    assert candidate.render("abc123xyz") == "/v1/video.status?video_id=abc123xyz"
    assert StatusCandidate("/v2/videos/{job_id}").render("a/b c") == "/v2/videos/a%2Fb%20c"
    assert default_status_candidates()[0].render("vid") == "/v1/video_status.get?video_id=vid"
