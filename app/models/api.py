from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class VideoGenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    script: str = Field(..., validation_alias=AliasChoices("script", "input_text"))
    avatar_id: str = Field(..., validation_alias=AliasChoices("avatar_id", "avatarId"))
    voice_id: str = Field(..., validation_alias=AliasChoices("voice_id", "voiceId"))

    @field_validator("script", "avatar_id", "voice_id")
    @classmethod
    def validate_present(cls, value: str) -> str:  # noqa: D417
        if not value.strip():
            raise ValueError("script, avatarId and voiceId are required")
        return value


class VideoGenerationResponse(BaseModel):
    video_url: str
    source: str
    job_id: Optional[str] = None
    note: Optional[str] = None


class VideoStatusResponse(BaseModel):
    job_id: str
    status: str
    video_url: Optional[str] = None
    error: Optional[str] = None
