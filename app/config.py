from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AVATAR_VIDEO_",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    app_name: str = "avatar-video-service"
    host: str = "0.0.0.0"
    port: int = 8100

    # Provider access. An empty key means "serve the stand-in asset".
    provider_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("provider_api_key", "AVATAR_VIDEO_PROVIDER_API_KEY", "HEYGEN_API_KEY"),
    )
    provider_base_url: str = "https://api.heygen.com"
    request_timeout_seconds: float = 20.0

    # Status polling
    poll_deadline_seconds: float = 600.0
    poll_initial_delay_seconds: float = 1.2
    poll_backoff_factor: float = 1.3
    poll_max_delay_seconds: float = 4.0

    # Rendering preferences sent with the canonical payload
    video_width: int = 1280
    video_height: int = 720
    avatar_style: str = "normal"

    fallback_video_url: str = "https://storage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4"
    fallback_on_timeout: bool = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
