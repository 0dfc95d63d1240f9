from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from app.config import Settings


@dataclass
class ProviderResponse:
    status_code: int
    body: Any
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def parsed(self) -> bool:
        return self.body is not None


def build_provider_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    api_key = settings.provider_api_key.strip()
    headers = {
        "Authorization": f"Bearer {api_key}",
        "X-Api-Key": api_key,
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    return httpx.AsyncClient(
        base_url=settings.provider_base_url.rstrip("/"),
        headers=headers,
        timeout=settings.request_timeout_seconds,
        transport=transport,
    )


def read_response(response: httpx.Response) -> ProviderResponse:
    text = response.text
    try:
        body = response.json()
    except ValueError:
        body = None
    return ProviderResponse(status_code=response.status_code, body=body, text=text)
