"""FastAPI dependency providers.

Routes never read credentials from globals; they receive clients built from
the injected Settings, so tests can override either layer.
"""

from typing import Iterator

import httpx
from fastapi import Depends

from app.core.config import Settings, get_settings
from app.core.errors import OcrMissingCredential
from app.core.prompts import default_system_prompt
from app.services.chat_proxy import ChatProxy
from app.services.ocr_client import OcrSpaceClient


def get_ocr_client(settings: Settings = Depends(get_settings)) -> OcrSpaceClient:
    if not settings.OCR_SPACE_API_KEY:
        raise OcrMissingCredential()
    return OcrSpaceClient(
        api_key=settings.OCR_SPACE_API_KEY,
        url=settings.OCR_SPACE_URL,
        timeout_seconds=settings.OCR_TIMEOUT_SECONDS,
    )


def build_chat_proxy(settings: Settings, http_client: httpx.Client | None = None) -> ChatProxy:
    return ChatProxy(
        api_key=settings.OPENROUTER_API_KEY,
        base_url=settings.OPENROUTER_BASE_URL,
        default_model=settings.CHAT_DEFAULT_MODEL,
        default_system_prompt=default_system_prompt(settings),
        referer=settings.APP_REFERER,
        app_title=settings.APP_TITLE,
        timeout_seconds=settings.CHAT_TIMEOUT_SECONDS,
        http_client=http_client,
    )


def get_chat_proxy(settings: Settings = Depends(get_settings)) -> Iterator[ChatProxy]:
    proxy = build_chat_proxy(settings)
    try:
        yield proxy
    finally:
        proxy.close()
