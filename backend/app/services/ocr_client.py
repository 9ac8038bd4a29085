"""OCR.space client: one multipart POST per upload, no retries.

The configured timeout is a deadline for the whole call (connect, upload and
the full response body), not a per-phase socket limit.
"""

import asyncio
import time
from typing import Any

import httpx

from app.core.errors import (
    OcrInvalidResponse,
    OcrNetworkFailure,
    OcrProviderHttpError,
    OcrTimeout,
)
from app.models.schemas import UploadedFile
from app.utils.logger import log_ocr_call, ocr_logger

PROVIDER = "ocr.space"

# Fixed provider options: English, table layout on, no searchable PDF,
# OCR engine 2.
OCR_FORM_FIELDS = {
    "language": "eng",
    "isTable": "true",
    "isCreateSearchablePdf": "false",
    "OCREngine": "2",
}


class OcrSpaceClient:
    def __init__(
        self,
        *,
        api_key: str,
        url: str = "https://api.ocr.space/parse/image",
        timeout_seconds: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._timeout_seconds = timeout_seconds
        self._http_client = http_client

    async def submit(self, upload: UploadedFile) -> dict[str, Any]:
        """Send the file to the provider and return its parsed JSON envelope."""
        start_time = time.time()
        files = {
            "file": (upload.name, upload.content, upload.declared_mime_type or "application/pdf"),
        }
        ocr_logger.debug(f"Submitting {upload.name} ({upload.size_bytes} bytes) to {self._url}")

        try:
            response = await asyncio.wait_for(self._post(files), timeout=self._timeout_seconds)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            self._log(upload, start_time, success=False, error=f"timeout after {self._timeout_seconds:g}s")
            raise OcrTimeout(self._timeout_seconds) from exc
        except httpx.TransportError as exc:
            self._log(upload, start_time, success=False, error=str(exc))
            raise OcrNetworkFailure(str(exc) or None) from exc

        if not response.is_success:
            self._log(upload, start_time, success=False, status_code=response.status_code)
            raise OcrProviderHttpError(response.status_code, response.text)

        try:
            envelope = response.json()
        except ValueError as exc:
            self._log(
                upload,
                start_time,
                success=False,
                status_code=response.status_code,
                error="invalid JSON",
            )
            raise OcrInvalidResponse() from exc

        self._log(upload, start_time, success=True, status_code=response.status_code)
        return envelope

    async def _post(self, files) -> httpx.Response:
        headers = {"apikey": self._api_key}
        if self._http_client is not None:
            return await self._http_client.post(
                self._url,
                headers=headers,
                data=OCR_FORM_FIELDS,
                files=files,
                timeout=self._timeout_seconds,
            )
        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            return await client.post(self._url, headers=headers, data=OCR_FORM_FIELDS, files=files)

    def _log(self, upload, start_time, *, success, status_code=None, error=None):
        log_ocr_call(
            provider=PROVIDER,
            file_name=upload.name,
            size_bytes=upload.size_bytes,
            success=success,
            status_code=status_code,
            error=error,
            latency_ms=(time.time() - start_time) * 1000,
        )
