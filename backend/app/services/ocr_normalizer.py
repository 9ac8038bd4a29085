from typing import Any, List

from app.core.errors import OcrInvalidResponse, OcrProcessingError
from app.models.schemas import PAGE_MARKER, OcrPage, OcrResult

PAGE_SEPARATOR = "\n\n"


def _provider_error_message(envelope: dict) -> str:
    message = envelope.get("ErrorMessage")
    if isinstance(message, list):
        return "; ".join(str(m) for m in message)
    return message or "Unknown error"


def _extract_pages(envelope: dict) -> List[OcrPage]:
    results = envelope.get("ParsedResults")
    if not isinstance(results, list):
        return []

    pages = []
    for number, entry in enumerate(results, start=1):
        text = entry.get("ParsedText") if isinstance(entry, dict) else None
        text = (text or "").strip() if isinstance(text, str) else ""
        if text:
            pages.append(OcrPage(page_number=number, text=text))
    return pages


def combine_pages(pages: List[OcrPage]) -> str:
    """Join page texts in page order, each introduced by its page marker."""
    ordered = sorted(pages, key=lambda p: p.page_number)
    return PAGE_SEPARATOR.join(
        PAGE_MARKER.format(number=p.page_number) + PAGE_SEPARATOR + p.text
        for p in ordered
    )


def normalize_ocr_response(envelope: Any) -> OcrResult:
    """Turn the provider envelope into an OcrResult.

    Raises OcrProcessingError when the provider flags the job as failed.
    No extractable text is not an error: the result is simply empty.
    """
    if not isinstance(envelope, dict):
        raise OcrInvalidResponse()

    if envelope.get("IsErroredOnProcessing"):
        raise OcrProcessingError(_provider_error_message(envelope))

    pages = _extract_pages(envelope)
    return OcrResult(pages=pages, combined_text=combine_pages(pages))
