"""Metadata-only checks run on an upload before any provider call."""

from app.core.errors import MissingFile, TooLarge, WrongType

PDF_MIME_TYPE = "application/pdf"
DEFAULT_MAX_BYTES = 8 * 1024 * 1024
DEFAULT_FILENAME = "upload.pdf"

ACCEPTED = "accepted"


def is_pdf(filename: str | None, content_type: str | None) -> bool:
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    return mime == PDF_MIME_TYPE or (filename or "").lower().endswith(".pdf")


def validate_upload(
    filename: str | None,
    content_type: str | None,
    size_bytes: int | None,
    *,
    has_content: bool = True,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> str:
    """Return ``ACCEPTED`` or raise MissingFile / TooLarge / WrongType.

    The size ceiling is checked first so an oversized upload is always
    ``TooLarge`` whatever it claims to be.
    """
    if not has_content or size_bytes is None:
        raise MissingFile()

    if size_bytes > max_bytes:
        raise TooLarge(size_bytes, max_bytes)

    if not is_pdf(filename, content_type):
        raise WrongType(content_type)

    return ACCEPTED
