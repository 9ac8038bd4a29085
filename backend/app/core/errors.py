"""Error taxonomy shared by the OCR and chat pipelines.

Every error carries the HTTP status the route answers with, so handlers in
``app.main`` only decide how to render the message (plain text for OCR, a
JSON ``reply`` for chat).
"""

PROVIDER_BODY_EXCERPT_CHARS = 200


def excerpt(text: str | None, limit: int = PROVIDER_BODY_EXCERPT_CHARS) -> str:
    """Trim a provider payload before it is surfaced to callers."""
    if not text:
        return ""
    return text[:limit].strip()


class ProxyError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# OCR pipeline


class OcrError(ProxyError):
    pass


class OcrMissingCredential(OcrError):
    status_code = 500

    def __init__(self):
        super().__init__("Server misconfigured: OCR_SPACE_API_KEY missing.")


class MissingFile(OcrError):
    status_code = 400

    def __init__(self):
        super().__init__('Invalid file: upload a PDF as form-data field "file".')


class WrongType(OcrError):
    status_code = 400

    def __init__(self, content_type: str | None = None):
        super().__init__("Invalid file: only PDF is supported.")
        self.content_type = content_type


class TooLarge(OcrError):
    status_code = 413

    def __init__(self, size_bytes: int, max_bytes: int):
        mib = max_bytes // (1024 * 1024)
        super().__init__(
            f"PDF too large for realtime OCR. Please use a PDF <= {mib} MB."
        )
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes


class OcrTimeout(OcrError):
    status_code = 504

    def __init__(self, timeout_seconds: float):
        super().__init__(
            f"OCR request timed out after {timeout_seconds:g}s. Try a smaller PDF."
        )
        self.timeout_seconds = timeout_seconds


class OcrNetworkFailure(OcrError):
    status_code = 502

    def __init__(self, detail: str | None = None):
        super().__init__(f"Failed to reach OCR provider: {detail or 'network error'}")
        self.detail = detail


class OcrProviderHttpError(OcrError):
    status_code = 502

    def __init__(self, provider_status: int, body: str | None = None):
        self.provider_status = provider_status
        self.body_excerpt = excerpt(body)
        super().__init__(
            f"OCR provider error: HTTP {provider_status}. {self.body_excerpt}".strip()
        )


class OcrInvalidResponse(OcrError):
    status_code = 502

    def __init__(self):
        super().__init__("OCR provider returned invalid JSON.")


class OcrProcessingError(OcrError):
    status_code = 502

    def __init__(self, provider_message: str):
        super().__init__(f"OCR provider error: {provider_message}")
        self.provider_message = provider_message


# Chat pipeline


class ChatError(ProxyError):
    pass


class MissingPrompt(ChatError):
    status_code = 400

    def __init__(self):
        super().__init__("No message received.")


class MissingCredential(ChatError):
    status_code = 500

    def __init__(self):
        super().__init__("Server configuration error: API key missing.")


class ChatProviderHttpError(ChatError):
    def __init__(self, provider_status: int, provider_message: str):
        super().__init__(
            f"OpenRouter API error: {excerpt(provider_message)}",
            status_code=provider_status,
        )
        self.provider_status = provider_status


class ChatNetworkFailure(ChatError):
    status_code = 500

    def __init__(self, detail: str | None = None):
        super().__init__("Error contacting OpenRouter API. Please try again.")
        self.detail = detail
