from typing import List

from pydantic import BaseModel, Field, field_validator

PAGE_MARKER = "----- Page {number} -----"

MAX_TEMPERATURE = 2.0
MAX_TOP_P = 1.0
MAX_COMPLETION_TOKENS = 8192


def _clamp(value, low, high):
    return max(low, min(high, value))


class UploadedFile(BaseModel):
    name: str
    declared_mime_type: str = ""
    size_bytes: int
    content: bytes = b""


class OcrPage(BaseModel):
    page_number: int = Field(ge=1)
    text: str


class OcrResult(BaseModel):
    pages: List[OcrPage] = []
    combined_text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.combined_text


class SamplingConfig(BaseModel):
    temperature: float = 1.0
    top_p: float = 0.95
    max_tokens: int = 400

    @field_validator("temperature")
    @classmethod
    def clamp_temperature(cls, v: float) -> float:
        return _clamp(v, 0.0, MAX_TEMPERATURE)

    @field_validator("top_p")
    @classmethod
    def clamp_top_p(cls, v: float) -> float:
        return _clamp(v, 0.0, MAX_TOP_P)

    @field_validator("max_tokens")
    @classmethod
    def clamp_max_tokens(cls, v: int) -> int:
        return _clamp(v, 1, MAX_COMPLETION_TOKENS)


class ChatTurn(BaseModel):
    prompt: str
    system_prompt: str
    model_id: str
    sampling: SamplingConfig = SamplingConfig()


class ChatReply(BaseModel):
    text: str


# HTTP request/response bodies


class ChatRequest(BaseModel):
    prompt: str | None = None
    model: str | None = None
    temperature: float | None = None
    top_p: float | None = None
    max_tokens: int | None = None
    system: str | None = None


class ChatResponse(BaseModel):
    reply: str


class MarkdownRequest(BaseModel):
    file_name: str | None = None
    text: str = ""
