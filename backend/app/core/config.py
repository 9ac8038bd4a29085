from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    OCR_SPACE_API_KEY: str | None = None
    OCR_SPACE_URL: str = "https://api.ocr.space/parse/image"
    OCR_TIMEOUT_SECONDS: float = 60.0
    OCR_MAX_UPLOAD_BYTES: int = 8 * 1024 * 1024

    OPENROUTER_API_KEY: str | None = None
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    CHAT_DEFAULT_MODEL: str = "shisa-ai/shisa-v2-llama3.3-70b:free"
    CHAT_TIMEOUT_SECONDS: float = 60.0
    CHAT_SYSTEM_PROMPT: str = "You are a helpful assistant."
    CHAT_USE_COURSE_PROMPT: bool = False

    # Sent to OpenRouter for app attribution; falls back to the deployment URL
    APP_REFERER: str | None = None
    VERCEL_URL: str | None = None
    APP_TITLE: str = "Electronic Campus Chatbot"

    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @model_validator(mode="after")
    def default_referer(self):
        if not self.APP_REFERER:
            self.APP_REFERER = self.VERCEL_URL or "http://localhost:3000"
        return self


settings = Settings()


def get_settings() -> Settings:
    return settings
