"""Single chat-completion proxy for the course chat widget.

Uses the OpenAI SDK against OpenRouter's OpenAI-compatible endpoint. One
request per turn: no retries, no streaming.
"""

import time
from typing import Any, Dict, List

import httpx
import openai

from app.core.errors import (
    ChatNetworkFailure,
    ChatProviderHttpError,
    MissingCredential,
    MissingPrompt,
)
from app.core.prompts import DEFAULT_SYSTEM_PROMPT
from app.models.schemas import ChatReply, ChatTurn, SamplingConfig
from app.utils.logger import log_llm_call, logger

PROVIDER = "OpenRouter"
DEFAULT_MODEL = "shisa-ai/shisa-v2-llama3.3-70b:free"
EMPTY_REPLY = "⚠️ OpenRouter did not send a reply."


def build_messages(turn: ChatTurn) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": turn.system_prompt},
        {"role": "user", "content": turn.prompt},
    ]


def _first_choice_content(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content or None


def _provider_error_message(response: httpx.Response) -> str:
    """Prefer the provider's own ``error.message``; fall back to the reason phrase."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"


class ChatProxy:
    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://openrouter.ai/api/v1",
        default_model: str = DEFAULT_MODEL,
        default_system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        referer: str = "http://localhost:3000",
        app_title: str = "Electronic Campus Chatbot",
        timeout_seconds: float = 60.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self.default_model = default_model
        self.default_system_prompt = default_system_prompt
        self._referer = referer
        self._app_title = app_title
        self._timeout_seconds = timeout_seconds
        self._http_client = http_client
        # Built once; without a key every send fails before reaching the SDK
        self._client = self._build_client() if api_key else None

    def build_turn(
        self,
        prompt: str | None,
        *,
        model: str | None = None,
        system: str | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatTurn:
        if not prompt:
            raise MissingPrompt()

        overrides = {
            k: v
            for k, v in {
                "temperature": temperature,
                "top_p": top_p,
                "max_tokens": max_tokens,
            }.items()
            if v is not None
        }
        return ChatTurn(
            prompt=prompt,
            system_prompt=system or self.default_system_prompt,
            model_id=model or self.default_model,
            sampling=SamplingConfig(**overrides),
        )

    def _build_client(self) -> openai.OpenAI:
        return openai.OpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout_seconds,
            max_retries=0,
            default_headers={
                "HTTP-Referer": self._referer,
                "X-Title": self._app_title,
            },
            http_client=self._http_client,
        )

    def close(self) -> None:
        """Release the SDK's connection pool unless the caller owns the transport."""
        if self._client is not None and self._http_client is None:
            self._client.close()

    def send(self, turn: ChatTurn) -> ChatReply:
        if not turn.prompt:
            raise MissingPrompt()
        if self._client is None:
            logger.error("OPENROUTER_API_KEY is not set in environment variables.")
            raise MissingCredential()

        start_time = time.time()
        sampling = turn.sampling
        try:
            raw = self._client.chat.completions.with_raw_response.create(
                model=turn.model_id,
                messages=build_messages(turn),
                temperature=sampling.temperature,
                top_p=sampling.top_p,
                max_tokens=sampling.max_tokens,
            )
        except openai.APIStatusError as exc:
            message = _provider_error_message(exc.response)
            self._log(turn, start_time, success=False, status_code=exc.status_code, error=message)
            raise ChatProviderHttpError(exc.status_code, message) from exc
        except openai.APIConnectionError as exc:
            self._log(turn, start_time, success=False, error=str(exc))
            raise ChatNetworkFailure(str(exc)) from exc

        response = raw.http_response
        try:
            data = response.json()
        except ValueError as exc:
            self._log(turn, start_time, success=False, status_code=response.status_code, error="invalid JSON")
            raise ChatProviderHttpError(502, "invalid JSON in provider response") from exc

        content = _first_choice_content(data)
        if content is None:
            logger.warning(f"{PROVIDER} response for {turn.model_id} had no message content")
            content = EMPTY_REPLY

        self._log(
            turn,
            start_time,
            success=True,
            status_code=response.status_code,
            reply_chars=len(content),
        )
        return ChatReply(text=content)

    def _log(self, turn, start_time, *, success, status_code=None, error=None, reply_chars=0):
        log_llm_call(
            provider=PROVIDER,
            model=turn.model_id,
            success=success,
            prompt_chars=len(turn.prompt),
            reply_chars=reply_chars,
            status_code=status_code,
            error=error,
            latency_ms=(time.time() - start_time) * 1000,
        )
