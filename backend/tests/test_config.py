from app.api.deps import build_chat_proxy
from app.core.config import Settings
from app.core.prompts import COURSE_SYSTEM_PROMPT, DEFAULT_SYSTEM_PROMPT, default_system_prompt
from tests.mocks import FakeProvider, chat_completion, respond_json


def test_default_system_prompt():
    assert default_system_prompt(Settings(_env_file=None)) == DEFAULT_SYSTEM_PROMPT


def test_configured_system_prompt():
    settings = Settings(_env_file=None, CHAT_SYSTEM_PROMPT="Answer in code blocks.")
    assert default_system_prompt(settings) == "Answer in code blocks."


def test_course_prompt_switch():
    settings = Settings(_env_file=None, CHAT_USE_COURSE_PROMPT=True)
    assert default_system_prompt(settings) == COURSE_SYSTEM_PROMPT
    assert "AOP216D" in COURSE_SYSTEM_PROMPT


def test_course_prompt_is_sent_as_system_message():
    settings = Settings(
        _env_file=None,
        OPENROUTER_API_KEY="chat-test-key",
        CHAT_USE_COURSE_PROMPT=True,
    )
    provider = FakeProvider(respond_json(chat_completion("ok")))
    proxy = build_chat_proxy(settings, http_client=provider.client())

    proxy.send(proxy.build_turn("What is a BufferedReader?"))

    messages = provider.last_json()["messages"]
    assert messages[0] == {"role": "system", "content": COURSE_SYSTEM_PROMPT}


def test_referer_defaults_to_localhost(monkeypatch):
    monkeypatch.delenv("VERCEL_URL", raising=False)
    monkeypatch.delenv("APP_REFERER", raising=False)
    assert Settings(_env_file=None).APP_REFERER == "http://localhost:3000"


def test_referer_falls_back_to_vercel_url(monkeypatch):
    monkeypatch.delenv("APP_REFERER", raising=False)
    monkeypatch.setenv("VERCEL_URL", "campus-assist.vercel.app")
    assert Settings(_env_file=None).APP_REFERER == "campus-assist.vercel.app"


def test_explicit_referer_wins(monkeypatch):
    monkeypatch.setenv("VERCEL_URL", "campus-assist.vercel.app")
    settings = Settings(_env_file=None, APP_REFERER="https://campus.example")
    assert settings.APP_REFERER == "https://campus.example"


def test_referer_header_comes_from_settings(monkeypatch):
    monkeypatch.delenv("APP_REFERER", raising=False)
    monkeypatch.setenv("VERCEL_URL", "campus-assist.vercel.app")
    settings = Settings(_env_file=None, OPENROUTER_API_KEY="chat-test-key")
    provider = FakeProvider(respond_json(chat_completion("ok")))
    proxy = build_chat_proxy(settings, http_client=provider.client())

    proxy.send(proxy.build_turn("hi"))

    assert provider.requests[0].headers["http-referer"] == "campus-assist.vercel.app"
