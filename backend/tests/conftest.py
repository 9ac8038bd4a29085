import pytest

from app.core.config import Settings, get_settings
from app.main import app
from tests.mocks import FakeProvider, ocr_envelope, respond_json


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        OCR_SPACE_API_KEY="ocr-test-key",
        OPENROUTER_API_KEY="chat-test-key",
        OCR_MAX_UPLOAD_BYTES=1024,
    )


@pytest.fixture(autouse=True)
def override_settings(test_settings):
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def ocr_provider():
    return FakeProvider(respond_json(ocr_envelope("hello", "world")))


@pytest.fixture
def sample_pdf():
    return b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< >>\n%%EOF\n"
