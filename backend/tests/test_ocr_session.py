import threading

from app.core.errors import OcrTimeout
from app.models.schemas import OcrResult
from app.services.ocr_session import OcrSession


def _result(text):
    return OcrResult(combined_text=text)


def test_superseded_submission_never_becomes_visible():
    session = OcrSession()

    first = session.begin("first.pdf")
    second = session.begin("second.pdf")

    assert session.complete(second, _result("second text"))
    assert not session.complete(first, _result("first text"))

    state = session.state
    assert state.file_name == "second.pdf"
    assert state.text == "second text"
    assert not state.busy
    assert state.markdown_ready


def test_stale_failure_does_not_clobber_latest_result():
    session = OcrSession()
    first = session.begin("a.pdf")
    second = session.begin("b.pdf")

    session.complete(second, _result("ok"))
    assert not session.fail(first, "OCR request timed out")

    assert session.state.error == ""
    assert session.state.text == "ok"


def test_cancel_drops_in_flight_result():
    session = OcrSession()
    ticket = session.begin("a.pdf")

    session.cancel()

    assert not session.state.busy
    assert not session.complete(ticket, _result("late"))
    assert session.state.text == ""


def test_run_records_provider_error():
    session = OcrSession()

    def work():
        raise OcrTimeout(60)

    assert session.run("slow.pdf", work)
    assert "timed out" in session.state.error
    assert not session.state.busy


def test_concurrent_runs_only_latest_applies():
    session = OcrSession()
    first_started = threading.Event()
    release_first = threading.Event()
    outcomes = {}

    def slow_work():
        first_started.set()
        release_first.wait(timeout=5)
        return _result("first")

    def run_first():
        outcomes["first"] = session.run("first.pdf", slow_work)

    t = threading.Thread(target=run_first)
    t.start()
    first_started.wait(timeout=5)

    outcomes["second"] = session.run("second.pdf", lambda: _result("second"))
    release_first.set()
    t.join(timeout=5)

    assert outcomes == {"first": False, "second": True}
    assert session.state.text == "second"


def test_markdown_uses_visible_state():
    session = OcrSession()
    ticket = session.begin("doc.pdf")
    session.complete(ticket, _result("----- Page 1 -----\n\nhello"))

    assert session.markdown() == "# doc.pdf\n\n## Page 1\n\nhello"
