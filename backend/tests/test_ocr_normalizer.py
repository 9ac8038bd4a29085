import pytest

from app.core.errors import OcrInvalidResponse, OcrProcessingError
from app.services.ocr_normalizer import normalize_ocr_response


def test_error_list_is_joined():
    with pytest.raises(OcrProcessingError) as exc_info:
        normalize_ocr_response({"IsErroredOnProcessing": True, "ErrorMessage": ["a", "b"]})
    assert exc_info.value.provider_message == "a; b"
    assert exc_info.value.status_code == 502


def test_error_string_and_missing_message():
    with pytest.raises(OcrProcessingError) as exc_info:
        normalize_ocr_response({"IsErroredOnProcessing": True, "ErrorMessage": "bad file"})
    assert exc_info.value.provider_message == "bad file"

    with pytest.raises(OcrProcessingError) as exc_info:
        normalize_ocr_response({"IsErroredOnProcessing": True})
    assert exc_info.value.provider_message == "Unknown error"


def test_whitespace_only_is_empty_result_not_error():
    result = normalize_ocr_response({"ParsedResults": [{"ParsedText": "  "}]})
    assert result.is_empty
    assert result.combined_text == ""
    assert result.pages == []


@pytest.mark.parametrize("results", [None, "nope", {"ParsedText": "x"}])
def test_missing_or_malformed_results_are_empty(results):
    assert normalize_ocr_response({"ParsedResults": results}).is_empty


def test_pages_are_trimmed_marked_and_empty_pages_dropped():
    envelope = {
        "IsErroredOnProcessing": False,
        "ParsedResults": [
            {"ParsedText": "  first page\n"},
            {"ParsedText": ""},
            "garbage",
            {"ParsedText": "fourth page"},
        ],
    }

    result = normalize_ocr_response(envelope)

    assert [p.page_number for p in result.pages] == [1, 4]
    assert result.combined_text == (
        "----- Page 1 -----\n\nfirst page\n\n----- Page 4 -----\n\nfourth page"
    )
    assert not result.is_empty


def test_non_object_envelope_is_invalid():
    with pytest.raises(OcrInvalidResponse):
        normalize_ocr_response(["not", "an", "object"])
