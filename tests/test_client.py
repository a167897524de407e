from __future__ import annotations

from typing import Any

import pytest
import requests

from sctr_extractor.client import GENERIC_ERROR_MESSAGE, ExtractionClient
from sctr_extractor.exceptions import ContractViolationError, ServiceError


class _FakeResponse:
    def __init__(self, status_code: int, body: Any = None, is_json: bool = True) -> None:
        self.status_code = status_code
        self._body = body
        self._is_json = is_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if not self._is_json:
            raise ValueError("not json")
        return self._body


class _FakeSession:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response

    def get(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


def _ok_body() -> dict[str, Any]:
    return {
        "extracted_text": "POLIZA SCTR",
        "component": {"metadata": {"total_length": 11, "section_count": 1}, "sections": []},
        "person_name": "Ana Torres",
        "segmented_sections": {"content": [{"policy_number": "P-1"}, {"policy_number": "P-2"}]},
    }


def test_validate_document_posts_multipart_to_configured_endpoint() -> None:
    session = _FakeSession(_FakeResponse(200, _ok_body()))
    client = ExtractionClient(base_url="http://extraction.test/", http=session, timeout=7)

    result = client.validate_document(b"%PDF-1.4", "poliza.pdf", "Ana Torres")

    call = session.calls[0]
    assert call["url"] == "http://extraction.test/document/v2/validate"
    assert call["files"] == {"file": ("poliza.pdf", b"%PDF-1.4", "application/pdf")}
    assert call["data"] == {"person_name": "Ana Torres"}
    assert call["timeout"] == 7
    assert [p["policy_number"] for p in result.policies] == ["P-1", "P-2"]


def test_error_detail_is_surfaced() -> None:
    session = _FakeSession(_FakeResponse(422, {"detail": "PDF ilegible"}))
    client = ExtractionClient(http=session)
    with pytest.raises(ServiceError) as excinfo:
        client.validate_document(b"%PDF", "a.pdf", "Ana")
    assert excinfo.value.message == "PDF ilegible"
    assert excinfo.value.status_code == 422


def test_error_key_is_used_when_detail_missing() -> None:
    session = _FakeSession(_FakeResponse(500, {"error": "OCR caido"}))
    with pytest.raises(ServiceError, match="OCR caido"):
        ExtractionClient(http=session).validate_document(b"%PDF", "a.pdf", "Ana")


def test_non_json_error_body_falls_back_to_generic_message() -> None:
    session = _FakeSession(_FakeResponse(502, is_json=False))
    with pytest.raises(ServiceError) as excinfo:
        ExtractionClient(http=session).validate_document(b"%PDF", "a.pdf", "Ana")
    assert excinfo.value.message == GENERIC_ERROR_MESSAGE


def test_network_failure_becomes_service_error() -> None:
    session = _FakeSession(error=requests.ConnectionError("connection refused"))
    with pytest.raises(ServiceError) as excinfo:
        ExtractionClient(http=session).validate_document(b"%PDF", "a.pdf", "Ana")
    assert excinfo.value.status_code is None


def test_success_without_component_is_contract_violation() -> None:
    body = _ok_body()
    del body["component"]
    session = _FakeSession(_FakeResponse(200, body))
    with pytest.raises(ContractViolationError):
        ExtractionClient(http=session).validate_document(b"%PDF", "a.pdf", "Ana")


def test_health_reports_unreachable_service() -> None:
    session = _FakeSession(error=requests.ConnectionError("refused"))
    health = ExtractionClient(base_url="http://extraction.test", http=session).health()
    assert health["ok"] is False
    assert health["url"] == "http://extraction.test/health"
