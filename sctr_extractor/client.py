from __future__ import annotations

import logging
from typing import Any

import requests

from .config import DEFAULT_API_URL, DEFAULT_VALIDATE_PATH
from .exceptions import ServiceError
from .schemas import ValidationResult

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Error al procesar el documento"
PDF_CONTENT_TYPE = "application/pdf"


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return GENERIC_ERROR_MESSAGE
    if not isinstance(body, dict):
        return GENERIC_ERROR_MESSAGE
    for key in ("detail", "error"):
        message = body.get(key)
        if message:
            return message if isinstance(message, str) else str(message)
    return GENERIC_ERROR_MESSAGE


class ExtractionClient:
    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        validate_path: str = DEFAULT_VALIDATE_PATH,
        timeout: float = 120.0,
        http: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.validate_path = "/" + validate_path.lstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    @property
    def validate_url(self) -> str:
        return f"{self.base_url}{self.validate_path}"

    def validate_document(
        self,
        content: bytes,
        filename: str,
        person_name: str,
        content_type: str = PDF_CONTENT_TYPE,
    ) -> ValidationResult:
        url = self.validate_url
        logger.info("Sending %s (%d bytes) to %s", filename, len(content), url)
        try:
            response = self.http.post(
                url,
                files={"file": (filename, content, content_type)},
                data={"person_name": person_name},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Extraction service unreachable at %s: %s", url, exc)
            raise ServiceError(f"No se pudo contactar el servicio de extracción: {exc}") from exc

        if not response.ok:
            message = _error_message(response)
            logger.warning("Extraction service returned %s: %s", response.status_code, message)
            raise ServiceError(message, status_code=response.status_code)

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise ServiceError("La respuesta del servidor no es JSON válido", response.status_code) from exc

        result = ValidationResult.from_payload(payload)
        logger.info(
            "Extraction finished: %d policies, %d characters of text",
            len(result.policies),
            len(result.extracted_text),
        )
        return result

    def health(self) -> dict[str, Any]:
        url = f"{self.base_url}/health"
        try:
            response = self.http.get(url, timeout=min(self.timeout, 10.0))
        except requests.RequestException as exc:
            return {"ok": False, "url": url, "detail": str(exc)}
        return {"ok": response.ok, "url": url, "status_code": response.status_code}
