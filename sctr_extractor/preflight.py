from __future__ import annotations

import socket
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from dotenv import load_dotenv

from .client import ExtractionClient
from .config import Settings, load_settings


def _check_dns(host: str) -> tuple[bool, str]:
    try:
        socket.gethostbyname(host)
        return True, "resolved"
    except Exception as exc:  # pragma: no cover
        return False, str(exc)


def run_preflight(
    project_root: str | Path | None = None,
    settings: Settings | None = None,
    client: ExtractionClient | None = None,
) -> dict[str, Any]:
    if settings is None:
        root = Path(project_root) if project_root else Path(__file__).resolve().parents[1]
        load_dotenv(root / ".env", override=False)
        settings = load_settings()

    checks: list[dict[str, Any]] = []

    def add(name: str, ok: bool, severity: str, detail: str) -> None:
        checks.append({"name": name, "ok": ok, "severity": severity, "detail": detail})

    parsed = urlparse(settings.api_base_url)
    url_ok = parsed.scheme in {"http", "https"} and bool(parsed.hostname)
    add("api_url", url_ok, "fail", settings.api_base_url)
    add(
        "max_upload_bytes",
        settings.max_upload_bytes > 0,
        "fail",
        str(settings.max_upload_bytes),
    )

    if url_ok and parsed.hostname:
        ok, detail = _check_dns(parsed.hostname)
        add(f"dns:{parsed.hostname}", ok, "warn", detail)

        client = client or ExtractionClient(
            base_url=settings.api_base_url,
            validate_path=settings.validate_path,
            timeout=settings.request_timeout,
        )
        health = client.health()
        add(
            "extraction_service",
            bool(health.get("ok")),
            "warn",
            str(health.get("detail") or health.get("status_code") or health.get("url")),
        )

    failed = [c for c in checks if not c["ok"] and c["severity"] == "fail"]
    warnings = [c for c in checks if not c["ok"] and c["severity"] == "warn"]

    status = "ok"
    if failed:
        status = "fail"
    elif warnings:
        status = "warn"

    return {
        "status": status,
        "settings": {
            "api_base_url": settings.api_base_url,
            "validate_url": settings.validate_url,
            "max_upload_bytes": settings.max_upload_bytes,
            "request_timeout": settings.request_timeout,
        },
        "summary": {
            "passed": len([c for c in checks if c["ok"]]),
            "failed": len(failed),
            "warnings": len(warnings),
        },
        "checks": checks,
    }
