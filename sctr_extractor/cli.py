from __future__ import annotations

import argparse
import json
import mimetypes
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .client import ExtractionClient
from .config import configure_logging, load_settings
from .exceptions import SctrExtractorError
from .html_renderer import render_report
from .preflight import run_preflight
from .schemas import ValidationResult
from .sections import build_report
from .workflow import StagedFile, UploadWorkflow


def _json_print(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sctr-extractor", description="SCTR Extractor CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    web = sub.add_parser("serve-web", help="Run the SCTR Extractor web interface")
    web.add_argument("--host", default="127.0.0.1")
    web.add_argument("--port", type=int, default=8000)
    web.add_argument("--reload", action="store_true")

    validate = sub.add_parser("validate", help="Send a PDF to the extraction service and print the report")
    validate.add_argument("--file", required=True)
    validate.add_argument("--person-name", required=True)
    validate.add_argument("--search", default="", help="Highlight this term in the extracted text")
    validate.add_argument("--html", default=None, help="Also write the HTML report to this path")
    validate.add_argument("--raw", action="store_true", help="Print the service response instead of the report")

    render = sub.add_parser("render", help="Render a saved service response as an HTML report")
    render.add_argument("--input", required=True, help="JSON file with a validation response")
    render.add_argument("--output", required=True)
    render.add_argument("--search", default="")

    sub.add_parser("doctor", help="Check configuration and extraction service reachability")

    return parser


def _write_html(path: str, html: str) -> str:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(html, encoding="utf-8")
    return str(target)


def main() -> None:
    project_root = Path(__file__).resolve().parents[1]
    load_dotenv(project_root / ".env", override=False)

    settings = load_settings()
    configure_logging(settings.log_level)
    parser = _build_parser()
    args = parser.parse_args()

    if args.command == "serve-web":
        import uvicorn

        uvicorn.run(
            "sctr_extractor.web_app:create_web_app",
            host=args.host,
            port=args.port,
            reload=bool(args.reload),
            factory=True,
        )
        return

    if args.command == "doctor":
        _json_print(run_preflight(settings=settings))
        return

    if args.command == "validate":
        path = Path(args.file)
        if not path.is_file():
            _json_print({"error": "file_not_found", "detail": str(path)})
            return
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        client = ExtractionClient(
            base_url=settings.api_base_url,
            validate_path=settings.validate_path,
            timeout=settings.request_timeout,
        )
        workflow = UploadWorkflow(client=client, max_upload_bytes=settings.max_upload_bytes)
        try:
            workflow.stage_file(
                StagedFile(filename=path.name, content_type=content_type, content=path.read_bytes())
            )
            result = workflow.submit(args.person_name)
        except SctrExtractorError as exc:
            _json_print(
                {
                    "error": "validate_failed",
                    "detail": str(exc),
                    "hint": "Run `sctr-extractor doctor` to check the extraction service.",
                }
            )
            return

        report = build_report(result, args.search)
        if args.html:
            _write_html(args.html, render_report(report))
        _json_print(result.to_dict() if args.raw else report.to_dict())
        return

    if args.command == "render":
        try:
            payload = json.loads(Path(args.input).read_text(encoding="utf-8"))
            result = ValidationResult.from_payload(payload)
        except (OSError, ValueError, SctrExtractorError) as exc:
            _json_print({"error": "render_failed", "detail": str(exc)})
            return
        written = _write_html(args.output, render_report(build_report(result, args.search)))
        _json_print({"output": written, "policies": len(result.policies)})
        return

    parser.error("Unknown command")


if __name__ == "__main__":
    main()
