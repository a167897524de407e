from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any, Callable

from dotenv import load_dotenv
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, RedirectResponse

from .client import ExtractionClient
from .config import Settings, load_settings
from .exceptions import ServiceError, UploadValidationError, WorkflowStateError
from .html_renderer import render_report, render_upload_page
from .preflight import run_preflight
from .sections import build_report
from .workflow import StagedFile, UploadWorkflow, WorkflowState

WorkflowFactory = Callable[[Settings], UploadWorkflow]


def _default_workflow_factory(settings: Settings) -> UploadWorkflow:
    client = ExtractionClient(
        base_url=settings.api_base_url,
        validate_path=settings.validate_path,
        timeout=settings.request_timeout,
    )
    return UploadWorkflow(client=client, max_upload_bytes=settings.max_upload_bytes)


async def _read_upload(upload: UploadFile) -> StagedFile:
    content = await upload.read()
    return StagedFile(
        filename=upload.filename or "document.pdf",
        content_type=upload.content_type or "",
        content=content,
    )


def _get_workflow(app: FastAPI, session_id: str) -> UploadWorkflow:
    sessions: dict[str, UploadWorkflow] = app.state.sessions
    workflow = sessions.get(session_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail="session_not_found")
    return workflow


def _require_result(workflow: UploadWorkflow) -> None:
    if workflow.state is not WorkflowState.SUCCEEDED or workflow.result is None:
        raise HTTPException(status_code=409, detail="No hay resultados disponibles para esta sesión")


def _reset_or_conflict(workflow: UploadWorkflow) -> None:
    try:
        workflow.reset()
    except WorkflowStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


def _new_session(app: FastAPI) -> tuple[str, UploadWorkflow]:
    session_id = uuid.uuid4().hex[:12]
    workflow = app.state.workflow_factory(app.state.settings)
    app.state.sessions[session_id] = workflow
    return session_id, workflow


def create_web_app(
    settings: Settings | None = None,
    workflow_factory: WorkflowFactory | None = None,
) -> FastAPI:
    project_root = Path(__file__).resolve().parents[1]
    if settings is None:
        load_dotenv(project_root / ".env", override=False)
        settings = load_settings()

    app = FastAPI(title="SCTR Extractor Web Interface")
    app.state.settings = settings
    app.state.sessions = {}
    app.state.workflow_factory = workflow_factory or _default_workflow_factory
    web_root = Path(__file__).resolve().parent / "web"

    @app.get("/")
    async def index() -> FileResponse:
        return FileResponse(web_root / "index.html")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/doctor")
    def api_doctor() -> JSONResponse:
        return JSONResponse(run_preflight(settings=settings))

    @app.post("/api/session/start")
    async def session_start() -> JSONResponse:
        session_id, workflow = _new_session(app)
        payload = {"session_id": session_id}
        payload.update(workflow.snapshot())
        return JSONResponse(payload)

    @app.get("/api/session/{session_id}")
    async def session_status(session_id: str) -> JSONResponse:
        workflow = _get_workflow(app, session_id)
        return JSONResponse({"session_id": session_id, **workflow.snapshot()})

    @app.get("/api/session/{session_id}/progress")
    async def session_progress(session_id: str) -> dict[str, Any]:
        workflow = _get_workflow(app, session_id)
        return {"state": workflow.state.value, "progress": workflow.progress}

    @app.post("/api/session/{session_id}/file")
    async def session_file(session_id: str, file: UploadFile = File(...)) -> JSONResponse:
        workflow = _get_workflow(app, session_id)
        staged = await _read_upload(file)
        try:
            workflow.stage_file(staged)
        except UploadValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except WorkflowStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return JSONResponse({"session_id": session_id, **workflow.snapshot()})

    # Blocking remote call; kept sync so it runs in the threadpool.
    @app.post("/api/session/{session_id}/submit")
    def session_submit(session_id: str, person_name: str = Form(default="")) -> JSONResponse:
        workflow = _get_workflow(app, session_id)
        try:
            result = workflow.submit(person_name)
        except UploadValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except WorkflowStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except ServiceError:
            return JSONResponse({"session_id": session_id, **workflow.snapshot()}, status_code=502)

        payload: dict[str, Any] = {"session_id": session_id, **workflow.snapshot()}
        payload["report"] = build_report(result).to_dict()
        return JSONResponse(payload)

    @app.get("/api/session/{session_id}/report")
    async def session_report(session_id: str, q: str = "") -> JSONResponse:
        workflow = _get_workflow(app, session_id)
        _require_result(workflow)
        return JSONResponse(build_report(workflow.result, q).to_dict())

    @app.get("/api/session/{session_id}/result")
    async def session_result(session_id: str) -> JSONResponse:
        workflow = _get_workflow(app, session_id)
        _require_result(workflow)
        return JSONResponse(workflow.result.to_dict())

    @app.post("/api/session/{session_id}/reset")
    async def session_reset(session_id: str) -> JSONResponse:
        workflow = _get_workflow(app, session_id)
        _reset_or_conflict(workflow)
        return JSONResponse({"session_id": session_id, **workflow.snapshot()})

    @app.get("/session/{session_id}/report", response_class=HTMLResponse)
    async def session_report_page(session_id: str, q: str = "") -> HTMLResponse:
        workflow = _get_workflow(app, session_id)
        _require_result(workflow)
        html = render_report(
            build_report(workflow.result, q),
            session_path=f"/session/{session_id}/report",
            reset_path=f"/session/{session_id}/reset",
        )
        return HTMLResponse(html)

    @app.post("/session/{session_id}/reset")
    async def session_reset_page(session_id: str) -> RedirectResponse:
        workflow = _get_workflow(app, session_id)
        _reset_or_conflict(workflow)
        app.state.sessions.pop(session_id, None)
        return RedirectResponse("/", status_code=303)

    @app.post("/analyze", response_class=HTMLResponse)
    def analyze(
        file: UploadFile = File(...),
        person_name: str = Form(default=""),
    ) -> HTMLResponse:
        session_id, workflow = _new_session(app)
        staged = StagedFile(
            filename=file.filename or "document.pdf",
            content_type=file.content_type or "",
            content=file.file.read(),
        )
        try:
            workflow.stage_file(staged)
            workflow.submit(person_name)
        except (UploadValidationError, ServiceError) as exc:
            app.state.sessions.pop(session_id, None)
            status = 400 if isinstance(exc, UploadValidationError) else 502
            html = render_upload_page(settings.max_upload_bytes, error=str(exc), person_name=person_name)
            return HTMLResponse(html, status_code=status)

        return HTMLResponse(
            render_report(
                build_report(workflow.result),
                session_path=f"/session/{session_id}/report",
                reset_path=f"/session/{session_id}/reset",
            )
        )

    return app
