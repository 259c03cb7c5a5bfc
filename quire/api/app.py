"""
Server export API.

Routes:
    POST /api/export/pdf    {document, filename?} -> {filename, fileBytesBase64}
    POST /api/export/print  {resume, filename?}   -> {filename, fileBytesBase64}
    GET  /api/templates     -> {templates: [...], default}

Failures answer {error} with 400 (no document in the request) or 500
(engine failure). Each export request gets its own print engine.
"""

import base64
import os
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from quire import __version__
from quire.contexts.rendering.exceptions import DocumentValidationError, ExportError
from quire.contexts.rendering.logger import _log_warning
from quire.contexts.rendering.server_export import (
    ChromiumPrintEngine,
    PrintEngine,
    export_pdf_bytes,
)
from quire.contexts.templating.exceptions import (
    InvalidDocumentStructureError,
    TemplateRenderError,
)
from quire.contexts.templating.resume_data_structure import Document, document_payload
from quire.contexts.templating.template_registry import get_registry

load_dotenv()
CORS_ORIGINS = [o.strip() for o in os.getenv("QUIRE_CORS_ORIGINS", "*").split(",") if o.strip()]


class ExportRequest(BaseModel):
    """Export request body. `resume` is accepted as an alias of `document`."""

    document: Optional[Dict[str, Any]] = None
    resume: Optional[Dict[str, Any]] = None
    filename: Optional[str] = None


class ExportResponse(BaseModel):
    filename: str
    fileBytesBase64: str


def get_engine_factory() -> Callable[[], PrintEngine]:
    """Print engine factory dependency (overridden in tests)."""
    return ChromiumPrintEngine


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _export(request: ExportRequest, engine_factory: Callable[[], PrintEngine]) -> ExportResponse:
    payload = document_payload(request.model_dump())
    if payload is None:
        raise DocumentValidationError("document is required")

    document = Document.from_dict(payload)
    result = await export_pdf_bytes(document, request.filename, engine_factory)
    return ExportResponse(
        filename=result.filename,
        fileBytesBase64=base64.b64encode(result.pdf_bytes).decode("ascii"),
    )


def create_app() -> FastAPI:
    app = FastAPI(title="QUIRE export API", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["content-type"],
    )

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError):
        return _error(400, "Request body must be a JSON object with a document")

    @app.exception_handler(DocumentValidationError)
    async def _missing_document(request: Request, exc: DocumentValidationError):
        return _error(400, str(exc))

    @app.exception_handler(InvalidDocumentStructureError)
    async def _invalid_document(request: Request, exc: InvalidDocumentStructureError):
        return _error(400, str(exc))

    @app.exception_handler(ExportError)
    async def _export_failed(request: Request, exc: ExportError):
        _log_warning(f"Export request failed at {exc.stage}: {exc.message}")
        return _error(500, exc.message)

    @app.exception_handler(TemplateRenderError)
    async def _render_failed(request: Request, exc: TemplateRenderError):
        return _error(500, exc.message)

    @app.post("/api/export/pdf", response_model=ExportResponse)
    async def export_pdf(
        request: ExportRequest, engine_factory=Depends(get_engine_factory)
    ) -> ExportResponse:
        return await _export(request, engine_factory)

    @app.post("/api/export/print", response_model=ExportResponse)
    async def export_print(
        request: ExportRequest, engine_factory=Depends(get_engine_factory)
    ) -> ExportResponse:
        return await _export(request, engine_factory)

    @app.get("/api/templates")
    async def list_templates() -> Dict[str, Any]:
        registry = get_registry()
        return {"templates": registry.template_ids(), "default": registry.default.template_id}

    return app


app = create_app()
