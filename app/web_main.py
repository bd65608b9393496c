from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi import Body, Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import ORJSONResponse

from adapters.excalidraw.repository import FileSystemExcalidrawRepository
from adapters.excalidraw.scene import SceneFormatError, parse_scene, relayout_scene
from adapters.excalidraw.url_encoder import ExcalidrawUrlTooLongError, build_excalidraw_url
from adapters.filesystem.json_utils import loads_json
from app.config import AppSettings, load_settings
from app.layout_wiring import build_layout_engine
from domain.models import ExcalidrawDocument, LayoutReport
from domain.ports.repositories import ExcalidrawRepository
from domain.services.auto_layout import AutoLayoutEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutContext:
    settings: AppSettings
    engine: AutoLayoutEngine
    scene_repo: ExcalidrawRepository


def create_app(settings: AppSettings) -> FastAPI:
    app = FastAPI(title=settings.title)
    app.state.context = LayoutContext(
        settings=settings,
        engine=build_layout_engine(settings),
        scene_repo=FileSystemExcalidrawRepository(),
    )

    @app.get("/health")
    def health() -> ORJSONResponse:
        return ORJSONResponse({"status": "ok"})

    @app.post("/api/layout")
    def api_layout(
        payload: Any = Body(...),
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        corrected, report = relayout_payload(context, payload)
        return ORJSONResponse({"scene": corrected.to_dict(), "report": report.to_dict()})

    @app.post("/api/layout/url")
    def api_layout_url(
        payload: Any = Body(...),
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        corrected, _ = relayout_payload(context, payload)
        io_settings = context.settings.io
        try:
            url = build_excalidraw_url(
                io_settings.excalidraw_base_url,
                corrected.to_dict(),
                io_settings.excalidraw_max_url_length,
            )
        except ExcalidrawUrlTooLongError as exc:
            raise HTTPException(status_code=413, detail=str(exc)) from exc
        return ORJSONResponse({"url": url})

    @app.post("/api/scenes/upload")
    async def api_upload_scene(
        file: UploadFile = File(...),
        context: LayoutContext = Depends(get_context),
    ) -> ORJSONResponse:
        raw_bytes = await file.read()
        if not raw_bytes:
            raise HTTPException(status_code=400, detail="Empty upload")
        try:
            payload = loads_json(raw_bytes)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="Invalid JSON") from exc
        corrected, report = relayout_payload(context, payload)
        stem = Path(file.filename or "scene").stem or "scene"
        target_path = context.settings.io.output_dir / f"{stem}.excalidraw"
        context.scene_repo.save(corrected, target_path)
        return ORJSONResponse(
            {
                "status": "ok",
                "stored_path": str(target_path),
                "report": report.to_dict(),
            }
        )

    return app


def get_context(request: Request) -> LayoutContext:
    return request.app.state.context


def relayout_payload(
    context: LayoutContext, payload: Any
) -> tuple[ExcalidrawDocument, LayoutReport]:
    try:
        document = parse_scene(payload)
    except SceneFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    corrected, report = relayout_scene(document, context.engine)
    if report.collision:
        logger.info(
            "Collision corrected for %s (%.2fpx)",
            report.collision.element_id,
            report.collision.depth,
        )
    return corrected, report


app = create_app(load_settings())
