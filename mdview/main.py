from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse

from .schemas import DEFAULT_OPTIONS, MarkdownPreviewRequest, MarkdownPreviewResponse
from .services.markdown_service import MarkdownConversionError, render_markdown
from .services.render_service import RenderDepthError

logger = logging.getLogger(__name__)

app = FastAPI(title="mdview", default_response_class=JSONResponse)


@app.get("/api/markdown/defaults", response_class=JSONResponse)
async def markdown_defaults() -> JSONResponse:
    return JSONResponse(DEFAULT_OPTIONS.model_dump(mode="json"))


@app.post("/api/markdown/preview", response_model=MarkdownPreviewResponse)
async def markdown_preview(payload: MarkdownPreviewRequest) -> MarkdownPreviewResponse:
    try:
        html = render_markdown(payload.content, payload.options) or ""
    except (MarkdownConversionError, RenderDepthError) as exc:
        logger.warning("Markdown preview failed: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return MarkdownPreviewResponse(html=html)
