"""POST /api/render/*: scene to SVG document or PNG image."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from scenesight.canvas.renderer import render_scene_to_png
from scenesight.config import Settings
from scenesight.dependencies import get_settings
from scenesight.models.options import RenderOptions
from scenesight.models.requests import RenderRequest
from scenesight.svg.renderer import get_svg_from_scene

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/render")


def resolve_options(options: RenderOptions | None, settings: Settings) -> RenderOptions:
    """Request options, or the configured server defaults when none were sent."""
    if options is not None:
        return options
    return RenderOptions(
        svg_width=settings.default_svg_width,
        svg_height=settings.default_svg_height,
        padding=settings.default_padding,
    )


@router.post("/svg")
async def render_svg(req: RenderRequest, settings: Settings = Depends(get_settings)) -> Response:
    svg = get_svg_from_scene(req.scene, resolve_options(req.options, settings))
    return Response(content=svg, media_type="image/svg+xml")


@router.post("/png")
def render_png(req: RenderRequest, settings: Settings = Depends(get_settings)) -> Response:
    # Sync handler: FastAPI runs it in the threadpool while Pillow rasterizes.
    png = render_scene_to_png(req.scene, resolve_options(req.options, settings))
    logger.info("Rendered PNG, %d bytes", len(png))
    return Response(content=png, media_type="image/png")
