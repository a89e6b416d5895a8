"""POST /api/extract: scenes and SVGs found in pasted log text."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from scenesight.api.render import resolve_options
from scenesight.config import Settings
from scenesight.dependencies import get_settings
from scenesight.logs.extractor import DEFAULT_TITLE, get_scenes_from_log_string
from scenesight.models.requests import ExtractRequest
from scenesight.models.responses import ExtractedSvg, ExtractResponse
from scenesight.svg.renderer import get_svg_from_scene

router = APIRouter()


@router.post("/extract", response_model=ExtractResponse)
async def extract(req: ExtractRequest, settings: Settings = Depends(get_settings)) -> ExtractResponse:
    options = resolve_options(req.options, settings)
    scenes = get_scenes_from_log_string(req.log)
    svgs = [
        ExtractedSvg(title=scene.title or DEFAULT_TITLE, svg=get_svg_from_scene(scene, options))
        for scene in scenes
    ]
    return ExtractResponse(scenes=scenes, svgs=svgs)
