"""POST /api/bounds, /api/transform, /api/cull: engine seams over HTTP."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from scenesight.config import Settings
from scenesight.dependencies import get_settings
from scenesight.engine.bounds import get_bounds, get_bounds_with_padding
from scenesight.engine.culling import build_culling_predicates, filter_visible
from scenesight.engine.transform import horizontal_scale, vertical_scale
from scenesight.engine.viewbox import compute_transform_from_viewbox
from scenesight.models.requests import BoundsRequest, CullRequest, TransformRequest
from scenesight.models.responses import BoundsResponse, CullResponse, TransformResponse

router = APIRouter()


@router.post("/bounds", response_model=BoundsResponse)
async def bounds(req: BoundsRequest) -> BoundsResponse:
    if req.padding_fraction:
        viewbox = get_bounds_with_padding(req.scene, req.padding_fraction)
    else:
        viewbox = get_bounds(req.scene)
    center = viewbox.center
    return BoundsResponse(viewbox=viewbox, center_x=center.x, center_y=center.y)


@router.post("/transform", response_model=TransformResponse)
async def transform(req: TransformRequest, settings: Settings = Depends(get_settings)) -> TransformResponse:
    padding = req.padding if req.padding is not None else settings.default_padding
    if 2 * padding >= min(req.width, req.height):
        raise HTTPException(
            status_code=400,
            detail=f"padding {padding} leaves no drawable area on a {req.width}x{req.height} surface",
        )
    matrix = compute_transform_from_viewbox(
        req.viewbox, req.width, req.height, padding=padding, y_flip=req.y_flip
    )
    return TransformResponse(
        matrix=matrix,
        svg_transform=matrix.to_svg(),
        horizontal_scale=horizontal_scale(matrix),
        vertical_scale=vertical_scale(matrix),
    )


@router.post("/cull", response_model=CullResponse)
async def cull(req: CullRequest, settings: Settings = Depends(get_settings)) -> CullResponse:
    margin = req.margin if req.margin is not None else settings.offscreen_margin
    predicates = build_culling_predicates(req.transform, req.width, req.height, margin=margin)
    visible = filter_visible(req.scene, predicates)
    total = sum(1 for _ in req.scene.iter_primitives())
    kept = sum(1 for _ in visible.iter_primitives())
    return CullResponse(scene=visible, visible=kept, total=total)
