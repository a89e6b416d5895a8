"""Viewbox-to-transform compiler.

Fits a real-world box onto a surface with uniform scale, so aspect ratio is
always preserved when the engine derives the transform itself.
"""

from __future__ import annotations

import logging

from scenesight.engine.bounds import get_bounds, y_flip_for
from scenesight.engine.transform import Matrix, compose, scale, translate
from scenesight.models.geometry import CenterViewbox, Viewbox
from scenesight.models.options import RenderOptions
from scenesight.models.scene import Scene

logger = logging.getLogger(__name__)

DEFAULT_PADDING = 40.0

# Zero-extent boxes (a single point, a vertical line) use this extent instead.
MIN_EXTENT = 1.0


def compute_transform_from_viewbox(
    viewbox: Viewbox | CenterViewbox,
    surface_width: float,
    surface_height: float,
    padding: float = DEFAULT_PADDING,
    y_flip: bool = False,
) -> Matrix:
    """Matrix mapping ``viewbox`` onto a surface, centered and uniformly scaled."""
    bounds = viewbox.to_viewbox() if isinstance(viewbox, CenterViewbox) else viewbox

    width = bounds.width or MIN_EXTENT
    height = bounds.height or MIN_EXTENT

    scale_factor = min(
        (surface_width - 2 * padding) / width,
        (surface_height - 2 * padding) / height,
    )

    return compose(
        translate(-bounds.center.x, -bounds.center.y),
        scale(scale_factor, -scale_factor if y_flip else scale_factor),
        translate(surface_width / 2, surface_height / 2),
    )


def get_projection_matrix(
    scene: Scene,
    surface_width: float,
    surface_height: float,
    options: RenderOptions | None = None,
) -> Matrix:
    """Resolve the real-to-surface matrix: explicit transform, explicit viewbox, then bounds."""
    options = options or RenderOptions()
    if options.transform is not None:
        return options.transform

    padding = options.padding if options.padding is not None else DEFAULT_PADDING
    y_flip = options.y_flip if options.y_flip is not None else y_flip_for(scene)
    viewbox = options.viewbox if options.viewbox is not None else get_bounds(scene, y_flip)
    matrix = compute_transform_from_viewbox(
        viewbox, surface_width, surface_height, padding=padding, y_flip=y_flip
    )
    logger.debug("Projection for %sx%s surface: %s", surface_width, surface_height, matrix)
    return matrix
