"""Multi-layer compositing of lensed background layers.

This module renders a frame by evaluating the deflection field once per
layer over the whole pixel grid, subtracting it from each layer's
parallax-transformed coordinates and accumulating the resampled layers with
their brightness weights.
"""

import numpy as np
from typing import Optional, Sequence, Tuple

from ..lensing.session import LensingSession
from ..lensing.utils import lens_offsets
from .layers import build_layers, resolve_layer_count
from .overlays import apply_overlays
from .sources import LayerSource, sample_source
from .utils import FrameData


def frame_uv(shape: Tuple[int, int]):
    """
    Screen coordinates of the pixel centres of a frame.

    Parameters
    ----------
    shape : `tuple` of `int`
        Frame shape as (height, width).

    Returns
    -------
    uv : `numpy.ndarray`
        Array of shape (height, width, 2); u grows to the right, v grows
        upwards (row 0 is the top of the frame).
    """
    height, width = shape
    u = (np.arange(width) + 0.5) / width
    v = 1.0 - (np.arange(height) + 0.5) / height
    uu, vv = np.meshgrid(u, v)
    return np.stack([uu, vv], axis=-1)


def palette(t):
    """Cosine colour palette used to tint grid layers by depth."""
    a = np.array([0.5, 0.5, 0.5])
    b = np.array([0.5, 0.5, 0.5])
    d = np.array([0.00, 0.33, 0.67])
    return a + b * np.cos(2.0 * np.pi * (t + d))


def tint_grid_sample(samples, depth_index):
    """Colour vertical (red) and horizontal (green) grid lines per layer."""
    col_vert = palette(depth_index * 0.15)
    col_horiz = palette(depth_index * 0.15 + 0.5)
    red = samples[..., 0:1]
    green = samples[..., 1:2]
    tinted = red * col_vert + green * col_horiz
    crossing = (samples[..., 0] > 0.5) & (samples[..., 1] > 0.5)
    tinted[crossing] = 1.0
    return tinted


def composite_frame(session: LensingSession,
                    sources: Sequence[LayerSource],
                    shape: Tuple[int, int] = (256, 256),
                    lens_position: Tuple[float, float] = (0.5, 0.5),
                    layers: int = 3,
                    brightness: float = 1.0,
                    show_core: bool = False,
                    grid_tint: bool = False,
                    config: Optional[dict] = None) -> FrameData:
    """
    Render one frame of the lensed layer stack.

    Parameters
    ----------
    session : `LensingSession`
        Lens parameters and HSW lookup table.
    sources : `sequence` of `LayerSource`
        Layer sources. A single source is repeated across all layers; with
        several sources layer i samples source i and the layer count is
        pinned to the number of sources.
    shape : `tuple` of `int`, optional
        Frame shape as (height, width).
    lens_position : `tuple` of `float`, optional
        Lens centre (u, v) in screen coordinates.
    layers : `int`, optional
        Requested layer count (1..8); ignored when several sources are given.
    brightness : `float`, optional
        Global brightness control.
    show_core : `bool`, optional
        Draw the halo or void markers after compositing.
    grid_tint : `bool`, optional
        Tint grid sources with the per-layer palette. Ignored when several
        sources are given.
    config : `dict`, optional
        Configuration stored on the returned frame.

    Returns
    -------
    frame : `FrameData`
        Composited frame.

    Notes
    -----
    For layer i the sample coordinate is
    ``uv * (1 + 0.12 i) * (aspect, 1) + (0.3 i, 0.7 i) - deflection`` with
    the deflection evaluated at depth ``1 - 0.12 i``, and the contribution
    is weighted by ``brightness / (1 + 0.4 i)``.
    """
    if not sources:
        raise ValueError("At least one layer source is required")

    height, width = shape
    aspect = width / height
    uv = frame_uv(shape)
    offsets = lens_offsets(uv, lens_position, aspect)

    count = resolve_layer_count(layers, len(sources))
    stack = build_layers(count, brightness, num_sources=len(sources))
    tint = grid_tint and len(sources) == 1

    image = np.zeros((height, width, 3))
    for layer in stack:
        deflection = session.evaluate(offsets, depth=layer.depth)
        layer_uv = layer.parallax(uv, aspect) - deflection
        samples = sample_source(sources[layer.source_index], layer_uv)
        if tint:
            samples = tint_grid_sample(samples, layer.depth_index)
        image += samples * layer.brightness

    if show_core:
        image = apply_overlays(image, offsets, session.params)

    return FrameData(
        image=image,
        offsets=offsets,
        params=session.params,
        lens_position=tuple(lens_position),
        layer_count=count,
        brightness=brightness,
        source_names=[s.name for s in sources],
        overlays=show_core,
        config=config,
    )
