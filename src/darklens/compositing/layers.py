"""Background layer stack for multi-layer compositing.

Depth is approximated by independent per-layer scaling: deeper layers are
dimmer, deflected less and shifted by a fixed parallax transform.
"""

import numpy as np
from dataclasses import dataclass
from typing import List

from ..constants import (
    MAX_LAYERS,
    LAYER_DECAY_RATE,
    LAYER_DEPTH_STEP,
    LAYER_PARALLAX_OFFSET,
)


@dataclass(frozen=True)
class Layer:
    """
    A single background layer.

    Parameters
    ----------
    depth_index : `int`
        Position in the stack, 0 (nearest) to 7.
    brightness_scale : `float`
        Global brightness control applied to this layer.
    source_index : `int`
        Index of the source image sampled by this layer.
    """
    depth_index: int
    brightness_scale: float = 1.0
    source_index: int = 0

    @property
    def decay(self):
        """Brightness decay 1 / (1 + 0.4 i), strictly decreasing with depth."""
        return 1.0 / (1.0 + self.depth_index * LAYER_DECAY_RATE)

    @property
    def brightness(self):
        return self.brightness_scale * self.decay

    @property
    def depth(self):
        """Fraction of the full deflection strength, 1 - 0.12 i."""
        return 1.0 - self.depth_index * LAYER_DEPTH_STEP

    @property
    def zoom(self):
        return 1.0 + self.depth_index * LAYER_DEPTH_STEP

    @property
    def parallax_offset(self):
        return np.array(LAYER_PARALLAX_OFFSET) * self.depth_index

    def parallax(self, uv, aspect):
        """Apply the layer's zoom, aspect stretch and parallax shift to `uv`."""
        return uv * self.zoom * np.array([aspect, 1.0]) + self.parallax_offset


def resolve_layer_count(requested: int, num_sources: int) -> int:
    """
    Resolve the number of layers to composite.

    Parameters
    ----------
    requested : `int`
        Layer count chosen by the user.
    num_sources : `int`
        Number of supplied source images.

    Returns
    -------
    count : `int`
        With more than one source the count is pinned to the number of
        sources and `requested` is ignored; otherwise `requested` clamped
        to 1..8.
    """
    if num_sources > 1:
        return min(num_sources, MAX_LAYERS)
    return int(np.clip(int(requested), 1, MAX_LAYERS))


def build_layers(count: int, brightness: float = 1.0, num_sources: int = 1) -> List[Layer]:
    """
    Build the ordered layer stack.

    Parameters
    ----------
    count : `int`
        Number of layers (already resolved).
    brightness : `float`, optional
        Global brightness control.
    num_sources : `int`, optional
        Number of sources. With several sources layer i samples source i,
        otherwise every layer samples source 0.

    Returns
    -------
    layers : `list` of `Layer`
        Layers ordered from nearest to deepest.
    """
    if not 1 <= count <= MAX_LAYERS:
        raise ValueError(f"Layer count must be between 1 and {MAX_LAYERS}, got {count}")
    return [
        Layer(
            depth_index=i,
            brightness_scale=brightness,
            source_index=i if num_sources > 1 else 0,
        )
        for i in range(count)
    ]
