"""Layer sources and texture resampling.

A source is an RGB image sampled at uv coordinates with bilinear
interpolation. Sources repeat outside [0, 1], uploaded images included;
a source built with ``tileable=False`` clamps to its edge pixels instead.
"""

import numpy as np
import matplotlib.image as mpimg
from dataclasses import dataclass
from pathlib import Path
from scipy import ndimage


@dataclass
class LayerSource:
    """
    Image sampled by one or more layers.

    Parameters
    ----------
    image : `numpy.ndarray`
        RGB image of shape (height, width, 3) with values in [0, 1]. Row 0 is
        the top of the image.
    tileable : `bool`
        Repeat the image outside [0, 1] instead of clamping to the edge
        pixels.
    name : `str`
        Label used in summaries.
    """
    image: np.ndarray
    tileable: bool = True
    name: str = 'source'

    def __post_init__(self):
        """Normalize the image to float RGB."""
        image = np.asarray(self.image, dtype=float)
        if image.ndim == 2:
            image = np.repeat(image[..., None], 3, axis=2)
        if image.ndim != 3 or image.shape[2] < 3:
            raise ValueError(f"Source '{self.name}' must be a grayscale or RGB(A) image, got shape {image.shape}")
        self.image = image[..., :3]

    @property
    def shape(self):
        return self.image.shape[:2]


def sample_source(source: LayerSource, uv):
    """
    Bilinearly sample a source at uv coordinates.

    Parameters
    ----------
    source : `LayerSource`
        Source image.
    uv : `numpy.ndarray`
        Sample coordinates with trailing axis (u, v); u runs left to right
        and v bottom to top, one image spanning [0, 1].

    Returns
    -------
    samples : `numpy.ndarray`
        RGB samples of shape ``uv.shape[:-1] + (3,)``.
    """
    uv = np.asarray(uv, dtype=float)
    height, width = source.shape
    cols = uv[..., 0] * width - 0.5
    rows = (1.0 - uv[..., 1]) * height - 0.5
    coords = np.stack([rows, cols])

    mode = 'grid-wrap' if source.tileable else 'nearest'
    channels = [
        ndimage.map_coordinates(source.image[..., c], coords, order=1, mode=mode)
        for c in range(3)
    ]
    return np.stack(channels, axis=-1)


def load_image_source(path, tileable=True) -> LayerSource:
    """
    Load an image file as a layer source.

    Parameters
    ----------
    path : `str` or `Path`
        Image path (PNG, or any format matplotlib can read).
    tileable : `bool`, optional
        Whether the image repeats outside [0, 1].

    Returns
    -------
    source : `LayerSource`
        Source with values scaled to [0, 1].
    """
    path = Path(path)
    if not path.exists():
        raise ValueError(f"Layer source not found: {path}")
    image = mpimg.imread(path)
    if image.dtype == np.uint8:
        image = image / 255.0
    return LayerSource(image=image, tileable=tileable, name=path.name)


def make_grid_source(size=512, spacing=32, line_width=2) -> LayerSource:
    """
    Create a tileable colour grid for inspecting the deflection field.

    Vertical lines are written to the red channel and horizontal lines to the
    green channel (both also to blue), so the palette colouring of the
    compositor can tell them apart.

    Parameters
    ----------
    size : `int`, optional
        Side of the square texture in pixels.
    spacing : `int`, optional
        Grid spacing in pixels; `size` should be a multiple for seamless
        tiling.
    line_width : `int`, optional
        Line width in pixels.

    Returns
    -------
    source : `LayerSource`
        Tileable grid source.
    """
    if size <= 0 or spacing <= 0 or line_width <= 0:
        raise ValueError("Grid size, spacing and line_width must be positive")
    image = np.zeros((size, size, 3))
    on_line = (np.arange(size) % spacing) < line_width
    image[:, on_line, 0] = 1.0
    image[on_line, :, 1] = 1.0
    image[..., 2] = np.maximum(image[..., 0], image[..., 1])
    return LayerSource(image=image, tileable=True, name='grid')
