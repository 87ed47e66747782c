"""
Data structures for composited frames.

This module provides the frame container returned by the compositor and a
summary printer in the same style as the lens parameter summary.
"""

import numpy as np
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..lensing.utils import LensParameters


@dataclass
class FrameData:
    """
    Composited frame and the state it was rendered from.

    Parameters
    ----------
    image : `numpy.ndarray`
        RGB frame of shape (height, width, 3). Values may exceed 1 where
        several bright layers overlap.
    offsets : `numpy.ndarray`
        Aspect-corrected offsets from the lens centre per pixel.
    params : `LensParameters`
        Lens parameters used for the frame.
    lens_position : `tuple` of `float`
        Lens centre (u, v) in screen coordinates.
    layer_count : `int`
        Number of layers composited.
    brightness : `float`
        Global brightness control.
    source_names : `list` of `str`
        Names of the layer sources.
    overlays : `bool`
        Whether the annotation pass was applied.
    config : `dict`, optional
        Configuration used to produce the frame.
    generation_timestamp : `str`, optional
        ISO timestamp; set automatically when omitted.
    """
    image: np.ndarray
    offsets: np.ndarray
    params: LensParameters
    lens_position: Tuple[float, float] = (0.5, 0.5)
    layer_count: int = 1
    brightness: float = 1.0
    source_names: Optional[List[str]] = None
    overlays: bool = False
    config: Optional[Dict] = None
    generation_timestamp: Optional[str] = None

    def __post_init__(self):
        """Set generation timestamp if not provided."""
        if self.generation_timestamp is None:
            self.generation_timestamp = datetime.now().isoformat()

    @property
    def shape(self):
        """Frame shape as (height, width)."""
        return self.image.shape[:2]

    @property
    def aspect(self):
        return self.shape[1] / self.shape[0]

    @property
    def mean_intensity(self):
        return float(np.mean(self.image))

    @property
    def peak_intensity(self):
        return float(np.max(self.image))


def print_frame_summary(frame: FrameData):
    """
    Print a summary of a composited frame.

    Parameters
    ----------
    frame : `FrameData`
        Frame to describe.
    """
    print("=== Frame Summary ===")
    print(f"Shape: {frame.shape[0]} x {frame.shape[1]} (aspect {frame.aspect:.3f})")
    print(f"Model: {frame.params.model.value}")
    print(f"Lens position: ({frame.lens_position[0]:.3f}, {frame.lens_position[1]:.3f})")
    print(f"Layers: {frame.layer_count}")
    print(f"Brightness: {frame.brightness:.2f}")
    if frame.source_names:
        print(f"Sources: {', '.join(frame.source_names)}")
    print(f"Overlays: {'on' if frame.overlays else 'off'}")
    print(f"Mean intensity: {frame.mean_intensity:.6f}")
    print(f"Peak intensity: {frame.peak_intensity:.6f}")
    print(f"\nGenerated: {frame.generation_timestamp}")
