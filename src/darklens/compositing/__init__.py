"""
Multi-layer compositing module for DarkLens.

This module provides the layer stack, layer sources with bilinear
resampling, the frame compositor and the annotation overlays.
"""

from .generator import composite_frame, frame_uv
from .layers import Layer, build_layers, resolve_layer_count
from .sources import LayerSource, sample_source, load_image_source, make_grid_source
from .overlays import apply_overlays
from .utils import FrameData, print_frame_summary

__all__ = [
    'composite_frame',
    'frame_uv',
    'Layer',
    'build_layers',
    'resolve_layer_count',
    'LayerSource',
    'sample_source',
    'load_image_source',
    'make_grid_source',
    'apply_overlays',
    'FrameData',
    'print_frame_summary'
]
