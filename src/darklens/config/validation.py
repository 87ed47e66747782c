"""Strict configuration validation for DarkLens.

This module validates that all required configuration values are present and
well-typed, enforcing a fail-fast policy before any rendering code executes.

Policy enforced:
- Structure and types are validated here and raise `ValueError` with the
  dotted key path of the offending entry.
- Numeric ranges of the lens controls are NOT validated: out-of-range values
  are clamped by `LensParameters`, never rejected.
- Plotting: a global `plotting.enabled` boolean must be present (no defaults).
"""

from typing import Any, Dict

from ..lensing.utils import LensModel


def _require(config: Dict[str, Any], key: str, ctx: str = ""):
    if key not in config:
        raise ValueError(f"Missing required key '{key}' in {ctx or 'config'}")
    return config[key]


def _require_type(value: Any, t: Any, key_path: str):
    if isinstance(value, bool) and t in ((int, float), int, float):
        raise ValueError(f"Key '{key_path}' must be numeric, got bool")
    if not isinstance(value, t):
        name = t.__name__ if isinstance(t, type) else '/'.join(x.__name__ for x in t)
        raise ValueError(f"Key '{key_path}' must be of type {name}, got {type(value).__name__}")
    return value


def _require_list_length(value: Any, n: int, key_path: str):
    if not isinstance(value, (list, tuple)) or len(value) != n:
        raise ValueError(f"Key '{key_path}' must be a list/tuple of length {n}")
    return value


def validate_top_level(config: Dict[str, Any]) -> None:
    run_name = _require(config, 'run_name', 'top-level')
    _require_type(run_name, str, 'run_name')

    for section in ('lens', 'render', 'hsw_lookup', 'plotting'):
        _require_type(_require(config, section, 'top-level'), dict, section)

    plotting = config['plotting']
    enabled = _require(plotting, 'enabled', 'plotting')
    _require_type(enabled, bool, 'plotting.enabled')
    output_dir = _require(plotting, 'output_dir', 'plotting')
    _require_type(output_dir, str, 'plotting.output_dir')


def validate_lens_config(lens: Dict[str, Any]) -> None:
    model = _require(lens, 'model', 'lens')
    _require_type(model, str, 'lens.model')
    LensModel.from_name(model)

    for key in ('mass', 'spread'):
        _require_type(_require(lens, key, 'lens'), (int, float), f'lens.{key}')

    for key in ('wall_density', 'wall_width'):
        if key in lens:
            _require_type(lens[key], (int, float), f'lens.{key}')

    if 'hsw' in lens:
        hsw = _require_type(lens['hsw'], dict, 'lens.hsw')
        for key in ('delta_c', 'rs', 'alpha', 'beta'):
            if key in hsw:
                _require_type(hsw[key], (int, float), f'lens.hsw.{key}')


def validate_render_config(render: Dict[str, Any]) -> None:
    shape = _require_list_length(_require(render, 'shape', 'render'), 2, 'render.shape')
    if not all(isinstance(n, int) and not isinstance(n, bool) and n > 0 for n in shape):
        raise ValueError("render.shape must contain two positive integers")

    _require_list_length(_require(render, 'lens_position', 'render'), 2, 'render.lens_position')

    layers = _require(render, 'layers', 'render')
    _require_type(layers, int, 'render.layers')

    _require_type(_require(render, 'brightness', 'render'), (int, float), 'render.brightness')
    _require_type(_require(render, 'show_core', 'render'), bool, 'render.show_core')

    if 'grid_tint' in render:
        _require_type(render['grid_tint'], bool, 'render.grid_tint')
    if 'grid_spacing' in render:
        spacing = _require_type(render['grid_spacing'], int, 'render.grid_spacing')
        if spacing <= 0:
            raise ValueError("render.grid_spacing must be a positive integer")

    sources = render.get('sources', [])
    if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
        raise ValueError("render.sources must be a list of image paths")
    if len(sources) > 8:
        raise ValueError("render.sources supports at most 8 images")


def validate_hsw_lookup_config(hsw_lookup: Dict[str, Any]) -> None:
    for key in ('size', 'depth_steps'):
        value = _require(hsw_lookup, key, 'hsw_lookup')
        _require_type(value, int, f'hsw_lookup.{key}')
        if value <= 0:
            raise ValueError(f"hsw_lookup.{key} must be a positive integer")


def validate_or_raise(config: Dict[str, Any]) -> None:
    """Validate complete configuration, or raise ValueError with a clear message."""
    validate_top_level(config)
    validate_lens_config(config['lens'])
    validate_render_config(config['render'])
    validate_hsw_lookup_config(config['hsw_lookup'])
