"""
Utility functions and data structures for the deflection engine.

This module provides the lens model variants, the parameter container with
its clamping rules, and the helpers that turn screen positions into
aspect-corrected offsets from the lens centre.
"""

import enum
import numpy as np
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from ..constants import (
    SPREAD_TO_RADIUS,
    MIN_SCALE_RADIUS,
    MIN_WALL_WIDTH,
    MAX_MASS,
    MAX_SPREAD,
    HSW_MIN_SHAPE_RADIUS,
)


class LensModel(enum.Enum):
    """Closed set of supported lens profiles."""
    POINT_MASS = 'PointMass'
    NFW = 'NFW'
    VOID_TOY = 'VoidToy'
    HSW_VOID = 'HSWVoid'

    @classmethod
    def from_name(cls, name):
        """Look up a model by its configuration name (e.g. 'NFW')."""
        for model in cls:
            if model.value == name or model.name == name:
                return model
        raise ValueError(
            f"Unsupported lens model: {name}. "
            f"Supported: {', '.join(m.value for m in cls)}"
        )

    @property
    def is_void(self):
        return self in (LensModel.VOID_TOY, LensModel.HSW_VOID)


HSW_TABLE_FIELDS = ('spread', 'hsw_delta_c', 'hsw_rs', 'hsw_alpha', 'hsw_beta')
"""Parameters whose change invalidates the HSW lookup table."""


@dataclass
class LensParameters:
    """
    Complete parameter set of the active lens.

    Values are the raw control positions; every field is clamped to its
    valid range on construction, so downstream code never sees a zero or
    negative scale.

    Parameters
    ----------
    model : `LensModel`
        Active lens profile.
    mass : `float`
        Mass control in [0, 2]. Cluster mass scale for the point mass and
        NFW models; the void toy model reads its inner contrast as
        ``mass - 1``.
    spread : `float`
        Spread control in [0, 2]. The scale radius (NFW scale radius or void
        radius) is ``max(spread * 0.24, 0.01)``.
    wall_density : `float`
        Peak wall contrast of the void toy model, clamped to [-1, 1].
    wall_width : `float`
        Wall width of the void toy model in void radii, floored above zero.
    hsw_delta_c : `float`
        Central contrast of the HSW void, clamped to [-1, 0].
    hsw_rs : `float`
        HSW zero-crossing radius in void radii, floored above zero.
    hsw_alpha : `float`
        HSW inner slope (non-negative).
    hsw_beta : `float`
        HSW outer slope (non-negative).

    Examples
    --------
    >>> params = LensParameters(model=LensModel.NFW, mass=1.0, spread=1.0)
    >>> params.scale_radius
    0.24
    """
    model: LensModel = LensModel.POINT_MASS
    mass: float = 1.0
    spread: float = 1.0

    # === VOID TOY MODEL ===
    wall_density: float = 0.05
    wall_width: float = 0.05

    # === HSW VOID MODEL ===
    hsw_delta_c: float = -0.8
    hsw_rs: float = 0.9
    hsw_alpha: float = 4.0
    hsw_beta: float = 15.0

    def __post_init__(self):
        """Clamp every field into its valid range."""
        if not isinstance(self.model, LensModel):
            self.model = LensModel.from_name(self.model)
        self.mass = float(np.clip(self.mass, 0.0, MAX_MASS))
        self.spread = float(np.clip(self.spread, 0.0, MAX_SPREAD))
        self.wall_density = float(np.clip(self.wall_density, -1.0, 1.0))
        self.wall_width = max(float(self.wall_width), MIN_WALL_WIDTH)
        self.hsw_delta_c = float(np.clip(self.hsw_delta_c, -1.0, 0.0))
        self.hsw_rs = max(float(self.hsw_rs), HSW_MIN_SHAPE_RADIUS)
        self.hsw_alpha = max(float(self.hsw_alpha), 0.0)
        self.hsw_beta = max(float(self.hsw_beta), 0.0)

    @classmethod
    def from_controls(cls, model, mass=1.0, spread=1.0, **kwargs):
        """Create parameters from control positions.

        For the HSW void the mass control is capped at 100% and drives the
        central contrast as ``delta_c = mass - 1``.
        """
        model = model if isinstance(model, LensModel) else LensModel.from_name(model)
        if model is LensModel.HSW_VOID:
            mass = min(float(mass), 1.0)
            kwargs['hsw_delta_c'] = mass - 1.0
        return cls(model=model, mass=mass, spread=spread, **kwargs)

    @property
    def scale_radius(self):
        """NFW scale radius or void radius in normalized sky units."""
        return max(self.spread * SPREAD_TO_RADIUS, MIN_SCALE_RADIUS)

    @property
    def inner_density(self):
        """Inner density contrast of the void toy model (mass - 1)."""
        return self.mass - 1.0

    def hsw_key(self) -> Tuple[float, ...]:
        """Values that determine the HSW lookup table."""
        return tuple(getattr(self, name) for name in HSW_TABLE_FIELDS)

    def updated(self, **changes) -> 'LensParameters':
        """Return a new, re-clamped parameter set with `changes` applied."""
        return replace(self, **changes)


def lens_offsets(uv, lens_position, aspect):
    """
    Calculate aspect-corrected offsets from the lens centre.

    Parameters
    ----------
    uv : `numpy.ndarray`
        Screen coordinates in [0, 1], trailing axis (u, v).
    lens_position : `tuple` of `float`
        Lens centre (u, v) in screen coordinates.
    aspect : `float`
        Width / height of the frame.

    Returns
    -------
    offsets : `numpy.ndarray`
        Offsets with the horizontal component multiplied by `aspect`, so
        that distances are isotropic on screen.
    """
    offsets = np.asarray(uv, dtype=float) - np.asarray(lens_position, dtype=float)
    offsets = offsets * np.array([aspect, 1.0])
    return offsets


def radius_and_direction(offsets):
    """
    Split offsets into radius and unit direction.

    Parameters
    ----------
    offsets : `numpy.ndarray`
        Offsets from the lens centre, trailing axis of length 2.

    Returns
    -------
    r : `numpy.ndarray`
        Euclidean norm of each offset.
    direction : `numpy.ndarray`
        Unit vectors; the zero vector where r == 0.
    """
    offsets = np.asarray(offsets, dtype=float)
    r = np.hypot(offsets[..., 0], offsets[..., 1])
    safe_r = np.where(r > 0.0, r, 1.0)
    direction = np.where((r > 0.0)[..., None], offsets / safe_r[..., None], 0.0)
    return r, direction


def print_lens_parameters_summary(params: LensParameters,
                                  lookup: Optional[object] = None):
    """
    Print a summary of the active lens parameters.

    Parameters
    ----------
    params : `LensParameters`
        Lens parameters to describe.
    lookup : `HSWLookupTable`, optional
        HSW table currently owned by the session, if any.
    """
    print("=== Lens Parameters ===")
    print(f"Model: {params.model.value}")
    print(f"Mass control: {params.mass:.2f}")
    print(f"Spread control: {params.spread:.2f} (scale radius {params.scale_radius:.4f})")

    if params.model is LensModel.VOID_TOY:
        print(f"Inner density contrast: {params.inner_density:+.3f}")
        print(f"Wall density contrast: {params.wall_density:+.3f}")
        print(f"Wall width: {params.wall_width:.3f} void radii")
    elif params.model is LensModel.HSW_VOID:
        print(f"delta_c: {params.hsw_delta_c:+.3f}")
        print(f"r_s: {params.hsw_rs:.3f}")
        print(f"alpha: {params.hsw_alpha:.2f}, beta: {params.hsw_beta:.2f}")
        if lookup is not None:
            print(f"Lookup table: {lookup.size} bins to {lookup.radial_extent:.1f} void radii")
        else:
            print("Lookup table: not built")


def parameters_from_config(lens_config: Dict) -> LensParameters:
    """
    Create lens parameters from the ``lens`` section of a configuration.

    Parameters
    ----------
    lens_config : `dict`
        Lens configuration with model, mass, spread and the optional void
        toy and ``hsw`` entries.

    Returns
    -------
    params : `LensParameters`
        Clamped parameter set.
    """
    hsw = lens_config.get('hsw', {})
    kwargs = {
        'wall_density': lens_config.get('wall_density', 0.05),
        'wall_width': lens_config.get('wall_width', 0.05),
        'hsw_rs': hsw.get('rs', 0.9),
        'hsw_alpha': hsw.get('alpha', 4.0),
        'hsw_beta': hsw.get('beta', 15.0),
    }
    model = LensModel.from_name(lens_config['model'])
    if model is LensModel.HSW_VOID and 'delta_c' in hsw:
        # an explicit delta_c overrides the mass-control link
        return LensParameters(model=model, mass=min(float(lens_config['mass']), 1.0),
                              spread=lens_config['spread'],
                              hsw_delta_c=hsw['delta_c'], **kwargs)
    return LensParameters.from_controls(model, mass=lens_config['mass'],
                                        spread=lens_config['spread'], **kwargs)
