"""Shared calibration constants for the deflection engine.

This module centralizes the tunable numbers used across the package to
avoid hardcoded values scattered through the lens models and compositor.

Notes
-----
The visual strength multipliers are empirically tuned for a plausible
on-screen effect at the default slider positions. They are not derived from
lensing theory and should be adjusted here rather than re-derived.
"""


# Slider conversions
SPREAD_TO_RADIUS: float = 0.24
"""Scale radius per unit of the spread control (normalized sky units)."""

MIN_SCALE_RADIUS: float = 0.01
"""Floor applied to any scale radius derived from the spread control."""

MIN_WALL_WIDTH: float = 1e-3
"""Floor applied to the void toy model wall width (in void radii)."""

MAX_MASS: float = 2.0
"""Upper bound of the mass control (200%)."""

MAX_SPREAD: float = 2.0
"""Upper bound of the spread control."""


# Visual strength multipliers
POINT_MASS_STRENGTH: float = 0.03
"""Base strength per unit mass shared by the cluster models."""

POINT_MASS_SOFTENING: float = 0.005
"""Additive radius softening for the point mass (normalized sky units)."""

NFW_STRENGTH_BOOST: float = 6.0
"""Multiplier applied on top of the base strength for the NFW halo."""

VOID_TOY_STRENGTH: float = 0.15
"""Visual strength of the void toy model deflection."""

VOID_TOY_LENSING_STRENGTH: float = 3.0
"""Multiplier on M(x)/x inside the void toy profile."""

HSW_STRENGTH: float = 0.33
"""Visual strength of the tabulated HSW void deflection."""


# Void toy model geometry (in void radii)
VOID_TOY_CORE_RADIUS: float = 0.05
"""Outer edge of the constant-density core."""

VOID_TOY_RIDGE_RADIUS: float = 1.0
"""Radius where the compensating wall peaks."""


# NFW numerics
NFW_SMALL_X: float = 1e-4
"""Below this normalized radius g(x)/x uses its analytic series."""

NFW_UNITY_BAND: float = 1e-6
"""Half-width of the band around x = 1 handled by the expansion branch."""


# HSW lookup table
HSW_TABLE_SIZE: int = 8192
"""Default number of radial bins in the HSW lookup table."""

HSW_DEPTH_STEPS: int = 1000
"""Default number of line-of-sight midpoint steps per bin."""

HSW_RADIAL_EXTENT: float = 20.0
"""Table coverage in void radii (R_max)."""

HSW_CORE_RADIUS: float = 1e-4
"""3D radius below which the HSW density is held at delta_c."""

HSW_MIN_PROJECTED_RADIUS: float = 1e-3
"""Projected radius below which the stored deflection is zero."""

HSW_MIN_SHAPE_RADIUS: float = 0.01
"""Floor applied to the HSW shape radius r_s (in void radii)."""


# Multi-layer compositing
MAX_LAYERS: int = 8
"""Maximum number of background layers."""

LAYER_DECAY_RATE: float = 0.4
"""Brightness decay per layer: 1 / (1 + rate * i)."""

LAYER_DEPTH_STEP: float = 0.12
"""Deflection depth reduction and parallax zoom per layer."""

LAYER_PARALLAX_OFFSET: tuple = (0.3, 0.7)
"""Per-layer (u, v) parallax shift."""
