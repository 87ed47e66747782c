"""HSW void deflection lookup table.

The HSW density profile has no closed-form projected mass, so its radial
deflection curve is tabulated numerically: the 3D density contrast is
integrated along the line of sight to a surface density, accumulated into a
cylindrical enclosed mass, and stored as mass / R on a fixed radial grid.

The table is built once per parameter change, never per frame, and is
immutable afterwards.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Tuple

from ..constants import (
    HSW_TABLE_SIZE,
    HSW_DEPTH_STEPS,
    HSW_RADIAL_EXTENT,
    HSW_MIN_PROJECTED_RADIUS,
)
from .mass_models import hsw_density
from .utils import LensParameters

# Rows of the (radius, depth) grid evaluated per numpy call
_CHUNK_ROWS = 256


@dataclass(frozen=True, eq=False)
class HSWLookupTable:
    """
    Tabulated signed deflection profile of an HSW void.

    Parameters
    ----------
    values : `numpy.ndarray`
        Signed enclosed-mass-over-radius at each bin midpoint (read-only).
    radii : `numpy.ndarray`
        Bin midpoints in void radii (read-only).
    radial_extent : `float`
        Coverage R_max in void radii.
    void_radius : `float`
        Void radius in normalized sky units used to map queries onto the
        table.
    parameters : `tuple` of `float`
        (spread, delta_c, r_s, alpha, beta) the table was built from.
    depth_steps : `int`
        Line-of-sight steps used per bin.

    Notes
    -----
    Values are stored with their sign. For an under-dense core the enclosed
    mass is negative and the deflection points away from the centre.
    """
    values: np.ndarray
    radii: np.ndarray
    radial_extent: float
    void_radius: float
    parameters: Tuple[float, ...] = ()
    depth_steps: int = HSW_DEPTH_STEPS
    _knots: np.ndarray = field(init=False, repr=False, compare=False)
    _knot_values: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Freeze the arrays and prepare the interpolation knots."""
        self.values.flags.writeable = False
        self.radii.flags.writeable = False
        # mass / R -> 0 at the centre, so the curve is anchored at (0, 0)
        object.__setattr__(self, '_knots', np.concatenate(([0.0], self.radii)))
        object.__setattr__(self, '_knot_values', np.concatenate(([0.0], self.values)))

    @property
    def size(self):
        """Number of radial bins."""
        return int(self.values.size)

    @property
    def sky_extent(self):
        """Coverage in normalized sky units (R_max * void radius)."""
        return self.radial_extent * self.void_radius

    def lookup(self, r):
        """
        Interpolate the signed deflection profile at sky radius `r`.

        Parameters
        ----------
        r : `float` or `numpy.ndarray`
            Distance from the lens centre in normalized sky units.

        Returns
        -------
        profile : `float` or `numpy.ndarray`
            Linearly interpolated table value; zero where r / r_v lies
            beyond the table coverage.
        """
        r = np.asarray(r, dtype=float)
        x = r / self.void_radius
        profile = np.interp(x, self._knots, self._knot_values)
        profile = np.where(x > self.radial_extent, 0.0, profile)
        if profile.ndim == 0:
            return float(profile)
        return profile

    def matches(self, params: LensParameters):
        """Whether this table was built for the HSW state of `params`."""
        return self.parameters == params.hsw_key()


def projected_surface_density(radii, delta_c, r_s, alpha, beta,
                              depth_extent=HSW_RADIAL_EXTENT,
                              depth_steps=HSW_DEPTH_STEPS):
    """
    Integrate the HSW density contrast along the line of sight.

    Parameters
    ----------
    radii : `numpy.ndarray`
        Projected radii in void radii.
    delta_c, r_s, alpha, beta : `float`
        HSW profile parameters.
    depth_extent : `float`, optional
        Line-of-sight half depth in void radii.
    depth_steps : `int`, optional
        Number of midpoint steps over [0, depth_extent].

    Returns
    -------
    sigma : `numpy.ndarray`
        Projected surface density contrast, doubled for the symmetric half
        of the line of sight.
    """
    radii = np.asarray(radii, dtype=float)
    dz = depth_extent / depth_steps
    z = (np.arange(depth_steps) + 0.5) * dz

    sigma = np.empty_like(radii)
    for start in range(0, radii.size, _CHUNK_ROWS):
        stop = start + _CHUNK_ROWS
        R = radii[start:stop, None]
        r_3d = np.sqrt(R * R + z * z)
        sigma[start:stop] = hsw_density(r_3d, delta_c, r_s, alpha, beta).sum(axis=1)
    return sigma * 2.0 * dz


def build_hsw_lookup(params: LensParameters,
                     size: int = HSW_TABLE_SIZE,
                     depth_steps: int = HSW_DEPTH_STEPS,
                     radial_extent: float = HSW_RADIAL_EXTENT,
                     verbose: bool = False) -> HSWLookupTable:
    """
    Build the HSW deflection lookup table for a parameter set.

    Parameters
    ----------
    params : `LensParameters`
        Lens parameters; only the HSW fields and the spread are used.
    size : `int`, optional
        Number of radial bins. Default is 8192.
    depth_steps : `int`, optional
        Line-of-sight midpoint steps per bin. Default is 1000.
    radial_extent : `float`, optional
        Table coverage in void radii. Default is 20.
    verbose : `bool`, optional
        Whether to print a summary once the table is built.

    Returns
    -------
    table : `HSWLookupTable`
        Complete, read-only table.

    Notes
    -----
    For each midpoint radius R_i = (i + 0.5) dr the surface density
    Sigma(R_i) is accumulated into the cylindrical mass
    ``mass += Sigma(R_i) R_i dr`` and ``mass / R_i`` is stored. The cost is
    O(size * depth_steps); the result is deterministic for identical inputs.
    """
    if size < 1 or depth_steps < 1:
        raise ValueError("HSW lookup size and depth_steps must be positive")

    dr = radial_extent / size
    radii = (np.arange(size) + 0.5) * dr

    sigma = projected_surface_density(
        radii,
        params.hsw_delta_c,
        params.hsw_rs,
        params.hsw_alpha,
        params.hsw_beta,
        depth_extent=radial_extent,
        depth_steps=depth_steps,
    )
    enclosed = np.cumsum(sigma * radii * dr)
    values = np.where(radii < HSW_MIN_PROJECTED_RADIUS, 0.0, enclosed / radii)

    table = HSWLookupTable(
        values=values,
        radii=radii,
        radial_extent=float(radial_extent),
        void_radius=params.scale_radius,
        parameters=params.hsw_key(),
        depth_steps=int(depth_steps),
    )
    if verbose:
        print_lookup_summary(table)
    return table


def print_lookup_summary(table: HSWLookupTable):
    """
    Print a summary of an HSW lookup table.

    Parameters
    ----------
    table : `HSWLookupTable`
        Table to describe.
    """
    print("=== HSW Lookup Table ===")
    print(f"Bins: {table.size} (depth steps: {table.depth_steps})")
    print(f"Coverage: {table.radial_extent:.1f} void radii ({table.sky_extent:.4f} sky units)")
    print(f"Min value: {np.min(table.values):+.6e}")
    print(f"Max value: {np.max(table.values):+.6e}")
    print(f"Value at edge: {table.values[-1]:+.6e}")
