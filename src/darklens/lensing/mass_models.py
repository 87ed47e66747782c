"""
Mass model calculations for the supported lens profiles.

This module provides the dimensionless enclosed-mass quantities used to turn
a normalized radius into a deflection magnitude for the Point Mass,
Navarro-Frenk-White (NFW), void toy and HSW void profiles.

All functions accept scalars or numpy arrays of normalized radii and are
total over x >= 0: singular points are handled by analytic limits rather
than by dividing by near-zero numbers.
"""

import numpy as np
from ..constants import (
    NFW_SMALL_X,
    NFW_UNITY_BAND,
    VOID_TOY_CORE_RADIUS,
    VOID_TOY_RIDGE_RADIUS,
    VOID_TOY_LENSING_STRENGTH,
    HSW_CORE_RADIUS,
)


def _as_radius(x):
    return np.asarray(x, dtype=float)


def _finish(values):
    # 0-d arrays come back as plain floats
    if values.ndim == 0:
        return float(values)
    return values


def point_mass_deflection_profile(r, softening):
    """Calculate the softened 1/r profile of a point mass.

    Parameters
    ----------
    r : `float` or `numpy.ndarray`
        Distance from the lens centre in normalized sky units.
    softening : `float`
        Additive radius softening.

    Returns
    -------
    profile : `float` or `numpy.ndarray`
        1 / (r + softening).

    Notes
    -----
    The additive softening keeps the profile finite at the lens centre.
    """
    r = _as_radius(r)
    return _finish(1.0 / (r + softening))


def nfw_geometric_term(x):
    """Calculate the regime-dependent geometric term of the NFW profile.

    Parameters
    ----------
    x : `float` or `numpy.ndarray`
        Radius in units of the NFW scale radius.

    Returns
    -------
    term : `float` or `numpy.ndarray`
        arccosh(1/x)/sqrt(1-x^2) for x < 1, arccos(1/x)/sqrt(x^2-1) for
        x > 1 and exactly 1 at x = 1.

    Notes
    -----
    For x < 1 the inverse hyperbolic cosine is written as
    log((1 + sqrt(1-x^2))/x), which has no domain restriction at 1/x.
    Within `NFW_UNITY_BAND` of x = 1 both ratios become 0/0, so the
    first-order expansion 1 - 2/3 (x - 1) is returned instead.
    """
    x = _as_radius(x)
    term = np.empty_like(x)

    inner = x < 1.0 - NFW_UNITY_BAND
    outer = x > 1.0 + NFW_UNITY_BAND
    band = ~(inner | outer)

    with np.errstate(divide='ignore'):
        x_in = x[inner]
        root_in = np.sqrt(1.0 - x_in * x_in)
        term[inner] = np.log((1.0 + root_in) / x_in) / root_in

    x_out = x[outer]
    term[outer] = np.arccos(1.0 / x_out) / np.sqrt(x_out * x_out - 1.0)

    term[band] = 1.0 - (2.0 / 3.0) * (x[band] - 1.0)
    return _finish(term)


def nfw_enclosed(x):
    """Calculate the NFW projected mass function g(x).

    Parameters
    ----------
    x : `float` or `numpy.ndarray`
        Radius in units of the NFW scale radius.

    Returns
    -------
    g : `float` or `numpy.ndarray`
        g(x) = ln(x/2) + F(x), with F given by `nfw_geometric_term`.

    Notes
    -----
    Near the centre the two logarithms cancel, so for x < `NFW_SMALL_X`
    the series g(x) = (x^2/2)(ln(2/x) - 1/2) is used and g(0) = 0.
    """
    x = _as_radius(x)
    g = np.zeros_like(x)

    small = (x > 0.0) & (x < NFW_SMALL_X)
    regular = x >= NFW_SMALL_X

    x_small = x[small]
    g[small] = 0.5 * x_small * x_small * (np.log(2.0 / x_small) - 0.5)

    x_reg = x[regular]
    g[regular] = np.log(x_reg / 2.0) + nfw_geometric_term(x_reg)
    return _finish(g)


def nfw_deflection_profile(x):
    """Calculate g(x)/x, the NFW deflection per unit strength.

    Parameters
    ----------
    x : `float` or `numpy.ndarray`
        Radius in units of the NFW scale radius.

    Returns
    -------
    profile : `float` or `numpy.ndarray`
        g(x)/x, tending to zero at the centre.
    """
    x = _as_radius(x)
    profile = np.zeros_like(x)

    small = (x > 0.0) & (x < NFW_SMALL_X)
    regular = x >= NFW_SMALL_X

    x_small = x[small]
    profile[small] = 0.5 * x_small * (np.log(2.0 / x_small) - 0.5)

    x_reg = x[regular]
    profile[regular] = nfw_enclosed(x_reg) / x_reg
    return _finish(profile)


def void_toy_density(x, d_in, d_wall, wall_width):
    """Calculate the density contrast of the void toy model.

    Parameters
    ----------
    x : `float` or `numpy.ndarray`
        Radius in units of the void radius.
    d_in : `float`
        Inner density contrast (rho_in / rho_mean - 1).
    d_wall : `float`
        Peak density contrast of the compensating wall.
    wall_width : `float`
        Wall width in void radii (must already be floored above zero).

    Returns
    -------
    delta : `float` or `numpy.ndarray`
        Density contrast at x.

    Notes
    -----
    Four zones: a constant core below 0.05, a quadratic rise from d_in to
    d_wall up to the void radius, a quadratic decay to zero across the wall
    and zero outside.
    """
    x = _as_radius(x)
    a = VOID_TOY_CORE_RADIUS
    ridge = VOID_TOY_RIDGE_RADIUS

    rise = (x - a) / (ridge - a)
    decay = 1.0 - (x - ridge) / wall_width

    delta = np.select(
        [x < a, x < ridge, x < ridge + wall_width],
        [d_in, d_in + (d_wall - d_in) * rise * rise, d_wall * decay * decay],
        default=0.0,
    )
    return _finish(delta)


def _core_mass(x, d_in):
    return 0.5 * d_in * x * x


def _rise_mass(x, d_in, d_wall):
    # integral of delta(u) u du from the core edge to x
    a = VOID_TOY_CORE_RADIUS
    length = VOID_TOY_RIDGE_RADIUS - a
    s = (x - a) / length
    k = d_wall - d_in
    return (0.5 * d_in * (x * x - a * a)
            + k * length * (a * s**3 / 3.0 + length * s**4 / 4.0))


def _wall_mass(x, d_wall, wall_width):
    # integral of delta(u) u du from the ridge to x
    s = (x - VOID_TOY_RIDGE_RADIUS) / wall_width
    return wall_width * d_wall * (
        (1.0 - (1.0 - s)**3) / 3.0
        + wall_width * (0.5 * s**2 - 2.0 * s**3 / 3.0 + 0.25 * s**4)
    )


def void_toy_enclosed_mass(x, d_in, d_wall, wall_width):
    """Calculate the enclosed mass-like quantity of the void toy model.

    Parameters
    ----------
    x : `float` or `numpy.ndarray`
        Radius in units of the void radius.
    d_in : `float`
        Inner density contrast.
    d_wall : `float`
        Peak density contrast of the wall.
    wall_width : `float`
        Wall width in void radii.

    Returns
    -------
    mass : `float` or `numpy.ndarray`
        M(x) = integral from 0 to x of delta(u) u du.

    Notes
    -----
    Each zone adds its exact antiderivative to the mass accumulated at the
    start of the zone, so M is continuous and differentiable at 0.05, 1 and
    1 + wall_width.
    """
    x = _as_radius(x)
    a = VOID_TOY_CORE_RADIUS
    ridge = VOID_TOY_RIDGE_RADIUS

    core_total = _core_mass(a, d_in)
    rise_total = core_total + _rise_mass(ridge, d_in, d_wall)
    wall_total = rise_total + _wall_mass(ridge + wall_width, d_wall, wall_width)

    mass = np.select(
        [x < a, x < ridge, x < ridge + wall_width],
        [
            _core_mass(x, d_in),
            core_total + _rise_mass(x, d_in, d_wall),
            rise_total + _wall_mass(x, d_wall, wall_width),
        ],
        default=wall_total,
    )
    return _finish(mass)


def void_toy_total_mass(d_in, d_wall, wall_width):
    """Calculate the total mass of the void toy model (x beyond the wall).

    Parameters
    ----------
    d_in : `float`
        Inner density contrast.
    d_wall : `float`
        Peak density contrast of the wall.
    wall_width : `float`
        Wall width in void radii.

    Returns
    -------
    total : `float`
        Sum of the core, rise and wall integrals at their upper bounds.
    """
    a = VOID_TOY_CORE_RADIUS
    length = VOID_TOY_RIDGE_RADIUS - a
    core = 0.5 * d_in * a * a
    rise = (0.5 * d_in * (VOID_TOY_RIDGE_RADIUS**2 - a * a)
            + (d_wall - d_in) * length * (a / 3.0 + length / 4.0))
    wall = wall_width * d_wall * (1.0 / 3.0 + wall_width / 12.0)
    return float(core + rise + wall)


def void_toy_deflection_profile(x, d_in, d_wall, wall_width,
                                lensing_strength=VOID_TOY_LENSING_STRENGTH):
    """Calculate lensing_strength * M(x)/x for the void toy model.

    Inside the core M(x)/x = d_in x / 2 is used directly, which is also the
    analytic x -> 0 limit.
    """
    x = _as_radius(x)
    profile = np.empty_like(x)

    core = x < VOID_TOY_CORE_RADIUS
    profile[core] = 0.5 * d_in * x[core]

    outside = ~core
    x_out = x[outside]
    profile[outside] = void_toy_enclosed_mass(x_out, d_in, d_wall, wall_width) / x_out
    return _finish(lensing_strength * profile)


def hsw_density(r, delta_c, r_s, alpha, beta):
    """Calculate the HSW void density contrast.

    Parameters
    ----------
    r : `float` or `numpy.ndarray`
        3D radius in units of the void radius.
    delta_c : `float`
        Central density contrast.
    r_s : `float`
        Radius where the contrast crosses zero, in void radii.
    alpha : `float`
        Inner slope.
    beta : `float`
        Outer slope.

    Returns
    -------
    delta : `float` or `numpy.ndarray`
        delta_c (1 - (r/r_s)^alpha) / (1 + r^beta).

    Notes
    -----
    Hamaus, Sutter & Wandelt (2014). The profile is held at delta_c below
    `HSW_CORE_RADIUS`. Radii large enough to overflow the power terms give
    zero contrast.
    """
    r = _as_radius(r)
    with np.errstate(over='ignore', invalid='ignore'):
        delta = delta_c * (1.0 - (r / r_s)**alpha) / (1.0 + r**beta)
    delta = np.where(np.isfinite(delta), delta, 0.0)
    delta = np.where(r < HSW_CORE_RADIUS, delta_c, delta)
    return _finish(delta)
