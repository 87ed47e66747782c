"""Deflection evaluation for the supported lens models.

This module turns offsets from the lens centre into deflection vectors. Each
lens model is a `Deflector` that supplies a signed radial magnitude; the
shared base class applies the direction and the guard at the lens centre.

Dispatch happens once per query through `get_deflector`, so whole frames of
offsets are evaluated with a single vectorized call.
"""

import numpy as np
from typing import Dict, Optional

from ..constants import (
    POINT_MASS_STRENGTH,
    POINT_MASS_SOFTENING,
    NFW_STRENGTH_BOOST,
    VOID_TOY_STRENGTH,
    VOID_TOY_LENSING_STRENGTH,
    HSW_STRENGTH,
)
from .mass_models import (
    point_mass_deflection_profile,
    nfw_deflection_profile,
    void_toy_deflection_profile,
)
from .utils import LensModel, LensParameters, radius_and_direction


class Deflector:
    """Base class for a radially symmetric lens.

    Subclasses implement `magnitude`, returning the signed deflection
    magnitude along the outward direction. Positive values pull the sampled
    background towards the lens centre, negative values push it away.
    """

    model: LensModel = None

    def magnitude(self, r, params: LensParameters, depth: float = 1.0,
                  lookup=None):
        raise NotImplementedError

    def deflection(self, offsets, params: LensParameters, depth: float = 1.0,
                   lookup=None):
        """
        Calculate deflection vectors for a set of offsets.

        Parameters
        ----------
        offsets : `numpy.ndarray`
            Offsets from the lens centre, trailing axis of length 2.
        params : `LensParameters`
            Lens parameters.
        depth : `float`, optional
            Depth scale factor supplied by the compositor (1 = nearest layer).
        lookup : `HSWLookupTable`, optional
            Tabulated profile, required by the HSW void only.

        Returns
        -------
        deflection : `numpy.ndarray`
            Deflection vectors with the same shape as `offsets`. The vector
            at r = 0 is zero because the direction is undefined there.
        """
        r, direction = radius_and_direction(offsets)
        magnitude = np.asarray(self.magnitude(r, params, depth, lookup), dtype=float)
        return direction * magnitude[..., None]


class PointMassDeflector(Deflector):
    """Point mass with an additive softening of the radius."""

    model = LensModel.POINT_MASS

    def magnitude(self, r, params, depth=1.0, lookup=None):
        strength = params.mass * POINT_MASS_STRENGTH * depth
        return strength * point_mass_deflection_profile(r, POINT_MASS_SOFTENING)


class NFWDeflector(Deflector):
    """Navarro-Frenk-White halo, scale radius taken from the spread."""

    model = LensModel.NFW

    def magnitude(self, r, params, depth=1.0, lookup=None):
        strength = params.mass * POINT_MASS_STRENGTH * depth * NFW_STRENGTH_BOOST
        x = np.asarray(r, dtype=float) / params.scale_radius
        return strength * nfw_deflection_profile(x)


class VoidToyDeflector(Deflector):
    """Piecewise analytic void with a compensating wall."""

    model = LensModel.VOID_TOY

    def magnitude(self, r, params, depth=1.0, lookup=None):
        x = np.asarray(r, dtype=float) / params.scale_radius
        alpha = void_toy_deflection_profile(
            x,
            params.inner_density,
            params.wall_density,
            params.wall_width,
            lensing_strength=VOID_TOY_LENSING_STRENGTH,
        )
        return VOID_TOY_STRENGTH * depth * alpha


class HSWVoidDeflector(Deflector):
    """HSW void, read from a prebuilt lookup table."""

    model = LensModel.HSW_VOID

    def magnitude(self, r, params, depth=1.0, lookup=None):
        if lookup is None:
            raise ValueError(
                "HSW void deflection requires a lookup table; "
                "build one with build_hsw_lookup or use a LensingSession"
            )
        return HSW_STRENGTH * depth * lookup.lookup(r)


_DEFLECTORS: Dict[LensModel, Deflector] = {
    deflector.model: deflector
    for deflector in (
        PointMassDeflector(),
        NFWDeflector(),
        VoidToyDeflector(),
        HSWVoidDeflector(),
    )
}


def get_deflector(model) -> Deflector:
    """
    Return the deflector for a lens model.

    Parameters
    ----------
    model : `LensModel`
        Lens model variant.

    Returns
    -------
    deflector : `Deflector`
        Deflector implementing the model.

    Notes
    -----
    An unknown variant is a programming error. It raises `ValueError` in
    normal runs and falls back to the point mass when Python runs with
    ``-O``.
    """
    deflector = _DEFLECTORS.get(model)
    if deflector is None:
        if __debug__:
            raise ValueError(f"Unsupported lens model: {model!r}")
        deflector = _DEFLECTORS[LensModel.POINT_MASS]
    return deflector


def evaluate(model, params: LensParameters, offsets, depth: float = 1.0,
             lookup: Optional[object] = None):
    """
    Evaluate deflection vectors for a lens model.

    Parameters
    ----------
    model : `LensModel`
        Lens model variant to evaluate.
    params : `LensParameters`
        Lens parameters.
    offsets : `numpy.ndarray`
        Aspect-corrected offsets from the lens centre, trailing axis (x, y).
    depth : `float`, optional
        Depth scale factor (1 - 0.12 * layer index in the compositor).
    lookup : `HSWLookupTable`, optional
        Lookup table for the HSW void. Required when `model` is
        ``LensModel.HSW_VOID``; `LensingSession` keeps one current.

    Returns
    -------
    deflection : `numpy.ndarray`
        Deflection vectors, same shape as `offsets`, always finite.

    Raises
    ------
    ValueError
        If `model` is the HSW void and no `lookup` is given.

    Examples
    --------
    >>> params = LensParameters(model=LensModel.POINT_MASS, mass=1.0)
    >>> evaluate(LensModel.POINT_MASS, params, np.array([0.5, 0.0]))
    array([0.05940594, 0.        ])
    """
    return get_deflector(model).deflection(offsets, params, depth, lookup)


def deflection_magnitude(model, params: LensParameters, r, depth: float = 1.0,
                         lookup: Optional[object] = None):
    """Signed radial deflection magnitude of a model at radius `r`."""
    return get_deflector(model).magnitude(r, params, depth, lookup)
