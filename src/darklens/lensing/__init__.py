"""
Deflection-field engine for DarkLens.

This module provides the lens profiles (Point Mass, NFW, void toy and HSW
void), the deflection evaluator and the session object that owns the HSW
lookup table.
"""

from .utils import LensModel, LensParameters, lens_offsets, radius_and_direction
from .deflection import evaluate, deflection_magnitude, get_deflector, Deflector
from .hsw_lookup import HSWLookupTable, build_hsw_lookup
from .session import LensingSession
from .mass_models import (
    nfw_enclosed,
    nfw_deflection_profile,
    void_toy_density,
    void_toy_enclosed_mass,
    void_toy_total_mass,
    hsw_density
)

__all__ = [
    'LensModel',
    'LensParameters',
    'lens_offsets',
    'radius_and_direction',
    'evaluate',
    'deflection_magnitude',
    'get_deflector',
    'Deflector',
    'HSWLookupTable',
    'build_hsw_lookup',
    'LensingSession',
    'nfw_enclosed',
    'nfw_deflection_profile',
    'void_toy_density',
    'void_toy_enclosed_mass',
    'void_toy_total_mass',
    'hsw_density'
]
