"""PyTest suite for darklens.lensing.mass_models.

Checks the analytic profiles against known values, their limits at the
singular points and their continuity across piecewise boundaries.
"""

import math

import numpy as np
import pytest
from scipy import integrate

from darklens.lensing.mass_models import (
    point_mass_deflection_profile,
    nfw_geometric_term,
    nfw_enclosed,
    nfw_deflection_profile,
    void_toy_density,
    void_toy_enclosed_mass,
    void_toy_total_mass,
    void_toy_deflection_profile,
    hsw_density,
)


# ---- NFW ----

def test_nfw_known_values():
    """g(1) = 1 + ln(1/2) and g(2) = (pi/3)/sqrt(3)."""
    assert math.isclose(nfw_enclosed(1.0), 1.0 + math.log(0.5), rel_tol=1e-12)
    assert math.isclose(nfw_enclosed(2.0), (math.pi / 3.0) / math.sqrt(3.0), rel_tol=1e-12)
    assert nfw_geometric_term(1.0) == 1.0


def test_nfw_continuous_across_unity():
    """No jump at x = 1 between the arccosh, band and arccos branches."""
    g_mid = nfw_enclosed(1.0)
    for x in (0.9999, 1.0001):
        assert abs(nfw_enclosed(x) - g_mid) < 1e-4
    for x in (0.999, 1.001):
        assert abs(nfw_enclosed(x) - g_mid) < 1e-3

    # across the edges of the expansion band
    for edge in (1.0 - 1e-6, 1.0 + 1e-6):
        below = nfw_enclosed(edge - 1e-9)
        above = nfw_enclosed(edge + 1e-9)
        assert abs(below - above) < 1e-8


def test_nfw_small_x_limit():
    """g(x)/x tends to zero at the centre and matches its series at the switch."""
    assert nfw_enclosed(0.0) == 0.0
    assert nfw_deflection_profile(0.0) == 0.0

    below = nfw_deflection_profile(0.9999e-4)
    above = nfw_deflection_profile(1.0001e-4)
    np.testing.assert_allclose(below, above, rtol=1e-3)

    x = np.array([1e-12, 1e-9, 1e-6])
    profile = nfw_deflection_profile(x)
    assert np.all(np.isfinite(profile))
    assert np.all(profile > 0.0)
    assert np.all(np.diff(profile) > 0.0)


def test_nfw_array_and_scalar_agree():
    x = np.array([0.0, 5e-5, 0.3, 1.0, 1.7, 10.0])
    profile = nfw_deflection_profile(x)
    assert profile.shape == x.shape
    for xi, pi in zip(x, profile):
        assert nfw_deflection_profile(float(xi)) == pytest.approx(pi, rel=1e-12, abs=1e-300)


# ---- Point mass ----

def test_point_mass_profile_softened_at_centre():
    assert point_mass_deflection_profile(0.0, 0.005) == pytest.approx(200.0)
    assert point_mass_deflection_profile(0.5, 0.005) == pytest.approx(1.0 / 0.505)


# ---- Void toy model ----

def test_void_toy_density_zones():
    d_in, d_wall, w = -0.8, 0.05, 0.05
    assert void_toy_density(0.0, d_in, d_wall, w) == d_in
    assert void_toy_density(0.04, d_in, d_wall, w) == d_in
    assert void_toy_density(1.0, d_in, d_wall, w) == pytest.approx(d_wall)
    assert void_toy_density(1.0 + w, d_in, d_wall, w) == 0.0
    assert void_toy_density(3.0, d_in, d_wall, w) == 0.0
    # the rise is monotonic between the core and the ridge
    x = np.linspace(0.05, 0.999, 50)
    assert np.all(np.diff(void_toy_density(x, d_in, d_wall, w)) > 0.0)


def test_void_toy_total_mass_regression():
    """Exact total for d_in = 0.2, d_wall = 0.05, w = 0.05."""
    total = void_toy_total_mass(0.2, 0.05, 0.05)
    assert math.isclose(total, 0.064625, rel_tol=1e-12)
    assert math.isclose(void_toy_enclosed_mass(5.0, 0.2, 0.05, 0.05), total, rel_tol=1e-12)


@pytest.mark.parametrize("d_in,d_wall,w", [(-0.8, 0.05, 0.05), (0.2, 0.05, 0.05), (-1.0, 0.3, 0.2), (0.7, -0.9, 0.5)])
def test_void_toy_enclosed_mass_continuous(d_in, d_wall, w):
    """M(x) has no jumps at the zone boundaries."""
    for boundary in (0.05, 1.0, 1.0 + w):
        below = void_toy_enclosed_mass(boundary - 1e-10, d_in, d_wall, w)
        above = void_toy_enclosed_mass(boundary + 1e-10, d_in, d_wall, w)
        assert abs(below - above) < 1e-8


@pytest.mark.parametrize("x", [0.03, 0.5, 1.0, 1.02, 1.4])
def test_void_toy_enclosed_mass_matches_quadrature(x):
    """M(x) equals the numerical integral of delta(u) u du."""
    d_in, d_wall, w = -0.8, 0.05, 0.05
    expected, _ = integrate.quad(
        lambda u: void_toy_density(u, d_in, d_wall, w) * u,
        0.0, x, points=[p for p in (0.05, 1.0, 1.0 + w) if p < x] or None,
        limit=200, epsabs=1e-13, epsrel=1e-12,
    )
    np.testing.assert_allclose(void_toy_enclosed_mass(x, d_in, d_wall, w), expected, rtol=1e-7, atol=1e-12)


def test_void_toy_deflection_profile_limits():
    d_in, d_wall, w = -0.8, 0.05, 0.05
    assert void_toy_deflection_profile(0.0, d_in, d_wall, w) == 0.0
    # inside the core the profile is 3 * d_in * x / 2
    assert void_toy_deflection_profile(0.02, d_in, d_wall, w) == pytest.approx(3.0 * 0.5 * d_in * 0.02)
    # beyond the wall the profile falls as total / x
    total = void_toy_total_mass(d_in, d_wall, w)
    assert void_toy_deflection_profile(4.0, d_in, d_wall, w) == pytest.approx(3.0 * total / 4.0)


# ---- HSW ----

def test_hsw_density_core_and_zero_crossing():
    assert hsw_density(0.0, -0.8, 0.9, 4.0, 15.0) == -0.8
    assert hsw_density(0.9, -0.8, 0.9, 4.0, 15.0) == pytest.approx(0.0, abs=1e-15)
    # positive compensating ridge beyond r_s
    assert hsw_density(1.0, -0.8, 0.9, 4.0, 15.0) > 0.0


def test_hsw_density_finite_at_large_radius():
    r = np.array([10.0, 1e3, 1e30, 1e300])
    delta = hsw_density(r, -0.8, 0.9, 4.0, 15.0)
    assert np.all(np.isfinite(delta))
    assert abs(delta[-1]) < 1e-12
