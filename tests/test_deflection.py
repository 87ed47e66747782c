"""PyTest suite for darklens.lensing.deflection.

Covers the end-to-end pixel to deflection path, the behaviour at the lens
centre for every model, finiteness over a dense grid and the handling of
invalid inputs.
"""

import numpy as np
import pytest

from darklens.lensing import (
    LensingSession,
    LensModel,
    LensParameters,
    evaluate,
    deflection_magnitude,
    get_deflector,
    lens_offsets,
)
from darklens.lensing.mass_models import nfw_deflection_profile


# ---- Fixtures ----

@pytest.fixture(scope="module")
def sessions():
    """One session per lens model at the default controls."""
    return {
        model: LensingSession(
            LensParameters.from_controls(model, mass=0.2 if model.is_void else 1.0),
            table_size=256,
            depth_steps=100,
        )
        for model in LensModel
    }


# ---- Tests ----

def test_point_mass_end_to_end():
    """Pixel (0.75, 0.5) with aspect 2 sits 0.5 to the right of the lens."""
    params = LensParameters(model=LensModel.POINT_MASS, mass=1.0, spread=1.0)
    offsets = lens_offsets(np.array([0.75, 0.5]), (0.5, 0.5), aspect=2.0)
    np.testing.assert_allclose(offsets, [0.5, 0.0])

    deflection = evaluate(LensModel.POINT_MASS, params, offsets, depth=1.0)
    assert abs(deflection[0] - 0.03 / 0.505) < 1e-6
    assert deflection[1] == 0.0


@pytest.mark.parametrize("model", list(LensModel))
def test_zero_vector_at_lens_centre(sessions, model):
    session = sessions[model]
    deflection = session.evaluate(np.zeros(2))
    np.testing.assert_array_equal(deflection, [0.0, 0.0])


@pytest.mark.parametrize("model", list(LensModel))
def test_deflection_finite_over_grid(sessions, model):
    """Dense grid including exact zeros, tiny offsets and the NFW unity radius."""
    session = sessions[model]
    axis = np.concatenate([np.linspace(-1.0, 1.0, 101), [1e-15, -1e-12, 0.24, 0.24 * (1 + 1e-7)]])
    ox, oy = np.meshgrid(axis, axis)
    offsets = np.stack([ox, oy], axis=-1)
    for depth in (1.0, 0.64, 0.16):
        deflection = session.evaluate(offsets, depth=depth)
        assert deflection.shape == offsets.shape
        assert np.all(np.isfinite(deflection))


def test_deflection_is_radial(sessions):
    """Deflection vectors are parallel to the offsets."""
    offsets = np.array([[0.1, 0.05], [-0.2, 0.3], [0.0, -0.4]])
    for session in sessions.values():
        deflection = session.evaluate(offsets)
        cross = offsets[:, 0] * deflection[:, 1] - offsets[:, 1] * deflection[:, 0]
        np.testing.assert_allclose(cross, 0.0, atol=1e-15)


def test_depth_scales_linearly(sessions):
    r = np.linspace(0.01, 0.8, 20)
    for session in sessions.values():
        full = session.magnitude(r, depth=1.0)
        np.testing.assert_allclose(session.magnitude(r, depth=0.64), 0.64 * full, rtol=1e-12)


def test_void_interiors_push_outwards(sessions):
    """Under-dense cores have negative magnitude; cluster models positive."""
    r = np.array([0.05])
    assert sessions[LensModel.VOID_TOY].magnitude(r)[0] < 0.0
    assert sessions[LensModel.HSW_VOID].magnitude(r)[0] < 0.0
    assert sessions[LensModel.POINT_MASS].magnitude(r)[0] > 0.0
    assert sessions[LensModel.NFW].magnitude(r)[0] > 0.0


def test_nfw_strength_uses_boost():
    params = LensParameters(model=LensModel.NFW, mass=1.0, spread=1.0)
    x = 0.12 / params.scale_radius
    expected = 0.03 * 6.0 * nfw_deflection_profile(x)
    assert deflection_magnitude(LensModel.NFW, params, 0.12) == pytest.approx(expected)


def test_zero_spread_is_clamped():
    """spread <= 0 floors the scale radius instead of dividing by zero."""
    for spread in (0.0, -1.0):
        params = LensParameters(model=LensModel.NFW, mass=1.0, spread=spread)
        assert params.spread == 0.0
        assert params.scale_radius == 0.01
        deflection = evaluate(LensModel.NFW, params, np.array([[0.0, 0.0], [0.3, 0.1]]))
        assert np.all(np.isfinite(deflection))


def test_parameter_clamping():
    params = LensParameters(model=LensModel.VOID_TOY, mass=5.0, spread=9.0,
                            wall_density=3.0, wall_width=0.0, hsw_delta_c=0.5)
    assert params.mass == 2.0
    assert params.spread == 2.0
    assert params.wall_density == 1.0
    assert params.wall_width == 1e-3
    assert params.hsw_delta_c == 0.0


def test_hsw_without_lookup_raises():
    params = LensParameters.from_controls(LensModel.HSW_VOID, mass=0.2)
    with pytest.raises(ValueError, match="lookup table"):
        evaluate(LensModel.HSW_VOID, params, np.array([0.1, 0.0]))


def test_unknown_model_raises():
    with pytest.raises(ValueError):
        get_deflector('Bogus')
    with pytest.raises(ValueError):
        LensModel.from_name('Bogus')
    with pytest.raises(ValueError):
        LensParameters(model='Bogus')


def test_model_names_round_trip():
    for model in LensModel:
        assert LensModel.from_name(model.value) is model


@pytest.mark.parametrize("model", [LensModel.NFW, LensModel.VOID_TOY, LensModel.HSW_VOID])
def test_extended_profiles_vanish_at_centre(sessions, model):
    session = sessions[model]
    tiny, small = (abs(m) for m in session.magnitude(np.array([1e-6, 1e-4])))
    assert tiny < small < 1e-3


def test_point_mass_bounded_at_centre(sessions):
    session = sessions[LensModel.POINT_MASS]
    peak = session.magnitude(np.array([0.0, 1e-9]))
    assert np.all(peak <= 0.03 / 0.005 + 1e-12)
    assert np.all(np.isfinite(peak))
