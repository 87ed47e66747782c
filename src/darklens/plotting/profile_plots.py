"""Radial profile plotting functions.

This module contains plots of the lens density contrast and of the
deflection magnitude as a function of radius.
"""

import numpy as np
import matplotlib
import matplotlib.pyplot as plt
from pathlib import Path

from ..lensing.mass_models import void_toy_density, hsw_density
from ..lensing.utils import LensModel, LensParameters
from ..compositing.layers import build_layers
from .registry import plot_function

# Normalized radii shown on the profile plots (in scale radii)
PROFILE_MAX_RADIUS = 2.5


def _create_output_directory(base_output_dir, run_name, module_name):
    """Create structured output directory following the convention.

    Creates output directories with the structure:
    {output_folder}/{run_name}/{module}

    Parameters
    ----------
    base_output_dir : `str` or `Path`
        Base output directory.
    run_name : `str`
        Run identifier name.
    module_name : `str`
        Module name ('lens' or 'frame').

    Returns
    -------
    output_dir : `Path`
        Created output directory path.
    """
    output_dir = Path(base_output_dir) / run_name / module_name
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def density_profile(params: LensParameters, x):
    """
    Density contrast of the active model at normalized radii `x`.

    Parameters
    ----------
    params : `LensParameters`
        Lens parameters.
    x : `numpy.ndarray`
        Radii in scale radii (NFW scale radius or void radius).

    Returns
    -------
    delta : `numpy.ndarray` or None
        Density contrast, or None for the point mass which has no extended
        profile.

    Notes
    -----
    The NFW curve is the display shape 0.15 / (x (1 + x)^2) with x floored
    at 0.02, scaled to share the axis with the void contrasts.
    """
    x = np.asarray(x, dtype=float)
    if params.model is LensModel.NFW:
        xf = np.maximum(x, 0.02)
        return 0.15 / (xf * (1.0 + xf)**2)
    if params.model is LensModel.VOID_TOY:
        return void_toy_density(x, params.inner_density, params.wall_density, params.wall_width)
    if params.model is LensModel.HSW_VOID:
        return hsw_density(x, params.hsw_delta_c, params.hsw_rs, params.hsw_alpha, params.hsw_beta)
    return None


@plot_function(module='lens', description="Density contrast vs radius for the active lens model")
def plot_density_profile(session, plot_config, run_name):
    """Plot the density contrast of the active lens against radius.

    Parameters
    ----------
    session : `LensingSession`
        Session holding the lens parameters.
    plot_config : `dict`
        Plotting configuration including output directory.
    run_name : `str`
        Run identifier used for the output path.

    Returns
    -------
    filepath : `Path` or None
        Saved figure path, or None for the point mass (no profile).
    """
    params = session.params
    x = np.linspace(0.0, PROFILE_MAX_RADIUS, 500)
    delta = density_profile(params, x)
    if delta is None:
        print("Point mass has no extended density profile; skipping density plot.")
        return None

    output_dir = _create_output_directory(plot_config['output_dir'], run_name, 'lens')

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(x, delta, color='#4facfe', lw=2)
    ax.axhline(0.0, color='0.6', lw=1)
    ax.text(0.02, 0.0, 'Mean Density', va='bottom', fontsize=9, color='0.4')

    marker_label = 'Halo Radius' if params.model is LensModel.NFW else 'Void Radius'
    ax.axvline(1.0, color='0.6', ls='--', lw=1)
    ax.text(1.0, ax.get_ylim()[0], marker_label, ha='center', va='bottom', fontsize=9)

    ax.set_xlim(0.0, PROFILE_MAX_RADIUS)
    ax.set_xlabel('Radius (scale radii)')
    ax.set_ylabel(r'Density contrast $\delta$')
    ax.set_title(f'Density ($\\delta$) vs Radius: {params.model.value}')

    filepath = output_dir / "density_profile.png"
    plt.savefig(filepath, dpi=300, bbox_inches='tight')
    plt.close()

    print(f"Saved density profile plot: {filepath}")
    return filepath


@plot_function(module='lens', description="Deflection magnitude vs radius per layer depth")
def plot_deflection_curve(session, plot_config, run_name, max_layers=3):
    """Plot the signed deflection magnitude of the active lens per layer.

    Parameters
    ----------
    session : `LensingSession`
        Session holding the lens parameters and HSW table.
    plot_config : `dict`
        Plotting configuration including output directory.
    run_name : `str`
        Run identifier used for the output path.
    max_layers : `int`, optional
        Number of layer depths drawn.

    Returns
    -------
    filepath : `Path`
        Saved figure path.
    """
    params = session.params
    output_dir = _create_output_directory(plot_config['output_dir'], run_name, 'lens')

    r = np.linspace(0.0, PROFILE_MAX_RADIUS * params.scale_radius, 600)
    cmap = matplotlib.colormaps['viridis']

    fig, ax = plt.subplots(figsize=(7, 4))
    for layer in build_layers(max_layers):
        magnitude = session.magnitude(r, depth=layer.depth)
        ax.plot(r, magnitude, color=cmap(layer.depth_index / max(max_layers - 1, 1)),
                label=f'layer {layer.depth_index} (depth {layer.depth:.2f})')
    ax.axhline(0.0, color='0.6', lw=1)
    ax.axvline(params.scale_radius, color='0.6', ls='--', lw=1)
    ax.set_xlabel('Radius (normalized sky units)')
    ax.set_ylabel('Deflection magnitude')
    ax.set_title(f'Deflection vs Radius: {params.model.value}')
    ax.legend(fontsize=8)

    filepath = output_dir / "deflection_curve.png"
    plt.savefig(filepath, dpi=300, bbox_inches='tight')
    plt.close()

    print(f"Saved deflection curve plot: {filepath}")
    return filepath


@plot_function(module='lens', requires_lookup=True, description="Tabulated HSW deflection profile")
def plot_hsw_lookup(session, plot_config, run_name):
    """Plot the HSW lookup table over its full coverage."""
    table = session.lookup
    output_dir = _create_output_directory(plot_config['output_dir'], run_name, 'lens')

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(table.radii, table.values, color='#f5576c', lw=1.5)
    ax.axhline(0.0, color='0.6', lw=1)
    ax.set_xlim(0.0, table.radial_extent)
    ax.set_xlabel('Projected radius (void radii)')
    ax.set_ylabel('Enclosed mass / R')
    ax.set_title(f'HSW lookup ({table.size} bins)')

    filepath = output_dir / "hsw_lookup.png"
    plt.savefig(filepath, dpi=300, bbox_inches='tight')
    plt.close()

    print(f"Saved HSW lookup plot: {filepath}")
    return filepath
