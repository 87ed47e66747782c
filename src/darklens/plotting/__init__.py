"""
Plotting module for DarkLens.

This module provides visualization functions for lens profiles and
composited frames.
"""

from .profile_plots import plot_density_profile, plot_deflection_curve, plot_hsw_lookup, density_profile
from .frame_plots import plot_frame, plot_frame_overview
from .registry import generate_all_plots, get_plot_registry

__all__ = [
    'plot_density_profile',
    'plot_deflection_curve',
    'plot_hsw_lookup',
    'density_profile',
    'plot_frame',
    'plot_frame_overview',
    'generate_all_plots',
    'get_plot_registry'
]
