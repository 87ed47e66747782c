"""
Plot registry system for automatic plot discovery and execution.

This module provides a system to automatically discover and call plotting
functions without manually adding them to the pipeline code.
"""

import inspect
import importlib
from typing import Dict, List, Callable, Any
from dataclasses import dataclass


@dataclass
class PlotMetadata:
    """Metadata for a plot function."""
    name: str
    function: Callable
    module_type: str  # 'lens' or 'frame'
    requires_lookup: bool = False
    description: str = ""


def plot_function(module: str, requires_lookup: bool = False, description: str = ""):
    """Decorator to register a plot function with metadata.

    Parameters
    ----------
    module : str
        Module type: 'lens' (needs a session) or 'frame' (needs frame data)
    requires_lookup : bool, optional
        Whether this plot needs a built HSW lookup table
    description : str, optional
        Description of what this plot shows
    """
    def decorator(func):
        func._plot_metadata = PlotMetadata(
            name=func.__name__,
            function=func,
            module_type=module,
            requires_lookup=requires_lookup,
            description=description
        )
        return func
    return decorator


class PlotRegistry:
    """Registry for automatic plot discovery and execution."""

    def __init__(self):
        self.plots: Dict[str, PlotMetadata] = {}
        self._discover_plots()

    def _discover_plots(self):
        """Discover all decorated plot functions in the plotting modules."""
        plotting_modules = [
            '.profile_plots',
            '.frame_plots',
        ]

        for module_name in plotting_modules:
            try:
                module = importlib.import_module(module_name, package='darklens.plotting')
            except ImportError as e:
                print(f"Warning: Could not import {module_name}: {e}")
                continue
            self._discover_functions_in_module(module)

    def _discover_functions_in_module(self, module):
        """Discover plot functions in a specific module."""
        for name, obj in inspect.getmembers(module, inspect.isfunction):
            if hasattr(obj, '_plot_metadata'):
                self.plots[name] = obj._plot_metadata

    def get_applicable_plots(self, context: Dict[str, Any]) -> List[PlotMetadata]:
        """Get list of plots applicable to the current context.

        Parameters
        ----------
        context : dict
            Context dictionary containing:
            - 'session': LensingSession or None
            - 'frame_data': FrameData or None
            - 'run_name': str

        Returns
        -------
        applicable_plots : list of PlotMetadata
            List of plots that should be executed in this context
        """
        applicable = []
        session = context.get('session')

        for plot_meta in self.plots.values():
            if plot_meta.module_type == 'lens' and session is None:
                continue
            if plot_meta.module_type == 'frame' and context.get('frame_data') is None:
                continue
            if plot_meta.requires_lookup and (session is None or session.lookup is None):
                continue
            applicable.append(plot_meta)

        return applicable

    def execute_plots(self, context: Dict[str, Any], plot_config: Dict[str, Any], verbose: bool = True):
        """Execute all applicable plots for the given context.

        A failing plot is reported and skipped; it never aborts the run.
        """
        applicable_plots = self.get_applicable_plots(context)

        if verbose:
            print(f"\nExecuting {len(applicable_plots)} applicable plots...")

        for plot_meta in applicable_plots:
            try:
                self._execute_single_plot(plot_meta, context, plot_config, verbose)
            except Exception as e:
                print(f"Warning: Failed to execute {plot_meta.name}: {e}")

    def _execute_single_plot(self, plot_meta: PlotMetadata, context: Dict[str, Any],
                             plot_config: Dict[str, Any], verbose: bool):
        """Execute a single plot function with appropriate arguments."""
        func = plot_meta.function
        sig = inspect.signature(func)

        kwargs = {}
        if 'plot_config' in sig.parameters:
            kwargs['plot_config'] = plot_config
        if 'run_name' in sig.parameters:
            kwargs['run_name'] = context.get('run_name', 'default')
        if 'session' in sig.parameters:
            kwargs['session'] = context['session']
        if 'frame_data' in sig.parameters:
            kwargs['frame_data'] = context['frame_data']

        if verbose:
            print(f"  -> {plot_meta.name}")

        func(**kwargs)


# Global registry instance
_plot_registry = None

def get_plot_registry() -> PlotRegistry:
    """Get the global plot registry instance."""
    global _plot_registry
    if _plot_registry is None:
        _plot_registry = PlotRegistry()
    return _plot_registry


def generate_all_plots(context: Dict[str, Any], plot_config: Dict[str, Any], verbose: bool = True):
    """Generate all applicable plots for the given context.

    This is the main entry point for the pipeline to generate plots.

    Parameters
    ----------
    context : dict
        Context dictionary containing available data
    plot_config : dict
        Plotting configuration
    verbose : bool, optional
        Whether to print execution information
    """
    registry = get_plot_registry()
    registry.execute_plots(context, plot_config, verbose)
