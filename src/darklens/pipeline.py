"""Main pipeline orchestration for DarkLens.

This module provides high-level functions to render a lensed frame from a
configuration: build the lens session (including the HSW lookup table when
the HSW void is active), load the layer sources, composite the frame and
generate the diagnostic plots.
"""

import yaml
from typing import Dict, List

from .lensing import LensingSession
from .lensing.utils import parameters_from_config
from .compositing import composite_frame, load_image_source, make_grid_source
from .compositing.sources import LayerSource
from .compositing.utils import print_frame_summary, FrameData
from .plotting import generate_all_plots
from .config.validation import validate_or_raise


class Pipeline:
    """DarkLens rendering pipeline.

    Parameters
    ----------
    verbose : bool, optional
        Whether to print progress information.
    """

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

    def run(self, config: Dict) -> FrameData:
        """Main pipeline entry point.

        Parameters
        ----------
        config : dict
            Full pipeline configuration dictionary.

        Returns
        -------
        frame_data : FrameData
            Composited frame.
        """
        # Validate configuration (strict, fail-fast)
        validate_or_raise(config)

        if self.verbose:
            print("\n" + "="*50)
            print("DARKLENS PIPELINE EXECUTION")
            print("="*50)

        session = self.build_session(config)
        if self.verbose:
            session.print_summary()

        render = config['render']
        sources = self.load_sources(render)

        if self.verbose:
            print("\nCompositing frame...")
        frame_data = composite_frame(
            session,
            sources,
            shape=tuple(render['shape']),
            lens_position=tuple(render['lens_position']),
            layers=render['layers'],
            brightness=render['brightness'],
            show_core=render['show_core'],
            grid_tint=render.get('grid_tint', False),
            config=config,
        )
        if self.verbose:
            print_frame_summary(frame_data)

        # Generate plots if enabled
        if config['plotting']['enabled']:
            if self.verbose:
                print("\nGenerating plots...")

            context = {
                'session': session,
                'frame_data': frame_data,
                'run_name': config['run_name']
            }
            generate_all_plots(context, config['plotting'], verbose=self.verbose)

        return frame_data

    def build_session(self, config: Dict) -> LensingSession:
        """Create the lensing session for the configured lens.

        The HSW lookup table is built here when the HSW void is active.
        """
        if self.verbose:
            print("Configuring lens...")
        params = parameters_from_config(config['lens'])
        hsw_lookup = config['hsw_lookup']
        return LensingSession(
            params,
            table_size=hsw_lookup['size'],
            depth_steps=hsw_lookup['depth_steps'],
            verbose=self.verbose,
        )

    def load_sources(self, render: Dict) -> List[LayerSource]:
        """Load the configured layer images, or fall back to the grid."""
        paths = render.get('sources', [])
        if paths:
            if self.verbose:
                print(f"\nLoading {len(paths)} layer source(s)...")
            return [load_image_source(path) for path in paths]

        if self.verbose:
            print("\nUsing procedural grid source")
        return [make_grid_source(spacing=render.get('grid_spacing', 32))]


def run_pipeline(config_path: str, verbose: bool = True) -> FrameData:
    """Run the DarkLens pipeline from a YAML configuration file.

    Parameters
    ----------
    config_path : str
        Path to the master configuration file.
    verbose : bool, optional
        Whether to print progress information.

    Returns
    -------
    frame_data : FrameData
        Composited frame.

    Examples
    --------
    >>> frame = run_pipeline('configs/master_config.yaml')
    >>> print(f"Mean intensity: {frame.mean_intensity:.3f}")
    """
    # Load configuration
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    validate_or_raise(config)

    pipeline = Pipeline(verbose=verbose)
    return pipeline.run(config)


def run_pipeline_from_config(config: Dict, verbose: bool = True) -> FrameData:
    """Run the DarkLens pipeline from a configuration dictionary.

    Parameters
    ----------
    config : dict
        Complete pipeline configuration dictionary.
    verbose : bool, optional
        Whether to print progress information.

    Returns
    -------
    frame_data : FrameData
        Composited frame.
    """
    pipeline = Pipeline(verbose=verbose)
    return pipeline.run(config)
