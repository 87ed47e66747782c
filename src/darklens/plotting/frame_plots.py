"""Plotting functions for composited frames."""

import numpy as np
import matplotlib.pyplot as plt

from ..compositing.utils import FrameData
from .profile_plots import _create_output_directory
from .registry import plot_function


def _display_image(image):
    """Clip the accumulated frame to [0, 1] for display."""
    return np.clip(image, 0.0, 1.0)


@plot_function(module='frame', description="Composited lensed frame")
def plot_frame(frame_data: FrameData, plot_config, run_name):
    """
    Save the composited frame as a PNG image.

    Parameters
    ----------
    frame_data : `FrameData`
        Composited frame.
    plot_config : `dict`
        Plotting configuration including output directory.
    run_name : `str`
        Run identifier used for the output path.

    Returns
    -------
    filepath : `Path`
        Saved image path.
    """
    output_dir = _create_output_directory(plot_config['output_dir'], run_name, 'frame')
    filepath = output_dir / "frame.png"
    plt.imsave(filepath, _display_image(frame_data.image))

    print(f"Saved frame image: {filepath}")
    return filepath


@plot_function(module='frame', description="Frame with lens annotations")
def plot_frame_overview(frame_data: FrameData, plot_config, run_name):
    """Plot the frame next to the aspect-corrected distance from the lens."""
    output_dir = _create_output_directory(plot_config['output_dir'], run_name, 'frame')

    height, width = frame_data.shape
    lens_u, lens_v = frame_data.lens_position
    r = np.linalg.norm(frame_data.offsets, axis=-1)

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax = axes[0]
    ax.imshow(_display_image(frame_data.image), origin='upper')
    ax.scatter(lens_u * width - 0.5, (1.0 - lens_v) * height - 0.5, c='red', s=100, marker='x')
    ax.set_title(f'{frame_data.params.model.value}: {frame_data.layer_count} layers')
    ax.set_xticks([])
    ax.set_yticks([])

    ax = axes[1]
    im = ax.imshow(r, origin='upper', cmap='magma')
    ax.contour(r, levels=[frame_data.params.scale_radius], colors='cyan', linewidths=1)
    ax.set_title('Aspect-corrected distance from lens')
    ax.set_xticks([])
    ax.set_yticks([])
    plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04)

    plt.tight_layout()
    filepath = output_dir / "frame_overview.png"
    plt.savefig(filepath, dpi=300, bbox_inches='tight')
    plt.close()

    print(f"Saved frame overview plot: {filepath}")
    return filepath
