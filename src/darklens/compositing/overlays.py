"""Visual annotation passes drawn after compositing.

These markers help locate the lens; they are not part of the deflection
model. Cluster models get a soft halo glow, void models a dashed boundary
ring and an X at the centre.
"""

import numpy as np

from ..lensing.utils import LensModel, LensParameters

HALO_BASE_COLOR = np.array([0.1, 0.12, 0.2])
HALO_GLOW_COLOR = np.array([0.4, 0.35, 0.3])
HALO_OPACITY = 0.3
MARKER_COLOR = np.array([0.7, 0.7, 0.7])


def smoothstep(edge0, edge1, x):
    """Hermite step between two edges (edges may be given in either order)."""
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def _mix(image, color, weight):
    weight = weight[..., None]
    return image * (1.0 - weight) + color * weight


def halo_size(params: LensParameters):
    """Radius of the halo glow: mass * 0.1 for a point mass, else from the spread."""
    if params.model is LensModel.NFW:
        return max(params.spread * 0.2, 0.05)
    return params.mass * 0.1


def apply_halo(image, r, params: LensParameters):
    """Add the halo glow around a cluster lens."""
    size = halo_size(params)
    if size <= 0.0:
        return image
    halo = smoothstep(size, 0.0, r)[..., None]
    color = HALO_BASE_COLOR + HALO_GLOW_COLOR * halo
    return image + halo * color * HALO_OPACITY


def apply_void_markers(image, offsets, r, params: LensParameters):
    """Draw a dashed ring at the void radius and an X at the void centre."""
    rv = params.scale_radius

    outline = smoothstep(0.003, 0.0, np.abs(r - rv))
    angle = np.arctan2(offsets[..., 1], offsets[..., 0])
    dashes = (np.sin(angle * 40.0) >= 0.0).astype(float)
    image = _mix(image, MARKER_COLOR, outline * dashes * 0.8)

    # cross arms along the diagonals
    s = np.sqrt(0.5)
    rot_x = (offsets[..., 0] - offsets[..., 1]) * s
    rot_y = (offsets[..., 0] + offsets[..., 1]) * s
    thickness, size = 0.0015, 0.0075
    cross = (((np.abs(rot_x) < thickness) & (np.abs(rot_y) < size))
             | ((np.abs(rot_y) < thickness) & (np.abs(rot_x) < size)))
    return _mix(image, MARKER_COLOR, cross.astype(float))


def apply_overlays(image, offsets, params: LensParameters):
    """
    Apply the annotation pass matching the lens model.

    Parameters
    ----------
    image : `numpy.ndarray`
        Composited RGB frame.
    offsets : `numpy.ndarray`
        Aspect-corrected offsets from the lens centre for every pixel.
    params : `LensParameters`
        Lens parameters.

    Returns
    -------
    image : `numpy.ndarray`
        New annotated frame; the input is not modified.
    """
    r = np.hypot(offsets[..., 0], offsets[..., 1])
    if params.model.is_void:
        return apply_void_markers(image, offsets, r, params)
    return apply_halo(image, r, params)
