"""Lensing session: the live parameter set and its HSW lookup table.

The session is the single owner of the lookup table. Parameter updates that
affect the HSW profile build a complete new table and then replace the
reference in one assignment, so evaluation never sees a half-built table.
"""

from typing import Optional

from ..constants import HSW_TABLE_SIZE, HSW_DEPTH_STEPS
from .deflection import evaluate, deflection_magnitude
from .hsw_lookup import HSWLookupTable, build_hsw_lookup
from .utils import LensModel, LensParameters, print_lens_parameters_summary


class LensingSession:
    """Context object passed to evaluation and rebuild calls.

    Parameters
    ----------
    params : `LensParameters`, optional
        Initial parameters. Defaults to a unit point mass.
    table_size : `int`, optional
        Number of HSW lookup bins.
    depth_steps : `int`, optional
        Line-of-sight steps per HSW bin.
    verbose : `bool`, optional
        Whether to print progress when the table is rebuilt.

    Examples
    --------
    >>> session = LensingSession(LensParameters(model=LensModel.HSW_VOID))
    >>> session.lookup is not None
    True
    >>> session.update(hsw_alpha=3.0)  # rebuilds the table
    """

    def __init__(self, params: Optional[LensParameters] = None,
                 table_size: int = HSW_TABLE_SIZE,
                 depth_steps: int = HSW_DEPTH_STEPS,
                 verbose: bool = False):
        self.table_size = table_size
        self.depth_steps = depth_steps
        self.verbose = verbose
        self.rebuild_count = 0
        self._params = params if params is not None else LensParameters()
        self._lookup: Optional[HSWLookupTable] = None
        self._sync_lookup()

    @property
    def params(self) -> LensParameters:
        return self._params

    @property
    def model(self) -> LensModel:
        return self._params.model

    @property
    def lookup(self) -> Optional[HSWLookupTable]:
        """Current HSW table, or None if the HSW model was never active."""
        return self._lookup

    def set_params(self, params: LensParameters):
        """Replace the parameter set, rebuilding the table if it is stale."""
        self._params = params
        self._sync_lookup()

    def update(self, **changes):
        """Apply control changes (e.g. ``mass=0.4``) to the parameter set.

        While the HSW void is active the mass is capped at 1. Selecting the
        HSW void, or changing the mass while it is active, also resets its
        central contrast to ``delta_c = min(mass, 1) - 1`` unless
        ``hsw_delta_c`` is passed explicitly.
        """
        model = changes.get('model', self._params.model)
        if not isinstance(model, LensModel):
            model = LensModel.from_name(model)
            changes['model'] = model
        if model is LensModel.HSW_VOID:
            relink = 'mass' in changes or self._params.model is not LensModel.HSW_VOID
            mass = min(float(changes.get('mass', self._params.mass)), 1.0)
            changes['mass'] = mass
            if relink and 'hsw_delta_c' not in changes:
                changes['hsw_delta_c'] = mass - 1.0
        self.set_params(self._params.updated(**changes))

    def rebuild(self) -> HSWLookupTable:
        """Build a fresh HSW table for the current parameters and swap it in."""
        if self.verbose:
            print("Building HSW lookup table...")
        table = build_hsw_lookup(
            self._params,
            size=self.table_size,
            depth_steps=self.depth_steps,
            verbose=self.verbose,
        )
        self._lookup = table
        self.rebuild_count += 1
        return table

    def _sync_lookup(self):
        # Tables are only built while the HSW model is active.
        if self._params.model is not LensModel.HSW_VOID:
            return
        if self._lookup is None or not self._lookup.matches(self._params):
            self.rebuild()

    def evaluate(self, offsets, depth: float = 1.0):
        """Deflection vectors for the current parameters (see `evaluate`)."""
        params = self._params
        return evaluate(params.model, params, offsets, depth=depth, lookup=self._lookup)

    def magnitude(self, r, depth: float = 1.0):
        """Signed radial deflection magnitude for the current parameters."""
        params = self._params
        return deflection_magnitude(params.model, params, r, depth=depth, lookup=self._lookup)

    def print_summary(self):
        print_lens_parameters_summary(self._params, self._lookup)
