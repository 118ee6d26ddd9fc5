"""
Gray-Scott Reaction-Diffusion Simulation

Two chemical species (A, B) react and diffuse on a 2D grid:
  A + 2B -> 3B  (autocatalytic reaction)
  A is continuously fed in, B is continuously removed.

Equations (explicit Euler, one step of size dt):
  A' = A + dt * (DA * laplacian(A) - A*B^2 + F*(1-A))
  B' = B + dt * (DB * laplacian(B) + A*B^2 - (K+F)*B)

The Laplacian is the 9-point stencil from stencil.py with a zero border,
so the edges of the grid absorb. Values are never clamped here: they can
overshoot [0, 1] and, with a large enough dt, blow up to inf/NaN.
Clamping for display belongs to render.py.

Each step computes whole new A and B grids from the current pair and
publishes them together as one frozen FieldPair. A reader holding a pair
(e.g. the viewer drawing a frame) keeps seeing that generation while the
stepping thread moves on.

References:
  Pearson, "Complex Patterns in a Simple System" (1993)
  Karl Sims, Reaction-Diffusion Tutorial (karlsims.com/rd.html)
"""

import threading
from typing import NamedTuple

import numpy as np

from .errors import InvalidConfigurationError
from .grid import Grid
from .params import Parameters
from .presets import SLIDER_DEFS
from .seeding import seed_initial_condition
from .stencil import KERNEL, convolve


class FieldPair(NamedTuple):
    """One published generation of both fields. Both grids are frozen."""
    a: Grid
    b: Grid
    generation: int


def gray_scott_update(a, b, p, kernel=KERNEL):
    """Compute the next (A, B) arrays from grids a, b and snapshot p.

    Pure function of its inputs: a and b are only read.
    """
    A = a.view()
    B = b.view()

    diff_a = p.DA * convolve(a, kernel).view()
    diff_b = p.DB * convolve(b, kernel).view()
    reaction = A * B * B
    feed = p.F * (1.0 - A)
    kill = -(p.K + p.F) * B

    next_a = A + p.dt * (diff_a - reaction + feed)
    next_b = B + p.dt * (diff_b + reaction + kill)
    return next_a, next_b


class Simulation:
    """Owns the two concentration fields, the kernel and the parameters.

    Args:
        height, width: Grid dimensions (must be positive)
        params: Parameters instance (defaults to Parameters())
        rng: numpy Generator or int seed for the initial rectangles
    """

    def __init__(self, height=300, width=300, params=None, rng=None):
        self._setup(height, width, params)
        self.initialize(rng)

    def _setup(self, height, width, params):
        if params is None:
            params = Parameters()
        self.params = params
        self.kernel = KERNEL
        self._height = height
        self._width = width

        # _publish_lock guards the current pair, _step_lock serializes steps,
        # _param_lock makes multi-field parameter updates atomic
        self._publish_lock = threading.Lock()
        self._step_lock = threading.Lock()
        self._param_lock = threading.Lock()
        self._pair = None

    @classmethod
    def from_fields(cls, a, b, params=None):
        """Build a simulation from explicit A and B fields (no seeding).

        a and b may be Grids or 2D array-likes; they are copied.
        """
        a = a.copy() if isinstance(a, Grid) else Grid.from_array(a)
        b = b.copy() if isinstance(b, Grid) else Grid.from_array(b)
        if a.shape != b.shape:
            raise InvalidConfigurationError(
                f"A and B must have the same shape, got {a.shape} and {b.shape}"
            )
        sim = cls.__new__(cls)
        sim._setup(a.height, a.width, params)
        sim._publish(FieldPair(a.freeze(), b.freeze(), 0))
        return sim

    # -----------------------------------------------------------------------
    # State
    # -----------------------------------------------------------------------

    def initialize(self, rng=None):
        """Reset A to 1.0 and B to 0.0 plus random rectangles."""
        a, b = seed_initial_condition(self._height, self._width, rng)
        with self._step_lock:
            self._publish(FieldPair(a.freeze(), b.freeze(), 0))

    def _publish(self, pair):
        with self._publish_lock:
            self._pair = pair

    def snapshot(self):
        """Return the latest FieldPair (A, B and generation together)."""
        with self._publish_lock:
            return self._pair

    fields = snapshot

    @property
    def a(self):
        return self.snapshot().a

    @property
    def b(self):
        return self.snapshot().b

    @property
    def generation(self):
        return self.snapshot().generation

    def dimensions(self):
        return (self._height, self._width)

    @property
    def shape(self):
        return (self._height, self._width)

    # -----------------------------------------------------------------------
    # Stepping
    # -----------------------------------------------------------------------

    def step(self):
        """Advance one time step. Returns the new FieldPair."""
        with self._step_lock:
            current = self.snapshot()
            p = self.params_snapshot()
            next_a, next_b = gray_scott_update(current.a, current.b, p, self.kernel)
            pair = FieldPair(
                Grid._wrap(next_a).freeze(),
                Grid._wrap(next_b).freeze(),
                current.generation + 1,
            )
            self._publish(pair)
        return pair

    def step_n(self, n):
        """Advance n steps. Returns the final FieldPair."""
        pair = self.snapshot()
        for _ in range(n):
            pair = self.step()
        return pair

    # -----------------------------------------------------------------------
    # Parameters
    # -----------------------------------------------------------------------

    def params_snapshot(self):
        with self._param_lock:
            return self.params.snapshot()

    def set_params(self, **values):
        """Update any of DA, DB, F, K, dt. Values must be finite."""
        with self._param_lock:
            self.params.update(**values)

    def get_params(self):
        return self.params_snapshot()._asdict()

    def set_da(self, value):
        self.set_params(DA=value)

    def set_db(self, value):
        self.set_params(DB=value)

    def set_feed(self, value):
        self.set_params(F=value)

    def set_kill(self, value):
        self.set_params(K=value)

    def set_dt(self, value):
        self.set_params(dt=value)

    # -----------------------------------------------------------------------
    # Diagnostics
    # -----------------------------------------------------------------------

    def is_finite(self):
        """False once either field holds NaN or +/-inf."""
        pair = self.snapshot()
        return pair.a.is_finite() and pair.b.is_finite()

    @property
    def stats(self):
        """Return current field statistics."""
        pair = self.snapshot()
        B = pair.b.view()
        return {
            "generation": pair.generation,
            "mass": float(B.sum()),
            "mean": float(B.mean()),
            "max": float(B.max()),
            "min_a": float(pair.a.view().min()),
            "alive_pct": float((B > 0.01).sum()) / B.size * 100,
            "finite": bool(np.isfinite(B).all() and np.isfinite(pair.a.view()).all()),
        }

    @classmethod
    def get_slider_defs(cls):
        """Slider definitions for the control panel (see presets.SLIDER_DEFS)."""
        return [dict(sdef) for sdef in SLIDER_DEFS]
