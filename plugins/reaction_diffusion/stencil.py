"""
3x3 Stencil Convolution with Zero Padding

The discrete Laplacian used for diffusion is a weighted 9-point stencil:

    0.05  0.2  0.05
    0.2  -1.0  0.2
    0.05  0.2  0.05

Its weights sum to zero, so a spatially uniform field diffuses nowhere.
Space outside the grid is treated as zero concentration (absorbing
boundary): cells on the border see the zero padding as neighbors, so a
uniform field leaves a residue along the edges. That residue is the
boundary condition, not an error.

Uses pad+slice (one copy of the source) instead of per-cell windows.
Height and width are handled independently, so non-square grids work.
"""

import numpy as np

from .errors import InvalidConfigurationError
from .grid import Grid


KERNEL_WEIGHTS = (
    (0.05, 0.2, 0.05),
    (0.2, -1.0, 0.2),
    (0.05, 0.2, 0.05),
)

# Shared by every simulation; frozen so nobody can retune it in place
KERNEL = Grid.from_array(KERNEL_WEIGHTS).freeze()


def make_kernel():
    """Return a writable copy of the Laplacian kernel."""
    return Grid.from_array(KERNEL_WEIGHTS)


def _kernel_array(kernel):
    if isinstance(kernel, Grid):
        weights = kernel.view()
    else:
        weights = np.asarray(kernel, dtype=np.float64)
    if weights.shape != (3, 3):
        raise InvalidConfigurationError(
            f"stencil kernel must be 3x3, got shape {weights.shape}"
        )
    return weights


def pad_zero(field):
    """Copy a 2D array into the interior of a zero frame one cell wide."""
    h, w = field.shape
    padded = np.zeros((h + 2, w + 2), dtype=np.float64)
    padded[1:-1, 1:-1] = field
    return padded


def correlate(field, weights):
    """Apply 3x3 weights to a 2D array with zero padding.

    Each output cell is the sum of its padded 3x3 neighborhood multiplied
    element-wise by the weights. Returns a new array shaped like field.
    """
    h, w = field.shape
    p = pad_zero(field)
    out = np.zeros((h, w), dtype=np.float64)
    for di in range(3):
        for dj in range(3):
            out += weights[di, dj] * p[di:di + h, dj:dj + w]
    return out


def convolve(source, kernel=KERNEL):
    """Convolve a Grid with a 3x3 kernel, returning a new Grid.

    The result has the same dimensions as source; source is not modified.
    The kernel is applied without flipping, which is the same thing for
    the symmetric Laplacian.
    """
    weights = _kernel_array(kernel)
    return Grid._wrap(correlate(source.view(), weights))
