"""
Dense 2D Concentration Grid

A fixed-size field of float64 values stored in one contiguous buffer
indexed by row * width + col. Every coordinate access is bounds-checked:
out-of-range rows or columns raise OutOfBoundsError, they are never
clamped or wrapped (negative indices included).

Grids are value-like. copy() and to_array() hand out independent data,
and a frozen grid (see freeze()) rejects all writes, which is how the
simulation publishes fields that readers may hold on to safely.
"""

import operator

import numpy as np

from .errors import InvalidConfigurationError, OutOfBoundsError, ReadOnlyGridError


def _check_dimension(name, value):
    try:
        value = operator.index(value)
    except TypeError:
        raise InvalidConfigurationError(
            f"grid {name} must be an integer, got {value!r}"
        ) from None
    if value <= 0:
        raise InvalidConfigurationError(f"grid {name} must be positive, got {value}")
    return value


class Grid:
    """Fixed-dimension 2D field with bounds-checked access."""

    __slots__ = ("_height", "_width", "_data")

    def __init__(self, height, width, fill_value=0.0):
        self._height = _check_dimension("height", height)
        self._width = _check_dimension("width", width)
        self._data = np.full(self._height * self._width, fill_value, dtype=np.float64)

    # -----------------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------------

    @classmethod
    def create(cls, height, width, fill_value=0.0):
        """Return a grid with every cell set to fill_value."""
        return cls(height, width, fill_value)

    @classmethod
    def from_array(cls, array):
        """Build a grid from a 2D array-like. The data is copied."""
        arr = np.asarray(array, dtype=np.float64)
        if arr.ndim != 2:
            raise InvalidConfigurationError(
                f"grid data must be 2D, got shape {arr.shape}"
            )
        grid = cls(arr.shape[0], arr.shape[1])
        grid._data[:] = arr.ravel()
        return grid

    @classmethod
    def _wrap(cls, array):
        """Adopt a freshly computed 2D float64 array without copying."""
        grid = cls.__new__(cls)
        grid._height, grid._width = array.shape
        grid._data = np.ascontiguousarray(array, dtype=np.float64).reshape(-1)
        return grid

    # -----------------------------------------------------------------------
    # Shape
    # -----------------------------------------------------------------------

    @property
    def height(self):
        return self._height

    @property
    def width(self):
        return self._width

    @property
    def shape(self):
        return (self._height, self._width)

    def dimensions(self):
        """Return (height, width)."""
        return (self._height, self._width)

    @property
    def readonly(self):
        return not self._data.flags.writeable

    # -----------------------------------------------------------------------
    # Cell access
    # -----------------------------------------------------------------------

    def _offset(self, row, col):
        row = operator.index(row)
        col = operator.index(col)
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise OutOfBoundsError(row, col, self.shape)
        return row * self._width + col

    def get(self, row, col):
        return float(self._data[self._offset(row, col)])

    def set(self, row, col, value):
        offset = self._offset(row, col)
        self._check_writable()
        self._data[offset] = value

    def __getitem__(self, key):
        row, col = key
        return self.get(row, col)

    def __setitem__(self, key, value):
        row, col = key
        self.set(row, col, value)

    # -----------------------------------------------------------------------
    # Bulk operations
    # -----------------------------------------------------------------------

    def fill(self, value):
        self._check_writable()
        self._data.fill(value)

    def fill_rect(self, row0, row1, col0, col1, value):
        """Set every cell in [row0, row1) x [col0, col1) to value.

        Edges may sit on the far boundary (row1 == height) but never past it.
        An empty or inverted rectangle writes nothing once its edges check out.
        """
        row0, row1, col0, col1 = map(operator.index, (row0, row1, col0, col1))
        for row, col in ((row0, col0), (row1, col1)):
            if not (0 <= row <= self._height and 0 <= col <= self._width):
                raise OutOfBoundsError(row, col, self.shape)
        self._check_writable()
        if row1 <= row0 or col1 <= col0:
            return
        self.view_writable()[row0:row1, col0:col1] = value

    def copy(self):
        """Independent, writable copy."""
        return Grid._wrap(self._data.reshape(self.shape).copy())

    def to_array(self):
        """Independent 2D numpy copy of the grid values."""
        return self._data.reshape(self.shape).copy()

    def view(self):
        """Read-only 2D view onto the backing store (no copy)."""
        v = self._data.reshape(self.shape).view()
        v.flags.writeable = False
        return v

    def view_writable(self):
        self._check_writable()
        return self._data.reshape(self.shape)

    def freeze(self):
        """Make the grid permanently read-only. Returns self."""
        self._data.flags.writeable = False
        return self

    def _check_writable(self):
        if not self._data.flags.writeable:
            raise ReadOnlyGridError("grid is frozen and cannot be modified")

    # -----------------------------------------------------------------------
    # Diagnostics
    # -----------------------------------------------------------------------

    def is_finite(self):
        """True when no cell holds NaN or +/-inf."""
        return bool(np.isfinite(self._data).all())

    def min(self):
        return float(self._data.min())

    def max(self):
        return float(self._data.max())

    def sum(self):
        return float(self._data.sum())

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self):
        flag = ", frozen" if self.readonly else ""
        return f"Grid({self._height}x{self._width}{flag})"
