"""
Exceptions raised by the reaction-diffusion core.
"""


class ReactionDiffusionError(Exception):
    """Base class for all reaction-diffusion errors."""


class OutOfBoundsError(ReactionDiffusionError, IndexError):
    """Coordinate outside a grid's extent."""

    def __init__(self, row, col, shape):
        self.row = row
        self.col = col
        self.shape = shape
        super().__init__(
            f"cell ({row}, {col}) is outside a {shape[0]}x{shape[1]} grid"
        )


class InvalidConfigurationError(ReactionDiffusionError, ValueError):
    """Bad dimensions, kernel, parameter value or preset."""


class ReadOnlyGridError(ReactionDiffusionError):
    """Write attempted on a frozen (published) grid."""
