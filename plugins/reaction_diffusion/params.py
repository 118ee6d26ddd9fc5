"""
Gray-Scott Model Parameters

Five coefficients drive the update rule:

    dA/dt = DA * laplacian(A) - A*B^2 + F*(1-A)
    dB/dt = DB * laplacian(B) + A*B^2 - (K+F)*B

plus the explicit Euler step size dt. Any finite value is accepted; the
ranges in the field descriptions are where the dynamics are interesting,
not limits. Outside them the model is simply allowed to go unstable.
"""

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidConfigurationError


class ParameterSnapshot(NamedTuple):
    """Immutable copy of the coefficients used for one step."""
    DA: float
    DB: float
    F: float
    K: float
    dt: float


class Parameters(BaseModel):
    model_config = ConfigDict(
        validate_assignment=True,
        allow_inf_nan=False,
        extra="forbid",
    )

    DA: float = Field(default=1.0, description="Diffusion rate of A (useful range 0-1)")
    DB: float = Field(default=0.5, description="Diffusion rate of B (useful range 0-1)")
    F: float = Field(default=0.055, description="Feed rate (useful range 0.002-0.12)")
    K: float = Field(default=0.062, description="Kill rate (useful range 0.01-0.07)")
    dt: float = Field(default=1.0, description="Explicit Euler time step")

    @classmethod
    def create(cls, **values):
        """Construct, reporting bad values as InvalidConfigurationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise InvalidConfigurationError(_describe(e)) from e

    @classmethod
    def from_preset(cls, name, dt=1.0):
        from .presets import get_preset

        preset = get_preset(name)
        if preset is None:
            raise InvalidConfigurationError(f"unknown preset: {name!r}")
        return cls.create(
            DA=preset["DA"], DB=preset["DB"], F=preset["F"], K=preset["K"], dt=dt,
        )

    def update(self, **values):
        """Set several coefficients at once.

        All values are validated before any is applied, so a bad value
        leaves the parameters untouched.
        """
        try:
            merged = type(self)(**{**self.model_dump(), **values})
        except ValidationError as e:
            raise InvalidConfigurationError(_describe(e)) from e
        for key in values:
            setattr(self, key, getattr(merged, key))

    def snapshot(self):
        return ParameterSnapshot(self.DA, self.DB, self.F, self.K, self.dt)


def _describe(error):
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "parameters"
        parts.append(f"{loc}: {err['msg']}")
    return "invalid parameters (" + "; ".join(parts) + ")"
