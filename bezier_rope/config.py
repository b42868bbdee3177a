"""Runtime settings for a rope visualization."""

from __future__ import annotations

import os
from typing import Any, Mapping

from pydantic import BaseModel, Field

ENV_PREFIX = "ROPE_"


class RopeSettings(BaseModel):
    """
    Physical, layout and sampling parameters.

    Defaults reproduce the original iOS rope: a unit mass on an 80 N/m spring
    with damping 14 (about 0.78 of critical), anchors 60 points in from the
    viewport edges and control points lifted 120 points above them.
    """

    # Spring
    mass: float = Field(default=1.0, gt=0)
    stiffness: float = Field(default=80.0, ge=0)
    damping: float = Field(default=14.0, ge=0)

    # Layout
    margin: float = Field(default=60.0, ge=0)
    lift: float = 120.0

    # Input mapping
    tilt_sensitivity: float = 250.0  # points per radian
    input_gain: float = Field(default=0.6, ge=0)

    # Frame clock
    fixed_dt: float = Field(default=1.0 / 60.0, gt=0)
    max_frame_dt: float = Field(default=0.1, gt=0)

    # Sampling
    sample_steps: int = Field(default=100, ge=1)
    tick_spacing: float = Field(default=0.05, gt=0, le=1)
    tick_length: float = Field(default=24.0, ge=0)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> RopeSettings:
        """
        Build settings from ``ROPE_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``
            **overrides: Explicit values that win over the environment
                (``None`` values are ignored)

        Raises:
            pydantic.ValidationError: If a value is missing its type or range
        """
        environ = os.environ if environ is None else environ

        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip() != "":
                values[name] = raw.strip()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
