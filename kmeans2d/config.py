from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field

from kmeans2d.plotter import SCALE
from kmeans2d.synthetic_data import HEIGHT, WIDTH

DEFAULT_K = 5
DEFAULT_POINTS = 100


class RunConfig(BaseModel):
    """Parameters of one generate -> cluster -> render run."""

    k: int = 0
    points: int = 0
    limit: int = Field(default=0, ge=0)
    devx: float = 0.0
    devy: float = 0.0
    meanx: float = 0.0
    meany: float = 0.0
    width: int = Field(default=WIDTH, gt=0)
    height: int = Field(default=HEIGHT, gt=0)
    scale: int = Field(default=SCALE, gt=0)
    seed: int | None = None

    @property
    def uses_normal(self) -> bool:
        # A zero mean is indistinguishable from "not set".
        return all(v != 0.0 for v in (self.devx, self.devy, self.meanx, self.meany))

    @classmethod
    def from_form(cls, form: Mapping[str, Any], **overrides: Any) -> "RunConfig":
        """Build a config from raw form values; blank or malformed numbers become 0."""
        return cls(
            k=_to_int(form.get("k")),
            points=_to_int(form.get("points")),
            # a negative limit is treated like a missing one
            limit=max(_to_int(form.get("limit")), 0),
            devx=_to_float(form.get("devx")),
            devy=_to_float(form.get("devy")),
            meanx=_to_float(form.get("meanx")),
            meany=_to_float(form.get("meany")),
            **overrides,
        )


def _to_int(value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def _to_float(value: Any) -> float:
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return 0.0
