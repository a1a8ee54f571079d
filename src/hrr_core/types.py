"""
hrr_core/types.py - Pydantic type definitions for the HRR engine

Uses Pydantic v2 for validation. Both models are frozen: an EngineConfig
never changes after construction and every Vector is an immutable value.
"""
from __future__ import annotations

import json
import math
from typing import Any, Literal

import numpy as np
import torch
from pydantic import BaseModel, Field, field_validator

GOLDEN_RATIO = (1 + math.sqrt(5)) / 2

# =============================================================================
# ENGINE CONFIGURATION
# =============================================================================


class EngineConfig(BaseModel):
    """Configuration for an HRR engine."""

    dimension: int = Field(
        default=1024,
        ge=1,
        description="Vector length N (any positive integer)"
    )
    backend: Literal["fft", "naive"] = Field(
        default="fft",
        description="Spectral backend used by bind/unbind"
    )
    phi_ratio: float = Field(
        default=GOLDEN_RATIO,
        gt=0.0,
        description="Metadata constant attached to every vector"
    )
    condition_threshold: float = Field(
        default=1e-8,
        ge=0.0,
        description="Smallest spectral magnitude for which unbind still divides"
    )
    regularization: float = Field(
        default=0.0,
        ge=0.0,
        description="Added to |X|^2 in the deconvolution denominator"
    )
    device: Literal["cuda", "cpu", "auto"] = Field(
        default="cpu",
        description="Compute device"
    )

    @field_validator("backend", "device", mode="before")
    @classmethod
    def lowercase_choice(cls, v: Any) -> Any:
        """Accept 'FFT', 'Naive' and friends."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def get_device(self) -> torch.device:
        """Get torch device based on config."""
        if self.device == "auto":
            return torch.device("cuda" if torch.cuda.is_available() else "cpu")
        return torch.device(self.device)

    model_config = {"frozen": True, "extra": "forbid"}


# =============================================================================
# VECTOR
# =============================================================================


class Vector(BaseModel):
    """An immutable real hypervector.

    The wire form is plain JSON:
        {"dimensions": [...], "semanticBinding": "...", "phiRatio": 1.618...}

    ``semantic_binding`` records provenance ("bind(a,b)", "unbind(...)") and
    ``phi_ratio`` is carried for display only. Neither takes part in any
    computation.
    """

    dimensions: tuple[float, ...] = Field(..., min_length=1)
    semantic_binding: str = Field(default="", alias="semanticBinding")
    phi_ratio: float = Field(default=GOLDEN_RATIO, alias="phiRatio")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "allow_inf_nan": False,
    }

    def __len__(self) -> int:
        return len(self.dimensions)

    @property
    def dimension(self) -> int:
        return len(self.dimensions)

    @property
    def norm(self) -> float:
        return math.sqrt(math.fsum(d * d for d in self.dimensions))

    def as_tensor(self, device: torch.device | None = None) -> torch.Tensor:
        """Components as a float64 tensor."""
        return torch.tensor(self.dimensions, dtype=torch.float64, device=device)

    @classmethod
    def from_tensor(
        cls,
        t: torch.Tensor,
        semantic_binding: str = "",
        phi_ratio: float = GOLDEN_RATIO,
    ) -> Vector:
        """Build a Vector from a real 1-D tensor."""
        if t.is_complex():
            t = t.real
        values = t.detach().to(device="cpu", dtype=torch.float64).reshape(-1)
        return cls(
            dimensions=tuple(values.tolist()),
            semantic_binding=semantic_binding,
            phi_ratio=phi_ratio,
        )

    # -------------------------------------------------------------------------
    # Interchange
    # -------------------------------------------------------------------------

    def to_wire(self) -> dict[str, Any]:
        """JSON-representable dict using the camelCase wire names."""
        return {
            "dimensions": list(self.dimensions),
            "semanticBinding": self.semantic_binding,
            "phiRatio": self.phi_ratio,
        }

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> Vector:
        return cls.model_validate(data)

    def to_json(self) -> str:
        return json.dumps(self.to_wire())

    @classmethod
    def from_json(cls, text: str | bytes) -> Vector:
        return cls.model_validate_json(text)

    def to_numpy(self) -> np.ndarray:
        """Flat float64 array of the components."""
        return np.asarray(self.dimensions, dtype=np.float64)

    @classmethod
    def from_numpy(
        cls,
        array: np.ndarray,
        semantic_binding: str = "",
        phi_ratio: float = GOLDEN_RATIO,
    ) -> Vector:
        flat = np.asarray(array, dtype=np.float64).reshape(-1)
        return cls(
            dimensions=tuple(flat.tolist()),
            semantic_binding=semantic_binding,
            phi_ratio=phi_ratio,
        )


# =============================================================================
# CODEBOOK DEFINITIONS
# =============================================================================


class LabelSpec(BaseModel):
    """One codebook entry: a label and the properties it is encoded with."""

    label: str = Field(..., min_length=1)
    properties: list[Any] = Field(default_factory=list)


class CodebookSpec(BaseModel):
    """A YAML codebook definition."""

    engine: EngineConfig | None = None
    labels: list[LabelSpec] = Field(default_factory=list)

    @field_validator("labels", mode="before")
    @classmethod
    def expand_plain_labels(cls, v: Any) -> Any:
        """Allow bare strings as shorthand for {label: <string>}."""
        if isinstance(v, list):
            return [{"label": item} if isinstance(item, str) else item for item in v]
        return v
