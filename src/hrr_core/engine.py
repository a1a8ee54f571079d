"""
hrr_core/engine.py - HRR engine facade

The Engine owns an immutable EngineConfig and the spectral backend chosen
from it. Every public method takes and returns immutable Vector values;
tensors never leak to callers. No method mutates engine state, so a single
Engine can be shared freely across threads.

Example:
    engine = Engine(dimension=1024)
    cat = engine.encode("cat", ["animal"])
    owner = engine.encode("owner")

    fact = engine.bind(cat, owner)
    guess = engine.unbind(fact, owner)
    engine.similarity(guess, cat)   # ≈ 1.0
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

import torch

from . import operators
from .encoding import encode_tensor
from .exceptions import DimensionMismatch, EmptyOperandSet
from .transforms import SpectralBackend, get_backend
from .types import EngineConfig, Vector
from .vectors import inverse_permute, normalize, permute, similarity

logger = logging.getLogger(__name__)


class Engine:
    """Holographic Reduced Representation engine.

    Args:
        dimension: Vector length N
        backend: "fft" or "naive"
        **overrides: Any other EngineConfig field
    """

    def __init__(
        self,
        dimension: int = 1024,
        backend: str = "fft",
        **overrides: Any,
    ):
        self.config = EngineConfig(dimension=dimension, backend=backend, **overrides)
        self.backend: SpectralBackend = get_backend(self.config.backend, self.config.dimension)
        self.device = self.config.get_device()
        logger.debug("Engine ready: %s on %s", self.backend, self.device)

    @classmethod
    def from_config(cls, config: EngineConfig) -> Engine:
        return cls(**config.model_dump())

    @property
    def dimension(self) -> int:
        return self.config.dimension

    def __repr__(self) -> str:
        return f"Engine(dimension={self.dimension}, backend={self.config.backend!r})"

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check(self, vectors: Sequence[Vector], operation: str) -> None:
        for v in vectors:
            if v.dimension != self.dimension:
                raise DimensionMismatch(self.dimension, v.dimension, operation)

    def _tensor(self, v: Vector) -> torch.Tensor:
        return v.as_tensor(device=self.device)

    def _wrap(self, t: torch.Tensor, semantic_binding: str) -> Vector:
        return Vector.from_tensor(t, semantic_binding, self.config.phi_ratio)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def encode(self, label: str, properties: Sequence[Any] = ()) -> Vector:
        """Deterministic, normalized vector for (label, properties).

        The same inputs always give a bit-identical result, on every backend.
        """
        signal = encode_tensor(label, properties, self.dimension)
        return self._wrap(normalize(signal), label)

    def vector(self, values: Iterable[float], semantic_binding: str = "") -> Vector:
        """Wrap caller-supplied components as a Vector of this engine."""
        v = Vector(
            dimensions=tuple(float(x) for x in values),
            semantic_binding=semantic_binding,
            phi_ratio=self.config.phi_ratio,
        )
        self._check([v], "vector")
        return v

    def zero_vector(self, semantic_binding: str = "zero") -> Vector:
        return self._wrap(torch.zeros(self.dimension, dtype=torch.float64), semantic_binding)

    # -------------------------------------------------------------------------
    # Algebra
    # -------------------------------------------------------------------------

    def bind(self, *vectors: Vector) -> Vector:
        """Circular convolution, folded left to right over the operands.

        Raises:
            EmptyOperandSet: no operands
            DimensionMismatch: an operand is not of length N
        """
        if not vectors:
            raise EmptyOperandSet("bind")
        self._check(vectors, "bind")

        result = vectors[0]
        if len(vectors) == 1:
            return result.model_copy()

        for v in vectors[1:]:
            bound = operators.bind(self._tensor(result), self._tensor(v), self.backend)
            result = self._wrap(bound, f"bind({result.semantic_binding},{v.semantic_binding})")
        return result

    def unbind(self, bound: Vector, known: Vector) -> Vector:
        """Guarded circular deconvolution: recover x from bind(x, known).

        Never raises for numerical reasons; an ill-conditioned or zero
        ``known`` yields a lower-fidelity (possibly zero) but finite result.
        """
        self._check([bound, known], "unbind")
        recovered = operators.unbind(
            self._tensor(bound),
            self._tensor(known),
            self.backend,
            condition_threshold=self.config.condition_threshold,
            regularization=self.config.regularization,
        )
        return self._wrap(
            recovered, f"unbind({bound.semantic_binding},{known.semantic_binding})"
        )

    def normalize(self, v: Vector) -> Vector:
        """Unit L2 norm; the zero vector comes back unchanged."""
        self._check([v], "normalize")
        return self._wrap(normalize(self._tensor(v)), v.semantic_binding)

    def superposition(self, *vectors: Vector) -> Vector:
        """Normalized elementwise sum, representing an unordered set."""
        if not vectors:
            raise EmptyOperandSet("superposition")
        self._check(vectors, "superposition")

        bundled = operators.bundle_many([self._tensor(v) for v in vectors])
        names = " + ".join(v.semantic_binding for v in vectors)
        return self._wrap(bundled, f"superposition({names})")

    def similarity(self, a: Vector, b: Vector) -> float:
        """Cosine similarity; 0.0 when either vector is zero."""
        if a.dimension != b.dimension:
            raise DimensionMismatch(a.dimension, b.dimension, "similarity")
        return similarity(a.as_tensor(), b.as_tensor())

    # -------------------------------------------------------------------------
    # Sequences
    # -------------------------------------------------------------------------

    def permute(self, v: Vector, shift: int) -> Vector:
        self._check([v], "permute")
        return self._wrap(permute(self._tensor(v), shift), f"permute({v.semantic_binding},{shift})")

    def inverse_permute(self, v: Vector, shift: int) -> Vector:
        self._check([v], "inverse_permute")
        return self._wrap(
            inverse_permute(self._tensor(v), shift),
            f"inverse_permute({v.semantic_binding},{shift})",
        )

    def sequence(self, *vectors: Vector) -> Vector:
        """Ordered bundle: operand i is shifted i places before summing."""
        if not vectors:
            raise EmptyOperandSet("sequence")
        self._check(vectors, "sequence")

        encoded = operators.sequence_encode([self._tensor(v) for v in vectors])
        names = " -> ".join(v.semantic_binding for v in vectors)
        return self._wrap(encoded, f"sequence({names})")
