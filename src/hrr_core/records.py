"""
hrr_core/records.py - Structured records and cleanup memory

A record bundles role/filler bindings:
    record = (role_1 ⊛ filler_1) ⊕ (role_2 ⊛ filler_2) ⊕ ...

Unbinding a role from the record gives a noisy copy of its filler, which a
Codebook cleans up by nearest-neighbour search over known labels.

Example:
    engine = Engine(dimension=2048)
    fact = encode_triple(engine, "cat", "chases", "mouse")

    codebook = Codebook(engine)
    for word in ["cat", "chases", "mouse", "dog"]:
        codebook.add_label(word)

    query_record(engine, fact, engine.encode(SUBJECT_ROLE), codebook)
    # ('cat', 0.57...)
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import torch

from .engine import Engine
from .exceptions import DimensionMismatch, EmptyOperandSet
from .types import Vector
from .vectors import batch_similarity

SUBJECT_ROLE = "role:subject"
PREDICATE_ROLE = "role:predicate"
OBJECT_ROLE = "role:object"


# =============================================================================
# CODEBOOK
# =============================================================================


class Codebook:
    """Labelled vectors for cleanup of noisy query results.

    Adding an existing label replaces its vector.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._labels: list[str] = []
        self._index: dict[str, int] = {}
        self._rows: list[torch.Tensor] = []
        self._vectors: dict[str, Vector] = {}

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, label: object) -> bool:
        return label in self._index

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    def add(self, label: str, vector: Vector) -> int:
        """Store ``vector`` under ``label``.

        Returns:
            Row index of the label
        """
        if vector.dimension != self.engine.dimension:
            raise DimensionMismatch(self.engine.dimension, vector.dimension, "codebook")

        row = vector.as_tensor()
        if label in self._index:
            idx = self._index[label]
            self._rows[idx] = row
        else:
            idx = len(self._labels)
            self._labels.append(label)
            self._index[label] = idx
            self._rows.append(row)
        self._vectors[label] = vector
        return idx

    def add_label(self, label: str, properties: Sequence[Any] = ()) -> Vector:
        """Encode (label, properties) with the engine and store it."""
        vector = self.engine.encode(label, properties)
        self.add(label, vector)
        return vector

    def get(self, label: str) -> Vector:
        """Vector stored under ``label``.

        Raises:
            KeyError: unknown label
        """
        return self._vectors[label]

    def matrix(self) -> torch.Tensor:
        """Codebook as an (M, N) float64 tensor, rows in insertion order."""
        if not self._rows:
            return torch.empty(0, self.engine.dimension, dtype=torch.float64)
        return torch.stack(self._rows)

    def nearest(self, query: Vector, k: int = 1) -> list[tuple[str, float]]:
        """Top-k labels by cosine similarity, best first.

        Raises:
            RuntimeError: the codebook is empty
        """
        if not self._labels:
            raise RuntimeError("Codebook is empty. Add vectors before querying.")
        if query.dimension != self.engine.dimension:
            raise DimensionMismatch(self.engine.dimension, query.dimension, "codebook")

        sims = batch_similarity(query.as_tensor(), self.matrix())
        k = max(1, min(k, len(self._labels)))
        values, indices = torch.topk(sims, k)
        return [(self._labels[int(i)], float(s)) for s, i in zip(values, indices)]


# =============================================================================
# RECORDS
# =============================================================================


def role_filler(engine: Engine, role: Vector, filler: Vector) -> Vector:
    """Bind a role to its filler."""
    return engine.bind(role, filler)


def create_record(engine: Engine, pairs: Iterable[tuple[Vector, Vector]]) -> Vector:
    """Superposition of role/filler bindings.

    Raises:
        EmptyOperandSet: no pairs given
    """
    bindings = [role_filler(engine, role, filler) for role, filler in pairs]
    if not bindings:
        raise EmptyOperandSet("create_record")
    return engine.superposition(*bindings)


def encode_triple(engine: Engine, subject: str, predicate: str, obj: str) -> Vector:
    """Record for a (subject, predicate, object) statement."""
    return create_record(
        engine,
        [
            (engine.encode(SUBJECT_ROLE), engine.encode(subject)),
            (engine.encode(PREDICATE_ROLE), engine.encode(predicate)),
            (engine.encode(OBJECT_ROLE), engine.encode(obj)),
        ],
    )


def query_record(
    engine: Engine, record: Vector, role: Vector, codebook: Codebook
) -> tuple[str, float]:
    """Filler bound to ``role`` in ``record``, cleaned up against ``codebook``.

    Returns:
        (label, similarity) of the best match
    """
    noisy = engine.unbind(record, role)
    return codebook.nearest(noisy, k=1)[0]
