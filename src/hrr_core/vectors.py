"""
hrr_core/vectors.py - Real hypervector utilities

Tensor-level helpers shared by the operators and the engine:
    - L2 normalization that leaves the zero vector alone
    - cosine similarity, single and batched
    - circular permutation
    - flat .npy persistence of a single vector

Vectors here are real float64 tensors of shape (N,). Unlike phasor VSAs,
HRR vectors are normalized as a whole (v / ||v||_2), not per component.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
import torch

from .types import GOLDEN_RATIO, Vector

# Below this norm a vector is treated as zero by similarity().
_NORM_FLOOR = 1e-12

# =============================================================================
# NORMALIZATION
# =============================================================================


def normalize(v: torch.Tensor) -> torch.Tensor:
    """Scale to unit L2 norm.

    The all-zero vector has no direction and is returned unchanged, so
    normalization never divides by zero and never emits NaN. Components are
    first divided by their largest magnitude, so the sum of squares cannot
    underflow or overflow for any finite nonzero v.

    Args:
        v: Real tensor of shape (N,)

    Returns:
        New tensor with ||v||_2 = 1, or a copy of v if its norm is 0
    """
    scale = v.abs().max()
    if scale == 0:
        return v.clone()
    u = v / scale
    return u / torch.linalg.vector_norm(u)


# =============================================================================
# SIMILARITY
# =============================================================================


def similarity(a: torch.Tensor, b: torch.Tensor) -> float:
    """Cosine similarity in [-1, 1]; 0.0 if either vector is (near) zero."""
    if b.device != a.device:
        b = b.to(a.device)

    norm_a = torch.linalg.vector_norm(a)
    norm_b = torch.linalg.vector_norm(b)
    if norm_a < _NORM_FLOOR or norm_b < _NORM_FLOOR:
        return 0.0

    # cosine is scale-free; peak scaling keeps the dot product finite
    a = a / a.abs().max()
    b = b / b.abs().max()
    return float(torch.dot(a, b) / (torch.linalg.vector_norm(a) * torch.linalg.vector_norm(b)))


def batch_similarity(query: torch.Tensor, codebook: torch.Tensor) -> torch.Tensor:
    """Cosine similarity between ``query`` (N,) and each row of ``codebook`` (M, N)."""
    if codebook.device != query.device:
        codebook = codebook.to(query.device)

    dots = codebook @ query
    norms = torch.linalg.vector_norm(codebook, dim=-1) * torch.linalg.vector_norm(query)
    return torch.where(
        norms < _NORM_FLOOR,
        torch.zeros_like(dots),
        dots / norms.clamp_min(_NORM_FLOOR),
    )


# =============================================================================
# PERMUTATION
# =============================================================================


def permute(v: torch.Tensor, shift: int) -> torch.Tensor:
    """Circular index shift: permute(v, k)[i] = v[(i - k) mod N]."""
    return torch.roll(v, shifts=shift)


def inverse_permute(v: torch.Tensor, shift: int) -> torch.Tensor:
    return torch.roll(v, shifts=-shift)


# =============================================================================
# DIAGNOSTICS
# =============================================================================


def vector_info(v: Vector) -> dict[str, Any]:
    """Summary statistics for a Vector, for logs and debugging."""
    t = v.as_tensor()
    return {
        "dimension": v.dimension,
        "semantic_binding": v.semantic_binding,
        "l2_norm": float(torch.linalg.vector_norm(t)),
        "min": float(t.min()),
        "max": float(t.max()),
        "mean": float(t.mean()),
        "is_zero": bool((t == 0).all()),
        "is_finite": bool(torch.isfinite(t).all()),
    }


# =============================================================================
# FLAT ARRAY PERSISTENCE
# =============================================================================


def save_vector(path: str | Path, v: Vector) -> Path:
    """Write the components as a flat float64 .npy array.

    Only the numbers are stored; labels are the caller's business.
    """
    path = Path(path)
    np.save(path, v.to_numpy(), allow_pickle=False)
    # np.save appends .npy when missing
    return path if path.suffix == ".npy" else path.with_name(path.name + ".npy")


def load_vector(
    path: str | Path,
    semantic_binding: str = "",
    phi_ratio: float = GOLDEN_RATIO,
) -> Vector:
    """Read a flat .npy array written by save_vector."""
    array = np.load(Path(path), allow_pickle=False)
    return Vector.from_numpy(array, semantic_binding=semantic_binding, phi_ratio=phi_ratio)
