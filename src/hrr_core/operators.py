"""
hrr_core/operators.py - Algebraic operations for Holographic Reduced Representations

BINDING (⊛):
    Circular convolution, computed as an elementwise product of spectra.
    bind(a, b) = normalize(IDFT(DFT(a) · DFT(b)))

    Properties:
    - Commutative: a ⊛ b = b ⊛ a
    - Associative: (a ⊛ b) ⊛ c = a ⊛ (b ⊛ c)
    - Bound vector is dissimilar to both operands

UNBINDING:
    Guarded circular deconvolution. With Z = DFT(bound), X = DFT(known):
        well conditioned (min|X| > threshold):
            Y = Z · conj(X) / (|X|² + ε)
        ill conditioned:
            Y = Z · conj(X)          (plain correlation, no division)
    The result stays finite when a bin of X is zero or nearly so.

BUNDLING (⊕):
    Superposition: normalize(a + b + ...). Similar to every operand.

All functions take real float64 tensors of shape (N,) and a SpectralBackend
that transforms at length N. They return new tensors and never mutate input.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

import torch

from .transforms import SpectralBackend
from .vectors import normalize, permute

logger = logging.getLogger(__name__)

# =============================================================================
# SCALING
# =============================================================================


def _unit_peak(v: torch.Tensor) -> torch.Tensor:
    """v divided by its largest magnitude; the zero vector is returned as is."""
    scale = v.abs().max()
    if scale == 0:
        return v
    return v / scale


# =============================================================================
# CONVOLUTION / CORRELATION
# =============================================================================


def circular_convolution(
    x: torch.Tensor, y: torch.Tensor, backend: SpectralBackend
) -> torch.Tensor:
    """(x ⊛ y)[k] = Σ_i x[i] · y[(k - i) mod N], unnormalized."""
    spectrum = backend.forward(x) * backend.forward(y)
    return backend.inverse(spectrum).real


def circular_deconvolution(
    z: torch.Tensor,
    x: torch.Tensor,
    backend: SpectralBackend,
    condition_threshold: float = 1e-8,
    regularization: float = 0.0,
) -> torch.Tensor:
    """Estimate y such that x ⊛ y ≈ z, unnormalized.

    Args:
        z: Bound signal
        x: Known operand
        backend: Spectral backend at length N
        condition_threshold: Smallest |X[i]| for which spectral division is used
        regularization: ε added to |X[i]|² in the denominator

    Returns:
        Real tensor; finite for every finite input, including x = 0
    """
    Z = backend.forward(z)
    X = backend.forward(x)
    correlation = Z * torch.conj_physical(X)

    min_abs = float(torch.abs(X).min())
    if min_abs > condition_threshold:
        power = (X.real * X.real + X.imag * X.imag) + regularization
        Y = correlation / power
    else:
        logger.debug(
            "Ill-conditioned spectrum (min |X| = %.3e <= %.1e); falling back to correlation",
            min_abs,
            condition_threshold,
        )
        Y = correlation

    return backend.inverse(Y).real


# =============================================================================
# BINDING OPERATIONS
# =============================================================================


def bind(a: torch.Tensor, b: torch.Tensor, backend: SpectralBackend) -> torch.Tensor:
    """Bind two vectors by circular convolution.

    Operands are peak-scaled first. The result is normalized anyway, so this
    only keeps the spectral product finite for large finite inputs.

    Returns:
        Bound vector, L2-normalized
    """
    if a.device != b.device:
        b = b.to(a.device)
    return normalize(circular_convolution(_unit_peak(a), _unit_peak(b), backend))


def unbind(
    bound: torch.Tensor,
    known: torch.Tensor,
    backend: SpectralBackend,
    condition_threshold: float = 1e-8,
    regularization: float = 0.0,
) -> torch.Tensor:
    """Recover the partner of ``known`` from ``bound``.

    If bound = a ⊛ known, then unbind(bound, known) ≈ a.

    Returns:
        L2-normalized estimate (the zero vector when known is zero)
    """
    if bound.device != known.device:
        known = known.to(bound.device)
    # known stays unscaled: condition_threshold is an absolute magnitude
    recovered = circular_deconvolution(
        _unit_peak(bound), known, backend, condition_threshold, regularization
    )
    return normalize(recovered)


# =============================================================================
# BUNDLING OPERATIONS
# =============================================================================


def bundle_many(vectors: Sequence[torch.Tensor]) -> torch.Tensor:
    """normalize(v1 + v2 + ... + vn)

    All operands are divided by one shared peak magnitude before summing,
    which keeps their relative weights and keeps the sum finite.

    Note:
        Capacity is roughly √N vectors before components stop being
        recoverable by similarity.
    """
    if len(vectors) == 0:
        raise ValueError("At least one vector required")

    device = vectors[0].device
    stacked = torch.stack([v.to(device) for v in vectors])
    scale = stacked.abs().max()
    if scale != 0:
        stacked = stacked / scale
    return normalize(stacked.sum(dim=0))


def sequence_encode(vectors: Sequence[torch.Tensor]) -> torch.Tensor:
    """Ordered sequence v1 → v2 → ... as a bundle of position-shifted operands.

    Operand i is permuted by i places, so different orders give dissimilar
    results while each element remains recoverable with inverse_permute.
    """
    if len(vectors) == 0:
        raise ValueError("At least one vector required")
    return bundle_many([permute(v, i) for i, v in enumerate(vectors)])
