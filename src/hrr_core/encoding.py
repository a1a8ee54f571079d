"""
hrr_core/encoding.py - Deterministic spectrum synthesis

Pipeline:
    label, properties
        → seed text  "label|<compact JSON of properties>"
        → 32-bit FNV-1a hash over UTF-16 code units
        → Mulberry32 generator (one per call)
        → conjugate-symmetric, unit-magnitude spectrum
        → direct inverse DFT, real part

Conjugate symmetry (F[N-k] = conj(F[k]), real DC and Nyquist bins) makes
the inverse transform real. Unit magnitudes give every encoded vector a flat
spectrum, which keeps unbinding well conditioned and makes independent
labels nearly orthogonal (dot product mean ≈ 0, variance ≈ 1/N).
"""
from __future__ import annotations

import json
import math
from collections.abc import Sequence
from typing import Any

import torch

from .transforms import idft_direct

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
_MASK32 = 0xFFFFFFFF

# =============================================================================
# HASHING
# =============================================================================


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of ``text``."""
    h = FNV_OFFSET_BASIS
    units = text.encode("utf-16-le")
    for i in range(0, len(units), 2):
        h ^= units[i] | (units[i + 1] << 8)
        h = (h * FNV_PRIME) & _MASK32
    return h


# Largest magnitude JSON writers print as a plain integer.
_MAX_PLAIN_INT = 1e21


def _json_number(value: Any) -> Any:
    """Rewrite floats the way ECMAScript JSON prints them.

    NaN and infinities become null; integral floats such as 1.0 or -0.0
    become ints. Containers are rewritten recursively.
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < _MAX_PLAIN_INT:
            return int(value)
        return value
    if isinstance(value, dict):
        return {k: _json_number(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_number(v) for v in value]
    return value


def canonical_properties(properties: Sequence[Any]) -> str:
    """Compact JSON for a property list, e.g. ``["x",1,true]``.

    Floats follow ECMAScript formatting for the cases where Python differs
    (``1.0`` is written ``1``, NaN is written ``null``), so seeds agree with
    other JSON-based encoders.
    """
    if isinstance(properties, (str, bytes)):
        raise TypeError("properties must be a sequence of values, not a string")
    return json.dumps(
        _json_number(list(properties)),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def seed_text(label: str, properties: Sequence[Any]) -> str:
    return f"{label}|{canonical_properties(properties)}"


# =============================================================================
# PRNG
# =============================================================================


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32x32-bit product."""
    return (a * b) & _MASK32


class Mulberry32:
    """Mulberry32 pseudo-random generator.

    Produces floats in [0, 1) from a 32-bit state. Instances are cheap and
    are created per encode call, so no generator state is ever shared.

    Example:
        rng = Mulberry32(fnv1a_32("cat|[]"))
        theta = 2 * math.pi * rng.random()
    """

    def __init__(self, seed: int):
        self._state = seed & _MASK32

    def next_uint32(self) -> int:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        a = self._state
        t = _imul(a ^ (a >> 15), 1 | a)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
        return (t ^ (t >> 14)) & _MASK32

    def random(self) -> float:
        return self.next_uint32() / 4294967296


# =============================================================================
# SPECTRUM SYNTHESIS
# =============================================================================


def unit_spectrum(rng: Mulberry32, dimension: int) -> torch.Tensor:
    """Random conjugate-symmetric spectrum with |F[k]| = 1.

    Bin 0 and, for even N, bin N/2 are fixed at 1+0i. Phases for bins
    1..upper are drawn in increasing k order and mirrored as conjugates.

    Args:
        rng: Generator to draw phases from
        dimension: Spectrum length N

    Returns:
        complex128 tensor of length N
    """
    spectrum = torch.zeros(dimension, dtype=torch.complex128)
    spectrum[0] = 1.0

    half = dimension // 2
    upper = half - 1 if dimension % 2 == 0 else half
    if upper > 0:
        thetas = torch.tensor(
            [2 * math.pi * rng.random() for _ in range(upper)],
            dtype=torch.float64,
        )
        bins = torch.polar(torch.ones_like(thetas), thetas)
        spectrum[1:upper + 1] = bins
        spectrum[dimension - upper:] = torch.conj_physical(bins).flip(0)

    if dimension % 2 == 0:
        spectrum[half] = 1.0

    return spectrum


def encode_tensor(
    label: str,
    properties: Sequence[Any],
    dimension: int,
) -> torch.Tensor:
    """Real time-domain signal for (label, properties), not yet normalized.

    Always uses the direct inverse DFT so the output is identical whatever
    spectral backend an engine is configured with.
    """
    rng = Mulberry32(fnv1a_32(seed_text(label, properties)))
    spectrum = unit_spectrum(rng, dimension)
    return idft_direct(spectrum).real.contiguous()
