"""
hrr_core/transforms.py - Discrete Fourier transforms for spectral binding

Two families of transforms live here:

RADIX-2 FFT:
    Recursive Cooley-Tukey, O(N log N). Only defined for power-of-two
    lengths; calling it with anything else is a programming error.
    The inverse reuses the forward pass through the conjugate trick:
        ifft(X) = conj(fft(conj(X))) / N

DIRECT DFT:
    X[k] = Σ_n x[n] · e^(-2πi·kn/N), O(N²), valid for every N ≥ 1.
    Needed because the vector dimension is not restricted to powers of two.

Backends wrap these behind one interface so the operators never branch on
the configured mode:
    DirectBackend ("naive") - direct DFT at the native length
    FFTBackend    ("fft")   - radix-2 FFT for power-of-two N, otherwise the
                              Bluestein chirp-z transform, which evaluates the
                              exact length-N DFT through zero-padded
                              power-of-two FFTs

All arithmetic is complex128 so that idft(dft(x)) reproduces x to ~1e-12.
"""
from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence

import torch

logger = logging.getLogger(__name__)

# Rows of the twiddle matrix materialised at once by the direct transforms.
_BLOCK_ROWS = 256

# =============================================================================
# HELPERS
# =============================================================================


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n."""
    p = 1
    while p < n:
        p <<= 1
    return p


def to_complex(x: torch.Tensor | Sequence[float], size: int | None = None) -> torch.Tensor:
    """Convert a 1-D sequence to complex128, zero-padded to ``size``.

    Args:
        x: Real or complex values
        size: Working length (default: len(x))

    Returns:
        Complex tensor of length ``size``
    """
    if not isinstance(x, torch.Tensor):
        x = torch.tensor(x, dtype=torch.float64)
    if not x.is_complex():
        x = x.to(torch.float64)
    x = x.to(torch.complex128)

    n = x.shape[-1]
    if size is None or size == n:
        return x
    if size < n:
        raise ValueError(f"cannot pad length {n} down to {size}")
    return torch.cat([x, x.new_zeros(size - n)])


def _unit_phasors(angles: torch.Tensor) -> torch.Tensor:
    """e^(i·angle) for a float64 tensor of angles."""
    return torch.polar(torch.ones_like(angles), angles)


# =============================================================================
# RADIX-2 FFT
# =============================================================================


def fft(x: torch.Tensor) -> torch.Tensor:
    """Forward radix-2 FFT.

    Args:
        x: 1-D tensor whose length is a power of two

    Returns:
        Complex spectrum of the same length

    Raises:
        ValueError: if the length is not a power of two (pad first)
    """
    n = x.shape[-1]
    if not is_power_of_two(n):
        raise ValueError(f"fft length must be a power of two, got {n}")
    return _fft_radix2(to_complex(x))


def _fft_radix2(x: torch.Tensor) -> torch.Tensor:
    n = x.shape[-1]
    if n == 1:
        return x.clone()

    half = n // 2
    even = _fft_radix2(x[0::2])
    odd = _fft_radix2(x[1::2])

    k = torch.arange(half, dtype=torch.float64, device=x.device)
    t = _unit_phasors(-2 * math.pi * k / n) * odd
    return torch.cat([even + t, even - t])


def ifft(X: torch.Tensor) -> torch.Tensor:
    """Inverse radix-2 FFT via conjugate, forward, conjugate, scale."""
    n = X.shape[-1]
    spectrum = fft(torch.conj_physical(to_complex(X)))
    return torch.conj_physical(spectrum) / n


# =============================================================================
# DIRECT DFT
# =============================================================================


def _direct_transform(x: torch.Tensor, sign: int) -> torch.Tensor:
    n = x.shape[-1]
    idx = torch.arange(n, dtype=torch.int64, device=x.device)
    out = torch.empty(n, dtype=torch.complex128, device=x.device)

    for start in range(0, n, _BLOCK_ROWS):
        rows = idx[start:start + _BLOCK_ROWS]
        # Reduce k·n mod N before scaling so large N keeps full precision
        phase = torch.remainder(torch.outer(rows, idx), n).to(torch.float64)
        kernel = _unit_phasors(sign * 2 * math.pi * phase / n)
        out[start:start + rows.shape[0]] = kernel @ x

    return out


def dft_direct(x: torch.Tensor | Sequence[float]) -> torch.Tensor:
    """Direct O(N²) forward DFT for any length N >= 1."""
    x = to_complex(x)
    if x.shape[-1] == 0:
        raise ValueError("dft of an empty sequence")
    return _direct_transform(x, -1)


def idft_direct(X: torch.Tensor | Sequence[float]) -> torch.Tensor:
    """Direct O(N²) inverse DFT for any length N >= 1."""
    X = to_complex(X)
    n = X.shape[-1]
    if n == 0:
        raise ValueError("idft of an empty sequence")
    return _direct_transform(X, 1) / n


# =============================================================================
# BLUESTEIN (CHIRP-Z)
# =============================================================================


def bluestein(x: torch.Tensor, inverse: bool = False) -> torch.Tensor:
    """Exact length-N DFT through power-of-two FFTs.

    Uses kn = (k² + n² - (k-n)²) / 2 to rewrite the DFT as a convolution
    with the chirp w[k] = e^(∓iπk²/N), which is evaluated with radix-2
    FFTs at a padded length M >= 2N - 1.

    Args:
        x: 1-D tensor of any length
        inverse: Compute the inverse transform (sign flip and 1/N scale)

    Returns:
        Complex tensor of length N
    """
    x = to_complex(x)
    n = x.shape[-1]
    m = next_power_of_two(2 * n - 1)
    sign = 1 if inverse else -1

    k = torch.arange(n, dtype=torch.int64, device=x.device)
    # w[k] only depends on k² mod 2N
    k_sq = torch.remainder(k * k, 2 * n).to(torch.float64)
    chirp = _unit_phasors(sign * math.pi * k_sq / n)

    a = to_complex(x * chirp, m)
    b = torch.zeros(m, dtype=torch.complex128, device=x.device)
    b[:n] = torch.conj_physical(chirp)
    if n > 1:
        b[m - n + 1:] = torch.conj_physical(chirp[1:]).flip(0)

    conv = ifft(fft(a) * fft(b))[:n]
    out = chirp * conv
    return out / n if inverse else out


# =============================================================================
# BACKENDS
# =============================================================================


class SpectralBackend(ABC):
    """Forward/inverse DFT at a fixed native length."""

    name: str = ""

    def __init__(self, dimension: int):
        if dimension < 1:
            raise ValueError(f"dimension must be >= 1, got {dimension}")
        self.dimension = dimension

    def _check(self, x: torch.Tensor) -> torch.Tensor:
        x = to_complex(x)
        if x.shape[-1] != self.dimension:
            raise ValueError(
                f"{self.name} backend expects length {self.dimension}, got {x.shape[-1]}"
            )
        return x

    @abstractmethod
    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """Spectrum of a length-N signal."""

    @abstractmethod
    def inverse(self, X: torch.Tensor) -> torch.Tensor:
        """Signal of a length-N spectrum."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dimension={self.dimension})"


class DirectBackend(SpectralBackend):
    """O(N²) direct transform at the native length."""

    name = "naive"

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return dft_direct(self._check(x))

    def inverse(self, X: torch.Tensor) -> torch.Tensor:
        return idft_direct(self._check(X))


class FFTBackend(SpectralBackend):
    """Radix-2 FFT, with Bluestein for lengths that are not powers of two."""

    name = "fft"

    def __init__(self, dimension: int):
        super().__init__(dimension)
        self.radix2 = is_power_of_two(dimension)
        if not self.radix2:
            logger.debug(
                "dimension %d is not a power of two; using Bluestein with working length %d",
                dimension,
                next_power_of_two(2 * dimension - 1),
            )

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        x = self._check(x)
        return fft(x) if self.radix2 else bluestein(x)

    def inverse(self, X: torch.Tensor) -> torch.Tensor:
        X = self._check(X)
        return ifft(X) if self.radix2 else bluestein(X, inverse=True)


_BACKENDS: dict[str, type[SpectralBackend]] = {
    FFTBackend.name: FFTBackend,
    DirectBackend.name: DirectBackend,
}


def get_backend(name: str, dimension: int) -> SpectralBackend:
    """Instantiate the backend registered under ``name``.

    Raises:
        ValueError: for unknown backend names
    """
    try:
        backend_cls = _BACKENDS[name]
    except KeyError:
        raise ValueError(
            f"Unknown backend {name!r}; expected one of {sorted(_BACKENDS)}"
        ) from None
    return backend_cls(dimension)
