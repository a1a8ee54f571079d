"""
tests/test_transforms.py - Transform Layer Tests

Every transform is checked against torch.fft as the reference, and every
forward/inverse pair must round-trip to within 1e-9.
"""

import pytest
import torch

from hrr_core.transforms import (
    DirectBackend,
    FFTBackend,
    bluestein,
    dft_direct,
    fft,
    get_backend,
    idft_direct,
    ifft,
    is_power_of_two,
    next_power_of_two,
    to_complex,
)

TOL = 1e-9

# =============================================================================
# FIXTURES
# =============================================================================


def random_signal(n: int, seed: int = 0) -> torch.Tensor:
    g = torch.Generator().manual_seed(seed)
    return torch.randn(n, dtype=torch.float64, generator=g)


def assert_close(actual: torch.Tensor, expected: torch.Tensor, what: str) -> None:
    err = float(torch.max(torch.abs(actual - expected)))
    scale = max(1.0, float(torch.max(torch.abs(expected))))
    assert err <= TOL * scale, f"{what}: max error {err:.3e}"


# =============================================================================
# HELPER TESTS
# =============================================================================


class TestHelpers:
    """Tests for padding and power-of-two helpers."""

    @pytest.mark.parametrize("n,expected", [(1, True), (2, True), (1024, True), (3, False), (12, False), (0, False)])
    def test_is_power_of_two(self, n, expected):
        assert is_power_of_two(n) is expected

    @pytest.mark.parametrize("n,expected", [(1, 1), (2, 2), (3, 4), (5, 8), (1000, 1024), (1024, 1024)])
    def test_next_power_of_two(self, n, expected):
        assert next_power_of_two(n) == expected

    def test_to_complex_pads_with_zeros(self):
        out = to_complex([1.0, 2.0, 3.0], 8)
        assert out.dtype == torch.complex128
        assert out.shape == (8,)
        assert torch.equal(out[:3].real, torch.tensor([1.0, 2.0, 3.0], dtype=torch.float64))
        assert torch.count_nonzero(out[3:]) == 0

    def test_to_complex_rejects_truncation(self):
        with pytest.raises(ValueError):
            to_complex([1.0, 2.0, 3.0], 2)


# =============================================================================
# RADIX-2 FFT TESTS
# =============================================================================


class TestRadix2FFT:
    """Tests for the recursive Cooley-Tukey transform."""

    @pytest.mark.parametrize("n", [1, 2, 4, 8, 64, 512])
    def test_fft_matches_reference(self, n):
        x = random_signal(n)
        assert_close(fft(x), torch.fft.fft(x.to(torch.complex128)), f"fft n={n}")

    @pytest.mark.parametrize("n", [1, 2, 16, 1024])
    def test_ifft_round_trip(self, n):
        x = random_signal(n, seed=n)
        recovered = ifft(fft(x))
        assert_close(recovered.real, x, f"ifft(fft(x)) n={n}")
        assert float(torch.max(torch.abs(recovered.imag))) < TOL

    def test_ifft_matches_reference(self):
        X = torch.fft.fft(random_signal(32).to(torch.complex128))
        assert_close(ifft(X), torch.fft.ifft(X), "ifft")

    @pytest.mark.parametrize("n", [3, 6, 12, 1000])
    def test_fft_rejects_non_power_of_two(self, n):
        with pytest.raises(ValueError, match="power of two"):
            fft(random_signal(n))

    def test_fft_does_not_modify_input(self):
        x = random_signal(16)
        snapshot = x.clone()
        fft(x)
        assert torch.equal(x, snapshot)


# =============================================================================
# DIRECT DFT TESTS
# =============================================================================


class TestDirectDFT:
    """Tests for the O(N²) transform used at arbitrary length."""

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 7, 8, 12, 100])
    def test_dft_matches_reference(self, n):
        x = random_signal(n)
        assert_close(dft_direct(x), torch.fft.fft(x.to(torch.complex128)), f"dft n={n}")

    @pytest.mark.parametrize("n", list(range(1, 18)) + [255, 300, 513])
    def test_round_trip(self, n):
        """idft(dft(x)) == x for every N >= 1, including multi-block N."""
        x = random_signal(n, seed=n)
        recovered = idft_direct(dft_direct(x))
        assert_close(recovered.real, x, f"idft(dft(x)) n={n}")
        assert float(torch.max(torch.abs(recovered.imag))) < TOL

    def test_accepts_plain_sequences(self):
        out = dft_direct([1.0, 0.0, 0.0, 0.0])
        assert torch.allclose(out, torch.ones(4, dtype=torch.complex128))

    def test_empty_input_rejected(self):
        with pytest.raises(ValueError):
            dft_direct(torch.zeros(0, dtype=torch.float64))


# =============================================================================
# BLUESTEIN TESTS
# =============================================================================


class TestBluestein:
    """Tests for the chirp-z transform at non power-of-two lengths."""

    @pytest.mark.parametrize("n", [3, 5, 6, 7, 12, 100, 1000])
    def test_forward_matches_reference(self, n):
        x = random_signal(n)
        assert_close(bluestein(x), torch.fft.fft(x.to(torch.complex128)), f"bluestein n={n}")

    @pytest.mark.parametrize("n", [3, 10, 257])
    def test_inverse_matches_reference(self, n):
        X = torch.fft.fft(random_signal(n).to(torch.complex128))
        assert_close(bluestein(X, inverse=True), torch.fft.ifft(X), f"inverse bluestein n={n}")


# =============================================================================
# BACKEND TESTS
# =============================================================================


class TestBackends:
    """Tests for backend selection and agreement."""

    def test_get_backend(self):
        assert isinstance(get_backend("fft", 16), FFTBackend)
        assert isinstance(get_backend("naive", 16), DirectBackend)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            get_backend("wavelet", 16)

    def test_fft_backend_mode(self):
        assert get_backend("fft", 64).radix2
        assert not get_backend("fft", 100).radix2

    @pytest.mark.parametrize("n", [8, 12, 64, 97])
    def test_backends_agree(self, n):
        x = random_signal(n)
        direct = get_backend("naive", n)
        fast = get_backend("fft", n)
        assert_close(fast.forward(x), direct.forward(x), f"forward n={n}")

        X = direct.forward(x)
        assert_close(fast.inverse(X), direct.inverse(X), f"inverse n={n}")

    def test_backend_rejects_wrong_length(self):
        backend = get_backend("naive", 8)
        with pytest.raises(ValueError, match="expects length 8"):
            backend.forward(random_signal(9))

    def test_backend_rejects_zero_dimension(self):
        with pytest.raises(ValueError):
            DirectBackend(0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
