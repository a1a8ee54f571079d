"""
tests/test_types.py - Configuration and Interchange Tests

Verifies EngineConfig validation, the Vector wire format and the flat
numeric array round trip.
"""

import json
import math

import numpy as np
import pytest
from pydantic import ValidationError

from hrr_core import GOLDEN_RATIO, Engine, EngineConfig, Vector, load_vector, save_vector, vector_info

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture(scope="module")
def engine():
    return Engine(dimension=32, backend="naive")


@pytest.fixture
def sample(engine):
    return engine.encode("sample", ["wire", 1])


# =============================================================================
# ENGINE CONFIG TESTS
# =============================================================================


class TestEngineConfig:
    """Tests for EngineConfig validation."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.dimension == 1024
        assert config.backend == "fft"
        assert config.phi_ratio == pytest.approx(1.6180339887498949)
        assert config.condition_threshold == 1e-8
        assert config.regularization == 0.0

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(ValidationError):
            config.dimension = 8

    @pytest.mark.parametrize("dimension", [0, -4])
    def test_dimension_must_be_positive(self, dimension):
        with pytest.raises(ValidationError):
            EngineConfig(dimension=dimension)

    def test_any_positive_dimension_kept(self):
        """Unlike phasor configs, N is not rounded up to a power of two."""
        config = EngineConfig(dimension=1000)
        assert config.dimension == 1000

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            EngineConfig(backend="wavelet")

    def test_backend_case_insensitive(self):
        assert EngineConfig(backend="NAIVE").backend == "naive"

    def test_extra_fields_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(dimensions=1024)

    def test_engine_from_config(self):
        config = EngineConfig(dimension=48, backend="naive", phi_ratio=2.0)
        engine = Engine.from_config(config)
        assert engine.config == config
        assert engine.backend.name == "naive"
        assert engine.encode("x").phi_ratio == 2.0

    def test_engine_rejects_bad_config(self):
        with pytest.raises(ValidationError):
            Engine(dimension=0)


# =============================================================================
# VECTOR WIRE FORMAT TESTS
# =============================================================================


class TestVectorWire:
    """Tests for the JSON interchange shape."""

    def test_wire_shape(self, sample):
        wire = sample.to_wire()
        assert set(wire) == {"dimensions", "semanticBinding", "phiRatio"}
        assert isinstance(wire["dimensions"], list)
        assert len(wire["dimensions"]) == 32
        assert wire["semanticBinding"] == "sample"
        assert wire["phiRatio"] == pytest.approx(GOLDEN_RATIO)

    def test_wire_is_json_serializable(self, sample):
        text = json.dumps(sample.to_wire())
        assert json.loads(text)["semanticBinding"] == "sample"

    def test_wire_round_trip(self, sample):
        assert Vector.from_wire(sample.to_wire()) == sample

    def test_json_round_trip(self, sample):
        assert Vector.from_json(sample.to_json()) == sample

    def test_accepts_python_field_names(self):
        v = Vector(dimensions=(1.0, 0.0), semantic_binding="x", phi_ratio=1.5)
        assert v.semantic_binding == "x"

    def test_rejects_non_finite(self):
        with pytest.raises(ValidationError):
            Vector(dimensions=(1.0, math.nan))
        with pytest.raises(ValidationError):
            Vector.from_wire({"dimensions": [math.inf], "semanticBinding": "", "phiRatio": 1.0})

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            Vector(dimensions=())

    def test_immutable(self, sample):
        with pytest.raises(ValidationError):
            sample.semantic_binding = "changed"


# =============================================================================
# FLAT ARRAY TESTS
# =============================================================================


class TestFlatArray:
    """Tests for the numpy interchange and .npy persistence."""

    def test_numpy_round_trip(self, sample):
        array = sample.to_numpy()
        assert array.dtype == np.float64
        assert array.shape == (32,)
        restored = Vector.from_numpy(array, semantic_binding="sample")
        assert restored.dimensions == sample.dimensions

    def test_save_and_load(self, tmp_path, sample):
        written = save_vector(tmp_path / "sample", sample)
        assert written.suffix == ".npy"
        assert written.exists()

        restored = load_vector(written, semantic_binding="sample")
        assert restored == sample

    def test_saved_file_is_flat_array(self, tmp_path, sample):
        written = save_vector(tmp_path / "sample.npy", sample)
        assert np.load(written).shape == (32,)


class TestVectorInfo:
    def test_info(self, sample, engine):
        info = vector_info(sample)
        assert info["dimension"] == 32
        assert info["l2_norm"] == pytest.approx(1.0)
        assert info["is_finite"]
        assert not info["is_zero"]
        assert vector_info(engine.zero_vector())["is_zero"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
