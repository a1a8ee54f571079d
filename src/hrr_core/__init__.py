"""
hrr_core - Holographic Reduced Representation engine

Real hypervectors bound by circular convolution and unbound by guarded
circular deconvolution, both computed in the spectral domain.

Quick Start:
    from hrr_core import Engine

    engine = Engine(dimension=1024)          # backend="fft" or "naive"
    role = engine.encode("role:owner")
    filler = engine.encode("alice", ["person"])

    fact = engine.bind(role, filler)
    guess = engine.unbind(fact, role)
    engine.similarity(guess, filler)         # ≈ 1.0

    payload = fact.to_wire()                 # {"dimensions": [...], ...}

Modules:
    hrr_core.engine       - Engine facade over config, backend and Vectors
    hrr_core.transforms   - Radix-2 FFT, direct DFT, Bluestein, backends
    hrr_core.encoding     - FNV-1a / Mulberry32 spectrum synthesis
    hrr_core.operators    - Convolution, guarded deconvolution, bundling
    hrr_core.vectors      - Normalization, similarity, permutation, .npy I/O
    hrr_core.records      - Role/filler records, triples, Codebook cleanup
    hrr_core.loader       - YAML config and codebook loading
    hrr_core.batch        - Thread-pooled batch encoding
    hrr_core.types        - Pydantic models (EngineConfig, Vector)
"""

__version__ = "1.0.0"

from .batch import encode_batch
from .engine import Engine
from .exceptions import ConfigError, DimensionMismatch, EmptyOperandSet, HRRError
from .loader import load_codebook, load_config
from .records import (
    Codebook,
    create_record,
    encode_triple,
    query_record,
    role_filler,
)
from .transforms import (
    DirectBackend,
    FFTBackend,
    SpectralBackend,
    dft_direct,
    fft,
    get_backend,
    idft_direct,
    ifft,
)
from .types import GOLDEN_RATIO, EngineConfig, Vector
from .vectors import load_vector, save_vector, vector_info

__all__ = [
    # Version
    "__version__",
    # Engine
    "Engine",
    "EngineConfig",
    "Vector",
    "GOLDEN_RATIO",
    # Errors
    "HRRError",
    "EmptyOperandSet",
    "DimensionMismatch",
    "ConfigError",
    # Transforms
    "SpectralBackend",
    "DirectBackend",
    "FFTBackend",
    "get_backend",
    "fft",
    "ifft",
    "dft_direct",
    "idft_direct",
    # Records
    "Codebook",
    "role_filler",
    "create_record",
    "encode_triple",
    "query_record",
    # I/O
    "load_config",
    "load_codebook",
    "save_vector",
    "load_vector",
    "vector_info",
    # Batch
    "encode_batch",
]
