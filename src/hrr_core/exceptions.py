"""
hrr_core/exceptions.py - Structural errors raised by the engine

Numerical degeneracies (zero-norm vectors, near-zero spectral bins) are
absorbed by the operators and never show up here. Only caller mistakes do.
"""
from __future__ import annotations


class HRRError(ValueError):
    """Base class for caller errors raised by hrr_core."""


class EmptyOperandSet(HRRError):
    """Raised when bind or superposition receives no operands."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} requires at least one vector")


class DimensionMismatch(HRRError):
    """Raised when operand vectors do not share the same length."""

    def __init__(self, expected: int, actual: int, operation: str = ""):
        self.expected = expected
        self.actual = actual
        self.operation = operation
        prefix = f"{operation}: " if operation else ""
        super().__init__(
            f"{prefix}dimension mismatch (expected {expected}, got {actual})"
        )


class ConfigError(HRRError):
    """Raised when a YAML configuration or codebook file is malformed."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)
