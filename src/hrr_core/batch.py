"""
hrr_core/batch.py - Parallel batch encoding

Encoding is a pure function of (label, properties), so large label sets
split into chunks that run on a thread pool with no coordination. Results
come back in input order.

Example:
    items = [(f"sku:{i}", ["retail"]) for i in range(10_000)]
    vectors = encode_batch(engine, items, batch_size=500, max_workers=8)
"""
from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from .engine import Engine
from .types import Vector

logger = logging.getLogger(__name__)

EncodeItem = tuple[str, Sequence[Any]] | str


def _chunk(items: list[EncodeItem], batch_size: int) -> Iterator[list[EncodeItem]]:
    """Split items into chunks."""
    for i in range(0, len(items), batch_size):
        yield items[i:i + batch_size]


def _encode_chunk(engine: Engine, chunk: list[EncodeItem]) -> list[Vector]:
    results = []
    for item in chunk:
        if isinstance(item, str):
            results.append(engine.encode(item))
        else:
            label, properties = item
            results.append(engine.encode(label, properties))
    return results


def encode_batch(
    engine: Engine,
    items: Iterable[EncodeItem],
    batch_size: int = 256,
    max_workers: int = 4,
) -> list[Vector]:
    """Encode many labels in parallel chunks.

    Args:
        engine: Engine to encode with
        items: Labels, or (label, properties) pairs
        batch_size: Items per chunk
        max_workers: Thread pool size

    Returns:
        One Vector per item, in input order

    Raises:
        Whatever engine.encode raises for a bad item; the first failure
        in input order propagates.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    items = list(items)
    if not items:
        return []

    start = time.time()
    chunks = list(_chunk(items, batch_size))

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_encode_chunk, engine, chunk) for chunk in chunks]
        results: list[Vector] = []
        for future in futures:
            results.extend(future.result())

    logger.info(
        "Encoded %d items in %d batches (%.1f ms)",
        len(items),
        len(chunks),
        (time.time() - start) * 1000,
    )
    return results
