"""
hrr_core/loader.py - YAML configuration loaders

    load_config    - EngineConfig from a YAML mapping
    load_codebook  - Codebook of encoded labels from a YAML definition

Codebook file layout:

    engine:                 # optional, used when no engine is passed in
      dimension: 2048
      backend: fft
    labels:
      - cat                 # bare label
      - label: dog          # label with properties
        properties: [mammal, 4]

All files are validated against the Pydantic models in hrr_core.types;
anything malformed raises ConfigError.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .engine import Engine
from .exceptions import ConfigError
from .records import Codebook
from .types import CodebookSpec, EngineConfig

logger = logging.getLogger(__name__)


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}", str(path)) from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(
            f"expected a mapping at top level, got {type(raw).__name__}", str(path)
        )
    return raw


def load_config(path: str | Path) -> EngineConfig:
    """Load an EngineConfig from YAML.

    The fields may sit at the top level or under an ``engine:`` key.

    Args:
        path: Path to YAML file

    Returns:
        Validated EngineConfig
    """
    path = Path(path)
    raw = _read_mapping(path)
    section = raw.get("engine", raw)

    try:
        config = EngineConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(str(e), str(path)) from e

    logger.info(
        "Loaded engine config from %s (dimension=%d, backend=%s)",
        path,
        config.dimension,
        config.backend,
    )
    return config


def load_codebook(path: str | Path, engine: Engine | None = None) -> Codebook:
    """Encode every label in a YAML codebook definition.

    Args:
        path: Path to YAML file
        engine: Engine to encode with (default: built from the file's
            ``engine:`` section, or a default Engine)

    Returns:
        Populated Codebook
    """
    path = Path(path)
    raw = _read_mapping(path)

    try:
        spec = CodebookSpec.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(str(e), str(path)) from e

    if engine is None:
        engine = Engine.from_config(spec.engine) if spec.engine else Engine()
    elif spec.engine and spec.engine.dimension != engine.dimension:
        logger.warning(
            "%s declares dimension %d but engine uses %d; using the engine",
            path,
            spec.engine.dimension,
            engine.dimension,
        )

    codebook = Codebook(engine)
    for entry in spec.labels:
        codebook.add_label(entry.label, entry.properties)

    logger.info("Loaded %d labels from %s", len(codebook), path)
    return codebook
