"""
Configuration loader — reads toolcheck.yml and builds the catalog.

The file is optional. Without it the built-in catalog and package
manager order are used unchanged.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from toolcheck.core.data.catalog import default_catalog
from toolcheck.core.errors import ConfigError
from toolcheck.core.models.config import ToolcheckConfig
from toolcheck.core.models.requirement import Requirement

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "toolcheck.yml"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for toolcheck.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to toolcheck.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(path: Path | None = None) -> ToolcheckConfig:
    """Load and validate toolcheck configuration.

    Args:
        path: Explicit path to toolcheck.yml. If None, searches upward
            and falls back to defaults when nothing is found.

    Returns:
        Validated ToolcheckConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using built-in catalog", CONFIG_FILE)
            return ToolcheckConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading toolcheck config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return ToolcheckConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = ToolcheckConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid toolcheck configuration: {e}") from e

    logger.info(
        "Loaded %s: %d extra requirement(s), %d skipped",
        path.name, len(config.requirements), len(config.skip),
    )
    return config


def build_catalog(config: ToolcheckConfig | None = None) -> list[Requirement]:
    """Apply a config to a fresh built-in catalog.

    Built-in entries keep their order; config-declared entries follow.

    Raises:
        ConfigError: If a config entry reuses an existing requirement id.
    """
    config = config or ToolcheckConfig()
    catalog = default_catalog()

    seen = {req.id for req in catalog}
    for extra in config.requirements:
        if extra.id in seen:
            raise ConfigError(f"Duplicate requirement id: {extra.id}")
        seen.add(extra.id)
        catalog.append(extra.model_copy(deep=True))

    for rid in sorted(set(config.skip) | set(config.optional)):
        if rid not in seen:
            logger.warning("Unknown requirement id in %s: %s", CONFIG_FILE, rid)

    skip = set(config.skip)
    optional = set(config.optional)
    return [
        req.model_copy(update={"severity": "optional"}) if req.id in optional else req
        for req in catalog
        if req.id not in skip
    ]
