"""Preset configuration loading.

User presets live in a TOML file::

    [presets.warm]
    steps = [
      { kind = "composite", blendMode = "screen", overlaySpec = { color = [255, 200, 120] }, opacity = 0.3 },
      { kind = "colorMatrix", brightness = 5, saturation = 10 },
    ]

The file is located through the INSTAFILTER_CONFIG environment variable,
an explicit path, or ``instafilter.toml`` in the current or home directory.
"""

from __future__ import annotations

import logging
import os
from typing import Any, cast

from pydantic import ValidationError

# TOML loading for Python 3.11+ and older
try:
    import tomllib  # type: ignore[import-not-found, unused-ignore]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found, no-redef, unused-ignore]

from instafilter.components.filter_spec import FilterSpec

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "INSTAFILTER_CONFIG"
CONFIG_FILENAME = "instafilter.toml"


def resolve_config_path(config_path: str | None = None) -> str | None:
    """Resolve configuration path from env, explicit path, or defaults.

    Returns:
        Path to an existing config file, or None when no default file exists

    Raises:
        FileNotFoundError: If the env var or ``config_path`` names a missing file
    """
    explicit = os.environ.get(CONFIG_ENV_VAR) or config_path
    if explicit:
        if not os.path.exists(explicit):
            raise FileNotFoundError(f"Config file not found at {explicit}")
        return explicit

    candidates = [
        CONFIG_FILENAME,
        os.path.expanduser(os.path.join("~", CONFIG_FILENAME)),
    ]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


def parse_presets(config: dict[str, Any], source: str = "<config>") -> dict[str, FilterSpec]:
    """Build FilterSpecs from the ``[presets]`` table of a parsed config.

    Raises:
        ValueError: If a preset is malformed
    """
    presets_table = config.get("presets", {})
    if not isinstance(presets_table, dict):
        raise ValueError(f"'presets' in {source} must be a table")

    presets: dict[str, FilterSpec] = {}
    for name, body in presets_table.items():
        if not isinstance(body, dict):
            raise ValueError(f"Preset '{name}' in {source} must be a table")
        try:
            presets[name] = FilterSpec(name=name, steps=body.get("steps", []))
        except ValidationError as e:
            raise ValueError(f"Invalid preset '{name}' in {source}: {e}") from e
    return presets


def load_config_presets(config_path: str | None = None) -> dict[str, FilterSpec]:
    """Load user presets from the resolved config file.

    Returns:
        Mapping of preset name to FilterSpec; empty if there is no config

    Raises:
        FileNotFoundError: If an explicitly configured file is missing
        ValueError: If the file is not valid TOML or a preset is malformed
    """
    resolved_path = resolve_config_path(config_path)
    if resolved_path is None:
        return {}

    logger.debug("Reading presets from %s", resolved_path)
    with open(resolved_path, "rb") as f:
        try:
            config = cast(dict[str, Any], tomllib.load(f))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {resolved_path}: {e}") from e
    return parse_presets(config, source=resolved_path)
