"""Tool config loading (docker-image-tool.yaml).

Config YAML format (every key optional):
- repository, tag: defaults for -r / -t
- no_cache: default for -n
- build_args: list of KEY=VALUE strings, or a mapping; applied before -b args
- dockerfiles: { base, python, r } paths relative to SPARK_HOME; false disables a binding
- layout: overrides for distribution.layout.DEFAULT_LAYOUT
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from spark_image_tooling.distribution.layout import DEFAULT_LAYOUT, TEMPLATED_LAYOUT_KEYS
from spark_image_tooling.helpers import normalize_build_args

log = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SPARK_IMAGE_TOOL_CONFIG"
DEFAULT_CONFIG_NAME = "conf/docker-image-tool.yaml"

# Literal value that leaves a binding image disabled.
DISABLED = "false"

_KNOWN_KEYS = {"repository", "tag", "no_cache", "build_args", "dockerfiles", "layout"}
_DOCKERFILE_KEYS = ("base", "python", "r")


def find_config(
    spark_home: Path,
    explicit: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """--config, else $SPARK_IMAGE_TOOL_CONFIG, else SPARK_HOME/conf/docker-image-tool.yaml if present."""
    if explicit is not None:
        return explicit
    environ = os.environ if environ is None else environ
    from_env = environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    default = spark_home / DEFAULT_CONFIG_NAME
    return default if default.is_file() else None


def _dockerfile_value(value: Any) -> str | None:
    if value is None or value is False or str(value) == DISABLED:
        return None
    return str(value)


def _validate_layout(layout: dict[str, Any], config_path: Path) -> dict[str, str]:
    unknown = sorted(set(layout) - set(DEFAULT_LAYOUT))
    if unknown:
        msg = f"Unknown layout keys in {config_path}: {', '.join(unknown)}"
        raise ValueError(msg)
    for key, value in layout.items():
        if not isinstance(value, str):
            msg = f"layout.{key} in {config_path} must be a string"
            raise ValueError(msg)
        if key in TEMPLATED_LAYOUT_KEYS:
            try:
                value.format(scala_version="x")
            except (AttributeError, IndexError, KeyError, ValueError) as e:
                msg = f"layout.{key} in {config_path} may only use {{scala_version}}: {e!r}"
                raise ValueError(msg) from e
    return layout


def load_tool_config(config_path: Path) -> dict[str, Any]:
    """Load and normalize the tool config. Raises ValueError if the file is unreadable or invalid."""
    try:
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        msg = f"Cannot read config {config_path}: {e}"
        raise ValueError(msg) from e
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in {config_path}: {e}"
        raise ValueError(msg) from e
    if not isinstance(data, dict):
        msg = f"Config {config_path} must be a mapping"
        raise ValueError(msg)
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown keys in {config_path}: {', '.join(unknown)}"
        raise ValueError(msg)

    dockerfiles = data.get("dockerfiles") or {}
    layout = data.get("layout") or {}
    if not isinstance(dockerfiles, dict) or not isinstance(layout, dict):
        msg = f"dockerfiles and layout in {config_path} must be mappings"
        raise ValueError(msg)
    no_cache = data.get("no_cache", False)
    if not isinstance(no_cache, bool):
        msg = "no_cache must be a boolean"
        raise ValueError(msg)

    log.debug("Loaded config %s", config_path)
    return {
        "repository": str(data["repository"]) if data.get("repository") else None,
        "tag": str(data["tag"]) if data.get("tag") else None,
        "no_cache": no_cache,
        "build_args": normalize_build_args(data.get("build_args")),
        "dockerfiles": {
            "base": str(dockerfiles["base"]) if dockerfiles.get("base") else None,
            "python": _dockerfile_value(dockerfiles.get("python")),
            "r": _dockerfile_value(dockerfiles.get("r")),
        },
        "layout": _validate_layout(layout, config_path),
    }


def empty_config() -> dict[str, Any]:
    """Config with nothing set (no file found)."""
    return {
        "repository": None,
        "tag": None,
        "no_cache": False,
        "build_args": [],
        "dockerfiles": dict.fromkeys(_DOCKERFILE_KEYS),
        "layout": {},
    }
