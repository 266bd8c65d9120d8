"""Spark distribution: layout detection, artifact validation, environment loading."""

from .env import (
    DEFAULT_SCALA_VERSION,
    load_spark_env,
    resolve_scala_version,
    resolve_spark_home,
)
from .layout import (
    DEFAULT_LAYOUT,
    default_base_dockerfile,
    is_distribution,
    resolve_layout,
    resolve_paths,
    validate,
)

__all__ = [
    "DEFAULT_LAYOUT",
    "DEFAULT_SCALA_VERSION",
    "default_base_dockerfile",
    "is_distribution",
    "load_spark_env",
    "resolve_layout",
    "resolve_paths",
    "resolve_scala_version",
    "resolve_spark_home",
    "validate",
]
