"""Shared helpers for spark_image_tooling (paths, build args, command display).

Used by distribution, docker, and cli modules.
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable
from pathlib import Path

# --- Path ---


def resolve_path(root: Path, p: str | Path) -> Path:
    """Return p if absolute, else root / p."""
    p = Path(p)
    return p if p.is_absolute() else root / p


def count_matching(directory: Path, pattern: str) -> int:
    """Number of entries in directory matching the glob pattern (0 if directory is missing)."""
    if not directory.is_dir():
        return 0
    return sum(1 for _ in directory.glob(pattern))


# --- Build args ---


def build_arg_flags(args: Iterable[str]) -> list[str]:
    """Expand KEY=VALUE strings to docker's repeated --build-arg form."""
    return [x for a in args for x in ("--build-arg", a)]


def normalize_build_args(value: object) -> list[str]:
    """Config build_args may be a list of KEY=VALUE strings or a mapping. Raises ValueError otherwise."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [f"{k}={v}" for k, v in value.items()]
    if isinstance(value, list):
        return [str(v) for v in value]
    msg = f"build_args must be a list or mapping, got {type(value).__name__}"
    raise ValueError(msg)


# --- Display ---


def format_cmd(cmd: list[str]) -> str:
    """Shell-quoted command line for logs and --dry-run output."""
    return shlex.join(cmd)
