"""Push the locally built Spark images to a registry, skipping those that were not built."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path

from spark_image_tooling.docker.image_ref import IMAGE_NAMES, image_ref
from spark_image_tooling.helpers import format_cmd

log = logging.getLogger(__name__)


def image_exists(ref: str, env: Mapping[str, str], cwd: Path | None = None) -> bool:
    """True if `docker images -q ref` reports an image id."""
    r = subprocess.run(
        ["docker", "images", "-q", ref],
        capture_output=True,
        text=True,
        env=dict(env),
        cwd=str(cwd) if cwd else None,
    )
    if r.returncode != 0:
        log.debug("docker images -q %s failed: %s", ref, (r.stderr or "").strip())
    return bool(r.stdout and r.stdout.strip())


def docker_push(
    image_name: str,
    repo: str | None,
    tag: str | None,
    env: Mapping[str, str],
    cwd: Path | None = None,
    dry_run: bool = False,
) -> int:
    """Push image_name's reference if it exists locally; print a notice otherwise. Returns 0 or 1."""
    ref = image_ref(image_name, repo, tag)
    if not image_exists(ref, env, cwd):
        print(f"Info:  {ref} image not found. Skipping push for this image.")
        return 0
    cmd = ["docker", "push", ref]
    log.debug("Running: %s", format_cmd(cmd))
    if dry_run:
        print(f"[dry-run] would: {format_cmd(cmd)}")
        return 0
    print(f"📤 Pushing {ref}...")
    r = subprocess.run(cmd, env=dict(env), cwd=str(cwd) if cwd else None)
    if r.returncode != 0:
        print(f"❌ Failed to push {image_name} Docker image.", file=sys.stderr)
        return 1
    print(f"✅ Pushed: {ref}")
    return 0


def run(
    repo: str | None,
    tag: str | None = None,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    images: tuple[str, ...] = IMAGE_NAMES,
    dry_run: bool = False,
) -> int:
    """Push spark, spark-py, spark-r in order; stop at the first failed push. Returns 0 or 1."""
    env = dict(os.environ if env is None else env)
    for name in images:
        try:
            rc = docker_push(name, repo, tag, env, cwd=cwd, dry_run=dry_run)
        except FileNotFoundError:
            print("❌ Error: docker is not installed", file=sys.stderr)
            return 1
        if rc != 0:
            return 1
    return 0
