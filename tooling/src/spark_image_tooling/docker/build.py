"""Build the Spark base image and the optional PySpark / SparkR binding images."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from spark_image_tooling.distribution import (
    default_base_dockerfile,
    resolve_paths,
    resolve_scala_version,
    validate,
)
from spark_image_tooling.docker.image_ref import (
    PYSPARK_IMAGE,
    SPARK_IMAGE,
    SPARKR_IMAGE,
    image_ref,
)
from spark_image_tooling.helpers import build_arg_flags, format_cmd, resolve_path

log = logging.getLogger(__name__)


def docker_build_cmd(
    tag: str,
    dockerfile: Path | str,
    build_args: list[str],
    no_cache: bool = False,
    context: str = ".",
) -> list[str]:
    """docker build [--no-cache] --build-arg ... -t tag -f dockerfile context."""
    cmd = ["docker", "build"]
    if no_cache:
        cmd.append("--no-cache")
    cmd += [*build_arg_flags(build_args), "-t", tag, "-f", str(dockerfile), context]
    return cmd


def _docker_build(
    cmd: list[str],
    spark_home: Path,
    env: Mapping[str, str],
    failure: str,
    dry_run: bool,
) -> int:
    log.debug("Running: %s", format_cmd(cmd))
    if dry_run:
        print(f"[dry-run] would: {format_cmd(cmd)}")
        return 0
    try:
        r = subprocess.run(cmd, cwd=str(spark_home), env=dict(env))
    except FileNotFoundError:
        print("❌ Error: docker is not installed", file=sys.stderr)
        return 1
    if r.returncode != 0:
        print(f"❌ {failure}", file=sys.stderr)
        return 1
    return 0


def run(
    spark_home: Path,
    repo: str | None = None,
    tag: str | None = None,
    base_dockerfile: Path | str | None = None,
    py_dockerfile: Path | str | None = None,
    r_dockerfile: Path | str | None = None,
    no_cache: bool = False,
    build_params: list[str] | None = None,
    env: Mapping[str, str] | None = None,
    layout: dict[str, Any] | None = None,
    dry_run: bool = False,
) -> int:
    """Validate the distribution, build spark, then spark-py / spark-r when their Dockerfile is set. Returns 0 or 1."""
    env = dict(os.environ if env is None else env)
    build_params = list(build_params or [])

    scala_version = resolve_scala_version(spark_home, env)
    if scala_version is None:
        return 1
    paths = resolve_paths(spark_home, scala_version, layout)
    mode = "distribution" if paths["distribution"] else "source tree"
    log.debug("Building from %s at %s (Scala %s)", mode, spark_home, scala_version)

    if validate(spark_home, paths, layout) != 0:
        return 1

    base = resolve_path(spark_home, base_dockerfile or default_base_dockerfile(paths, layout))
    bindings: list[tuple[str, Path, str]] = []
    if py_dockerfile is not None:
        bindings.append((PYSPARK_IMAGE, resolve_path(spark_home, py_dockerfile), "PySpark"))
    if r_dockerfile is not None:
        bindings.append((SPARKR_IMAGE, resolve_path(spark_home, r_dockerfile), "SparkR"))

    for dockerfile in [base, *(d for _, d, _ in bindings)]:
        if not dockerfile.is_file():
            print(f"❌ Dockerfile not found: {dockerfile}", file=sys.stderr)
            return 1

    base_ref = image_ref(SPARK_IMAGE, repo, tag)
    print(f"🔨 Building {base_ref} from {base}...")
    cmd = docker_build_cmd(base_ref, base, [*build_params, *paths["build_args"]], no_cache)
    failure = "Failed to build Spark JVM Docker image, please refer to Docker build output for details."
    if _docker_build(cmd, spark_home, env, failure, dry_run) != 0:
        return 1
    built = [base_ref]

    binding_args = [*build_params, f"base_img={base_ref}"]
    for name, dockerfile, label in bindings:
        ref = image_ref(name, repo, tag)
        print(f"🔨 Building {ref} from {dockerfile}...")
        cmd = docker_build_cmd(ref, dockerfile, binding_args, no_cache)
        failure = f"Failed to build {label} Docker image, please refer to Docker build output for details."
        if _docker_build(cmd, spark_home, env, failure, dry_run) != 0:
            return 1
        built.append(ref)

    if not dry_run:
        print(f"✅ Built: {', '.join(built)}")
    return 0
