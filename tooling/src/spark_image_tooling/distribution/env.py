"""Spark environment: SPARK_HOME, bin/load-spark-env.sh, Scala version."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path

log = logging.getLogger(__name__)

LOAD_ENV_SCRIPT = "bin/load-spark-env.sh"
DEFAULT_SCALA_VERSION = "2.11"

# Sources the script in a child bash and dumps the resulting environment.
_SOURCE_AND_DUMP = '. "$1" 1>&2 && env -0'


def resolve_spark_home(environ: Mapping[str, str] | None = None) -> Path:
    """SPARK_HOME from the environment, else the current directory."""
    environ = os.environ if environ is None else environ
    home = environ.get("SPARK_HOME")
    return Path(home).resolve() if home else Path.cwd()


def parse_env_dump(text: str) -> dict[str, str]:
    """Parse NUL-separated KEY=VALUE records (output of `env -0`)."""
    out: dict[str, str] = {}
    for record in text.split("\0"):
        if not record:
            continue
        key, sep, value = record.partition("=")
        if sep:
            out[key] = value
    return out


def load_spark_env(
    spark_home: Path,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str] | None:
    """Environment after sourcing bin/load-spark-env.sh. Returns None if the script fails.

    A missing script is not an error: the current environment is returned with SPARK_HOME set.
    """
    env = dict(os.environ if environ is None else environ)
    env["SPARK_HOME"] = str(spark_home)
    script = spark_home / LOAD_ENV_SCRIPT
    if not script.is_file():
        log.debug("No %s; using current environment", script)
        return env
    log.debug("Sourcing %s", script)
    try:
        r = subprocess.run(
            ["bash", "-c", _SOURCE_AND_DUMP, "load-spark-env", str(script)],
            capture_output=True,
            text=True,
            env=env,
            cwd=str(spark_home),
        )
    except FileNotFoundError:
        print("❌ Error: bash is required to load the Spark environment", file=sys.stderr)
        return None
    if r.returncode != 0:
        print(f"❌ Failed to load Spark environment from {script}", file=sys.stderr)
        if r.stderr:
            print(r.stderr.rstrip(), file=sys.stderr)
        return None
    loaded = parse_env_dump(r.stdout)
    loaded.setdefault("SPARK_HOME", str(spark_home))
    return loaded


def resolve_scala_version(spark_home: Path, env: Mapping[str, str]) -> str | None:
    """SPARK_SCALA_VERSION from env, else the single assembly/target/scala-* build. None on ambiguity."""
    version = env.get("SPARK_SCALA_VERSION")
    if version:
        return version
    target = spark_home / "assembly" / "target"
    found = sorted(p.name[len("scala-") :] for p in target.glob("scala-*") if p.is_dir())
    if len(found) > 1:
        print("❌ Presence of build for multiple Scala versions detected.", file=sys.stderr)
        print(
            '   Either clean one of them or, export SPARK_SCALA_VERSION in spark-env.sh.',
            file=sys.stderr,
        )
        return None
    if found:
        return found[0]
    return DEFAULT_SCALA_VERSION
