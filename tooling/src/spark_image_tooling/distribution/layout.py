"""Distribution layout: packaged release vs. source checkout. All paths relative to SPARK_HOME."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from spark_image_tooling.helpers import count_matching

log = logging.getLogger(__name__)

# Spark 2.x layout; override via the config file's layout section.
DEFAULT_LAYOUT: dict[str, str] = {
    "release_marker": "RELEASE",
    "dist_img_path": "kubernetes/dockerfiles",
    "dist_jars": "jars",
    "source_img_path": "resource-managers/kubernetes/docker/src/main/dockerfiles",
    "source_jars": "assembly/target/scala-{scala_version}/jars",
    "source_example_jars": "examples/target/scala-{scala_version}/jars",
    "source_k8s_tests": "resource-managers/kubernetes/integration-tests/tests",
    "jar_pattern": "spark-*",
    "base_dockerfile": "spark/Dockerfile",
}

# Values formatted with scala_version.
TEMPLATED_LAYOUT_KEYS = ("source_jars", "source_example_jars")


def resolve_layout(layout: dict[str, Any] | None) -> dict[str, str]:
    """Return layout dict with defaults filled. Unknown keys are dropped."""
    if layout is None:
        return dict(DEFAULT_LAYOUT)
    out = dict(DEFAULT_LAYOUT)
    out.update({k: str(v) for k, v in layout.items() if k in out})
    return out


def is_distribution(spark_home: Path, layout: dict[str, Any] | None = None) -> bool:
    """True when the release marker file exists (packaged distribution)."""
    return (spark_home / resolve_layout(layout)["release_marker"]).is_file()


def resolve_paths(
    spark_home: Path,
    scala_version: str,
    layout: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Image and jar paths for the detected mode.

    Returns a dict with:
        distribution: bool
        img_path, jars: paths relative to spark_home (str)
        build_args: KEY=VALUE strings the base image build needs for this layout
    """
    cfg = resolve_layout(layout)
    if is_distribution(spark_home, cfg):
        # Packaged release: paths are only used to validate the directory.
        return {
            "distribution": True,
            "img_path": cfg["dist_img_path"],
            "jars": cfg["dist_jars"],
            "build_args": [],
        }
    # Source checkout: the Dockerfiles need to know where the build output lives.
    img_path = cfg["source_img_path"]
    jars = cfg["source_jars"].format(scala_version=scala_version)
    return {
        "distribution": False,
        "img_path": img_path,
        "jars": jars,
        "build_args": [
            f"img_path={img_path}",
            f"spark_jars={jars}",
            f"example_jars={cfg['source_example_jars'].format(scala_version=scala_version)}",
            f"k8s_tests={cfg['source_k8s_tests']}",
        ],
    }


def validate(spark_home: Path, paths: dict[str, Any], layout: dict[str, Any] | None = None) -> int:
    """Check the image directory exists and Spark jars are present. Returns 0 or 1."""
    cfg = resolve_layout(layout)
    img_dir = spark_home / paths["img_path"]
    log.debug("Image content directory: %s", img_dir)
    if not img_dir.is_dir():
        print(
            "❌ Cannot find docker image. This script must be run from a runnable distribution of Apache Spark.",
            file=sys.stderr,
        )
        return 1
    jars_dir = spark_home / paths["jars"]
    total = count_matching(jars_dir, cfg["jar_pattern"])
    log.debug("Found %d jars matching %s in %s", total, cfg["jar_pattern"], jars_dir)
    if total == 0:
        print(
            "❌ Cannot find Spark JARs. This script assumes that Apache Spark has first been built locally or this is a runnable distribution.",
            file=sys.stderr,
        )
        return 1
    return 0


def default_base_dockerfile(paths: dict[str, Any], layout: dict[str, Any] | None = None) -> str:
    """<img_path>/spark/Dockerfile, relative to spark_home."""
    return f"{paths['img_path']}/{resolve_layout(layout)['base_dockerfile']}"
