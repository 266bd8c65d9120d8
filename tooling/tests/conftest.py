"""Pytest fixtures for spark_image_tooling tests."""

from pathlib import Path

import pytest


@pytest.fixture
def spark_dist(tmp_path: Path) -> Path:
    """Packaged Spark release: RELEASE marker, kubernetes/dockerfiles, jars/spark-core*.jar."""
    (tmp_path / "RELEASE").write_text("Spark 2.3.0 built for Hadoop 2.7.3\n")
    dockerfiles = tmp_path / "kubernetes" / "dockerfiles" / "spark"
    (dockerfiles / "bindings" / "python").mkdir(parents=True)
    (dockerfiles / "bindings" / "R").mkdir(parents=True)
    (dockerfiles / "Dockerfile").write_text("FROM openjdk:8-alpine\n")
    (dockerfiles / "bindings" / "python" / "Dockerfile").write_text("ARG base_img\nFROM $base_img\n")
    (dockerfiles / "bindings" / "R" / "Dockerfile").write_text("ARG base_img\nFROM $base_img\n")
    (tmp_path / "jars").mkdir()
    (tmp_path / "jars" / "spark-core_2.11-2.3.0.jar").write_text("")
    return tmp_path


@pytest.fixture
def spark_source(tmp_path: Path) -> Path:
    """Spark source checkout built for Scala 2.11 (no RELEASE marker)."""
    dockerfiles = tmp_path / "resource-managers/kubernetes/docker/src/main/dockerfiles/spark"
    dockerfiles.mkdir(parents=True)
    (dockerfiles / "Dockerfile").write_text("FROM openjdk:8-alpine\n")
    jars = tmp_path / "assembly/target/scala-2.11/jars"
    jars.mkdir(parents=True)
    (jars / "spark-core_2.11-2.4.0-SNAPSHOT.jar").write_text("")
    return tmp_path
