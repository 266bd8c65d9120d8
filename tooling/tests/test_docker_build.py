"""Tests for spark_image_tooling.docker.build."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from spark_image_tooling.docker import docker_build_cmd
from spark_image_tooling.docker.build import run

ENV = {"PATH": "/usr/bin"}


def _build_cmds(m: MagicMock) -> list[list[str]]:
    return [c[0][0] for c in m.call_args_list]


def _tag_of(cmd: list[str]) -> str:
    return cmd[cmd.index("-t") + 1]


class TestDockerBuildCmd:
    def test_no_cache_and_build_args(self) -> None:
        cmd = docker_build_cmd("spark:t", "Dockerfile", ["a=1", "b=2"], no_cache=True)
        assert cmd == [
            "docker",
            "build",
            "--no-cache",
            "--build-arg",
            "a=1",
            "--build-arg",
            "b=2",
            "-t",
            "spark:t",
            "-f",
            "Dockerfile",
            ".",
        ]

    def test_without_no_cache(self) -> None:
        assert "--no-cache" not in docker_build_cmd("spark", "Dockerfile", [])


class TestRun:
    def test_builds_only_base_image_without_bindings(self, spark_dist: Path) -> None:
        with patch("subprocess.run", return_value=MagicMock(returncode=0)) as m:
            rc = run(spark_dist, repo="docker.io/myrepo", tag="v2.3.0", env=ENV)
        assert rc == 0
        cmds = _build_cmds(m)
        assert len(cmds) == 1
        assert _tag_of(cmds[0]) == "docker.io/myrepo/spark:v2.3.0"
        assert cmds[0][-3:] == [
            "-f",
            str(spark_dist / "kubernetes/dockerfiles/spark/Dockerfile"),
            ".",
        ]
        assert m.call_args[1]["cwd"] == str(spark_dist)

    def test_each_binding_adds_one_build_with_base_img(self, spark_dist: Path) -> None:
        py = "kubernetes/dockerfiles/spark/bindings/python/Dockerfile"
        r = "kubernetes/dockerfiles/spark/bindings/R/Dockerfile"
        with patch("subprocess.run", return_value=MagicMock(returncode=0)) as m:
            rc = run(
                spark_dist,
                repo="docker.io/myrepo",
                tag="v2.3.0",
                py_dockerfile=py,
                r_dockerfile=r,
                build_params=["java_image_tag=8"],
                env=ENV,
            )
        assert rc == 0
        cmds = _build_cmds(m)
        assert [_tag_of(c) for c in cmds] == [
            "docker.io/myrepo/spark:v2.3.0",
            "docker.io/myrepo/spark-py:v2.3.0",
            "docker.io/myrepo/spark-r:v2.3.0",
        ]
        for binding in cmds[1:]:
            assert "base_img=docker.io/myrepo/spark:v2.3.0" in binding
            assert "java_image_tag=8" in binding
        assert "base_img=docker.io/myrepo/spark:v2.3.0" not in cmds[0]

    def test_only_python_binding(self, spark_dist: Path) -> None:
        py = spark_dist / "kubernetes/dockerfiles/spark/bindings/python/Dockerfile"
        with patch("subprocess.run", return_value=MagicMock(returncode=0)) as m:
            assert run(spark_dist, py_dockerfile=py, env=ENV) == 0
        assert [_tag_of(c) for c in _build_cmds(m)] == ["spark", "spark-py"]

    def test_source_tree_passes_layout_build_args(self, spark_source: Path) -> None:
        with patch("subprocess.run", return_value=MagicMock(returncode=0)) as m:
            rc = run(spark_source, build_params=["x=1"], no_cache=True, env=ENV)
        assert rc == 0
        (cmd,) = _build_cmds(m)
        assert "--no-cache" in cmd
        args = [cmd[i + 1] for i, a in enumerate(cmd) if a == "--build-arg"]
        assert args[0] == "x=1"
        assert "spark_jars=assembly/target/scala-2.11/jars" in args
        assert "img_path=resource-managers/kubernetes/docker/src/main/dockerfiles" in args

    def test_returns_1_outside_distribution_without_invoking_docker(
        self, tmp_path: Path, capsys
    ) -> None:
        with patch("subprocess.run") as m:
            assert run(tmp_path, env=ENV) == 1
        assert not m.called
        assert "Cannot find docker image" in capsys.readouterr().err

    def test_returns_1_when_jars_missing(self, spark_dist: Path) -> None:
        for jar in (spark_dist / "jars").iterdir():
            jar.unlink()
        with patch("subprocess.run") as m:
            assert run(spark_dist, env=ENV) == 1
        assert not m.called

    def test_returns_1_when_binding_dockerfile_missing(self, spark_dist: Path, capsys) -> None:
        with patch("subprocess.run") as m:
            assert run(spark_dist, r_dockerfile="nope/Dockerfile", env=ENV) == 1
        assert not m.called
        assert "Dockerfile not found" in capsys.readouterr().err

    def test_base_failure_halts_binding_builds(self, spark_dist: Path, capsys) -> None:
        py = "kubernetes/dockerfiles/spark/bindings/python/Dockerfile"
        with patch("subprocess.run", return_value=MagicMock(returncode=1)) as m:
            assert run(spark_dist, py_dockerfile=py, env=ENV) == 1
        assert m.call_count == 1
        assert "Failed to build Spark JVM Docker image" in capsys.readouterr().err

    def test_binding_failure_halts_remaining(self, spark_dist: Path, capsys) -> None:
        py = "kubernetes/dockerfiles/spark/bindings/python/Dockerfile"
        r = "kubernetes/dockerfiles/spark/bindings/R/Dockerfile"
        with patch("subprocess.run") as m:
            m.side_effect = [MagicMock(returncode=0), MagicMock(returncode=1)]
            assert run(spark_dist, py_dockerfile=py, r_dockerfile=r, env=ENV) == 1
        assert m.call_count == 2
        assert "Failed to build PySpark Docker image" in capsys.readouterr().err

    def test_returns_1_when_docker_not_installed(self, spark_dist: Path, capsys) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError):
            assert run(spark_dist, env=ENV) == 1
        assert "docker is not installed" in capsys.readouterr().err

    def test_dry_run_prints_commands(self, spark_dist: Path, capsys) -> None:
        with patch("subprocess.run") as m:
            assert run(spark_dist, tag="testing", dry_run=True, env=ENV) == 0
        assert not m.called
        out = capsys.readouterr().out
        assert "[dry-run] would: docker build" in out
        assert "spark:testing" in out
