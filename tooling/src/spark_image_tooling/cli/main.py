"""Main CLI entry point: spark-image-tool [options] build|push."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

from spark_image_tooling.config import DISABLED, empty_config, find_config, load_tool_config
from spark_image_tooling.distribution import load_spark_env, resolve_spark_home
from spark_image_tooling.docker import minikube_docker_env, run_build, run_push

log = logging.getLogger(__name__)

PROG = "spark-image-tool"
COMMANDS = ("build", "push")

USAGE = f"""\
Usage: {PROG} [options] [command]
Builds or pushes the built-in Spark Docker image.

Commands:
  build       Build image. Requires a repository address to be provided if the image will be
              pushed to a different registry.
  push        Push a pre-built image to a registry. Requires a repository address to be provided.

Options:
  -f file               Dockerfile to build for JVM based Jobs. By default builds the Dockerfile shipped with Spark.
  -p file               (Optional) Dockerfile to build for PySpark Jobs. Builds Python dependencies and ships with Spark.
                        Skips building PySpark docker image if not specified.
  -R file               (Optional) Dockerfile to build for SparkR Jobs. Builds R dependencies and ships with Spark.
                        Skips building SparkR docker image if not specified.
  -r repo               Repository address.
  -t tag                Tag to apply to the built image, or to identify the image to be pushed.
  -m                    Use minikube's Docker daemon.
  -n                    Build docker image with --no-cache
  -b arg                Build arg to build or push the image. For multiple build args, this option needs to
                        be used separately for each build arg.
  --config file         YAML file with defaults (default: $SPARK_HOME/conf/docker-image-tool.yaml).
  --dry-run             Print docker commands instead of running them.
  --verbose             Debug logging.

Using minikube when building images will do so directly into minikube's Docker daemon.
There is no need to push the images into minikube in that case, they'll be automatically
available when running applications inside the minikube cluster.

Examples:
  - Build image in minikube with tag "testing"
    {PROG} -m -t testing build

  - Build PySpark docker image
    {PROG} -r docker.io/myrepo -t v2.3.0 -p kubernetes/dockerfiles/spark/bindings/python/Dockerfile build

  - Build and push image with tag "v2.3.0" to docker.io/myrepo
    {PROG} -r docker.io/myrepo -t v2.3.0 build
    {PROG} -r docker.io/myrepo -t v2.3.0 push
"""


def usage(file: Any = None) -> None:
    print(USAGE, end="", file=file or sys.stdout)


class _ArgumentParser(argparse.ArgumentParser):
    """Parse errors print usage and exit 1 instead of argparse's exit 2."""

    def error(self, message: str) -> NoReturn:
        print(f"Error: {message}", file=sys.stderr)
        usage(sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(prog=PROG, add_help=False)
    ap.add_argument("-f", dest="base_dockerfile", metavar="file")
    ap.add_argument("-p", dest="py_dockerfile", metavar="file")
    ap.add_argument("-R", dest="r_dockerfile", metavar="file")
    ap.add_argument("-r", dest="repo", metavar="repo")
    ap.add_argument("-t", dest="tag", metavar="tag")
    ap.add_argument("-m", dest="minikube", action="store_true")
    ap.add_argument("-n", dest="no_cache", action="store_true")
    ap.add_argument("-b", dest="build_args", action="append", default=[], metavar="arg")
    ap.add_argument("--config", type=Path, default=None)
    ap.add_argument("--dry-run", action="store_true")
    ap.add_argument("--verbose", action="store_true")
    ap.add_argument("command", nargs="*")
    return ap


def _cli_dockerfile(value: str | None) -> str | None:
    """Command-line paths are relative to the invocation directory."""
    if value is None:
        return None
    return str(Path(value).resolve())


def _cli_binding_dockerfile(value: str) -> str | None:
    """Like _cli_dockerfile, but the literal "false" disables the binding image."""
    return None if value == DISABLED else _cli_dockerfile(value)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def run_argv(argv: list[str] | None = None) -> int:
    """Parse argv, then run build or push. Returns the process exit code."""
    if argv is None:
        argv = sys.argv[1:]
    if "-h" in argv or "--help" in argv:
        usage()
        return 0

    args = build_parser().parse_intermixed_args(argv)
    _configure_logging(args.verbose)

    command = args.command[-1] if args.command else None
    if command not in COMMANDS:
        if command is not None:
            print(f"Error: Unknown command: {command}", file=sys.stderr)
        usage(sys.stderr)
        return 1

    spark_home = resolve_spark_home()
    config_path = find_config(spark_home, args.config)
    if config_path is None:
        cfg = empty_config()
    else:
        try:
            cfg = load_tool_config(config_path)
        except ValueError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1

    repo = args.repo or cfg["repository"]
    tag = args.tag or cfg["tag"]

    if command == "push" and not repo:
        usage(sys.stderr)
        return 1

    env = load_spark_env(spark_home)
    if env is None:
        return 1
    if args.minikube:
        env = minikube_docker_env(env)
        if env is None:
            return 1

    if command == "push":
        return run_push(repo, tag, env=env, cwd=spark_home, dry_run=args.dry_run)

    dockerfiles = cfg["dockerfiles"]
    py_dockerfile = (
        _cli_binding_dockerfile(args.py_dockerfile)
        if args.py_dockerfile is not None
        else dockerfiles["python"]
    )
    r_dockerfile = (
        _cli_binding_dockerfile(args.r_dockerfile)
        if args.r_dockerfile is not None
        else dockerfiles["r"]
    )
    return run_build(
        spark_home,
        repo=repo,
        tag=tag,
        base_dockerfile=_cli_dockerfile(args.base_dockerfile) or dockerfiles["base"],
        py_dockerfile=py_dockerfile,
        r_dockerfile=r_dockerfile,
        no_cache=args.no_cache or cfg["no_cache"],
        build_params=[*cfg["build_args"], *args.build_args],
        env=env,
        layout=cfg["layout"],
        dry_run=args.dry_run,
    )


def main() -> None:
    """Main CLI entry point."""
    sys.exit(run_argv())


if __name__ == "__main__":
    main()
