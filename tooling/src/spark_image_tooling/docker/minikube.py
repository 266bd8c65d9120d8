"""Point the docker client at minikube's Docker daemon (minikube docker-env)."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import sys
from collections.abc import Mapping

log = logging.getLogger(__name__)


def parse_docker_env(text: str) -> tuple[dict[str, str], list[str]]:
    """Parse `minikube docker-env --shell bash` output. Returns (exports, unsets)."""
    exports: dict[str, str] = {}
    unsets: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        words = shlex.split(line)
        if words[0] == "export":
            for word in words[1:]:
                key, sep, value = word.partition("=")
                if sep:
                    exports[key] = value
        elif words[0] == "unset":
            unsets.extend(words[1:])
    return exports, unsets


def docker_env(env: Mapping[str, str]) -> dict[str, str] | None:
    """Return env updated with minikube's docker-env. None if minikube is missing or not running."""
    if not shutil.which("minikube", path=env.get("PATH")):
        print("❌ Cannot find minikube.", file=sys.stderr)
        return None
    try:
        r = subprocess.run(["minikube", "status"], capture_output=True, text=True, env=dict(env))
    except FileNotFoundError:
        print("❌ Cannot find minikube.", file=sys.stderr)
        return None
    if r.returncode != 0:
        print("❌ Cannot contact minikube. Make sure it's running.", file=sys.stderr)
        return None
    r = subprocess.run(
        ["minikube", "docker-env", "--shell", "bash"],
        capture_output=True,
        text=True,
        env=dict(env),
    )
    if r.returncode != 0:
        print("❌ minikube docker-env failed", file=sys.stderr)
        if r.stderr:
            print(r.stderr.rstrip(), file=sys.stderr)
        return None
    try:
        exports, unsets = parse_docker_env(r.stdout)
    except ValueError as e:
        print(f"❌ Cannot parse minikube docker-env output: {e}", file=sys.stderr)
        return None
    log.debug("minikube docker-env: export %s; unset %s", sorted(exports), unsets)
    out = dict(env)
    for key in unsets:
        out.pop(key, None)
    out.update(exports)
    return out
