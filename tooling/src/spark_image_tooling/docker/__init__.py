"""Docker helpers: image references, build and push orchestration, minikube daemon redirection."""

from .build import docker_build_cmd
from .build import run as run_build
from .image_ref import IMAGE_NAMES, PYSPARK_IMAGE, SPARK_IMAGE, SPARKR_IMAGE, image_ref
from .minikube import docker_env as minikube_docker_env
from .push import docker_push
from .push import run as run_push

__all__ = [
    "IMAGE_NAMES",
    "PYSPARK_IMAGE",
    "SPARKR_IMAGE",
    "SPARK_IMAGE",
    "docker_build_cmd",
    "docker_push",
    "image_ref",
    "minikube_docker_env",
    "run_build",
    "run_push",
]
