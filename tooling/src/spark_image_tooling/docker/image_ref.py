"""Image names and fully-qualified image references."""

from __future__ import annotations

SPARK_IMAGE = "spark"
PYSPARK_IMAGE = "spark-py"
SPARKR_IMAGE = "spark-r"

# Push order; build order is the same (bindings layer on the base image).
IMAGE_NAMES: tuple[str, ...] = (SPARK_IMAGE, PYSPARK_IMAGE, SPARKR_IMAGE)


def image_ref(
    image: str,
    repo: str | None = None,
    tag: str | None = None,
    add_repo: bool = True,
) -> str:
    """Return image, repo/image, image:tag or repo/image:tag. Empty repo/tag count as unset."""
    ref = image
    if add_repo and repo:
        ref = f"{repo}/{ref}"
    if tag:
        ref = f"{ref}:{tag}"
    return ref
