"""Build and push the Spark container images (spark, spark-py, spark-r)."""

__version__ = "0.1.0"
