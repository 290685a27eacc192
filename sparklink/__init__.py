"""SparkLink - portfolio builder API and dashboard client."""

__version__ = "0.1.0"
