"""Cluster Greeter - fan-out greeting aggregation across sibling nodes."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("cluster-greeter")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"
