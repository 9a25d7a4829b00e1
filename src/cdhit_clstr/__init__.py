"""
cdhit-clstr
===========

Streaming reader and writer for the ``.clstr`` cluster reports written by
CD-HIT and CD-HIT-EST, with command-line tools built on top of them.

This package provides:
- A lazy parser that yields one cluster at a time
- A writer that reproduces the canonical text of each cluster
- Cluster selection, statistics and FASTA extraction tools

Modules:
    core: Data model, parser, writer and exceptions
    analysis: Cluster statistics, selection and sequence extraction
    cli: Command-line interface
    config: Configuration management
    utils: Logging, file handling and validation helpers

Example:
    >>> from cdhit_clstr import ClstrParser
    >>> with ClstrParser.from_path("clusters.clstr") as parser:
    ...     for cluster in parser:
    ...         print(cluster.id, cluster.size)
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("cdhit-clstr")
except PackageNotFoundError:
    __version__ = "unknown"

__license__ = "MIT"

# Core imports
from .core.types import Cluster, ClusterMember, Identity, SequenceUnit
from .core.parser import ClstrParser, read_clusters, iter_clusters
from .core.writer import ClstrWriter, write_clusters
from .core.exceptions import (
    ClstrError,
    ParseError,
    WriteError,
    InvalidClusterError,
)
from .config.settings import get_settings

# Main API
__all__ = [
    "__version__",
    "Cluster",
    "ClusterMember",
    "Identity",
    "SequenceUnit",
    "ClstrParser",
    "ClstrWriter",
    "read_clusters",
    "iter_clusters",
    "write_clusters",
    "ClstrError",
    "ParseError",
    "WriteError",
    "InvalidClusterError",
    "get_settings",
]
