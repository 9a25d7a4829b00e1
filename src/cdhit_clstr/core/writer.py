"""
Writer for CD-HIT ``.clstr`` cluster reports.

``ClstrWriter`` is the inverse of ``ClstrParser``: every cluster pushed into
it is validated and written in canonical form before the call returns.
"""

from typing import IO, Iterable

from .exceptions import (
    ClstrWriteIOError,
    InvalidClusterError,
    ParseError,
)
from .types import DEFAULT_PRECISION, Cluster, ClusterMember, PathLike
from ..utils.file_operations import open_text
from ..utils.logging import LoggerMixin


def format_member_line(member: ClusterMember, default_precision: int = DEFAULT_PRECISION) -> str:
    """Return the canonical text of a member line, without line ending."""
    line = f"{member.index}\t{member.length_unit}, >{member.sequence_id}..."
    if member.is_representative:
        return f"{line} *"
    return f"{line} at {member.identity.format(default_precision)}"


def format_cluster(cluster: Cluster, default_precision: int = DEFAULT_PRECISION) -> str:
    """Return the canonical text of a whole cluster block."""
    lines = [f">Cluster {cluster.id}"]
    lines.extend(format_member_line(member, default_precision) for member in cluster.members)
    return "\n".join(lines) + "\n"


class ClstrWriter(LoggerMixin):
    """
    Push-style writer of ``.clstr`` clusters.

    The writer never closes a stream it was given; ``close()`` only flushes
    it. Writers created with ``to_path`` own their file and close it.
    """

    def __init__(self, stream: IO[str], default_precision: int = DEFAULT_PRECISION):
        """
        Initialize writer.

        Args:
            stream: Writable text stream
            default_precision: Decimal places for percentages that carry no
                precision of their own
        """
        self.stream = stream
        self.default_precision = default_precision
        self.clusters_written = 0
        self._owns_stream = False

    @classmethod
    def to_path(
        cls,
        file_path: PathLike,
        default_precision: int = DEFAULT_PRECISION,
        encoding: str = "utf-8",
    ) -> "ClstrWriter":
        """
        Create a ``.clstr`` file (gzip-compressed if it ends in ``.gz``).

        Raises:
            FileSystemError: If the file cannot be created
        """
        writer = cls(open_text(file_path, "w", encoding=encoding), default_precision=default_precision)
        writer._owns_stream = True
        writer.logger.debug(f"Writing clusters to {file_path}")
        return writer

    def write_cluster(self, cluster: Cluster) -> None:
        """
        Validate and write one cluster.

        Raises:
            InvalidClusterError: If the cluster breaks the representative
                or identity invariants; nothing is written in that case
            ClstrWriteIOError: If the output stream fails
        """
        try:
            cluster.validate()
        except ParseError as e:
            raise InvalidClusterError(e.message, cluster_id=cluster.id) from e
        if cluster.id < 0:
            raise InvalidClusterError(f"Negative cluster id: {cluster.id}", cluster_id=cluster.id)

        text = format_cluster(cluster, self.default_precision)
        try:
            self.stream.write(text)
        except OSError as e:
            raise ClstrWriteIOError(f"Failed to write cluster {cluster.id}: {e}") from e
        self.clusters_written += 1

    def write_clusters(self, clusters: Iterable[Cluster]) -> int:
        """Write every cluster of an iterable and return how many were written."""
        count = 0
        for cluster in clusters:
            self.write_cluster(cluster)
            count += 1
        return count

    def flush(self) -> None:
        """Push buffered output to the underlying sink."""
        try:
            self.stream.flush()
        except OSError as e:
            raise ClstrWriteIOError(f"Failed to flush cluster output: {e}") from e

    def close(self) -> None:
        """Flush, and close the stream if the writer opened it."""
        try:
            self.flush()
        finally:
            if self._owns_stream:
                try:
                    self.stream.close()
                except OSError as e:
                    raise ClstrWriteIOError(f"Failed to close cluster output: {e}") from e
                self.logger.debug(f"Wrote {self.clusters_written} clusters")

    def __enter__(self) -> "ClstrWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def to_path(file_path: PathLike, default_precision: int = DEFAULT_PRECISION, encoding: str = "utf-8") -> ClstrWriter:
    """Create a ``.clstr`` file for writing."""
    return ClstrWriter.to_path(file_path, default_precision=default_precision, encoding=encoding)


def to_stream(stream: IO[str], default_precision: int = DEFAULT_PRECISION) -> ClstrWriter:
    """Write to an already-open stream; the caller keeps ownership of it."""
    return ClstrWriter(stream, default_precision=default_precision)


def write_clusters(clusters: Iterable[Cluster], file_path: PathLike, default_precision: int = DEFAULT_PRECISION) -> int:
    """Write clusters to a new file and return how many were written."""
    with ClstrWriter.to_path(file_path, default_precision=default_precision) as writer:
        return writer.write_clusters(clusters)
