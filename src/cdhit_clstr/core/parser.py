"""
Streaming parser for CD-HIT ``.clstr`` cluster reports.

A report is a sequence of blocks, each opened by a ``>Cluster N`` header and
followed by one line per member::

    >Cluster 0
    0	304aa, >seq1... *
    1	300aa, >seq2... at 99.7%

``ClstrParser`` reads one line at a time and yields one ``Cluster`` per
block, so memory stays bounded by the largest cluster rather than the file.
"""

import re
from typing import IO, Iterable, Iterator, List, Optional, Union

from .exceptions import (
    ClstrReadError,
    InvalidHeaderError,
    InvalidIdentityError,
    InvalidMemberLineError,
    MemberBeforeHeaderError,
    ParseError,
)
from .types import Cluster, ClusterMember, Identity, PathLike, SequenceUnit
from ..utils.file_operations import open_text
from ..utils.logging import LoggerMixin


HEADER_PATTERN = re.compile(r"^>Cluster\s+(?P<id>\d+)\s*$")

# Lines starting with an index, indented or not, are member lines; anything
# else is noise.
MEMBER_PREFIX = re.compile(r"^\s*\d+\s")

MEMBER_PATTERN = re.compile(
    r"^\s*(?P<index>\d+)\s+"
    r"(?P<length>\d+)(?P<unit>[A-Za-z]+),\s+"
    r">(?P<sequence_id>.+)\.\.\.\s+"
    r"(?P<tail>\*|at\s+.+?)\s*$"
)

PERCENTAGE_PATTERN = re.compile(r"^(?P<value>\d+(?:\.(?P<fraction>\d+))?)%$")

NOT_REPORTED = "-"


def parse_percentage(token: str, line_number: Optional[int] = None, line: Optional[str] = None):
    """
    Parse a ``99.7%`` token.

    Returns:
        Tuple of (value, number of fractional digits)

    Raises:
        InvalidIdentityError: If the token is not a non-negative percentage
    """
    match = PERCENTAGE_PATTERN.match(token)
    if not match:
        raise InvalidIdentityError(
            f"Invalid identity percentage: {token!r}",
            line_number=line_number,
            line=line,
        )
    fraction = match.group("fraction")
    return float(match.group("value")), len(fraction) if fraction else 0


def parse_identity(notation: str, line_number: Optional[int] = None, line: Optional[str] = None) -> Identity:
    """
    Parse the text after ``at`` in a member line.

    Accepted forms are ``X%``, ``X%/Y%``, ``-/Y%`` and ``X%/-``.
    """
    parts = notation.split("/")
    if len(parts) > 2:
        raise InvalidIdentityError(
            f"Too many identity values: {notation!r}",
            line_number=line_number,
            line=line,
        )

    values = []
    precision = []
    for part in parts:
        if part == NOT_REPORTED:
            values.append(None)
            precision.append(None)
        else:
            value, digits = parse_percentage(part, line_number, line)
            values.append(value)
            precision.append(digits)

    if len(parts) == 1:
        if values[0] is None:
            raise InvalidIdentityError(
                f"Identity is not reported: {notation!r}",
                line_number=line_number,
                line=line,
            )
        return Identity(primary=values[0], precision=(precision[0], None))

    primary, secondary = values
    if primary is None and secondary is None:
        raise InvalidIdentityError(
            f"Identity is not reported on either side: {notation!r}",
            line_number=line_number,
            line=line,
        )
    return Identity(
        primary=primary,
        secondary=secondary,
        reciprocal=secondary is None,
        precision=(precision[0], precision[1]),
    )


def parse_header_line(line: str, line_number: Optional[int] = None) -> int:
    """Return the cluster id of a ``>Cluster N`` line."""
    match = HEADER_PATTERN.match(line)
    if not match:
        raise InvalidHeaderError(
            f"Invalid cluster header: {line!r}",
            line_number=line_number,
            line=line,
        )
    return int(match.group("id"))


def parse_member_line(line: str, line_number: Optional[int] = None) -> ClusterMember:
    """
    Parse one member line.

    Raises:
        InvalidMemberLineError: If the line structure is not recognized
        InvalidIdentityError: If the identity notation is malformed
    """
    match = MEMBER_PATTERN.match(line)
    if not match:
        raise InvalidMemberLineError(
            f"Invalid member line: {line!r}",
            line_number=line_number,
            line=line,
        )

    try:
        unit = SequenceUnit(match.group("unit"))
    except ValueError:
        raise InvalidMemberLineError(
            f"Unknown length unit {match.group('unit')!r}",
            line_number=line_number,
            line=line,
        ) from None

    tail = match.group("tail")
    if tail == "*":
        is_representative = True
        identity = None
    else:
        is_representative = False
        identity = parse_identity(tail[2:].strip(), line_number, line)

    return ClusterMember(
        index=int(match.group("index")),
        length=int(match.group("length")),
        sequence_id=match.group("sequence_id"),
        is_representative=is_representative,
        identity=identity,
        unit=unit,
    )


class ClstrParser(LoggerMixin):
    """
    Iterator over the clusters of a ``.clstr`` stream.

    Each ``next()`` returns a ``Cluster`` or raises a ``ParseError`` subclass
    describing the offending line or cluster. The parser stays usable after
    an error: the following ``next()`` resumes with the rest of the input.
    Iteration is forward-only and cannot be restarted.

    The parser does not close streams it was given; use ``from_path`` or the
    context-manager protocol when the parser should own the handle.

    Example:
        >>> with ClstrParser.from_path("clusters.clstr") as parser:
        ...     for cluster in parser:
        ...         print(cluster.id, cluster.size)
    """

    def __init__(self, stream: Union[IO[str], IO[bytes], Iterable], encoding: str = "utf-8"):
        """
        Initialize parser.

        Args:
            stream: Readable text or binary stream (any iterable of lines)
            encoding: Encoding used when the stream yields bytes
        """
        self.stream = stream
        self.encoding = encoding
        self.line_number = 0
        self.clusters_parsed = 0
        self.skipped_lines = 0

        self._lines = iter(stream)
        self._current_id: Optional[int] = None
        self._current_members: List[ClusterMember] = []
        self._finished = False
        self._owns_stream = False
        # Set by an invalid header: the buffered cluster is complete and the
        # members that follow belong to no cluster.
        self._flush_pending = False
        self._discarding = False

    @classmethod
    def from_path(cls, file_path: PathLike, encoding: str = "utf-8") -> "ClstrParser":
        """
        Open a ``.clstr`` file (gzip-compressed if it ends in ``.gz``).

        Raises:
            FileSystemError: If the file cannot be opened
        """
        parser = cls(open_text(file_path, "r", encoding=encoding), encoding=encoding)
        parser._owns_stream = True
        parser.logger.debug(f"Opened cluster file {file_path}")
        return parser

    def __iter__(self) -> "ClstrParser":
        return self

    def __next__(self) -> Cluster:
        if self._finished:
            raise StopIteration

        if self._flush_pending:
            self._flush_pending = False
            return self._finish_cluster(None)

        while True:
            line = self._read_line()
            if line is None:
                self._finished = True
                self.logger.debug(
                    f"Parsed {self.clusters_parsed} clusters from {self.line_number} lines "
                    f"({self.skipped_lines} skipped)"
                )
                if self._current_id is not None:
                    return self._finish_cluster(None)
                raise StopIteration

            if line.startswith(">"):
                try:
                    cluster_id = parse_header_line(line, self.line_number)
                except InvalidHeaderError:
                    self._flush_pending = self._current_id is not None
                    self._discarding = True
                    raise
                self._discarding = False
                if self._current_id is not None:
                    return self._finish_cluster(cluster_id)
                self._start_cluster(cluster_id)
            elif MEMBER_PREFIX.match(line) and self._discarding:
                self.logger.warning(f"Skipping line {self.line_number} under an invalid cluster header")
                self.skipped_lines += 1
            elif MEMBER_PREFIX.match(line):
                member = parse_member_line(line, self.line_number)
                if self._current_id is None:
                    raise MemberBeforeHeaderError(
                        "Member line appears before any cluster header",
                        line_number=self.line_number,
                        line=line,
                    )
                self._current_members.append(member)
            else:
                self.skipped_lines += 1

    def _read_line(self) -> Optional[str]:
        try:
            raw = next(self._lines)
        except StopIteration:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise ClstrReadError(
                f"Failed to read cluster stream after line {self.line_number}: {e}",
                line_number=self.line_number + 1,
            ) from e

        self.line_number += 1
        if isinstance(raw, bytes):
            try:
                raw = raw.decode(self.encoding)
            except UnicodeDecodeError as e:
                raise ClstrReadError(
                    f"Cannot decode line {self.line_number} as {self.encoding}",
                    line_number=self.line_number,
                ) from e
        return raw.rstrip("\r\n")

    def _start_cluster(self, cluster_id: int) -> None:
        self._current_id = cluster_id
        self._current_members = []

    def _finish_cluster(self, next_id: Optional[int]) -> Cluster:
        """Complete the buffered cluster and start the next one, if any."""
        cluster = Cluster(id=self._current_id, members=tuple(self._current_members))
        if next_id is None:
            self._current_id = None
            self._current_members = []
        else:
            self._start_cluster(next_id)

        # Representative count is checked once the block is complete.
        cluster.validate()
        self.clusters_parsed += 1
        return cluster

    def close(self) -> None:
        """Close the underlying stream if the parser opened it."""
        if self._owns_stream:
            self.stream.close()

    def __enter__(self) -> "ClstrParser":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def from_path(file_path: PathLike, encoding: str = "utf-8") -> ClstrParser:
    """Open a ``.clstr`` file for parsing."""
    return ClstrParser.from_path(file_path, encoding=encoding)


def from_stream(stream: Union[IO[str], IO[bytes], Iterable], encoding: str = "utf-8") -> ClstrParser:
    """Parse an already-open stream; the caller keeps ownership of it."""
    return ClstrParser(stream, encoding=encoding)


def iter_clusters(file_path: PathLike, encoding: str = "utf-8") -> Iterator[Cluster]:
    """Yield the clusters of a file, closing it when iteration ends."""
    with ClstrParser.from_path(file_path, encoding=encoding) as parser:
        yield from parser


def read_clusters(source: Union[PathLike, IO[str], IO[bytes], Iterable], encoding: str = "utf-8") -> List[Cluster]:
    """
    Collect every cluster of a path or stream into a list.

    Raises:
        ParseError: At the first malformed line or invalid cluster
    """
    if isinstance(source, (str, bytes)) or hasattr(source, "__fspath__"):
        with ClstrParser.from_path(source, encoding=encoding) as parser:
            return list(parser)
    return list(ClstrParser(source, encoding=encoding))


__all__ = [
    "ClstrParser",
    "ParseError",
    "from_path",
    "from_stream",
    "iter_clusters",
    "parse_header_line",
    "parse_identity",
    "parse_member_line",
    "read_clusters",
]
