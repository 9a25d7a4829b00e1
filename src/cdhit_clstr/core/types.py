"""
Type definitions for cdhit-clstr.

This module defines the value records shared by the parser and the writer:
clusters, their members and the identity annotation of non-representative
members.
"""

from typing import Iterator, Optional, Tuple, Union
from dataclasses import dataclass, field, replace
from pathlib import Path
from enum import Enum

from .exceptions import (
    InvalidClusterError,
    MultipleRepresentativesError,
    NoRepresentativeError,
)


PathLike = Union[str, Path]

DEFAULT_PRECISION = 1


class SequenceUnit(str, Enum):
    """Unit tag printed after a sequence length."""

    AMINO_ACID = "aa"
    NUCLEOTIDE = "nt"


def format_percentage(value: float, precision: Optional[int], default_precision: int) -> str:
    """Format a percentage with its stored precision, or the default one."""
    digits = default_precision if precision is None else precision
    return f"{value:.{digits}f}%"


@dataclass(frozen=True)
class Identity:
    """
    Percent identity of a member to its cluster representative.

    One-way clustering reports only ``primary``; 2-d clustering may report a
    ``secondary`` percentage as well. A side printed as ``-`` is stored as
    ``None``. ``reciprocal`` marks the ``X%/-`` notation so that it is written
    back unchanged. ``precision`` holds the number of fractional digits seen
    in the source for each side and does not take part in equality.
    """

    primary: Optional[float] = None
    secondary: Optional[float] = None
    reciprocal: bool = False
    precision: Tuple[Optional[int], Optional[int]] = field(
        default=(None, None), compare=False
    )

    def __post_init__(self):
        """Validate the identity pair."""
        if self.primary is None and self.secondary is None:
            raise ValueError("Identity needs at least one percentage")
        if self.reciprocal and (self.primary is None or self.secondary is not None):
            raise ValueError("Reciprocal identity needs a primary percentage only")
        for value in (self.primary, self.secondary):
            if value is not None and value < 0:
                raise ValueError(f"Identity percentage must be non-negative: {value}")

    def as_pair(self) -> Tuple[Optional[float], Optional[float]]:
        """Return the (primary, secondary) percentages."""
        return self.primary, self.secondary

    def format(self, default_precision: int = DEFAULT_PRECISION) -> str:
        """Return the notation following ``at`` in a member line."""
        primary_precision, secondary_precision = self.precision
        if self.secondary is None:
            text = format_percentage(self.primary, primary_precision, default_precision)
            return f"{text}/-" if self.reciprocal else text

        secondary = format_percentage(self.secondary, secondary_precision, default_precision)
        if self.primary is None:
            return f"-/{secondary}"
        primary = format_percentage(self.primary, primary_precision, default_precision)
        return f"{primary}/{secondary}"


@dataclass(frozen=True)
class ClusterMember:
    """A single sequence entry of a cluster."""

    index: int
    length: int
    sequence_id: str
    is_representative: bool = False
    identity: Optional[Identity] = None
    unit: SequenceUnit = SequenceUnit.AMINO_ACID

    @property
    def length_unit(self) -> str:
        """Return the length with its unit tag, e.g. ``304aa``."""
        return f"{self.length}{self.unit.value}"

    @property
    def has_consistent_identity(self) -> bool:
        """Representatives carry no identity; every other member carries one."""
        return self.is_representative == (self.identity is None)

    def format_problem(self) -> Optional[str]:
        """Describe why this member cannot be written as a member line, if it cannot."""
        if self.index < 0:
            return f"has a negative index ({self.index})"
        if self.length < 0:
            return f"has a negative length ({self.length})"
        if not self.sequence_id:
            return "has an empty sequence id"
        if "\n" in self.sequence_id or "\r" in self.sequence_id:
            return f"has a line break in its sequence id {self.sequence_id!r}"
        return None


@dataclass(frozen=True)
class Cluster:
    """A cluster block: its header id and its members in source order."""

    id: int
    members: Tuple[ClusterMember, ...] = ()

    def __post_init__(self):
        """Store members as a tuple so yielded clusters stay immutable."""
        if not isinstance(self.members, tuple):
            object.__setattr__(self, "members", tuple(self.members))

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[ClusterMember]:
        return iter(self.members)

    @property
    def size(self) -> int:
        """Return the number of members."""
        return len(self.members)

    @property
    def representative_count(self) -> int:
        return sum(1 for member in self.members if member.is_representative)

    @property
    def representative(self) -> Optional[ClusterMember]:
        """Return the first representative member, if any."""
        for member in self.members:
            if member.is_representative:
                return member
        return None

    @property
    def sequence_ids(self) -> Tuple[str, ...]:
        return tuple(member.sequence_id for member in self.members)

    def renumbered(self, new_id: int) -> "Cluster":
        """Return a copy of this cluster with another id."""
        return replace(self, id=new_id)

    def validate(self) -> None:
        """
        Check the structural invariants of the cluster.

        Raises:
            NoRepresentativeError: If no member is the representative
            MultipleRepresentativesError: If more than one member is
            InvalidClusterError: If a member cannot be written as a member
                line, or its identity disagrees with its representative status
        """
        count = self.representative_count
        if count == 0:
            raise NoRepresentativeError(
                f"Cluster {self.id} has no representative member",
                cluster_id=self.id,
            )
        if count > 1:
            raise MultipleRepresentativesError(
                f"Cluster {self.id} has {count} representative members",
                cluster_id=self.id,
            )
        for member in self.members:
            problem = member.format_problem()
            if problem:
                raise InvalidClusterError(
                    f"Member {member.index} of cluster {self.id} {problem}",
                    cluster_id=self.id,
                )
            if not member.has_consistent_identity:
                raise InvalidClusterError(
                    f"Member {member.sequence_id} of cluster {self.id} "
                    f"{'has' if member.is_representative else 'lacks'} an identity",
                    cluster_id=self.id,
                )
