"""Data model, parser and writer for .clstr cluster reports."""

from .exceptions import (
    ClstrError,
    ParseError,
    InvalidHeaderError,
    InvalidMemberLineError,
    InvalidIdentityError,
    MemberBeforeHeaderError,
    MultipleRepresentativesError,
    NoRepresentativeError,
    ClusterOrderError,
    ClstrReadError,
    WriteError,
    ClstrWriteIOError,
    InvalidClusterError,
    ConfigurationError,
    FileSystemError,
    SequenceNotFoundError,
)
from .types import Cluster, ClusterMember, Identity, SequenceUnit
from .parser import ClstrParser
from .writer import ClstrWriter

__all__ = [
    "ClstrError",
    "ParseError",
    "InvalidHeaderError",
    "InvalidMemberLineError",
    "InvalidIdentityError",
    "MemberBeforeHeaderError",
    "MultipleRepresentativesError",
    "NoRepresentativeError",
    "ClusterOrderError",
    "ClstrReadError",
    "WriteError",
    "ClstrWriteIOError",
    "InvalidClusterError",
    "ConfigurationError",
    "FileSystemError",
    "SequenceNotFoundError",
    "Cluster",
    "ClusterMember",
    "Identity",
    "SequenceUnit",
    "ClstrParser",
    "ClstrWriter",
]
