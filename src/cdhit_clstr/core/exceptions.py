"""
Custom exceptions for cdhit-clstr.

This module defines the exception hierarchy used by the parser, the writer
and the cluster tools so that callers can tell malformed input, invalid
clusters and I/O failures apart.
"""

from typing import Optional, Any, Dict


class ClstrError(Exception):
    """Base exception class for all cdhit-clstr errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize ClstrError.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.details:
            result += f" (Details: {self.details})"
        return result


class ParseError(ClstrError):
    """Raised when a .clstr stream cannot be parsed."""

    default_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize ParseError.

        Args:
            message: Error message
            line_number: 1-based line number of the offending line
            line: The offending line, without its line ending
            **kwargs: Additional arguments passed to parent
        """
        details = kwargs.pop("details", None) or {}
        if line_number is not None:
            details["line_number"] = line_number
        if line is not None:
            details["line"] = line
        kwargs.setdefault("error_code", self.default_code)

        super().__init__(message, details=details, **kwargs)
        self.line_number = line_number
        self.line = line


class InvalidHeaderError(ParseError):
    """Raised when a '>' line is not a valid '>Cluster N' header."""

    default_code = "INVALID_HEADER"


class InvalidMemberLineError(ParseError):
    """Raised when a member line does not have the expected structure."""

    default_code = "INVALID_MEMBER_LINE"


class InvalidIdentityError(ParseError):
    """Raised when the identity notation of a member line is malformed."""

    default_code = "INVALID_IDENTITY"


class MemberBeforeHeaderError(ParseError):
    """Raised when a member line appears before any cluster header."""

    default_code = "MEMBER_BEFORE_HEADER"


class _ClusterParseError(ParseError):
    """Parse error attached to a whole cluster."""

    def __init__(self, message: str, cluster_id: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if cluster_id is not None:
            details["cluster_id"] = cluster_id
        super().__init__(message, details=details, **kwargs)
        self.cluster_id = cluster_id


class MultipleRepresentativesError(_ClusterParseError):
    """Raised when a cluster has more than one representative member."""

    default_code = "MULTIPLE_REPRESENTATIVES"


class NoRepresentativeError(_ClusterParseError):
    """Raised when a cluster has no representative member."""

    default_code = "NO_REPRESENTATIVE"


class ClusterOrderError(_ClusterParseError):
    """Raised when cluster ids are repeated or decreasing."""

    default_code = "CLUSTER_ORDER"

    def __init__(
        self,
        message: str,
        cluster_id: Optional[int] = None,
        previous_id: Optional[int] = None,
        **kwargs
    ):
        details = kwargs.pop("details", None) or {}
        if previous_id is not None:
            details["previous_id"] = previous_id
        super().__init__(message, cluster_id=cluster_id, details=details, **kwargs)
        self.previous_id = previous_id


class ClstrReadError(ParseError):
    """Raised when reading from the underlying stream fails."""

    default_code = "READ_IO"


class WriteError(ClstrError):
    """Raised when a cluster cannot be written."""


class ClstrWriteIOError(WriteError):
    """Raised when the output sink fails."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("error_code", "WRITE_IO")
        super().__init__(message, **kwargs)


class InvalidClusterError(WriteError):
    """Raised when a cluster violates the representative/identity invariants."""

    def __init__(self, message: str, cluster_id: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if cluster_id is not None:
            details["cluster_id"] = cluster_id
        kwargs.setdefault("error_code", "INVALID_CLUSTER")

        super().__init__(message, details=details, **kwargs)
        self.cluster_id = cluster_id


class ConfigurationError(ClstrError):
    """Raised when there's a configuration-related error."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            config_value: Invalid configuration value
            **kwargs: Additional arguments passed to parent
        """
        details = kwargs.get("details", {})
        if config_key:
            details["config_key"] = config_key
        if config_value is not None:
            details["config_value"] = str(config_value)
        kwargs["details"] = details

        super().__init__(message, **kwargs)
        self.config_key = config_key
        self.config_value = config_value


class FileSystemError(ClstrError):
    """Raised when file system operations fail."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs
    ):
        """
        Initialize FileSystemError.

        Args:
            message: Error message
            file_path: Path to the file that caused the error
            operation: File operation that failed
            **kwargs: Additional arguments passed to parent
        """
        details = kwargs.get("details", {})
        if file_path:
            details["file_path"] = file_path
        if operation:
            details["operation"] = operation
        kwargs["details"] = details

        super().__init__(message, **kwargs)
        self.file_path = file_path
        self.operation = operation


class SequenceNotFoundError(ClstrError):
    """Raised when a cluster member is missing from the sequence database."""

    def __init__(self, message: str, sequence_id: Optional[str] = None, **kwargs):
        details = kwargs.get("details", {})
        if sequence_id:
            details["sequence_id"] = sequence_id
        kwargs["details"] = details
        kwargs.setdefault("error_code", "SEQUENCE_NOT_FOUND")

        super().__init__(message, **kwargs)
        self.sequence_id = sequence_id
