"""
Visualization Advisor Exception Hierarchy.

This module defines the exception hierarchy for the advisor, providing clear
categorization of errors and standardized error handling across ingestion,
profiling, and configuration.

Exception Severity Levels:
    - FATAL: Stop all processing immediately (bad configuration)
    - CRITICAL: Abort the current ingest (unparseable or empty input)
    - RECOVERABLE: Log error, return a degraded result, continue
    - WARNING: Log warning, processing continues (a skipped row)

Fatal ingestion errors carry the rows processed and columns discovered so far,
so callers can decide whether to retry with a smaller file or a relaxed parser.
"""

from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorSeverity(Enum):
    """
    Classify error severity for handling decisions.

    Attributes:
        FATAL: Unrecoverable error, stop all processing
        CRITICAL: Ingest-level error, abort this ingest
        RECOVERABLE: Component-level error, degrade and continue
        WARNING: Non-critical issue, log and continue
    """
    FATAL = "fatal"
    CRITICAL = "critical"
    RECOVERABLE = "recoverable"
    WARNING = "warning"


class VisualizationAdvisorError(Exception):
    """
    Base exception for all advisor errors with enhanced context.

    Provides:
    - Severity classification for handling decisions
    - Structured details dictionary for logging/reporting
    - Original exception preservation for debugging
    - Serialization support for JSON/dict output

    Attributes:
        message (str): Human-readable error message
        severity (ErrorSeverity): Error severity level
        details (Dict[str, Any]): Additional context (file name, offsets, etc.)
        original_exception (Optional[Exception]): Original exception if wrapping

    Example:
        >>> try:
        ...     rows = parse(payload)
        ... except ValueError as e:
        ...     raise VisualizationAdvisorError(
        ...         "Parsing failed",
        ...         severity=ErrorSeverity.CRITICAL,
        ...         details={'file': 'sales.csv'},
        ...         original_exception=e
        ...     )
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.RECOVERABLE,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize exception to dictionary for logging/reporting.

        Returns:
            Dictionary containing exception details suitable for JSON serialization
        """
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'severity': self.severity.value,
            'details': self.details,
            'original_error': str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Configuration Errors (Fatal)
# ============================================================================

class ConfigError(VisualizationAdvisorError):
    """
    Configuration errors (fatal - stop all processing).

    Raised when:
    - Configuration file not found or not valid YAML
    - Configuration file exceeds the size limit

    Attributes:
        field (Optional[str]): Specific config field that caused error
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.FATAL,
            details={'field': field} if field else {}
        )
        self.field = field


class ConfigValidationError(ConfigError):
    """
    Configuration values failed validation.

    Raised for unknown keys or values outside their allowed range.

    Example:
        >>> raise ConfigValidationError(
        ...     "max_rows_to_keep must be positive",
        ...     field="max_rows_to_keep",
        ...     expected="> 0",
        ...     actual="-1"
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None
    ):
        super().__init__(message, field)
        self.details.update({
            'expected': expected,
            'actual': actual
        })


# ============================================================================
# Ingestion Errors (Critical)
# ============================================================================

class IngestionError(VisualizationAdvisorError):
    """
    Base class for fatal ingestion errors.

    Every ingestion error records how far the ingest got before failing.

    Attributes:
        file_name (Optional[str]): Name of the file being ingested
        rows_processed (int): Valid rows counted before the failure
        columns (List[str]): Column names discovered before the failure
    """

    def __init__(
        self,
        message: str,
        file_name: Optional[str] = None,
        rows_processed: int = 0,
        columns: Optional[List[str]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={
                'file_name': file_name,
                'rows_processed': rows_processed,
                'columns': list(columns or []),
            },
            original_exception=original_exception
        )
        self.file_name = file_name
        self.rows_processed = rows_processed
        self.columns = list(columns or [])


class ParseError(IngestionError):
    """
    The byte stream is not valid delimited text or JSON.

    Attributes:
        byte_offset (Optional[int]): Offset of the failure, when the parser reports one

    Example:
        >>> raise ParseError(
        ...     "Unexpected token in JSON payload",
        ...     file_name="sales.json",
        ...     byte_offset=1024
        ... )
    """

    def __init__(
        self,
        message: str,
        file_name: Optional[str] = None,
        byte_offset: Optional[int] = None,
        rows_processed: int = 0,
        columns: Optional[List[str]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            file_name=file_name,
            rows_processed=rows_processed,
            columns=columns,
            original_exception=original_exception
        )
        self.byte_offset = byte_offset
        self.details['byte_offset'] = byte_offset


class EmptyDataError(IngestionError):
    """Parsing finished but produced zero usable rows."""


class UnsupportedFormatError(IngestionError):
    """
    Declared file format is not supported.

    Attributes:
        file_format (str): The format that was requested
        supported_formats (list): Formats the pipeline accepts
    """

    def __init__(self, file_format: str, supported_formats: list, file_name: Optional[str] = None):
        super().__init__(
            f"Unsupported file format '{file_format}'. "
            f"Supported formats: {', '.join(supported_formats)}",
            file_name=file_name
        )
        self.file_format = file_format
        self.supported_formats = supported_formats
        self.details.update({
            'file_format': file_format,
            'supported_formats': supported_formats
        })


class IngestionCancelledError(IngestionError):
    """The caller cancelled the ingest; partial totals were discarded."""


class RowSkipped(VisualizationAdvisorError):
    """
    A single malformed row was skipped during chunked parsing.

    Never raised out of the pipeline: instances are built for logging and
    counted on the ingest result.

    Attributes:
        row_number (Optional[int]): Position of the row in the stream, when known
        reason (str): Why the row was rejected
    """

    def __init__(self, reason: str, row_number: Optional[int] = None, raw: Any = None):
        super().__init__(
            f"Row skipped: {reason}",
            severity=ErrorSeverity.WARNING,
            details={'row_number': row_number, 'raw': str(raw)[:200] if raw is not None else None}
        )
        self.reason = reason
        self.row_number = row_number


# ============================================================================
# Profiler Errors (Recoverable)
# ============================================================================

class ProfilerError(VisualizationAdvisorError):
    """
    Profiling failed for a field or dataset.

    Attributes:
        field (Optional[str]): Field being profiled when the error occurred
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.RECOVERABLE,
            details={'field': field} if field else {},
            original_exception=original_exception
        )
        self.field = field
