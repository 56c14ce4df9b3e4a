"""
DDD Catalog - Fault Hierarchy

Programming and usage faults raised by the catalog builder. Data-quality
problems in the scanned markers are never raised; they surface as
diagnostics on the build result.

Every fault carries a stable error code and a severity, and marks the
active OpenTelemetry span as failed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode


class ErrorSeverity(Enum):
    """Fault severity levels."""

    ERROR = "error"
    CRITICAL = "critical"


class CatalogError(Exception):
    """Base exception for all catalog faults."""

    default_severity: ErrorSeverity = ErrorSeverity.ERROR
    error_code: str = "CATALOG_ERROR"

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.severity = self.default_severity
        self.cause = cause
        self.suggestions = suggestions or []
        self.timestamp = datetime.now(timezone.utc)

        self._record_to_span()

    def _record_to_span(self) -> None:
        span = trace.get_current_span()
        if span and span.is_recording():
            span.set_status(Status(StatusCode.ERROR, self.message))
            span.record_exception(self)
            span.set_attribute("error.code", self.error_code)
            span.set_attribute("error.severity", self.severity.value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for reports."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "suggestions": self.suggestions,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        if self.cause:
            return f"[{self.error_code}] {self.message} [caused by: {self.cause}]"
        return f"[{self.error_code}] {self.message}"


class CatalogConfigError(CatalogError):
    """The environment holds settings the catalog cannot run with."""

    error_code = "CONFIG_ERROR"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(self, message: str, problems: Optional[List[str]] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.problems = problems or [message]


class DuplicateIdentifierError(CatalogError):
    """A record with the same kind and id is already in the catalog."""

    error_code = "DUPLICATE_IDENTIFIER"

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        identifier: Optional[str] = None,
        existing_ref: Optional[str] = None,
        rejected_ref: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.kind = kind
        self.identifier = identifier
        self.existing_ref = existing_ref
        self.rejected_ref = rejected_ref


class MalformedOccurrenceError(CatalogError):
    """A raw marker occurrence cannot be interpreted at all."""

    error_code = "MALFORMED_OCCURRENCE"

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        actual_value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field_name = field_name
        self.actual_value = actual_value


class ResolutionOrderError(CatalogError):
    """A build phase was invoked before the phase it depends on."""

    error_code = "RESOLUTION_ORDER"
    default_severity = ErrorSeverity.CRITICAL

    def __init__(
        self,
        message: str,
        phase_name: Optional[str] = None,
        required_phase: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.phase_name = phase_name
        self.required_phase = required_phase


class RecordOwnershipError(CatalogError):
    """A record already belongs to a different catalog."""

    error_code = "RECORD_OWNERSHIP"

    def __init__(
        self,
        message: str,
        element_ref: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.element_ref = element_ref
