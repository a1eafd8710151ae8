"""Custom exception classes for the call report application."""


class CallReportException(Exception):
    """Base exception for all call-report-specific errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class InputNotFoundError(CallReportException):
    """Raised when the session or its transcript cannot be loaded."""

    def __init__(self, session_id: str, what: str = "Session"):
        super().__init__(
            message=f"{what} not found or unauthorized: {session_id}",
            details="The report inputs do not exist or belong to another owner"
        )
        self.session_id = session_id


class GeneratorUnavailableError(CallReportException):
    """Raised when the external generator keeps failing after all retries."""

    def __init__(self, attempts: int, original_error: Exception | None = None):
        message = f"Report generator unavailable after {attempts} attempts"
        if original_error:
            message += f": {str(original_error)}"
        super().__init__(
            message=message,
            details="The language model service is temporarily unavailable"
        )
        self.attempts = attempts
        self.original_error = original_error


class UnparsableOutputError(CallReportException):
    """Raised when the generator output contains no JSON object."""

    def __init__(self, sample: str | None = None):
        super().__init__(
            message="Invalid structured output",
            details=f"Output sample: {sample[:200]}" if sample else None
        )
        self.sample = sample


class SchemaViolationError(CallReportException):
    """Raised when a normalized report still violates the report contract."""

    def __init__(self, violations: list[str], missing: list[str] | None = None):
        if missing:
            message = f"Schema validation failed: missing fields {', '.join(missing)}"
        else:
            message = f"Schema validation failed: {'; '.join(violations)}"
        super().__init__(
            message=message,
            details="The normalized report does not satisfy the report contract"
        )
        self.violations = violations
        self.missing = missing or []


class GenerationInProgressError(CallReportException):
    """Raised when a generation is already running for the session."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Report generation already in progress for session {session_id}",
            details="Wait for the running generation to finish"
        )
        self.session_id = session_id


class InvalidTransitionError(CallReportException):
    """Raised when a generation record cannot move to the requested status."""

    def __init__(self, session_id: str, current: str | None, target: str):
        super().__init__(
            message=f"Cannot move report for session {session_id} from {current} to {target}",
            details="The generation record is not in a state that allows this transition"
        )
        self.session_id = session_id
        self.current = current
        self.target = target


class ReportNotFoundError(CallReportException):
    """Raised when no generation record exists for a session."""

    def __init__(self, session_id: str, report_kind: str = "v3"):
        super().__init__(
            message=f"Report not found: {session_id} ({report_kind})",
            details="No report has been requested for this session yet"
        )
        self.session_id = session_id
        self.report_kind = report_kind
