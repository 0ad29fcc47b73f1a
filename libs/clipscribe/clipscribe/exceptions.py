"""ClipScribe exception hierarchy."""

from __future__ import annotations

from clipscribe.error_codes import ErrorCode


class ClipScribeError(Exception):
    """Base error for ClipScribe."""


class ConfigurationError(ClipScribeError):
    """Raised when configuration is invalid."""


class ProviderError(ClipScribeError):
    """Raised when an external tool or service call fails."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


class PipelineError(ClipScribeError):
    """Raised when an upload run terminates unsuccessfully.

    `message` is safe to show to API clients: it never carries filesystem
    paths, provider responses or credentials. Internal detail is chained via
    `__cause__` and logged where the failure is caught.
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN

    def __init__(
        self,
        stage: str,
        message: str,
        *,
        run_id: str | None = None,
    ) -> None:
        prefix = f"{stage}"
        if run_id:
            prefix = f"{prefix} (run_id={run_id})"
        super().__init__(f"{prefix}: {message}")
        self.stage = stage
        self.run_id = run_id
        self.message = message


class ValidationError(PipelineError):
    """Upload rejected before any stage ran."""

    error_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, *, too_large: bool = False, run_id: str | None = None) -> None:
        super().__init__("validation", message, run_id=run_id)
        self.too_large = too_large


class DerivationError(PipelineError):
    error_code = ErrorCode.DERIVATION_ERROR


class TranscriptionError(PipelineError):
    error_code = ErrorCode.TRANSCRIPTION_ERROR


class PersistenceError(PipelineError):
    error_code = ErrorCode.PERSISTENCE_ERROR


class NotFoundError(PipelineError):
    error_code = ErrorCode.NOT_FOUND


class ReceiveError(PipelineError):
    """An accepted upload could not be stored for processing (server side)."""

    error_code = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, run_id: str | None = None) -> None:
        super().__init__("receive", message, run_id=run_id)
