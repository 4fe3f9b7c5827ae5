"""SubCast exception hierarchy."""

from __future__ import annotations

from collections.abc import Sequence

from subcast.error_codes import ErrorCode


class SubCastError(Exception):
    """Base error for SubCast."""

    error_code: ErrorCode = ErrorCode.UNKNOWN


class ConfigurationError(SubCastError):
    """Raised when configuration or inputs are invalid."""

    error_code = ErrorCode.INVALID_MEDIA


class InputNotFoundError(SubCastError):
    """Raised when a stage input file does not exist."""

    error_code = ErrorCode.INPUT_NOT_FOUND

    def __init__(self, kind: str, path: str) -> None:
        super().__init__(f"{kind} file not found: {path}")
        self.kind = kind
        self.path = path


class ProcessSpawnError(SubCastError):
    """Raised when an external executable cannot be launched."""

    error_code = ErrorCode.PROCESS_SPAWN_FAILED

    def __init__(self, executable: str, reason: str) -> None:
        super().__init__(f"failed to launch {executable}: {reason}")
        self.executable = executable
        self.reason = reason


class ProcessFailedError(SubCastError):
    """Raised when an external process exits with a non-zero status."""

    error_code = ErrorCode.PROCESS_FAILED

    def __init__(self, args: Sequence[str], exit_code: int, stderr: str) -> None:
        name = args[0] if args else "process"
        super().__init__(f"{name} exited with code {exit_code}")
        self.args_list = list(args)
        self.exit_code = exit_code
        self.stderr = stderr


class ProcessTimeoutError(ProcessFailedError):
    """Raised when an external process is killed after exceeding its timeout."""

    def __init__(self, args: Sequence[str], timeout_s: float, stderr: str) -> None:
        super().__init__(args, -1, stderr)
        self.timeout_s = timeout_s


class _WrappedProcessError(SubCastError):
    """Stage error that may carry the exit status of the process it wraps."""

    def __init__(self, message: str, *, cause: ProcessFailedError | None = None) -> None:
        super().__init__(message)
        self.exit_code = cause.exit_code if cause is not None else None
        self.stderr = cause.stderr if cause is not None else ""


class ExtractionFailedError(_WrappedProcessError):
    error_code = ErrorCode.EXTRACTION_FAILED


class TranscriptionFailedError(_WrappedProcessError):
    error_code = ErrorCode.TRANSCRIPTION_FAILED


class ContainerConversionFailedError(_WrappedProcessError):
    error_code = ErrorCode.CONTAINER_CONVERSION_FAILED


class BurnFailedError(_WrappedProcessError):
    error_code = ErrorCode.BURN_FAILED


class OutputMissingOrEmptyError(BurnFailedError):
    error_code = ErrorCode.OUTPUT_MISSING

    def __init__(self, path: str) -> None:
        super().__init__(f"output missing or empty: {path}")
        self.path = path


class SubtitleFormatError(SubCastError):
    """Raised when SubRip text or cue data is invalid."""

    error_code = ErrorCode.INVALID_MEDIA


class RangeNotSatisfiableError(SubCastError):
    """Raised when a byte range is malformed or outside the artifact."""

    error_code = ErrorCode.RANGE_NOT_SATISFIABLE

    def __init__(self, header: str, size: int) -> None:
        super().__init__(f"range not satisfiable: {header!r} (size={size})")
        self.header = header
        self.size = size


class ArtifactNotFoundError(SubCastError):
    """Raised when an expected artifact is missing."""

    error_code = ErrorCode.ARTIFACT_NOT_FOUND


class StageExecutionError(SubCastError):
    """Raised when a pipeline stage fails."""

    def __init__(
        self,
        stage: str,
        message: str,
        *,
        job_id: str | None = None,
        error_code: ErrorCode | str | None = None,
    ) -> None:
        prefix = f"{stage}"
        if job_id:
            prefix = f"{prefix} (job_id={job_id})"
        super().__init__(f"{prefix}: {message}")
        self.stage = stage
        self.job_id = job_id
        self.message = message
        if error_code is not None:
            self.error_code = ErrorCode(error_code)
