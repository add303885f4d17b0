"""
Restitch Exception Hierarchy

Structured exception types for generation and export failures.
All exceptions inherit from RestitchError for easy catching.

Usage:
    from restitch.exceptions import MissingRoleError, BatchExportError

    try:
        sequences = generate_sequences(clips)
    except MissingRoleError as e:
        logger.error(f"Generation failed: {e}")
"""

from typing import Iterable, Optional


class RestitchError(Exception):
    """Base exception for all Restitch errors."""
    pass


# =============================================================================
# Input Errors
# =============================================================================

class EmptyInputError(RestitchError):
    """No clips (or no sequences) were supplied."""
    pass


class MissingRoleError(RestitchError):
    """A role required to build a sequence has no clips."""

    def __init__(self, missing_roles: Iterable[str]):
        self.missing_roles = tuple(missing_roles)
        super().__init__(
            f"At least one hook and one cta clip are required (missing: {', '.join(self.missing_roles)})"
        )


class UnsupportedMediaError(RestitchError):
    """File extension is not an accepted video container."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Unsupported media file: {path}")


# =============================================================================
# Lookup Errors
# =============================================================================

class UnknownClipError(RestitchError, KeyError):
    """No clip with the given id is registered."""

    def __init__(self, clip_id: str):
        self.clip_id = clip_id
        super().__init__(f"Unknown clip: {clip_id}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownSequenceError(RestitchError, KeyError):
    """No sequence with the given id is in the working set."""

    def __init__(self, sequence_id: str):
        self.sequence_id = sequence_id
        super().__init__(f"Unknown sequence: {sequence_id}")

    def __str__(self) -> str:
        return self.args[0]


# =============================================================================
# Export Errors
# =============================================================================

class ExportError(RestitchError):
    """Error while producing an exported artifact."""
    pass


class MissingPayloadError(ExportError):
    """A clip selected for export has no retrievable binary data."""

    def __init__(self, clip_id: str, clip_name: str, payload: Optional[str] = None):
        self.clip_id = clip_id
        self.clip_name = clip_name
        self.payload = payload
        detail = f" ({payload} not found)" if payload else ""
        super().__init__(f"Missing file for clip: {clip_name}{detail}")


class MediaServiceError(ExportError):
    """ffmpeg/ffprobe invocation failed."""

    def __init__(self, message: str, command: Optional[str] = None, stderr: Optional[str] = None):
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class BatchExportError(ExportError):
    """One sequence of a batch export failed; the batch was aborted."""

    def __init__(self, index: int, sequence_id: str, reason: str):
        self.index = index
        self.sequence_id = sequence_id
        super().__init__(f"Export of sequence {index} ({sequence_id}) failed: {reason}")
