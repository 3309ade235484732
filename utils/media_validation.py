"""Validation helpers for uploaded instrument images."""

from typing import Sequence

from models.attachment import IntakeFile
from models.errors import IntakeCountError, IntakeSizeError, IntakeTypeError

MAX_FILE_SIZE_MB = 10
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
MAX_ATTACHMENTS = 5


def normalize_mime_type(mime_type: str | None) -> str:
    """Lower-case a content type and strip any parameters after ';'."""
    if not mime_type:
        return ""
    return mime_type.lower().split(";", 1)[0].strip()


def is_image_mime_type(mime_type: str | None) -> bool:
    return normalize_mime_type(mime_type).startswith("image/")


def validate_batch_count(current_count: int, batch_count: int) -> None:
    """Reject a batch that would push the collection past its capacity.

    Raises:
        IntakeCountError: If `current_count + batch_count` exceeds MAX_ATTACHMENTS.
    """
    if current_count + batch_count > MAX_ATTACHMENTS:
        raise IntakeCountError(f"Maximum {MAX_ATTACHMENTS} files allowed.")


def validate_candidate(candidate: IntakeFile) -> None:
    """Check a single file's size and declared type before it is read.

    Raises:
        IntakeSizeError: If the file is larger than MAX_FILE_SIZE_BYTES.
        IntakeTypeError: If the declared MIME type is not `image/*`.
    """
    if candidate.size > MAX_FILE_SIZE_BYTES:
        raise IntakeSizeError(f"File {candidate.name} exceeds {MAX_FILE_SIZE_MB}MB limit.")
    if not is_image_mime_type(candidate.mime_type):
        raise IntakeTypeError(f"File {candidate.name} is not a supported image type.")


def validate_batch(candidates: Sequence[IntakeFile], current_count: int) -> None:
    """Validate a whole batch; the first failing file rejects all of it."""
    validate_batch_count(current_count, len(candidates))
    for candidate in candidates:
        validate_candidate(candidate)
