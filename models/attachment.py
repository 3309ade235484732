from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict


@dataclass
class IntakeFile:
    """A candidate upload that has not been validated or read yet.

    Attributes:
        name: Original filename supplied by the browser.
        size: Size in bytes as reported before reading.
        mime_type: Declared content type.
        read: Coroutine function returning the full file bytes.
    """

    name: str
    size: int
    mime_type: str
    read: Callable[[], Awaitable[bytes]]


@dataclass(frozen=True)
class Attachment:
    """An accepted, encoded image held by a session.

    Only the bare payload is stored; the preview data URL is rebuilt on
    demand so each upload is held in memory once.

    Attributes:
        filename: Original filename.
        base64: Base64 payload without a data-URL header.
        mime_type: Declared MIME type of the upload (always `image/*`).
        size: Number of raw bytes read.
    """

    filename: str
    base64: str
    mime_type: str
    size: int = 0

    @property
    def preview_url(self) -> str:
        """Full `data:` URL whose text after the first comma is `base64`."""
        return f"data:{self.mime_type};base64,{self.base64}"

    def to_payload(self) -> Dict[str, str]:
        """Return the gateway image entry for this attachment."""
        return {"base64": self.base64, "mimeType": self.mime_type}
