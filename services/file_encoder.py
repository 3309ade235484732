"""Read accepted uploads into data URLs.

Each file is read exactly once and turned into an `Attachment` carrying
both the full `data:` URL (used as the preview) and the bare base64
payload sent to the model. A batch is encoded concurrently and admitted
all-or-nothing.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import List, Sequence

from models.attachment import Attachment, IntakeFile
from models.errors import IntakeReadError


def to_data_url(raw: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 `data:` URL."""
    payload = base64.b64encode(raw).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def split_data_url(data_url: str) -> str:
    """Return the payload of a data URL, i.e. the text after the first comma."""
    _, sep, payload = data_url.partition(",")
    if not sep:
        raise ValueError("Data URL has no payload separator.")
    return payload


class FileEncoder:
    """Turn validated uploads into attachments."""

    async def encode(self, candidate: IntakeFile) -> Attachment:
        """Read one file and build its attachment.

        Raises:
            IntakeReadError: If the underlying read fails for any reason.
        """
        try:
            raw = await candidate.read()
        except Exception as exc:
            logging.warning("Reading %s failed: %s", candidate.name, exc)
            raise IntakeReadError(f"Failed to read file {candidate.name}") from exc

        if raw is None:
            raise IntakeReadError(f"Failed to read file {candidate.name}")

        data_url = to_data_url(raw, candidate.mime_type)
        return Attachment(
            filename=candidate.name,
            base64=split_data_url(data_url),
            mime_type=candidate.mime_type,
            size=len(raw),
        )

    async def encode_batch(self, candidates: Sequence[IntakeFile]) -> List[Attachment]:
        """Encode every file concurrently and return them in selection order.

        If any read fails, the first failing file (in selection order) is
        reported and no attachment from the batch is returned.
        """
        if not candidates:
            return []

        results = await asyncio.gather(
            *(self.encode(candidate) for candidate in candidates),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)
