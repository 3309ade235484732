"""Analysis session: intake pipeline plus the idle/analyzing/success/error machine.

One `AnalysisSession` owns everything a browser tab works with: the
attachment collection, the notes, the latest result and the single most
recent error message. Collaborators only go through the operations below;
there are no raw setters.

Intake and guard failures keep the current status and only replace the
error message. The `error` status is reserved for gateway failures while
analyzing.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Protocol, Sequence, Union

from models.attachment import Attachment, IntakeFile
from models.errors import IntakeError, LabCopilotError, SessionBusyError, SubmissionGuardError
from models.session_models import AnalysisStatus, GatewayResult
from services.attachment_store import AttachmentStore
from services.file_encoder import FileEncoder
from utils.media_validation import validate_batch

GUARD_MESSAGE = "Please provide figures or notes to perform analysis."
GENERIC_FAILURE_MESSAGE = "An unexpected error occurred during analysis."
EMPTY_RESULT_PLACEHOLDER = "No analysis generated."


class Gateway(Protocol):
    async def analyze(
        self, notes: str, images: Sequence[Dict[str, str]]
    ) -> Union[GatewayResult, str]: ...


class AnalysisSession:
    """Single-session controller over attachments, notes and analysis status."""

    def __init__(
        self,
        gateway: Gateway,
        session_id: str = "",
        encoder: Optional[FileEncoder] = None,
        store: Optional[AttachmentStore] = None,
    ) -> None:
        self.session_id = session_id
        self._gateway = gateway
        self._encoder = encoder or FileEncoder()
        self._attachments = store if store is not None else AttachmentStore()
        self._status = AnalysisStatus.IDLE
        self._notes = ""
        self._result = ""
        self._error_message = ""
        self._completed_at: Optional[float] = None
        self._usage: Dict[str, Optional[int]] = {}
        self._latency: Optional[float] = None

    @property
    def status(self) -> AnalysisStatus:
        return self._status

    @property
    def notes(self) -> str:
        return self._notes

    @property
    def result(self) -> str:
        return self._result

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def attachments(self) -> Sequence[Attachment]:
        return tuple(self._attachments)

    @property
    def can_analyze(self) -> bool:
        """False while an analysis is in flight."""
        return self._status is not AnalysisStatus.ANALYZING

    async def add_files(self, candidates: Sequence[IntakeFile]) -> Sequence[Attachment]:
        """Validate, encode and admit a batch of files.

        Raises:
            IntakeError: The batch was rejected; nothing from it was admitted.
        """
        self._error_message = ""
        candidates = list(candidates)
        try:
            validate_batch(candidates, len(self._attachments))
            batch = await self._encoder.encode_batch(candidates)
            self._attachments.append(batch)
        except IntakeError as exc:
            logging.info("Session %s rejected a batch of %d file(s): %s", self.session_id, len(candidates), exc.message)
            self._error_message = exc.message
            raise

        logging.info("Session %s admitted %d file(s), now holding %d", self.session_id, len(batch), len(self._attachments))
        return tuple(batch)

    def remove_file(self, index: int) -> Optional[Attachment]:
        """Remove the attachment at `index`; out-of-range indices are ignored."""
        return self._attachments.remove_at(index)

    def set_notes(self, notes: Optional[str]) -> None:
        self._notes = notes or ""

    async def analyze(self) -> AnalysisStatus:
        """Submit the current notes and attachments to the gateway.

        Returns:
            The status reached: `success` or `error`.

        Raises:
            SessionBusyError: An analysis is already running.
            SubmissionGuardError: There are no attachments and the notes are blank.
        """
        if self._status is AnalysisStatus.ANALYZING:
            raise SessionBusyError("An analysis is already in progress.")

        if len(self._attachments) == 0 and not self._notes.strip():
            self._error_message = GUARD_MESSAGE
            raise SubmissionGuardError(GUARD_MESSAGE)

        notes = self._notes
        images = self._attachments.payload()

        self._status = AnalysisStatus.ANALYZING
        self._error_message = ""
        self._result = ""
        self._completed_at = None
        logging.info("Session %s analyzing %d image(s)", self.session_id, len(images))

        try:
            outcome = await self._gateway.analyze(notes, images)
        except Exception as exc:
            message = exc.message if isinstance(exc, LabCopilotError) else str(exc)
            logging.error("Session %s analysis failed: %s", self.session_id, exc)
            self._error_message = message or GENERIC_FAILURE_MESSAGE
            self._status = AnalysisStatus.ERROR
            return self._status

        if isinstance(outcome, GatewayResult):
            text = outcome.text
            self._usage = dict(outcome.usage)
            self._latency = outcome.latency
        else:
            text = outcome

        self._result = text or EMPTY_RESULT_PLACEHOLDER
        self._completed_at = time.time()
        self._status = AnalysisStatus.SUCCESS
        logging.info("Session %s analysis completed", self.session_id)
        return self._status

    def snapshot(self) -> Dict[str, Any]:
        """Return a JSON-serializable view of the session."""
        return {
            "session_id": self.session_id,
            "status": self._status.value,
            "can_analyze": self.can_analyze,
            "notes": self._notes,
            "result": self._result,
            "error_message": self._error_message,
            "completed_at": self._completed_at,
            "usage": dict(self._usage),
            "latency": self._latency,
            "attachments": [
                {
                    "index": index,
                    "filename": item.filename,
                    "mime_type": item.mime_type,
                    "size": item.size,
                }
                for index, item in enumerate(self._attachments)
            ],
        }
