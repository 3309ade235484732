"""Session lifecycle helpers for the analysis workflow."""

from __future__ import annotations

import os
from typing import Any, Dict, List

from fastapi import HTTPException, Request, UploadFile
from fastapi.responses import Response

from models.attachment import IntakeFile
from models.errors import LabCopilotError
from models.session_models import AnalysisStatus
from services.analysis_session import AnalysisSession
from services.markdown_renderer import render_markdown
from services.session_store import SessionStore
from services.thumbnail_generator import ThumbnailGenerator


def _get_session(request: Request, session_id: str) -> AnalysisSession:
	store: SessionStore = request.app.state.session_store
	try:
		return store.get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc


def _to_http_error(exc: LabCopilotError) -> HTTPException:
	return HTTPException(status_code=exc.status_code, detail=exc.message)


def _upload_size(upload: UploadFile) -> int:
	"""Return the upload size without consuming it."""
	if upload.size is not None:
		return upload.size
	current = upload.file.tell()
	upload.file.seek(0, os.SEEK_END)
	size = upload.file.tell()
	upload.file.seek(current)
	return size


def to_intake_file(upload: UploadFile) -> IntakeFile:
	"""Wrap a multipart upload as a candidate for the intake pipeline."""
	return IntakeFile(
		name=upload.filename or "upload",
		size=_upload_size(upload),
		mime_type=upload.content_type or "",
		read=upload.read,
	)


async def start_session(request: Request) -> Dict[str, Any]:
	"""Create a new analysis session and return its snapshot."""
	store: SessionStore = request.app.state.session_store
	return store.create().snapshot()


async def get_session(request: Request, session_id: str) -> Dict[str, Any]:
	return _get_session(request, session_id).snapshot()


async def discard_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Drop a session, like reloading the page."""
	store: SessionStore = request.app.state.session_store
	try:
		store.discard(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
	return {"session_id": session_id, "discarded": True}


async def add_files(request: Request, session_id: str, files: List[UploadFile]) -> Dict[str, Any]:
	"""Run one batch of uploads through validation and encoding."""
	session = _get_session(request, session_id)
	candidates = [to_intake_file(upload) for upload in files]
	try:
		await session.add_files(candidates)
	except LabCopilotError as exc:
		raise _to_http_error(exc) from exc
	return session.snapshot()


async def remove_file(request: Request, session_id: str, index: int) -> Dict[str, Any]:
	session = _get_session(request, session_id)
	session.remove_file(index)
	return session.snapshot()


async def get_thumbnail(request: Request, session_id: str, index: int) -> Response:
	"""Return a PNG preview of one attachment.

	Raises:
		HTTPException(404) if the index is out of range.
		HTTPException(422) if the attachment cannot be decoded as an image.
	"""
	session = _get_session(request, session_id)
	attachments = session.attachments
	if index < 0 or index >= len(attachments):
		raise HTTPException(status_code=404, detail="Attachment not found")
	try:
		png = ThumbnailGenerator().create_thumbnail(attachments[index].base64)
	except ValueError as exc:
		raise HTTPException(status_code=422, detail=str(exc)) from exc
	return Response(content=png, media_type="image/png")


async def update_notes(request: Request, session_id: str, notes: str) -> Dict[str, Any]:
	session = _get_session(request, session_id)
	session.set_notes(notes)
	return session.snapshot()


async def analyze(request: Request, session_id: str) -> Dict[str, Any]:
	"""Submit the session for analysis.

	Gateway failures are part of the session state and come back as a
	snapshot with status `error`; guard and busy rejections are HTTP errors.
	"""
	session = _get_session(request, session_id)
	try:
		await session.analyze()
	except LabCopilotError as exc:
		raise _to_http_error(exc) from exc
	return session.snapshot()


async def get_result(request: Request, session_id: str) -> Dict[str, Any]:
	"""Return the latest result as raw Markdown and rendered HTML."""
	session = _get_session(request, session_id)
	if session.status is not AnalysisStatus.SUCCESS:
		raise HTTPException(status_code=404, detail="No analysis result available")
	return {"markdown": session.result, "html": render_markdown(session.result)}
