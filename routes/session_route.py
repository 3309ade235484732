"""FastAPI routes for analysis sessions."""

from typing import List

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from pydantic import BaseModel

from controllers.session_controller import (
	add_files,
	analyze,
	discard_session,
	get_result,
	get_session,
	get_thumbnail,
	remove_file,
	start_session,
	update_notes,
)

router = APIRouter(prefix="/sessions")


class NotesPayload(BaseModel):
	notes: str = ""


@router.post("")
async def start_session_route(request: Request):
	try:
		return await start_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}")
async def get_session_route(request: Request, session_id: str):
	try:
		return await get_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{session_id}")
async def discard_session_route(request: Request, session_id: str):
	try:
		return await discard_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/files")
async def add_files_route(request: Request, session_id: str, files: List[UploadFile] = File(...)):
	"""Admit one batch of dropped or selected images."""
	try:
		return await add_files(request, session_id, files)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{session_id}/files/{index}")
async def remove_file_route(request: Request, session_id: str, index: int):
	try:
		return await remove_file(request, session_id, index)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/files/{index}/thumbnail")
async def get_thumbnail_route(request: Request, session_id: str, index: int):
	"""Return the PNG preview for the attachment at `index`."""
	try:
		return await get_thumbnail(request, session_id, index)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.put("/{session_id}/notes")
async def update_notes_route(request: Request, session_id: str, payload: NotesPayload):
	try:
		return await update_notes(request, session_id, payload.notes)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/analyze")
async def analyze_route(request: Request, session_id: str):
	try:
		return await analyze(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}/result")
async def get_result_route(request: Request, session_id: str):
	try:
		return await get_result(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
