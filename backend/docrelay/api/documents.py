"""
HTTP endpoints for uploading documents and asking questions on behalf
of a connected session.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from .deps import get_manager
from ..connections.manager import ConnectionManager
from ..errors import IngestionError, SessionClosed
from ..models.api import AskRequest, AskResponse, SessionInfo, UploadResult

router = APIRouter(tags=["documents"])


@router.post("/upload", response_model=UploadResult)
async def upload_document(
    file: Optional[UploadFile] = File(None),
    session_id: Optional[str] = Form(None),
    manager: ConnectionManager = Depends(get_manager),
):
    """
    Attach a PDF to a live session, replacing any previous document.

    Errors: 400 missing session id or file, 404 unknown session,
    413 too large, 415 not a PDF, 422 no text, 500 unreadable PDF.
    """
    data = None
    if file is not None:
        if file.size is not None and file.size > manager.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"Document is {file.size} bytes; the limit is {manager.max_upload_bytes}"
            )
        # One byte past the limit is enough for upload() to reject it
        data = await file.read(manager.max_upload_bytes + 1)
    try:
        return manager.upload(
            session_id,
            data,
            file.content_type if file is not None else None,
            file.filename if file is not None else None,
        )
    except IngestionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/ask", response_model=AskResponse)
async def ask_question(
    request: AskRequest,
    manager: ConnectionManager = Depends(get_manager),
):
    """Answer a question, grounded in the session's document when relevant."""
    try:
        answer = await manager.ask(request.session_id, request.question)
    except SessionClosed:
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="Session closed")
    return answer.to_payload()


@router.get("/sessions/{session_id}", response_model=SessionInfo)
async def get_session(
    session_id: str,
    manager: ConnectionManager = Depends(get_manager),
):
    """Session metadata. The document text is never returned."""
    try:
        return manager.describe(session_id)
    except IngestionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
