from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response, UploadFile, status

from portal_messaging.api.deps import ContextDep, CurrentUser, UoWDep
from portal_messaging.api.v1.schemas.message import (
    FileResultResponse,
    MessageResponse,
    SendMessageRequest,
)
from portal_messaging.application.dto.message import FileUpload
from portal_messaging.services import message_service
from portal_messaging.services.attachment_handler import MAX_ATTACHMENT_BYTES

router = APIRouter(prefix="/api/v1", tags=["messages"])


@router.get("/conversations/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: UUID,
    user: CurrentUser,
    uow: UoWDep,
) -> list[MessageResponse]:
    messages = await message_service.list_messages(conversation_id, uow, viewer_id=user.id)
    return [MessageResponse.model_validate(m, from_attributes=True) for m in messages]


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: UUID,
    body: SendMessageRequest,
    user: CurrentUser,
    uow: UoWDep,
    ctx: ContextDep,
) -> MessageResponse:
    msg = await message_service.send_message(conversation_id, user.id, body.content, uow, ctx)
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.post(
    "/conversations/{conversation_id}/files",
    response_model=list[FileResultResponse],
)
async def upload_files(
    conversation_id: UUID,
    files: list[UploadFile],
    user: CurrentUser,
    uow: UoWDep,
    ctx: ContextDep,
) -> list[FileResultResponse]:
    """Send each uploaded file as its own message; per-file outcome is reported."""
    uploads: list[FileUpload] = []
    for f in files:
        size = f.size if f.size is not None else 0
        # oversized files are rejected by size alone, their body is never read
        data = await f.read() if size <= MAX_ATTACHMENT_BYTES else b""
        uploads.append(
            FileUpload(
                name=f.filename or "upload",
                size=size if f.size is not None else len(data),
                content_type=f.content_type or "application/octet-stream",
                data=data,
            )
        )

    results = await message_service.send_files(conversation_id, user.id, uploads, uow, ctx)
    return [
        FileResultResponse(
            file_name=r.file_name,
            ok=r.ok,
            message=(
                MessageResponse.model_validate(r.message, from_attributes=True)
                if r.message is not None
                else None
            ),
            error=r.error.detail if r.error is not None else None,
        )
        for r in results
    ]


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: UUID,
    user: CurrentUser,
    uow: UoWDep,
) -> Response:
    await message_service.delete_message(message_id, uow, requester_id=user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/attachments/{reference}")
async def download_attachment(
    reference: str,
    _user: CurrentUser,
    ctx: ContextDep,
) -> Response:
    data = await message_service.open_attachment(reference, ctx)
    return Response(content=data, media_type="application/octet-stream")
