from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response, status

from portal_messaging.api.deps import ContextDep, CurrentUser, UoWDep
from portal_messaging.api.v1.schemas.conversation import (
    ConversationResponse,
    ConversationSummaryResponse,
    CreateDirectConversationRequest,
    CreateGroupConversationRequest,
    MarkReadResponse,
)
from portal_messaging.api.v1.schemas.user import UserResponse
from portal_messaging.services import conversation_service

router = APIRouter(prefix="/api/v1", tags=["conversations"])


@router.get("/conversations", response_model=list[ConversationSummaryResponse])
async def list_conversations(
    user: CurrentUser,
    uow: UoWDep,
    ctx: ContextDep,
) -> list[ConversationSummaryResponse]:
    summaries = await conversation_service.list_conversations_for_role(
        user.id, user.role, uow, ctx,
    )
    return [
        ConversationSummaryResponse.model_validate(s, from_attributes=True) for s in summaries
    ]


@router.post("/conversations", response_model=ConversationResponse)
async def create_direct_conversation(
    body: CreateDirectConversationRequest,
    user: CurrentUser,
    uow: UoWDep,
    ctx: ContextDep,
) -> ConversationResponse:
    conv = await conversation_service.create_direct_conversation(user.id, body.user_id, uow, ctx)
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.post(
    "/conversations/groups",
    response_model=ConversationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_group_conversation(
    body: CreateGroupConversationRequest,
    user: CurrentUser,
    uow: UoWDep,
    ctx: ContextDep,
) -> ConversationResponse:
    conv = await conversation_service.create_group_conversation(
        user.id, body.name, body.description, body.member_ids, uow, ctx,
    )
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.get("/conversations/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: UUID,
    user: CurrentUser,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await conversation_service.get_conversation(conversation_id, user.id, uow)
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.delete("/conversations/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    conversation_id: UUID,
    user: CurrentUser,
    uow: UoWDep,
    ctx: ContextDep,
) -> Response:
    await conversation_service.delete_conversation(conversation_id, user.id, uow, ctx)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/conversations/{conversation_id}/read", response_model=MarkReadResponse)
async def mark_conversation_read(
    conversation_id: UUID,
    user: CurrentUser,
    uow: UoWDep,
    ctx: ContextDep,
) -> MarkReadResponse:
    marked = await conversation_service.mark_conversation_read(conversation_id, user.id, uow, ctx)
    return MarkReadResponse(marked=marked)


@router.get("/contacts", response_model=list[UserResponse])
async def list_contacts(
    user: CurrentUser,
    uow: UoWDep,
    ctx: ContextDep,
) -> list[UserResponse]:
    users = await conversation_service.list_available_contacts(user.id, uow, ctx)
    return [UserResponse.model_validate(u, from_attributes=True) for u in users]
