from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Response, status

from portal_messaging.api.deps import CurrentUser, UoWDep
from portal_messaging.api.v1.schemas.notification import CountResponse, NotificationResponse
from portal_messaging.services import notification_service

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(user: CurrentUser, uow: UoWDep) -> list[NotificationResponse]:
    items = await notification_service.list_notifications(user.id, uow)
    return [NotificationResponse.model_validate(n, from_attributes=True) for n in items]


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(user: CurrentUser, uow: UoWDep) -> CountResponse:
    return CountResponse(count=await notification_service.unread_notification_count(user.id, uow))


@router.post("/read-all", response_model=CountResponse)
async def mark_all_read(user: CurrentUser, uow: UoWDep) -> CountResponse:
    return CountResponse(
        count=await notification_service.mark_all_notifications_read(user.id, uow),
    )


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(notification_id: UUID, user: CurrentUser, uow: UoWDep) -> Response:
    await notification_service.mark_notification_read(notification_id, user.id, uow)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    user: CurrentUser,
    uow: UoWDep,
) -> Response:
    await notification_service.delete_notification(notification_id, user.id, uow)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", response_model=CountResponse)
async def clear_notifications(user: CurrentUser, uow: UoWDep) -> CountResponse:
    return CountResponse(count=await notification_service.clear_notifications(user.id, uow))
