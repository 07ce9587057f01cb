"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Header, HTTPException, Request, status

from portal_messaging.application.context import MessagingContext
from portal_messaging.application.uow import UnitOfWork
from portal_messaging.domain.entities.user import User

USER_HEADER = "X-User-Id"


async def get_uow(request: Request) -> AsyncIterator[UnitOfWork]:
    async with request.app.state.uow_factory() as uow:
        yield uow


UoWDep = Annotated[UnitOfWork, Depends(get_uow)]


def get_context(request: Request) -> MessagingContext:
    return request.app.state.ctx


ContextDep = Annotated[MessagingContext, Depends(get_context)]


async def get_current_user(
    ctx: ContextDep,
    user_id: Annotated[str | None, Header(alias=USER_HEADER)] = None,
) -> User:
    """Resolve the caller from the directory.

    Authentication happens upstream; the gateway forwards the user id.
    """
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"{USER_HEADER} header required",
        )
    user = await ctx.users.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
