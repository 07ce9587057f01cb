from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz(request: Request) -> dict[str, Any]:
    dispatcher = request.app.state.ctx.dispatcher
    return {
        "status": "ok",
        "notifications": {
            "in_flight": dispatcher.in_flight,
            "delivered": dispatcher.delivered,
            "failed": dispatcher.failed_deliveries,
        },
        "requests": request.app.state.request_stats.snapshot(),
    }
