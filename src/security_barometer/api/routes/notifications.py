"""GET /notifications — newest-first feed of user-facing notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from security_barometer.api.dependencies import get_notifier
from security_barometer.model.notification import Notification
from security_barometer.notify import Notifier

router = APIRouter()


@router.get("/notifications", response_model=list[Notification])
async def list_notifications(
    limit: int = Query(50, ge=1, le=500),
    notifier: Notifier = Depends(get_notifier),
) -> list[Notification]:
    return notifier.recent(limit)
