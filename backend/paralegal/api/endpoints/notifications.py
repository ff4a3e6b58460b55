from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, List

from paralegal.api.deps import get_notification_service
from paralegal.core.notification_service import NotificationService, Toast

router = APIRouter()

@router.get("/", response_model=List[Toast])
async def list_notifications(notification_service: NotificationService = Depends(get_notification_service)):
    """
    Toast notifications that have not expired yet.
    """
    return notification_service.active_toasts()

@router.delete("/{toast_id}", response_model=Dict[str, str])
async def dismiss_notification(
    toast_id: int,
    notification_service: NotificationService = Depends(get_notification_service)
):
    if not notification_service.remove_toast(toast_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"status": "dismissed"}
