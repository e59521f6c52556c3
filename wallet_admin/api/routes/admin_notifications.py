"""Notification test route, registered outside production only."""

from fastapi import APIRouter, Depends

from wallet_admin.core.dependencies import RequireAdmin, get_admin_notifier, get_dispatcher
from wallet_admin.notifications.dispatcher import NotificationDispatcher
from wallet_admin.notifications.fanout import AdminNotifier, FanoutResult
from wallet_admin.notifications.payloads import sample_payload
from wallet_admin.schemas.notification import NotificationTestRequest, NotificationTestResponse

router = APIRouter(prefix="/admin/notifications", tags=["admin-notifications"])


@router.post("/test", response_model=NotificationTestResponse)
async def send_test_notification(
    request: NotificationTestRequest,
    current_user: RequireAdmin,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    notifier: AdminNotifier = Depends(get_admin_notifier),
) -> dict:
    """Send a sample notification through the live transport."""
    payload = sample_payload(request.template.value)
    if request.recipient:
        outcome = await dispatcher.send(request.recipient, request.template, payload)
        result = FanoutResult(template=request.template.value, success=True, outcomes=[outcome])
    else:
        result = await notifier.notify(request.template, payload)

    return {"transport": dispatcher.transport.state.value, "notification": result.summary()}
