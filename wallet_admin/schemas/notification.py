"""Schemas for the notification test endpoint."""

from pydantic import BaseModel, Field

from wallet_admin.notifications.templates import NotificationTemplate
from wallet_admin.schemas.transaction import NotificationSummary


class NotificationTestRequest(BaseModel):
    """Send a sample notification to one address or to every admin."""

    template: NotificationTemplate = Field(default=NotificationTemplate.DEPOSIT_REQUEST)
    recipient: str | None = Field(None, max_length=320, description="Defaults to all admins")


class NotificationTestResponse(BaseModel):
    transport: str
    notification: NotificationSummary
