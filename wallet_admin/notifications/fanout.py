"""Admin fan-out: deliver one notification to every administrator.

A failure for one recipient never stops delivery to the others. The batch
is reported as a list of per-recipient outcomes.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from wallet_admin.notifications.dispatcher import (
    NotificationDispatcher,
    NotificationOutcome,
    NotificationStatus,
)
from wallet_admin.notifications.templates import NotificationTemplate

logger = logging.getLogger(__name__)


class AdminDirectory(Protocol):
    async def list_admin_emails(self) -> list[str]: ...


class FanoutError(str, Enum):
    NO_ADMINS_CONFIGURED = "no_admins_configured"
    DIRECTORY_UNAVAILABLE = "directory_unavailable"


@dataclass
class FanoutResult:
    """Outcome of one fan-out.

    ``success`` only says whether recipients could be resolved; individual
    delivery failures are in ``outcomes``.
    """

    template: str
    success: bool
    outcomes: list[NotificationOutcome] = field(default_factory=list)
    error: FanoutError | None = None
    error_detail: str | None = None

    @property
    def delivered(self) -> int:
        return sum(1 for o in self.outcomes if o.status is NotificationStatus.DELIVERED)

    @property
    def simulated(self) -> int:
        return sum(1 for o in self.outcomes if o.status is NotificationStatus.SIMULATED)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status is NotificationStatus.FAILED)

    def summary(self) -> dict[str, Any]:
        return {
            "template": self.template,
            "success": self.success,
            "error": self.error.value if self.error else None,
            "recipients": len(self.outcomes),
            "delivered": self.delivered,
            "simulated": self.simulated,
            "failed": self.failed,
            "results": [o.to_dict() for o in self.outcomes],
        }


class AdminNotifier:
    """Resolves admin recipients and fans a notification out to them."""

    def __init__(self, directory: AdminDirectory, dispatcher: NotificationDispatcher):
        self.directory = directory
        self.dispatcher = dispatcher

    async def resolve_recipients(self) -> list[str]:
        """Email addresses of all admins, in directory order, without duplicates."""
        emails = await self.directory.list_admin_emails()
        seen: set[str] = set()
        recipients = []
        for email in emails:
            key = email.strip().lower()
            if key and key not in seen:
                seen.add(key)
                recipients.append(email.strip())
        return recipients

    async def notify(
        self,
        template: NotificationTemplate,
        payload: dict[str, Any],
    ) -> FanoutResult:
        """Send ``template`` to every admin. Never raises."""
        try:
            recipients = await self.resolve_recipients()
        except Exception as e:
            logger.error(
                "Failed to get admin emails",
                extra={"template": template.value, "error": str(e)},
            )
            return FanoutResult(
                template=template.value,
                success=False,
                error=FanoutError.DIRECTORY_UNAVAILABLE,
                error_detail=str(e),
            )

        if not recipients:
            logger.warning(
                "No admin emails found for notification",
                extra={"template": template.value},
            )
            return FanoutResult(
                template=template.value,
                success=False,
                error=FanoutError.NO_ADMINS_CONFIGURED,
            )

        outcomes = await asyncio.gather(
            *(self._deliver(recipient, template, payload) for recipient in recipients)
        )
        result = FanoutResult(template=template.value, success=True, outcomes=list(outcomes))

        logger.info(
            "Admin notification dispatched",
            extra={
                "template": template.value,
                "recipients": len(recipients),
                "delivered": result.delivered,
                "simulated": result.simulated,
                "failed": result.failed,
            },
        )
        return result

    async def _deliver(
        self,
        recipient: str,
        template: NotificationTemplate,
        payload: dict[str, Any],
    ) -> NotificationOutcome:
        try:
            return await self.dispatcher.send(recipient, template, payload)
        except Exception as e:
            # dispatcher.send already contains transport errors; this guards
            # against a broken dispatcher taking the whole batch down
            logger.exception("Unexpected error delivering notification to %s", recipient)
            return NotificationOutcome(
                recipient, template.value, NotificationStatus.FAILED, error=str(e) or repr(e)
            )
