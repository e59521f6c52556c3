"""Notification dispatcher: render a template and hand it to the transport."""

from dataclasses import dataclass
from email.message import EmailMessage
from enum import Enum
from typing import Any

from jinja2 import TemplateError

from wallet_admin.core.errors import UnknownTemplateError
from wallet_admin.core.logging import LoggerMixin
from wallet_admin.notifications.templates import (
    NotificationTemplate,
    RenderedEmail,
    render_template,
    resolve_template,
)
from wallet_admin.notifications.transport import MailTransportHandle


class NotificationStatus(str, Enum):
    DELIVERED = "delivered"
    SIMULATED = "simulated"
    FAILED = "failed"


@dataclass(frozen=True)
class NotificationOutcome:
    """Result of one send to one recipient."""

    recipient: str
    template: str
    status: NotificationStatus
    message_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Delivered or simulated; both count as success for the workflow."""
        return self.status is not NotificationStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        return {
            "email": self.recipient,
            "template": self.template,
            "status": self.status.value,
            "messageId": self.message_id,
            "error": self.error,
        }


class NotificationDispatcher(LoggerMixin):
    """Renders admin emails and sends them through the configured transport."""

    def __init__(self, transport: MailTransportHandle, sender: str, admin_url: str):
        self.transport = transport
        self.sender = sender
        self.admin_url = admin_url

    def render(self, template: str | NotificationTemplate, payload: dict[str, Any]) -> RenderedEmail:
        """Render a template. Raises UnknownTemplateError for unregistered names."""
        return render_template(template, payload, self.admin_url)

    def build_message(self, recipient: str, rendered: RenderedEmail) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = recipient
        message["Subject"] = rendered.subject
        message.set_content(rendered.html, subtype="html")
        return message

    async def send(
        self,
        recipient: str,
        template: str | NotificationTemplate,
        payload: dict[str, Any],
    ) -> NotificationOutcome:
        """Send one notification. Never raises; failures become outcomes."""
        template_name = template.value if isinstance(template, NotificationTemplate) else template

        try:
            resolved = resolve_template(template)
            rendered = self.render(resolved, payload)
        except UnknownTemplateError as e:
            self.logger.error("email_template_unknown", template=template_name, to=recipient)
            return NotificationOutcome(recipient, template_name, NotificationStatus.FAILED, error=e.message)
        except (KeyError, TypeError, ValueError, TemplateError) as e:
            self.logger.error(
                "email_render_failed", template=template_name, to=recipient, error=repr(e)
            )
            return NotificationOutcome(
                recipient, template_name, NotificationStatus.FAILED, error=f"render failed: {e!r}"
            )

        transport = self.transport.transport if self.transport.is_ready else None
        if transport is None:
            self.logger.info(
                "email_simulated",
                template=template_name,
                to=recipient,
                subject=rendered.subject,
            )
            return NotificationOutcome(recipient, template_name, NotificationStatus.SIMULATED)

        try:
            message_id = await transport.send(self.build_message(recipient, rendered))
        except Exception as e:
            self.logger.error(
                "email_send_failed", template=template_name, to=recipient, error=str(e) or repr(e)
            )
            return NotificationOutcome(
                recipient, template_name, NotificationStatus.FAILED, error=str(e) or repr(e)
            )

        self.logger.info(
            "email_sent", template=template_name, to=recipient, message_id=message_id
        )
        return NotificationOutcome(
            recipient, template_name, NotificationStatus.DELIVERED, message_id=message_id
        )
