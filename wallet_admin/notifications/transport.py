"""Mail transport and its process-wide handle.

The handle moves through ``uninitialized -> disabled | ready`` exactly once
per process. ``disabled`` is a normal operating mode (no credentials), not
an error: the dispatcher simulates sends while in it.
"""

import asyncio
import logging
from email.message import EmailMessage
from email.utils import make_msgid
from enum import Enum
from typing import Protocol

import aiosmtplib

from wallet_admin.core.config import MailConfig

logger = logging.getLogger(__name__)


class TransportState(str, Enum):
    UNINITIALIZED = "uninitialized"
    DISABLED = "disabled"
    READY = "ready"


class MailTransport(Protocol):
    async def send(self, message: EmailMessage) -> str:
        """Deliver a message and return its Message-ID."""
        ...


class SmtpTransport:
    """SMTP transport with bounded connect, greeting and socket timeouts."""

    def __init__(self, config: MailConfig):
        self.config = config

    @property
    def deadline(self) -> float:
        """Upper bound for one complete send, in seconds."""
        return (
            self.config.connection_timeout
            + self.config.greeting_timeout
            + self.config.socket_timeout
        )

    async def send(self, message: EmailMessage) -> str:
        if "Message-ID" not in message:
            message["Message-ID"] = make_msgid()

        client = aiosmtplib.SMTP(
            hostname=self.config.host,
            port=self.config.port,
            username=self.config.username,
            password=self.config.password.get_secret_value(),
            use_tls=self.config.use_tls,
            start_tls=self.config.start_tls and not self.config.use_tls,
            timeout=self.config.socket_timeout,
        )
        # connect() covers TCP connect and the server greeting
        async with asyncio.timeout(self.deadline):
            await client.connect(
                timeout=self.config.connection_timeout + self.config.greeting_timeout
            )
            try:
                await client.send_message(message)
                await client.quit()
            finally:
                if client.is_connected:
                    client.close()
        return message["Message-ID"]


class MailTransportHandle:
    """Holds the live transport for the process."""

    def __init__(self) -> None:
        self._state = TransportState.UNINITIALIZED
        self._transport: MailTransport | None = None

    @property
    def state(self) -> TransportState:
        return self._state

    @property
    def transport(self) -> MailTransport | None:
        return self._transport

    @property
    def is_ready(self) -> bool:
        return self._state is TransportState.READY and self._transport is not None

    def initialize(self, config: MailConfig) -> TransportState:
        """Create the transport from config. No-op once initialized."""
        if self._state is not TransportState.UNINITIALIZED:
            logger.debug("Mail transport already initialized (%s)", self._state.value)
            return self._state

        if not config.has_credentials:
            logger.warning(
                "No email service configured. Set EMAIL_USERNAME and EMAIL_PASSWORD "
                "(or GMAIL_USER and GMAIL_PASS) to send emails."
            )
            self._state = TransportState.DISABLED
            return self._state

        self._transport = SmtpTransport(config)
        self._state = TransportState.READY
        logger.info(
            "SMTP email configured",
            extra={"host": config.host, "port": config.port, "sender": config.sender},
        )
        return self._state

    def replace(self, transport: MailTransport | None) -> None:
        """Swap the transport (reconfiguration and tests)."""
        self._transport = transport
        self._state = TransportState.READY if transport is not None else TransportState.DISABLED

    def reset(self) -> None:
        self._transport = None
        self._state = TransportState.UNINITIALIZED


_handle = MailTransportHandle()


def get_transport_handle() -> MailTransportHandle:
    """Get the process-wide transport handle."""
    return _handle


def init_mail_transport(config: MailConfig) -> MailTransportHandle:
    """Initialize the process-wide transport handle."""
    _handle.initialize(config)
    return _handle
