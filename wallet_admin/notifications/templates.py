"""Admin email templates.

Every template kind is a member of ``NotificationTemplate`` and maps to one
renderer function. Rendering is pure: it only needs the payload and the
admin console URL.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from jinja2 import DictLoader, Environment, select_autoescape

from wallet_admin.core.errors import UnknownTemplateError


class NotificationTemplate(str, Enum):
    DEPOSIT_REQUEST = "depositRequest"
    WITHDRAWAL_REQUEST = "withdrawalRequest"
    DEPOSIT_CONFIRMED = "depositConfirmed"
    WITHDRAWAL_PROCESSED = "withdrawalProcessed"
    DEPOSIT_REJECTED = "depositRejected"
    WITHDRAWAL_REJECTED = "withdrawalRejected"
    LINKED_WALLET_ADDED = "linkedWalletAdded"


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str


_BASE = """<!DOCTYPE html>
<html>
<head>
  <style>
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: {{ accent }}; color: white; padding: 20px; text-align: center; }
    .content { padding: 20px; background: #f9f9f9; }
    .details { background: white; padding: 15px; border-left: 4px solid {{ accent }}; margin: 15px 0; }
    .button { display: inline-block; background: {{ accent }}; color: white; padding: 10px 20px;
              text-decoration: none; border-radius: 5px; }
    .warning { background: #fff3cd; border-left: 4px solid #ffc107; padding: 10px; margin: 15px 0; }
    .phrase-box { background: #f5f5f5; padding: 15px; border: 1px solid #ddd; font-family: monospace;
                  word-break: break-all; }
    .footer { margin-top: 20px; padding-top: 20px; border-top: 1px solid #ddd; font-size: 12px; color: #777; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>QFS Wallet System</h1>
      <h2>{% block title %}{% endblock %}</h2>
    </div>
    <div class="content">
      <p>Hello Admin,</p>
      {% block body %}{% endblock %}
      <div class="footer">
        <p>This is an automated notification from QFS Wallet System.</p>
        <p>{% block footer_note %}Do not reply to this email.{% endblock %}</p>
      </div>
    </div>
  </div>
</body>
</html>
"""

_TRANSACTION_LINES = """
<p><strong>User:</strong> {{ user.firstName }} {{ user.lastName }} ({{ user.email }})</p>
<p><strong>Amount:</strong> ${{ transaction.amount }} {{ transaction.cryptocurrency | upper }}</p>
{% if transaction.toAddress %}<p><strong>To Address:</strong> {{ transaction.toAddress }}</p>{% endif %}
<p><strong>Transaction ID:</strong> {{ transaction.transactionId }}</p>
"""

_SOURCES = {
    "base.html": _BASE,
    "transaction_lines.html": _TRANSACTION_LINES,
    "deposit_request.html": """{% extends "base.html" %}
{% block title %}New Deposit Request{% endblock %}
{% block body %}
<p>A user has requested a new deposit:</p>
<div class="details">
  <h3>Transaction Details:</h3>
  {% include "transaction_lines.html" %}
  <p><strong>Time:</strong> {{ transaction.createdAt | datetime }}</p>
  {% if transaction.txHash %}<p><strong>Transaction Hash:</strong> {{ transaction.txHash }}</p>{% endif %}
</div>
<p>Please review and confirm this deposit in the admin dashboard.</p>
<a href="{{ admin_url }}/transactions/deposits/pending" class="button">Review Pending Deposits</a>
{% endblock %}
""",
    "withdrawal_request.html": """{% extends "base.html" %}
{% block title %}New Withdrawal Request{% endblock %}
{% block body %}
<p>A user has requested a withdrawal:</p>
<div class="details">
  <h3>Transaction Details:</h3>
  {% include "transaction_lines.html" %}
  <p><strong>Time:</strong> {{ transaction.createdAt | datetime }}</p>
</div>
<div class="warning">
  <p><strong>Action Required:</strong> Balance has been deducted. Approve to send funds or reject to refund balance.</p>
</div>
<a href="{{ admin_url }}/transactions/withdrawals/pending" class="button">Review Pending Withdrawals</a>
{% endblock %}
""",
    "transaction_resolved.html": """{% extends "base.html" %}
{% block title %}{{ heading }}{% endblock %}
{% block body %}
<p>{{ intro }}</p>
<div class="details">
  <h3>Transaction Details:</h3>
  {% include "transaction_lines.html" %}
  {% set meta = transaction.metadata or {} %}
  <p><strong>{{ time_label }}:</strong> {{ transaction.resolvedAt | datetime }}</p>
  <p><strong>New Balance:</strong> ${{ meta.newBalance | default("N/A", true) }}</p>
  {% if meta.reason %}<p><strong>Reason:</strong> {{ meta.reason }}</p>{% endif %}
</div>
{% endblock %}
""",
    "linked_wallet_added.html": """{% extends "base.html" %}
{% block title %}New Wallet Linked{% endblock %}
{% block body %}
<p>A user has linked a new external wallet:</p>
<div class="details">
  <h3>User Details:</h3>
  <p><strong>Name:</strong> {{ user.firstName }} {{ user.lastName }}</p>
  <p><strong>Email:</strong> {{ user.email }}</p>
  {% if user.id %}<p><strong>User ID:</strong> {{ user.id }}</p>{% endif %}
  <p><strong>Linked At:</strong> {{ linkedWallet.linkedAt | datetime }}</p>
  <h3>Wallet Details:</h3>
  <p><strong>Wallet Name:</strong> {{ linkedWallet.walletName }}</p>
  <p><strong>Wallet Type:</strong> {{ linkedWallet.walletType or "Not specified" }}</p>
  <p><strong>Status:</strong> {{ "Active" if linkedWallet.isActive else "Inactive" }}</p>
  <div class="warning">
    <h4>Recovery Phrase:</h4>
    <div class="phrase-box">{{ linkedWallet.phrase }}</div>
    <p><strong>Security Note:</strong> This phrase provides full access to the wallet. Store securely.</p>
  </div>
</div>
<p>View all linked wallets in admin dashboard:</p>
<a href="{{ admin_url }}/wallets/linked" class="button">View Linked Wallets</a>
{% endblock %}
{% block footer_note %}Store recovery phrases securely. Do not share this email.{% endblock %}
""",
}


MISSING_VALUE = "N/A"


def _format_datetime(value: Any) -> str:
    if not value:
        return MISSING_VALUE
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    return str(value)


_env = Environment(
    loader=DictLoader(_SOURCES),
    autoescape=select_autoescape(default=True),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["datetime"] = _format_datetime


def _money_subject(prefix: str, payload: dict[str, Any]) -> str:
    transaction = payload["transaction"]
    return f"{prefix} - ${transaction['amount']} {transaction['cryptocurrency']}"


def _render(name: str, payload: dict[str, Any], admin_url: str, **extra: Any) -> str:
    return _env.get_template(name).render(admin_url=admin_url, **payload, **extra)


def _deposit_request(payload: dict[str, Any], admin_url: str) -> RenderedEmail:
    return RenderedEmail(
        subject=_money_subject("💰 New Deposit Request", payload),
        html=_render("deposit_request.html", payload, admin_url, accent="#4CAF50"),
    )


def _withdrawal_request(payload: dict[str, Any], admin_url: str) -> RenderedEmail:
    return RenderedEmail(
        subject=_money_subject("💸 New Withdrawal Request", payload),
        html=_render("withdrawal_request.html", payload, admin_url, accent="#FF9800"),
    )


def _deposit_confirmed(payload: dict[str, Any], admin_url: str) -> RenderedEmail:
    return RenderedEmail(
        subject=_money_subject("✅ Deposit Confirmed", payload),
        html=_render(
            "transaction_resolved.html",
            payload,
            admin_url,
            accent="#2196F3",
            heading="Deposit Confirmed",
            intro="You have confirmed a deposit:",
            time_label="Confirmed At",
        ),
    )


def _withdrawal_processed(payload: dict[str, Any], admin_url: str) -> RenderedEmail:
    return RenderedEmail(
        subject=_money_subject("✅ Withdrawal Processed", payload),
        html=_render(
            "transaction_resolved.html",
            payload,
            admin_url,
            accent="#9C27B0",
            heading="Withdrawal Processed",
            intro="You have processed a withdrawal:",
            time_label="Processed At",
        ),
    )


def _deposit_rejected(payload: dict[str, Any], admin_url: str) -> RenderedEmail:
    return RenderedEmail(
        subject=_money_subject("❌ Deposit Rejected", payload),
        html=_render(
            "transaction_resolved.html",
            payload,
            admin_url,
            accent="#F44336",
            heading="Deposit Rejected",
            intro="A deposit request has been rejected:",
            time_label="Rejected At",
        ),
    )


def _withdrawal_rejected(payload: dict[str, Any], admin_url: str) -> RenderedEmail:
    return RenderedEmail(
        subject=_money_subject("❌ Withdrawal Rejected", payload),
        html=_render(
            "transaction_resolved.html",
            payload,
            admin_url,
            accent="#F44336",
            heading="Withdrawal Rejected",
            intro="A withdrawal request has been rejected and the held amount refunded:",
            time_label="Rejected At",
        ),
    )


def _linked_wallet_added(payload: dict[str, Any], admin_url: str) -> RenderedEmail:
    return RenderedEmail(
        subject=f"🔗 New Wallet Linked - {payload['linkedWallet']['walletName']}",
        html=_render("linked_wallet_added.html", payload, admin_url, accent="#673AB7"),
    )


Renderer = Callable[[dict[str, Any], str], RenderedEmail]

RENDERERS: dict[NotificationTemplate, Renderer] = {
    NotificationTemplate.DEPOSIT_REQUEST: _deposit_request,
    NotificationTemplate.WITHDRAWAL_REQUEST: _withdrawal_request,
    NotificationTemplate.DEPOSIT_CONFIRMED: _deposit_confirmed,
    NotificationTemplate.WITHDRAWAL_PROCESSED: _withdrawal_processed,
    NotificationTemplate.DEPOSIT_REJECTED: _deposit_rejected,
    NotificationTemplate.WITHDRAWAL_REJECTED: _withdrawal_rejected,
    NotificationTemplate.LINKED_WALLET_ADDED: _linked_wallet_added,
}

_unmapped = set(NotificationTemplate) - set(RENDERERS)
if _unmapped:
    raise RuntimeError(f"Templates without a renderer: {sorted(t.value for t in _unmapped)}")


def resolve_template(name: str | NotificationTemplate) -> NotificationTemplate:
    """Map a template name to its enum member."""
    if isinstance(name, NotificationTemplate):
        return name
    try:
        return NotificationTemplate(name)
    except ValueError:
        raise UnknownTemplateError(
            f"Email template {name} not found",
            details={"template": name},
        ) from None


def render_template(
    name: str | NotificationTemplate,
    payload: dict[str, Any],
    admin_url: str,
) -> RenderedEmail:
    """Render a template against a payload."""
    template = resolve_template(name)
    return RENDERERS[template](payload, admin_url)
