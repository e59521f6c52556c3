"""Unit tests for admin email templates."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from wallet_admin.core.errors import UnknownTemplateError
from wallet_admin.notifications.payloads import (
    linked_wallet_notification,
    sample_payload,
    transaction_notification,
)
from wallet_admin.notifications.templates import (
    RENDERERS,
    NotificationTemplate,
    render_template,
    resolve_template,
)

ADMIN_URL = "https://console.example.com/admin"

ACCOUNT = {
    "id": "3f1c2a7e-0000-0000-0000-000000000001",
    "first_name": "Alice",
    "last_name": "Doe",
    "email": "alice@example.com",
}

TRANSACTION = {
    "transaction_id": "TXABCDEF123456",
    "amount": Decimal("100.50"),
    "currency": "btc",
    "created_at": datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
    "resolved_at": datetime(2024, 5, 2, 9, 0, tzinfo=UTC),
    "to_address": "bc1qdestination",
    "tx_hash": None,
    "metadata": {"newBalance": "49.50"},
}


class TestRegistry:
    def test_every_template_has_a_renderer(self):
        assert set(RENDERERS) == set(NotificationTemplate)

    def test_resolve_known_name(self):
        assert resolve_template("depositConfirmed") is NotificationTemplate.DEPOSIT_CONFIRMED

    def test_resolve_unknown_name(self):
        with pytest.raises(UnknownTemplateError) as exc_info:
            resolve_template("weeklyDigest")
        assert exc_info.value.details == {"template": "weeklyDigest"}

    @pytest.mark.parametrize("template", list(NotificationTemplate))
    def test_every_template_renders_sample(self, template):
        rendered = render_template(template, sample_payload(template.value), ADMIN_URL)
        assert rendered.subject
        assert "QFS Wallet System" in rendered.html


class TestTransactionTemplates:
    def test_deposit_request(self):
        rendered = render_template(
            NotificationTemplate.DEPOSIT_REQUEST,
            transaction_notification(ACCOUNT, {**TRANSACTION, "tx_hash": "0xfeed"}),
            ADMIN_URL,
        )

        assert rendered.subject == "💰 New Deposit Request - $100.50 btc"
        assert "Alice Doe (alice@example.com)" in rendered.html
        assert "BTC" in rendered.html
        assert "TXABCDEF123456" in rendered.html
        assert "0xfeed" in rendered.html
        assert f"{ADMIN_URL}/transactions/deposits/pending" in rendered.html

    def test_withdrawal_request_shows_destination(self):
        rendered = render_template(
            "withdrawalRequest", transaction_notification(ACCOUNT, TRANSACTION), ADMIN_URL
        )

        assert rendered.subject.startswith("💸 New Withdrawal Request")
        assert "bc1qdestination" in rendered.html
        assert "Balance has been deducted" in rendered.html
        assert f"{ADMIN_URL}/transactions/withdrawals/pending" in rendered.html

    def test_confirmation_shows_new_balance(self):
        rendered = render_template(
            NotificationTemplate.DEPOSIT_CONFIRMED,
            transaction_notification(ACCOUNT, TRANSACTION),
            ADMIN_URL,
        )

        assert rendered.subject == "✅ Deposit Confirmed - $100.50 btc"
        assert "$49.50" in rendered.html
        assert "2024-05-02 09:00:00" in rendered.html

    def test_missing_new_balance_shows_placeholder(self):
        rendered = render_template(
            NotificationTemplate.WITHDRAWAL_PROCESSED,
            transaction_notification(ACCOUNT, {**TRANSACTION, "metadata": {}}),
            ADMIN_URL,
        )

        assert "$N/A" in rendered.html

    def test_missing_timestamp_shows_placeholder(self):
        payload = transaction_notification(ACCOUNT, {**TRANSACTION, "created_at": None})

        first = render_template(NotificationTemplate.DEPOSIT_REQUEST, payload, ADMIN_URL)
        second = render_template(NotificationTemplate.DEPOSIT_REQUEST, payload, ADMIN_URL)

        assert "<strong>Time:</strong> N/A" in first.html
        assert first == second

    def test_rejection_reason_rendered(self):
        rendered = render_template(
            NotificationTemplate.WITHDRAWAL_REJECTED,
            transaction_notification(
                ACCOUNT, {**TRANSACTION, "metadata": {"newBalance": "150", "reason": "aml hold"}}
            ),
            ADMIN_URL,
        )

        assert rendered.subject.startswith("❌ Withdrawal Rejected")
        assert "aml hold" in rendered.html

    def test_user_content_is_escaped(self):
        account = {**ACCOUNT, "first_name": "<script>alert(1)</script>"}

        rendered = render_template(
            NotificationTemplate.DEPOSIT_REQUEST, transaction_notification(account, TRANSACTION), ADMIN_URL
        )

        assert "<script>" not in rendered.html
        assert "&lt;script&gt;" in rendered.html

    def test_iso_string_timestamps_are_formatted(self):
        transaction = {**TRANSACTION, "created_at": "2024-05-01T12:30:00"}

        rendered = render_template(
            NotificationTemplate.DEPOSIT_REQUEST, transaction_notification(ACCOUNT, transaction), ADMIN_URL
        )

        assert "2024-05-01 12:30:00" in rendered.html


class TestLinkedWalletTemplate:
    def test_linked_wallet_added(self):
        payload = linked_wallet_notification(
            ACCOUNT,
            {
                "wallet_name": "Cold Storage",
                "wallet_type": None,
                "is_active": False,
                "linked_at": datetime(2024, 5, 3, tzinfo=UTC),
                "phrase": "abandon ability able",
            },
        )

        rendered = render_template(NotificationTemplate.LINKED_WALLET_ADDED, payload, ADMIN_URL)

        assert rendered.subject == "🔗 New Wallet Linked - Cold Storage"
        assert "Not specified" in rendered.html
        assert "Inactive" in rendered.html
        assert "abandon ability able" in rendered.html
        assert f"{ADMIN_URL}/wallets/linked" in rendered.html


class TestSamplePayload:
    def test_linked_wallet_sample_uses_record_shape(self):
        payload = sample_payload("linkedWalletAdded")

        assert payload["user"]["email"] == "test@example.com"
        assert payload["linkedWallet"]["walletName"] == "Test Wallet"
        assert payload["linkedWallet"]["isActive"] is True

    def test_withdrawal_sample_has_destination(self):
        assert sample_payload("withdrawalRequest")["transaction"]["toAddress"] == "test-address"
        assert sample_payload("depositRequest")["transaction"]["toAddress"] is None
