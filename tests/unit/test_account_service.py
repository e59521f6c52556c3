"""Unit tests for admin account actions."""

from uuid import uuid4

import pytest

from wallet_admin.core.errors import NotFoundError, SelfActionForbiddenError
from wallet_admin.services.account_service import AccountAdminService


@pytest.fixture
def service(mock_session, accounts) -> AccountAdminService:
    service = AccountAdminService(mock_session)
    service.repo = accounts
    return service


class TestSuspendActivate:
    @pytest.mark.asyncio
    async def test_suspend_self_forbidden(self, service, admin, accounts):
        with pytest.raises(SelfActionForbiddenError):
            await service.suspend(admin["id"], acting_admin_id=str(admin["id"]))
        assert accounts.rows[admin["id"]]["is_active"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "spelling",
        [str.upper, lambda s: s.replace("-", ""), lambda s: "{" + s + "}"],
        ids=["uppercase", "no-hyphens", "braced"],
    )
    async def test_suspend_self_forbidden_for_any_id_spelling(
        self, service, admin, accounts, spelling
    ):
        with pytest.raises(SelfActionForbiddenError):
            await service.suspend(admin["id"], acting_admin_id=spelling(str(admin["id"])))
        assert accounts.rows[admin["id"]]["is_active"] is True

    @pytest.mark.asyncio
    async def test_non_uuid_actor_is_not_self(self, service, accounts):
        user = accounts.add(email="bob@example.com")

        result = await service.suspend(user["id"], acting_admin_id="local-admin")

        assert result["isActive"] is False

    @pytest.mark.asyncio
    async def test_suspend_self_forbidden_even_if_missing(self, service):
        target = uuid4()
        with pytest.raises(SelfActionForbiddenError):
            await service.suspend(target, acting_admin_id=target)

    @pytest.mark.asyncio
    async def test_suspend_returns_status_projection(self, service, admin, accounts):
        user = accounts.add(email="bob@example.com", first_name="Bob", last_name="Roe")

        result = await service.suspend(user["id"], acting_admin_id=str(admin["id"]))

        assert result == {
            "id": user["id"],
            "email": "bob@example.com",
            "firstName": "Bob",
            "lastName": "Roe",
            "isActive": False,
        }
        assert accounts.rows[user["id"]]["is_active"] is False

    @pytest.mark.asyncio
    async def test_suspend_missing_account(self, service, admin):
        with pytest.raises(NotFoundError):
            await service.suspend(uuid4(), acting_admin_id=str(admin["id"]))

    @pytest.mark.asyncio
    async def test_activate_self_allowed(self, service, accounts):
        me = accounts.add(email="me@example.com", role="admin", is_active=False)

        result = await service.activate(me["id"], acting_admin_id=str(me["id"]))

        assert result["isActive"] is True

    @pytest.mark.asyncio
    async def test_set_status_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.set_status(uuid4(), True)


class TestListSuspended:
    @pytest.mark.asyncio
    async def test_only_suspended_end_users(self, service, accounts):
        accounts.add(email="active@example.com")
        accounts.add(email="admin-off@example.com", role="admin", is_active=False)
        target = accounts.add(email="off@example.com", is_active=False, kyc_status="verified")

        result = await service.list_suspended()

        assert [u["id"] for u in result["users"]] == [target["id"]]
        assert set(result["users"][0]) == {
            "id",
            "email",
            "firstName",
            "lastName",
            "kycStatus",
            "lastLogin",
            "createdAt",
        }
        assert result["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}

    @pytest.mark.asyncio
    async def test_pagination_newest_first(self, service, accounts):
        created = [accounts.add(email=f"u{i}@example.com", is_active=False) for i in range(5)]

        page_one = await service.list_suspended(page=1, limit=2)
        page_three = await service.list_suspended(page=3, limit=2)

        assert [u["email"] for u in page_one["users"]] == ["u4@example.com", "u3@example.com"]
        assert [u["id"] for u in page_three["users"]] == [created[0]["id"]]
        assert page_one["pagination"] == {"page": 1, "limit": 2, "total": 5, "pages": 3}

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_and_counts_filtered(self, service, accounts):
        accounts.add(email="x@example.com", first_name="Maria", is_active=False)
        accounts.add(email="y@example.com", last_name="MARIANI", is_active=False)
        accounts.add(email="z@example.com", first_name="Zed", is_active=False)

        result = await service.list_suspended(search="mari")

        assert {u["email"] for u in result["users"]} == {"x@example.com", "y@example.com"}
        assert result["pagination"]["total"] == 2

    @pytest.mark.asyncio
    async def test_search_does_not_match_phone(self, service, accounts):
        accounts.add(email="x@example.com", phone="+15550100", is_active=False)

        result = await service.list_suspended(search="555")

        assert result["users"] == []

    @pytest.mark.asyncio
    async def test_empty_result_has_zero_pages(self, service):
        result = await service.list_suspended()
        assert result["pagination"]["pages"] == 0

    @pytest.mark.asyncio
    async def test_limit_out_of_range(self, service):
        with pytest.raises(ValueError):
            await service.list_suspended(limit=1000)


class TestListAll:
    @pytest.mark.asyncio
    async def test_search_covers_phone_and_country(self, service, accounts):
        accounts.add(email="a@example.com", phone="+4915550100")
        accounts.add(email="b@example.com", country="Germany")
        accounts.add(email="c@example.com", country="France")

        by_phone = await service.list_all(search="49155")
        by_country = await service.list_all(search="germ")

        assert [u["email"] for u in by_phone["users"]] == ["a@example.com"]
        assert [u["email"] for u in by_country["users"]] == ["b@example.com"]

    @pytest.mark.asyncio
    async def test_unpaginated_with_total(self, service, accounts):
        for i in range(30):
            accounts.add(email=f"u{i}@example.com")

        result = await service.list_all()

        assert result["total"] == 30
        assert len(result["users"]) == 30
        assert result["users"][0]["email"] == "u29@example.com"

    @pytest.mark.asyncio
    async def test_no_credentials_in_projection(self, service, accounts):
        accounts.add(email="a@example.com")

        result = await service.list_all()

        assert "password_hash" not in result["users"][0]
        assert "passwordHash" not in result["users"][0]


class TestGetAccount:
    @pytest.mark.asyncio
    async def test_get_account(self, service, funded_user):
        result = await service.get_account(funded_user["id"])
        assert result["email"] == "alice@example.com"
        assert result["balance"] == funded_user["balance"]

    @pytest.mark.asyncio
    async def test_get_missing(self, service):
        with pytest.raises(NotFoundError):
            await service.get_account(uuid4())
