"""Account models."""

from enum import Enum

# Columns that never leave the persistence layer
CREDENTIAL_FIELDS = frozenset({"password", "password_hash"})


class AccountRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class KycStatus(str, Enum):
    NOT_SUBMITTED = "not_submitted"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


# Fields matched by the admin console search box
SUSPENDED_SEARCH_FIELDS = ("email", "first_name", "last_name")
DIRECTORY_SEARCH_FIELDS = ("email", "first_name", "last_name", "phone", "country")


def strip_credentials(account: dict) -> dict:
    """Return a copy of an account record without credential material."""
    return {key: value for key, value in account.items() if key not in CREDENTIAL_FIELDS}
