"""Shared fixtures: an in-memory directory standing in for Active Directory."""

import asyncio

import pytest

from ad_bind_auth import AuthenticatorConfig, InvalidCredentialsError, LdapClientOptions
from ad_bind_auth.session import build_user_filter

SERVICE_DN = "CN=svc-auth,CN=Users,DC=example,DC=com"
SERVICE_PASSWORD = "svc-secret"
BASE_DN = "DC=example,DC=com"


def ad_bind_message(code: str) -> str:
    """Diagnostic text AD returns with an invalidCredentials bind result."""
    return (
        "80090308: LdapErr: DSID-0C09044E, comment: AcceptSecurityContext error, "
        f"data {code}, v4563"
    )


class FakeTimer:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class FakeSession:
    """Directory session recording every operation on its directory."""

    def __init__(self, directory: "FakeDirectory"):
        self.directory = directory
        self.bound_as: str | None = None
        self.unbind_count = 0

    async def bind(self, dn: str, password: str) -> None:
        self.directory.calls.append(("bind", dn))
        await asyncio.sleep(0)

        if dn in self.directory.bind_errors:
            raise self.directory.bind_errors[dn]
        if self.directory.passwords.get(dn) != password:
            raise InvalidCredentialsError(ad_bind_message("52e"))
        self.bound_as = dn

    async def search(self, base_dn: str, search_filter: str) -> list[str]:
        self.directory.calls.append(("search", base_dn, search_filter))
        await asyncio.sleep(0)

        if self.directory.search_error is not None:
            raise self.directory.search_error
        assert self.bound_as == SERVICE_DN

        return [
            dn
            for account_name, dn in self.directory.users.items()
            if build_user_filter(account_name) == search_filter
        ]

    async def unbind(self) -> None:
        self.directory.calls.append(("unbind",))
        self.unbind_count += 1


class FakeDirectory:
    """Session factory over a fixed set of users."""

    def __init__(self) -> None:
        self.users: dict[str, str] = {}
        self.passwords: dict[str, str] = {SERVICE_DN: SERVICE_PASSWORD}
        self.bind_errors: dict[str, Exception] = {}
        self.search_error: Exception | None = None
        self.sessions: list[FakeSession] = []
        self.calls: list[tuple[str, ...]] = []

    def add_user(self, account_name: str, password: str) -> str:
        dn = f"CN={account_name},OU=Staff,DC=example,DC=com"
        self.users[account_name] = dn
        self.passwords[dn] = password
        return dn

    def __call__(self) -> FakeSession:
        session = FakeSession(self)
        self.sessions.append(session)
        return session

    def operations(self, name: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def directory() -> FakeDirectory:
    """Directory with a single user, alice."""
    directory = FakeDirectory()
    directory.add_user("alice", "alice-password")
    return directory


@pytest.fixture
def ldap_options() -> LdapClientOptions:
    return LdapClientOptions(url="ldaps://dc01.example.com")


@pytest.fixture
def config() -> AuthenticatorConfig:
    return AuthenticatorConfig(
        base_dn=BASE_DN,
        bind_user_dn=SERVICE_DN,
        bind_user_password=SERVICE_PASSWORD,
    )
