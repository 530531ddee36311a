"""Directory session protocol and scoped session handling."""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Protocol

import structlog
from ldap3.utils.conv import escape_filter_chars

logger = structlog.get_logger()


class DirectorySession(Protocol):
    """A single connection to the directory.

    Implementations raise ``DirectoryError`` subclasses on failure.
    """

    async def bind(self, dn: str, password: str) -> None:
        """Authenticate the session as ``dn``."""
        ...

    async def search(self, base_dn: str, search_filter: str) -> list[str]:
        """Run a sub-tree search and return the DNs of matching entries."""
        ...

    async def unbind(self) -> None:
        """Close the session."""
        ...


SessionFactory = Callable[[], DirectorySession]


@asynccontextmanager
async def open_session(factory: SessionFactory) -> AsyncIterator[DirectorySession]:
    """Open a directory session and unbind it on every exit path."""
    session = factory()
    try:
        yield session
    finally:
        try:
            await session.unbind()
        except Exception as e:
            logger.warning(
                "Directory session unbind failed",
                error=str(e),
                error_type=type(e).__name__,
            )


def build_user_filter(account_name: str) -> str:
    """Build the search filter matching a user entry by sAMAccountName."""
    return f"(&(sAMAccountName={escape_filter_chars(account_name)})(objectClass=user))"
