"""Directory sessions backed by the ldap3 library."""

import asyncio
import ssl

import structlog
from ldap3 import NONE, SUBTREE, Connection, Server, Tls
from ldap3.core.exceptions import (
    LDAPDefinitionError,
    LDAPException,
    LDAPInvalidPortError,
    LDAPInvalidServerError,
    LDAPSSLConfigurationError,
)
from ldap3.core.results import RESULT_INVALID_CREDENTIALS, RESULT_SUCCESS

from .config import LdapClientOptions
from .errors import (
    DirectoryBindError,
    DirectoryConfigurationError,
    DirectoryError,
    DirectorySearchError,
    InvalidCredentialsError,
)

logger = structlog.get_logger()

_CONFIGURATION_ERRORS = (
    LDAPDefinitionError,
    LDAPInvalidPortError,
    LDAPInvalidServerError,
    LDAPSSLConfigurationError,
)


class Ldap3Session:
    """One ldap3 connection, opened by the first bind.

    Blocking ldap3 calls run in a worker thread.
    """

    def __init__(self, server: Server, receive_timeout: int | None = None):
        self.server = server
        self.receive_timeout = receive_timeout
        self._connection: Connection | None = None

    async def bind(self, dn: str, password: str) -> None:
        await asyncio.to_thread(self._bind, dn, password)

    async def search(self, base_dn: str, search_filter: str) -> list[str]:
        return await asyncio.to_thread(self._search, base_dn, search_filter)

    async def unbind(self) -> None:
        await asyncio.to_thread(self._unbind)

    def _bind(self, dn: str, password: str) -> None:
        if self._connection is not None:
            raise DirectoryBindError("Directory session is already bound")

        try:
            self._connection = Connection(
                self.server,
                user=dn,
                password=password,
                receive_timeout=self.receive_timeout,
                read_only=True,
                raise_exceptions=False,
            )
        except _CONFIGURATION_ERRORS as e:
            raise DirectoryConfigurationError(str(e)) from e

        try:
            bound = self._connection.bind()
        except LDAPException as e:
            raise DirectoryBindError(f"Bind as {dn} failed: {e}") from e

        if bound:
            return

        result = self._connection.result or {}
        if result.get("result") == RESULT_INVALID_CREDENTIALS:
            raise InvalidCredentialsError(result.get("message") or "invalidCredentials")
        raise DirectoryBindError(
            f"Bind as {dn} failed: {result.get('description', 'unknown error')}"
        )

    def _search(self, base_dn: str, search_filter: str) -> list[str]:
        if self._connection is None:
            raise DirectorySearchError("Directory session is not bound")

        try:
            self._connection.search(
                search_base=base_dn,
                search_filter=search_filter,
                search_scope=SUBTREE,
            )
        except LDAPException as e:
            raise DirectorySearchError(f"Search in {base_dn} failed: {e}") from e

        result = self._connection.result or {}
        if result.get("result") != RESULT_SUCCESS:
            raise DirectorySearchError(
                f"Search in {base_dn} failed: {result.get('description', 'unknown error')}"
            )

        return [
            entry["dn"]
            for entry in self._connection.response or []
            if entry.get("type") == "searchResEntry"
        ]

    def _unbind(self) -> None:
        if self._connection is None:
            return

        try:
            self._connection.unbind()
        except LDAPException as e:
            raise DirectoryError(f"Unbind failed: {e}") from e


class Ldap3SessionFactory:
    """Creates ldap3 sessions for a configured directory server."""

    def __init__(self, options: LdapClientOptions):
        self.options = options
        self._server: Server | None = None

    def __call__(self) -> Ldap3Session:
        return Ldap3Session(self._get_server(), receive_timeout=self.options.receive_timeout)

    def _get_server(self) -> Server:
        """Get or create the ldap3 server definition."""
        if self._server is None:
            try:
                tls = Tls(
                    validate=ssl.CERT_REQUIRED if self.options.tls_validate else ssl.CERT_NONE,
                    ca_certs_file=self.options.ca_certs_file,
                )
                self._server = Server(
                    self.options.url,
                    tls=tls,
                    get_info=NONE,
                    connect_timeout=self.options.connect_timeout,
                )
            except _CONFIGURATION_ERRORS as e:
                raise DirectoryConfigurationError(
                    f"Invalid directory server {self.options.url!r}: {e}"
                ) from e

            if not self.options.tls_validate:
                logger.warning(
                    "TLS certificate validation disabled - this is insecure and should only be used for development"
                )
        return self._server
