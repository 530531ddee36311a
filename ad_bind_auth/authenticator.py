"""Two-phase Active Directory authentication."""

import structlog

from .cache import BindDNCache
from .config import (
    AuthenticatorConfig,
    ConfigurationError,
    LdapClientOptions,
    validate_cache_settings,
)
from .identity import get_user_name_part
from .ldap3_session import Ldap3SessionFactory
from .models import AuthenticationFailure, AuthenticationResult, ErrorKind
from .resolver import DirectoryResolver
from .session import SessionFactory
from .verifier import CredentialVerifier

logger = structlog.get_logger()


class Authenticator:
    """Authenticates users against Active Directory over LDAP.

    An attempt binds as the service account to find the user's DN, then binds
    a second, independent session as that DN with the supplied password. With
    ``cache_user_bind_dns`` enabled, resolved DNs are reused for
    ``cache_ttl_seconds`` and the lookup is skipped.

    Instances are safe to share between concurrent tasks.
    """

    def __init__(
        self,
        ldap_options: LdapClientOptions,
        config: AuthenticatorConfig,
        session_factory: SessionFactory | None = None,
    ):
        """Initialize the authenticator.

        Args:
            ldap_options: Directory server connection options
            config: Search base, service account and cache settings
            session_factory: Creates directory sessions (default: ldap3 sessions
                             built from ``ldap_options``)
        """
        self.ldap_options = ldap_options
        self.config = config
        self.session_factory = session_factory or Ldap3SessionFactory(ldap_options)

        self._cache: BindDNCache | None = None
        self._config_error: str | None = None
        if config.cache_user_bind_dns:
            try:
                validate_cache_settings(config)
            except ConfigurationError as e:
                self._config_error = str(e)
                logger.error("Invalid bind DN cache settings", error=str(e))
            else:
                self._cache = BindDNCache(
                    ttl_seconds=config.cache_ttl_seconds,
                    maxsize=config.cache_max_entries,
                )

        self._resolver = DirectoryResolver(
            self.session_factory,
            base_dn=config.base_dn,
            bind_user_dn=config.bind_user_dn,
            bind_user_password=config.bind_user_password,
        )
        self._verifier = CredentialVerifier(self.session_factory)

    async def authenticate(self, user_name: str, password: str) -> AuthenticationResult:
        """Authenticate a user.

        Args:
            user_name: Login name as ``user``, ``DOMAIN\\user`` or ``user@domain``
            password: The user's password

        Returns:
            AuthenticationSuccess, or AuthenticationFailure with the error kind
        """
        if not self.ldap_options.url:
            return self._reject(
                "", ErrorKind.CONFIGURATION_ERROR, "Directory server URL is not configured"
            )

        if self._config_error is not None:
            return self._reject("", ErrorKind.CONFIGURATION_ERROR, self._config_error)

        if user_name == "":
            return self._reject("", ErrorKind.EMPTY_USER_NAME, "User name is empty")

        if password == "":
            return self._reject("", ErrorKind.EMPTY_PASSWORD, "Password is empty")

        account_name = get_user_name_part(user_name)

        bind_user_dn = self._cache.get(account_name) if self._cache is not None else None
        if bind_user_dn is None:
            resolved = await self._resolver.resolve(account_name)
            if isinstance(resolved, AuthenticationFailure):
                self._log_failure(account_name, resolved)
                return resolved

            bind_user_dn = resolved
            if self._cache is not None:
                self._cache.set(account_name, bind_user_dn)

        result = await self._verifier.verify(bind_user_dn, password, account_name)

        if isinstance(result, AuthenticationFailure):
            self._log_failure(account_name, result)
        else:
            logger.info("Authentication successful", account_name=account_name)
        return result

    def clear_cache(self) -> None:
        """Drop all cached bind DNs."""
        if self._cache is not None:
            self._cache.clear()

    def _reject(
        self, bind_user_dn: str, error_kind: ErrorKind, message: str
    ) -> AuthenticationFailure:
        failure = AuthenticationFailure(
            bind_user_dn=bind_user_dn, error_kind=error_kind, message=message
        )
        logger.warning("Authentication rejected", error_kind=error_kind.value)
        return failure

    def _log_failure(self, account_name: str, failure: AuthenticationFailure) -> None:
        logger.warning(
            "Authentication failed",
            account_name=account_name,
            error_kind=failure.error_kind.value,
            error=failure.message,
        )
