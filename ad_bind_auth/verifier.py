"""Verify a user's password by binding as the user."""

import structlog

from .errors import DirectoryConfigurationError, DirectoryError, classify_bind_error
from .models import AuthenticationFailure, AuthenticationResult, AuthenticationSuccess, ErrorKind
from .session import SessionFactory, open_session

logger = structlog.get_logger()


class CredentialVerifier:
    """Binds a fresh session as the resolved user.

    Each verification opens its own session; the service account session used
    for lookup is never reused for a user bind.
    """

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    async def verify(
        self, bind_user_dn: str, password: str, account_name: str
    ) -> AuthenticationResult:
        """Bind as ``bind_user_dn`` with ``password``."""
        try:
            async with open_session(self.session_factory) as session:
                await session.bind(bind_user_dn, password)
        except DirectoryConfigurationError as e:
            return self._failure(bind_user_dn, ErrorKind.CONFIGURATION_ERROR, e)
        except DirectoryError as e:
            error_kind = classify_bind_error(e)
            logger.debug(
                "User bind failed",
                bind_user_dn=bind_user_dn,
                error_kind=error_kind.value,
                error_type=type(e).__name__,
            )
            return self._failure(bind_user_dn, error_kind, e)
        except Exception as e:
            logger.error(
                "User bind unexpected error",
                bind_user_dn=bind_user_dn,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._failure(bind_user_dn, classify_bind_error(e), e)

        return AuthenticationSuccess(bind_user_dn=bind_user_dn, account_name=account_name)

    def _failure(
        self, bind_user_dn: str, error_kind: ErrorKind, error: Exception
    ) -> AuthenticationFailure:
        return AuthenticationFailure(
            bind_user_dn=bind_user_dn,
            error_kind=error_kind,
            message=str(error),
            error=error,
        )
