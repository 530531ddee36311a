"""Resolve account names to bind DNs using a service account."""

import structlog

from .errors import DirectoryBindError, DirectoryConfigurationError, DirectorySearchError
from .models import AuthenticationFailure, ErrorKind
from .session import SessionFactory, build_user_filter, open_session

logger = structlog.get_logger()


class DirectoryResolver:
    """Looks up the DN of a user entry by account name.

    The lookup binds as the configured service account, searches the sub-tree
    under ``base_dn`` and takes the first matching entry.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        base_dn: str,
        bind_user_dn: str,
        bind_user_password: str,
    ):
        self.session_factory = session_factory
        self.base_dn = base_dn
        self.bind_user_dn = bind_user_dn
        self.bind_user_password = bind_user_password

    async def resolve(self, account_name: str) -> str | AuthenticationFailure:
        """Resolve an account name to its bind DN.

        Args:
            account_name: sAMAccountName with any domain qualifier removed

        Returns:
            The DN of the first matching user entry, or a failure carrying the
            service account DN
        """
        try:
            async with open_session(self.session_factory) as session:
                await session.bind(self.bind_user_dn, self.bind_user_password)
                logger.debug(
                    "Bound to directory as service account",
                    bind_user_dn=self.bind_user_dn,
                )

                entries = await session.search(
                    self.base_dn, build_user_filter(account_name)
                )
        except DirectoryConfigurationError as e:
            return self._failure(ErrorKind.CONFIGURATION_ERROR, str(e), e)
        except (DirectoryBindError, DirectorySearchError) as e:
            return self._failure(ErrorKind.LDAP_SEARCH_FAILED, str(e), e)
        except Exception as e:
            logger.error(
                "Account lookup unexpected error",
                account_name=account_name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._failure(ErrorKind.LDAP_SEARCH_FAILED, str(e), e)

        if not entries:
            return self._failure(
                ErrorKind.ACCOUNT_NOT_FOUND,
                f'User with sAMAccountName "{account_name}" not found.',
            )

        logger.debug("Account resolved", account_name=account_name, bind_user_dn=entries[0])
        return entries[0]

    def _failure(
        self, error_kind: ErrorKind, message: str, error: BaseException | None = None
    ) -> AuthenticationFailure:
        return AuthenticationFailure(
            bind_user_dn=self.bind_user_dn,
            error_kind=error_kind,
            message=message,
            error=error,
        )
