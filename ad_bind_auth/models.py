"""Authentication result models and error kinds."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal


class ErrorKind(Enum):
    """Reason an authentication attempt was rejected.

    Members are only ever added, never renamed or removed.
    """

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EMPTY_USER_NAME = "EMPTY_USER_NAME"
    EMPTY_PASSWORD = "EMPTY_PASSWORD"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    LDAP_SEARCH_FAILED = "LDAP_SEARCH_FAILED"
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"

    # Active Directory bind sub-statuses
    LOGON_FAILURE = "LOGON_FAILURE"
    NO_SUCH_USER = "NO_SUCH_USER"
    INVALID_LOGIN_HOURS = "INVALID_LOGIN_HOURS"
    INVALID_WORKSTATION = "INVALID_WORKSTATION"
    PASSWORD_EXPIRED = "PASSWORD_EXPIRED"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
    INVALID_LOGIN_TYPE = "INVALID_LOGIN_TYPE"
    ACCOUNT_EXPIRED = "ACCOUNT_EXPIRED"
    PASSWORD_MUST_CHANGE = "PASSWORD_MUST_CHANGE"
    ACCOUNT_LOCKED_OUT = "ACCOUNT_LOCKED_OUT"


@dataclass(frozen=True)
class AuthenticationSuccess:
    """The supplied password bound successfully against the resolved account."""

    bind_user_dn: str
    account_name: str
    success: Literal[True] = field(default=True, init=False)


@dataclass(frozen=True)
class AuthenticationFailure:
    """Authentication was rejected.

    ``bind_user_dn`` is the best DN known when the attempt stopped: the service
    account DN if the account was never resolved, the account DN if the
    password bind failed, or an empty string if no directory work was done.
    """

    bind_user_dn: str
    error_kind: ErrorKind
    message: str
    error: BaseException | None = None
    success: Literal[False] = field(default=False, init=False)


AuthenticationResult = AuthenticationSuccess | AuthenticationFailure
