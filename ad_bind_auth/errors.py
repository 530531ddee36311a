"""Directory error types and Active Directory bind error classification."""

from .models import ErrorKind


class DirectoryError(Exception):
    """Base exception for directory session errors."""

    pass


class DirectoryConfigurationError(DirectoryError):
    """The directory connection target is malformed or unsupported."""

    pass


class DirectoryBindError(DirectoryError):
    """A bind failed for a reason other than rejected credentials."""

    pass


class InvalidCredentialsError(DirectoryBindError):
    """The directory rejected the bind credentials (LDAP result code 49)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DirectorySearchError(DirectoryError):
    """The directory search operation failed."""

    pass


# AD sub-status codes reported in the "data" field of an invalidCredentials
# diagnostic message, e.g.
# "80090308: LdapErr: DSID-0C09044E, comment: AcceptSecurityContext error, data 775, v4563"
ACTIVE_DIRECTORY_ERRORS: dict[str, ErrorKind] = {
    "52e": ErrorKind.LOGON_FAILURE,
    "525": ErrorKind.NO_SUCH_USER,
    "530": ErrorKind.INVALID_LOGIN_HOURS,
    "531": ErrorKind.INVALID_WORKSTATION,
    "532": ErrorKind.PASSWORD_EXPIRED,
    "533": ErrorKind.ACCOUNT_DISABLED,
    "534": ErrorKind.INVALID_LOGIN_TYPE,
    "701": ErrorKind.ACCOUNT_EXPIRED,
    "773": ErrorKind.PASSWORD_MUST_CHANGE,
    "775": ErrorKind.ACCOUNT_LOCKED_OUT,
}

AD_LDAP_BIND_ERRORS: dict[str, ErrorKind] = {
    f" data {code}, ": kind for code, kind in ACTIVE_DIRECTORY_ERRORS.items()
}


def classify_bind_error(error: BaseException) -> ErrorKind:
    """Map a failed user bind to an error kind.

    Only invalid-credentials errors carry an AD sub-status; anything else
    (network, protocol) is reported as a generic authentication failure.
    """
    if not isinstance(error, InvalidCredentialsError):
        return ErrorKind.AUTHENTICATION_FAILED

    for marker, kind in AD_LDAP_BIND_ERRORS.items():
        if marker in error.message:
            return kind

    return ErrorKind.AUTHENTICATION_FAILED
