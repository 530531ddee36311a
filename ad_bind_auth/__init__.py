"""Active Directory authentication over LDAP.

Resolves a login name to a user DN with a service account, then verifies the
password with a second bind as that DN.
"""

from .authenticator import Authenticator
from .config import (
    AuthenticatorConfig,
    ConfigLoader,
    ConfigurationError,
    LdapClientOptions,
    get_config_from_env,
)
from .errors import (
    ACTIVE_DIRECTORY_ERRORS,
    AD_LDAP_BIND_ERRORS,
    DirectoryBindError,
    DirectoryConfigurationError,
    DirectoryError,
    DirectorySearchError,
    InvalidCredentialsError,
)
from .identity import get_user_name_part
from .logging import configure_logging
from .models import (
    AuthenticationFailure,
    AuthenticationResult,
    AuthenticationSuccess,
    ErrorKind,
)
from .session import DirectorySession, SessionFactory

__all__ = [
    "ACTIVE_DIRECTORY_ERRORS",
    "AD_LDAP_BIND_ERRORS",
    "AuthenticationFailure",
    "AuthenticationResult",
    "AuthenticationSuccess",
    "Authenticator",
    "AuthenticatorConfig",
    "ConfigLoader",
    "ConfigurationError",
    "DirectoryBindError",
    "DirectoryConfigurationError",
    "DirectoryError",
    "DirectorySearchError",
    "DirectorySession",
    "ErrorKind",
    "InvalidCredentialsError",
    "LdapClientOptions",
    "SessionFactory",
    "configure_logging",
    "get_config_from_env",
    "get_user_name_part",
]
