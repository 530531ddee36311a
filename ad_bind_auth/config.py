"""Configuration for directory connections and authentication."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger()


class ConfigurationError(Exception):
    """Raised when authenticator configuration cannot be loaded."""

    pass


@dataclass
class LdapClientOptions:
    """Connection settings for the directory server."""

    url: str
    connect_timeout: int = 10
    receive_timeout: int = 10
    tls_validate: bool = True
    ca_certs_file: str | None = None


@dataclass
class AuthenticatorConfig:
    """Directory search and bind settings.

    ``bind_user_dn`` is a service account allowed to search ``base_dn`` for
    user entries. It is never used to verify a user's password.
    """

    base_dn: str
    bind_user_dn: str
    bind_user_password: str
    cache_user_bind_dns: bool = False
    cache_ttl_seconds: int = 60
    cache_max_entries: int = 1000


def validate_cache_settings(config: AuthenticatorConfig) -> None:
    """Check the bind DN cache limits.

    Raises:
        ConfigurationError: ``cache_ttl_seconds`` is not a positive number or
            ``cache_max_entries`` is not a positive integer
    """
    ttl = config.cache_ttl_seconds
    if isinstance(ttl, bool) or not isinstance(ttl, int | float) or ttl <= 0:
        raise ConfigurationError(
            f"cache_ttl_seconds must be a positive number, got {ttl!r}"
        )

    max_entries = config.cache_max_entries
    if isinstance(max_entries, bool) or not isinstance(max_entries, int) or max_entries <= 0:
        raise ConfigurationError(
            f"cache_max_entries must be a positive integer, got {max_entries!r}"
        )


class ConfigLoader:
    """Loads authenticator configuration from a YAML file."""

    def __init__(self, config_file: str = "/etc/ad-bind-auth/config.yaml"):
        self.config_file = Path(config_file)

    def load(self) -> tuple[LdapClientOptions, AuthenticatorConfig]:
        """Load connection options and authenticator settings."""
        if not self.config_file.exists():
            raise ConfigurationError(f"Config file does not exist: {self.config_file}")

        try:
            with open(self.config_file) as f:
                content = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(
                "Failed to load config file", file=str(self.config_file), error=str(e)
            )
            raise ConfigurationError(f"Cannot read {self.config_file}: {e}") from e

        if not isinstance(content, dict):
            raise ConfigurationError(f"{self.config_file} is not a YAML mapping")

        ldap_section = self._section(content, "ldap")
        ad_section = self._section(content, "active_directory")

        try:
            ldap_options = LdapClientOptions(**ldap_section)
            config = AuthenticatorConfig(**ad_section)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        validate_cache_settings(config)

        logger.info(
            "Loaded authenticator config",
            file=str(self.config_file),
            url=ldap_options.url,
            base_dn=config.base_dn,
            cache_user_bind_dns=config.cache_user_bind_dns,
        )
        return ldap_options, config

    def _section(self, content: dict[str, Any], name: str) -> dict[str, Any]:
        section = content.get(name)
        if not isinstance(section, dict):
            raise ConfigurationError(f"Missing '{name}' section in {self.config_file}")
        return section


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name, "").lower()
    if value == "true":
        return True
    if value == "false":
        return False
    return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def get_config_from_env() -> tuple[LdapClientOptions, AuthenticatorConfig]:
    """Build configuration from AD_* environment variables.

    Raises:
        ConfigurationError: A numeric variable is not an integer or the cache
            settings are out of range
    """
    ldap_options = LdapClientOptions(
        url=os.getenv("AD_LDAP_URL", ""),
        connect_timeout=_env_int("AD_LDAP_CONNECT_TIMEOUT", 10),
        receive_timeout=_env_int("AD_LDAP_RECEIVE_TIMEOUT", 10),
        tls_validate=_env_bool("AD_LDAP_TLS_VALIDATE", True),
        ca_certs_file=os.getenv("AD_LDAP_CA_CERTS_FILE"),
    )
    config = AuthenticatorConfig(
        base_dn=os.getenv("AD_BASE_DN", ""),
        bind_user_dn=os.getenv("AD_BIND_USER_DN", ""),
        bind_user_password=os.getenv("AD_BIND_USER_PASSWORD", ""),
        cache_user_bind_dns=_env_bool("AD_CACHE_USER_BIND_DNS", False),
        cache_ttl_seconds=_env_int("AD_CACHE_TTL_SECONDS", 60),
    )
    validate_cache_settings(config)
    return ldap_options, config
