"""
Configuration module for the sign-in provider registry.

This module resolves environment-sourced provider credentials and settings into an
explicit configuration object that is validated once at startup. Nothing here is
read again per request.
"""

import os
from dataclasses import dataclass
from typing import Dict, Any, Optional, List, Mapping
from urllib.parse import urlparse
from dotenv import load_dotenv

from .providers import PROVIDER_CLASSES


ENV_PREFIX = 'AUTH_PROVIDER_'
DEFAULT_HTTP_TIMEOUT = 10.0


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


@dataclass(frozen=True)
class ProviderCredentials:
    """OAuth client credentials for one provider."""
    client_id: str = ''
    client_secret: str = ''

    @property
    def is_complete(self) -> bool:
        return bool(self.client_id and self.client_secret)


class Config:
    """Configuration for the provider registry and its Flask host."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize configuration from an environment mapping.

        Args:
            environ: Mapping to read from. When omitted, the .env file is loaded
                and the process environment is used.

        Raises:
            ConfigurationError: If a value is invalid or a required provider
                has no credentials
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        # Snapshot; later environment changes are not seen
        self._environ = dict(environ)

        self._load_flask_config()
        self._load_provider_configurations()
        self._load_provider_settings()
        self._validate_required_providers()

    def _get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self._environ.get(name)
        if value is None or value.strip() == '':
            return default
        return value.strip()

    def _load_flask_config(self) -> None:
        """Load Flask application configuration settings."""
        self.FLASK_CONFIG = {
            'SECRET_KEY': self._get('FLASK_SECRET_KEY'),
            'DEBUG': (self._get('FLASK_DEBUG', 'False') or '').lower() == 'true',
        }

    def _load_provider_configurations(self) -> None:
        """Resolve credentials and provider-specific settings for every known provider."""
        self.PROVIDER_CREDENTIALS: Dict[str, ProviderCredentials] = {}
        self.OAUTH_CONFIG: Dict[str, Dict[str, Any]] = {}

        for provider_id, provider_class in PROVIDER_CLASSES.items():
            env_name = f"{ENV_PREFIX}{provider_id.upper()}_"
            credentials = ProviderCredentials(
                client_id=self._get(env_name + 'CLIENT_ID', ''),
                client_secret=self._get(env_name + 'CLIENT_SECRET', '')
            )
            self.PROVIDER_CREDENTIALS[provider_id] = credentials

            provider_config = {
                'client_id': credentials.client_id,
                'client_secret': credentials.client_secret,
            }
            for setting, default in provider_class.settings.items():
                provider_config[setting] = self._get(env_name + setting.upper(), default)

            self.OAUTH_CONFIG[provider_id] = provider_config

    def _load_provider_settings(self) -> None:
        """Load settings shared by all providers."""
        timeout = self._get('AUTH_PROVIDER_HTTP_TIMEOUT')
        try:
            http_timeout = float(timeout) if timeout is not None else DEFAULT_HTTP_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"AUTH_PROVIDER_HTTP_TIMEOUT must be a number, got: {timeout}")
        if http_timeout <= 0:
            raise ConfigurationError(f"AUTH_PROVIDER_HTTP_TIMEOUT must be positive, got: {timeout}")

        required = self._get('AUTH_PROVIDERS_REQUIRED', '') or ''
        allowed = self._get('AUTH_ACCESS_CONTROL_ALLOWED_REDIRECT_URLS', '') or ''

        self.PROVIDER_SETTINGS = {
            'http_timeout': http_timeout,
            'client_url': self._get('AUTH_CLIENT_URL'),
            'required_providers': [p.strip().lower() for p in required.split(',') if p.strip()],
            'allowed_redirect_urls': [u.strip() for u in allowed.split(',') if u.strip()],
        }

    def _validate_required_providers(self) -> None:
        """Fail startup when a provider marked as required cannot be used."""
        unknown = [p for p in self.PROVIDER_SETTINGS['required_providers'] if p not in PROVIDER_CLASSES]
        if unknown:
            raise ConfigurationError(f"Unknown providers in AUTH_PROVIDERS_REQUIRED: {', '.join(unknown)}")

        missing = [
            p for p in self.PROVIDER_SETTINGS['required_providers']
            if not self.PROVIDER_CREDENTIALS[p].is_complete
        ]
        if missing:
            names = ', '.join(
                f"{ENV_PREFIX}{p.upper()}_CLIENT_ID/{ENV_PREFIX}{p.upper()}_CLIENT_SECRET" for p in missing
            )
            raise ConfigurationError(
                f"Missing credentials for required providers: {', '.join(missing)}\n"
                f"Please set {names} in your .env file or environment."
            )

    def get_oauth_config(self, provider: str) -> Dict[str, Any]:
        """
        Get OAuth configuration for a specific provider.

        Args:
            provider: The OAuth provider name

        Returns:
            Copy of the provider configuration dictionary

        Raises:
            ConfigurationError: If provider is not supported
        """
        if provider not in self.OAUTH_CONFIG:
            raise ConfigurationError(f"Unsupported OAuth provider: {provider}")
        return dict(self.OAUTH_CONFIG[provider])

    def is_provider_configured(self, provider: str) -> bool:
        credentials = self.PROVIDER_CREDENTIALS.get(provider)
        return bool(credentials and credentials.is_complete)

    def get_enabled_providers(self) -> List[str]:
        """
        Get list of providers that have complete credentials.

        Returns:
            List of enabled provider names, in catalogue order
        """
        return [p for p in self.OAUTH_CONFIG if self.is_provider_configured(p)]

    def get_flask_config(self) -> Dict[str, Any]:
        return self.FLASK_CONFIG.copy()

    def get_provider_settings(self) -> Dict[str, Any]:
        return dict(self.PROVIDER_SETTINGS)

    def get_http_timeout(self) -> float:
        return self.PROVIDER_SETTINGS['http_timeout']

    def get_default_redirect_url(self) -> Optional[str]:
        return self.PROVIDER_SETTINGS['client_url']

    def is_allowed_redirect(self, url: Optional[str]) -> bool:
        """
        Check a caller-supplied redirect target against AUTH_CLIENT_URL and
        AUTH_ACCESS_CONTROL_ALLOWED_REDIRECT_URLS.

        A target is allowed when its scheme and host equal those of an allowed URL
        and its path lies under that URL's path.

        Args:
            url: Redirect target to check

        Returns:
            True if the target may be used as a redirect
        """
        if not url:
            return False

        target = urlparse(url)
        allowed_urls = [self.PROVIDER_SETTINGS['client_url']] + self.PROVIDER_SETTINGS['allowed_redirect_urls']
        for allowed_url in filter(None, allowed_urls):
            allowed = urlparse(allowed_url)
            if (target.scheme, target.netloc.lower()) != (allowed.scheme, allowed.netloc.lower()):
                continue
            base_path = allowed.path.rstrip('/')
            if target.path == base_path or target.path.startswith(base_path + '/') or not base_path:
                return True
        return False


_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the process-wide configuration instance, loading it on first use.

    Returns:
        The global Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config
