"""
Provider registry for sign-in providers.

This module implements the read-only lookup table from provider identifier to
provider descriptor. The registry is built once at startup from the resolved
configuration and handed to authlib so it can drive each provider's OAuth flow.
"""

from types import MappingProxyType
from typing import Dict, Any, List, Optional, Mapping, Iterable, Iterator
import logging
from flask import Flask
from authlib.integrations.flask_client import OAuth

from ..exceptions import NotFoundError
from .base_provider import BaseProvider


class ProviderRegistry:
    """
    Immutable mapping from provider identifier to provider descriptor.

    Providers whose credentials are missing are kept out of the mapping and
    remembered as disabled, so lookups can say why they fail.
    """

    def __init__(self, providers: Mapping[str, BaseProvider], disabled: Iterable[str] = ()):
        """
        Initialize the registry.

        Args:
            providers: Provider instances keyed by provider identifier
            disabled: Known provider identifiers left out for lack of credentials
        """
        self._providers = MappingProxyType(dict(providers))
        self._disabled = frozenset(disabled)
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config) -> 'ProviderRegistry':
        """
        Build the registry from the provider catalogue and a resolved configuration.

        Args:
            config: Config instance with provider credentials and settings

        Returns:
            Registry holding every provider that has complete credentials

        Raises:
            ProviderConfigurationError: If a configured provider rejects its configuration
        """
        from . import PROVIDER_CLASSES

        logger = logging.getLogger(__name__)
        providers: Dict[str, BaseProvider] = {}
        disabled: List[str] = []

        for name, provider_class in PROVIDER_CLASSES.items():
            if not config.is_provider_configured(name):
                logger.warning(f"Sign-in provider '{name}' is disabled: missing client id or client secret")
                disabled.append(name)
                continue

            providers[name] = provider_class(config.get_oauth_config(name))
            logger.info(f"Registered provider: {name} ({provider_class.__name__})")

        logger.info(f"Provider registry ready with {len(providers)} providers")
        return cls(providers, disabled)

    def lookup(self, provider_id: str) -> BaseProvider:
        """
        Get a registered provider by identifier.

        Args:
            provider_id: Provider identifier, e.g. 'github'

        Returns:
            Provider descriptor

        Raises:
            NotFoundError: If the provider is unknown or not configured
        """
        provider = self._providers.get(provider_id)
        if provider is not None:
            return provider

        if provider_id in self._disabled:
            raise NotFoundError(f"Sign-in provider '{provider_id}' is not configured", provider=provider_id)
        raise NotFoundError(f"Unknown sign-in provider: {provider_id}", provider=provider_id)

    def preflight(self, provider_id: str, query: Mapping[str, Any],
                  redirect_to: Optional[str] = None) -> Dict[str, str]:
        """
        Run a provider's pre-flow hook for an incoming login request.

        Args:
            provider_id: Provider identifier
            query: Query parameters of the login request
            redirect_to: Redirect target reported if validation fails

        Returns:
            Dynamic parameters to merge into the authorization request

        Raises:
            NotFoundError: If the provider is unknown or not configured
            ValidationError: If the provider rejects the request
        """
        return self.lookup(provider_id).prepare_authorization(query, redirect_to=redirect_to)

    def init_app(self, app: Flask, oauth: Optional[OAuth] = None) -> OAuth:
        """
        Register every provider with authlib and attach the registry to a Flask app.

        Args:
            app: Flask application instance
            oauth: Optional authlib OAuth instance; one is created when omitted

        Returns:
            The authlib OAuth instance holding the provider clients
        """
        if oauth is None:
            oauth = OAuth(app)

        for name, provider in self._providers.items():
            oauth.register(name, overwrite=True, **provider.client_kwargs())
            self.logger.debug(f"Registered OAuth client for {name}")

        app.extensions['signin_registry'] = self
        app.extensions['signin_oauth'] = oauth

        self.logger.info(f"Registered OAuth clients for {len(self._providers)} providers")
        return oauth

    @property
    def provider_ids(self) -> List[str]:
        return list(self._providers)

    @property
    def disabled_providers(self) -> List[str]:
        return sorted(self._disabled)

    def get_provider_info(self) -> List[Dict[str, Any]]:
        """
        Get information about all registered providers.

        Returns:
            List of provider information dictionaries
        """
        return [provider.get_provider_info() for provider in self._providers.values()]

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)
