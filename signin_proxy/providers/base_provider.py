"""
Base provider interface for sign-in providers.

This module defines the abstract base class every provider descriptor implements:
the OAuth parameters forwarded to authlib, the normalizer that turns the provider's
raw response into a CanonicalProfile, and an optional pre-flow hook.
"""

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Dict, Any, Optional, List, Mapping, Tuple
import logging
from urllib.parse import urlparse

from ..exceptions import MalformedResponseError, UpstreamError
from ..profile import CanonicalProfile
from .http_client import ProviderHTTPClient


class ProviderConfigurationError(Exception):
    """Raised when provider configuration is invalid."""
    pass


def pick_primary_record(records: List[Dict[str, Any]], primary_flag: str) -> Optional[Dict[str, Any]]:
    """
    Choose one record from a provider's email list.

    The record flagged primary wins; without one, the first record in the returned
    order is used.

    Args:
        records: Email records as returned by the provider
        primary_flag: Name of the boolean field marking the primary record

    Returns:
        The chosen record, or None for an empty list
    """
    if not records:
        return None
    for record in records:
        if record.get(primary_flag):
            return record
    return records[0]


class BaseProvider(ABC):
    """
    Abstract base class for sign-in providers.

    Subclasses declare their endpoints and scopes as class attributes and implement
    normalize(). Instances are built once at startup and never mutated afterwards.
    """

    name: str = ''
    display_name: str = ''
    authorize_url: Optional[str] = None
    token_url: Optional[str] = None
    userinfo_url: Optional[str] = None
    # Secondary endpoint called by normalize(), if any
    email_url: Optional[str] = None
    # OpenID discovery document, required by authlib to verify id tokens
    server_metadata_url: Optional[str] = None
    scopes: Tuple[str, ...] = ()
    scope_delimiter: str = ' '
    custom_params: Mapping[str, str] = MappingProxyType({})
    # Extra settings read from AUTH_PROVIDER_<NAME>_<SETTING>, with their defaults
    settings: Mapping[str, Optional[str]] = MappingProxyType({})

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the provider.

        Args:
            config: Provider configuration dictionary with client_id, client_secret
                and any provider-specific settings

        Raises:
            ProviderConfigurationError: If configuration is invalid
        """
        self.config = dict(config)
        self.logger = logging.getLogger(f"{__name__.rsplit('.', 1)[0]}.{self.name}")

        self._validate_config()

        self.client_id = self.config['client_id']
        self.client_secret = self.config['client_secret']
        self.display_name = self.display_name or self.name.title()

    def _validate_config(self) -> None:
        """
        Validate provider configuration.

        Raises:
            ProviderConfigurationError: If required configuration is missing or invalid
        """
        if not self.name:
            raise ProviderConfigurationError(f"{self.__class__.__name__} does not declare a provider name")

        missing_fields = [field for field in ('client_id', 'client_secret') if not self.config.get(field)]
        if missing_fields:
            raise ProviderConfigurationError(
                f"Missing required configuration for {self.name} provider: {', '.join(missing_fields)}"
            )

        for field in ('client_id', 'client_secret'):
            if not isinstance(self.config[field], str):
                raise ProviderConfigurationError(f"{field} must be a string for {self.name} provider")

        for field in ('authorize_url', 'token_url', 'userinfo_url', 'email_url', 'server_metadata_url'):
            url = getattr(self, field)
            if url and not self._is_valid_url(url):
                raise ProviderConfigurationError(f"Invalid {field} for {self.name} provider: {url}")

    def _is_valid_url(self, url: str) -> bool:
        result = urlparse(url)
        return bool(result.scheme and result.netloc)

    def oauth_params(self) -> Dict[str, Any]:
        """
        Get the OAuth parameters that drive the external OAuth library.

        Returns:
            Dictionary with credentials, endpoints, scopes and extra parameters
        """
        return {
            'client_id': self.client_id,
            'client_secret': self.client_secret,
            'authorize_url': self.authorize_url,
            'access_token_url': self.token_url,
            'userinfo_endpoint': self.userinfo_url,
            'scope': list(self.scopes),
            'scope_delimiter': self.scope_delimiter,
            'custom_params': dict(self.custom_params),
        }

    def client_kwargs(self) -> Dict[str, Any]:
        """
        Get keyword arguments for authlib's OAuth.register().

        Returns:
            Registration keyword arguments for this provider
        """
        kwargs = {
            'client_id': self.client_id,
            'client_secret': self.client_secret,
            'authorize_url': self.authorize_url,
            'access_token_url': self.token_url,
            'userinfo_endpoint': self.userinfo_url,
        }
        if self.server_metadata_url:
            kwargs['server_metadata_url'] = self.server_metadata_url
        if self.scopes:
            kwargs['client_kwargs'] = {'scope': self.scope_delimiter.join(self.scopes)}
        if self.custom_params:
            kwargs['authorize_params'] = dict(self.custom_params)
        return kwargs

    @property
    def has_middleware(self) -> bool:
        return type(self).prepare_authorization is not BaseProvider.prepare_authorization

    def prepare_authorization(self, query: Mapping[str, Any], redirect_to: Optional[str] = None) -> Dict[str, str]:
        """
        Validate an incoming login request before the OAuth flow starts.

        Providers that need request-scoped routing information override this.

        Args:
            query: Query parameters of the incoming login request
            redirect_to: Where the caller should send the user if validation fails

        Returns:
            Dynamic parameters to merge into the authorization request

        Raises:
            ValidationError: If the request cannot start a flow for this provider
        """
        return {}

    @abstractmethod
    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        """
        Convert the provider's raw OAuth response into a CanonicalProfile.

        Args:
            response: Raw response with 'profile', 'access_token' and optionally 'jwt'
            http: Client for the provider's secondary endpoint

        Returns:
            Canonical profile for the signed-in user

        Raises:
            MalformedResponseError: If the primary payload lacks a required field
            UpstreamError: If a secondary call fails
        """
        pass

    # Extraction helpers shared by the provider implementations

    def _profile(self, response: Dict[str, Any]) -> Dict[str, Any]:
        profile = response.get('profile')
        if not isinstance(profile, dict):
            raise MalformedResponseError(f"Missing profile payload in {self.name} response", provider=self.name)
        return profile

    def _id_token_claims(self, response: Dict[str, Any]) -> Dict[str, Any]:
        payload = ((response.get('jwt') or {}).get('id_token') or {}).get('payload')
        if not isinstance(payload, dict):
            raise MalformedResponseError(f"Missing identity token claims in {self.name} response", provider=self.name)
        return payload

    def _require_id(self, value: Any) -> str:
        """Render a provider identifier as a non-empty string."""
        if isinstance(value, bool) or value is None:
            raise MalformedResponseError(f"Missing user identifier in {self.name} response", provider=self.name)
        identifier = str(value).strip()
        if not identifier:
            raise MalformedResponseError(f"Empty user identifier in {self.name} response", provider=self.name)
        return identifier

    def _fetch(self, response: Dict[str, Any], http: ProviderHTTPClient, url: Optional[str] = None) -> Any:
        """Call the provider's secondary endpoint with the exchange's access token."""
        return http.get_json(url or self.email_url, response.get('access_token'), provider=self.name)

    def _expect_list(self, data: Any, key: Optional[str] = None) -> List[Dict[str, Any]]:
        """Check the shape of a secondary response before reading records from it."""
        if key is not None:
            data = data.get(key) if isinstance(data, dict) else None
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise UpstreamError(f"Unexpected response shape from {self.name} email endpoint", provider=self.name)
        return data

    @staticmethod
    def _join_name(*parts: Optional[str]) -> Optional[str]:
        joined = ' '.join(part.strip() for part in parts if part and part.strip())
        return joined or None

    @staticmethod
    def _language(locale: Optional[str]) -> Optional[str]:
        """Reduce a locale tag such as 'en-US' or 'pt_BR' to its language code."""
        if not locale or not isinstance(locale, str):
            return None
        return locale.replace('_', '-').split('-', 1)[0].lower() or None

    def get_provider_info(self) -> Dict[str, Any]:
        """
        Get provider information for listings.

        Returns:
            Provider information dictionary
        """
        return {
            'name': self.name,
            'display_name': self.display_name,
            'type': 'oauth2',
            'scopes': list(self.scopes),
            'has_middleware': self.has_middleware,
            'secondary_endpoint': self.email_url,
        }

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', display_name='{self.display_name}')"

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(name='{self.name}', "
                f"display_name='{self.display_name}', scopes={self.scopes})")
