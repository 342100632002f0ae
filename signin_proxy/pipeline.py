"""
Normalization pipeline.

Turns the raw response of a finished OAuth exchange into a CanonicalProfile by
dispatching to the provider descriptor registered under the provider identifier.
"""

from typing import Dict, Any, Mapping, Optional
import logging

from .exceptions import SigninError, MalformedResponseError
from .profile import CanonicalProfile
from .providers import ProviderRegistry, ProviderHTTPClient


class NormalizationPipeline:
    """
    Dispatches raw OAuth responses to provider normalizers.

    The pipeline holds no per-request state; concurrent logins share only the
    read-only registry and the HTTP client.
    """

    def __init__(self, registry: ProviderRegistry, http_client: Optional[ProviderHTTPClient] = None,
                 timeout: float = 10.0):
        """
        Initialize the pipeline.

        Args:
            registry: Provider registry to dispatch through
            http_client: Client for secondary provider calls; built from timeout when omitted
            timeout: Secondary call timeout in seconds
        """
        self.registry = registry
        self.http_client = http_client or ProviderHTTPClient(timeout=timeout)
        self.logger = logging.getLogger(__name__)

    def normalize(self, provider_id: str, response: Mapping[str, Any]) -> CanonicalProfile:
        """
        Normalize a provider's raw OAuth response.

        Args:
            provider_id: Provider identifier, e.g. 'github'
            response: Raw response with 'profile', 'access_token' and optionally 'jwt'

        Returns:
            Canonical profile for the signed-in user

        Raises:
            NotFoundError: If the provider is unknown or not configured
            MalformedResponseError: If the primary payload lacks a required field
            UpstreamError: If a required secondary call fails
        """
        provider = self.registry.lookup(provider_id)

        if not isinstance(response, Mapping):
            raise MalformedResponseError(f"Expected a mapping as {provider_id} response", provider=provider_id)

        try:
            profile = provider.normalize(dict(response), self.http_client)
        except SigninError as e:
            self.logger.warning(f"Normalization failed for {provider_id}: {e.error_code} - {e.message}")
            raise
        except (KeyError, TypeError, AttributeError, IndexError) as e:
            self.logger.error(f"Unexpected {provider_id} payload shape: {e}", exc_info=True)
            raise MalformedResponseError(f"Unexpected {provider_id} response shape", provider=provider_id) from e

        self.logger.info(f"Normalized {provider_id} profile for user {profile.id}")
        return profile

    def normalize_to_dict(self, provider_id: str, response: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Normalize a provider's raw OAuth response into its wire form.

        Args:
            provider_id: Provider identifier, e.g. 'github'
            response: Raw response with 'profile', 'access_token' and optionally 'jwt'

        Returns:
            camelCase profile dictionary without absent fields

        Raises:
            NotFoundError: If the provider is unknown or not configured
            MalformedResponseError: If the primary payload lacks a required field
            UpstreamError: If a required secondary call fails
        """
        return self.normalize(provider_id, response).to_dict()
