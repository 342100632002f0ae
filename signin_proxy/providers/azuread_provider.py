"""
Azure Active Directory provider.

Identity comes from the OpenID Connect id_token rather than a profile endpoint, so
normalization needs no secondary call.
"""

from types import MappingProxyType
from typing import Dict, Any

from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


AZURE_BASE_URL = 'https://login.microsoftonline.com'
AZURE_USERINFO_URL = 'https://graph.microsoft.com/oidc/userinfo'


class AzureADProvider(BaseProvider):
    """Azure AD (Microsoft Entra ID) sign-in, scoped to a configurable tenant."""

    name = 'azuread'
    display_name = 'Azure AD'
    scopes = ('openid', 'profile', 'email')
    settings = MappingProxyType({'tenant': 'common'})

    def __init__(self, config: Dict[str, Any]):
        self.tenant = config.get('tenant') or self.settings['tenant']
        base_url = f"{AZURE_BASE_URL}/{self.tenant}"
        self.authorize_url = f"{base_url}/oauth2/v2.0/authorize"
        self.token_url = f"{base_url}/oauth2/v2.0/token"
        self.userinfo_url = AZURE_USERINFO_URL
        self.server_metadata_url = f"{base_url}/v2.0/.well-known/openid-configuration"
        super().__init__(config)

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        claims = self._id_token_claims(response)
        return CanonicalProfile(
            # oid is stable across applications in the tenant; sub is not
            id=self._require_id(claims.get('oid')),
            display_name=claims.get('name'),
            email=claims.get('email'),
        )
