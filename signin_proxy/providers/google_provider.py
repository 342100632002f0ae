"""
Google OAuth 2.0 provider implementation.

This module describes the Google provider: its OpenID Connect endpoints, the extra
authorization parameters Google needs, and the mapping from the OpenID userinfo
document to the canonical profile.
"""

from types import MappingProxyType
from typing import Dict, Any

from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


class GoogleProvider(BaseProvider):
    """
    Google OAuth 2.0 provider.

    The userinfo document already carries the email and its verification flag, so
    normalization is pure data extraction.
    """

    name = 'google'
    display_name = 'Google Account'
    authorize_url = 'https://accounts.google.com/o/oauth2/v2/auth'
    token_url = 'https://oauth2.googleapis.com/token'
    userinfo_url = 'https://openidconnect.googleapis.com/v1/userinfo'
    server_metadata_url = 'https://accounts.google.com/.well-known/openid-configuration'
    scopes = ('openid', 'email', 'profile')
    # Refresh tokens without forcing the consent prompt
    custom_params = MappingProxyType({'access_type': 'offline'})

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        """
        Map a Google userinfo document to a CanonicalProfile.

        Args:
            response: Raw response whose 'profile' is the OpenID userinfo document
            http: Unused, Google needs no secondary call

        Returns:
            Canonical profile keyed by the OpenID subject
        """
        profile = self._profile(response)
        email_verified = profile.get('email_verified')

        return CanonicalProfile(
            id=self._require_id(profile.get('sub')),
            display_name=profile.get('name'),
            email=profile.get('email'),
            email_verified=bool(email_verified) if email_verified is not None else None,
            avatar_url=profile.get('picture'),
            locale=self._language(profile.get('locale')),
        )
