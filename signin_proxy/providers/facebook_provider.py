"""
Facebook provider.
"""

from typing import Dict, Any

from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


class FacebookProvider(BaseProvider):
    """Facebook Login. The profile URL requests the picture field explicitly."""

    name = 'facebook'
    display_name = 'Facebook'
    authorize_url = 'https://www.facebook.com/dialog/oauth'
    token_url = 'https://graph.facebook.com/oauth/access_token'
    userinfo_url = 'https://graph.facebook.com/me?fields=id,name,email,picture'
    scopes = ('email',)
    scope_delimiter = ','

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        profile = self._profile(response)
        picture = ((profile.get('picture') or {}).get('data') or {}).get('url')

        return CanonicalProfile(
            id=self._require_id(profile.get('id')),
            display_name=profile.get('name'),
            email=profile.get('email'),
            avatar_url=picture,
        )
