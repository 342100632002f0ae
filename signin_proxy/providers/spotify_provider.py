"""
Spotify provider.
"""

from typing import Dict, Any

from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


class SpotifyProvider(BaseProvider):
    """Spotify sign-in."""

    name = 'spotify'
    display_name = 'Spotify'
    authorize_url = 'https://accounts.spotify.com/authorize'
    token_url = 'https://accounts.spotify.com/api/token'
    userinfo_url = 'https://api.spotify.com/v1/me'
    scopes = ('user-read-email', 'user-read-private')

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        profile = self._profile(response)
        images = profile.get('images') or []

        return CanonicalProfile(
            id=self._require_id(profile.get('id')),
            display_name=profile.get('display_name'),
            email=profile.get('email'),
            avatar_url=images[0].get('url') if images else None,
        )
