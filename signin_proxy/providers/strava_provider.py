"""
Strava provider.
"""

from typing import Dict, Any

from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


class StravaProvider(BaseProvider):
    """Strava sign-in. Strava does not expose the athlete's email address."""

    name = 'strava'
    display_name = 'Strava'
    authorize_url = 'https://www.strava.com/oauth/authorize'
    token_url = 'https://www.strava.com/oauth/token'
    userinfo_url = 'https://www.strava.com/api/v3/athlete'
    scopes = ('profile:read_all',)
    scope_delimiter = ','

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        profile = self._profile(response)
        return CanonicalProfile(
            id=self._require_id(profile.get('id')),
            display_name=self._join_name(profile.get('firstname'), profile.get('lastname')),
            avatar_url=profile.get('profile'),
        )
