"""
Twitch provider.
"""

from typing import Dict, Any

from ..exceptions import MalformedResponseError
from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


class TwitchProvider(BaseProvider):
    """Twitch sign-in. The Helix users endpoint wraps the user in a data list."""

    name = 'twitch'
    display_name = 'Twitch'
    authorize_url = 'https://id.twitch.tv/oauth2/authorize'
    token_url = 'https://id.twitch.tv/oauth2/token'
    userinfo_url = 'https://api.twitch.tv/helix/users'
    scopes = ('user:read:email',)

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        users = self._profile(response).get('data')
        if not isinstance(users, list) or not users or not isinstance(users[0], dict):
            raise MalformedResponseError("Missing user entry in twitch response", provider=self.name)
        profile = users[0]

        return CanonicalProfile(
            id=self._require_id(profile.get('id')),
            display_name=profile.get('display_name'),
            email=profile.get('email'),
            avatar_url=profile.get('profile_image_url'),
        )
