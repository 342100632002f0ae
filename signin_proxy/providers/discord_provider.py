"""
Discord provider.
"""

from typing import Dict, Any, Optional

from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


AVATAR_URL_TEMPLATE = 'https://cdn.discordapp.com/avatars/{id}/{avatar}.png'


class DiscordProvider(BaseProvider):
    """Discord sign-in."""

    name = 'discord'
    display_name = 'Discord'
    authorize_url = 'https://discord.com/api/oauth2/authorize'
    token_url = 'https://discord.com/api/oauth2/token'
    userinfo_url = 'https://discord.com/api/users/@me'
    scopes = ('identify', 'email')

    @staticmethod
    def _handle(username: Optional[str], discriminator: Optional[str]) -> Optional[str]:
        # Accounts migrated to unique usernames report discriminator "0"
        if username and discriminator and discriminator != '0':
            return f"{username}#{discriminator}"
        return username

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        profile = self._profile(response)
        user_id = self._require_id(profile.get('id'))
        avatar = profile.get('avatar')

        return CanonicalProfile(
            id=user_id,
            display_name=self._handle(profile.get('username'), profile.get('discriminator')),
            email=profile.get('email'),
            email_verified=bool(profile.get('verified')),
            avatar_url=AVATAR_URL_TEMPLATE.format(id=user_id, avatar=avatar) if avatar else None,
            locale=self._language(profile.get('locale')),
        )
