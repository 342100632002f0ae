"""
GitHub provider.

GitHub only returns the public email in the user payload, which is often empty,
so the address is read from the /user/emails endpoint instead.
"""

from typing import Dict, Any

from ..profile import CanonicalProfile
from .base_provider import BaseProvider, pick_primary_record
from .http_client import ProviderHTTPClient


class GitHubProvider(BaseProvider):
    """GitHub OAuth App sign-in."""

    name = 'github'
    display_name = 'GitHub'
    authorize_url = 'https://github.com/login/oauth/authorize'
    token_url = 'https://github.com/login/oauth/access_token'
    userinfo_url = 'https://api.github.com/user'
    email_url = 'https://api.github.com/user/emails'
    scopes = ('user:email',)

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        profile = self._profile(response)
        user_id = self._require_id(profile.get('id'))

        records = self._expect_list(self._fetch(response, http))
        record = pick_primary_record(records, 'primary') or {}

        return CanonicalProfile(
            id=user_id,
            display_name=profile.get('name') or profile.get('login'),
            email=record.get('email'),
            email_verified=record.get('verified') if record else None,
            avatar_url=profile.get('avatar_url'),
        )
