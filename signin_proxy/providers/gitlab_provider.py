"""
GitLab provider.
"""

from typing import Dict, Any

from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


class GitLabProvider(BaseProvider):
    """GitLab.com sign-in."""

    name = 'gitlab'
    display_name = 'GitLab'
    authorize_url = 'https://gitlab.com/oauth/authorize'
    token_url = 'https://gitlab.com/oauth/token'
    userinfo_url = 'https://gitlab.com/api/v4/user'
    scopes = ('read_user',)

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        profile = self._profile(response)
        return CanonicalProfile(
            id=self._require_id(profile.get('id')),
            display_name=profile.get('name'),
            email=profile.get('email'),
            avatar_url=profile.get('avatar_url'),
        )
