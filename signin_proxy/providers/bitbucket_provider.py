"""
Bitbucket provider.

Bitbucket never includes the email address in the user payload; it is read from
the dedicated /user/emails endpoint.
"""

from typing import Dict, Any

from ..profile import CanonicalProfile
from .base_provider import BaseProvider, pick_primary_record
from .http_client import ProviderHTTPClient


class BitbucketProvider(BaseProvider):
    """Bitbucket Cloud sign-in."""

    name = 'bitbucket'
    display_name = 'Bitbucket'
    authorize_url = 'https://bitbucket.org/site/oauth2/authorize'
    token_url = 'https://bitbucket.org/site/oauth2/access_token'
    userinfo_url = 'https://api.bitbucket.org/2.0/user'
    email_url = 'https://api.bitbucket.org/2.0/user/emails'
    scopes = ('account',)

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        profile = self._profile(response)
        user_id = self._require_id(profile.get('uuid'))

        records = self._expect_list(self._fetch(response, http), key='values')
        record = pick_primary_record(records, 'is_primary') or {}

        avatar = ((profile.get('links') or {}).get('avatar') or {}).get('href')

        return CanonicalProfile(
            id=user_id,
            display_name=profile.get('display_name'),
            email=record.get('email'),
            email_verified=record.get('is_confirmed') if record else None,
            avatar_url=avatar,
        )
