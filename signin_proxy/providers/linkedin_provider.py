"""
LinkedIn provider.

The lite profile carries names, locale and picture; the email address lives behind
a separate emailAddress endpoint.
"""

from typing import Dict, Any, Optional

from ..exceptions import UpstreamError
from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


class LinkedInProvider(BaseProvider):
    """LinkedIn sign-in using the v2 lite profile."""

    name = 'linkedin'
    display_name = 'LinkedIn'
    authorize_url = 'https://www.linkedin.com/oauth/v2/authorization'
    token_url = 'https://www.linkedin.com/oauth/v2/accessToken'
    userinfo_url = ('https://api.linkedin.com/v2/me?projection=(id,localizedFirstName,'
                    'localizedLastName,firstName,profilePicture(displayImage~:playableStreams))')
    email_url = 'https://api.linkedin.com/v2/emailAddress?q=members&projection=(elements*(handle~))'
    scopes = ('r_emailaddress', 'r_liteprofile')

    @staticmethod
    def _public_picture(profile: Dict[str, Any]) -> Optional[str]:
        elements = ((profile.get('profilePicture') or {}).get('displayImage~') or {}).get('elements') or []
        for element in elements:
            if element.get('authorizationMethod') == 'PUBLIC':
                identifiers = element.get('identifiers') or []
                if identifiers:
                    return identifiers[0].get('identifier')
                return None
        return None

    def _email(self, response: Dict[str, Any], http: ProviderHTTPClient) -> Optional[str]:
        elements = self._expect_list(self._fetch(response, http), key='elements')
        if not elements:
            return None
        handle = elements[0].get('handle~')
        if not isinstance(handle, dict):
            raise UpstreamError("Unexpected response shape from linkedin email endpoint", provider=self.name)
        return handle.get('emailAddress')

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        profile = self._profile(response)
        user_id = self._require_id(profile.get('id'))
        email = self._email(response, http)

        preferred_locale = (profile.get('firstName') or {}).get('preferredLocale') or {}

        return CanonicalProfile(
            id=user_id,
            display_name=self._join_name(profile.get('localizedFirstName'), profile.get('localizedLastName')),
            email=email,
            avatar_url=self._public_picture(profile),
            locale=self._language(preferred_locale.get('language')),
        )
