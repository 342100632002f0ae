"""
WorkOS SSO provider.

WorkOS fronts many enterprise identity providers. Which one handles a login is
chosen per request through an organization, connection or domain selector, so this
provider validates the selector before the OAuth flow starts.
"""

from types import MappingProxyType
from typing import Dict, Any, Optional, Mapping

from ..exceptions import ValidationError
from ..profile import CanonicalProfile
from .base_provider import BaseProvider
from .http_client import ProviderHTTPClient


WORKOS_BASE_URL = 'https://api.workos.com/sso'

SELECTORS = ('organization', 'connection', 'domain')

NAME_CLAIM = 'http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name'
PICTURE_CLAIM = 'http://schemas.auth0.com/picture'
LOCALE_CLAIM = 'http://schemas.auth0.com/locale'

MISSING_SELECTOR_MESSAGE = (
    'You need to give either an organization, a domain or a connection '
    'to be able to authenticate with WorkOS'
)


def resolve_selectors(query: Mapping[str, Any], defaults: Mapping[str, Optional[str]]) -> Dict[str, Optional[str]]:
    """
    Resolve the connection selector of a login request.

    A query value wins when it is a non-empty string; otherwise the configured
    default for that selector is used.

    Args:
        query: Query parameters of the incoming request
        defaults: Configured default per selector name

    Returns:
        Mapping of every selector name to its resolved value or None
    """
    resolved = {}
    for selector in SELECTORS:
        value = query.get(selector)
        if not isinstance(value, str) or not value:
            value = defaults.get(selector) or None
        resolved[selector] = value
    return resolved


class WorkOSProvider(BaseProvider):
    """WorkOS SSO sign-in."""

    name = 'workos'
    display_name = 'WorkOS'
    authorize_url = f'{WORKOS_BASE_URL}/authorize'
    token_url = f'{WORKOS_BASE_URL}/token'
    userinfo_url = f'{WORKOS_BASE_URL}/profile'
    settings = MappingProxyType({
        'default_organization': None,
        'default_connection': None,
        'default_domain': None,
    })

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.selector_defaults = {
            selector: self.config.get(f'default_{selector}') for selector in SELECTORS
        }

    def prepare_authorization(self, query: Mapping[str, Any], redirect_to: Optional[str] = None) -> Dict[str, str]:
        """
        Require an organization, connection or domain before starting the flow.

        Args:
            query: Query parameters of the incoming login request
            redirect_to: Where the caller should send the user if validation fails

        Returns:
            The non-empty selectors, to be sent as authorization parameters

        Raises:
            ValidationError: If no selector is given and none is configured
        """
        selectors = resolve_selectors(query, self.selector_defaults)
        dynamic_params = {key: value for key, value in selectors.items() if value}

        if not dynamic_params:
            self.logger.warning("Rejected WorkOS login without organization, connection or domain")
            raise ValidationError(MISSING_SELECTOR_MESSAGE, redirect_to=redirect_to, provider=self.name)

        self.logger.debug(f"WorkOS login selectors: {', '.join(sorted(dynamic_params))}")
        return dynamic_params

    def normalize(self, response: Dict[str, Any], http: ProviderHTTPClient) -> CanonicalProfile:
        profile = self._profile(response)
        raw_attributes = profile.get('raw_attributes') or {}

        return CanonicalProfile(
            id=self._require_id(profile.get('id')),
            display_name=raw_attributes.get(NAME_CLAIM),
            email=profile.get('email'),
            avatar_url=raw_attributes.get(PICTURE_CLAIM),
            locale=self._language(raw_attributes.get(LOCALE_CLAIM)),
        )
