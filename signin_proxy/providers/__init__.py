"""
Sign-in provider descriptors for the provider normalization registry.

PROVIDER_CLASSES is the closed catalogue of supported providers. Adding a provider
means adding a BaseProvider subclass and listing it here.
"""

from .base_provider import BaseProvider, ProviderConfigurationError, pick_primary_record
from .http_client import ProviderHTTPClient
from .azuread_provider import AzureADProvider
from .bitbucket_provider import BitbucketProvider
from .discord_provider import DiscordProvider
from .facebook_provider import FacebookProvider
from .github_provider import GitHubProvider
from .gitlab_provider import GitLabProvider
from .google_provider import GoogleProvider
from .linkedin_provider import LinkedInProvider
from .spotify_provider import SpotifyProvider
from .strava_provider import StravaProvider
from .twitch_provider import TwitchProvider
from .workos_provider import WorkOSProvider
from .provider_registry import ProviderRegistry

PROVIDER_CLASSES = {
    provider_class.name: provider_class
    for provider_class in (
        AzureADProvider,
        BitbucketProvider,
        DiscordProvider,
        FacebookProvider,
        GitHubProvider,
        GitLabProvider,
        GoogleProvider,
        LinkedInProvider,
        SpotifyProvider,
        StravaProvider,
        TwitchProvider,
        WorkOSProvider,
    )
}

__all__ = [
    'BaseProvider',
    'ProviderRegistry',
    'ProviderHTTPClient',
    'ProviderConfigurationError',
    'PROVIDER_CLASSES',
    'pick_primary_record',
    'AzureADProvider',
    'BitbucketProvider',
    'DiscordProvider',
    'FacebookProvider',
    'GitHubProvider',
    'GitLabProvider',
    'GoogleProvider',
    'LinkedInProvider',
    'SpotifyProvider',
    'StravaProvider',
    'TwitchProvider',
    'WorkOSProvider',
]
