"""
Sign-in provider normalization registry.

Maps third-party identity provider responses onto one canonical user profile.
"""

from .exceptions import (
    SigninError,
    NotFoundError,
    ValidationError,
    UpstreamError,
    MalformedResponseError
)
from .profile import CanonicalProfile
from .providers import ProviderRegistry, ProviderHTTPClient, PROVIDER_CLASSES
from .pipeline import NormalizationPipeline
from .config import Config, ConfigurationError, get_config

__version__ = '1.0.0'

__all__ = [
    'CanonicalProfile',
    'Config',
    'ConfigurationError',
    'MalformedResponseError',
    'NormalizationPipeline',
    'NotFoundError',
    'PROVIDER_CLASSES',
    'ProviderHTTPClient',
    'ProviderRegistry',
    'SigninError',
    'UpstreamError',
    'ValidationError',
    'get_config',
]
