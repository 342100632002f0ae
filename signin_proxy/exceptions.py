"""
Exception classes for sign-in normalization.

Every error here is local to a single login attempt; none of them leave the
provider registry in a different state.
"""

from typing import Dict, Any, Optional


class SigninError(Exception):
    """Base exception for all sign-in normalization errors."""

    default_code = 'signin-error'
    default_status = 500

    def __init__(self, message: str, error_code: str = None, status_code: int = None,
                 provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.status_code = status_code or self.default_status
        self.provider = provider

    def to_dict(self) -> Dict[str, Any]:
        """
        Describe the error for the caller's response layer.

        Returns:
            Dictionary with code, message, status_code and details
        """
        details = {}
        if self.provider:
            details['provider'] = self.provider
        return {
            'code': self.error_code,
            'message': self.message,
            'status_code': self.status_code,
            'details': details
        }


class NotFoundError(SigninError):
    """Raised when an unknown or unconfigured provider is requested."""

    default_code = 'provider-not-found'
    default_status = 404


class ValidationError(SigninError):
    """Raised when a pre-flow check rejects the incoming request."""

    default_code = 'invalid-request'
    default_status = 400

    def __init__(self, message: str, redirect_to: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.redirect_to = redirect_to

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.redirect_to:
            data['details']['redirect_to'] = self.redirect_to
        return data


class UpstreamError(SigninError):
    """Raised when a secondary provider API call fails or returns an unexpected shape."""

    default_code = 'upstream-error'
    default_status = 502


class MalformedResponseError(SigninError):
    """Raised when the provider's primary payload lacks a field normalization needs."""

    default_code = 'malformed-response'
    default_status = 502
