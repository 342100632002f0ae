"""
Canonical user profile produced by every provider normalizer.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional


# Serialized key for each dataclass field
_FIELD_KEYS = {
    'id': 'id',
    'display_name': 'displayName',
    'email': 'email',
    'email_verified': 'emailVerified',
    'avatar_url': 'avatarUrl',
    'locale': 'locale',
}


@dataclass(frozen=True)
class CanonicalProfile:
    """Uniform identity record returned regardless of provider."""
    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    email_verified: Optional[bool] = None
    avatar_url: Optional[str] = None
    locale: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert profile to its camelCase wire form, leaving out absent fields."""
        return {
            _FIELD_KEYS[key]: value
            for key, value in asdict(self).items()
            if value is not None
        }
