"""
Credential Models

User/password pairs and the per-host API keys exchanged for them.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class Validity(Enum):
    """Result of probing a stored API key."""

    UNKNOWN = "unknown"
    VALID = "valid"
    INVALID = "invalid"


class KeyState(Enum):
    """Per-host key lifecycle state within one run."""

    NO_KEY = "no_key"
    TESTING = "testing"
    VALID = "valid"
    INVALID = "invalid"
    REGENERATING = "regenerating"
    FAILED = "failed"


@dataclass(frozen=True)
class Credentials:
    """Appliance admin credentials. The password may be intentionally absent."""

    user: str
    password: Optional[str] = None

    @property
    def has_password(self) -> bool:
        return bool(self.password)

    def __repr__(self) -> str:
        masked = "***" if self.password else None
        return f"Credentials(user={self.user!r}, password={masked!r})"


@dataclass(frozen=True)
class ApiKey:
    """Session API key issued by one appliance."""

    host_fingerprint: str
    secret: str
    validity: Validity = Validity.UNKNOWN

    def with_validity(self, validity: Validity) -> "ApiKey":
        return replace(self, validity=validity)

    @property
    def is_valid(self) -> bool:
        return self.validity == Validity.VALID

    def __repr__(self) -> str:
        return (
            f"ApiKey(host={self.host_fingerprint[:8]}, validity={self.validity.value})"
        )
