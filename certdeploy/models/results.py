"""
Result Models

Dataclass models for appliance operation outcomes and per-host results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OperationKind(Enum):
    """Every request the deployer sends to an appliance."""

    KEY_TEST = "keytest"
    KEY_GEN = "keygen"
    UPLOAD_CERT = "cert"
    UPLOAD_KEY = "key"
    COMMIT = "commit"


class HostErrorKind(Enum):
    """Why a host did not end up committed."""

    KEY_MISSING_PASSWORD = "key_missing_password"
    HOST_UNREACHABLE = "host_unreachable"
    AUTH_REJECTED = "auth_rejected"
    KEY_MISMATCH = "key_mismatch"
    UPLOAD_FAILED = "upload_failed"
    COMMIT_FAILED = "commit_failed"


@dataclass(frozen=True)
class OperationOutcome:
    """Interpretation of exactly one request/response pair."""

    kind: OperationKind
    success: bool
    reachable: bool
    message: Optional[str] = None
    extracted_key: Optional[str] = None

    @classmethod
    def unreachable(
        cls, kind: OperationKind, message: Optional[str] = None
    ) -> "OperationOutcome":
        """Outcome for a request that never got a response."""
        return cls(kind=kind, success=False, reachable=False, message=message)

    def __repr__(self) -> str:
        return (
            f"OperationOutcome(kind={self.kind.value}, success={self.success}, "
            f"reachable={self.reachable})"
        )


@dataclass
class HostDeploymentResult:
    """Aggregated outcome of one host's deployment."""

    host: str
    key_obtained: bool = False
    upload_failure: bool = False
    committed: bool = False
    error: Optional[HostErrorKind] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if the host ended up committed."""
        return self.committed and self.error is None

    @property
    def commit_skipped(self) -> bool:
        """Commit was withheld because an upload failed."""
        return self.upload_failure and not self.committed

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "key_obtained": self.key_obtained,
            "upload_failure": self.upload_failure,
            "committed": self.committed,
            "commit_skipped": self.commit_skipped,
            "error": self.error.value if self.error else None,
            "message": self.message,
        }

    def __repr__(self) -> str:
        return (
            f"HostDeploymentResult(host={self.host}, key={self.key_obtained}, "
            f"upload_failure={self.upload_failure}, committed={self.committed})"
        )
