"""
certdeploy Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .hosts import (
    HostEntry,
    HostSet,
    host_fingerprint,
    normalize_address,
)
from .credentials import (
    ApiKey,
    Credentials,
    KeyState,
    Validity,
)
from .artifacts import (
    ArtifactKind,
    DeploymentArtifact,
    safe_certificate_name,
)
from .results import (
    HostDeploymentResult,
    HostErrorKind,
    OperationKind,
    OperationOutcome,
)
from .run import (
    RunConfig,
    RunState,
)

__all__ = [
    # Hosts
    "HostEntry",
    "HostSet",
    "host_fingerprint",
    "normalize_address",
    # Credentials
    "ApiKey",
    "Credentials",
    "KeyState",
    "Validity",
    # Artifacts
    "ArtifactKind",
    "DeploymentArtifact",
    "safe_certificate_name",
    # Results
    "HostDeploymentResult",
    "HostErrorKind",
    "OperationKind",
    "OperationOutcome",
    # Run
    "RunConfig",
    "RunState",
]
