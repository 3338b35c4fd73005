"""
Artifact Models

Certificate and private key payloads read once from disk.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from certdeploy.constants import WILDCARD_REPLACEMENT


class ArtifactKind(Enum):
    """What an uploaded file is, named after the appliance import category."""

    CERTIFICATE = "certificate"
    PRIVATE_KEY = "private-key"


def safe_certificate_name(name: str) -> str:
    """Make a certificate name usable as a file name and appliance object name."""
    return name.strip().replace("*", WILDCARD_REPLACEMENT)


@dataclass(frozen=True)
class DeploymentArtifact:
    """An opaque blob to import on the appliance."""

    kind: ArtifactKind
    logical_name: str
    payload: bytes
    filename: str

    @classmethod
    def from_file(
        cls, kind: ArtifactKind, logical_name: str, path: Path
    ) -> "DeploymentArtifact":
        """Read an artifact from disk."""
        path = Path(path)
        filename = path.name
        if kind == ArtifactKind.PRIVATE_KEY:
            filename = f"{logical_name}.key"
        return cls(
            kind=kind,
            logical_name=logical_name,
            payload=path.read_bytes(),
            filename=filename,
        )

    def __repr__(self) -> str:
        return (
            f"DeploymentArtifact(kind={self.kind.value}, name={self.logical_name}, "
            f"size={len(self.payload)})"
        )
