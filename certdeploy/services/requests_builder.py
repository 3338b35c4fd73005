"""
Appliance Request Builder

Maps each OperationKind to the request the appliance XML API expects.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple
from xml.sax.saxutils import escape as xml_escape

from certdeploy.constants import (
    CERT_FORMAT,
    MULTIPART_CONTENT_TYPE,
    PARTIAL_COMMIT_EXCLUDED_SCOPES,
)
from certdeploy.models.artifacts import ArtifactKind, DeploymentArtifact
from certdeploy.models.results import OperationKind


@dataclass(frozen=True)
class ApplianceRequest:
    """A single POST to the appliance API."""

    kind: OperationKind
    data: List[Tuple[str, str]]
    params: Dict[str, str] = field(default_factory=dict)
    files: Optional[Dict[str, Tuple[str, bytes, str]]] = None

    @property
    def is_multipart(self) -> bool:
        return self.files is not None

    def describe(self) -> str:
        """Loggable one-line summary (field names only, no values)."""
        fields = ", ".join(name for name, _ in self.data)
        if self.files:
            fields += ", " + ", ".join(self.files)
        return f"{self.kind.value} [{fields}]"


def commit_command(user: str, force: bool = False) -> str:
    """
    Build the XML commit command.

    A scoped commit only commits the acting admin's changes and excludes the
    broader configuration scopes. A force commit commits everything pending
    for the admin and should be used with caution.
    """
    admin = f"<admin><member>{xml_escape(user)}</member></admin>"
    if force:
        return f"<commit><partial><force>{admin}</force></partial></commit>"

    excluded = "".join(
        f"<{scope}>exclude</{scope}>" for scope in PARTIAL_COMMIT_EXCLUDED_SCOPES
    )
    return f"<commit><partial>{excluded}{admin}</partial></commit>"


def _key_test(api_key: str, **_) -> ApplianceRequest:
    # A version lookup is the cheapest authenticated call
    return ApplianceRequest(
        kind=OperationKind.KEY_TEST,
        data=[("type", "version"), ("key", api_key)],
    )


def _key_gen(user: str, password: str, **_) -> ApplianceRequest:
    return ApplianceRequest(
        kind=OperationKind.KEY_GEN,
        data=[("type", "keygen"), ("user", user), ("password", password)],
    )


def _upload(
    kind: OperationKind,
    api_key: str,
    artifact: DeploymentArtifact,
    passphrase: Optional[str] = None,
    **_,
) -> ApplianceRequest:
    data = [
        ("category", artifact.kind.value),
        ("certificate-name", artifact.logical_name),
        ("key", api_key),
        ("format", CERT_FORMAT),
    ]
    if artifact.kind == ArtifactKind.PRIVATE_KEY and passphrase is not None:
        data.append(("passphrase", passphrase))

    return ApplianceRequest(
        kind=kind,
        data=data,
        params={"type": "import"},
        files={"file": (artifact.filename, artifact.payload, MULTIPART_CONTENT_TYPE)},
    )


def _upload_cert(**kwargs) -> ApplianceRequest:
    return _upload(OperationKind.UPLOAD_CERT, **kwargs)


def _upload_key(**kwargs) -> ApplianceRequest:
    return _upload(OperationKind.UPLOAD_KEY, **kwargs)


def _commit(api_key: str, user: str, force: bool = False, **_) -> ApplianceRequest:
    return ApplianceRequest(
        kind=OperationKind.COMMIT,
        data=[
            ("type", "commit"),
            ("action", "partial"),
            ("key", api_key),
            ("cmd", commit_command(user, force=force)),
        ],
    )


REQUEST_BUILDERS: Dict[OperationKind, Callable[..., ApplianceRequest]] = {
    OperationKind.KEY_TEST: _key_test,
    OperationKind.KEY_GEN: _key_gen,
    OperationKind.UPLOAD_CERT: _upload_cert,
    OperationKind.UPLOAD_KEY: _upload_key,
    OperationKind.COMMIT: _commit,
}

UPLOAD_KINDS: Dict[ArtifactKind, OperationKind] = {
    ArtifactKind.CERTIFICATE: OperationKind.UPLOAD_CERT,
    ArtifactKind.PRIVATE_KEY: OperationKind.UPLOAD_KEY,
}


def build_request(kind: OperationKind, **kwargs) -> ApplianceRequest:
    """
    Build the request for an operation.

    Args:
        kind: Operation to perform
        **kwargs: Operation inputs (api_key, user, password, artifact,
            passphrase, force)

    Returns:
        ApplianceRequest ready for the transport client
    """
    return REQUEST_BUILDERS[kind](**kwargs)
