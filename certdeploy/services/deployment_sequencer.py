"""
Deployment Sequencer

Runs the upload and commit steps against one host.
"""

from typing import Dict, List, Optional

from certdeploy.constants import ERROR_COMMIT_SKIPPED
from certdeploy.exceptions import ApiKeyMismatchError, UploadFailedError
from certdeploy.logger import DeployLogger
from certdeploy.models.artifacts import ArtifactKind, DeploymentArtifact
from certdeploy.models.credentials import ApiKey
from certdeploy.models.hosts import HostEntry
from certdeploy.models.results import HostDeploymentResult, HostErrorKind, OperationKind
from certdeploy.services.appliance_api import ApplianceApi
from certdeploy.services.requests_builder import UPLOAD_KINDS


def upload_order(is_ecc: bool) -> List[ArtifactKind]:
    """
    Order in which artifacts are uploaded.

    The appliance can keep a key paired with a mismatched certificate when
    switching between RSA and ECC pairs, so ECC keys go first.
    """
    if is_ecc:
        return [ArtifactKind.PRIVATE_KEY, ArtifactKind.CERTIFICATE]
    return [ArtifactKind.CERTIFICATE, ArtifactKind.PRIVATE_KEY]


class DeploymentSequencer:
    """Uploads certificate and key to a host, then commits if both landed."""

    def __init__(
        self,
        api: ApplianceApi,
        logger: DeployLogger,
        commit_user: str,
        force_commit: bool = False,
        key_passphrase: Optional[str] = None,
    ):
        self.api = api
        self.logger = logger
        self.commit_user = commit_user
        self.force_commit = force_commit
        self.key_passphrase = key_passphrase

    def _upload(
        self, host: HostEntry, api_key: ApiKey, artifact: DeploymentArtifact
    ) -> None:
        outcome = self.api.call(
            host.address,
            UPLOAD_KINDS[artifact.kind],
            api_key=api_key.secret,
            artifact=artifact,
            passphrase=self.key_passphrase,
        )
        if not outcome.success:
            raise UploadFailedError(host.address, artifact.kind.value, outcome.message)

    def deploy(
        self,
        host: HostEntry,
        api_key: ApiKey,
        artifacts: Dict[ArtifactKind, DeploymentArtifact],
        is_ecc: bool = False,
    ) -> HostDeploymentResult:
        """
        Upload both artifacts and commit.

        Args:
            host: Target host
            api_key: VALID key issued by this host
            artifacts: Certificate and private key
            is_ecc: Upload the private key before the certificate

        Returns:
            HostDeploymentResult for this host

        Raises:
            ApiKeyMismatchError: If the key was issued by another host
        """
        if api_key.host_fingerprint != host.fingerprint:
            raise ApiKeyMismatchError(host.address)

        result = HostDeploymentResult(host=host.address, key_obtained=True)
        failures: List[str] = []

        # Each upload is attempted even if the other one failed
        for kind in upload_order(is_ecc):
            self.logger.debug(f"[{host}] Deploying {kind.value}")
            try:
                self._upload(host, api_key, artifacts[kind])
            except UploadFailedError as e:
                result.upload_failure = True
                result.error = HostErrorKind.UPLOAD_FAILED
                failures.append(e.message)
                self.logger.log_error(e.message, context=e.appliance_message)
            else:
                self.logger.success(f"{host}: {kind.value} uploaded")

        if result.upload_failure:
            result.message = "; ".join(failures)
            self.logger.log_error(f"{host}: {ERROR_COMMIT_SKIPPED}")
            return result

        if self.force_commit:
            self.logger.warning(
                f"{host}: force commit requested, committing ALL pending changes"
            )

        outcome = self.api.call(
            host.address,
            OperationKind.COMMIT,
            api_key=api_key.secret,
            user=self.commit_user,
            force=self.force_commit,
        )
        if outcome.success:
            result.committed = True
            self.logger.success(f"{host}: changes committed")
        else:
            result.error = HostErrorKind.COMMIT_FAILED
            result.message = outcome.message or "Commit failed"
            self.logger.log_error(
                f"Commit on host '{host}' failed. Uploaded artifacts remain in the "
                "candidate configuration; roll back manually if needed",
                context=outcome.message,
            )
        return result
