"""
Deployment Orchestrator

Runs a deployment across the effective host set: reconcile hosts, obtain a key
per host, upload and commit, then prune keys of removed hosts.
"""

from typing import Dict

from certdeploy.constants import ENTRY_HOSTS, ERROR_NO_HOST
from certdeploy.exceptions import (
    ApiKeyMismatchError,
    AuthRejectedError,
    ConfigurationError,
    HostError,
    HostUnreachableError,
    KeyMissingPasswordError,
)
from certdeploy.logger import DeployLogger
from certdeploy.models.artifacts import ArtifactKind, DeploymentArtifact
from certdeploy.models.hosts import HostEntry
from certdeploy.models.results import HostDeploymentResult, HostErrorKind
from certdeploy.models.run import RunConfig, RunState
from certdeploy.services.appliance_api import ApplianceApi
from certdeploy.services.credential_store import CredentialStore
from certdeploy.services.deployment_sequencer import DeploymentSequencer
from certdeploy.services.host_reconciler import Reconciliation, reconcile
from certdeploy.services.key_lifecycle import KeyLifecycleManager

HOST_ERROR_KINDS = {
    KeyMissingPasswordError: HostErrorKind.KEY_MISSING_PASSWORD,
    HostUnreachableError: HostErrorKind.HOST_UNREACHABLE,
    AuthRejectedError: HostErrorKind.AUTH_REJECTED,
    ApiKeyMismatchError: HostErrorKind.KEY_MISMATCH,
}


class DeploymentOrchestrator:
    """
    Top-level deployment workflow.

    Hosts are processed one at a time in sorted order. A failing host is
    recorded and the batch moves on; only configuration errors abort the run,
    and they are raised before any appliance is contacted.
    """

    def __init__(
        self,
        config: RunConfig,
        store: CredentialStore,
        api: ApplianceApi,
        logger: DeployLogger,
    ):
        self.config = config
        self.store = store
        self.logger = logger
        self.key_manager = KeyLifecycleManager(api, store, logger)
        self.sequencer = DeploymentSequencer(
            api,
            logger,
            commit_user=config.credentials.user,
            force_commit=config.force_commit,
            key_passphrase=config.key_passphrase,
        )
        self.state = RunState()

    def load_artifacts(self) -> Dict[ArtifactKind, DeploymentArtifact]:
        """Read certificate and private key once for the whole batch."""
        name = self.config.certificate_name
        return {
            ArtifactKind.CERTIFICATE: DeploymentArtifact.from_file(
                ArtifactKind.CERTIFICATE, name, self.config.cert_path
            ),
            ArtifactKind.PRIVATE_KEY: DeploymentArtifact.from_file(
                ArtifactKind.PRIVATE_KEY, name, self.config.key_path
            ),
        }

    def reconcile_hosts(self) -> Reconciliation:
        """Work out the effective host set and persist it if it changed."""
        reconciliation = reconcile(self.config.remembered_hosts, self.config.declared_hosts)

        if not reconciliation.effective:
            raise ConfigurationError(ERROR_NO_HOST)

        if reconciliation.changed:
            self.logger.debug("Host list has changed, saving")
            self.store.save(ENTRY_HOSTS, reconciliation.effective.addresses)
        else:
            self.logger.debug("Host list is unchanged")

        self.state.effective_hosts = reconciliation.effective
        self.state.orphans = reconciliation.orphans.addresses
        return reconciliation

    def deploy_host(
        self, host: HostEntry, artifacts: Dict[ArtifactKind, DeploymentArtifact]
    ) -> HostDeploymentResult:
        """Key lifecycle then upload sequence for one host."""
        self.logger.debug(f"***** PROCESSING HOST: {host} *****")

        try:
            api_key = self.key_manager.obtain(
                host, self.config.credentials, self.config.credentials_changed
            )
        except HostError as e:
            self.logger.log_error(
                f"Unable to obtain an API key for host: {host}. {e.message}",
                context=e.appliance_message,
            )
            return HostDeploymentResult(
                host=host.address,
                error=HOST_ERROR_KINDS.get(type(e)),
                message=e.message,
            )

        try:
            return self.sequencer.deploy(host, api_key, artifacts, is_ecc=self.config.is_ecc)
        except HostError as e:
            self.logger.log_error(e.message, context=e.appliance_message)
            return HostDeploymentResult(
                host=host.address,
                key_obtained=True,
                error=HOST_ERROR_KINDS.get(type(e)),
                message=e.message,
            )

    def prune_orphans(self, reconciliation: Reconciliation) -> None:
        """Delete stored keys of hosts no longer declared, if policy allows."""
        if not reconciliation.changed or not reconciliation.orphans:
            return

        if not self.config.delete_orphan_keys:
            self.logger.debug(
                f"Keeping keys of removed hosts: {', '.join(reconciliation.orphans.addresses)}"
            )
            return

        self.logger.step("Removing orphan keys for deleted hosts")
        for host in reconciliation.orphans:
            if self.store.delete_api_key(host.fingerprint):
                self.state.pruned_keys.append(host.address)
                self.logger.success(f"Deleted saved key for host {host}")

    def run(self) -> RunState:
        """
        Deploy to every effective host.

        Returns:
            RunState with one result per processed host. If interrupted, the
            state is marked as such and orphan pruning is skipped.
        """
        reconciliation = self.reconcile_hosts()
        artifacts = self.load_artifacts()

        self.logger.step(
            f"Deploying certs to {len(reconciliation.effective)} host(s)"
        )
        try:
            for host in reconciliation.effective:
                self.state.record(self.deploy_host(host, artifacts))
        except KeyboardInterrupt:
            self.state.interrupted = True
            self.logger.warning(
                "Deployment interrupted. A host may have uploads that were never "
                "committed; check it and roll back manually if needed"
            )
            return self.state

        self.prune_orphans(reconciliation)
        return self.state
