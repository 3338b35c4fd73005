"""Deploy command - Push a certificate/key pair to one or more appliances"""

from pathlib import Path
from typing import Optional

import rich_click as click

from certdeploy.base import BaseCommand
from certdeploy.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_KEY_PASSPHRASE,
    DEFAULT_READ_TIMEOUT,
    STATE_DIR_ENV,
)
from certdeploy.models.run import RunConfig, RunState
from certdeploy.services import (
    ApplianceApi,
    ConfigService,
    CredentialStore,
    DeploymentOrchestrator,
    DeployOptions,
    TransportClient,
)
from certdeploy.ui_components import render_summary


class DeployCommand(BaseCommand):
    """Deploy a certificate and private key to every configured host."""

    def __init__(
        self,
        options: DeployOptions,
        state_dir: Optional[str] = None,
        verbose: bool = False,
        json_output: bool = False,
    ):
        super().__init__(state_dir=state_dir, verbose=verbose, json_output=json_output)
        self.options = options
        self.certificate_name = options.resolved_certificate_name()
        self.store = CredentialStore(self.state_dir, self.certificate_name)

    def build_client(self, config: RunConfig) -> TransportClient:
        return TransportClient(verify_tls=config.verify_tls, timeout=config.timeout)

    def execute(self) -> None:
        """Execute deploy command."""
        self.show_header(title="Deploy Certificate", certificate=self.certificate_name)

        logger = self.init_logger(self.certificate_name, "deploy")

        logger.step("Resolving configuration")
        config = ConfigService(self.store, logger).resolve(self.options)
        logger.success("Configuration resolved")

        if config.force_commit:
            self.print_warning(
                "Force commit enabled: ALL pending changes for this admin will be committed"
            )

        client = self.build_client(config)
        try:
            orchestrator = DeploymentOrchestrator(
                config, self.store, ApplianceApi(client, logger), logger
            )
            state = orchestrator.run()
        finally:
            client.close()

        self._report(state)

        exit_code = state.exit_code(config.fail_on_host_error)
        if self.json_output:
            self.output_json(state.to_dict(), exit_code=exit_code)
        if exit_code != 0:
            raise SystemExit(exit_code)

    def _report(self, state: RunState) -> None:
        if self.json_output:
            return

        render_summary(state, console=self.console)

        if state.pruned_keys:
            self.print_dim(f"Removed keys of deleted hosts: {', '.join(state.pruned_keys)}")
        elif state.orphans:
            self.print_dim(f"Kept keys of removed hosts: {', '.join(state.orphans)}")

        if state.interrupted:
            self.print_warning("Deployment interrupted before all hosts were processed")
        elif state.has_failures:
            self.print_warning(
                f"{len(state.failed_hosts)} of {len(state.results)} host(s) failed: "
                f"{', '.join(state.failed_hosts)}"
            )
        else:
            self.print_success(f"Certificate deployed to {len(state.results)} host(s)")

        self.print_log_location()


@click.command(name="deploy")
@click.option(
    "--cert",
    "cert_path",
    required=True,
    type=click.Path(path_type=Path),
    help="Certificate (full chain) PEM file",
)
@click.option(
    "--key",
    "key_path",
    required=True,
    type=click.Path(path_type=Path),
    help="Private key PEM file",
)
@click.option(
    "--name",
    "certificate_name",
    help="Certificate object name on the appliance (default: cert file name)",
)
@click.option(
    "--host",
    "-H",
    "hosts",
    envvar="PANOS_HOST",
    help="Host(s), comma or space separated (remembered between runs)",
)
@click.option("--user", "-u", envvar="PANOS_USER", help="Admin user with import and commit rights")
@click.option("--password", "-p", envvar="PANOS_PASS", help="Admin password used to generate API keys")
@click.option("--ecc", is_flag=True, help="ECDSA/ECC pair: upload the key before the certificate")
@click.option(
    "--force-commit",
    is_flag=True,
    help="Commit ALL pending changes for the admin, not only this import. Use with caution!",
)
@click.option(
    "--save-password/--no-save-password",
    default=None,
    envvar="PANOS_SAVE_PASSWORD",
    help="Keep the password in the state file so keys can be regenerated (default: save)",
)
@click.option(
    "--delete-orphan-keys/--keep-orphan-keys",
    default=None,
    envvar="PANOS_DELETE_ORPHAN_KEYS",
    help="Delete saved keys of hosts removed from the host list (default: delete)",
)
@click.option(
    "--passphrase",
    default=DEFAULT_KEY_PASSPHRASE,
    show_default=True,
    help="Passphrase sent with the private key import",
)
@click.option("--insecure", is_flag=True, help="Do not verify the appliance TLS certificate")
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_READ_TIMEOUT,
    show_default=True,
    help="Read timeout per request, in seconds",
)
@click.option(
    "--state-dir",
    envvar=STATE_DIR_ENV,
    help="Directory holding saved hosts, credentials, keys and logs",
)
@click.option(
    "--fail-on-host-error",
    is_flag=True,
    help="Exit with status 2 if any host failed",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def deploy(
    cert_path,
    key_path,
    certificate_name,
    hosts,
    user,
    password,
    ecc,
    force_commit,
    save_password,
    delete_orphan_keys,
    passphrase,
    insecure,
    timeout,
    state_dir,
    fail_on_host_error,
    verbose,
    json_output,
):
    """
    Deploy a certificate/key pair to one or more appliances

    This command will:
    1. Reconcile the host list with the one saved last run
    2. Test each host's saved API key, generating a new one if needed
    3. Upload certificate and key, then commit if both uploads succeeded
    4. Delete saved keys of hosts removed from the list

    Examples:
        certdeploy deploy --cert fullchain.pem --key www.key -H fw1.example.com -u acme -p secret
        certdeploy deploy --cert fullchain.pem --key www.key --ecc
        PANOS_HOST="fw1.example.com, fw2.example.com" certdeploy deploy --cert c.pem --key k.pem
    """
    options = DeployOptions(
        cert_path=cert_path,
        key_path=key_path,
        certificate_name=certificate_name,
        hosts=hosts,
        user=user,
        password=password,
        is_ecc=ecc,
        force_commit=force_commit,
        save_password=save_password,
        delete_orphan_keys=delete_orphan_keys,
        key_passphrase=passphrase,
        verify_tls=not insecure,
        connect_timeout=DEFAULT_CONNECT_TIMEOUT,
        read_timeout=timeout,
        fail_on_host_error=fail_on_host_error,
    )
    cmd = DeployCommand(
        options, state_dir=state_dir, verbose=verbose, json_output=json_output
    )
    cmd.run()
