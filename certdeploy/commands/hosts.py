"""Host state commands - Inspect and edit what previous deployments remembered"""

from typing import Any, Dict, Optional

import rich_click as click
from rich.table import Table

from certdeploy.base import BaseCommand
from certdeploy.constants import (
    DEFAULT_DELETE_ORPHAN_KEYS,
    DEFAULT_SAVE_PASSWORD,
    ENTRY_DELETE_ORPHAN_KEYS,
    ENTRY_HOSTS,
    ENTRY_PASSWORD,
    ENTRY_SAVE_PASSWORD,
    ENTRY_USER,
    STATE_DIR_ENV,
)
from certdeploy.exceptions import ConfigurationError
from certdeploy.models.artifacts import safe_certificate_name
from certdeploy.models.hosts import HostEntry, HostSet, normalize_address
from certdeploy.services import CredentialStore


class HostsListCommand(BaseCommand):
    """Show remembered hosts, user, policies and which hosts have a saved key."""

    def __init__(
        self,
        certificate_name: str,
        state_dir: Optional[str] = None,
        json_output: bool = False,
    ):
        super().__init__(state_dir=state_dir, json_output=json_output)
        self.certificate_name = safe_certificate_name(certificate_name)
        self.store = CredentialStore(self.state_dir, self.certificate_name)

    def collect(self) -> Dict[str, Any]:
        hosts = HostSet.from_stored(self.store.load(ENTRY_HOSTS))
        save_password = self.store.load(ENTRY_SAVE_PASSWORD)
        delete_orphan_keys = self.store.load(ENTRY_DELETE_ORPHAN_KEYS)
        return {
            "certificate": self.certificate_name,
            "state_file": str(self.store.state_file),
            "user": self.store.load(ENTRY_USER),
            "password_saved": bool(self.store.load(ENTRY_PASSWORD)),
            "save_password": (
                DEFAULT_SAVE_PASSWORD if save_password is None else save_password
            ),
            "delete_orphan_keys": (
                DEFAULT_DELETE_ORPHAN_KEYS
                if delete_orphan_keys is None
                else delete_orphan_keys
            ),
            "hosts": [
                {
                    "host": host.address,
                    "fingerprint": host.fingerprint,
                    "key_saved": self.store.load_api_key(host.fingerprint) is not None,
                }
                for host in hosts
            ],
        }

    def execute(self) -> None:
        data = self.collect()

        if self.json_output:
            self.output_json(data)
            return

        if not self.store.state_file.exists():
            self.print_warning(
                f"No saved state for '{self.certificate_name}' in {self.state_dir}"
            )
            return

        self.show_header(
            title="Saved Hosts",
            certificate=self.certificate_name,
            details={
                "User": data["user"] or "-",
                "Password saved": "yes" if data["password_saved"] else "no",
                "Save password": str(data["save_password"]).lower(),
                "Delete orphan keys": str(data["delete_orphan_keys"]).lower(),
            },
        )

        table = Table(show_header=True, header_style="bold")
        table.add_column("Host", style="cyan")
        table.add_column("Fingerprint", style="dim")
        table.add_column("API key")
        for host in data["hosts"]:
            table.add_row(
                host["host"],
                host["fingerprint"],
                "[green]saved[/green]" if host["key_saved"] else "[dim]none[/dim]",
            )
        self.console.print(table)
        self.print_dim(f"State file: {data['state_file']}")


class KeysForgetCommand(BaseCommand):
    """Drop one host's saved API key so the next deployment regenerates it."""

    def __init__(
        self,
        certificate_name: str,
        host: str,
        state_dir: Optional[str] = None,
        json_output: bool = False,
    ):
        super().__init__(state_dir=state_dir, json_output=json_output)
        self.certificate_name = safe_certificate_name(certificate_name)
        self.host = host
        self.store = CredentialStore(self.state_dir, self.certificate_name)

    def execute(self) -> None:
        if not normalize_address(self.host):
            raise ConfigurationError("Host cannot be empty")

        host = HostEntry(self.host)
        deleted = self.store.delete_api_key(host.fingerprint)

        if self.json_output:
            self.output_json({"host": host.address, "deleted": deleted})
            return

        if deleted:
            self.print_success(f"Forgot saved API key for {host}")
        else:
            self.print_warning(f"No saved API key for {host}")


@click.command(name="hosts:list")
@click.option("--name", "certificate_name", required=True, help="Certificate name")
@click.option("--state-dir", envvar=STATE_DIR_ENV, help="State directory")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def hosts_list(certificate_name, state_dir, json_output):
    """
    Show hosts remembered for a certificate

    Examples:
        certdeploy hosts:list --name www.example.com
        certdeploy hosts:list --name www.example.com --json
    """
    cmd = HostsListCommand(certificate_name, state_dir=state_dir, json_output=json_output)
    cmd.run()


@click.command(name="keys:forget")
@click.option("--name", "certificate_name", required=True, help="Certificate name")
@click.option("--host", "-H", required=True, help="Host whose saved API key is dropped")
@click.option("--state-dir", envvar=STATE_DIR_ENV, help="State directory")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
def keys_forget(certificate_name, host, state_dir, json_output):
    """
    Forget the saved API key of one host

    The next deploy generates a fresh key for that host (requires a password).

    Examples:
        certdeploy keys:forget --name www.example.com -H fw1.example.com
    """
    cmd = KeysForgetCommand(
        certificate_name, host, state_dir=state_dir, json_output=json_output
    )
    cmd.run()
