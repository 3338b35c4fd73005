"""
Run Models

Immutable configuration resolved once per run, and the mutable state threaded
through the orchestrator while hosts are processed.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from certdeploy.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_KEY_PASSPHRASE,
    DEFAULT_READ_TIMEOUT,
    EXIT_HOST_FAILURES,
    EXIT_INTERRUPTED,
    EXIT_OK,
)
from certdeploy.models.credentials import Credentials
from certdeploy.models.hosts import HostSet
from certdeploy.models.results import HostDeploymentResult


@dataclass(frozen=True)
class RunConfig:
    """Everything a deployment run needs, resolved from input and stored state."""

    certificate_name: str
    cert_path: Path
    key_path: Path
    credentials: Credentials
    remembered_hosts: HostSet
    declared_hosts: Optional[HostSet] = None
    credentials_changed: bool = False
    is_ecc: bool = False
    force_commit: bool = False
    save_password: bool = True
    delete_orphan_keys: bool = True
    key_passphrase: str = DEFAULT_KEY_PASSPHRASE
    verify_tls: bool = True
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    fail_on_host_error: bool = False

    @property
    def timeout(self) -> tuple:
        return (self.connect_timeout, self.read_timeout)


@dataclass
class RunState:
    """Per-host results collected while the batch runs."""

    effective_hosts: HostSet = field(default_factory=HostSet)
    results: Dict[str, HostDeploymentResult] = field(default_factory=dict)
    orphans: List[str] = field(default_factory=list)
    pruned_keys: List[str] = field(default_factory=list)
    interrupted: bool = False

    def record(self, result: HostDeploymentResult) -> None:
        self.results[result.host] = result

    @property
    def failed_hosts(self) -> List[str]:
        return [host for host, result in self.results.items() if not result.is_success]

    @property
    def succeeded_hosts(self) -> List[str]:
        return [host for host, result in self.results.items() if result.is_success]

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_hosts)

    def exit_code(self, fail_on_host_error: bool = False) -> int:
        """Process exit status for this run."""
        if self.interrupted:
            return EXIT_INTERRUPTED
        if fail_on_host_error and self.has_failures:
            return EXIT_HOST_FAILURES
        return EXIT_OK

    def to_dict(self) -> dict:
        return {
            "hosts": self.effective_hosts.addresses,
            "results": [result.to_dict() for result in self.results.values()],
            "orphans": list(self.orphans),
            "pruned_keys": list(self.pruned_keys),
            "interrupted": self.interrupted,
        }
