"""
Configuration Service

Merges command-line / environment input with the credential store into an
immutable RunConfig. Runs before any network call.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from certdeploy.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_DELETE_ORPHAN_KEYS,
    DEFAULT_KEY_PASSPHRASE,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_SAVE_PASSWORD,
    ENTRY_DELETE_ORPHAN_KEYS,
    ENTRY_HOSTS,
    ENTRY_PASSWORD,
    ENTRY_SAVE_PASSWORD,
    ENTRY_USER,
    ERROR_MISSING_FILES,
    ERROR_NO_HOST,
    ERROR_NO_PASSWORD,
    ERROR_NO_USER,
)
from certdeploy.exceptions import ConfigurationError
from certdeploy.logger import DeployLogger
from certdeploy.models.artifacts import safe_certificate_name
from certdeploy.models.credentials import Credentials
from certdeploy.models.hosts import HostSet
from certdeploy.models.run import RunConfig
from certdeploy.services.credential_store import CredentialStore


@dataclass(frozen=True)
class DeployOptions:
    """Raw deployment input. None means "not given this run"."""

    cert_path: Path
    key_path: Path
    certificate_name: Optional[str] = None
    hosts: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    is_ecc: bool = False
    force_commit: bool = False
    save_password: Optional[bool] = None
    delete_orphan_keys: Optional[bool] = None
    key_passphrase: str = DEFAULT_KEY_PASSPHRASE
    verify_tls: bool = True
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    fail_on_host_error: bool = False

    def resolved_certificate_name(self) -> str:
        """Certificate object name, defaulting to the certificate file stem."""
        name = self.certificate_name or Path(self.cert_path).stem
        return safe_certificate_name(name)


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class ConfigService:
    """
    Resolves a RunConfig.

    Responsibilities:
    - Policy flags: saved when given, loaded otherwise
    - User/password: fresh values override stored ones, changes are persisted
    - credentials_changed computed once
    - Fatal validation (ConfigMissing) before any appliance is contacted

    Nothing is written to the store until validation has passed, so a run
    aborted by a ConfigurationError leaves the saved state untouched.
    """

    def __init__(self, store: CredentialStore, logger: DeployLogger):
        self.store = store
        self.logger = logger

    def _resolve_policy(
        self, entry: str, given: Optional[bool], default: bool, updates: Dict[str, Any]
    ) -> bool:
        if given is not None:
            self.logger.debug(f"Policy {entry} given as {str(given).lower()}")
            updates[entry] = bool(given)
            return bool(given)

        value = _as_bool(self.store.load(entry), default)
        self.logger.debug(f"Policy {entry} set to {str(value).lower()}")
        return value

    def _resolve_user(
        self, given: Optional[str], updates: Dict[str, Any]
    ) -> Tuple[Optional[str], bool]:
        stored = self.store.load(ENTRY_USER)
        if not given:
            self.logger.debug("Loading user from saved state")
            return (str(stored) if stored else None), False

        if stored and str(stored) == given:
            self.logger.debug("User is unchanged")
            return given, False

        self.logger.debug("User has changed")
        updates[ENTRY_USER] = given
        return given, bool(stored)

    def _resolve_password(
        self, given: Optional[str], save_password: bool, updates: Dict[str, Any]
    ) -> Tuple[Optional[str], bool]:
        # An unsaved password is deleted on persist, so it is never reused
        stored = self.store.load(ENTRY_PASSWORD) if save_password else None
        if not given:
            self.logger.debug("Loading password from saved state")
            return (str(stored) if stored else None), False

        if stored and str(stored) == given:
            self.logger.debug("Password is unchanged")
            return given, False

        if save_password:
            self.logger.debug("Password has changed")
            updates[ENTRY_PASSWORD] = given
        return given, bool(stored)

    def _resolve_hosts(self, given: Optional[str]) -> Tuple[HostSet, Optional[HostSet]]:
        remembered = HostSet.from_stored(self.store.load(ENTRY_HOSTS))
        declared = HostSet.parse(given) if given else None
        if declared is not None and not declared:
            declared = None
        return remembered, declared

    def _persist(self, updates: Dict[str, Any], save_password: bool) -> None:
        for entry, value in updates.items():
            self.logger.debug(f"Saving {entry}")
            self.store.save(entry, value)

        if not save_password and self.store.delete(ENTRY_PASSWORD):
            self.logger.debug("Deleted saved password (API keys are kept)")

    def resolve(self, options: DeployOptions) -> RunConfig:
        """
        Build the RunConfig for a deployment.

        Raises:
            ConfigurationError: If artifacts, hosts, user or password are missing
        """
        cert_path = Path(options.cert_path).expanduser()
        key_path = Path(options.key_path).expanduser()
        if not cert_path.is_file() or not key_path.is_file():
            raise ConfigurationError(
                ERROR_MISSING_FILES, context=f"cert={cert_path} key={key_path}"
            )

        updates: Dict[str, Any] = {}
        delete_orphan_keys = self._resolve_policy(
            ENTRY_DELETE_ORPHAN_KEYS,
            options.delete_orphan_keys,
            DEFAULT_DELETE_ORPHAN_KEYS,
            updates,
        )
        save_password = self._resolve_policy(
            ENTRY_SAVE_PASSWORD, options.save_password, DEFAULT_SAVE_PASSWORD, updates
        )

        remembered, declared = self._resolve_hosts(options.hosts)
        user, user_changed = self._resolve_user(options.user, updates)
        password, password_changed = self._resolve_password(
            options.password, save_password, updates
        )

        if not remembered and declared is None:
            raise ConfigurationError(ERROR_NO_HOST)
        if not user:
            raise ConfigurationError(ERROR_NO_USER)
        if not password and save_password:
            raise ConfigurationError(ERROR_NO_PASSWORD)

        self._persist(updates, save_password)

        credentials_changed = user_changed or password_changed
        if credentials_changed:
            self.logger.debug("Credentials changed, API keys will be regenerated")

        return RunConfig(
            certificate_name=options.resolved_certificate_name(),
            cert_path=cert_path,
            key_path=key_path,
            credentials=Credentials(user=user, password=password or None),
            remembered_hosts=remembered,
            declared_hosts=declared,
            credentials_changed=credentials_changed,
            is_ecc=options.is_ecc,
            force_commit=options.force_commit,
            save_password=save_password,
            delete_orphan_keys=delete_orphan_keys,
            key_passphrase=options.key_passphrase,
            verify_tls=options.verify_tls,
            connect_timeout=options.connect_timeout,
            read_timeout=options.read_timeout,
            fail_on_host_error=options.fail_on_host_error,
        )
