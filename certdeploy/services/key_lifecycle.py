"""
Key Lifecycle Manager

Decides, per host, whether the stored API key can be used, must be
regenerated, and persists newly issued keys.
"""

from typing import Dict, Optional

from certdeploy.exceptions import (
    AuthRejectedError,
    HostError,
    HostUnreachableError,
    KeyMissingPasswordError,
)
from certdeploy.logger import DeployLogger
from certdeploy.models.credentials import ApiKey, Credentials, KeyState, Validity
from certdeploy.models.hosts import HostEntry
from certdeploy.models.results import OperationKind
from certdeploy.services.appliance_api import ApplianceApi
from certdeploy.services.credential_store import CredentialStore


class KeyLifecycleManager:
    """
    Per-host API key state machine.

    NO_KEY -> TESTING -> {VALID, INVALID} -> (INVALID or forced) REGENERATING
    -> {VALID, FAILED}. VALID and FAILED are terminal for the run.
    """

    def __init__(self, api: ApplianceApi, store: CredentialStore, logger: DeployLogger):
        self.api = api
        self.store = store
        self.logger = logger
        self.states: Dict[str, KeyState] = {}

    def _transition(self, host: HostEntry, state: KeyState) -> None:
        self.states[host.address] = state
        self.logger.debug(f"[{host}] API key state -> {state.value}")

    def load(self, host: HostEntry) -> Optional[ApiKey]:
        """Load the stored API key for a host, if any."""
        secret = self.store.load_api_key(host.fingerprint)
        if not secret:
            return None
        return ApiKey(host_fingerprint=host.fingerprint, secret=secret)

    def probe(self, host: HostEntry, api_key: ApiKey) -> Validity:
        """
        Test a key with a lightweight authenticated call.

        Any non-success, including no response at all, means INVALID. The
        stored value is left in place; it is only overwritten by a successful
        regeneration.
        """
        outcome = self.api.call(host.address, OperationKind.KEY_TEST, api_key=api_key.secret)
        if outcome.success:
            return Validity.VALID

        self.logger.debug(f"[{host}] API key has EXPIRED or is INVALID")
        return Validity.INVALID

    def regenerate(self, host: HostEntry, credentials: Credentials) -> ApiKey:
        """
        Exchange credentials for a new API key and persist it.

        Raises:
            KeyMissingPasswordError: No password available this run
            HostUnreachableError: No response from the appliance
            AuthRejectedError: The appliance refused the credentials
        """
        if not credentials.has_password:
            raise KeyMissingPasswordError(host.address)

        outcome = self.api.call(
            host.address,
            OperationKind.KEY_GEN,
            user=credentials.user,
            password=credentials.password,
        )
        if not outcome.success:
            if not outcome.reachable:
                raise HostUnreachableError(host.address, outcome.message)
            raise AuthRejectedError(host.address, outcome.message)

        self.store.save_api_key(host.fingerprint, outcome.extracted_key)
        return ApiKey(
            host_fingerprint=host.fingerprint,
            secret=outcome.extracted_key,
            validity=Validity.VALID,
        )

    def obtain(
        self,
        host: HostEntry,
        credentials: Credentials,
        credentials_changed: bool = False,
    ) -> ApiKey:
        """
        Run the key state machine for one host.

        Args:
            host: Target host
            credentials: Current credentials
            credentials_changed: Force regeneration even if the stored key works

        Returns:
            A VALID ApiKey bound to this host

        Raises:
            HostError: If no usable key could be obtained (host is skipped)
        """
        self._transition(host, KeyState.NO_KEY)
        api_key = self.load(host)

        if api_key is not None:
            self._transition(host, KeyState.TESTING)
            validity = self.probe(host, api_key)
            if validity == Validity.VALID:
                api_key = api_key.with_validity(validity)
                self._transition(host, KeyState.VALID)
            else:
                api_key = None
                self._transition(host, KeyState.INVALID)

        if api_key is not None and not credentials_changed:
            return api_key

        if api_key is not None and not credentials.has_password:
            self.logger.warning(
                f"Credentials changed but no password is available for {host}; "
                "keeping the existing API key"
            )
            return api_key

        self._transition(host, KeyState.REGENERATING)
        self.logger.debug(f"[{host}] Generating new API key")
        try:
            api_key = self.regenerate(host, credentials)
        except HostError:
            self._transition(host, KeyState.FAILED)
            raise

        self._transition(host, KeyState.VALID)
        return api_key
