"""End-to-end deployment runs against a scripted appliance."""

from pathlib import Path

import pytest

from certdeploy.exceptions import ConfigurationError
from certdeploy.models.credentials import ApiKey, Credentials
from certdeploy.models.hosts import HostSet, host_fingerprint
from certdeploy.models.results import HostErrorKind, OperationKind
from certdeploy.models.run import RunConfig
from certdeploy.services.config_service import ConfigService, DeployOptions
from certdeploy.services.orchestrator import DeploymentOrchestrator
from tests.conftest import KEY_INVALID, generated_key


@pytest.fixture
def deploy(store, api, logger, cert_files):
    """Resolve configuration and run one deployment, like the deploy command does."""
    cert, key = cert_files

    def _deploy(**options):
        options.setdefault("certificate_name", "www.example.com")
        config = ConfigService(store, logger).resolve(
            DeployOptions(cert_path=cert, key_path=key, **options)
        )
        return DeploymentOrchestrator(config, store, api, logger).run()

    return _deploy


# =============================================================================
# Happy path
# =============================================================================


def test_first_deployment_dedupes_hosts(deploy, appliance, store):
    state = deploy(
        hosts="fw1.example.com, FW1.example.com , fw2.example.com",
        user="acme",
        password="hunter22",
    )

    assert state.effective_hosts.addresses == ["fw1.example.com", "fw2.example.com"]
    assert list(state.results) == ["fw1.example.com", "fw2.example.com"]
    assert state.succeeded_hosts == ["fw1.example.com", "fw2.example.com"]
    assert state.exit_code() == 0
    assert store.load("PANOS_HOST") == ["fw1.example.com", "fw2.example.com"]
    for host in state.effective_hosts:
        assert store.load_api_key(host.fingerprint) == generated_key(host.address)
        assert appliance.kinds_for(host.address) == [
            OperationKind.KEY_GEN,
            OperationKind.UPLOAD_CERT,
            OperationKind.UPLOAD_KEY,
            OperationKind.COMMIT,
        ]


def test_second_run_reuses_saved_state(deploy, appliance):
    deploy(hosts="fw1.example.com", user="acme", password="hunter22")
    appliance.calls.clear()

    state = deploy()

    assert state.succeeded_hosts == ["fw1.example.com"]
    assert appliance.kinds_for("fw1.example.com")[0] == OperationKind.KEY_TEST
    assert OperationKind.KEY_GEN not in appliance.kinds_for("fw1.example.com")


def test_uploads_use_certificate_name(deploy, appliance):
    deploy(hosts="fw1", user="acme", password="pw", certificate_name="*.example.com")

    request = appliance.requests_for("fw1", OperationKind.UPLOAD_KEY)[0]
    assert dict(request.data)["certificate-name"] == "WILDCARD_.example.com"
    assert request.files["file"][0] == "WILDCARD_.example.com.key"


# =============================================================================
# Host failures
# =============================================================================


def test_unreachable_host_does_not_stop_batch(deploy, appliance):
    appliance.unreachable("fw1.example.com")

    state = deploy(hosts="fw1.example.com, fw2.example.com", user="acme", password="pw")

    fw1 = state.results["fw1.example.com"]
    assert fw1.key_obtained is False
    assert fw1.error == HostErrorKind.HOST_UNREACHABLE
    assert state.results["fw2.example.com"].is_success
    assert state.failed_hosts == ["fw1.example.com"]
    assert state.exit_code() == 0
    assert state.exit_code(fail_on_host_error=True) == 2


def test_key_mismatch_fails_only_that_host(store, api, logger, appliance, cert_files):
    cert, key = cert_files
    config = ConfigService(store, logger).resolve(
        DeployOptions(cert_path=cert, key_path=key, hosts="fw1, fw2", user="acme", password="pw")
    )
    orchestrator = DeploymentOrchestrator(config, store, api, logger)
    obtain = orchestrator.key_manager.obtain
    fw2_key = ApiKey(host_fingerprint=host_fingerprint("fw2"), secret="FW2-KEY")

    def obtain_with_swapped_key(host, credentials, credentials_changed=False):
        if host.address == "fw1":
            return fw2_key
        return obtain(host, credentials, credentials_changed)

    orchestrator.key_manager.obtain = obtain_with_swapped_key
    state = orchestrator.run()

    fw1 = state.results["fw1"]
    assert fw1.error == HostErrorKind.KEY_MISMATCH
    assert fw1.key_obtained is True
    assert fw1.committed is False
    assert appliance.kinds_for("fw1") == []
    assert state.results["fw2"].is_success


def test_invalid_key_without_password(deploy, appliance, store):
    deploy(hosts="fw1", user="acme", password="pw", save_password=False)
    appliance.script("fw1", OperationKind.KEY_TEST, KEY_INVALID)
    appliance.calls.clear()

    state = deploy()

    assert state.results["fw1"].error == HostErrorKind.KEY_MISSING_PASSWORD
    assert appliance.kinds_for("fw1") == [OperationKind.KEY_TEST]


def test_not_saving_password_still_saves_keys(deploy, store):
    deploy(hosts="fw1", user="acme", password="pw", save_password=False)

    assert store.has("PANOS_PASS") is False
    assert store.load_api_key(host_fingerprint("fw1")) == generated_key("fw1")


# =============================================================================
# Orphan keys
# =============================================================================


def test_removed_host_key_is_deleted(deploy, store):
    deploy(hosts="a, b, c", user="acme", password="pw")

    state = deploy(hosts="b, c")

    assert state.orphans == ["a"]
    assert state.pruned_keys == ["a"]
    assert store.load_api_key(host_fingerprint("a")) is None
    assert store.load_api_key(host_fingerprint("b")) == generated_key("b")
    assert store.load("PANOS_HOST") == ["b", "c"]


def test_removed_host_key_kept_by_policy(deploy, store):
    deploy(hosts="a, b, c", user="acme", password="pw", delete_orphan_keys=False)

    state = deploy(hosts="b, c")

    assert state.orphans == ["a"]
    assert state.pruned_keys == []
    assert store.load_api_key(host_fingerprint("a")) == generated_key("a")


def test_unchanged_hosts_prune_nothing(deploy, store):
    deploy(hosts="a, b", user="acme", password="pw")

    state = deploy(hosts="B a")

    assert state.orphans == []
    assert state.pruned_keys == []


# =============================================================================
# Interrupts and configuration
# =============================================================================


def test_interrupt_stops_batch_and_skips_pruning(deploy, appliance, store):
    deploy(hosts="a, b, c", user="acme", password="pw")
    appliance.script("c", OperationKind.KEY_TEST, KeyboardInterrupt())

    state = deploy(hosts="b, c")

    assert state.interrupted is True
    assert state.exit_code() == 130
    assert list(state.results) == ["b"]
    assert store.load_api_key(host_fingerprint("a")) == generated_key("a")


def test_empty_effective_host_set(store, api, logger, cert_files):
    cert, key = cert_files
    config = RunConfig(
        certificate_name="www.example.com",
        cert_path=Path(cert),
        key_path=Path(key),
        credentials=Credentials(user="acme", password="pw"),
        remembered_hosts=HostSet(),
    )

    with pytest.raises(ConfigurationError):
        DeploymentOrchestrator(config, store, api, logger).run()


def test_run_state_to_dict(deploy):
    state = deploy(hosts="fw1", user="acme", password="pw")

    data = state.to_dict()
    assert data["hosts"] == ["fw1"]
    assert data["results"][0]["committed"] is True
    assert data["results"][0]["error"] is None
    assert data["interrupted"] is False
