"""Tests for the per-host upload and commit sequence."""

import pytest

from certdeploy.exceptions import ApiKeyMismatchError
from certdeploy.models.credentials import ApiKey, Validity
from certdeploy.models.hosts import HostEntry
from certdeploy.models.results import HostErrorKind, OperationKind
from certdeploy.services.deployment_sequencer import DeploymentSequencer
from tests.conftest import COMMIT_FAIL, IMPORT_FAIL

HOST = HostEntry("fw1.example.com")
API_KEY = ApiKey(host_fingerprint=HOST.fingerprint, secret="SECRET", validity=Validity.VALID)


@pytest.fixture
def sequencer(api, logger):
    return DeploymentSequencer(api, logger, commit_user="acme", key_passphrase="123456")


def test_rsa_uploads_certificate_first(sequencer, appliance, artifacts):
    result = sequencer.deploy(HOST, API_KEY, artifacts)

    assert appliance.kinds_for(HOST.address) == [
        OperationKind.UPLOAD_CERT,
        OperationKind.UPLOAD_KEY,
        OperationKind.COMMIT,
    ]
    assert result.committed is True
    assert result.is_success
    assert result.error is None


def test_ecc_uploads_key_first(sequencer, appliance, artifacts):
    sequencer.deploy(HOST, API_KEY, artifacts, is_ecc=True)

    assert appliance.kinds_for(HOST.address) == [
        OperationKind.UPLOAD_KEY,
        OperationKind.UPLOAD_CERT,
        OperationKind.COMMIT,
    ]


def test_failed_upload_skips_commit(sequencer, appliance, artifacts):
    appliance.script(HOST.address, OperationKind.UPLOAD_CERT, IMPORT_FAIL)

    result = sequencer.deploy(HOST, API_KEY, artifacts)

    # The key upload is still attempted
    assert appliance.kinds_for(HOST.address) == [
        OperationKind.UPLOAD_CERT,
        OperationKind.UPLOAD_KEY,
    ]
    assert result.upload_failure is True
    assert result.committed is False
    assert result.commit_skipped is True
    assert result.error == HostErrorKind.UPLOAD_FAILED
    assert "certificate" in result.message


def test_unreachable_during_upload_skips_commit(sequencer, appliance, artifacts):
    appliance.script(HOST.address, OperationKind.UPLOAD_KEY, "")

    result = sequencer.deploy(HOST, API_KEY, artifacts)

    assert OperationKind.COMMIT not in appliance.kinds_for(HOST.address)
    assert result.commit_skipped is True


def test_failed_commit(sequencer, appliance, artifacts):
    appliance.script(HOST.address, OperationKind.COMMIT, COMMIT_FAIL)

    result = sequencer.deploy(HOST, API_KEY, artifacts)

    assert result.committed is False
    assert result.upload_failure is False
    assert result.error == HostErrorKind.COMMIT_FAILED
    assert result.message == "Another commit is in progress"


def test_scoped_commit_by_default(sequencer, appliance, artifacts):
    sequencer.deploy(HOST, API_KEY, artifacts)

    cmd = dict(appliance.requests_for(HOST.address, OperationKind.COMMIT)[0].data)["cmd"]
    assert "<force>" not in cmd
    assert "<member>acme</member>" in cmd


def test_force_commit(api, logger, appliance, artifacts):
    sequencer = DeploymentSequencer(api, logger, commit_user="acme", force_commit=True)

    sequencer.deploy(HOST, API_KEY, artifacts)

    cmd = dict(appliance.requests_for(HOST.address, OperationKind.COMMIT)[0].data)["cmd"]
    assert "<force>" in cmd


def test_passphrase_sent_with_private_key_only(sequencer, appliance, artifacts):
    sequencer.deploy(HOST, API_KEY, artifacts)

    cert = dict(appliance.requests_for(HOST.address, OperationKind.UPLOAD_CERT)[0].data)
    key = dict(appliance.requests_for(HOST.address, OperationKind.UPLOAD_KEY)[0].data)
    assert "passphrase" not in cert
    assert key["passphrase"] == "123456"


def test_key_of_another_host_rejected(sequencer, appliance, artifacts):
    foreign = ApiKey(host_fingerprint=HostEntry("fw2.example.com").fingerprint, secret="X")

    with pytest.raises(ApiKeyMismatchError):
        sequencer.deploy(HOST, foreign, artifacts)

    assert appliance.calls == []
