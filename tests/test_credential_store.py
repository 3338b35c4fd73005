"""Tests for the YAML credential store."""

import stat

import pytest

from certdeploy.exceptions import StateError
from certdeploy.models.hosts import host_fingerprint
from certdeploy.services.credential_store import CredentialStore, key_entry_name


def test_missing_file_loads_defaults(store):
    assert store.load("PANOS_USER") is None
    assert store.load("PANOS_USER", "acme") == "acme"
    assert store.names() == []


def test_save_and_load(store):
    store.save("PANOS_USER", "acme")
    store.save("PANOS_HOST", ["fw1.example.com", "fw2.example.com"])

    reopened = CredentialStore(store.state_dir, "www.example.com")
    assert reopened.load("PANOS_USER") == "acme"
    assert reopened.load("PANOS_HOST") == ["fw1.example.com", "fw2.example.com"]
    assert reopened.names() == ["PANOS_HOST", "PANOS_USER"]


def test_file_is_private_and_commented(store):
    store.save("PANOS_PASS", "hunter22")

    mode = stat.S_IMODE(store.state_file.stat().st_mode)
    assert mode == 0o600
    assert store.state_file.read_text().startswith("# ")


def test_delete(store):
    store.save("PANOS_PASS", "hunter22")

    assert store.delete("PANOS_PASS") is True
    assert store.delete("PANOS_PASS") is False
    assert store.has("PANOS_PASS") is False


def test_wildcard_certificate_name(state_dir):
    store = CredentialStore(state_dir, "*.example.com")

    assert store.state_file.name == "WILDCARD_.example.com.yml"


def test_api_key_entries(store):
    fingerprint = host_fingerprint("fw1.example.com")
    store.save_api_key(fingerprint, "LUFRPT14MW5x")

    assert key_entry_name(fingerprint) == f"PANOS_KEY_{fingerprint}"
    assert store.load(f"PANOS_KEY_{fingerprint}") == "LUFRPT14MW5x"
    assert store.load_api_key(fingerprint) == "LUFRPT14MW5x"
    assert store.delete_api_key(fingerprint) is True
    assert store.load_api_key(fingerprint) is None


@pytest.mark.parametrize("content", ["key: [unclosed", "- just\n- a list\n"])
def test_unreadable_state(store, content):
    store.state_dir.mkdir(parents=True)
    store.state_file.write_text(content)

    with pytest.raises(StateError):
        store.load("PANOS_USER")
