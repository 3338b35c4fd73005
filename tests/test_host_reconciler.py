"""Tests for host set reconciliation."""

from certdeploy.models.hosts import HostSet
from certdeploy.services.host_reconciler import reconcile


def test_first_run_uses_declared_without_orphans():
    result = reconcile(HostSet(), HostSet.parse("fw1, fw2"))

    assert result.changed is True
    assert result.effective == HostSet(["fw1", "fw2"])
    assert not result.orphans


def test_removed_host_becomes_orphan():
    result = reconcile(HostSet(["a", "b", "c"]), HostSet(["b", "c"]))

    assert result.changed is True
    assert result.effective == HostSet(["b", "c"])
    assert result.orphans == HostSet(["a"])


def test_added_host_has_no_orphans():
    result = reconcile(HostSet(["a"]), HostSet(["a", "b"]))

    assert result.changed is True
    assert result.effective.addresses == ["a", "b"]
    assert not result.orphans


def test_reordered_declaration_is_unchanged():
    remembered = HostSet(["a", "b"])
    result = reconcile(remembered, HostSet.parse("B , a"))

    assert result.changed is False
    assert result.effective is remembered
    assert not result.orphans


def test_nothing_declared_keeps_remembered():
    remembered = HostSet(["a", "b"])
    result = reconcile(remembered, None)

    assert result.changed is False
    assert result.effective is remembered
    assert not result.orphans


def test_replaced_hosts():
    result = reconcile(HostSet(["a", "b"]), HostSet(["c"]))

    assert result.effective == HostSet(["c"])
    assert result.orphans == HostSet(["a", "b"])
