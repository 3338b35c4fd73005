"""
Host Set Reconciler

Diffs the remembered host set against the declared one.
"""

from dataclasses import dataclass, field
from typing import Optional

from certdeploy.models.hosts import HostSet


@dataclass(frozen=True)
class Reconciliation:
    """Which hosts to deploy to, and which remembered hosts were dropped."""

    effective: HostSet
    orphans: HostSet = field(default_factory=HostSet)
    changed: bool = False


def reconcile(remembered: HostSet, declared: Optional[HostSet]) -> Reconciliation:
    """
    Reconcile remembered and declared hosts.

    Args:
        remembered: Hosts from the previous run
        declared: Hosts given for this run (None when nothing was given)

    Returns:
        Reconciliation. When the sets are equal the remembered set is kept
        as-is so nothing needs to be rewritten. Orphans are only computed for
        a changed set.
    """
    if declared is None or not declared:
        return Reconciliation(effective=remembered)

    if declared == remembered:
        return Reconciliation(effective=remembered)

    return Reconciliation(
        effective=declared,
        orphans=remembered.difference(declared),
        changed=True,
    )
