"""
Host Models

Normalized appliance addresses and the sorted host sets built from them.
"""

import hashlib
import re
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Union

_SEPARATORS = re.compile(r"[,\s]+")


def normalize_address(address: str) -> str:
    """Trim and lowercase a single host address."""
    return address.strip().lower()


def host_fingerprint(address: str) -> str:
    """
    Stable identifier for a host, independent of list ordering.

    Args:
        address: Host address (normalized before hashing)

    Returns:
        MD5 hex digest of the normalized address
    """
    return hashlib.md5(normalize_address(address).encode("utf-8")).hexdigest()


@dataclass(frozen=True, order=True)
class HostEntry:
    """One appliance in the target set."""

    address: str

    def __post_init__(self):
        object.__setattr__(self, "address", normalize_address(self.address))
        if not self.address:
            raise ValueError("Host address cannot be empty")

    @property
    def fingerprint(self) -> str:
        return host_fingerprint(self.address)

    def __str__(self) -> str:
        return self.address


class HostSet:
    """
    Sorted, deduplicated set of hosts.

    Equality is set equality, so two sets built from the same hosts in a
    different order (or case, or spacing) compare equal.
    """

    def __init__(self, hosts: Iterable[Union[HostEntry, str]] = ()):
        entries = set()
        for host in hosts:
            if not isinstance(host, HostEntry):
                if not normalize_address(host):
                    continue
                host = HostEntry(host)
            entries.add(host)
        self._entries: List[HostEntry] = sorted(entries)

    @classmethod
    def parse(cls, raw: Optional[str]) -> "HostSet":
        """
        Build a host set from a free-form declaration.

        Accepts comma and/or whitespace separated hosts in any case, e.g.
        ",,   fw1.example.com   , 172.15.2.3,FW3.example.com,".
        """
        if not raw:
            return cls()
        return cls(token for token in _SEPARATORS.split(raw) if token)

    @classmethod
    def from_stored(cls, value: Any) -> "HostSet":
        """
        Build a host set from a stored entry.

        The entry is normally a list, but a hand-edited state file may hold a
        single declaration string such as "fw1.example.com, fw2.example.com".
        """
        if not value:
            return cls()
        if isinstance(value, str):
            return cls.parse(value)
        return cls(str(host) for host in value)

    @property
    def addresses(self) -> List[str]:
        return [entry.address for entry in self._entries]

    def difference(self, other: "HostSet") -> "HostSet":
        return HostSet(entry for entry in self._entries if entry not in other)

    def __iter__(self) -> Iterator[HostEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __contains__(self, host: object) -> bool:
        if isinstance(host, str):
            host = HostEntry(host) if normalize_address(host) else None
        return host in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HostSet):
            return NotImplemented
        return set(self._entries) == set(other._entries)

    def __hash__(self) -> int:
        return hash(frozenset(self._entries))

    def __repr__(self) -> str:
        return f"HostSet({', '.join(self.addresses)})"
