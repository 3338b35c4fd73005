"""
Credential Store

File-backed key-value persistence for one certificate's deployment state:
host list, user, optional password, policy flags, and one API key per host.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from certdeploy.constants import (
    ENTRY_KEY_PREFIX,
    SECRET_FILE_PERMISSIONS,
    STATE_FILE_SUFFIX,
)
from certdeploy.exceptions import StateError
from certdeploy.models.artifacts import safe_certificate_name


def key_entry_name(fingerprint: str) -> str:
    """Entry name holding the API key of the host with this fingerprint."""
    return f"{ENTRY_KEY_PREFIX}{fingerprint}"


class CredentialStore:
    """
    Flat YAML store, one file per certificate name.

    Every save or delete rewrites the file, so each call is a complete
    read-modify-write of a single entry.
    """

    def __init__(self, state_dir: Path, certificate_name: str):
        self.state_dir = Path(state_dir).expanduser()
        self.certificate_name = safe_certificate_name(certificate_name)
        self.state_file = self.state_dir / f"{self.certificate_name}{STATE_FILE_SUFFIX}"

    def _read(self) -> Dict[str, Any]:
        if not self.state_file.exists():
            return {}

        try:
            with open(self.state_file, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise StateError(
                f"Unable to read deployment state: {self.state_file}", context=str(e)
            ) from e

        if not isinstance(data, dict):
            raise StateError(
                f"Deployment state is not a mapping: {self.state_file}",
                context="Delete the file to start over",
            )
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)

        lines = []
        lines.append("# " + "=" * 77)
        lines.append(f"# certdeploy - {self.certificate_name}")
        lines.append("# " + "=" * 77)
        lines.append("# WARNING: This file contains appliance credentials and API keys")
        lines.append("# Keep this file secure and never commit to version control")
        lines.append("# " + "=" * 77)
        lines.append("")
        body = yaml.safe_dump(data, default_flow_style=False, sort_keys=True)

        try:
            with open(self.state_file, "w") as f:
                f.write("\n".join(lines) + "\n" + (body if data else ""))
            self.state_file.chmod(SECRET_FILE_PERMISSIONS)
        except OSError as e:
            raise StateError(
                f"Unable to write deployment state: {self.state_file}", context=str(e)
            ) from e

    def load(self, name: str, default: Any = None) -> Any:
        """Load a single entry."""
        return self._read().get(name, default)

    def save(self, name: str, value: Any) -> None:
        """Save (overwrite) a single entry."""
        data = self._read()
        data[name] = value
        self._write(data)

    def delete(self, name: str) -> bool:
        """
        Delete a single entry.

        Returns:
            True if the entry existed
        """
        data = self._read()
        if name not in data:
            return False
        del data[name]
        self._write(data)
        return True

    def has(self, name: str) -> bool:
        return name in self._read()

    def names(self) -> List[str]:
        return sorted(self._read().keys())

    def load_api_key(self, fingerprint: str) -> Optional[str]:
        """Load the stored API key secret for a host fingerprint."""
        value = self.load(key_entry_name(fingerprint))
        return str(value) if value else None

    def save_api_key(self, fingerprint: str, secret: str) -> None:
        self.save(key_entry_name(fingerprint), secret)

    def delete_api_key(self, fingerprint: str) -> bool:
        return self.delete(key_entry_name(fingerprint))

    def __repr__(self) -> str:
        return f"CredentialStore(file={self.state_file})"
