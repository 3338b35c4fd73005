"""
CLI Utilities

Small helpers shared by the commands.
"""

import os
from pathlib import Path
from typing import Optional

from certdeploy.constants import DEFAULT_STATE_DIR, STATE_DIR_ENV


def get_state_dir(state_dir: Optional[str] = None) -> Path:
    """
    Resolve the directory holding deployment state and logs.

    Order: explicit argument, CERTDEPLOY_STATE_DIR, ~/.certdeploy
    """
    raw = state_dir or os.environ.get(STATE_DIR_ENV) or DEFAULT_STATE_DIR
    return Path(raw).expanduser()


def get_log_dir(state_dir: Path) -> Path:
    """Logs live next to the state files."""
    return Path(state_dir) / "logs"
