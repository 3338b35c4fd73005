"""
certdeploy Constants

Centralized constants for magic values, defaults, and configuration.
"""

# Default State Configuration
DEFAULT_STATE_DIR = "~/.certdeploy"
STATE_DIR_ENV = "CERTDEPLOY_STATE_DIR"
STATE_FILE_SUFFIX = ".yml"

# Persisted entry names (one flat YAML file per certificate name)
ENTRY_HOSTS = "PANOS_HOST"
ENTRY_USER = "PANOS_USER"
ENTRY_PASSWORD = "PANOS_PASS"
ENTRY_SAVE_PASSWORD = "PANOS_SAVE_PASSWORD"
ENTRY_DELETE_ORPHAN_KEYS = "PANOS_DELETE_ORPHAN_KEYS"
ENTRY_KEY_PREFIX = "PANOS_KEY_"

# Policy defaults
DEFAULT_SAVE_PASSWORD = True
DEFAULT_DELETE_ORPHAN_KEYS = True

# Appliance API Configuration
API_PATH = "/api/"
DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_READ_TIMEOUT = 30
DEFAULT_KEY_PASSPHRASE = "123456"
CERT_FORMAT = "pem"
MULTIPART_CONTENT_TYPE = "application/octet-stream"

# Commit scopes excluded from a partial (non-force) commit
PARTIAL_COMMIT_EXCLUDED_SCOPES = ["policy-and-objects", "device-and-network"]

# Wildcard-safe certificate names
WILDCARD_REPLACEMENT = "WILDCARD_"

# Log Configuration
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"

# Exit codes
EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_HOST_FAILURES = 2
EXIT_INTERRUPTED = 130

# Sensitive Keywords (for secret masking)
SENSITIVE_KEYWORDS = [
    "PASS",
    "PASSWORD",
    "KEY",
    "TOKEN",
    "SECRET",
]

# File Permissions
SECRET_FILE_PERMISSIONS = 0o600

# Error Messages
ERROR_NO_HOST = (
    "No host found. If this is your first time deploying, set PANOS_HOST "
    "(or --host). You can remove it after a successful deployment."
)
ERROR_NO_USER = (
    "No user found. If this is your first time deploying, set PANOS_USER "
    "(or --user). You can remove it after a successful deployment."
)
ERROR_NO_PASSWORD = (
    "No password found. If this is your first time deploying, set PANOS_PASS "
    "(or --password). You can remove it after a successful deployment."
)
ERROR_MISSING_FILES = (
    "Unable to find a valid key and/or cert. "
    "If this is an ECDSA/ECC cert, use the --ecc flag when deploying."
)
ERROR_COMMIT_SKIPPED = (
    "Unable to commit changes due to issues uploading cert or key. "
    "Please manually roll back any changes."
)
