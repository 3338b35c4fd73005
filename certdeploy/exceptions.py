"""
certdeploy Exception Hierarchy

Clean exception hierarchy for consistent error handling across the CLI.
"""

from typing import Optional


class CertDeployError(Exception):
    """Base exception for all certdeploy errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(CertDeployError):
    """Raised when host, user, password or artifact files cannot be resolved."""

    pass


class StateError(CertDeployError):
    """Raised when the credential store cannot be read or written."""

    pass


class TransportError(CertDeployError):
    """Raised when a request never produced a response (DNS, TLS, timeout...)."""

    def __init__(self, host: str, message: str):
        self.host = host
        super().__init__(message, context=f"Host: {host}")


class HostError(CertDeployError):
    """Base for failures scoped to a single host. Never aborts the batch."""

    def __init__(
        self, host: str, message: str, appliance_message: Optional[str] = None
    ):
        self.host = host
        self.appliance_message = appliance_message
        super().__init__(message, context=appliance_message)


class KeyMissingPasswordError(HostError):
    """Raised when an API key must be generated but no password is available."""

    def __init__(self, host: str):
        message = (
            f"Cannot generate an API key for host '{host}': no password available"
        )
        super().__init__(
            host,
            message,
            appliance_message="Supply PANOS_PASS (or --password) for this run",
        )


class HostUnreachableError(HostError):
    """Raised when the appliance sent no response at all."""

    def __init__(self, host: str, appliance_message: Optional[str] = None):
        message = (
            f"Host '{host}' is unreachable. Please double check the host name "
            "and ensure the appliance is online"
        )
        super().__init__(host, message, appliance_message)


class AuthRejectedError(HostError):
    """Raised when the appliance answered but refused to issue an API key."""

    def __init__(self, host: str, appliance_message: Optional[str] = None):
        message = (
            f"Host '{host}' rejected the credentials. The username and/or password "
            "may be missing, invalid or not authorized to generate a new key"
        )
        super().__init__(host, message, appliance_message)


class UploadFailedError(HostError):
    """Raised when the appliance rejected a certificate or private key import."""

    def __init__(
        self, host: str, artifact: str, appliance_message: Optional[str] = None
    ):
        self.artifact = artifact
        message = f"Upload of {artifact} to host '{host}' failed"
        super().__init__(host, message, appliance_message)


class ApiKeyMismatchError(HostError):
    """Raised when an API key issued by one host is about to be used on another."""

    def __init__(self, host: str):
        message = f"API key does not belong to host '{host}'"
        super().__init__(
            host,
            message,
            appliance_message="Forget the saved key with keys:forget and re-run",
        )
