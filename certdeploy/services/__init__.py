"""
certdeploy Services Layer

Deployment workflow and its collaborators.
"""

from .credential_store import CredentialStore
from .transport import TransportClient
from .appliance_api import ApplianceApi
from .config_service import ConfigService, DeployOptions
from .key_lifecycle import KeyLifecycleManager
from .deployment_sequencer import DeploymentSequencer
from .orchestrator import DeploymentOrchestrator

__all__ = [
    "CredentialStore",
    "TransportClient",
    "ApplianceApi",
    "ConfigService",
    "DeployOptions",
    "KeyLifecycleManager",
    "DeploymentSequencer",
    "DeploymentOrchestrator",
]
