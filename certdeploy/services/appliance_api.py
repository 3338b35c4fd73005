"""
Appliance API

Builds, sends and interprets one operation against one appliance.
"""

from certdeploy.exceptions import TransportError
from certdeploy.logger import DeployLogger
from certdeploy.models.results import OperationKind, OperationOutcome
from certdeploy.services.requests_builder import build_request
from certdeploy.services.response_interpreter import interpret
from certdeploy.services.transport import TransportClient


class ApplianceApi:
    """Every appliance call made by the key manager and the sequencer goes here."""

    def __init__(self, client: TransportClient, logger: DeployLogger):
        self.client = client
        self.logger = logger

    def call(self, host: str, kind: OperationKind, **kwargs) -> OperationOutcome:
        """
        Perform one operation.

        Transport failures are not raised: they come back as an unreachable
        outcome carrying the transport error message.
        """
        request = build_request(kind, **kwargs)
        self.logger.debug(f"[{host}] POST {request.describe()}")

        try:
            raw = self.client.send(host, request)
        except TransportError as e:
            self.logger.debug(f"[{host}] {kind.value} -> no response ({e.message})")
            return OperationOutcome.unreachable(kind, message=e.message)

        self.logger.debug(f"[{host}] Raw appliance response: {raw}")
        outcome = interpret(raw, kind)
        self.logger.debug(
            f"[{host}] {kind.value} -> success={outcome.success} "
            f"message={outcome.message or '-'}"
        )
        return outcome
