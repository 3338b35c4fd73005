"""
Transport Client

Sends appliance requests over HTTPS with bounded timeouts and returns the raw
response body.
"""

from typing import Optional, Tuple

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from certdeploy.constants import API_PATH, DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT
from certdeploy.exceptions import TransportError
from certdeploy.services.requests_builder import ApplianceRequest


def api_url(host: str) -> str:
    """Base API endpoint of an appliance."""
    if host.startswith("http://") or host.startswith("https://"):
        return host.rstrip("/") + API_PATH
    return f"https://{host}{API_PATH}"


class TransportClient:
    """
    Thin requests wrapper.

    No retries: a failed request is surfaced to the caller and the operator
    re-runs the deployment.
    """

    def __init__(
        self,
        verify_tls: bool = True,
        timeout: Tuple[float, float] = (DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT),
        session: Optional[requests.Session] = None,
    ):
        self.verify_tls = verify_tls
        self.timeout = timeout
        self.session = session or requests.Session()

        if not verify_tls:
            urllib3.disable_warnings(InsecureRequestWarning)

    def send(self, host: str, request: ApplianceRequest) -> str:
        """
        POST a request to an appliance.

        Args:
            host: Appliance address
            request: Request to send

        Returns:
            Raw response body (possibly empty)

        Raises:
            TransportError: If no response was received
        """
        try:
            response = self.session.post(
                api_url(host),
                params=request.params or None,
                data=request.data,
                files=request.files,
                verify=self.verify_tls,
                timeout=self.timeout,
            )
        except requests.exceptions.SSLError as e:
            error_msg = (
                "certificate verify failed"
                if "CERTIFICATE_VERIFY_FAILED" in str(e)
                else "TLS/SSL error"
            )
            raise TransportError(
                host,
                f"TLS verification failed: {error_msg}. "
                "Consider using --insecure if expected.",
            ) from e
        except requests.exceptions.Timeout as e:
            raise TransportError(host, f"Request timeout: {e}") from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(host, f"Connection error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(host, f"Request failed: {e}") from e

        # The appliance reports failures in the body, often with non-2xx codes
        return response.text or ""

    def close(self) -> None:
        self.session.close()
