"""Tests for the HTTPS transport client."""

from unittest.mock import MagicMock

import pytest
import requests

from certdeploy.exceptions import TransportError
from certdeploy.models.results import OperationKind
from certdeploy.services.requests_builder import build_request
from certdeploy.services.transport import TransportClient, api_url


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


def test_api_url():
    assert api_url("fw1.example.com") == "https://fw1.example.com/api/"
    assert api_url("https://fw1.example.com:8443/") == "https://fw1.example.com:8443/api/"


def test_send_posts_form_fields(session):
    session.post.return_value = MagicMock(text="<response status='success'/>")
    client = TransportClient(verify_tls=False, timeout=(5, 15), session=session)

    body = client.send("fw1.example.com", build_request(OperationKind.KEY_TEST, api_key="K"))

    assert body == "<response status='success'/>"
    session.post.assert_called_once_with(
        "https://fw1.example.com/api/",
        params=None,
        data=[("type", "version"), ("key", "K")],
        files=None,
        verify=False,
        timeout=(5, 15),
    )


def test_error_status_still_returns_body(session):
    session.post.return_value = MagicMock(status_code=403, text="<response status='error'/>")
    client = TransportClient(session=session)

    assert client.send("fw1", build_request(OperationKind.KEY_TEST, api_key="K")) == (
        "<response status='error'/>"
    )


@pytest.mark.parametrize(
    "exc, fragment",
    [
        (requests.exceptions.SSLError("CERTIFICATE_VERIFY_FAILED"), "certificate verify failed"),
        (requests.exceptions.ConnectTimeout("timed out"), "Request timeout"),
        (requests.exceptions.ConnectionError("refused"), "Connection error"),
        (requests.exceptions.RequestException("boom"), "Request failed"),
    ],
)
def test_request_errors_become_transport_errors(session, exc, fragment):
    session.post.side_effect = exc
    client = TransportClient(session=session)

    with pytest.raises(TransportError) as excinfo:
        client.send("fw1.example.com", build_request(OperationKind.KEY_TEST, api_key="K"))

    assert fragment in excinfo.value.message
    assert excinfo.value.host == "fw1.example.com"


def test_close_closes_session(session):
    TransportClient(session=session).close()
    session.close.assert_called_once()
