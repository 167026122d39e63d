from unittest import mock

import msal
import pytest
import requests

import auth_helpers
from auth_helpers import AuthError, acquire_token, authority_for


@pytest.fixture
def msal_app():
    with mock.patch.object(auth_helpers, "PublicClientApplication") as app_cls:
        yield app_cls


def test_authority_is_bound_to_tenant():
    assert authority_for("tenant-456") == "https://login.microsoftonline.com/tenant-456"


def test_acquire_token_returns_access_token(msal_app):
    msal_app.return_value.acquire_token_interactive.return_value = {
        "access_token": "abc.def.ghi",
        "token_type": "Bearer",
    }

    token = acquire_token("client-123", "tenant-456")

    assert token == "abc.def.ghi"
    msal_app.assert_called_once_with(
        "client-123", authority="https://login.microsoftonline.com/tenant-456"
    )
    msal_app.return_value.acquire_token_interactive.assert_called_once_with(
        scopes=["https://management.azure.com/user_impersonation"], port=None, timeout=None
    )


def test_redirect_port_and_timeout_are_forwarded(msal_app):
    msal_app.return_value.acquire_token_interactive.return_value = {"access_token": "t"}

    acquire_token("c", "t", redirect_uri="http://localhost:8400", timeout=90)

    _, kwargs = msal_app.return_value.acquire_token_interactive.call_args
    assert kwargs["port"] == 8400
    assert kwargs["timeout"] == 90


def test_denied_login_raises_auth_error(msal_app):
    msal_app.return_value.acquire_token_interactive.return_value = {
        "error": "access_denied",
        "error_description": "The user has cancelled the flow.",
    }

    with pytest.raises(AuthError) as excinfo:
        acquire_token("client-123", "tenant-456")

    assert excinfo.value.error == "access_denied"
    assert "cancelled" in str(excinfo.value)


def test_login_timeout_raises_auth_error(msal_app):
    msal_app.return_value.acquire_token_interactive.side_effect = msal.BrowserInteractionTimeoutError(
        "User did not complete the flow in time")

    with pytest.raises(AuthError) as excinfo:
        acquire_token("client-123", "tenant-456", timeout=1)

    assert excinfo.value.error == "timed_out"
    assert "in time" in str(excinfo.value)


def test_failed_tenant_discovery_raises_auth_error(msal_app):
    msal_app.side_effect = ValueError("OIDC Discovery failed. HTTP status: 400")

    with pytest.raises(AuthError) as excinfo:
        acquire_token("client-123", "no-such-tenant")

    assert excinfo.value.error == "invalid_authority"


def test_network_error_during_login_raises_auth_error(msal_app):
    msal_app.return_value.acquire_token_interactive.side_effect = requests.ConnectionError("unreachable")

    with pytest.raises(AuthError) as excinfo:
        acquire_token("client-123", "tenant-456")

    assert excinfo.value.error == "network_error"


def make_response(status_code, text):
    response = requests.Response()
    response.status_code = status_code
    response._content = text.encode("utf-8")
    return response


def test_unknown_tenant_through_msal_discovery():
    with mock.patch.object(requests.Session, "get",
                           return_value=make_response(400, '{"error":"invalid_tenant"}')):
        with pytest.raises(AuthError) as excinfo:
            acquire_token("client-123", "no-such-tenant")

    assert excinfo.value.error == "invalid_authority"
    assert "no-such-tenant" in str(excinfo.value)


def test_unreachable_identity_provider_through_msal():
    with mock.patch.object(requests.Session, "get", side_effect=requests.ConnectionError("unreachable")):
        with pytest.raises(AuthError) as excinfo:
            acquire_token("client-123", "tenant-456")

    assert excinfo.value.error == "network_error"


@pytest.mark.parametrize("redirect_uri", [
    "https://example.com/callback",
    "http://127.0.0.1:8400",
])
def test_non_localhost_redirect_is_rejected(msal_app, redirect_uri):
    with pytest.raises(AuthError) as excinfo:
        acquire_token("c", "t", redirect_uri=redirect_uri)

    assert excinfo.value.error == "invalid_redirect_uri"
    msal_app.assert_not_called()
