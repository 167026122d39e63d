# auth_helpers.py
import logging
from urllib.parse import urlparse

import requests
from msal import BrowserInteractionTimeoutError, PublicClientApplication

AUTHORITY_TEMPLATE = "https://login.microsoftonline.com/{tenant_id}"
DEFAULT_REDIRECT_URI = "http://localhost"
# Delegated permission
DEFAULT_SCOPES = ["https://management.azure.com/user_impersonation"]

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Interactive login was cancelled, denied, timed out, or rejected by the identity provider."""

    def __init__(self, error, description=None):
        self.error = error
        self.description = description
        message = f"{error}: {description}" if description else str(error)
        super().__init__(message)


def authority_for(tenant_id: str) -> str:
    return AUTHORITY_TEMPLATE.format(tenant_id=tenant_id)


def _loopback_port(redirect_uri: str):
    # msal always listens on http://localhost:{port}
    parsed = urlparse(redirect_uri)
    if parsed.scheme != "http" or parsed.hostname != "localhost":
        raise AuthError("invalid_redirect_uri", f"{redirect_uri} is not an http://localhost address")
    return parsed.port


def acquire_token(client_id: str, tenant_id: str, redirect_uri: str = DEFAULT_REDIRECT_URI,
                  scopes=None, timeout=None) -> str:
    """Sign the user in through the browser and return the bearer token.

    With ``timeout=None`` this blocks until the user completes or abandons the
    login page. Otherwise it gives up after ``timeout`` seconds and raises
    ``AuthError``. Nothing is cached; every call prompts again.
    """
    scopes = list(scopes or DEFAULT_SCOPES)
    port = _loopback_port(redirect_uri)
    authority = authority_for(tenant_id)

    try:
        # Tenant discovery happens here; an unknown tenant fails with ValueError
        app = PublicClientApplication(client_id, authority=authority)
    except ValueError as exc:
        raise AuthError("invalid_authority", str(exc)) from exc
    except requests.RequestException as exc:
        raise AuthError("network_error", str(exc)) from exc

    logger.info("Authenticating against %s for scopes %s", authority, scopes)
    try:
        result = app.acquire_token_interactive(scopes=scopes, port=port, timeout=timeout)
    except BrowserInteractionTimeoutError as exc:
        raise AuthError("timed_out", str(exc)) from exc
    except requests.RequestException as exc:
        raise AuthError("network_error", str(exc)) from exc

    if "access_token" not in result:
        raise AuthError(result.get("error", "unknown_error"), result.get("error_description"))

    logger.info("Access token acquired")
    return result["access_token"]
