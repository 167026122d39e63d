# cost_fetcher.py
import json
from decimal import Decimal
import logging

import requests

USAGE_DETAILS_URL = (
    "https://management.azure.com/subscriptions/{subscription_id}"
    "/providers/Microsoft.Consumption/usageDetails"
)
API_VERSION = "2021-10-01"

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """The usage endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}")


class ParseError(Exception):
    """A 2xx response whose body is not a JSON object."""

    def __init__(self, message: str, body: str):
        self.body = body
        super().__init__(message)


def build_usage_url(subscription_id: str) -> str:
    return USAGE_DETAILS_URL.format(subscription_id=subscription_id) + f"?api-version={API_VERSION}"


def _get(session, url, token, timeout):
    return session.get(url, headers={"Authorization": f"Bearer {token}"}, timeout=timeout)


def fetch_usage(token: str, subscription_id: str, session=None, timeout=None) -> dict:
    """GET the subscription's usage details once and return the parsed JSON body.

    Raises ``FetchError`` for a non-2xx status (body left unparsed) and
    ``ParseError`` when a 2xx body is not a JSON object. Connection errors
    from ``requests`` propagate as they are.
    """
    url = build_usage_url(subscription_id)
    logger.info("Fetching usage details from %s", url)

    if session is None:
        with requests.Session() as owned:
            response = _get(owned, url, token, timeout)
    else:
        response = _get(session, url, token, timeout)

    body = response.text
    if not 200 <= response.status_code < 300:
        logger.info("Usage request failed with HTTP %s", response.status_code)
        raise FetchError(response.status_code, body)

    try:
        document = json.loads(body, parse_float=Decimal)
    except ValueError as exc:
        raise ParseError(f"malformed JSON in response: {exc}", body) from exc
    if not isinstance(document, dict):
        raise ParseError(f"expected a JSON object, got {type(document).__name__}", body)

    # Only the first page is read.
    if document.get("nextLink"):
        logger.info("Response has more pages; only the first page is shown")
    return document
