import sys
import logging

import requests

from auth_helpers import AuthError, acquire_token
from config import ConfigError, load_settings
from cost_fetcher import FetchError, ParseError, fetch_usage
from cost_presenter import render


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def status(message: str) -> None:
    # Step messages go to stderr so stdout holds only the table
    print(message, file=sys.stderr)


def show_token(token: str) -> None:
    print("\nAccess Token:\n")
    print(token)
    print("\n---------------------\n")


def main(settings=None) -> int:
    # -----------------------------------------------------------
    # Configuration (.env / environment)
    # -----------------------------------------------------------
    if settings is None:
        try:
            settings = load_settings()
        except ConfigError as e:
            print(f"Configuration error: {e}")
            return 1
    configure_logging(settings.log_level)

    # -----------------------------------------------------------
    # Interactive browser login
    # -----------------------------------------------------------
    status("🔐 Authenticating using interactive browser login...")
    try:
        token = acquire_token(
            settings.client_id,
            settings.tenant_id,
            redirect_uri=settings.redirect_uri,
            timeout=settings.login_timeout,
        )
    except AuthError as e:
        print(f"Authentication failed: {e}")
        return 1

    if settings.show_token:
        show_token(token)

    # -----------------------------------------------------------
    # Fetch usage details and print the daily cost table
    # -----------------------------------------------------------
    status("🔍 Fetching Azure cost data...")
    try:
        document = fetch_usage(token, settings.subscription_id, timeout=settings.request_timeout)
    except FetchError as e:
        print(f"Error: {e.status_code}")
        print(f"Details: {e.body}")
        return 1
    except ParseError as e:
        print(f"Error: could not parse response: {e}")
        return 1
    except requests.RequestException as e:
        print(f"Error: request failed: {e}")
        return 1

    render(document)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
