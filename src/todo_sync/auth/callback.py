"""OAuth redirect callback handling.

The redirect URI receives ``?code=<authorization_code>`` after the user
grants consent. ``complete_authorization`` performs the code exchange for a
parsed query, and ``wait_for_callback`` serves a single request on the
redirect URI's host and port for interactive logins.
"""

from __future__ import annotations

import logging
import time
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlparse

from todo_sync.auth.oauth import TokenManager
from todo_sync.exceptions import AuthError

logger = logging.getLogger(__name__)


def complete_authorization(
    manager: TokenManager, query: dict[str, str]
) -> tuple[bool, str]:
    """Exchange the code carried by a redirect query.

    Args:
        manager: Token manager owning the credential.
        query: Redirect query parameters (single values).

    Returns:
        (success, human-readable message).
    """
    if "error" in query:
        description = query.get("error_description", "")
        return False, f"Authorization denied: {query['error']} {description}".strip()

    code = query.get("code")
    if not code:
        return False, "Authorization failed: no code in redirect."

    expected_state = manager.store.get("oauth_state")
    if expected_state and query.get("state") != expected_state:
        return False, "Authorization failed: state mismatch."

    try:
        manager.exchange_code_for_token(code)
    except AuthError as e:
        logger.error(f"Code exchange failed: {e}")
        return False, f"Authorization failed: {e}"

    return True, "Authorization complete. You can close this window."


def _make_handler(manager: TokenManager, path: str, results: list[tuple[bool, str]]):
    class CallbackHandler(BaseHTTPRequestHandler):
        def do_GET(self):
            parsed = urlparse(self.path)
            if parsed.path != path:
                self.send_error(404)
                return

            query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
            success, message = complete_authorization(manager, query)
            results.append((success, message))

            body = message.encode("utf-8")
            self.send_response(200 if success else 400)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format, *args):
            logger.debug(format % args)

    return CallbackHandler


def wait_for_callback(
    manager: TokenManager, redirect_uri: str, timeout: int = 120
) -> tuple[bool, str]:
    """Serve the redirect URI until one callback arrives or timeout expires.

    Args:
        manager: Token manager owning the credential.
        redirect_uri: Local redirect URI (e.g. http://localhost:8765/callback).
        timeout: Seconds to wait for the callback.

    Returns:
        (success, message) from the handled callback.
    """
    parsed = urlparse(redirect_uri)
    host = parsed.hostname or "localhost"
    port = parsed.port or 80
    results: list[tuple[bool, str]] = []

    server = HTTPServer((host, port), _make_handler(manager, parsed.path or "/", results))
    server.timeout = 1
    deadline = time.monotonic() + timeout
    try:
        while not results and time.monotonic() < deadline:
            server.handle_request()
    finally:
        server.server_close()

    if not results:
        return False, f"No authorization callback received within {timeout}s."
    return results[0]
