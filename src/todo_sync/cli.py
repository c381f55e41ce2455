"""CLI for todo-sync.

Usage:
    todo-sync init                     # Create directories, show setup instructions
    todo-sync status                   # Show configuration status
    todo-sync auth url                 # Print the authorization URL
    todo-sync auth login               # Interactive login with local redirect server
    todo-sync auth exchange <code>     # Exchange an authorization code manually
    todo-sync auth status              # Show token status
    todo-sync auth refresh             # Refresh the access token if expired
    todo-sync auth logout              # Forget stored tokens
    todo-sync sync --csv tasks.csv     # Register rows of a CSV file
    todo-sync sync --sheet             # Register rows of the configured Google Sheet
"""

from __future__ import annotations

import argparse
import logging
import sys
import webbrowser

from todo_sync.exceptions import TodoSyncError


def cmd_init() -> int:
    """Initialize the credential directory structure."""
    from todo_sync.config import (
        CREDENTIAL_FILE,
        ENV_FILE,
        GOOGLE_SERVICE_ACCOUNT,
        MICROSOFT_DIR,
        REPO_ROOT,
        ensure_data_dirs,
    )

    print("=" * 60)
    print("TODO-SYNC SETUP")
    print("=" * 60)
    print()
    print(f"Repository: {REPO_ROOT}")
    print()

    ensure_data_dirs()
    print(f"Created: {MICROSOFT_DIR}/")
    print()

    print("Configuration locations:")
    print()
    print(f"  {ENV_FILE}")
    print("    TODO_SYNC_CLIENT_ID, TODO_SYNC_AUTH_FLOW, TODO_SYNC_TIMEZONE, ...")
    print()
    print(f"  {CREDENTIAL_FILE}")
    print("    OAuth tokens (created by 'todo-sync auth login')")
    print()
    print(f"  {GOOGLE_SERVICE_ACCOUNT}")
    print("    Service account key for Google Sheets (optional)")
    print()
    print("-" * 60)
    print()

    if ENV_FILE.exists():
        print(".env exists")
    else:
        print("Create .env with your app registration:")
        print()
        print(f"  cat > {ENV_FILE} << 'EOF'")
        print("  TODO_SYNC_CLIENT_ID=00000000-0000-0000-0000-000000000000")
        print("  TODO_SYNC_AUTH_FLOW=pkce")
        print("  TODO_SYNC_TIMEZONE=Asia/Tokyo")
        print("  EOF")
        print()
        print("Register the app at https://entra.microsoft.com with redirect URI")
        print("  http://localhost:8765/callback")

    return 0


def cmd_status() -> int:
    """Show configuration status."""
    from todo_sync.config import REPO_ROOT, get_config_status

    status = get_config_status()

    print("=" * 60)
    print("TODO-SYNC STATUS")
    print("=" * 60)
    print()
    print(f"Repository: {REPO_ROOT}")
    print(f".env:       {'[x]' if status['env_file'] else '[ ]'}")
    print()

    print("Microsoft:")
    print(f"  client id:       {'[x]' if status['microsoft']['client_id'] else '[ ]'}")
    print(f"  client secret:   {'[x]' if status['microsoft']['client_secret'] else '[ ]'}")
    print(f"  credential.json: {'[x]' if status['microsoft']['credential'] else '[ ]'}")
    print()

    print("Google Sheets:")
    print(f"  service account: {'[x]' if status['google']['service_account'] else '[ ]'}")
    print(f"  spreadsheet id:  {'[x]' if status['google']['spreadsheet_id'] else '[ ]'}")
    print()

    return 0


def _token_manager():
    from todo_sync.auth import TokenManager
    from todo_sync.config import load_settings

    return TokenManager.from_settings(load_settings())


def auth_url() -> int:
    """Print the authorization URL."""
    try:
        url = _token_manager().generate_authorization_url()
    except TodoSyncError as e:
        print(f"Error: {e}")
        return 1

    print(url)
    return 0


def auth_login(no_browser: bool = False, timeout: int = 120) -> int:
    """Interactive login through the local redirect server."""
    from todo_sync.auth.callback import wait_for_callback

    print("=" * 60)
    print("TODO-SYNC LOGIN")
    print("=" * 60)

    try:
        manager = _token_manager()
        url = manager.generate_authorization_url()
    except TodoSyncError as e:
        print(f"\nError: {e}")
        print("Run 'todo-sync init' for setup instructions")
        return 1

    redirect_uri = manager.store.get("redirect_uri")
    print(f"\nAuthorization URL:\n{url}\n")
    print(f"Waiting for the redirect on {redirect_uri} ...")

    if not no_browser:
        webbrowser.open(url)

    success, message = wait_for_callback(manager, redirect_uri, timeout=timeout)
    print(f"\n{message}")
    if not success:
        return 1
    return auth_status()


def auth_exchange(code: str) -> int:
    """Exchange an authorization code copied from the redirect URL."""
    try:
        _token_manager().exchange_code_for_token(code)
    except TodoSyncError as e:
        print(f"Error: {e}")
        return 1

    print("Token saved successfully!")
    return auth_status()


def auth_status() -> int:
    """Show token status."""
    try:
        info = _token_manager().get_token_info()
    except TodoSyncError as e:
        print(f"Error: {e}")
        return 1

    if info["status"] == "no_token":
        print("No token found - run 'todo-sync auth login'")
        return 1

    print(f"Status     : {info['status']}")
    print(f"Flow       : {info['flow']}")
    print(f"Expires in : {info.get('expires_in', 'unknown')}")
    print(f"Refreshed  : {info.get('last_refresh') or 'never'}")
    return 0


def auth_refresh() -> int:
    """Refresh the access token if it is inside the expiry margin."""
    try:
        _token_manager().get_access_token()
    except TodoSyncError as e:
        print(f"Refresh failed: {e}")
        print("You may need to re-authenticate: todo-sync auth login")
        return 1

    print("Token is valid.")
    return auth_status()


def auth_logout() -> int:
    """Forget stored tokens."""
    try:
        _token_manager().forget_tokens()
    except TodoSyncError as e:
        print(f"Error: {e}")
        return 1

    print("Stored tokens cleared")
    return 0


def cmd_sync(csv_path: str | None, use_sheet: bool) -> int:
    """Register every row of the chosen row store as a To Do task."""
    from todo_sync.config import load_settings
    from todo_sync.graph import TodoClient
    from todo_sync.rows import CsvRowStore
    from todo_sync.sync import SyncEngine

    try:
        settings = load_settings()
        manager = _token_manager()
        if use_sheet:
            from todo_sync.rows.sheets import SheetsRowStore

            store = SheetsRowStore(
                settings.spreadsheet_id,
                settings.sheet_name,
                key_path=settings.service_account_key,
            )
        else:
            store = CsvRowStore(csv_path)
    except TodoSyncError as e:
        print(f"Error: {e}")
        return 1

    with TodoClient() as client:
        engine = SyncEngine(
            manager,
            client,
            store,
            time_zone=settings.timezone,
            due_encoding=settings.due_encoding,
            notifier=print,
        )
        report = engine.run()

    return 1 if report.aborted else 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="todo-sync",
        description="Register spreadsheet task rows in Microsoft To Do",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("init", help="Initialize credential directories")
    subparsers.add_parser("status", help="Show configuration status")

    # auth subcommand
    auth_parser = subparsers.add_parser("auth", help="Microsoft OAuth management")
    auth_subparsers = auth_parser.add_subparsers(dest="auth_command", help="Command")

    auth_subparsers.add_parser("url", help="Print the authorization URL")

    login_parser = auth_subparsers.add_parser("login", help="Interactive OAuth login")
    login_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't open browser automatically",
    )
    login_parser.add_argument(
        "--timeout",
        type=int,
        default=120,
        help="Seconds to wait for the redirect (default: 120)",
    )

    exchange_parser = auth_subparsers.add_parser("exchange", help="Exchange an authorization code")
    exchange_parser.add_argument("code", help="Value of the 'code' redirect parameter")

    auth_subparsers.add_parser("status", help="Show token status")
    auth_subparsers.add_parser("refresh", help="Refresh token")
    auth_subparsers.add_parser("logout", help="Forget stored tokens")

    # sync
    sync_parser = subparsers.add_parser("sync", help="Register task rows")
    source = sync_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--csv", dest="csv_path", help="Path to a CSV file with a header row")
    source.add_argument(
        "--sheet", action="store_true", help="Use the configured Google Sheet"
    )

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "init":
        return cmd_init()

    if args.command == "status":
        return cmd_status()

    if args.command == "auth":
        if args.auth_command == "url":
            return auth_url()
        elif args.auth_command == "login":
            return auth_login(args.no_browser, args.timeout)
        elif args.auth_command == "exchange":
            return auth_exchange(args.code)
        elif args.auth_command == "status":
            return auth_status()
        elif args.auth_command == "refresh":
            return auth_refresh()
        elif args.auth_command == "logout":
            return auth_logout()
        else:
            auth_parser.print_help()
            return 0

    if args.command == "sync":
        return cmd_sync(args.csv_path, args.sheet)

    return 0


if __name__ == "__main__":
    sys.exit(main())
