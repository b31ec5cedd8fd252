"""Portfolio API CLI entry point.

Provides subcommands for running the HTTP server and for maintaining the
experience level table, admin accounts and settings. Accepts configuration via
flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = bool(getattr(sys.stdout, "isatty", lambda: False)())


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Portfolio API Server

    Run the REST API or maintain its experience level table, admin accounts and
    settings. Configuration can be provided via CLI flags or environment
    variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                           Bind address for the web server (default: 0.0.0.0)
          PORT                           Port for the web server (default: 5000)
          DATABASE_URL                   SQLAlchemy database URI (default: sqlite:///instance/portfolio.db)
          EXPERIENCE_DEFAULT_START_DATE  Fallback experience start date (default: 2019-01-01)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Bind to localhost only and use a different database
          python run.py server --host 127.0.0.1 --db sqlite:///instance/dev.db

          # Reset the experience levels to the stock tiers
          python run.py seed-levels --reset

          # Check a level table before uploading it
          python run.py validate-levels levels.json

          # Create (or promote) an admin account
          python run.py make-admin alice --password s3cret
        """
    )

    parser = argparse.ArgumentParser(
        prog="portfolio",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--env-file", dest="env_file", help="Path to a .env file to load before processing flags")
    parser.add_argument("--version", action="version", version=f"Portfolio API {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser("server", help="Run the HTTP server")
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--db", dest="db_uri", default=None, help="SQLAlchemy database URI (overrides DATABASE_URL)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    seed_parser = subparsers.add_parser("seed-levels", help="Seed the stock experience levels")
    seed_parser.add_argument("--reset", action="store_true", help="Delete existing levels before seeding")

    admin_parser = subparsers.add_parser("make-admin", help="Create or promote an admin account")
    admin_parser.add_argument("username")
    admin_parser.add_argument("--password", default="changeme", help="Password for a new account (default: changeme)")

    get_parser = subparsers.add_parser("config-get", help="Print a stored setting value")
    get_parser.add_argument("key")

    set_parser = subparsers.add_parser("config-set", help="Store a setting value")
    set_parser.add_argument("key")
    set_parser.add_argument("value")

    validate_parser = subparsers.add_parser("validate-levels", help="Validate a JSON level table file")
    validate_parser.add_argument("path", help="JSON file holding a list of levels or {\"levels\": [...]}")

    if not argv:
        argv = ["server"]

    return parser.parse_args(argv)


def _validate_file(path: str) -> int:
    from portfolio.experience import validate_levels

    if not os.path.exists(path):
        print(f"[ERROR] File not found: {path}")
        return 1
    with open(path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as exc:
            print(f"[ERROR] Invalid JSON: {exc}")
            return 1
    if isinstance(payload, dict):
        payload = payload.get("levels")
    result = validate_levels(payload)
    if not result.ok:
        for e in result.errors:
            print("ERROR:", e)
        return 1
    print(f"[OK] {len(payload)} levels are valid.")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))

    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    db_uri_cli = getattr(args, "db_uri", None)

    # Make DATABASE_URL available to the Flask app BEFORE importing it
    if db_uri_cli:
        os.environ["DATABASE_URL"] = db_uri_cli
    db_banner = db_uri_cli or os.getenv("DATABASE_URL") or "auto (instance/portfolio.db)"

    mode = (getattr(args, "command", None) or "server").lower()

    if mode == "validate-levels":
        return _validate_file(args.path)

    if mode == "seed-levels":
        from portfolio import create_app
        from portfolio.services.experience_service import seed_default_levels

        app = create_app()
        with app.app_context():
            count = seed_default_levels(reset=args.reset)
        print(f"Seeded {count} experience levels." if count else "Experience levels already present; nothing to do.")
        return 0
    elif mode == "make-admin":
        from portfolio import create_app
        from portfolio.server import ensure_admin

        app = create_app()
        with app.app_context():
            _, created = ensure_admin(args.username, args.password)
        if created:
            print(f"Created new admin user '{args.username}'")
        else:
            print(f"Promoted '{args.username}' to admin")
        return 0
    elif mode == "config-get":
        from portfolio import create_app
        from portfolio.models import Setting

        app = create_app()
        with app.app_context():
            val = Setting.get(args.key)
        if val is None:
            print("[NOT FOUND]")
            return 1
        print(val)
        return 0
    elif mode == "config-set":
        from portfolio import create_app
        from portfolio.experience import InvalidDateError
        from portfolio.models import Setting
        from portfolio.services.settings_service import EXPERIENCE_START_KEY, set_experience_start_date

        app = create_app()
        with app.app_context():
            if args.key == EXPERIENCE_START_KEY:
                try:
                    set_experience_start_date(args.value)
                except InvalidDateError as exc:
                    print(f"[ERROR] {exc}")
                    return 1
            else:
                Setting.set(args.key, args.value)
        print("[OK]")
        return 0

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    from portfolio.logging_utils import log
    from portfolio.server import start_server

    title = f"{Fore.CYAN}{Style.BRIGHT}Portfolio API Bootup{Style.RESET_ALL}" if _COLOR_ENABLED else "Portfolio API Bootup"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Database:'):12} {value(db_banner)}",
        f"  {label('Debug:'):12} {value('YES' if debug else 'NO')}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="startup", host=host, port=port, db=db_banner, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
