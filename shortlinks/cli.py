"""
Command-line interface for shortlinks.

Usage:
    shortlinks shorten https://example.com/long/url [--expiry-days 7]
    shortlinks info <code>
    shortlinks resolve <code>
    shortlinks cleanup
    shortlinks init-db
    shortlinks health
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from config import load_config
from .common.logging_config import setup_logging
from .errors import Expired, InvalidInput, NotFound, ShortLinkError
from .wiring import build_facade, build_service, build_store


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class ShortLinksCLI:
    """CLI wrapper around the shortlinks facade."""

    def __init__(self, config, verbose: bool = False):
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "ERROR")
        self.store = build_store(config, self.logger)
        self.service = build_service(config, self.store, self.logger)
        self.facade = build_facade(config, self.service, self.logger)

    async def cleanup(self):
        """Release store connections."""
        await self.service.close()

    def _ok(self, payload: Dict[str, Any]) -> int:
        print(json.dumps({"success": True, **payload}, indent=2, default=_jsonable))
        return 0

    def _fail(self, error: str) -> int:
        print(json.dumps({"success": False, "error": error}, indent=2), file=sys.stderr)
        return 1

    async def shorten(self, url: str, expiry_days: Optional[int] = None) -> int:
        """Shorten a URL."""
        try:
            result = await self.facade.shorten(url, expiry_days)
        except InvalidInput as e:
            return self._fail(str(e))

        return self._ok({
            "code": result.mapping.code,
            "short_url": result.short_url,
            "long_url": result.mapping.long_url,
            "expires_at": result.mapping.expires_at,
            "created": result.created,
        })

    async def info(self, code: str) -> int:
        """Show metadata for a code without counting a hit."""
        try:
            metadata = await self.facade.fetch_metadata(code)
        except NotFound as e:
            return self._fail(str(e))

        return self._ok({k: _jsonable(v) for k, v in metadata.items()})

    async def resolve(self, code: str) -> int:
        """Resolve a code as a redirect would, counting the hit."""
        try:
            long_url = await self.facade.resolve_for_redirect(code)
        except (NotFound, Expired) as e:
            return self._fail(str(e))

        return self._ok({"code": code, "long_url": long_url})

    async def cleanup_expired(self) -> int:
        """Delete expired mappings."""
        removed = await self.service.cleanup_expired()
        return self._ok({"removed": removed})

    async def init_db(self) -> int:
        """Create the mapping table and indexes."""
        await self.store.create_tables()
        return self._ok({"message": "Tables created"})

    async def health(self) -> int:
        """Check store health."""
        health_status = await self.service.health_check()
        print(json.dumps({"success": health_status["overall"], "health": health_status}, indent=2))
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shortlinks",
        description="Short links CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL that expires in a week
  %(prog)s shorten https://example.com/long/url --expiry-days 7

  # Inspect a code
  %(prog)s info abc123

  # Purge expired links
  %(prog)s cleanup
        """
    )

    parser.add_argument(
        "--db-url",
        default=None,
        help="PostgreSQL connection URL (default: from DATABASE_URL env)"
    )
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Use a throwaway in-memory store"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--expiry-days", type=int, help="Lifetime override in days")

    info_parser = subparsers.add_parser("info", help="Show metadata for a short code")
    info_parser.add_argument("code", help="Short code to look up")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code (counts a hit)")
    resolve_parser.add_argument("code", help="Short code to resolve")

    subparsers.add_parser("cleanup", help="Delete expired mappings")
    subparsers.add_parser("init-db", help="Create the database table")
    subparsers.add_parser("health", help="Check store health")

    return parser


async def run(args: argparse.Namespace) -> int:
    overrides: Dict[str, Any] = {}
    if args.db_url:
        overrides["database_url"] = args.db_url
    if args.memory:
        overrides["storage_backend"] = "memory"

    cli = ShortLinksCLI(load_config(**overrides), verbose=args.verbose)

    try:
        if args.command == "shorten":
            return await cli.shorten(args.url, args.expiry_days)
        elif args.command == "info":
            return await cli.info(args.code)
        elif args.command == "resolve":
            return await cli.resolve(args.code)
        elif args.command == "cleanup":
            return await cli.cleanup_expired()
        elif args.command == "init-db":
            return await cli.init_db()
        elif args.command == "health":
            return await cli.health()
        return 1
    except ShortLinkError as e:
        return cli._fail(f"Error: {e}")
    finally:
        await cli.cleanup()


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
