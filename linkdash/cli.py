"""
Command-line interface for linkdash.

Usage:
    linkdash --owner USER create <url> [--code CODE]
    linkdash --owner USER list
    linkdash --owner USER update <link_id> <url> [--code CODE]
    linkdash --owner USER delete <link_id>
    linkdash resolve <code>
    linkdash health
    linkdash token <owner>
"""

import argparse
import asyncio
import json
import sys
from typing import Optional

from config import Config, load_config
from .common.logging_config import setup_logging
from .database import create_store
from .errors import ErrorKind, LinkResult
from .identity import issue_token
from .service import LinkService
from .shortcode import ShortCodeGenerator


class LinkdashCLI:
    """Command-line interface over the link service."""
    
    def __init__(self, config: Config, verbose: bool = False, out=None, err=None):
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else config.log_level)
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.service: Optional[LinkService] = None
    
    async def initialize(self):
        """Initialize store and service."""
        store = create_store(
            self.config.database_url,
            pool_max_size=self.config.db_pool_max_size,
            create_tables=self.config.create_tables,
            logger=self.logger,
        )
        self.service = LinkService(
            store=store,
            short_code_generator=ShortCodeGenerator(default_length=self.config.short_code_length),
            logger=self.logger,
            max_code_attempts=self.config.max_code_attempts,
            reserved_codes=self.config.reserved_codes,
        )
    
    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()
    
    def _print(self, payload: dict, error: bool = False) -> int:
        print(json.dumps(payload, indent=2, default=str), file=self.err if error else self.out)
        return 1 if error else 0
    
    def _print_result(self, result: LinkResult) -> int:
        return self._print(result.to_dict(), error=not result.ok)
    
    async def create(self, owner: str, url: str, code: Optional[str] = None) -> int:
        return self._print_result(await self.service.create(owner, url, code))
    
    async def update(self, owner: str, link_id: int, url: str, code: Optional[str] = None) -> int:
        return self._print_result(await self.service.update(owner, link_id, url, code))
    
    async def delete(self, owner: str, link_id: int) -> int:
        return self._print_result(await self.service.delete(owner, link_id))
    
    async def list_links(self, owner: str) -> int:
        if not owner:
            return self._print_result(
                LinkResult.failure(ErrorKind.UNAUTHENTICATED, "Authentication required")
            )
        links = await self.service.list_by_owner(owner)
        return self._print({
            "ok": True,
            "count": len(links),
            "links": [link.to_dict() for link in links],
        })
    
    async def resolve(self, code: str) -> int:
        link = await self.service.get_by_code(code)
        if link is None:
            return self._print({"ok": False, "error": "NotFound", "message": f"Short code '{code}' not found"}, error=True)
        return self._print({"ok": True, "code": link.code, "target_url": link.target_url})
    
    async def health(self) -> int:
        health_status = await self.service.health_check()
        self._print({"ok": health_status["overall"], "health": health_status})
        return 0 if health_status["overall"] else 1
    
    def token(self, owner: str) -> int:
        token = issue_token(
            owner,
            self.config.auth_secret,
            algorithm=self.config.auth_algorithm,
            ttl_seconds=self.config.auth_token_ttl_seconds,
        )
        return self._print({"ok": True, "owner_id": owner, "token": token})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkdash",
        description="Manage short links",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --owner alice create https://example.com/long/url
  %(prog)s --owner alice create https://example.com/long/url --code mylink
  %(prog)s --owner alice list
  %(prog)s --owner alice update 3 https://example.com/new --code newcode
  %(prog)s --owner alice delete 3
  %(prog)s resolve mylink
  %(prog)s token alice
        """,
    )
    parser.add_argument("--owner", help="Identity to act as")
    parser.add_argument("--db-url", help="Override DATABASE_URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")
    
    create_parser = subparsers.add_parser("create", help="Create a short link")
    create_parser.add_argument("url", help="URL to shorten")
    create_parser.add_argument("--code", help="Custom short code")
    
    subparsers.add_parser("list", help="List your links")
    
    update_parser = subparsers.add_parser("update", help="Update a link")
    update_parser.add_argument("link_id", type=int, help="Link id")
    update_parser.add_argument("url", help="New target URL")
    update_parser.add_argument("--code", help="New short code")
    
    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("link_id", type=int, help="Link id")
    
    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code")
    resolve_parser.add_argument("code", help="Short code to look up")
    
    subparsers.add_parser("health", help="Check store health")
    
    token_parser = subparsers.add_parser("token", help="Issue a bearer token")
    token_parser.add_argument("owner_id", help="Identity to issue the token for")
    
    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    
    if not args.command:
        parser.print_help()
        return 1
    
    config = load_config()
    if args.db_url:
        config.database_url = args.db_url
    
    cli = LinkdashCLI(config, verbose=args.verbose)
    
    if args.command == "token":
        return cli.token(args.owner_id)
    
    try:
        await cli.initialize()
        
        if args.command == "create":
            return await cli.create(args.owner, args.url, args.code)
        elif args.command == "list":
            return await cli.list_links(args.owner)
        elif args.command == "update":
            return await cli.update(args.owner, args.link_id, args.url, args.code)
        elif args.command == "delete":
            return await cli.delete(args.owner, args.link_id)
        elif args.command == "resolve":
            return await cli.resolve(args.code)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1
    finally:
        await cli.cleanup()


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
