#!/usr/bin/env python3
"""
Command-line interface for URL shortener service.

Runs the same handlers as the HTTP API directly against the database.

Usage:
    python shortener_cli.py signup <email> <password> --firstname NAME [--lastname NAME]
    python shortener_cli.py login <email> <password>
    python shortener_cli.py shorten <url> [--code CODE] --token TOKEN
    python shortener_cli.py get <code>
    python shortener_cli.py list --token TOKEN
    python shortener_cli.py delete <id> --token TOKEN
    python shortener_cli.py health
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Optional

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import Config, load_config
from shortener.database import PostgresShortenerDB
from shortener.errors import ShortenerError
from shortener.handlers import HandlerRequest, LinkHandlers
from shortener.identity import IdentityService
from shortener.security import TokenService
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging


class ShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(self, config: Config, db_url: str, jwt_secret: str, verbose: bool = False):
        self.config = config
        self.db_url = db_url
        self.jwt_secret = jwt_secret
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service: Optional[URLShortenerService] = None
        self.identity: Optional[IdentityService] = None
        self.handlers: Optional[LinkHandlers] = None

    def initialize(self):
        """Wire database, services and handlers."""
        config = self.config
        db = PostgresShortenerDB(db_config=self.db_url, logger=self.logger)
        self.service = URLShortenerService(
            db=db,
            short_code_generator=ShortCodeGenerator(default_length=config.short_code_length),
            logger=self.logger,
            max_collision_retries=config.max_collision_retries,
        )
        tokens = TokenService(
            secret=self.jwt_secret,
            algorithm=config.jwt_algorithm,
            ttl_minutes=config.token_ttl_minutes,
            logger=self.logger,
        )
        self.identity = IdentityService(db=db, tokens=tokens, logger=self.logger)
        self.handlers = LinkHandlers(
            service=self.service,
            identity=self.identity,
            enable_custom_codes=config.enable_custom_codes,
            path_prefix=config.path_prefix,
            logger=self.logger,
        )
        self.base_url = config.base_url

    async def cleanup(self):
        if self.service:
            await self.service.close()

    async def run(self, method: str, pattern: str, token: Optional[str] = None, **request_kwargs) -> int:
        """Dispatch one route and print its result as JSON."""
        try:
            user_id = await self.identity.current_user(token) if token else None
            request = HandlerRequest(user_id=user_id, base_url=self.base_url, **request_kwargs)
            result = await self.handlers.dispatch(method, pattern, request)
        except ShortenerError as e:
            print(json.dumps({
                "success": False,
                "status": e.status_code,
                "error": e.message,
            }, indent=2), file=sys.stderr)
            return 1

        body = dict(result.body)
        if result.redirect_to is not None:
            body["targetURL"] = result.redirect_to
        print(json.dumps({"success": True, **body}, indent=2))
        return 0

    async def health(self) -> int:
        health_status = await self.service.health_check()
        print(json.dumps({"success": health_status["overall"], "health": health_status}, indent=2))
        return 0 if health_status["overall"] else 1


def build_parser(config: Config) -> argparse.ArgumentParser:
    """Build the argument parser; connection defaults come from config (env and .env)."""
    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create an account and log in
  %(prog)s signup me@example.com secret --firstname Ada
  %(prog)s login me@example.com secret

  # Shorten a URL (token from login, or SHORTENER_TOKEN env)
  %(prog)s shorten https://example.com/long/url --code mylink --token <token>

  # Look up, list and delete
  %(prog)s get mylink
  %(prog)s list --token <token>
  %(prog)s delete <id> --token <token>
        """
    )

    parser.add_argument(
        "--db-url",
        default=config.database_url,
        help="PostgreSQL connection URL (default: DATABASE_URL from env or .env)"
    )
    parser.add_argument(
        "--jwt-secret",
        default=config.jwt_secret,
        help="Token signing secret (default: JWT_SECRET from env or .env)"
    )
    parser.add_argument(
        "--token",
        default=os.getenv("SHORTENER_TOKEN"),
        help="Bearer token for commands that need a logged-in user"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    signup_parser = subparsers.add_parser("signup", help="Register a user")
    signup_parser.add_argument("email")
    signup_parser.add_argument("password")
    signup_parser.add_argument("--firstname", required=True)
    signup_parser.add_argument("--lastname")

    login_parser = subparsers.add_parser("login", help="Get a bearer token")
    login_parser.add_argument("email")
    login_parser.add_argument("password")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--code", help="Custom short code")

    get_parser = subparsers.add_parser("get", help="Get original URL")
    get_parser.add_argument("code", help="Short code to lookup")

    subparsers.add_parser("list", help="List my short URLs")

    delete_parser = subparsers.add_parser("delete", help="Delete one of my short URLs")
    delete_parser.add_argument("id", help="Id of the short link")

    subparsers.add_parser("health", help="Check database health")

    return parser


async def main():
    """Main entry point."""
    config = load_config()
    parser = build_parser(config)
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortenerCLI(config=config, db_url=args.db_url, jwt_secret=args.jwt_secret, verbose=args.verbose)
    cli.initialize()

    try:
        if args.command == "signup":
            body = {"email": args.email, "password": args.password, "firstname": args.firstname}
            if args.lastname:
                body["lastname"] = args.lastname
            return await cli.run("POST", "/users/signup", body=body)
        elif args.command == "login":
            return await cli.run("POST", "/users/login", body={"email": args.email, "password": args.password})
        elif args.command == "shorten":
            body = {"url": args.url}
            if args.code:
                body["code"] = args.code
            return await cli.run("POST", "/shorten", token=args.token, body=body)
        elif args.command == "get":
            return await cli.run("GET", "/{code}", params={"code": args.code})
        elif args.command == "list":
            return await cli.run("GET", "/allCodes", token=args.token)
        elif args.command == "delete":
            return await cli.run("DELETE", "/{id}", token=args.token, params={"id": args.id})
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
