#!/usr/bin/env python3
"""
Command line front end for the GalactaVista client.
Credentials persist in the file credential store between invocations.
"""

import argparse
import asyncio
import getpass
import sys
from typing import List, Optional

from galactavista.api.client import APIClient
from galactavista.config import get_settings
from galactavista.logging_config import configure_logging
from galactavista.repositories.credentials import FileCredentialRepository
from galactavista.services.auth import AuthSessionManager
from galactavista.services.error_handler import ErrorHandlerService
from galactavista.services.property import PropertyCollection
from galactavista.utils.exceptions import ClientError


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="galactavista", description="GalactaVista property listing client")
    parser.add_argument("--base-url", default=settings.api_base_url, help="API base URL")
    parser.add_argument("--store", default=settings.credential_store_file, help="Credential store file")
    parser.add_argument("--log-level", default=None, help="Log level (default from settings)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("health", help="Check API health")

    login = subparsers.add_parser("login", help="Log in and store the session")
    login.add_argument("email")
    login.add_argument("--password", help="Password (prompted when omitted)")

    subparsers.add_parser("logout", help="Forget the stored session")

    whoami = subparsers.add_parser("whoami", help="Show the logged in user")
    whoami.add_argument("--refresh", action="store_true", help="Re-read the profile from the server")

    listing = subparsers.add_parser("properties", help="List or search properties")
    listing.add_argument("--query")
    listing.add_argument("--city")
    listing.add_argument("--state")
    listing.add_argument("--type", dest="property_type")
    listing.add_argument("--status")
    listing.add_argument("--min-price", type=float)
    listing.add_argument("--max-price", type=float)
    listing.add_argument("--bedrooms", type=int)
    listing.add_argument("--page", type=int)
    listing.add_argument("--page-size", type=int)
    listing.add_argument("--mine", action="store_true", help="Only the logged in agent's properties")

    detail = subparsers.add_parser("property", help="Show one property")
    detail.add_argument("id", type=int)

    return parser


def _search_filters(args: argparse.Namespace) -> dict:
    fields = ("query", "city", "state", "property_type", "status", "min_price",
              "max_price", "bedrooms", "page", "page_size")
    return {name: getattr(args, name) for name in fields if getattr(args, name) is not None}


async def run_command(args: argparse.Namespace, manager: AuthSessionManager) -> int:
    """Execute one parsed command; returns the process exit code."""
    api = manager.api
    await manager.initialize()

    if args.command == "health":
        health = await api.health_check()
        print(health.status)
        return 0

    if args.command == "login":
        password = args.password or getpass.getpass("Password: ")
        session = await manager.login(args.email, password)
        print(f"Logged in as {session.user.full_name} <{session.user.email}> ({session.user.role.value})")
        return 0

    if args.command == "logout":
        await manager.logout()
        print("Logged out")
        return 0

    if args.command == "whoami":
        if not manager.is_authenticated:
            print("Not logged in", file=sys.stderr)
            return 1
        user = await manager.refresh_profile() if args.refresh else manager.user
        print(f"{user.full_name} <{user.email}> ({user.role.value})")
        return 0

    collection = PropertyCollection(api)

    if args.command == "properties":
        if args.mine:
            filters = {k: v for k, v in (("page", args.page), ("page_size", args.page_size)) if v is not None}
            await collection.fetch_by_agent(filters or None)
        else:
            filters = _search_filters(args)
            state = await collection.fetch(filters or None)
            if state.error:
                print(state.error, file=sys.stderr)
                return 1

        for prop in collection.items:
            print(f"{prop.id:>6}  {prop.title[:40]:<40}  {prop.price:>14,.2f}  {prop.city}, {prop.state}  [{prop.status.value}]")
        if collection.pagination:
            p = collection.pagination
            print(f"page {p.page}/{p.total_pages}, {p.total} total")
        return 0

    if args.command == "property":
        prop = await collection.fetch_one(args.id)
        print(prop.model_dump_json(indent=2))
        return 0

    raise ValueError(f"Unknown command: {args.command}")


async def _main(args: argparse.Namespace) -> int:
    async with APIClient(base_url=args.base_url) as api:
        manager = AuthSessionManager(api, FileCredentialRepository(args.store))
        try:
            return await run_command(args, manager)
        except ClientError as e:
            await manager.handle_authentication_error(e)
            message = ErrorHandlerService.login_message(e) if args.command == "login" else ErrorHandlerService.user_message(e)
            print(message, file=sys.stderr)
            return 1


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
