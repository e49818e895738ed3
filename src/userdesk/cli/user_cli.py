"""
Command line interface for the user directory.

Usage:
    userdesk validate --draft <json|path> [--rules <path>]
    userdesk filter --users <path> [--role <role>] [--age <age>] [--name <text>] [--company <text>]
    userdesk companies --users <path> [--sort-by company|count] [--sort-order asc|desc]
    userdesk show --users <path> --id <user_id>
    userdesk add --users <path> --draft <json|path> [--output <path>]
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any

from userdesk.core.companies import SORT_KEYS, SORT_ORDERS, summarize_companies
from userdesk.core.errors import ServerRejectionError
from userdesk.core.models import USER_ROLES, UserRecord
from userdesk.core.user_validator import UserValidator
from userdesk.observability.logger import get_logger, setup_logger
from userdesk.pipeline import PipelineState, create_filter_controller, filter_users
from userdesk.settings import Settings, load_settings
from userdesk.sources import InMemoryUserStore
from userdesk.submission import UserSubmissionController
from userdesk.utils.validation import ValidationError, validate_age

logger = get_logger(__name__)


def load_draft(value: str) -> Any:
    """Read a draft from a JSON file, or parse the value itself as JSON."""
    if os.path.exists(value):
        with open(value) as f:
            return json.load(f)
    return json.loads(value)


def load_store(path: str, **kwargs) -> InMemoryUserStore:
    try:
        return InMemoryUserStore.from_json_file(path, **kwargs)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load users from {path}: {e}")
        print(f"\nError: could not load users from {path}: {e}")
        sys.exit(1)


def build_validator(args, settings: Settings) -> UserValidator:
    rules_path = getattr(args, "rules", None) or settings.rules_path
    if not rules_path:
        return UserValidator()
    try:
        return UserValidator.from_rules_file(rules_path)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load rules from {rules_path}: {e}")
        print(f"\nError: could not load rules from {rules_path}: {e}")
        sys.exit(1)


def print_users(users: list[UserRecord]) -> None:
    print(json.dumps([user.to_wire() for user in users], indent=2))


def validate_command(args, settings: Settings) -> int:
    """
    Validate a draft user and print the per-field messages.

    Args:
        args: Command line arguments
        settings: Runtime settings
    """
    try:
        draft = load_draft(args.draft)
    except (OSError, ValueError) as e:
        print(f"\nError: draft is not valid JSON: {e}")
        return 1

    outcome = build_validator(args, settings).validate(draft)

    if outcome.valid:
        print("Draft is valid")
        return 0

    print("Draft is invalid")
    if outcome.schema_error:
        print(f"  - {outcome.schema_error}")
    for field_name, message in outcome.field_errors.items():
        print(f"  - {field_name}: {message}")
    return 1


async def _filter(args, settings: Settings, store: InMemoryUserStore) -> int:
    async with create_filter_controller(store, settings) as controller:
        controller.update(role=args.role, age=args.age, name=args.name, company=args.company)
        snapshot = await controller.wait_until_settled()

    if snapshot.error:
        print(snapshot.status_message)
        return 1

    if snapshot.state is PipelineState.IDLE:
        # Nothing is queried without a role or an age; filter everyone locally
        print_users(filter_users(store.users, name=args.name, company=args.company))
        return 0

    print_users(list(snapshot.users))
    return 0


def filter_command(args, settings: Settings) -> int:
    """
    Filter users by role and age (remote), then by name and company (local).

    Args:
        args: Command line arguments
        settings: Runtime settings
    """
    store = load_store(args.users, latency=args.latency)
    return asyncio.run(_filter(args, settings, store))


def companies_command(args, settings: Settings) -> int:
    """
    Print the number of users per company.

    Args:
        args: Command line arguments
        settings: Runtime settings
    """
    store = load_store(args.users)
    summaries = summarize_companies(store.users, sort_by=args.sort_by, sort_order=args.sort_order)

    print(f"{'Company':<30} {'Users':>5}")
    print(f"{'-' * 36}")
    for summary in summaries:
        print(f"{summary.company:<30} {summary.count:>5}")
    return 0


def show_command(args, settings: Settings) -> int:
    """
    Print one user.

    Args:
        args: Command line arguments
        settings: Runtime settings
    """
    store = load_store(args.users)

    try:
        user = asyncio.run(store.get_user(args.id))
    except ServerRejectionError as e:
        logger.warning(f"User lookup failed: {e}")
        print(e.message)
        return 1

    print(json.dumps(user.to_wire(), indent=2))
    return 0


def add_command(args, settings: Settings) -> int:
    """
    Validate a draft and add it to the user file.

    Args:
        args: Command line arguments
        settings: Runtime settings
    """
    store = load_store(args.users)

    try:
        draft = load_draft(args.draft)
    except (OSError, ValueError) as e:
        print(f"\nError: draft is not valid JSON: {e}")
        return 1

    controller = UserSubmissionController(
        store,
        validator=build_validator(args, settings),
        timeout_seconds=settings.query_timeout_seconds,
    )
    outcome = asyncio.run(controller.submit(draft))

    print(outcome.status_message)
    if not outcome.success:
        for field_name, message in outcome.error.field_errors.items():
            print(f"  - {field_name}: {message}")
        return 1

    output = Path(args.output or args.users)
    with open(output, "w") as f:
        json.dump([user.to_wire() for user in store.users], f, indent=2)
    print(f"New user id: {outcome.user_id}")
    return 0


def age_argument(value: str) -> int:
    try:
        return validate_age(value)
    except ValidationError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="userdesk",
        description="User directory tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check a draft before adding it
  userdesk validate --draft '{"name": "Pat", "age": 30, "email": "pat@example.com", "role": "viewer"}'

  # Editors aged 25 whose name contains "jo"
  userdesk filter --users data/users.json --role editor --age 25 --name jo

  # Companies with the most users first
  userdesk companies --users data/users.json --sort-by count --sort-order desc
        """
    )
    parser.add_argument("--env-file", help="Optional .env file with settings")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a draft user")
    validate_parser.add_argument(
        "--draft",
        required=True,
        help="Draft user as inline JSON or a path to a JSON file"
    )
    validate_parser.add_argument(
        "--rules",
        help="YAML file with field rules (default: built-in rules)"
    )

    # filter command
    filter_parser = subparsers.add_parser("filter", help="Filter users")
    filter_parser.add_argument("--users", required=True, help="JSON file with users")
    filter_parser.add_argument("--role", choices=USER_ROLES, help="Exact role")
    filter_parser.add_argument("--age", type=age_argument, help="Exact age")
    filter_parser.add_argument("--name", help="Substring of the name (case-insensitive)")
    filter_parser.add_argument("--company", help="Substring of the company (case-insensitive)")
    filter_parser.add_argument(
        "--latency",
        type=float,
        default=0.0,
        help="Simulated data source latency in seconds (default: 0)"
    )

    # companies command
    companies_parser = subparsers.add_parser("companies", help="Count users per company")
    companies_parser.add_argument("--users", required=True, help="JSON file with users")
    companies_parser.add_argument(
        "--sort-by",
        choices=SORT_KEYS,
        default="company",
        help="Sort by company name or user count (default: company)"
    )
    companies_parser.add_argument(
        "--sort-order",
        choices=SORT_ORDERS,
        default="asc",
        help="Sort order (default: asc)"
    )

    # show command
    show_parser = subparsers.add_parser("show", help="Show one user")
    show_parser.add_argument("--users", required=True, help="JSON file with users")
    show_parser.add_argument("--id", required=True, help="User id (24 hex characters)")

    # add command
    add_parser = subparsers.add_parser("add", help="Add a user")
    add_parser.add_argument("--users", required=True, help="JSON file with users")
    add_parser.add_argument(
        "--draft",
        required=True,
        help="Draft user as inline JSON or a path to a JSON file"
    )
    add_parser.add_argument("--rules", help="YAML file with field rules (default: built-in rules)")
    add_parser.add_argument(
        "--output",
        help="Where to write the updated users (default: overwrite --users)"
    )

    return parser


COMMANDS = {
    "validate": validate_command,
    "filter": filter_command,
    "companies": companies_command,
    "show": show_command,
    "add": add_command,
}


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    settings = load_settings(args.env_file)
    setup_logger(level=settings.log_level, format_type=settings.log_format)

    try:
        exit_code = COMMANDS[args.command](args, settings)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
