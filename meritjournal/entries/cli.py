"""
Merit Journal entries CLI
"""
import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List

from pydantic import BaseModel

from . import actions
from ..db import SessionLocal
from .repositories import UnitOfWork


def as_json_dict(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def print_models(models: List[BaseModel]) -> None:
    """
    Print models to screen as JSON array.
    """
    print(json.dumps([as_json_dict(model) for model in models]))


def entries_list_handler(args: argparse.Namespace) -> None:
    """
    Handler for "entries list" subcommand.
    """
    db_session = SessionLocal()
    try:
        unit_of_work = UnitOfWork(db_session)
        entries = asyncio.run(
            actions.get_journal_entries(unit_of_work, args.user, tag=args.tag)
        )
        print_models(entries)
    finally:
        db_session.close()


def entries_get_handler(args: argparse.Namespace) -> None:
    """
    Handler for "entries get" subcommand. Exits with code 1 if there is no such entry.
    """
    db_session = SessionLocal()
    try:
        unit_of_work = UnitOfWork(db_session)
        entry = asyncio.run(
            actions.get_journal_entry(unit_of_work, args.id, args.user)
        )
        if entry is None:
            print(f"Entry with id: {args.id} not found", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(as_json_dict(entry)))
    finally:
        db_session.close()


def entries_delete_handler(args: argparse.Namespace) -> None:
    """
    Handler for "entries delete" subcommand.
    """
    db_session = SessionLocal()
    try:
        unit_of_work = UnitOfWork(db_session)
        try:
            asyncio.run(
                actions.delete_journal_entry(unit_of_work, args.id, args.user)
            )
        except actions.EntryNotFound as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
        print(f"Entry with id: {args.id} deleted")
    finally:
        db_session.close()


def tags_list_handler(args: argparse.Namespace) -> None:
    """
    Handler for "tags list" subcommand.
    """
    db_session = SessionLocal()
    try:
        unit_of_work = UnitOfWork(db_session)
        tags = asyncio.run(actions.get_tags(unit_of_work, args.user))
        print_models(tags)
    finally:
        db_session.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Merit Journal entries CLI")
    parser.set_defaults(func=lambda _: parser.print_help())
    subcommands = parser.add_subparsers(description="Merit Journal commands")

    # Entries module
    parser_entries = subcommands.add_parser("entries", description="Journal entries")
    parser_entries.set_defaults(func=lambda _: parser_entries.print_help())
    subcommands_entries = parser_entries.add_subparsers(
        description="Journal entries commands"
    )

    parser_entries_list = subcommands_entries.add_parser(
        "list", description="List journal entries of the user"
    )
    parser_entries_list.add_argument("-u", "--user", required=True, help="User ID")
    parser_entries_list.add_argument(
        "-t", "--tag", help="Only entries carrying exactly this tag"
    )
    parser_entries_list.set_defaults(func=entries_list_handler)

    parser_entries_get = subcommands_entries.add_parser(
        "get", description="Get journal entry"
    )
    parser_entries_get.add_argument("-u", "--user", required=True, help="User ID")
    parser_entries_get.add_argument(
        "-i", "--id", type=int, required=True, help="Entry ID"
    )
    parser_entries_get.set_defaults(func=entries_get_handler)

    parser_entries_delete = subcommands_entries.add_parser(
        "delete", description="Delete journal entry with its images"
    )
    parser_entries_delete.add_argument("-u", "--user", required=True, help="User ID")
    parser_entries_delete.add_argument(
        "-i", "--id", type=int, required=True, help="Entry ID"
    )
    parser_entries_delete.set_defaults(func=entries_delete_handler)

    # Tags module
    parser_tags = subcommands.add_parser("tags", description="Tags of the user")
    parser_tags.set_defaults(func=lambda _: parser_tags.print_help())
    subcommands_tags = parser_tags.add_subparsers(description="Tags commands")

    parser_tags_list = subcommands_tags.add_parser(
        "list", description="List tags with number of entries using them"
    )
    parser_tags_list.add_argument("-u", "--user", required=True, help="User ID")
    parser_tags_list.set_defaults(func=tags_list_handler)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
