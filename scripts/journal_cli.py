"""Command line access to a running journal API."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable

from backend.app.client import JournalApiError, JournalClient, RemoteEntry
from backend.app.client.journal_client import DEFAULT_BASE_URL


def _print_entries(entries: Iterable[RemoteEntry]) -> int:
    count = 0
    for entry in entries:
        count += 1
        print(f"{entry.date}  [{entry.entry_id}]")
        print(f"    {entry.content}")
    if not count:
        print("No entries.")
    return count


def run(args: argparse.Namespace, client: JournalClient) -> int:
    if args.command == "list":
        _print_entries(client.refresh())
    elif args.command == "show":
        entry = client.get_entry(args.date)
        if entry is None:
            print(f"No entry found for {args.date}.")
            return 1
        _print_entries([entry])
    elif args.command == "write":
        entry, created = client.save_entry(args.date, args.text)
        print(f"{'Created' if created else 'Updated'} entry for {entry.date} [{entry.entry_id}].")
    elif args.command == "edit":
        entry = client.update_entry(args.entry_id, args.text)
        print(f"Updated entry for {entry.date}.")
    elif args.command == "delete":
        client.delete_entry(args.entry_id)
        print(f"Deleted {args.entry_id}. {len(client.cache)} entries remain.")
    elif args.command == "search":
        matches = client.search(args.query)
        _print_entries(matches)
        print(f"{len(matches)} match(es).")
    elif args.command == "stats":
        stats = client.stats()
        print(f"Entries:          {stats.total_entries}")
        print(f"Total words:      {stats.total_words}")
        print(f"Avg words/entry:  {stats.avg_words_per_entry}")
        print(f"First entry:      {stats.first_entry_date or '-'}")
        print(f"Last entry:       {stats.last_entry_date or '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"Journal API root (defaults to {DEFAULT_BASE_URL}).",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="List every entry, newest first.")
    show = commands.add_parser("show", help="Show the entry for a date.")
    show.add_argument("date", help="YYYY-MM-DD")
    write = commands.add_parser("write", help="Create or overwrite the entry for a date.")
    write.add_argument("date", help="YYYY-MM-DD")
    write.add_argument("text")
    edit = commands.add_parser("edit", help="Replace the content of an entry by id.")
    edit.add_argument("entry_id")
    edit.add_argument("text")
    delete = commands.add_parser("delete", help="Delete an entry by id.")
    delete.add_argument("entry_id")
    search = commands.add_parser("search", help="Case-insensitive content search.")
    search.add_argument("query")
    commands.add_parser("stats", help="Show entry and word statistics.")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    with JournalClient(args.base_url) as client:
        try:
            exit_code = run(args, client)
        except JournalApiError as exc:
            print(f"Error: {exc.message} (HTTP {exc.status_code})", file=sys.stderr)
            exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
