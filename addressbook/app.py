import argparse
import sys
from pathlib import Path

from . import __version__
from .config import Settings, load_env
from .logger import get_logger
from .lookup import AddressLookupClient
from .storage import AddressBook
from .workflow import (
    AddressWorkflow,
    FIRST_NAME,
    HOUSE_NUMBER,
    LAST_NAME,
    POSTCODE,
)


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(2)


def build_client(settings: Settings) -> AddressLookupClient:
    return AddressLookupClient(
        settings.api_base_url,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )


def build_workflow(settings: Settings, client: AddressLookupClient, book: AddressBook) -> AddressWorkflow:
    return AddressWorkflow(
        client,
        book.add_address,
        discard_stale_responses=settings.discard_stale_responses,
    )


def _search(args: argparse.Namespace, workflow: AddressWorkflow):
    workflow.on_change(POSTCODE, args.postcode)
    workflow.on_change(HOUSE_NUMBER, args.house_number)
    addresses = workflow.submit_address_search()
    if workflow.error:
        _fail(workflow.error)
    return addresses


def cmd_search(args: argparse.Namespace) -> None:
    book = AddressBook(args.settings.store_path)
    with build_client(args.settings) as client:
        addresses = _search(args, build_workflow(args.settings, client, book))
    if not addresses:
        print("No addresses found.")
        return
    print(f"Found {len(addresses)} addresses:")
    for a in addresses:
        print(f" [{a.id}] {a.format()}")


def cmd_add(args: argparse.Namespace) -> None:
    book = AddressBook(args.settings.store_path)
    with build_client(args.settings) as client:
        workflow = build_workflow(args.settings, client, book)
        addresses = _search(args, workflow)

    selected = args.select
    if not selected and len(addresses) == 1:
        selected = addresses[0].id
    if not selected and len(addresses) > 1:
        print("Multiple addresses found, pick one with --select:")
        for a in addresses:
            print(f" [{a.id}] {a.format()}")
        raise SystemExit(2)
    if selected:
        workflow.select_address(selected)

    workflow.on_change(FIRST_NAME, args.first_name)
    workflow.on_change(LAST_NAME, args.last_name)
    record = workflow.submit_personal_info()
    if record is None:
        _fail(workflow.error or "Address not added")
    print(f"Added: {record.format()}")


def cmd_list(args: argparse.Namespace) -> None:
    store_path = args.settings.store_path
    if not store_path.exists():
        print(f"Address book not found: {store_path}")
        return
    records = AddressBook(store_path).list_addresses()
    if not records:
        print("Address book is empty.")
        return
    print(f"Found {len(records)} addresses in {store_path}:\n")
    for r in records:
        print(f"ID: {r.id}")
        print(f"  Name: {r.first_name} {r.last_name}")
        print(f"  Street: {r.street} {r.house_number}{r.house_number_addition}")
        print(f"  Postcode: {r.postcode}")
        print(f"  City: {r.city}")
        print()


def cmd_remove(args: argparse.Namespace) -> None:
    if not AddressBook(args.settings.store_path).remove_address(args.id):
        _fail(f"No address with id {args.id}")
    print(f"Removed: {args.id}")


def cmd_clear(args: argparse.Namespace) -> None:
    AddressBook(args.settings.store_path).clear()
    print("Address book cleared.")


def _add_search_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--postcode", default="", help="Postcode to look up")
    p.add_argument("--house-number", default="", help="House number to look up")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="addressbook", description="Create your own address book")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--store", help="Path to JSON address book (or set ADDRESSBOOK_STORE)")
    parser.add_argument("--base-url", help="Address lookup base URL (or set ADDRESSBOOK_API_BASE_URL)")

    subparsers = parser.add_subparsers(dest="command")
    srch = subparsers.add_parser("search", help="Find addresses by postcode and house number")
    _add_search_args(srch)
    srch.set_defaults(func=cmd_search)

    add = subparsers.add_parser("add", help="Find an address, add personal info and save it")
    _add_search_args(add)
    add.add_argument("--first-name", default="", help="First name")
    add.add_argument("--last-name", default="", help="Last name")
    add.add_argument("--select", help="Id of the address to pick when the search finds several")
    add.set_defaults(func=cmd_add)

    lst = subparsers.add_parser("list", help="List saved addresses")
    lst.set_defaults(func=cmd_list)

    rm = subparsers.add_parser("remove", help="Remove a saved address")
    rm.add_argument("--id", required=True, help="Address id")
    rm.set_defaults(func=cmd_remove)

    clr = subparsers.add_parser("clear", help="Remove all saved addresses")
    clr.set_defaults(func=cmd_clear)
    return parser


def main(argv=None):
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    try:
        settings = Settings.from_env()
    except ValueError as e:
        _fail(str(e))
    if args.store:
        settings.store_path = Path(args.store)
    if args.base_url:
        settings.api_base_url = args.base_url.rstrip("/")
    args.settings = settings
    get_logger(level=settings.log_level)

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
