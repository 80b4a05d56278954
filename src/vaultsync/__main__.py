# src/vaultsync/__main__.py

import sys
import argparse
import traceback

# --- Import Handling ---
try:
    from vaultsync.bitwarden import cli as bitwarden_cli
except ImportError as e:
    print("--- Debug Information ---", file=sys.stderr)
    traceback.print_exc()
    print("-------------------------", file=sys.stderr)

    print(
        f"Fatal Error: Could not import a required submodule.\n"
        f"Please ensure the project structure is correct and dependencies are installed.\n"
        f"Details: {e}",
        file=sys.stderr
    )
    sys.exit(1)


def main():
    parser = argparse.ArgumentParser(
        prog="vaultsync",
        description="Migrate exported LastPass items into Bitwarden, safely re-runnable.",
        epilog="Use 'vaultsync <command> --help' for more information on a specific command."
    )

    subparsers = parser.add_subparsers(
        title="Available Commands",
        dest="command",
        required=True,
        metavar="<command>"
    )

    subparsers.add_parser(
        "load",
        help="Create or update Bitwarden items (and attachments) from LastPass items.",
        add_help=False,
    )

    subparsers.add_parser(
        "convert",
        help="Write a Bitwarden JSON export from LastPass items, without touching a vault.",
        add_help=False,
    )

    # Only the command is parsed here; the rest belongs to the command's own parser.
    args = parser.parse_args(sys.argv[1:2])

    if args.command == "load":
        bitwarden_cli.main_load()
    elif args.command == "convert":
        bitwarden_cli.main_convert()
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
