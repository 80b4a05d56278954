# src/vaultsync/bitwarden/cli.py

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.panel import Panel
from rich.text import Text

from vaultsync.common.config import Settings, DEFAULT_CIPHER, DEFAULT_ITERATIONS, CIPHERS
from vaultsync.common.console import console, display_banner, setup_logging
from vaultsync.common.errors import SetupError, BitwardenClientError
from vaultsync.common.exporter import BitwardenExporter
from .client import BitwardenClient
from .converter import Converter
from .loader import Loader


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("input_dir", type=Path, help="Directory of exported LastPass items")
    parser.add_argument("-a", "--algorithm", help="Cipher algorithm passed to GnuPG (default: AES256)")
    parser.add_argument("-c", "--cipher", choices=CIPHERS, default=DEFAULT_CIPHER,
                        help="Decryption backend used with -p (default: gpg)")
    parser.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS,
                        help="PBKDF2 iterations for the aes backend")
    parser.add_argument("-d", "--debug", action="store_true", help="Output debug information")
    parser.add_argument("-l", "--keep-language", action="store_true",
                        help="Keep the 'Language' note field as a custom field")
    parser.add_argument("-o", "--organization", help="Bitwarden organization ID")
    parser.add_argument("-p", "--passphrase-file", type=Path,
                        help="Passphrase file; turns decryption on")
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not display status information")
    parser.add_argument("-x", "--extension", help="Extension of encrypted files (default: enc)")


def build_load_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vaultsync load",
        description="Load exported LastPass items into Bitwarden (create or update).",
    )
    _add_common_arguments(parser)
    parser.add_argument("-n", "--dry-run", action="store_true",
                        help="Read the vault but do not create or change anything")
    return parser


def build_convert_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vaultsync convert",
        description="Convert exported LastPass items into a Bitwarden JSON export.",
    )
    _add_common_arguments(parser)
    parser.add_argument("--output", type=Path, help="Output file (default: stdout)")
    parser.add_argument("-f", "--force", action="store_true", help="Overwrite the output file")
    return parser


def _setup(parser: argparse.ArgumentParser, argv: Optional[List[str]], remote: bool) -> Settings:
    args = parser.parse_args(sys.argv[2:] if argv is None else argv)
    settings = Settings.from_args(args)
    setup_logging(quiet=settings.quiet, debug=settings.debug)
    if not settings.quiet:
        display_banner()

    try:
        settings.validate()
        settings.check_dependencies(remote=remote)
    except SetupError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)
    return settings


def main_load(argv: Optional[List[str]] = None):
    settings = _setup(build_load_parser(), argv, remote=True)

    client = BitwardenClient(organization_id=settings.organization_id)
    loader = Loader(settings, client)
    try:
        with console.status("[bold green]Reading Bitwarden vault..."):
            client.sync()
            loader.prepare()
    except BitwardenClientError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    summary = loader.run()

    if not settings.quiet:
        text = Text()
        text.append(f"✓ Loaded: {summary.processed} of {summary.total}\n")
        if summary.failed:
            text.append(f"✗ Failed: {', '.join(summary.failed)}\n", style="red")
        title = "Dry Run Complete" if settings.dry_run else "Load Complete"
        console.print(Panel(text, title=title, border_style="red" if summary.failed else "green"))

    if summary.failed:
        sys.exit(1)


def main_convert(argv: Optional[List[str]] = None):
    settings = _setup(build_convert_parser(), argv, remote=False)

    conversion = Converter(settings).run()
    BitwardenExporter().export(conversion.folders, conversion.items, settings.output)

    if settings.output and not settings.quiet:
        console.print(f"[bold green]✓[/] {len(conversion.items)} items exported to [bold magenta]{settings.output}[/]")

    if conversion.failed:
        sys.exit(1)
