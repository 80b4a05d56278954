# src/vaultsync/common/console.py

import logging

import pyfiglet
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

# stderr 输出，保持 stdout 干净供管道使用
console = Console(stderr=True)


def display_banner() -> str:
    plain_banner = pyfiglet.figlet_format("vaultsync", font="slant")
    console.print(
        Panel(
            plain_banner,
            title="[bold white] LastPass -> Bitwarden [/bold white]",
            border_style="cyan",
            expand=False,
        )
    )
    return plain_banner


def setup_logging(quiet: bool = False, debug: bool = False) -> None:
    """Routes the package loggers to the shared rich console."""
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(console=console, show_path=debug, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("vaultsync")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
