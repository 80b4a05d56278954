# src/vaultsync/common/config.py

import argparse
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List

from .errors import SetupError

DEFAULT_ALGORITHM = "AES256"
DEFAULT_EXTENSION = "enc"
DEFAULT_CIPHER = "gpg"
DEFAULT_ITERATIONS = 70000

CIPHERS = ("gpg", "aes")


@dataclass
class Settings:
    input_dir: Path
    passphrase_file: Optional[Path] = None
    algorithm: str = ""
    cipher: str = DEFAULT_CIPHER
    iterations: int = DEFAULT_ITERATIONS
    encrypted_extension: str = ""
    organization_id: Optional[str] = None
    dry_run: bool = False
    quiet: bool = False
    debug: bool = False
    keep_language: bool = False
    force: bool = False
    output: Optional[Path] = None

    @property
    def decrypt(self) -> bool:
        return self.passphrase_file is not None

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Settings":
        settings = cls(
            input_dir=Path(args.input_dir).expanduser().resolve(),
            passphrase_file=args.passphrase_file,
            algorithm=args.algorithm or "",
            cipher=args.cipher or DEFAULT_CIPHER,
            iterations=args.iterations,
            encrypted_extension=args.extension or "",
            organization_id=args.organization or None,
            dry_run=getattr(args, "dry_run", False),
            quiet=args.quiet,
            debug=args.debug,
            keep_language=args.keep_language,
            force=getattr(args, "force", False),
            output=getattr(args, "output", None),
        )
        settings.apply_defaults()
        return settings

    def apply_defaults(self):
        if self.decrypt:
            if not self.algorithm:
                self.algorithm = DEFAULT_ALGORITHM
            if not self.encrypted_extension:
                self.encrypted_extension = DEFAULT_EXTENSION

    def validate(self):
        """Fatal checks run before any record is touched."""
        if not self.input_dir.exists():
            raise SetupError(f"Input directory does not exist: {self.input_dir}")
        if not self.input_dir.is_dir():
            raise SetupError(f"Input directory is not actually a directory: {self.input_dir}")

        if self.decrypt:
            pf = self.passphrase_file
            if not pf.is_file() or pf.stat().st_size == 0:
                raise SetupError("Decryption requested, but passphrase file does not exist or is empty.")
            if self.cipher not in CIPHERS:
                raise SetupError(f"Unknown cipher backend '{self.cipher}'.")
            if self.iterations < 1:
                raise SetupError("Key-derivation iterations must be positive.")

        if self.output and self.output.exists() and not self.force:
            raise SetupError(f"Output file already exists: {self.output} (use -f to overwrite)")

    def required_tools(self, remote: bool) -> List[str]:
        tools = ["bw"] if remote else []
        if self.decrypt and self.cipher == "gpg":
            tools.append("gpg")
        return tools

    def check_dependencies(self, remote: bool = True):
        for tool in self.required_tools(remote):
            if shutil.which(tool) is None:
                raise SetupError(f"Dependency '{tool}' is missing.")
