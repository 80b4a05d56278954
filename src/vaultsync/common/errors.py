# src/vaultsync/common/errors.py


class VaultSyncError(Exception):
    """Base class for every error raised by vaultsync."""


class SetupError(VaultSyncError):
    """Raised when the run cannot start (bad input dir, passphrase, missing tool)."""


class DecryptionError(VaultSyncError):
    """Raised when a source file cannot be decrypted."""


class RecordError(VaultSyncError):
    """Raised when a decrypted source file does not hold a usable record."""


class BitwardenClientError(VaultSyncError):
    """Raised when a Bitwarden CLI operation fails."""
