# src/vaultsync/common/decrypter.py

import base64
import binascii
import hashlib
import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

from Crypto.Cipher import AES
from Crypto.Util.Padding import unpad

from .errors import DecryptionError

logger = logging.getLogger(__name__)

# --- Cryptographic Constants (aes backend) ---
SALT_SIZE = 20  # Length of the salt in bytes
IV_SIZE = 16    # AES Initialization Vector length in bytes
KEY_SIZE = 32   # AES-256 key size in bytes


def derive_key(passphrase: str, salt: bytes, iterations: int) -> bytes:
    """PBKDF2-HMAC-SHA256 key derivation used by the aes backend."""
    return hashlib.pbkdf2_hmac(
        "sha256",
        passphrase.encode("utf-8"),
        salt,
        iterations,
        dklen=KEY_SIZE,
    )


def decrypt_aes_payload(payload: bytes, passphrase: str, iterations: int) -> bytes:
    """
    Decrypts `salt | iv | ciphertext` with AES-256-CBC.
    The payload may be wrapped in base64 text.
    """
    try:
        try:
            binary_data = base64.b64decode(payload.strip(), validate=True)
        except (binascii.Error, ValueError):
            binary_data = payload

        salt_end = SALT_SIZE
        iv_end = salt_end + IV_SIZE
        if len(binary_data) <= iv_end:
            raise ValueError("payload too short")

        salt, iv, encrypted_data = (
            binary_data[:salt_end],
            binary_data[salt_end:iv_end],
            binary_data[iv_end:],
        )

        key = derive_key(passphrase, salt, iterations)
        cipher = AES.new(key, AES.MODE_CBC, iv)
        return unpad(cipher.decrypt(encrypted_data), AES.block_size, style="pkcs7")
    except ValueError as e:
        raise DecryptionError(
            f"Decryption failed. Please verify the passphrase and cipher settings ({e})."
        )


class Decrypter:
    """
    Turns a source file into plaintext bytes.

    cipher:
      - None / "none": passthrough, the file is read as-is
      - "gpg": GnuPG symmetric decryption with a passphrase file
      - "aes": AES-256-CBC with a PBKDF2-derived key
    """

    def __init__(
        self,
        cipher: Optional[str] = None,
        passphrase_file: Optional[Path] = None,
        algorithm: str = "AES256",
        iterations: int = 70000,
        gpg_binary: str = "gpg",
    ):
        self.cipher = cipher if passphrase_file else None
        self.passphrase_file = passphrase_file
        self.algorithm = algorithm
        self.iterations = iterations
        self.gpg_binary = gpg_binary

    @classmethod
    def from_settings(cls, settings) -> "Decrypter":
        return cls(
            cipher=settings.cipher,
            passphrase_file=settings.passphrase_file,
            algorithm=settings.algorithm,
            iterations=settings.iterations,
        )

    @property
    def enabled(self) -> bool:
        return self.cipher not in (None, "none")

    def decrypt(self, path: Union[str, Path]) -> bytes:
        path = Path(path)
        if not self.enabled:
            return path.read_bytes()
        if self.cipher == "gpg":
            return self._decrypt_gpg(path)
        if self.cipher == "aes":
            passphrase = self.passphrase_file.read_text(encoding="utf-8").rstrip("\r\n")
            return decrypt_aes_payload(path.read_bytes(), passphrase, self.iterations)
        raise DecryptionError(f"Unknown cipher backend '{self.cipher}'.")

    def decrypt_to(self, path: Union[str, Path], dest: Path) -> Path:
        """Writes the plaintext of `path` to `dest` and returns `dest`."""
        dest.write_bytes(self.decrypt(path))
        return dest

    def _decrypt_gpg(self, path: Path) -> bytes:
        cmd = [
            self.gpg_binary, "--quiet", "--batch", "--decrypt",
            "--passphrase-file", str(self.passphrase_file),
            "--cipher-algo", self.algorithm,
            str(path),
        ]
        logger.debug("Running gpg on '%s'.", path.name)
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, check=False)
        if proc.returncode != 0:
            err = proc.stderr.decode("utf-8", "replace").strip()
            raise DecryptionError(f"gpg failed for '{path.name}': {err or proc.returncode}")
        return proc.stdout
