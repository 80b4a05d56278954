# src/vaultsync/bitwarden/attachments.py

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from vaultsync.common.decrypter import Decrypter

logger = logging.getLogger(__name__)


@dataclass
class AttachmentReport:
    created: List[str] = field(default_factory=list)
    replaced: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


def _remote_size(attachment: Dict[str, Any]) -> Optional[int]:
    try:
        return int(attachment.get("size"))
    except (TypeError, ValueError):
        return None


class AttachmentReconciler:
    """
    Keeps an item's attachments in line with the record's local attachment
    directory. Files are matched by name and compared by decrypted size:
    missing ones are uploaded, resized ones are deleted and uploaded again,
    the rest are left alone.
    """

    def __init__(self, client, decrypter: Decrypter, encrypted_extension: str = "",
                 dry_run: bool = False):
        self.client = client
        self.decrypter = decrypter
        self.encrypted_extension = encrypted_extension.lstrip(".")
        self.dry_run = dry_run

    def decrypted_name(self, path: Path) -> str:
        suffix = f".{self.encrypted_extension}" if self.encrypted_extension else ""
        if self.decrypter.enabled and suffix and path.name.endswith(suffix):
            return path.name[: -len(suffix)]
        return path.name

    def reconcile(self, attachment_dir: Optional[Path], item: Dict[str, Any]) -> AttachmentReport:
        report = AttachmentReport()
        if attachment_dir is None or not attachment_dir.is_dir():
            return report

        item_id = item["id"]
        remote = {a.get("fileName"): a for a in (item.get("attachments") or []) if isinstance(a, dict)}

        for path in sorted(p for p in attachment_dir.iterdir() if p.is_file()):
            name = self.decrypted_name(path)
            with tempfile.TemporaryDirectory(prefix="vaultsync-") as tmp:
                plain = self.decrypter.decrypt_to(path, Path(tmp) / name)
                size = plain.stat().st_size
                existing = remote.get(name)

                if existing is None:
                    logger.info("Adding attachment '%s' (%d bytes).", name, size)
                    if not self.dry_run:
                        self.client.create_attachment(item_id, plain)
                    report.created.append(name)
                elif _remote_size(existing) == size:
                    logger.debug("Attachment '%s' is already up to date.", name)
                    report.skipped.append(name)
                else:
                    logger.info("Replacing attachment '%s' (%s -> %d bytes).", name, existing.get("size"), size)
                    if not self.dry_run:
                        self.client.delete_attachment(existing["id"], item_id)
                        self.client.create_attachment(item_id, plain)
                    report.replaced.append(name)
        return report
