# src/vaultsync/bitwarden/loader.py

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional

from vaultsync.common.config import Settings
from vaultsync.common.decrypter import Decrypter
from vaultsync.common.errors import VaultSyncError
from vaultsync.common.models import SourceRecord, MappedItem
from vaultsync.lastpass.classifier import classify
from vaultsync.lastpass.notes import extract_note_fields
from vaultsync.lastpass.reader import list_record_files, load_record, attachment_dir
from .attachments import AttachmentReconciler
from .folders import FolderResolver
from .items import ItemUpsertResolver
from .mapper import map_record
from .templates import Templates

logger = logging.getLogger(__name__)


@dataclass
class LoadSummary:
    total: int = 0
    processed: int = 0
    failed: List[str] = field(default_factory=list)


def map_source_record(record: SourceRecord, keep_language: bool = False) -> MappedItem:
    """Classifier -> note field extractor -> schema mapper."""
    item_type = classify(record)
    if not record.note:
        logger.debug("'%s' has empty notes.", record.name)
    note_fields = extract_note_fields(record.note, keep_language=keep_language)
    logger.debug("'%s' (ID: '%s') is a '%s' with note fields %s",
                 record.name, record.id, item_type, note_fields.fields)
    return map_record(record, item_type, note_fields)


class Loader:
    """
    Loads a directory of LastPass records into a Bitwarden vault.

    Owns the folder and item indices for the whole run, so re-running
    against the same vault updates items instead of duplicating them.
    """

    def __init__(self, settings: Settings, client, decrypter: Optional[Decrypter] = None,
                 templates: Optional[Templates] = None):
        self.settings = settings
        self.client = client
        self.decrypter = decrypter or Decrypter.from_settings(settings)
        self.templates = templates
        self.folders: Optional[FolderResolver] = None
        self.items: Optional[ItemUpsertResolver] = None
        self.attachments = AttachmentReconciler(
            client, self.decrypter, settings.encrypted_extension, dry_run=settings.dry_run
        )

    def prepare(self) -> None:
        if self.templates is None:
            self.templates = Templates.from_client(self.client)
        self.folders = FolderResolver(self.client, self.templates, dry_run=self.settings.dry_run)
        self.folders.load()
        self.items = ItemUpsertResolver(
            self.client, self.templates,
            organization_id=self.settings.organization_id,
            dry_run=self.settings.dry_run,
        )
        self.items.load()

    def process(self, path: Path) -> Dict[str, Any]:
        record = load_record(path, self.decrypter)
        mapped = map_source_record(record, keep_language=self.settings.keep_language)

        folder_id = self.folders.resolve(record.group)
        item = self.items.upsert(mapped, folder_id)

        report = self.attachments.reconcile(attachment_dir(self.settings.input_dir, record), item)
        if report.created or report.replaced:
            logger.debug("Attachments for '%s': %d added, %d replaced, %d unchanged.",
                         record.name, len(report.created), len(report.replaced), len(report.skipped))
        return item

    def run(self) -> LoadSummary:
        if self.items is None:
            self.prepare()

        files = list_record_files(self.settings.input_dir)
        summary = LoadSummary(total=len(files))
        if not files:
            logger.info("No items found in '%s'.", self.settings.input_dir)
            return summary

        logger.debug("Found %d items.", summary.total)
        for counter, path in enumerate(files, 1):
            try:
                self.process(path)
                summary.processed += 1
            except (VaultSyncError, OSError) as e:
                logger.error("Skipping '%s': %s", path.name, e)
                summary.failed.append(path.name)
            logger.info("Processed %d of %d.", counter, summary.total)
        return summary
