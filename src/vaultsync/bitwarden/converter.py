# src/vaultsync/bitwarden/converter.py

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vaultsync.common.config import Settings
from vaultsync.common.decrypter import Decrypter
from vaultsync.common.errors import VaultSyncError
from vaultsync.lastpass.reader import list_record_files, load_record
from .items import apply_mapped_item
from .loader import map_source_record
from .templates import Templates

logger = logging.getLogger(__name__)

# Folder ids in the export only need to be stable within one file
_FOLDER_NAMESPACE = uuid.UUID("6f1c2e0a-3f5d-4b8e-9a61-0b7d2c4e8f10")


def folder_id_for(name: str) -> str:
    return str(uuid.uuid5(_FOLDER_NAMESPACE, name))


@dataclass
class Conversion:
    folders: List[Dict[str, Any]] = field(default_factory=list)
    items: List[Dict[str, Any]] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class Converter:
    """Offline counterpart of Loader: builds a Bitwarden JSON export, no vault calls."""

    def __init__(self, settings: Settings, decrypter: Optional[Decrypter] = None,
                 templates: Optional[Templates] = None):
        self.settings = settings
        self.decrypter = decrypter or Decrypter.from_settings(settings)
        self.templates = templates or Templates.default()
        self._folders: Dict[str, str] = {}

    def _folder(self, name: str) -> Optional[str]:
        if not name:
            return None
        if name not in self._folders:
            logger.debug("Adding folder '%s'.", name)
            self._folders[name] = folder_id_for(name)
        return self._folders[name]

    def run(self) -> Conversion:
        result = Conversion()
        files = list_record_files(self.settings.input_dir)
        if not files:
            logger.info("No items found in '%s'.", self.settings.input_dir)

        for counter, path in enumerate(files, 1):
            try:
                record = load_record(path, self.decrypter)
            except VaultSyncError as e:
                logger.error("Skipping '%s': %s", path.name, e)
                result.failed.append(path.name)
                continue

            mapped = map_source_record(record, keep_language=self.settings.keep_language)
            item = apply_mapped_item(
                self.templates.new_item(), mapped, self.templates,
                folder_id=self._folder(record.group),
                organization_id=self.settings.organization_id,
            )
            result.items.append(item)
            logger.info("Processed %d of %d.", counter, len(files))

        result.folders = [{"id": fid, "name": name} for name, fid in self._folders.items()]
        return result
