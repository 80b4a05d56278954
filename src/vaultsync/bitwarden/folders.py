# src/vaultsync/bitwarden/folders.py

import logging
from typing import Dict, Optional

from .templates import Templates

logger = logging.getLogger(__name__)


class FolderResolver:
    """Folder name -> folder id, backed by one initial listing of the vault."""

    def __init__(self, client, templates: Templates, dry_run: bool = False):
        self.client = client
        self.templates = templates
        self.dry_run = dry_run
        self.index: Dict[str, str] = {}

    def load(self) -> None:
        self.index = {}
        for folder in self.client.list_folders():
            name, folder_id = folder.get("name"), folder.get("id")
            # "No Folder" is listed with a null id
            if not name or not folder_id:
                continue
            if name in self.index:
                logger.warning("Found a duplicate folder '%s' (ID: '%s'); keeping '%s'.",
                               name, folder_id, self.index[name])
                continue
            logger.debug("Adding folder '%s' (ID: '%s').", name, folder_id)
            self.index[name] = folder_id

    def resolve(self, name: str) -> Optional[str]:
        if not name:
            return None
        if name in self.index:
            return self.index[name]

        if self.dry_run:
            folder_id = f"dry-run-folder-{name}"
            logger.info("Would create folder '%s'.", name)
        else:
            folder_id = self.client.create_folder(self.templates.folder(name))["id"]
            logger.info("Created folder '%s' (ID: '%s').", name, folder_id)

        self.index[name] = folder_id
        return folder_id
