# src/vaultsync/bitwarden/items.py

import copy
import json
import logging
from typing import Any, Dict, Optional

from vaultsync.common.models import MappedItem, LoginData, PAYLOAD_KEYS
from .mapper import CROSS_REFERENCE_FIELD
from .templates import Templates

logger = logging.getLogger(__name__)


def cross_reference(item: Dict[str, Any]) -> Optional[str]:
    """LastPass id stored on a Bitwarden item, if it was migrated by us."""
    for field in item.get("fields") or []:
        if isinstance(field, dict) and field.get("name") == CROSS_REFERENCE_FIELD:
            return field.get("value") or None
    return None


def _merge_payload(base: Dict[str, Any], mapped: MappedItem, templates: Templates) -> None:
    key = mapped.payload_key
    payload = base.get(key) or templates.payload(key)

    for name, value in mapped.payload.to_dict().items():
        if value is not None or name not in payload:
            payload[name] = value

    if isinstance(mapped.payload, LoginData):
        uris = payload.get("uris") or []
        known = {u.get("uri") for u in uris if isinstance(u, dict)}
        for uri in mapped.payload.uris:
            if uri not in known:
                uris.append(templates.uri(uri))
        payload["uris"] = uris

    base[key] = payload
    for other in PAYLOAD_KEYS.values():
        if other != key:
            base[other] = None


def _merge_fields(base: Dict[str, Any], mapped: MappedItem, templates: Templates) -> None:
    fields = [
        f for f in (base.get("fields") or [])
        if not (isinstance(f, dict) and f.get("name") == CROSS_REFERENCE_FIELD)
    ]
    present = {(f.get("name"), f.get("value")) for f in fields if isinstance(f, dict)}

    for custom in mapped.fields:
        if custom.name == CROSS_REFERENCE_FIELD:
            continue
        if (custom.name, custom.value) in present:
            continue
        fields.append(templates.field(custom.name, custom.value, custom.type))
        present.add((custom.name, custom.value))

    marker = next(f for f in mapped.fields if f.name == CROSS_REFERENCE_FIELD)
    fields.append(templates.field(marker.name, marker.value, marker.type))
    base["fields"] = fields


def apply_mapped_item(
    base: Dict[str, Any],
    mapped: MappedItem,
    templates: Templates,
    folder_id: Optional[str] = None,
    organization_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Writes a mapped record onto `base` (a fresh template or an existing
    vault item) without dropping fields, URIs or attachments added in
    Bitwarden since the last run.
    """
    base["name"] = mapped.name
    base["notes"] = mapped.notes
    base["type"] = mapped.type_code
    if folder_id is not None:
        base["folderId"] = folder_id
    if organization_id:
        base["organizationId"] = organization_id

    _merge_payload(base, mapped, templates)
    _merge_fields(base, mapped, templates)
    return base


class ItemUpsertResolver:
    """Creates or updates vault items keyed by the `lastpass_id` field."""

    def __init__(self, client, templates: Templates, organization_id: Optional[str] = None,
                 dry_run: bool = False):
        self.client = client
        self.templates = templates
        self.organization_id = organization_id
        self.dry_run = dry_run
        self.index: Dict[str, Dict[str, Any]] = {}

    def load(self) -> None:
        self.index = {}
        for item in self.client.list_items():
            source_id = cross_reference(item)
            if not source_id:
                continue
            if source_id in self.index:
                logger.warning("Several items carry %s '%s'; using '%s'.",
                               CROSS_REFERENCE_FIELD, source_id, self.index[source_id].get("id"))
                continue
            self.index[source_id] = item
        logger.debug("Found %d previously migrated items.", len(self.index))

    def upsert(self, mapped: MappedItem, folder_id: Optional[str] = None) -> Dict[str, Any]:
        """Returns the vault's view of the item after the write."""
        existing = self.index.get(mapped.source_id)
        base = copy.deepcopy(existing) if existing else self.templates.new_item()
        item = apply_mapped_item(base, mapped, self.templates, folder_id, self.organization_id)

        logger.debug("Payload for '%s':\n%s", mapped.name, json.dumps(item, indent=2, ensure_ascii=False))

        item_id = existing.get("id") if existing else None
        if self.dry_run:
            item["id"] = item_id or f"dry-run-{mapped.source_id}"
            logger.info("Would %s item '%s'.", "update" if item_id else "create", mapped.name)
            result = item
        elif item_id:
            result = self.client.edit_item(item_id, item)
            logger.debug("Updated item '%s' (ID: '%s').", mapped.name, item_id)
        else:
            result = self.client.create_item(item)
            logger.debug("Created item '%s' (ID: '%s').", mapped.name, result.get("id"))

        self.index[mapped.source_id] = result
        return result
