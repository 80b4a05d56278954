# src/vaultsync/bitwarden/templates.py

import copy
import json
from pathlib import Path
from typing import Dict, Any, Optional

TEMPLATES_PATH = Path(__file__).parent / "templates.json"

TEMPLATE_NAMES = (
    "item",
    "item.field",
    "item.login",
    "item.login.uri",
    "item.secureNote",
    "item.card",
    "item.identity",
    "folder",
)

# `bw get template` fills these with sample data ("John Doe", "visa", ...)
_PAYLOAD_TEMPLATES = ("item.login", "item.login.uri", "item.card", "item.identity")

# item type payload key -> template name
PAYLOAD_TEMPLATES = {
    "login": "item.login",
    "secureNote": "item.secureNote",
    "card": "item.card",
    "identity": "item.identity",
}


def _blank(template: Dict[str, Any]) -> Dict[str, Any]:
    return {k: ([] if isinstance(v, list) else None) for k, v in template.items()}


def _clean(raw: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    cleaned = dict(raw)
    for name in _PAYLOAD_TEMPLATES:
        if name in cleaned:
            cleaned[name] = _blank(cleaned[name])

    item = dict(cleaned["item"])
    item.update(name="", notes=None, fields=[], folderId=None, organizationId=None,
                login=None, secureNote=None, card=None, identity=None)
    cleaned["item"] = item
    return cleaned


class Templates:
    """Correctly shaped, empty Bitwarden structures."""

    def __init__(self, raw: Dict[str, Dict[str, Any]]):
        missing = [n for n in TEMPLATE_NAMES if n not in raw]
        if missing:
            raise ValueError(f"Missing templates: {', '.join(missing)}")
        self._templates = _clean(raw)

    @classmethod
    def from_client(cls, client) -> "Templates":
        """Fetches the live templates through `bw get template`."""
        return cls({name: client.get_template(name) for name in TEMPLATE_NAMES})

    @classmethod
    def default(cls, path: Optional[Path] = None) -> "Templates":
        """Packaged templates, used when no vault is reachable (convert)."""
        with open(path or TEMPLATES_PATH, "r", encoding="utf-8") as f:
            return cls(json.load(f))

    def get(self, name: str) -> Dict[str, Any]:
        return copy.deepcopy(self._templates[name])

    def new_item(self) -> Dict[str, Any]:
        return self.get("item")

    def payload(self, key: str) -> Dict[str, Any]:
        return self.get(PAYLOAD_TEMPLATES[key])

    def uri(self, uri: str) -> Dict[str, Any]:
        entry = self.get("item.login.uri")
        entry["uri"] = uri
        return entry

    def folder(self, name: str) -> Dict[str, Any]:
        entry = self.get("folder")
        entry["name"] = name
        return entry

    def field(self, name: str, value: str, field_type: int) -> Dict[str, Any]:
        entry = self.get("item.field")
        entry.update(name=name, value=value, type=field_type)
        return entry
