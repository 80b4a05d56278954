# src/tests/conftest.py
"""
Shared fixtures: an in-memory stand-in for the Bitwarden CLI and helpers for
writing LastPass record files.
"""
import copy
import json
from pathlib import Path

import pytest

from vaultsync.bitwarden.templates import Templates, TEMPLATES_PATH
from vaultsync.common.config import Settings


class FakeVault:
    """Implements the BitwardenClient interface on top of plain lists."""

    def __init__(self):
        self.folders = []
        self.items = []
        self.calls = []
        self._next_id = 0

    def _new_id(self, prefix):
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    def _find(self, item_id):
        return next(i for i in self.items if i["id"] == item_id)

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]

    def get_template(self, name):
        return json.loads(TEMPLATES_PATH.read_text(encoding="utf-8"))[name]

    def sync(self):
        pass

    def list_folders(self):
        return copy.deepcopy(self.folders)

    def create_folder(self, folder):
        created = {"id": self._new_id("folder"), "name": folder["name"]}
        self.folders.append(created)
        self.calls.append(("create_folder", folder["name"]))
        return copy.deepcopy(created)

    def list_items(self):
        return copy.deepcopy(self.items)

    def create_item(self, item):
        stored = copy.deepcopy(item)
        stored["id"] = self._new_id("item")
        stored["attachments"] = []
        self.items.append(stored)
        self.calls.append(("create_item", stored["id"]))
        return copy.deepcopy(stored)

    def edit_item(self, item_id, item):
        stored = self._find(item_id)
        attachments = stored.get("attachments") or []
        stored.clear()
        stored.update(copy.deepcopy(item))
        stored["id"] = item_id
        stored["attachments"] = attachments
        self.calls.append(("edit_item", item_id))
        return copy.deepcopy(stored)

    def create_attachment(self, item_id, path):
        path = Path(path)
        size = path.stat().st_size
        self._find(item_id).setdefault("attachments", []).append(
            {"id": self._new_id("att"), "fileName": path.name, "size": str(size)}
        )
        self.calls.append(("create_attachment", item_id, path.name, size))
        return copy.deepcopy(self._find(item_id))

    def delete_attachment(self, attachment_id, item_id):
        item = self._find(item_id)
        item["attachments"] = [a for a in item["attachments"] if a["id"] != attachment_id]
        self.calls.append(("delete_attachment", attachment_id, item_id))


@pytest.fixture
def vault():
    return FakeVault()


@pytest.fixture
def templates():
    return Templates.default()


@pytest.fixture
def export_dir(tmp_path):
    d = tmp_path / "lpass"
    d.mkdir()
    return d


@pytest.fixture
def write_record(export_dir):
    """Writes one record the way `lpass show --json` prints it."""
    def _write(record_id, **fields):
        data = {"id": record_id, "name": fields.pop("name", f"Item {record_id}")}
        data.update(fields)
        path = export_dir / f"{record_id}.json"
        path.write_text(json.dumps([data]), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def settings(export_dir):
    return Settings(input_dir=export_dir)
