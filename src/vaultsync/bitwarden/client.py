# src/vaultsync/bitwarden/client.py

import base64
import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

from vaultsync.common.errors import BitwardenClientError

logger = logging.getLogger(__name__)


def encode_payload(payload: Dict[str, Any]) -> str:
    """Same as piping JSON through `bw encode`."""
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def _stdin_payload(payload: Dict[str, Any]) -> bytes:
    # bw reads the encoded JSON from stdin when no argument is given; keeps secrets out of argv
    return encode_payload(payload).encode("ascii")


class BitwardenClient:
    """Thin wrapper around the Bitwarden CLI; one `bw` call per operation."""

    def __init__(
        self,
        bw_binary: str = "bw",
        session: Optional[str] = None,
        organization_id: Optional[str] = None,
    ):
        self.bw_binary = bw_binary
        self.session = session or os.environ.get("BW_SESSION")
        self.organization_id = organization_id

    def _run(self, *args: str, input: Optional[bytes] = None) -> str:
        cmd = [self.bw_binary, *args, "--nointeraction"]
        env = dict(os.environ)
        if self.session:
            env["BW_SESSION"] = self.session

        logger.debug("bw %s", " ".join(args[:2]))
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                              input=input, env=env, check=False)
        out = proc.stdout.decode("utf-8", "replace").strip()
        if proc.returncode != 0:
            err = proc.stderr.decode("utf-8", "replace").strip() or out
            raise BitwardenClientError(f"bw {' '.join(args[:2])} failed: {err[:500]}")
        return out

    def _run_json(self, *args: str, input: Optional[bytes] = None) -> Any:
        out = self._run(*args, input=input)
        try:
            return json.loads(out)
        except json.JSONDecodeError:
            raise BitwardenClientError(f"bw {' '.join(args[:2])} returned non-JSON output: {out[:200]}")

    def sync(self) -> None:
        self._run("sync")

    def get_template(self, name: str) -> Dict[str, Any]:
        return self._run_json("get", "template", name)

    def list_folders(self) -> List[Dict[str, Any]]:
        return self._run_json("list", "folders")

    def create_folder(self, folder: Dict[str, Any]) -> Dict[str, Any]:
        return self._run_json("create", "folder", input=_stdin_payload(folder))

    def list_items(self) -> List[Dict[str, Any]]:
        args = ["list", "items"]
        if self.organization_id:
            args += ["--organizationid", self.organization_id]
        return self._run_json(*args)

    def create_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return self._run_json("create", "item", input=_stdin_payload(item))

    def edit_item(self, item_id: str, item: Dict[str, Any]) -> Dict[str, Any]:
        return self._run_json("edit", "item", item_id, input=_stdin_payload(item))

    def create_attachment(self, item_id: str, path: Path) -> Dict[str, Any]:
        return self._run_json("create", "attachment", "--file", str(path), "--itemid", item_id)

    def delete_attachment(self, attachment_id: str, item_id: str) -> None:
        self._run("delete", "attachment", attachment_id, "--itemid", item_id)
