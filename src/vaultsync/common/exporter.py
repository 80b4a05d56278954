# src/vaultsync/common/exporter.py

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, Any


class BitwardenExporter:
    """Writes Bitwarden's unencrypted JSON export format."""

    def build(self, folders: List[Dict[str, Any]], items: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {"encrypted": False, "folders": folders, "items": items}

    def export(self, folders: List[Dict], items: List[Dict], output_path: Optional[Path] = None):
        """Writes to `output_path`, or to stdout when no path is given."""
        text = json.dumps(self.build(folders, items), indent=2, ensure_ascii=False)
        if output_path is None:
            sys.stdout.write(text + "\n")
            return
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text + "\n", encoding="utf-8")
