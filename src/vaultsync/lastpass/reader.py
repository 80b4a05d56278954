# src/vaultsync/lastpass/reader.py

import json
import logging
from pathlib import Path
from typing import List, Optional

from vaultsync.common.decrypter import Decrypter
from vaultsync.common.errors import RecordError
from vaultsync.common.models import SourceRecord

logger = logging.getLogger(__name__)


def list_record_files(input_dir: Path) -> List[Path]:
    """Record files sit directly in the input directory; sub-directories hold attachments."""
    return sorted(
        p for p in input_dir.iterdir()
        if p.is_file() and not p.name.startswith(".")
    )


def load_record(path: Path, decrypter: Decrypter) -> SourceRecord:
    raw = decrypter.decrypt(path)
    try:
        data = json.loads(raw.decode("utf-8"))
        return SourceRecord.from_json(data)
    except (UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
        raise RecordError(f"'{path.name}' is not a readable LastPass record: {e}")


def attachment_dir(input_dir: Path, record: SourceRecord) -> Optional[Path]:
    candidate = input_dir / record.id
    if candidate.is_dir():
        return candidate
    return None
