# src/vaultsync/lastpass/classifier.py

from vaultsync.common.models import SourceRecord
from .notes import get_note_field, NOTE_TYPE_FIELD

# LastPass stores every secure note with this URL
SECURE_NOTE_URL = "http://sn"

PASSWORD = "Password"
SECURE_NOTE = "Secure Note"


def classify(record: SourceRecord) -> str:
    """
    Returns the LastPass item type of a record.

    Only records carrying the secure-note URL have a `NoteType`; everything
    else is a website login.
    """
    if record.url == SECURE_NOTE_URL:
        return get_note_field(record.note, NOTE_TYPE_FIELD) or SECURE_NOTE
    return PASSWORD
