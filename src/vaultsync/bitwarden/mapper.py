# src/vaultsync/bitwarden/mapper.py

import calendar
import logging
import re
from typing import Dict, Optional, Tuple

from vaultsync.common.models import (
    SourceRecord, NoteFieldMap, MappedItem, CustomField,
    LoginData, CardData, IdentityData, SecureNoteData,
    LOGIN, SECURE_NOTE, CARD, IDENTITY, FIELD_TEXT, FIELD_HIDDEN,
)
from vaultsync.lastpass.classifier import SECURE_NOTE_URL
from vaultsync.lastpass.notes import NOTES_FIELD

logger = logging.getLogger(__name__)

# Hidden custom field carrying the LastPass id, used to find migrated items
CROSS_REFERENCE_FIELD = "lastpass_id"

IDENTITY_TYPES = {"Address", "Driver's License"}
CARD_TYPES = {"Credit Card"}
LOGIN_TYPES = {"Email Account", "Password"}
SECURE_NOTE_TYPES = {
    "Bank Account", "Insurance", "Membership", "Passport",
    "Social Security", "Health Insurance", "Secure Note",
}

HIDDEN_FIELD_NAMES = {"Password", "Pin", "PIN", "Security Code", "Account Number"}

# Bare schemes LastPass leaves behind when a site has no real URL
_PLACEHOLDER_URL = re.compile(r"^\s*(?:https?://|https://xn--)?\s*$")

_MONTHS: Dict[str, int] = {}
for _i in range(1, 13):
    _MONTHS[calendar.month_name[_i].lower()] = _i
    _MONTHS[calendar.month_abbr[_i].lower()] = _i


def is_placeholder_url(url: Optional[str]) -> bool:
    return url is None or bool(_PLACEHOLDER_URL.match(url))


def parse_month(token: str) -> Optional[str]:
    token = token.strip().lower()
    if token.isdecimal():
        month = int(token)
    else:
        month = _MONTHS.get(token)
    if not month or not 1 <= month <= 12:
        return None
    return f"{month:02d}"


def parse_expiration(text: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    `MonthName,Day,Year` or `MonthName,Year` -> ("MM", "YYYY").
    Returns (None, None) when either part is missing or unreadable.
    """
    if not text:
        return None, None
    parts = [p.strip() for p in text.split(",")]
    if len(parts) < 2:
        return None, None
    month = parse_month(parts[0])
    year = parts[-1]
    if month is None or not year:
        return None, None
    return month, year


def _map_card(fields: Dict[str, str]) -> CardData:
    card = CardData(
        cardholderName=fields.pop("Name on Card", None),
        number=fields.pop("Number", None),
        code=fields.pop("Security Code", None),
    )
    brand = fields.pop("Type", None)
    card.brand = brand.lower() if brand else None

    expiration = fields.get("Expiration Date")
    month, year = parse_expiration(expiration)
    if month is not None:
        card.expMonth, card.expYear = month, year
        fields.pop("Expiration Date")
    elif expiration:
        # left in place as a custom field
        logger.debug("Unreadable expiration date '%s'.", expiration)
    return card


def _map_login(record: SourceRecord, item_type: str, fields: Dict[str, str]) -> LoginData:
    username, password = record.username, record.password
    if item_type == "Email Account":
        note_user = fields.pop("Username", None)
        note_pass = fields.pop("Password", None)
        username = username or note_user or ""
        password = password or note_pass or ""

    login = LoginData(username=username or None, password=password or None)
    if record.url != SECURE_NOTE_URL and not is_placeholder_url(record.url):
        login.uris.append(record.url)
    return login


def _compose_notes(fields: Dict[str, str], remaining: str) -> Optional[str]:
    parts = [fields.pop(NOTES_FIELD, ""), remaining]
    notes = "\n".join(p for p in parts if p)
    return notes or None


def map_record(record: SourceRecord, item_type: str, note_fields: NoteFieldMap) -> MappedItem:
    """Builds the type-specific payload and the leftover custom fields for one record."""
    fields = dict(note_fields.fields)

    if item_type in IDENTITY_TYPES:
        type_code, payload = IDENTITY, IdentityData()
        logger.debug("Identity sub-fields are not mapped; '%s' keeps them as custom fields.", record.name)
    elif item_type in CARD_TYPES:
        type_code, payload = CARD, _map_card(fields)
    elif item_type in LOGIN_TYPES:
        type_code, payload = LOGIN, _map_login(record, item_type, fields)
    else:
        if item_type not in SECURE_NOTE_TYPES:
            logger.warning("Unknown item type '%s' for '%s'; storing it as a secure note.", item_type, record.name)
        type_code, payload = SECURE_NOTE, SecureNoteData()

    mapped = MappedItem(
        source_id=record.id,
        item_type=item_type,
        type_code=type_code,
        payload=payload,
        name=record.name,
        notes=_compose_notes(fields, note_fields.remaining),
        folder_name=record.group,
    )

    for name, value in fields.items():
        field_type = FIELD_HIDDEN if name in HIDDEN_FIELD_NAMES else FIELD_TEXT
        mapped.fields.append(CustomField(name, value, field_type))
    mapped.fields.append(CustomField(CROSS_REFERENCE_FIELD, record.id, FIELD_HIDDEN))
    return mapped
