# src/vaultsync/lastpass/notes.py

"""
Parsing of LastPass structured notes.

LastPass stores the fields of its note templates (credit cards, addresses,
memberships, ...) inside the free-text note as `Name:value` lines, e.g.

    NoteType:Credit Card
    Language:en-US
    Name on Card:Jane Doe
    Number:4111111111111111
    Expiration Date:March,2027
    Notes:spare card

Every name in NOTE_FIELDS is pulled out of the text once, in order; what is
left over is kept as the item's free-text notes.
"""

from typing import List, Tuple

from vaultsync.common.models import NoteFieldMap

NOTE_TYPE_FIELD = "NoteType"
LANGUAGE_FIELD = "Language"
NOTES_FIELD = "Notes"

# Closed vocabulary, in extraction order. No name is a prefix of another
# name followed by ':', so the order only decides the custom field order.
NOTE_FIELDS: Tuple[str, ...] = (
    NOTE_TYPE_FIELD,
    LANGUAGE_FIELD,
    # Credit Card
    "Name on Card",
    "Type",
    "Number",
    "Security Code",
    "Start Date",
    "Expiration Date",
    # Bank Account
    "Bank Name",
    "Account Type",
    "Routing Number",
    "Account Number",
    "SWIFT Code",
    "IBAN Number",
    "Pin",
    "Branch Address",
    "Branch Phone",
    # Address
    "Title",
    "First Name",
    "Middle Name",
    "Last Name",
    "Gender",
    "Birthday",
    "Company",
    "Address 1",
    "Address 2",
    "Address 3",
    "City / Town",
    "County",
    "State",
    "Zip / Postal Code",
    "Country",
    "Timezone",
    "Email Address",
    "Phone",
    "Evening Phone",
    "Mobile Phone",
    "Fax",
    # Driver's License
    "Name",
    "Address",
    "City",
    "Zip",
    "Date of Birth",
    "Sex",
    "Height",
    "Expiration",
    # Email Account
    "Username",
    "Password",
    "Server",
    "Port",
    "SMTP Server",
    "SMTP Port",
    # Insurance / Health Insurance
    "Company Phone",
    "Policy Type",
    "Policy Number",
    "Agent Name",
    "Agent Phone",
    "URL",
    "Member Name",
    "Member ID",
    "Group ID",
    "Physician Name",
    "Physician Phone",
    "Physician Address",
    "Co-pay",
    # Membership
    "Organization",
    "Membership Number",
    "Website",
    "Telephone",
    # Passport
    "Issuing Authority",
    "Nationality",
    "Issued Date",
    # Social Security
    "Social Security Number",
    NOTES_FIELD,
)


def _matches(line: str, name: str) -> bool:
    return line.startswith(f"{name}:")


def _value(line: str) -> str:
    # Everything after the first colon, so URLs and times survive intact
    return line.partition(":")[2].strip()


def get_note_field(notes: str, name: str) -> str:
    """Value of the first `name:` line, trimmed; empty when absent."""
    for line in (notes or "").splitlines():
        if _matches(line, name):
            return _value(line)
    return ""


def remove_note_field(notes: str, name: str) -> str:
    """Drops every `name:` line from the notes."""
    kept = [line for line in (notes or "").splitlines() if not _matches(line, name)]
    return "\n".join(kept)


def take_note_field(lines: List[str], name: str) -> Tuple[str, List[str]]:
    """
    Single pass over `lines`: returns the first value for `name` and the
    lines with all `name:` lines removed.
    """
    value = None
    kept = []
    for line in lines:
        if _matches(line, name):
            if value is None:
                value = _value(line)
            continue
        kept.append(line)
    return value or "", kept


def extract_note_fields(notes: str, keep_language: bool = False) -> NoteFieldMap:
    """Pulls the whole vocabulary out of a LastPass note."""
    lines = (notes or "").splitlines()
    result = NoteFieldMap()

    for name in NOTE_FIELDS:
        value, lines = take_note_field(lines, name)
        if name == NOTE_TYPE_FIELD:
            result.note_type = value
            continue
        if name == LANGUAGE_FIELD and not keep_language:
            continue
        # LastPass writes unset dates as ",,"
        if value.strip(" ,"):
            result.fields[name] = value

    result.remaining = "\n".join(lines).strip()
    return result
