# src/tests/test_mapper.py

import pytest

from vaultsync.bitwarden.mapper import (
    map_record, is_placeholder_url, parse_expiration, CROSS_REFERENCE_FIELD,
)
from vaultsync.common.models import (
    SourceRecord, CardData, LoginData, IdentityData, SecureNoteData,
    LOGIN, SECURE_NOTE, CARD, IDENTITY, FIELD_HIDDEN,
)
from vaultsync.lastpass.classifier import classify
from vaultsync.lastpass.notes import extract_note_fields


def _map(record):
    return map_record(record, classify(record), extract_note_fields(record.note))


@pytest.mark.parametrize("url", ["http://", "https://", "https://xn--", "  https://  ", "http:// ", ""])
def test_placeholder_urls_rejected(url):
    assert is_placeholder_url(url)


@pytest.mark.parametrize("url", ["https://example.com", "http://sn", "ftp://files", "https://xn--bcher-kva.example"])
def test_real_urls_kept(url):
    assert not is_placeholder_url(url)


def test_parse_expiration():
    assert parse_expiration("March,2027") == ("03", "2027")
    assert parse_expiration("October,6,2021") == ("10", "2021")
    assert parse_expiration("oct,2030") == ("10", "2030")
    assert parse_expiration(",,") == (None, None)
    assert parse_expiration("Smarch,2027") == (None, None)
    assert parse_expiration("2027") == (None, None)
    assert parse_expiration(None) == (None, None)
    assert parse_expiration("\u00b2,2027") == (None, None)


def test_password_record_maps_to_login():
    record = SourceRecord(id="7", name="Example", url="https://example.com",
                          username="jane", password="s3cret", note="just a note")
    mapped = _map(record)

    assert mapped.type_code == LOGIN
    assert isinstance(mapped.payload, LoginData)
    assert mapped.payload.username == "jane"
    assert mapped.payload.password == "s3cret"
    assert mapped.payload.uris == ["https://example.com"]
    assert mapped.notes == "just a note"


def test_placeholder_url_is_omitted_from_login():
    mapped = _map(SourceRecord(id="7", url="https://", username="jane"))
    assert mapped.payload.uris == []


def test_credit_card_mapping_consumes_card_fields():
    note = (
        "NoteType:Credit Card\nLanguage:en-US\nName on Card:Jane Doe\nType:Visa\n"
        "Number:4111\nSecurity Code:123\nExpiration Date:March,2027\n"
        "Start Date:January,2020\nNotes:spare"
    )
    mapped = _map(SourceRecord(id="9", name="Visa", url="http://sn", note=note))

    assert mapped.type_code == CARD
    assert mapped.payload == CardData(
        cardholderName="Jane Doe", brand="visa", number="4111",
        expMonth="03", expYear="2027", code="123",
    )
    names = [f.name for f in mapped.fields]
    assert names == ["Start Date", CROSS_REFERENCE_FIELD]
    assert mapped.notes == "spare"


def test_credit_card_with_missing_fields_is_null():
    mapped = _map(SourceRecord(id="9", url="http://sn", note="NoteType:Credit Card\nNumber:4111"))
    assert mapped.payload.cardholderName is None
    assert mapped.payload.brand is None
    assert mapped.payload.expMonth is None
    assert mapped.payload.expYear is None


def test_unreadable_expiration_stays_custom_field():
    mapped = _map(SourceRecord(id="9", url="http://sn",
                               note="NoteType:Credit Card\nExpiration Date:someday"))
    assert mapped.payload.expMonth is None
    assert ("Expiration Date", "someday") in [(f.name, f.value) for f in mapped.fields]


@pytest.mark.parametrize("note_type", ["Address", "Driver's License"])
def test_identity_types_only_get_type_code(note_type):
    mapped = _map(SourceRecord(id="3", url="http://sn",
                               note=f"NoteType:{note_type}\nFirst Name:Jane"))
    assert mapped.type_code == IDENTITY
    assert isinstance(mapped.payload, IdentityData)
    assert ("First Name", "Jane") in [(f.name, f.value) for f in mapped.fields]


@pytest.mark.parametrize("note_type", [
    "Bank Account", "Insurance", "Membership", "Passport", "Social Security",
    "Health Insurance", "Secure Note", "Something New",
])
def test_other_types_are_secure_notes(note_type):
    mapped = _map(SourceRecord(id="4", url="http://sn", note=f"NoteType:{note_type}\nPin:1234"))
    assert mapped.type_code == SECURE_NOTE
    assert isinstance(mapped.payload, SecureNoteData)
    pin = next(f for f in mapped.fields if f.name == "Pin")
    assert pin.type == FIELD_HIDDEN


def test_email_account_uses_note_credentials_and_skips_sentinel_url():
    note = "NoteType:Email Account\nUsername:jane@example.com\nPassword:pw\nServer:imap.example.com"
    mapped = _map(SourceRecord(id="5", url="http://sn", note=note))

    assert mapped.type_code == LOGIN
    assert mapped.payload.username == "jane@example.com"
    assert mapped.payload.password == "pw"
    assert mapped.payload.uris == []
    assert [f.name for f in mapped.fields] == ["Server", CROSS_REFERENCE_FIELD]


def test_cross_reference_field_is_last_and_hidden():
    mapped = _map(SourceRecord(id="abc", url="http://sn", note="NoteType:Membership\nOrganization:ATA"))
    marker = mapped.fields[-1]
    assert (marker.name, marker.value, marker.type) == (CROSS_REFERENCE_FIELD, "abc", FIELD_HIDDEN)
