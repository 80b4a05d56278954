# src/vaultsync/common/models.py
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, List, Any, Union

# Bitwarden item type codes
LOGIN = 1
SECURE_NOTE = 2
CARD = 3
IDENTITY = 4

# Bitwarden custom field types
FIELD_TEXT = 0
FIELD_HIDDEN = 1


@dataclass(frozen=True)
class SourceRecord:
    # 一条 LastPass 导出记录 (lpass show --json)
    id: str
    name: str = ""
    group: str = ""          # 文件夹名称
    username: str = ""
    password: str = ""
    url: str = ""
    note: str = ""
    fullname: str = ""
    last_modified_gmt: str = ""

    @classmethod
    def from_json(cls, data: Union[List, Dict[str, Any]]) -> "SourceRecord":
        """Builds a record from the `lpass show --json` shape (a one-element list)."""
        if isinstance(data, list):
            if not data:
                raise ValueError("Record file holds an empty list.")
            data = data[0]
        if not isinstance(data, dict):
            raise ValueError("Record is not a JSON object.")
        if not data.get("id"):
            raise ValueError("Record has no 'id'.")

        known = cls.__dataclass_fields__.keys()
        values = {k: ("" if v is None else str(v)) for k, v in data.items() if k in known}
        return cls(**values)


@dataclass
class NoteFieldMap:
    fields: Dict[str, str] = field(default_factory=dict)
    remaining: str = ""
    note_type: str = ""


@dataclass
class LoginData:
    username: Optional[str] = None
    password: Optional[str] = None
    uris: List[str] = field(default_factory=list)

    def to_dict(self):
        return {"username": self.username, "password": self.password}


@dataclass
class CardData:
    cardholderName: Optional[str] = None
    brand: Optional[str] = None
    number: Optional[str] = None
    expMonth: Optional[str] = None
    expYear: Optional[str] = None
    code: Optional[str] = None

    def to_dict(self):
        return asdict(self)


@dataclass
class IdentityData:
    # 目前只映射类型码，身份子字段尚未填充
    def to_dict(self):
        return {}


@dataclass
class SecureNoteData:
    type: int = 0

    def to_dict(self):
        return {"type": self.type}


Payload = Union[LoginData, CardData, IdentityData, SecureNoteData]

# type code -> item key holding its payload
PAYLOAD_KEYS = {
    LOGIN: "login",
    SECURE_NOTE: "secureNote",
    CARD: "card",
    IDENTITY: "identity",
}


@dataclass
class CustomField:
    name: str
    value: str
    type: int = FIELD_TEXT


@dataclass
class MappedItem:
    source_id: str
    item_type: str
    type_code: int
    payload: Payload
    name: str = ""
    notes: Optional[str] = None
    folder_name: str = ""
    fields: List[CustomField] = field(default_factory=list)

    @property
    def payload_key(self) -> str:
        return PAYLOAD_KEYS[self.type_code]
