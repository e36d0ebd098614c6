# userdata/record.py

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from userdata.formatting import first_token


# -------------------------------------------------
# Wire keys (query params + serialized mirror)
# -------------------------------------------------

WIRE_KEYS = {
    "name": "nome",
    "tax_id": "cpf",
    "birth_date": "nascimento",
    "mother_name": "nomeMae",
    "marital_status": "estadoCivil",
    "full_name": "nomeCompleto",
}

FIELD_BY_KEY = {wire: attr for attr, wire in WIRE_KEYS.items()}
FIELD_BY_KEY.update({attr: attr for attr in WIRE_KEYS})


@dataclass
class UserRecord:
    """
    Identity-like display fields captured for one browsing session.

    Every field is optional. Unrecognized keys handed to a save are kept
    in `extra` so that a later merge never drops them.
    """
    name: Optional[str] = None
    tax_id: Optional[str] = None
    birth_date: Optional[str] = None
    mother_name: Optional[str] = None
    marital_status: Optional[str] = None
    full_name: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # display fields are text; numbers etc. from JSON payloads are stringified
        for attr in WIRE_KEYS:
            value = getattr(self, attr)
            if value is not None and not isinstance(value, str):
                setattr(self, attr, str(value))

    @classmethod
    def from_mapping(cls, data) -> "UserRecord":
        known = {}
        extra = {}
        for key, value in data.items():
            attr = FIELD_BY_KEY.get(key)
            if attr:
                known[attr] = value
            else:
                extra[key] = value
        return cls(**known, extra=extra)

    def to_dict(self) -> dict:
        out = {wire: getattr(self, attr) for attr, wire in WIRE_KEYS.items()}
        out.update(self.extra)
        return out

    def merged(self, partial) -> "UserRecord":
        """
        Shallow merge: keys present in `partial` win (even when None),
        everything else is kept from self.
        """
        current = self.to_dict()
        for key, value in partial.items():
            current[WIRE_KEYS.get(key, key)] = value
        return UserRecord.from_mapping(current)

    # -------------------------------------------------
    # Derived display values
    # -------------------------------------------------

    @property
    def short_name(self) -> Optional[str]:
        return first_token(self.name)

    @property
    def display_name(self) -> Optional[str]:
        return self.full_name or self.name or None

    @property
    def is_complete(self) -> bool:
        return bool(self.display_name)

