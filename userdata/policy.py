# userdata/policy.py

from enum import Enum


class QueryOverridePolicy(str, Enum):
    """
    What happens when a request carries identity query params
    and the session already holds a record.
    """
    REPLACE = "replace"              # query builds a fresh record, mirror overwritten
    MERGE = "merge"                  # query params merged over the stored record
    PREFER_STORED = "prefer_stored"  # stored record wins, query only fills an empty session

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls((value or cls.REPLACE.value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown query override policy {value!r}; "
                f"expected one of {[p.value for p in cls]}"
            ) from None
