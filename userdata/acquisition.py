# userdata/acquisition.py

import json
import logging

from userdata.errors import AcquisitionFailure, StorageFailure
from userdata.policy import QueryOverridePolicy
from userdata.record import WIRE_KEYS, UserRecord

logger = logging.getLogger(__name__)

# Presence of either key means "this request carries identity data"
TRIGGER_KEYS = ("nome", "cpf")


def has_identity_params(query) -> bool:
    return any(key in query for key in TRIGGER_KEYS)


def record_from_query(query) -> UserRecord:
    """
    Fresh record from every recognized query key.
    Missing keys become None; full name defaults to the name param.
    """
    values = {attr: query.get(wire) for attr, wire in WIRE_KEYS.items()}
    values["full_name"] = values["full_name"] or values["name"]
    return UserRecord(**values)


def query_fields(query) -> dict:
    """
    Only the recognized params actually present in the query.
    A name param without its own full-name param also sets the full name.
    """
    values = {wire: query.get(wire) for wire in WIRE_KEYS.values() if wire in query}
    if not values.get("nomeCompleto") and values.get("nome"):
        values["nomeCompleto"] = values["nome"]
    return values


def read_stored_record(store) -> UserRecord | None:
    """
    Deserialize the mirror.

    Raises AcquisitionFailure for malformed content and StorageFailure
    when the backing store itself fails; returns None when nothing is stored.
    """
    raw = store.read()
    if raw is None or raw == "":
        return None
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise AcquisitionFailure(f"stored record is not valid JSON: {exc}") from exc
    if data is None:
        return None
    if not isinstance(data, dict):
        raise AcquisitionFailure(
            f"stored record must be an object, got {type(data).__name__}"
        )
    return UserRecord.from_mapping(data)


def load_record(query, store, policy=QueryOverridePolicy.REPLACE) -> UserRecord | None:
    """
    Decide where this page's record comes from. Runs once per page.

    Priority with the default REPLACE policy (first match wins):
    1. identity params in the query -> fresh record, mirror overwritten
    2. readable mirror -> its record, mirror untouched
    3. nothing -> None

    Never raises: failures are logged and degrade to "no data".
    """
    policy = QueryOverridePolicy.parse(policy)

    try:
        if has_identity_params(query):
            return _load_from_query(query, store, policy)

        record = read_stored_record(store)
        if record is None:
            logger.info("No user data in query string or session")
        else:
            logger.info("User data loaded from session")
        return record

    except AcquisitionFailure:
        logger.exception("Discarding malformed user data in session")
        return None
    except StorageFailure:
        logger.exception("Session store unavailable while loading user data")
        return None


def _load_from_query(query, store, policy):
    if policy is QueryOverridePolicy.REPLACE:
        record = record_from_query(query)
        source = "query string"
    else:
        stored = _read_stored_quietly(store)
        if stored is not None and policy is QueryOverridePolicy.PREFER_STORED:
            logger.info("User data loaded from session (query ignored by policy)")
            return stored
        if stored is not None and policy is QueryOverridePolicy.MERGE:
            record = stored.merged(query_fields(query))
            source = "query string merged over session"
        else:
            record = record_from_query(query)
            source = "query string"

    try:
        store.write_record(record)
    except StorageFailure:
        logger.exception("Could not mirror user data to session")
    logger.info("User data loaded from %s", source)
    return record


def _read_stored_quietly(store):
    try:
        return read_stored_record(store)
    except AcquisitionFailure:
        logger.exception("Ignoring malformed user data in session")
        return None
