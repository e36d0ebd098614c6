import logging
from collections.abc import Mapping

from userdata.acquisition import load_record
from userdata.errors import StorageFailure
from userdata.policy import QueryOverridePolicy
from userdata.propagation import PropagationEngine
from userdata.record import UserRecord

logger = logging.getLogger(__name__)


class UserDataContext:
    """
    Page-scoped user data.
    Built once per page, then passed around by reference.

    The in-memory record is the source of truth after load();
    the session mirror is only written, never read again.
    """

    def __init__(self, store, record=None, engine=None):
        self.store = store
        self.record = record
        self.engine = engine or PropagationEngine()

        # Page currently being rendered, if any
        self.page = None

    @classmethod
    def load(cls, query, store, policy=QueryOverridePolicy.REPLACE, engine=None):
        return cls(store, record=load_record(query, store, policy), engine=engine)

    # -------------------------------------------------
    # Read accessors (None when absent, never raise)
    # -------------------------------------------------

    def get_user_data(self):
        return self.record.to_dict() if self.record else None

    def get_user_name(self):
        return self.record.short_name if self.record else None

    def get_user_full_name(self):
        return self.record.display_name if self.record else None

    def get_user_cpf(self):
        return (self.record.tax_id or None) if self.record else None

    def get_user_birth_date(self):
        return (self.record.birth_date or None) if self.record else None

    def get_user_mother_name(self):
        return (self.record.mother_name or None) if self.record else None

    def get_user_marital_status(self):
        return (self.record.marital_status or None) if self.record else None

    # -------------------------------------------------
    # Mutators
    # -------------------------------------------------

    def save(self, partial):
        """
        Shallow-merge `partial` into the record (creating it if needed),
        mirror the result and re-run propagation on the attached page.
        """
        if not isinstance(partial, Mapping):
            logger.warning("Ignoring save with non-mapping payload: %r", partial)
            return self.record

        base = self.record or UserRecord()
        self.record = base.merged(partial)
        try:
            self.store.write_record(self.record)
        except StorageFailure:
            logger.exception("Could not save user data to session")
        else:
            logger.info("User data saved: %s", self.record.to_dict())
        self.propagate()
        return self.record

    def clear(self):
        """Drop the record and its mirror. The page is not re-rendered."""
        self.record = None
        try:
            self.store.erase()
        except StorageFailure:
            logger.exception("Could not erase user data from session")
        logger.info("User data cleared")

    # -------------------------------------------------
    # Page wiring
    # -------------------------------------------------

    def attach(self, page):
        self.page = page
        self.engine.schedule(page, lambda: self.record)

    def propagate(self):
        if self.page is None or not self.page.ready:
            return
        self.engine.apply(self.page, self.record)
