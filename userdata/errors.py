# userdata/errors.py


class UserDataError(Exception):
    """Base class for every recoverable failure in the user-data core."""


class AcquisitionFailure(UserDataError):
    """The persisted mirror exists but cannot be turned into a record."""


class StorageFailure(UserDataError):
    """The underlying session store raised on read / write / erase."""


class IncompleteRecord(UserDataError):
    """
    A record is present but has neither a name nor a full name.
    Not an error for the page: propagation is simply skipped.
    """
