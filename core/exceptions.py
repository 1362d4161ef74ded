class ProtectedRecordError(Exception):
    """A delete or state change was blocked because dependent rows exist."""


class SelfActionError(Exception):
    """A user tried to delete or deactivate their own account."""
