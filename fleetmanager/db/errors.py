"""Project-native typed exceptions for database write conflicts."""

from __future__ import annotations


class RecordOwnershipConflictError(ValueError):
    """Write rejected because the record identifier belongs to another owner.

    Attributes:
        record_kind: Table-level record name, such as `car` or `expense`.
        record_id: Conflicting record identifier.
    """

    def __init__(self, record_kind: str, record_id: str):
        super().__init__(f"{record_kind} id={record_id!r} belongs to another owner")
        self.record_kind = record_kind
        self.record_id = record_id


__all__ = ["RecordOwnershipConflictError"]
