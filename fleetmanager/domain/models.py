"""Operational contracts shared by health-check surfaces."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthStatus:
    """Health result for the fleet database.

    Attributes:
        status: `ok` when reachable and migrated, `unmigrated` when the schema is missing.
        detail: Diagnostic message including the applied schema revision.
    """

    status: str
    detail: str


__all__ = ["HealthStatus"]
