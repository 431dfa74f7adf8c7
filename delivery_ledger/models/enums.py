"""
Shared enumerations for models and schemas.
"""

import enum


class HistoryAction(str, enum.Enum):
    """Kind of change recorded in the history log."""
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


class PeriodGranularity(str, enum.Enum):
    """Bucket size for period balance queries."""
    YEAR = "year"
    MONTH = "month"
