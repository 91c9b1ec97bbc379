"""HTTP access to the logical-history API."""

from .client import HistoryApiClient, HistoryQuery, validate_date_range

__all__ = ["HistoryApiClient", "HistoryQuery", "validate_date_range"]
