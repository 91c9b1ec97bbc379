"""
Logical-history API client.

Builds queries for the `overpass_logical_history` endpoint and downloads
complete responses. The client hands back fully resolved JSON; parsing
and grouping happen in `locha.core`.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib import error, parse, request

from pydantic import BaseModel, field_validator

from ..config import LoChaConfig
from ..core.exceptions import FetchError, InvalidQueryError

logger = logging.getLogger(__name__)

USER_AGENT = "locha"


def validate_date_range(date_start: datetime, date_end: datetime, max_days: int) -> None:
    """
    Check a query period.

    Raises:
        InvalidQueryError: If the end precedes the start or the span is
            longer than `max_days`.
    """
    if date_end < date_start:
        raise InvalidQueryError("date_end must not be before date_start")
    if date_end - date_start > timedelta(days=max_days):
        raise InvalidQueryError(f"The date range must not exceed {max_days} days.")


class HistoryQuery(BaseModel):
    """
    Parameters of one history request.

    `bbox` is ``min_lon,min_lat,max_lon,max_lat``.
    """
    date_start: Optional[datetime] = None
    date_end: Optional[datetime] = None
    bbox: Optional[str] = None

    @field_validator("bbox")
    @classmethod
    def _check_bbox(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        parts = [p.strip() for p in value.split(",")]
        if len(parts) != 4:
            raise ValueError("bbox must have four comma-separated numbers")
        try:
            min_lon, min_lat, max_lon, max_lat = (float(p) for p in parts)
        except ValueError:
            raise ValueError("bbox must have four comma-separated numbers") from None
        if min_lon > max_lon or min_lat > max_lat:
            raise ValueError("bbox minimums must not exceed maximums")
        return ",".join(parts)

    def is_empty(self) -> bool:
        return self.date_start is None and self.date_end is None and self.bbox is None

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.date_start is not None:
            params["date_start"] = _isoformat(self.date_start)
        if self.date_end is not None:
            params["date_end"] = _isoformat(self.date_end)
        if self.bbox is not None:
            params["bbox"] = self.bbox
        return params


def _isoformat(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class HistoryApiClient:
    """
    Fetches logical-history responses over HTTP.

    Requests are made once; failures surface as FetchError.
    """

    def __init__(self, config: Optional[LoChaConfig] = None):
        self.config = config or LoChaConfig()

    def build_url(self, query: Optional[HistoryQuery] = None) -> str:
        """Full endpoint URL with the query string, if any."""
        url = self.config.api_url
        if query is None or query.is_empty():
            return url
        return f"{url}?{parse.urlencode(query.to_params())}"

    def check_query(self, query: HistoryQuery) -> None:
        """Validate the query period against the configured limit."""
        if query.date_start is not None and query.date_end is not None:
            validate_date_range(query.date_start, query.date_end, self.config.max_date_range_days)

    def fetch(self, query: Optional[HistoryQuery] = None) -> Dict[str, Any]:
        """
        Download one response.

        Raises:
            InvalidQueryError: If the query period is invalid.
            FetchError: On HTTP errors, network errors or a non-JSON body.
        """
        if query is not None:
            self.check_query(query)

        url = self.build_url(query)
        logger.info("Fetching %s", url)

        req = request.Request(
            url,
            method="GET",
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        )
        try:
            with request.urlopen(req, timeout=self.config.timeout) as response:
                body = response.read()
        except error.HTTPError as e:
            raise FetchError(f"API request failed with HTTP {e.code}", status_code=e.code) from e
        except (error.URLError, TimeoutError) as e:
            raise FetchError(f"API request failed: {e}") from e

        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FetchError(f"API returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise FetchError("API returned an unexpected document")
        return data
