"""
Exception hierarchy for locha.

Structural problems with a payload abort loading (MalformedPayloadError),
per-link resolution failures are collected and reported (BrokenLinkError),
and lookups of ids absent from the loaded dataset raise
UnknownFeatureError.
"""

from typing import Optional, Sequence


class LoChaError(Exception):
    """Base class for all locha errors."""


class MalformedPayloadError(LoChaError):
    """The API payload violates the expected structure."""

    def __init__(self, message: str, link_index: Optional[int] = None):
        self.link_index = link_index
        if link_index is not None:
            message = f"link #{link_index}: {message}"
        super().__init__(message)


class BrokenLinkError(LoChaError):
    """A link references features that are not part of the dataset."""

    def __init__(self, link_index: int, missing_ids: Sequence[int] = ()):
        self.link_index = link_index
        self.missing_ids = tuple(missing_ids)
        if self.missing_ids:
            ids = ", ".join(str(i) for i in self.missing_ids)
            message = f"link #{link_index} references unknown feature(s): {ids}"
        else:
            message = f"link #{link_index} has neither 'before' nor 'after'"
        super().__init__(message)


class UnknownFeatureError(LoChaError):
    """A feature id is not present in the loaded dataset."""

    def __init__(self, feature_id: object):
        self.feature_id = feature_id
        super().__init__(f"Feature not found: {feature_id}")


class ConfigError(LoChaError):
    """Invalid configuration file or environment override."""


class InvalidQueryError(LoChaError):
    """History query parameters are invalid."""


class FetchError(LoChaError):
    """The history API request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
