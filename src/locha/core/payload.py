"""
Payload validation and normalization.

Turns the raw JSON mapping returned by the logical-history API into
typed `Payload` records, rejecting structural violations up front.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Set, Union

from pydantic import ValidationError

from .exceptions import MalformedPayloadError
from .types import Payload

logger = logging.getLogger(__name__)


def parse_payload(data: Union[Payload, Mapping[str, Any]], strict: bool = True) -> Payload:
    """
    Validate and normalize an API response.

    Args:
        data: Raw response mapping (or an already parsed Payload).
        strict: When True, a link pointing at a feature id absent from
            the response is rejected. When False, such links are kept and
            reported later by the grouping engine as broken links.

    Returns:
        The normalized Payload.

    Raises:
        MalformedPayloadError: On schema violations, duplicate feature
            ids, links with neither endpoint, or (strict) dangling links.
    """
    if isinstance(data, Payload):
        payload = data
    else:
        if not isinstance(data, Mapping):
            raise MalformedPayloadError(f"expected a JSON object, got {type(data).__name__}")
        try:
            payload = Payload.model_validate(_normalize_metadata(data))
        except ValidationError as e:
            raise MalformedPayloadError(f"invalid payload: {e}") from e

    known_ids: Set[int] = set()
    for feature in payload.features:
        if feature.id in known_ids:
            raise MalformedPayloadError(f"duplicate feature id {feature.id}")
        known_ids.add(feature.id)

    for index, link in enumerate(payload.links):
        if link.is_empty:
            raise MalformedPayloadError("link has neither 'before' nor 'after'", link_index=index)

        missing = [i for i in link.endpoints() if i not in known_ids]
        if missing and strict:
            ids = ", ".join(str(i) for i in missing)
            raise MalformedPayloadError(f"dangling reference to feature(s) {ids}", link_index=index)

    logger.debug(
        "Parsed payload with %d features and %d links",
        len(payload.features),
        len(payload.links),
    )
    return payload


def load_payload(path: Union[str, Path], strict: bool = True) -> Payload:
    """Read and parse a payload saved as a JSON file."""
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"{path} is not valid JSON: {e}") from e
    return parse_payload(data, strict=strict)


def _normalize_metadata(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """Treat a missing or null `metadata` / `metadata.links` as empty."""
    metadata = data.get("metadata")
    if metadata is None:
        return {**data, "metadata": {}}
    if isinstance(metadata, Mapping):
        cleaned = {k: v for k, v in metadata.items() if v is not None}
        return {**data, "metadata": cleaned}
    return data
