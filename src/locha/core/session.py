"""
LoCha session.

Owns the derived state of the currently loaded dataset: payload, link
graph, change groups, statuses and the selection machine. Loading new
data builds a complete snapshot first and publishes it with a single
assignment, so readers see either the old dataset or the new one.
"""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from .exceptions import BrokenLinkError, UnknownFeatureError
from .grouping import GroupingResult, build_groups
from .payload import parse_payload
from .selection import Selection, SelectionMachine, SelectionState
from .types import ChangeGroup, Feature, Link, Payload, Status

if TYPE_CHECKING:
    from ..config import LoChaConfig

logger = logging.getLogger(__name__)


class LoadStatus(StrEnum):
    """Outcome of a successful `set_data` call."""
    LOADED = "loaded"
    EMPTY = "empty"


@dataclass(frozen=True)
class _Snapshot:
    payload: Payload
    result: GroupingResult
    features_by_id: Dict[int, Feature]
    selection: SelectionMachine


def _build_snapshot(payload: Payload) -> _Snapshot:
    result = build_groups(payload.features, payload.links)
    return _Snapshot(
        payload=payload,
        result=result,
        features_by_id={feature.id: feature for feature in payload.features},
        selection=SelectionMachine(result.graph, result.links, result.statuses),
    )


class LoChaSession:
    """
    One loaded logical-history dataset.

    If `set_data` fails on a malformed payload, the previously loaded
    dataset stays in place untouched.

    Example:
        session = LoChaSession()
        if session.set_data(response) is LoadStatus.EMPTY:
            ...  # nothing changed in this area / period
        for group in session.get_groups():
            ...
    """

    def __init__(self, config: Optional["LoChaConfig"] = None):
        from ..config import LoChaConfig

        self.config = config or LoChaConfig()
        self._snapshot = _build_snapshot(Payload())
        self._generation = 0

    # =========================================================================
    # Loading
    # =========================================================================

    def set_data(
        self,
        payload: Union[Payload, Mapping[str, Any]],
        strict: Optional[bool] = None,
    ) -> LoadStatus:
        """
        Replace the loaded dataset.

        Args:
            payload: Raw API response or parsed Payload.
            strict: Reject dangling link references instead of reporting
                them as broken links. Defaults to `config.strict_links`.

        Returns:
            LoadStatus.EMPTY when the payload has no features, otherwise
            LoadStatus.LOADED.

        Raises:
            MalformedPayloadError: The payload is structurally invalid.
        """
        if strict is None:
            strict = self.config.strict_links

        parsed = parse_payload(payload, strict=strict)
        snapshot = _build_snapshot(parsed)

        self._snapshot = snapshot
        self._generation += 1

        if not parsed.features:
            logger.info("Loaded an empty result")
            return LoadStatus.EMPTY

        logger.info(
            "Loaded %d features, %d links into %d change groups",
            len(parsed.features),
            len(parsed.links),
            len(snapshot.result.groups),
        )
        return LoadStatus.LOADED

    def reset(self) -> None:
        """Drop the loaded dataset."""
        self._snapshot = _build_snapshot(Payload())

    @property
    def is_loaded(self) -> bool:
        return self._generation > 0 and bool(self._snapshot.payload.features)

    @property
    def is_empty(self) -> bool:
        return not self._snapshot.payload.features

    @property
    def generation(self) -> int:
        """Number of successful `set_data` calls so far."""
        return self._generation

    # =========================================================================
    # Derived collections
    # =========================================================================

    @property
    def payload(self) -> Payload:
        return self._snapshot.payload

    @property
    def result(self) -> GroupingResult:
        return self._snapshot.result

    @property
    def feature_count(self) -> int:
        return len(self._snapshot.payload.features)

    @property
    def link_count(self) -> int:
        return len(self._snapshot.payload.links)

    @property
    def errors(self) -> List[BrokenLinkError]:
        return list(self._snapshot.result.errors)

    @property
    def conflicts(self) -> List[Feature]:
        return [self._snapshot.features_by_id[i] for i in self._snapshot.result.conflicts]

    def get_groups(self) -> List[ChangeGroup]:
        return list(self._snapshot.result.groups)

    def get_feature(self, feature_id: int) -> Feature:
        try:
            return self._snapshot.features_by_id[feature_id]
        except KeyError:
            raise UnknownFeatureError(feature_id) from None

    def get_status(self, feature: Union[Feature, int]) -> Status:
        feature_id = feature.id if isinstance(feature, Feature) else feature
        try:
            return self._snapshot.result.statuses[feature_id]
        except KeyError:
            raise UnknownFeatureError(feature_id) from None

    def get_group(self, feature: Union[Feature, int]) -> ChangeGroup:
        feature_id = feature.id if isinstance(feature, Feature) else feature
        group = self._snapshot.result.group_of(feature_id)
        if group is None:
            raise UnknownFeatureError(feature_id)
        return group

    def links_for(self, feature_id: int) -> List[Link]:
        return self._snapshot.selection.links_for(feature_id)

    @property
    def before_features(self) -> List[Feature]:
        """Features drawn on the "before" side: update sources, deletions, conflicts."""
        return self._features_where(lambda status: status.flags["is_before"] or status is Status.DELETED)

    @property
    def after_features(self) -> List[Feature]:
        """Features drawn on the "after" side: update targets, creations, conflicts."""
        return self._features_where(lambda status: status.flags["is_after"] or status is Status.CREATED)

    def _features_where(self, predicate) -> List[Feature]:
        statuses = self._snapshot.result.statuses
        return [f for f in self._snapshot.payload.features if predicate(statuses[f.id])]

    def to_feature_collection(self) -> Dict[str, Any]:
        """
        Export the dataset as GeoJSON, with each feature's properties
        extended by its status, legacy role flags and group index.
        """
        result = self._snapshot.result
        features = []
        for feature in self._snapshot.payload.features:
            status = result.statuses[feature.id]
            properties = feature.properties.model_dump(mode="json")
            properties.update(status.flags)
            properties["status"] = status.value
            properties["group"] = result.membership[feature.id]
            features.append({
                "type": "Feature",
                "id": feature.id,
                "geometry": feature.geometry,
                "properties": properties,
            })
        return {"type": "FeatureCollection", "features": features}

    # =========================================================================
    # Selection
    # =========================================================================

    def select(self, feature_id: int) -> Optional[Selection]:
        """Click on a feature; see SelectionMachine.select."""
        return self._snapshot.selection.select(feature_id)

    def clear_selection(self) -> None:
        self._snapshot.selection.clear()

    @property
    def selection(self) -> Optional[Selection]:
        return self._snapshot.selection.selection

    @property
    def selection_state(self) -> SelectionState:
        return self._snapshot.selection.state
