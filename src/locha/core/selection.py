"""
Selection / highlight state machine.

Tracks which feature the user clicked and derives the links and features
that belong to the same logical change. The machine only produces data;
drawing the highlight is left to the rendering side.

States:
    IDLE      no anchor, no selection
    SELECTED  one feature id is the anchor

Selecting the current anchor again toggles back to IDLE.
"""

import logging
from collections import defaultdict
from enum import StrEnum
from typing import Dict, List, Mapping, Optional, Sequence, Set

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import UnknownFeatureError
from .graph import LinkGraph
from .types import Link, Status

logger = logging.getLogger(__name__)


class SelectionState(StrEnum):
    IDLE = "idle"
    SELECTED = "selected"


class Selection(BaseModel):
    """
    Highlighted subset for one anchor.

    `before_ids` and `after_ids` split the features by the side of the
    selected links they appear on; a feature can be on both sides.
    """
    anchor: int
    links: List[Link] = Field(default_factory=list)
    feature_ids: List[int] = Field(default_factory=list)
    before_ids: List[int] = Field(default_factory=list)
    after_ids: List[int] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self.feature_ids


class SelectionMachine:
    """
    Derives highlight state from clicks on features.

    Args:
        graph: Link graph of the loaded dataset.
        links: Links used to build `graph`, in payload order.
        statuses: Status per feature id, in payload order.
    """

    def __init__(self, graph: LinkGraph, links: Sequence[Link], statuses: Mapping[int, Status]):
        self._graph = graph
        self._links = [link for link in links if not link.is_self_loop]
        self._statuses = statuses
        self._position = {feature_id: i for i, feature_id in enumerate(statuses)}
        self._links_by_feature: Dict[int, List[int]] = defaultdict(list)
        for index, link in enumerate(self._links):
            for feature_id in link.endpoints():
                self._links_by_feature[feature_id].append(index)

        self._anchor: Optional[int] = None
        self._selection: Optional[Selection] = None

    @property
    def state(self) -> SelectionState:
        return SelectionState.IDLE if self._anchor is None else SelectionState.SELECTED

    @property
    def anchor(self) -> Optional[int]:
        return self._anchor

    @property
    def selection(self) -> Optional[Selection]:
        return self._selection

    def select(self, feature_id: int) -> Optional[Selection]:
        """
        Click on a feature.

        Returns the new selection, or None when the click toggled the
        current anchor off.

        Raises:
            UnknownFeatureError: If `feature_id` is not in the graph. The
                current state is left unchanged.
        """
        if not self._graph.has_node(feature_id):
            raise UnknownFeatureError(feature_id)

        if feature_id == self._anchor:
            logger.debug("Toggling off selection of %s", feature_id)
            self.clear()
            return None

        selection = self.compute(feature_id)
        self._anchor = feature_id
        self._selection = selection
        return selection

    def clear(self) -> None:
        """Return to IDLE."""
        self._anchor = None
        self._selection = None

    def links_for(self, feature_id: int) -> List[Link]:
        """Links having `feature_id` as one endpoint."""
        return [self._links[i] for i in self._links_by_feature.get(feature_id, [])]

    def compute(self, feature_id: int) -> Selection:
        """
        Compute the selection anchored at `feature_id` without changing state.

        The selection holds every link touching the anchor or one of its
        direct neighbors. For an UPDATE_AFTER anchor it also holds the
        links one hop further out from each of its before-side neighbors,
        so the previous step of an update chain is revealed. No further
        expansion is done.
        """
        if not self._graph.has_node(feature_id):
            raise UnknownFeatureError(feature_id)

        neighbors = self._graph.neighbors(feature_id)
        selected: Set[int] = set()

        for node in {feature_id} | neighbors:
            selected.update(self._links_by_feature.get(node, []))

        if self._statuses.get(feature_id) is Status.UPDATE_AFTER:
            for before_id in self._before_side_neighbors(feature_id):
                for hop in self._graph.neighbors(before_id) - {feature_id}:
                    for index in self._links_by_feature.get(hop, []):
                        if not self._links[index].touches(feature_id):
                            selected.add(index)

        links = [self._links[i] for i in sorted(selected)]
        return Selection(
            anchor=feature_id,
            links=links,
            feature_ids=self._ordered({i for link in links for i in link.endpoints()} | {feature_id}),
            before_ids=self._ordered({link.before for link in links if link.before is not None}),
            after_ids=self._ordered({link.after for link in links if link.after is not None}),
        )

    def _before_side_neighbors(self, feature_id: int) -> Set[int]:
        return {
            link.before
            for link in self.links_for(feature_id)
            if link.after == feature_id and link.before is not None
        }

    def _ordered(self, ids: Set[int]) -> List[int]:
        fallback = len(self._position)
        return sorted(ids, key=lambda i: (self._position.get(i, fallback), i))
