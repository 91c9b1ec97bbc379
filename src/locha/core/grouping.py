"""
Grouping Engine.

Partitions the features of one payload into change groups (connected
components of the link graph) and assigns every feature its Status.

Everything here is a pure function of (features, links): traversal state
lives inside each call, so the same input always yields the same groups
and statuses.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .exceptions import BrokenLinkError
from .graph import LinkGraph, build_link_graph
from .result import Err, Ok, Result, partition
from .types import STATUS_RANK, ChangeGroup, Feature, Link, Status

logger = logging.getLogger(__name__)


@dataclass
class _Roles:
    """Link roles observed for one feature."""
    created: bool = False
    deleted: bool = False
    before: bool = False
    after: bool = False

    def status(self) -> Status:
        if self.before and self.after:
            return Status.CONFLICT
        if self.before:
            return Status.UPDATE_BEFORE
        if self.after:
            return Status.UPDATE_AFTER
        if self.created and self.deleted:
            return Status.CONFLICT
        if self.created:
            return Status.CREATED
        if self.deleted:
            return Status.DELETED
        return Status.UNLINKED


@dataclass(frozen=True)
class GroupingResult:
    """
    Everything derived from one payload.

    Attributes:
        graph: Link graph built from the resolvable links.
        links: Resolvable links, in payload order.
        groups: Change groups in presentation order.
        statuses: Status per feature id, in payload order.
        conflicts: Ids of features classified as CONFLICT.
        errors: One BrokenLinkError per link that could not be resolved.
    """
    graph: LinkGraph
    links: List[Link]
    groups: List[ChangeGroup]
    statuses: Dict[int, Status]
    conflicts: List[int] = field(default_factory=list)
    errors: List[BrokenLinkError] = field(default_factory=list)
    membership: Dict[int, int] = field(default_factory=dict)

    def group_of(self, feature_id: int) -> Optional[ChangeGroup]:
        """Return the group containing `feature_id`, if any."""
        index = self.membership.get(feature_id)
        if index is None:
            return None
        return self.groups[index]


def resolve_link(index: int, link: Link, known_ids: Set[int]) -> Result[Link, BrokenLinkError]:
    """Check a link against the feature ids of the payload."""
    if link.is_empty:
        return Err(BrokenLinkError(index))
    missing = [i for i in link.endpoints() if i not in known_ids]
    if missing:
        return Err(BrokenLinkError(index, missing))
    return Ok(link)


def classify(feature_ids: Iterable[int], links: Iterable[Link]) -> Dict[int, Status]:
    """
    Assign a Status to every feature id.

    Rules, first match wins:
      - before of one update link and after of another: CONFLICT
      - before of an update link: UPDATE_BEFORE
      - after of an update link: UPDATE_AFTER
      - only pure creations and pure deletions: CONFLICT
      - only pure creations (as after): CREATED
      - only pure deletions (as before): DELETED
      - no usable link: UNLINKED

    Self-loop links carry no role.
    """
    roles: Dict[int, _Roles] = {feature_id: _Roles() for feature_id in feature_ids}

    for link in links:
        if link.is_self_loop:
            continue
        if link.is_update:
            roles.setdefault(link.before, _Roles()).before = True
            roles.setdefault(link.after, _Roles()).after = True
        elif link.is_creation:
            roles.setdefault(link.after, _Roles()).created = True
        elif link.is_deletion:
            roles.setdefault(link.before, _Roles()).deleted = True

    return {feature_id: r.status() for feature_id, r in roles.items()}


def group_features(
    features: Sequence[Feature],
    graph: LinkGraph,
    statuses: Dict[int, Status],
) -> List[ChangeGroup]:
    """
    Partition features into connected change groups.

    Groups appear in the order of their first feature in the payload.
    Members are sorted by object type, then role, then payload order.
    """
    position = {feature.id: i for i, feature in enumerate(features)}
    by_id = {feature.id: feature for feature in features}
    visited: Set[int] = set()
    groups: List[ChangeGroup] = []

    def sort_key(feature_id: int):
        role_rank = STATUS_RANK.get(statuses.get(feature_id), len(STATUS_RANK))
        return (by_id[feature_id].type_rank, role_rank, position[feature_id])

    for feature in features:
        if feature.id in visited:
            continue

        members = _collect_component(graph, feature.id, visited)
        ordered = sorted(members, key=sort_key)
        groups.append(ChangeGroup(
            index=len(groups),
            feature_ids=ordered,
            has_conflict=any(statuses.get(i) is Status.CONFLICT for i in ordered),
        ))

    return groups


def _collect_component(graph: LinkGraph, start: int, visited: Set[int]) -> List[int]:
    """Depth-first walk from `start`, marking every reached id as visited."""
    component: List[int] = []
    stack = [start]

    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        component.append(current)

        for neighbor in graph.neighbors(current):
            if neighbor not in visited:
                stack.append(neighbor)

    return component


def build_groups(features: Sequence[Feature], links: Sequence[Link]) -> GroupingResult:
    """
    Derive graph, statuses and change groups from one payload.

    Links that reference unknown features are reported in `errors` and
    left out; the rest of the dataset is grouped normally.
    """
    feature_ids = [feature.id for feature in features]
    known_ids = set(feature_ids)

    resolved, errors = partition(
        resolve_link(index, link, known_ids) for index, link in enumerate(links)
    )
    for error in errors:
        logger.warning("Skipping broken link: %s", error)

    graph = build_link_graph(resolved, feature_ids)
    statuses = classify(feature_ids, resolved)
    groups = group_features(features, graph, statuses)

    membership = {
        feature_id: group.index
        for group in groups
        for feature_id in group.feature_ids
    }
    conflicts = [i for i in feature_ids if statuses[i] is Status.CONFLICT]
    if conflicts:
        logger.info("%d feature(s) have conflicting roles: %s", len(conflicts), conflicts)

    logger.debug("Grouped %d features into %d change groups", len(feature_ids), len(groups))

    return GroupingResult(
        graph=graph,
        links=resolved,
        groups=groups,
        statuses=statuses,
        conflicts=conflicts,
        errors=errors,
        membership=membership,
    )
