"""
locha Core Module.

Building blocks for reconstructing logical changes from a
logical-history response:

Model:
    - Feature, Link, Changeset, Payload: API records
    - Status: role of a feature within its change group
    - parse_payload: validation and normalization

Derivation:
    - LinkGraph, build_link_graph: undirected adjacency over feature ids
    - build_groups, classify, group_features: change groups and statuses
    - SelectionMachine: click-driven highlight state

Ownership:
    - LoChaSession: the currently loaded dataset
"""

from .exceptions import (
    BrokenLinkError,
    ConfigError,
    FetchError,
    InvalidQueryError,
    LoChaError,
    MalformedPayloadError,
    UnknownFeatureError,
)
from .graph import LinkGraph, build_link_graph
from .grouping import GroupingResult, build_groups, classify, group_features
from .payload import load_payload, parse_payload
from .selection import Selection, SelectionMachine, SelectionState
from .session import LoadStatus, LoChaSession
from .types import (
    ChangeGroup,
    Changeset,
    Feature,
    FeatureProperties,
    Link,
    ObjectType,
    Payload,
    Status,
)

__all__ = [
    "BrokenLinkError",
    "ChangeGroup",
    "Changeset",
    "ConfigError",
    "Feature",
    "FeatureProperties",
    "FetchError",
    "GroupingResult",
    "InvalidQueryError",
    "Link",
    "LinkGraph",
    "LoChaError",
    "LoChaSession",
    "LoadStatus",
    "MalformedPayloadError",
    "ObjectType",
    "Payload",
    "Selection",
    "SelectionMachine",
    "SelectionState",
    "Status",
    "UnknownFeatureError",
    "build_groups",
    "build_link_graph",
    "classify",
    "group_features",
    "load_payload",
    "parse_payload",
]
