"""
Core type definitions for locha.

Models the payload returned by the logical-history API: versioned OSM
features, the links describing transitions between them, and the
changesets they belong to. Roles are expressed with the closed `Status`
enum, assigned once by the grouping engine.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ObjectType(StrEnum):
    """OpenStreetMap object kinds."""
    NODE = "node"
    WAY = "way"
    RELATION = "relation"


class Status(StrEnum):
    """
    Role of a feature within its change group.

    CONFLICT marks a feature that is both the source and the target of
    update links. UNLINKED marks a feature no usable link touches.
    """
    CREATED = "create"
    DELETED = "delete"
    UPDATE_BEFORE = "updateBefore"
    UPDATE_AFTER = "updateAfter"
    CONFLICT = "conflict"
    UNLINKED = "unlinked"

    @property
    def flags(self) -> Dict[str, bool]:
        """Legacy boolean role flags as the web client reads them."""
        return {
            "is_created": self is Status.CREATED,
            "is_deleted": self is Status.DELETED,
            "is_before": self in (Status.UPDATE_BEFORE, Status.CONFLICT),
            "is_after": self in (Status.UPDATE_AFTER, Status.CONFLICT),
        }


# Presentation precedence inside a change group
OBJECT_TYPE_RANK: Dict[str, int] = {
    ObjectType.NODE: 0,
    ObjectType.WAY: 1,
    ObjectType.RELATION: 2,
}

STATUS_RANK: Dict[Status, int] = {
    Status.UPDATE_BEFORE: 0,
    Status.UPDATE_AFTER: 0,
    Status.CREATED: 1,
    Status.DELETED: 2,
}


class FeatureProperties(BaseModel):
    """
    Properties of one object version.

    `id` is the OSM object id, not the feature id of the response.
    """
    objtype: Optional[str] = None
    id: Optional[int] = None
    version: Optional[int] = None
    username: Optional[str] = None
    created: Optional[datetime] = None
    tags: Dict[str, str] = Field(default_factory=dict)
    geom_distance: Optional[float] = None
    deleted: bool = False

    model_config = ConfigDict(extra="allow")


class Feature(BaseModel):
    """
    One version of one OpenStreetMap object inside a loaded response.

    The numeric `id` only identifies the feature within that response.
    """
    id: int
    type: str = "Feature"
    geometry: Optional[Dict[str, Any]] = None
    properties: FeatureProperties = Field(default_factory=FeatureProperties)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("properties", mode="before")
    @classmethod
    def _null_properties(cls, value: Any) -> Any:
        # GeoJSON allows "properties": null
        return {} if value is None else value

    @property
    def objtype(self) -> Optional[str]:
        return self.properties.objtype

    @property
    def type_rank(self) -> int:
        return OBJECT_TYPE_RANK.get(self.properties.objtype or "", len(OBJECT_TYPE_RANK))

    @property
    def label(self) -> str:
        """Short human label, e.g. ``way/42 v3``."""
        props = self.properties
        name = f"{props.objtype or 'object'}/{props.id if props.id is not None else '?'}"
        if props.version is not None:
            name += f" v{props.version}"
        return name


class Link(BaseModel):
    """
    A single transition between two feature versions.

    `action` is the review state set by the API ("accept" or "reject").

    A link with only `after` is a creation, with only `before` a deletion,
    with both an update. `diff_attribs` and `diff_tags` are passed through
    untouched.
    """
    action: Optional[str] = None
    before: Optional[int] = None
    after: Optional[int] = None
    diff_attribs: Optional[Dict[str, Any]] = None
    diff_tags: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def is_creation(self) -> bool:
        return self.before is None and self.after is not None

    @property
    def is_deletion(self) -> bool:
        return self.before is not None and self.after is None

    @property
    def is_update(self) -> bool:
        return self.before is not None and self.after is not None

    @property
    def is_self_loop(self) -> bool:
        return self.before is not None and self.before == self.after

    @property
    def is_empty(self) -> bool:
        return self.before is None and self.after is None

    def endpoints(self) -> Iterator[int]:
        """Yield the present endpoint ids."""
        if self.before is not None:
            yield self.before
        if self.after is not None and self.after != self.before:
            yield self.after

    def touches(self, feature_id: int) -> bool:
        return self.before == feature_id or self.after == feature_id


class Changeset(BaseModel):
    """OSM changeset metadata attached to the response."""
    id: int
    created_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    open: bool = False
    user: Optional[str] = None
    uid: Optional[int] = None
    minlat: Optional[float] = None
    minlon: Optional[float] = None
    maxlat: Optional[float] = None
    maxlon: Optional[float] = None
    comments_count: int = 0
    changes_count: int = 0
    tags: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")


class PayloadMetadata(BaseModel):
    links: List[Link] = Field(default_factory=list)
    changesets: List[Changeset] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class Payload(BaseModel):
    """A complete logical-history API response."""
    type: str = "FeatureCollection"
    features: List[Feature] = Field(default_factory=list)
    metadata: PayloadMetadata = Field(default_factory=PayloadMetadata)

    model_config = ConfigDict(extra="ignore")

    @property
    def links(self) -> List[Link]:
        return self.metadata.links

    @property
    def changesets(self) -> List[Changeset]:
        return self.metadata.changesets

    @property
    def feature_ids(self) -> List[int]:
        return [feature.id for feature in self.features]


class ChangeGroup(BaseModel):
    """
    A connected set of features forming one logical edit.

    `feature_ids` is in presentation order: object type first
    (node, way, relation, other), then role (updates, creations,
    deletions, other), then response order.
    """
    index: int
    feature_ids: List[int]
    has_conflict: bool = False

    model_config = ConfigDict(frozen=True)

    def __contains__(self, feature_id: object) -> bool:
        return feature_id in self.feature_ids

    def __len__(self) -> int:
        return len(self.feature_ids)

    @property
    def top(self) -> int:
        """Feature shown on top when the group is drawn."""
        return self.feature_ids[0]
