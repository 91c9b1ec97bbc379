"""Unit tests for the core record types."""

from locha.core.types import ChangeGroup, Feature, Link, Status


class TestStatus:
    def test_flags_for_updates(self):
        assert Status.UPDATE_BEFORE.flags == {
            "is_created": False, "is_deleted": False, "is_before": True, "is_after": False,
        }
        assert Status.UPDATE_AFTER.flags["is_after"] is True

    def test_conflict_sets_both_sides(self):
        flags = Status.CONFLICT.flags
        assert flags["is_before"] and flags["is_after"]
        assert not flags["is_created"] and not flags["is_deleted"]

    def test_unlinked_has_no_flags(self):
        assert not any(Status.UNLINKED.flags.values())

    def test_values_match_api_vocabulary(self):
        assert Status.CREATED == "create"
        assert Status.DELETED == "delete"
        assert Status.UPDATE_BEFORE == "updateBefore"


class TestLink:
    def test_kinds(self):
        assert Link(after=1).is_creation
        assert Link(before=1).is_deletion
        assert Link(before=1, after=2).is_update
        assert Link(before=3, after=3).is_self_loop
        assert Link().is_empty

    def test_endpoints_skip_duplicate_self_loop(self):
        assert list(Link(before=1, after=2).endpoints()) == [1, 2]
        assert list(Link(before=4, after=4).endpoints()) == [4]
        assert list(Link(after=5).endpoints()) == [5]

    def test_touches(self):
        link = Link(before=1, after=2)
        assert link.touches(1) and link.touches(2)
        assert not link.touches(3)


class TestFeature:
    def test_minimal_feature(self):
        feature = Feature.model_validate({"id": 1})
        assert feature.properties.tags == {}
        assert feature.objtype is None

    def test_type_rank(self):
        assert Feature.model_validate({"id": 1, "properties": {"objtype": "node"}}).type_rank == 0
        assert Feature.model_validate({"id": 1, "properties": {"objtype": "way"}}).type_rank == 1
        assert Feature.model_validate({"id": 1, "properties": {"objtype": "relation"}}).type_rank == 2
        assert Feature.model_validate({"id": 1, "properties": {"objtype": "area"}}).type_rank == 3
        assert Feature.model_validate({"id": 1}).type_rank == 3

    def test_label(self):
        feature = Feature.model_validate({"id": 1, "properties": {"objtype": "way", "id": 42, "version": 3}})
        assert feature.label == "way/42 v3"


class TestChangeGroup:
    def test_membership_and_top(self):
        group = ChangeGroup(index=0, feature_ids=[3, 1])
        assert 3 in group
        assert 2 not in group
        assert len(group) == 2
        assert group.top == 3
