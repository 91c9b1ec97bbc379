"""Unit tests for the LoCha session."""

import pytest

from locha.config import LoChaConfig
from locha.core.exceptions import MalformedPayloadError, UnknownFeatureError
from locha.core.selection import SelectionState
from locha.core.session import LoadStatus, LoChaSession
from locha.core.types import Status
from tests.payloads import make_feature, make_link, make_payload


class TestLoading:
    def test_initial_state(self):
        session = LoChaSession()
        assert not session.is_loaded
        assert session.is_empty
        assert session.get_groups() == []
        assert session.generation == 0

    def test_set_data(self, mixed_payload):
        session = LoChaSession()
        assert session.set_data(mixed_payload) is LoadStatus.LOADED
        assert session.is_loaded
        assert session.feature_count == 6
        assert session.link_count == 5
        assert len(session.get_groups()) == 3

    def test_empty_result(self, mixed_payload):
        session = LoChaSession()
        session.set_data(mixed_payload)

        status = session.set_data(make_payload([]))

        assert status is LoadStatus.EMPTY
        assert session.is_empty
        assert not session.is_loaded
        assert session.get_groups() == []

    def test_malformed_payload_keeps_previous_state(self, mixed_payload):
        session = LoChaSession()
        session.set_data(mixed_payload)
        session.select(10)

        with pytest.raises(MalformedPayloadError):
            session.set_data(make_payload([1], [make_link(1, 99)]))

        assert session.feature_count == 6
        assert session.get_status(10) is Status.UPDATE_BEFORE
        assert session.selection.anchor == 10
        assert session.generation == 1

    def test_new_data_resets_selection(self, mixed_payload, chain_payload):
        session = LoChaSession()
        session.set_data(mixed_payload)
        session.select(10)

        session.set_data(chain_payload)

        assert session.selection is None
        assert session.selection_state is SelectionState.IDLE

    def test_lenient_config_reports_broken_links(self):
        session = LoChaSession(LoChaConfig(strict_links=False))
        session.set_data(make_payload([1, 2], [make_link(1, 2), make_link(2, 99)]))

        assert len(session.errors) == 1
        assert session.get_status(1) is Status.UPDATE_BEFORE

    def test_strict_override(self):
        session = LoChaSession()
        session.set_data(make_payload([1], [make_link(1, 99)]), strict=False)
        assert session.errors[0].missing_ids == (99,)

    def test_feature_with_null_properties(self):
        feature = make_feature(1)
        feature["properties"] = None
        session = LoChaSession()
        assert session.set_data(make_payload([feature], [make_link(after=1)])) is LoadStatus.LOADED
        assert session.get_status(1) is Status.CREATED

    def test_reset(self, chain_payload):
        session = LoChaSession()
        session.set_data(chain_payload)
        session.reset()
        assert session.is_empty
        assert session.get_groups() == []


class TestAccessors:
    @pytest.fixture
    def session(self, mixed_payload):
        session = LoChaSession()
        session.set_data(mixed_payload)
        return session

    def test_get_status_by_feature_or_id(self, session):
        feature = session.get_feature(14)
        assert session.get_status(feature) is Status.CREATED
        assert session.get_status(15) is Status.DELETED

    def test_unknown_ids(self, session):
        with pytest.raises(UnknownFeatureError):
            session.get_status(999)
        with pytest.raises(UnknownFeatureError):
            session.get_feature(999)
        with pytest.raises(UnknownFeatureError):
            session.get_group(999)
        with pytest.raises(UnknownFeatureError):
            session.select(999)

    def test_get_group(self, session):
        assert session.get_group(13).feature_ids == [12, 13, 10, 11]

    def test_before_after_features(self, session):
        assert [f.id for f in session.before_features] == [10, 12, 15]
        assert [f.id for f in session.after_features] == [11, 13, 14]

    def test_conflicts_on_both_sides(self, chain_payload):
        session = LoChaSession()
        session.set_data(chain_payload)
        assert [f.id for f in session.conflicts] == [2]
        assert [f.id for f in session.before_features] == [1, 2]
        assert [f.id for f in session.after_features] == [2, 3]

    def test_links_for(self, session):
        assert [(l.before, l.after) for l in session.links_for(10)] == [(10, 11), (10, 13)]

    def test_select_toggle(self, session):
        assert session.select(11) is not None
        assert session.select(11) is None
        assert session.selection_state is SelectionState.IDLE

    def test_clear_selection(self, session):
        session.select(11)
        session.clear_selection()
        assert session.selection is None

    def test_feature_collection(self, session):
        collection = session.to_feature_collection()
        assert collection["type"] == "FeatureCollection"
        first = collection["features"][0]
        assert first["id"] == 10
        assert first["properties"]["status"] == "updateBefore"
        assert first["properties"]["is_before"] is True
        assert first["properties"]["is_after"] is False
        assert first["properties"]["group"] == 0
        assert first["properties"]["tags"] == {"highway": "residential"}
