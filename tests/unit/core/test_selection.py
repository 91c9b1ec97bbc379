"""Unit tests for the selection state machine."""

import pytest

from locha.core.exceptions import UnknownFeatureError
from locha.core.grouping import build_groups
from locha.core.payload import parse_payload
from locha.core.selection import SelectionMachine, SelectionState
from locha.core.types import Link
from tests.payloads import make_link, make_payload


def _machine(data) -> SelectionMachine:
    payload = parse_payload(data)
    result = build_groups(payload.features, payload.links)
    return SelectionMachine(result.graph, result.links, result.statuses)


def _pairs(selection):
    return [(link.before, link.after) for link in selection.links]


class TestSelectionStates:
    def test_starts_idle(self, chain_payload):
        machine = _machine(chain_payload)
        assert machine.state is SelectionState.IDLE
        assert machine.selection is None
        assert machine.anchor is None

    def test_select_then_toggle_off(self, chain_payload):
        machine = _machine(chain_payload)

        selection = machine.select(1)
        assert selection is not None
        assert machine.state is SelectionState.SELECTED
        assert machine.anchor == 1

        assert machine.select(1) is None
        assert machine.state is SelectionState.IDLE
        assert machine.selection is None

    def test_switching_anchor(self, chain_payload):
        machine = _machine(chain_payload)
        machine.select(1)
        machine.select(3)
        assert machine.anchor == 3

    def test_unknown_id_leaves_state_unchanged(self, chain_payload):
        machine = _machine(chain_payload)
        before = machine.select(1)

        with pytest.raises(UnknownFeatureError):
            machine.select(42)

        assert machine.anchor == 1
        assert machine.selection == before

    def test_clear(self, chain_payload):
        machine = _machine(chain_payload)
        machine.select(2)
        machine.clear()
        assert machine.state is SelectionState.IDLE


class TestSelectionSets:
    def test_chain_from_after_side(self, chain_payload):
        selection = _machine(chain_payload).select(3)

        assert _pairs(selection) == [(1, 2), (2, 3)]
        assert selection.feature_ids == [1, 2, 3]
        assert selection.before_ids == [1, 2]
        assert selection.after_ids == [2, 3]

    def test_direct_set_covers_neighbors_links(self):
        # 1 -> 2 -> 3 -> 4, clicking the first version
        data = make_payload([1, 2, 3, 4], [make_link(1, 2), make_link(2, 3), make_link(3, 4)])
        selection = _machine(data).select(1)
        assert _pairs(selection) == [(1, 2), (2, 3)]

    def test_update_after_reaches_previous_step(self):
        data = make_payload([1, 2, 3, 4], [make_link(1, 2), make_link(2, 3), make_link(3, 4)])
        selection = _machine(data).select(4)
        assert _pairs(selection) == [(1, 2), (2, 3), (3, 4)]
        assert selection.feature_ids == [1, 2, 3, 4]

    def test_update_after_extension_is_one_hop(self):
        links = [make_link(1, 2), make_link(2, 3), make_link(3, 4), make_link(4, 5)]
        selection = _machine(make_payload([1, 2, 3, 4, 5], links)).select(5)
        assert _pairs(selection) == [(2, 3), (3, 4), (4, 5)]
        assert 1 not in selection

    def test_conflict_anchor_gets_no_extension(self):
        links = [make_link(1, 2), make_link(2, 3), make_link(3, 4), make_link(4, 5)]
        selection = _machine(make_payload([1, 2, 3, 4, 5], links)).select(4)
        assert _pairs(selection) == [(2, 3), (3, 4), (4, 5)]

    def test_created_feature(self):
        data = make_payload([1, 2, 5], [make_link(1, 2), make_link(after=5)])
        selection = _machine(data).select(5)
        assert _pairs(selection) == [(None, 5)]
        assert selection.feature_ids == [5]
        assert selection.before_ids == []
        assert selection.after_ids == [5]

    def test_unlinked_feature_selects_only_itself(self):
        selection = _machine(make_payload([7], [make_link(7, 7)])).select(7)
        assert selection.links == []
        assert selection.feature_ids == [7]

    def test_compute_does_not_change_state(self, chain_payload):
        machine = _machine(chain_payload)
        machine.compute(2)
        assert machine.state is SelectionState.IDLE

    def test_links_for(self, chain_payload):
        machine = _machine(chain_payload)
        assert machine.links_for(2) == [Link(action="accept", before=1, after=2), Link(action="accept", before=2, after=3)]
