"""Shared fixtures for building logical-history payloads."""

import pytest

from tests.payloads import make_feature, make_link, make_payload


@pytest.fixture
def chain_payload():
    """1 -> 2 -> 3: a two-step update chain."""
    return make_payload([1, 2, 3], [make_link(1, 2), make_link(2, 3)])


@pytest.fixture
def mixed_payload():
    """
    One way update touching a node update, plus a creation and a deletion.

        10 (way)  -> 11 (way)
        12 (node) -> 13 (node)
        10 (way)  -> 13 (node)
        14 (node) created
        15 (relation) deleted
    """
    features = [
        make_feature(10, "way", version=1, osm_id=500, tags={"highway": "residential"}),
        make_feature(11, "way", version=2, osm_id=500, tags={"highway": "tertiary"}),
        make_feature(12, "node", version=3, osm_id=600),
        make_feature(13, "node", version=4, osm_id=600),
        make_feature(14, "node", version=1, osm_id=700, tags={"amenity": "bench"}),
        make_feature(15, "relation", version=7, osm_id=800),
    ]
    links = [
        make_link(10, 11),
        make_link(12, 13),
        make_link(10, 13),
        make_link(after=14),
        make_link(before=15),
    ]
    return make_payload(features, links)
