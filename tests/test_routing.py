"""Tests for parent-child connectors and marriage connections."""
from __future__ import annotations

from conftest import make_person, make_snapshot
from herold.config import LayoutConfig
from herold.graph import spouse_pairs
from herold.layout import calculate_positions, group_by_generation, identify_family_units
from herold.routing import generate_connections, generate_marriages


def _placements(snapshot, config):
    members = list(snapshot.members.values())
    bands = group_by_generation(members, config)
    return calculate_positions(bands, identify_family_units(members), config)


def test_one_connection_per_recorded_parent(simple_family):
    config = LayoutConfig()
    connections = generate_connections(simple_family, _placements(simple_family, config), config)

    assert len(connections) == 2
    assert {(c.source_id, c.target_id) for c in connections} == {("john", "child"), ("jane", "child")}
    assert all(c.kind == "parent-child" for c in connections)


def test_connector_endpoints_offset_from_labels(simple_family):
    config = LayoutConfig()
    connections = generate_connections(simple_family, _placements(simple_family, config), config)
    from_john = next(c for c in connections if c.source_id == "john")

    assert (from_john.x1, from_john.y1) == (66, 200)
    assert (from_john.x2, from_john.y2) == (70, 260)
    assert from_john.mid_y == 230


def test_siblings_share_horizontal_run(three_generations):
    config = LayoutConfig()
    connections = generate_connections(three_generations, _placements(three_generations, config), config)
    from_erik = [c for c in connections if c.source_id == "erik"]

    assert len(from_erik) == 2
    assert from_erik[0].mid_y == from_erik[1].mid_y


def test_children_without_parents_get_no_connections():
    snapshot = make_snapshot([make_person("solo", "Solo", 0)])
    config = LayoutConfig()

    assert generate_connections(snapshot, _placements(snapshot, config), config) == []


def test_marriage_counted_once_per_pair(simple_family):
    marriages = generate_marriages(simple_family, _placements(simple_family, LayoutConfig()))

    assert len(marriages) == 1
    marriage = marriages[0]
    assert {marriage.person1.person.id, marriage.person2.person.id} == {"john", "jane"}
    assert (marriage.symbol_x, marriage.symbol_y) == ((66 + 138) / 2, 190)
    assert marriage.kind == "marriage"


def test_spouse_pairs_are_canonical_regardless_of_visit_order(simple_family):
    reordered = make_snapshot(list(reversed(list(simple_family.members.values()))), main_person_id="child")

    assert list(spouse_pairs(simple_family)) == [("jane", "john")]
    assert list(spouse_pairs(reordered)) == [("jane", "john")]


def test_marriage_across_generations_uses_midpoint():
    snapshot = make_snapshot(
        [
            make_person("old", "Old", 0, partner="young"),
            make_person("young", "Young", 1, partner="old"),
        ]
    )
    marriages = generate_marriages(snapshot, _placements(snapshot, LayoutConfig()))

    assert len(marriages) == 1
    assert marriages[0].symbol_y == (190 + 270) / 2
