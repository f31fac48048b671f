"""Tests for generation grouping, family units, placement and canvas sizing."""
from __future__ import annotations

import pytest

from conftest import make_person, make_snapshot
from herold.config import LayoutConfig
from herold.layout import (
    calculate_dimensions,
    calculate_positions,
    estimate_text_width,
    group_by_generation,
    identify_family_units,
)


@pytest.fixture
def config() -> LayoutConfig:
    return LayoutConfig()


def _layout(snapshot, config):
    members = list(snapshot.members.values())
    bands = group_by_generation(members, config)
    units = identify_family_units(members)
    placements = calculate_positions(bands, units, config)
    return bands, units, placements


# ---------------------------------------------------------------------------
# Generation grouping
# ---------------------------------------------------------------------------


def test_bands_sorted_by_generation_with_fixed_y(three_generations, config):
    bands = group_by_generation(list(three_generations.members.values()), config)

    assert [b.generation for b in bands] == [0, 1, 1.5, 2]
    assert [b.y for b in bands] == [190, 270, 350, 430]


def test_band_order_ignores_member_order(three_generations, config):
    members = list(three_generations.members.values())
    forward = group_by_generation(members, config)
    backward = group_by_generation(list(reversed(members)), config)

    assert [(b.generation, b.y) for b in forward] == [(b.generation, b.y) for b in backward]


def test_integer_and_float_generations_share_a_band(config):
    members = [make_person("a", "A", 1), make_person("b", "B", 1.0)]
    bands = group_by_generation(members, config)

    assert len(bands) == 1
    assert [p.id for p in bands[0].members] == ["a", "b"]


def test_y_follows_band_index_and_spacing(three_generations):
    config = LayoutConfig(generation_spacing=55, margin_top=20, title_height=40)
    bands, _, placements = _layout(three_generations, config)

    index_of = {band.generation: i for i, band in enumerate(bands)}
    for placement in placements:
        expected = 40 + 20 + index_of[placement.person.generation] * 55
        assert placement.y == expected


# ---------------------------------------------------------------------------
# Family units
# ---------------------------------------------------------------------------


def test_every_person_lands_in_exactly_one_unit(three_generations):
    units = identify_family_units(list(three_generations.members.values()))

    ids = [p.id for unit in units for p in unit.members]
    assert sorted(ids) == sorted(three_generations.members)
    assert len(ids) == len(set(ids))


def test_unit_claims_partner_and_children(simple_family):
    units = identify_family_units(list(simple_family.members.values()))

    assert len(units) == 1
    unit = units[0]
    assert unit.anchor.id == "john"
    assert unit.partner.id == "jane"
    assert [c.id for c in unit.children] == ["child"]


def test_child_of_two_unclaimed_parents_goes_to_first_parent():
    members = [
        make_person("mother", "Mother", 0, children=["kid"]),
        make_person("father", "Father", 0, children=["kid"]),
        make_person("kid", "Kid", 1, parents=["mother", "father"]),
    ]
    units = identify_family_units(members)

    assert [u.anchor.id for u in units] == ["mother", "father"]
    assert [c.id for c in units[0].children] == ["kid"]
    assert units[1].children == []


def test_clustering_has_no_state_between_calls(simple_family):
    members = list(simple_family.members.values())
    first = identify_family_units(members)
    second = identify_family_units(members)

    assert first == second


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


def test_text_width_scales_with_font_size():
    assert estimate_text_width("Anna", LayoutConfig()) == 32
    assert estimate_text_width("Anna", LayoutConfig(font_size=12)) == 24
    assert estimate_text_width("", LayoutConfig()) == 0


def test_simple_family_positions(simple_family, config):
    bands, _, placements = _layout(simple_family, config)
    by_id = {p.person.id: p for p in placements}

    assert (by_id["john"].x, by_id["john"].y, by_id["john"].text_width) == (66, 190, 32)
    # Partners are separated by the marriage gap, not the person gap
    assert by_id["jane"].x == 50 + 32 + 40 + 16
    assert (by_id["child"].x, by_id["child"].y) == (70, 270)

    assert (bands[0].leftmost_x, bands[0].rightmost_x) == (50, 154)
    assert (bands[1].leftmost_x, bands[1].rightmost_x) == (50, 90)


def test_unrelated_neighbours_use_person_gap(config):
    snapshot = make_snapshot([make_person("a", "Aaaa", 0), make_person("b", "Bbbb", 0)])
    _, _, placements = _layout(snapshot, config)

    assert placements[1].x - placements[0].x == 32 + 120


def test_partners_placed_next_to_each_other(config):
    snapshot = make_snapshot(
        [
            make_person("a", "Alva", 0, partner="c"),
            make_person("b", "Bert", 0),
            make_person("c", "Carl", 0, partner="a"),
        ]
    )
    bands, _, placements = _layout(snapshot, config)

    assert [p.id for p in bands[0].members] == ["a", "c", "b"]
    by_id = {p.person.id: p for p in placements}
    assert by_id["c"].x - by_id["a"].x == 16 + 40 + 16


def test_layout_does_not_touch_snapshot(three_generations, config):
    before = {pid: (p.parents[:], p.children[:], p.partner) for pid, p in three_generations.members.items()}
    order_before = list(three_generations.members)

    _layout(three_generations, config)

    assert list(three_generations.members) == order_before
    assert {pid: (p.parents, p.children, p.partner) for pid, p in three_generations.members.items()} == before


# ---------------------------------------------------------------------------
# Dimensions
# ---------------------------------------------------------------------------


def test_small_tree_is_clamped_to_minimum_page(simple_family, config):
    _, _, placements = _layout(simple_family, config)
    dims = calculate_dimensions(placements, config)

    assert (dims.width, dims.height) == (595, 842)
    # Content 50..154 centred on a 595 wide page
    assert dims.offset_x == pytest.approx((595 - 104) / 2 - 50)


def test_empty_layout_gets_minimum_page(config):
    dims = calculate_dimensions([], config)

    assert (dims.width, dims.height, dims.offset_x) == (595, 842, 0)


def test_wide_band_grows_canvas(config):
    people = [make_person(f"p{i}", "Someone Long Named", 0) for i in range(8)]
    _, _, placements = _layout(make_snapshot(people), config)
    dims = calculate_dimensions(placements, config)

    label = 18 * 8
    content = 8 * label + 7 * 120
    assert dims.width == content + 50 + 50
    assert dims.offset_x == pytest.approx(0)


def test_deep_tree_grows_canvas(config):
    people = [make_person(f"g{i}", "X", i) for i in range(12)]
    _, _, placements = _layout(make_snapshot(people), config)
    dims = calculate_dimensions(placements, config)

    assert dims.height == 11 * 80 + 100 + 50 + 90


def test_dimensions_are_pure(three_generations, config):
    _, _, placements = _layout(three_generations, config)

    assert calculate_dimensions(placements, config) == calculate_dimensions(placements, config)
