"""
Deterministic generation-band layout.

Each stage is a plain function of its inputs:
1) group_by_generation - bucket members into bands ordered by generation value
2) identify_family_units - cluster each person with their partner and children
3) calculate_positions - place band members left to right, partners kept adjacent
4) calculate_dimensions - canvas size from the placements, clamped to a page

Nothing here mutates the snapshot; band extents are written on the bands this
module creates.
"""

from herold.config import LayoutConfig
from herold.models import Dimensions, FamilyUnit, GenerationBand, Person, Placement


def group_by_generation(members: list[Person], config: LayoutConfig) -> list[GenerationBand]:
    """
    Group members by exact generation value into bands sorted ascending.

    A band's y is `title_height + margin_top + index * generation_spacing`, so it
    depends only on the band's rank among the distinct generation values.
    """
    by_generation: dict[float, list[Person]] = {}
    for person in members:
        by_generation.setdefault(person.generation, []).append(person)

    bands: list[GenerationBand] = []
    for index, generation in enumerate(sorted(by_generation)):
        y = config.title_height + config.margin_top + index * config.generation_spacing
        bands.append(GenerationBand(generation=generation, members=by_generation[generation], y=y))
    return bands


def identify_family_units(members: list[Person]) -> list[FamilyUnit]:
    """
    Cluster members into family units in a single pass.

    Each unclaimed person starts a unit and claims their unclaimed partner and
    unclaimed children. A child with two unclaimed parents goes to whichever
    parent is met first; the two parents' units are not merged.
    """
    by_id = {person.id: person for person in members}
    claimed: set[str] = set()
    units: list[FamilyUnit] = []

    for person in members:
        if person.id in claimed:
            continue
        claimed.add(person.id)
        unit = FamilyUnit(anchor=person)

        partner = by_id.get(person.partner) if person.partner else None
        if partner is not None and partner.id not in claimed:
            unit.partner = partner
            claimed.add(partner.id)

        for child_id in person.children:
            child = by_id.get(child_id)
            if child is not None and child.id not in claimed:
                unit.children.append(child)
                claimed.add(child.id)

        units.append(unit)

    return units


def estimate_text_width(text: str, config: LayoutConfig) -> float:
    """Approximate label width: character count times a scaled average glyph width."""
    glyph = config.glyph_width * config.font_size / config.reference_font_size
    return len(text) * glyph


def _unit_order(units: list[FamilyUnit]) -> dict[str, tuple[int, int]]:
    order: dict[str, tuple[int, int]] = {}
    for unit_index, unit in enumerate(units):
        for member_index, person in enumerate(unit.members):
            order[person.id] = (unit_index, member_index)
    return order


def calculate_positions(
    bands: list[GenerationBand], units: list[FamilyUnit], config: LayoutConfig
) -> list[Placement]:
    """
    Place every band's members left to right from the left margin.

    A label's anchor is its horizontal centre. After each person the cursor moves
    by the label width plus `marriage_spacing` when the next member is this
    person's partner, otherwise `person_spacing`. Each band's leftmost/rightmost
    label edges are recorded on the band.
    """
    order = _unit_order(units)
    placements: list[Placement] = []

    for band in bands:
        band.members = sorted(band.members, key=lambda person: order[person.id])
        cursor = config.margin_left
        band_placements: list[Placement] = []

        for index, person in enumerate(band.members):
            width = estimate_text_width(person.name, config)
            band_placements.append(
                Placement(person=person, x=cursor + width / 2, y=band.y, text_width=width)
            )

            following = band.members[index + 1] if index + 1 < len(band.members) else None
            if following is not None and person.partner == following.id:
                gap = config.marriage_spacing
            else:
                gap = config.person_spacing
            cursor += width + gap

        band.leftmost_x = min(p.x - p.text_width / 2 for p in band_placements)
        band.rightmost_x = max(p.x + p.text_width / 2 for p in band_placements)
        placements.extend(band_placements)

    return placements


def calculate_dimensions(placements: list[Placement], config: LayoutConfig) -> Dimensions:
    """
    Size the canvas around the placed labels.

    Content bounds are expanded by the margins and the title allowance, then
    clamped up to the minimum page. `offset_x` centres the content box
    horizontally on the resulting canvas.
    """
    if not placements:
        return Dimensions(width=config.min_width, height=config.min_height)

    min_x = min(p.x - p.text_width / 2 for p in placements)
    max_x = max(p.x + p.text_width / 2 for p in placements)
    min_y = min(p.y for p in placements)
    max_y = max(p.y for p in placements)

    content_width = max_x - min_x
    width = max(config.min_width, content_width + config.margin_left + config.margin_right)
    height = max(
        config.min_height,
        max_y - min_y + config.margin_top + config.margin_bottom + config.title_height,
    )
    offset_x = (width - content_width) / 2 - min_x

    return Dimensions(width=width, height=height, offset_x=offset_x)
