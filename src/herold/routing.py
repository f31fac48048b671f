"""Connector geometry derived from placements."""

from herold.config import LayoutConfig
from herold.graph import spouse_pairs
from herold.models import Connection, MarriageConnection, Placement, ProjectSnapshot


def placements_by_id(placements: list[Placement]) -> dict[str, Placement]:
    return {placement.person.id: placement for placement in placements}


def generate_connections(
    snapshot: ProjectSnapshot, placements: list[Placement], config: LayoutConfig
) -> list[Connection]:
    """
    One parent-child connection per recorded parent of every member.

    Endpoints sit `connector_offset` below the parent label and above the child
    label; the serializer draws them as an orthogonal path turning at the
    vertical midpoint. Siblings are not bundled, so full siblings share
    overlapping horizontal runs.
    """
    lookup = placements_by_id(placements)
    connections: list[Connection] = []

    for person in snapshot.members.values():
        child = lookup.get(person.id)
        if child is None:
            continue
        for parent_id in person.parents:
            parent = lookup.get(parent_id)
            if parent is None:
                continue
            connections.append(
                Connection(
                    x1=parent.x,
                    y1=parent.y + config.connector_offset,
                    x2=child.x,
                    y2=child.y - config.connector_offset,
                    source_id=parent_id,
                    target_id=person.id,
                )
            )

    return connections


def generate_marriages(
    snapshot: ProjectSnapshot, placements: list[Placement]
) -> list[MarriageConnection]:
    """One marriage connection per partner pair, with the union marker at the midpoint."""
    lookup = placements_by_id(placements)
    marriages: list[MarriageConnection] = []

    for first_id, second_id in spouse_pairs(snapshot):
        first = lookup.get(first_id)
        second = lookup.get(second_id)
        if first is None or second is None:
            continue
        marriages.append(
            MarriageConnection(
                person1=first,
                person2=second,
                symbol_x=(first.x + second.x) / 2,
                symbol_y=(first.y + second.y) / 2,
            )
        )

    return marriages
