"""Structural validation and lineage checks for project snapshots."""

import networkx as nx

from herold.config import check_project_settings
from herold.graph import build_family_graph, parent_graph
from herold.models import ProjectSnapshot


def validate_snapshot(snapshot: ProjectSnapshot) -> list[str]:
    """
    Check a snapshot for structural errors that make it unrenderable:
    - Missing main person
    - A member listed as their own parent, child or partner
    - Parent, child or partner ids that are not members
    - Project settings naming an unknown spacing preset or orientation,
      or a non-positive name font size

    Every violation is collected; an empty list means the snapshot can be laid out.
    """
    errors: list[str] = []
    members = snapshot.members

    if snapshot.main_person_id not in members:
        errors.append(f"Main person {snapshot.main_person_id} not found in project members")

    for person in members.values():
        if person.id in person.parents:
            errors.append(f"Member {person.id} cannot be their own parent")
        if person.id in person.children:
            errors.append(f"Member {person.id} cannot be their own child")
        if person.partner == person.id:
            errors.append(f"Member {person.id} cannot be their own partner")

        for parent_id in person.parents:
            if parent_id not in members:
                errors.append(f"Parent {parent_id} referenced by {person.id} does not exist")
        for child_id in person.children:
            if child_id not in members:
                errors.append(f"Child {child_id} referenced by {person.id} does not exist")
        if person.partner and person.partner not in members:
            errors.append(f"Partner {person.partner} referenced by {person.id} does not exist")

    errors.extend(check_project_settings(snapshot.settings))
    return errors


def check_lineage(snapshot: ProjectSnapshot) -> list[str]:
    """
    Look for data that renders but is probably wrong:
    - Cycles in parent-child relationships
    - Partner links that are not reciprocated
    - Parents not in an earlier generation than their child
    - Impossible ages (child born before parent, parent under 12)
    - Death before birth

    Returns a list of warning messages.
    """
    warnings: list[str] = []
    G = build_family_graph(snapshot)
    parents_only = parent_graph(G)

    # Self-loops are reported by validate_snapshot
    parents_only.remove_edges_from(list(nx.selfloop_edges(parents_only)))
    try:
        cycle = nx.find_cycle(parents_only, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    for person in snapshot.members.values():
        partner = snapshot.members.get(person.partner) if person.partner else None
        if partner is not None and partner.partner != person.id:
            warnings.append(
                f"Partner link from {person.id} to {partner.id} is not reciprocated"
            )

    for parent, child in parents_only.edges():
        if parent == child:
            continue
        parent_data = G.nodes[parent]
        child_data = G.nodes[child]

        if parent_data["generation"] >= child_data["generation"]:
            warnings.append(
                f"Generation order: parent {parent} ({parent_data['generation']}) is not above "
                f"child {child} ({child_data['generation']})"
            )

        # birth_date is ISO (YYYY-MM-DD) when it could be parsed, so strings compare
        parent_birth = parent_data.get("birth_date")
        child_birth = child_data.get("birth_date")
        if not (_is_iso(parent_birth) and _is_iso(child_birth)):
            continue
        if child_birth < parent_birth:
            warnings.append(
                f"Impossible: {child_data['person_name']} born before parent "
                f"{parent_data['person_name']}"
            )
        elif int(child_birth[:4]) - int(parent_birth[:4]) < 12:
            warnings.append(
                f"Suspicious: {parent_data['person_name']} was less than 12 years "
                f"old when {child_data['person_name']} was born"
            )

    for _, data in G.nodes(data=True):
        birth = data.get("birth_date")
        death = data.get("death_date")
        if _is_iso(birth) and _is_iso(death) and death < birth:
            warnings.append(f"Impossible: {data['person_name']} died before being born")

    return warnings


def _is_iso(value: str | None) -> bool:
    return bool(value) and len(value) == 10 and value[4] == "-" and value[:4].isdigit()
