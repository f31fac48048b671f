"""NetworkX graph building and operations."""

from collections.abc import Iterator

import networkx as nx

from herold.models import ProjectSnapshot


def build_family_graph(snapshot: ProjectSnapshot) -> nx.DiGraph:
    """
    Build a directed graph of a project's members.

    Edges carry a `relationship_type` of PARENT_OF (parent -> child) or
    SPOUSE_OF (both directions). Relationships are taken from the person
    records only; ids that are not members are skipped.
    """
    G = nx.DiGraph()

    for person in snapshot.members.values():
        G.add_node(
            person.id,
            person_name=person.name,
            gender=person.gender,
            generation=person.generation,
            birth_date=person.details.birth_date,
            death_date=person.details.death_date,
        )

    for person in snapshot.members.values():
        for parent_id in person.parents:
            if parent_id in snapshot.members:
                G.add_edge(parent_id, person.id, relationship_type="PARENT_OF")
        for child_id in person.children:
            if child_id in snapshot.members:
                G.add_edge(person.id, child_id, relationship_type="PARENT_OF")
        if person.partner and person.partner in snapshot.members:
            G.add_edge(person.id, person.partner, relationship_type="SPOUSE_OF")

    return G


def parent_graph(G: nx.DiGraph) -> nx.DiGraph:
    """Return the subgraph holding only PARENT_OF edges (all nodes kept)."""
    H = nx.DiGraph()
    H.add_nodes_from(G.nodes(data=True))
    H.add_edges_from(
        (u, v) for u, v, d in G.edges(data=True) if d.get("relationship_type") == "PARENT_OF"
    )
    return H


def spouse_pairs(snapshot: ProjectSnapshot) -> Iterator[tuple[str, str]]:
    """
    Yield each partner pair once as a canonical (sorted) id tuple, in the
    order the first partner of the pair is met.
    """
    seen: set[tuple[str, str]] = set()
    for person in snapshot.members.values():
        if not person.partner:
            continue
        pair = tuple(sorted([person.id, person.partner]))
        if pair in seen:
            continue
        seen.add(pair)
        yield pair


def get_ego_subgraph(G: nx.DiGraph, center_id: str, radius: int = 2) -> nx.DiGraph:
    """
    Extract a subgraph containing nodes within a given degree of a center node.

    Args:
        G: The full graph
        center_id: The person ID to center the subgraph on
        radius: Maximum distance from center (default 2)

    Returns:
        A subgraph containing only nodes within `radius` edges of `center_id`
    """
    if center_id not in G:
        raise ValueError(f"Person ID {center_id} not found in graph")

    # Undirected view so parents, children and partners all count as neighbours
    ego = nx.ego_graph(G.to_undirected(), center_id, radius=radius)
    return G.subgraph(ego.nodes()).copy()
