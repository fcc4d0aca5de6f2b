"""NetworkX projections of the member collection."""

from collections.abc import Mapping
import itertools

import networkx as nx

from models import Member
from relations import RelationKind


def build_graph(members: Mapping[str, Member]) -> nx.DiGraph:
    """
    Build a NetworkX directed graph from the member collection.

    PARENT_OF edges run parent -> child. Each marriage becomes a pair of
    SPOUSE_OF edges, one in each direction.
    """
    G = nx.DiGraph()

    # Note: use 'person_name' instead of 'name' to avoid conflict with pydot
    for member_id in sorted(members):
        member = members[member_id]
        G.add_node(
            member_id,
            person_name=member.full_name,
            given_name=member.first_name,
            surname=member.last_name,
            sex=member.gender.value,
            birth_date=member.birth_date,
            death_date=member.death_date,
            machzor=member.machzor,
            is_rabbi=member.is_rabbi,
        )

    for member_id in sorted(members):
        for kind, other_id in members[member_id].neighbors():
            if other_id not in members:
                continue
            if kind.is_parent:
                G.add_edge(other_id, member_id, relationship_type="PARENT_OF")
            elif kind is RelationKind.SPOUSE:
                G.add_edge(member_id, other_id, relationship_type="SPOUSE_OF")

    return G


def parent_graph(members: Mapping[str, Member]) -> nx.DiGraph:
    """Parent -> child edges only, over every member."""
    G = nx.DiGraph()
    G.add_nodes_from(members)
    for member_id, member in members.items():
        for kind, other_id in member.neighbors():
            if kind.is_parent and other_id in members:
                G.add_edge(other_id, member_id)
    return G


def get_ego_subgraph(G: nx.DiGraph, center_id: str, radius: int = 2) -> nx.DiGraph:
    """
    Extract the part of the tree within `radius` relations of a member.

    Args:
        G: The full graph
        center_id: The member ID to center the subgraph on
        radius: Maximum distance from center (default 2)

    Returns:
        A subgraph containing only nodes within `radius` edges of `center_id`
    """
    if center_id not in G:
        raise ValueError(f"Member ID {center_id} not found in graph")

    # Parents, children and spouses are all one hop away in the undirected view
    ego = nx.ego_graph(G.to_undirected(as_view=True), center_id, radius=radius)
    return G.subgraph(ego.nodes()).copy()


def build_union_layout_graph(G: nx.DiGraph) -> nx.DiGraph:
    """
    Build a layout graph with one "family" node per couple or parent set.

    Spouses point at their family node and children hang from it, so a
    hierarchical layout keeps couples on one rank and siblings together.

    Args:
        G: Graph from `build_graph`

    Returns:
        A new graph with node_type "person" or "family"
    """
    H = nx.DiGraph()
    for node, data in G.nodes(data=True):
        H.add_node(node, node_type="person", **data)

    couples = {
        tuple(sorted((u, v)))
        for u, v, data in G.edges(data=True)
        if data.get("relationship_type") == "SPOUSE_OF"
    }
    for a, b in sorted(couples):
        _add_family_node(H, (a, b))

    parents_of: dict[str, list[str]] = {}
    for parent, child, data in G.edges(data=True):
        if data.get("relationship_type") == "PARENT_OF":
            parents_of.setdefault(child, []).append(parent)

    for child in sorted(parents_of):
        parents = sorted(set(parents_of[child]))
        pair = next(
            (p for p in itertools.combinations(parents, 2) if p in couples),
            None,
        )
        # Children of unmarried parents get a family node of their own
        family_id = _add_family_node(H, pair or tuple(parents))
        H.add_edge(family_id, child, edge_type="family_to_child")

    return H


def _add_family_node(H: nx.DiGraph, spouses: tuple[str, ...]) -> str:
    family_id = "FAM_" + "_".join(spouses)
    if family_id not in H:
        H.add_node(family_id, node_type="family", spouses=spouses)
        for spouse in spouses:
            H.add_edge(spouse, family_id, edge_type="spouse_to_family")
    return family_id
