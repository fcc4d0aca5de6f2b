"""Breadth-first traversal over the member collection: connectivity and shortest paths."""

from collections.abc import Mapping

from errors import InsufficientMembers, MemberNotFound, NotFound, Reject
from log_config import get_logger
from models import ConnectionPath, Member, PathStep
from relations import DIRECT_KINDS, RelationKind
from unique_queue import UniqueQueue

log = get_logger(__name__)


def _reachable(
    members: Mapping[str, Member],
    start_id: str,
    skip_id: str | None = None,
    skip_edge: frozenset[str] | None = None,
) -> set[str]:
    """
    Ids reachable from `start_id` over direct links, treating every edge as undirected.

    The member `skip_id` and the edge between the two ids of `skip_edge` are
    treated as absent.
    """
    visited: set[str] = set()
    frontier: UniqueQueue[str] = UniqueQueue()
    frontier.add(start_id)

    while frontier:
        current_id = frontier.pull()
        visited.add(current_id)
        member = members.get(current_id)
        if member is None:
            continue
        for _, neighbor_id in member.neighbors(DIRECT_KINDS):
            if neighbor_id == skip_id or neighbor_id in visited:
                continue
            if skip_edge is not None and frozenset((current_id, neighbor_id)) == skip_edge:
                continue
            # Dangling references to ids outside the collection are not part of the tree
            if neighbor_id in members:
                frontier.add(neighbor_id)

    return visited


def is_connected(members: Mapping[str, Member]) -> bool:
    """True if every member is reachable from every other. Trivially true for 0 or 1 members."""
    if len(members) <= 1:
        return True
    start_id = min(members)
    return len(_reachable(members, start_id)) == len(members)


def can_safely_delete(members: Mapping[str, Member], target_id: str) -> bool:
    """
    Check whether removing `target_id` leaves the rest of the tree connected.

    The collection is not copied or mutated: the traversal simply never steps
    onto the target or across its edges.
    """
    remaining = [member_id for member_id in members if member_id != target_id]
    if len(remaining) <= 1:
        return True

    visited = _reachable(members, min(remaining), skip_id=target_id)
    safe = len(visited) == len(remaining)
    if not safe:
        log.debug(
            "delete_would_split_tree",
            member_id=target_id,
            reachable=len(visited),
            remaining=len(remaining),
        )
    return safe


def can_safely_unlink(members: Mapping[str, Member], id_a: str, id_b: str) -> bool:
    """Check whether dropping the edge between two members keeps the tree connected."""
    if len(members) <= 1:
        return True
    visited = _reachable(members, min(members), skip_edge=frozenset((id_a, id_b)))
    return len(visited) == len(members)


def connected_components(members: Mapping[str, Member]) -> list[list[str]]:
    """Sorted id lists, one per connected component, largest first."""
    seen: set[str] = set()
    components: list[list[str]] = []
    for member_id in sorted(members):
        if member_id in seen:
            continue
        component = _reachable(members, member_id)
        seen |= component
        components.append(sorted(component))
    components.sort(key=lambda ids: (-len(ids), ids[0]))
    return components


def shortest_connection_path(
    members: Mapping[str, Member], id_a: str, id_b: str
) -> ConnectionPath | Reject:
    """
    Find the shortest chain of parent, child and spouse links from `id_a` to `id_b`.

    Derived relations are not followed: each hop is one generation or a marriage.

    Neighbours are discovered in RelationKind order and then by id, so when
    several shortest paths exist the same one is always returned.

    Returns:
        A ConnectionPath (a single step when `id_a == id_b`), or a Reject with
        InsufficientMembers, MemberNotFound or NotFound.
    """
    if len(members) < 2:
        return Reject(InsufficientMembers(len(members)))
    for member_id in (id_a, id_b):
        if member_id not in members:
            return Reject(MemberNotFound(member_id))

    # id -> (predecessor id, what this member is to the predecessor)
    predecessors: dict[str, tuple[str, RelationKind] | None] = {id_a: None}
    frontier: UniqueQueue[str] = UniqueQueue()
    frontier.add(id_a)

    while frontier:
        current_id = frontier.pull()
        if current_id == id_b:
            return ConnectionPath(_walk_back(members, predecessors, id_b))

        for kind, neighbor_id in members[current_id].neighbors(DIRECT_KINDS):
            if neighbor_id in predecessors or neighbor_id not in members:
                continue
            predecessors[neighbor_id] = (current_id, kind)
            frontier.add(neighbor_id)

    log.debug("no_connection_found", member_a=id_a, member_b=id_b)
    return Reject(NotFound(id_a, id_b))


def _walk_back(
    members: Mapping[str, Member],
    predecessors: dict[str, tuple[str, RelationKind] | None],
    end_id: str,
) -> tuple[PathStep, ...]:
    steps: list[PathStep] = []
    current_id = end_id
    while True:
        link = predecessors[current_id]
        if link is None:
            steps.append(PathStep(members[current_id], None))
            break
        previous_id, kind = link
        steps.append(PathStep(members[current_id], kind))
        current_id = previous_id
    steps.reverse()
    return tuple(steps)
