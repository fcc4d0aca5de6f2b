"""Relationship validation and whole-tree audits."""

from collections.abc import Mapping

import networkx as nx

from connectivity import connected_components
from errors import (
    Accept,
    AlreadyRelated,
    AncestryCycle,
    CardinalityExceeded,
    GenderMismatch,
    MemberNotFound,
    NeedsDirectLink,
    PossibleDuplicate,
    Reject,
    SameMember,
    SameSexMarriage,
    Verdict,
)
from graph import parent_graph
from log_config import get_logger
from models import Member
from relations import RelationKind

log = get_logger(__name__)


def validate_relationship(
    members: Mapping[str, Member], source: Member, target: Member, kind: RelationKind
) -> Verdict:
    """
    Decide whether `source` may become the `kind` of `target`.

    `source` may be a member that is not yet in `members` (a new person being
    added together with their first relation); `target` must already exist.
    Checks run in a fixed order and the first failure is reported:

    1. gender of `source` fits `kind`
    2. `source` and `target` are different, not yet related members, and a
       new `source` joins through a direct link
    3. cardinality on both endpoints, source's mirrored slot first
    4. spouses are of opposite genders
    5. the edge would not make someone their own ancestor
    6. a new `source` does not share its full name with an existing member
       (overridable, see `Reject.overridable`)

    Nothing is mutated.
    """
    is_new = source.id not in members
    if target.id not in members:
        return _reject(MemberNotFound(target.id))

    # 1. Gender
    if not kind.allows(source.gender):
        return _reject(GenderMismatch(kind, source.id, target.id))

    # 2. Endpoints
    if source.id == target.id:
        return _reject(SameMember(source.id))
    existing = target.relation_to(source.id)
    if existing is not None:
        return _reject(AlreadyRelated(source.id, target.id, existing))
    if is_new and not kind.is_direct:
        return _reject(NeedsDirectLink(kind))

    # 3. Cardinality
    for holder, slot in ((source, kind.inverse(target.gender)), (target, kind)):
        limit = slot.max_cardinality
        if limit is not None and holder.count(slot) >= limit:
            return _reject(CardinalityExceeded(slot, holder.id, tuple(sorted(holder.related_ids(slot)))))

    # 4. Spouse sex
    if kind is RelationKind.SPOUSE and source.gender == target.gender:
        return _reject(SameSexMarriage(source.id, target.id))

    # 5. Ancestry
    if not is_new:
        if kind.is_parent or kind.is_grandparent:
            elder_id, younger_id = source.id, target.id
        elif kind.is_child or kind.is_grandchild:
            elder_id, younger_id = target.id, source.id
        else:
            elder_id = younger_id = None
        if elder_id is not None and _is_ancestor(members, younger_id, elder_id):
            return _reject(AncestryCycle(elder_id, younger_id))

    # 6. Duplicate name
    if is_new:
        for member_id in sorted(members):
            other = members[member_id]
            if other.full_name == source.full_name:
                return _reject(PossibleDuplicate(other.id, other.full_name))

    return Accept()


def valid_relation_options(members: Mapping[str, Member], member: Member) -> list[RelationKind]:
    """Kinds another member could still take towards `member` (full slots are dropped)."""
    options = []
    for kind in RelationKind:
        limit = kind.max_cardinality
        if limit is None or member.count(kind) < limit:
            options.append(kind)
    return options


def _is_ancestor(members: Mapping[str, Member], ancestor_id: str, descendant_id: str) -> bool:
    G = parent_graph(members)
    if ancestor_id not in G or descendant_id not in G:
        return False
    return nx.has_path(G, ancestor_id, descendant_id)


def _reject(reason) -> Reject:
    log.debug("relationship_rejected", reason=type(reason).__name__, detail=reason.message)
    return Reject(reason)


def audit_tree(members: Mapping[str, Member]) -> list[str]:
    """
    Check a loaded collection against the structural rules of the tree.

    Covers unique ids, mirror edges, cardinality, gender roles and
    connectivity, then the genealogical checks of `audit_lineage`.

    Returns a list of warning messages.
    """
    warnings: list[str] = []

    for key, member in members.items():
        if key != member.id:
            warnings.append(f"Member {member.full_name} stored under id {key} but has id {member.id}")

    for member in members.values():
        for kind, other_id in member.neighbors():
            other = members.get(other_id)
            if other is None:
                warnings.append(f"{member.full_name} points at missing member {other_id}")
                continue
            # other is the `kind` of member, so member is kind.inverse(member.gender) of other
            mirror = kind.inverse(member.gender)
            if member.id not in other.relations.get(mirror, ()):
                warnings.append(
                    f"Missing mirror: {other.full_name} is {kind.value} of {member.full_name} "
                    f"but has no {mirror.value} entry back"
                )
            if not kind.allows(other.gender):
                warnings.append(
                    f"Gender role: {other.full_name} is recorded as {kind.value} of {member.full_name}"
                )

        for kind in RelationKind:
            limit = kind.max_cardinality
            if limit is not None and member.count(kind) > limit:
                warnings.append(f"{member.full_name} has {member.count(kind)} entries of {kind.value}")

    components = connected_components(members)
    if len(components) > 1:
        warnings.append(
            f"Family tree is split into {len(components)} parts "
            f"(sizes {', '.join(str(len(c)) for c in components)})"
        )

    warnings.extend(audit_lineage(members))

    for warning in warnings:
        log.warning("audit_warning", detail=warning)
    return warnings




def audit_lineage(members: Mapping[str, Member]) -> list[str]:
    """
    Genealogical sanity checks over parent links:
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent, parent younger than 12)
    - Death recorded before birth

    Returns a list of warning messages.
    """
    warnings: list[str] = []
    G = parent_graph(members)

    try:
        cycle = nx.find_cycle(G, orientation="original")
        names = [members[edge[0]].full_name for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {names}")
    except nx.NetworkXNoCycle:
        pass

    # ISO dates (YYYY-MM-DD) compare correctly as strings
    for parent_id, child_id in sorted(G.edges()):
        parent, child = members[parent_id], members[child_id]
        if not (parent.birth_date and child.birth_date):
            continue
        if child.birth_date < parent.birth_date:
            warnings.append(f"Impossible: {child.full_name} born before parent {parent.full_name}")
            continue
        try:
            gap = int(child.birth_date[:4]) - int(parent.birth_date[:4])
        except ValueError:
            continue
        if gap < 12:
            warnings.append(
                f"Suspicious: {parent.full_name} was less than 12 years old when {child.full_name} was born"
            )

    for member_id in sorted(members):
        member = members[member_id]
        if member.birth_date and member.death_date and member.death_date < member.birth_date:
            warnings.append(f"Impossible: {member.full_name} died before being born")

    return warnings
