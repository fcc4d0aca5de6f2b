"""
Relations implied by a newly stored link.

When a parent, sibling, cousin or grandparent link is stored the tree also
records what follows from it: the parent's parents become grandparents, the
parent's other children become siblings, siblings share their parents and
grandparents, and so on. `implied_links` lists those follow-up links and
`can_link` decides whether one of them still fits the current state.
"""

from collections.abc import Iterator, Mapping

from models import Member
from relations import RelationKind

# Link as (source, target, kind): source is the `kind` of target
Link = tuple[Member, Member, RelationKind]

# Relations one sibling passes to the other
SHARED_BY_SIBLINGS = (
    RelationKind.FATHER,
    RelationKind.MOTHER,
    RelationKind.GRANDFATHER,
    RelationKind.GRANDMOTHER,
    RelationKind.SIBLING,
    RelationKind.COUSIN,
)


def can_link(source: Member, target: Member, kind: RelationKind) -> bool:
    """True if `source` can be recorded as the `kind` of `target` right now."""
    if source.id == target.id or target.relation_to(source.id) is not None:
        return False
    if not kind.allows(source.gender):
        return False
    for holder, slot in ((source, kind.inverse(target.gender)), (target, kind)):
        limit = slot.max_cardinality
        if limit is not None and holder.count(slot) >= limit:
            return False
    return True


def implied_links(members: Mapping[str, Member], source: Member, target: Member, kind: RelationKind) -> list[Link]:
    """Links that follow from "source is the `kind` of target" having just been stored."""
    if kind.is_parent:
        return list(_after_parent_link(members, source, target))
    if kind.is_child:
        return list(_after_parent_link(members, target, source))
    if kind.is_grandparent:
        return list(_after_grandparent_link(members, source, target))
    if kind.is_grandchild:
        return list(_after_grandparent_link(members, target, source))
    if kind is RelationKind.SIBLING:
        return list(_after_sibling_link(members, source, target)) + list(_after_sibling_link(members, target, source))
    if kind is RelationKind.COUSIN:
        return list(_after_cousin_link(members, source, target)) + list(_after_cousin_link(members, target, source))
    return []


def _related(members: Mapping[str, Member], member: Member, *kinds: RelationKind) -> Iterator[Member]:
    for _, other_id in member.neighbors(kinds):
        other = members.get(other_id)
        if other is not None:
            yield other


def _after_parent_link(members: Mapping[str, Member], parent: Member, child: Member) -> Iterator[Link]:
    for grandparent in _related(members, parent, RelationKind.FATHER, RelationKind.MOTHER):
        yield grandparent, child, RelationKind.grandparent_for(grandparent.gender)

    for grandchild in _related(members, child, RelationKind.SON, RelationKind.DAUGHTER):
        yield parent, grandchild, RelationKind.grandparent_for(parent.gender)

    for sibling in _related(members, child, RelationKind.SIBLING):
        yield parent, sibling, RelationKind.parent_for(parent.gender)

    for other_child in _related(members, parent, RelationKind.SON, RelationKind.DAUGHTER):
        if other_child.id != child.id:
            yield other_child, child, RelationKind.SIBLING


def _after_grandparent_link(members: Mapping[str, Member], grandparent: Member, grandchild: Member) -> Iterator[Link]:
    for sibling in _related(members, grandchild, RelationKind.SIBLING):
        yield grandparent, sibling, RelationKind.grandparent_for(grandparent.gender)


def _after_sibling_link(members: Mapping[str, Member], sibling: Member, other: Member) -> Iterator[Link]:
    """What `sibling` has that `other` should share."""
    for kind in SHARED_BY_SIBLINGS:
        for relative in _related(members, sibling, kind):
            if relative.id != other.id:
                yield relative, other, kind


def _after_cousin_link(members: Mapping[str, Member], cousin: Member, other: Member) -> Iterator[Link]:
    for sibling in _related(members, cousin, RelationKind.SIBLING):
        yield sibling, other, RelationKind.COUSIN
