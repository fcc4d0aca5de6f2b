"""Follow-up relations worth offering after an edge is committed."""

from collections.abc import Iterator, Mapping

from models import Member, Suggestion
from relations import RelationKind


def after_link(members: Mapping[str, Member], source: Member, target: Member, kind: RelationKind) -> Iterator[Suggestion]:
    """Suggestions that follow from "source is the `kind` of target"."""
    if kind is RelationKind.SPOUSE:
        yield from after_marriage(members, source, target)
    elif kind.is_parent:
        yield from after_parent_link(members, source, target)
    elif kind.is_child:
        yield from after_parent_link(members, target, source)
    elif kind.is_grandparent:
        yield from after_grandparent_link(members, source, target)
    elif kind.is_grandchild:
        yield from after_grandparent_link(members, target, source)
    elif kind is RelationKind.COUSIN:
        yield from after_cousin_link(members, source, target)
        yield from after_cousin_link(members, target, source)


def _has_room(member: Member, kind: RelationKind) -> bool:
    limit = kind.max_cardinality
    return limit is None or member.count(kind) < limit


def _unrelated(member: Member, other: Member) -> bool:
    return member.id != other.id and member.relation_to(other.id) is None


def after_marriage(members: Mapping[str, Member], spouse_a: Member, spouse_b: Member) -> Iterator[Suggestion]:
    """Each spouse's children and grandchildren are suggested for the other spouse as well."""
    for parent, step_parent in ((spouse_a, spouse_b), (spouse_b, spouse_a)):
        for kind in (RelationKind.SON, RelationKind.DAUGHTER):
            for child_id in sorted(parent.relations.get(kind, ())):
                child = members.get(child_id)
                if child is None or child.relation_to(step_parent.id) is not None:
                    continue
                if child.count(RelationKind.parent_for(step_parent.gender)):
                    continue
                yield Suggestion(child_id, step_parent.id, kind)

        for kind in (RelationKind.GRANDSON, RelationKind.GRANDDAUGHTER):
            for grandchild_id in sorted(parent.relations.get(kind, ())):
                grandchild = members.get(grandchild_id)
                if grandchild is None or not _unrelated(grandchild, step_parent):
                    continue
                if _has_room(grandchild, RelationKind.grandparent_for(step_parent.gender)):
                    yield Suggestion(grandchild_id, step_parent.id, kind)


def after_parent_link(members: Mapping[str, Member], parent: Member, child: Member) -> Iterator[Suggestion]:
    """
    Suggestions after `parent` became a parent of `child`.

    - If the child already has another parent and neither parent is married,
      suggest marrying them.
    - If the parent is married and the spouse is unrelated to the child,
      suggest the spouse as the child's other parent.
    - Children of the parent's siblings are suggested as the child's cousins.
    - Grandchildren recorded for the parent are suggested as the child's children.
    """
    for kind in (RelationKind.FATHER, RelationKind.MOTHER):
        for other_parent_id in sorted(child.relations.get(kind, ())):
            if other_parent_id == parent.id:
                continue
            other_parent = members.get(other_parent_id)
            if other_parent is None or other_parent.gender == parent.gender:
                continue
            if parent.count(RelationKind.SPOUSE) or other_parent.count(RelationKind.SPOUSE):
                continue
            yield Suggestion(parent.id, other_parent_id, RelationKind.SPOUSE)

    for spouse_id in sorted(parent.relations.get(RelationKind.SPOUSE, ())):
        spouse = members.get(spouse_id)
        if spouse is None or child.relation_to(spouse_id) is not None:
            continue
        slot = RelationKind.parent_for(spouse.gender)
        if child.count(slot):
            continue
        yield Suggestion(spouse_id, child.id, slot)

    for sibling_id in sorted(parent.relations.get(RelationKind.SIBLING, ())):
        uncle_or_aunt = members.get(sibling_id)
        if uncle_or_aunt is None:
            continue
        for _, cousin_id in uncle_or_aunt.neighbors((RelationKind.SON, RelationKind.DAUGHTER)):
            cousin = members.get(cousin_id)
            if cousin is not None and _unrelated(cousin, child):
                yield Suggestion(cousin_id, child.id, RelationKind.COUSIN)

    slot = RelationKind.parent_for(child.gender)
    for _, grandchild_id in parent.neighbors((RelationKind.GRANDSON, RelationKind.GRANDDAUGHTER)):
        grandchild = members.get(grandchild_id)
        if grandchild is None or not _unrelated(grandchild, child):
            continue
        if _has_room(grandchild, slot):
            yield Suggestion(child.id, grandchild_id, slot)


def after_grandparent_link(
    members: Mapping[str, Member], grandparent: Member, grandchild: Member
) -> Iterator[Suggestion]:
    """
    Suggestions after `grandparent` became a grandparent of `grandchild`.

    - The grandchild's parents as the grandparent's children, and the other way round.
    - The grandchild's cousins as further grandchildren.
    - Marriage between two unmarried grandparents of opposite genders.
    - The grandparent's other grandchildren as cousins.
    """
    parent_slot = RelationKind.parent_for(grandparent.gender)
    for _, parent_id in grandchild.neighbors((RelationKind.FATHER, RelationKind.MOTHER)):
        parent = members.get(parent_id)
        if parent is not None and _unrelated(parent, grandparent) and _has_room(parent, parent_slot):
            yield Suggestion(grandparent.id, parent_id, parent_slot)

    for _, child_id in grandparent.neighbors((RelationKind.SON, RelationKind.DAUGHTER)):
        child = members.get(child_id)
        if child is None or not _unrelated(child, grandchild):
            continue
        if _has_room(grandchild, RelationKind.parent_for(child.gender)):
            yield Suggestion(grandchild.id, child_id, RelationKind.child_for(grandchild.gender))

    grandparent_slot = RelationKind.grandparent_for(grandparent.gender)
    for _, cousin_id in grandchild.neighbors((RelationKind.COUSIN,)):
        cousin = members.get(cousin_id)
        if cousin is not None and _unrelated(cousin, grandparent) and _has_room(cousin, grandparent_slot):
            yield Suggestion(grandparent.id, cousin_id, grandparent_slot)

    for _, other_id in grandchild.neighbors((RelationKind.GRANDFATHER, RelationKind.GRANDMOTHER)):
        other = members.get(other_id)
        if other is None or other.id == grandparent.id or other.gender == grandparent.gender:
            continue
        if grandparent.count(RelationKind.SPOUSE) or other.count(RelationKind.SPOUSE):
            continue
        yield Suggestion(grandparent.id, other_id, RelationKind.SPOUSE)

    for _, other_id in grandparent.neighbors((RelationKind.GRANDSON, RelationKind.GRANDDAUGHTER)):
        other = members.get(other_id)
        if other is not None and _unrelated(other, grandchild):
            yield Suggestion(other_id, grandchild.id, RelationKind.COUSIN)


def after_cousin_link(members: Mapping[str, Member], cousin: Member, other: Member) -> Iterator[Suggestion]:
    """`cousin`'s grandparents and other cousins are suggested for `other` too."""
    for kind in (RelationKind.GRANDFATHER, RelationKind.GRANDMOTHER):
        for grandparent_id in sorted(cousin.relations.get(kind, ())):
            grandparent = members.get(grandparent_id)
            if grandparent is not None and _unrelated(grandparent, other) and _has_room(other, kind):
                yield Suggestion(grandparent_id, other.id, kind)

    for _, cousin_id in cousin.neighbors((RelationKind.COUSIN,)):
        another = members.get(cousin_id)
        if another is not None and _unrelated(another, other):
            yield Suggestion(cousin_id, other.id, RelationKind.COUSIN)
