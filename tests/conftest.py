"""Pytest fixtures for family tree tests."""

import pytest

from models import Member
from relations import Gender, RelationKind
from tree import FamilyTree


def make_member(member_id: str, first_name: str, gender: Gender, last_name: str = "Cohen", **kwargs) -> Member:
    return Member(first_name=first_name, last_name=last_name, gender=gender, id=member_id, **kwargs)


@pytest.fixture
def chain_tree():
    """
    Five members in a single chain:

        a --father of--> b --father of--> c ==spouse== d --mother of--> e
    """
    tree = FamilyTree()
    a = make_member("a", "Avraham", Gender.MALE)
    b = make_member("b", "Baruch", Gender.MALE)
    c = make_member("c", "Chaim", Gender.MALE)
    d = make_member("d", "Dina", Gender.FEMALE, last_name="Levi")
    e = make_member("e", "Eli", Gender.MALE)

    assert tree.add_member(a).ok
    assert tree.add_member(b, a, RelationKind.SON).ok
    assert tree.add_member(c, b, RelationKind.SON).ok
    assert tree.add_member(d, c, RelationKind.SPOUSE).ok
    assert tree.add_member(e, d, RelationKind.SON).ok
    return tree


@pytest.fixture
def chain(chain_tree):
    """The chain tree's member collection."""
    return chain_tree.members


@pytest.fixture
def couple_tree():
    """
    A married couple (f, m) with two sons (k1, k2) who have both parents.

    k2 is only linked to f; he takes k1's mother through the sibling link.
    """
    tree = FamilyTree()
    f = make_member("f", "Yosef", Gender.MALE, last_name="Katz")
    m = make_member("m", "Miriam", Gender.FEMALE, last_name="Katz")
    k1 = make_member("k1", "Moshe", Gender.MALE, last_name="Katz")
    k2 = make_member("k2", "Aharon", Gender.MALE, last_name="Katz")

    assert tree.add_member(f).ok
    assert tree.add_member(m, f, RelationKind.SPOUSE).ok
    assert tree.add_member(k1, f, RelationKind.SON).ok
    assert tree.propose_relationship(m, k1, RelationKind.MOTHER).ok
    tree.commit_relationship(m, k1, RelationKind.MOTHER)
    assert tree.add_member(k2, f, RelationKind.SON).ok
    return tree


def adjacency(members) -> dict:
    """Snapshot of every member's relations, for before/after comparisons."""
    return {
        member_id: {kind: set(ids) for kind, ids in member.relations.items()}
        for member_id, member in members.items()
    }
