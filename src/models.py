"""Data classes for family tree entities."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any
import uuid

from relations import Gender, MemberType, RelationKind


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(eq=False)
class Member:
    """
    One person in the family tree.

    `relations` maps a kind to the ids of the members holding that role for
    this member: `relations[RelationKind.FATHER] == {"a"}` means a is this
    member's father. Cardinality is enforced by the validator, not here.
    Members compare by id.
    """

    first_name: str
    last_name: str
    gender: Gender
    member_type: MemberType = MemberType.NON_YESHIVA
    machzor: int | None = None  # 0 for yeshiva staff and rabbis who were not students
    is_rabbi: bool = False
    is_yeshiva_rabbi: bool = False
    is_admin: bool = False
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None  # ISO format YYYY-MM-DD or None
    id: str = field(default_factory=_new_id)
    relations: dict[RelationKind, set[str]] = field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Member):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def related_ids(self, kind: RelationKind) -> set[str]:
        """Ids holding `kind` for this member (a copy)."""
        return set(self.relations.get(kind, ()))

    def count(self, kind: RelationKind) -> int:
        return len(self.relations.get(kind, ()))

    def neighbors(self, kinds: Iterable[RelationKind] | None = None) -> Iterator[tuple[RelationKind, str]]:
        """Yield (kind, id) pairs in relation-kind order, then id order, optionally limited to `kinds`."""
        for kind in RelationKind if kinds is None else kinds:
            for other_id in sorted(self.relations.get(kind, ())):
                yield kind, other_id

    def neighbor_ids(self) -> set[str]:
        return {other_id for ids in self.relations.values() for other_id in ids}

    def relation_to(self, other_id: str) -> RelationKind | None:
        """What `other_id` is to this member, or None if they are not directly related."""
        for kind, neighbor in self.neighbors():
            if neighbor == other_id:
                return kind
        return None

    def add_relation(self, kind: RelationKind, other_id: str) -> None:
        self.relations.setdefault(kind, set()).add(other_id)

    def remove_relation(self, kind: RelationKind, other_id: str) -> bool:
        ids = self.relations.get(kind)
        if not ids or other_id not in ids:
            return False
        ids.discard(other_id)
        if not ids:
            del self.relations[kind]
        return True

    def remove_all_relations_to(self, other_id: str) -> list[RelationKind]:
        """Drop every entry pointing at `other_id`. Returns the kinds removed."""
        removed = [kind for kind, ids in self.relations.items() if other_id in ids]
        for kind in removed:
            self.remove_relation(kind, other_id)
        return removed

    def update_details(self, updated: "Member") -> None:
        """Copy editable attributes from `updated`. Id, gender and relations are kept."""
        self.first_name = updated.first_name
        self.last_name = updated.last_name
        self.member_type = updated.member_type
        self.machzor = updated.machzor
        self.is_rabbi = updated.is_rabbi
        self.is_yeshiva_rabbi = updated.is_yeshiva_rabbi
        self.is_admin = updated.is_admin
        self.birth_date = updated.birth_date
        self.death_date = updated.death_date

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "gender": self.gender.value,
            "member_type": self.member_type.value,
            "machzor": self.machzor,
            "is_rabbi": self.is_rabbi,
            "is_yeshiva_rabbi": self.is_yeshiva_rabbi,
            "is_admin": self.is_admin,
            "birth_date": self.birth_date,
            "death_date": self.death_date,
            "relations": {
                kind.value: sorted(self.relations[kind])
                for kind in RelationKind
                if self.relations.get(kind)
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Member":
        relations = {
            RelationKind(kind): set(ids) for kind, ids in (data.get("relations") or {}).items()
        }
        return cls(
            id=data["id"],
            first_name=data["first_name"],
            last_name=data["last_name"],
            gender=Gender(data["gender"]),
            member_type=MemberType(data.get("member_type", MemberType.NON_YESHIVA.value)),
            machzor=data.get("machzor"),
            is_rabbi=bool(data.get("is_rabbi", False)),
            is_yeshiva_rabbi=bool(data.get("is_yeshiva_rabbi", False)),
            is_admin=bool(data.get("is_admin", False)),
            birth_date=data.get("birth_date"),
            death_date=data.get("death_date"),
            relations={kind: ids for kind, ids in relations.items() if ids},
        )


@dataclass(frozen=True)
class PathStep:
    """One hop of a connection path. `relation` is what `member` is to the previous step."""

    member: Member
    relation: RelationKind | None


@dataclass(frozen=True)
class ConnectionPath:
    steps: tuple[PathStep, ...]

    def __len__(self) -> int:
        # Number of edges
        return max(len(self.steps) - 1, 0)

    @property
    def members(self) -> list[Member]:
        return [step.member for step in self.steps]

    @property
    def member_ids(self) -> list[str]:
        return [step.member.id for step in self.steps]

    def describe(self) -> list[str]:
        """Readable hops such as 'Dan Cohen is son of Avi Cohen'."""
        lines = []
        for previous, step in zip(self.steps, self.steps[1:]):
            phrase = step.relation.display_as_connection(step.member.gender)
            lines.append(f"{step.member.full_name} is {phrase} {previous.member.full_name}")
        return lines


@dataclass(frozen=True)
class Suggestion:
    """A follow-up edge worth offering to the user: source is the `relation` of target."""

    source_id: str
    target_id: str
    relation: RelationKind
