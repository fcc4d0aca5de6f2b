"""
Result values returned by validation, deletion and path queries.

Rejections are ordinary return values, not exceptions: callers inspect
`Reject.reason` and turn it into whatever message they show the user.
"""

from dataclasses import dataclass

from relations import RelationKind


class Reason:
    """Base class for rejection reasons."""

    @property
    def message(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class MemberNotFound(Reason):
    member_id: str

    @property
    def message(self) -> str:
        return f"Member {self.member_id} is not in the family tree"


@dataclass(frozen=True)
class SameMember(Reason):
    member_id: str

    @property
    def message(self) -> str:
        return "A member cannot be related to themselves"


@dataclass(frozen=True)
class AlreadyRelated(Reason):
    source_id: str
    target_id: str
    existing: RelationKind

    @property
    def message(self) -> str:
        return f"{self.source_id} is already the {self.existing.value.lower()} of {self.target_id}"


@dataclass(frozen=True)
class GenderMismatch(Reason):
    relation: RelationKind
    source_id: str
    target_id: str

    @property
    def message(self) -> str:
        return (
            f"{self.source_id} cannot be the {self.relation.value.lower()} of {self.target_id}: "
            f"a {self.relation.value.lower()} must be {self.relation.required_gender.name.lower()}"
        )


@dataclass(frozen=True)
class CardinalityExceeded(Reason):
    relation: RelationKind
    member_id: str
    existing_ids: tuple[str, ...]

    @property
    def message(self) -> str:
        return (
            f"{self.member_id} already has a {self.relation.value.lower()} "
            f"({', '.join(self.existing_ids)})"
        )


@dataclass(frozen=True)
class SameSexMarriage(Reason):
    source_id: str
    target_id: str

    @property
    def message(self) -> str:
        return "Spouses must be of opposite genders"


@dataclass(frozen=True)
class AncestryCycle(Reason):
    source_id: str
    target_id: str

    @property
    def message(self) -> str:
        return f"{self.source_id} is a descendant of {self.target_id} and cannot also be their ancestor"


@dataclass(frozen=True)
class PossibleDuplicate(Reason):
    """Warning only: the caller may override it and commit anyway."""

    existing_id: str
    full_name: str

    @property
    def message(self) -> str:
        return f"A member named {self.full_name} already exists ({self.existing_id})"


@dataclass(frozen=True)
class MustBeRelated(Reason):
    @property
    def message(self) -> str:
        return "A new member must be related to someone already in the tree"


@dataclass(frozen=True)
class NeedsDirectLink(Reason):
    relation: RelationKind

    @property
    def message(self) -> str:
        return (
            f"A new member cannot join as a {self.relation.value.lower()}: "
            "link them as a parent, child or spouse first"
        )


@dataclass(frozen=True)
class NotRelated(Reason):
    member_a: str
    member_b: str

    @property
    def message(self) -> str:
        return f"{self.member_a} and {self.member_b} are not directly related"


@dataclass(frozen=True)
class UnsafeDelete(Reason):
    member_id: str

    @property
    def message(self) -> str:
        return f"Removing {self.member_id} would split the family tree"


@dataclass(frozen=True)
class UnsafeUnlink(Reason):
    member_a: str
    member_b: str

    @property
    def message(self) -> str:
        return f"Unlinking {self.member_a} and {self.member_b} would split the family tree"


@dataclass(frozen=True)
class InsufficientMembers(Reason):
    count: int

    @property
    def message(self) -> str:
        return f"At least two members are needed, the tree has {self.count}"


@dataclass(frozen=True)
class NotFound(Reason):
    member_a: str
    member_b: str

    @property
    def message(self) -> str:
        return f"No connection between {self.member_a} and {self.member_b}"


@dataclass(frozen=True)
class Accept:
    ok = True


@dataclass(frozen=True)
class Ok:
    ok = True


@dataclass(frozen=True)
class Reject:
    reason: Reason
    ok = False

    @property
    def overridable(self) -> bool:
        return isinstance(self.reason, PossibleDuplicate)

    @property
    def message(self) -> str:
        return self.reason.message


Verdict = Accept | Reject
