"""Relationship kinds and the gender/cardinality rules attached to them."""

from enum import Enum


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"

    @property
    def opposite(self) -> "Gender":
        return Gender.FEMALE if self is Gender.MALE else Gender.MALE


class MemberType(str, Enum):
    YESHIVA = "Yeshiva"
    NON_YESHIVA = "NonYeshiva"


# Unbounded cardinality
MANY: int | None = None


class RelationKind(str, Enum):
    """
    Kind of a typed edge, read as "<other member> is the <kind> of <holder>".

    Declaration order is significant: traversal expands neighbours in this
    order, which makes shortest paths deterministic. The first five kinds are
    direct links (parent, child, spouse); the rest are derived relations that
    the tree fills in as direct links are added.
    """

    FATHER = "FATHER"
    MOTHER = "MOTHER"
    SON = "SON"
    DAUGHTER = "DAUGHTER"
    SPOUSE = "SPOUSE"
    GRANDFATHER = "GRANDFATHER"
    GRANDMOTHER = "GRANDMOTHER"
    GRANDSON = "GRANDSON"
    GRANDDAUGHTER = "GRANDDAUGHTER"
    SIBLING = "SIBLING"
    COUSIN = "COUSIN"

    @property
    def required_gender(self) -> Gender | None:
        return _REQUIRED_GENDER[self]

    @property
    def max_cardinality(self) -> int | None:
        return _MAX_CARDINALITY[self]

    @property
    def is_parent(self) -> bool:
        return self in (RelationKind.FATHER, RelationKind.MOTHER)

    @property
    def is_child(self) -> bool:
        return self in (RelationKind.SON, RelationKind.DAUGHTER)

    @property
    def is_grandparent(self) -> bool:
        return self in (RelationKind.GRANDFATHER, RelationKind.GRANDMOTHER)

    @property
    def is_grandchild(self) -> bool:
        return self in (RelationKind.GRANDSON, RelationKind.GRANDDAUGHTER)

    @property
    def is_direct(self) -> bool:
        """Parent, child and spouse links. Only these hold the tree together."""
        return self in DIRECT_KINDS

    @property
    def sort_index(self) -> int:
        return _ORDER.index(self)

    def inverse(self, gender: Gender) -> "RelationKind":
        """
        Mirror kind stored on the other endpoint.

        Args:
            gender: Gender of the member the mirror entry points at.

        Example: if A is the FATHER of B, then B is the SON or DAUGHTER of A
        depending on B's gender, so `FATHER.inverse(B.gender)`.
        """
        if self.is_parent:
            return RelationKind.child_for(gender)
        if self.is_child:
            return RelationKind.parent_for(gender)
        if self.is_grandparent:
            return RelationKind.grandchild_for(gender)
        if self.is_grandchild:
            return RelationKind.grandparent_for(gender)
        # SPOUSE, SIBLING and COUSIN are symmetric
        return self

    def allows(self, gender: Gender) -> bool:
        required = self.required_gender
        return required is None or required == gender

    def display_as_connection(self, gender: Gender | None = None) -> str:
        """Phrase used when describing a connection, e.g. 'father of'."""
        if self is RelationKind.SPOUSE:
            if gender is None:
                return "spouse of"
            return "husband of" if gender == Gender.MALE else "wife of"
        if self is RelationKind.SIBLING:
            if gender is None:
                return "sibling of"
            return "brother of" if gender == Gender.MALE else "sister of"
        return f"{self.value.lower()} of"

    @staticmethod
    def parent_for(gender: Gender) -> "RelationKind":
        return RelationKind.FATHER if gender == Gender.MALE else RelationKind.MOTHER

    @staticmethod
    def child_for(gender: Gender) -> "RelationKind":
        return RelationKind.SON if gender == Gender.MALE else RelationKind.DAUGHTER

    @staticmethod
    def grandparent_for(gender: Gender) -> "RelationKind":
        return RelationKind.GRANDFATHER if gender == Gender.MALE else RelationKind.GRANDMOTHER

    @staticmethod
    def grandchild_for(gender: Gender) -> "RelationKind":
        return RelationKind.GRANDSON if gender == Gender.MALE else RelationKind.GRANDDAUGHTER


_ORDER = list(RelationKind)

DIRECT_KINDS = (
    RelationKind.FATHER,
    RelationKind.MOTHER,
    RelationKind.SON,
    RelationKind.DAUGHTER,
    RelationKind.SPOUSE,
)

_REQUIRED_GENDER = {
    RelationKind.FATHER: Gender.MALE,
    RelationKind.MOTHER: Gender.FEMALE,
    RelationKind.SON: Gender.MALE,
    RelationKind.DAUGHTER: Gender.FEMALE,
    RelationKind.SPOUSE: None,
    RelationKind.GRANDFATHER: Gender.MALE,
    RelationKind.GRANDMOTHER: Gender.FEMALE,
    RelationKind.GRANDSON: Gender.MALE,
    RelationKind.GRANDDAUGHTER: Gender.FEMALE,
    RelationKind.SIBLING: None,
    RelationKind.COUSIN: None,
}

# Paternal and maternal side each contribute one grandparent of each gender
_MAX_CARDINALITY = {
    RelationKind.FATHER: 1,
    RelationKind.MOTHER: 1,
    RelationKind.SON: MANY,
    RelationKind.DAUGHTER: MANY,
    RelationKind.SPOUSE: 1,
    RelationKind.GRANDFATHER: 2,
    RelationKind.GRANDMOTHER: 2,
    RelationKind.GRANDSON: MANY,
    RelationKind.GRANDDAUGHTER: MANY,
    RelationKind.SIBLING: MANY,
    RelationKind.COUSIN: MANY,
}
