"""Tests for relation kind metadata."""

from relations import DIRECT_KINDS, Gender, RelationKind


class TestRelationKind:
    def test_required_gender(self):
        assert RelationKind.FATHER.required_gender == Gender.MALE
        assert RelationKind.DAUGHTER.required_gender == Gender.FEMALE
        assert RelationKind.SPOUSE.required_gender is None

    def test_max_cardinality(self):
        assert RelationKind.FATHER.max_cardinality == 1
        assert RelationKind.MOTHER.max_cardinality == 1
        assert RelationKind.SPOUSE.max_cardinality == 1
        assert RelationKind.SON.max_cardinality is None
        assert RelationKind.DAUGHTER.max_cardinality is None

    def test_inverse_depends_on_gender(self):
        assert RelationKind.FATHER.inverse(Gender.MALE) is RelationKind.SON
        assert RelationKind.MOTHER.inverse(Gender.FEMALE) is RelationKind.DAUGHTER
        assert RelationKind.SON.inverse(Gender.FEMALE) is RelationKind.MOTHER
        assert RelationKind.SPOUSE.inverse(Gender.MALE) is RelationKind.SPOUSE

    def test_enumeration_order(self):
        assert [k.sort_index for k in RelationKind] == list(range(11))
        assert list(RelationKind)[0] is RelationKind.FATHER
        # Direct links come before derived relations
        assert list(RelationKind)[:5] == list(DIRECT_KINDS)

    def test_display_as_connection(self):
        assert RelationKind.SON.display_as_connection() == "son of"
        assert RelationKind.SPOUSE.display_as_connection(Gender.FEMALE) == "wife of"
        assert RelationKind.SPOUSE.display_as_connection(Gender.MALE) == "husband of"

    def test_gender_opposite(self):
        assert Gender.MALE.opposite is Gender.FEMALE


class TestDerivedKinds:
    def test_grandparent_metadata(self):
        assert RelationKind.GRANDMOTHER.required_gender == Gender.FEMALE
        assert RelationKind.GRANDSON.required_gender == Gender.MALE
        assert RelationKind.GRANDFATHER.max_cardinality == 2
        assert RelationKind.GRANDDAUGHTER.max_cardinality is None

    def test_inverse(self):
        assert RelationKind.GRANDFATHER.inverse(Gender.FEMALE) is RelationKind.GRANDDAUGHTER
        assert RelationKind.GRANDSON.inverse(Gender.FEMALE) is RelationKind.GRANDMOTHER
        assert RelationKind.SIBLING.inverse(Gender.MALE) is RelationKind.SIBLING
        assert RelationKind.COUSIN.inverse(Gender.FEMALE) is RelationKind.COUSIN

    def test_only_parent_child_and_spouse_are_direct(self):
        assert RelationKind.SPOUSE.is_direct
        assert RelationKind.DAUGHTER.is_direct
        assert not RelationKind.SIBLING.is_direct
        assert not RelationKind.GRANDFATHER.is_direct

    def test_sibling_display(self):
        assert RelationKind.SIBLING.display_as_connection(Gender.FEMALE) == "sister of"
        assert RelationKind.SIBLING.display_as_connection(Gender.MALE) == "brother of"
        assert RelationKind.GRANDMOTHER.display_as_connection() == "grandmother of"
