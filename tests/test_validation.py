"""Tests for relationship validation and tree audits."""

from conftest import adjacency, make_member
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
)
from relations import Gender, RelationKind
from validation import audit_lineage, audit_tree, valid_relation_options, validate_relationship


class TestGenderRule:
    def test_female_father_is_rejected_for_any_target(self, chain):
        sarah = make_member("s", "Sarah", Gender.FEMALE)
        for target_id in ("a", "e"):
            verdict = validate_relationship(chain, sarah, chain[target_id], RelationKind.FATHER)
            assert isinstance(verdict, Reject)
            assert verdict.reason == GenderMismatch(RelationKind.FATHER, "s", target_id)

    def test_male_daughter_is_rejected(self, chain):
        levi = make_member("l", "Levi", Gender.MALE)
        verdict = validate_relationship(chain, levi, chain["c"], RelationKind.DAUGHTER)
        assert isinstance(verdict.reason, GenderMismatch)

    def test_female_father_of_a_relative_is_a_gender_mismatch(self, chain):
        # d is already c's wife; the gender rule still decides
        verdict = validate_relationship(chain, chain["d"], chain["c"], RelationKind.FATHER)
        assert verdict.reason == GenderMismatch(RelationKind.FATHER, "d", "c")

    def test_female_father_of_herself_is_a_gender_mismatch(self, chain):
        verdict = validate_relationship(chain, chain["d"], chain["d"], RelationKind.FATHER)
        assert verdict.reason == GenderMismatch(RelationKind.FATHER, "d", "d")

    def test_gender_is_checked_before_cardinality(self, chain):
        sarah = make_member("s", "Sarah", Gender.FEMALE)
        # b already has a father, but the gender check comes first
        verdict = validate_relationship(chain, sarah, chain["b"], RelationKind.FATHER)
        assert isinstance(verdict.reason, GenderMismatch)


class TestCardinalityRule:
    def test_second_father_is_rejected(self, chain):
        yaakov = make_member("y", "Yaakov", Gender.MALE)
        verdict = validate_relationship(chain, yaakov, chain["b"], RelationKind.FATHER)
        assert verdict.reason == CardinalityExceeded(RelationKind.FATHER, "b", ("a",))

    def test_second_son_is_accepted(self, chain):
        yaakov = make_member("y", "Yaakov", Gender.MALE)
        verdict = validate_relationship(chain, yaakov, chain["a"], RelationKind.SON)
        assert verdict == Accept()

    def test_son_of_member_with_a_father_already(self, chain):
        # c becoming the son of e would give c a second father
        verdict = validate_relationship(chain, chain["c"], chain["e"], RelationKind.SON)
        assert verdict.reason == CardinalityExceeded(RelationKind.FATHER, "c", ("b",))

    def test_married_member_cannot_take_another_spouse(self, chain):
        rivka = make_member("r", "Rivka", Gender.FEMALE)
        verdict = validate_relationship(chain, rivka, chain["c"], RelationKind.SPOUSE)
        assert verdict.reason == CardinalityExceeded(RelationKind.SPOUSE, "c", ("d",))


class TestSpouseRule:
    def test_same_gender_spouse_is_rejected(self, chain):
        levi = make_member("l", "Levi", Gender.MALE)
        verdict = validate_relationship(chain, levi, chain["e"], RelationKind.SPOUSE)
        assert verdict.reason == SameSexMarriage("l", "e")

    def test_opposite_gender_unmarried_is_accepted(self, chain):
        rivka = make_member("r", "Rivka", Gender.FEMALE)
        assert validate_relationship(chain, rivka, chain["e"], RelationKind.SPOUSE) == Accept()


class TestPreconditions:
    def test_unknown_target(self, chain):
        ghost = make_member("g", "Ghost", Gender.MALE)
        rivka = make_member("r", "Rivka", Gender.FEMALE)
        verdict = validate_relationship(chain, rivka, ghost, RelationKind.SPOUSE)
        assert verdict.reason == MemberNotFound("g")

    def test_same_member(self, chain):
        verdict = validate_relationship(chain, chain["e"], chain["e"], RelationKind.SPOUSE)
        assert verdict.reason == SameMember("e")

    def test_already_related(self, chain):
        verdict = validate_relationship(chain, chain["a"], chain["b"], RelationKind.FATHER)
        assert verdict.reason == AlreadyRelated("a", "b", RelationKind.FATHER)

    def test_descendant_cannot_become_ancestor(self, chain_tree):
        # g is a's great-grandson and has no derived relation to a
        g = make_member("g", "Gavriel", Gender.MALE)
        assert chain_tree.add_member(g, chain_tree.get_member("c"), RelationKind.SON).ok
        members = chain_tree.members

        verdict = validate_relationship(members, g, members["a"], RelationKind.FATHER)
        assert verdict.reason == AncestryCycle("g", "a")
        verdict = validate_relationship(members, g, members["a"], RelationKind.GRANDFATHER)
        assert verdict.reason == AncestryCycle("g", "a")

    def test_derived_relation_counts_as_already_related(self, chain):
        # a became c's grandfather when c was added as b's son
        verdict = validate_relationship(chain, chain["c"], chain["a"], RelationKind.FATHER)
        assert verdict.reason == AlreadyRelated("c", "a", RelationKind.GRANDSON)

    def test_new_member_needs_a_direct_link(self, chain):
        rivka = make_member("r", "Rivka", Gender.FEMALE)
        verdict = validate_relationship(chain, rivka, chain["e"], RelationKind.COUSIN)
        assert verdict.reason == NeedsDirectLink(RelationKind.COUSIN)

    def test_derived_kind_between_existing_members(self, chain):
        verdict = validate_relationship(chain, chain["e"], chain["a"], RelationKind.COUSIN)
        assert verdict == Accept()


class TestDuplicateName:
    def test_same_full_name_is_an_overridable_warning(self, chain):
        twin = make_member("t", "Avraham", Gender.MALE)
        verdict = validate_relationship(chain, twin, chain["e"], RelationKind.SON)
        assert isinstance(verdict, Reject)
        assert verdict.overridable
        assert verdict.reason == PossibleDuplicate("a", "Avraham Cohen")

    def test_hard_rejections_are_not_overridable(self, chain):
        sarah = make_member("s", "Sarah", Gender.FEMALE)
        verdict = validate_relationship(chain, sarah, chain["a"], RelationKind.FATHER)
        assert not verdict.overridable


class TestPurity:
    def test_validation_is_deterministic_and_does_not_mutate(self, chain):
        before = adjacency(chain)
        yaakov = make_member("y", "Yaakov", Gender.MALE)
        first = validate_relationship(chain, yaakov, chain["b"], RelationKind.FATHER)
        second = validate_relationship(chain, yaakov, chain["b"], RelationKind.FATHER)
        assert first == second
        assert adjacency(chain) == before
        assert "y" not in chain
        assert yaakov.relations == {}


class TestRelationOptions:
    def test_full_slots_are_dropped(self, chain):
        options = valid_relation_options(chain, chain["b"])
        assert RelationKind.FATHER not in options
        assert RelationKind.MOTHER in options
        assert RelationKind.SON in options

    def test_married_member_has_no_spouse_option(self, chain):
        assert RelationKind.SPOUSE not in valid_relation_options(chain, chain["c"])


class TestAuditTree:
    def test_consistent_tree_has_no_warnings(self, chain):
        assert audit_tree(chain) == []

    def test_missing_mirror_is_reported(self, chain):
        chain["e"].remove_relation(RelationKind.MOTHER, "d")
        warnings = audit_tree(chain)
        assert any("Missing mirror" in w for w in warnings)

    def test_split_tree_is_reported(self, chain):
        chain["c"].remove_relation(RelationKind.SPOUSE, "d")
        chain["d"].remove_relation(RelationKind.SPOUSE, "c")
        warnings = audit_tree(chain)
        assert any("split into 2 parts" in w for w in warnings)

    def test_dates_are_checked(self, chain):
        chain["a"].birth_date = "1950-01-01"
        chain["b"].birth_date = "1940-01-01"
        chain["e"].birth_date = "2000-05-05"
        chain["e"].death_date = "1999-01-01"
        warnings = audit_tree(chain)
        assert any("born before parent" in w for w in warnings)
        assert any("died before being born" in w for w in warnings)


class TestAuditLineage:
    def test_parent_cycle_is_reported(self, chain):
        chain["a"].add_relation(RelationKind.FATHER, "c")
        chain["c"].add_relation(RelationKind.SON, "a")
        warnings = audit_lineage(chain)
        assert any("Cycle detected" in w for w in warnings)

    def test_young_parent_is_suspicious(self, chain):
        chain["d"].birth_date = "1990-03-01"
        chain["e"].birth_date = "1998-07-01"
        assert audit_lineage(chain) == [
            "Suspicious: Dina Levi was less than 12 years old when Eli Cohen was born"
        ]

    def test_members_without_dates_are_skipped(self, chain):
        assert audit_lineage(chain) == []
