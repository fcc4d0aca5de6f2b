"""Tests for SQLite storage of the member collection."""

import pytest

from database import create_database, load_members, save_changes, store_members
from relations import MemberType, RelationKind
from tree import FamilyTree


@pytest.fixture
def conn(tmp_path):
    connection = create_database(tmp_path / "family_tree.db")
    yield connection
    connection.close()


class TestStoreAndLoad:
    def test_round_trip(self, conn, chain):
        chain["a"].member_type = MemberType.YESHIVA
        chain["a"].machzor = 3
        chain["a"].is_yeshiva_rabbi = True
        store_members(conn, chain)

        loaded = load_members(conn)
        assert set(loaded) == set(chain)
        for member_id, member in chain.items():
            assert loaded[member_id].to_dict() == member.to_dict()

    def test_empty_database(self, conn):
        assert load_members(conn) == {}

    def test_unknown_relation_rows_are_skipped(self, conn, chain):
        store_members(conn, chain)
        conn.execute("INSERT INTO relation VALUES ('a', 'e', 'UNCLE')")
        conn.commit()
        loaded = load_members(conn)
        assert loaded["a"].relation_to("e") is None


class TestSaveChanges:
    def test_saves_additions_and_deletions(self, conn, chain_tree):
        save_changes(conn, chain_tree)
        assert chain_tree.modified_ids == set()

        assert chain_tree.remove_member("e").ok
        save_changes(conn, chain_tree)
        assert chain_tree.deleted_ids == set()

        reloaded = FamilyTree(load_members(conn))
        assert "e" not in reloaded
        assert reloaded.get_member("d").related_ids(RelationKind.SON) == set()
        assert reloaded.is_tree_connected()
        count = conn.execute("SELECT COUNT(*) FROM relation WHERE member_id = 'e' OR other_id = 'e'")
        assert count.fetchone()[0] == 0
