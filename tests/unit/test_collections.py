"""
Unit tests for the generic collection CRUD engine.
"""
import pytest

from docstore.errors import CollectionNotFoundError, RecordNotFoundError
from docstore.services.collections import (
    coerce_id,
    delete_record,
    get_record,
    insert_record,
    list_records,
    merge_record,
    next_id,
    replace_record,
)


@pytest.fixture
def tree():
    return {
        "users": [
            {"id": 1, "name": "Ada", "email": "ada@example.com"},
            {"id": 2, "name": "Linus"},
        ],
        "empty": [],
        "settings": {"theme": "dark"},
    }


@pytest.mark.unit
class TestReads:
    def test_list_records(self, tree):
        assert list_records(tree, "users") == tree["users"]

    def test_list_empty_collection(self, tree):
        assert list_records(tree, "empty") == []

    def test_list_unknown_collection(self, tree):
        with pytest.raises(CollectionNotFoundError, match="ghosts"):
            list_records(tree, "ghosts")

    def test_non_list_key_is_not_a_collection(self, tree):
        with pytest.raises(CollectionNotFoundError):
            list_records(tree, "settings")

    @pytest.mark.parametrize("record_id", [2, "2", "02", " 2", "2.0"])
    def test_get_with_loose_id(self, tree, record_id):
        assert get_record(tree, "users", record_id)["name"] == "Linus"

    def test_get_matches_string_ids(self):
        # unannotated XML documents carry ids as strings
        tree = {"users": [{"id": "7", "name": "Grace"}]}

        assert get_record(tree, "users", 7)["name"] == "Grace"

    def test_get_missing_record(self, tree):
        with pytest.raises(RecordNotFoundError):
            get_record(tree, "users", 99)

    def test_get_non_numeric_id(self, tree):
        with pytest.raises(RecordNotFoundError):
            get_record(tree, "users", "abc")

    def test_get_unknown_collection(self, tree):
        with pytest.raises(CollectionNotFoundError):
            get_record(tree, "ghosts", 1)


@pytest.mark.unit
class TestInsert:
    def test_ids_count_up_from_one(self, tree):
        created = [insert_record(tree, "empty", {"n": n}) for n in range(3)]

        assert [r["id"] for r in created] == [1, 2, 3]
        assert tree["empty"] == created

    def test_next_id_never_reuses_a_gap(self, tree):
        for n in range(3):
            insert_record(tree, "empty", {"n": n})
        delete_record(tree, "empty", 2)

        record = insert_record(tree, "empty", {"n": "again"})

        assert record["id"] == 4

    def test_deleting_everything_resets_numbering(self, tree):
        delete_record(tree, "users", 1)
        delete_record(tree, "users", 2)

        assert insert_record(tree, "users", {"name": "Grace"})["id"] == 1

    def test_payload_id_is_overwritten(self, tree):
        record = insert_record(tree, "users", {"id": 1, "name": "Grace"})

        assert record == {"id": 3, "name": "Grace"}

    def test_insert_does_not_alias_payload(self, tree):
        payload = {"name": "Grace"}

        record = insert_record(tree, "users", payload)

        assert "id" not in payload
        assert record is tree["users"][-1]

    def test_next_id_skips_unusable_ids(self):
        assert next_id([{"id": "4"}, {"id": None}, {"name": "x"}, {"id": "abc"}]) == 5

    def test_insert_into_unknown_collection(self, tree):
        with pytest.raises(CollectionNotFoundError):
            insert_record(tree, "ghosts", {"name": "Boo"})


@pytest.mark.unit
class TestReplaceMergeDelete:
    @pytest.fixture
    def record_tree(self):
        return {"items": [{"id": 1, "a": 1, "b": 2}]}

    def test_replace_discards_old_fields(self, record_tree):
        record = replace_record(record_tree, "items", "1", {"a": 9})

        assert record == {"id": 1, "a": 9}
        assert record_tree["items"] == [{"id": 1, "a": 9}]

    def test_merge_keeps_old_fields(self, record_tree):
        record = merge_record(record_tree, "items", "1", {"a": 9})

        assert record == {"id": 1, "a": 9, "b": 2}

    def test_path_id_wins_over_payload_id(self, record_tree):
        assert replace_record(record_tree, "items", "1", {"id": 5})["id"] == 1
        assert merge_record(record_tree, "items", "1", {"id": 5})["id"] == 1

    @pytest.mark.parametrize("operation", [
        lambda t: replace_record(t, "items", 42, {"a": 1}),
        lambda t: merge_record(t, "items", 42, {"a": 1}),
        lambda t: delete_record(t, "items", 42),
        lambda t: get_record(t, "items", 42),
    ])
    def test_missing_record(self, record_tree, operation):
        with pytest.raises(RecordNotFoundError):
            operation(record_tree)

        assert record_tree == {"items": [{"id": 1, "a": 1, "b": 2}]}

    def test_delete_returns_removed_record(self, tree):
        removed = delete_record(tree, "users", "1")

        assert removed["name"] == "Ada"
        assert [u["id"] for u in tree["users"]] == [2]

    @pytest.mark.parametrize("raw,expected", [("3", 3), (" 12 ", 12), (7, 7), ("abc", "abc")])
    def test_coerce_id(self, raw, expected):
        assert coerce_id(raw) == expected
