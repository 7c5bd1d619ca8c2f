"""Store: tables, id assignment, merge semantics, sessions and pagination."""

import threading
from dataclasses import dataclass
from datetime import datetime

import pytest

from marketplace.db.store import DataStore, DuplicateRecordError, SessionTable, Table, paginate


@dataclass
class Row:
    id: int
    name: str
    created_at: datetime
    updated_at: datetime


def _insert(table, name):
    return table.insert(lambda new_id, now: Row(new_id, name, now, now))


def test_ids_start_at_one_and_increase():
    table = Table("rows")
    ids = [_insert(table, n).id for n in ("a", "b", "c")]
    assert ids == [1, 2, 3]


def test_ids_are_not_reused_after_delete():
    table = Table("rows")
    _insert(table, "a")
    second = _insert(table, "b")
    assert table.delete(second.id)
    assert _insert(table, "c").id == 3


def test_get_missing_returns_none():
    assert Table("rows").get(42) is None


def test_update_merges_fields_and_restamps():
    table = Table("rows")
    row = _insert(table, "old")
    updated = table.update(row.id, name="new")
    assert updated.name == "new"
    assert updated.created_at == row.created_at
    assert updated.updated_at >= row.updated_at
    assert table.get(row.id).name == "new"
    # the earlier snapshot is left untouched
    assert row.name == "old"


def test_update_missing_returns_none():
    assert Table("rows").update(9, name="x") is None


def test_delete_reports_hit_and_miss():
    table = Table("rows")
    row = _insert(table, "a")
    assert table.delete(row.id) is True
    assert table.delete(row.id) is False
    assert len(table) == 0


def test_select_ands_predicates_in_insertion_order():
    table = Table("rows")
    for name in ("apple", "avocado", "banana", "apricot"):
        _insert(table, name)
    rows = table.select(lambda r: r.name.startswith("a"), lambda r: "o" in r.name)
    assert [r.name for r in rows] == ["avocado", "apricot"]


def test_delete_where_counts_removed():
    table = Table("rows")
    for name in ("a", "b", "a"):
        _insert(table, name)
    assert table.delete_where(lambda r: r.name == "a") == 2
    assert [r.name for r in table.select()] == ["b"]


def test_concurrent_inserts_get_unique_ids():
    table = Table("rows")

    def worker():
        for _ in range(200):
            _insert(table, "x")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ids = [r.id for r in table.select()]
    assert len(ids) == 1600
    assert len(set(ids)) == 1600



def test_insert_refuses_record_matching_unique_predicate():
    table = Table("rows")
    _insert(table, "taken")
    with pytest.raises(DuplicateRecordError):
        table.insert(lambda new_id, now: Row(new_id, "taken", now, now), unique=lambda r: r.name == "taken")
    assert len(table) == 1
    # the refused insert consumed no id
    assert _insert(table, "free").id == 2


def test_update_unique_predicate_ignores_the_record_itself():
    table = Table("rows")
    first = _insert(table, "a")
    second = _insert(table, "b")
    same_name = lambda r: r.name == "a"  # noqa: E731
    assert table.update(first.id, unique=same_name, name="a").name == "a"
    with pytest.raises(DuplicateRecordError):
        table.update(second.id, unique=same_name, name="a")
    assert table.get(second.id).name == "b"


def test_concurrent_unique_inserts_admit_one():
    table = Table("rows")
    barrier = threading.Barrier(8)
    outcomes = []

    def worker():
        barrier.wait()
        try:
            table.insert(lambda new_id, now: Row(new_id, "same", now, now), unique=lambda r: r.name == "same")
            outcomes.append("ok")
        except DuplicateRecordError:
            outcomes.append("duplicate")

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(outcomes) == ["duplicate"] * 7 + ["ok"]
    assert len(table) == 1

def test_session_table_tracks_tokens_per_user():
    sessions = SessionTable()
    sessions.add("t1", 1)
    sessions.add("t2", 1)
    sessions.add("t3", 2)
    assert sessions.contains("t1")
    assert sessions.remove("t1") is True
    assert sessions.remove("t1") is False
    assert sessions.remove_for_user(1) == 1
    assert len(sessions) == 1


def test_fresh_stores_are_independent():
    first, second = DataStore(), DataStore()
    assert first.users is not second.users
    assert len(first.users) == len(second.users) == 0


@pytest.mark.parametrize("total,limit,pages", [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 4, 7)])
def test_page_count_is_ceiling(total, limit, pages):
    assert paginate(range(total), 1, limit).pages == pages


def test_middle_page_slice_and_flags():
    page = paginate(range(25), 2, 10)
    assert page.items == list(range(10, 20))
    assert page.total == 25
    assert page.current_page == 2
    assert page.has_next_page is True
    assert page.has_previous_page is True


def test_last_page_has_no_next():
    page = paginate(range(25), 3, 10)
    assert page.items == list(range(20, 25))
    assert page.has_next_page is False


def test_page_beyond_range_is_empty_not_error():
    page = paginate(range(5), 4, 2)
    assert page.items == []
    assert page.pages == 3
    assert page.has_next_page is False
    assert page.has_previous_page is True
