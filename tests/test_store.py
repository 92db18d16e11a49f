import itertools

import pytest

from marc.errors import (
    AlreadyCompleted,
    EmptyDescription,
    EmptyPrefix,
    MultipleMatches,
    NotFound,
)
from marc.model import TodoItem
from marc.store import TodoStore, generate_hash


def _store(data_path, *items):
    return TodoStore(data_path, list(items))


def test_add_defaults_tag_and_generates_short_hex_hash(data_path):
    store = _store(data_path)
    t = store.add("  write tests  ")
    assert t.description == "write tests"
    assert t.tag == "default"
    assert t.completed is False
    assert len(t.hash) == 7
    int(t.hash, 16)
    assert store.items == [t]


def test_add_keeps_insertion_order_and_tag(data_path):
    store = _store(data_path)
    a = store.add("first", tag="work")
    b = store.add("second")
    assert [t.hash for t in store.items] == [a.hash, b.hash]
    assert a.tag == "work"


@pytest.mark.parametrize("text", ["", "   ", "\t\n"])
def test_add_rejects_blank_description(data_path, text):
    store = _store(data_path)
    with pytest.raises(EmptyDescription):
        store.add(text)
    assert store.items == []


def test_generate_hash_depends_on_timestamp():
    assert generate_hash("x", None, 1) != generate_hash("x", None, 2)
    assert generate_hash("x", "t", 1) == generate_hash("x", "t", 1)


def test_add_rerolls_on_hash_collision(data_path):
    stamps = itertools.count(42)
    taken = generate_hash("same", None, 42)
    store = _store(data_path, TodoItem(taken, "existing"))
    store.clock = lambda: next(stamps)
    t = store.add("same")
    assert t.hash != taken
    assert len({x.hash for x in store.items}) == 2


def test_add_rerolls_even_with_frozen_clock(data_path):
    store = _store(data_path)
    store.clock = lambda: 7
    hashes = {store.add("same").hash for _ in range(5)}
    assert len(hashes) == 5


def test_mark_done_by_unique_prefix(data_path):
    store = _store(data_path, TodoItem("abc1234", "one"), TodoItem("def5678", "two"))
    t = store.mark_done_by_prefix("ab")
    assert t.hash == "abc1234"
    assert store.items[0].completed is True
    assert store.items[1].completed is False


def test_mark_done_twice_fails_and_leaves_state(data_path):
    store = _store(data_path, TodoItem("abc1234", "one", completed=True))
    with pytest.raises(AlreadyCompleted):
        store.mark_done_by_prefix("abc")
    assert store.items == [TodoItem("abc1234", "one", completed=True)]


def test_mark_done_not_found(data_path):
    store = _store(data_path, TodoItem("abc1234", "one"))
    with pytest.raises(NotFound):
        store.mark_done_by_prefix("ff")


def test_mark_done_empty_prefix(data_path):
    store = _store(data_path, TodoItem("abc1234", "one"))
    with pytest.raises(EmptyPrefix):
        store.mark_done_by_prefix("  ")


def test_shared_prefix_is_ambiguous(data_path):
    store = _store(
        data_path,
        TodoItem("abc1234", "one"),
        TodoItem("abd9999", "two"),
        TodoItem("fff0000", "three"),
    )
    assert len(store.find("ab")) == 2

    with pytest.raises(MultipleMatches) as exc:
        store.mark_done_by_prefix("ab")
    assert exc.value.matches == [("abc1234", "one"), ("abd9999", "two")]
    assert not any(t.completed for t in store.items)

    with pytest.raises(MultipleMatches):
        store.remove_by_prefix("ab")
    assert len(store) == 3


def test_remove_by_prefix(data_path):
    store = _store(data_path, TodoItem("abc1234", "one"), TodoItem("def5678", "two"))
    removed = store.remove_by_prefix("def")
    assert removed.description == "two"
    assert [t.hash for t in store.items] == ["abc1234"]

    with pytest.raises(NotFound):
        store.remove_by_prefix("def")


def test_full_hash_is_a_valid_prefix(data_path):
    store = _store(data_path, TodoItem("abc1234", "one"))
    assert store.remove_by_prefix("abc1234").hash == "abc1234"


def test_remove_completed(data_path):
    store = _store(
        data_path,
        TodoItem("aaaaaaa", "a", completed=True),
        TodoItem("bbbbbbb", "b"),
        TodoItem("ccccccc", "c", completed=True),
    )
    removed = store.remove_completed()
    assert [t.hash for t in removed] == ["aaaaaaa", "ccccccc"]
    assert [t.hash for t in store.items] == ["bbbbbbb"]


def test_list_filters(data_path):
    store = _store(
        data_path,
        TodoItem("aaaaaaa", "a", completed=True, tag="work"),
        TodoItem("bbbbbbb", "b", tag="work"),
        TodoItem("ccccccc", "c", completed=True),
    )
    assert [t.hash for t in store.list_items()] == ["aaaaaaa", "bbbbbbb", "ccccccc"]
    assert [t.hash for t in store.list_items(tag="work")] == ["aaaaaaa", "bbbbbbb"]
    assert [t.hash for t in store.list_items(done=True)] == ["aaaaaaa", "ccccccc"]
    assert [t.hash for t in store.list_items(undone=True)] == ["bbbbbbb"]
    assert [t.hash for t in store.list_items(tag="work", done=True)] == ["aaaaaaa"]
    assert len(store.list_items(done=True, undone=True)) == 3
    assert store.list_items(tag="nope") == []


def test_tag_filter_is_exact(data_path):
    store = _store(data_path, TodoItem("aaaaaaa", "a", tag="workshop"))
    assert store.list_items(tag="work") == []


def test_load_save_cycle(data_path):
    store = TodoStore.load(data_path)
    assert len(store) == 0
    store.add("persist me", tag="x")
    store.save()

    again = TodoStore.load(data_path)
    assert again.items == store.items
