"""Unit tests for collections."""

import pytest
from bento.core.collection import Collection, Item, auto_key
from bento.core.exceptions import DuplicateActionError


class TestActions:
    """Test action creation and the action views."""

    def test_builtin_actions(self):
        """Test add, remove and log exist from construction."""
        coll = Collection("items")

        assert coll.name == "items"
        assert set(coll.actions) == {"add", "remove", "log"}

    @pytest.mark.parametrize("name", ["add", "remove", "log"])
    def test_duplicate_builtin_action(self, name):
        """Test recreating a built-in action fails."""
        coll = Collection("items")

        with pytest.raises(DuplicateActionError):
            coll.create_action(name)

    def test_create_action(self):
        """Test custom actions appear in both views."""
        coll = Collection("items")
        coll.create_action("test")

        assert "test" in coll.get_actions()
        assert "test" in coll.get_unsubscribe_actions()
        assert callable(coll.get_actions()["test"])
        assert callable(coll.get_unsubscribe_actions()["test"])

    def test_unsubscribe_view(self, recorder):
        """Test the unsubscribe view detaches responders."""
        coll = Collection("items")
        coll.get_actions()["add"](recorder)

        coll.get_unsubscribe_actions()["add"](recorder)
        coll.add("item")

        assert recorder.calls == []


class TestAdd:
    """Test adding items."""

    def test_unkeyed(self, recorder):
        """Test a single argument adds an unkeyed item."""
        coll = Collection("items")
        coll.get_actions()["add"](recorder)

        coll.add("item1")

        assert coll.items == [Item(key=None, value="item1")]
        assert recorder.calls == [("item1",)]

    def test_keyed(self, recorder):
        """Test two arguments add a keyed item and emit keyed."""
        coll = Collection("items")
        coll.get_actions()["add"](recorder)

        coll.add("item1", "foobar")

        assert coll.items == [Item(key="item1", value="foobar")]
        assert recorder.calls == [("item1", "foobar")]

    def test_late_subscriber_sees_earlier_adds(self, recorder):
        """Test responders registered later still receive earlier adds."""
        coll = Collection("items")
        coll.add("a")
        coll.add("k", "b")

        coll.get_actions()["add"](recorder)

        assert recorder.calls == [("a",), ("k", "b")]

    def test_wrong_arity(self):
        """Test add rejects zero or more than two arguments."""
        coll = Collection("items")

        with pytest.raises(TypeError):
            coll.add()
        with pytest.raises(TypeError):
            coll.add("a", "b", "c")

    def test_add_many(self):
        """Test mapping and iterable forms."""
        coll = Collection("items")
        coll.add_many({"a": 1, "b": 2})
        coll.add_many([3, 4])

        assert coll.get_array() == [1, 2, 3, 4]
        assert [item.key for item in coll.items] == ["a", "b", None, None]


class TestRemove:
    """Test removing items."""

    def test_by_value(self, recorder):
        """Test unkeyed items are removed by value."""
        coll = Collection("items")
        coll.add("item1")
        coll.add("item2")
        coll.get_actions()["remove"](recorder)

        coll.remove("item1")

        assert coll.items == [Item(key=None, value="item2")]
        assert recorder.calls == [("item1",)]

    def test_by_key(self, recorder):
        """Test keyed items are removed by key and emit keyed."""
        coll = Collection("items")
        coll.add("k", "v")
        coll.add("item2")
        coll.get_actions()["remove"](recorder)

        coll.remove("k")

        assert len(coll) == 1
        assert recorder.calls == [("k", "v")]

    def test_key_before_value(self):
        """Test a string matching a key wins over a value match."""
        coll = Collection("items")
        coll.add("x", "first")
        coll.add("y", "x")

        coll.remove("x")

        assert coll.get_array() == ["x"]

    def test_non_string_by_value(self):
        """Test non-string identifiers only match values."""
        coll = Collection("items")
        coll.add("a", 1)
        coll.add("b", 2)

        coll.remove(2)

        assert coll.get_map() == {"a": 1}

    def test_missing_is_noop(self, recorder):
        """Test removing an unknown identifier emits nothing."""
        coll = Collection("items")
        coll.add("item1")
        coll.get_actions()["remove"](recorder)

        coll.remove("not-present")

        assert len(coll) == 1
        assert recorder.calls == []

    def test_first_match_only(self):
        """Test only the first of several equal values is removed."""
        coll = Collection("items")
        coll.add("dup")
        coll.add("dup")

        coll.remove("dup")

        assert coll.get_array() == ["dup"]

    def test_remove_many_and_clear(self, recorder):
        """Test bulk removal emits once per removed item."""
        coll = Collection("items")
        coll.add_many(["a", "b", "c"])
        coll.add("k", "d")
        coll.get_actions()["remove"](recorder)

        coll.remove_many(["b", "missing"])
        coll.clear()

        assert len(coll) == 0
        assert recorder.calls == [("b",), ("a",), ("c",), ("k", "d")]


class TestViews:
    """Test map and array views."""

    def test_keyed_map(self):
        """Test keyed items appear under their key."""
        coll = Collection("items")
        coll.add("item1", "foobar")

        assert coll.get_map() == {"item1": "foobar"}

    def test_auto_key(self):
        """Test an unkeyed item gets exactly one generated key."""
        coll = Collection("items")
        coll.add("v")

        result = coll.get_map()

        assert list(result.values()) == ["v"]
        assert list(result) == [auto_key(0)]
        assert isinstance(auto_key(0), str) and len(auto_key(0)) >= 8

    def test_auto_keys_distinct(self):
        """Test many unkeyed items get distinct, stable keys."""
        coll = Collection("items")
        for i in range(100):
            coll.add(i)

        first = coll.get_map()
        second = coll.get_map()

        assert len(first) == 100
        assert first == second
        assert sorted(first.values()) == list(range(100))

    def test_auto_keys_shift_after_removal(self):
        """Test auto-keys follow current positions."""
        coll = Collection("items")
        coll.add("a")
        coll.add("b")

        coll.remove("a")

        assert coll.get_map() == {auto_key(0): "b"}

    def test_array(self):
        """Test array holds values in order."""
        coll = Collection("items")
        coll.add("foobar")
        coll.add("k", "item2")

        assert coll.get_array() == ["foobar", "item2"]


class TestLog:
    """Test log actions."""

    def test_default_level(self, recorder):
        """Test log emits message and level keyed by message."""
        coll = Collection("items")
        coll.get_actions()["log"](recorder)

        coll.log("hello")
        coll.log("careful", "warning")

        assert recorder.calls == [("hello", "info"), ("careful", "warning")]
        assert len(coll) == 0

    def test_filter_by_message(self, recorder):
        """Test a plain filter selects log entries by message."""
        coll = Collection("items")
        coll.log("started")
        coll.log("stopped")

        coll.get_actions()["log"](recorder, "stopped")

        assert recorder.calls == [("stopped", "info")]
