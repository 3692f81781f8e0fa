"""Tests for the persistent sorted map."""

import random

import pytest

from draftkit.pcollections import PersistentSortedMap


class TestPersistentSortedMap:

    def test_empty(self):
        m = PersistentSortedMap()
        assert len(m) == 0
        assert not m
        assert list(m.items()) == []
        assert m.get(1) is None
        with pytest.raises(KeyError):
            m[1]

    def test_set_get(self):
        m = PersistentSortedMap().set("b", 2).set("a", 1).set("c", 3)
        assert len(m) == 3
        assert m["a"] == 1
        assert "b" in m
        assert "z" not in m
        assert list(m.keys()) == ["a", "b", "c"]
        assert list(m.values()) == [1, 2, 3]
        assert list(m) == ["a", "b", "c"]

    def test_versions_are_untouched(self):
        m1 = PersistentSortedMap.from_items([(1, "one"), (2, "two")])
        m2 = m1.set(3, "three")
        m3 = m2.remove(1)
        m4 = m3.set(2, "TWO")
        assert list(m1.items()) == [(1, "one"), (2, "two")]
        assert list(m2.items()) == [(1, "one"), (2, "two"), (3, "three")]
        assert list(m3.items()) == [(2, "two"), (3, "three")]
        assert list(m4.items()) == [(2, "TWO"), (3, "three")]
        assert len(m4) == 2

    def test_set_same_value_returns_self(self):
        value = object()
        m = PersistentSortedMap().set(1, value)
        assert m.set(1, value) is m

    def test_remove_missing(self):
        m = PersistentSortedMap.from_items([(1, 1)])
        with pytest.raises(KeyError):
            m.remove(2)

    def test_balanced(self):
        m = PersistentSortedMap()
        for i in range(1024):
            m = m.set(i, i)
        assert len(m) == 1024
        ## an AVL tree of n nodes is at most 1.44 log2(n) high
        assert m.height <= 15
        assert list(m.keys()) == list(range(1024))

    def test_random_operations(self):
        rng = random.Random(42)
        m = PersistentSortedMap()
        reference = {}
        for _ in range(2000):
            key = rng.randrange(200)
            if key in reference and rng.random() < 0.5:
                m = m.remove(key)
                del reference[key]
            else:
                m = m.set(key, key * 10)
                reference[key] = key * 10
            assert len(m) == len(reference)
        assert list(m.items()) == sorted(reference.items())

    def test_equality(self):
        a = PersistentSortedMap.from_items([(2, "b"), (1, "a")])
        b = PersistentSortedMap().set(1, "a").set(2, "b")
        assert a == b
        assert a != b.set(3, "c")
