"""Persistent sorted map.

``PersistentSortedMap`` is an immutable AVL tree.  ``set()`` and
``remove()`` return a new map built by path copying: only the nodes on
the path from the root to the changed key are rebuilt, every other
subtree is shared with the previous version.  A published map is never
mutated, so old versions stay valid for as long as anyone holds them.

Keys must be mutually orderable; iteration is in ascending key order.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional, Tuple


class _Node:
    __slots__ = ('key', 'value', 'left', 'right', 'height')

    def __init__(self, key, value, left=None, right=None):
        self.key = key
        self.value = value
        self.left = left
        self.right = right
        self.height = 1 + max(_height(left), _height(right))


def _height(node: Optional[_Node]) -> int:
    return 0 if node is None else node.height


def _balance_factor(node: _Node) -> int:
    return _height(node.left) - _height(node.right)


def _rotate_right(node: _Node) -> _Node:
    pivot = node.left
    return _Node(pivot.key, pivot.value, pivot.left,
                 _Node(node.key, node.value, pivot.right, node.right))


def _rotate_left(node: _Node) -> _Node:
    pivot = node.right
    return _Node(pivot.key, pivot.value,
                 _Node(node.key, node.value, node.left, pivot.left), pivot.right)


def _rebalance(key, value, left, right) -> _Node:
    node = _Node(key, value, left, right)
    bf = _balance_factor(node)
    if bf > 1:
        if _balance_factor(node.left) < 0:
            node = _Node(key, value, _rotate_left(node.left), right)
        return _rotate_right(node)
    if bf < -1:
        if _balance_factor(node.right) > 0:
            node = _Node(key, value, left, _rotate_right(node.right))
        return _rotate_left(node)
    return node


def _insert(node: Optional[_Node], key, value) -> Tuple[_Node, bool]:
    """returns the new subtree and whether a key was added"""
    if node is None:
        return _Node(key, value), True
    if key < node.key:
        left, added = _insert(node.left, key, value)
        return _rebalance(node.key, node.value, left, node.right), added
    if node.key < key:
        right, added = _insert(node.right, key, value)
        return _rebalance(node.key, node.value, node.left, right), added
    return _Node(key, value, node.left, node.right), False


def _pop_min(node: _Node) -> Tuple[Optional[_Node], _Node]:
    """remove the smallest node; returns the new subtree and that node"""
    if node.left is None:
        return node.right, node
    left, smallest = _pop_min(node.left)
    return _rebalance(node.key, node.value, left, node.right), smallest


def _delete(node: Optional[_Node], key) -> Optional[_Node]:
    if node is None:
        raise KeyError(key)
    if key < node.key:
        return _rebalance(node.key, node.value, _delete(node.left, key), node.right)
    if node.key < key:
        return _rebalance(node.key, node.value, node.left, _delete(node.right, key))
    if node.left is None:
        return node.right
    if node.right is None:
        return node.left
    right, successor = _pop_min(node.right)
    return _rebalance(successor.key, successor.value, node.left, right)


def _walk(node: Optional[_Node]) -> Iterator[_Node]:
    stack = []
    while stack or node is not None:
        if node is not None:
            stack.append(node)
            node = node.left
        else:
            node = stack.pop()
            yield node
            node = node.right


class PersistentSortedMap:
    """Immutable ordered mapping with structural sharing between versions."""

    __slots__ = ('_root', '_size')

    def __init__(self, items: Optional[Iterable[Tuple[Any, Any]]] = None):
        self._root = None
        self._size = 0
        if items is not None:
            for key, value in items:
                self._root, added = _insert(self._root, key, value)
                if added:
                    self._size += 1

    @classmethod
    def _from_root(cls, root, size) -> PersistentSortedMap:
        result = cls.__new__(cls)
        result._root = root
        result._size = size
        return result

    @staticmethod
    def from_items(items: Iterable[Tuple[Any, Any]]) -> PersistentSortedMap:
        return PersistentSortedMap(items)

    def _find(self, key) -> Optional[_Node]:
        node = self._root
        while node is not None:
            if key < node.key:
                node = node.left
            elif node.key < key:
                node = node.right
            else:
                return node
        return None

    def get(self, key, default=None):
        node = self._find(key)
        return default if node is None else node.value

    def __getitem__(self, key):
        node = self._find(key)
        if node is None:
            raise KeyError(key)
        return node.value

    def __contains__(self, key) -> bool:
        return self._find(key) is not None

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __iter__(self):
        return self.keys()

    def keys(self):
        return (n.key for n in _walk(self._root))

    def values(self):
        return (n.value for n in _walk(self._root))

    def items(self):
        return ((n.key, n.value) for n in _walk(self._root))

    def set(self, key, value) -> PersistentSortedMap:
        """new map with ``key`` bound to ``value``"""
        node = self._find(key)
        if node is not None and node.value is value:
            return self
        root, added = _insert(self._root, key, value)
        return PersistentSortedMap._from_root(root, self._size + (1 if added else 0))

    def remove(self, key) -> PersistentSortedMap:
        """new map without ``key``; raises ``KeyError`` if it is absent"""
        root = _delete(self._root, key)
        return PersistentSortedMap._from_root(root, self._size - 1)

    @property
    def height(self) -> int:
        return _height(self._root)

    def __eq__(self, other):
        if not isinstance(other, PersistentSortedMap):
            return NotImplemented
        return self._size == other._size and list(self.items()) == list(other.items())

    def __hash__(self):
        return hash(tuple(self.items()))

    def __repr__(self):
        return "PersistentSortedMap({!r})".format(list(self.items()))


__all__ = ["PersistentSortedMap"]
