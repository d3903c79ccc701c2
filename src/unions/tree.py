"""
Binary trees of integers as a sum type.

A tree is either ``EMPTY`` or a ``Node`` holding a value and two subtrees.
Trees are immutable: every "modification" builds a new tree, and subtrees
may be shared between trees freely.

The lookups here assume the search-tree ordering (every value in the left
subtree is smaller than the node's value, every value in the right subtree
is larger) but never check it. On a tree that breaks the ordering,
``find_max_value`` and ``tree_contains`` still return, just not the true
maximum or the true membership. Use ``is_valid_bst`` to check a tree first.
"""
from __future__ import annotations

import logging

from dataclasses import dataclass
from typing import Iterable, Iterator

from unions import ADT
from unions.errors import NonExhaustiveMatchError

__all__ = [
    "EMPTY",
    "MIN_VALUE",
    "BinaryTree",
    "Node",
    "find_max_value",
    "from_values",
    "height",
    "height_iterative",
    "insert",
    "is_empty",
    "is_valid_bst",
    "leaf",
    "tree_contains",
    "values",
]

log = logging.getLogger(__name__)

# Smallest 32-bit signed integer, returned as the maximum of an empty tree.
MIN_VALUE = -(2**31)


class BinaryTree(ADT):
    """
    A binary tree of integers: either ``EMPTY`` or a ``Node``.
    """

    EMPTY = "empty"

    @dataclass(frozen=True)
    class Node:
        value: int
        left: BinaryTree
        right: BinaryTree

    def is_empty(self) -> bool:
        return is_empty(self)

    def height(self) -> int:
        return height(self)

    def max_value(self) -> int:
        return find_max_value(self)

    def contains(self, target: int) -> bool:
        return tree_contains(target, self)


EMPTY = BinaryTree.EMPTY
Node = BinaryTree.Node


def _unmatched(tree: object) -> NonExhaustiveMatchError:
    return NonExhaustiveMatchError("%r is not a BinaryTree" % (tree,))


def leaf(value: int) -> BinaryTree:
    """A node with no children."""
    return Node(value, EMPTY, EMPTY)


def is_empty(tree: BinaryTree) -> bool:
    match tree:
        case BinaryTree.EMPTY:
            return True
        case BinaryTree.Node():
            return False
        case _:
            raise _unmatched(tree)


def height(tree: BinaryTree) -> int:
    """
    Number of edges on the longest path from the root down to a node.

    An empty tree has height -1, so a single node has height 0.
    """
    match tree:
        case BinaryTree.EMPTY:
            return -1
        case BinaryTree.Node(_, left, right):
            return 1 + max(height(left), height(right))
        case _:
            raise _unmatched(tree)


def height_iterative(tree: BinaryTree) -> int:
    """
    Same as ``height``, but walks the tree with an explicit stack.

    Use it for trees deeper than the interpreter's recursion limit.
    """
    result = -1
    stack = [(tree, 0)]
    while stack:
        subtree, depth = stack.pop()
        match subtree:
            case BinaryTree.EMPTY:
                # the parent of an empty subtree sits one level up
                result = max(result, depth - 1)
            case BinaryTree.Node(_, left, right):
                stack.append((left, depth + 1))
                stack.append((right, depth + 1))
            case _:
                raise _unmatched(subtree)
    return result


def find_max_value(tree: BinaryTree) -> int:
    """
    Return the value at the end of the rightmost path.

    That is the maximum of a valid search tree. Left subtrees are never
    looked at. An empty tree gives ``MIN_VALUE``, which callers must not
    mistake for a stored value.
    """
    match tree:
        case BinaryTree.EMPTY:
            return MIN_VALUE
        case BinaryTree.Node(value, _, BinaryTree.EMPTY):
            return value
        case BinaryTree.Node(_, _, right):
            return find_max_value(right)
        case _:
            raise _unmatched(tree)


def tree_contains(target: int, tree: BinaryTree) -> bool:
    """
    Search for `target` by descending left or right at each node.

    Takes time proportional to the height of the tree. Only meaningful for
    valid search trees: a value stored off the expected path is not found.
    """
    match tree:
        case BinaryTree.EMPTY:
            return False
        case BinaryTree.Node(value) if target == value:
            return True
        case BinaryTree.Node(value, left) if target < value:
            return tree_contains(target, left)
        case BinaryTree.Node(_, _, right):
            return tree_contains(target, right)
        case _:
            raise _unmatched(tree)


def values(tree: BinaryTree) -> Iterator[int]:
    """Yield the stored values in order: left subtree, node, right subtree."""
    match tree:
        case BinaryTree.EMPTY:
            return
        case BinaryTree.Node(value, left, right):
            yield from values(left)
            yield value
            yield from values(right)
        case _:
            raise _unmatched(tree)


def is_valid_bst(tree: BinaryTree) -> bool:
    """Check the strict search-tree ordering at every node."""

    def check(subtree: BinaryTree, low: int | None, high: int | None) -> bool:
        match subtree:
            case BinaryTree.EMPTY:
                return True
            case BinaryTree.Node(value, left, right):
                if low is not None and value <= low:
                    return False
                if high is not None and value >= high:
                    return False
                return check(left, low, value) and check(right, value, high)
            case _:
                raise _unmatched(subtree)

    return check(tree, None, None)


def insert(value: int, tree: BinaryTree) -> BinaryTree:
    """
    Return a new tree with `value` added in search-tree position.

    Subtrees off the insertion path are shared with the original tree.
    Inserting a value that is already present returns `tree` itself. The
    path is walked with an explicit stack, so degenerate trees built from
    sorted input do not hit the recursion limit.
    """
    path = []
    subtree = tree
    while True:
        match subtree:
            case BinaryTree.EMPTY:
                rebuilt = leaf(value)
                break
            case BinaryTree.Node(current, left, right):
                if value == current:
                    return tree
                path.append(subtree)
                subtree = left if value < current else right
            case _:
                raise _unmatched(subtree)

    for parent in reversed(path):
        if value < parent.value:
            rebuilt = Node(parent.value, rebuilt, parent.right)
        else:
            rebuilt = Node(parent.value, parent.left, rebuilt)
    return rebuilt


def from_values(items: Iterable[int]) -> BinaryTree:
    """Build a search tree by inserting `items` in order into an empty tree."""
    tree = EMPTY
    count = 0
    for count, item in enumerate(items, 1):
        tree = insert(item, tree)
    log.debug("Built tree from %d values", count)
    return tree
