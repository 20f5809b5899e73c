"""Defines the in-memory B-tree; repeated keys are stored again and their relative order is unspecified."""
from __future__ import annotations

import logging
from typing import Generic, Iterator, List, Optional

from btindex.dependency.errors import EmptyTreeError, InvalidConfiguration
from btindex.dependency.types import K, SearchResult

logger = logging.getLogger(__name__)


class BTreeNode(Generic[K]):
    __slots__ = ("keys", "children")

    def __init__(self, keys: Optional[List[K]] = None, children: Optional[List[BTreeNode[K]]] = None):
        """
        Initialize a BTreeNode object, containing the following attributes:
            - keys: a sorted list of keys stored in this node.
            - children: a list of child nodes, empty when this node is a leaf and len(keys) + 1 otherwise.

        Each node owns its children exclusively; no node is ever reachable from two parents.
        """
        self.keys: List[K] = keys if keys is not None else []
        self.children: List[BTreeNode[K]] = children if children is not None else []

    @property
    def n(self) -> int:
        """The current number of keys."""
        return len(self.keys)

    @property
    def is_leaf(self) -> bool:
        """A node is a leaf exactly when it has no children."""
        return not self.children

    def find_key(self, key: K) -> int:
        """
        Find the first position whose key is not smaller than the input key.

        :param key: The key to locate.
        :return: An index in [0, n]; n means every key in this node is smaller.
        """
        for index, each_key in enumerate(self.keys):
            if not each_key < key:
                return index
        return len(self.keys)

    def upper_bound(self, key: K) -> int:
        """Find the first position whose key is strictly larger than the input key."""
        for index, each_key in enumerate(self.keys):
            if key < each_key:
                return index
        return len(self.keys)

    def __repr__(self) -> str:
        return f"BTreeNode(keys={self.keys!r}, leaf={self.is_leaf})"


class BTree(Generic[K]):
    """
    A height-balanced ordered index with minimum degree t.

    Every node except the root holds between t - 1 and 2t - 1 keys and all leaves sit at the same depth. Insertion
    splits full nodes on the way down and deletion tops up thin nodes on the way down, so neither operation ever has
    to walk back up the tree.
    """

    def __init__(self, min_degree: int):
        """
        :param min_degree: The minimum degree t, must be an integer of at least 2.
        """
        if isinstance(min_degree, bool) or not isinstance(min_degree, int):
            raise InvalidConfiguration(f"The minimum degree must be an integer, got {min_degree!r}.")
        if min_degree < 2:
            raise InvalidConfiguration(f"The minimum degree must be at least 2, got {min_degree}.")

        self.__t = min_degree
        self.__root: Optional[BTreeNode[K]] = None
        self.__size = 0

    @property
    def root(self) -> Optional[BTreeNode[K]]:
        """The top node, or None when the tree holds no keys."""
        return self.__root

    @property
    def min_degree(self) -> int:
        return self.__t

    @property
    def max_keys(self) -> int:
        return 2 * self.__t - 1

    @property
    def min_keys(self) -> int:
        return self.__t - 1

    @property
    def height(self) -> int:
        """Number of levels; 0 for an empty tree."""
        height = 0
        node = self.__root
        while node is not None:
            height += 1
            node = node.children[0] if node.children else None
        return height

    def __len__(self) -> int:
        return self.__size

    def __contains__(self, key: K) -> bool:
        return self.search(key) is not None

    def __iter__(self) -> Iterator[K]:
        return self.traverse()

    def __repr__(self) -> str:
        return f"BTree(min_degree={self.__t}, size={self.__size}, height={self.height})"

    def clear(self) -> None:
        """Drop every node; the tree is empty afterwards."""
        self.__root = None
        self.__size = 0

    def search(self, key: K) -> Optional[SearchResult[K]]:
        """
        Look up a key without modifying the tree.

        :param key: The key to search for.
        :return: The node and position holding the key, or None when the key is absent.
        """
        node = self.__root

        while node is not None:
            index = node.find_key(key)
            # Found at this level.
            if index < node.n and node.keys[index] == key:
                return SearchResult(node=node, index=index)
            # Nowhere left to go.
            if node.is_leaf:
                return None
            node = node.children[index]

        return None

    def traverse(self) -> Iterator[K]:
        """Lazily yield every key in ascending order; each call starts a new walk."""
        if self.__root is not None:
            yield from self.__traverse_node(self.__root)

    def __traverse_node(self, node: BTreeNode[K]) -> Iterator[K]:
        for index, each_key in enumerate(node.keys):
            if not node.is_leaf:
                yield from self.__traverse_node(node.children[index])
            yield each_key
        if not node.is_leaf:
            yield from self.__traverse_node(node.children[-1])

    def min(self) -> K:
        """Return the smallest key."""
        if self.__root is None:
            raise EmptyTreeError("The tree is empty.")
        return self.__leftmost(self.__root)

    def max(self) -> K:
        """Return the largest key."""
        if self.__root is None:
            raise EmptyTreeError("The tree is empty.")
        return self.__rightmost(self.__root)

    @staticmethod
    def __leftmost(node: BTreeNode[K]) -> K:
        while not node.is_leaf:
            node = node.children[0]
        return node.keys[0]

    @staticmethod
    def __rightmost(node: BTreeNode[K]) -> K:
        while not node.is_leaf:
            node = node.children[-1]
        return node.keys[-1]

    def _split_child(self, parent: BTreeNode[K], index: int) -> None:
        """
        Split the full child at the given index of the parent.

        The child keeps its first t - 1 keys (and first t children), a new right sibling takes the last t - 1 keys (and
        last t children), and the median moves up into the parent at the same index.
        :param parent: A node with room for one more key.
        :param index: Position of the full child in parent.children.
        """
        child = parent.children[index]

        if child.n != self.max_keys:
            raise ValueError(f"Only a full node can be split, the child has {child.n} keys.")

        t = self.__t

        # Build every new list before touching any node.
        median = child.keys[t - 1]
        right_node = BTreeNode(keys=child.keys[t:], children=child.children[t:])
        left_keys = child.keys[:t - 1]
        left_children = child.children[:t]
        parent_keys = parent.keys[:index] + [median] + parent.keys[index:]
        parent_children = parent.children[:index + 1] + [right_node] + parent.children[index + 1:]

        child.keys, child.children = left_keys, left_children
        parent.keys, parent.children = parent_keys, parent_children

        logger.debug("Split child %d around %r.", index, median)

    def insert(self, key: K) -> None:
        """
        Insert a key; a key that is already present is stored once more.

        :param key: The key to insert.
        """
        # If the tree is empty, the new key becomes a lone leaf root.
        if self.__root is None:
            self.__root = BTreeNode(keys=[key])
            self.__size += 1
            return

        # A full root is split ahead of time, which is the only way the tree grows taller.
        if self.__root.n == self.max_keys:
            new_root = BTreeNode(children=[self.__root])
            self._split_child(new_root, 0)
            self.__root = new_root
            logger.debug("Root split, height is now %d.", self.height)

        node = self.__root

        # Every child is split before we step into it, so the node we stand on is never full.
        while not node.is_leaf:
            index = node.upper_bound(key)
            if node.children[index].n == self.max_keys:
                self._split_child(node, index)
                # The promoted median now separates the two halves.
                if node.keys[index] < key:
                    index += 1
            node = node.children[index]

        # Insert into the leaf at its sorted position.
        index = node.upper_bound(key)
        node.keys = node.keys[:index] + [key] + node.keys[index:]
        self.__size += 1

    def _borrow_from_prev(self, parent: BTreeNode[K], index: int) -> None:
        """
        Rotate the last key of the left sibling up into the parent and the separator down into the child.

        :param parent: The parent of both siblings.
        :param index: Position of the child receiving a key; must be at least 1.
        """
        child = parent.children[index]
        sibling = parent.children[index - 1]

        child_keys = [parent.keys[index - 1]] + child.keys
        child_children = child.children if child.is_leaf else [sibling.children[-1]] + child.children
        sibling_keys = sibling.keys[:-1]
        sibling_children = sibling.children[:-1]

        parent.keys[index - 1] = sibling.keys[-1]
        sibling.keys, sibling.children = sibling_keys, sibling_children
        child.keys, child.children = child_keys, child_children

        logger.debug("Child %d borrowed from its left sibling.", index)

    def _borrow_from_next(self, parent: BTreeNode[K], index: int) -> None:
        """
        Rotate the first key of the right sibling up into the parent and the separator down into the child.

        :param parent: The parent of both siblings.
        :param index: Position of the child receiving a key; must not be the last child.
        """
        child = parent.children[index]
        sibling = parent.children[index + 1]

        child_keys = child.keys + [parent.keys[index]]
        child_children = child.children if child.is_leaf else child.children + [sibling.children[0]]
        sibling_keys = sibling.keys[1:]
        sibling_children = sibling.children[1:]

        parent.keys[index] = sibling.keys[0]
        sibling.keys, sibling.children = sibling_keys, sibling_children
        child.keys, child.children = child_keys, child_children

        logger.debug("Child %d borrowed from its right sibling.", index)

    def _merge(self, parent: BTreeNode[K], index: int) -> None:
        """
        Merge the child at index, the separator parent.keys[index], and the child at index + 1 into one node.

        The right sibling is dropped from the parent and the merged node stays at the given index.
        :param parent: The parent of both children.
        :param index: Position of the left child; must not be the last child.
        """
        if index >= parent.n:
            raise ValueError(f"Cannot merge child {index}, the node has only {parent.n + 1} children.")

        child = parent.children[index]
        sibling = parent.children[index + 1]

        merged_keys = child.keys + [parent.keys[index]] + sibling.keys
        merged_children = child.children + sibling.children
        parent_keys = parent.keys[:index] + parent.keys[index + 1:]
        parent_children = parent.children[:index + 1] + parent.children[index + 2:]

        child.keys, child.children = merged_keys, merged_children
        parent.keys, parent.children = parent_keys, parent_children

        logger.debug("Merged children %d and %d.", index, index + 1)

    def _fill(self, parent: BTreeNode[K], index: int) -> int:
        """
        Bring the child at the given index up to at least t keys before descending into it.

        :param parent: The node we are standing on.
        :param index: Position of the thin child.
        :return: The position to descend into afterwards; it is index - 1 exactly when the last child had to be merged
            into its left sibling, and index otherwise.
        """
        # Prefer borrowing from the left sibling.
        if index > 0 and parent.children[index - 1].n >= self.__t:
            self._borrow_from_prev(parent, index)
            return index

        # Then from the right sibling.
        if index < parent.n and parent.children[index + 1].n >= self.__t:
            self._borrow_from_next(parent, index)
            return index

        # Both neighbours are thin, merge with the right one unless this is the last child.
        if index < parent.n:
            self._merge(parent, index)
            return index

        self._merge(parent, index - 1)
        return index - 1

    def remove(self, key: K) -> bool:
        """
        Remove one occurrence of a key.

        Before stepping into any child, that child is brought up to at least t keys, so removal finishes in one
        downward pass.
        :param key: The key to remove.
        :return: True when a key was removed, False when it was absent (the tree may still be rebalanced on the way).
        """
        if self.__root is None:
            return False

        removed = self.__remove_from(self.__root, key)
        if removed:
            self.__size -= 1

        # An empty root either means the tree is empty or it has a single child to promote.
        if self.__root.n == 0:
            if self.__root.is_leaf:
                self.__root = None
                logger.debug("Removed the last key, the tree is empty.")
            else:
                self.__root = self.__root.children[0]
                logger.debug("Root merged away, height is now %d.", self.height)

        return removed

    def __remove_from(self, node: BTreeNode[K], key: K) -> bool:
        """Remove the key from the subtree rooted at node, which already holds at least t keys or is the root."""
        while True:
            index = node.find_key(key)

            if index < node.n and node.keys[index] == key:
                # The key is in a leaf, simply drop it.
                if node.is_leaf:
                    node.keys = node.keys[:index] + node.keys[index + 1:]
                    return True

                left_child = node.children[index]
                right_child = node.children[index + 1]

                # Replace the key by its predecessor and remove that from the left subtree instead.
                if left_child.n >= self.__t:
                    key = self.__rightmost(left_child)
                    node.keys[index] = key
                    node = left_child
                # Or by its successor from the right subtree.
                elif right_child.n >= self.__t:
                    key = self.__leftmost(right_child)
                    node.keys[index] = key
                    node = right_child
                # Both are thin; merge them around the key and keep going inside the merged node.
                else:
                    self._merge(node, index)
                    node = left_child
                continue

            # Reaching a leaf without a match means the key is absent.
            if node.is_leaf:
                return False

            if node.children[index].n < self.__t:
                index = self._fill(node, index)
            node = node.children[index]
