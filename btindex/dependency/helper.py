from __future__ import annotations

from typing import Any, List, Optional, Tuple

from btindex.dependency.b_tree import BTree, BTreeNode
from btindex.dependency.errors import InvariantViolation


class Helper:
    """A wrapper for the tree inspection functions. They are wrapped in a class for neater importing statements."""

    @staticmethod
    def height(root: Optional[BTreeNode]) -> int:
        """Number of levels below and including the root; 0 for an empty tree."""
        if root is None:
            return 0
        return 1 + (Helper.height(root.children[0]) if root.children else 0)

    @staticmethod
    def count_nodes(root: Optional[BTreeNode]) -> int:
        """Count every node in the subtree."""
        if root is None:
            return 0
        return 1 + sum(Helper.count_nodes(child) for child in root.children)

    @staticmethod
    def count_keys(root: Optional[BTreeNode]) -> int:
        """Count every key in the subtree, duplicates included."""
        if root is None:
            return 0
        return root.n + sum(Helper.count_keys(child) for child in root.children)

    @staticmethod
    def levels(root: Optional[BTreeNode]) -> List[List[List[Any]]]:
        """
        Collect the key lists of every node, level by level from the root.

        :param root: The root node of the B-tree.
        :return: One list per level, holding a copy of each node's keys from left to right.
        """
        result = []
        level = [root] if root is not None else []

        while level:
            result.append([list(node.keys) for node in level])
            level = [child for node in level for child in node.children]

        return result

    @staticmethod
    def render(root: Optional[BTreeNode]) -> str:
        """Render the tree as one line per level, with each node shown as [k1 k2 ...]."""
        return "\n".join(
            " ".join("[" + " ".join(str(key) for key in keys) + "]" for keys in level)
            for level in Helper.levels(root)
        )

    @staticmethod
    def validate(tree: BTree) -> None:
        """
        Check every structural rule of the tree and raise InvariantViolation on the first broken one.

        The checks are: key count bounds (the root is exempt from the lower bound), sorted keys, one more child than
        keys in internal nodes, equal leaf depth, separators bounding their child subtrees, and the stored key count
        matching len(tree).
        :param tree: The B-tree to check.
        """
        root = tree.root

        if root is None:
            if len(tree) != 0:
                raise InvariantViolation(f"The tree is empty but reports {len(tree)} keys.")
            return

        if root.n == 0:
            raise InvariantViolation("The root of a non-empty tree holds no keys.")

        leaf_depths = set()
        # Each entry is (node, path, depth, lower bound, upper bound).
        stack: List[Tuple[BTreeNode, str, int, Any, Any]] = [(root, "root", 0, None, None)]
        total = 0

        while stack:
            node, path, depth, low, high = stack.pop()
            total += node.n

            if node.n > tree.max_keys:
                raise InvariantViolation(f"Node {path} holds {node.n} keys, more than {tree.max_keys}.")
            if node is not root and node.n < tree.min_keys:
                raise InvariantViolation(f"Node {path} holds {node.n} keys, fewer than {tree.min_keys}.")

            for left, right in zip(node.keys, node.keys[1:]):
                if right < left:
                    raise InvariantViolation(f"Node {path} has unsorted keys {node.keys!r}.")

            # Duplicates may sit on either side of an equal separator, hence the non-strict bounds.
            if low is not None and node.keys[0] < low:
                raise InvariantViolation(f"Node {path} holds {node.keys[0]!r}, below its separator {low!r}.")
            if high is not None and high < node.keys[-1]:
                raise InvariantViolation(f"Node {path} holds {node.keys[-1]!r}, above its separator {high!r}.")

            if node.is_leaf:
                leaf_depths.add(depth)
                continue

            if len(node.children) != node.n + 1:
                raise InvariantViolation(
                    f"Node {path} has {node.n} keys but {len(node.children)} children."
                )

            for index, child in enumerate(node.children):
                child_low = node.keys[index - 1] if index > 0 else low
                child_high = node.keys[index] if index < node.n else high
                stack.append((child, f"{path}.{index}", depth + 1, child_low, child_high))

        if len(leaf_depths) != 1:
            raise InvariantViolation(f"Leaves sit at different depths {sorted(leaf_depths)}.")

        if total != len(tree):
            raise InvariantViolation(f"The tree stores {total} keys but reports {len(tree)}.")
