"""
Demonstration of the B-tree index.

Builds a tree of minimum degree 3 (every node holds 2 to 5 keys, the root may hold fewer), inserts a fixed list of
keys, runs a few searches, then deletes every key again and prints the traversal after each step.

Usage:
    python demo/btree_demo.py
    python demo/btree_demo.py --min-degree 2 --show-structure
    python demo/btree_demo.py --verbose    # also log splits, merges and borrows
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from btindex.dependency import BTree, Helper

INSERT_KEYS = [10, 20, 5, 6, 12, 30, 7, 17, 3, 4, 2, 40, 50, 60, 1, 8, 9, 11, 13, 14]
SEARCH_KEYS = [6, 15, 30, 100]
DELETE_KEYS = [6, 13, 7, 4, 2, 12, 30, 10, 20, 5, 3, 1, 9, 8, 11, 14, 17, 40, 50, 60]


def format_traversal(tree: BTree) -> str:
    """Join the keys of an in-order walk with single spaces."""
    return " ".join(str(key) for key in tree.traverse())


def print_structure(tree: BTree) -> None:
    """Print the tree level by level, indented under the traversal."""
    rendered = Helper.render(tree.root)
    for line in rendered.splitlines():
        print(f"    {line}")


def run_demo(min_degree: int, show_structure: bool = False) -> BTree:
    """
    Run the insert / search / delete sequence and print what happens.

    :param min_degree: The minimum degree of the demonstrated tree.
    :param show_structure: Whether to print the level layout after every mutation.
    :return: The tree after all deletions, which should be empty.
    """
    tree = BTree(min_degree)

    # Insert a bunch of keys.
    for key in INSERT_KEYS:
        tree.insert(key)

    print("Traversal after insertions:")
    print(format_traversal(tree))
    if show_structure:
        print_structure(tree)

    # Search tests.
    for key in SEARCH_KEYS:
        print(f"Search {key}: {'found' if tree.search(key) is not None else 'not found'}")

    # Deletions with intermediate traversals.
    for key in DELETE_KEYS:
        tree.remove(key)
        print(f"After deleting {key}:")
        print(format_traversal(tree))
        if show_structure:
            print_structure(tree)

    print("Final traversal (should be empty tree):")
    print(format_traversal(tree))

    return tree


def main():
    parser = argparse.ArgumentParser(description="Demonstrate insertion, search and deletion on a B-tree")
    parser.add_argument("--min-degree", type=int, default=3,
                        help="Minimum degree t of the tree (default: 3)")
    parser.add_argument("--show-structure", action="store_true",
                        help="Print the node layout after every mutation")
    parser.add_argument("--verbose", action="store_true",
                        help="Log structural changes (splits, merges, borrows)")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    run_demo(min_degree=args.min_degree, show_structure=args.show_structure)


if __name__ == "__main__":
    main()
