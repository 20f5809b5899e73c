import pytest

from btindex.dependency import BTree


@pytest.fixture
def scenario_tree():
    """Provide a tree of minimum degree 3 holding 10, 20, 5, 6, 12, 30, 7 and 17."""
    tree = BTree(min_degree=3)
    for key in [10, 20, 5, 6, 12, 30, 7, 17]:
        tree.insert(key)
    return tree
