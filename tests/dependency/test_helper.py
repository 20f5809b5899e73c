import pytest

from btindex.dependency import BTree, BTreeNode, Helper, InvariantViolation


def build_tree(min_degree, keys):
    tree = BTree(min_degree=min_degree)
    for key in keys:
        tree.insert(key)
    return tree


class TestHelperInspection:
    def test_empty(self):
        assert Helper.height(None) == 0
        assert Helper.count_nodes(None) == 0
        assert Helper.count_keys(None) == 0
        assert Helper.levels(None) == []
        assert Helper.render(None) == ""

    def test_counts(self, scenario_tree):
        assert Helper.height(scenario_tree.root) == scenario_tree.height == 2
        assert Helper.count_nodes(scenario_tree.root) == 3
        assert Helper.count_keys(scenario_tree.root) == 8

    def test_levels(self, scenario_tree):
        assert Helper.levels(scenario_tree.root) == [[[10]], [[5, 6, 7], [12, 17, 20, 30]]]

    def test_render(self, scenario_tree):
        assert Helper.render(scenario_tree.root) == "[10]\n[5 6 7] [12 17 20 30]"

    def test_levels_are_copies(self, scenario_tree):
        levels = Helper.levels(scenario_tree.root)
        levels[0][0].append(99)
        assert scenario_tree.root.keys == [10]


class TestHelperValidate:
    def test_valid_trees(self):
        Helper.validate(BTree(min_degree=2))
        Helper.validate(build_tree(2, range(100)))
        Helper.validate(build_tree(5, reversed(range(100))))

    def test_overfull_node(self):
        tree = build_tree(2, [1, 2, 3])
        tree.root.keys.append(4)

        with pytest.raises(InvariantViolation, match="more than 3"):
            Helper.validate(tree)

    def test_underfull_node(self):
        tree = build_tree(3, [10, 20, 5, 6, 12, 30])
        tree.root.children[0].keys.pop()

        with pytest.raises(InvariantViolation, match="fewer than 2"):
            Helper.validate(tree)

    def test_unsorted_keys(self):
        tree = build_tree(3, [1, 2, 3])
        tree.root.keys.reverse()

        with pytest.raises(InvariantViolation, match="unsorted"):
            Helper.validate(tree)

    def test_separator_order(self):
        tree = build_tree(2, [1, 2, 3, 4])
        # The right child of the root [2] now holds a key smaller than the separator.
        tree.root.children[1].keys[0] = 0

        with pytest.raises(InvariantViolation, match="below its separator"):
            Helper.validate(tree)

    def test_uneven_leaves(self):
        tree = build_tree(2, [1, 2, 3, 4])
        leaf = tree.root.children[0]
        leaf.children = [BTreeNode(keys=[0]), BTreeNode(keys=[1])]

        with pytest.raises(InvariantViolation, match="different depths"):
            Helper.validate(tree)

    def test_child_count(self):
        tree = build_tree(2, [1, 2, 3, 4])
        tree.root.children.append(BTreeNode(keys=[9]))

        with pytest.raises(InvariantViolation, match="children"):
            Helper.validate(tree)

    def test_is_assertion_error(self):
        tree = build_tree(2, [1, 2, 3])
        tree.root.keys.append(4)

        with pytest.raises(AssertionError):
            Helper.validate(tree)
