from btindex.dependency.errors import BTreeError, EmptyTreeError, InvalidConfiguration, InvariantViolation
from btindex.dependency.types import K, Comparable, SearchResult
from btindex.dependency.b_tree import BTree, BTreeNode
from btindex.dependency.helper import Helper
