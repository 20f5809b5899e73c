from btindex.dependency import (
    BTree,
    BTreeError,
    BTreeNode,
    Comparable,
    EmptyTreeError,
    Helper,
    InvalidConfiguration,
    InvariantViolation,
    SearchResult,
)

__version__ = "0.1.0"
