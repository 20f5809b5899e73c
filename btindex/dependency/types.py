from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

if TYPE_CHECKING:
    from btindex.dependency.b_tree import BTreeNode


class Comparable(Protocol):
    """Anything with a total order; the tree only ever uses `<` and `==`."""

    def __lt__(self, other: Any) -> bool:
        ...

    def __eq__(self, other: Any) -> bool:
        ...


# Define the key type.
K = TypeVar("K", bound=Comparable)


@dataclass(frozen=True)
class SearchResult(Generic[K]):
    """Where a key lives: the owning node and the position inside its key list."""
    node: BTreeNode[K]
    index: int

    @property
    def key(self) -> K:
        """The stored key at this position."""
        return self.node.keys[self.index]
