"""
Arena-indexed spatial tree produced by the turtle interpreter.

Nodes live in a flat list and refer to each other by index, so the tree's
lifetime is independent of whatever the caller realises it as (scene objects,
plots, exported files).
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Tuple

import numpy as np

from l_systems_tree import rotation

ROOT_INDEX = 0


@dataclass
class SpatialNode:
    index: int
    position: np.ndarray
    orientation: np.ndarray
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    symbol_index: Optional[int] = None
    name: str = ""
    handle: Any = None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def direction(self) -> np.ndarray:
        return rotation.rotate(self.orientation, rotation.UP)

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "name": self.name,
            "parent": self.parent,
            "children": list(self.children),
            "symbol_index": self.symbol_index,
            "position": [float(c) for c in self.position],
            "orientation": [float(c) for c in self.orientation],
        }


class SpatialTree:
    """
    Tree of positioned and oriented nodes rooted at a caller-supplied handle.

    The root node sits at the origin with the identity orientation and keeps
    the caller's handle untouched. Every other node is created through
    add_child and keeps the parent it was created with.
    """

    def __init__(self, root_handle: Any = None, root_name: str = "Root"):
        self._nodes: List[SpatialNode] = []
        self._nodes.append(SpatialNode(
            index=ROOT_INDEX,
            position=np.zeros(3),
            orientation=rotation.IDENTITY.copy(),
            name=root_name,
            handle=root_handle,
        ))

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[SpatialNode]:
        return iter(self._nodes)

    def __getitem__(self, index: int) -> SpatialNode:
        return self._nodes[index]

    @property
    def root(self) -> SpatialNode:
        return self._nodes[ROOT_INDEX]

    def add_child(
        self,
        parent: int,
        position: np.ndarray,
        orientation: np.ndarray,
        symbol_index: Optional[int] = None,
        name: Optional[str] = None,
    ) -> SpatialNode:
        if not 0 <= parent < len(self._nodes):
            raise IndexError(f"parent index {parent} is not in the tree")
        index = len(self._nodes)
        node = SpatialNode(
            index=index,
            position=np.array(position, dtype=float),
            orientation=np.array(orientation, dtype=float),
            parent=parent,
            symbol_index=symbol_index,
            name=name if name is not None else f"Node_{symbol_index if symbol_index is not None else index}",
        )
        self._nodes.append(node)
        self._nodes[parent].children.append(index)
        return node

    def clear(self) -> None:
        """Drop every node but the root."""
        del self._nodes[ROOT_INDEX + 1:]
        self.root.children.clear()

    def depth(self, index: int) -> int:
        depth = 0
        node = self._nodes[index]
        while node.parent is not None:
            depth += 1
            node = self._nodes[node.parent]
        return depth

    def leaves(self) -> List[SpatialNode]:
        return [node for node in self._nodes if not node.children]

    def to_dict(self) -> dict:
        return {"nodes": [node.to_dict() for node in self._nodes]}


def traverse(
    tree: SpatialTree,
    visitor: Optional[Callable[[SpatialNode, SpatialNode], Any]] = None,
) -> Iterator[Tuple[SpatialNode, SpatialNode]]:
    """
    Lazily yield (parent, child) edges in pre-order.

    A node is reached after its parent and siblings come in creation order.
    If a visitor is given it is called for each edge as the walk advances.
    The walk reads the tree only and can be restarted at any time.
    """
    stack = [ROOT_INDEX]
    while stack:
        node = tree[stack.pop()]
        if node.parent is not None:
            edge = (tree[node.parent], node)
            if visitor is not None:
                visitor(*edge)
            yield edge
        # Reversed so the first-created child is popped first
        stack.extend(reversed(node.children))


def visit_edges(
    tree: SpatialTree,
    visitor: Callable[[SpatialNode, SpatialNode], Any],
) -> int:
    """Walk the whole tree eagerly, returning the number of edges visited."""
    count = 0
    for _ in traverse(tree, visitor):
        count += 1
    return count
