"""
Document model of a query plan diagram

A ``Document`` owns one root ``Node`` and an ordered list of ``Style``
definitions. Nodes reference styles by name only. Everything is frozen once
constructed; renderers only read it.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional


@dataclass(frozen=True)
class Style:
    """A named visual rule nodes can refer to"""

    name: str
    color: str
    shape: str


@dataclass(frozen=True)
class Node:
    """One operator of the plan tree"""

    title: str
    inputs: tuple["Node", ...] = ()
    style: Optional[str] = None

    def __post_init__(self):
        # accept any iterable of children but store an immutable tuple
        if not isinstance(self.inputs, tuple):
            object.__setattr__(self, "inputs", tuple(self.inputs))

    @classmethod
    def leaf(cls, title: str, style: Optional[str] = None) -> "Node":
        """Create a node without inputs"""
        return cls(title, (), style)

    @property
    def is_leaf(self) -> bool:
        return not self.inputs

    def walk(self) -> Iterator["Node"]:
        """Iterate over this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.inputs))

    def count(self) -> int:
        """Return the number of nodes in this subtree"""
        return sum(1 for _ in self.walk())


@dataclass(frozen=True)
class Document:
    """A plan diagram: the root node and the style table"""

    diagram: Node
    styles: tuple[Style, ...] = field(default=())

    def __post_init__(self):
        if not isinstance(self.styles, tuple):
            object.__setattr__(self, "styles", tuple(self.styles))
