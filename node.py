import math
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Node:
    """One grid cell in a search.

    Equality and hashing use the cell only (x, y, id); the cost fields and
    parent link are bookkeeping.
    """

    x: int
    y: int
    id: int
    pid: Optional[int] = field(default=None, compare=False)
    g: float = field(default=0.0, compare=False)
    h: float = field(default=0.0, compare=False)

    @property
    def f(self) -> float:
        return self.g + self.h

    @property
    def xy(self):
        return (self.x, self.y)


def distance(ax, ay, bx, by):
    return math.hypot(ax - bx, ay - by)


def make_node(grid, x, y, pid=None, g=0.0, goal=None):
    """Create a node for (x, y) on `grid`; h is measured to `goal` if given."""
    h = distance(x, y, goal.x, goal.y) if goal is not None else 0.0
    return Node(int(x), int(y), grid.index(int(x), int(y)), pid=pid, g=float(g), h=h)
