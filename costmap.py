"""Grid/cost model used by the planners.

A `CostGrid` is a read-only view over a flattened occupancy grid. Cell
(x, y) lives at linear index `y * width + x`. A cell is impassable when its
cost is at or above `lethal_cost * factor`.
"""

import numpy as np

# Defaults match the ROS graph planner (LETHAL_COST, obstacle_factor).
LETHAL_COST = 253
OBSTACLE_FACTOR = 0.5

# 8-connected motions: (dx, dy), orthogonals first
MOTIONS = [
    (0, 1),
    (1, 0),
    (0, -1),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
]


class CostGrid:
    def __init__(self, costs, width, height, lethal_cost=LETHAL_COST, factor=OBSTACLE_FACTOR):
        """costs: flat sequence of length width*height (0..255 typical)."""
        self.width = int(width)
        self.height = int(height)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"grid must be non-empty, got {self.width}x{self.height}")
        arr = np.asarray(costs).reshape(-1)
        if arr.size != self.width * self.height:
            raise ValueError(f"costmap has {arr.size} cells, expected {self.width}*{self.height}")
        # private read-only copy; the caller's map is never touched
        self.costs = arr.copy()
        self.costs.flags.writeable = False
        self.lethal_cost = float(lethal_cost)
        self.factor = float(factor)

    @classmethod
    def from_array(cls, grid, lethal_cost=LETHAL_COST, factor=OBSTACLE_FACTOR):
        """Build from a 2D array shaped (height, width)."""
        grid = np.asarray(grid)
        if grid.ndim != 2:
            raise ValueError(f"expected a 2D costmap, got shape {grid.shape}")
        h, w = grid.shape
        return cls(grid.reshape(-1), w, h, lethal_cost=lethal_cost, factor=factor)

    @property
    def size(self):
        return self.width * self.height

    @property
    def threshold(self):
        return self.lethal_cost * self.factor

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x, y):
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")
        return y * self.width + x

    def cell(self, idx):
        """Inverse of index(): linear index -> (x, y)."""
        return idx % self.width, idx // self.width

    def cost(self, x, y):
        return self.costs[self.index(x, y)]

    def is_obstacle(self, x, y):
        # outside cells are not obstacles, just absent
        return self.in_bounds(x, y) and self.costs[y * self.width + x] >= self.threshold

    def is_free(self, x, y):
        return self.in_bounds(x, y) and self.costs[y * self.width + x] < self.threshold

    def as_array(self):
        return self.costs.reshape(self.height, self.width)


def outline_map(costs, width, height, value=LETHAL_COST):
    """Return a copy of `costs` with the map border set to `value`.

    Keeps plans from hugging (or leaving through) the edge of the costmap.
    The copy is widened to float64 when `value` does not fit the input dtype.
    """
    arr = np.asarray(costs)
    if np.issubdtype(arr.dtype, np.integer):
        info = np.iinfo(arr.dtype)
        if value != int(value) or not (info.min <= value <= info.max):
            arr = arr.astype(np.float64)
    elif not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(np.float64)
    arr = np.array(arr, copy=True).reshape(int(height), int(width))
    arr[0, :] = value
    arr[-1, :] = value
    arr[:, 0] = value
    arr[:, -1] = value
    return arr.reshape(-1)
