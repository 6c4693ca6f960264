"""Jump Point Search (JPS) on an 8-connected cost grid.

JPS is A* with straight-line runs collapsed into single "jumps": from each
expanded node we scan along all 8 directions and only stop at cells where a
decision has to be made (the goal, a cell with a forced neighbor, or a
diagonal cell from which an orthogonal scan succeeds). Paths are returned as
the list of jump points, start first; consecutive points are joined by a
straight or 45 degree segment of free cells.

All search state lives inside one `plan()` call, so a single
`JumpPointSearch` can serve several callers as long as the costmap is not
changed underneath it.
"""

import heapq
import itertools
import logging
import math
import time

from costmap import CostGrid, MOTIONS, outline_map
from node import Node, distance
from planner_settings import PlannerSettings


class PlanningInvariantError(RuntimeError):
    """Search bookkeeping is inconsistent (e.g. a parent was never closed)."""


def cell_xy(cell):
    """(x, y) of a Node or an (x, y) pair."""
    if isinstance(cell, Node):
        return cell.x, cell.y
    return int(cell[0]), int(cell[1])


# ---------- forced neighbors ----------
def has_forced_neighbor(grid, cell, motion):
    """True if `cell`, reached by moving along `motion`, has a forced neighbor.

    Lookups outside the grid never count: an outside cell is neither an
    obstacle nor passable.
    """
    x, y = cell_xy(cell)
    dx, dy = motion
    blocked = grid.is_obstacle
    free = grid.is_free

    # horizontal
    if dx and not dy:
        if blocked(x, y + 1) and free(x + dx, y + 1):
            return True
        if blocked(x, y - 1) and free(x + dx, y - 1):
            return True

    # vertical
    if dy and not dx:
        if blocked(x + 1, y) and free(x + 1, y + dy):
            return True
        if blocked(x - 1, y) and free(x - 1, y + dy):
            return True

    # diagonal
    if dx and dy:
        if blocked(x - dx, y) and free(x - dx, y + dy):
            return True
        if blocked(x, y - dy) and free(x + dx, y - dy):
            return True

    return False


# ---------- jump ----------
def _jump_xy(grid, goal_xy, x, y, dx, dy):
    """Scan from (x, y) along (dx, dy); return the next jump point or None.

    Iterative along the ray. Diagonal scans probe the two orthogonal
    components at every step, which nests at most one level deep.
    """
    while True:
        x += dx
        y += dy
        if not grid.is_free(x, y):
            return None
        if (x, y) == goal_xy:
            return x, y
        if dx and dy:
            if (_jump_xy(grid, goal_xy, x, y, dx, 0) is not None
                    or _jump_xy(grid, goal_xy, x, y, 0, dy) is not None):
                return x, y
        if has_forced_neighbor(grid, (x, y), (dx, dy)):
            return x, y


def jump(grid, goal, cell, motion):
    """Next jump point from node `cell` along `motion`, or None.

    The returned node is parented to `cell`; its g is `cell.g` plus the
    length of the jump and its h is the distance to `goal`.
    """
    dx, dy = motion
    hit = _jump_xy(grid, (goal.x, goal.y), cell.x, cell.y, dx, dy)
    if hit is None:
        return None
    jx, jy = hit
    steps = max(abs(jx - cell.x), abs(jy - cell.y))
    g = cell.g + steps * math.hypot(dx, dy)
    return Node(jx, jy, grid.index(jx, jy), pid=cell.id, g=g,
                h=distance(jx, jy, goal.x, goal.y))


# ---------- open list ----------
class OpenList:
    """Min-heap on (f, h, insertion order).

    Duplicates for the same cell are allowed; stale ones are dropped by the
    caller when popped.
    """

    def __init__(self):
        self._heap = []
        self._counter = itertools.count()

    def push(self, node):
        heapq.heappush(self._heap, (node.f, node.h, next(self._counter), node))

    def pop(self):
        return heapq.heappop(self._heap)[-1]

    def __len__(self):
        return len(self._heap)


# ---------- path reconstruction ----------
def reconstruct_path(closed, start, goal):
    """Walk parent ids from `goal` back to `start` through `closed`.

    Returns nodes ordered start -> goal. A missing parent means the search
    bookkeeping is broken and raises PlanningInvariantError.
    """
    node = closed.get(goal.id)
    if node is None:
        raise PlanningInvariantError(f"goal {goal.xy} is not in the closed set")
    path = [node]
    while node.id != start.id:
        parent = closed.get(node.pid) if node.pid is not None else None
        if parent is None:
            raise PlanningInvariantError(f"parent {node.pid} of {node.xy} is not in the closed set")
        if len(path) > len(closed):
            raise PlanningInvariantError("parent links form a cycle")
        path.append(parent)
        node = parent
    path.reverse()
    return path


def path_length(path):
    return sum(distance(a.x, a.y, b.x, b.y) for a, b in zip(path, path[1:]))


def densify_path(path):
    """Expand a jump-point path into every grid cell it crosses."""
    if not path:
        return []
    cells = [path[0].xy]
    for a, b in zip(path, path[1:]):
        sx = (b.x > a.x) - (b.x < a.x)
        sy = (b.y > a.y) - (b.y < a.y)
        x, y = a.x, a.y
        while (x, y) != (b.x, b.y):
            x += sx
            y += sy
            cells.append((x, y))
    return cells


# ---------- planner ----------
class JumpPointSearch:
    def __init__(self, settings=None):
        self.settings = settings or PlannerSettings()
        self._last_plan_stats = {}

    @property
    def last_plan_stats(self):
        return dict(self._last_plan_stats)

    def make_grid(self, costs, width=None, height=None):
        """Wrap `costs` as a CostGrid using the configured thresholds.

        Accepts a CostGrid, a 2D array (height, width) or a flat sequence
        with explicit width/height. A CostGrid keeps its own lethal_cost and
        factor; only raw costs pick up the settings' thresholds. Applies
        outline_map when enabled.
        """
        s = self.settings
        if isinstance(costs, CostGrid):
            grid = costs
        elif width is None or height is None:
            grid = CostGrid.from_array(costs, lethal_cost=s.lethal_cost, factor=s.factor)
        else:
            grid = CostGrid(costs, width, height, lethal_cost=s.lethal_cost, factor=s.factor)
        if s.outline_map:
            outlined = outline_map(grid.costs, grid.width, grid.height,
                                   value=max(grid.threshold, grid.lethal_cost))
            grid = CostGrid(outlined, grid.width, grid.height,
                            lethal_cost=grid.lethal_cost, factor=grid.factor)
        return grid

    def _finish(self, aborted, expansions, t0, path=()):
        self._last_plan_stats = {
            'planner': 'jps',
            'aborted': aborted,
            'expansions': expansions,
            'elapsed_s': time.time() - t0,
            'path_len': len(path),
            'path_cost': path_length(path),
        }

    def plan(self, costs, start, goal, width=None, height=None):
        """Plan from `start` to `goal`.

        Returns (found, path, expand): path is a list of jump-point nodes,
        start first; expand lists every node pushed on the open list
        (start included) in push order.
        """
        t0 = time.time()
        grid = self.make_grid(costs, width, height)
        sx, sy = cell_xy(start)
        gx, gy = cell_xy(goal)

        if not (grid.in_bounds(sx, sy) and grid.in_bounds(gx, gy)):
            logging.warning(f"JPS: start {(sx, sy)} or goal {(gx, gy)} outside {grid.width}x{grid.height} map")
            self._finish('invalid_endpoint', 0, t0)
            return False, [], []

        goal_node = Node(gx, gy, grid.index(gx, gy))
        start_node = Node(sx, sy, grid.index(sx, sy), pid=None, g=0.0,
                          h=distance(sx, sy, gx, gy))
        expand = [start_node]

        if not grid.is_free(gx, gy):
            logging.warning(f"JPS: goal {(gx, gy)} is on an obstacle")
            self._finish('goal_blocked', 0, t0)
            return False, [], expand

        open_list = OpenList()
        open_list.push(start_node)
        closed = {}
        max_exp = self.settings.max_expansions
        max_s = self.settings.max_time_s
        expansions = 0

        while open_list:
            if max_exp is not None and expansions >= int(max_exp):
                logging.warning(f"JPS: aborted after {expansions} expansions")
                self._finish('max_expansions', expansions, t0)
                return False, [], expand
            if max_s is not None and (time.time() - t0) > float(max_s):
                logging.warning(f"JPS: aborted after {time.time() - t0:.3f}s")
                self._finish('max_time', expansions, t0)
                return False, [], expand

            current = open_list.pop()
            expansions += 1

            # stale duplicate
            if current.id in closed:
                continue

            if current.id == goal_node.id:
                closed[current.id] = current
                path = reconstruct_path(closed, start_node, goal_node)
                self._finish(None, expansions, t0, path)
                logging.info(f"JPS: path found, {len(path)} jump points, "
                             f"cost {self._last_plan_stats['path_cost']:.2f}, {expansions} expansions")
                return True, path, expand

            for motion in MOTIONS:
                jp = jump(grid, goal_node, current, motion)
                if jp is None or jp.id in closed:
                    continue
                open_list.push(jp)
                expand.append(jp)

            closed[current.id] = current

        logging.info(f"JPS: no path from {(sx, sy)} to {(gx, gy)} after {expansions} expansions")
        self._finish('no_path', expansions, t0)
        return False, [], expand


def plan(costs, start, goal, settings=None, width=None, height=None):
    """One-shot convenience wrapper around JumpPointSearch.plan()."""
    return JumpPointSearch(settings).plan(costs, start, goal, width=width, height=height)
