import cv2
import numpy as np

from jump_point_search import cell_xy, densify_path

FREE_COLOR = (235, 235, 235)
OBSTACLE_COLOR = (40, 40, 40)
EXPAND_COLOR = (200, 170, 80)
PATH_COLOR = (0, 0, 255)
START_COLOR = (0, 200, 0)
GOAL_COLOR = (255, 0, 0)


class OverlayDrawer:
    def __init__(self, cell_px=12):
        self.cell_px = int(max(1, cell_px))
        self._rows = 0

    def _center(self, x, y):
        # image rows grow downward, grid y grows upward
        return (int((x + 0.5) * self.cell_px), int((self._rows - y - 0.5) * self.cell_px))

    def draw_costmap(self, grid):
        self._rows = grid.height
        p = self.cell_px
        img = np.zeros((grid.height * p, grid.width * p, 3), dtype=np.uint8)
        img[:] = FREE_COLOR
        blocked = grid.as_array() >= grid.threshold
        for y, x in np.argwhere(blocked):
            x, y = int(x), int(y)
            r = grid.height - 1 - y
            cv2.rectangle(img, (x * p, r * p), ((x + 1) * p - 1, (r + 1) * p - 1), OBSTACLE_COLOR, -1)
        return img

    def draw_expand(self, img, expand):
        radius = max(1, self.cell_px // 4)
        for n in expand:
            cv2.circle(img, self._center(n.x, n.y), radius, EXPAND_COLOR, -1)
        return img

    def draw_path(self, img, path):
        if not path:
            return img
        pts = [self._center(x, y) for (x, y) in densify_path(path)]
        for i in range(1, len(pts)):
            cv2.line(img, pts[i - 1], pts[i], PATH_COLOR, max(1, self.cell_px // 6))
        return img

    def draw_endpoints(self, img, start, goal):
        radius = max(2, self.cell_px // 3)
        cv2.circle(img, self._center(*cell_xy(start)), radius, START_COLOR, -1)
        cv2.circle(img, self._center(*cell_xy(goal)), radius, GOAL_COLOR, -1)
        return img

    def apply(self, grid, path, expand, start, goal, draw_expand=True):
        """Return a BGR image of the costmap with expand zone, path and endpoints."""
        img = self.draw_costmap(grid)
        if draw_expand:
            img = self.draw_expand(img, expand)
        img = self.draw_path(img, path)
        img = self.draw_endpoints(img, start, goal)
        return img


def render_plan(grid, path, expand, start, goal, cell_px=12, draw_expand=True):
    return OverlayDrawer(cell_px).apply(grid, path, expand, start, goal, draw_expand=draw_expand)


def export_plan(found, path, expand, stats=None):
    """Return a JSON-serializable dict describing one planning call."""
    return {
        'found': bool(found),
        'path': [[int(n.x), int(n.y)] for n in path],
        'expand': [[int(n.x), int(n.y)] for n in expand],
        'stats': dict(stats or {}),
    }
