#!/usr/bin/env python3
"""Run the JPS planner offline on a costmap file.

Maps can be:
  - .npy    2D array of costs (rows = y, 0..255)
  - .txt    whitespace separated costs, one row per line
  - image   grayscale; dark pixels are obstacles (cost = 255 - gray)

Row 0 of the file is grid y = 0.

Usage:
    python3 tools/plan_costmap.py --map map.npy --start 0 0 --goal 20 15 \
        --settings planner_settings.json --out plan.png --json plan.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import cv2
import numpy as np

root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

from jump_point_search import JumpPointSearch  # noqa: E402
from overlay import export_plan, render_plan  # noqa: E402
from planner_settings import load_settings  # noqa: E402


def load_costmap(path):
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == '.npy':
        return np.load(path)
    if suffix == '.txt':
        return np.loadtxt(path, dtype=np.float64, ndmin=2)
    img = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise ValueError(f"could not read map image {path}")
    return 255 - img.astype(np.int32)


def main(argv=None):
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument('--map', required=True, help='costmap file (.npy, .txt or image)')
    ap.add_argument('--start', type=int, nargs=2, required=True, metavar=('X', 'Y'))
    ap.add_argument('--goal', type=int, nargs=2, required=True, metavar=('X', 'Y'))
    ap.add_argument('--settings', default=None, help='planner settings JSON')
    ap.add_argument('--out', default=None, help='write overlay image here')
    ap.add_argument('--json', default=None, help='write result JSON here')
    ap.add_argument('--cell-px', type=int, default=12)
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    settings = load_settings(args.settings) if args.settings else None
    planner = JumpPointSearch(settings)
    costs = load_costmap(args.map)
    grid = planner.make_grid(costs)
    start = tuple(args.start)
    goal = tuple(args.goal)

    found, path, expand = planner.plan(grid, start, goal)
    stats = planner.last_plan_stats
    print(f"found={found} jump_points={len(path)} expanded={len(expand)} "
          f"cost={stats.get('path_cost', 0.0):.2f} aborted={stats.get('aborted')}")

    if args.out:
        img = render_plan(grid, path, expand, start, goal, cell_px=args.cell_px,
                          draw_expand=planner.settings.expand_zone)
        if not cv2.imwrite(args.out, img):
            logging.error(f"Failed to write overlay {args.out}")
            return 2
    if args.json:
        Path(args.json).write_text(json.dumps(export_plan(found, path, expand, stats), indent=2))

    return 0 if found else 1


if __name__ == '__main__':
    sys.exit(main())
