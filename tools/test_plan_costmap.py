"""Offline test for the plan_costmap tool.

Run:
  python3 tools/test_plan_costmap.py
"""

import json
import os
import tempfile


def test_plan_costmap_writes_overlay_and_json():
    import numpy as np
    import cv2
    from plan_costmap import main

    arr = np.zeros((5, 5), dtype=np.uint8)
    arr[0:4, 2] = 254

    with tempfile.TemporaryDirectory() as td:
        map_path = os.path.join(td, 'map.npy')
        out_path = os.path.join(td, 'plan.png')
        json_path = os.path.join(td, 'plan.json')
        settings_path = os.path.join(td, 'settings.json')
        np.save(map_path, arr)
        with open(settings_path, 'w') as f:
            json.dump({'factor': 0.9}, f)

        rc = main(['--map', map_path, '--start', '0', '0', '--goal', '4', '0',
                   '--settings', settings_path, '--out', out_path, '--json', json_path,
                   '--cell-px', '8'])
        assert rc == 0
        img = cv2.imread(out_path)
        assert img is not None and img.shape == (40, 40, 3)
        with open(json_path) as f:
            data = json.load(f)
        assert data['found'] is True
        assert data['path'][0] == [0, 0] and data['path'][-1] == [4, 0]


def test_plan_costmap_reports_unreachable():
    import numpy as np
    from plan_costmap import main

    arr = np.zeros((3, 3), dtype=np.uint8)
    arr[:, 1] = 254
    with tempfile.TemporaryDirectory() as td:
        map_path = os.path.join(td, 'map.txt')
        np.savetxt(map_path, arr, fmt='%d')
        rc = main(['--map', map_path, '--start', '0', '0', '--goal', '2', '2'])
        assert rc == 1


if __name__ == '__main__':
    test_plan_costmap_writes_overlay_and_json()
    test_plan_costmap_reports_unreachable()
    print('OK')
