"""Offline tests for planner settings persistence.

Run:
  python3 test_planner_settings.py
"""

import json
import os
import tempfile

from planner_settings import PlannerSettings, load_settings, save_settings


def test_defaults():
    s = PlannerSettings()
    assert s.lethal_cost == 253.0
    assert s.factor == 0.5
    assert s.outline_map is False
    assert s.max_expansions is None and s.max_time_s is None


def test_from_dict_coerces_and_ignores_unknown():
    s = PlannerSettings.from_dict({
        'lethal_cost': '200',
        'factor': 1,
        'outline_map': 1,
        'max_expansions': '500',
        'max_time_s': 2,
        'nav_planner': 'bfs',
    })
    assert s.lethal_cost == 200.0 and isinstance(s.lethal_cost, float)
    assert s.factor == 1.0 and isinstance(s.factor, float)
    assert s.outline_map is True
    assert s.max_expansions == 500
    assert s.max_time_s == 2.0
    assert not hasattr(s, 'nav_planner')


def test_from_dict_keeps_default_on_bad_value():
    s = PlannerSettings.from_dict({'factor': 'lots', 'max_expansions': None})
    assert s.factor == 0.5
    assert s.max_expansions is None


def test_save_and_load_roundtrip():
    s = PlannerSettings(factor=0.8, outline_map=True, max_expansions=1000)
    with tempfile.TemporaryDirectory() as td:
        path = os.path.join(td, 'planner_settings.json')
        save_settings(s, path)
        with open(path) as f:
            assert json.load(f)['factor'] == 0.8
        assert load_settings(path) == s


def test_missing_or_broken_file_gives_defaults():
    with tempfile.TemporaryDirectory() as td:
        assert load_settings(os.path.join(td, 'nope.json')) == PlannerSettings()
        bad = os.path.join(td, 'bad.json')
        with open(bad, 'w') as f:
            f.write('{not json')
        assert load_settings(bad) == PlannerSettings()


if __name__ == '__main__':
    test_defaults()
    test_from_dict_coerces_and_ignores_unknown()
    test_from_dict_keeps_default_on_bad_value()
    test_save_and_load_roundtrip()
    test_missing_or_broken_file_gives_defaults()
    print('OK')
