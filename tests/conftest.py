import math
import pytest
from pathlib import Path
import yaml

from radarmerge.geo.geometry import Point


def make_square(cx, cy, side):
    h = side / 2.0
    return [Point(cx - h, cy - h), Point(cx + h, cy - h), Point(cx + h, cy + h), Point(cx - h, cy + h)]


def make_circle(cx, cy, r, n=64):
    return [Point(cx + r * math.cos(2 * math.pi * i / n), cy + r * math.sin(2 * math.pi * i / n)) for i in range(n)]


@pytest.fixture
def unit_square():
    return [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]


@pytest.fixture
def square():
    return make_square


@pytest.fixture
def circle():
    return make_circle


@pytest.fixture
def sample_config_data():
    return {
        "input_dir": "inputs",
        "output_dir": "outputs",
        "output_basename": "result",
        "export_formats": ["svg", "geojson"],
        "pipeline": {"ray_count": 36, "simplify_epsilon": 1.0, "smooth_iterations": 0},
        "terrain": {
            "curvature_coefficient": 0.5,
            "obstacles": [
                {"center": [100, 0], "rx": 20, "ry": 20, "height": 500, "name": "Hill"},
            ],
        },
        "radars": [
            {"id": 1, "name": "North", "position": [0, 0], "range_m": 300, "height_m": 10},
            {"id": 2, "name": "South", "position": [400, 0], "range_m": 200, "height_m": 20},
        ],
        "logging": {"level": "DEBUG"},
    }


@pytest.fixture
def sample_config_path(tmp_path, sample_config_data):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    config_file = config_dir / "config.yaml"
    with open(config_file, "w") as f:
        yaml.dump(sample_config_data, f)
    return config_file


@pytest.fixture
def sample_csv_content():
    return (
        "ID,Name,X,Y,Range,Height\n"
        "1,Alpha,0,0,100,10\n"
        "2,Bravo,250,50,120,15\n"
    )
