import json

import numpy as np
import pytest

from amcl_sensors.score_scan import main, load_scan, load_poses

from conftest import room_cells, synthetic_scan, TRUE_POSE, RES
from amcl_sensors.occupancy_map import OccupancyMap


@pytest.fixture
def inputs(tmp_path):
    cells = room_cells()
    np.save(tmp_path / "room.npy", cells)
    data = synthetic_scan(OccupancyMap(cells, RES), TRUE_POSE, n_beams=24)
    with open(tmp_path / "scan.csv", "w") as f:
        f.write("# synthetic, noise free\nRange,Bearing\n")
        for r, b in data.ranges:
            f.write(f"{r!r},{b!r}\n")
    with open(tmp_path / "poses.csv", "w") as f:
        f.write("x,y,yaw\n2.5,2.5,0.0\n2.9,2.5,0.0\n1.0,1.0,1.0\n")
    with open(tmp_path / "tune.json", "w") as f:
        json.dump({"model_type": "likelihood_field_prob", "max_beams": 24}, f)
    return tmp_path


def test_loaders(inputs):
    scan = load_scan(inputs / "scan.csv")
    poses = load_poses(inputs / "poses.csv")
    assert scan.shape == (24, 2) and poses.shape == (3, 3)

def test_scores_every_pose(inputs, capsys):
    main([str(inputs / "room.npy"), str(inputs / "scan.csv"), str(inputs / "poses.csv"),
          "--resolution", str(RES), "--params", str(inputs / "tune.json")])
    out = capsys.readouterr().out.splitlines()
    scores = [ln for ln in out if ln.startswith("[score]")]
    assert len(scores) == 3
    assert scores[0].endswith("w=1")
    assert "best=#0" in out[-1] and "likelihood_field_prob" in out[-1]

def test_missing_input(inputs):
    with pytest.raises(RuntimeError, match="not found"):
        main([str(inputs / "nope.npy"), str(inputs / "scan.csv"), str(inputs / "poses.csv")])

def test_bad_columns(tmp_path):
    p = tmp_path / "scan.csv"
    p.write_text("a,b\n1,2\n")
    with pytest.raises(ValueError):
        load_scan(p)
