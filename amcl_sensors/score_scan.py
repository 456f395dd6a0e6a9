#!/usr/bin/env python3
# score_scan.py
# Offline scorer: one planar scan against a grid map, for a list of candidate
# poses. Handy for tuning sensor options without a running localizer.
#
#   amcl_score map.npy scan.csv poses.csv --resolution 0.05 --params tune.json

import os, json, time, csv, argparse, logging
from pathlib import Path

import numpy as np

from .config import scanner_from_params
from .occupancy_map import OccupancyMap
from .sensor_data import PlanarData


# ------------ IO ------------
def _read_rows(csv_path: Path):
    with open(csv_path, "r", newline="") as f:
        clean = [ln for ln in f if not ln.lstrip().startswith("#") and ln.strip()]
    rdr = csv.DictReader(clean)
    lk = {k.strip().lower(): k for k in (rdr.fieldnames or [])}
    def pick(*cands):
        for c in cands:
            if c in lk: return lk[c]
        return None
    return rdr, pick

def load_scan(csv_path: Path):
    rdr, pick = _read_rows(csv_path)
    rk = pick("range","r","range_m"); bk = pick("bearing","angle","theta")
    if rk is None or bk is None:
        raise ValueError(f"{csv_path}: need range and bearing columns")
    rows = [(float(r[rk]), float(r[bk])) for r in rdr]
    return np.array(rows, float).reshape(-1, 2)

def load_poses(csv_path: Path):
    rdr, pick = _read_rows(csv_path)
    xk = pick("x","x_m"); yk = pick("y","y_m"); tk = pick("yaw","theta","th")
    if xk is None or yk is None or tk is None:
        raise ValueError(f"{csv_path}: need x, y and yaw columns")
    rows = [(float(r[xk]), float(r[yk]), float(r[tk])) for r in rdr]
    return np.array(rows, float).reshape(-1, 3)

def _need(path):
    path = Path(path)
    if not path.exists():
        raise RuntimeError(f"Input file not found: {path}")
    return path


# ---------------- Main ----------------
def main(argv=None):
    parser = argparse.ArgumentParser(description="Score a planar scan against a grid map for candidate poses")
    parser.add_argument("map",   help=".npy grid of cell states (-1 free, 0 unknown, 1 occupied), row = y")
    parser.add_argument("scan",  help="CSV with range,bearing columns")
    parser.add_argument("poses", help="CSV with x,y,yaw columns")
    parser.add_argument("--resolution", type=float, default=0.05, help="m per cell")
    parser.add_argument("--origin", type=float, nargs=2, default=(0.0, 0.0), metavar=("X", "Y"))
    parser.add_argument("--range_max", type=float, default=10.0)
    parser.add_argument("--params", default="", help="JSON file with sensor option overrides")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="[%(levelname)s] [%(name)s]: %(message)s")

    cells = np.load(_need(args.map))
    scan  = load_scan(_need(args.scan))
    poses = load_poses(_need(args.poses))
    overrides = {}
    if args.params:
        with open(_need(args.params), "r") as f:
            overrides = json.load(f)

    field = OccupancyMap(cells, args.resolution, args.origin)
    scanner = scanner_from_params(field, overrides)
    data = PlanarData(scan, args.range_max)

    t0 = time.perf_counter()
    scores = [scanner.score_pose(p, data) for p in poses]
    dt_ms = 1e3*(time.perf_counter() - t0)

    for p, s in zip(poses, scores):
        print(f"[score] x={p[0]:.3f} y={p[1]:.3f} yaw={p[2]:.3f} w={s:.6g}")
    if scores:
        best = int(np.argmax(scores))
        print(f"[done] {len(scores)} poses, {data.range_count} beams, model={scanner.model.model_type.value}, "
              f"best=#{best} ({scores[best]:.6g}), {dt_ms:.1f} ms")
    else:
        print(f"[done] no poses in {os.path.basename(args.poses)}")


if __name__ == "__main__":
    main()
