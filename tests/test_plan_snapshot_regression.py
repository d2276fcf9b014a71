from __future__ import annotations

import io
import json
import sys
from contextlib import redirect_stdout
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.pipeline.guides import plan_table_request
from src.schema import TableRequest
from src.seating.plan_snapshot import layout_to_snapshot


CASES = [
    "data/examples/table_rectangle.json",
    "data/examples/table_round_booth.json",
]

# ref -> (center, orientation_deg, size)
RECTANGLE_EXPECTED = {
    "top[0]": ((-32.5, -46.5), 0.0, (30.0, 10.0)),
    "top[1]": ((0.0, -47.5), 0.0, (35.0, 12.0)),
    "top[2]": ((32.5, -46.5), 0.0, (30.0, 10.0)),
    "bottom[0]": ((-32.5, 46.5), 180.0, (30.0, 10.0)),
    "bottom[1]": ((0.0, 46.5), 180.0, (30.0, 10.0)),
    "bottom[2]": ((32.5, 46.5), 180.0, (30.0, 10.0)),
    "corner_tl": ((-65.675, -45.675), -45.0, (30.0, 10.0)),
}


def _assert_close(actual, expected, tol: float = 1e-6) -> None:
    assert abs(actual - expected) <= tol, f"{actual} != {expected}"


def _snapshot(path: str) -> dict:
    raw = json.loads((ROOT / path).read_text(encoding="utf-8"))
    request = TableRequest.model_validate(raw)
    with redirect_stdout(io.StringIO()):
        return layout_to_snapshot(plan_table_request(request))


@pytest.mark.parametrize("path", CASES)
def test_snapshot_is_deterministic(path):
    first = _snapshot(path)
    second = _snapshot(path)
    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)


def test_rectangle_example_snapshot():
    snapshot = _snapshot("data/examples/table_rectangle.json")
    refs = [placement["ref"] for placement in snapshot["placements"]]
    assert refs == list(RECTANGLE_EXPECTED)
    for placement in snapshot["placements"]:
        center, orientation, size = RECTANGLE_EXPECTED[placement["ref"]]
        _assert_close(placement["center"][0], center[0])
        _assert_close(placement["center"][1], center[1])
        _assert_close(placement["orientation_deg"], orientation)
        assert placement["size"] == list(size)
        assert placement["variant"] == "standard"
    assert snapshot["sizing"] == {"chair_height": 10.0, "chair_spacing": 5.0, "chair_width": 30.0}
    assert snapshot["seat_sizes"] == {"top[1]": {"h": 12.0, "w": 35.0}}


def test_round_example_snapshot_uses_local_frame():
    snapshot = _snapshot("data/examples/table_round_booth.json")
    placements = snapshot["placements"]
    assert [placement["ref"] for placement in placements] == [f"circle[{index}]" for index in range(5)]
    booth = placements[0]
    assert booth["variant"] == "boothCurved"
    assert booth["center"] == [90.0, 0.0]
    assert booth["size"] == [200.0, 20.0]
    assert [round(placement["orientation_deg"], 3) for placement in placements[1:]] == [216.0, 252.0, 288.0, 324.0]
