from __future__ import annotations

import json
import random

import pytest
from jsonschema import Draft202012Validator

from mapscope.config import AppConfig
from mapscope.contracts.error import BadInputError, InvariantError
from mapscope.contracts.schema import load_report_schema, report_errors, validate_report
from mapscope.metrics import REPORT_SCHEMA
from mapscope.workloads import build_workload, run_comparison
from mapscope.workloads.compare import STRUCTURE_ORDER


def _config(**workload: object) -> AppConfig:
    cfg = AppConfig()
    cfg.workload.sizes = [50, 200]
    cfg.workload.seed = 3
    for name, value in workload.items():
        setattr(cfg.workload, name, value)
    cfg.open_addressing.capacity = 512
    return cfg


def test_report_covers_every_structure_and_size() -> None:
    report = run_comparison(_config(lookup_misses=10, delete_fraction=0.2, shuffle=True))
    assert len(report.rows) == 2 * len(STRUCTURE_ORDER)
    for row in report.rows:
        assert row.ok
        assert row.hits == row.size
        assert row.misses == 10
        assert row.deleted == int(row.size * 0.2)
        assert row.length == row.size - row.deleted
        assert row.metrics
    bst_rows = report.rows_for("bst")
    assert [row.size for row in bst_rows] == [50, 200]


def test_report_dict_matches_schema() -> None:
    payload = run_comparison(_config()).to_dict()
    assert payload["schema"] == REPORT_SCHEMA
    Draft202012Validator(load_report_schema()).validate(payload)
    # Round-trips through JSON untouched.
    assert json.loads(json.dumps(payload)) == payload


def test_sorted_workload_separates_tree_shapes() -> None:
    report = run_comparison(_config())
    bst = report.rows_for("bst")[-1].metrics
    balanced = report.rows_for("balanced")[-1].metrics
    assert bst["max_depth"] == 199
    assert balanced["tree_height"] < 15


def test_capacity_exhaustion_recorded_as_error_row() -> None:
    cfg = _config()
    cfg.workload.sizes = [40]
    cfg.open_addressing.capacity = 16
    report = run_comparison(cfg)
    (row,) = report.rows_for("open_addressing")
    assert row.ok is False
    assert row.error is not None
    assert row.error.error == "CapacityExhausted"
    assert row.length == 16
    assert all(r.ok for r in report.rows if r.structure != "open_addressing")
    assert "CapacityExhausted" in report.render_markdown()
    validate_report(report.to_dict())


def test_markdown_has_one_line_per_row() -> None:
    report = run_comparison(_config(), structures=["chained", "skiplist"])
    lines = report.render_markdown().splitlines()
    assert len(lines) == 2 + 4
    assert lines[0].startswith("| Structure |")
    assert any("max chain" in line for line in lines)
    assert any("avg level" in line for line in lines)


def test_unknown_structure_rejected() -> None:
    with pytest.raises(BadInputError):
        run_comparison(_config(), structures=["btree"])


def test_build_workload_is_seed_stable() -> None:
    cfg = _config(shuffle=True, delete_fraction=0.5)
    first = build_workload(30, cfg, random.Random(9))
    second = build_workload(30, cfg, random.Random(9))
    assert first == second
    assert sorted(first.inserts) == sorted(f"key{i:02d}".encode() for i in range(30))
    assert len(first.deletes) == 15


def test_schema_violation_raises_invariant_error() -> None:
    payload = run_comparison(_config(), structures=["bst"]).to_dict()
    payload["rows"][0]["structure"] = "btree"
    assert report_errors(payload)
    with pytest.raises(InvariantError):
        validate_report(payload)
