import json
import pathlib
import sys

import pytest

SCRIPTS = pathlib.Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPTS) not in sys.path:
    sys.path.insert(0, str(SCRIPTS))

import generate_problems  # noqa: E402
import run_algorithms  # noqa: E402


def test_generate_problems_writes_jsonl(tmp_path):
    output = tmp_path / "problems.jsonl"
    generate_problems.main(["--counts", "4", "6", "--instances-per-count", "2", "--output", str(output), "--integer"])
    rows = [json.loads(line) for line in output.read_text().splitlines()]
    assert [row["num_cities"] for row in rows] == [4, 4, 6, 6]
    assert all(len(row["coordinates"]) == row["num_cities"] for row in rows)
    assert all(float(x).is_integer() for row in rows for x, _ in row["coordinates"])


def test_generate_problems_rejects_tiny_counts(tmp_path):
    with pytest.raises(SystemExit):
        generate_problems.main(["--counts", "1", "--output", str(tmp_path / "p.jsonl")])


def test_run_algorithms_arguments():
    args = run_algorithms.parse_args(["--algorithms", "branch_and_bound", "--max-nodes", "50"])
    assert args.algorithms == ["branch_and_bound"]
    assert run_algorithms.solver_options("branch_and_bound", args) == {
        "max_nodes": 50,
        "initial_tour": "index_order",
    }
    assert run_algorithms.solver_options("index_order", args) == {}


def test_ensure_problem_id_is_stable():
    problem = {"coordinates": [[0.0, 0.0], [1.0, 1.0]]}
    first = run_algorithms.ensure_problem_id(problem)
    assert problem["problem_id"] == first
    assert run_algorithms.ensure_problem_id({"coordinates": [[0.0, 0.0], [1.0, 1.0]]}) == first
