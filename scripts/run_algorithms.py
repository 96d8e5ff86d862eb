#!/usr/bin/env python3
from __future__ import annotations

import argparse
import hashlib
import json
import logging
import multiprocessing as mp
import pathlib
import signal
import sys
from dataclasses import asdict
from typing import Iterable, Iterator, Tuple

import numpy as np
from tqdm import tqdm

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from BnBTSP.matrix import matrix_from_coordinates
from BnBTSP.solvers import SOLVER_REGISTRY, AlgorithmResult, get_solver


def parse_args(raw_args: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run TSP solvers on generated problem instances.")
    parser.add_argument(
        "--problems",
        type=pathlib.Path,
        default=pathlib.Path("data/problems.jsonl"),
        help="JSONL file containing problem instances.",
    )
    parser.add_argument(
        "--results",
        type=pathlib.Path,
        default=pathlib.Path("data/results.jsonl"),
        help="Destination JSONL file for solver outcomes.",
    )
    parser.add_argument(
        "--algorithms",
        nargs="+",
        choices=sorted(SOLVER_REGISTRY.keys()),
        help="Subset of solvers to execute (default: all).",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=60.0,
        help="Per-solver time budget in seconds.",
    )
    parser.add_argument(
        "--memory-limit",
        type=float,
        default=1024.0,
        help="Per-solver memory budget in megabytes.",
    )
    parser.add_argument(
        "--max-nodes",
        type=int,
        default=None,
        help="Stop branch and bound after expanding this many states.",
    )
    parser.add_argument(
        "--initial-tour",
        choices=["index_order", "nearest_neighbor"],
        default="index_order",
        help="Heuristic seeding the branch and bound upper bound.",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Re-run solvers even if results already exist for a problem.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for solver output.",
    )
    return parser.parse_args(raw_args)


def iter_jsonl(path: pathlib.Path) -> Iterator[dict]:
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            yield json.loads(line)


def load_existing_results(path: pathlib.Path) -> dict[tuple[str, str], dict]:
    records: dict[tuple[str, str], dict] = {}
    if not path.exists():
        return records
    for row in iter_jsonl(path):
        pid = row.get("problem_id")
        algo = row.get("algorithm")
        if not pid or not algo:
            continue
        records[(pid, algo)] = row
    return records


def ensure_problem_id(problem: dict) -> str:
    if "problem_id" in problem:
        return problem["problem_id"]
    coords = np.asarray(problem.get("coordinates"), dtype=float)
    digest = hashlib.sha1(coords.tobytes()).hexdigest()
    problem["problem_id"] = digest
    return digest


def solver_options(algo_name: str, args: argparse.Namespace) -> dict:
    if algo_name == "branch_and_bound":
        return {"max_nodes": args.max_nodes, "initial_tour": args.initial_tour}
    return {}


def _run_solver_worker(
    algo_name: str,
    options: dict,
    coordinates: list[list[float]],
    time_limit: float,
    memory_limit: int | None,
    log_level: str,
    queue: mp.Queue,
) -> None:
    try:
        import resource
    except ImportError:
        resource = None

    if resource and memory_limit:
        try:
            resource.setrlimit(resource.RLIMIT_AS, (memory_limit, memory_limit))
        except (ValueError, OSError):
            pass

    logging.basicConfig(level=log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    try:
        dist = matrix_from_coordinates(coordinates)
        solver = get_solver(algo_name, **options)
        result = solver(dist, time_limit=time_limit)
        queue.put(("ok", result))
    except MemoryError:
        queue.put(("error", {"type": "memory_limit_exceeded", "message": "Solver ran out of memory"}))
    except Exception as exc:  # noqa: BLE001
        queue.put(("error", {"type": type(exc).__name__, "message": str(exc)}))


def execute_with_limits(
    problem: dict,
    algo_name: str,
    options: dict,
    time_limit: float,
    memory_limit: int | None,
    log_level: str,
) -> Tuple[AlgorithmResult | None, dict | None]:
    queue: mp.Queue = mp.Queue()
    coordinates = problem.get("coordinates")
    if coordinates is None:
        return None, {"status": "infeasible", "reason": "missing_coordinates", "error": "No coordinates in problem"}

    process = mp.Process(
        target=_run_solver_worker,
        args=(algo_name, options, coordinates, time_limit, memory_limit, log_level, queue),
    )
    process.start()
    # The solver stops itself at the time limit; the grace period covers setup and teardown.
    process.join(timeout=time_limit + 5.0)

    if process.is_alive():
        process.terminate()
        process.join()
        return None, {"status": "infeasible", "reason": "timeout"}

    result_obj: AlgorithmResult | None = None
    failure: dict | None = None

    if not queue.empty():
        status, payload = queue.get()
        if status == "ok":
            result_obj = payload
        else:
            failure = {"status": "infeasible", "reason": payload.get("type"), "error": payload.get("message")}
    else:
        if process.exitcode and process.exitcode < 0:
            signum = -process.exitcode
            if signum == signal.SIGKILL or signum == signal.SIGABRT:
                failure = {"status": "infeasible", "reason": "memory_limit_exceeded"}
        if failure is None:
            failure = {"status": "infeasible", "reason": "unknown_failure", "error": "Worker exited without result"}

    return result_obj, failure


def serialize_result(problem: dict, algorithm: str, result: AlgorithmResult) -> dict:
    record = asdict(result)
    record.update(
        {
            "algorithm": algorithm,
            "problem_id": problem["problem_id"],
            "num_cities": problem.get("num_cities", len(problem["coordinates"])),
        }
    )
    return record


def main(raw_args: Iterable[str] | None = None) -> int:
    args = parse_args(raw_args)
    if not args.problems.exists():
        raise SystemExit(f"Problem file not found: {args.problems}")

    selected_algorithms = args.algorithms or list(SOLVER_REGISTRY.keys())
    existing = load_existing_results(args.results)
    problems = list(iter_jsonl(args.problems))
    appended = 0
    reused = 0
    args.results.parent.mkdir(parents=True, exist_ok=True)
    memory_bytes = int(args.memory_limit * 1024 * 1024) if args.memory_limit else None

    with args.results.open("a", encoding="utf-8") as out:
        for problem in tqdm(problems, desc="problems", unit="problem"):
            problem_id = ensure_problem_id(problem)
            num_cities = problem.get("num_cities")
            for algo_name in selected_algorithms:
                key = (problem_id, algo_name)
                if not args.overwrite and key in existing:
                    reused += 1
                    continue
                options = solver_options(algo_name, args)
                result_obj, failure = execute_with_limits(
                    problem, algo_name, options, args.time_limit, memory_bytes, args.log_level
                )
                if result_obj:
                    record = serialize_result(problem, algo_name, result_obj)
                else:
                    record = {
                        "algorithm": algo_name,
                        "problem_id": problem_id,
                        "num_cities": num_cities,
                        **(failure or {"status": "infeasible", "reason": "unknown_failure"}),
                    }
                out.write(json.dumps(record))
                out.write("\n")
                existing[key] = record
                appended += 1
                tqdm.write(f"{algo_name} on problem {problem_id[:12]} (cities={num_cities}) -> {record.get('status')}")

    print(f"Completed {appended} new runs. Reused {reused} cached results.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
