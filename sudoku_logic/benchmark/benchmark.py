"""Benchmarking framework for comparing the solving methods."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError
import json
import logging
import os

from tqdm import tqdm

from ..core.board import SudokuBoard
from ..puzzles import TEST_GRIDS
from ..solve import get_solver
from ..solvers import Method, Scope

log = logging.getLogger(__name__)


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    puzzle_id: int
    label: str
    algorithm: str
    solved: bool
    solutions: int
    time_seconds: float
    memory_bytes: int
    rules: int = 0
    hypotheses: int = 0
    backtracks: int = 0
    nodes_explored: int = 0
    method: str = Method.NONE.value
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "puzzle_id": self.puzzle_id,
            "label": self.label,
            "algorithm": self.algorithm,
            "solved": self.solved,
            "solutions": self.solutions,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "memory_mb": self.memory_bytes / (1024 * 1024),
            "rules": self.rules,
            "hypotheses": self.hypotheses,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            "method": self.method,
            **self.extra
        }


class Benchmark:
    """
    Runs several solving methods on the same puzzles and collects metrics.

    A run exceeding ``timeout_seconds`` is recorded as unsolved. The solver
    thread cannot be interrupted, so it finishes in the background; while it
    does, later runs share the interpreter with it, so their memory is not
    measured and their result carries a ``caveat``.
    """

    DEFAULT_METHODS: List[Method] = [Method.ELIMINATION, Method.BACKTRACKING, Method.EXACT_COVER]

    def __init__(
        self,
        puzzles: Optional[List[Tuple[str, SudokuBoard]]] = None,
        methods: Optional[List[Method]] = None,
        scope: Scope = Scope.FIRST,
        timeout_seconds: float = 60.0,
        size: int = 9,
    ):
        """
        Initialize the benchmark.

        Args:
            puzzles: (label, board) pairs; defaults to the sample grids of ``size``.
            methods: Methods to compare (default: all).
            scope: First solution only, or all of them.
            timeout_seconds: Maximum time per puzzle per method.
            size: Grid size of the default puzzles.
        """
        if puzzles is None:
            puzzles = [
                (f"sample-{i}", SudokuBoard.from_string(text, size))
                for i, text in enumerate(TEST_GRIDS.get(size, []), 1)
            ]
        self.puzzles = puzzles
        self.methods = methods or list(self.DEFAULT_METHODS)
        self.scope = scope
        self.timeout_seconds = timeout_seconds
        self.results: List[BenchmarkResult] = []
        # timed-out runs whose thread may still be working
        self.pending: List[Future] = []

    def run(self, show_progress: bool = True) -> List[BenchmarkResult]:
        """
        Run the full benchmark suite.

        Returns:
            List of BenchmarkResult objects.
        """
        self.results = []

        pbar = tqdm(total=len(self.puzzles) * len(self.methods),
                    desc="Benchmarking", disable=not show_progress)

        for puzzle_id, (label, puzzle) in enumerate(self.puzzles):
            for method in self.methods:
                result = self._run_single(puzzle, puzzle_id, label, method)
                self.results.append(result)
                pbar.update(1)

        pbar.close()
        return self.results

    def _run_single(
        self,
        puzzle: SudokuBoard,
        puzzle_id: int,
        label: str,
        method: Method
    ) -> BenchmarkResult:
        """Run a single method on a single puzzle."""
        solver = get_solver(method, self.scope)
        self.pending = [f for f in self.pending if not f.done()]
        solver.track_memory = not self.pending

        # Use a worker thread to enforce the timeout
        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(solver.solve, puzzle)
        try:
            solutions, stats = future.result(timeout=self.timeout_seconds)
            extra = dict(stats.extra)
            if self.pending:
                extra["caveat"] = (f"{len(self.pending)} timed-out run(s) still in the background: "
                                   "memory not measured, time may be inflated")
            return BenchmarkResult(
                puzzle_id=puzzle_id,
                label=label,
                algorithm=method.value,
                solved=stats.solved,
                solutions=len(solutions),
                time_seconds=stats.time_seconds,
                memory_bytes=stats.memory_bytes,
                rules=stats.rules,
                hypotheses=stats.hypotheses,
                backtracks=stats.backtracks,
                nodes_explored=stats.nodes_explored,
                method=stats.method.value if stats.method else Method.NONE.value,
                extra=extra
            )
        except TimeoutError:
            log.warning("%s timed out on %s after %.1fs", method.value, label, self.timeout_seconds)
            self.pending.append(future)
            return BenchmarkResult(
                puzzle_id=puzzle_id,
                label=label,
                algorithm=method.value,
                solved=False,
                solutions=0,
                time_seconds=self.timeout_seconds,
                memory_bytes=0,
                extra={"error": "Timeout"}
            )
        finally:
            executor.shutdown(wait=False)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics from benchmark results."""
        summary = {
            "total_puzzles": len(self.puzzles),
            "methods_tested": [m.value for m in self.methods],
            "scope": self.scope.value,
            "results_by_algorithm": {},
            "results_by_puzzle": {}
        }

        # Group by algorithm
        for method in self.methods:
            method_results = [r for r in self.results if r.algorithm == method.value]
            if method_results:
                solved = [r for r in method_results if r.solved]
                times = [r.time_seconds for r in method_results]
                memory = [r.memory_bytes for r in method_results]

                summary["results_by_algorithm"][method.value] = {
                    "accuracy": len(solved) / len(method_results) * 100,
                    "avg_time_seconds": sum(times) / len(times),
                    "max_time_seconds": max(times),
                    "min_time_seconds": min(times),
                    "avg_memory_mb": sum(memory) / len(memory) / (1024 * 1024),
                    "avg_hypotheses": sum(r.hypotheses for r in method_results) / len(method_results),
                    "avg_nodes_explored": sum(r.nodes_explored for r in method_results) / len(method_results),
                    "total_solved": len(solved),
                    "total_tested": len(method_results)
                }

        # Group by puzzle
        for label, _ in self.puzzles:
            summary["results_by_puzzle"][label] = {
                r.algorithm: {
                    "solved": r.solved,
                    "solutions": r.solutions,
                    "time_seconds": r.time_seconds,
                    "method": r.method,
                }
                for r in self.results if r.label == label
            }

        return summary

    def save_results(self, output_dir: str) -> None:
        """Save benchmark results and summary as JSON files."""
        os.makedirs(output_dir, exist_ok=True)

        # Save raw results as JSON
        results_file = os.path.join(output_dir, "benchmark_results.json")
        with open(results_file, "w") as f:
            json.dump([r.to_dict() for r in self.results], f, indent=2)

        # Save summary
        summary_file = os.path.join(output_dir, "benchmark_summary.json")
        with open(summary_file, "w") as f:
            json.dump(self.get_summary(), f, indent=2)

        log.info("Results saved to %s", output_dir)
