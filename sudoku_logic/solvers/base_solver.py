"""Base solver interface, solving options and statistics."""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List
import time
import tracemalloc

from ..core.board import SudokuBoard
from ..core.validator import validate_solution
from ..core.events import SolveSession


class Method(Enum):
    """Solving methods, also used to report the method effectively used."""
    NONE = "none"
    EXACT_COVER = "exact-cover"
    ELIMINATION = "elimination"
    BACKTRACKING = "backtracking"

    @property
    def exit_code(self) -> int:
        """Process return code: 0 no solution, 1 elimination, 2 backtracking, 3 exact cover."""
        codes = {
            Method.NONE: 0,
            Method.ELIMINATION: 1,
            Method.BACKTRACKING: 2,
            Method.EXACT_COVER: 3,
        }
        return codes[self]


class Scope(Enum):
    """Search for the first solution only, or for all of them."""
    FIRST = "first"
    ALL = "all"


class RuleKind(Enum):
    """Deduction rules of the elimination method."""
    CANDIDATE_EXCLUSION = "Cell exclusion"
    VALUE_EXCLUSION = "Candidate exclusion"
    LINE_EXCLUSION = "Value exclusion"
    INTERSECTION_EXCLUSION = "Regions exclusion"


@dataclass
class SolverStats:
    """
    Statistics from a solver run.

    A single instance is shared by every recursive call of one solve, so
    counters accumulate across all hypothesis branches.
    """
    # Core metrics
    solved: bool = False
    solutions: int = 0
    time_seconds: float = 0.0
    memory_bytes: int = 0

    # Elimination metrics
    rules: int = 0
    rules_by_depth: Dict[RuleKind, Dict[int, int]] = field(
        default_factory=lambda: defaultdict(lambda: defaultdict(int))
    )
    hypotheses: int = 0
    backtracking_depth: int = 0
    backtracking_steps: int = 0
    # Last value assigned for each count of resolved cells: trail[n - 1]
    # describes the n-th resolved cell, e.g. " 7. Bk=3" or "23. Ep=4?".
    trail: List[Optional[str]] = field(default_factory=list)

    # Search metrics
    backtracks: int = 0
    nodes_explored: int = 0

    # Additional metadata
    algorithm: str = ""
    method: Optional[Method] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def record_rule(self, kind: RuleKind, depth: int, weight: int = 1) -> None:
        self.rules += weight
        self.rules_by_depth[kind][depth] += 1

    def rule_count(self, kind: RuleKind) -> int:
        return sum(self.rules_by_depth[kind].values()) if kind in self.rules_by_depth else 0

    def log_step(self, resolved: int, text: str) -> None:
        if resolved > 0:
            if len(self.trail) < resolved:
                self.trail.extend([None] * (resolved - len(self.trail)))
            self.trail[resolved - 1] = f"{resolved:2d}. {text}"

    def report(self) -> str:
        """End-of-solve summary of the elimination counters."""
        lines = [
            f"{self.solutions} solution{'s' if self.solutions != 1 else ''} found.",
            f"Solved with {self.rules} rules and {self.hypotheses} hypothesis.",
        ]
        for kind in (RuleKind.CANDIDATE_EXCLUSION, RuleKind.VALUE_EXCLUSION,
                     RuleKind.LINE_EXCLUSION):
            lines.append(f"{kind.value}:")
            by_depth = self.rules_by_depth.get(kind, {})
            for depth in sorted(by_depth, reverse=True):
                if by_depth[depth] > 0:
                    lines.append(f"\tDepth {depth}: {by_depth[depth]}")
        by_depth = self.rules_by_depth.get(RuleKind.INTERSECTION_EXCLUSION, {})
        lines.append(f"{RuleKind.INTERSECTION_EXCLUSION.value}:")
        lines.append(f"\t{sum(d * count for d, count in by_depth.items())}")
        lines.append("Backtracking:")
        lines.append(f"\tDepth: {self.backtracking_depth}")
        lines.append(f"\tSteps: {self.backtracking_steps}")
        lines.append(f"\tHypothesis: {self.hypotheses}")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "solved": self.solved,
            "solutions": self.solutions,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "rules": self.rules,
            "rules_by_depth": {
                kind.name.lower(): dict(by_depth)
                for kind, by_depth in self.rules_by_depth.items()
            },
            "hypotheses": self.hypotheses,
            "backtracking_depth": self.backtracking_depth,
            "backtracking_steps": self.backtracking_steps,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            "algorithm": self.algorithm,
            "method": self.method.value if self.method else None,
            **self.extra
        }


class BaseSolver(ABC):
    """Abstract base class for Sudoku solvers."""

    name: str = "BaseSolver"
    method: Method = Method.NONE

    def __init__(self, scope: Scope = Scope.ALL, session: Optional[SolveSession] = None):
        """
        Args:
            scope: Search for the first solution only, or for all of them.
            session: Listeners notified of grid events and rule messages.
        """
        self.scope = scope
        self.session = session if session is not None else SolveSession()
        self.stats = SolverStats(algorithm=self.name)
        self.track_memory = True

    def solve(self, board: SudokuBoard) -> tuple[List[SudokuBoard], SolverStats]:
        """
        Solve a Sudoku puzzle with timing and memory tracking.

        Memory is only measured when ``track_memory`` is set and nothing
        else is tracing allocations; ``memory_bytes`` stays 0 otherwise, and
        tracing started elsewhere is left running.

        Args:
            board: The puzzle to solve.

        Returns:
            Tuple of (solutions found, stats). The list is empty when the
            grid has no solution.
        """
        self.stats = SolverStats(algorithm=self.name)

        tracing = self.track_memory and not tracemalloc.is_tracing()
        if tracing:
            tracemalloc.start()
        start_time = time.perf_counter()

        try:
            solutions = self._solve(board.copy())
        finally:
            self.stats.time_seconds = time.perf_counter() - start_time
            if tracing:
                _, peak = tracemalloc.get_traced_memory()
                tracemalloc.stop()
                self.stats.memory_bytes = peak

        self.stats.solved = bool(solutions) and all(validate_solution(board, s) for s in solutions)
        self.stats.solutions = len(solutions)
        if self.stats.method is None:
            self.stats.method = self.method if solutions else Method.NONE
        return solutions, self.stats

    @abstractmethod
    def _solve(self, board: SudokuBoard) -> List[SudokuBoard]:
        """
        Internal solve method to be implemented by subclasses.

        Args:
            board: A copy of the puzzle to solve (can be modified).

        Returns:
            The solutions found, possibly none.
        """
        pass
