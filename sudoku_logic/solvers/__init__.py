"""Solvers module for Sudoku puzzles."""

from .base_solver import BaseSolver, SolverStats, Method, Scope, RuleKind
from .elimination_solver import EliminationSolver
from .backtracking_solver import BacktrackingSolver
from .dlx_solver import DLXSolver

__all__ = [
    "BaseSolver",
    "SolverStats",
    "Method",
    "Scope",
    "RuleKind",
    "EliminationSolver",
    "BacktrackingSolver",
    "DLXSolver",
]
