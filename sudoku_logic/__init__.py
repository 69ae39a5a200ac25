"""Sudoku solver explaining its deductions, with backtracking and exact cover fallbacks."""

__version__ = "1.0.0"

from .core.board import SudokuBoard
from .core.events import EventType, GridEvent, Message, SolveSession
from .solvers import Method, Scope, EliminationSolver, BacktrackingSolver, DLXSolver
from .solve import solve

__all__ = [
    "__version__",
    "SudokuBoard",
    "EventType",
    "GridEvent",
    "Message",
    "SolveSession",
    "Method",
    "Scope",
    "EliminationSolver",
    "BacktrackingSolver",
    "DLXSolver",
    "solve",
]
