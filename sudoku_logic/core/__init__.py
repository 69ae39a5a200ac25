"""Core module for Sudoku board representation, candidate grids and events."""

from .board import SudokuBoard
from .validator import check_values, validate_solution
from .grid import CandidateGrid
from .events import EventType, GridEvent, Message, SolveSession

__all__ = [
    "SudokuBoard",
    "check_values",
    "validate_solution",
    "CandidateGrid",
    "EventType",
    "GridEvent",
    "Message",
    "SolveSession",
]
