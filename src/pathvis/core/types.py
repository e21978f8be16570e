# src/pathvis/core/types.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from math import inf
from typing import Iterator, List, Tuple, Optional, Dict, Any

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]  # (row, col)


class GridError(ValueError):
    """Base error for grid construction and search misuse."""


class InvalidCoordinate(GridError):
    pass


class StaleGridError(GridError):
    """Search state from a previous run is still on the grid."""


@dataclass(eq=False)
class Cell:
    row: int
    col: int
    is_start: bool = False
    is_finish: bool = False
    is_obstacle: bool = False
    distance: float = inf
    visited: bool = False
    predecessor: Optional["Cell"] = None

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)

    def clear_search(self) -> None:
        self.distance = inf
        self.visited = False
        self.predecessor = None

    def __repr__(self) -> str:
        flags = "".join(f for f, on in (("S", self.is_start), ("F", self.is_finish),
                                        ("#", self.is_obstacle), ("v", self.visited)) if on)
        return f"Cell({self.row}, {self.col}{', ' + flags if flags else ''})"


@dataclass
class Grid:
    rows: int
    cols: int
    start: Coord
    finish: Coord
    cells: List[Cell] = field(default_factory=list)   # row-major
    searched: bool = False

    def in_bounds(self, c: Coord) -> bool:
        r, col = c
        return 0 <= r < self.rows and 0 <= col < self.cols

    def index(self, c: Coord) -> int:
        r, col = c
        return r * self.cols + col

    def cell(self, c: Coord) -> Cell:
        if not self.in_bounds(c):
            raise InvalidCoordinate(f"{c} outside {self.rows}x{self.cols} grid")
        return self.cells[self.index(c)]

    def is_obstacle(self, c: Coord) -> bool:
        return self.cell(c).is_obstacle

    @property
    def start_cell(self) -> Cell:
        return self.cell(self.start)

    @property
    def finish_cell(self) -> Cell:
        return self.cell(self.finish)

    def iter_cells(self) -> Iterator[Cell]:
        return iter(self.cells)

    def obstacles(self) -> List[Coord]:
        return [c.coord for c in self.cells if c.is_obstacle]

    def reset_search(self) -> None:
        for c in self.cells:
            c.clear_search()
        self.searched = False


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Coord] = field(default_factory=list)
    closed: List[Coord] = field(default_factory=list)
    current: Optional[Coord] = None
    path: Optional[List[Coord]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


def create_grid(rows: int, cols: int, start: Coord, finish: Coord) -> Grid:
    if rows < 1 or cols < 1:
        raise GridError(f"grid needs at least one row and column, got {rows}x{cols}")
    start, finish = tuple(start), tuple(finish)
    grid = Grid(rows, cols, start, finish)
    if not grid.in_bounds(start):
        raise InvalidCoordinate(f"start {start} out of bounds")
    if not grid.in_bounds(finish):
        raise InvalidCoordinate(f"finish {finish} out of bounds")
    if start == finish:
        raise InvalidCoordinate(f"start and finish coincide at {start}")
    grid.cells = [
        Cell(r, c, is_start=(r, c) == start, is_finish=(r, c) == finish)
        for r in range(rows)
        for c in range(cols)
    ]
    return grid


def toggle_obstacle(grid: Grid, coord: Coord) -> Grid:
    cell = grid.cell(tuple(coord))
    if cell.is_start or cell.is_finish:
        logger.debug("Ignoring obstacle toggle on endpoint %s", cell.coord)
        return grid
    cell.is_obstacle = not cell.is_obstacle
    return grid


def clear_obstacles(grid: Grid) -> Grid:
    for c in grid.cells:
        c.is_obstacle = False
    return grid


def reset_search_state(grid: Grid) -> Grid:
    grid.reset_search()
    return grid


def neighbors(grid: Grid, coord: Coord) -> List[Coord]:
    r, c = coord
    # up, down, left, right
    candidates: List[Coord] = [
        (r - 1, c),
        (r + 1, c),
        (r, c - 1),
        (r, c + 1),
    ]
    return [n for n in candidates if grid.in_bounds(n)]
