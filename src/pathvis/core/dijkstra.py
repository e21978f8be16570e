# src/pathvis/core/dijkstra.py
"""
Unit-weight shortest-path search over a `Grid`.

Two working-set disciplines share one step loop:

- `BreadthFirstAlgo`  FIFO queue; all edges cost 1 so this is the O(N) traversal.
- `DijkstraAlgo`      heap keyed by (distance, row-major index); same order as
                      re-sorting every unvisited cell by distance and taking the
                      first, ties broken row-major.

Each `step()` finalizes at most one cell. Obstacles are filtered when they come
off the working set, never up front. Search fields are written into the grid's
cells in place, so a grid must be reset before it is searched again.
"""
from __future__ import annotations

import heapq
import logging
from collections import deque
from dataclasses import dataclass, field
from math import inf
from typing import Deque, Dict, List, Optional, Tuple

from pathvis.core.types import (
    Cell, Coord, Grid, StaleGridError, StepResult, neighbors,
)

logger = logging.getLogger(__name__)


@dataclass
class DijkstraAlgo:
    name: str = "Dijkstra"

    grid: Optional[Grid] = None
    start: Optional[Coord] = None
    finish: Optional[Coord] = None
    open_pq: List[Tuple[float, int]] = field(default_factory=list)   # (distance, index)
    visited_order: List[Cell] = field(default_factory=list)
    popped_count: int = 0
    done: bool = False
    no_path: bool = False

    def init(self, grid: Grid, start: Optional[Coord] = None, finish: Optional[Coord] = None) -> None:
        if grid.searched:
            raise StaleGridError("grid holds state from a previous search; reset it first")
        self.grid = grid
        self.start = tuple(start) if start is not None else grid.start
        self.finish = tuple(finish) if finish is not None else grid.finish
        # raises InvalidCoordinate
        grid.cell(self.start)
        grid.cell(self.finish)
        self._seed()

    def reset(self) -> None:
        if self.grid is None:
            return
        self.grid.reset_search()
        self._seed()

    def _seed(self) -> None:
        self._clear_frontier()
        self.visited_order.clear()
        self.popped_count = 0
        self.done = False
        self.no_path = False

        self.grid.searched = True
        s = self.grid.cell(self.start)
        s.distance = 0
        self._push(s)

    # ---- working set ----
    def _clear_frontier(self) -> None:
        self.open_pq.clear()

    def _push(self, cell: Cell) -> None:
        heapq.heappush(self.open_pq, (cell.distance, self.grid.index(cell.coord)))

    def _pop_entry(self) -> Optional[Tuple[float, int]]:
        return heapq.heappop(self.open_pq) if self.open_pq else None

    def _open_size(self) -> int:
        return len(self.open_pq)

    def _pop(self) -> Optional[Cell]:
        while True:
            entry = self._pop_entry()
            if entry is None:
                return None
            d, i = entry
            cell = self.grid.cells[i]
            if cell.visited or d != cell.distance:
                continue  # superseded entry
            return cell

    # ---- search ----
    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            path = self._path_coords()
            return StepResult(status="done", path=path, metrics=self._metrics(path_len=len(path)))

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        while True:
            u = self._pop()
            if u is None:
                self.no_path = True
                logger.debug("%s: finish %s unreachable after %d cells",
                             self.name, self.finish, len(self.visited_order))
                return StepResult(status="no_path", metrics=self._metrics())
            if not u.is_obstacle:
                break

        self.popped_count += 1
        u.visited = True
        self.visited_order.append(u)

        if u.coord == self.finish:
            self.done = True
            path = self._path_coords()
            return StepResult(status="done", closed=[u.coord], current=u.coord, path=path,
                              metrics=self._metrics(path_len=len(path)))

        opened_now: List[Coord] = []
        for n in neighbors(self.grid, u.coord):
            v = self.grid.cell(n)
            if v.visited:
                continue
            alt = u.distance + 1
            if v.distance == inf and not v.is_obstacle:
                opened_now.append(n)
            changed = alt != v.distance
            # unconditional overwrite; alt never exceeds a live distance on a non-obstacle cell.
            # Obstacles are never visited, so a farther neighbour can raise theirs and re-push them.
            v.distance = alt
            v.predecessor = u
            if changed:
                self._push(v)

        return StepResult(status="running", opened=opened_now, closed=[u.coord], current=u.coord,
                          metrics=self._metrics())

    def _path_coords(self) -> List[Coord]:
        return [c.coord for c in reconstruct_path(self.grid.cell(self.finish))]

    def _metrics(self, path_len: int = 0) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": self._open_size(),
            "closed_count": len(self.visited_order),
            "path_len": path_len,
        }


@dataclass
class BreadthFirstAlgo(DijkstraAlgo):
    name: str = "Breadth-first"

    open_q: Deque[Tuple[float, int]] = field(default_factory=deque)

    def _clear_frontier(self) -> None:
        self.open_q.clear()

    def _push(self, cell: Cell) -> None:
        self.open_q.append((cell.distance, self.grid.index(cell.coord)))

    def _pop_entry(self) -> Optional[Tuple[float, int]]:
        return self.open_q.popleft() if self.open_q else None

    def _open_size(self) -> int:
        return len(self.open_q)


FRONTIERS = {
    "queue": BreadthFirstAlgo,
    "priority": DijkstraAlgo,
}


def make_algo(frontier: str = "queue") -> DijkstraAlgo:
    try:
        return FRONTIERS[frontier]()
    except KeyError:
        raise ValueError(f"unknown frontier {frontier!r}; expected one of {sorted(FRONTIERS)}") from None


def search(grid: Grid, start: Optional[Coord] = None, finish: Optional[Coord] = None,
           *, frontier: str = "queue") -> List[Cell]:
    """Run a search to completion and return the cells in visitation order.

    The finish cell is the last element only if it was reached. Distances and
    predecessors are left on the grid's cells; call `reset_search_state` before
    searching the same grid again.
    """
    algo = make_algo(frontier)
    algo.init(grid, start, finish)
    logger.debug("%s search %s -> %s on %dx%d grid", algo.name, algo.start, algo.finish,
                 grid.rows, grid.cols)
    while True:
        res = algo.step()
        if res.status in ("done", "no_path"):
            break
    return list(algo.visited_order)


@dataclass
class SearchResult:
    start: Coord
    finish: Coord
    visited: List[Coord] = field(default_factory=list)
    distances: Dict[Coord, int] = field(default_factory=dict)
    parents: Dict[Coord, Coord] = field(default_factory=dict)

    @property
    def reached(self) -> bool:
        return bool(self.visited) and self.visited[-1] == self.finish

    def path(self) -> List[Coord]:
        path: List[Coord] = []
        cur: Optional[Coord] = self.finish
        while cur is not None:
            path.append(cur)
            cur = self.parents.get(cur)
        path.reverse()
        return path


def search_with_parents(grid: Grid, start: Optional[Coord] = None, finish: Optional[Coord] = None,
                        *, frontier: str = "queue") -> SearchResult:
    order = search(grid, start, finish, frontier=frontier)
    result = SearchResult(
        start=tuple(start) if start is not None else grid.start,
        finish=tuple(finish) if finish is not None else grid.finish,
        visited=[c.coord for c in order],
    )
    for c in grid.iter_cells():
        if c.is_obstacle or c.distance == inf:
            continue
        result.distances[c.coord] = int(c.distance)
        if c.predecessor is not None:
            result.parents[c.coord] = c.predecessor.coord
    return result


def reconstruct_path(finish: Cell) -> List[Cell]:
    """Walk predecessor links back from `finish`.

    Returns `[finish]` alone when the search never reached it; check
    `path_found` before treating the result as a route.
    """
    path: List[Cell] = []
    cur: Optional[Cell] = finish
    while cur is not None:
        path.append(cur)
        cur = cur.predecessor
    path.reverse()
    return path


def path_found(path: List[Cell]) -> bool:
    # the search origin is the only reached cell without a predecessor
    return bool(path) and path[0].predecessor is None and path[0].distance == 0
