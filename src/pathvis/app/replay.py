# src/pathvis/app/replay.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

Coord = Tuple[int, int]


@dataclass
class Replay:
    """Timeline for re-showing a finished search.

    Visited cell i appears at i * visit_delay_ms. The path starts once every
    visited cell is shown (len(visited) * visit_delay_ms) and path cell j
    appears j * path_delay_ms after that.
    """
    visited: List[Coord] = field(default_factory=list)
    path: List[Coord] = field(default_factory=list)
    visit_delay_ms: int = 10
    path_delay_ms: int = 50

    @property
    def path_start_ms(self) -> int:
        return len(self.visited) * self.visit_delay_ms

    @property
    def total_ms(self) -> int:
        if not self.path:
            return max(0, (len(self.visited) - 1) * self.visit_delay_ms)
        return self.path_start_ms + (len(self.path) - 1) * self.path_delay_ms

    @staticmethod
    def _shown(elapsed: float, count: int, delay: int) -> int:
        if elapsed < 0 or count == 0:
            return 0
        if delay <= 0:
            return count
        return min(count, int(elapsed // delay) + 1)

    def frame(self, elapsed_ms: float) -> Tuple[int, int]:
        """(visited cells shown, path cells shown) at `elapsed_ms`."""
        n_visited = self._shown(elapsed_ms, len(self.visited), self.visit_delay_ms)
        n_path = self._shown(elapsed_ms - self.path_start_ms, len(self.path), self.path_delay_ms)
        return n_visited, n_path

    def finished(self, elapsed_ms: float) -> bool:
        return elapsed_ms >= self.total_ms
