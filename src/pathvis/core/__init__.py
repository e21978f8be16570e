from pathvis.core.types import (
    Cell, Coord, Grid, GridError, InvalidCoordinate, StaleGridError, StepResult,
    clear_obstacles, create_grid, neighbors, reset_search_state, toggle_obstacle,
)
from pathvis.core.dijkstra import (
    BreadthFirstAlgo, DijkstraAlgo, SearchResult, make_algo, path_found,
    reconstruct_path, search, search_with_parents,
)

__all__ = [
    "Cell", "Coord", "Grid", "GridError", "InvalidCoordinate", "StaleGridError", "StepResult",
    "clear_obstacles", "create_grid", "neighbors", "reset_search_state", "toggle_obstacle",
    "BreadthFirstAlgo", "DijkstraAlgo", "SearchResult", "make_algo", "path_found",
    "reconstruct_path", "search", "search_with_parents",
]
