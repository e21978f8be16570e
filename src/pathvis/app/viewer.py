# src/pathvis/app/viewer.py
#!/usr/bin/env python3
"""
Pathfinding Visualizer — draw walls, then watch the search

- Mouse:
    [LEFT] press / drag  -> toggle walls (start/finish stay fixed)
- Keyboard:
    [SPACE]      -> visualize (pause/resume while replaying)
    [R]          -> reset search
    [C]          -> clear walls
    [F]          -> switch frontier (queue / priority)
    [+]/[-]      -> replay speed
    [Q]/[ESC]    -> quit

Settings: see pathvis.app.config (defaults, JSON, PATHVIS_* env, --key=value).
"""
from __future__ import annotations

import logging
import sys
from typing import List, Tuple, Optional, Dict

import pygame

from pathvis.app.config import ConfigError, ViewerConfig, load_config
from pathvis.app.replay import Replay
from pathvis.core.dijkstra import path_found, reconstruct_path, search
from pathvis.core.types import (
    Coord, Grid, GridError, clear_obstacles, create_grid, toggle_obstacle,
)

logger = logging.getLogger(__name__)

# ---------- Config ----------
PANEL_W = 320            # right band: metrics + buttons
GRID_MARGIN = 16
FONT_NAME = None  # default pygame font
MAX_SPEED = 16

FRONTIER_LABELS = {"queue": "Queue (BFS)", "priority": "Priority"}

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
FLOOR_GRAY  = (200,200,200)
WALL_DARK   = ( 40, 46, 58)
VISITED_A   = (0,150,255,110)
PATH_GOLD   = (255,210,0)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        hi = pygame.Surface((self.rect.width, 18), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255,255,255,20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0,0))
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        """Returns True when the event was a click on this button."""
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid: Grid, config: Optional[ViewerConfig] = None):
        pygame.init()

        self.grid = grid
        self.config = config or ViewerConfig()
        self.cell_size = self.config.cell_size
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        grid_px_w = GRID_MARGIN*2 + grid.cols * self.cell_size
        grid_px_h = GRID_MARGIN*2 + grid.rows * self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 520)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Pathfinding Visualizer")

        self.frontier = self.config.frontier
        self.speed = 1
        self.state = "Idle"
        self.replay: Optional[Replay] = None
        self.replay_elapsed = 0.0
        self.paused = False
        self.mouse_pressed = False
        self._last_drag_cell: Optional[Coord] = None
        self._last_metrics: Dict[str, int] = {"visited": 0, "path_len": 0}

        self._buttons: list[UIButton] = []
        self._layout(win_w, win_h)
        self.clock = pygame.time.Clock()

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)

        cs_by_w = avail_w // self.grid.cols
        cs_by_h = avail_h // self.grid.rows
        self.cell_size = int(max(4, min(cs_by_w, cs_by_h, self.config.cell_size)))

        grid_plate_w = self.grid.cols * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.grid.rows * self.cell_size + 2 * GRID_MARGIN

        left_x = max(0, (win_w - (grid_plate_w + PANEL_W)) // 2)
        top_y  = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right),
                                       win_h)
        self._build_buttons()

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Coord]:
        ox, oy = self._grid_origin
        x, y = pos
        if x < ox or y < oy:
            return None
        coord = ((y - oy) // self.cell_size, (x - ox) // self.cell_size)
        return coord if self.grid.in_bounds(coord) else None

    def cell_center(self, coord: Coord) -> Tuple[int, int]:
        ox, oy = self._grid_origin
        row, col = coord
        cs = self.cell_size
        return (ox + col*cs + cs//2, oy + row*cs + cs//2)

    # ---------- loop ----------
    def run(self):
        while True:
            self._handle_events()
            self._advance(self.clock.tick(60))
            self._draw()

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self.visualize()
                elif e.key == pygame.K_r:
                    self.reset()
                elif e.key == pygame.K_c:
                    self.clear_walls()
                elif e.key == pygame.K_f:
                    self.switch_frontier("priority" if self.frontier == "queue" else "queue")
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    self._bump_speed(+1)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE, pygame.K_KP_MINUS):
                    self._bump_speed(-1)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
                self.handle_mouse(e)

    def handle_mouse(self, e: pygame.event.Event):
        if e.type == pygame.MOUSEBUTTONUP and e.button == 1:
            self.mouse_pressed = False
            self._last_drag_cell = None
            return
        clicked = False
        for b in list(self._buttons):
            clicked = b.handle_mouse(e) or clicked
        if clicked:
            return
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            cell = self.cell_at(e.pos)
            if cell is not None:
                self.mouse_pressed = True
                self.toggle_wall(cell)
        elif e.type == pygame.MOUSEMOTION and self.mouse_pressed:
            cell = self.cell_at(e.pos)
            if cell is not None and cell != self._last_drag_cell:
                self.toggle_wall(cell)

    # ---------- actions ----------
    @property
    def replaying(self) -> bool:
        return self.replay is not None and not self.replay.finished(self.replay_elapsed)

    def toggle_wall(self, cell: Coord):
        self._last_drag_cell = cell
        if self.replaying:
            return
        if self.grid.searched:
            self.reset()
        toggle_obstacle(self.grid, cell)

    def visualize(self):
        if self.replaying:
            self.paused = not self.paused
            self.state = "Paused" if self.paused else "Running"
            self._refresh_active_states()
            return
        if self.grid.searched:
            self.reset()

        order = search(self.grid, frontier=self.frontier)
        path_cells = reconstruct_path(self.grid.finish_cell)
        path = [c.coord for c in path_cells] if path_found(path_cells) else []
        logger.info("%s search visited %d cells, path %s",
                    FRONTIER_LABELS[self.frontier], len(order),
                    f"{len(path)} cells" if path else "not found")

        self.replay = Replay([c.coord for c in order], path,
                             self.config.visit_delay_ms, self.config.path_delay_ms)
        self.replay_elapsed = 0.0
        self.paused = False
        self.state = "Running"
        self._last_metrics = {"visited": len(order), "path_len": len(path)}
        self._refresh_active_states()

    def _advance(self, dt_ms: float):
        if self.replay is None or self.paused or self.state in ("Done", "No path"):
            return
        self.replay_elapsed += dt_ms * self.speed
        if self.replay.finished(self.replay_elapsed):
            self.state = "Done" if self.replay.path else "No path"
            self._refresh_active_states()

    def reset(self):
        self.replay = None
        self.replay_elapsed = 0.0
        self.paused = False
        self.state = "Idle"
        self.grid.reset_search()
        self._last_metrics = {"visited": 0, "path_len": 0}
        self._refresh_active_states()

    def clear_walls(self):
        self.reset()
        clear_obstacles(self.grid)

    def switch_frontier(self, frontier: str):
        if frontier not in FRONTIER_LABELS:
            return
        self.reset()
        self.frontier = frontier
        self._refresh_active_states()

    def _bump_speed(self, direction: int):
        self.speed = self.speed * 2 if direction > 0 else self.speed // 2
        self.speed = int(max(1, min(MAX_SPEED, self.speed)))

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = (
                int(top[0] + (bot[0]-top[0]) * t),
                int(top[1] + (bot[1]-top[1]) * t),
                int(top[2] + (bot[2]-top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_rect(self, coord: Coord) -> pygame.Rect:
        ox, oy = self._grid_origin
        row, col = coord
        cs = self.cell_size
        return pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)

    def _draw_grid(self):
        cs = self.cell_size

        for cell in self.grid.iter_cells():
            rect = self._cell_rect(cell.coord)
            pygame.draw.rect(self.screen, WALL_DARK if cell.is_obstacle else FLOOR_GRAY, rect)
            pygame.draw.rect(self.screen, BLACK, rect, 1)

        if self.replay is not None:
            n_visited, n_path = self.replay.frame(self.replay_elapsed)
            overlay = pygame.Surface((cs, cs), pygame.SRCALPHA); overlay.fill(VISITED_A)
            for coord in self.replay.visited[:n_visited]:
                self.screen.blit(overlay, self._cell_rect(coord).topleft)
            for coord in self.replay.path[:n_path]:
                pygame.draw.rect(self.screen, PATH_GOLD, self._cell_rect(coord).inflate(-2, -2))

        self._draw_badge(self.grid.start, BLUE, "S")
        self._draw_badge(self.grid.finish, RED, "F")

    def _draw_badge(self, cell: Coord, color: Tuple[int,int,int], label: str):
        cx, cy = self.cell_center(cell)
        pygame.draw.circle(self.screen, color, (cx,cy), max(4, self.cell_size//2 - 2))
        txt = self.font_small.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=(cx,cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 210  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        def add(label, cb, *, togglable=False, store_as: str | None = None):
            rect = pygame.Rect(x, y, w, h)
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Visualize / Pause", self.visualize, togglable=True, store_as="btn_run"); y += h + gap
        add("Reset Search", self.reset);      y += h + gap
        add("Clear Walls", self.clear_walls); y += h + gap

        minus_rect = pygame.Rect(x, y, (w-8)//2, h)
        plus_rect  = pygame.Rect(x + (w-8)//2 + 8, y, (w-8)//2, h)
        self._buttons.append(UIButton("Speed −", minus_rect, lambda: self._bump_speed(-1)))
        self._buttons.append(UIButton("Speed +", plus_rect,  lambda: self._bump_speed(+1)))
        y += h + gap

        add("Frontier: Queue",    lambda: self.switch_frontier("queue"),    togglable=True, store_as="btn_queue"); y += h + gap
        add("Frontier: Priority", lambda: self.switch_frontier("priority"), togglable=True, store_as="btn_priority")

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.replaying and not self.paused)
        if hasattr(self, "btn_queue"):
            self.btn_queue.set_active(self.frontier == "queue")
        if hasattr(self, "btn_priority"):
            self.btn_priority.set_active(self.frontier == "priority")

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 190
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Visited: {m.get('visited', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        line(f"Walls: {len(self.grid.obstacles())}")
        line("-" * 26)
        line(f"Frontier: {FRONTIER_LABELS[self.frontier]}")
        line(f"Status: {self.state}")
        line(f"Speed: {self.speed}x")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main(argv: Optional[List[str]] = None):
    try:
        config = load_config(argv)
    except ConfigError as ex:
        print(f"Failed to load config: {ex}")
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        grid = create_grid(config.rows, config.cols, config.start, config.finish)
    except GridError as ex:
        logger.error("Failed to build grid: %s", ex)
        sys.exit(1)
    Viewer(grid, config).run()

if __name__ == "__main__":
    main()
