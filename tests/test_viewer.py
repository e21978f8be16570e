import pygame
import pytest

from pathvis.app import viewer as viewer_mod
from pathvis.app.config import ViewerConfig
from pathvis.core.types import create_grid


@pytest.fixture
def viewer():
    config = ViewerConfig(rows=5, cols=5, start=(0, 0), finish=(4, 4), cell_size=20)
    grid = create_grid(config.rows, config.cols, config.start, config.finish)
    v = viewer_mod.Viewer(grid, config)
    yield v
    pygame.quit()


def _press(v, coord):
    v.handle_mouse(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=v.cell_center(coord)))


def _move(v, coord):
    v.handle_mouse(pygame.event.Event(pygame.MOUSEMOTION, pos=v.cell_center(coord), rel=(0, 0), buttons=(1, 0, 0)))


def _release(v):
    v.handle_mouse(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(0, 0)))


def test_cell_at_maps_pixels_to_coords(viewer):
    assert viewer.cell_at(viewer.cell_center((3, 1))) == (3, 1)
    assert viewer.cell_at((0, 0)) is None


def test_press_and_drag_toggle_walls(viewer):
    _press(viewer, (1, 1))
    _move(viewer, (1, 2))
    _move(viewer, (1, 2))
    _release(viewer)
    _move(viewer, (2, 2))

    assert viewer.grid.obstacles() == [(1, 1), (1, 2)]
    assert not viewer.mouse_pressed


def test_endpoints_cannot_become_walls(viewer):
    _press(viewer, (0, 0))
    _move(viewer, (4, 4))
    _release(viewer)
    assert viewer.grid.obstacles() == []


def test_visualize_replays_path_to_completion(viewer):
    viewer.visualize()
    replay = viewer.replay

    assert viewer.state == "Running"
    assert replay.visited[0] == (0, 0) and replay.visited[-1] == (4, 4)
    assert replay.path[0] == (0, 0) and replay.path[-1] == (4, 4)
    assert len(replay.path) == 9

    viewer._advance(replay.total_ms + 1)
    assert viewer.state == "Done"
    assert not viewer.replaying


def test_walls_locked_while_replaying(viewer):
    viewer.visualize()
    _press(viewer, (2, 2))
    _release(viewer)
    assert viewer.grid.obstacles() == []


def test_space_pauses_running_replay(viewer):
    viewer.visualize()
    viewer.visualize()
    assert viewer.paused and viewer.state == "Paused"
    viewer._advance(10_000)
    assert viewer.replay_elapsed == 0
    viewer.visualize()
    assert viewer.state == "Running"


def test_toggle_after_run_resets_search(viewer):
    viewer.visualize()
    viewer._advance(viewer.replay.total_ms)
    _press(viewer, (2, 2))
    _release(viewer)

    assert viewer.replay is None
    assert not viewer.grid.searched
    assert viewer.grid.obstacles() == [(2, 2)]


def test_enclosed_finish_reports_no_path(viewer):
    for coord in [(3, 4), (4, 3)]:
        _press(viewer, coord)
        _release(viewer)
    viewer.visualize()

    assert viewer.replay.path == []
    assert (4, 4) not in viewer.replay.visited
    viewer._advance(viewer.replay.total_ms)
    assert viewer.state == "No path"


def test_rerun_after_finish_needs_no_manual_reset(viewer):
    viewer.visualize()
    first = list(viewer.replay.visited)
    viewer._advance(viewer.replay.total_ms)
    viewer.visualize()
    assert viewer.replay.visited == first


def test_frontier_button_and_clear_walls(viewer):
    _press(viewer, (2, 2))
    _release(viewer)
    viewer.handle_mouse(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=viewer.btn_priority.rect.center))
    assert viewer.frontier == "priority"
    assert viewer.btn_priority.active and not viewer.btn_queue.active

    viewer.clear_walls()
    assert viewer.grid.obstacles() == []


def test_speed_is_clamped(viewer):
    for _ in range(10):
        viewer._bump_speed(+1)
    assert viewer.speed == viewer_mod.MAX_SPEED
    for _ in range(10):
        viewer._bump_speed(-1)
    assert viewer.speed == 1


def test_draw_does_not_fail(viewer):
    viewer.visualize()
    viewer._advance(35)
    viewer._draw()


def test_main_exits_on_bad_config():
    with pytest.raises(SystemExit) as exc:
        viewer_mod.main(["--frontier=stack"])
    assert exc.value.code == 1


def test_main_exits_on_bad_grid(monkeypatch):
    monkeypatch.delenv("PATHVIS_CONFIG", raising=False)
    with pytest.raises(SystemExit) as exc:
        viewer_mod.main(["--rows=3", "--cols=3", "--start=0,0", "--finish=5,5"])
    assert exc.value.code == 1
