"""Renderer, colour parsing and the pixel / terminal surfaces."""

import curses

import pytest

from life import FadeField, Grid, LifeConfig
from life_render import (
    LOWER_HALF,
    UPPER_HALF,
    ColorMap,
    CursesSurface,
    PixelSurface,
    Renderer,
    parse_color,
    rgb_to_xterm,
)


class RecordingSurface:
    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.calls = []

    def fill_rect(self, x, y, w, h, rgb, alpha):
        self.calls.append((x, y, w, h, tuple(rgb), alpha))


class FakeWindow:
    """Minimal curses.window stub that records addstr calls."""

    def __init__(self, rows, cols):
        self._rows = rows
        self._cols = cols
        self.calls = []

    def getmaxyx(self):
        return self._rows, self._cols

    def addstr(self, y, x, text, attr=0):
        self.calls.append((y, x, text, attr))


@pytest.fixture
def config():
    return LifeConfig(
        cell_pitch=10,
        cell_spacing=2,
        live_color="rgba(132, 0, 255, 0.82)",
        background_color="rgba(9, 5, 15, 0.4)",
    )


@pytest.fixture
def scene():
    grid = Grid()
    grid.resize(3, 2, randomize=False)
    fade = FadeField(grid.shape, 600.0, 1000.0)
    return grid, fade


class TestParseColor:
    @pytest.mark.parametrize("text, expected", [
        ("rgba(132, 0, 255, 0.82)", (132, 0, 255, 0.82)),
        ("rgb(1,2,3)", (1, 2, 3, 1.0)),
        ("RGBA( 9 , 5 , 15 , 0.4 )", (9, 5, 15, 0.4)),
        ("#fff", (255, 255, 255, 1.0)),
        ("#102030", (16, 32, 48, 1.0)),
        ((10, 20, 30), (10, 20, 30, 1.0)),
        ([10, 20, 30, 0.5], (10, 20, 30, 0.5)),
    ])
    def test_accepted_forms(self, text, expected):
        assert parse_color(text) == expected

    def test_hex_alpha(self):
        r, g, b, a = parse_color("#00000080")
        assert (r, g, b) == (0, 0, 0)
        assert a == pytest.approx(128 / 255)

    def test_out_of_range_values_are_clamped(self):
        assert parse_color("rgba(300, -4, 12.6, 2)") == (255, 0, 13, 1.0)

    @pytest.mark.parametrize("bad", ["", "red", "rgba(1, 2)", "rgb(a, b, c)", "#12", (1, 2), 42])
    def test_rejected_forms(self, bad):
        with pytest.raises(ValueError):
            parse_color(bad)

    def test_xterm_cube_corners(self):
        assert rgb_to_xterm((0, 0, 0)) == 16
        assert rgb_to_xterm((255, 255, 255)) == 231
        assert rgb_to_xterm((255, 0, 0)) == 196


class TestRenderer:
    def test_background_then_visible_cells(self, scene, config):
        grid, fade = scene
        fade.opacity[0, 1] = 0.5
        surface = RecordingSurface(30, 20)
        Renderer().draw(grid, fade, surface, config)
        assert surface.calls == [
            (0, 0, 30, 20, (9, 5, 15), 0.4),
            (10, 0, 8, 8, (132, 0, 255), 0.5),
        ]

    def test_live_colour_alpha_is_ignored_for_cells(self, scene, config):
        grid, fade = scene
        fade.opacity[1, 2] = 1.0
        surface = RecordingSurface(30, 20)
        Renderer().draw(grid, fade, surface, config)
        assert surface.calls[-1] == (20, 10, 8, 8, (132, 0, 255), 1.0)

    def test_draw_empty_cells_paints_every_cell(self, scene, config):
        grid, fade = scene
        fade.opacity[1, 0] = 0.25
        config.draw_empty_cells = True
        surface = RecordingSurface(30, 20)
        renderer = Renderer()
        renderer.draw(grid, fade, surface, config)
        cells = surface.calls[1:]
        assert len(cells) == 6
        assert renderer.cells_drawn == 6
        empties = [c for c in cells if c[4] == (50, 50, 50)]
        assert len(empties) == 5
        assert all(c[5] == pytest.approx(0.1) for c in empties)
        assert (0, 10, 8, 8, (132, 0, 255), 0.25) in cells

    def test_invalid_grid_draws_background_only(self, config):
        surface = RecordingSurface(30, 20)
        Renderer().draw(Grid(), FadeField((0, 0), 1.0, 1.0), surface, config)
        assert len(surface.calls) == 1

    def test_colours_follow_config_changes(self, scene, config):
        grid, fade = scene
        renderer = Renderer()
        renderer.draw(grid, fade, RecordingSurface(30, 20), config)
        config.live_color = "#00ff00"
        renderer.draw(grid, fade, RecordingSurface(30, 20), config)
        assert renderer.live_rgb == (0, 255, 0)


class TestPixelSurface:
    def test_opaque_fill(self):
        s = PixelSurface(4, 4)
        s.fill_rect(0, 0, 2, 2, (255, 0, 0), 1.0)
        assert s.pixel(1, 1) == (255, 0, 0)
        assert s.pixel(2, 2) == (0, 0, 0)

    def test_translucent_fill_blends_over(self):
        s = PixelSurface(4, 4)
        s.fill_rect(0, 0, 4, 4, (255, 0, 0), 1.0)
        s.fill_rect(0, 0, 4, 4, (0, 0, 255), 0.5)
        r, g, b = s.pixel(0, 0)
        assert abs(r - 128) <= 1 and g == 0 and abs(b - 128) <= 1

    def test_fills_are_clipped(self):
        s = PixelSurface(4, 4)
        s.fill_rect(-5, -5, 7, 7, (10, 10, 10), 1.0)
        assert s.pixel(1, 1) == (10, 10, 10)
        assert s.pixel(2, 2) == (0, 0, 0)

    def test_offscreen_and_transparent_fills_do_nothing(self):
        s = PixelSurface(4, 4)
        s.fill_rect(10, 10, 3, 3, (255, 255, 255), 1.0)
        s.fill_rect(0, 0, 4, 4, (255, 255, 255), 0.0)
        assert s.fills == 0
        assert not s.to_uint8().any()


class TestCursesSurface:
    def test_two_pixels_per_terminal_row(self):
        s = CursesSurface(2, 3)
        assert (s.width, s.height) == (3, 4)

    def test_levels_span_background_to_live(self):
        s = CursesSurface(1, 2)
        s.fill_rect(0, 0, 1, 1, (255, 255, 255), 1.0)
        lv = s.levels((0, 0, 0), (255, 255, 255), 12)
        assert lv[0, 0] == 11
        assert lv[1, 1] == 0

    def test_levels_with_identical_colours_are_flat(self):
        s = CursesSurface(1, 2)
        s.fill_rect(0, 0, 2, 2, (40, 40, 40), 1.0)
        assert not s.levels((40, 40, 40), (40, 40, 40), 12).any()

    def test_present_uses_half_blocks(self, monkeypatch):
        monkeypatch.setattr(curses, "color_pair", lambda n: n)
        s = CursesSurface(2, 3)
        white = (255, 255, 255)
        s.fill_rect(0, 0, 1, 1, white, 1.0)  # top half of column 0
        s.fill_rect(1, 1, 1, 1, white, 1.0)  # bottom half of column 1
        s.fill_rect(2, 0, 1, 2, white, 1.0)  # both halves of column 2
        win = FakeWindow(5, 10)
        drawn = s.present(win, ColorMap(), (0, 0, 0), white)
        assert drawn == 3
        assert [(y, x, ch) for y, x, ch, _ in win.calls] == [
            (0, 0, UPPER_HALF),
            (0, 1, LOWER_HALF),
            (0, 2, UPPER_HALF),
        ]

    def test_gradient_runs_from_base_to_live(self):
        colors = ColorMap.gradient((0, 0, 0), (255, 255, 255), 12)
        assert len(colors) == 12
        assert colors[0] == 16
        assert colors[-1] == 231
