"""
Drawing for fading life.

The Renderer paints a background wash and then one translucent square per
visible cell onto any Surface. PixelSurface is an in-memory RGB canvas
that composites those squares the way a 2-D canvas would; CursesSurface
extends it with a half-block terminal presentation.
"""

from __future__ import annotations

import curses
import re
from typing import Any

import numpy as np
from numpy.typing import NDArray

from life import FadeField, Grid, LifeConfig, Surface

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, float]

# ── Half-block characters ───────────────────────────────────────────────
UPPER_HALF = "\u2580"  # ▀  top pixel lit
LOWER_HALF = "\u2584"  # ▄  bottom pixel lit

# Opacity levels the terminal can show between background and live colour
GRADIENT_STEPS: int = 12

_FUNC_COLOR = re.compile(r"^\s*rgba?\(([^)]*)\)\s*$", re.IGNORECASE)
_HEX_COLOR = re.compile(r"^\s*#([0-9a-f]{3}|[0-9a-f]{6}|[0-9a-f]{8})\s*$", re.IGNORECASE)


# ═══════════════════════════════════════════════════════════════════════
#  Colours
# ═══════════════════════════════════════════════════════════════════════

def _channel(value: float) -> int:
    return max(0, min(255, int(round(value))))


def _alpha(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def parse_color(value: Any) -> RGBA:
    """Parse ``rgba(r, g, b, a)``, ``rgb(r, g, b)``, ``#rgb``/``#rrggbb[aa]``
    or a 3-/4-tuple into ``(r, g, b, alpha)``.

    >>> parse_color("rgba(132, 0, 255, 0.82)")
    (132, 0, 255, 0.82)
    """
    if isinstance(value, (tuple, list)):
        if len(value) == 3:
            return _channel(value[0]), _channel(value[1]), _channel(value[2]), 1.0
        if len(value) == 4:
            return (
                _channel(value[0]), _channel(value[1]), _channel(value[2]),
                _alpha(value[3]),
            )
        raise ValueError(f"colour tuple needs 3 or 4 components: {value!r}")

    if not isinstance(value, str):
        raise ValueError(f"not a colour: {value!r}")

    m = _FUNC_COLOR.match(value)
    if m:
        parts = [p.strip() for p in m.group(1).split(",")]
        if len(parts) not in (3, 4):
            raise ValueError(f"bad colour: {value!r}")
        try:
            nums = [float(p) for p in parts]
        except ValueError:
            raise ValueError(f"bad colour: {value!r}") from None
        alpha = _alpha(nums[3]) if len(nums) == 4 else 1.0
        return _channel(nums[0]), _channel(nums[1]), _channel(nums[2]), alpha

    m = _HEX_COLOR.match(value)
    if m:
        digits = m.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
        alpha = int(digits[6:8], 16) / 255.0 if len(digits) == 8 else 1.0
        return r, g, b, alpha

    raise ValueError(f"bad colour: {value!r}")


def rgb_to_xterm(rgb: RGB) -> int:
    """Nearest entry in the xterm-256 6×6×6 colour cube."""
    r, g, b = (int(round(c / 255 * 5)) for c in rgb)
    return 16 + 36 * r + 6 * g + b


# ═══════════════════════════════════════════════════════════════════════
#  Renderer
# ═══════════════════════════════════════════════════════════════════════

class Renderer:
    """Paints a grid's fade field onto a Surface.

    Colour strings are parsed once and re-parsed only when the config's
    colour values change.
    """

    def __init__(self) -> None:
        self._color_key: tuple[Any, Any, Any] | None = None
        self.live_rgb: RGB = (255, 255, 255)
        self.background: RGBA = (0, 0, 0, 1.0)
        self.empty: RGBA = (0, 0, 0, 0.0)
        self.cells_drawn: int = 0

    def sync_colors(self, cfg: LifeConfig) -> None:
        key = (cfg.live_color, cfg.background_color, cfg.empty_cell_color)
        if key == self._color_key:
            return
        # Cells take their alpha from the fade field, not the live colour
        r, g, b, _ = parse_color(cfg.live_color)
        self.live_rgb = (r, g, b)
        self.background = parse_color(cfg.background_color)
        self.empty = parse_color(cfg.empty_cell_color)
        self._color_key = key

    def draw(self, grid: Grid, fade: FadeField, surface: Surface, cfg: LifeConfig) -> None:
        self.sync_colors(cfg)
        bg_r, bg_g, bg_b, bg_a = self.background
        surface.fill_rect(0, 0, surface.width, surface.height, (bg_r, bg_g, bg_b), bg_a)

        self.cells_drawn = 0
        if not grid.valid or fade.shape != grid.shape:
            return

        pitch = cfg.cell_pitch
        side = pitch - cfg.cell_spacing
        opacity = fade.opacity

        if cfg.draw_empty_cells:
            rows_idx, cols_idx = np.indices(opacity.shape)
            ys = rows_idx.ravel().tolist()
            xs = cols_idx.ravel().tolist()
            alphas = opacity.ravel().tolist()
        else:
            rows_idx, cols_idx = np.nonzero(opacity > 0.0)
            ys = rows_idx.tolist()
            xs = cols_idx.tolist()
            alphas = opacity[rows_idx, cols_idx].tolist()

        # Local references (avoid attribute lookups in tight loop)
        _fill = surface.fill_rect
        live = self.live_rgb
        er, eg, eb, ea = self.empty
        empty_rgb = (er, eg, eb)

        for i in range(len(ys)):
            x = xs[i] * pitch
            y = ys[i] * pitch
            a = alphas[i]
            if a > 0.0:
                _fill(x, y, side, side, live, a)
            else:
                _fill(x, y, side, side, empty_rgb, ea)
        self.cells_drawn = len(ys)


# ═══════════════════════════════════════════════════════════════════════
#  Surfaces
# ═══════════════════════════════════════════════════════════════════════

class PixelSurface:
    """An RGB float canvas with source-over alpha compositing.

    Like a browser canvas it is never cleared between frames, so a
    translucent background wash leaves short trails behind moving cells.
    """

    def __init__(self, width: int, height: int) -> None:
        self._width = max(0, int(width))
        self._height = max(0, int(height))
        self.pixels: NDArray[np.float32] = np.zeros(
            (self._height, self._width, 3), dtype=np.float32
        )
        self.fills: int = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def fill_rect(self, x: int, y: int, w: int, h: int, rgb: RGB, alpha: float) -> None:
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(self._width, x + w), min(self._height, y + h)
        if x0 >= x1 or y0 >= y1 or alpha <= 0.0:
            return
        self.fills += 1
        region = self.pixels[y0:y1, x0:x1]
        if alpha >= 1.0:
            region[:] = rgb
        else:
            region *= 1.0 - alpha
            region += np.asarray(rgb, dtype=np.float32) * alpha

    def pixel(self, x: int, y: int) -> RGB:
        r, g, b = self.pixels[y, x]
        return _channel(r), _channel(g), _channel(b)

    def to_uint8(self) -> NDArray[np.uint8]:
        return np.clip(np.rint(self.pixels), 0, 255).astype(np.uint8)


class ColorMap:
    """Curses colour pairs for a background → live colour gradient.

    One foreground pair per gradient step plus one pair for every
    (top, bottom) combination so a half-block can show two steps at once.
    """

    def __init__(self, steps: int = GRADIENT_STEPS) -> None:
        self.steps = steps
        self.colors: list[int] = []
        self._fg_pairs: dict[int, int] = {}
        self._dual_pairs: dict[tuple[int, int], int] = {}

    @staticmethod
    def gradient(base: RGB, live: RGB, steps: int) -> list[int]:
        out: list[int] = []
        for i in range(steps):
            t = i / (steps - 1) if steps > 1 else 1.0
            rgb = tuple(int(round(b + (l - b) * t)) for b, l in zip(base, live))
            out.append(rgb_to_xterm(rgb))  # type: ignore[arg-type]
        return out

    def setup(self, base: RGB, live: RGB) -> None:
        curses.start_color()
        curses.use_default_colors()
        self.colors = self.gradient(base, live, self.steps)
        self._fg_pairs.clear()
        self._dual_pairs.clear()
        max_pairs = curses.COLOR_PAIRS - 1
        max_color = curses.COLORS - 1
        pair_id = 1

        for i, c in enumerate(self.colors):
            if pair_id > max_pairs:
                break
            curses.init_pair(pair_id, min(c, max_color), -1)
            self._fg_pairs[i] = pair_id
            pair_id += 1

        for i, ci in enumerate(self.colors):
            for j, cj in enumerate(self.colors):
                if pair_id > max_pairs:
                    break
                curses.init_pair(pair_id, min(ci, max_color), min(cj, max_color))
                self._dual_pairs[(i, j)] = pair_id
                pair_id += 1

    def fg(self, level: int) -> int:
        return self._fg_pairs.get(level, 0)

    def dual(self, top: int, bot: int) -> int:
        return self._dual_pairs.get((top, bot), 0)


class CursesSurface(PixelSurface):
    """A PixelSurface sized for a terminal: one column per pixel across,
    two pixels per row down (upper and lower half-blocks)."""

    def __init__(self, term_rows: int, term_cols: int) -> None:
        super().__init__(term_cols, term_rows * 2)

    def levels(self, base: RGB, live: RGB, steps: int) -> NDArray[np.intp]:
        """Quantise every pixel to its position on the base → live ramp."""
        b = np.asarray(base, dtype=np.float32)
        axis = np.asarray(live, dtype=np.float32) - b
        norm = float(axis @ axis)
        if norm == 0.0:
            return np.zeros(self.pixels.shape[:2], dtype=np.intp)
        t = ((self.pixels - b) @ axis) / norm
        np.clip(t, 0.0, 1.0, out=t)
        return np.rint(t * (steps - 1)).astype(np.intp)

    def present(self, stdscr: curses.window, cmap: ColorMap, base: RGB, live: RGB) -> int:
        """Write the canvas to the screen as half-blocks. Returns chars drawn."""
        max_y, max_x = stdscr.getmaxyx()
        lv = self.levels(base, live, cmap.steps)
        draw_rows = min(self.height // 2, max_y - 1)
        draw_cols = min(self.width, max_x)

        row_end = draw_rows * 2
        top = lv[0:row_end:2, :draw_cols]
        bot = lv[1:row_end:2, :draw_cols]
        active_ys, active_xs = np.nonzero((top > 0) | (bot > 0))

        ys = active_ys.tolist()
        xs = active_xs.tolist()
        tl = top[active_ys, active_xs].tolist()
        bl = bot[active_ys, active_xs].tolist()

        _addstr = stdscr.addstr
        _color_pair = curses.color_pair
        _dual = cmap.dual
        _fg = cmap.fg

        for i in range(len(ys)):
            try:
                if tl[i] and bl[i]:
                    _addstr(ys[i], xs[i], UPPER_HALF, _color_pair(_dual(tl[i], bl[i])))
                elif tl[i]:
                    _addstr(ys[i], xs[i], UPPER_HALF, _color_pair(_fg(tl[i])))
                else:
                    _addstr(ys[i], xs[i], LOWER_HALF, _color_pair(_fg(bl[i])))
            except curses.error:
                pass
        return len(ys)
