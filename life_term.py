#!/usr/bin/env python3
"""
Terminal host for fading life.

Runs a Simulator inside curses: one grid cell per half-block pixel,
opacity shown as a ramp from the background colour to the live colour.

  Controls:
    q         quit               SPACE     pause / resume
    r         reseed             c         clear
    s         toggle stats overlay
    mouse     drag to paint cells alive

Resizing the terminal rebuilds the grid once the window has been still
for a moment. Telemetry goes to life_stats.csv beside this script.
"""

from __future__ import annotations

import argparse
import curses
import dataclasses
import logging
import time
from pathlib import Path
from typing import IO, ClassVar

import numpy as np

from life import (
    Animation,
    InteractionAdapter,
    LifeConfig,
    PumpScheduler,
    ResizeDebouncer,
    SimState,
    Simulator,
)
from life_render import ColorMap, CursesSurface, Renderer

log = logging.getLogger(__name__)

LOG_PATH = Path(__file__).resolve().parent / "life_stats.csv"
DEBUG_LOG_PATH = Path(__file__).resolve().parent / "life.log"

# Terminal look: one cell per pixel, violet on near-black
TERMINAL_DEFAULTS: dict[str, object] = {
    "cell_pitch": 1,
    "cell_spacing": 0,
    "live_color": "rgba(132, 0, 255, 0.82)",
    "background_color": "rgba(9, 5, 15, 0.4)",
    "ship_speed_cells_per_ms": 0.02,
}

# Escape sequence asking the terminal to report motion with a button held
_MOTION_ON = "\033[?1002h"
_MOTION_OFF = "\033[?1002l"


# ═══════════════════════════════════════════════════════════════════════
#  Stats logger
# ═══════════════════════════════════════════════════════════════════════

class StatsLogger:
    """Writes simulation telemetry to CSV for post-hoc tuning."""

    HEADER: ClassVar[str] = "gen,time_s,population,ships,state,event\n"

    def __init__(self, path: Path) -> None:
        self._path = path
        self._fh: IO[str] | None = None
        self._t0: float = time.monotonic()

    def open(self) -> None:
        try:
            self._fh = open(self._path, "w")
            self._fh.write(self.HEADER)
            self._fh.flush()
        except OSError as exc:
            log.warning("stats log disabled: %s", exc)
            self._fh = None

    def log(self, gen: int, pop: int, ships: int, state: str, event: str = "") -> None:
        if self._fh is None:
            return
        t = time.monotonic() - self._t0
        self._fh.write(f"{gen},{t:.1f},{pop},{ships},{state},{event}\n")
        # Flush on events or periodically
        if event or gen % 50 == 0:
            try:
                self._fh.flush()
            except OSError:
                pass

    def close(self) -> None:
        if self._fh is not None:
            try:
                self._fh.close()
            except OSError:
                pass
            self._fh = None


# ═══════════════════════════════════════════════════════════════════════
#  Configuration
# ═══════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fading Game of Life in the terminal")
    parser.add_argument("--config", type=Path, default=None,
                        help="JSON file of LifeConfig options")
    parser.add_argument("--interval", type=float, default=None,
                        help="Milliseconds between generations (default: 100)")
    parser.add_argument("--fade-in", type=float, default=None,
                        help="Fade-in duration in ms (default: 600)")
    parser.add_argument("--fade-out", type=float, default=None,
                        help="Fade-out duration in ms (default: 1000)")
    parser.add_argument("--ships", type=int, default=None,
                        help="Maximum ships in flight (default: 3)")
    parser.add_argument("--ship-interval", type=float, default=None,
                        help="Milliseconds between ship launches (default: 10000)")
    parser.add_argument("--density", type=float, default=None,
                        help="Initial live fraction (default: 0.2)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")
    parser.add_argument("--fps", type=float, default=30.0,
                        help="Target frames per second (default: 30)")
    parser.add_argument("--debounce", type=float, default=250.0,
                        help="Quiet window before a resize is applied, ms (default: 250)")
    parser.add_argument("--stats-log", type=Path, default=LOG_PATH,
                        help="Telemetry CSV path")
    parser.add_argument("--log-file", type=Path, default=DEBUG_LOG_PATH,
                        help="Diagnostic log path")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log debug detail")
    return parser


def config_from_args(args: argparse.Namespace) -> LifeConfig:
    """Terminal defaults, then the JSON file, then command-line flags."""
    options: dict[str, object] = dict(TERMINAL_DEFAULTS)
    if args.config is not None:
        options.update(LifeConfig.read_options(args.config))
    overrides = {
        "simulation_interval_ms": args.interval,
        "fade_in_ms": args.fade_in,
        "fade_out_ms": args.fade_out,
        "max_ships": args.ships,
        "ship_spawn_interval_ms": args.ship_interval,
        "initial_density": args.density,
    }
    cfg = LifeConfig.from_dict(options)
    return dataclasses.replace(cfg, **{k: v for k, v in overrides.items() if v is not None})


# ═══════════════════════════════════════════════════════════════════════
#  Overlay
# ═══════════════════════════════════════════════════════════════════════

def _draw_stats_overlay(
    stdscr: curses.window, sim: Simulator, anim: Animation, max_y: int, max_x: int
) -> None:
    """Draw the engine telemetry panel in the bottom-right."""
    panel_w = 34
    cfg = sim.config
    lines = [
        f"{'':─<{panel_w - 2}}",
        " fading life",
        f" grid        : {sim.cols}x{sim.rows}",
        f" state       : {sim.state.value}",
        f" ships       : {len(sim.flock)}/{cfg.max_ships}",
        f" launched    : {sim.flock.total_spawned}",
        f" tick        : {cfg.simulation_interval_ms:g} ms",
        f" fade in/out : {cfg.fade_in_ms:g}/{cfg.fade_out_ms:g} ms",
        f" frames      : {anim.frames:,}",
    ]
    x0 = max_x - panel_w - 2
    y0 = max_y - len(lines) - 2
    if x0 < 0 or y0 < 0:
        return

    for i, line in enumerate(lines):
        row = y0 + i
        if 0 <= row < max_y - 1:
            padded = f" {line:<{panel_w - 1}}"[:panel_w]
            try:
                stdscr.addstr(row, x0, padded, curses.A_DIM)
            except curses.error:
                pass


def _draw_status(stdscr: curses.window, sim: Simulator, max_y: int, max_x: int) -> None:
    left = (
        f"  {sim.state.value}  gen {sim.generation:,}  "
        f"pop {sim.population():,}  ships {len(sim.flock)}"
    )
    right = "q r c spc s  mouse paints  "
    pad = max(1, max_x - len(left) - len(right) - 1)
    status = (left + " " * pad + right)[: max_x - 1]
    try:
        stdscr.addstr(max_y - 1, 0, status, curses.A_DIM)
    except curses.error:
        pass


# ═══════════════════════════════════════════════════════════════════════
#  Main loop
# ═══════════════════════════════════════════════════════════════════════

def _pointer_samples(mx: int, my: int) -> list[tuple[float, float]]:
    # A terminal cell covers two stacked pixels; paint both
    return [(float(mx), float(my * 2)), (float(mx), float(my * 2 + 1))]


def run(stdscr: curses.window, args: argparse.Namespace) -> None:
    curses.curs_set(0)
    stdscr.nodelay(True)
    stdscr.timeout(0)
    curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
    curses.mouseinterval(0)
    print(_MOTION_ON, end="", flush=True)

    cfg = config_from_args(args)
    renderer = Renderer()
    renderer.sync_colors(cfg)
    base = renderer.background[:3]
    live = renderer.live_rgb

    cmap = ColorMap()
    cmap.setup(base, live)

    rng = np.random.default_rng(args.seed)
    sim = Simulator(cfg, rng=rng, renderer=renderer)
    max_y, max_x = stdscr.getmaxyx()
    surface = CursesSurface(max_y - 1, max_x)
    sim.resize(surface)

    scheduler = PumpScheduler()
    anim = Animation(sim, scheduler)
    anim.start()
    pointer = InteractionAdapter(sim)
    debouncer = ResizeDebouncer(args.debounce)

    stats = StatsLogger(args.stats_log)
    stats.open()

    frame_s = 1.0 / max(1.0, args.fps)
    t0 = time.monotonic()
    show_stats = False
    last_logged_gen = -1

    try:
        while True:
            frame_start = time.monotonic()
            now_ms = (frame_start - t0) * 1000.0

            # ── Input ──────────────────────────────────────────────
            try:
                key = stdscr.getch()
            except curses.error:
                key = -1

            if key in (ord("q"), ord("Q")):
                break
            elif key == ord(" "):
                if sim.paused:
                    sim.resume()
                else:
                    sim.pause()
            elif key in (ord("r"), ord("R")):
                sim.randomize()
            elif key in (ord("c"), ord("C")):
                sim.clear()
            elif key in (ord("s"), ord("S")):
                show_stats = not show_stats
            elif key == curses.KEY_MOUSE:
                try:
                    _, mx, my, _, bstate = curses.getmouse()
                except curses.error:
                    bstate = 0
                if bstate & curses.BUTTON1_PRESSED:
                    pointer.pointer_down(_pointer_samples(mx, my))
                elif bstate & curses.BUTTON1_RELEASED:
                    pointer.pointer_move(_pointer_samples(mx, my))
                    pointer.pointer_up()
                elif bstate & curses.BUTTON1_CLICKED:
                    pointer.pointer_down(_pointer_samples(mx, my))
                    pointer.pointer_up()
                elif bstate & curses.REPORT_MOUSE_POSITION:
                    pointer.pointer_move(_pointer_samples(mx, my))
            elif key == curses.KEY_RESIZE:
                debouncer.signal(now_ms)

            if debouncer.poll(now_ms):
                curses.update_lines_cols()
                max_y, max_x = stdscr.getmaxyx()
                surface = CursesSurface(max_y - 1, max_x)
                sim.request_resize(surface)
                anim.start()

            # ── Simulate + draw into the surface ───────────────────
            scheduler.pump(now_ms)

            if sim.last_event or (
                sim.generation != last_logged_gen and sim.generation % 10 == 0
            ):
                stats.log(
                    gen=sim.generation,
                    pop=sim.population(),
                    ships=len(sim.flock),
                    state=sim.state.value,
                    event=sim.last_event,
                )
                last_logged_gen = sim.generation

            # ── Present ────────────────────────────────────────────
            max_y, max_x = stdscr.getmaxyx()
            stdscr.erase()
            if sim.state is not SimState.INVALID:
                surface.present(stdscr, cmap, base, live)
            if show_stats:
                _draw_stats_overlay(stdscr, sim, anim, max_y, max_x)
            _draw_status(stdscr, sim, max_y, max_x)
            stdscr.refresh()

            elapsed = time.monotonic() - frame_start
            time.sleep(max(0.0, frame_s - elapsed))

    finally:
        anim.stop()
        sim.destroy()
        stats.close()
        print(_MOTION_OFF, end="", flush=True)


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        filename=str(args.log_file),
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        curses.wrapper(run, args)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
