#!/usr/bin/env python3
"""
  ∞  F A D I N G   L I F E  ∞
  A toroidal Game of Life whose cells breathe in and out.

  The grid wraps at every edge. Cells never pop on or off: each one owns
  an opacity that drifts toward its live/dead state, so births glow in
  and deaths linger as they fade. Every so often a short "ship" streaks
  across a random row, laying down live cells as it goes, and the
  pointer paints cells alive wherever it passes.

  This module holds the simulation core: the grid, the fade field, the
  ship flock, the pointer adapter and the Simulator that drives them all
  from one frame callback. Drawing lives in life_render.py, the terminal
  host in life_term.py.
"""

from __future__ import annotations

import enum
import json
import logging
import math
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np
from numpy.typing import NDArray
from scipy.ndimage import convolve

if TYPE_CHECKING:
    from life_render import Renderer

log = logging.getLogger(__name__)

# ── Convolution kernel (reused every step) ────────────────────────────
NEIGHBOR_KERNEL: NDArray = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=np.int16)

NEIGHBOR_OFFSETS: list[tuple[int, int]] = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
]

# Opacity closer than this to its target is snapped onto it
FADE_EPSILON: float = 0.01

DEAD: int = 0
ALIVE: int = 1

Cell = tuple[int, int]
CellUpdate = tuple[Cell, int]


# ═══════════════════════════════════════════════════════════════════════
#  Errors
# ═══════════════════════════════════════════════════════════════════════

class LifeError(Exception):
    """Base class for conditions that send a simulation to INVALID."""


class InvalidSurface(LifeError):
    """The drawable surface is missing or its size cannot be read."""


class DegenerateDimensions(LifeError):
    """The surface is too small to hold a single cell."""


# ═══════════════════════════════════════════════════════════════════════
#  Configuration
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class LifeConfig:
    """Flat set of named options. Colours accept anything parse_color() does."""

    cell_pitch: int = 15
    cell_spacing: int = 1
    live_color: Any = "rgba(255, 255, 255, 0.7)"
    background_color: Any = "rgba(0, 0, 0, 0.3)"
    simulation_interval_ms: float = 100.0
    draw_empty_cells: bool = False
    empty_cell_color: Any = "rgba(50, 50, 50, 0.1)"
    fade_in_ms: float = 600.0
    fade_out_ms: float = 1000.0
    ship_spawn_interval_ms: float = 10_000.0
    max_ships: int = 3
    ship_speed_cells_per_ms: float = 0.01
    ship_length: int = 4
    initial_density: float = 0.2

    def __post_init__(self) -> None:
        if self.cell_pitch < 1:
            raise ValueError(f"cell_pitch must be >= 1, got {self.cell_pitch}")
        if not 0 <= self.cell_spacing < self.cell_pitch:
            raise ValueError(
                f"cell_spacing must be in [0, cell_pitch), got {self.cell_spacing}"
            )
        for name in ("fade_in_ms", "fade_out_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.simulation_interval_ms < 0 or self.ship_spawn_interval_ms < 0:
            raise ValueError("intervals must be non-negative")
        if self.max_ships < 0:
            raise ValueError("max_ships must be non-negative")
        if self.ship_length < 1:
            raise ValueError("ship_length must be >= 1")
        if self.ship_speed_cells_per_ms < 0:
            raise ValueError("ship_speed_cells_per_ms must be non-negative")
        if not 0.0 <= self.initial_density <= 1.0:
            raise ValueError("initial_density must be in [0, 1]")

    @classmethod
    def from_dict(cls, options: dict[str, Any]) -> LifeConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"unknown option(s): {', '.join(unknown)}")
        return cls(**options)

    @staticmethod
    def read_options(path: Path | str) -> dict[str, Any]:
        """Read a JSON object of options without applying defaults."""
        with open(path) as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object")
        return data

    @classmethod
    def load(cls, path: Path | str) -> LifeConfig:
        return cls.from_dict(cls.read_options(path))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ═══════════════════════════════════════════════════════════════════════
#  Grid
# ═══════════════════════════════════════════════════════════════════════

class Grid:
    """
    Binary cell state on a torus, double-buffered.

    Two arenas are allocated per resize; ``_cur`` says which one is the
    current generation. step() writes the other one from a frozen view of
    the current and then flips the index, so nothing is copied or
    reallocated between generations.

    Arrays are shaped (rows, cols); the public API speaks (col, row).
    """

    def __init__(self) -> None:
        self._buffers: tuple[NDArray[np.int8], NDArray[np.int8]] = (
            np.zeros((0, 0), dtype=np.int8),
            np.zeros((0, 0), dtype=np.int8),
        )
        self._cur: int = 0
        self._grid_i16: NDArray[np.int16] = np.zeros((0, 0), dtype=np.int16)
        self._neighbor_buf: NDArray[np.int16] = np.zeros((0, 0), dtype=np.int16)
        self.valid: bool = False

    # ── Shape ───────────────────────────────────────────────────────

    @property
    def cols(self) -> int:
        return self._buffers[0].shape[1]

    @property
    def rows(self) -> int:
        return self._buffers[0].shape[0]

    @property
    def shape(self) -> tuple[int, int]:
        return self._buffers[0].shape  # type: ignore[return-value]

    @property
    def current(self) -> NDArray[np.int8]:
        return self._buffers[self._cur]

    def resize(
        self,
        cols: int,
        rows: int,
        randomize: bool = True,
        density: float = 0.2,
        rng: np.random.Generator | None = None,
    ) -> None:
        if cols < 1 or rows < 1:
            self.valid = False
            self._buffers = (
                np.zeros((0, 0), dtype=np.int8),
                np.zeros((0, 0), dtype=np.int8),
            )
            self._grid_i16 = np.zeros((0, 0), dtype=np.int16)
            self._neighbor_buf = np.zeros((0, 0), dtype=np.int16)
            self._cur = 0
            return

        self._buffers = (
            np.zeros((rows, cols), dtype=np.int8),
            np.zeros((rows, cols), dtype=np.int8),
        )
        self._cur = 0
        self._grid_i16 = np.empty((rows, cols), dtype=np.int16)
        self._neighbor_buf = np.empty((rows, cols), dtype=np.int16)
        self.valid = True
        if randomize:
            self.randomize(density, rng)

    # ── Edits ───────────────────────────────────────────────────────

    def randomize(self, density: float = 0.2, rng: np.random.Generator | None = None) -> None:
        if not self.valid:
            return
        rng = rng if rng is not None else np.random.default_rng()
        np.copyto(self.current, rng.random(self.shape) < density, casting="unsafe")

    def clear(self) -> None:
        if not self.valid:
            return
        self.current[:] = DEAD

    def set_cells(self, cells: Iterable[CellUpdate]) -> None:
        """Overwrite cells in the current generation; off-grid cells are dropped."""
        if not self.valid:
            return
        g = self.current
        rows, cols = g.shape
        for (c, r), state in cells:
            if 0 <= c < cols and 0 <= r < rows:
                g[r, c] = ALIVE if state else DEAD

    # ── Rule ────────────────────────────────────────────────────────

    def neighbor_count(self, col: int, row: int) -> int:
        g = self.current
        rows, cols = g.shape
        total = 0
        for dc, dr in NEIGHBOR_OFFSETS:
            total += int(g[(row + dr) % rows, (col + dc) % cols])
        return total

    def neighbor_counts(self) -> NDArray[np.int16]:
        """Live-neighbour count of every cell (toroidal), into a reused buffer."""
        np.copyto(self._grid_i16, self.current)
        convolve(self._grid_i16, NEIGHBOR_KERNEL, output=self._neighbor_buf, mode="wrap")
        return self._neighbor_buf

    def step(self) -> None:
        """Advance one generation (B3/S23) and swap buffer roles."""
        if not self.valid:
            return
        g = self.current
        nxt = self._buffers[1 - self._cur]
        n = self.neighbor_counts()

        # Zero-copy bool view of the int8 state
        g_bool = g.view(np.bool_)
        n_is_3 = n == 3
        birth = ~g_bool & n_is_3
        survive = g_bool & (n_is_3 | (n == 2))

        # birth/survive are mutually exclusive, so their sum is the new state
        np.add(birth.view(np.int8), survive.view(np.int8), out=nxt)
        self._cur = 1 - self._cur

    def population(self) -> int:
        return int(self.current.sum()) if self.valid else 0


# ═══════════════════════════════════════════════════════════════════════
#  Fade field
# ═══════════════════════════════════════════════════════════════════════

class FadeField:
    """Per-cell opacity chasing the grid state at a fixed rate.

    Rising cells move by ``elapsed / fade_in_ms`` per call, falling cells
    by ``elapsed / fade_out_ms``. A cell that flips mid-fade turns around
    from wherever it is.
    """

    def __init__(self, shape: tuple[int, int], fade_in_ms: float, fade_out_ms: float) -> None:
        self.opacity: NDArray[np.float32] = np.zeros(shape, dtype=np.float32)
        self.fade_in_ms = fade_in_ms
        self.fade_out_ms = fade_out_ms
        self._delta_buf: NDArray[np.float32] = np.empty(shape, dtype=np.float32)
        self._step_buf: NDArray[np.float32] = np.empty(shape, dtype=np.float32)

    @property
    def shape(self) -> tuple[int, int]:
        return self.opacity.shape  # type: ignore[return-value]

    def relax(self, elapsed_ms: float, target: NDArray[np.int8]) -> None:
        if self.opacity.size == 0:
            return
        if target.shape != self.opacity.shape:
            raise ValueError(
                f"fade field is {self.opacity.shape}, target is {target.shape}"
            )

        delta = self._delta_buf
        np.subtract(target, self.opacity, out=delta, dtype=np.float32)
        snap = np.abs(delta) < FADE_EPSILON

        # Per-cell step size depends on which way the cell is heading
        step = self._step_buf
        step[:] = elapsed_ms / self.fade_out_ms
        step[target.view(np.bool_)] = elapsed_ms / self.fade_in_ms

        np.sign(delta, out=delta)
        delta *= step
        self.opacity += delta
        np.clip(self.opacity, 0.0, 1.0, out=self.opacity)
        self.opacity[snap] = target[snap]

    def value(self, col: int, row: int) -> float:
        return float(self.opacity[row, col])


# ═══════════════════════════════════════════════════════════════════════
#  Ships
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class Ship:
    """A horizontal run of live cells sliding along one row."""
    row: int
    direction: int  # +1 heading right, -1 heading left
    position: float  # fractional column of the left end
    length: int

    @property
    def column(self) -> int:
        return math.floor(self.position)

    def footprint(self) -> list[Cell]:
        c0 = self.column
        return [(c0 + i, self.row) for i in range(self.length)]

    def is_gone(self, cols: int) -> bool:
        if self.direction > 0:
            return self.position >= cols
        return self.position + self.length < 0


class ShipFlock:
    """Spawns ships on a timer and stamps them into the grid every frame."""

    def __init__(
        self,
        grid: Grid,
        ship_length: int = 4,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.ship_length = ship_length
        self.rng = rng if rng is not None else np.random.default_rng()
        self.ships: list[Ship] = []
        self.spawn_timer: float = 0.0
        self.total_spawned: int = 0

    def __len__(self) -> int:
        return len(self.ships)

    def try_spawn(self, elapsed_ms: float, max_ships: int, spawn_interval_ms: float) -> Ship | None:
        """Accrue time and launch a ship when one is due and a slot is free.

        The timer is only reset by an actual launch, so time spent at the
        cap still counts toward the next ship.
        """
        self.spawn_timer += elapsed_ms
        if self.spawn_timer >= spawn_interval_ms and len(self.ships) < max_ships:
            self.spawn_timer = 0.0
            return self.spawn()
        return None

    def spawn(self) -> Ship | None:
        rows, cols = self.grid.rows, self.grid.cols
        if rows < 1 or cols < 1:
            return None
        row = min(int(self.rng.random() * rows), rows - 1)
        direction = 1 if self.rng.random() > 0.5 else -1
        start = 0 if direction == 1 else cols - 1
        ship = Ship(row=row, direction=direction, position=float(start), length=self.ship_length)
        self.ships.append(ship)
        self.total_spawned += 1
        log.debug("ship launched on row %d heading %+d", row, direction)
        return ship

    def advance(self, elapsed_ms: float, speed_cells_per_ms: float) -> None:
        """Stamp each ship where it stands, then move it; drop ships that left."""
        cols = self.grid.cols
        survivors: list[Ship] = []
        for ship in self.ships:
            self.grid.set_cells((cell, ALIVE) for cell in ship.footprint())
            ship.position += ship.direction * speed_cells_per_ms * elapsed_ms
            if not ship.is_gone(cols):
                survivors.append(ship)
        self.ships = survivors

    def clear(self) -> None:
        self.ships.clear()
        self.spawn_timer = 0.0


# ═══════════════════════════════════════════════════════════════════════
#  Surface & scheduling protocols
# ═══════════════════════════════════════════════════════════════════════

class Surface(Protocol):
    """Anything with a pixel size that can paint translucent rectangles."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def fill_rect(
        self, x: int, y: int, w: int, h: int, rgb: tuple[int, int, int], alpha: float
    ) -> None: ...


class FrameScheduler(Protocol):
    def request_frame(self, callback: Callable[[float], None]) -> int: ...

    def cancel_frame(self, handle: int) -> None: ...


class PumpScheduler:
    """A request/cancel-frame primitive that the host drives by hand.

    At most one callback is pending. pump() detaches it before calling it,
    so a callback can request its successor without ever overlapping
    itself.
    """

    def __init__(self) -> None:
        self._pending: tuple[int, Callable[[float], None]] | None = None
        self._next_handle: int = 1

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request_frame(self, callback: Callable[[float], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending = (handle, callback)
        return handle

    def cancel_frame(self, handle: int) -> None:
        if self._pending is not None and self._pending[0] == handle:
            self._pending = None

    def pump(self, timestamp_ms: float) -> bool:
        """Run the pending frame, if any. Returns True if one ran."""
        if self._pending is None:
            return False
        _, callback = self._pending
        self._pending = None
        callback(timestamp_ms)
        return True


class ResizeDebouncer:
    """Coalesce a burst of resize signals into one, after a quiet window."""

    def __init__(self, quiet_ms: float = 250.0) -> None:
        self.quiet_ms = quiet_ms
        self._last_signal: float | None = None

    @property
    def armed(self) -> bool:
        return self._last_signal is not None

    def signal(self, now_ms: float) -> None:
        self._last_signal = now_ms

    def cancel(self) -> None:
        self._last_signal = None

    def poll(self, now_ms: float) -> bool:
        """True exactly once, when the window has passed since the last signal."""
        if self._last_signal is None or now_ms - self._last_signal < self.quiet_ms:
            return False
        self._last_signal = None
        return True


# ═══════════════════════════════════════════════════════════════════════
#  Simulator
# ═══════════════════════════════════════════════════════════════════════

class SimState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    PAUSED = "paused"
    INTERACTING = "interacting"
    INVALID = "invalid"


class Simulator:
    """
    Owns one grid, its fade field and its ships, and advances them from a
    single per-frame ``tick(t)``.

    Two clocks run side by side. The generation clock is throttled: the
    rule only fires once more than ``simulation_interval_ms`` has passed.
    The ship clock is re-marked every frame, so ships glide continuously.
    Fades relax every frame whether or not a generation happened.

    Host callbacks never touch the buffers. They queue intents, and the
    queue is drained at the top of the next tick.
    """

    def __init__(
        self,
        config: LifeConfig | None = None,
        rng: np.random.Generator | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        self.config = config if config is not None else LifeConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.renderer = renderer

        self.grid = Grid()
        self.fade = FadeField((0, 0), self.config.fade_in_ms, self.config.fade_out_ms)
        self.flock = ShipFlock(self.grid, self.config.ship_length, self.rng)
        self.surface: Surface | None = None

        self.generation: int = 0
        self.paused: bool = False
        self.interacting: bool = False
        self.last_error: LifeError | None = None
        self.last_event: str = ""

        self._initialized: bool = False
        self._invalid: bool = False
        self._destroyed: bool = False
        self._last_sim_tick: float | None = None
        self._last_ship_tick: float | None = None
        self._intents: deque[Callable[[], None]] = deque()
        self._on_invalid: list[Callable[[Simulator], None]] = []

    # ── State ───────────────────────────────────────────────────────

    @property
    def state(self) -> SimState:
        if self._invalid:
            return SimState.INVALID
        if not self._initialized:
            return SimState.UNINITIALIZED
        if self.paused:
            return SimState.PAUSED
        if self.interacting:
            return SimState.INTERACTING
        return SimState.RUNNING

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def rows(self) -> int:
        return self.grid.rows

    def population(self) -> int:
        return self.grid.population()

    def on_invalid(self, callback: Callable[[Simulator], None]) -> None:
        """Register a hook fired whenever the simulation drops to INVALID."""
        self._on_invalid.append(callback)

    def _invalidate(self, error: LifeError | None) -> None:
        was_invalid = self._invalid
        self._invalid = True
        self.last_error = error
        if error is not None:
            log.warning("simulation invalid: %s", error)
        if not was_invalid:
            for cb in list(self._on_invalid):
                cb(self)

    # ── Setup ───────────────────────────────────────────────────────

    def resize(
        self,
        surface: Surface | None,
        config: LifeConfig | None = None,
        randomize: bool = True,
    ) -> SimState:
        """(Re)build the simulation for a surface. Runs synchronously.

        Failures never raise: they leave the simulator INVALID with
        ``last_error`` describing why. A later resize with a usable
        surface brings it back, unless destroy() was called.
        """
        if self._destroyed:
            return SimState.INVALID
        if config is not None:
            self.config = config
        cfg = self.config

        try:
            cols, rows = self._measure(surface, cfg.cell_pitch)
        except LifeError as exc:
            self._invalidate(exc)
            return self.state

        # Build both halves first, then publish them together
        grid = Grid()
        grid.resize(cols, rows, randomize=randomize, density=cfg.initial_density, rng=self.rng)
        fade = FadeField(grid.shape, cfg.fade_in_ms, cfg.fade_out_ms)

        self.grid = grid
        self.fade = fade
        self.flock = ShipFlock(grid, cfg.ship_length, self.rng)
        self.surface = surface

        self.generation = 0
        self._last_sim_tick = None
        self._last_ship_tick = None
        self._initialized = True
        self._invalid = False
        self.last_error = None
        log.debug("simulation set up at %dx%d cells", cols, rows)
        return self.state

    @staticmethod
    def _measure(surface: Surface | None, pitch: int) -> tuple[int, int]:
        if surface is None:
            raise InvalidSurface("no surface")
        try:
            width = int(surface.width)
            height = int(surface.height)
        except (AttributeError, TypeError, ValueError) as exc:
            raise InvalidSurface(f"cannot read surface size: {exc}") from exc
        if width <= 0 or height <= 0:
            raise DegenerateDimensions(f"surface is {width}x{height} px")
        return max(1, width // pitch), max(1, height // pitch)

    # ── Intents (safe to call from host callbacks) ─────────────────

    def request_resize(self, surface: Surface | None, config: LifeConfig | None = None) -> None:
        self._intents.append(lambda: self.resize(surface, config))

    def set_cells(self, cells: Iterable[CellUpdate]) -> None:
        batch = list(cells)
        if batch:
            self._intents.append(lambda: self.grid.set_cells(batch))

    def clear(self) -> None:
        self._intents.append(self._apply_clear)

    def randomize(self) -> None:
        self._intents.append(
            lambda: self.grid.randomize(self.config.initial_density, self.rng)
        )

    def _apply_clear(self) -> None:
        self.grid.clear()
        self.flock.clear()

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def begin_interaction(self) -> None:
        self.interacting = True

    def end_interaction(self) -> None:
        self.interacting = False

    def destroy(self) -> None:
        """Tear down for good. Safe to call any number of times."""
        self._intents.clear()
        self._destroyed = True
        self._invalidate(None)

    def _drain_intents(self) -> None:
        while self._intents:
            intent = self._intents.popleft()
            intent()

    # ── Frame ───────────────────────────────────────────────────────

    def tick(self, t: float) -> SimState:
        """Advance by one animation frame at monotonic time ``t`` (ms)."""
        if self._destroyed:
            return SimState.INVALID
        try:
            self._drain_intents()
            if self.state in (SimState.INVALID, SimState.UNINITIALIZED):
                return self.state
            self._frame(t)
        except Exception as exc:  # never let a frame escape into the host
            log.exception("frame at t=%.1f failed", t)
            self._invalidate(LifeError(f"frame failed: {exc}"))
        return self.state

    def _frame(self, t: float) -> None:
        cfg = self.config
        if self._last_sim_tick is None:
            self._last_sim_tick = t
        if self._last_ship_tick is None:
            self._last_ship_tick = t

        delta_sim = t - self._last_sim_tick
        delta_ship = t - self._last_ship_tick

        self.last_event = ""
        if self.flock.try_spawn(delta_ship, cfg.max_ships, cfg.ship_spawn_interval_ms) is not None:
            self.last_event = "ship"

        if delta_sim > cfg.simulation_interval_ms:
            self._last_sim_tick = t
            if not self.paused and not self.interacting:
                self.grid.step()
                self.generation += 1

        self.fade.relax(delta_sim, self.grid.current)
        self.flock.advance(delta_ship, cfg.ship_speed_cells_per_ms)

        if self.renderer is not None and self.surface is not None:
            self.renderer.draw(self.grid, self.fade, self.surface, cfg)

        self._last_ship_tick = t


# ═══════════════════════════════════════════════════════════════════════
#  Animation loop
# ═══════════════════════════════════════════════════════════════════════

class Animation:
    """Keeps a Simulator ticking on a frame scheduler.

    The next frame is requested only once the current tick has returned,
    and not at all after a tick that left the simulator INVALID. start()
    and stop() are both idempotent; start() after an INVALID stop runs one
    frame so that a queued resize gets a chance to recover.
    """

    def __init__(self, sim: Simulator, scheduler: FrameScheduler) -> None:
        self.sim = sim
        self.scheduler = scheduler
        self._handle: int | None = None
        self.frames: int = 0
        sim.on_invalid(lambda _sim: self.stop())

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is None and not self.sim.destroyed:
            self._handle = self.scheduler.request_frame(self._on_frame)

    def stop(self) -> None:
        if self._handle is not None:
            self.scheduler.cancel_frame(self._handle)
            self._handle = None

    def _on_frame(self, t: float) -> None:
        self._handle = None
        state = self.sim.tick(t)
        self.frames += 1
        if state is not SimState.INVALID:
            self._handle = self.scheduler.request_frame(self._on_frame)


# ═══════════════════════════════════════════════════════════════════════
#  Pointer interaction
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class InteractionAdapter:
    """Turns pointer samples into live cells on a Simulator.

    Samples are surface-relative pixel coordinates; ``origin`` is where
    the surface sits in the host's coordinate space. A single event may
    carry several samples (one per touch point).
    """

    sim: Simulator
    origin: tuple[int, int] = (0, 0)
    enabled: bool = True
    _down: bool = field(default=False, init=False, repr=False)

    def cells_for(self, samples: Iterable[tuple[float, float]]) -> list[Cell]:
        pitch = self.sim.config.cell_pitch
        cols, rows = self.sim.cols, self.sim.rows
        ox, oy = self.origin
        cells: list[Cell] = []
        for x, y in samples:
            col = math.floor((x - ox) / pitch)
            row = math.floor((y - oy) / pitch)
            if 0 <= col < cols and 0 <= row < rows:
                cells.append((col, row))
        return cells

    def paint(self, samples: Iterable[tuple[float, float]]) -> list[Cell]:
        if not self.enabled or self.sim.state is SimState.INVALID:
            return []
        cells = self.cells_for(samples)
        self.sim.set_cells((cell, ALIVE) for cell in cells)
        return cells

    def pointer_down(self, samples: Iterable[tuple[float, float]]) -> list[Cell]:
        if not self.enabled:
            return []
        self._down = True
        self.sim.begin_interaction()
        return self.paint(samples)

    def pointer_move(self, samples: Iterable[tuple[float, float]]) -> list[Cell]:
        return self.paint(samples)

    def pointer_up(self) -> None:
        if self._down:
            self._down = False
            self.sim.end_interaction()
