# src/lodegen/grid.py
# Level grid: flat row-major tile buffer plus entity/exit metadata and live holes.
# Out-of-bounds reads are HARD so movement code never special-cases the rim.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .config import DEFAULT_DIFFICULTY
from .tiles import (
    EMPTY, GOLD, HOLE, OUT_OF_BOUNDS,
    is_climbable, is_diggable_tile, is_pole, is_solid, is_support,
    tile_char, tile_from_char,
)
from .timing import DEFAULT_TIMING, TimingModel

XY = Tuple[int, int]

# Text-only markers (cells stay EMPTY in the tile buffer)
START_MARK = "P"
ENEMY_MARK = "E"
EXIT_MARK = "X"


class TileQueries:
    """Read-only classification shared by Grid and LevelSnapshot."""

    width: int
    height: int
    exit_ladders: Sequence[XY]

    def get(self, x: int, y: int) -> int:  # pragma: no cover - overridden
        raise NotImplementedError

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_solid(self, x: int, y: int) -> bool:
        return is_solid(self.get(x, y))

    def supports(self, x: int, y: int) -> bool:
        """True if a body standing in the cell above (x, y) would not fall."""
        return is_support(self.get(x, y))

    def is_climbable(self, x: int, y: int) -> bool:
        return is_climbable(self.get(x, y))

    def is_pole(self, x: int, y: int) -> bool:
        return is_pole(self.get(x, y))

    def is_diggable(self, x: int, y: int) -> bool:
        # Digging under a ladder would strand the ladder's landing.
        if not is_diggable_tile(self.get(x, y)):
            return False
        if is_climbable(self.get(x, y - 1)):
            return False
        return (x, y - 1) not in self.exit_ladders

    def rows(self) -> List[List[int]]:
        return [[self.get(x, y) for x in range(self.width)] for y in range(self.height)]

    def as_text(self, mark_entities: bool = True) -> List[str]:
        out = [[tile_char(t) for t in row] for row in self.rows()]
        if mark_entities:
            for x, y in self.exit_ladders:
                if self.in_bounds(x, y) and self.get(x, y) == EMPTY:
                    out[y][x] = EXIT_MARK
            for x, y in getattr(self, "enemy_spawns", ()):
                out[y][x] = ENEMY_MARK
            sx, sy = getattr(self, "start", (-1, -1))
            if self.in_bounds(sx, sy):
                out[sy][sx] = START_MARK
        return ["".join(r) for r in out]


@dataclass
class Hole:
    x: int
    y: int
    timer: float
    original: int


@dataclass
class HoleUpdate:
    filled: List[Hole] = field(default_factory=list)
    warning: List[Hole] = field(default_factory=list)


@dataclass
class Grid(TileQueries):
    width: int
    height: int
    buf: List[int]
    start: XY = (0, 0)
    enemy_spawns: List[XY] = field(default_factory=list)
    items: List[XY] = field(default_factory=list)
    exit_ladders: List[XY] = field(default_factory=list)
    hole_scale: float = 1.0
    difficulty: str = DEFAULT_DIFFICULTY
    holes: List[Hole] = field(default_factory=list)
    timing: TimingModel = field(default=DEFAULT_TIMING, compare=False, repr=False)

    @classmethod
    def empty(cls, width: int, height: int, fill: int = EMPTY, **kw) -> "Grid":
        return cls(width=width, height=height, buf=[fill] * (width * height), **kw)

    @classmethod
    def from_text(cls, lines: Sequence[str], **kw) -> "Grid":
        """
        Build a grid from one string per row. Besides tile characters:
        P = start, E = enemy spawn, X = hidden exit cell (left EMPTY).
        Gold cells ($) are also recorded as items.
        """
        if not lines:
            raise ValueError("no rows")
        width = len(lines[0])
        if any(len(row) != width for row in lines):
            raise ValueError("ragged rows")
        g = cls.empty(width, len(lines), **kw)
        for y, row in enumerate(lines):
            for x, ch in enumerate(row):
                if ch == START_MARK:
                    g.start = (x, y)
                elif ch == ENEMY_MARK:
                    g.enemy_spawns.append((x, y))
                elif ch == EXIT_MARK:
                    g.exit_ladders.append((x, y))
                else:
                    t = tile_from_char(ch)
                    g.set(x, y, t)
                    if t == GOLD:
                        g.items.append((x, y))
        return g

    def idx(self, x: int, y: int) -> int:
        return y * self.width + x

    def get(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return OUT_OF_BOUNDS
        return self.buf[self.idx(x, y)]

    def set(self, x: int, y: int, v: int) -> None:
        if self.in_bounds(x, y):
            self.buf[self.idx(x, y)] = v

    def fill_row(self, y: int, v: int, xs: Iterable[int]) -> None:
        for x in xs:
            self.set(x, y, v)

    # ---------- Holes ----------

    def dig_hole(self, x: int, y: int) -> bool:
        if not self.is_diggable(x, y):
            return False
        original = self.get(x, y)
        self.set(x, y, HOLE)
        self.holes.append(Hole(x, y, float(self.timing.hole_frames(self.hole_scale)), original))
        return True

    def update_holes(self, elapsed: float = 1.0, speed_scale: float = 1.0) -> HoleUpdate:
        """Advance hole countdowns by elapsed frames; refill and report expired ones."""
        out = HoleUpdate()
        step = elapsed * speed_scale
        alive: List[Hole] = []
        for hole in self.holes:
            hole.timer -= step
            if hole.timer <= 0:
                self.set(hole.x, hole.y, hole.original)
                out.filled.append(hole)
                continue
            if self.timing.in_warning(hole.timer):
                out.warning.append(hole)
            alive.append(hole)
        self.holes = alive
        return out

    # ---------- Copies ----------

    def clone(self) -> "Grid":
        return Grid(
            width=self.width,
            height=self.height,
            buf=list(self.buf),
            start=self.start,
            enemy_spawns=list(self.enemy_spawns),
            items=list(self.items),
            exit_ladders=list(self.exit_ladders),
            hole_scale=self.hole_scale,
            difficulty=self.difficulty,
            holes=[Hole(h.x, h.y, h.timer, h.original) for h in self.holes],
            timing=self.timing,
        )

    def snapshot(self) -> "LevelSnapshot":
        return LevelSnapshot(
            width=self.width,
            height=self.height,
            tiles=tuple(self.buf),
            start=self.start,
            enemy_spawns=tuple(self.enemy_spawns),
            items=tuple(self.items),
            exit_ladders=tuple(self.exit_ladders),
            hole_scale=self.hole_scale,
            difficulty=self.difficulty,
        )


@dataclass(frozen=True)
class LevelSnapshot(TileQueries):
    """Accepted level handed to callers. Holes are gameplay state and are not kept."""

    width: int
    height: int
    tiles: Tuple[int, ...]
    start: XY
    enemy_spawns: Tuple[XY, ...]
    items: Tuple[XY, ...]
    exit_ladders: Tuple[XY, ...]
    hole_scale: float = 1.0
    difficulty: str = DEFAULT_DIFFICULTY

    def get(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return OUT_OF_BOUNDS
        return self.tiles[y * self.width + x]

    def to_grid(self) -> Grid:
        return Grid(
            width=self.width,
            height=self.height,
            buf=list(self.tiles),
            start=self.start,
            enemy_spawns=list(self.enemy_spawns),
            items=list(self.items),
            exit_ladders=list(self.exit_ladders),
            hole_scale=self.hole_scale,
            difficulty=self.difficulty,
        )
