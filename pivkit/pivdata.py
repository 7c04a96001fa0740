"""Gridded results of a PIV cross-correlation analysis."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from os import PathLike
from typing import Iterable

_MIN_START = 1000000.0
_MAX_START = -10000000.0
_NUMERIC_FIELDS = ("x", "y", "u", "v", "snr", "intensity")


@dataclass(frozen=True)
class PivPointData:
    """PIV data at one grid point; (0, 0) lies in the lower left of the image."""

    x: float = 0.0
    y: float = 0.0
    u: float = 0.0
    v: float = 0.0
    snr: float = 0.0
    valid: bool = False
    filtered: bool = False
    intensity: float = 0.0

    @classmethod
    def zero(cls) -> "PivPointData":
        """A point with every value zero, not valid and not filtered."""
        return cls()


def _to_float(text: str) -> float:
    try:
        return float(text.strip())
    except ValueError:
        return 0.0


def _to_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return 0


class PivData:
    """PIV results cast onto a regular grid indexed by (row, column) = (y, x)."""

    def __init__(self, width: int | None = None, height: int | None = None):
        self.index = -2
        self._name = ""
        self._points: list[PivPointData] = []
        self._grid: list[list[PivPointData]] | None = None
        self._extrema: tuple[PivPointData, PivPointData] | None = None
        self._width = 0
        self._height = 0
        if width is not None and height is not None:
            self._width = width
            self._height = height
            self._grid = [
                [PivPointData.zero() for _ in range(width)] for _ in range(height)
            ]

    @property
    def width(self) -> int:
        """Number of columns in the grid."""
        return self._width

    @property
    def height(self) -> int:
        """Number of rows in the grid."""
        return self._height

    @property
    def name(self) -> str:
        """File name of the data without its suffix."""
        return self._name

    @property
    def points(self) -> list[PivPointData]:
        """The point list last given to set_list."""
        return list(self._points)

    def _in_grid(self, i: int, j: int) -> bool:
        return self._grid is not None and 0 <= i < self._height and 0 <= j < self._width

    def set_list(self, points: Iterable[PivPointData]) -> None:
        """Store a list of points and cast it onto a regular grid."""
        self._points = list(points)
        self._to_grids(self._points)

    def _to_grids(self, points: list[PivPointData]) -> None:
        xs = sorted(dict.fromkeys(p.x for p in points))
        ys = sorted(dict.fromkeys(p.y for p in points))
        first: dict[tuple[float, float], PivPointData] = {}
        for point in points:
            first.setdefault((point.x, point.y), point)

        grid = []
        for y in ys:
            row = []
            for x in xs:
                found = first.get((x, y))
                if found is None:
                    row.append(PivPointData(x=x, y=y))
                else:
                    row.append(replace(found, x=x, y=y, valid=True))
            grid.append(row)

        self._width = len(xs)
        self._height = len(ys)
        self._grid = grid
        self._extrema = None

    def data(self, i: int, j: int) -> PivPointData:
        """The point at row i, column j; a zero point when outside the grid."""
        if self._in_grid(i, j):
            return self._grid[i][j]
        return PivPointData.zero()

    def set_data(self, i: int, j: int, point: PivPointData) -> None:
        """Replace the point at row i, column j; ignored outside the grid."""
        if self._in_grid(i, j):
            self._grid[i][j] = point
            self._extrema = None

    def _compute_extrema(self) -> tuple[PivPointData, PivPointData] | None:
        if self._grid is None:
            return None
        if self._extrema is None:
            cells = [cell for row in self._grid for cell in row]
            low = {
                name: min([_MIN_START, *(getattr(c, name) for c in cells)])
                for name in _NUMERIC_FIELDS
            }
            high = {
                name: max([_MAX_START, *(getattr(c, name) for c in cells)])
                for name in _NUMERIC_FIELDS
            }
            self._extrema = (
                PivPointData(valid=True, filtered=False, **low),
                PivPointData(valid=True, filtered=False, **high),
            )
        return self._extrema

    def min(self) -> PivPointData:
        """Per-field minimum over the grid; a zero point when there is no grid."""
        extrema = self._compute_extrema()
        return PivPointData.zero() if extrema is None else extrema[0]

    def max(self) -> PivPointData:
        """Per-field maximum over the grid; a zero point when there is no grid."""
        extrema = self._compute_extrema()
        return PivPointData.zero() if extrema is None else extrema[1]

    def clear(self) -> None:
        """Drop the gridded data."""
        self._grid = None
        self._extrema = None

    def is_empty(self) -> bool:
        """True when no grid is held."""
        return self._grid is None

    def num_valid(self) -> int:
        """Number of grid points that are not masked."""
        if self._grid is None:
            return 0
        return sum(cell.valid for row in self._grid for cell in row)

    def is_valid(self, i: int, j: int) -> bool:
        """True if the point at (i, j) has not been masked."""
        return self._in_grid(i, j) and self._grid[i][j].valid

    def filtered(self, i: int, j: int) -> bool:
        """True if the point at (i, j) has been filtered."""
        return self._in_grid(i, j) and self._grid[i][j].filtered

    def set_filter(self, i: int, j: int, value: bool) -> None:
        """Set the filter flag of the point at (i, j)."""
        if self._in_grid(i, j):
            self._grid[i][j] = replace(self._grid[i][j], filtered=value)
            self._extrema = None

    def set_name(self, filename: str) -> None:
        """Set the name, dropping everything from the last '.' on."""
        dot = filename.rfind(".")
        self._name = filename[:dot] if dot >= 0 else ""

    def read(self, index: int, filename: str | PathLike, image_height: float) -> None:
        """Read tab-separated point data written by the text output."""
        self.index = index
        points = []
        with open(filename, encoding="utf-8") as handle:
            handle.readline()
            for line in handle:
                columns = line.rstrip("\r\n").split("\t")

                def column(k: int) -> str:
                    return columns[k] if k < len(columns) else ""

                points.append(
                    PivPointData(
                        x=_to_float(column(0)),
                        y=image_height - _to_float(column(1)),
                        u=_to_float(column(2)),
                        v=0.0 - _to_float(column(3)),
                        snr=_to_float(column(4)),
                        valid=_to_int(column(5)) == 1,
                        filtered=_to_int(column(6)) == 1,
                        intensity=_to_float(column(7)),
                    )
                )
        self._to_grids(points)


__all__ = ["PivPointData", "PivData"] + [f.name for f in fields(PivPointData)][:0]