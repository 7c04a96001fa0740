"""Base engine for cross-correlation PIV on a pair of images."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

import numpy as np

from .pivdata import PivData, PivPointData


class PivEngine:
    """Runs single-pass PIV over a list of interrogation windows.

    The base engine has no correlation scheme of its own. Subclasses
    override ``cross_correlate`` to fill ``cmap`` for a window and
    ``estimate_displacement`` to turn the map into a displacement.
    Grid points are ``(x, y)`` pairs giving the top-left column and row
    of each window.
    """

    def __init__(
        self,
        int_length_x: int,
        int_length_y: int,
        grid: Iterable[tuple[int, int]],
    ):
        if int_length_x <= 0 or int_length_y <= 0:
            raise ValueError("interrogation lengths must be positive")
        self._int_length_x = int(int_length_x)
        self._int_length_y = int(int_length_y)
        self._grid = [(int(x), int(y)) for x, y in grid]
        self.cmap = np.zeros(
            (2 * self._int_length_y, 2 * self._int_length_x), dtype=np.float64
        )
        self.image_a: np.ndarray | None = None
        self.image_b: np.ndarray | None = None
        self.mean_image_a = 0.0
        self.mean_image_b = 0.0

    @property
    def int_length_x(self) -> int:
        """Horizontal length of an interrogation window."""
        return self._int_length_x

    @property
    def int_length_y(self) -> int:
        """Vertical length of an interrogation window."""
        return self._int_length_y

    @property
    def grid(self) -> list[tuple[int, int]]:
        """The (x, y) top-left corners of the interrogation windows."""
        return list(self._grid)

    @property
    def images_available(self) -> bool:
        """True while an image pair is loaded for processing."""
        return self.image_a is not None and self.image_b is not None

    def __call__(self, image_a, image_b) -> PivData:
        """Process an image pair and return the gridded results."""
        self.image_a = np.asarray(image_a, dtype=np.float64)
        self.image_b = np.asarray(image_b, dtype=np.float64)
        try:
            points = []
            for x, y in self._grid:
                self.mean_image_a = self.image_mean(self.image_a, y, x)
                self.mean_image_b = self.image_mean(self.image_b, y, x)
                point = self.velocity(y, x)
                intensity = min(self.mean_image_a, self.mean_image_b)
                points.append(replace(point, intensity=intensity))
            result = PivData()
            result.set_list(points)
            return result
        finally:
            self.image_a = None
            self.image_b = None

    def image_mean(self, image, top_left_row: int, top_left_column: int) -> float:
        """Mean grey value of the window starting at (row, column); 0.0 if empty."""
        data = np.asarray(image, dtype=np.float64)
        row = max(0, top_left_row)
        column = max(0, top_left_column)
        window = data[
            row: top_left_row + self._int_length_y,
            column: top_left_column + self._int_length_x,
        ]
        if window.size == 0:
            return 0.0
        return float(window.mean())

    def velocity(self, top_left_row: int, top_left_column: int) -> PivPointData:
        """Displacement of the window at (row, column), zero if correlation fails."""
        if self.cross_correlate(top_left_row, top_left_column):
            point = self.estimate_displacement()
        else:
            point = PivPointData(u=0.0, v=0.0, snr=0.0)
        return replace(
            point,
            filtered=False,
            x=float(top_left_column),
            y=float(top_left_row),
        )

    def cross_correlate(self, top_left_row: int, top_left_column: int) -> bool:
        """Fill ``cmap`` for the window; True on success. The base engine has none."""
        return False

    def estimate_displacement(self) -> PivPointData:
        """Sub-pixel displacement from ``cmap``; the base engine has no estimator."""
        return PivPointData(u=0.0, v=0.0, snr=0.0)


__all__ = ["PivEngine"]