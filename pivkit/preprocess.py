"""Placing interrogation windows on an image, leaving out masked areas."""

from __future__ import annotations

import numpy as np

X_SPACING = 16
Y_SPACING = 16
INT_LENGTH = 32


def generate_grid(width: int, height: int, mask_alpha=None) -> list[tuple[int, int]]:
    """Grid points ``(x, y)`` whose window holds no opaque mask pixel.

    ``mask_alpha`` is a 2-D array of alpha values indexed ``[row, column]``;
    pixels outside it count as transparent. Without a mask every grid point
    is returned. Points are ordered by row, then column.
    """
    alpha = None if mask_alpha is None else np.asarray(mask_alpha)
    half = INT_LENGTH // 2
    points = []
    for i in range(Y_SPACING, height, Y_SPACING):
        for j in range(X_SPACING, width, X_SPACING):
            if alpha is not None:
                window = alpha[max(0, i - half): i + half, max(0, j - half): j + half]
                if np.count_nonzero(window):
                    continue
            points.append((j, i))
    return points


__all__ = ["INT_LENGTH", "X_SPACING", "Y_SPACING", "generate_grid"]