"""Writing gridded PIV velocity data to disk."""

from __future__ import annotations

import logging
import math
import os
from enum import IntEnum
from os import PathLike

from .pivdata import PivData, PivPointData

_log = logging.getLogger(__name__)

HEADER = (
    "x [pixels], y [pixels], u [pixels], v [pixels], "
    "SNR [peak/mean], valid [0 if masked], filtered [1 if filtered], avg. intensity\n"
)


class OutputFormat(IntEnum):
    """File formats that velocity data can be written in."""

    TEXT = 0
    HDF5 = 1


def _number(value: float) -> str:
    return f"{value:10.10g}"


class Output:
    """Writes PivData objects to tab-separated text files in an output folder.

    The y axis is flipped on output so that (0, 0) lies in the lower left
    corner of the image rather than the upper left.
    """

    def __init__(
        self,
        output_folder: str | PathLike,
        image_height: float,
        output_format: OutputFormat = OutputFormat.TEXT,
    ):
        self.output_folder = os.fspath(output_folder)
        self.image_height = image_height
        self.output_format = OutputFormat(output_format)

    def output_path(self, name: str) -> str:
        """Path of the text file that data named ``name`` are written to."""
        folder = self.output_folder
        if not folder.endswith(("/", "\\")):
            folder += "/"
        return f"{folder}{os.path.basename(name)}.txt"

    def format_point(self, point: PivPointData) -> str:
        """One line of the text file for a point, without the line end."""
        flag = "1" if point.filtered else "0"
        y = _number(self.image_height - point.y)
        if point.valid:
            if math.isnan(point.v):
                _log.warning("NaN encountered")
            columns = [
                _number(point.x),
                y,
                _number(point.u),
                _number(0.0 - point.v),
                _number(point.snr),
                "1",
                flag,
                _number(point.intensity),
            ]
        else:
            zero = _number(0.0)
            columns = [_number(point.x), y, zero, zero, zero, "0", flag, zero]
        return "\t".join(columns)

    def write(self, piv_data: PivData) -> str:
        """Write the data as text and return the path of the file written."""
        path = self.output_path(piv_data.name)
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(HEADER)
            for i in range(piv_data.height):
                for j in range(piv_data.width):
                    handle.write(self.format_point(piv_data.data(i, j)) + "\n")
        return path

    def output_current(self, piv_data: PivData) -> str | None:
        """Write the data in the configured format; HDF5 writes nothing yet."""
        if self.output_format is OutputFormat.TEXT:
            return self.write(piv_data)
        return None


__all__ = ["HEADER", "Output", "OutputFormat"]