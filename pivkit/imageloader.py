"""Loading images into grey-scale arrays through a registry of loaders."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO

import numpy as np
from PIL import Image

_log = logging.getLogger(__name__)

_LE_BIGTIFF_HEADER = b"\x49\x49\x2b\x00"
_BE_BIGTIFF_HEADER = b"\x4d\x4d\x00\x2b"


class ImageLoaderError(RuntimeError):
    """Raised when an image cannot be read."""


def _gray(rgb: np.ndarray) -> np.ndarray:
    values = rgb.astype(np.int64)
    r, g, b = values[..., 0], values[..., 1], values[..., 2]
    return ((r * 11 + g * 16 + b * 5) // 32).astype(np.float64)


class ImageLoader(ABC):
    """A reader of one kind of image; streams are given at the start of their data."""

    name: str = "image loader"
    priority: int = 0

    @abstractmethod
    def can_load(self, stream: BinaryIO) -> bool:
        """True if this loader can read the image in ``stream``."""

    @abstractmethod
    def load(self, stream: BinaryIO) -> np.ndarray:
        """Read the image in ``stream`` as a 2-D float array indexed [row, column]."""


class TiffImageLoader(ImageLoader):
    """Loader of TIFF images, including bit depths over 8 bits per channel.

    Accepts streams that start with 0x49 49 2b 00 or 0x4d 4d 00 2b.
    """

    name = "TIFF image loader"
    priority = 1

    def can_load(self, stream: BinaryIO) -> bool:
        if stream is None or stream.closed or not stream.readable():
            raise ImageLoaderError("stream is not ready for reading")
        position = stream.tell()
        try:
            header = stream.read(4)
        finally:
            stream.seek(position)
        if not header:
            raise ImageLoaderError("stream is not ready for reading")
        if len(header) != 4:
            raise ImageLoaderError("stream doesn't contain enough data")
        return header in (_LE_BIGTIFF_HEADER, _BE_BIGTIFF_HEADER)

    def load(self, stream: BinaryIO) -> np.ndarray:
        if stream is None:
            raise ImageLoaderError("stream is None")
        try:
            image = Image.open(stream)
            image.load()
        except (OSError, ValueError) as exc:
            raise ImageLoaderError("failed to open io for reading") from exc
        if image.format != "TIFF":
            raise ImageLoaderError("failed to open io for reading")

        bands = len(image.getbands())
        if bands == 1:
            return np.asarray(image).astype(np.float64)
        if bands == 3:
            return _gray(np.asarray(image))
        return np.zeros((image.height, image.width), dtype=np.float64)


class PillowImageLoader(ImageLoader):
    """Loader of any image format that Pillow reads, converted to grey."""

    name = "Pillow image loader"
    priority = 2

    def can_load(self, stream: BinaryIO) -> bool:
        if stream is None:
            return False
        position = stream.tell()
        try:
            with Image.open(stream):
                return True
        except (OSError, ValueError):
            return False
        finally:
            stream.seek(position)

    def load(self, stream: BinaryIO) -> np.ndarray:
        if stream is None:
            raise ImageLoaderError("stream is None")
        try:
            image = Image.open(stream)
            image.load()
        except (OSError, ValueError) as exc:
            raise ImageLoaderError(f"failed to load image: {exc}") from exc
        if image.mode != "RGB":
            image = image.convert("RGB")
        return _gray(np.asarray(image))


_loaders: list[ImageLoader] = []


def register_loader(loader: ImageLoader) -> bool:
    """Add a loader; loaders are kept ordered by ascending priority."""
    if loader is None:
        raise ValueError("loader must not be None")
    _loaders.append(loader)
    _loaders.sort(key=lambda item: item.priority)
    _log.debug("registered %s", loader.name)
    return True


def find_loader(stream: BinaryIO) -> ImageLoader | None:
    """The first registered loader able to read ``stream``, or None."""
    for loader in _loaders:
        if loader.can_load(stream):
            return loader
    return None


register_loader(TiffImageLoader())
register_loader(PillowImageLoader())


__all__ = [
    "ImageLoader",
    "ImageLoaderError",
    "PillowImageLoader",
    "TiffImageLoader",
    "find_loader",
    "register_loader",
]