# python/scenescript/persist.py
# Writing canvases to disk and the format normalization step that follows each save
#
# A save is two steps: the canvas is written as binary PPM, then a normalizer
# re-encodes the file according to its name. Either step failing is a
# PersistenceFailure for that save.

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

from PIL import Image, UnidentifiedImageError

from .errors import PersistenceFailure
from .raster import Canvas

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Normalizer = Callable[[Path], None]
Presenter = Callable[[Canvas], None]


class Persister(Protocol):
    def save(self, canvas: Canvas, path: PathLike) -> Path:
        ...


class PillowNormalizer:
    """Re-encode a written image in place using the format its suffix names.

    Suffix-less paths are encoded as ``default_format``.
    """

    def __init__(self, default_format: str = "PNG"):
        self.default_format = default_format.upper()

    def format_for(self, path: Path) -> str:
        suffix = path.suffix.lower()
        if not suffix:
            return self.default_format
        Image.init()
        try:
            return Image.EXTENSION[suffix]
        except KeyError:
            raise PersistenceFailure(f"unsupported image format {suffix!r} for {path}") from None

    def __call__(self, path: Path) -> None:
        fmt = self.format_for(path)
        try:
            with Image.open(path) as im:
                im.load()
                image = im.convert("RGB")
            image.save(path, format=fmt)
        except (OSError, UnidentifiedImageError, ValueError) as exc:
            raise PersistenceFailure(f"could not convert {path} to {fmt}: {exc}") from exc


class MagickNormalizer:
    """Run ``magick convert <path> <path>`` and wait for it to finish."""

    def __init__(self, executable: str = "magick", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def __call__(self, path: Path) -> None:
        exe = shutil.which(self.executable)
        if exe is None:
            raise PersistenceFailure(f"{self.executable!r} not found on PATH; cannot convert {path}")
        cmd = [exe, "convert", str(path), str(path)]
        try:
            subprocess.run(cmd, check=True, capture_output=True, timeout=self.timeout)
        except subprocess.CalledProcessError as exc:
            stderr = exc.stderr.decode("utf-8", "replace").strip() if exc.stderr else ""
            raise PersistenceFailure(f"{self.executable} convert failed for {path}: {stderr}") from exc
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise PersistenceFailure(f"{self.executable} convert failed for {path}: {exc}") from exc


class ImagePersister:
    """Default persister: PPM write followed by an optional normalizer."""

    def __init__(self, normalizer: Optional[Normalizer] = None):
        self.normalizer = normalizer

    def save(self, canvas: Canvas, path: PathLike) -> Path:
        target = Path(path)
        try:
            if target.parent and not target.parent.exists():
                target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(canvas.to_ppm_bytes())
        except OSError as exc:
            raise PersistenceFailure(f"could not write {target}: {exc}") from exc
        if self.normalizer is not None:
            try:
                self.normalizer(target)
            except PersistenceFailure:
                # a failed save leaves no raw PPM behind under the requested name
                target.unlink(missing_ok=True)
                raise
        logger.info(f"Saved image: {target}")
        return target


def make_normalizer(name: str, default_format: str = "PNG") -> Optional[Normalizer]:
    key = str(name).strip().lower()
    if key == "pillow":
        return PillowNormalizer(default_format)
    if key == "magick":
        return MagickNormalizer()
    if key == "none":
        return None
    raise ValueError(f"Unknown converter: {name!r}")


def show_canvas(canvas: Canvas) -> None:
    canvas.to_image().show()


__all__ = [
    "Persister",
    "Presenter",
    "Normalizer",
    "PillowNormalizer",
    "MagickNormalizer",
    "ImagePersister",
    "make_normalizer",
    "show_canvas",
]
