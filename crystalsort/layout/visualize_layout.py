from __future__ import annotations

import os

import numpy as np
from PIL import Image

from crystalsort.layout.grid import GridSnapshot, Placement
from crystalsort.logging import LOGGER, CrystalLogger
from crystalsort.sections import RENDERING


def _as_rgb(elements) -> np.ndarray:
    pixels = np.asarray(elements)
    if pixels.ndim == 2:
        pixels = np.repeat(pixels[:, :, None], 3, axis=2)
    if pixels.ndim != 3:
        raise ValueError(f"elements must have shape (depth, width[, channels]), got {pixels.shape}")
    if pixels.shape[2] == 1:
        pixels = np.repeat(pixels, 3, axis=2)
    if np.issubdtype(pixels.dtype, np.floating):
        pixels = np.clip(pixels * 255.0 + 0.5, 0, 255)
    return pixels[:, :, :3].astype(np.uint8)


def render_image(snapshot: GridSnapshot, elements) -> np.ndarray:
    """Side-by-side picture of the crystal: unsorted input left, placement right.

    ``elements[column][row]`` is the colour of original row ``row`` of
    ``column``. Elements that have already been placed are blacked out on the
    left half. Returns a ``(width, 2 * depth, 3)`` uint8 image.
    """
    pixels = _as_rgb(elements)
    depth, width = pixels.shape[0], pixels.shape[1]
    if depth != snapshot.depth:
        raise ValueError(f"elements describe {depth} columns, snapshot has {snapshot.depth}")
    image = np.zeros((width, depth * 2, 3), dtype=np.uint8)
    image[:, :depth] = pixels.transpose(1, 0, 2)
    for y, x, element in snapshot.occupied():
        image[y, depth + x] = pixels[x, element]
        image[element, x] = 0
    return image


def log_crystal(
    snapshot: GridSnapshot,
    elements,
    *,
    path: str = "crystal",
    logger: CrystalLogger | None = None,
) -> np.ndarray:
    logger = logger or LOGGER
    logger.set_step(snapshot.step)
    image = render_image(snapshot, elements)
    logger.event(
        "render.frame",
        section=RENDERING,
        data={"step": snapshot.step, "height": snapshot.height, "depth": snapshot.depth},
        visuals=[logger.visual_image(f"{path}/image", image)] if logger.recording else None,
    )
    return image


class FrameWriter:
    """Commit callback that saves every ``every``-th state as ``img%010d.png``."""

    def __init__(
        self,
        directory: str,
        elements,
        *,
        every: int = 1,
        logger: CrystalLogger | None = None,
    ) -> None:
        if not directory:
            raise ValueError("directory must be provided")
        if every <= 0:
            raise ValueError("every must be positive")
        self.directory = os.path.expanduser(directory)
        self.elements = elements
        self.every = every
        self._logger = logger or LOGGER
        self.written: list[str] = []

    def path_for(self, step: int) -> str:
        return os.path.join(self.directory, f"img{step:010d}.png")

    def write(self, snapshot: GridSnapshot) -> str:
        os.makedirs(self.directory, exist_ok=True)
        path = self.path_for(snapshot.step)
        image = render_image(snapshot, self.elements)
        try:
            Image.fromarray(image).save(path)
        except OSError as exc:
            self._logger.event(
                "render.png.error",
                section=RENDERING,
                data={"path": path, "error": str(exc)},
            )
            raise
        self.written.append(path)
        return path

    def __call__(self, snapshot: GridSnapshot, placement: Placement) -> None:
        if placement.step % self.every == 0:
            self.write(snapshot)
