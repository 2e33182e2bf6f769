from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from crystalsort.layout.relations import RelationMatrix
from crystalsort.logging import LOGGER
from crystalsort.sections import PIXEL_DEMO


@dataclass(frozen=True)
class DemoConfig:
    width: int = 64
    depth: int = 32
    seed: int = 0
    frames_dir: str | None = None
    frame_every: int = 1
    rerun: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("width must be positive")
        if self.depth <= 0:
            raise ValueError("depth must be positive")
        if self.frame_every <= 0:
            raise ValueError("frame_every must be positive")


def random_pixels(width: int, depth: int, rng: np.random.Generator) -> np.ndarray:
    """A ``(depth, width, 3)`` rectangle of random colours in ``[0, 1)``."""
    return rng.random((depth, width, 3))


def pixel_relations(pixels: np.ndarray) -> RelationMatrix:
    """Negated Euclidean colour distance between every pair of pixels.

    Pixel ``pixels[column, row]`` maps to index ``width * column + row``, so
    closer colours get higher (less negative) affinity.
    """
    pixels = np.asarray(pixels, dtype=np.float64)
    if pixels.ndim != 3:
        raise ValueError(f"pixels must have shape (depth, width, channels), got {pixels.shape}")
    depth, width, channels = pixels.shape
    flat = pixels.reshape(depth * width, channels)
    squared = np.sum(flat * flat, axis=1)
    distances = squared[:, None] + squared[None, :] - 2.0 * (flat @ flat.T)
    np.fill_diagonal(distances, 0.0)
    relations = -np.sqrt(np.clip(distances, 0.0, None))
    LOGGER.event(
        "demo.relations",
        section=PIXEL_DEMO,
        data={
            "elements": depth * width,
            "min": float(relations.min()),
            "mean": float(relations.mean()),
        },
    )
    return RelationMatrix(relations, width=width, depth=depth)
