from __future__ import annotations

import numpy as np

from crystalsort.demo.pixels import DemoConfig, pixel_relations, random_pixels
from crystalsort.layout.crystal import Crystal
from crystalsort.layout.grid import GridSnapshot, Placement
from crystalsort.layout.visualize_layout import FrameWriter, log_crystal
from crystalsort.logging import LOGGER, CrystalLogger
from crystalsort.sections import PIXEL_DEMO


class PixelSortRunner:
    """Random pixel rectangle sorted column by column, with optional frame output."""

    def __init__(self, config: DemoConfig, *, logger: CrystalLogger | None = None) -> None:
        self.config = config
        self._logger = logger or LOGGER
        self.pixels = random_pixels(config.width, config.depth, np.random.default_rng(config.seed))
        self.relations = pixel_relations(self.pixels)
        self.crystal = Crystal(
            config.width,
            config.depth,
            self.pixels,
            self.relations,
            seed=config.seed,
            logger=self._logger,
        )
        self.frames: FrameWriter | None = None
        if config.frames_dir:
            self.frames = FrameWriter(
                config.frames_dir,
                self.pixels,
                every=config.frame_every,
                logger=self._logger,
            )

    def _on_commit(self, snapshot: GridSnapshot, placement: Placement) -> None:
        if self.frames is not None:
            self.frames(snapshot, placement)
        if self.config.rerun and placement.step % self.config.frame_every == 0:
            log_crystal(snapshot, self.pixels, logger=self._logger)

    def run(self) -> GridSnapshot:
        self._logger.event(
            "demo.start",
            section=PIXEL_DEMO,
            data={
                "width": self.config.width,
                "depth": self.config.depth,
                "seed": self.config.seed,
                "frames_dir": self.config.frames_dir,
            },
        )
        final = self.crystal.build(on_commit=self._on_commit)
        if self.frames is not None and final.step % self.config.frame_every != 0:
            self.frames.write(final)
        if self.config.rerun:
            log_crystal(final, self.pixels, logger=self._logger)
        self._logger.event(
            "demo.done",
            section=PIXEL_DEMO,
            data={
                "steps": final.step,
                "frames": 0 if self.frames is None else len(self.frames.written),
            },
        )
        return final
