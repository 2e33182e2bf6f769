from __future__ import annotations

import os

import numpy as np
import pytest

from crystalsort.demo import DemoConfig, PixelSortRunner, pixel_relations, random_pixels


def test_random_pixels_shape_and_range():
    pixels = random_pixels(5, 3, np.random.default_rng(0))
    assert pixels.shape == (3, 5, 3)
    assert pixels.min() >= 0.0
    assert pixels.max() < 1.0


def test_pixel_relations_are_negated_distances():
    pixels = np.zeros((2, 2, 3))
    pixels[0, 1] = (3.0, 4.0, 0.0)
    pixels[1, 0] = (0.0, 0.0, 1.0)
    relations = pixel_relations(pixels)
    assert relations.size == 4
    assert np.allclose(np.diag(relations.array), 0.0)
    assert relations.value(0, 0, 0, 1) == pytest.approx(-5.0)
    assert relations.value(0, 0, 1, 0) == pytest.approx(-1.0)
    assert np.allclose(relations.array, relations.array.T)
    assert np.all(relations.array <= 1e-12)


def test_pixel_relations_reject_flat_input():
    with pytest.raises(ValueError):
        pixel_relations(np.zeros((4, 3)))


@pytest.mark.parametrize(
    "kwargs",
    [{"width": 0}, {"depth": -1}, {"frame_every": 0}],
)
def test_demo_config_validation(kwargs):
    with pytest.raises(ValueError):
        DemoConfig(**kwargs)


def test_runner_sorts_and_writes_frames(tmp_path, quiet_logger):
    config = DemoConfig(width=4, depth=3, seed=2, frames_dir=str(tmp_path), frame_every=5)
    runner = PixelSortRunner(config, logger=quiet_logger)
    final = runner.run()
    assert final.step == 11
    for column in range(3):
        assert sorted(final.column(column)) == [0, 1, 2, 3]
    names = sorted(os.listdir(tmp_path))
    # every fifth step plus the final state
    assert names == ["img0000000005.png", "img0000000010.png", "img0000000011.png"]


def test_runner_is_reproducible(quiet_logger):
    config = DemoConfig(width=3, depth=3, seed=9)
    first = PixelSortRunner(config, logger=quiet_logger).run()
    second = PixelSortRunner(config, logger=quiet_logger).run()
    assert first == second
