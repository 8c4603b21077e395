"""Tests for manhattan.raymarch: sphere tracing and soft shadows."""

import logging

import numpy as np
import numpy.testing as npt
import pytest

from manhattan.fractal import MISS
from manhattan.math_utils import normalize_batch
from manhattan.raymarch import (
    ImageMarcher,
    RayMarchConfig,
    RayMarcher,
    ShadowConfig,
    SoftShadow,
)
from manhattan.scene import Scene, SceneBounds

from conftest import TOP_Z

LIGHT = np.array([1.0, 0.9, 0.3]) / np.sqrt(1.9)


def _v(*xyz) -> np.ndarray:
    return np.array(list(xyz), dtype=float)


@pytest.fixture
def marcher(scene) -> RayMarcher:
    return RayMarcher(xp=np, config=RayMarchConfig(), scene=scene)


@pytest.fixture
def image_marcher(scene) -> ImageMarcher:
    return ImageMarcher(xp=np, config=RayMarchConfig(), scene=scene)


class TestConfig:
    def test_defaults(self):
        cfg = RayMarchConfig()
        assert (cfg.max_steps, cfg.eps) == (1000, 0.01)
        assert SceneBounds().far_distance == 10.0

    def test_shadow_defaults(self):
        cfg = ShadowConfig()
        assert (cfg.steps, cfg.mint, cfg.min_step, cfg.max_step, cfg.floor) == (32, 0.01, 0.005, 0.1, 0.1)

    @pytest.mark.parametrize("kwargs", [{"max_steps": 0}, {"eps": 0.0}, {"eps": -1.0}])
    def test_rejects_bad_march_config(self, kwargs):
        with pytest.raises(ValueError):
            RayMarchConfig(**kwargs)

    @pytest.mark.parametrize(
        "kwargs",
        [{"steps": 0}, {"mint": 0.0}, {"min_step": 0.2, "max_step": 0.1}, {"floor": 1.5}],
    )
    def test_rejects_bad_shadow_config(self, kwargs):
        with pytest.raises(ValueError):
            ShadowConfig(**kwargs)

    def test_rejects_bad_bounds(self):
        with pytest.raises(ValueError):
            SceneBounds(far_distance=0.0)


class TestRayMarcher:
    def test_hits_top_cubie(self, marcher):
        res = marcher.trace(_v(0, 0, 5), _v(0, 0, -1))
        assert res.hit
        assert res.termination == "hit"
        npt.assert_allclose(res.t, 5.0 - TOP_Z, atol=0.01)
        assert res.points.shape == (res.steps, 3)

    def test_intersect_returns_distance(self, marcher):
        t = marcher.intersect(_v(0, 0, 5), _v(0, 0, -1))
        npt.assert_allclose(t, 5.0 - TOP_Z, atol=0.01)

    def test_hit_from_every_axis(self, marcher):
        for axis in range(3):
            for sign in (1.0, -1.0):
                ro = np.zeros(3)
                ro[axis] = 5.0 * sign
                t = marcher.intersect(ro, -ro / 5.0)
                npt.assert_allclose(t, 5.0 - TOP_Z, atol=0.01)

    def test_trace_without_points(self, marcher):
        full = marcher.trace(_v(0, 0, 5), _v(0, 0, -1))
        lean = marcher.trace(_v(0, 0, 5), _v(0, 0, -1), keep_points=False)
        assert lean.points.shape == (0, 3)
        assert (lean.t, lean.steps, lean.termination) == (full.t, full.steps, full.termination)

    def test_ray_pointing_away_misses(self, marcher):
        res = marcher.trace(_v(0, 5, 0), _v(0, 1, 0))
        assert not res.hit
        assert res.t == MISS
        assert res.termination == "far"

    def test_ray_passing_by_misses(self, marcher):
        res = marcher.trace(_v(3, 0, 5), _v(0, 0, -1))
        assert res.t == MISS
        assert res.steps < marcher.cfg.max_steps

    def test_step_cap(self, scene):
        capped = RayMarcher(xp=np, config=RayMarchConfig(max_steps=1), scene=scene)
        res = capped.trace(_v(0, 0, 5), _v(0, 0, -1))
        assert res.termination == "max_steps"
        assert res.t == MISS

    def test_origin_inside_hits_at_zero(self, marcher):
        assert marcher.intersect(_v(0, 0, 0), _v(0, 0, 1)) == 0.0

    def test_terminates_for_random_rays(self, marcher):
        rng = np.random.default_rng(11)
        for _ in range(16):
            ro = rng.uniform(-4.0, 4.0, size=3)
            rd = normalize_batch(np, rng.normal(size=3))
            res = marcher.trace(ro, rd)
            assert res.steps <= marcher.cfg.max_steps
            assert res.t == MISS or res.t >= 0.0

    @pytest.mark.parametrize(
        ("ro", "rd"),
        [
            ((np.nan, 0.0, 5.0), (0.0, 0.0, -1.0)),
            ((0.0, 0.0, 5.0), (0.0, np.inf, -1.0)),
        ],
    )
    def test_rejects_non_finite_ray(self, marcher, ro, rd):
        with pytest.raises(ValueError):
            marcher.trace(ro, rd)

    def test_rejects_batches(self, marcher):
        with pytest.raises(ValueError):
            marcher.trace(_v(0, 0, 5), np.zeros((2, 3)))


class TestImageMarcher:
    def test_matches_scalar_marcher(self, marcher, image_marcher):
        ro = _v(0.3, 0.4, 5.0)
        rng = np.random.default_rng(2)
        target = rng.uniform(-1.5, 1.5, size=(4, 5, 3))
        rd = normalize_batch(np, target - ro)
        res = image_marcher.march(ro, rd)

        assert res.t.shape == (4, 5)
        for idx in np.ndindex(4, 5):
            expected = marcher.intersect(ro, rd[idx])
            npt.assert_allclose(res.t[idx], expected, atol=1e-9)
            assert bool(res.hit[idx]) == (expected != MISS)

    def test_all_miss(self, image_marcher):
        rd = np.tile(_v(0, 1, 0), (3, 1))
        res = image_marcher.march(_v(0, 5, 0), rd)
        assert not res.hit.any()
        npt.assert_array_equal(res.t, [MISS] * 3)

    def test_non_finite_rays_are_misses(self, image_marcher, caplog):
        rd = np.array([[0.0, 0.0, -1.0], [np.nan, 0.0, -1.0]])
        with caplog.at_level(logging.WARNING, logger="manhattan.raymarch.marcher"):
            res = image_marcher.march(_v(0, 0, 5), rd)
        assert res.hit.tolist() == [True, False]
        assert res.t[1] == MISS
        assert "non-finite" in caplog.text


class TestSoftShadow:
    def test_unoccluded_is_fully_lit(self, surface):
        shadow = SoftShadow(np, surface)
        assert shadow.estimate(_v(0, 8, 0), _v(0, 1, 0), 64.0) == pytest.approx(1.0)

    def test_buried_point_keeps_floor(self, surface):
        shadow = SoftShadow(np, surface)
        assert shadow.estimate(_v(0, 0, 0), LIGHT, 64.0) == pytest.approx(0.1)

    def test_range_on_surface(self, surface, marcher):
        shadow = SoftShadow(np, surface)
        rng = np.random.default_rng(4)
        for _ in range(12):
            ro = normalize_batch(np, rng.normal(size=3)) * 4.0
            t = marcher.intersect(ro, -ro / 4.0)
            if t == MISS:
                continue
            pos = ro - ro / 4.0 * t
            value = shadow.estimate(pos, LIGHT, 64.0)
            assert 0.1 <= value <= 1.0

    def test_batch_matches_scalar(self, surface):
        shadow = SoftShadow(np, surface)
        rng = np.random.default_rng(6)
        pos = rng.uniform(-1.5, 1.5, size=(10, 3))
        batch = shadow.estimate_batch(pos, LIGHT, 64.0)
        assert batch.shape == (10,)
        assert np.all((batch >= 0.1) & (batch <= 1.0))
        for i in range(10):
            npt.assert_allclose(batch[i], shadow.estimate(pos[i], LIGHT, 64.0), atol=1e-12)

    def test_always_takes_every_step(self, surface):
        calls = []

        class Counting:
            def sdf(self, p):
                calls.append(1)
                return surface.sdf(p)

        SoftShadow(np, Counting()).estimate(_v(0, 0, 0), LIGHT, 64.0)
        assert len(calls) == 32
