"""Tests for Renderer class and the tracing pipeline."""

import pytest
import math
import re
import threading
import numpy as np

from stochray.vec3 import Vec3, Point3
from stochray.color import ColorTuple
from stochray.ray import Ray
from stochray.camera import Camera
from stochray.materials import Material
from stochray.lights import PointLight, AmbientLight
from stochray.shapes import Sphere, Plane, GeometryObject
from stochray.scene import Scene, SceneError, Viewport
from stochray.sampler import StochasticSampler
from stochray.intersection import find_closest
from stochray.renderer import (
    Renderer, RenderSettings, RenderResult, FrameBuffer, trace_ray, render_line
)

BACKGROUND = ColorTuple(0.1, 0.2, 0.3)


def make_scene(width=5, height=5, objects=None, lights=None, background=BACKGROUND, hardness=32):
    material = Material(
        diffuse_color=ColorTuple(1.0, 0.5, 0.25),
        diffuse_coeff=0.8,
        specular_coeff=0.5,
        hardness=hardness
    )
    if objects is None:
        objects = [Sphere(Point3(0, 0, -5), 1.0, material)]
    if lights is None:
        lights = [PointLight(Point3(0, 3, 0))]
    return Scene(
        viewport=Viewport(width, height),
        camera=Camera(Point3(0, 0, 0), Point3(0, 0, -1), width, height, fov=60),
        objects=objects,
        lights=lights,
        ambient=AmbientLight(ColorTuple(1, 1, 1), 0.1),
        background_color=background
    )


class ExplodingObject(GeometryObject):
    """Geometry whose intersection test always fails."""

    def __init__(self):
        self.material = Material()

    def intersect(self, ray):
        raise RuntimeError("intersection failed")


class CountingObject(GeometryObject):
    """Geometry that never hits but records how often it was tested."""

    def __init__(self):
        self.material = Material()
        self.calls = 0
        self._lock = threading.Lock()

    def intersect(self, ray):
        with self._lock:
            self.calls += 1
        return []


class TestRenderSettings:
    """Test RenderSettings configuration."""

    def test_default_values(self):
        settings = RenderSettings()
        assert settings.num_sections == 3
        assert settings.pixel_width == 1.0
        assert settings.pixel_height == 1.0
        assert settings.num_threads == 4
        assert settings.jitter is True

    @pytest.mark.parametrize("threads", [0, -1])
    def test_invalid_thread_count(self, threads):
        with pytest.raises(ValueError):
            RenderSettings(num_threads=threads)

    def test_make_sampler(self):
        sampler = RenderSettings(num_sections=2, pixel_width=0.5, jitter=False).make_sampler()
        assert isinstance(sampler, StochasticSampler)
        assert len(sampler.sample_offsets()) == 4
        assert sampler.pixel_width == 0.5

    def test_seed_makes_offsets_reproducible(self):
        a = RenderSettings(seed=5).make_sampler().sample_offsets()
        b = RenderSettings(seed=5).make_sampler().sample_offsets()
        assert a == b


class TestTraceRay:
    """Test trace_ray."""

    def test_miss_returns_background(self):
        scene = make_scene()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, 1))
        assert find_closest(scene, ray) is None
        assert trace_ray(scene, ray) == BACKGROUND

    def test_empty_scene_returns_background(self):
        scene = make_scene(objects=[])
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert trace_ray(scene, ray) == BACKGROUND

    def test_hit_is_shaded(self):
        scene = make_scene()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        color = trace_ray(scene, ray)
        assert color != BACKGROUND
        # diffuse 0.8 * 0.8 + ambient 0.08 (+ negligible specular) on red
        assert abs(color.r - 0.72) < 1e-9


class TestFrameBuffer:
    """Test FrameBuffer."""

    def test_initially_black(self):
        fb = FrameBuffer(3, 2)
        assert fb.pixels.shape == (2, 3, 3)
        assert fb.pixels.dtype == np.uint8
        assert not fb.pixels.any()

    def test_set_and_get_pixel(self):
        fb = FrameBuffer(3, 2)
        fb.set_pixel(2, 1, (10, 20, 30))
        assert fb.get_pixel(2, 1) == (10, 20, 30)
        assert fb.pixels[1, 2].tolist() == [10, 20, 30]

    def test_pixels_is_a_copy(self):
        fb = FrameBuffer(2, 2)
        fb.pixels[0, 0] = (255, 255, 255)
        assert fb.get_pixel(0, 0) == (0, 0, 0)

    def test_to_image(self):
        fb = FrameBuffer(4, 3)
        fb.set_pixel(1, 2, (255, 0, 0))
        image = fb.to_image()
        assert image.size == (4, 3)
        assert image.mode == 'RGB'
        assert image.getpixel((1, 2)) == (255, 0, 0)

    def test_save(self, tmp_path):
        from PIL import Image as PILImage

        fb = FrameBuffer(4, 3)
        fb.set_pixel(0, 0, (1, 2, 3))
        path = tmp_path / "frame.png"
        fb.save(str(path))

        with PILImage.open(path) as loaded:
            assert loaded.size == (4, 3)
            assert loaded.convert('RGB').getpixel((0, 0)) == (1, 2, 3)


class TestRenderLine:
    """Test render_line."""

    def test_writes_only_its_row(self):
        scene = make_scene(objects=[], background=ColorTuple(1, 1, 1))
        fb = FrameBuffer(5, 5)
        render_line(2, scene, fb, [(0.5, 0.5)])

        pixels = fb.pixels
        assert (pixels[2] == 255).all()
        assert not pixels[:2].any()
        assert not pixels[3:].any()

    def test_averages_samples(self):
        # Left half of the pixel sees a bright wall, right half the black background
        wall = Plane(Point3(0, 0, -2), Vec3(0, 0, 1), Material(ColorTuple(1, 1, 1), 1.0))

        class HalfWall(GeometryObject):
            material = wall.material

            def intersect(self, ray):
                return wall.intersect(ray) if ray.direction.x < 0 else []

        scene = make_scene(width=1, height=1, objects=[HalfWall()],
                           lights=[PointLight(Point3(0, 0, 10))],
                           background=ColorTuple(0, 0, 0))
        fb = FrameBuffer(1, 1)
        render_line(0, scene, fb, [(0.25, 0.5), (0.75, 0.5)])

        r, g, b = fb.get_pixel(0, 0)
        lit = trace_ray(scene, scene.camera.make_ray(0.25, 0.5))
        expected = ColorTuple.average([lit, ColorTuple(0, 0, 0)]).to_display()
        assert (r, g, b) == expected
        assert 0 < r < 255


class TestRenderer:
    """Test full-frame rendering."""

    def test_render_produces_frame(self):
        renderer = Renderer(RenderSettings(num_sections=1, num_threads=1))
        result = renderer.render(make_scene(width=6, height=4))

        assert isinstance(result, RenderResult)
        assert result.framebuffer.pixels.shape == (4, 6, 3)
        assert result.rows == 4
        assert result.samples_per_pixel == 1
        assert result.elapsed >= 0

    def test_message(self):
        result = Renderer(RenderSettings(num_sections=1, num_threads=1)).render(make_scene())
        assert re.fullmatch(r"rendering finished in \d+ ms\.", result.message)

    def test_uses_configured_sample_count(self):
        counter = CountingObject()
        scene = make_scene(width=3, height=2, objects=[counter])
        Renderer(RenderSettings(num_sections=2, num_threads=2)).render(scene)
        assert counter.calls == 3 * 2 * 4

    def test_all_background_when_looking_away(self):
        scene = make_scene(objects=[Sphere(Point3(0, 0, 5), 1.0)])
        result = Renderer(RenderSettings(num_threads=2, seed=1)).render(scene)
        expected = BACKGROUND.to_display()
        assert (result.framebuffer.pixels == np.array(expected, dtype=np.uint8)).all()

    def test_center_pixel_matches_hand_computed_shading(self):
        # Hit point (0, 0, -4), normal (0, 0, 1); light at (0, 3, 0)
        # L = (0, 0.6, 0.8): diffuse = 0.8 * 0.8 * color, ambient = 0.1 * 0.8 * color
        # r = (N - L) * 2(L·N) = (0, -0.96, 0.32), V = (0, 0, 1): specular = 0.5 * 0.32^32
        specular = 0.5 * 0.32 ** 32
        expected = ColorTuple(
            0.64 * 1.0 + 0.08 * 1.0 + specular,
            0.64 * 0.5 + 0.08 * 0.5 + specular,
            0.64 * 0.25 + 0.08 * 0.25 + specular,
        )
        settings = RenderSettings(num_sections=1, jitter=False, num_threads=1)
        offsets = settings.make_sampler().sample_offsets()
        assert offsets == [(0.5, 0.5)]

        scene = make_scene()
        center = trace_ray(scene, scene.camera.make_ray(2.5, 2.5))
        assert abs(center.r - expected.r) < 1e-9
        assert abs(center.g - expected.g) < 1e-9
        assert abs(center.b - expected.b) < 1e-9

        result = Renderer(settings).render(scene)
        assert result.framebuffer.get_pixel(2, 2) == expected.to_display() == (184, 92, 46)

        # Reproducible across renders
        again = Renderer(settings).render(scene)
        assert np.array_equal(result.framebuffer.pixels, again.framebuffer.pixels)

    def test_light_directly_above_sphere_leaves_only_ambient(self):
        # Light at (0, 5, -5) sits above the sphere center, behind the
        # tangent plane at the hit point (0, 0, -4): L·N < 0 so diffuse is
        # clamped, and r·v = 2Lz(1 - Lz) < 0 so the highlight is clamped too
        scene = make_scene(lights=[PointLight(Point3(0, 5, -5))])
        center = trace_ray(scene, scene.camera.make_ray(2.5, 2.5))
        assert abs(center.r - 0.08) < 1e-9
        assert abs(center.g - 0.04) < 1e-9
        assert abs(center.b - 0.02) < 1e-9

        settings = RenderSettings(num_sections=1, jitter=False, num_threads=2)
        result = Renderer(settings).render(scene)
        assert result.framebuffer.get_pixel(2, 2) == (20, 10, 5)

    def test_center_pixel_with_measurable_highlight(self):
        # Light at (0, sqrt(3), -3): L = (0, sqrt(3)/2, 0.5) from the hit point
        # diffuse = 0.8 * 0.5 * color, ambient = 0.08 * color
        # r = (N - L) * 2(L·N) = (0, -sqrt(3)/2, 0.5) * 1, V = (0, 0, 1): r·v = 0.5
        # specular = 0.5 * 0.5^1 = 0.25 on every channel
        scene = make_scene(lights=[PointLight(Point3(0, math.sqrt(3), -3))], hardness=1)
        center = trace_ray(scene, scene.camera.make_ray(2.5, 2.5))

        assert abs(center.r - (0.40 + 0.08 + 0.25)) < 1e-9
        assert abs(center.g - (0.20 + 0.04 + 0.25)) < 1e-9
        assert abs(center.b - (0.10 + 0.02 + 0.25)) < 1e-9

        settings = RenderSettings(num_sections=1, jitter=False, num_threads=4)
        result = Renderer(settings).render(scene)
        assert result.framebuffer.get_pixel(2, 2) == (186, 125, 94)

    def test_parallel_matches_sequential(self):
        scene = make_scene(width=12, height=9)
        offsets = StochasticSampler(num_sections=2).sample_offsets()

        sequential = Renderer(RenderSettings(num_threads=1)).render(scene, offsets)
        parallel = Renderer(RenderSettings(num_threads=4)).render(scene, offsets)

        assert np.array_equal(sequential.framebuffer.pixels, parallel.framebuffer.pixels)

    def test_empty_lights_fail_before_rendering(self):
        counter = CountingObject()
        scene = make_scene(objects=[counter], lights=[])
        with pytest.raises(SceneError):
            Renderer(RenderSettings(num_threads=2)).render(scene)
        assert counter.calls == 0

    @pytest.mark.parametrize("threads", [1, 4])
    def test_row_failure_aborts_render(self, threads):
        scene = make_scene(objects=[ExplodingObject()])
        with pytest.raises(RuntimeError, match="intersection failed"):
            Renderer(RenderSettings(num_threads=threads)).render(scene)

    def test_empty_offsets_rejected(self):
        with pytest.raises(ValueError):
            Renderer(RenderSettings(num_threads=1)).render(make_scene(), [])

    def test_progress_callback(self):
        progress = []
        lock = threading.Lock()

        def record(value):
            with lock:
                progress.append(value)

        renderer = Renderer(RenderSettings(num_sections=1, num_threads=3))
        renderer.set_progress_callback(record)
        renderer.render(make_scene(width=4, height=6))

        assert len(progress) == 6
        assert max(progress) == 1.0
        assert sorted(progress) == [i / 6 for i in range(1, 7)]
