"""Tests for light sources."""

import pytest

from stochray.vec3 import Point3
from stochray.color import ColorTuple
from stochray.lights import PointLight, AmbientLight


class TestPointLight:
    """Test PointLight class."""

    def test_fields(self):
        light = PointLight(Point3(0, 10, 0), ColorTuple(1, 0.5, 0.25))
        assert light.position == Point3(0, 10, 0)
        assert light.color == ColorTuple(1, 0.5, 0.25)

    def test_default_color_is_white(self):
        assert PointLight(Point3(0, 0, 0)).color == ColorTuple(1, 1, 1)


class TestAmbientLight:
    """Test AmbientLight class."""

    def test_defaults(self):
        ambient = AmbientLight()
        assert ambient.color == ColorTuple(1, 1, 1)
        assert ambient.coeff == 0.1
