import numpy as np
import pytest

from sphere_tracer.config import RenderConfig
from sphere_tracer.postprocess import ImageCanvas
from sphere_tracer.renderer import RenderContext
from sphere_tracer.scene import Light, LightType, Scene, Sphere


class RecordingSink:
    """Приёмник, запоминающий все записи пикселей."""

    def __init__(self):
        self.writes = []
        self.presented = 0

    def put_pixel(self, x, y, color):
        self.writes.append((x, y, tuple(np.asarray(color, dtype=np.float64))))

    def present(self):
        self.presented += 1


def make_context(scene, sink=None, background=None, **overrides):
    """RenderContext с маленьким холстом и камерой в начале координат."""
    settings = {
        'width': 8,
        'height': 8,
        'camera_position': [0, 0, -5],
        'recursion_depth': 3,
        'max_bounding_diameter': 10.0,
    }
    settings.update(overrides)
    config = RenderConfig.from_dict(settings)
    if sink is None:
        sink = ImageCanvas(config.width, config.height)
    return RenderContext(scene, config, sink, background=background)


@pytest.fixture
def unit_sphere_scene():
    """Одна сфера радиуса 1 в начале координат и только фоновый свет."""
    scene = Scene()
    scene.add_sphere(Sphere([0, 0, 0], 1, [200, 100, 50]))
    scene.add_light(Light(LightType.AMBIENT, 1.0))
    scene.rebuild_bounding_volumes(10.0)
    return scene


@pytest.fixture
def row_scene():
    """Три близкие сферы в ряд и одна в стороне."""
    scene = Scene()
    scene.add_sphere(Sphere([-2, 0, 5], 1, [255, 0, 0], specular=500))
    scene.add_sphere(Sphere([0, 0, 5], 1, [0, 0, 255], specular=500))
    scene.add_sphere(Sphere([2, 0, 5], 1, [0, 255, 0], specular=10))
    scene.add_sphere(Sphere([0, 6, 10], 1, [255, 255, 0], specular=-1))
    scene.add_light(Light(LightType.AMBIENT, 0.2))
    scene.add_light(Light(LightType.POINT, 0.6, [2, 1, 0]))
    scene.add_light(Light(LightType.DIRECTIONAL, 0.2, [1, 4, 4]))
    scene.rebuild_bounding_volumes(10.0)
    return scene


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def make_ctx():
    return make_context
