import bpy
import pytest

import transform_inspector
from transform_inspector.session import InspectorSession, get_session


@pytest.fixture
def make_empty():
    """Create empties in bpy.data; removed after the test."""
    created = []

    def factory(name="Empty", location=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0),
                scale=(1.0, 1.0, 1.0), mode='XYZ'):
        obj = bpy.data.objects.new(name, None)
        obj.rotation_mode = mode
        obj.location = location
        obj.rotation_euler = rotation
        obj.scale = scale
        created.append(obj)
        return obj

    yield factory

    for obj in created:
        bpy.data.objects.remove(obj, do_unlink=True)


@pytest.fixture
def session():
    return InspectorSession()


@pytest.fixture
def registered():
    transform_inspector.register()
    yield get_session()
    transform_inspector.unregister()
